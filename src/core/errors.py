"""Error classification utilities for tool and agent failures."""

from enum import Enum
from typing import Literal


class ErrorCategory(Enum):
    """Categories of failures surfaced to the user as text."""

    NOT_FOUND = "not_found"
    NOT_CONVERTIBLE = "not_convertible"
    CONFIGURATION_MISSING = "configuration_missing"
    VALIDATION_GAP = "validation_gap"
    RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"
    AUTHENTICATION_FAILED = "authentication_failed"
    NETWORK_ERROR = "network_error"
    SERVICE_QUOTA_EXCEEDED = "service_quota_exceeded"
    UPSTREAM_FAILURE = "upstream_failure"
    UNKNOWN = "unknown"


_PatternType = Literal["quota", "rate_limit", "auth", "network", "not_found", "config"]

_ERROR_PATTERNS: dict[_PatternType, dict[str, list[str] | set[str]]] = {
    "quota": {
        "phrases": [
            "quota exceeded",
            "insufficient credits",
            "credit limit",
            "credits exhausted",
            "out of credits",
        ],
        "exception_types": set(),
    },
    "rate_limit": {
        "phrases": [
            "rate limit",
            "rate_limited",
            "too many requests",
            "429",
        ],
        "exception_types": set(),
    },
    "auth": {
        "phrases": [
            "unauthorized",
            "invalid token",
            "api token is invalid",
            "restricted_resource",
            "401",
            "403",
        ],
        "exception_types": {"AuthenticationError", "PermissionError"},
    },
    "network": {
        "phrases": [
            "connection",
            "timeout",
            "timed out",
            "network",
            "502",
            "503",
            "504",
            "unreachable",
        ],
        "exception_types": {"ConnectionError", "TimeoutError", "ConnectError", "ReadTimeout"},
    },
    "not_found": {
        "phrases": ["not found", "object_not_found"],
        "exception_types": {"RecordNotFoundError"},
    },
    "config": {
        "phrases": ["not configured", "unknown collection"],
        "exception_types": set(),
    },
}


def _match_error_pattern(*, error_str: str, exception_type: str, pattern_type: _PatternType) -> bool:
    """Return True if the error matches the configured pattern type."""
    patterns = _ERROR_PATTERNS[pattern_type]
    return any(phrase in error_str for phrase in patterns["phrases"]) or exception_type in patterns["exception_types"]


def classify_store_error(exception: Exception) -> tuple[ErrorCategory, str]:
    """Classify a Notion store failure raised inside a tool.

    Args:
        exception: The exception caught at the tool boundary

    Returns:
        Tuple of (ErrorCategory, user_friendly_message)
    """
    error_str = str(exception).lower()
    exception_type = type(exception).__name__

    if _match_error_pattern(error_str=error_str, exception_type=exception_type, pattern_type="config"):
        return (ErrorCategory.CONFIGURATION_MISSING, str(exception))

    if _match_error_pattern(error_str=error_str, exception_type=exception_type, pattern_type="not_found"):
        return (
            ErrorCategory.NOT_FOUND,
            "The requested record could not be found in Notion.",
        )

    if _match_error_pattern(error_str=error_str, exception_type=exception_type, pattern_type="rate_limit"):
        return (
            ErrorCategory.RATE_LIMIT_EXCEEDED,
            "Notion is rate limiting requests. Please wait a moment and try again.",
        )

    if _match_error_pattern(error_str=error_str, exception_type=exception_type, pattern_type="auth"):
        return (
            ErrorCategory.AUTHENTICATION_FAILED,
            "Notion rejected the integration token. Check that the databases are shared with the integration.",
        )

    if _match_error_pattern(error_str=error_str, exception_type=exception_type, pattern_type="network"):
        return (
            ErrorCategory.NETWORK_ERROR,
            "Could not reach Notion. Please check your connection and try again.",
        )

    return (
        ErrorCategory.UPSTREAM_FAILURE,
        "The Notion request failed. Please try again later.",
    )


def classify_agent_error(exception: Exception) -> tuple[ErrorCategory, str]:
    """Classify an agent execution error and return a user-friendly message.

    Args:
        exception: The exception raised during agent execution

    Returns:
        Tuple of (ErrorCategory, user_friendly_message)
    """
    error_str = str(exception).lower()
    exception_type = type(exception).__name__

    if _match_error_pattern(error_str=error_str, exception_type=exception_type, pattern_type="quota"):
        return (
            ErrorCategory.SERVICE_QUOTA_EXCEEDED,
            "The AI service quota has been exceeded. Please try again later or contact support.",
        )

    if _match_error_pattern(error_str=error_str, exception_type=exception_type, pattern_type="rate_limit"):
        return (
            ErrorCategory.RATE_LIMIT_EXCEEDED,
            "Too many requests. Please wait a moment and try again.",
        )

    if _match_error_pattern(error_str=error_str, exception_type=exception_type, pattern_type="auth"):
        return (
            ErrorCategory.AUTHENTICATION_FAILED,
            "Service authentication failed. Please contact support.",
        )

    if _match_error_pattern(error_str=error_str, exception_type=exception_type, pattern_type="network"):
        return (
            ErrorCategory.NETWORK_ERROR,
            "Network error occurred. Please check your connection and try again.",
        )

    return (
        ErrorCategory.UNKNOWN,
        "An unexpected error occurred. Please try again later.",
    )


def format_tool_error(action: str, exception: Exception) -> str:
    """Build the text a tool returns when the store call behind it fails.

    Args:
        action: Short description of what the tool was doing (e.g. "update pantry")
        exception: The caught exception

    Returns:
        User-facing error text
    """
    _, message = classify_store_error(exception)
    return f"Error: Unable to {action}. {message}"
