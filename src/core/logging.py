"""Logging and observability configuration using Pydantic Logfire.

This module provides standardized logging utilities and configuration.
All modules should use Python's standard logging library (logging.getLogger(__name__)),
and Logfire will automatically capture and enrich these logs.

Standard usage:
    import logging
    logger = logging.getLogger(__name__)
    logger.info("Message", extra={"key": "value"})
"""

import logging

import logfire
from fastapi import FastAPI

from src.core.config import settings


class _LogfireState:
    """Singleton state for logfire configuration."""

    configured = False


def configure_logfire() -> None:
    """Configure Pydantic Logfire with token from environment.

    Safe to call more than once; only the first call configures logfire.
    """
    if _LogfireState.configured:
        return

    logfire.configure(
        token=settings.logfire_token,
        service_name="pantry-assistant",
        service_version="0.1.0",
        send_to_logfire="if-token-present",
    )
    _LogfireState.configured = True

    logger = logging.getLogger(__name__)
    logger.info("Logfire configured successfully")


def instrument_fastapi(app: FastAPI) -> None:
    """Add Logfire instrumentation to FastAPI application."""
    logfire.instrument_fastapi(app)
    logger = logging.getLogger(__name__)
    logger.info("FastAPI instrumentation configured")


def instrument_pydantic_ai() -> None:
    """Trace agent runs and tool calls."""
    logfire.instrument_pydantic_ai()
    logger = logging.getLogger(__name__)
    logger.info("Pydantic AI instrumentation configured")


def instrument_httpx() -> None:
    """Trace outgoing Notion API calls."""
    logfire.instrument_httpx()
    logger = logging.getLogger(__name__)
    logger.info("httpx instrumentation configured")


def span(name: str, **attributes: object) -> logfire.LogfireSpan:
    """Create a custom span for service layer functions.

    Usage:
        with span("pantry_service.add_pantry_item", item="Eggs"):
            # Your service logic here
            pass
    """
    return logfire.span(name, **attributes)

