"""Notion REST API client wrapper with CRUD operations over databases and pages."""

import logging
from typing import Any

import httpx

from src.core.config import constants, settings


logger = logging.getLogger(__name__)


# Logical collection name -> settings field holding the Notion database ID
COLLECTIONS: dict[str, str] = {
    "pantry": "notion_pantry_db",
    "recipes": "notion_recipes_db",
    "shopping_list": "notion_shopping_list_db",
    "ingredients": "notion_ingredients_db",
    "recipe_ingredients": "notion_recipe_ingredients_db",
}


class DatabaseError(RuntimeError):
    """Raised when a Notion request fails."""


class RecordNotFoundError(KeyError):
    """Raised when a page does not exist (or is not shared with the integration)."""


def get_database_id(collection: str) -> str:
    """Resolve a logical collection name to its configured Notion database ID.

    Raises:
        ValueError: If the collection is unknown or its database ID is not configured
    """
    field_name = COLLECTIONS.get(collection)
    if field_name is None:
        msg = f"Unknown collection: {collection}"
        raise ValueError(msg)

    database_id = getattr(settings, field_name)
    if not database_id:
        msg = f"Notion database for '{collection}' is not configured. Set {field_name.upper()}."
        raise ValueError(msg)
    return database_id


def is_configured(collection: str) -> bool:
    """Return True if the collection has a database ID configured."""
    field_name = COLLECTIONS.get(collection)
    return bool(field_name and getattr(settings, field_name))


def _headers() -> dict[str, str]:
    token = settings.require_credential("notion_token", "Notion")
    return {
        "Authorization": f"Bearer {token}",
        "Notion-Version": settings.notion_api_version,
        "Content-Type": "application/json",
    }


def _error_message(response: httpx.Response) -> str:
    """Extract Notion's error code and message from a failed response."""
    try:
        body = response.json()
    except ValueError:
        return f"{response.status_code} {response.text}"
    return f"{response.status_code} {body.get('code', '')}: {body.get('message', '')}".strip()


async def _request(
    method: str,
    path: str,
    *,
    json: dict[str, Any] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, Any]:
    """Send one request to the Notion API and return the decoded JSON body.

    Raises:
        RecordNotFoundError: On HTTP 404
        DatabaseError: On any other HTTP or transport failure
    """
    url = f"{settings.notion_api_url}{path}"
    try:
        async with httpx.AsyncClient(timeout=constants.API_TIMEOUT_SECONDS, transport=transport) as client:
            response = await client.request(method, url, json=json, headers=_headers())
    except httpx.HTTPError as e:
        logger.error("notion_request_failed", extra={"method": method, "path": path, "error": str(e)})
        msg = f"Notion request failed ({type(e).__name__}): {e}"
        raise DatabaseError(msg) from e

    if response.status_code == constants.HTTP_NOT_FOUND:
        msg = f"Record not found: {path} ({_error_message(response)})"
        raise RecordNotFoundError(msg)

    if not response.is_success:
        detail = _error_message(response)
        logger.error("notion_request_failed", extra={"method": method, "path": path, "error": detail})
        msg = f"Notion request failed: {detail}"
        raise DatabaseError(msg)

    return response.json()


async def list_records(
    *,
    collection: str,
    filter_query: dict[str, Any] | None = None,
    sorts: list[dict[str, str]] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[dict[str, Any]]:
    """Query a database, following pagination, and return every non-archived page."""
    database_id = get_database_id(collection)

    payload: dict[str, Any] = {"page_size": constants.NOTION_PAGE_SIZE}
    if filter_query:
        payload["filter"] = filter_query
    if sorts:
        payload["sorts"] = sorts

    records: list[dict[str, Any]] = []
    while True:
        body = await _request("POST", f"/databases/{database_id}/query", json=payload, transport=transport)
        records.extend(body.get("results", []))
        if not body.get("has_more"):
            break
        payload["start_cursor"] = body["next_cursor"]

    logger.info("Listed records", extra={"collection": collection, "count": len(records)})
    return records


async def get_record(
    *,
    collection: str,
    record_id: str,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, Any]:
    """Fetch a single page by ID, raising RecordNotFoundError if it does not exist."""
    record = await _request("GET", f"/pages/{record_id}", transport=transport)
    logger.info("Retrieved record", extra={"collection": collection, "record_id": record_id})
    return record


async def create_record(
    *,
    collection: str,
    data: dict[str, Any],
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, Any]:
    """Create a page in the collection's database from a Notion properties payload."""
    database_id = get_database_id(collection)
    payload = {"parent": {"database_id": database_id}, "properties": data}
    record = await _request("POST", "/pages", json=payload, transport=transport)
    logger.info("Created record", extra={"collection": collection, "record_id": record.get("id")})
    return record


async def update_record(
    *,
    collection: str,
    record_id: str,
    data: dict[str, Any],
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, Any]:
    """Update a subset of a page's properties and return the updated page."""
    if not data:
        msg = "Empty update payload"
        raise ValueError(msg)

    record = await _request("PATCH", f"/pages/{record_id}", json={"properties": data}, transport=transport)
    logger.info("Updated record", extra={"collection": collection, "record_id": record_id})
    return record


async def archive_record(
    *,
    collection: str,
    record_id: str,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, Any]:
    """Archive a page. Notion has no hard delete for integrations; archived pages drop out of queries."""
    record = await _request("PATCH", f"/pages/{record_id}", json={"archived": True}, transport=transport)
    logger.info("Archived record", extra={"collection": collection, "record_id": record_id})
    return record


async def check_connectivity(*, transport: httpx.AsyncBaseTransport | None = None) -> None:
    """Verify the token works by fetching the integration's bot user.

    Raises:
        ConnectionError: If Notion is unreachable or rejects the token
    """
    try:
        await _request("GET", "/users/me", transport=transport)
    except (DatabaseError, RecordNotFoundError, ValueError) as e:
        raise ConnectionError(f"Notion connectivity check failed: {e}") from e
