"""Unit tests for the Notion REST client."""

import json

import httpx
import pytest

from src.core import notion_client
from src.core.config import settings
from src.core.notion_client import DatabaseError, RecordNotFoundError


def _page(page_id: str) -> dict:
    return {"object": "page", "id": page_id, "archived": False, "properties": {}}


class RecordingHandler:
    """Mock transport handler that records requests and replays queued responses."""

    def __init__(self, *responses: httpx.Response):
        self.requests: list[httpx.Request] = []
        self._responses = list(responses)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._responses.pop(0)

    def body(self, index: int) -> dict:
        return json.loads(self.requests[index].content)


@pytest.mark.unit
class TestDatabaseResolution:
    """Tests for collection to database ID resolution."""

    def test_configured_collection(self):
        """Test a configured collection resolves to its database ID."""
        assert notion_client.get_database_id("pantry") == "db-pantry"
        assert notion_client.is_configured("pantry") is True

    def test_unconfigured_collection(self):
        """Test an optional collection without an ID raises a configuration error."""
        assert notion_client.is_configured("ingredients") is False
        with pytest.raises(ValueError, match="NOTION_INGREDIENTS_DB"):
            notion_client.get_database_id("ingredients")

    def test_unknown_collection(self):
        """Test unknown collection names are rejected."""
        assert notion_client.is_configured("meal_plans") is False
        with pytest.raises(ValueError, match="Unknown collection"):
            notion_client.get_database_id("meal_plans")


@pytest.mark.unit
class TestRequests:
    """Tests for the CRUD functions against a mock transport."""

    async def test_list_records_follows_pagination(self):
        """Test every page of results is collected using the returned cursor."""
        handler = RecordingHandler(
            httpx.Response(200, json={"results": [_page("a"), _page("b")], "has_more": True, "next_cursor": "c1"}),
            httpx.Response(200, json={"results": [_page("c")], "has_more": False, "next_cursor": None}),
        )

        records = await notion_client.list_records(
            collection="pantry",
            filter_query={"property": "Category", "select": {"equals": "Produce"}},
            sorts=[{"property": "Name", "direction": "ascending"}],
            transport=httpx.MockTransport(handler),
        )

        assert [record["id"] for record in records] == ["a", "b", "c"]
        assert handler.requests[0].url.path == "/v1/databases/db-pantry/query"
        assert handler.body(0)["filter"] == {"property": "Category", "select": {"equals": "Produce"}}
        assert handler.body(0)["page_size"] == 100
        assert "start_cursor" not in handler.body(0)
        assert handler.body(1)["start_cursor"] == "c1"

    async def test_headers(self):
        """Test the token and API version are sent."""
        handler = RecordingHandler(httpx.Response(200, json=_page("a")))

        await notion_client.get_record(collection="pantry", record_id="a", transport=httpx.MockTransport(handler))

        request = handler.requests[0]
        assert request.headers["Authorization"] == "Bearer secret_test_token"
        assert request.headers["Notion-Version"] == settings.notion_api_version

    async def test_create_record_sets_parent(self):
        """Test new pages are created under the collection's database."""
        handler = RecordingHandler(httpx.Response(200, json=_page("new")))
        properties = {"Name": {"title": [{"text": {"content": "Eggs"}}]}}

        record = await notion_client.create_record(
            collection="shopping_list", data=properties, transport=httpx.MockTransport(handler)
        )

        assert record["id"] == "new"
        assert handler.requests[0].method == "POST"
        assert handler.body(0) == {"parent": {"database_id": "db-shopping"}, "properties": properties}

    async def test_update_and_archive(self):
        """Test updates patch properties and archive sets the archived flag."""
        handler = RecordingHandler(httpx.Response(200, json=_page("p1")), httpx.Response(200, json=_page("p1")))
        transport = httpx.MockTransport(handler)

        await notion_client.update_record(
            collection="pantry", record_id="p1", data={"Quantity": {"number": 3}}, transport=transport
        )
        await notion_client.archive_record(collection="pantry", record_id="p1", transport=transport)

        assert [r.method for r in handler.requests] == ["PATCH", "PATCH"]
        assert handler.body(0) == {"properties": {"Quantity": {"number": 3}}}
        assert handler.body(1) == {"archived": True}

    async def test_empty_update_rejected(self):
        """Test an empty payload is rejected before any request."""
        with pytest.raises(ValueError, match="Empty update payload"):
            await notion_client.update_record(collection="pantry", record_id="p1", data={})

    async def test_not_found(self):
        """Test HTTP 404 raises RecordNotFoundError."""
        handler = RecordingHandler(
            httpx.Response(404, json={"object": "error", "code": "object_not_found", "message": "Could not find page"})
        )

        with pytest.raises(RecordNotFoundError, match="object_not_found"):
            await notion_client.get_record(collection="pantry", record_id="x", transport=httpx.MockTransport(handler))

    async def test_server_error(self):
        """Test other HTTP failures raise DatabaseError with Notion's code."""
        handler = RecordingHandler(
            httpx.Response(429, json={"object": "error", "code": "rate_limited", "message": "Slow down"})
        )

        with pytest.raises(DatabaseError, match="429 rate_limited: Slow down"):
            await notion_client.list_records(collection="pantry", transport=httpx.MockTransport(handler))

    async def test_transport_error(self):
        """Test network failures raise DatabaseError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(DatabaseError, match="ConnectError"):
            await notion_client.get_record(collection="pantry", record_id="x", transport=httpx.MockTransport(handler))

    async def test_missing_token(self, monkeypatch):
        """Test requests fail fast without a token."""
        monkeypatch.setattr(settings, "notion_token", None)

        with pytest.raises(ValueError, match="Notion credential not configured"):
            await notion_client.get_record(collection="pantry", record_id="x")


@pytest.mark.unit
class TestCheckConnectivity:
    """Tests for check_connectivity."""

    async def test_ok(self):
        """Test a successful bot user lookup."""
        handler = RecordingHandler(httpx.Response(200, json={"object": "user", "type": "bot"}))

        await notion_client.check_connectivity(transport=httpx.MockTransport(handler))

        assert handler.requests[0].url.path == "/v1/users/me"

    async def test_rejected_token(self):
        """Test an auth failure becomes ConnectionError."""
        handler = RecordingHandler(
            httpx.Response(401, json={"object": "error", "code": "unauthorized", "message": "API token is invalid."})
        )

        with pytest.raises(ConnectionError, match="unauthorized"):
            await notion_client.check_connectivity(transport=httpx.MockTransport(handler))
