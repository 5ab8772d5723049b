"""Tests for the cookbook HTTP client."""

import json
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from cookbook.client.http import CookbookHttpClient
from cookbook.errors import (
    CookbookError,
    EntityNotFound,
    InvalidEntity,
    InvalidToken,
    SessionExpired,
)
from cookbook.models import EntityKind, Ingredient, Recipe

BASE_URL = "https://cookbook.example.com/api"


def make_client(handler, **kwargs) -> CookbookHttpClient:
    """Build a client whose requests are answered by ``handler``."""
    return CookbookHttpClient(
        base_url=BASE_URL,
        access_token="secret-token",
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


class TestRequests:
    """Tests for how requests are built."""

    @pytest.mark.asyncio
    async def test_create_posts_record(self):
        """Create posts the record to the kind's collection."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            body = json.loads(request.content)
            return httpx.Response(201, json={"id": 42, **body})

        async with make_client(handler) as client:
            created = await client.create_entity(Ingredient(name="Salt", quantity=1))

        assert created == Ingredient(id=42, name="Salt", quantity=1)
        request = seen[0]
        assert request.method == "POST"
        assert request.url.path == "/api/ingredient"
        assert request.url.params["access_token"] == "secret-token"
        assert request.headers["Accept"] == "application/json"
        sent = json.loads(request.content)
        assert sent == {"name": "Salt", "quantity": 1}
        assert type(sent["quantity"]) is int

    @pytest.mark.asyncio
    async def test_update_puts_to_entity_path(self):
        """Update puts the record to the entity's own path."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=json.loads(request.content))

        async with make_client(handler) as client:
            updated = await client.update_entity(Recipe(id=9, name="Stew", prep_time=15))

        assert updated == Recipe(id=9, name="Stew", prep_time=15)
        assert seen[0].method == "PUT"
        assert seen[0].url.path == "/api/recipe/9"
        assert json.loads(seen[0].content) == {"id": 9, "name": "Stew", "prepTime": 15}

    @pytest.mark.asyncio
    async def test_update_without_id(self):
        """Updating an entity with no id is rejected locally."""
        handler = AsyncMock()

        async with make_client(handler) as client:
            with pytest.raises(InvalidEntity) as exc_info:
                await client.update_entity(Ingredient(name="Salt"))

        assert exc_info.value.fields == ("id",)
        handler.assert_not_called()

    @pytest.mark.asyncio
    async def test_fetch_uses_kind_and_id(self):
        """Fetch targets the requested kind and id and returns the raw body."""

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "GET"
            assert request.url.path == "/api/recipe/17"
            assert request.url.params["access_token"] == "secret-token"
            return httpx.Response(200, text='{"id": 17, "name": "Curry"}')

        async with make_client(handler) as client:
            response = await client.fetch_entity(EntityKind.RECIPE, 17)

        assert response.is_success
        assert response.body == '{"id": 17, "name": "Curry"}'

    @pytest.mark.asyncio
    async def test_fetch_does_not_raise_on_error_status(self):
        """Error statuses are returned for the caller to judge."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, text="not here")

        async with make_client(handler) as client:
            response = await client.fetch_entity(EntityKind.INGREDIENT, 3)

        assert response.status_code == 404
        assert not response.is_success
        assert response.body == "not here"

    @pytest.mark.asyncio
    async def test_delete(self):
        """Delete issues a DELETE on the entity path."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(204)

        async with make_client(handler) as client:
            await client.delete_entity(EntityKind.INGREDIENT, 4)

        assert seen[0].method == "DELETE"
        assert seen[0].url.path == "/api/ingredient/4"

    @pytest.mark.asyncio
    async def test_list_recent(self, recent_recipes_payload):
        """Recent recipes are parsed into Recipe entities."""

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/recipe/recent"
            return httpx.Response(200, json=recent_recipes_payload)

        async with make_client(handler) as client:
            recipes = await client.list_recent()

        assert [r.name for r in recipes] == ["Pancakes", "Omelette"]
        assert recipes[0].prep_time == 5
        assert [r.to_record() for r in recipes] == recent_recipes_payload

    @pytest.mark.asyncio
    async def test_list_recent_not_a_list(self):
        """A non-list body for the recent feed is an error."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"recipes": []})

        async with make_client(handler) as client:
            with pytest.raises(CookbookError):
                await client.list_recent()


class TestStatusMapping:
    """Tests for translating error statuses into exceptions."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status_code, error_cls",
        [
            (400, InvalidEntity),
            (422, InvalidEntity),
            (401, SessionExpired),
            (403, InvalidToken),
            (404, EntityNotFound),
            (500, CookbookError),
        ],
    )
    async def test_update_error_status(self, status_code, error_cls):
        """Each error status raises its matching exception."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status_code, text="upstream says no")

        async with make_client(handler) as client:
            with pytest.raises(error_cls) as exc_info:
                await client.update_entity(Ingredient(id=1, name="Salt"))

        assert exc_info.value.status_code == status_code
        assert exc_info.value.response == "upstream says no"

    @pytest.mark.asyncio
    async def test_malformed_response_entity(self):
        """A response that is not a valid entity raises CookbookError."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(201, json={"id": "not-a-number"})

        async with make_client(handler) as client:
            with pytest.raises(CookbookError):
                await client.create_entity(Ingredient(name="Salt"))


class TestRetries:
    """Tests for transport retry behavior."""

    @pytest.mark.asyncio
    async def test_retries_then_succeeds(self):
        """Transient network errors are retried."""
        attempts = []

        def handler(request: httpx.Request) -> httpx.Response:
            attempts.append(request)
            if len(attempts) < 2:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(200, json=[])

        client = make_client(handler, max_retries=3)
        client.BACKOFF_BASE = 0
        recipes = await client.list_recent()
        await client.close()

        assert recipes == []
        assert len(attempts) == 2

    @pytest.mark.asyncio
    async def test_gives_up_after_max_retries(self):
        """Persistent network errors become a CookbookError."""
        attempts = []

        def handler(request: httpx.Request) -> httpx.Response:
            attempts.append(request)
            raise httpx.ReadTimeout("timed out", request=request)

        client = make_client(handler, max_retries=2)
        client.BACKOFF_BASE = 0
        with pytest.raises(CookbookError) as exc_info:
            await client.list_recent()
        await client.close()

        assert len(attempts) == 2
        assert "timed out" in exc_info.value.response

    @pytest.mark.asyncio
    async def test_server_disconnect_becomes_cookbook_error(self):
        """Protocol-level transport failures are retried and wrapped too."""
        attempts = []

        def handler(request: httpx.Request) -> httpx.Response:
            attempts.append(request)
            raise httpx.RemoteProtocolError("Server disconnected", request=request)

        client = make_client(handler, max_retries=3)
        client.BACKOFF_BASE = 0
        with pytest.raises(CookbookError) as exc_info:
            await client.list_recent()
        await client.close()

        assert len(attempts) == 3
        assert "Server disconnected" in exc_info.value.response


class TestHealthCheck:
    """Tests for the health check."""

    @pytest.mark.asyncio
    async def test_health_check_success(self):
        """A reachable service is healthy."""
        client = make_client(lambda request: httpx.Response(200, json=[]))

        assert await client.health_check() is True
        await client.close()

    @pytest.mark.asyncio
    async def test_health_check_failure(self):
        """A failing request makes the check report unhealthy."""
        client = make_client(lambda request: httpx.Response(500))

        with patch.object(client, "_request", new_callable=AsyncMock) as mock_request:
            mock_request.side_effect = CookbookError("Connection failed")

            assert await client.health_check() is False

    @pytest.mark.asyncio
    async def test_context_manager(self):
        """The client closes itself on context exit."""
        client = make_client(lambda request: httpx.Response(200, json=[]))

        with patch.object(client, "close", new_callable=AsyncMock) as mock_close:
            async with client as conn:
                assert conn is client
            mock_close.assert_awaited_once()
