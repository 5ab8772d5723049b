"""HTTP client for the cookbook REST service."""

from typing import Any

import httpx
from pydantic import ValidationError
from tenacity import (
    RetryError,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from cookbook.client.base import CookbookClient, FetchResponse
from cookbook.config import get_settings
from cookbook.errors import (
    CookbookError,
    EntityNotFound,
    InvalidEntity,
    InvalidToken,
    SessionExpired,
)
from cookbook.logging_config import get_logger
from cookbook.models import CookBookEntity, EntityKind, Recipe, kind_of

logger = get_logger(__name__)

_STATUS_ERRORS: dict[int, type[CookbookError]] = {
    400: InvalidEntity,
    401: SessionExpired,
    403: InvalidToken,
    404: EntityNotFound,
    422: InvalidEntity,
}


class CookbookHttpClient(CookbookClient):
    """Client for the cookbook service over HTTP.

    The access token travels as the ``access_token`` query parameter on every
    request.
    """

    DEFAULT_TIMEOUT = 30.0
    MAX_RETRIES = 3
    BACKOFF_BASE = 1
    BACKOFF_MAX = 30

    def __init__(
        self,
        base_url: str | None = None,
        access_token: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.cookbook_base_url).rstrip("/")
        self.access_token = (
            access_token if access_token is not None else settings.cookbook_access_token
        )
        self.timeout = timeout or settings.cookbook_timeout or self.DEFAULT_TIMEOUT
        self.max_retries = max_retries or settings.cookbook_max_retries or self.MAX_RETRIES
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                headers={
                    "Accept": "application/json",
                    "User-Agent": "CookbookConnector/1.0",
                },
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Make an HTTP request with retry logic on transport failures."""
        url = f"{self.base_url}/{path}"
        params = {"access_token": self.access_token}
        client = await self._get_client()

        @retry(
            retry=retry_if_exception_type(httpx.TransportError),
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=self.BACKOFF_BASE, max=self.BACKOFF_MAX),
            reraise=False,
        )
        async def _do_request() -> httpx.Response:
            return await client.request(method, url, params=params, json=json)

        try:
            return await _do_request()
        except RetryError as e:
            logger.error(f"{method} {url} failed after {self.max_retries} attempts")
            raise CookbookError(
                f"Request failed after {self.max_retries} attempts",
                response=str(e.last_attempt.exception()),
            ) from e

    def _raise_for_status(self, response: httpx.Response) -> None:
        """Translate an error status into the matching cookbook exception."""
        if response.status_code < 400:
            return

        error_detail = response.text[:500] if response.text else "No details"
        logger.error(
            f"Cookbook API error {response.status_code} for "
            f"{response.request.method} {response.request.url.path}: {error_detail}"
        )
        error_cls = _STATUS_ERRORS.get(response.status_code, CookbookError)
        raise error_cls(
            f"Cookbook request failed with status {response.status_code}",
            status_code=response.status_code,
            response=error_detail,
        )

    @staticmethod
    def _parse_entity(model: type[CookBookEntity], data: Any) -> CookBookEntity:
        """Build an entity from a service response body."""
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise CookbookError(
                f"Service returned a malformed {model.__name__}",
                response=str(e),
            ) from e

    async def create_entity(self, entity: CookBookEntity) -> CookBookEntity:
        kind = kind_of(entity)
        logger.info(f"Creating {kind.value}")
        response = await self._request("POST", kind.value, json=entity.to_record())
        self._raise_for_status(response)
        return self._parse_entity(kind.model, response.json())

    async def update_entity(self, entity: CookBookEntity) -> CookBookEntity:
        kind = kind_of(entity)
        if entity.id is None:
            raise InvalidEntity(f"Cannot update a {kind.value} without an id", fields=("id",))

        logger.info(f"Updating {kind.value} {entity.id}")
        response = await self._request("PUT", f"{kind.value}/{entity.id}", json=entity.to_record())
        self._raise_for_status(response)
        return self._parse_entity(kind.model, response.json())

    async def fetch_entity(self, kind: EntityKind, entity_id: int) -> FetchResponse:
        logger.debug(f"Fetching {kind.value} {entity_id}")
        response = await self._request("GET", f"{kind.value}/{entity_id}")
        return FetchResponse(status_code=response.status_code, body=response.text)

    async def delete_entity(self, kind: EntityKind, entity_id: int) -> None:
        logger.info(f"Deleting {kind.value} {entity_id}")
        response = await self._request("DELETE", f"{kind.value}/{entity_id}")
        self._raise_for_status(response)

    async def list_recent(self) -> list[Recipe]:
        logger.debug("Fetching recently added recipes")
        response = await self._request("GET", f"{EntityKind.RECIPE.value}/recent")
        self._raise_for_status(response)

        data = response.json() if response.text else []
        if not isinstance(data, list):
            raise CookbookError(
                "Expected a list of recipes", status_code=response.status_code, response=data
            )
        recipes = [self._parse_entity(Recipe, item) for item in data]
        logger.debug(f"Fetched {len(recipes)} recent recipes")
        return recipes

    async def health_check(self) -> bool:
        """
        Check if the cookbook service is reachable.

        Returns:
            True if healthy, False otherwise.
        """
        try:
            response = await self._request("GET", f"{EntityKind.RECIPE.value}/recent")
            return response.status_code < 400
        except CookbookError as e:
            logger.warning(f"Health check failed: {e}")
            return False

    async def __aenter__(self) -> "CookbookHttpClient":
        """Async context manager entry."""
        await self._get_client()
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        await self.close()
