"""Exceptions raised by the cookbook connector."""

from collections.abc import Sequence
from typing import Any


class CookbookError(Exception):
    """Base exception for cookbook connector errors."""

    def __init__(self, message: str, status_code: int | None = None, response: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class InvalidEntity(CookbookError):
    """Raised when a payload cannot be turned into a cookbook entity.

    Also raised when the service rejects an entity as malformed.
    """

    def __init__(
        self,
        message: str,
        fields: Sequence[str] = (),
        status_code: int | None = None,
        response: Any = None,
    ):
        super().__init__(message, status_code=status_code, response=response)
        self.fields = tuple(fields)


class UnknownEntityKind(InvalidEntity):
    """Raised when a type tag does not name a known entity kind."""

    def __init__(self, type_tag: str):
        super().__init__(f"Don't know how to handle type: {type_tag}")
        self.type_tag = type_tag


class EntityNotFound(CookbookError):
    """Raised when the referenced entity does not exist on the service."""


class SessionExpired(CookbookError):
    """Raised when the service reports an expired session."""


class InvalidToken(CookbookError):
    """Raised when the service rejects the access token."""


class RemoteFetchFailed(CookbookError):
    """Raised when fetching an entity returns an unusable response."""

    def __init__(self, status_code: int, body: str, message: str | None = None):
        super().__init__(
            message or f"Fetch failed with status {status_code}",
            status_code=status_code,
            response=body,
        )
        self.body = body
