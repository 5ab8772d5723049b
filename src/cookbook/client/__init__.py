"""Clients for the remote cookbook service."""

from cookbook.client.base import CookbookClient, FetchResponse
from cookbook.client.http import CookbookHttpClient

__all__ = [
    "CookbookClient",
    "CookbookHttpClient",
    "FetchResponse",
]
