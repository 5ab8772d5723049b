"""API routers for the cookbook connector."""

from cookbook.routers.entities import router as entities_router

__all__ = [
    "entities_router",
]
