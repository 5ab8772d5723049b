"""Base client interface for the cookbook service."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from cookbook.models import CookBookEntity, EntityKind, Recipe


@dataclass
class FetchResponse:
    """Raw response from a single-entity fetch."""

    status_code: int
    body: str

    @property
    def is_success(self) -> bool:
        """Check if response indicates success."""
        return 200 <= self.status_code < 300


class CookbookClient(ABC):
    """Abstract base class for cookbook service clients."""

    @abstractmethod
    async def create_entity(self, entity: CookBookEntity) -> CookBookEntity:
        """
        Create an entity on the service.

        Args:
            entity: Recipe or Ingredient to create.

        Returns:
            The created entity, carrying its server-assigned id.

        Raises:
            SessionExpired: The session must be re-established.
            InvalidEntity: The service rejected the entity.
        """

    @abstractmethod
    async def update_entity(self, entity: CookBookEntity) -> CookBookEntity:
        """
        Update an existing entity.

        Raises:
            SessionExpired: The session must be re-established.
            InvalidEntity: The service rejected the entity.
            EntityNotFound: No entity with that id exists.
        """

    @abstractmethod
    async def fetch_entity(self, kind: EntityKind, entity_id: int) -> FetchResponse:
        """Fetch a single entity, returning the raw response unchecked."""

    @abstractmethod
    async def delete_entity(self, kind: EntityKind, entity_id: int) -> None:
        """Delete an entity by id."""

    @abstractmethod
    async def list_recent(self) -> list[Recipe]:
        """Return the recently added recipes."""

    async def health_check(self) -> bool:
        """Check if the service is reachable."""
        return True

    async def close(self) -> None:
        """Release any held resources."""
