"""Type-tagged dispatch between generic records and cookbook entities."""

import json
from typing import Any

from pydantic import ValidationError

from cookbook.client.base import CookbookClient
from cookbook.errors import InvalidEntity, RemoteFetchFailed, UnknownEntityKind
from cookbook.logging_config import LoggingContext, get_logger
from cookbook.models import CookBookEntity, EntityKind, GenericRecord

logger = get_logger(__name__)

# Qualifiers are matched in this order; Recipe wins when a tag contains both.
_RESOLUTION_ORDER = (EntityKind.RECIPE, EntityKind.INGREDIENT)


def resolve_kind(type_tag: str) -> EntityKind:
    """
    Resolve the entity kind named by a caller-supplied type tag.

    A tag selects a kind when it contains that kind's fully qualified type
    name anywhere in it, so ``"xxcom.cookbook.tutorial.service.Recipeyy"``
    is a Recipe.

    Raises:
        UnknownEntityKind: The tag names neither kind.
    """
    for kind in _RESOLUTION_ORDER:
        if kind.qualifier in type_tag:
            return kind

    raise UnknownEntityKind(type_tag)


# Union members tag their errors with the member type; these are not fields.
_UNION_MEMBER_TAGS = frozenset({"int", "float", "str"})


def _field_path(loc: tuple[Any, ...]) -> str:
    parts = list(loc)
    while parts and parts[-1] in _UNION_MEMBER_TAGS:
        parts.pop()
    return ".".join(str(part) for part in parts) or "<root>"


def to_entity(kind: EntityKind, record: GenericRecord) -> CookBookEntity:
    """
    Convert a generic record into the entity model for ``kind``.

    Raises:
        InvalidEntity: A field is missing, unknown or has the wrong type.
            ``fields`` lists the offending field paths.
    """
    if not isinstance(record, dict):
        raise InvalidEntity(f"Expected a mapping for {kind.value}, got {type(record).__name__}")

    try:
        return kind.model.model_validate(record)
    except ValidationError as e:
        problems: dict[str, str] = {}
        for error in e.errors():
            problems.setdefault(_field_path(error["loc"]), error["msg"])
        fields = list(problems)
        details = "; ".join(f"{path}: {msg}" for path, msg in problems.items())
        raise InvalidEntity(f"Invalid {kind.value}: {details}", fields=fields) from e


def to_record(entity: CookBookEntity) -> GenericRecord:
    """Convert a typed entity back into a generic record."""
    return entity.to_record()


class EntityDispatcher:
    """Translate generic records to typed entities and back around a client.

    Holds no state besides the client, so one instance can serve concurrent
    callers. Errors raised by the client pass through unchanged.
    """

    def __init__(self, client: CookbookClient):
        self.client = client

    async def create(self, type_tag: str, payload: GenericRecord) -> GenericRecord:
        """Create the entity described by ``payload`` and return the stored record."""
        kind = resolve_kind(type_tag)
        with LoggingContext(operation="create", entity_kind=kind.value):
            entity = to_entity(kind, payload)
            created = await self.client.create_entity(entity)
            logger.info(
                f"Created {kind.value} {created.id}",
                extra={"extra_data": {"entity_id": created.id}},
            )
            return to_record(created)

    async def update(self, type_tag: str, payload: GenericRecord) -> GenericRecord:
        """Update the entity described by ``payload`` and return the stored record."""
        kind = resolve_kind(type_tag)
        with LoggingContext(operation="update", entity_kind=kind.value):
            entity = to_entity(kind, payload)
            updated = await self.client.update_entity(entity)
            logger.info(
                f"Updated {kind.value} {updated.id}",
                extra={"extra_data": {"entity_id": updated.id}},
            )
            return to_record(updated)

    async def fetch_by_id(self, kind: EntityKind, entity_id: int) -> GenericRecord:
        """
        Fetch one entity as a generic record.

        Raises:
            RemoteFetchFailed: The service answered with a non-success status
                or a body that is not a JSON object.
        """
        with LoggingContext(operation="fetch", entity_kind=kind.value):
            response = await self.client.fetch_entity(kind, entity_id)
            if not response.is_success:
                logger.warning(
                    f"Fetch of {kind.value} {entity_id} returned {response.status_code}"
                )
                raise RemoteFetchFailed(response.status_code, response.body)

            try:
                data = json.loads(response.body)
            except ValueError as e:
                raise RemoteFetchFailed(
                    response.status_code,
                    response.body,
                    message=f"Response for {kind.value} {entity_id} is not valid JSON",
                ) from e

            if not isinstance(data, dict):
                raise RemoteFetchFailed(
                    response.status_code,
                    response.body,
                    message=f"Response for {kind.value} {entity_id} is not a JSON object",
                )
            return data

    async def get(self, type_tag: str, entity_id: int) -> GenericRecord:
        """Fetch one entity by type tag and id."""
        return await self.fetch_by_id(resolve_kind(type_tag), entity_id)

    async def delete(self, type_tag: str, entity_id: int) -> None:
        """Delete one entity by type tag and id."""
        kind = resolve_kind(type_tag)
        with LoggingContext(operation="delete", entity_kind=kind.value):
            await self.client.delete_entity(kind, entity_id)
            logger.info(
                f"Deleted {kind.value} {entity_id}",
                extra={"extra_data": {"entity_id": entity_id}},
            )

    async def get_recently_added(self) -> list[GenericRecord]:
        """Return the recently added recipes as generic records."""
        recipes = await self.client.list_recent()
        return [to_record(recipe) for recipe in recipes]
