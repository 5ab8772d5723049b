"""Cookbook connector: recipe and ingredient operations over a remote service."""

from cookbook.dispatcher import EntityDispatcher, resolve_kind, to_entity, to_record
from cookbook.errors import (
    CookbookError,
    EntityNotFound,
    InvalidEntity,
    InvalidToken,
    RemoteFetchFailed,
    SessionExpired,
    UnknownEntityKind,
)
from cookbook.models import EntityKind, Ingredient, Recipe, UnitType

__all__ = [
    "CookbookError",
    "EntityDispatcher",
    "EntityKind",
    "EntityNotFound",
    "Ingredient",
    "InvalidEntity",
    "InvalidToken",
    "Recipe",
    "RemoteFetchFailed",
    "SessionExpired",
    "UnitType",
    "UnknownEntityKind",
    "resolve_kind",
    "to_entity",
    "to_record",
]
