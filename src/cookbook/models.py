"""Pydantic models for cookbook service entities."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

GenericRecord = dict[str, Any]


class EntityKind(str, Enum):
    """Entity kinds exposed by the cookbook service.

    The value doubles as the resource path segment on the service.
    """

    RECIPE = "recipe"
    INGREDIENT = "ingredient"

    @property
    def qualifier(self) -> str:
        """Fully qualified type name callers use to tag this kind."""
        return _QUALIFIERS[self]

    @property
    def model(self) -> type["CookBookEntity"]:
        """Entity model for this kind."""
        return _MODELS[self]


class UnitType(str, Enum):
    """Measurement units for ingredient quantities."""

    UNIT = "UNIT"
    SPOONS = "SPOONS"
    GRAMS = "GRAMS"
    POUNDS = "POUNDS"
    OUNCES = "OUNCES"
    CUPS = "CUPS"
    PINCH = "PINCH"


class CookBookEntity(BaseModel):
    """Base class for all cookbook entities.

    Records use the service's camelCase keys; snake_case names are accepted
    on input. Unknown keys are rejected so nothing is silently dropped.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    id: int | None = None
    # Kept as sent: epoch millis or an ISO-8601 string.
    created: int | str | None = None
    last_modified: int | str | None = None

    def to_record(self) -> GenericRecord:
        """Convert to a generic record holding only the fields that were set."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class Ingredient(CookBookEntity):
    """Ingredient with a quantity and unit."""

    name: str
    quantity: int | float | None = None
    unit: UnitType | None = None


class Recipe(CookBookEntity):
    """Recipe made of ingredients and directions."""

    name: str
    ingredients: list[Ingredient] = Field(default_factory=list)
    prep_time: int | float | None = None  # minutes
    cook_time: int | float | None = None  # minutes
    directions: list[str] = Field(default_factory=list)


_QUALIFIERS: dict[EntityKind, str] = {
    EntityKind.RECIPE: "com.cookbook.tutorial.service.Recipe",
    EntityKind.INGREDIENT: "com.cookbook.tutorial.service.Ingredient",
}

_MODELS: dict[EntityKind, type[CookBookEntity]] = {
    EntityKind.RECIPE: Recipe,
    EntityKind.INGREDIENT: Ingredient,
}


def kind_of(entity: CookBookEntity) -> EntityKind:
    """Return the entity kind for a typed entity."""
    for kind, model in _MODELS.items():
        if isinstance(entity, model):
            return kind
    raise TypeError(f"Not a cookbook entity: {type(entity).__name__}")
