"""Common data schemas: parsed ingredients, recipes and user preferences."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class UnitType(str, Enum):
    """Measurement family of an ingredient quantity."""

    VOLUME = "volume"
    WEIGHT = "weight"
    COUNT = "count"


class UnitSystem(str, Enum):
    """Display convention for consolidated quantities."""

    IMPERIAL = "imperial"
    METRIC = "metric"


class RecipeSortOrder(str, Enum):
    """Ordering of the recipe list."""

    NAME_ASC = "name-asc"
    NAME_DESC = "name-desc"
    ADDED_DESC = "added-desc"
    ADDED_ASC = "added-asc"


class ShoppingListSortOrder(str, Enum):
    """Ordering of the consolidated shopping list."""

    ALPHABETICAL = "alphabetical"
    CATEGORY = "category"


class QuantityUnitPair(BaseModel):
    """One "<quantity> <unit>" segment of a combined measurement."""

    model_config = ConfigDict(frozen=True)

    quantity: float
    unit: str | None = None


class ParsedIngredient(BaseModel):
    """
    A single ingredient line turned into structured data.

    Field aliases follow the camelCase JSON used by recipe import/export
    and persistence, so stored data round-trips unchanged.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    quantity: float
    unit: str | None = None
    unit_type: UnitType = Field(default=UnitType.COUNT, alias="unitType")
    ingredient_name: str = Field(alias="ingredient")
    notes: str | None = None
    original_line: str = Field(default="", alias="originalLine")
    is_combined: bool = Field(default=False, alias="isCombined")
    original_pairs: list[QuantityUnitPair] = Field(default_factory=list, alias="originalPairs")

    def to_export_dict(self) -> dict[str, Any]:
        """Serialize with the fields every export must carry."""
        data: dict[str, Any] = {
            "quantity": self.quantity,
            "unit": self.unit,
            "unitType": self.unit_type.value,
            "ingredient": self.ingredient_name,
            "originalLine": self.original_line,
        }
        if self.notes:
            data["notes"] = self.notes
        if self.is_combined:
            data["isCombined"] = True
            data["originalPairs"] = [pair.model_dump() for pair in self.original_pairs]
        return data


class Recipe(BaseModel):
    """A named recipe and the ingredients parsed from its text."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: int
    name: str
    ingredients: list[ParsedIngredient]
    original_text: str = Field(default="", alias="originalText")
    tags: list[str] = Field(default_factory=list)
    about: str | None = None
    instructions: str | list[str] | None = None
    source_metadata: dict[str, Any] = Field(default_factory=dict, alias="sourceMetadata")

    @field_validator("tags", mode="before")
    @classmethod
    def unique_tags(cls, v: Any) -> list[str]:
        """Tags behave as a set; keep first-seen order."""
        if isinstance(v, str):
            v = [v]
        if not v or not isinstance(v, (list, tuple, set, frozenset)):
            return []
        seen: list[str] = []
        for tag in v:
            tag = str(tag).strip()
            if tag and tag not in seen:
                seen.append(tag)
        return seen

    def to_export_dict(self) -> dict[str, Any]:
        """Serialize for JSON export and persistence."""
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "ingredients": [ing.to_export_dict() for ing in self.ingredients],
            "originalText": self.original_text,
        }
        if self.tags:
            data["tags"] = list(self.tags)
        if self.about is not None:
            data["about"] = self.about
        if self.instructions is not None:
            data["instructions"] = self.instructions
        if self.source_metadata:
            data["sourceMetadata"] = dict(self.source_metadata)
        return data


class Preferences(BaseModel):
    """User display preferences."""

    unit_system: UnitSystem = UnitSystem.IMPERIAL
    recipe_sort: RecipeSortOrder = RecipeSortOrder.NAME_ASC
    shopping_list_sort: ShoppingListSortOrder = ShoppingListSortOrder.ALPHABETICAL
