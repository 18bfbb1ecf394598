"""JSON import/export of recipe books."""

import json
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from recipeconsolidator.errors import RecipeValidationError
from recipeconsolidator.logging_config import get_logger
from recipeconsolidator.normalize.units import identify_unit_type
from recipeconsolidator.parse.lines import parse_line, parse_recipe_text
from recipeconsolidator.schemas import ParsedIngredient, Recipe

logger = get_logger(__name__)

# Attribution fields some recipe files carry at the top level
SOURCE_FIELDS: tuple[str, ...] = ("source", "sourceUrl", "url", "author")


def load_payload(payload: str | bytes | list[Any]) -> list[Any]:
    """Decode an import payload and check it is a JSON array."""
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as e:
            raise RecipeValidationError(f"Invalid recipe file format: {e.msg}") from e

    if not isinstance(payload, list):
        raise RecipeValidationError("Invalid recipe file format: expected a JSON array")
    return payload


def is_importable(item: Any) -> bool:
    """A recipe needs a non-empty name and an ingredients array."""
    if not isinstance(item, Mapping):
        return False
    name = item.get("name")
    if not isinstance(name, str) or not name.strip():
        return False
    return isinstance(item.get("ingredients"), list)


def coerce_ingredient(item: Any) -> ParsedIngredient | None:
    """
    Turn one imported ingredient into a ParsedIngredient.

    Strings are parsed as ingredient lines. Dicts are validated as stored
    ingredients; a missing ``unitType`` is inferred from the unit.
    """
    if isinstance(item, str):
        return parse_line(item)
    if not isinstance(item, Mapping):
        return None

    data = dict(item)
    if "ingredient" not in data:
        for alias in ("ingredientName", "ingredient_name", "name"):
            if alias in data:
                data["ingredient"] = data[alias]
                break
    data.setdefault("quantity", 1)
    if "unitType" not in data and "unit_type" not in data:
        data["unitType"] = identify_unit_type(data.get("unit"))

    try:
        ingredient = ParsedIngredient.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Skipping malformed imported ingredient: {e.error_count()} errors")
        return None

    if not ingredient.ingredient_name.strip():
        return None
    return ingredient


def recipe_from_import(data: Mapping[str, Any], recipe_id: int) -> Recipe:
    """Build a Recipe from one valid import element under a fresh id."""
    ingredients = [
        ingredient
        for ingredient in (coerce_ingredient(item) for item in data["ingredients"])
        if ingredient is not None
    ]

    original_text = data.get("originalText")
    if not isinstance(original_text, str):
        original_text = ""
    if not ingredients and original_text.strip():
        ingredients = parse_recipe_text(original_text)

    source_metadata: dict[str, Any] = {}
    if isinstance(data.get("sourceMetadata"), Mapping):
        source_metadata.update(data["sourceMetadata"])
    for field_name in SOURCE_FIELDS:
        if data.get(field_name) is not None:
            source_metadata[field_name] = data[field_name]

    instructions = data.get("instructions")
    if not isinstance(instructions, (str, list)):
        instructions = None
    elif isinstance(instructions, list):
        instructions = [str(step) for step in instructions]

    about = data.get("about")
    return Recipe(
        id=recipe_id,
        name=data["name"].strip(),
        ingredients=ingredients,
        original_text=original_text,
        tags=data.get("tags") or [],
        about=about if isinstance(about, str) else None,
        instructions=instructions,
        source_metadata=source_metadata,
    )


def import_recipes(
    payload: str | bytes | list[Any],
    next_id: Callable[[], int],
) -> list[Recipe]:
    """
    Import recipes from a JSON array, ignoring unknown fields.

    Elements without a name or an ingredients array are dropped. Every
    imported recipe gets a fresh id from ``next_id``.

    Raises:
        RecipeValidationError: If the payload is not an array or holds no
            valid recipes.
    """
    items = load_payload(payload)
    valid = [item for item in items if is_importable(item)]
    if not valid:
        raise RecipeValidationError("No valid recipes found in file")

    dropped = len(items) - len(valid)
    if dropped:
        logger.info(f"Dropped {dropped} invalid recipe entries from import")

    return [recipe_from_import(item, next_id()) for item in valid]


def export_recipes(recipes: Iterable[Recipe]) -> list[dict[str, Any]]:
    """Serialize recipes to the import-compatible JSON structure."""
    return [recipe.to_export_dict() for recipe in recipes]


def dumps_recipes(recipes: Iterable[Recipe]) -> str:
    return json.dumps(export_recipes(recipes), indent=2, ensure_ascii=False)


def read_recipe_file(path: str | Path) -> str:
    """Read a recipe JSON file as text."""
    return Path(path).read_text(encoding="utf-8")
