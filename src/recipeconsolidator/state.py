"""Application state and the named transitions that mutate it."""

import copy
import math
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from recipeconsolidator.config import settings
from recipeconsolidator.errors import RecipeNotFoundError, RecipeValidationError
from recipeconsolidator.logging_config import LoggingContext, get_logger
from recipeconsolidator.parse.lines import parse_recipe_text
from recipeconsolidator.plan.consolidation import ConsolidatedEntry, consolidate
from recipeconsolidator.plan.shopping_list import ShoppingList, build_shopping_list
from recipeconsolidator.schemas import (
    ParsedIngredient,
    Preferences,
    Recipe,
    RecipeSortOrder,
    ShoppingListSortOrder,
    UnitSystem,
)
from recipeconsolidator.storage import KeyValueStore, MemoryStore, StateRepository
from recipeconsolidator.transfer import export_recipes, import_recipes, read_recipe_file

logger = get_logger(__name__)


@dataclass
class AppState:
    """Everything the consolidation depends on, plus display preferences."""

    recipes: list[Recipe] = field(default_factory=list)
    active_ids: set[int] = field(default_factory=set)
    multipliers: dict[int, float] = field(default_factory=dict)
    unit_system: UnitSystem = UnitSystem.IMPERIAL
    recipe_sort: RecipeSortOrder = RecipeSortOrder.NAME_ASC
    shopping_list_sort: ShoppingListSortOrder = ShoppingListSortOrder.ALPHABETICAL

    @property
    def preferences(self) -> Preferences:
        return Preferences(
            unit_system=self.unit_system,
            recipe_sort=self.recipe_sort,
            shopping_list_sort=self.shopping_list_sort,
        )

    def find(self, recipe_id: int) -> Recipe:
        for recipe in self.recipes:
            if recipe.id == recipe_id:
                return recipe
        raise RecipeNotFoundError(recipe_id)


def load_state(repository: StateRepository) -> AppState:
    """
    Initialize state from storage, repairing whatever is missing.

    - No stored active set: every recipe is active
    - Active ids of unknown recipes are dropped
    - Active recipes without a positive multiplier get 1
    """
    recipes = repository.load_recipes()
    known_ids = {recipe.id for recipe in recipes}

    active_ids = repository.load_active_ids()
    if active_ids is None:
        active_ids = set(known_ids)
    else:
        active_ids &= known_ids

    multipliers = {
        recipe_id: value
        for recipe_id, value in repository.load_multipliers().items()
        if recipe_id in known_ids
    }
    for recipe_id in active_ids:
        value = multipliers.get(recipe_id)
        if value is None or not math.isfinite(value) or value <= 0:
            multipliers[recipe_id] = 1

    return AppState(
        recipes=recipes,
        active_ids=active_ids,
        multipliers=multipliers,
        unit_system=repository.load_unit_system(),
        recipe_sort=repository.load_recipe_sort(),
        shopping_list_sort=repository.load_shopping_list_sort(),
    )


def parse_multiplier(value: Any) -> float:
    """Validate a multiplier: any finite, non-negative number."""
    if isinstance(value, bool):
        raise RecipeValidationError("Multiplier must be a non-negative number")
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise RecipeValidationError("Multiplier must be a non-negative number") from e
    if not math.isfinite(number) or number < 0:
        raise RecipeValidationError("Multiplier must be a non-negative number")
    return number


class RecipeBook:
    """
    Owns the application state and exposes its named transitions.

    Each successful mutation saves the affected keys and then re-runs the
    consolidation from scratch, so ``consolidated()`` always reflects the
    current recipes, active set, multipliers and unit system.
    """

    def __init__(self, repository: StateRepository | None = None):
        self.repository = repository or StateRepository(MemoryStore())
        self.state = load_state(self.repository)
        self._last_id = max((recipe.id for recipe in self.state.recipes), default=0)
        self._consolidated: dict[str, ConsolidatedEntry] = {}
        self._recompute()
        logger.info(
            f"Loaded recipe book: {len(self.state.recipes)} recipes, "
            f"{len(self.state.active_ids)} active"
        )

    @classmethod
    def from_store(cls, store: KeyValueStore, key_prefix: str | None = None) -> "RecipeBook":
        return cls(StateRepository(store, key_prefix=key_prefix))

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def next_id(self) -> int:
        """Allocate a new id: millisecond clock, but always above every id so far."""
        self._last_id = max(time.time_ns() // 1_000_000, self._last_id + 1)
        return self._last_id

    def _recompute(self) -> None:
        self._consolidated = consolidate(
            self.state.recipes,
            self.state.active_ids,
            self.state.multipliers,
            self.state.unit_system,
        )

    def _save_activation(self) -> None:
        self.repository.save_active_ids(self.state.active_ids)
        self.repository.save_multipliers(self.state.multipliers)

    @staticmethod
    def _parse_text(text: str) -> tuple[str, list[ParsedIngredient]]:
        text = (text or "").strip()
        if not text:
            raise RecipeValidationError("Please enter recipe text")
        ingredients = parse_recipe_text(text)
        if not ingredients:
            raise RecipeValidationError(
                "No ingredients found in the recipe. Please check the format."
            )
        return text, ingredients

    # -------------------------------------------------------------------------
    # Recipe transitions
    # -------------------------------------------------------------------------

    def add_recipe(self, text: str, name: str | None = None) -> Recipe:
        """Parse and store a new recipe; it starts active with multiplier 1."""
        text, ingredients = self._parse_text(text)
        recipe = Recipe(
            id=self.next_id(),
            name=(name or "").strip() or f"Recipe {len(self.state.recipes) + 1}",
            ingredients=ingredients,
            original_text=text,
        )

        self.state.recipes.append(recipe)
        self.state.active_ids.add(recipe.id)
        self.state.multipliers[recipe.id] = 1
        self.repository.save_recipes(self.state.recipes)
        self._save_activation()
        self._recompute()

        with LoggingContext(recipe_id=recipe.id):
            logger.info(f"Added recipe {recipe.name!r} with {len(ingredients)} ingredients")
        return recipe

    def edit_recipe(self, recipe_id: int, text: str, name: str | None = None) -> Recipe:
        """Re-parse a recipe's text and replace it wholesale, keeping its id."""
        existing = self.state.find(recipe_id)
        text, ingredients = self._parse_text(text)
        updated = existing.model_copy(
            update={
                "name": (name or "").strip() or existing.name,
                "ingredients": ingredients,
                "original_text": text,
            }
        )

        index = self.state.recipes.index(existing)
        self.state.recipes[index] = updated
        self.repository.save_recipes(self.state.recipes)
        self._recompute()

        with LoggingContext(recipe_id=recipe_id):
            logger.info(f"Edited recipe {updated.name!r}: {len(ingredients)} ingredients")
        return updated

    def remove_recipe(self, recipe_id: int) -> None:
        """Delete a recipe along with its active flag and multiplier."""
        recipe = self.state.find(recipe_id)
        self.state.recipes.remove(recipe)
        self.state.active_ids.discard(recipe_id)
        self.state.multipliers.pop(recipe_id, None)
        self.repository.save_recipes(self.state.recipes)
        self._save_activation()
        self._recompute()

        with LoggingContext(recipe_id=recipe_id):
            logger.info(f"Removed recipe {recipe.name!r}")

    def toggle_recipe_active(self, recipe_id: int) -> bool:
        """Flip a recipe's active flag; returns the new flag."""
        self.state.find(recipe_id)
        if recipe_id in self.state.active_ids:
            # The multiplier is kept for when it is switched back on
            self.state.active_ids.discard(recipe_id)
            active = False
        else:
            self.state.active_ids.add(recipe_id)
            if not self.state.multipliers.get(recipe_id):
                self.state.multipliers[recipe_id] = 1
            active = True

        self._save_activation()
        self._recompute()

        with LoggingContext(recipe_id=recipe_id):
            logger.info(f"Recipe {'activated' if active else 'deactivated'}")
        return active

    def set_recipe_multiplier(self, recipe_id: int, multiplier: Any) -> float:
        """
        Set how many times a recipe is made.

        Zero deactivates the recipe and forgets its multiplier; a positive
        value activates it.

        Raises:
            RecipeValidationError: For negative or non-numeric values.
        """
        value = parse_multiplier(multiplier)
        self.state.find(recipe_id)

        if value == 0:
            self.state.active_ids.discard(recipe_id)
            self.state.multipliers.pop(recipe_id, None)
        else:
            self.state.active_ids.add(recipe_id)
            self.state.multipliers[recipe_id] = value

        self._save_activation()
        self._recompute()

        with LoggingContext(recipe_id=recipe_id):
            logger.info(f"Multiplier set to {value}")
        return value

    def clear_all(self) -> None:
        """Remove every recipe, active flag and multiplier."""
        count = len(self.state.recipes)
        self.state.recipes.clear()
        self.state.active_ids.clear()
        self.state.multipliers.clear()
        self.repository.save_recipes(self.state.recipes)
        self._save_activation()
        self._recompute()
        logger.info(f"Cleared {count} recipes")

    def import_recipes(self, payload: str | bytes | list[Any]) -> list[Recipe]:
        """Add recipes from a JSON array. Imported recipes start inactive."""
        imported = import_recipes(payload, self.next_id)
        self.state.recipes.extend(imported)
        self.repository.save_recipes(self.state.recipes)
        self._save_activation()
        self._recompute()
        logger.info(f"Imported {len(imported)} recipes")
        return imported

    def load_preloaded_recipes(self, path: str | Path | None = None) -> tuple[list[Recipe], int]:
        """
        Import the bundled recipe file, skipping names already present.

        Returns:
            Tuple of (recipes added, number skipped as already loaded).

        Raises:
            RecipeValidationError: If no file is configured or it is invalid.
            OSError: If the file cannot be read.
        """
        path = path or settings.preloaded_recipes_path
        if not path:
            raise RecipeValidationError("No preloaded recipe file configured")

        candidates = import_recipes(read_recipe_file(path), self.next_id)
        existing = {recipe.name.lower() for recipe in self.state.recipes}
        added = [recipe for recipe in candidates if recipe.name.lower() not in existing]
        skipped = len(candidates) - len(added)

        if added:
            self.state.recipes.extend(added)
            self.repository.save_recipes(self.state.recipes)
            self._save_activation()
            self._recompute()

        logger.info(f"Loaded {len(added)} preloaded recipes from {path} ({skipped} already loaded)")
        return added, skipped

    # -------------------------------------------------------------------------
    # Preference transitions
    # -------------------------------------------------------------------------

    def set_unit_system(self, system: UnitSystem | str) -> UnitSystem:
        system = UnitSystem(system)
        self.state.unit_system = system
        self.repository.save_unit_system(system)
        self._recompute()
        logger.info(f"Unit system set to {system.value}")
        return system

    def set_recipe_sort(self, order: RecipeSortOrder | str) -> RecipeSortOrder:
        order = RecipeSortOrder(order)
        self.state.recipe_sort = order
        self.repository.save_recipe_sort(order)
        logger.info(f"Recipe sort set to {order.value}")
        return order

    def set_shopping_list_sort(self, order: ShoppingListSortOrder | str) -> ShoppingListSortOrder:
        order = ShoppingListSortOrder(order)
        self.state.shopping_list_sort = order
        self.repository.save_shopping_list_sort(order)
        logger.info(f"Shopping list sort set to {order.value}")
        return order

    # -------------------------------------------------------------------------
    # Read-only snapshots
    # -------------------------------------------------------------------------

    def get_recipe(self, recipe_id: int) -> Recipe:
        return self.state.find(recipe_id)

    def is_active(self, recipe_id: int) -> bool:
        return recipe_id in self.state.active_ids

    def multiplier(self, recipe_id: int) -> float | None:
        return self.state.multipliers.get(recipe_id)

    def sorted_recipes(self) -> list[Recipe]:
        """Recipes in the preferred list order."""
        order = self.state.recipe_sort
        recipes = list(self.state.recipes)
        if order == RecipeSortOrder.NAME_ASC:
            recipes.sort(key=lambda r: r.name.lower())
        elif order == RecipeSortOrder.NAME_DESC:
            recipes.sort(key=lambda r: r.name.lower(), reverse=True)
        elif order == RecipeSortOrder.ADDED_DESC:
            recipes.sort(key=lambda r: r.id, reverse=True)
        else:
            recipes.sort(key=lambda r: r.id)
        return recipes

    def active_recipe_names(self) -> list[str]:
        return [r.name for r in self.state.recipes if r.id in self.state.active_ids]

    def consolidated(self) -> dict[str, ConsolidatedEntry]:
        """A copy of the consolidation result; changing it leaves the book untouched."""
        return copy.deepcopy(self._consolidated)

    def shopping_list(self) -> ShoppingList:
        return build_shopping_list(
            self._consolidated,
            recipe_names=self.active_recipe_names(),
            sort_order=self.state.shopping_list_sort,
        )

    def export_recipes(self) -> list[dict[str, Any]]:
        return export_recipes(self.state.recipes)
