"""Key/value persistence for recipes, activation state and preferences."""

import json
from collections.abc import Iterable, Mapping
from typing import Any, Protocol

from pydantic import ValidationError
from sqlalchemy.orm import Session, sessionmaker

from recipeconsolidator.config import settings
from recipeconsolidator.logging_config import get_logger
from recipeconsolidator.models import KeyValueEntry
from recipeconsolidator.schemas import (
    Recipe,
    RecipeSortOrder,
    ShoppingListSortOrder,
    UnitSystem,
)

logger = get_logger(__name__)

RECIPES_KEY = "recipes"
ACTIVE_RECIPES_KEY = "activeRecipes"
MULTIPLIERS_KEY = "multipliers"
UNIT_SYSTEM_KEY = "unitSystem"
RECIPE_SORT_KEY = "sortOrder"
SHOPPING_LIST_SORT_KEY = "shoppingListSort"

LEGACY_UNIT_SYSTEMS: dict[str, UnitSystem] = {
    "imperial-culinary": UnitSystem.IMPERIAL,
    "imperial-technical": UnitSystem.IMPERIAL,
}

# Anything that can go wrong turning a stored string back into state
LOAD_ERRORS = (json.JSONDecodeError, ValidationError, TypeError, ValueError)


class KeyValueStore(Protocol):
    """Minimal string key/value port the application persists through."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    """In-process store, used by tests and the CLI."""

    def __init__(self, initial: Mapping[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class SqlStore:
    """Store backed by the ``key_value_entries`` table."""

    def __init__(self, session_factory: sessionmaker[Session]):
        self.session_factory = session_factory

    def get(self, key: str) -> str | None:
        with self.session_factory() as session:
            entry = session.get(KeyValueEntry, key)
            return entry.value if entry is not None else None

    def set(self, key: str, value: str) -> None:
        with self.session_factory() as session:
            entry = session.get(KeyValueEntry, key)
            if entry is None:
                session.add(KeyValueEntry(key=key, value=value))
            else:
                entry.value = value
            session.commit()


class StateRepository:
    """
    Loads and saves each slice of application state under its own key.

    Every load tolerates its key being absent or malformed: the failure is
    logged and the slice's default is returned instead of raising.
    """

    def __init__(
        self,
        store: KeyValueStore,
        key_prefix: str | None = None,
        default_unit_system: UnitSystem | None = None,
    ):
        self.store = store
        self.key_prefix = settings.storage_key_prefix if key_prefix is None else key_prefix
        self.default_unit_system = default_unit_system or _parse_unit_system(
            settings.default_unit_system
        ) or UnitSystem.IMPERIAL

    def key(self, name: str) -> str:
        return f"{self.key_prefix}{name}"

    def _read(self, name: str) -> str | None:
        return self.store.get(self.key(name))

    def _read_json(self, name: str) -> Any:
        raw = self._read(name)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring corrupt stored value for {self.key(name)}: {e}")
            return None

    def _write_json(self, name: str, value: Any) -> None:
        self.store.set(self.key(name), json.dumps(value, ensure_ascii=False))

    # -------------------------------------------------------------------------
    # Loads
    # -------------------------------------------------------------------------

    def load_recipes(self) -> list[Recipe]:
        """Load stored recipes; malformed entries are skipped."""
        data = self._read_json(RECIPES_KEY)
        if data is None:
            return []
        if not isinstance(data, list):
            logger.warning(f"Stored recipes are not a list, ignoring {self.key(RECIPES_KEY)}")
            return []

        recipes: list[Recipe] = []
        seen_ids: set[int] = set()
        for item in data:
            try:
                recipe = Recipe.model_validate(item)
            except LOAD_ERRORS as e:
                logger.warning(f"Skipping malformed stored recipe: {e}")
                continue
            if recipe.id in seen_ids:
                logger.warning(f"Skipping stored recipe with duplicate id {recipe.id}")
                continue
            seen_ids.add(recipe.id)
            recipes.append(recipe)
        return recipes

    def load_active_ids(self) -> set[int] | None:
        """Load the active-id set, or None when absent or unreadable."""
        data = self._read_json(ACTIVE_RECIPES_KEY)
        if data is None:
            return None
        try:
            return {int(recipe_id) for recipe_id in data}
        except LOAD_ERRORS as e:
            logger.warning(f"Ignoring malformed active recipe ids: {e}")
            return None

    def load_multipliers(self) -> dict[int, float]:
        """Load the multiplier map; entries that are not numbers are dropped."""
        data = self._read_json(MULTIPLIERS_KEY)
        if data is None:
            return {}
        if not isinstance(data, dict):
            logger.warning(
                f"Stored multipliers are not a mapping, ignoring {self.key(MULTIPLIERS_KEY)}"
            )
            return {}

        multipliers: dict[int, float] = {}
        for recipe_id, value in data.items():
            try:
                multipliers[int(recipe_id)] = float(value)
            except LOAD_ERRORS:
                logger.warning(f"Dropping malformed multiplier for recipe {recipe_id!r}: {value!r}")
        return multipliers

    def load_unit_system(self) -> UnitSystem:
        """Load the unit system, migrating legacy values."""
        raw = self._read(UNIT_SYSTEM_KEY)
        if raw is None:
            return self.default_unit_system
        if raw in LEGACY_UNIT_SYSTEMS:
            migrated = LEGACY_UNIT_SYSTEMS[raw]
            logger.info(f"Migrating legacy unit system {raw!r} to {migrated.value!r}")
            self.save_unit_system(migrated)
            return migrated
        system = _parse_unit_system(raw)
        if system is None:
            logger.warning(
                f"Unknown stored unit system {raw!r}, using {self.default_unit_system.value}"
            )
            return self.default_unit_system
        return system

    def load_recipe_sort(self) -> RecipeSortOrder:
        raw = self._read(RECIPE_SORT_KEY)
        if raw is None:
            return RecipeSortOrder.NAME_ASC
        try:
            return RecipeSortOrder(raw)
        except ValueError:
            logger.warning(f"Unknown stored recipe sort {raw!r}, using default")
            return RecipeSortOrder.NAME_ASC

    def load_shopping_list_sort(self) -> ShoppingListSortOrder:
        raw = self._read(SHOPPING_LIST_SORT_KEY)
        if raw is None:
            return ShoppingListSortOrder.ALPHABETICAL
        try:
            return ShoppingListSortOrder(raw)
        except ValueError:
            logger.warning(f"Unknown stored shopping list sort {raw!r}, using default")
            return ShoppingListSortOrder.ALPHABETICAL

    # -------------------------------------------------------------------------
    # Saves
    # -------------------------------------------------------------------------

    def save_recipes(self, recipes: Iterable[Recipe]) -> None:
        self._write_json(RECIPES_KEY, [recipe.to_export_dict() for recipe in recipes])

    def save_active_ids(self, active_ids: Iterable[int]) -> None:
        self._write_json(ACTIVE_RECIPES_KEY, sorted(active_ids))

    def save_multipliers(self, multipliers: Mapping[int, float]) -> None:
        self._write_json(MULTIPLIERS_KEY, {str(k): v for k, v in multipliers.items()})

    def save_unit_system(self, system: UnitSystem) -> None:
        self.store.set(self.key(UNIT_SYSTEM_KEY), system.value)

    def save_recipe_sort(self, order: RecipeSortOrder) -> None:
        self.store.set(self.key(RECIPE_SORT_KEY), order.value)

    def save_shopping_list_sort(self, order: ShoppingListSortOrder) -> None:
        self.store.set(self.key(SHOPPING_LIST_SORT_KEY), order.value)


def _parse_unit_system(value: str | None) -> UnitSystem | None:
    if value is None:
        return None
    try:
        return UnitSystem(value)
    except ValueError:
        return None
