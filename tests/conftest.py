"""Pytest configuration and shared fixtures."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from recipeconsolidator.database import create_db_engine, init_db
from recipeconsolidator.schemas import ParsedIngredient, Recipe, UnitType
from recipeconsolidator.state import RecipeBook
from recipeconsolidator.storage import MemoryStore, SqlStore, StateRepository

# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "api: marks tests that exercise the HTTP layer")
    config.addinivalue_line("markers", "slow: marks tests as slow running")


# =============================================================================
# Recipe Text Fixtures
# =============================================================================


@pytest.fixture
def pancake_text():
    """A short pasted recipe with a header, bullets and a combined measurement."""
    return "\n".join(
        [
            "Ingredients:",
            "- 2 cups all-purpose flour",
            "- 1 c. + 2 tbsp. butter, melted",
            "• 2 large eggs",
            "1/2 tsp salt",
            "",
            "Instructions",
        ]
    )


@pytest.fixture
def stew_text():
    return "\n".join(
        [
            "1 onion, chopped",
            "1 lb beef",
            "3 tbsp olive oil",
            "2 cloves garlic (minced)",
        ]
    )


# =============================================================================
# Recipe Model Fixtures
# =============================================================================


def make_ingredient(
    name: str,
    quantity: float = 1,
    unit: str | None = None,
    unit_type: UnitType = UnitType.COUNT,
) -> ParsedIngredient:
    return ParsedIngredient(
        quantity=quantity,
        unit=unit,
        unit_type=unit_type,
        ingredient_name=name,
        original_line=" ".join(str(part) for part in (quantity, unit, name) if part),
    )


@pytest.fixture
def ingredient_factory():
    """Build ParsedIngredient records without going through the parser."""
    return make_ingredient


@pytest.fixture
def pancakes_recipe():
    return Recipe(
        id=1,
        name="Pancakes",
        ingredients=[make_ingredient("flour", 2, "cups", UnitType.VOLUME)],
        original_text="2 cups flour",
    )


@pytest.fixture
def onion_recipes():
    """Two recipes using onion as a count and as a volume."""
    return [
        Recipe(id=10, name="Soup", ingredients=[make_ingredient("onion", 1)]),
        Recipe(
            id=11,
            name="Salsa",
            ingredients=[make_ingredient("onion", 0.5, "cup", UnitType.VOLUME)],
        ),
    ]


# =============================================================================
# Storage / State Fixtures
# =============================================================================


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def repository(memory_store):
    return StateRepository(memory_store, key_prefix="test_")


@pytest.fixture
def recipe_book(repository):
    """Empty recipe book backed by an in-memory store."""
    return RecipeBook(repository)


@pytest.fixture
def sql_store(tmp_path):
    """Key/value store on a throwaway SQLite database."""
    engine = create_db_engine(f"sqlite:///{tmp_path / 'state.db'}")
    init_db(engine)
    yield SqlStore(sessionmaker(engine, expire_on_commit=False))
    engine.dispose()


# =============================================================================
# API Fixtures
# =============================================================================


@pytest.fixture
def client(recipe_book):
    """Test client whose app uses the in-memory recipe book."""
    from recipeconsolidator.main import app
    from recipeconsolidator.routers.dependencies import get_recipe_book

    app.dependency_overrides[get_recipe_book] = lambda: recipe_book
    yield TestClient(app)
    app.dependency_overrides.clear()
