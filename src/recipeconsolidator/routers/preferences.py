"""API routes for display preferences."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from recipeconsolidator.routers.dependencies import get_recipe_book
from recipeconsolidator.schemas import (
    Preferences,
    RecipeSortOrder,
    ShoppingListSortOrder,
    UnitSystem,
)
from recipeconsolidator.state import RecipeBook

router = APIRouter(prefix="/api/v1", tags=["preferences"])


class PreferencesUpdate(BaseModel):
    """Partial preference update; omitted fields are left unchanged."""

    unit_system: UnitSystem | None = None
    recipe_sort: RecipeSortOrder | None = None
    shopping_list_sort: ShoppingListSortOrder | None = None


@router.get("/preferences", response_model=Preferences)
async def get_preferences(book: RecipeBook = Depends(get_recipe_book)) -> Preferences:
    """Current unit system and sort orders."""
    return book.state.preferences


@router.put("/preferences", response_model=Preferences)
async def update_preferences(
    update: PreferencesUpdate,
    book: RecipeBook = Depends(get_recipe_book),
) -> Preferences:
    """Change the unit system and/or sort orders."""
    if update.unit_system is not None:
        book.set_unit_system(update.unit_system)
    if update.recipe_sort is not None:
        book.set_recipe_sort(update.recipe_sort)
    if update.shopping_list_sort is not None:
        book.set_shopping_list_sort(update.shopping_list_sort)
    return book.state.preferences
