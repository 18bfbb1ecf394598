"""API routers for the recipe consolidator application."""

from recipeconsolidator.routers.preferences import router as preferences_router
from recipeconsolidator.routers.recipes import router as recipes_router
from recipeconsolidator.routers.shopping_list import router as shopping_list_router

__all__ = [
    "preferences_router",
    "recipes_router",
    "shopping_list_router",
]
