"""Shared FastAPI dependencies."""

from fastapi import Request

from recipeconsolidator.state import RecipeBook


def get_recipe_book(request: Request) -> RecipeBook:
    """
    The process-wide recipe book created at application startup.

    RecipeBook is not thread-safe. Handlers that use it are ``async def`` so
    FastAPI runs them on the event loop one at a time rather than in its
    threadpool; the store behind it writes a few small rows per change.
    """
    return request.app.state.recipe_book
