"""Exceptions raised at the recipe add/edit/import boundary."""


class RecipeConsolidatorError(Exception):
    """Base exception for recipe consolidator errors."""


class RecipeValidationError(RecipeConsolidatorError, ValueError):
    """Raised when user input cannot become a recipe (e.g. no ingredients found)."""


class RecipeNotFoundError(RecipeConsolidatorError, KeyError):
    """Raised when a transition names a recipe id that does not exist."""

    def __init__(self, recipe_id: int):
        super().__init__(recipe_id)
        self.recipe_id = recipe_id

    def __str__(self) -> str:
        return f"Recipe not found: {self.recipe_id}"
