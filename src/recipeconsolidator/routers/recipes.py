"""API routes for adding, editing and activating recipes."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException, Response, status
from pydantic import BaseModel, ConfigDict, Field

from recipeconsolidator.errors import RecipeNotFoundError, RecipeValidationError
from recipeconsolidator.logging_config import get_logger
from recipeconsolidator.parse.lines import parse_recipe_text
from recipeconsolidator.routers.dependencies import get_recipe_book
from recipeconsolidator.schemas import ParsedIngredient, Recipe
from recipeconsolidator.state import RecipeBook

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1", tags=["recipes"])


# =============================================================================
# Request/Response Schemas
# =============================================================================


class RecipeTextRequest(BaseModel):
    """Recipe text to parse, with an optional display name."""

    text: str
    name: str | None = None


class MultiplierRequest(BaseModel):
    """How many times the recipe is made; 0 deactivates it."""

    multiplier: float


class RecipeResponse(BaseModel):
    """A stored recipe with its activation state."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    active: bool
    multiplier: float | None = None
    ingredients: list[ParsedIngredient]
    original_text: str = Field(default="", alias="originalText")
    tags: list[str] = Field(default_factory=list)


class RecipeListResponse(BaseModel):
    """Recipes in the preferred sort order."""

    recipes: list[RecipeResponse]
    total: int
    sort: str


class ParsePreviewResponse(BaseModel):
    """Ingredients a text would produce, without storing anything."""

    ingredients: list[ParsedIngredient]
    total: int


class ImportResponse(BaseModel):
    """Result of importing recipes; imported recipes start inactive."""

    imported: int
    recipes: list[RecipeResponse]


class PreloadResponse(BaseModel):
    """Result of loading the bundled recipe file."""

    added: int
    skipped: int
    recipes: list[RecipeResponse]


def _to_response(book: RecipeBook, recipe: Recipe) -> RecipeResponse:
    return RecipeResponse(
        id=recipe.id,
        name=recipe.name,
        active=book.is_active(recipe.id),
        multiplier=book.multiplier(recipe.id),
        ingredients=recipe.ingredients,
        original_text=recipe.original_text,
        tags=recipe.tags,
    )


def _not_found(e: RecipeNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


def _invalid(e: RecipeValidationError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))


# =============================================================================
# Collection Endpoints
# =============================================================================


@router.get("/recipes", response_model=RecipeListResponse)
async def list_recipes(book: RecipeBook = Depends(get_recipe_book)) -> RecipeListResponse:
    """List recipes in the preferred sort order."""
    recipes = [_to_response(book, recipe) for recipe in book.sorted_recipes()]
    return RecipeListResponse(
        recipes=recipes, total=len(recipes), sort=book.state.recipe_sort.value
    )


@router.post("/recipes", response_model=RecipeResponse, status_code=status.HTTP_201_CREATED)
async def add_recipe(
    request: RecipeTextRequest,
    book: RecipeBook = Depends(get_recipe_book),
) -> RecipeResponse:
    """Parse recipe text and store it as a new, active recipe."""
    try:
        recipe = book.add_recipe(request.text, request.name)
    except RecipeValidationError as e:
        raise _invalid(e) from e
    return _to_response(book, recipe)


@router.delete("/recipes", status_code=status.HTTP_204_NO_CONTENT)
async def clear_recipes(book: RecipeBook = Depends(get_recipe_book)) -> Response:
    """Remove every recipe."""
    book.clear_all()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/recipes/parse", response_model=ParsePreviewResponse)
async def parse_preview(request: RecipeTextRequest) -> ParsePreviewResponse:
    """Show how a recipe text would be parsed."""
    ingredients = parse_recipe_text(request.text)
    return ParsePreviewResponse(ingredients=ingredients, total=len(ingredients))


@router.get("/recipes/export")
async def export_recipes(book: RecipeBook = Depends(get_recipe_book)) -> list[dict[str, Any]]:
    """Export all recipes as an import-compatible JSON array."""
    return book.export_recipes()


@router.post("/recipes/import", response_model=ImportResponse)
async def import_recipes(
    payload: Annotated[Any, Body()],
    book: RecipeBook = Depends(get_recipe_book),
) -> ImportResponse:
    """Import a JSON array of recipes; unknown fields are ignored."""
    try:
        imported = book.import_recipes(payload)
    except RecipeValidationError as e:
        raise _invalid(e) from e
    return ImportResponse(
        imported=len(imported),
        recipes=[_to_response(book, recipe) for recipe in imported],
    )


@router.post("/recipes/preloaded", response_model=PreloadResponse)
async def load_preloaded_recipes(book: RecipeBook = Depends(get_recipe_book)) -> PreloadResponse:
    """Load the configured preloaded recipe file, skipping names already present."""
    try:
        added, skipped = book.load_preloaded_recipes()
    except RecipeValidationError as e:
        raise _invalid(e) from e
    except OSError as e:
        logger.warning(f"Could not read preloaded recipe file: {e}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Could not load preloaded recipes",
        ) from e
    return PreloadResponse(
        added=len(added),
        skipped=skipped,
        recipes=[_to_response(book, recipe) for recipe in added],
    )


# =============================================================================
# Single Recipe Endpoints
# =============================================================================


@router.get("/recipes/{recipe_id}", response_model=RecipeResponse)
async def get_recipe(recipe_id: int, book: RecipeBook = Depends(get_recipe_book)) -> RecipeResponse:
    """Get one recipe."""
    try:
        recipe = book.get_recipe(recipe_id)
    except RecipeNotFoundError as e:
        raise _not_found(e) from e
    return _to_response(book, recipe)


@router.put("/recipes/{recipe_id}", response_model=RecipeResponse)
async def edit_recipe(
    recipe_id: int,
    request: RecipeTextRequest,
    book: RecipeBook = Depends(get_recipe_book),
) -> RecipeResponse:
    """Re-parse a recipe from new text, keeping its id."""
    try:
        recipe = book.edit_recipe(recipe_id, request.text, request.name)
    except RecipeNotFoundError as e:
        raise _not_found(e) from e
    except RecipeValidationError as e:
        raise _invalid(e) from e
    return _to_response(book, recipe)


@router.delete("/recipes/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_recipe(recipe_id: int, book: RecipeBook = Depends(get_recipe_book)) -> Response:
    """Delete a recipe."""
    try:
        book.remove_recipe(recipe_id)
    except RecipeNotFoundError as e:
        raise _not_found(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/recipes/{recipe_id}/toggle", response_model=RecipeResponse)
async def toggle_recipe(
    recipe_id: int,
    book: RecipeBook = Depends(get_recipe_book),
) -> RecipeResponse:
    """Include or exclude a recipe from the shopping list."""
    try:
        book.toggle_recipe_active(recipe_id)
        recipe = book.get_recipe(recipe_id)
    except RecipeNotFoundError as e:
        raise _not_found(e) from e
    return _to_response(book, recipe)


@router.put("/recipes/{recipe_id}/multiplier", response_model=RecipeResponse)
async def set_multiplier(
    recipe_id: int,
    request: MultiplierRequest,
    book: RecipeBook = Depends(get_recipe_book),
) -> RecipeResponse:
    """Set how many times a recipe is made."""
    try:
        book.set_recipe_multiplier(recipe_id, request.multiplier)
        recipe = book.get_recipe(recipe_id)
    except RecipeNotFoundError as e:
        raise _not_found(e) from e
    except RecipeValidationError as e:
        raise _invalid(e) from e
    return _to_response(book, recipe)
