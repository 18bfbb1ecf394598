"""API routes for the consolidated shopping list."""

from datetime import datetime

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field

from recipeconsolidator.logging_config import get_logger
from recipeconsolidator.plan.shopping_list import ShoppingItem, render_plain_text
from recipeconsolidator.routers.dependencies import get_recipe_book
from recipeconsolidator.state import RecipeBook

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1", tags=["shopping-list"])


class QuantitySchema(BaseModel):
    """One displayable amount of an ingredient."""

    display_quantity: float
    display_unit: str
    unit_type: str
    fl_oz: float | None = None


class ShoppingItemSchema(BaseModel):
    """A consolidated shopping list item."""

    ingredient_name: str
    normalized_name: str
    quantity: str
    category: str
    recipe_sources: list[str] = Field(default_factory=list)
    quantities: list[QuantitySchema] = Field(default_factory=list)


class ShoppingListSection(BaseModel):
    """Items under one heading; the title is null for the alphabetical view."""

    title: str | None = None
    items: list[ShoppingItemSchema]


class ShoppingListResponse(BaseModel):
    """The shopping list for all active recipes."""

    recipe_names: list[str]
    unit_system: str
    sort: str
    sections: list[ShoppingListSection]
    total_items: int


def _item_schema(item: ShoppingItem) -> ShoppingItemSchema:
    return ShoppingItemSchema(
        ingredient_name=item.ingredient_name,
        normalized_name=item.normalized_name,
        quantity=item.quantity,
        category=item.category,
        recipe_sources=item.recipe_sources,
        quantities=[
            QuantitySchema(
                display_quantity=q.display_quantity,
                display_unit=q.display_unit,
                unit_type=q.unit_type.value,
                fl_oz=q.fl_oz,
            )
            for q in item.quantities
        ],
    )


@router.get("/shopping-list", response_model=ShoppingListResponse)
async def get_shopping_list(book: RecipeBook = Depends(get_recipe_book)) -> ShoppingListResponse:
    """Consolidated ingredients of the active recipes, sorted per preference."""
    shopping_list = book.shopping_list()
    return ShoppingListResponse(
        recipe_names=shopping_list.recipe_names,
        unit_system=book.state.unit_system.value,
        sort=shopping_list.sort_order.value,
        sections=[
            ShoppingListSection(title=title, items=[_item_schema(item) for item in items])
            for title, items in shopping_list.sections()
        ],
        total_items=shopping_list.total_items,
    )


@router.get("/shopping-list/text", response_class=PlainTextResponse)
async def download_shopping_list(book: RecipeBook = Depends(get_recipe_book)) -> PlainTextResponse:
    """The shopping list as a downloadable text file."""
    generated_at = datetime.now()
    text = render_plain_text(book.shopping_list(), generated_at=generated_at)
    filename = f"shopping-list-{generated_at:%Y-%m-%d}.txt"
    logger.info(f"Rendered shopping list text ({len(text)} chars)")
    return PlainTextResponse(
        text,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
