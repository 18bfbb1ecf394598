"""Consolidation of active recipes into a shopping list."""

from recipeconsolidator.plan.consolidation import (
    ConsolidatedEntry,
    Contribution,
    GroupedQuantity,
    consolidate,
)
from recipeconsolidator.plan.shopping_list import (
    ShoppingItem,
    ShoppingList,
    build_shopping_list,
    render_plain_text,
)

__all__ = [
    "ConsolidatedEntry",
    "Contribution",
    "GroupedQuantity",
    "ShoppingItem",
    "ShoppingList",
    "build_shopping_list",
    "consolidate",
    "render_plain_text",
]
