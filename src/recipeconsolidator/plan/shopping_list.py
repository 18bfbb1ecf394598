"""Shopping list views over a consolidated ingredient map."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime

from recipeconsolidator.logging_config import get_logger
from recipeconsolidator.normalize.formatting import format_decimal, format_quantity
from recipeconsolidator.normalize.names import (
    CATEGORY_ORDER,
    DEFAULT_CATEGORY,
    get_ingredient_category,
)
from recipeconsolidator.plan.consolidation import ConsolidatedEntry, GroupedQuantity
from recipeconsolidator.schemas import ShoppingListSortOrder, UnitType

logger = get_logger(__name__)

RULE_WIDTH = 50


@dataclass
class ShoppingItem:
    """A single item in the shopping list."""

    ingredient_name: str
    normalized_name: str
    quantity: str
    category: str = DEFAULT_CATEGORY
    recipe_sources: list[str] = field(default_factory=list)
    quantities: list[GroupedQuantity] = field(default_factory=list)


@dataclass
class ShoppingList:
    """Complete shopping list for the active recipes."""

    recipe_names: list[str] = field(default_factory=list)
    sort_order: ShoppingListSortOrder = ShoppingListSortOrder.ALPHABETICAL
    items: list[ShoppingItem] = field(default_factory=list)

    # Grouped view
    items_by_category: dict[str, list[ShoppingItem]] = field(default_factory=dict)

    def add_item(self, item: ShoppingItem) -> None:
        """Add an item and update the category grouping."""
        self.items.append(item)
        self.items_by_category.setdefault(item.category, []).append(item)

    @property
    def total_items(self) -> int:
        return len(self.items)

    def sections(self) -> list[tuple[str | None, list[ShoppingItem]]]:
        """
        Items as displayed: one untitled section when alphabetical, otherwise
        one section per non-empty category in the fixed category order.
        """
        if self.sort_order != ShoppingListSortOrder.CATEGORY:
            return [(None, list(self.items))]
        return [
            (category, list(self.items_by_category[category]))
            for category in CATEGORY_ORDER
            if self.items_by_category.get(category)
        ]


def format_grouped_quantity(quantity: GroupedQuantity) -> str:
    """Render one amount, e.g. "1 1/2 cups (12 fl oz)" or "3"."""
    text = f"{format_quantity(quantity.display_quantity)} {quantity.display_unit}".strip()
    if quantity.unit_type == UnitType.VOLUME and quantity.fl_oz is not None:
        text = f"{text} ({format_decimal(quantity.fl_oz)} fl oz)"
    return text


def format_entry_quantity(entry: ConsolidatedEntry) -> str:
    """Render an entry's amount; grouped amounts are joined with " + "."""
    return " + ".join(format_grouped_quantity(q) for q in entry.quantities)


def _name_key(entry: ConsolidatedEntry) -> tuple[str, str]:
    return (entry.display_name.lower(), entry.canonical_name)


def build_shopping_list(
    consolidated: Mapping[str, ConsolidatedEntry],
    recipe_names: list[str] | None = None,
    sort_order: ShoppingListSortOrder = ShoppingListSortOrder.ALPHABETICAL,
) -> ShoppingList:
    """
    Build the displayable shopping list from a consolidation result.

    Entries are sorted by display name (case-insensitive); with category
    sorting they are additionally grouped by ingredient category.
    """
    shopping_list = ShoppingList(recipe_names=list(recipe_names or []), sort_order=sort_order)

    entries = sorted(consolidated.values(), key=_name_key)
    items = [
        ShoppingItem(
            ingredient_name=entry.display_name,
            normalized_name=entry.canonical_name,
            quantity=format_entry_quantity(entry),
            category=get_ingredient_category(entry.display_name),
            recipe_sources=entry.sources,
            quantities=entry.quantities,
        )
        for entry in entries
    ]

    if sort_order == ShoppingListSortOrder.CATEGORY:
        rank = {category: index for index, category in enumerate(CATEGORY_ORDER)}
        items.sort(key=lambda item: rank.get(item.category, len(rank)))

    for item in items:
        shopping_list.add_item(item)

    logger.debug(
        f"Built shopping list: {shopping_list.total_items} items, "
        f"{len(shopping_list.items_by_category)} categories, sort={sort_order.value}"
    )
    return shopping_list


def render_plain_text(
    shopping_list: ShoppingList,
    generated_at: datetime | None = None,
) -> str:
    """Render the shopping list as the downloadable plain-text document."""
    generated_at = generated_at or datetime.now()

    lines = [
        "SHOPPING LIST",
        "=" * RULE_WIDTH,
        "",
        f"Based on recipes: {', '.join(shopping_list.recipe_names)}",
        f"Generated: {generated_at:%Y-%m-%d %H:%M:%S}",
        "",
        "INGREDIENTS:",
        "-" * RULE_WIDTH,
        "",
    ]

    for title, items in shopping_list.sections():
        if title is not None:
            lines.append("")
            lines.append(title.upper())
            lines.append("-" * RULE_WIDTH)
        for item in items:
            parts = ("□", item.quantity, item.ingredient_name)
            lines.append(" ".join(part for part in parts if part))

    lines.append("")
    lines.append("=" * RULE_WIDTH)
    lines.append(f"Total items: {shopping_list.total_items}")
    return "\n".join(lines) + "\n"
