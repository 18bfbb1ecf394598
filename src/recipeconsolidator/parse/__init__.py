"""Parse free-form recipe text into structured ingredients."""

from recipeconsolidator.parse.lines import (
    LineParser,
    parse_line,
    parse_recipe_text,
    split_notes,
)
from recipeconsolidator.parse.quantity import ExtractedQuantity, extract_quantity
from recipeconsolidator.parse.units import UnitMatch, UnitMatcher, match_unit

__all__ = [
    "ExtractedQuantity",
    "LineParser",
    "UnitMatch",
    "UnitMatcher",
    "extract_quantity",
    "match_unit",
    "parse_line",
    "parse_recipe_text",
    "split_notes",
]
