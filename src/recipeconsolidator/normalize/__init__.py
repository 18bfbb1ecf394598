"""Normalize ingredient names, units and displayed quantities."""

from recipeconsolidator.normalize.formatting import format_decimal, format_quantity
from recipeconsolidator.normalize.names import (
    get_ingredient_category,
    normalize_ingredient_name,
)
from recipeconsolidator.normalize.units import (
    BaseQuantity,
    PreferredQuantity,
    identify_unit_type,
    pluralize_unit,
    spell_out_unit,
    to_base,
    to_preferred,
)

__all__ = [
    "BaseQuantity",
    "PreferredQuantity",
    "format_decimal",
    "format_quantity",
    "get_ingredient_category",
    "identify_unit_type",
    "normalize_ingredient_name",
    "pluralize_unit",
    "spell_out_unit",
    "to_base",
    "to_preferred",
]
