"""Unit tables and conversion between base units and the preferred unit system."""

from dataclasses import dataclass

from recipeconsolidator.logging_config import get_logger
from recipeconsolidator.normalize.formatting import round_half_up
from recipeconsolidator.schemas import UnitSystem, UnitType

logger = get_logger(__name__)


# =============================================================================
# Unit Conversion Tables
# =============================================================================

# Volume conversions (base unit: ml). Keys are matched case-insensitively,
# except the single-letter T/t abbreviations, which are case-sensitive.
VOLUME_UNITS: dict[str, float] = {
    # US customary (culinary measures)
    "cup": 240.0,
    "cups": 240.0,
    "cup.": 240.0,
    "c": 240.0,
    "c.": 240.0,
    "tablespoon": 15.0,
    "tablespoons": 15.0,
    "tbsp": 15.0,
    "tbsp.": 15.0,
    "tbsps": 15.0,
    "tbs": 15.0,
    "tbs.": 15.0,
    "tb": 15.0,
    "tb.": 15.0,
    "T": 15.0,
    "T.": 15.0,
    "teaspoon": 5.0,
    "teaspoons": 5.0,
    "tsp": 5.0,
    "tsp.": 5.0,
    "tsps": 5.0,
    "t": 5.0,
    "t.": 5.0,
    "fluid ounce": 30.0,
    "fluid ounces": 30.0,
    "fl oz": 30.0,
    "fl. oz.": 30.0,
    "fl oz.": 30.0,
    "fl": 30.0,
    "pint": 480.0,
    "pints": 480.0,
    "pt": 480.0,
    "pt.": 480.0,
    "quart": 960.0,
    "quarts": 960.0,
    "qt": 960.0,
    "qt.": 960.0,
    "gallon": 3840.0,
    "gallons": 3840.0,
    "gal": 3840.0,
    "gal.": 3840.0,
    # Metric
    "milliliter": 1.0,
    "milliliters": 1.0,
    "millilitre": 1.0,
    "millilitres": 1.0,
    "ml": 1.0,
    "ml.": 1.0,
    "liter": 1000.0,
    "liters": 1000.0,
    "litre": 1000.0,
    "litres": 1000.0,
    "l": 1000.0,
    "l.": 1000.0,
}

# Weight conversions (base unit: g)
WEIGHT_UNITS: dict[str, float] = {
    # Imperial
    "ounce": 28.35,
    "ounces": 28.35,
    "oz": 28.35,
    "oz.": 28.35,
    "pound": 453.6,
    "pounds": 453.6,
    "pound.": 453.6,
    "lb": 453.6,
    "lb.": 453.6,
    "lbs": 453.6,
    "lbs.": 453.6,
    # Metric
    "gram": 1.0,
    "grams": 1.0,
    "g": 1.0,
    "g.": 1.0,
    "kilogram": 1000.0,
    "kilograms": 1000.0,
    "kg": 1000.0,
    "kg.": 1000.0,
}

CASE_SENSITIVE_UNITS: frozenset[str] = frozenset({"T", "T.", "t", "t."})

BASE_UNITS: dict[UnitType, str] = {
    UnitType.VOLUME: "ml",
    UnitType.WEIGHT: "g",
}

UNIT_TABLES: dict[UnitType, dict[str, float]] = {
    UnitType.VOLUME: VOLUME_UNITS,
    UnitType.WEIGHT: WEIGHT_UNITS,
}

# Imperial display thresholds
MIN_CUPS = 0.125
MIN_TABLESPOONS = 0.5
OUNCES_PER_POUND = 16

# Full spellings for display and export
UNIT_SPELLINGS: dict[str, str] = {
    "tsp": "teaspoon",
    "tsps": "teaspoon",
    "teaspoon": "teaspoon",
    "teaspoons": "teaspoon",
    "t": "teaspoon",
    "tbsp": "tablespoon",
    "tbsps": "tablespoon",
    "tbs": "tablespoon",
    "tb": "tablespoon",
    "T": "tablespoon",
    "tablespoon": "tablespoon",
    "tablespoons": "tablespoon",
    "cup": "cup",
    "cups": "cup",
    "c": "cup",
    "fl oz": "fluid ounce",
    "fl. oz": "fluid ounce",
    "fl": "fluid ounce",
    "fluid ounce": "fluid ounce",
    "fluid ounces": "fluid ounce",
    "pint": "pint",
    "pints": "pint",
    "pt": "pint",
    "quart": "quart",
    "quarts": "quart",
    "qt": "quart",
    "gallon": "gallon",
    "gallons": "gallon",
    "gal": "gallon",
    "ml": "milliliter",
    "milliliter": "milliliter",
    "milliliters": "milliliter",
    "l": "liter",
    "liter": "liter",
    "liters": "liter",
    "oz": "ounce",
    "ounce": "ounce",
    "ounces": "ounce",
    "lb": "pound",
    "lbs": "pound",
    "pound": "pound",
    "pounds": "pound",
    "g": "gram",
    "gram": "gram",
    "grams": "gram",
    "kg": "kilogram",
    "kilogram": "kilogram",
    "kilograms": "kilogram",
}

NON_PLURAL_UNITS: frozenset[str] = frozenset(
    {
        "ml",
        "milliliter",
        "milliliters",
        "l",
        "liter",
        "liters",
        "g",
        "gram",
        "grams",
        "kg",
        "kilogram",
        "kilograms",
    }
)


@dataclass(frozen=True)
class BaseQuantity:
    """A quantity expressed in its family's base unit (ml or g)."""

    value: float
    unit: str | None
    unit_type: UnitType


@dataclass(frozen=True)
class PreferredQuantity:
    """A base quantity re-expressed for display in the chosen unit system."""

    display_quantity: float
    display_unit: str
    unit: str
    fl_oz: float | None = None


# =============================================================================
# Lookup Functions
# =============================================================================


def lookup_factor(unit: str, unit_type: UnitType) -> float | None:
    """
    Find the base-unit factor for a unit spelling.

    The exact spelling is tried first so that "T" (tablespoon) and "t"
    (teaspoon) stay distinct; otherwise the lowercase spelling is used.
    """
    table = UNIT_TABLES.get(unit_type)
    if table is None or not unit:
        return None
    unit = unit.strip()
    if unit in table:
        return table[unit]
    return table.get(unit.lower())


def identify_unit_type(unit: str | None) -> UnitType:
    """Identify the unit family of a unit spelling (count when unrecognised)."""
    if not unit:
        return UnitType.COUNT
    for unit_type in (UnitType.VOLUME, UnitType.WEIGHT):
        if lookup_factor(unit, unit_type) is not None:
            return unit_type
    return UnitType.COUNT


def spell_out_unit(unit: str | None) -> str:
    """Convert a unit abbreviation to its singular full spelling ("tbsp." -> "tablespoon")."""
    if not unit:
        return ""
    stripped = unit.strip().rstrip(".")
    if stripped in UNIT_SPELLINGS:
        return UNIT_SPELLINGS[stripped]
    return UNIT_SPELLINGS.get(stripped.lower(), unit)


def pluralize_unit(unit: str, quantity: float) -> str:
    """Pluralize a spelled-out unit for a quantity; metric units never change."""
    if not unit or 0 < quantity <= 1:
        return unit
    if unit.lower() in NON_PLURAL_UNITS or unit.endswith("s"):
        return unit
    return unit + "s"


# =============================================================================
# Conversion Functions
# =============================================================================


def to_base(quantity: float, unit: str | None, unit_type: UnitType) -> BaseQuantity:
    """
    Convert a quantity to its base unit (ml for volume, g for weight).

    Count quantities pass through. An unrecognised unit is kept as-is with
    the quantity unchanged, so no data is dropped.
    """
    if not unit or unit_type == UnitType.COUNT:
        return BaseQuantity(value=quantity, unit=unit, unit_type=unit_type)

    factor = lookup_factor(unit, unit_type)
    if factor is None:
        logger.debug(f"No {unit_type.value} conversion for unit {unit!r}, keeping as-is")
        return BaseQuantity(value=quantity, unit=unit, unit_type=unit_type)

    return BaseQuantity(
        value=quantity * factor,
        unit=BASE_UNITS[unit_type],
        unit_type=unit_type,
    )


def to_preferred(
    base_value: float,
    unit_type: UnitType,
    system: UnitSystem,
) -> PreferredQuantity:
    """
    Express a base-unit value in the preferred unit system.

    Metric keeps ml/g. Imperial volume uses the largest of cups, tablespoons
    and teaspoons that stays readable (>= 1/8 cup, >= 1/2 tbsp) and always
    carries a fluid-ounce figure; imperial weight uses pounds from 16 oz up.
    """
    if unit_type == UnitType.COUNT:
        return PreferredQuantity(display_quantity=base_value, display_unit="", unit="count")

    if system == UnitSystem.METRIC:
        base_unit = BASE_UNITS[unit_type]
        return PreferredQuantity(
            display_quantity=round_half_up(base_value, 2),
            display_unit=base_unit,
            unit=base_unit,
        )

    if unit_type == UnitType.VOLUME:
        return _imperial_volume(base_value)
    return _imperial_weight(base_value)


def _imperial_volume(ml: float) -> PreferredQuantity:
    fl_oz = round_half_up(ml / VOLUME_UNITS["fluid ounce"], 2)

    cups = ml / VOLUME_UNITS["cup"]
    if cups >= MIN_CUPS:
        return _preferred(cups, "cup", fl_oz)

    tablespoons = ml / VOLUME_UNITS["tablespoon"]
    if tablespoons >= MIN_TABLESPOONS:
        return _preferred(tablespoons, "tablespoon", fl_oz)

    return _preferred(ml / VOLUME_UNITS["teaspoon"], "teaspoon", fl_oz)


def _imperial_weight(grams: float) -> PreferredQuantity:
    ounces = grams / WEIGHT_UNITS["ounce"]
    if ounces >= OUNCES_PER_POUND:
        return _preferred(ounces / OUNCES_PER_POUND, "pound")
    return _preferred(ounces, "ounce")


def _preferred(value: float, unit: str, fl_oz: float | None = None) -> PreferredQuantity:
    rounded = round_half_up(value, 2)
    return PreferredQuantity(
        display_quantity=rounded,
        display_unit=pluralize_unit(unit, rounded),
        unit=unit,
        fl_oz=fl_oz,
    )
