"""Presentation of numeric quantities as culinary fractions or short decimals."""

import math

FRACTION_TOLERANCE = 0.015

# Halves, thirds, quarters, fifths, sixths, eighths; first match wins.
COMMON_FRACTIONS: tuple[tuple[int, int], ...] = (
    (1, 2),
    (1, 3),
    (2, 3),
    (1, 4),
    (3, 4),
    (1, 5),
    (2, 5),
    (3, 5),
    (4, 5),
    (1, 6),
    (5, 6),
    (1, 8),
    (3, 8),
    (5, 8),
    (7, 8),
)


def round_half_up(value: float, places: int = 2) -> float:
    """Round like a person would (0.125 -> 0.13), not banker's rounding."""
    factor = 10**places
    if value < 0:
        return -round_half_up(-value, places)
    return math.floor(value * factor + 0.5) / factor


def format_decimal(value: float) -> str:
    """Format a number to at most two decimals, without a trailing '.0'."""
    rounded = round_half_up(value, 2)
    if rounded == int(rounded):
        return str(int(rounded))
    return f"{rounded:.2f}".rstrip("0").rstrip(".")


def format_quantity(value: float) -> str:
    """
    Render a quantity for display.

    Whole numbers stay whole ("3"). A fractional part close to a common
    culinary fraction becomes "1 1/2" or "3/4". Anything else is rounded to
    two decimals ("0.37").
    """
    if not math.isfinite(value):
        return str(value)
    if value < 0:
        return "-" + format_quantity(-value)

    whole = int(value)
    fractional = value - whole
    if fractional < 1e-9:
        return str(whole)

    for numerator, denominator in COMMON_FRACTIONS:
        if abs(fractional - numerator / denominator) <= FRACTION_TOLERANCE:
            fraction = f"{numerator}/{denominator}"
            return f"{whole} {fraction}" if whole else fraction

    return format_decimal(value)
