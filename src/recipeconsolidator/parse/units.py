"""Matching of unit names at the start of the text that follows a quantity."""

import re
from typing import NamedTuple

from recipeconsolidator.normalize.units import (
    CASE_SENSITIVE_UNITS,
    VOLUME_UNITS,
    WEIGHT_UNITS,
)
from recipeconsolidator.schemas import UnitType

# The unit must end at whitespace, a comma, a sentence-ending period or the
# end of the text, so "c" never matches inside "corn".
_UNIT_TERMINATOR = r"(?:\s+|,|$|\.(?:\s|$))"
_LEADING_PUNCTUATION_RE = re.compile(r"^[,.\s]+")
_STARTS_WITH_DIGIT_RE = re.compile(r"^[0-9]")


class UnitMatch(NamedTuple):
    """A unit found at the start of a text and the text left after it."""

    unit: str
    unit_type: UnitType
    rest: str


def _compile_unit_patterns(
    table: dict[str, float],
    unit_type: UnitType,
) -> list[tuple[str, UnitType, re.Pattern[str]]]:
    # Longest name first so "cups" wins over "c"; sorted() is stable for ties.
    patterns = []
    for unit in sorted(table, key=len, reverse=True):
        flags = 0 if unit in CASE_SENSITIVE_UNITS else re.IGNORECASE
        pattern = re.compile(rf"^{re.escape(unit)}{_UNIT_TERMINATOR}", flags)
        patterns.append((unit, unit_type, pattern))
    return patterns


class UnitMatcher:
    """
    Finds the longest unit name that starts a text fragment.

    The volume vocabulary is tried before the weight vocabulary. A candidate
    is rejected when the text after it begins with a digit, since a second
    quantity there means the real split point lies elsewhere.
    """

    def __init__(
        self,
        volume_units: dict[str, float] | None = None,
        weight_units: dict[str, float] | None = None,
    ):
        self._patterns = _compile_unit_patterns(
            volume_units if volume_units is not None else VOLUME_UNITS,
            UnitType.VOLUME,
        ) + _compile_unit_patterns(
            weight_units if weight_units is not None else WEIGHT_UNITS,
            UnitType.WEIGHT,
        )

    def match(self, text: str) -> UnitMatch | None:
        """Match a unit at the start of ``text``, or None when no unit applies."""
        text = text.strip()
        if not text:
            return None

        for unit, unit_type, pattern in self._patterns:
            found = pattern.match(text)
            if not found:
                continue
            rest = _LEADING_PUNCTUATION_RE.sub("", text[found.end():].strip())
            if _STARTS_WITH_DIGIT_RE.match(rest):
                continue
            return UnitMatch(unit=unit, unit_type=unit_type, rest=rest)

        return None


_default_matcher: UnitMatcher | None = None


def match_unit(text: str) -> UnitMatch | None:
    """Match a unit using the built-in volume and weight vocabularies."""
    global _default_matcher
    if _default_matcher is None:
        _default_matcher = UnitMatcher()
    return _default_matcher.match(text)
