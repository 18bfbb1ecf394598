"""Recognition of the leading numeric quantity in an ingredient line."""

import re
from typing import NamedTuple

UNICODE_FRACTIONS: dict[str, float] = {
    "½": 1 / 2,
    "⅓": 1 / 3,
    "⅔": 2 / 3,
    "¼": 1 / 4,
    "¾": 3 / 4,
    "⅕": 1 / 5,
    "⅖": 2 / 5,
    "⅗": 3 / 5,
    "⅘": 4 / 5,
    "⅙": 1 / 6,
    "⅚": 5 / 6,
    "⅛": 1 / 8,
    "⅜": 3 / 8,
    "⅝": 5 / 8,
    "⅞": 7 / 8,
}

_GLYPH = "[" + "".join(UNICODE_FRACTIONS) + "]"

# Tried in this order; later patterns would mis-read the output of earlier ones.
_RANGE_RE = re.compile(r"^([0-9]+)\s*-\s*([0-9]+)")
_WHOLE_GLYPH_RE = re.compile(rf"^([0-9]+)({_GLYPH})")
_WHOLE_SPACE_GLYPH_RE = re.compile(rf"^([0-9]+)\s+({_GLYPH})")
_GLYPH_RE = re.compile(rf"^({_GLYPH})")
_MIXED_RE = re.compile(r"^([0-9]+)\s+([0-9]+)/([0-9]+)")
_FRACTION_RE = re.compile(r"^([0-9]+)/([0-9]+)")
_DECIMAL_RE = re.compile(r"^([0-9]+\.[0-9]+)")
_INTEGER_RE = re.compile(r"^([0-9]+)")

# A whole number followed by one of these is the start of a fraction we rejected
_FRACTION_AHEAD_RE = re.compile(rf"^([0-9]+/[0-9]+|{_GLYPH})")


class ExtractedQuantity(NamedTuple):
    """A recognised quantity and how many leading characters it used."""

    quantity: float
    consumed: int


def _proper_fraction(numerator: str, denominator: str) -> float | None:
    num, den = int(numerator), int(denominator)
    if den == 0 or num >= den:
        return None
    return num / den


def extract_quantity(text: str) -> ExtractedQuantity | None:
    """
    Extract the numeric expression at the start of ``text``.

    ``text`` is expected to be left-trimmed already. Handles, in order:

    - integer ranges ("6-8"), returning the upper bound
    - a whole number glued to a Unicode fraction ("1½")
    - a whole number, whitespace, Unicode fraction ("1 ½")
    - a lone Unicode fraction ("½")
    - mixed numbers ("1 1/2"), proper fractions only
    - simple fractions ("3/4"), proper fractions only
    - decimals ("1.5")
    - plain integers, unless a fraction follows

    Returns:
        ExtractedQuantity, or None when nothing usable starts the text.
    """
    if not text:
        return None

    match = _RANGE_RE.match(text)
    if match:
        low, high = int(match.group(1)), int(match.group(2))
        if high >= low:
            # Upper bound of the range
            return ExtractedQuantity(float(high), match.end())

    match = _WHOLE_GLYPH_RE.match(text)
    if match:
        whole = int(match.group(1))
        return ExtractedQuantity(whole + UNICODE_FRACTIONS[match.group(2)], match.end())

    match = _WHOLE_SPACE_GLYPH_RE.match(text)
    if match:
        whole = int(match.group(1))
        return ExtractedQuantity(whole + UNICODE_FRACTIONS[match.group(2)], match.end())

    match = _GLYPH_RE.match(text)
    if match:
        return ExtractedQuantity(UNICODE_FRACTIONS[match.group(1)], match.end())

    match = _MIXED_RE.match(text)
    if match:
        fraction = _proper_fraction(match.group(2), match.group(3))
        if fraction is not None:
            return ExtractedQuantity(int(match.group(1)) + fraction, match.end())

    match = _FRACTION_RE.match(text)
    if match:
        fraction = _proper_fraction(match.group(1), match.group(2))
        if fraction is not None:
            return ExtractedQuantity(fraction, match.end())

    match = _DECIMAL_RE.match(text)
    if match:
        return ExtractedQuantity(float(match.group(1)), match.end())

    match = _INTEGER_RE.match(text)
    if match:
        after = text[match.end():]
        if _FRACTION_AHEAD_RE.match(after) or _FRACTION_AHEAD_RE.match(after.lstrip()):
            return None
        return ExtractedQuantity(float(match.group(1)), match.end())

    return None
