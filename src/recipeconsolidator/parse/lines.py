"""Turning free-form recipe text into ParsedIngredient records."""

import re
from typing import NamedTuple

from recipeconsolidator.logging_config import get_logger
from recipeconsolidator.normalize.units import BASE_UNITS, to_base
from recipeconsolidator.parse.quantity import extract_quantity
from recipeconsolidator.parse.units import UnitMatcher
from recipeconsolidator.schemas import ParsedIngredient, QuantityUnitPair, UnitType

logger = get_logger(__name__)


BULLET_RE = re.compile(r"^[-*•▢◦·]\s*")
HEADER_RE = re.compile(
    r"^(ingredients|preparation|instructions|directions|method|steps?|serves|servings"
    r"|yield|prep|cook|notes)\b",
    re.IGNORECASE,
)
PARENTHETICAL_RE = re.compile(r"\(([^)]*)\)")
EDGE_PUNCTUATION = ",;:. "

# Prep and descriptor words moved from the ingredient name into its notes
PREP_WORDS: frozenset[str] = frozenset(
    {
        "chopped",
        "diced",
        "minced",
        "sliced",
        "grated",
        "shredded",
        "crushed",
        "cubed",
        "julienned",
        "halved",
        "quartered",
        "peeled",
        "seeded",
        "pitted",
        "trimmed",
        "rinsed",
        "drained",
        "beaten",
        "whisked",
        "sifted",
        "packed",
        "softened",
        "melted",
        "toasted",
        "divided",
        "fresh",
        "freshly",
        "finely",
        "roughly",
        "coarsely",
        "thinly",
        "thickly",
        "lightly",
        "large",
        "small",
        "medium",
        "ground",
        "optional",
    }
)

# Multi-word trailers checked before single words
PREP_PHRASES: tuple[str, ...] = (
    "at room temperature",
    "room temperature",
    "to taste",
    "for garnish",
    "for serving",
    "plus more",
)

CONNECTORS: frozenset[str] = frozenset({"and", "or", "of"})


class NameAndNotes(NamedTuple):
    """An ingredient name with its prep words and asides split off."""

    name: str
    notes: str | None


def _clean_token(token: str) -> str:
    return token.lower().strip(EDGE_PUNCTUATION)


def _strip_phrases(name: str) -> tuple[str, list[str]]:
    found: list[str] = []
    changed = True
    while changed:
        changed = False
        lowered = name.lower().rstrip(EDGE_PUNCTUATION)
        for phrase in PREP_PHRASES:
            if lowered.endswith(" " + phrase):
                found.insert(0, phrase)
                name = name.rstrip(EDGE_PUNCTUATION)[: -len(phrase)].rstrip(EDGE_PUNCTUATION)
                changed = True
                break
    return name, found


def split_notes(raw_name: str) -> NameAndNotes:
    """
    Separate preparation details from an ingredient name.

    Text after an em-dash and the first parenthetical group become notes.
    Known prep/descriptor words are peeled off both ends of the name, one
    word at a time, always leaving at least one word behind.
    """
    notes: list[str] = []
    name = raw_name.strip()

    dash_note = None
    if "—" in name:
        name, _, dash_note = name.partition("—")
        dash_note = dash_note.strip(EDGE_PUNCTUATION)

    paren_note = None
    paren = PARENTHETICAL_RE.search(name)
    if paren:
        paren_note = paren.group(1).strip(EDGE_PUNCTUATION)
        name = (name[: paren.start()] + " " + name[paren.end():]).strip()

    name, phrases = _strip_phrases(name)
    tokens = name.split()

    leading: list[str] = []
    while len(tokens) > 1 and _clean_token(tokens[0]) in PREP_WORDS:
        leading.append(_clean_token(tokens.pop(0)))
        # "finely and thinly sliced" style runs keep their connector
        while len(tokens) > 2 and _clean_token(tokens[0]) in CONNECTORS and (
            _clean_token(tokens[1]) in PREP_WORDS
        ):
            leading.append(_clean_token(tokens.pop(0)))

    trailing: list[str] = []
    while len(tokens) > 1 and _clean_token(tokens[-1]) in PREP_WORDS:
        trailing.insert(0, _clean_token(tokens.pop()))
        while len(tokens) > 2 and _clean_token(tokens[-1]) in CONNECTORS and (
            _clean_token(tokens[-2]) in PREP_WORDS
        ):
            trailing.insert(0, _clean_token(tokens.pop()))

    while len(tokens) > 1 and _clean_token(tokens[0]) in CONNECTORS:
        tokens.pop(0)
    while len(tokens) > 1 and _clean_token(tokens[-1]) in CONNECTORS:
        tokens.pop()

    if leading:
        notes.append(" ".join(leading))
    if trailing:
        notes.append(" ".join(trailing))
    notes.extend(phrases)
    if paren_note:
        notes.append(paren_note)
    if dash_note:
        notes.append(dash_note)

    clean_name = " ".join(tokens).strip(EDGE_PUNCTUATION)
    return NameAndNotes(name=clean_name, notes=", ".join(notes) if notes else None)


class QuantityUnitMatch(NamedTuple):
    """One "<quantity> <unit>" segment and whatever text follows it."""

    quantity: float
    unit: str
    unit_type: UnitType
    rest: str


class LineParser:
    """
    Parses single ingredient lines.

    A line yields at most one ParsedIngredient. Lines that cannot be
    ingredients (blank lines, section headers, a bare number) yield None;
    parsing never raises.
    """

    def __init__(self, unit_matcher: UnitMatcher | None = None):
        self.unit_matcher = unit_matcher or UnitMatcher()

    def parse_line(self, line: str) -> ParsedIngredient | None:
        """Parse one line of recipe text."""
        original = line.strip()
        if not original:
            return None

        text = BULLET_RE.sub("", original).strip()
        if not text:
            return None

        if HEADER_RE.match(text):
            logger.debug(f"Skipping header line: {original!r}")
            return None

        if "+" in text:
            combined = self._parse_combined(text, original)
            if combined is not None:
                return combined

        return self._parse_single(text, original)

    def parse_text(self, text: str) -> list[ParsedIngredient]:
        """Parse every line of a recipe, keeping only lines that yield an ingredient."""
        ingredients = []
        for line in text.splitlines():
            parsed = self.parse_line(line)
            if parsed is not None:
                ingredients.append(parsed)
        return ingredients

    def _parse_pair(self, text: str) -> QuantityUnitMatch | None:
        text = text.strip()
        extracted = extract_quantity(text)
        if extracted is None:
            return None

        rest = text[extracted.consumed:].strip()
        if not rest:
            return None

        unit_match = self.unit_matcher.match(rest)
        if unit_match is None:
            return None

        return QuantityUnitMatch(
            quantity=extracted.quantity,
            unit=unit_match.unit,
            unit_type=unit_match.unit_type,
            rest=unit_match.rest,
        )

    def _parse_combined(self, text: str, original: str) -> ParsedIngredient | None:
        """Handle "1 c. + 2 tbsp. butter": same-family amounts summed in base units."""
        parts = text.split("+")
        first = self._parse_pair(parts[0])
        if first is None:
            return None

        pairs = [first]
        remaining = first.rest
        for part in parts[1:]:
            pair = self._parse_pair(part)
            if pair is None:
                remaining = part.strip()
                break
            pairs.append(pair)
            remaining = pair.rest

        unit_types = {pair.unit_type for pair in pairs}
        if len(pairs) < 2 or len(unit_types) != 1:
            return None

        unit_type = pairs[0].unit_type
        total = sum(to_base(p.quantity, p.unit, p.unit_type).value for p in pairs)

        name, notes = split_notes(remaining)
        if not name:
            logger.debug(f"No ingredient name in combined line: {original!r}")
            return None

        return ParsedIngredient(
            quantity=total,
            unit=BASE_UNITS[unit_type],
            unit_type=unit_type,
            ingredient_name=name,
            notes=notes,
            original_line=original,
            is_combined=True,
            original_pairs=[QuantityUnitPair(quantity=p.quantity, unit=p.unit) for p in pairs],
        )

    def _parse_single(self, text: str, original: str) -> ParsedIngredient | None:
        extracted = extract_quantity(text)

        if extracted is None:
            quantity = 1.0
            unit = None
            unit_type = UnitType.COUNT
            raw_name = text
        else:
            quantity = extracted.quantity
            rest = text[extracted.consumed:].strip()
            if not rest:
                logger.debug(f"Quantity without ingredient: {original!r}")
                return None

            unit_match = self.unit_matcher.match(rest)
            if unit_match is None:
                unit = None
                unit_type = UnitType.COUNT
                raw_name = rest
            else:
                unit = unit_match.unit
                unit_type = unit_match.unit_type
                raw_name = unit_match.rest

        name, notes = split_notes(raw_name)
        if not name:
            logger.debug(f"No ingredient name in line: {original!r}")
            return None

        return ParsedIngredient(
            quantity=quantity,
            unit=unit,
            unit_type=unit_type,
            ingredient_name=name,
            notes=notes,
            original_line=original,
        )


_default_parser: LineParser | None = None


def _parser() -> LineParser:
    global _default_parser
    if _default_parser is None:
        _default_parser = LineParser()
    return _default_parser


def parse_line(line: str) -> ParsedIngredient | None:
    """Parse one ingredient line with the default unit vocabulary."""
    return _parser().parse_line(line)


def parse_recipe_text(text: str) -> list[ParsedIngredient]:
    """Parse a whole recipe's text into its ingredient list."""
    return _parser().parse_text(text)
