"""Aggregation of active recipes' ingredients into one consolidated map."""

from collections.abc import Collection, Iterable, Mapping
from dataclasses import dataclass, field

from recipeconsolidator.logging_config import get_logger
from recipeconsolidator.normalize.formatting import format_decimal
from recipeconsolidator.normalize.names import normalize_ingredient_name
from recipeconsolidator.normalize.units import BASE_UNITS, spell_out_unit, to_base, to_preferred
from recipeconsolidator.schemas import Recipe, UnitSystem, UnitType

logger = get_logger(__name__)

MEASURED_TYPES: tuple[UnitType, ...] = (UnitType.VOLUME, UnitType.WEIGHT)


@dataclass(frozen=True)
class Contribution:
    """One recipe's share of an ingredient, already scaled by its multiplier."""

    quantity: float
    unit: str | None
    unit_type: UnitType
    base_value: float
    base_unit: str | None
    source_label: str

    @property
    def is_converted(self) -> bool:
        """True when the base value is in ml or g and can be summed with others."""
        return self.unit_type in BASE_UNITS and self.base_unit == BASE_UNITS[self.unit_type]


@dataclass(frozen=True)
class GroupedQuantity:
    """One displayable amount of a consolidated ingredient."""

    display_quantity: float
    display_unit: str
    unit_type: UnitType
    fl_oz: float | None = None


@dataclass
class ConsolidatedEntry:
    """
    All contributions to one canonical ingredient and their display form.

    Either the single ``display_*`` fields are set, or ``grouped_quantities``
    holds several amounts that cannot be merged (e.g. "0.5 cup" and "1").
    """

    canonical_name: str
    display_name: str
    contributions: list[Contribution] = field(default_factory=list)
    display_quantity: float | None = None
    display_unit: str | None = None
    display_unit_type: UnitType | None = None
    fl_oz: float | None = None
    grouped_quantities: list[GroupedQuantity] = field(default_factory=list)

    @property
    def sources(self) -> list[str]:
        """Unique source labels in first-seen order."""
        seen: list[str] = []
        for contribution in self.contributions:
            if contribution.source_label not in seen:
                seen.append(contribution.source_label)
        return seen

    @property
    def is_grouped(self) -> bool:
        return bool(self.grouped_quantities)

    @property
    def quantities(self) -> list[GroupedQuantity]:
        """Display amounts as a list, whether single or grouped."""
        if self.grouped_quantities:
            return list(self.grouped_quantities)
        if self.display_quantity is None or self.display_unit_type is None:
            return []
        return [
            GroupedQuantity(
                display_quantity=self.display_quantity,
                display_unit=self.display_unit or "",
                unit_type=self.display_unit_type,
                fl_oz=self.fl_oz,
            )
        ]


def source_label(recipe_name: str, multiplier: float) -> str:
    """Label a contribution with its recipe, adding "(×k)" when scaled up."""
    if multiplier > 1:
        return f"{recipe_name} (×{format_decimal(multiplier)})"
    return recipe_name


def _summarize(
    contributions: list[Contribution],
    system: UnitSystem,
) -> list[GroupedQuantity]:
    """Sum contributions per unit family and convert each family once."""
    # Grouped by original unit string first so different spellings stay
    # traceable; converted groups then collapse into one total per family.
    by_unit: dict[str, list[Contribution]] = {}
    for contribution in contributions:
        by_unit.setdefault(contribution.unit or "", []).append(contribution)

    measured: dict[UnitType, float] = {}
    unmerged: list[GroupedQuantity] = []
    for unit_key, group in by_unit.items():
        first = group[0]
        if first.is_converted:
            measured[first.unit_type] = measured.get(first.unit_type, 0.0) + sum(
                c.base_value for c in group
            )
        else:
            unmerged.append(
                GroupedQuantity(
                    display_quantity=sum(c.quantity for c in group),
                    display_unit=spell_out_unit(unit_key),
                    unit_type=first.unit_type,
                )
            )

    items: list[GroupedQuantity] = []
    for unit_type in MEASURED_TYPES:
        # A family that sums to nothing ("0 cups flour") has no amount to show
        if measured.get(unit_type, 0.0) <= 0:
            continue
        preferred = to_preferred(measured[unit_type], unit_type, system)
        items.append(
            GroupedQuantity(
                display_quantity=preferred.display_quantity,
                display_unit=preferred.display_unit,
                unit_type=unit_type,
                fl_oz=preferred.fl_oz,
            )
        )
    items.extend(unmerged)
    return items


def consolidate(
    recipes: Iterable[Recipe],
    active_ids: Collection[int],
    multipliers: Mapping[int, float],
    system: UnitSystem,
) -> dict[str, ConsolidatedEntry]:
    """
    Combine every active recipe's ingredients into one entry per canonical name.

    Each quantity is scaled by its recipe's multiplier (1 when unset), filed
    under its normalized name with a source label, then summed per unit
    family and converted to ``system``. The map is rebuilt on every call,
    so equal inputs always give equal output.
    """
    consolidated: dict[str, ConsolidatedEntry] = {}

    for recipe in recipes:
        if recipe.id not in active_ids:
            continue

        multiplier = multipliers.get(recipe.id)
        if multiplier is None:
            multiplier = 1
        label = source_label(recipe.name, multiplier)

        for ingredient in recipe.ingredients:
            canonical = normalize_ingredient_name(ingredient.ingredient_name)
            if not canonical:
                continue

            entry = consolidated.get(canonical)
            if entry is None:
                entry = ConsolidatedEntry(
                    canonical_name=canonical,
                    display_name=ingredient.ingredient_name,
                )
                consolidated[canonical] = entry

            scaled = ingredient.quantity * multiplier
            base = to_base(scaled, ingredient.unit, ingredient.unit_type)
            entry.contributions.append(
                Contribution(
                    quantity=scaled,
                    unit=ingredient.unit,
                    unit_type=ingredient.unit_type,
                    base_value=base.value,
                    base_unit=base.unit,
                    source_label=label,
                )
            )

    for entry in consolidated.values():
        items = _summarize(entry.contributions, system)
        if len(items) == 1:
            item = items[0]
            entry.display_quantity = item.display_quantity
            entry.display_unit = item.display_unit
            entry.display_unit_type = item.unit_type
            entry.fl_oz = item.fl_oz
        else:
            entry.grouped_quantities = items

    logger.debug(
        f"Consolidated {len(consolidated)} ingredients from {len(active_ids)} active recipes"
    )
    return consolidated
