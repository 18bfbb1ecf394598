"""Unit tests for ingredient consolidation across recipes."""

import pytest

from recipeconsolidator.plan.consolidation import consolidate, source_label
from recipeconsolidator.schemas import Recipe, UnitSystem, UnitType


def _recipe(recipe_id, name, *ingredients):
    return Recipe(id=recipe_id, name=name, ingredients=list(ingredients))


class TestSourceLabel:
    """Tests for contribution labels."""

    def test_unscaled(self):
        assert source_label("Soup", 1) == "Soup"
        assert source_label("Soup", 0.5) == "Soup"

    def test_scaled(self):
        assert source_label("Soup", 2) == "Soup (×2)"
        assert source_label("Soup", 2.5) == "Soup (×2.5)"


class TestConsolidate:
    """Tests for consolidate()."""

    def test_multiplier_scales_and_labels(self, pancakes_recipe):
        result = consolidate([pancakes_recipe], {1}, {1: 2}, UnitSystem.IMPERIAL)

        entry = result["flour"]
        assert entry.display_quantity == 4
        assert entry.display_unit == "cups"
        assert entry.display_unit_type == UnitType.VOLUME
        assert entry.fl_oz == 32
        assert entry.sources == ["Pancakes (×2)"]
        assert not entry.is_grouped

    def test_missing_multiplier_defaults_to_one(self, pancakes_recipe):
        result = consolidate([pancakes_recipe], {1}, {}, UnitSystem.IMPERIAL)
        assert result["flour"].display_quantity == 2
        assert result["flour"].sources == ["Pancakes"]

    def test_inactive_recipes_are_ignored(self, pancakes_recipe, onion_recipes):
        result = consolidate([pancakes_recipe, *onion_recipes], {10}, {}, UnitSystem.IMPERIAL)
        assert list(result) == ["onion"]

    def test_mixed_families_are_grouped(self, onion_recipes):
        """Count and volume amounts of one ingredient stay side by side."""
        result = consolidate(onion_recipes, {10, 11}, {}, UnitSystem.IMPERIAL)

        entry = result["onion"]
        assert entry.is_grouped
        assert entry.display_quantity is None
        volume, count = entry.grouped_quantities
        assert (volume.display_quantity, volume.display_unit) == (0.5, "cup")
        assert volume.unit_type == UnitType.VOLUME
        assert volume.fl_oz == 4
        assert (count.display_quantity, count.display_unit) == (1, "")
        assert count.unit_type == UnitType.COUNT
        assert entry.sources == ["Soup", "Salsa"]

    def test_different_spellings_are_summed(self, ingredient_factory):
        recipes = [
            _recipe(1, "Cake", ingredient_factory("milk", 1, "cup", UnitType.VOLUME)),
            _recipe(2, "Sauce", ingredient_factory("whole milk", 2, "tbsp", UnitType.VOLUME)),
        ]
        entry = consolidate(recipes, {1, 2}, {}, UnitSystem.IMPERIAL)["milk"]

        assert entry.display_quantity == 1.13
        assert entry.display_unit == "cups"
        assert entry.fl_oz == 9
        assert entry.display_name == "milk"
        assert len(entry.contributions) == 2

    def test_volume_and_weight_are_listed_separately(self, ingredient_factory):
        recipes = [
            _recipe(1, "A", ingredient_factory("sugar", 1, "cup", UnitType.VOLUME)),
            _recipe(2, "B", ingredient_factory("sugar", 100, "g", UnitType.WEIGHT)),
        ]
        entry = consolidate(recipes, {1, 2}, {}, UnitSystem.METRIC)["sugar"]

        assert [(q.display_quantity, q.display_unit) for q in entry.quantities] == [
            (240, "ml"),
            (100, "g"),
        ]

    def test_unconvertible_units_are_summed_by_spelling(self, ingredient_factory):
        recipes = [
            _recipe(1, "A", ingredient_factory("spinach", 2, "handful", UnitType.VOLUME)),
            _recipe(2, "B", ingredient_factory("spinach", 1, "handful", UnitType.VOLUME)),
        ]
        entry = consolidate(recipes, {1, 2}, {2: 2}, UnitSystem.IMPERIAL)["spinach"]

        assert entry.display_quantity == 4
        assert entry.display_unit == "handful"
        assert entry.fl_oz is None

    def test_zero_amount_has_no_quantity(self, ingredient_factory):
        flour = ingredient_factory("flour", 0, "cups", UnitType.VOLUME)
        entry = consolidate([_recipe(1, "A", flour)], {1}, {}, UnitSystem.IMPERIAL)["flour"]

        assert entry.quantities == []
        assert entry.display_quantity is None
        assert entry.sources == ["A"]

    def test_zero_amount_does_not_hide_count(self, ingredient_factory):
        recipes = [
            _recipe(1, "A", ingredient_factory("egg", 0, "cup", UnitType.VOLUME)),
            _recipe(2, "B", ingredient_factory("egg", 2)),
        ]
        entry = consolidate(recipes, {1, 2}, {}, UnitSystem.IMPERIAL)["egg"]

        assert not entry.is_grouped
        assert (entry.display_quantity, entry.display_unit) == (2, "")

    def test_unmerged_unit_is_spelled_out(self, ingredient_factory):
        salt = ingredient_factory("salt", 2, "Tbsp.", UnitType.COUNT)
        entry = consolidate([_recipe(1, "A", salt)], {1}, {}, UnitSystem.IMPERIAL)["salt"]

        assert (entry.display_quantity, entry.display_unit) == (2, "tablespoon")

    def test_counts_are_summed(self, ingredient_factory):
        recipes = [
            _recipe(1, "A", ingredient_factory("eggs", 2)),
            _recipe(2, "B", ingredient_factory("egg", 1)),
        ]
        entry = consolidate(recipes, {1, 2}, {1: 3}, UnitSystem.IMPERIAL)["egg"]

        assert entry.display_quantity == 7
        assert entry.display_unit == ""
        assert entry.display_name == "eggs"
        assert entry.sources == ["A (×3)", "B"]

    def test_metric(self, pancakes_recipe):
        entry = consolidate([pancakes_recipe], {1}, {1: 1}, UnitSystem.METRIC)["flour"]
        assert entry.display_quantity == 480
        assert entry.display_unit == "ml"
        assert entry.fl_oz is None

    def test_combined_ingredient_is_already_in_base_units(self, ingredient_factory):
        butter = ingredient_factory("butter", 270, "ml", UnitType.VOLUME)
        entry = consolidate([_recipe(1, "A", butter)], {1}, {}, UnitSystem.IMPERIAL)["butter"]
        assert entry.display_quantity == pytest.approx(1.13)
        assert entry.display_unit == "cups"

    def test_same_input_same_output(self, pancakes_recipe, onion_recipes):
        recipes = [pancakes_recipe, *onion_recipes]
        first = consolidate(recipes, {1, 10, 11}, {1: 2}, UnitSystem.IMPERIAL)
        second = consolidate(recipes, {1, 10, 11}, {1: 2}, UnitSystem.IMPERIAL)
        assert first == second

    def test_no_active_recipes(self, pancakes_recipe):
        assert consolidate([pancakes_recipe], set(), {}, UnitSystem.IMPERIAL) == {}
