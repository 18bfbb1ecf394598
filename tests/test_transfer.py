"""Unit tests for recipe JSON import and export."""

import itertools
import json

import pytest

from recipeconsolidator.errors import RecipeValidationError
from recipeconsolidator.schemas import UnitType
from recipeconsolidator.transfer import (
    coerce_ingredient,
    dumps_recipes,
    export_recipes,
    import_recipes,
    is_importable,
    load_payload,
    recipe_from_import,
)


@pytest.fixture
def id_counter():
    return itertools.count(100).__next__


class TestLoadPayload:
    """Tests for decoding import payloads."""

    def test_invalid_json(self):
        with pytest.raises(RecipeValidationError, match="Invalid recipe file format"):
            load_payload("not json")

    def test_not_an_array(self):
        with pytest.raises(RecipeValidationError, match="expected a JSON array"):
            load_payload('{"name": "Toast"}')

    def test_decoded_list_passes_through(self):
        assert load_payload([{"name": "Toast"}]) == [{"name": "Toast"}]
        assert load_payload(b"[]") == []


class TestIsImportable:
    """Tests for the minimal recipe shape check."""

    def test_valid(self):
        assert is_importable({"name": "Toast", "ingredients": []})

    @pytest.mark.parametrize(
        "item",
        [
            {"name": "  ", "ingredients": []},
            {"name": "Toast"},
            {"name": "Toast", "ingredients": "2 bread"},
            {"ingredients": []},
            "Toast",
        ],
    )
    def test_invalid(self, item):
        assert not is_importable(item)


class TestCoerceIngredient:
    """Tests for turning imported ingredients into ParsedIngredient."""

    def test_string_is_parsed(self):
        ingredient = coerce_ingredient("2 cups flour")
        assert ingredient.quantity == 2
        assert ingredient.unit == "cups"
        assert ingredient.ingredient_name == "flour"

    def test_alias_field_and_inferred_unit_type(self):
        ingredient = coerce_ingredient({"ingredientName": "sugar", "unit": "cup", "quantity": 2})
        assert ingredient.ingredient_name == "sugar"
        assert ingredient.unit_type == UnitType.VOLUME

    def test_defaults(self):
        ingredient = coerce_ingredient({"name": "eggs"})
        assert ingredient.quantity == 1
        assert ingredient.unit is None
        assert ingredient.unit_type == UnitType.COUNT

    def test_full_stored_form(self):
        data = {
            "quantity": 270,
            "unit": "ml",
            "unitType": "volume",
            "ingredient": "butter",
            "originalLine": "1 c. + 2 tbsp. butter",
            "isCombined": True,
            "originalPairs": [{"quantity": 1, "unit": "c."}, {"quantity": 2, "unit": "tbsp."}],
        }
        ingredient = coerce_ingredient(data)
        assert ingredient.is_combined
        assert len(ingredient.original_pairs) == 2
        assert ingredient.to_export_dict() == data

    @pytest.mark.parametrize(
        "item",
        [{"ingredient": "x", "quantity": "abc"}, {"ingredient": "  "}, {"unit": "cup"}, 42],
    )
    def test_unusable(self, item):
        assert coerce_ingredient(item) is None


class TestImportRecipes:
    """Tests for import_recipes()."""

    def test_invalid_entries_are_dropped(self, id_counter):
        payload = json.dumps(
            [
                {"name": "Toast", "ingredients": ["2 slices bread"], "rating": 5},
                {"name": "", "ingredients": []},
                {"title": "Nope"},
            ]
        )
        recipes = import_recipes(payload, id_counter)

        assert [(r.id, r.name) for r in recipes] == [(100, "Toast")]
        assert recipes[0].ingredients[0].ingredient_name == "slices bread"

    def test_no_valid_recipes(self, id_counter):
        with pytest.raises(RecipeValidationError, match="No valid recipes found in file"):
            import_recipes("[]", id_counter)

    def test_original_text_is_reparsed(self):
        recipe = recipe_from_import(
            {"name": "Stew", "ingredients": [], "originalText": "1 lb beef\n2 carrots"}, 1
        )
        assert [i.ingredient_name for i in recipe.ingredients] == ["beef", "carrots"]

    @pytest.mark.parametrize("tags", [5, True, 1.5, {"kind": "dinner"}])
    def test_malformed_tags_are_dropped(self, tags, id_counter):
        [recipe] = import_recipes(
            [{"name": "Toast", "ingredients": ["1 cup flour"], "tags": tags}], id_counter
        )
        assert recipe.tags == []
        assert recipe.ingredients[0].ingredient_name == "flour"

    def test_single_tag_string(self):
        recipe = recipe_from_import(
            {"name": "Toast", "ingredients": [], "tags": "breakfast"}, 1
        )
        assert recipe.tags == ["breakfast"]

    def test_extra_fields(self):
        recipe = recipe_from_import(
            {
                "name": " Soup ",
                "ingredients": ["1 onion"],
                "tags": ["dinner", "dinner", "quick"],
                "about": "Warm",
                "instructions": ["Chop", 2],
                "author": "Sam",
                "sourceMetadata": {"site": "example"},
            },
            7,
        )
        assert recipe.name == "Soup"
        assert recipe.tags == ["dinner", "quick"]
        assert recipe.about == "Warm"
        assert recipe.instructions == ["Chop", "2"]
        assert recipe.source_metadata == {"site": "example", "author": "Sam"}


class TestExportRecipes:
    """Tests for export."""

    def test_export_can_be_imported_again(self, pancakes_recipe, id_counter):
        exported = export_recipes([pancakes_recipe])
        assert exported[0]["ingredients"][0] == {
            "quantity": 2.0,
            "unit": "cups",
            "unitType": "volume",
            "ingredient": "flour",
            "originalLine": "2 cups flour",
        }

        [reimported] = import_recipes(dumps_recipes([pancakes_recipe]), id_counter)
        assert reimported.name == pancakes_recipe.name
        assert reimported.ingredients == pancakes_recipe.ingredients
        assert reimported.original_text == pancakes_recipe.original_text
