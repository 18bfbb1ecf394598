"""Tests for the command-line interface."""

import json

import pytest

from recipeconsolidator.cli import build_parser, describe_ingredient, main
from recipeconsolidator.parse.lines import parse_line


@pytest.fixture
def recipe_files(tmp_path, pancake_text, stew_text):
    pancakes = tmp_path / "pancakes.txt"
    pancakes.write_text(pancake_text, encoding="utf-8")
    stew = tmp_path / "stew.txt"
    stew.write_text(stew_text, encoding="utf-8")
    return pancakes, stew


class TestDescribeIngredient:
    """Tests for the one-line ingredient description."""

    def test_simple(self):
        assert describe_ingredient(parse_line("1 lb beef")) == "1 lb beef"

    def test_notes(self):
        assert describe_ingredient(parse_line("1 onion, chopped")) == "1 onion (chopped)"

    def test_combined(self):
        line = describe_ingredient(parse_line("1 c. + 2 tbsp. butter"))
        assert line == "270 ml butter [1 c. + 2 tbsp.]"


class TestParseCommand:
    """Tests for `recipeconsolidator parse`."""

    def test_text_output(self, recipe_files, capsys):
        _, stew = recipe_files
        assert main(["parse", str(stew)]) == 0

        out = capsys.readouterr().out.splitlines()
        assert out[0] == "1 onion (chopped)"
        assert out[1] == "1 lb beef"

    def test_json_output(self, recipe_files, capsys):
        _, stew = recipe_files
        assert main(["parse", str(stew), "--json"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert len(data) == 4
        assert data[1]["unitType"] == "weight"

    def test_no_ingredients(self, tmp_path):
        path = tmp_path / "empty.txt"
        path.write_text("Ingredients:\n", encoding="utf-8")
        assert main(["parse", str(path)]) == 1

    def test_missing_file(self, tmp_path, capsys):
        assert main(["parse", str(tmp_path / "missing.txt")]) == 1
        assert capsys.readouterr().err.startswith("Error:")


class TestShoppingListCommand:
    """Tests for `recipeconsolidator shopping-list`."""

    def test_consolidated_output(self, recipe_files, capsys):
        pancakes, stew = recipe_files
        assert main(["shopping-list", str(pancakes), str(stew), "--multiplier", "2"]) == 0

        out = capsys.readouterr().out
        assert "Based on recipes: pancakes, stew" in out
        assert "□ 4 cups (32 fl oz) all-purpose flour" in out
        assert "□ 1 pound beef" in out
        assert "Total items: 8" in out

    def test_metric_and_category(self, recipe_files, capsys):
        pancakes, _ = recipe_files
        assert main(["shopping-list", str(pancakes), "--metric", "--sort", "category"]) == 0

        out = capsys.readouterr().out
        assert "□ 480 ml all-purpose flour" in out
        assert "\nGRAINS & BREAD\n" in out

    def test_output_file(self, recipe_files, tmp_path, capsys):
        pancakes, _ = recipe_files
        output = tmp_path / "list.txt"
        assert main(["shopping-list", str(pancakes), "--output", str(output)]) == 0

        assert output.read_text(encoding="utf-8").startswith("SHOPPING LIST")
        assert "Saved to" in capsys.readouterr().out

    def test_too_many_multipliers(self, recipe_files):
        pancakes, _ = recipe_files
        argv = ["shopping-list", str(pancakes), "--multiplier", "2", "--multiplier", "3"]
        assert main(argv) == 2

    def test_recipe_without_ingredients(self, tmp_path, capsys):
        path = tmp_path / "empty.txt"
        path.write_text("Instructions\n", encoding="utf-8")
        assert main(["shopping-list", str(path)]) == 1
        assert "No ingredients found" in capsys.readouterr().err


class TestBuildParser:
    """Tests for argument parsing."""

    def test_subcommand_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_defaults(self, tmp_path):
        args = build_parser().parse_args(["shopping-list", str(tmp_path / "a.txt")])
        assert args.sort == "alphabetical"
        assert args.metric is False
        assert args.multiplier is None
