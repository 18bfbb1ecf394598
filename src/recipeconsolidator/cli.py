"""Command-line front end: parse recipe files and print shopping lists."""

import argparse
import json
import sys
from pathlib import Path

from recipeconsolidator.errors import RecipeConsolidatorError
from recipeconsolidator.logging_config import configure_logging, get_logger
from recipeconsolidator.normalize.formatting import format_quantity
from recipeconsolidator.parse.lines import parse_recipe_text
from recipeconsolidator.plan.shopping_list import render_plain_text
from recipeconsolidator.schemas import ParsedIngredient, ShoppingListSortOrder, UnitSystem
from recipeconsolidator.state import RecipeBook
from recipeconsolidator.storage import MemoryStore, StateRepository

logger = get_logger(__name__)


def describe_ingredient(ingredient: ParsedIngredient) -> str:
    """One readable line per parsed ingredient."""
    amount = f"{format_quantity(ingredient.quantity)} {ingredient.unit or ''}".strip()
    line = f"{amount} {ingredient.ingredient_name}"
    if ingredient.is_combined:
        pairs = " + ".join(
            f"{format_quantity(pair.quantity)} {pair.unit or ''}".strip()
            for pair in ingredient.original_pairs
        )
        line += f" [{pairs}]"
    if ingredient.notes:
        line += f" ({ingredient.notes})"
    return line


def cmd_parse(args: argparse.Namespace) -> int:
    text = args.file.read_text(encoding="utf-8")
    ingredients = parse_recipe_text(text)
    if args.json:
        print(json.dumps([i.to_export_dict() for i in ingredients], indent=2, ensure_ascii=False))
    else:
        for ingredient in ingredients:
            print(describe_ingredient(ingredient))
    logger.info(f"Parsed {len(ingredients)} ingredients from {args.file}")
    return 0 if ingredients else 1


def cmd_shopping_list(args: argparse.Namespace) -> int:
    multipliers = args.multiplier or []
    if len(multipliers) > len(args.files):
        print("Error: more --multiplier values than recipe files", file=sys.stderr)
        return 2

    # Ad-hoc book: nothing is persisted
    book = RecipeBook(StateRepository(MemoryStore(), key_prefix=""))
    book.set_unit_system(UnitSystem.METRIC if args.metric else UnitSystem.IMPERIAL)
    book.set_shopping_list_sort(args.sort)

    for index, path in enumerate(args.files):
        recipe = book.add_recipe(path.read_text(encoding="utf-8"), name=path.stem)
        if index < len(multipliers):
            book.set_recipe_multiplier(recipe.id, multipliers[index])

    text = render_plain_text(book.shopping_list())
    if args.output:
        args.output.write_text(text, encoding="utf-8")
        print(f"Saved to {args.output}")
    else:
        print(text, end="")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="recipeconsolidator",
        description="Parse recipe text and consolidate ingredients into a shopping list",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_cmd = subparsers.add_parser(
        "parse", help="Print the ingredients parsed from a recipe file"
    )
    parse_cmd.add_argument("file", type=Path, help="Plain-text recipe file")
    parse_cmd.add_argument("--json", action="store_true", help="Print JSON instead of text")
    parse_cmd.set_defaults(func=cmd_parse)

    list_cmd = subparsers.add_parser(
        "shopping-list", help="Consolidate recipe files into a shopping list"
    )
    list_cmd.add_argument("files", type=Path, nargs="+", help="Plain-text recipe files")
    list_cmd.add_argument(
        "--multiplier",
        type=float,
        action="append",
        help="Multiplier for each file, in order (repeatable; default 1)",
    )
    list_cmd.add_argument("--metric", action="store_true", help="Show metric units")
    list_cmd.add_argument(
        "--sort",
        choices=[order.value for order in ShoppingListSortOrder],
        default=ShoppingListSortOrder.ALPHABETICAL.value,
        help="Shopping list order",
    )
    list_cmd.add_argument("--output", type=Path, help="Write to a file instead of stdout")
    list_cmd.set_defaults(func=cmd_shopping_list)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``recipeconsolidator`` command."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level, json_format=False)

    try:
        return args.func(args)
    except RecipeConsolidatorError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
