import pytest

from recipe_import.app.services.ingredients.fallback_parser import (
    create_manual_parsed_ingredient,
    parse_ingredient_string,
)
from recipe_import.app.services.ingredients.formatter import format_ingredient
from recipe_import.app.services.ingredients.ingredient_parser import validate_parsed_ingredient


@pytest.mark.parametrize(
    "line, quantity, unit, name, notes",
    [
        ("2 cups flour, sifted", "2", "cup", "flour", "sifted"),
        ("1 1/2 cups sugar", "1 1/2", "cup", "sugar", None),
        ("½ cup milk", "1/2", "cup", "milk", None),
        ("3 tablespoons olive oil", "3", "tbsp", "olive oil", None),
        ("2-3 cloves garlic, minced", "2-3", "clove", "garlic", "minced"),
        ("1 cup of milk", "1", "cup", "milk", None),
        ("**1 cup** butter", "1", "cup", "butter", None),
        ("a pinch of salt", "1", "pinch", "salt", None),
        ("2 large eggs", "2", "each", "large eggs", None),
        ("salt to taste", None, "each", "salt to taste", None),
        ("0.5 kg potatoes, peeled and diced", "0.5", "kg", "potatoes", "peeled and diced"),
    ],
)
def test_parse_ingredient_string(line, quantity, unit, name, notes):
    parsed = parse_ingredient_string(line)
    assert parsed.original_text == line
    assert parsed.quantity == quantity
    assert parsed.unit == unit
    assert parsed.ingredient_name == name
    assert parsed.preparation_notes == notes


def test_fallback_results_need_review():
    parsed = parse_ingredient_string("2 cups flour")
    assert parsed.parsing_method == "manual"
    assert parsed.confidence == 0.5
    assert parsed.requires_manual_review is True
    assert validate_parsed_ingredient(parsed)


@pytest.mark.parametrize(
    "line, metric_quantity, metric_unit",
    [
        ("8 oz cream cheese, softened", "225", "g"),
        ("1 pound ground beef", "450", "g"),
        ("500 g flour", "500", "g"),
        ("2 cups flour", None, None),
        ("3 cloves garlic", None, None),
    ],
)
def test_metric_conversion(line, metric_quantity, metric_unit):
    parsed = parse_ingredient_string(line)
    assert parsed.metric_quantity == metric_quantity
    assert parsed.metric_unit == metric_unit


def test_manual_ingredient_is_trusted():
    manual = create_manual_parsed_ingredient("2 cups flour", "flour", quantity="2", unit="cups")
    assert manual.unit == "cup"
    assert manual.confidence == 1.0
    assert manual.requires_manual_review is False
    assert manual.parsing_method == "manual"


def test_parsed_line_formats_back():
    assert format_ingredient(parse_ingredient_string("2 cups flour, sifted")) == "2 cup flour, sifted"


def test_validate_parsed_ingredient_rejects_short_name():
    manual = create_manual_parsed_ingredient("a", "a")
    assert not validate_parsed_ingredient(manual)
