from decimal import Decimal

import pytest

from recipe_import.app.services.quantity_parser import (
    decimal_to_fraction,
    format_scaled_quantity,
    parse_quantity_display,
    parse_quantity_range,
)


def test_parse_quantity_valid():
    assert parse_quantity_display("1") == Decimal("1")
    assert parse_quantity_display("0.5") == Decimal("0.5")
    assert parse_quantity_display("1/2") == Decimal("0.5")
    assert parse_quantity_display("1 1/2") == Decimal("1.5")
    assert parse_quantity_display("½") == Decimal("0.5")


def test_parse_quantity_invalid():
    assert parse_quantity_display(None) is None
    assert parse_quantity_display("") is None
    assert parse_quantity_display("   ") is None
    assert parse_quantity_display("1/0") is None
    assert parse_quantity_display("abc") is None
    assert parse_quantity_display("Infinity") is None


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("2-3", (Decimal("2"), Decimal("3"))),
        ("2 to 3", (Decimal("2"), Decimal("3"))),
        ("1/2 - 1", (Decimal("0.5"), Decimal("1"))),
        ("4", (Decimal("4"), Decimal("4"))),
        ("a few", None),
    ],
)
def test_parse_quantity_range(raw, expected):
    assert parse_quantity_range(raw) == expected


def test_range_display_value_is_midpoint():
    assert parse_quantity_display("2-3") == Decimal("2.5")


@pytest.mark.parametrize(
    "value, expected",
    [
        (2.0, "2"),
        (1.5, "1 1/2"),
        (0.25, "1/4"),
        (0.333, "1/3"),
        (0.67, "2/3"),
        (2.125, "2 1/8"),
        (2.995, "3"),
        (0.7, "0.70"),
        (0.06, "0.06"),
    ],
)
def test_decimal_to_fraction(value, expected):
    assert decimal_to_fraction(value) == expected


def test_format_scaled_quantity():
    assert format_scaled_quantity(None) == ""
    assert format_scaled_quantity(4.0) == "4"
