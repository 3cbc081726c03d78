"""Shared vocabularies for recipe text parsing."""

FRACTION_MAP = {
    "¼": "1/4",
    "½": "1/2",
    "¾": "3/4",
    "⅐": "1/7",
    "⅑": "1/9",
    "⅒": "1/10",
    "⅓": "1/3",
    "⅔": "2/3",
    "⅕": "1/5",
    "⅖": "2/5",
    "⅗": "3/5",
    "⅘": "4/5",
    "⅙": "1/6",
    "⅚": "5/6",
    "⅛": "1/8",
    "⅜": "3/8",
    "⅝": "5/8",
    "⅞": "7/8",
}

FRACTION_CHARS = "".join(FRACTION_MAP.keys())

VOLUME_IMPERIAL_UNITS = ("cup", "tbsp", "tsp", "pint", "quart", "gallon")
WEIGHT_IMPERIAL_UNITS = ("oz", "lb")
VOLUME_METRIC_UNITS = ("ml", "l")
WEIGHT_METRIC_UNITS = ("g", "kg")
NON_CONVERTIBLE_UNITS = ("pinch", "dash", "clove", "whole", "can", "package", "stick", "each")

CANONICAL_UNITS = (
    VOLUME_IMPERIAL_UNITS
    + WEIGHT_IMPERIAL_UNITS
    + VOLUME_METRIC_UNITS
    + WEIGHT_METRIC_UNITS
    + NON_CONVERTIBLE_UNITS
)

METRIC_UNITS = frozenset(VOLUME_METRIC_UNITS + WEIGHT_METRIC_UNITS)

# Grams per unit
GRAMS_PER_UNIT = {"oz": 28.3495, "lb": 453.592}

# Lowercase spellings mapped to their canonical unit
UNIT_ALIASES = {
    "cups": "cup",
    "c": "cup",
    "tablespoon": "tbsp",
    "tablespoons": "tbsp",
    "tbs": "tbsp",
    "tbsps": "tbsp",
    "teaspoon": "tsp",
    "teaspoons": "tsp",
    "tsps": "tsp",
    "pints": "pint",
    "pt": "pint",
    "quarts": "quart",
    "qt": "quart",
    "gallons": "gallon",
    "gal": "gallon",
    "fl oz": "oz",
    "fluid ounce": "oz",
    "fluid ounces": "oz",
    "floz": "oz",
    "ounce": "oz",
    "ounces": "oz",
    "pound": "lb",
    "pounds": "lb",
    "lbs": "lb",
    "milliliter": "ml",
    "milliliters": "ml",
    "millilitre": "ml",
    "millilitres": "ml",
    "liter": "l",
    "liters": "l",
    "litre": "l",
    "litres": "l",
    "gram": "g",
    "grams": "g",
    "kilogram": "kg",
    "kilograms": "kg",
    "kilo": "kg",
    "kilos": "kg",
    "cloves": "clove",
    "dashes": "dash",
    "pinches": "pinch",
    "cans": "can",
    "sticks": "stick",
    "packages": "package",
    "pkgs": "package",
    "pkg": "package",
    "knob": "whole",
    "knobs": "whole",
    "sprig": "whole",
    "sprigs": "whole",
    "bunch": "whole",
    "bunches": "whole",
    "head": "whole",
    "heads": "whole",
    "stalk": "whole",
    "stalks": "whole",
    "leaf": "whole",
    "leaves": "whole",
    "slice": "whole",
    "slices": "whole",
    "piece": "whole",
    "pieces": "whole",
}

# Mass nouns that keep their form regardless of quantity
UNCOUNTABLE_INGREDIENTS = frozenset(
    {"flour", "sugar", "salt", "pepper", "butter", "milk", "water", "rice", "cheese", "bread"}
)

# Units recognised inside free-text instructions, longest spellings first
INSTRUCTION_UNITS = (
    "tablespoons",
    "tablespoon",
    "teaspoons",
    "teaspoon",
    "pounds",
    "pound",
    "cups",
    "cup",
    "tbsp",
    "tsp",
    "kg",
    "ml",
    "oz",
    "lb",
    "g",
    "l",
)
