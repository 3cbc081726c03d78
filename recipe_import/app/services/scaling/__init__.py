"""Recipe scaling: yields, ingredient quantities and instruction text."""

from recipe_import.app.services.scaling.ingredient_scaler import scale_ingredient, scale_ingredients
from recipe_import.app.services.scaling.instruction_scaler import scale_instruction, scale_instructions
from recipe_import.app.services.scaling.recipe_scaler import InvalidTargetYield, scale_recipe
from recipe_import.app.services.scaling.yield_scaler import (
    calculate_multiplier,
    parse_yield,
    scale_quantity,
    validate_yield,
)

__all__ = [
    "InvalidTargetYield",
    "calculate_multiplier",
    "parse_yield",
    "scale_ingredient",
    "scale_ingredients",
    "scale_instruction",
    "scale_instructions",
    "scale_quantity",
    "scale_recipe",
    "validate_yield",
]
