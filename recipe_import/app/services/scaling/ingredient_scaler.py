from typing import List

from recipe_import.app.schemas.ingredient import ParsedIngredient, ScaledIngredient
from recipe_import.app.services.quantity_parser import format_scaled_quantity, parse_quantity_range
from recipe_import.app.services.scaling.yield_scaler import scale_quantity

SMALL_AMOUNT_THRESHOLD = 0.1
SMALL_AMOUNT_WARNING = "Very small amount"


def scale_ingredient(ingredient: ParsedIngredient, multiplier: float) -> ScaledIngredient:
    """Derive a scaled view of an ingredient; the original is left untouched.

    Ranges scale both ends ("2-3" x 2 -> "4-6").
    """
    parsed = parse_quantity_range(ingredient.quantity)
    if parsed is None:
        return ScaledIngredient(
            original=ingredient,
            scaled_quantity=None,
            display_quantity=ingredient.quantity or "",
            was_scaled=False,
        )
    low, high = parsed
    scaled_low = scale_quantity(float(low), multiplier)
    if low == high:
        scaled = scaled_low
        display = format_scaled_quantity(scaled_low)
    else:
        scaled_high = scale_quantity(float(high), multiplier)
        scaled = scale_quantity(float(low + high) / 2, multiplier)
        display = f"{format_scaled_quantity(scaled_low)}-{format_scaled_quantity(scaled_high)}"
    warning = SMALL_AMOUNT_WARNING if 0 < scaled < SMALL_AMOUNT_THRESHOLD else None
    return ScaledIngredient(
        original=ingredient,
        scaled_quantity=scaled,
        display_quantity=display,
        was_scaled=multiplier != 1,
        warning=warning,
    )


def scale_ingredients(ingredients: List[ParsedIngredient], multiplier: float) -> List[ScaledIngredient]:
    return [scale_ingredient(ingredient, multiplier) for ingredient in ingredients]
