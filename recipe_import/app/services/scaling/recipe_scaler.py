import logging
from typing import List, Optional

from recipe_import.app.schemas.ingredient import ParsedIngredient
from recipe_import.app.schemas.recipe import RecipeDraft
from recipe_import.app.schemas.scaling import ScaledRecipe, ScalingOptions, YieldValidationError
from recipe_import.app.services.ingredients.fallback_parser import parse_ingredient_string
from recipe_import.app.services.scaling.ingredient_scaler import scale_ingredients
from recipe_import.app.services.scaling.instruction_scaler import scale_instructions
from recipe_import.app.services.scaling.yield_scaler import calculate_multiplier, parse_yield, validate_yield

logger = logging.getLogger(__name__)


class InvalidTargetYield(Exception):
    def __init__(self, error: YieldValidationError):
        super().__init__(error.message)
        self.error = error


def _ingredients_for_scaling(recipe: RecipeDraft) -> List[ParsedIngredient]:
    if recipe.parsed_ingredients is not None:
        return list(recipe.parsed_ingredients)
    return [parse_ingredient_string(line) for line in recipe.recipe_ingredient]


def scale_recipe(
    recipe: RecipeDraft,
    target_yield: float,
    options: Optional[ScalingOptions] = None,
) -> ScaledRecipe:
    """Rescaled view of a recipe for a new serving count.

    Raises ``InvalidTargetYield`` when the target is outside the allowed range.
    """
    original_yield = parse_yield(recipe.recipe_yield)
    error = validate_yield(target_yield, original_yield)
    if error is not None:
        raise InvalidTargetYield(error)
    multiplier = calculate_multiplier(target_yield, original_yield)
    logger.info(
        "Scaling '%s' from %s to %s servings (x%s)",
        recipe.name[:50],
        original_yield,
        target_yield,
        multiplier,
    )
    scaled_ingredients = scale_ingredients(_ingredients_for_scaling(recipe), multiplier)
    scaled_instructions = scale_instructions(recipe.recipe_instructions, scaled_ingredients, options)
    warnings = [
        f"{item.original.ingredient_name}: {item.warning}" for item in scaled_ingredients if item.warning
    ]
    for instruction in scaled_instructions:
        warnings.extend(instruction.warnings)
    return ScaledRecipe(
        recipe=recipe,
        original_yield=original_yield,
        target_yield=target_yield,
        multiplier=multiplier,
        ingredients=scaled_ingredients,
        instructions=scaled_instructions,
        warnings=warnings,
    )
