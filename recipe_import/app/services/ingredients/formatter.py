"""Rendering parsed ingredients back to text."""

from typing import Dict, List

from recipe_import.app.schemas.ingredient import ParsedIngredient
from recipe_import.app.services.ingredients.fallback_parser import DEFAULT_UNIT

HIGH_CONFIDENCE = 0.85
MEDIUM_CONFIDENCE = 0.7


def format_ingredient(
    ingredient: ParsedIngredient,
    include_metric: bool = True,
    include_preparation: bool = True,
) -> str:
    """Rebuild an ingredient line, e.g. "2 cup (240g) flour, sifted"."""
    parts: List[str] = []
    if ingredient.quantity:
        parts.append(ingredient.quantity)
    # A bare count implies "each"
    if ingredient.unit and ingredient.unit != DEFAULT_UNIT:
        parts.append(ingredient.unit)
    if include_metric and has_metric_conversion(ingredient):
        parts.append(f"({ingredient.metric_quantity}{ingredient.metric_unit})")
    parts.append(ingredient.ingredient_name)
    formatted = " ".join(parts)
    if include_preparation and ingredient.preparation_notes:
        formatted += f", {ingredient.preparation_notes}"
    return formatted


def format_ingredient_for_display(ingredient: ParsedIngredient) -> str:
    return format_ingredient(ingredient, include_metric=True, include_preparation=True)


def format_ingredient_for_storage(ingredient: ParsedIngredient) -> str:
    # Pattern-guessed parses keep the text the user actually wrote
    if ingredient.parsing_method == "manual" and ingredient.requires_manual_review:
        return ingredient.original_text
    return format_ingredient(ingredient, include_metric=False, include_preparation=True)


def has_metric_conversion(ingredient: ParsedIngredient) -> bool:
    return bool(ingredient.metric_quantity and ingredient.metric_unit)


def format_metric_conversion(ingredient: ParsedIngredient) -> str:
    if not has_metric_conversion(ingredient):
        return ""
    return f"{ingredient.metric_quantity}{ingredient.metric_unit}"


def format_confidence_label(confidence: float) -> str:
    if confidence >= HIGH_CONFIDENCE:
        return "High"
    if confidence >= MEDIUM_CONFIDENCE:
        return "Medium"
    return "Low"


def group_ingredients_by_method(ingredients: List[ParsedIngredient]) -> Dict[str, List[ParsedIngredient]]:
    groups: Dict[str, List[ParsedIngredient]] = {"ai": [], "manual": []}
    for ingredient in ingredients:
        groups[ingredient.parsing_method].append(ingredient)
    return groups


def get_ingredients_needing_review(ingredients: List[ParsedIngredient]) -> List[ParsedIngredient]:
    return [ingredient for ingredient in ingredients if ingredient.requires_manual_review]
