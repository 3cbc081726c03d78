"""Structured ingredient parsing.

Ingredient lines are decomposed in bounded, cancellable batches by either the
LLM-backed decomposer or the deterministic fallback parser.
"""

from recipe_import.app.services.ingredients.batch_coordinator import (
    IngredientParsingCancelled,
    calculate_optimal_batch_size,
    format_time_remaining,
    merge_with_fallback,
    parse_ingredients_in_batches,
)
from recipe_import.app.services.ingredients.fallback_parser import (
    create_manual_parsed_ingredient,
    parse_ingredient_string,
)
from recipe_import.app.services.ingredients.formatter import (
    format_ingredient,
    format_ingredient_for_display,
    format_ingredient_for_storage,
    get_ingredients_needing_review,
)
from recipe_import.app.services.ingredients.ingredient_parser import (
    fallback_decompose_batch,
    from_raw_decomposition,
    get_ingredient_decomposer,
    make_ai_decomposer,
)
from recipe_import.app.services.ingredients.unit_conversion import convert_to_metric, smart_round

__all__ = [
    # Batching
    "IngredientParsingCancelled",
    "calculate_optimal_batch_size",
    "format_time_remaining",
    "merge_with_fallback",
    "parse_ingredients_in_batches",
    # Decomposers
    "fallback_decompose_batch",
    "from_raw_decomposition",
    "get_ingredient_decomposer",
    "make_ai_decomposer",
    # Fallback parsing
    "create_manual_parsed_ingredient",
    "parse_ingredient_string",
    # Formatting
    "format_ingredient",
    "format_ingredient_for_display",
    "format_ingredient_for_storage",
    "get_ingredients_needing_review",
    # Units
    "convert_to_metric",
    "smart_round",
]
