"""Ingredient parsing behind a single batch interface.

A decomposer takes a batch of ingredient lines and returns one
``ParsedIngredient`` per line, in order. The AI-backed decomposer calls the
LLM proxy; the fallback decomposer runs the deterministic parser and is used
when no proxy is configured.
"""

import logging
from functools import partial
from typing import Awaitable, Callable, List, Optional

from recipe_import.app.core.config import Settings, get_settings
from recipe_import.app.schemas.ingredient import ParsedIngredient, RawDecomposition
from recipe_import.app.services import llm_client
from recipe_import.app.services.ingredients.fallback_parser import parse_ingredient_string
from recipe_import.app.services.jsonld_parsing.parsing_utils import (
    canonical_unit,
    clean_text,
    normalize_fraction_display,
)

logger = logging.getLogger(__name__)

DecomposeBatch = Callable[[List[str]], Awaitable[List[ParsedIngredient]]]
RawDecompose = Callable[[List[str]], Awaitable[List[RawDecomposition]]]


def validate_parsed_ingredient(ingredient: ParsedIngredient) -> bool:
    """Well-formedness check used before trusting a decomposition."""
    if not ingredient.original_text or not ingredient.original_text.strip():
        return False
    if len(ingredient.ingredient_name.strip()) < 2:
        return False
    if not 0 <= ingredient.confidence <= 1:
        return False
    if ingredient.metric_quantity and not ingredient.metric_unit:
        return False
    return True


def from_raw_decomposition(
    line: str,
    raw: RawDecomposition,
    threshold: float,
    default_confidence: float,
) -> ParsedIngredient:
    confidence = raw.confidence if raw.confidence is not None else default_confidence
    confidence = min(max(confidence, 0.0), 1.0)
    metric_quantity, metric_unit = raw.metric_quantity, raw.metric_unit
    if not (metric_quantity and metric_unit):
        metric_quantity, metric_unit = None, None
    name = clean_text(raw.ingredient_name)
    raw_unit = clean_text(raw.unit or "")
    unit = canonical_unit(raw_unit) if raw_unit else None
    if raw_unit and unit is None:
        # Words outside the unit vocabulary ("large", "handful") read as part of the name
        unit = "each"
        if name and not name.lower().startswith(raw_unit.lower()):
            name = f"{raw_unit} {name}"
    if not name:
        # The service gave nothing usable; keep the line visible for review
        name = clean_text(line)
        confidence = min(confidence, default_confidence)
    return ParsedIngredient(
        original_text=line,
        quantity=normalize_fraction_display(raw.quantity),
        unit=unit,
        ingredient_name=name,
        preparation_notes=raw.preparation_notes,
        metric_quantity=metric_quantity,
        metric_unit=canonical_unit(metric_unit) or metric_unit,
        confidence=confidence,
        requires_manual_review=confidence < threshold,
        parsing_method="ai",
    )


def make_ai_decomposer(
    decompose: Optional[RawDecompose] = None,
    settings: Optional[Settings] = None,
) -> DecomposeBatch:
    """Wrap a raw decomposition call into the ParsedIngredient batch contract."""
    settings = settings or get_settings()
    decompose = decompose or partial(llm_client.decompose_ingredients, settings=settings)

    async def decompose_batch(lines: List[str]) -> List[ParsedIngredient]:
        raw_items = await decompose(lines)
        if len(raw_items) != len(lines):
            raise llm_client.DecompositionError(
                f"Decomposition returned {len(raw_items)} items for {len(lines)} lines"
            )
        parsed = [
            from_raw_decomposition(
                line,
                raw,
                settings.ingredient_confidence_threshold,
                settings.ingredient_default_confidence,
            )
            for line, raw in zip(lines, raw_items)
        ]
        for idx, ingredient in enumerate(parsed):
            if not validate_parsed_ingredient(ingredient):
                logger.warning(
                    "Decomposition of ingredient %d ('%s') is malformed; using the fallback parser",
                    idx,
                    ingredient.original_text[:50],
                )
                ingredient = parse_ingredient_string(ingredient.original_text)
                parsed[idx] = ingredient
            logger.debug(
                "Ingredient %d: '%s' -> qty='%s', unit='%s', name='%s', confidence=%.2f",
                idx,
                ingredient.original_text[:50],
                ingredient.quantity,
                ingredient.unit,
                ingredient.ingredient_name[:30],
                ingredient.confidence,
            )
        return parsed

    return decompose_batch


async def fallback_decompose_batch(lines: List[str]) -> List[ParsedIngredient]:
    return [parse_ingredient_string(line) for line in lines]


def get_ingredient_decomposer(settings: Optional[Settings] = None) -> DecomposeBatch:
    """AI-backed decomposer when the LLM proxy is configured, else the fallback."""
    settings = settings or get_settings()
    if settings.llm_base_url:
        return make_ai_decomposer(settings=settings)
    logger.info("LLM_BASE_URL not set; ingredient lines will use the fallback parser")
    return fallback_decompose_batch
