"""Deterministic ingredient line parsing.

Lines are read as ``<quantity> <unit>? [of|with]? <name>[, <notes>]``. Results
are always flagged for manual review because they are pattern-guessed.
"""

import logging
import re
from typing import Optional, Tuple

from recipe_import.app.schemas.ingredient import ParsedIngredient
from recipe_import.app.services.ingredients.unit_conversion import convert_to_metric
from recipe_import.app.services.jsonld_parsing.parsing_utils import (
    canonical_unit,
    clean_text,
    normalize_fraction_display,
)

logger = logging.getLogger(__name__)

FALLBACK_CONFIDENCE = 0.5
MANUAL_CONFIDENCE = 1.0
DEFAULT_UNIT = "each"

QUANTITY_PATTERN = r"\d+\s+\d+/\d+|\d+/\d+|\d*\.\d+|\d+"
PREPOSITION_RE = re.compile(r"^(?:of|with)\s+", re.IGNORECASE)


def build_quantity_pattern(quantity_pattern: str = QUANTITY_PATTERN) -> re.Pattern:
    """Leading quantity (optionally a range) followed by the rest of the line."""
    return re.compile(
        rf"^(?P<qty>(?:{quantity_pattern})(?:\s*(?:-|to)\s*(?:{quantity_pattern}))?)(?![\d/.])\s*(?P<rest>.*)$",
        re.IGNORECASE,
    )


QUANTITY_RE = build_quantity_pattern()


def split_preparation_notes(text: str) -> Tuple[str, Optional[str]]:
    """Split "onion, finely chopped" into ("onion", "finely chopped")."""
    main, sep, notes = text.partition(",")
    if not sep:
        return text.strip(), None
    return main.strip(), clean_text(notes) or None


def take_unit(text: str) -> Tuple[Optional[str], str]:
    """Pop a leading unit token (one or two words) if something follows it."""
    tokens = text.split()
    for size in (2, 1):
        if len(tokens) > size:
            unit = canonical_unit(" ".join(tokens[:size]))
            if unit:
                return unit, " ".join(tokens[size:])
    return None, text


def _normalize_quantity(raw: str) -> str:
    return re.sub(r"\s*-\s*", "-", clean_text(raw))


def parse_ingredient_string(text: str) -> ParsedIngredient:
    """Pattern-based decomposition of one ingredient line."""
    line = clean_text(normalize_fraction_display((text or "").replace("*", "")) or "")
    main, notes = split_preparation_notes(line)

    quantity: Optional[str] = None
    rest = main
    match = QUANTITY_RE.match(main)
    if match and match.group("rest"):
        quantity = _normalize_quantity(match.group("qty"))
        rest = match.group("rest")

    unit, rest = take_unit(rest)
    if unit is None and quantity is None:
        # "a pinch of salt"
        tokens = rest.split()
        if len(tokens) > 2 and tokens[0].lower() in ("a", "an"):
            article_unit, article_rest = take_unit(" ".join(tokens[1:]))
            if article_unit:
                quantity, unit, rest = "1", article_unit, article_rest
    if unit is not None or quantity is not None:
        rest = PREPOSITION_RE.sub("", rest, count=1)

    name = rest.strip() or main
    unit = unit or DEFAULT_UNIT
    metric_quantity, metric_unit = convert_to_metric(quantity, unit)
    parsed = ParsedIngredient(
        original_text=text,
        quantity=quantity,
        unit=unit,
        ingredient_name=name,
        preparation_notes=notes,
        metric_quantity=metric_quantity,
        metric_unit=metric_unit,
        confidence=FALLBACK_CONFIDENCE,
        requires_manual_review=True,
        parsing_method="manual",
    )
    logger.debug(
        "Fallback parsed '%s' -> qty='%s', unit='%s', name='%s'",
        (text or "")[:50],
        quantity,
        unit,
        name[:30],
    )
    return parsed


def create_manual_parsed_ingredient(
    original_text: str,
    ingredient_name: str,
    quantity: Optional[str] = None,
    unit: Optional[str] = None,
    preparation_notes: Optional[str] = None,
) -> ParsedIngredient:
    """Ingredient authored by a person; trusted as-is."""
    normalized_unit = canonical_unit(unit) or unit
    metric_quantity, metric_unit = convert_to_metric(quantity, normalized_unit)
    return ParsedIngredient(
        original_text=original_text,
        quantity=quantity,
        unit=normalized_unit,
        ingredient_name=ingredient_name.strip(),
        preparation_notes=preparation_notes,
        metric_quantity=metric_quantity,
        metric_unit=metric_unit,
        confidence=MANUAL_CONFIDENCE,
        requires_manual_review=False,
        parsing_method="manual",
    )
