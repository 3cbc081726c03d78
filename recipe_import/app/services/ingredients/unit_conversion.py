import math
from typing import Optional, Tuple

from recipe_import.app.services.jsonld_parsing.constants import GRAMS_PER_UNIT, METRIC_UNITS
from recipe_import.app.services.jsonld_parsing.parsing_utils import canonical_unit
from recipe_import.app.services.quantity_parser import parse_quantity_display


def _round_to(value: float, step: int) -> int:
    return int(math.floor(value / step + 0.5) * step)


def smart_round(value: float) -> int:
    """Round grams to practical kitchen values (227 -> 225, 454 -> 450)."""
    if value < 10:
        return _round_to(value, 1)
    if value < 50:
        return _round_to(value, 5)
    if value < 100:
        return _round_to(value, 10)
    if value < 500:
        return _round_to(value, 25)
    if value < 1000:
        return _round_to(value, 50)
    return _round_to(value, 100)


def convert_to_metric(quantity: Optional[str], unit: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """Metric equivalent of a quantity, or (None, None) when not convertible.

    Metric quantities are copied, imperial weights become grams, and volume
    or count units are left alone.
    """
    if not quantity or not unit:
        return None, None
    normalized = canonical_unit(unit)
    if normalized in METRIC_UNITS:
        return quantity, normalized
    if normalized not in GRAMS_PER_UNIT:
        return None, None
    amount = parse_quantity_display(quantity)
    if amount is None or amount <= 0:
        return None, None
    grams = float(amount) * GRAMS_PER_UNIT[normalized]
    return str(smart_round(grams)), "g"
