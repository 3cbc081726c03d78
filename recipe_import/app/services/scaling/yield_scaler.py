import logging
import math
import re
from typing import Optional, Union

from recipe_import.app.schemas.scaling import YieldErrorType, YieldValidationError

logger = logging.getLogger(__name__)

DEFAULT_YIELD = 1
MIN_YIELD_FACTOR = 0.5
MAX_YIELD_FACTOR = 10

YIELD_RANGE_RE = re.compile(r"(\d+)\s*(?:-|–|to)\s*(\d+)")
YIELD_NUMBER_RE = re.compile(r"\d+")

Number = Union[int, float]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def parse_yield(value) -> Number:
    """Serving count from a recipe yield; never less than 1 when defaulted.

    "6-8 servings" -> 7, "Serves 4" -> 4, "a dozen" -> 1.
    """
    if value is None or isinstance(value, bool):
        return DEFAULT_YIELD
    if isinstance(value, (int, float)):
        if not math.isfinite(value) or value <= 0:
            return DEFAULT_YIELD
        return value
    text = str(value)
    match = YIELD_RANGE_RE.search(text)
    if match:
        midpoint = _round_half_up((int(match.group(1)) + int(match.group(2))) / 2)
        return midpoint if midpoint > 0 else DEFAULT_YIELD
    match = YIELD_NUMBER_RE.search(text)
    if match and int(match.group()) > 0:
        return int(match.group())
    return DEFAULT_YIELD


def calculate_multiplier(current: Number, original: Number) -> float:
    if original == 0:
        return 1.0
    return round(current / original, 4)


def yield_bounds(original: Number) -> tuple[float, float]:
    return original * MIN_YIELD_FACTOR, original * MAX_YIELD_FACTOR


def validate_yield(value, original: Number) -> Optional[YieldValidationError]:
    """Check a target yield against [original x 0.5, original x 10]."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        number = math.nan
    if not math.isfinite(number):
        return YieldValidationError(type=YieldErrorType.INVALID_NUMBER, message="Please enter a valid number")
    minimum, maximum = yield_bounds(original)
    if number < minimum:
        return YieldValidationError(
            type=YieldErrorType.BELOW_MINIMUM,
            message=f"Minimum yield is {minimum:.1f} servings",
            suggested_value=minimum,
        )
    if number > maximum:
        return YieldValidationError(
            type=YieldErrorType.ABOVE_MAXIMUM,
            message=f"Maximum yield is {maximum:.0f} servings",
            suggested_value=maximum,
        )
    return None


def scale_quantity(quantity: Optional[float], multiplier: float) -> Optional[float]:
    """Multiply and round to 2 decimals; a missing quantity stays missing."""
    if quantity is None:
        return None
    return math.floor(quantity * multiplier * 100 + 0.5) / 100
