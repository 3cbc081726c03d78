import re
from decimal import Decimal, InvalidOperation
from typing import Optional, Tuple

from recipe_import.app.services.jsonld_parsing.parsing_utils import normalize_fraction_display

RANGE_RE = re.compile(r"^(.+?)\s*(?:-|–|to)\s*(.+)$")

# Display fractions recognised when rendering decimals
COMMON_FRACTIONS = (
    (Decimal(1) / 8, "1/8"),
    (Decimal(1) / 4, "1/4"),
    (Decimal(1) / 3, "1/3"),
    (Decimal(1) / 2, "1/2"),
    (Decimal(2) / 3, "2/3"),
    (Decimal(3) / 4, "3/4"),
)
FRACTION_TOLERANCE = Decimal("0.02")


def _parse_single(value: str) -> Optional[Decimal]:
    # Whole or decimal numbers
    try:
        if "/" not in value and " " not in value:
            number = Decimal(value)
            return number if number.is_finite() else None
    except InvalidOperation:
        return None

    # Fractions like "1/2" or "1 1/2"
    try:
        if " " in value:
            whole_part, frac_part = value.split(" ", 1)
            whole = Decimal(whole_part)
            num_str, denom_str = frac_part.split("/", 1)
            num = Decimal(num_str)
            denom = Decimal(denom_str)
            if denom == 0:
                return None
            return whole + (num / denom)
        if "/" in value:
            num_str, denom_str = value.split("/", 1)
            num = Decimal(num_str)
            denom = Decimal(denom_str)
            if denom == 0:
                return None
            return num / denom
    except (InvalidOperation, ValueError):
        return None

    return None


def parse_quantity_range(raw: Optional[str]) -> Optional[Tuple[Decimal, Decimal]]:
    """Parse a quantity into (low, high); single values give low == high."""
    if raw is None:
        return None
    value = normalize_fraction_display(raw.strip())
    if not value:
        return None
    single = _parse_single(value)
    if single is not None:
        return single, single
    match = RANGE_RE.match(value)
    if not match:
        return None
    low = _parse_single(match.group(1).strip())
    high = _parse_single(match.group(2).strip())
    if low is None or high is None:
        return None
    return low, high


def parse_quantity_display(raw: Optional[str]) -> Optional[Decimal]:
    """Numeric value of a quantity string; ranges resolve to their midpoint."""
    parsed = parse_quantity_range(raw)
    if parsed is None:
        return None
    low, high = parsed
    if low == high:
        return low
    return (low + high) / 2


def decimal_to_fraction(value: float) -> str:
    """Render a quantity with kitchen fractions ("1 1/2", "3/4", "2").

    Falls back to two decimals when no common fraction is close enough.
    """
    amount = Decimal(str(value))
    if amount < 0:
        return f"{float(value):.2f}"
    whole = int(amount)
    remainder = amount - whole
    if remainder < Decimal("0.01"):
        return str(whole)
    if remainder > 1 - Decimal("0.01"):
        return str(whole + 1)
    for fraction_value, label in COMMON_FRACTIONS:
        if abs(remainder - fraction_value) <= FRACTION_TOLERANCE:
            return f"{whole} {label}" if whole else label
    return f"{float(value):.2f}"


def format_scaled_quantity(value: Optional[float]) -> str:
    if value is None:
        return ""
    return decimal_to_fraction(value)
