"""General parsing utilities for recipe text."""

import re
from typing import List, Optional

from recipe_import.app.services.jsonld_parsing.constants import (
    CANONICAL_UNITS,
    FRACTION_MAP,
    UNCOUNTABLE_INGREDIENTS,
    UNIT_ALIASES,
)

_IRREGULAR_PLURALS = {
    "cookies": "cookie",
    "leaves": "leaf",
    "loaves": "loaf",
    "halves": "half",
    "knives": "knife",
}
_IRREGULAR_SINGULARS = {v: k for k, v in _IRREGULAR_PLURALS.items()}


def clean_text(text: str) -> str:
    """Normalize whitespace in text."""
    return re.sub(r"\s+", " ", text or "").strip()


def normalize_unit_token(unit: str) -> str:
    """Normalize a unit token for comparison."""
    return clean_text(unit).lower().strip(".")


def canonical_unit(unit: Optional[str]) -> Optional[str]:
    """Return the canonical unit for a spelling, or None if unrecognised."""
    if not unit:
        return None
    token = normalize_unit_token(unit)
    if token in CANONICAL_UNITS:
        return token
    return UNIT_ALIASES.get(token)


def normalize_unit(unit: Optional[str]) -> str:
    """Map a unit spelling to its canonical form, defaulting to ``each``."""
    return canonical_unit(unit) or "each"


def is_known_unit(unit: Optional[str]) -> bool:
    """Check if a unit string is a recognized cooking unit."""
    return canonical_unit(unit) is not None


def normalize_fraction_display(qty: Optional[str]) -> Optional[str]:
    """Normalize fraction characters and quantity display strings."""
    if not qty:
        return qty
    s = qty
    # Ensure a space before a unicode fraction when attached to a digit, e.g., "1½" -> "1 ½"
    fraction_chars = "".join(FRACTION_MAP.keys())
    s = re.sub(rf"(\d)([{fraction_chars}])", r"\1 \2", s)
    for k, v in FRACTION_MAP.items():
        s = s.replace(k, v)
    s = re.sub(r"\s+", " ", s).strip()
    # Normalize pure numeric strings like "02" to "2"
    if re.fullmatch(r"-?\d+(\.\d+)?", s):
        num = float(s)
        s = str(int(num)) if num.is_integer() else str(num)
    return s or None


def singularize(word: str) -> str:
    """Best-effort English singular for a cooking noun."""
    lowered = word.lower()
    if lowered in UNCOUNTABLE_INGREDIENTS or len(word) < 3:
        return word
    if lowered in _IRREGULAR_PLURALS:
        return _IRREGULAR_PLURALS[lowered]
    if lowered.endswith("ies") and len(word) > 4:
        return word[:-3] + "y"
    if lowered.endswith(("ches", "shes", "sses", "xes", "zes", "oes")):
        return word[:-2]
    if lowered.endswith("s") and not lowered.endswith(("ss", "us", "is")):
        return word[:-1]
    return word


def pluralize(word: str) -> str:
    """Best-effort English plural for a cooking noun."""
    lowered = word.lower()
    if lowered in UNCOUNTABLE_INGREDIENTS or not word:
        return word
    if lowered in _IRREGULAR_SINGULARS:
        return _IRREGULAR_SINGULARS[lowered]
    if singularize(word) != word:
        return word
    if lowered.endswith("y") and len(word) > 1 and lowered[-2] not in "aeiou":
        return word[:-1] + "ies"
    if lowered.endswith(("ch", "sh", "ss", "x", "z")):
        return word + "es"
    if lowered.endswith("o") and len(word) > 1 and lowered[-2] not in "aeiou":
        return word + "es"
    return word + "s"


def parse_iso8601_duration(duration: str) -> Optional[int]:
    """Parse a minimal ISO-8601 duration string (e.g., PT1H30M) into minutes."""
    if not duration or not isinstance(duration, str):
        return None
    match = re.fullmatch(r"P(?:(\d+)D)?(?:T(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?)?", duration.strip().upper())
    if not match or not any(match.groups()):
        return None
    days = int(match.group(1) or 0)
    hours = int(match.group(2) or 0)
    minutes = int(match.group(3) or 0)
    seconds = int(match.group(4) or 0)
    return days * 24 * 60 + hours * 60 + minutes + (1 if seconds >= 30 else 0)


def minutes_to_iso8601(minutes: int) -> str:
    """Render a minute count as an ISO-8601 duration (90 -> PT1H30M)."""
    minutes = max(int(minutes), 0)
    hours, mins = divmod(minutes, 60)
    if hours and mins:
        return f"PT{hours}H{mins}M"
    if hours:
        return f"PT{hours}H"
    return f"PT{mins}M"


def format_duration_readable(duration: Optional[str]) -> Optional[str]:
    """Human-readable form of an ISO-8601 duration, e.g. "1 hr 30 min"."""
    total = parse_iso8601_duration(duration or "")
    if total is None:
        return None
    hours, mins = divmod(total, 60)
    parts = []
    if hours:
        parts.append(f"{hours} hr")
    if mins or not hours:
        parts.append(f"{mins} min")
    return " ".join(parts)


def coerce_duration(value) -> Optional[str]:
    """Normalize a schema.org duration to an ISO-8601 string.

    Bare numbers are read as minutes; strings are passed through trimmed.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return minutes_to_iso8601(int(value))
    if isinstance(value, str):
        cleaned = value.strip()
        if re.fullmatch(r"\d+", cleaned):
            return minutes_to_iso8601(int(cleaned))
        return cleaned or None
    return None


def extract_image(value) -> str:
    """Extract image URL from various schema.org image formats."""
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        url = value.get("url")
        return url if isinstance(url, str) else ""
    if isinstance(value, list) and value:
        first = value[0]
        if isinstance(first, str):
            return first
        if isinstance(first, dict) and isinstance(first.get("url"), str):
            return first["url"]
    return ""


def extract_instruction_text(instructions) -> List[str]:
    """Extract step text from string or HowToStep instruction lists.

    A step ``name`` is prefixed to its text unless the text already starts
    with it.
    """
    steps: List[str] = []
    if not isinstance(instructions, list):
        return steps
    for entry in instructions:
        if isinstance(entry, str):
            text = entry.strip()
        elif isinstance(entry, dict):
            # HowToSection groups its steps under itemListElement
            if isinstance(entry.get("itemListElement"), list) and not entry.get("text"):
                steps.extend(extract_instruction_text(entry["itemListElement"]))
                continue
            text = str(entry.get("text") or "").strip()
            name = entry.get("name")
            if isinstance(name, str) and name.strip() and text and not text.startswith(name.strip()):
                text = f"{name.strip()}: {text}"
        else:
            continue
        if text:
            steps.append(text)
    return steps


def ensure_list(value) -> List[str]:
    """Wrap a scalar-or-array schema.org field into a list of strings."""
    if value is None:
        return []
    items = value if isinstance(value, list) else [value]
    out: List[str] = []
    for item in items:
        if isinstance(item, (str, int, float)) and not isinstance(item, bool):
            text = str(item).strip()
            if text:
                out.append(text)
    return out
