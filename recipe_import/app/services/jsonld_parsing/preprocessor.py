"""Normalization of pasted JSON-LD text before it reaches the JSON parser.

Users copy JSON-LD out of page sources, DevTools consoles and chat tools, so
the text can arrive with a byte-order mark, markdown fences, backticks, or as
an escaped string literal. ``preprocess_json_input`` peels those wrappers off
and never raises; anything it cannot fix is left for the JSON validator to
report.
"""

import json
import logging
import re
from typing import Optional

from pydantic import BaseModel

logger = logging.getLogger(__name__)

BOM = "\ufeff"
ESCAPE_MARKERS = ("\\n", '\\"', "\\t", "\\\\")

CODE_BLOCK_RE = re.compile(r"^```[a-zA-Z0-9_-]*[ \t]*\n([\s\S]*?)\n[ \t]*```$")

CODE_BLOCK_HINT = "Detected markdown code block. The parser will extract the JSON automatically."
ESCAPED_HINT = (
    "It looks like you pasted escaped JSON from console output. "
    "The parser will try to unescape it automatically."
)
BACKTICK_HINT = "Detected backticks around JSON. The parser will remove them automatically."
QUOTED_HINT = (
    "It looks like the JSON was pasted as a quoted string. "
    "The parser will try to unwrap it automatically."
)


class InputFormatDetection(BaseModel):
    is_escaped: bool = False
    hint: Optional[str] = None


def has_escape_markers(text: str) -> bool:
    return any(marker in text for marker in ESCAPE_MARKERS)


def _is_wrapped(text: str, char: str) -> bool:
    return len(text) >= 2 and text.startswith(char) and text.endswith(char)


def _parses_as_json(text: str) -> bool:
    try:
        json.loads(text)
    except (ValueError, RecursionError):
        return False
    return True


def _unescape(text: str) -> str:
    try:
        decoded = json.loads(f'"{text}"', strict=False)
    except json.JSONDecodeError:
        return text
    return decoded if isinstance(decoded, str) else text


def _preprocess_once(text: str) -> str:
    s = text
    if s.startswith(BOM):
        s = s[1:]
    s = s.strip()

    match = CODE_BLOCK_RE.match(s)
    if match:
        s = match.group(1).strip()

    if _is_wrapped(s, "`") and s.count("`") == 2:
        s = s[1:-1].strip()

    for quote in ('"', "'"):
        if _is_wrapped(s, quote) and has_escape_markers(s[1:-1]):
            s = s[1:-1]
            break

    # Valid JSON keeps its own escapes inside string values
    if has_escape_markers(s) and not _parses_as_json(s):
        s = _unescape(s)
    return s


def preprocess_json_input(text: str) -> str:
    """Clean raw pasted text into a JSON parse candidate.

    Each pass only shortens the text, so repeating it until nothing changes
    terminates and makes the result idempotent.
    """
    current = text or ""
    while True:
        cleaned = _preprocess_once(current)
        if cleaned == current:
            return cleaned
        current = cleaned


def detect_input_format(text: str) -> InputFormatDetection:
    """Explain how the original pasted text looks malformed, if it does."""
    s = (text or "").lstrip(BOM).strip()
    if CODE_BLOCK_RE.match(s):
        return InputFormatDetection(is_escaped=False, hint=CODE_BLOCK_HINT)
    if "\\n" in s or '\\"' in s:
        return InputFormatDetection(is_escaped=True, hint=ESCAPED_HINT)
    if _is_wrapped(s, "`"):
        return InputFormatDetection(is_escaped=False, hint=BACKTICK_HINT)
    if _is_wrapped(s, '"') or _is_wrapped(s, "'"):
        return InputFormatDetection(is_escaped=False, hint=QUOTED_HINT)
    return InputFormatDetection()


def get_byte_size(text: str) -> int:
    """UTF-8 encoded size of the text."""
    return len((text or "").encode("utf-8"))


def is_within_size_limit(text: str, max_bytes: int) -> bool:
    return get_byte_size(text) <= max_bytes
