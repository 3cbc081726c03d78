import json
import logging
from typing import Any, Optional, Tuple

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class JsonValidationResult(BaseModel):
    valid: bool
    data: Any = None
    error: Optional[str] = None
    line: Optional[int] = None
    column: Optional[int] = None


def _reject_constant(name: str):
    raise ValueError(f"Invalid JSON value: {name}")


def offset_to_line_column(text: str, offset: int) -> Tuple[int, int]:
    """Convert a character offset into a 1-based (line, column) pair."""
    offset = max(0, min(offset, len(text)))
    line = text.count("\n", 0, offset) + 1
    column = offset - (text.rfind("\n", 0, offset) + 1) + 1
    return line, column


def validate_json(text: str) -> JsonValidationResult:
    """Strictly parse JSON text without raising to the caller."""
    try:
        data = json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as exc:
        line, column = offset_to_line_column(text, exc.pos)
        logger.debug("JSON parse failed at line %d column %d: %s", line, column, exc.msg)
        return JsonValidationResult(valid=False, error=exc.msg, line=line, column=column)
    except RecursionError:
        return JsonValidationResult(valid=False, error="JSON is nested too deeply")
    except (TypeError, ValueError) as exc:
        return JsonValidationResult(valid=False, error=str(exc))
    return JsonValidationResult(valid=True, data=data)
