import json
import logging
import re
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from recipe_import.app.core.config import Settings, get_settings
from recipe_import.app.schemas.ingredient import RawDecomposition

logger = logging.getLogger(__name__)


class DecompositionError(Exception):
    """The ingredient decomposition call failed or broke its contract."""


INGREDIENT_PROMPT = """Parse these recipe ingredients into structured JSON. For each ingredient:

1. Extract quantity (preserve ranges like "2-3" and fractions like "1/2")
2. Extract unit (cup, tsp, tbsp, oz, lb, g, ml, kg, l, etc.)
3. Extract ingredient name (without quantity/unit)
4. Extract preparation notes (after comma: chopped, softened, diced, etc.)
5. Convert imperial units to metric:

Volume (liquids): 1 cup = 237 ml, 1 tbsp = 15 ml, 1 tsp = 5 ml, 1 fl oz = 30 ml
Weight: 1 lb = 454 g, 1 oz = 28 g
Density (dry/solid ingredients measured by volume, per cup): all-purpose flour 120 g,
bread flour 127 g, granulated sugar 200 g, brown sugar (packed) 220 g, powdered sugar 120 g,
butter 227 g (1 tbsp = 14 g), cocoa powder 120 g, honey 340 g, oil 224 g

Rules:
- pinch, dash, knob, sprig, bunch, clove, head, stalk, leaf, slice: metricQuantity and metricUnit null
- Already metric (g, ml, kg, l): metricQuantity and metricUnit null
- Ranges: keep the range in quantity and give a range for metricQuantity (e.g. "240-360")
- Vague quantities ("some", "a handful") or several ingredients in one line: confidence below 0.7
- Confidence 0.85-1.0 for clear quantity, standard unit, common ingredient;
  0.7-0.84 for ranges, unusual units or complex notes

Return ONLY JSON: {"ingredients": [{"quantity": string|null, "unit": string|null,
"ingredientName": string, "preparationNotes": string|null, "metricQuantity": string|null,
"metricUnit": string|null, "confidence": number}]}
with exactly one entry per input line, in the same order."""


# Remove ASCII control chars that frequently break json.loads (except \n, \r, \t)
def _strip_invalid_control_chars(s: str) -> str:
    if not isinstance(s, str):
        return str(s)
    return re.sub(r"[\x00-\x08\x0B\x0C\x0E-\x1F]", "", s)


def _try_local_json_repair(raw: str) -> Optional[str]:
    cleaned = _strip_invalid_control_chars(raw).strip()
    cleaned = re.sub(r"^```[a-zA-Z0-9_-]*\s*", "", cleaned)
    cleaned = re.sub(r"\s*```$", "", cleaned)
    try:
        json.loads(cleaned)
        return cleaned
    except json.JSONDecodeError:
        pass
    for open_char, close_char in (("{", "}"), ("[", "]")):
        start = cleaned.find(open_char)
        end = cleaned.rfind(close_char)
        if start != -1 and end > start:
            snippet = cleaned[start : end + 1]
            try:
                json.loads(snippet)
                return snippet
            except json.JSONDecodeError:
                continue
    return None


def _headers(settings: Settings) -> Dict[str, str]:
    headers = {"Content-Type": "application/json"}
    if settings.llm_app_id and settings.llm_app_key:
        headers["X-Jarvis-App-Id"] = settings.llm_app_id
        headers["X-Jarvis-App-Key"] = settings.llm_app_key
    return headers


def build_batch_prompt(lines: List[str]) -> str:
    numbered = "\n".join(f"{idx + 1}. {line}" for idx, line in enumerate(lines))
    return f"Ingredients to parse:\n{numbered}"


def _validate_lines(lines: List[str], settings: Settings) -> None:
    if len(lines) > settings.ingredient_max_batch_size:
        raise ValueError(
            f"Batch of {len(lines)} lines exceeds the limit of {settings.ingredient_max_batch_size}"
        )
    for idx, line in enumerate(lines):
        if len(line) > settings.ingredient_max_line_length:
            raise ValueError(
                f"Ingredient {idx + 1} is {len(line)} characters (limit: {settings.ingredient_max_line_length})"
            )


def _parse_items(content: str) -> List[Any]:
    raw = _strip_invalid_control_chars(content)
    repaired = _try_local_json_repair(raw)
    if repaired is None:
        raise DecompositionError("Decomposition response is not valid JSON")
    data = json.loads(repaired)
    if isinstance(data, dict):
        data = data.get("ingredients")
    if not isinstance(data, list):
        raise DecompositionError("Decomposition response has no ingredients list")
    return data


async def decompose_ingredients(lines: List[str], settings: Optional[Settings] = None) -> List[RawDecomposition]:
    """Decompose one batch of ingredient lines through the LLM proxy.

    Output order matches input order one-to-one. Any failure of the call is
    raised as a single ``DecompositionError`` for the whole batch.
    """
    if not lines:
        return []
    settings = settings or get_settings()
    _validate_lines(lines, settings)
    if not settings.llm_base_url:
        raise DecompositionError("LLM_BASE_URL is not configured")
    payload = {
        "model": settings.llm_full_model_name or "full",
        "temperature": 0.0,
        "response_format": {"type": "json_object"},
        "messages": [
            {"role": "system", "content": INGREDIENT_PROMPT},
            {"role": "user", "content": build_batch_prompt(lines)},
        ],
        "max_tokens": 200 + 120 * len(lines),
        "stream": False,
    }
    timeout = httpx.Timeout(settings.llm_timeout_seconds, read=settings.llm_timeout_seconds, connect=10.0)
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            resp = await client.post(
                f"{settings.llm_base_url}/v1/chat/completions",
                json=payload,
                headers=_headers(settings),
            )
        resp.raise_for_status()
        data = resp.json()
    except (httpx.HTTPError, json.JSONDecodeError) as exc:
        logger.warning("Ingredient decomposition request failed: %s", exc)
        raise DecompositionError(f"Ingredient decomposition request failed: {exc}") from exc

    if isinstance(data, dict) and "error" in data:
        error_info = data["error"] if isinstance(data["error"], dict) else {"message": str(data["error"])}
        error_type = error_info.get("type", "unknown_error")
        error_message = error_info.get("message", "Unknown error")
        logger.warning(
            "LLM proxy returned error in ingredient decomposition: type=%s, message=%s",
            error_type,
            str(error_message)[:500],
        )
        raise DecompositionError(f"LLM proxy error ({error_type}): {error_message}")

    content = data.get("choices", [{}])[0].get("message", {}).get("content")
    if not content:
        raise DecompositionError("Decomposition response missing content")
    logger.debug("decomposition raw content (truncated): %s", str(content)[:200])
    items = _parse_items(content if isinstance(content, str) else json.dumps(content))
    if len(items) != len(lines):
        raise DecompositionError(f"Decomposition returned {len(items)} items for {len(lines)} lines")
    try:
        return [RawDecomposition.model_validate(item) for item in items]
    except ValidationError as exc:
        raise DecompositionError(f"Decomposition item failed validation: {exc}") from exc
