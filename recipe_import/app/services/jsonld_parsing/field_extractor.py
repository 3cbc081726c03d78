"""Schema.org Recipe node lookup and field mapping."""

import logging
import re
from typing import Any, List, Optional

from recipe_import.app.schemas.recipe import AggregateRating, NutritionSummary, RecipeDraft
from recipe_import.app.services.jsonld_parsing.parsing_utils import (
    clean_text,
    coerce_duration,
    ensure_list,
    extract_image,
    extract_instruction_text,
)

logger = logging.getLogger(__name__)

# schema.org nutrition key -> NutritionSummary attribute, numeric fields only
NUMERIC_NUTRITION_FIELDS = {
    "calories": "calories",
    "carbohydrateContent": "carbohydrate_content",
    "proteinContent": "protein_content",
    "fatContent": "fat_content",
    "saturatedFatContent": "saturated_fat_content",
    "unsaturatedFatContent": "unsaturated_fat_content",
    "transFatContent": "trans_fat_content",
    "cholesterolContent": "cholesterol_content",
    "sodiumContent": "sodium_content",
    "fiberContent": "fiber_content",
    "sugarContent": "sugar_content",
}

_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?|\.\d+")


def is_recipe_type(type_value: Any) -> bool:
    """True when an ``@type`` value is "Recipe" or a list containing it."""
    types = type_value if isinstance(type_value, list) else [type_value]
    return any(isinstance(t, str) and t.strip().lower() == "recipe" for t in types)


def get_json_ld_type(data: Any) -> Optional[str]:
    """First ``@type`` found in a parsed JSON-LD value, for diagnostics."""
    candidates: List[Any] = []
    if isinstance(data, list):
        candidates.extend(data)
    elif isinstance(data, dict):
        candidates.append(data)
        graph = data.get("@graph")
        if isinstance(graph, list):
            candidates.extend(graph)
    for obj in candidates:
        if not isinstance(obj, dict):
            continue
        type_value = obj.get("@type")
        if isinstance(type_value, list):
            type_value = next((t for t in type_value if isinstance(t, str)), None)
        if isinstance(type_value, str) and type_value:
            return type_value
    return None


def _scan(items: List[Any]) -> Optional[dict]:
    for idx, obj in enumerate(items):
        if isinstance(obj, dict) and is_recipe_type(obj.get("@type")):
            logger.debug("Recipe node found at index %d", idx)
            return obj
    return None


def find_recipe_node(data: Any) -> Optional[dict]:
    """Locate the Recipe node in an array, an ``@graph``, or a direct object."""
    if isinstance(data, list):
        logger.info("JSON-LD is a list with %d items", len(data))
        return _scan(data)
    if not isinstance(data, dict):
        return None
    graph = data.get("@graph")
    if isinstance(graph, list):
        logger.info("Found @graph with %d items", len(graph))
        found = _scan(graph)
        if found is not None:
            return found
    if is_recipe_type(data.get("@type")):
        return data
    return None


def extract_author(value: Any) -> Optional[str]:
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, str):
        return clean_text(value) or None
    if isinstance(value, dict) and isinstance(value.get("name"), str):
        return clean_text(value["name"]) or None
    return None


def extract_numeric_text(value: Any) -> Optional[str]:
    """First number in a value with its unit text dropped ("270 calories" -> "270")."""
    if value is None or isinstance(value, bool):
        return None
    match = _NUMBER_RE.search(str(value))
    return match.group() if match else None


def extract_nutrition(value: Any) -> Optional[NutritionSummary]:
    if not isinstance(value, dict):
        return None
    fields = {
        attr: extract_numeric_text(value.get(key)) for key, attr in NUMERIC_NUTRITION_FIELDS.items()
    }
    serving_size = value.get("servingSize")
    if isinstance(serving_size, (str, int, float)) and not isinstance(serving_size, bool):
        fields["serving_size"] = clean_text(str(serving_size)) or None
    if not any(fields.values()):
        return None
    return NutritionSummary(**fields)


def extract_aggregate_rating(value: Any) -> Optional[AggregateRating]:
    if not isinstance(value, dict):
        return None
    rating = extract_numeric_text(value.get("ratingValue"))
    count = extract_numeric_text(value.get("ratingCount") or value.get("reviewCount"))
    if rating is None and count is None:
        return None
    return AggregateRating(
        rating_value=float(rating) if rating is not None else None,
        rating_count=int(float(count)) if count is not None else None,
    )


def extract_recipe_yield(value: Any) -> Optional[str]:
    if isinstance(value, list):
        value = next((v for v in value if v not in (None, "")), None)
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = clean_text(str(value))
    return text or None


def extract_ingredient_lines(value: Any) -> List[str]:
    items = value if isinstance(value, list) else ([value] if value else [])
    lines: List[str] = []
    for item in items:
        if isinstance(item, dict):
            item = item.get("text") or item.get("name")
        if isinstance(item, str):
            cleaned = clean_text(item)
            if cleaned:
                lines.append(cleaned)
    return lines


def _optional_text(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value.strip() or None
    return None


def extract_recipe_fields(node: dict, source_url: Optional[str] = None) -> RecipeDraft:
    """Map a schema.org Recipe node onto a RecipeDraft; each field is null-safe."""
    name = node.get("name")
    draft = RecipeDraft(
        name=name.strip() if isinstance(name, str) else "",
        image=extract_image(node.get("image")).strip(),
        description=_optional_text(node.get("description")),
        author=extract_author(node.get("author")),
        date_published=_optional_text(node.get("datePublished")),
        recipe_ingredient=extract_ingredient_lines(node.get("recipeIngredient")),
        recipe_instructions=extract_instruction_text(node.get("recipeInstructions")),
        recipe_category=ensure_list(node.get("recipeCategory")),
        recipe_cuisine=ensure_list(node.get("recipeCuisine")),
        keywords=ensure_list(node.get("keywords")),
        suitable_for_diet=ensure_list(node.get("suitableForDiet")),
        recipe_yield=extract_recipe_yield(node.get("recipeYield")),
        prep_time=coerce_duration(node.get("prepTime")),
        cook_time=coerce_duration(node.get("cookTime")),
        total_time=coerce_duration(node.get("totalTime")),
        nutrition=extract_nutrition(node.get("nutrition")),
        aggregate_rating=extract_aggregate_rating(node.get("aggregateRating")),
        source_url=source_url,
    )
    logger.info(
        "Extracted recipe '%s': %d ingredients, %d instructions",
        draft.name[:50],
        len(draft.recipe_ingredient),
        len(draft.recipe_instructions),
    )
    return draft
