import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from recipe_import.app.api.deps import get_app_settings, get_decomposer
from recipe_import.app.core.config import Settings
from recipe_import.app.schemas.import_result import ImportResult
from recipe_import.app.schemas.ingredient import ParsedIngredient
from recipe_import.app.services.import_orchestrator import ImportOrchestrator
from recipe_import.app.services.ingredients.batch_coordinator import (
    merge_with_fallback,
    parse_ingredients_in_batches,
)
from recipe_import.app.services.ingredients.ingredient_parser import DecomposeBatch
from recipe_import.app.services.jsonld_parsing.extraction_instructions import get_extraction_instructions

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recipes/import", tags=["import"])


class ImportJsonLdRequest(BaseModel):
    text: str
    source_url: Optional[str] = None
    lenient: bool = False
    parse_ingredients: bool = True


class ParseIngredientsRequest(BaseModel):
    lines: List[str] = Field(..., min_length=1)


class ParseIngredientsResponse(BaseModel):
    ingredients: List[ParsedIngredient]
    failed_ingredients: List[str] = Field(default_factory=list)
    duration_ms: int = 0


@router.post("/jsonld", response_model=ImportResult)
async def import_from_jsonld(
    payload: ImportJsonLdRequest,
    settings: Settings = Depends(get_app_settings),
    decomposer: DecomposeBatch = Depends(get_decomposer),
):
    """
    Import a recipe from pasted JSON-LD.

    Import problems are reported in the result body (``success``, ``errors``,
    ``warnings``) rather than as HTTP errors, so the client can show every issue
    at once and offer a lenient import when ``can_import`` is true.
    """
    orchestrator = ImportOrchestrator(
        settings=settings,
        decomposer=decomposer,
        lenient=payload.lenient,
        parse_ingredients=payload.parse_ingredients,
    )
    return await orchestrator.run(payload.text, source_url=payload.source_url)


@router.get("/jsonld/instructions")
def jsonld_instructions(source_url: Optional[str] = None):
    return {"instructions": get_extraction_instructions(source_url)}


@router.post("/ingredients/parse", response_model=ParseIngredientsResponse)
async def parse_ingredient_lines(
    payload: ParseIngredientsRequest,
    settings: Settings = Depends(get_app_settings),
    decomposer: DecomposeBatch = Depends(get_decomposer),
):
    lines = [line.strip() for line in payload.lines]
    for idx, line in enumerate(lines):
        if not line:
            raise HTTPException(
                status_code=400,
                detail={"error_code": "empty_ingredient", "message": f"Ingredient {idx + 1} is empty"},
            )
        if len(line) > settings.ingredient_max_line_length:
            raise HTTPException(
                status_code=400,
                detail={
                    "error_code": "ingredient_too_long",
                    "message": f"Ingredient {idx + 1} exceeds {settings.ingredient_max_line_length} characters",
                },
            )
    result = await parse_ingredients_in_batches(lines, decomposer, settings=settings)
    logger.info("Parsed %d ingredient lines (%d failed)", len(lines), len(result.failed_ingredients))
    return ParseIngredientsResponse(
        ingredients=merge_with_fallback(lines, result),
        failed_ingredients=result.failed_ingredients,
        duration_ms=result.total_duration_ms,
    )
