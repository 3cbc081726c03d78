from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from recipe_import.app.api.deps import get_app_settings
from recipe_import.app.core.config import Settings
from recipe_import.app.schemas.recipe import RecipeDraft
from recipe_import.app.schemas.scaling import ScaledRecipe, ScalingOptions
from recipe_import.app.services.scaling.recipe_scaler import InvalidTargetYield, scale_recipe

router = APIRouter(prefix="/recipes", tags=["scaling"])


class ScaleRequest(BaseModel):
    recipe: RecipeDraft
    target_yield: float
    scale_to_taste: bool = False


@router.post("/scale", response_model=ScaledRecipe)
def scale(payload: ScaleRequest, settings: Settings = Depends(get_app_settings)):
    options = ScalingOptions(
        scale_to_taste=payload.scale_to_taste,
        max_references_per_instruction=settings.instruction_max_references,
    )
    try:
        return scale_recipe(payload.recipe, payload.target_yield, options)
    except InvalidTargetYield as exc:
        raise HTTPException(
            status_code=400,
            detail={
                "error_code": exc.error.type.value,
                "message": exc.error.message,
                "suggested_value": exc.error.suggested_value,
            },
        )
