from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from recipe_import.app.schemas.ingredient import ScaledIngredient
from recipe_import.app.schemas.recipe import RecipeDraft


class YieldErrorType(str, Enum):
    INVALID_NUMBER = "invalid_number"
    BELOW_MINIMUM = "below_minimum"
    ABOVE_MAXIMUM = "above_maximum"


class YieldValidationError(BaseModel):
    type: YieldErrorType
    message: str
    suggested_value: Optional[float] = None


class ScalingOptions(BaseModel):
    preserve_formatting: bool = True
    scale_to_taste: bool = False
    max_references_per_instruction: int = 20


class IngredientReference(BaseModel):
    """A quantity-plus-ingredient mention found inside an instruction."""

    full_match: str
    ingredient_name: str
    ingredient_index: int
    quantity: str
    unit: Optional[str] = None
    start_index: int
    end_index: int
    scaled_quantity: Optional[str] = None
    opted_out: bool = False


class ScaledInstruction(BaseModel):
    original: str
    scaled: str
    was_scaled: bool = False
    reference_count: int = 0
    references: List[IngredientReference] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class ScaledRecipe(BaseModel):
    recipe: RecipeDraft
    original_yield: float
    target_yield: float
    multiplier: float
    ingredients: List[ScaledIngredient] = Field(default_factory=list)
    instructions: List[ScaledInstruction] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
