from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from recipe_import.app.schemas.ingredient import ParsedIngredient


class NutritionSummary(BaseModel):
    serving_size: Optional[str] = None
    calories: Optional[str] = None
    carbohydrate_content: Optional[str] = None
    protein_content: Optional[str] = None
    fat_content: Optional[str] = None
    saturated_fat_content: Optional[str] = None
    unsaturated_fat_content: Optional[str] = None
    trans_fat_content: Optional[str] = None
    cholesterol_content: Optional[str] = None
    sodium_content: Optional[str] = None
    fiber_content: Optional[str] = None
    sugar_content: Optional[str] = None


class AggregateRating(BaseModel):
    rating_value: Optional[float] = None
    rating_count: Optional[int] = None


class RecipeDraft(BaseModel):
    """Canonical recipe produced by a JSON-LD import.

    Durations stay ISO 8601 strings (``PT1H30M``). When ``parsed_ingredients``
    is set it is index-aligned with ``recipe_ingredient``.
    """

    name: str = ""
    image: str = ""
    description: Optional[str] = None
    author: Optional[str] = None
    date_published: Optional[str] = None
    recipe_ingredient: List[str] = Field(default_factory=list)
    recipe_instructions: List[str] = Field(default_factory=list)
    recipe_category: List[str] = Field(default_factory=list)
    recipe_cuisine: List[str] = Field(default_factory=list)
    keywords: List[str] = Field(default_factory=list)
    suitable_for_diet: List[str] = Field(default_factory=list)
    recipe_yield: Optional[str] = None
    prep_time: Optional[str] = None
    cook_time: Optional[str] = None
    total_time: Optional[str] = None
    nutrition: Optional[NutritionSummary] = None
    aggregate_rating: Optional[AggregateRating] = None
    source_url: Optional[str] = None
    parsed_ingredients: Optional[List[ParsedIngredient]] = None
    ingredient_parsing_completed: bool = False
    ingredient_parsing_date: Optional[datetime] = None

    @model_validator(mode="after")
    def check_parsed_ingredients_aligned(self) -> "RecipeDraft":
        if self.parsed_ingredients is not None and len(self.parsed_ingredients) != len(self.recipe_ingredient):
            raise ValueError("parsed_ingredients must have one entry per recipe_ingredient line")
        return self
