from typing import List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

ParsingMethod = Literal["ai", "manual"]


class ParsedIngredient(BaseModel):
    """One ingredient line decomposed into quantity, unit, name and notes.

    ``original_text`` is the source of truth; instances are frozen and
    rescaling produces a ``ScaledIngredient`` instead of mutating them.
    """

    original_text: str
    quantity: Optional[str] = None
    unit: Optional[str] = None
    ingredient_name: str
    preparation_notes: Optional[str] = None
    metric_quantity: Optional[str] = None
    metric_unit: Optional[str] = None
    confidence: float
    requires_manual_review: bool
    parsing_method: ParsingMethod

    model_config = ConfigDict(frozen=True)


class RawDecomposition(BaseModel):
    """A single item returned by the ingredient decomposition service."""

    ingredient_name: str = Field(
        ..., validation_alias=AliasChoices("ingredient_name", "ingredientName", "name")
    )
    confidence: Optional[float] = None
    quantity: Optional[str] = None
    unit: Optional[str] = None
    metric_quantity: Optional[str] = Field(
        None, validation_alias=AliasChoices("metric_quantity", "metricQuantity")
    )
    metric_unit: Optional[str] = Field(None, validation_alias=AliasChoices("metric_unit", "metricUnit"))
    preparation_notes: Optional[str] = Field(
        None, validation_alias=AliasChoices("preparation_notes", "preparationNotes", "notes")
    )

    @field_validator("quantity", "unit", "metric_quantity", "metric_unit", "preparation_notes", mode="before")
    @classmethod
    def coerce_optional_text(cls, value):
        if value is None:
            return None
        if isinstance(value, (int, float)):
            return f"{value:g}"
        text = str(value).strip()
        return text or None


class ScaledIngredient(BaseModel):
    original: ParsedIngredient
    scaled_quantity: Optional[float] = None
    display_quantity: str = ""
    was_scaled: bool = False
    warning: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class IngredientParsingProgress(BaseModel):
    current_batch: int
    total_batches: int
    parsed_count: int
    total_count: int
    estimated_time_remaining_ms: int
    can_cancel: bool = True


class BatchParsingResult(BaseModel):
    """Outcome of a batched ingredient parse.

    ``parsed_ingredients`` holds successes in input order; lines whose batch
    failed are listed in ``failed_ingredients`` with their input positions in
    ``failed_indices``.
    """

    parsed_ingredients: List[ParsedIngredient] = Field(default_factory=list)
    failed_ingredients: List[str] = Field(default_factory=list)
    failed_indices: List[int] = Field(default_factory=list)
    total_duration_ms: int = 0
