from datetime import datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from recipe_import.app.schemas.recipe import RecipeDraft


class IssueType(str, Enum):
    INVALID_FORMAT = "invalid_format"
    SCHEMA_MISMATCH = "schema_mismatch"
    MISSING_REQUIRED_FIELD = "missing_required_field"
    MISSING_OPTIONAL_FIELD = "missing_optional_field"
    DATA_QUALITY = "data_quality"
    LOW_CONFIDENCE = "low_confidence"
    INGREDIENT_PARSE = "ingredient_parse"
    CANCELLED = "cancelled"


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class ValidationIssue(BaseModel):
    """An error (blocks import) or warning (advisory) about imported data."""

    type: IssueType
    field: Optional[str] = None
    message: str
    details: Optional[str] = None
    severity: Severity
    actionable: bool = False


class RecipeValidationResult(BaseModel):
    errors: List[ValidationIssue] = Field(default_factory=list)
    warnings: List[ValidationIssue] = Field(default_factory=list)
    is_valid: bool


class ImportState(str, Enum):
    IDLE = "idle"
    PREPROCESSING = "preprocessing"
    VALIDATING = "validating"
    EXTRACTING = "extracting"
    PARSING_INGREDIENTS = "parsing-ingredients"
    COMPLETE = "complete"
    FAILED = "failed"


class IngredientParsingSummary(BaseModel):
    completed: bool
    parsed_count: int = 0
    failed_ingredients: List[str] = Field(default_factory=list)
    duration_ms: int = 0


class ImportMetadata(BaseModel):
    parsed_at: datetime
    source_url: Optional[str] = None
    raw_json_ld: Any = None
    parsing_duration_ms: int = 0


class ImportResult(BaseModel):
    """Outcome of one JSON-LD import attempt."""

    success: bool
    recipe: Optional[RecipeDraft] = None
    errors: List[ValidationIssue] = Field(default_factory=list)
    warnings: List[ValidationIssue] = Field(default_factory=list)
    metadata: ImportMetadata
    state: ImportState
    can_import: bool = False
    input_hint: Optional[str] = None
    ingredient_parsing: Optional[IngredientParsingSummary] = None
