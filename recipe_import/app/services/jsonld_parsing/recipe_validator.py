"""Required-field, optional-field and data-quality checks for imported recipes."""

import logging
from typing import List, Optional
from urllib.parse import urlparse

from recipe_import.app.schemas.import_result import IssueType, RecipeValidationResult, ValidationIssue
from recipe_import.app.schemas.recipe import RecipeDraft
from recipe_import.app.services.jsonld_parsing.issues import (
    create_validation_error,
    create_validation_warning,
)

logger = logging.getLogger(__name__)

MIN_NAME_LENGTH = 3
MIN_INGREDIENT_LENGTH = 3
MAX_INGREDIENT_LENGTH = 200
MIN_INSTRUCTION_LENGTH = 5


def _is_blank(value: Optional[str]) -> bool:
    return not value or not value.strip()


def is_valid_url(value: Optional[str]) -> bool:
    """Accept only absolute http(s) URLs."""
    if _is_blank(value):
        return False
    try:
        parsed = urlparse(value.strip())
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def has_minimum_viable_content(draft: RecipeDraft) -> bool:
    """True when name and image are both present, enough to offer a partial draft."""
    return not _is_blank(draft.name) and not _is_blank(draft.image)


def validate_recipe(draft: RecipeDraft) -> RecipeValidationResult:
    errors: List[ValidationIssue] = []
    warnings: List[ValidationIssue] = []

    if _is_blank(draft.name):
        errors.append(
            create_validation_error(
                IssueType.MISSING_REQUIRED_FIELD,
                "name",
                "Recipe name is required",
                "The name field is empty or missing from the JSON-LD data",
            )
        )
    if _is_blank(draft.image):
        errors.append(
            create_validation_error(
                IssueType.MISSING_REQUIRED_FIELD,
                "image",
                "Recipe image is required",
                "The image field is empty or missing from the JSON-LD data",
            )
        )

    if not draft.recipe_ingredient:
        warnings.append(
            create_validation_warning(
                IssueType.MISSING_OPTIONAL_FIELD,
                "recipe_ingredient",
                "No ingredients found",
                "You can add ingredients manually after import",
                actionable=True,
            )
        )
    if not draft.recipe_instructions:
        warnings.append(
            create_validation_warning(
                IssueType.MISSING_OPTIONAL_FIELD,
                "recipe_instructions",
                "No instructions found",
                "You can add instructions manually after import",
                actionable=True,
            )
        )
    if _is_blank(draft.recipe_yield):
        warnings.append(
            create_validation_warning(
                IssueType.MISSING_OPTIONAL_FIELD,
                "recipe_yield",
                "No serving size specified",
                "Recipe scaling assumes 1 serving until a yield is set",
                actionable=True,
            )
        )
    if not (draft.prep_time or draft.cook_time or draft.total_time):
        warnings.append(
            create_validation_warning(
                IssueType.MISSING_OPTIONAL_FIELD,
                "prep_time,cook_time,total_time",
                "No timing information found",
                "Add prep or cook time manually",
                actionable=True,
            )
        )

    if not _is_blank(draft.image) and not is_valid_url(draft.image):
        warnings.append(
            create_validation_warning(
                IssueType.DATA_QUALITY,
                "image",
                "Image URL may be invalid",
                f"'{draft.image[:100]}' is not an absolute http(s) URL",
            )
        )
    ingredient_count = len(draft.recipe_ingredient)
    if 1 <= ingredient_count <= 2:
        warnings.append(
            create_validation_warning(
                IssueType.DATA_QUALITY,
                "recipe_ingredient",
                f"Only {ingredient_count} ingredient(s) found - recipe may be incomplete",
            )
        )
    if len(draft.recipe_instructions) == 1:
        warnings.append(
            create_validation_warning(
                IssueType.DATA_QUALITY,
                "recipe_instructions",
                "Only 1 instruction found - recipe may be incomplete",
            )
        )
    if not _is_blank(draft.name) and len(draft.name.strip()) < MIN_NAME_LENGTH:
        warnings.append(
            create_validation_warning(IssueType.DATA_QUALITY, "name", "Recipe name is very short")
        )

    logger.debug("Recipe validation: %d errors, %d warnings", len(errors), len(warnings))
    return RecipeValidationResult(errors=errors, warnings=warnings, is_valid=not errors)


def validate_ingredient_lines(lines: List[str]) -> List[ValidationIssue]:
    warnings: List[ValidationIssue] = []
    short = [line for line in lines if len(line.strip()) < MIN_INGREDIENT_LENGTH]
    long = [line for line in lines if len(line.strip()) > MAX_INGREDIENT_LENGTH]
    if short:
        warnings.append(
            create_validation_warning(
                IssueType.DATA_QUALITY,
                "recipe_ingredient",
                f"{len(short)} ingredient(s) are very short and may be incomplete",
                ", ".join(short),
            )
        )
    if long:
        warnings.append(
            create_validation_warning(
                IssueType.DATA_QUALITY,
                "recipe_ingredient",
                f"{len(long)} ingredient(s) are very long and may need splitting",
            )
        )
    return warnings


def validate_instruction_lines(lines: List[str]) -> List[ValidationIssue]:
    short = [line for line in lines if len(line.strip()) < MIN_INSTRUCTION_LENGTH]
    if not short:
        return []
    return [
        create_validation_warning(
            IssueType.DATA_QUALITY,
            "recipe_instructions",
            f"{len(short)} instruction(s) are very short and may be incomplete",
            ", ".join(short),
        )
    ]
