"""Import orchestration for pasted recipe JSON-LD.

One ``ImportOrchestrator`` handles exactly one import attempt and moves through
``idle -> preprocessing -> validating -> extracting -> parsing-ingredients ->
complete | failed``. Only ingredient parsing suspends; every other stage is a
synchronous transformation.
"""

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Any, List, Optional

from recipe_import.app.core.config import Settings, get_settings
from recipe_import.app.schemas.import_result import (
    ImportMetadata,
    ImportResult,
    ImportState,
    IngredientParsingSummary,
    IssueType,
    ValidationIssue,
)
from recipe_import.app.schemas.recipe import RecipeDraft
from recipe_import.app.services.ingredients.batch_coordinator import (
    IngredientParsingCancelled,
    ProgressCallback,
    merge_with_fallback,
    parse_ingredients_in_batches,
)
from recipe_import.app.services.ingredients.formatter import get_ingredients_needing_review
from recipe_import.app.services.ingredients.ingredient_parser import (
    DecomposeBatch,
    get_ingredient_decomposer,
)
from recipe_import.app.services.jsonld_parsing.field_extractor import (
    extract_recipe_fields,
    find_recipe_node,
    get_json_ld_type,
)
from recipe_import.app.services.jsonld_parsing.issues import (
    create_validation_error,
    create_validation_warning,
)
from recipe_import.app.services.jsonld_parsing.json_validator import validate_json
from recipe_import.app.services.jsonld_parsing.preprocessor import (
    detect_input_format,
    get_byte_size,
    preprocess_json_input,
)
from recipe_import.app.services.jsonld_parsing.recipe_validator import (
    has_minimum_viable_content,
    validate_ingredient_lines,
    validate_instruction_lines,
    validate_recipe,
)

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS = {
    ImportState.IDLE: {ImportState.PREPROCESSING, ImportState.FAILED},
    ImportState.PREPROCESSING: {ImportState.VALIDATING, ImportState.FAILED},
    ImportState.VALIDATING: {ImportState.EXTRACTING, ImportState.FAILED},
    ImportState.EXTRACTING: {
        ImportState.PARSING_INGREDIENTS,
        ImportState.COMPLETE,
        ImportState.FAILED,
    },
    ImportState.PARSING_INGREDIENTS: {ImportState.COMPLETE, ImportState.FAILED},
    ImportState.COMPLETE: set(),
    ImportState.FAILED: set(),
}

INVALID_JSON_MESSAGE = "Invalid JSON format. Please check your input."
RAW_COPY_ADVICE = "Try copying the raw JSON content instead of the console output."
GENERIC_JSON_ADVICE = (
    "Make sure you copied the complete JSON structure with all opening and closing brackets. "
    "Verify there are no syntax errors like trailing commas or unescaped quotes."
)


class InvalidStateTransition(Exception):
    """An orchestrator was driven outside its state machine."""


class ImportOrchestrator:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        decomposer: Optional[DecomposeBatch] = None,
        lenient: bool = False,
        parse_ingredients: bool = True,
        on_progress: Optional[ProgressCallback] = None,
    ):
        self.settings = settings or get_settings()
        self.lenient = lenient
        self.parse_ingredients = parse_ingredients
        self.on_progress = on_progress
        self._decomposer = decomposer
        self._state = ImportState.IDLE
        self._cancel = asyncio.Event()
        self._source_url: Optional[str] = None
        self._raw_json_ld: Any = None
        self._started = 0.0
        self._parsed_at: Optional[datetime] = None

    @property
    def state(self) -> ImportState:
        return self._state

    def cancel(self) -> None:
        """Request cancellation; takes effect at the next ingredient batch boundary."""
        self._cancel.set()

    def _transition(self, new_state: ImportState) -> None:
        if new_state not in ALLOWED_TRANSITIONS[self._state]:
            raise InvalidStateTransition(f"Cannot move from {self._state.value} to {new_state.value}")
        logger.debug("Import state %s -> %s", self._state.value, new_state.value)
        self._state = new_state

    def _result(
        self,
        success: bool,
        errors: List[ValidationIssue],
        warnings: List[ValidationIssue],
        draft: Optional[RecipeDraft] = None,
        input_hint: Optional[str] = None,
        ingredient_parsing: Optional[IngredientParsingSummary] = None,
    ) -> ImportResult:
        attach = draft is not None and (success or self.lenient)
        return ImportResult(
            success=success,
            recipe=draft if attach else None,
            errors=errors,
            warnings=warnings,
            metadata=ImportMetadata(
                parsed_at=self._parsed_at,
                source_url=self._source_url,
                raw_json_ld=self._raw_json_ld,
                parsing_duration_ms=round((time.perf_counter() - self._started) * 1000),
            ),
            state=self._state,
            can_import=draft is not None and has_minimum_viable_content(draft),
            input_hint=input_hint,
            ingredient_parsing=ingredient_parsing,
        )

    def _fail(self, errors: List[ValidationIssue], warnings: Optional[List[ValidationIssue]] = None, **kwargs) -> ImportResult:
        self._transition(ImportState.FAILED)
        logger.info("Import failed: %s", "; ".join(error.message for error in errors))
        return self._result(False, errors, warnings or [], **kwargs)

    async def run(self, raw_text: str, source_url: Optional[str] = None) -> ImportResult:
        """Run one import attempt from pasted text to a terminal state."""
        if self._state != ImportState.IDLE:
            raise InvalidStateTransition("An orchestrator can only run one import; create a new one")
        self._started = time.perf_counter()
        self._parsed_at = datetime.now(timezone.utc)
        self._source_url = source_url
        text = raw_text or ""
        size = get_byte_size(text)
        logger.info("Import started (%d bytes, source_url=%s)", size, source_url)

        limit = self.settings.import_max_input_bytes
        if size > limit:
            return self._fail(
                [
                    create_validation_error(
                        IssueType.INVALID_FORMAT,
                        None,
                        f"Input too large: {size} bytes (limit: {limit} bytes)",
                        "Try copying a smaller portion of the JSON-LD or contact support.",
                    )
                ]
            )
        if not text.strip():
            return self._fail(
                [
                    create_validation_error(
                        IssueType.INVALID_FORMAT,
                        None,
                        "No JSON-LD provided",
                        "Paste the JSON-LD copied from the recipe page.",
                    )
                ]
            )

        self._transition(ImportState.PREPROCESSING)
        cleaned = preprocess_json_input(text)

        self._transition(ImportState.VALIDATING)
        validation = validate_json(cleaned)
        if not validation.valid:
            detection = detect_input_format(text)
            if detection.hint:
                message = f"{INVALID_JSON_MESSAGE} {detection.hint} {RAW_COPY_ADVICE}"
            else:
                message = f"{INVALID_JSON_MESSAGE} {GENERIC_JSON_ADVICE}"
            details = validation.error
            if validation.line is not None:
                details = f"{details} at line {validation.line}, column {validation.column}"
            logger.debug("Invalid JSON input (first 200 chars): %s", cleaned[:200])
            return self._fail(
                [create_validation_error(IssueType.INVALID_FORMAT, None, message, details)],
                input_hint=detection.hint,
            )
        self._raw_json_ld = validation.data

        self._transition(ImportState.EXTRACTING)
        node = find_recipe_node(validation.data)
        if node is None:
            found_type = get_json_ld_type(validation.data)
            if found_type:
                details = (
                    f"Expected Recipe schema but found {found_type}. "
                    "Make sure you're copying the recipe JSON-LD data."
                )
            else:
                details = 'Please ensure the data contains a Recipe type with @type: "Recipe".'
            return self._fail(
                [
                    create_validation_error(
                        IssueType.SCHEMA_MISMATCH, "@type", "No Recipe schema found in JSON-LD", details
                    )
                ]
            )

        draft = extract_recipe_fields(node, source_url=source_url)
        verdict = validate_recipe(draft)
        warnings = (
            verdict.warnings
            + validate_ingredient_lines(draft.recipe_ingredient)
            + validate_instruction_lines(draft.recipe_instructions)
        )
        if not verdict.is_valid:
            return self._fail(verdict.errors, warnings, draft=draft)

        summary: Optional[IngredientParsingSummary] = None
        if draft.recipe_ingredient and self.parse_ingredients:
            self._transition(ImportState.PARSING_INGREDIENTS)
            try:
                draft, summary, parse_warnings = await self._parse_ingredients(draft)
            except IngredientParsingCancelled:
                return self._fail(
                    [
                        create_validation_error(
                            IssueType.CANCELLED,
                            "recipe_ingredient",
                            "Ingredient parsing was cancelled",
                        )
                    ],
                    warnings,
                    draft=draft,
                )
            except Exception as exc:
                logger.exception("Ingredient parsing failed unexpectedly: %s", exc)
                summary = IngredientParsingSummary(completed=False)
                parse_warnings = [_parsing_unavailable_warning(str(exc))]
            warnings = warnings + parse_warnings

        self._transition(ImportState.COMPLETE)
        logger.info("Import complete for '%s' with %d warnings", draft.name[:50], len(warnings))
        return self._result(True, [], warnings, draft=draft, ingredient_parsing=summary)

    async def _parse_ingredients(self, draft: RecipeDraft):
        lines = draft.recipe_ingredient
        decomposer = self._decomposer or get_ingredient_decomposer(self.settings)
        result = await parse_ingredients_in_batches(
            lines,
            decomposer,
            on_progress=self.on_progress,
            signal=self._cancel,
            settings=self.settings,
        )
        if len(result.failed_indices) == len(lines):
            summary = IngredientParsingSummary(
                completed=False,
                failed_ingredients=result.failed_ingredients,
                duration_ms=result.total_duration_ms,
            )
            return draft, summary, [_parsing_unavailable_warning("every ingredient batch failed")]

        parsed = merge_with_fallback(lines, result)
        warnings: List[ValidationIssue] = []
        if result.failed_ingredients:
            warnings.append(
                create_validation_warning(
                    IssueType.INGREDIENT_PARSE,
                    "parsed_ingredients",
                    f"{len(result.failed_ingredients)} ingredient(s) could not be parsed automatically",
                    "They were split by pattern matching and need review",
                    actionable=True,
                )
            )
        needing_review = get_ingredients_needing_review(parsed)
        if needing_review:
            warnings.append(
                create_validation_warning(
                    IssueType.LOW_CONFIDENCE,
                    "parsed_ingredients",
                    f"{len(needing_review)} ingredient(s) need manual review",
                    ", ".join(item.original_text for item in needing_review[:5]),
                    actionable=True,
                )
            )
        draft = draft.model_copy(
            update={
                "parsed_ingredients": parsed,
                "ingredient_parsing_completed": True,
                "ingredient_parsing_date": datetime.now(timezone.utc),
            }
        )
        summary = IngredientParsingSummary(
            completed=True,
            parsed_count=len(result.parsed_ingredients),
            failed_ingredients=result.failed_ingredients,
            duration_ms=result.total_duration_ms,
        )
        return draft, summary, warnings


def _parsing_unavailable_warning(reason: str) -> ValidationIssue:
    return create_validation_warning(
        IssueType.INGREDIENT_PARSE,
        "parsed_ingredients",
        "Ingredient parsing unavailable",
        reason,
    )


async def import_recipe_jsonld(
    raw_text: str,
    source_url: Optional[str] = None,
    lenient: bool = False,
    parse_ingredients: bool = True,
    decomposer: Optional[DecomposeBatch] = None,
    settings: Optional[Settings] = None,
) -> ImportResult:
    """Import entry point: a fresh orchestrator per call."""
    orchestrator = ImportOrchestrator(
        settings=settings,
        decomposer=decomposer,
        lenient=lenient,
        parse_ingredients=parse_ingredients,
    )
    return await orchestrator.run(raw_text, source_url=source_url)
