"""JSON-LD recipe parsing package.

This package turns pasted schema.org JSON-LD into a validated recipe draft:
input cleanup, strict JSON validation, Recipe node extraction, field mapping
and content validation.
"""

from recipe_import.app.services.jsonld_parsing.extraction_instructions import get_extraction_instructions
from recipe_import.app.services.jsonld_parsing.field_extractor import (
    extract_recipe_fields,
    find_recipe_node,
    get_json_ld_type,
    is_recipe_type,
)
from recipe_import.app.services.jsonld_parsing.issues import (
    create_validation_error,
    create_validation_warning,
    format_issue,
    is_recoverable,
    recovery_suggestion,
)
from recipe_import.app.services.jsonld_parsing.json_validator import JsonValidationResult, validate_json
from recipe_import.app.services.jsonld_parsing.parsing_utils import (
    canonical_unit,
    clean_text,
    extract_image,
    extract_instruction_text,
    format_duration_readable,
    is_known_unit,
    normalize_fraction_display,
    normalize_unit,
    parse_iso8601_duration,
    pluralize,
    singularize,
)
from recipe_import.app.services.jsonld_parsing.preprocessor import (
    InputFormatDetection,
    detect_input_format,
    get_byte_size,
    has_escape_markers,
    is_within_size_limit,
    preprocess_json_input,
)
from recipe_import.app.services.jsonld_parsing.recipe_validator import (
    has_minimum_viable_content,
    validate_ingredient_lines,
    validate_instruction_lines,
    validate_recipe,
)

__all__ = [
    # Input cleanup
    "InputFormatDetection",
    "detect_input_format",
    "get_byte_size",
    "has_escape_markers",
    "is_within_size_limit",
    "preprocess_json_input",
    # JSON validation
    "JsonValidationResult",
    "validate_json",
    # Extraction
    "extract_recipe_fields",
    "find_recipe_node",
    "get_extraction_instructions",
    "get_json_ld_type",
    "is_recipe_type",
    # Recipe validation
    "has_minimum_viable_content",
    "validate_ingredient_lines",
    "validate_instruction_lines",
    "validate_recipe",
    # Issues
    "create_validation_error",
    "create_validation_warning",
    "format_issue",
    "is_recoverable",
    "recovery_suggestion",
    # Parsing utilities
    "canonical_unit",
    "clean_text",
    "extract_image",
    "extract_instruction_text",
    "format_duration_readable",
    "is_known_unit",
    "normalize_fraction_display",
    "normalize_unit",
    "parse_iso8601_duration",
    "pluralize",
    "singularize",
]
