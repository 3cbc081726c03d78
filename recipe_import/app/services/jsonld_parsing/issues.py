"""Construction and presentation of import errors and warnings."""

from typing import Optional

from recipe_import.app.schemas.import_result import IssueType, Severity, ValidationIssue

RECOVERY_SUGGESTIONS = {
    IssueType.INVALID_FORMAT: (
        "Check the JSON-LD format and try again. Make sure you copied the entire "
        "JSON-LD block from the recipe website."
    ),
    IssueType.SCHEMA_MISMATCH: (
        'This doesn\'t appear to be a recipe. Look for JSON-LD data with @type: "Recipe" '
        "on the recipe website."
    ),
    IssueType.MISSING_REQUIRED_FIELD: "Fix the missing required fields and try importing again.",
    IssueType.INGREDIENT_PARSE: (
        "You can continue with the successfully parsed ingredients and manually edit the failed ones."
    ),
    IssueType.LOW_CONFIDENCE: "Review the highlighted ingredients before saving.",
    IssueType.CANCELLED: "Start the import again when you are ready.",
}


def create_validation_error(
    issue_type: IssueType,
    field: Optional[str],
    message: str,
    details: Optional[str] = None,
) -> ValidationIssue:
    return ValidationIssue(
        type=issue_type,
        field=field,
        message=message,
        details=details,
        severity=Severity.ERROR,
    )


def create_validation_warning(
    issue_type: IssueType,
    field: Optional[str],
    message: str,
    details: Optional[str] = None,
    actionable: bool = False,
) -> ValidationIssue:
    return ValidationIssue(
        type=issue_type,
        field=field,
        message=message,
        details=details,
        severity=Severity.WARNING,
        actionable=actionable,
    )


def is_recoverable(issue: ValidationIssue) -> bool:
    """Whether editing the input and retrying can clear the issue."""
    return issue.type != IssueType.CANCELLED


def format_issue(issue: ValidationIssue) -> str:
    if issue.details:
        return f"{issue.message}: {issue.details}"
    return issue.message


def recovery_suggestion(issue_type: IssueType) -> Optional[str]:
    return RECOVERY_SUGGESTIONS.get(issue_type)
