"""Validation module for normalized layout schemas.

Example usage:
    >>> from laylder.validation import normalize_and_validate, format_validation_result
    >>> result = normalize_and_validate(schema)
    >>> print(format_validation_result(result))
"""

from .lib import (
    MAX_BREAKPOINTS,
    RESERVED_BREAKPOINT_NAMES,
    RULES,
    Rule,
    Severity,
    ValidationIssue,
    ValidationResult,
    breakpoint_name_issues,
    format_validation_result,
    get_rule,
    is_valid,
    normalize_and_validate,
    validate_schema,
)

__all__ = [
    "Severity",
    "ValidationIssue",
    "ValidationResult",
    "Rule",
    "RULES",
    "MAX_BREAKPOINTS",
    "RESERVED_BREAKPOINT_NAMES",
    "breakpoint_name_issues",
    "validate_schema",
    "normalize_and_validate",
    "is_valid",
    "get_rule",
    "format_validation_result",
]
