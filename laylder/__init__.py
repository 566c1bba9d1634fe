"""laylder: schema normalization and canvas layout consistency engine."""

from laylder.areas import areas_to_rects, rects_to_areas
from laylder.geometry import Rect, in_bounds, overlaps
from laylder.links import LinkPolicy, groups_of
from laylder.normalize import normalize_schema
from laylder.schema import Schema, dump_schema, load_schema
from laylder.validation import (
    ValidationIssue,
    ValidationResult,
    normalize_and_validate,
    validate_schema,
)

__all__ = [
    # Schema
    "Schema",
    "load_schema",
    "dump_schema",
    # Geometry
    "Rect",
    "overlaps",
    "in_bounds",
    # Areas
    "areas_to_rects",
    "rects_to_areas",
    # Links
    "LinkPolicy",
    "groups_of",
    # Pipeline
    "normalize_schema",
    "validate_schema",
    "normalize_and_validate",
    "ValidationIssue",
    "ValidationResult",
]
