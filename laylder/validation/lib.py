"""Schema validation and static analysis.

Validation is a fixed sequence of independent rules evaluated against a
normalized schema. Each rule yields structured issues instead of raising,
so the caller receives every finding in one pass. Errors block export;
warnings are advisories and never affect validity.
"""

import re
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from laylder.core.log import get_logger
from laylder.geometry import in_bounds, overlaps, rows_intersect, sort_by_canvas_position
from laylder.links import LinkPolicy, check_links
from laylder.normalize import normalize_schema
from laylder.schema import (
    SUPPORTED_SCHEMA_VERSION,
    CanvasLayout,
    Component,
    LayoutStructure,
    LayoutType,
    PositioningType,
    Schema,
    SemanticTag,
)

logger = get_logger("validation")


class Severity(str, Enum):
    """Whether an issue blocks export."""

    ERROR = "error"
    WARNING = "warning"


@dataclass
class ValidationIssue:
    """A single validation finding.

    Attributes:
        code: Stable machine-readable code, e.g. ``NO_COMPONENTS``.
        message: Human-readable description.
        severity: ERROR or WARNING.
        component_id: Component the issue concerns, if any.
        field: Dotted path of the offending field, if any.
    """

    code: str
    message: str
    severity: Severity = Severity.ERROR
    component_id: str | None = None
    field: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.component_id is not None:
            data["componentId"] = self.component_id
        if self.field is not None:
            data["field"] = self.field
        return data


@dataclass
class ValidationResult:
    """Outcome of validating a schema.

    Attributes:
        errors: Issues that block export.
        warnings: Non-blocking advisories.
    """

    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationIssue] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        """True iff there are no errors."""
        return not self.errors

    def codes(self) -> list[str]:
        """Codes of all issues, errors first."""
        return [issue.code for issue in self.errors + self.warnings]

    def add(self, issues: Iterable[ValidationIssue]) -> None:
        for issue in issues:
            if issue.severity is Severity.ERROR:
                self.errors.append(issue)
            else:
                self.warnings.append(issue)

    def to_dict(self) -> dict[str, Any]:
        """Wire form ``{valid, errors, warnings}``."""
        return {
            "valid": self.valid,
            "errors": [issue.to_dict() for issue in self.errors],
            "warnings": [issue.to_dict() for issue in self.warnings],
        }


def _error(code: str, message: str, **kwargs: Any) -> ValidationIssue:
    return ValidationIssue(code, message, Severity.ERROR, **kwargs)


def _warning(code: str, message: str, **kwargs: Any) -> ValidationIssue:
    return ValidationIssue(code, message, Severity.WARNING, **kwargs)


@dataclass(frozen=True)
class Rule:
    """A named check over a schema.

    Attributes:
        name: Short identifier, used for logging and selection.
        check: Callable yielding issues for a schema.
    """

    name: str
    check: Callable[[Schema], Iterable[ValidationIssue]]

    def run(self, schema: Schema) -> ValidationResult:
        """Evaluate this rule alone."""
        result = ValidationResult()
        result.add(self.check(schema))
        return result


# =============================================================================
# Constants
# =============================================================================

COMPONENT_NAME_PATTERN = re.compile(r"[A-Z][a-zA-Z0-9]*")
BREAKPOINT_NAME_PATTERN = re.compile(r"[a-zA-Z0-9_-]+")
MAX_BREAKPOINT_NAME_LENGTH = 100
MAX_BREAKPOINTS = 10
Z_INDEX_RANGE = (0, 9999)

# Names that collide with built-in object members when used as keys.
RESERVED_BREAKPOINT_NAMES = frozenset(
    {
        "__proto__",
        "constructor",
        "prototype",
        "hasOwnProperty",
        "toString",
        "valueOf",
        "isPrototypeOf",
        "propertyIsEnumerable",
        "toLocaleString",
        "__defineGetter__",
        "__defineSetter__",
        "__lookupGetter__",
        "__lookupSetter__",
    }
)


def _duplicates(values: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    repeated: list[str] = []
    for value in values:
        if value in seen and value not in repeated:
            repeated.append(value)
        seen.add(value)
    return repeated


def _unique_breakpoint_names(schema: Schema) -> list[str]:
    return list(dict.fromkeys(bp.name for bp in schema.breakpoints))


# =============================================================================
# Identity Rules
# =============================================================================


def check_version(schema: Schema) -> Iterator[ValidationIssue]:
    if schema.schema_version != SUPPORTED_SCHEMA_VERSION:
        yield _error(
            "INVALID_VERSION",
            f'Schema version must be "{SUPPORTED_SCHEMA_VERSION}", '
            f'got "{schema.schema_version}"',
            field="schemaVersion",
        )


def check_components(schema: Schema) -> Iterator[ValidationIssue]:
    if not schema.components:
        yield _error(
            "NO_COMPONENTS",
            "Schema must have at least one component",
            field="components",
        )
        return

    for component in schema.components:
        if not component.id.strip():
            yield _error(
                "INVALID_COMPONENT_ID",
                "Component ID cannot be empty",
                component_id=component.id,
            )
        if not COMPONENT_NAME_PATTERN.fullmatch(component.name):
            yield _error(
                "INVALID_COMPONENT_NAME",
                f'Component name must be PascalCase, got "{component.name}"',
                component_id=component.id,
                field="name",
            )

    duplicates = _duplicates(schema.component_ids())
    if duplicates:
        yield _error(
            "DUPLICATE_COMPONENT_ID",
            f"Duplicate component IDs found: {', '.join(duplicates)}",
            field="components",
        )


# =============================================================================
# Component Advisories
# =============================================================================


def check_positioning(schema: Schema) -> Iterator[ValidationIssue]:
    for component in schema.components:
        positioning = component.positioning
        position = positioning.position

        if positioning.type in (
            PositioningType.FIXED,
            PositioningType.STICKY,
            PositioningType.ABSOLUTE,
        ) and (position is None or position.is_empty()):
            yield _warning(
                "MISSING_POSITION_VALUES",
                f'Positioning type "{positioning.type.value}" usually requires '
                "position values (top, left, etc.)",
                component_id=component.id,
                field="positioning.position",
            )

        if (
            positioning.type is PositioningType.FIXED
            and position is not None
            and position.top is None
            and position.bottom is None
        ):
            yield _warning(
                "FIXED_WITHOUT_VERTICAL_POSITION",
                'Fixed positioning usually needs either "top" or "bottom" value',
                component_id=component.id,
                field="positioning.position",
            )

        if position is not None and position.z_index is not None:
            low, high = Z_INDEX_RANGE
            if not low <= position.z_index <= high:
                yield _warning(
                    "UNUSUAL_ZINDEX",
                    f"z-index value {position.z_index} is outside typical range "
                    f"({low}-{high})",
                    component_id=component.id,
                    field="positioning.position.zIndex",
                )


def check_component_layout(schema: Schema) -> Iterator[ValidationIssue]:
    for component in schema.components:
        layout = component.layout
        if layout.type is LayoutType.FLEX and not layout.flex:
            yield _warning(
                "FLEX_WITHOUT_CONFIG",
                'Layout type is "flex" but no flex configuration provided',
                component_id=component.id,
                field="layout.flex",
            )
        elif layout.type is LayoutType.GRID:
            if not layout.grid:
                yield _warning(
                    "GRID_WITHOUT_CONFIG",
                    'Layout type is "grid" but no grid configuration provided',
                    component_id=component.id,
                    field="layout.grid",
                )
            elif not layout.grid.get("cols") and not layout.grid.get("rows"):
                yield _warning(
                    "GRID_WITHOUT_COLS_OR_ROWS",
                    "Grid layout should specify either cols or rows (or both)",
                    component_id=component.id,
                    field="layout.grid",
                )
        elif layout.type is LayoutType.CONTAINER and not layout.container:
            yield _warning(
                "CONTAINER_WITHOUT_CONFIG",
                'Layout type is "container" but no container configuration provided',
                component_id=component.id,
                field="layout.container",
            )


def _semantic_advice(component: Component) -> ValidationIssue | None:
    tag = component.semantic_tag
    if tag is SemanticTag.HEADER and component.positioning.type not in (
        PositioningType.FIXED,
        PositioningType.STICKY,
    ):
        return _warning(
            "HEADER_NOT_FIXED_OR_STICKY",
            'Semantic tag "header" is typically fixed or sticky positioned',
            component_id=component.id,
            field="positioning.type",
        )
    if tag is SemanticTag.FOOTER and component.positioning.type is not PositioningType.STATIC:
        return _warning(
            "FOOTER_NOT_STATIC",
            'Semantic tag "footer" is typically static positioned',
            component_id=component.id,
            field="positioning.type",
        )
    if tag is SemanticTag.NAV and component.layout.type is not LayoutType.FLEX:
        return _warning(
            "NAV_NOT_FLEX",
            'Semantic tag "nav" typically uses flex layout',
            component_id=component.id,
            field="layout.type",
        )
    if tag is SemanticTag.MAIN:
        class_name = (component.styling.class_name if component.styling else None) or ""
        if component.layout.type is not LayoutType.CONTAINER and "flex-1" not in class_name:
            return _warning(
                "MAIN_WITHOUT_FLEX1_OR_CONTAINER",
                'Semantic tag "main" typically uses container layout or flex-1 class',
                component_id=component.id,
                field="layout.type",
            )
    return None


def check_semantic_tags(schema: Schema) -> Iterator[ValidationIssue]:
    for component in schema.components:
        issue = _semantic_advice(component)
        if issue is not None:
            yield issue


# =============================================================================
# Breakpoint Rules
# =============================================================================


def check_breakpoints(schema: Schema) -> Iterator[ValidationIssue]:
    breakpoints = schema.breakpoints
    if not breakpoints:
        yield _error(
            "NO_BREAKPOINTS",
            "Schema must have at least one breakpoint",
            field="breakpoints",
        )
        return

    if len(breakpoints) > MAX_BREAKPOINTS:
        yield _error(
            "TOO_MANY_BREAKPOINTS",
            f"Schema has {len(breakpoints)} breakpoints; at most "
            f"{MAX_BREAKPOINTS} are allowed",
            field="breakpoints",
        )

    duplicates = _duplicates(bp.name for bp in breakpoints)
    if duplicates:
        yield _error(
            "DUPLICATE_BREAKPOINT_NAME",
            f"Duplicate breakpoint names found: {', '.join(duplicates)}",
            field="breakpoints",
        )

    widths = [bp.min_width for bp in breakpoints]
    if widths != sorted(widths):
        yield _warning(
            "BREAKPOINTS_NOT_SORTED",
            "Breakpoints should be sorted by minWidth in ascending order",
            field="breakpoints",
        )

    for bp in breakpoints:
        if bp.min_width < 0:
            yield _error(
                "INVALID_MIN_WIDTH",
                f'Breakpoint "{bp.name}" has negative minWidth: {bp.min_width}',
                field=f"breakpoints.{bp.name}.minWidth",
            )


def breakpoint_name_issues(name: str) -> list[ValidationIssue]:
    """Problems with a single breakpoint name.

    An empty name is reported alone; otherwise length, character set and
    reserved words are checked independently.
    """
    field_path = f"breakpoints.{name}.name"
    if not name.strip():
        return [
            _error(
                "EMPTY_BREAKPOINT_NAME",
                "Breakpoint name cannot be empty",
                field="breakpoints",
            )
        ]

    issues: list[ValidationIssue] = []
    if len(name) > MAX_BREAKPOINT_NAME_LENGTH:
        issues.append(
            _error(
                "BREAKPOINT_NAME_TOO_LONG",
                f"Breakpoint name is {len(name)} characters; at most "
                f"{MAX_BREAKPOINT_NAME_LENGTH} are allowed",
                field=field_path,
            )
        )
    if not BREAKPOINT_NAME_PATTERN.fullmatch(name):
        issues.append(
            _error(
                "INVALID_BREAKPOINT_NAME",
                f'Breakpoint name "{name}" may only contain ASCII letters, digits, '
                "hyphens and underscores",
                field=field_path,
            )
        )
    if name in RESERVED_BREAKPOINT_NAMES:
        issues.append(
            _error(
                "RESERVED_BREAKPOINT_NAME",
                f'Breakpoint name "{name}" is a reserved identifier',
                field=field_path,
            )
        )
    return issues


def check_breakpoint_names(schema: Schema) -> Iterator[ValidationIssue]:
    for bp in schema.breakpoints:
        yield from breakpoint_name_issues(bp.name)


# =============================================================================
# Layout Rules
# =============================================================================


def check_layouts(schema: Schema) -> Iterator[ValidationIssue]:
    known_ids = set(schema.component_ids())

    for name in _unique_breakpoint_names(schema):
        layout = schema.layouts.get(name)
        base = f"layouts.{name}"
        if layout is None:
            yield _error(
                "MISSING_LAYOUT",
                f"Missing layout configuration for breakpoint: {name}",
                field=base,
            )
            continue

        if not layout.components:
            report = _error if schema.components else _warning
            yield report(
                "EMPTY_LAYOUT",
                f'Layout for "{name}" has no components',
                field=f"{base}.components",
            )

        seen: set[str] = set()
        for component_id in layout.components:
            if component_id in seen:
                yield _warning(
                    "DUPLICATE_LAYOUT_COMPONENT",
                    f'Component "{component_id}" is listed more than once in "{name}"',
                    component_id=component_id,
                    field=f"{base}.components",
                )
            seen.add(component_id)
            if component_id not in known_ids:
                yield _error(
                    "INVALID_COMPONENT_REFERENCE",
                    f"Layout references non-existent component: {component_id}",
                    component_id=component_id,
                    field=f"{base}.components",
                )

        if layout.roles is not None:
            for role, component_id in layout.roles.assigned().items():
                if component_id not in layout.components:
                    yield _error(
                        "ROLE_COMPONENT_NOT_IN_LAYOUT",
                        f'Role "{role}" references component "{component_id}" '
                        "which is not in the layout",
                        component_id=component_id,
                        field=f"{base}.roles.{role}",
                    )

        container = layout.container_layout
        direction = (container.flex or {}).get("direction") if container else None
        is_flex = container is not None and container.type == "flex"
        if layout.structure is LayoutStructure.VERTICAL and is_flex and direction != "column":
            yield _warning(
                "VERTICAL_STRUCTURE_NOT_COLUMN",
                'Structure "vertical" typically uses flex direction "column"',
                field=f"{base}.containerLayout.flex.direction",
            )
        elif layout.structure is LayoutStructure.HORIZONTAL and is_flex and direction != "row":
            yield _warning(
                "HORIZONTAL_STRUCTURE_NOT_ROW",
                'Structure "horizontal" typically uses flex direction "row"',
                field=f"{base}.containerLayout.flex.direction",
            )
        elif layout.structure is LayoutStructure.SIDEBAR_MAIN and (
            layout.roles is None or not layout.roles.sidebar or not layout.roles.main
        ):
            yield _warning(
                "SIDEBAR_MAIN_WITHOUT_ROLES",
                'Structure "sidebar-main" should specify sidebar and main roles',
                field=f"{base}.roles",
            )


# =============================================================================
# Canvas Rules
# =============================================================================


def _authored_rects(component: Component) -> Iterator[tuple[str | None, CanvasLayout]]:
    if component.canvas_layout is not None:
        yield None, component.canvas_layout
    yield from component.responsive_canvas_layout.items()


def _placed(schema: Schema, breakpoint: str) -> list[tuple[Component, CanvasLayout]]:
    """Active components with an effective rectangle, in DOM order."""
    placed = []
    for component in schema.active_components(breakpoint):
        rect = component.layout_for(breakpoint)
        if rect is not None:
            placed.append((component, rect))
    return placed


def _label(component: Component) -> str:
    return f'"{component.name}" ({component.id})'


def check_canvas_bounds(schema: Schema) -> Iterator[ValidationIssue]:
    for component in schema.components:
        for breakpoint, rect in _authored_rects(component):
            context = f' in "{breakpoint}" breakpoint' if breakpoint else ""
            field_path = (
                f"responsiveCanvasLayout.{breakpoint}" if breakpoint else "canvasLayout"
            )
            if rect.x < 0 or rect.y < 0:
                yield _error(
                    "CANVAS_NEGATIVE_COORDINATE",
                    f"Component {_label(component)} has negative Canvas coordinates "
                    f"(x: {rect.x}, y: {rect.y}){context}. "
                    "Coordinates must be non-negative.",
                    component_id=component.id,
                    field=field_path,
                )
            if rect.width <= 0 or rect.height <= 0:
                yield _warning(
                    "CANVAS_ZERO_SIZE",
                    f"Component {_label(component)} has no visible area "
                    f"(width: {rect.width}, height: {rect.height}){context}.",
                    component_id=component.id,
                    field=field_path,
                )

        if component.has_canvas_layout() and not any(
            component.id in layout.components for layout in schema.layouts.values()
        ):
            yield _warning(
                "CANVAS_COMPONENT_NOT_IN_LAYOUT",
                f"Component {_label(component)} has Canvas layout information but is "
                "not included in any breakpoint's layout. It will not be rendered.",
                component_id=component.id,
                field="canvasLayout",
            )

    checked: set[str] = set()
    for bp in schema.breakpoints:
        if bp.name in checked:
            continue
        checked.add(bp.name)
        for component, rect in _placed(schema, bp.name):
            if rect.x < 0 or rect.y < 0:
                continue
            if not in_bounds(rect, bp.grid_cols, bp.grid_rows):
                yield _error(
                    "CANVAS_OUT_OF_BOUNDS",
                    f"Component {_label(component)} exceeds grid boundaries in "
                    f'"{bp.name}" breakpoint. Position: ({rect.x}, {rect.y}), '
                    f"Size: {rect.width}x{rect.height}, "
                    f"Grid: {bp.grid_cols}x{bp.grid_rows}.",
                    component_id=component.id,
                    field=f"responsiveCanvasLayout.{bp.name}",
                )


def check_canvas_overlap(schema: Schema) -> Iterator[ValidationIssue]:
    for name in _unique_breakpoint_names(schema):
        placed = _placed(schema, name)
        for i, (first, first_rect) in enumerate(placed):
            for second, second_rect in placed[i + 1 :]:
                if overlaps(first_rect, second_rect):
                    yield _error(
                        "CANVAS_COMPONENTS_OVERLAP",
                        f"Components {_label(first)} and {_label(second)} have "
                        f'overlapping Canvas Grid positions in "{name}" breakpoint.',
                        component_id=second.id,
                        field=f"layouts.{name}",
                    )


def check_canvas_order(schema: Schema) -> Iterator[ValidationIssue]:
    for name in _unique_breakpoint_names(schema):
        layout = schema.layouts.get(name)
        if layout is None:
            continue

        for component in schema.active_components(name):
            if component.layout_for(name) is None:
                yield _warning(
                    "MISSING_CANVAS_LAYOUT",
                    f"Component {_label(component)} has no Canvas layout in "
                    f'"{name}". Canvas-based visual layout may not be accurate.',
                    component_id=component.id,
                    field=f"layouts.{name}",
                )

        placed = _placed(schema, name)
        if not placed:
            continue
        rects = {component.id: rect for component, rect in placed}
        dom_order = [component.id for component, _ in placed]
        canvas_order = sort_by_canvas_position(dom_order, rects.get)
        if canvas_order != dom_order:
            affected = [
                cid for cid, dom_id in zip(canvas_order, dom_order) if cid != dom_id
            ]
            yield _warning(
                "CANVAS_LAYOUT_ORDER_MISMATCH",
                f'Visual layout differs from DOM order in "{name}" breakpoint. '
                f"Components affected: {', '.join(affected)}. "
                f"Canvas order: [{', '.join(canvas_order)}], "
                f"Layout order: [{', '.join(dom_order)}]",
                field=f"layouts.{name}.components",
            )

        pairs = [
            f"{first.name} ({first.id}) & {second.name} ({second.id})"
            for i, (first, first_rect) in enumerate(placed)
            for second, second_rect in placed[i + 1 :]
            if rows_intersect(first_rect, second_rect)
        ]
        if pairs:
            yield _warning(
                "COMPLEX_GRID_LAYOUT_DETECTED",
                f'Complex 2D Grid layout detected in "{name}" with components '
                f"side-by-side: {'; '.join(pairs)}.",
                field=f"layouts.{name}",
            )


# =============================================================================
# Link Rules
# =============================================================================


def check_component_links(schema: Schema) -> Iterator[ValidationIssue]:
    for problem in check_links(schema.component_links, schema.component_ids()):
        yield _warning("INVALID_COMPONENT_LINK", problem, field="componentLinks")


# =============================================================================
# Engine
# =============================================================================

RULES: tuple[Rule, ...] = (
    Rule("version", check_version),
    Rule("components", check_components),
    Rule("positioning", check_positioning),
    Rule("component-layout", check_component_layout),
    Rule("semantic-tags", check_semantic_tags),
    Rule("breakpoints", check_breakpoints),
    Rule("breakpoint-names", check_breakpoint_names),
    Rule("layouts", check_layouts),
    Rule("canvas-bounds", check_canvas_bounds),
    Rule("canvas-overlap", check_canvas_overlap),
    Rule("canvas-order", check_canvas_order),
    Rule("component-links", check_component_links),
)


def validate_schema(schema: Schema, rules: Iterable[Rule] = RULES) -> ValidationResult:
    """Run every rule against ``schema`` and collect all findings.

    Expects a normalized schema; use ``normalize_and_validate`` for raw
    input. Never raises for a well-typed schema.

    Args:
        schema: Schema to check. Not modified.
        rules: Rules to evaluate, in order.

    Returns:
        ValidationResult: Errors and warnings in rule order.

    Example:
        >>> result = validate_schema(schema)
        >>> if not result.valid:
        ...     print(format_validation_result(result))
    """
    result = ValidationResult()
    for rule in rules:
        before = len(result.errors) + len(result.warnings)
        result.add(rule.check(schema))
        found = len(result.errors) + len(result.warnings) - before
        if found:
            logger.debug(f"Rule '{rule.name}' reported {found} issue(s)")
    return result


def normalize_and_validate(
    schema: Schema, policy: LinkPolicy = LinkPolicy.TRANSITIVE
) -> ValidationResult:
    """Normalize ``schema`` then validate the result."""
    return validate_schema(normalize_schema(schema, policy))


def is_valid(schema: Schema) -> bool:
    """Check if a normalized schema has no errors."""
    return validate_schema(schema).valid


def get_rule(name: str) -> Rule:
    """Look up a rule by name.

    Raises:
        KeyError: If no rule has that name.
    """
    for rule in RULES:
        if rule.name == name:
            return rule
    raise KeyError(name)


def _format_issue(index: int, issue: ValidationIssue) -> str:
    line = f"  {index}. [{issue.code}] {issue.message}"
    if issue.component_id:
        line += f" (Component: {issue.component_id})"
    if issue.field:
        line += f" (Field: {issue.field})"
    return line


def format_validation_result(result: ValidationResult) -> str:
    """Render a result as a human-readable report."""
    lines = ["Schema validation passed" if result.valid else "Schema validation failed"]

    if result.errors:
        lines.append("\nErrors:")
        lines.extend(_format_issue(i, e) for i, e in enumerate(result.errors, start=1))

    if result.warnings:
        lines.append("\nWarnings:")
        lines.extend(_format_issue(i, w) for i, w in enumerate(result.warnings, start=1))

    return "\n".join(lines)


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
