"""Authoritative Schema Module for responsive canvas layouts.

This module is the single source of truth for the layout schema exchanged
between the canvas editor, the normalizer, the validator and the export
layer. It provides:
- Pydantic models for breakpoints, components, rectangles and layouts
- Explicit per-breakpoint lookup semantics for sparse rectangle maps
- JSON load/dump helpers using the application's camelCase wire format
- Factories for empty schemas and per-tag component defaults

Malformed shapes (missing required fields, wrong types) raise pydantic's
``ValidationError`` on construction. Schema-level rule violations are not
checked here; see ``laylder.validation``.
"""

import copy
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictInt
from pydantic.alias_generators import to_camel

SUPPORTED_SCHEMA_VERSION = "2.0"


class _CamelModel(BaseModel):
    """Base model: snake_case attributes, camelCase JSON keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class _OpenModel(_CamelModel):
    """Base for configuration blocks the engine treats as opaque."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow"
    )


# === ENUMS ===


class SemanticTag(str, Enum):
    """HTML5 semantic tag rendered for a component."""

    HEADER = "header"
    NAV = "nav"
    MAIN = "main"
    ASIDE = "aside"
    FOOTER = "footer"
    SECTION = "section"
    ARTICLE = "article"
    DIV = "div"
    FORM = "form"


class PositioningType(str, Enum):
    """CSS positioning strategy.

    - STATIC: Normal document flow (default)
    - FIXED: Pinned to the viewport (typical for headers)
    - STICKY: Pinned once scrolled into position (sidebars, headers)
    - ABSOLUTE: Positioned against the nearest positioned ancestor
    - RELATIVE: Offset from its own normal position
    """

    STATIC = "static"
    FIXED = "fixed"
    STICKY = "sticky"
    ABSOLUTE = "absolute"
    RELATIVE = "relative"


class LayoutType(str, Enum):
    """Internal layout of a component's children."""

    FLEX = "flex"
    GRID = "grid"
    CONTAINER = "container"
    NONE = "none"


class LayoutStructure(str, Enum):
    """Common page structures for a breakpoint layout."""

    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"
    SIDEBAR_MAIN = "sidebar-main"
    SIDEBAR_MAIN_SIDEBAR = "sidebar-main-sidebar"
    CUSTOM = "custom"


# === COMPONENT MODELS ===


class CanvasLayout(_CamelModel):
    """Rectangle in grid-cell units for one breakpoint.

    Attributes:
        x: Starting column (0-based).
        y: Starting row (0-based).
        width: Column span.
        height: Row span.
    """

    x: StrictInt
    y: StrictInt
    width: StrictInt
    height: StrictInt


class PositionOffsets(_OpenModel):
    """Offsets and stacking order for non-static positioning."""

    top: int | float | str | None = None
    right: int | float | str | None = None
    bottom: int | float | str | None = None
    left: int | float | str | None = None
    z_index: int | None = None

    def is_empty(self) -> bool:
        """True when no offset or z-index is set."""
        return all(
            value is None
            for value in (self.top, self.right, self.bottom, self.left, self.z_index)
        )


class ComponentPositioning(_OpenModel):
    """Positioning strategy plus optional offsets."""

    type: PositioningType = PositioningType.STATIC
    position: PositionOffsets | None = None


class ComponentLayout(_OpenModel):
    """Component layout type and its type-specific configuration."""

    type: LayoutType = LayoutType.NONE
    flex: dict[str, Any] | None = None
    grid: dict[str, Any] | None = None
    container: dict[str, Any] | None = None


class ComponentStyling(_OpenModel):
    """Presentation-only attributes, kept apart from layout."""

    width: str | int | None = None
    height: str | int | None = None
    background: str | None = None
    border: str | None = None
    shadow: str | None = None
    class_name: str | None = None


class ResponsiveBehavior(_OpenModel):
    """Per-breakpoint behaviour override."""

    hidden: bool | None = None
    order: int | None = None
    width: str | None = None
    positioning: ComponentPositioning | None = None


class Component(_CamelModel):
    """A placeable page component.

    ``responsive_canvas_layout`` is sparse: a component may define a
    rectangle for only some breakpoints. ``canvas_layout`` is the legacy
    single rectangle used as a fallback for every breakpoint.
    """

    id: str
    name: str
    semantic_tag: SemanticTag
    positioning: ComponentPositioning = Field(default_factory=ComponentPositioning)
    layout: ComponentLayout = Field(default_factory=ComponentLayout)
    styling: ComponentStyling | None = None
    responsive: dict[str, ResponsiveBehavior] | None = None
    props: dict[str, Any] | None = None
    canvas_layout: CanvasLayout | None = None
    responsive_canvas_layout: dict[str, CanvasLayout] = Field(default_factory=dict)

    def explicit_layout(self, breakpoint: str) -> CanvasLayout | None:
        """Rectangle defined for exactly this breakpoint, ignoring the fallback."""
        return self.responsive_canvas_layout.get(breakpoint)

    def layout_for(self, breakpoint: str) -> CanvasLayout | None:
        """Effective rectangle: per-breakpoint entry, else the legacy layout."""
        explicit = self.responsive_canvas_layout.get(breakpoint)
        if explicit is not None:
            return explicit
        return self.canvas_layout

    def has_canvas_layout(self, breakpoint: str | None = None) -> bool:
        """Whether a rectangle exists for ``breakpoint`` (or for any breakpoint)."""
        if breakpoint is not None:
            return self.layout_for(breakpoint) is not None
        return self.canvas_layout is not None or bool(self.responsive_canvas_layout)


# === LAYOUT MODELS ===


class ContainerLayoutConfig(_OpenModel):
    """Layout applied to the whole page container of a breakpoint."""

    type: Literal["flex", "grid"]
    flex: dict[str, Any] | None = None
    grid: dict[str, Any] | None = None


class LayoutRoles(_CamelModel):
    """Special roles assigned to component ids."""

    header: str | None = None
    sidebar: str | None = None
    main: str | None = None
    footer: str | None = None

    def assigned(self) -> dict[str, str]:
        """Role name to component id, for roles that are set."""
        return {
            role: component_id
            for role, component_id in self.model_dump().items()
            if component_id
        }


class LayoutConfig(_CamelModel):
    """Per-breakpoint layout: structure plus active component ids in DOM order."""

    structure: LayoutStructure = LayoutStructure.VERTICAL
    components: list[str] = Field(default_factory=list)
    container_layout: ContainerLayoutConfig | None = None
    roles: LayoutRoles | None = None


class Breakpoint(_CamelModel):
    """Named responsive viewport tier with its own canvas grid."""

    name: str
    min_width: int | float
    grid_cols: StrictInt = Field(ge=1)
    grid_rows: StrictInt = Field(ge=1)


class ComponentLink(_CamelModel):
    """Unordered pair: both ids render the same logical element."""

    source: str
    target: str

    def key(self) -> frozenset[str]:
        """Direction-independent identity of the link."""
        return frozenset((self.source, self.target))

    def touches(self, component_id: str) -> bool:
        """Whether either endpoint is ``component_id``."""
        return component_id in (self.source, self.target)


class Schema(_CamelModel):
    """Complete layout schema.

    Attributes:
        schema_version: Wire format version, must be "2.0" to validate.
        components: Component definitions.
        breakpoints: Breakpoint tiers, expected ascending by min_width.
        layouts: Breakpoint name to LayoutConfig.
        component_links: Cross-breakpoint identity links.
    """

    schema_version: str
    components: list[Component]
    breakpoints: list[Breakpoint]
    layouts: dict[str, LayoutConfig]
    component_links: list[ComponentLink] = Field(default_factory=list)

    def component(self, component_id: str) -> Component | None:
        """First component with ``component_id``, if any."""
        for component in self.components:
            if component.id == component_id:
                return component
        return None

    def component_ids(self) -> list[str]:
        """Component ids in definition order."""
        return [component.id for component in self.components]

    def breakpoint(self, name: str) -> Breakpoint | None:
        """Breakpoint named ``name``, if any."""
        for breakpoint in self.breakpoints:
            if breakpoint.name == name:
                return breakpoint
        return None

    def sorted_breakpoints(self) -> list[Breakpoint]:
        """Breakpoints ascending by min_width (stable for ties)."""
        return sorted(self.breakpoints, key=lambda bp: bp.min_width)

    def active_components(self, breakpoint: str) -> list[Component]:
        """Components listed for ``breakpoint``, in DOM order.

        Ids that do not resolve to a component are skipped and repeated ids
        count once, at their first position.
        """
        layout = self.layouts.get(breakpoint)
        if layout is None:
            return []
        by_id = {component.id: component for component in self.components}
        return [by_id[cid] for cid in dict.fromkeys(layout.components) if cid in by_id]


# === SERIALIZATION ===


def load_schema(data: dict[str, Any] | str | bytes) -> Schema:
    """Build a Schema from a dict or JSON text.

    Raises:
        pydantic.ValidationError: If the input shape is malformed.
    """
    if isinstance(data, (str, bytes)):
        return Schema.model_validate_json(data)
    return Schema.model_validate(data)


def dump_schema(schema: Schema, indent: int | None = 2) -> str:
    """Serialize a Schema to camelCase JSON text."""
    return schema.model_dump_json(by_alias=True, exclude_none=True, indent=indent)


def schema_to_dict(schema: Schema) -> dict[str, Any]:
    """Serialize a Schema to a JSON-compatible camelCase dict."""
    return schema.model_dump(mode="json", by_alias=True, exclude_none=True)


def export_json_schema() -> dict[str, Any]:
    """JSON Schema describing the layout schema wire format."""
    return Schema.model_json_schema(by_alias=True)


# === FACTORIES ===

DEFAULT_GRID_CONFIG: dict[str, dict[str, int]] = {
    "mobile": {"grid_cols": 4, "grid_rows": 8},
    "tablet": {"grid_cols": 8, "grid_rows": 8},
    "desktop": {"grid_cols": 12, "grid_rows": 8},
    "custom": {"grid_cols": 6, "grid_rows": 8},
}

GRID_CONSTRAINTS: dict[str, int] = {
    "min_cols": 2,
    "min_rows": 2,
    "max_cols": 24,
    "max_rows": 24,
}

DEFAULT_MIN_WIDTHS: dict[str, int] = {
    "mobile": 0,
    "tablet": 768,
    "desktop": 1024,
}


def create_schema_with_breakpoint(breakpoint_type: str) -> Schema:
    """Create an empty schema holding a single standard breakpoint.

    Args:
        breakpoint_type: One of "mobile", "tablet", "desktop".

    Raises:
        ValueError: If the breakpoint type is not a standard one.
    """
    if breakpoint_type not in DEFAULT_MIN_WIDTHS:
        raise ValueError(
            f"Unknown breakpoint type: {breakpoint_type} "
            f"(expected one of {', '.join(DEFAULT_MIN_WIDTHS)})"
        )
    return Schema(
        schema_version=SUPPORTED_SCHEMA_VERSION,
        components=[],
        breakpoints=[
            Breakpoint(
                name=breakpoint_type,
                min_width=DEFAULT_MIN_WIDTHS[breakpoint_type],
                **DEFAULT_GRID_CONFIG[breakpoint_type],
            )
        ],
        layouts={breakpoint_type: LayoutConfig()},
    )


def create_empty_schema() -> Schema:
    """Create an empty schema with mobile, tablet and desktop breakpoints."""
    return Schema(
        schema_version=SUPPORTED_SCHEMA_VERSION,
        components=[],
        breakpoints=[
            Breakpoint(name=name, min_width=min_width, **DEFAULT_GRID_CONFIG[name])
            for name, min_width in DEFAULT_MIN_WIDTHS.items()
        ],
        layouts={name: LayoutConfig() for name in DEFAULT_MIN_WIDTHS},
    )


def generate_component_id(components: list[Component]) -> str:
    """Next ``c<n>`` id after the highest existing numeric one."""
    highest = 0
    for component in components:
        if component.id.startswith("c") and component.id[1:].isdigit():
            highest = max(highest, int(component.id[1:]))
    return f"c{highest + 1}"


_DEFAULT_COMPONENT_DATA: dict[SemanticTag, dict[str, Any]] = {
    SemanticTag.HEADER: {
        "name": "Header",
        "positioning": {"type": "sticky", "position": {"top": 0, "z_index": 50}},
        "layout": {
            "type": "container",
            "container": {"maxWidth": "full", "padding": "1rem", "centered": True},
        },
        "styling": {"background": "white", "border": "b", "shadow": "sm"},
    },
    SemanticTag.NAV: {
        "name": "Sidebar",
        "positioning": {"type": "sticky", "position": {"top": "4rem", "z_index": 40}},
        "layout": {"type": "flex", "flex": {"direction": "column", "gap": "1rem"}},
        "styling": {"width": "16rem", "background": "gray-50", "border": "r"},
        "responsive": {
            "mobile": {"hidden": True},
            "tablet": {"hidden": True},
            "desktop": {"hidden": False},
        },
    },
    SemanticTag.MAIN: {
        "name": "Main",
        "positioning": {"type": "static"},
        "layout": {
            "type": "container",
            "container": {"maxWidth": "7xl", "padding": "2rem", "centered": True},
        },
        "styling": {"class_name": "flex-1"},
    },
    SemanticTag.ASIDE: {
        "name": "Aside",
        "positioning": {"type": "static"},
        "layout": {"type": "flex", "flex": {"direction": "column", "gap": "1rem"}},
        "styling": {"width": "16rem", "background": "gray-50"},
    },
    SemanticTag.FOOTER: {
        "name": "Footer",
        "positioning": {"type": "static"},
        "layout": {
            "type": "container",
            "container": {"maxWidth": "full", "padding": "2rem", "centered": True},
        },
        "styling": {"background": "gray-100", "border": "t"},
    },
    SemanticTag.SECTION: {
        "name": "Section",
        "positioning": {"type": "static"},
        "layout": {
            "type": "container",
            "container": {"maxWidth": "7xl", "padding": "2rem", "centered": True},
        },
    },
    SemanticTag.ARTICLE: {
        "name": "Article",
        "positioning": {"type": "static"},
        "layout": {"type": "flex", "flex": {"direction": "column", "gap": "1rem"}},
    },
    SemanticTag.DIV: {
        "name": "Container",
        "positioning": {"type": "static"},
        "layout": {"type": "flex", "flex": {"direction": "column"}},
    },
    SemanticTag.FORM: {
        "name": "Form",
        "positioning": {"type": "static"},
        "layout": {"type": "flex", "flex": {"direction": "column", "gap": "1.5rem"}},
        "styling": {"class_name": "max-w-md p-6 bg-white rounded-lg shadow"},
    },
}


def default_component_data(semantic_tag: SemanticTag | str) -> dict[str, Any]:
    """Default component fields (everything but ``id``) for a semantic tag.

    The returned dict is a fresh copy and can be passed to ``Component``
    together with an id.
    """
    tag = SemanticTag(semantic_tag)
    data = copy.deepcopy(_DEFAULT_COMPONENT_DATA[tag])
    data["semantic_tag"] = tag
    return data


__all__ = [
    "SUPPORTED_SCHEMA_VERSION",
    # Enums
    "SemanticTag",
    "PositioningType",
    "LayoutType",
    "LayoutStructure",
    # Models
    "CanvasLayout",
    "PositionOffsets",
    "ComponentPositioning",
    "ComponentLayout",
    "ComponentStyling",
    "ResponsiveBehavior",
    "Component",
    "ContainerLayoutConfig",
    "LayoutRoles",
    "LayoutConfig",
    "Breakpoint",
    "ComponentLink",
    "Schema",
    # Serialization
    "load_schema",
    "dump_schema",
    "schema_to_dict",
    "export_json_schema",
    # Factories
    "DEFAULT_GRID_CONFIG",
    "GRID_CONSTRAINTS",
    "DEFAULT_MIN_WIDTHS",
    "create_empty_schema",
    "create_schema_with_breakpoint",
    "generate_component_id",
    "default_component_data",
]
