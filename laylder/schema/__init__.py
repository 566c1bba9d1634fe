"""Schema module - authoritative source for the responsive layout schema.

This module provides:
- Pydantic models for breakpoints, components, rectangles, layouts and links
- JSON load/dump in the camelCase wire format
- Factories for empty schemas and per-tag component defaults

Example usage:
    >>> from laylder.schema import load_schema, dump_schema
    >>> schema = load_schema(json_text)
    >>> schema.component("c1").layout_for("desktop")
"""

from .lib import (
    DEFAULT_GRID_CONFIG,
    DEFAULT_MIN_WIDTHS,
    GRID_CONSTRAINTS,
    SUPPORTED_SCHEMA_VERSION,
    Breakpoint,
    CanvasLayout,
    Component,
    ComponentLayout,
    ComponentLink,
    ComponentPositioning,
    ComponentStyling,
    ContainerLayoutConfig,
    LayoutConfig,
    LayoutRoles,
    LayoutStructure,
    LayoutType,
    PositionOffsets,
    PositioningType,
    ResponsiveBehavior,
    Schema,
    SemanticTag,
    create_empty_schema,
    create_schema_with_breakpoint,
    default_component_data,
    dump_schema,
    export_json_schema,
    generate_component_id,
    load_schema,
    schema_to_dict,
)

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
