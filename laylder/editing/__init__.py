"""Schema edit operations: components, placement, breakpoints and links."""

from .lib import (
    PlacementError,
    add_breakpoint,
    add_component,
    clear_links,
    delete_breakpoint,
    delete_component,
    duplicate_component,
    link_components,
    move_component,
    place_component,
    placement_conflicts,
    reorder_layout,
    resize_component,
    suggest_placement,
    unlink_components,
    update_breakpoint,
    update_component,
)

__all__ = [
    "PlacementError",
    "add_component",
    "delete_component",
    "duplicate_component",
    "update_component",
    "reorder_layout",
    "placement_conflicts",
    "suggest_placement",
    "place_component",
    "move_component",
    "resize_component",
    "add_breakpoint",
    "delete_breakpoint",
    "update_breakpoint",
    "link_components",
    "unlink_components",
    "clear_links",
]
