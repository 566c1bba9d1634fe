"""Pure edit operations on a schema.

Each operation returns a new Schema and leaves its input untouched, so a
caller can keep the previous value for undo. Unknown component ids and
breakpoint names are programming errors and raise ``KeyError``; a
placement that leaves the grid or overlaps another active component
raises ``PlacementError``.
"""

from collections.abc import Mapping
from typing import Any

from laylder.core.log import get_logger
from laylder.geometry import (
    Rect,
    find_empty_slot,
    in_bounds,
    is_valid_placement,
    overlaps,
    recommended_size,
)
from laylder.links import LinkPolicy, add_link, default_policy, remove_link
from laylder.schema import (
    Breakpoint,
    CanvasLayout,
    Component,
    LayoutConfig,
    Schema,
    generate_component_id,
)

logger = get_logger("editing")


class PlacementError(Exception):
    """Raised when a rectangle cannot be placed.

    Attributes:
        component_id: Component being placed.
        breakpoint: Breakpoint the placement targets.
        conflicts: Ids of active components the rectangle would overlap.
    """

    def __init__(
        self,
        message: str,
        component_id: str,
        breakpoint: str,
        conflicts: list[str] | None = None,
    ):
        super().__init__(message)
        self.component_id = component_id
        self.breakpoint = breakpoint
        self.conflicts = conflicts or []


def _require_component(schema: Schema, component_id: str) -> Component:
    component = schema.component(component_id)
    if component is None:
        raise KeyError(f"Unknown component: {component_id}")
    return component


def _require_breakpoint(schema: Schema, name: str) -> Breakpoint:
    breakpoint = schema.breakpoint(name)
    if breakpoint is None:
        raise KeyError(f"Unknown breakpoint: {name}")
    return breakpoint


def _layout(schema: Schema, breakpoint: str) -> LayoutConfig:
    """Layout for ``breakpoint``, created empty when missing."""
    layout = schema.layouts.get(breakpoint)
    if layout is None:
        layout = LayoutConfig()
        schema.layouts[breakpoint] = layout
    return layout


# =============================================================================
# Components
# =============================================================================


def add_component(
    schema: Schema,
    data: Mapping[str, Any],
    breakpoint: str,
    rect: CanvasLayout | None = None,
    auto_place: bool = True,
) -> Schema:
    """Add a component and activate it at ``breakpoint``.

    Without ``rect`` the component is placed in the first free slot sized
    for its semantic tag, falling back to a single cell. It stays unplaced
    when neither fits.

    Args:
        schema: Schema to edit.
        data: Component fields without ``id`` (see ``default_component_data``).
        breakpoint: Breakpoint whose layout receives the new id.
        rect: Optional rectangle for ``breakpoint``, checked like a move.
        auto_place: Search for a free slot when ``rect`` is None.

    Returns:
        Schema: New schema; the added component is the last one.

    Raises:
        KeyError: If ``breakpoint`` does not exist.
        PlacementError: If ``rect`` is out of bounds or overlaps.
    """
    _require_breakpoint(schema, breakpoint)
    result = schema.model_copy(deep=True)
    new_id = generate_component_id(result.components)
    fields = {key: value for key, value in data.items() if key != "id"}
    result.components.append(Component.model_validate({**fields, "id": new_id}))
    _layout(result, breakpoint).components.append(new_id)
    logger.debug(f"Added component '{new_id}' at '{breakpoint}'")

    if rect is None and auto_place:
        rect = suggest_placement(result, new_id, breakpoint)
        if rect is None:
            logger.debug(f"No free slot for '{new_id}' in '{breakpoint}'")
    if rect is not None:
        return place_component(result, new_id, breakpoint, rect)
    return result


def delete_component(schema: Schema, component_id: str) -> Schema:
    """Remove a component and every reference to it.

    Layout memberships, role assignments and links touching the id are
    all removed.
    """
    _require_component(schema, component_id)
    result = schema.model_copy(deep=True)
    result.components = [c for c in result.components if c.id != component_id]

    for layout in result.layouts.values():
        layout.components = [cid for cid in layout.components if cid != component_id]
        if layout.roles is not None:
            for role, assigned in layout.roles.assigned().items():
                if assigned == component_id:
                    setattr(layout.roles, role, None)
            if not layout.roles.assigned():
                layout.roles = None

    result.component_links = [
        link for link in result.component_links if not link.touches(component_id)
    ]
    logger.debug(f"Deleted component '{component_id}'")
    return result


def duplicate_component(schema: Schema, component_id: str, breakpoint: str) -> Schema:
    """Copy a component under a new id and activate it at ``breakpoint``.

    The copy is named ``<Name>Copy`` and carries no rectangles, so it never
    lands on top of the original.
    """
    original = _require_component(schema, component_id)
    data = original.model_dump(exclude={"id", "canvas_layout", "responsive_canvas_layout"})
    data["name"] = f"{original.name}Copy"
    return add_component(schema, data, breakpoint)


def update_component(
    schema: Schema, component_id: str, changes: Mapping[str, Any]
) -> Schema:
    """Replace top-level fields of a component.

    ``changes`` uses attribute names (``semantic_tag``, not ``semanticTag``).
    The id cannot change.
    """
    _require_component(schema, component_id)
    if "id" in changes:
        raise ValueError("Component id cannot be changed")
    result = schema.model_copy(deep=True)
    result.components = [
        Component.model_validate({**c.model_dump(), **changes}) if c.id == component_id else c
        for c in result.components
    ]
    return result


def reorder_layout(schema: Schema, breakpoint: str, order: list[str]) -> Schema:
    """Set the DOM order of a breakpoint's layout.

    Raises:
        KeyError: If the breakpoint has no layout.
        ValueError: If ``order`` is not a permutation of the current ids.
    """
    if breakpoint not in schema.layouts:
        raise KeyError(f"No layout for breakpoint: {breakpoint}")
    if sorted(order) != sorted(schema.layouts[breakpoint].components):
        raise ValueError(f"New order must contain exactly the ids in '{breakpoint}'")
    result = schema.model_copy(deep=True)
    result.layouts[breakpoint].components = list(order)
    return result


# =============================================================================
# Placement
# =============================================================================


def placement_conflicts(
    schema: Schema, component_id: str, breakpoint: str, rect: CanvasLayout
) -> list[str]:
    """Ids of other active components whose rectangle ``rect`` would overlap."""
    return [
        other.id
        for other in schema.active_components(breakpoint)
        if other.id != component_id
        and (other_rect := other.layout_for(breakpoint)) is not None
        and overlaps(rect, other_rect)
    ]


def suggest_placement(
    schema: Schema, component_id: str, breakpoint: str
) -> CanvasLayout | None:
    """Free rectangle for a component at ``breakpoint``, or None if none fits.

    Tries the size recommended for the component's semantic tag, then a
    single cell.
    """
    component = _require_component(schema, component_id)
    bp = _require_breakpoint(schema, breakpoint)
    placed = {
        other.id: other_rect
        for other in schema.active_components(breakpoint)
        if other.id != component_id
        and (other_rect := other.layout_for(breakpoint)) is not None
    }

    width, height = recommended_size(component.semantic_tag, bp.grid_cols, bp.grid_rows)
    for size in dict.fromkeys([(width, height), (1, 1)]):
        slot = find_empty_slot(placed, bp.grid_cols, bp.grid_rows, *size)
        if is_valid_placement(slot, placed.values(), bp.grid_cols, bp.grid_rows):
            return CanvasLayout(x=slot.x, y=slot.y, width=slot.width, height=slot.height)
    return None


def place_component(
    schema: Schema, component_id: str, breakpoint: str, rect: CanvasLayout
) -> Schema:
    """Set a component's rectangle for one breakpoint.

    Edge-adjacent neighbours are allowed. The component joins the
    breakpoint's layout if it was not active there.

    Raises:
        KeyError: If the component or breakpoint does not exist.
        PlacementError: If ``rect`` leaves the grid or overlaps another
            active component.
    """
    _require_component(schema, component_id)
    bp = _require_breakpoint(schema, breakpoint)

    if not in_bounds(rect, bp.grid_cols, bp.grid_rows):
        raise PlacementError(
            f"Rectangle {Rect.from_layout(rect)} is outside the "
            f"{bp.grid_cols}x{bp.grid_rows} grid of '{breakpoint}'",
            component_id,
            breakpoint,
        )

    conflicts = placement_conflicts(schema, component_id, breakpoint, rect)
    if conflicts:
        raise PlacementError(
            f"Rectangle for '{component_id}' overlaps {', '.join(conflicts)} "
            f"in '{breakpoint}'",
            component_id,
            breakpoint,
            conflicts,
        )

    result = schema.model_copy(deep=True)
    component = result.component(component_id)
    component.responsive_canvas_layout[breakpoint] = rect.model_copy()
    layout = _layout(result, breakpoint)
    if component_id not in layout.components:
        layout.components.append(component_id)
    logger.debug(f"Placed '{component_id}' at {Rect.from_layout(rect)} in '{breakpoint}'")
    return result


def _current_rect(schema: Schema, component_id: str, breakpoint: str) -> CanvasLayout:
    rect = _require_component(schema, component_id).layout_for(breakpoint)
    if rect is None:
        raise PlacementError(
            f"'{component_id}' has no rectangle in '{breakpoint}'",
            component_id,
            breakpoint,
        )
    return rect


def move_component(
    schema: Schema, component_id: str, breakpoint: str, x: int, y: int
) -> Schema:
    """Move a component's rectangle to ``(x, y)``, keeping its size."""
    current = _current_rect(schema, component_id, breakpoint)
    moved = CanvasLayout(x=x, y=y, width=current.width, height=current.height)
    return place_component(schema, component_id, breakpoint, moved)


def resize_component(
    schema: Schema, component_id: str, breakpoint: str, width: int, height: int
) -> Schema:
    """Resize a component's rectangle, keeping its origin."""
    current = _current_rect(schema, component_id, breakpoint)
    resized = CanvasLayout(x=current.x, y=current.y, width=width, height=height)
    return place_component(schema, component_id, breakpoint, resized)


# =============================================================================
# Breakpoints
# =============================================================================


def _sort_breakpoints(schema: Schema) -> None:
    schema.breakpoints = sorted(schema.breakpoints, key=lambda bp: bp.min_width)


def add_breakpoint(schema: Schema, breakpoint: Breakpoint) -> Schema:
    """Add a breakpoint with an empty vertical layout.

    Breakpoints are kept sorted by ``min_width``.

    Raises:
        ValueError: If the name is already used.
    """
    if schema.breakpoint(breakpoint.name) is not None:
        raise ValueError(f"Breakpoint already exists: {breakpoint.name}")
    result = schema.model_copy(deep=True)
    result.breakpoints.append(breakpoint.model_copy())
    _sort_breakpoints(result)
    result.layouts[breakpoint.name] = LayoutConfig()
    logger.debug(f"Added breakpoint '{breakpoint.name}'")
    return result


def delete_breakpoint(schema: Schema, name: str) -> Schema:
    """Remove a breakpoint, its layout and everything components authored for it.

    Raises:
        KeyError: If the breakpoint does not exist.
        ValueError: If it is the last breakpoint.
    """
    _require_breakpoint(schema, name)
    if len(schema.breakpoints) <= 1:
        raise ValueError("Cannot delete the last breakpoint")
    result = schema.model_copy(deep=True)
    result.breakpoints = [bp for bp in result.breakpoints if bp.name != name]
    result.layouts.pop(name, None)
    for component in result.components:
        component.responsive_canvas_layout.pop(name, None)
        if component.responsive:
            component.responsive.pop(name, None)
    logger.debug(f"Deleted breakpoint '{name}'")
    return result


def update_breakpoint(schema: Schema, old_name: str, breakpoint: Breakpoint) -> Schema:
    """Replace a breakpoint. A rename moves its layout, rectangles and
    per-component responsive overrides along.

    Raises:
        KeyError: If ``old_name`` does not exist.
        ValueError: If the new name belongs to another breakpoint.
    """
    _require_breakpoint(schema, old_name)
    new_name = breakpoint.name
    if new_name != old_name and schema.breakpoint(new_name) is not None:
        raise ValueError(f"Breakpoint already exists: {new_name}")

    result = schema.model_copy(deep=True)
    result.breakpoints = [
        breakpoint.model_copy() if bp.name == old_name else bp for bp in result.breakpoints
    ]
    _sort_breakpoints(result)

    if new_name != old_name:
        if old_name in result.layouts:
            result.layouts[new_name] = result.layouts.pop(old_name)
        for component in result.components:
            if old_name in component.responsive_canvas_layout:
                component.responsive_canvas_layout[new_name] = (
                    component.responsive_canvas_layout.pop(old_name)
                )
            if component.responsive and old_name in component.responsive:
                component.responsive[new_name] = component.responsive.pop(old_name)
        logger.debug(f"Renamed breakpoint '{old_name}' to '{new_name}'")
    return result


# =============================================================================
# Links
# =============================================================================


def link_components(
    schema: Schema,
    source: str,
    target: str,
    policy: LinkPolicy | None = None,
) -> Schema:
    """Link two components as the same element across breakpoints.

    Uses the configured policy when ``policy`` is None.
    """
    _require_component(schema, source)
    _require_component(schema, target)
    result = schema.model_copy(deep=True)
    result.component_links = add_link(
        result.component_links, source, target, policy or default_policy()
    )
    return result


def unlink_components(schema: Schema, source: str, target: str) -> Schema:
    """Remove the link between two components, in either direction."""
    result = schema.model_copy(deep=True)
    result.component_links = remove_link(result.component_links, source, target)
    return result


def clear_links(schema: Schema) -> Schema:
    result = schema.model_copy(deep=True)
    result.component_links = []
    return result


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
