"""Breakpoint normalization.

Cascades layout membership and canvas rectangles from the smallest
breakpoint upward, filling whatever a breakpoint leaves undefined with
data from the nearest smaller breakpoint that has it. User-authored
entries are never changed, the input schema is never mutated, and
normalizing a normalized schema changes nothing.
"""

from laylder.core.log import get_logger
from laylder.links import LinkPolicy, groups_of
from laylder.schema import Breakpoint, LayoutConfig, Schema

logger = get_logger("normalize")


def normalize_schema(
    schema: Schema, policy: LinkPolicy = LinkPolicy.TRANSITIVE
) -> Schema:
    """Return a copy of ``schema`` with inherited per-breakpoint data filled in.

    Breakpoints are processed in ascending ``min_width`` order (stable for
    ties). For each breakpoint:

    1. A component with a rectangle authored for the breakpoint joins its
       membership.
    2. Ids active at the nearest smaller breakpoint with a layout are
       appended, unless the id is unknown or a member of its link group
       is already present here.
    3. Active components without a rectangle for the breakpoint inherit
       the one from the nearest smaller breakpoint that has it.

    The smallest breakpoint never inherits; a missing layout there is
    left for the validator.

    Args:
        schema: Schema to normalize.
        policy: Link policy used to build link groups.

    Returns:
        Schema: A new, normalized schema. The breakpoint list keeps its
        input order.
    """
    result = schema.model_copy(deep=True)
    ordered = result.sorted_breakpoints()
    known_ids = set(result.component_ids())

    group_index: dict[str, frozenset[str]] = {}
    for group in groups_of(result.component_links, result.component_ids(), policy):
        members = frozenset(group)
        for component_id in group:
            group_index[component_id] = members

    for index, breakpoint in enumerate(ordered):
        previous = ordered[:index]
        source = _nearest_layout(result, previous)
        layout = result.layouts.get(breakpoint.name)

        if layout is None:
            if index == 0 or source is None:
                continue
            layout = LayoutConfig(
                structure=source.structure,
                container_layout=(
                    source.container_layout.model_copy(deep=True)
                    if source.container_layout
                    else None
                ),
                roles=source.roles.model_copy(deep=True) if source.roles else None,
            )
            result.layouts[breakpoint.name] = layout
            logger.debug(f"Derived layout for '{breakpoint.name}'")

        _sync_explicit_members(result, layout, breakpoint)

        if index > 0 and source is not None:
            _inherit_members(layout, source, breakpoint, known_ids, group_index)
            _inherit_rects(result, layout, breakpoint, previous)

    return result


def _nearest_layout(schema: Schema, previous: list[Breakpoint]) -> LayoutConfig | None:
    """Layout of the nearest smaller breakpoint that has one."""
    for breakpoint in reversed(previous):
        layout = schema.layouts.get(breakpoint.name)
        if layout is not None:
            return layout
    return None


def _sync_explicit_members(
    schema: Schema, layout: LayoutConfig, breakpoint: Breakpoint
) -> None:
    """Add components with a rectangle authored for ``breakpoint``."""
    for component in schema.components:
        if (
            component.explicit_layout(breakpoint.name) is not None
            and component.id not in layout.components
        ):
            layout.components.append(component.id)
            logger.debug(
                f"Activated '{component.id}' at '{breakpoint.name}' from its rectangle"
            )


def _inherit_members(
    layout: LayoutConfig,
    source: LayoutConfig,
    breakpoint: Breakpoint,
    known_ids: set[str],
    group_index: dict[str, frozenset[str]],
) -> None:
    """Append ids active at ``source`` that are missing from ``layout``."""
    present = set(layout.components)
    for component_id in source.components:
        if component_id in present or component_id not in known_ids:
            continue
        if component_id in layout.components:
            continue
        group = group_index.get(component_id, frozenset((component_id,)))
        if group & present:
            continue
        layout.components.append(component_id)
        logger.debug(f"Inherited '{component_id}' into '{breakpoint.name}'")


def _inherit_rects(
    schema: Schema,
    layout: LayoutConfig,
    breakpoint: Breakpoint,
    previous: list[Breakpoint],
) -> None:
    """Copy rectangles forward for active components that lack one."""
    for component in schema.active_components(breakpoint.name):
        if component.explicit_layout(breakpoint.name) is not None:
            continue
        for earlier in reversed(previous):
            rect = component.explicit_layout(earlier.name)
            if rect is not None:
                component.responsive_canvas_layout[breakpoint.name] = rect.model_copy()
                logger.debug(
                    f"Inherited rectangle of '{component.id}' from "
                    f"'{earlier.name}' into '{breakpoint.name}'"
                )
                break


__all__ = ["normalize_schema"]
