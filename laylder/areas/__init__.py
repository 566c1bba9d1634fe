"""Grid-area converter: matrix-of-ids to rectangles and back."""

from .lib import (
    EMPTY_CELL,
    AreaRect,
    area_component_ids,
    areas_to_rects,
    rects_to_areas,
)

__all__ = [
    "EMPTY_CELL",
    "AreaRect",
    "areas_to_rects",
    "rects_to_areas",
    "area_component_ids",
]
