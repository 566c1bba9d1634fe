"""Grid geometry: rectangles, overlap and bounds tests, grid constraints."""

from .lib import (
    MIN_GRID_SIZE,
    GridResizeCheck,
    Rect,
    RectLike,
    RowGroup,
    check_grid_resize,
    find_empty_slot,
    group_by_row,
    in_bounds,
    is_valid_placement,
    minimum_grid_size,
    overlaps,
    recommended_size,
    rows_intersect,
    sort_by_canvas_position,
    suggest_grid_compaction,
)

__all__ = [
    "RectLike",
    "Rect",
    "overlaps",
    "in_bounds",
    "is_valid_placement",
    "MIN_GRID_SIZE",
    "GridResizeCheck",
    "minimum_grid_size",
    "check_grid_resize",
    "suggest_grid_compaction",
    "recommended_size",
    "find_empty_slot",
    "sort_by_canvas_position",
    "RowGroup",
    "group_by_row",
    "rows_intersect",
]
