"""Grid geometry for canvas placement.

Components occupy axis-aligned rectangles on a discrete grid. Two
rectangles overlap only when they share positive area; rectangles that
touch along an edge or at a corner are adjacent, not overlapping.

Every function here accepts any object exposing ``x``, ``y``, ``width``
and ``height`` (``Rect`` or ``laylder.schema.CanvasLayout``).
"""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Protocol


class RectLike(Protocol):
    """Anything with grid-cell coordinates."""

    x: int
    y: int
    width: int
    height: int


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in grid-cell units.

    Attributes:
        x: Starting column (0-based).
        y: Starting row (0-based).
        width: Column span.
        height: Row span.
    """

    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        """Exclusive right edge."""
        return self.x + self.width

    @property
    def bottom(self) -> int:
        """Exclusive bottom edge."""
        return self.y + self.height

    @classmethod
    def from_layout(cls, layout: RectLike) -> "Rect":
        """Copy coordinates from any rectangle-like object."""
        return cls(layout.x, layout.y, layout.width, layout.height)


def overlaps(a: RectLike, b: RectLike) -> bool:
    """True iff the two rectangles share positive area.

    Example:
        >>> overlaps(Rect(0, 0, 2, 2), Rect(2, 0, 2, 2))
        False
        >>> overlaps(Rect(0, 0, 3, 3), Rect(2, 2, 3, 3))
        True
    """
    shared_width = min(a.x + a.width, b.x + b.width) - max(a.x, b.x)
    shared_height = min(a.y + a.height, b.y + b.height) - max(a.y, b.y)
    return shared_width > 0 and shared_height > 0


def in_bounds(rect: RectLike, cols: int, rows: int) -> bool:
    """True iff ``rect`` lies entirely inside a ``cols`` x ``rows`` grid."""
    return (
        rect.x >= 0
        and rect.y >= 0
        and rect.x + rect.width <= cols
        and rect.y + rect.height <= rows
    )


def is_valid_placement(
    candidate: RectLike,
    others: Iterable[RectLike],
    cols: int,
    rows: int,
) -> bool:
    """In bounds and clear of every other active rectangle."""
    if not in_bounds(candidate, cols, rows):
        return False
    return not any(overlaps(candidate, other) for other in others)


# =============================================================================
# Grid Size Constraints
# =============================================================================

MIN_GRID_SIZE = 2


@dataclass
class GridResizeCheck:
    """Outcome of checking a grid resize against placed components.

    Attributes:
        safe: True if every placed rectangle fits the new grid.
        minimum_rows: Rows needed to keep every rectangle.
        minimum_cols: Columns needed to keep every rectangle.
        reason: Explanation when unsafe.
        affected_ids: Ids that would be clipped.
    """

    safe: bool
    minimum_rows: int
    minimum_cols: int
    reason: str | None = None
    affected_ids: list[str] = field(default_factory=list)


def minimum_grid_size(placed: Mapping[str, RectLike]) -> tuple[int, int]:
    """Smallest (rows, cols) grid holding every placed rectangle.

    An empty canvas needs the 2x2 minimum grid.
    """
    if not placed:
        return MIN_GRID_SIZE, MIN_GRID_SIZE
    rows = max(rect.y + rect.height for rect in placed.values())
    cols = max(rect.x + rect.width for rect in placed.values())
    return rows, cols


def check_grid_resize(
    new_rows: int,
    new_cols: int,
    placed: Mapping[str, RectLike],
) -> GridResizeCheck:
    """Check whether shrinking to ``new_rows`` x ``new_cols`` clips anything.

    Rows are checked before columns; the first failing axis is reported.
    """
    min_rows, min_cols = minimum_grid_size(placed)

    if new_rows < min_rows:
        affected = [cid for cid, r in placed.items() if r.y + r.height > new_rows]
        return GridResizeCheck(
            safe=False,
            minimum_rows=min_rows,
            minimum_cols=min_cols,
            reason=(
                f"Cannot reduce to {new_rows} rows: {len(affected)} component(s) "
                f"will be clipped. Minimum required: {min_rows} rows"
            ),
            affected_ids=affected,
        )

    if new_cols < min_cols:
        affected = [cid for cid, r in placed.items() if r.x + r.width > new_cols]
        return GridResizeCheck(
            safe=False,
            minimum_rows=min_rows,
            minimum_cols=min_cols,
            reason=(
                f"Cannot reduce to {new_cols} columns: {len(affected)} component(s) "
                f"will be clipped. Minimum required: {min_cols} columns"
            ),
            affected_ids=affected,
        )

    return GridResizeCheck(safe=True, minimum_rows=min_rows, minimum_cols=min_cols)


def suggest_grid_compaction(
    placed: Mapping[str, RectLike], rows: int, cols: int
) -> tuple[int, int]:
    """Number of trailing (rows, cols) that hold no rectangle."""
    min_rows, min_cols = minimum_grid_size(placed)
    return max(0, rows - min_rows), max(0, cols - min_cols)


# =============================================================================
# Automatic Placement
# =============================================================================


def recommended_size(semantic_tag: str, cols: int, rows: int) -> tuple[int, int]:
    """Default (width, height) for a new component on a ``cols`` x ``rows`` grid.

    Page chrome spans the full width. Tags without a preset start as a
    single cell.
    """
    if semantic_tag in ("header", "footer", "nav"):
        return cols, 1
    if semantic_tag == "aside":
        return max(1, min(3, cols // 4)), max(1, rows - 2)
    if semantic_tag == "main":
        return max(1, cols * 3 // 4), max(1, rows - 2)
    if semantic_tag in ("section", "article"):
        return max(1, cols // 2), max(1, rows // 3)
    return 1, 1


def find_empty_slot(
    placed: Mapping[str, RectLike],
    cols: int,
    rows: int,
    width: int = 1,
    height: int = 1,
) -> Rect:
    """First ``width`` x ``height`` slot clear of every placed rectangle.

    Scans top-to-bottom, then left-to-right. When no slot is free the
    rectangle goes below the bottom-most placed one, clamped to the grid,
    and may overlap; check it with ``is_valid_placement`` before use.
    """
    for y in range(rows - height + 1):
        for x in range(cols - width + 1):
            candidate = Rect(x, y, width, height)
            if not any(overlaps(candidate, other) for other in placed.values()):
                return candidate

    if not placed:
        return Rect(0, 0, width, height)
    bottom = max(rect.y + rect.height for rect in placed.values())
    return Rect(0, max(0, min(bottom, rows - height)), width, height)


# =============================================================================
# Canvas Ordering
# =============================================================================


def sort_by_canvas_position(
    ids: Iterable[str],
    rect_of: Callable[[str], RectLike | None],
) -> list[str]:
    """Sort ids top-to-bottom, then left-to-right.

    Ids without a rectangle go last; ties keep their input order.
    """

    def _key(cid: str) -> tuple[int, int, int]:
        rect = rect_of(cid)
        if rect is None:
            return (1, 0, 0)
        return (0, rect.y, rect.x)

    return sorted(ids, key=_key)


@dataclass
class RowGroup:
    """Components starting on the same canvas row.

    Attributes:
        row_range: Rows spanned by the tallest member.
        ids: Member ids, left to right.
    """

    row_range: list[int]
    ids: list[str]


def group_by_row(placed: Mapping[str, RectLike]) -> list[RowGroup]:
    """Group placed rectangles by their starting row."""
    rows: dict[int, list[str]] = {}
    for cid, rect in placed.items():
        rows.setdefault(rect.y, []).append(cid)

    groups: list[RowGroup] = []
    for row in sorted(rows):
        members = sorted(rows[row], key=lambda cid: placed[cid].x)
        tallest = max(placed[cid].height for cid in members)
        groups.append(RowGroup(row_range=list(range(row, row + tallest)), ids=members))
    return groups


def rows_intersect(a: RectLike, b: RectLike) -> bool:
    """True iff the two rectangles share at least one grid row."""
    return a.y < b.y + b.height and b.y < a.y + a.height


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
