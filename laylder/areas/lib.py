"""Conversion between grid-area matrices and rectangle lists.

A grid-area matrix is ``areas[row][col]`` holding a component id, or an
empty string for a free cell. Rectangles are the canonical placement form;
the matrix is an import/export adapter for it.
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import asdict, dataclass
from typing import Any

from laylder.core.log import get_logger

logger = get_logger("areas")

EMPTY_CELL = ""


@dataclass(frozen=True)
class AreaRect:
    """A component's rectangle in grid-cell units.

    Attributes:
        id: Component id stamped into the covered cells.
        x: Starting column.
        y: Starting row.
        width: Column span.
        height: Row span.
    """

    id: str
    x: int
    y: int
    width: int
    height: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AreaRect":
        """Build from ``{id, x, y, width, height}``.

        Raises:
            KeyError: If a field is missing.
            TypeError: If a coordinate is not an integer.
        """
        values = {name: data[name] for name in ("x", "y", "width", "height")}
        for name, value in values.items():
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"{name} must be an integer, got {value!r}")
        return cls(id=str(data["id"]), **values)


def areas_to_rects(areas: Sequence[Sequence[str]]) -> list[AreaRect]:
    """Extract one rectangle per component id from a grid-area matrix.

    Scans row-major. The first unvisited cell of an id is its top-left
    corner; the rectangle grows right while the id repeats, then down
    while every cell of the next row segment is that id. Growth stops on
    the first row that breaks rectangularity. Cells of an already
    extracted id outside its rectangle are ignored.

    Args:
        areas: Matrix of component ids, empty string for free cells.

    Returns:
        Rectangles in first-occurrence order.

    Example:
        >>> areas_to_rects([["a", "a", "b"], ["a", "a", ""]])
        [AreaRect(id='a', x=0, y=0, width=2, height=2), AreaRect(id='b', x=2, y=0, width=1, height=1)]
    """
    rects: list[AreaRect] = []
    seen: set[str] = set()
    visited: set[tuple[int, int]] = set()

    def _cell(row: int, col: int) -> str:
        if row >= len(areas) or col >= len(areas[row]):
            return EMPTY_CELL
        return areas[row][col]

    for y, row in enumerate(areas):
        for x, cell_id in enumerate(row):
            if not cell_id or (y, x) in visited:
                continue
            if cell_id in seen:
                logger.debug(
                    f"Ignoring stray cell ({x}, {y}) of '{cell_id}' outside its rectangle"
                )
                continue

            width = 1
            while _cell(y, x + width) == cell_id and (y, x + width) not in visited:
                width += 1

            height = 1
            while all(
                _cell(y + height, col) == cell_id and (y + height, col) not in visited
                for col in range(x, x + width)
            ):
                height += 1

            for row_index in range(y, y + height):
                for col in range(x, x + width):
                    visited.add((row_index, col))

            seen.add(cell_id)
            rects.append(AreaRect(cell_id, x, y, width, height))

    return rects


def rects_to_areas(rects: Iterable[AreaRect], cols: int, rows: int) -> list[list[str]]:
    """Stamp rectangles into an empty ``rows`` x ``cols`` matrix.

    Later rectangles overwrite earlier ones where they overlap. Cells
    falling outside the matrix are dropped.

    Raises:
        ValueError: If ``cols`` or ``rows`` is negative.
    """
    if cols < 0 or rows < 0:
        raise ValueError(f"Grid size must be non-negative, got {cols}x{rows}")

    areas = [[EMPTY_CELL] * cols for _ in range(rows)]
    for rect in rects:
        for row in range(max(rect.y, 0), min(rect.y + rect.height, rows)):
            for col in range(max(rect.x, 0), min(rect.x + rect.width, cols)):
                areas[row][col] = rect.id
    return areas


def area_component_ids(areas: Sequence[Sequence[str]]) -> list[str]:
    """Distinct component ids in a matrix, first-occurrence order."""
    ids: list[str] = []
    for row in areas:
        for cell_id in row:
            if cell_id and cell_id not in ids:
                ids.append(cell_id)
    return ids


__all__ = [
    "EMPTY_CELL",
    "AreaRect",
    "areas_to_rects",
    "rects_to_areas",
    "area_component_ids",
]
