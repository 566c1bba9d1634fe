"""Unit tests for grid geometry."""

import pytest

from laylder.geometry import (
    Rect,
    check_grid_resize,
    group_by_row,
    in_bounds,
    find_empty_slot,
    is_valid_placement,
    minimum_grid_size,
    overlaps,
    recommended_size,
    rows_intersect,
    sort_by_canvas_position,
    suggest_grid_compaction,
)
from laylder.schema import CanvasLayout, SemanticTag


class TestOverlaps:
    """Tests for the overlap predicate."""

    @pytest.mark.unit
    def test_edge_adjacent_rectangles_do_not_overlap(self):
        """Sharing a vertical edge is adjacency."""
        assert overlaps(Rect(0, 0, 2, 2), Rect(2, 0, 2, 2)) is False

    @pytest.mark.unit
    def test_corner_touching_rectangles_do_not_overlap(self):
        """Sharing only a corner is adjacency."""
        assert overlaps(Rect(0, 0, 2, 2), Rect(2, 2, 2, 2)) is False

    @pytest.mark.unit
    def test_partial_overlap(self):
        """Shared area is detected."""
        assert overlaps(Rect(0, 0, 3, 3), Rect(2, 2, 3, 3)) is True

    @pytest.mark.unit
    def test_containment(self):
        """A rectangle inside another overlaps it."""
        assert overlaps(Rect(0, 0, 6, 6), Rect(1, 1, 1, 1)) is True

    @pytest.mark.unit
    def test_zero_size_rectangle_never_overlaps(self):
        """A degenerate rectangle has no area to share."""
        assert overlaps(Rect(1, 1, 0, 2), Rect(0, 0, 4, 4)) is False

    @pytest.mark.unit
    def test_symmetric(self):
        """Overlap is symmetric."""
        a, b = Rect(1, 0, 3, 2), Rect(0, 1, 2, 4)
        assert overlaps(a, b) == overlaps(b, a)

    @pytest.mark.unit
    def test_accepts_canvas_layouts(self):
        """Schema rectangles work directly."""
        a = CanvasLayout(x=0, y=0, width=4, height=1)
        b = CanvasLayout(x=0, y=1, width=4, height=1)
        assert overlaps(a, b) is False


class TestInBounds:
    """Tests for the bounds predicate."""

    @pytest.mark.unit
    def test_exceeds_width(self):
        """10 + 5 > 12 columns is out of bounds."""
        assert in_bounds(Rect(10, 0, 5, 1), cols=12, rows=8) is False

    @pytest.mark.unit
    def test_exactly_fills_grid(self):
        """A rectangle touching the far edges is in bounds."""
        assert in_bounds(Rect(0, 0, 12, 8), cols=12, rows=8) is True

    @pytest.mark.unit
    def test_negative_origin(self):
        """Negative coordinates are out of bounds."""
        assert in_bounds(Rect(-1, 0, 1, 1), cols=12, rows=8) is False
        assert in_bounds(Rect(0, -1, 1, 1), cols=12, rows=8) is False

    @pytest.mark.unit
    def test_exceeds_height(self):
        """Rows are checked like columns."""
        assert in_bounds(Rect(0, 7, 1, 2), cols=12, rows=8) is False


class TestPlacement:
    """Tests for placement validity."""

    @pytest.mark.unit
    def test_adjacent_placement_is_valid(self):
        """Touching neighbours do not block placement."""
        others = [Rect(0, 0, 12, 1), Rect(0, 1, 3, 7)]
        assert is_valid_placement(Rect(3, 1, 9, 7), others, 12, 8)

    @pytest.mark.unit
    def test_overlapping_placement_is_invalid(self):
        """Overlap blocks placement."""
        assert not is_valid_placement(Rect(2, 0, 2, 2), [Rect(0, 0, 3, 1)], 12, 8)

    @pytest.mark.unit
    def test_out_of_bounds_placement_is_invalid(self):
        """Bounds are checked even with no neighbours."""
        assert not is_valid_placement(Rect(11, 0, 2, 1), [], 12, 8)


class TestGridConstraints:
    """Tests for grid resize helpers."""

    @pytest.mark.unit
    def test_minimum_grid_size_empty(self):
        """An empty canvas needs the 2x2 minimum."""
        assert minimum_grid_size({}) == (2, 2)

    @pytest.mark.unit
    def test_minimum_grid_size(self):
        """Minimum size reaches the furthest edges."""
        placed = {"c1": Rect(0, 0, 12, 1), "c2": Rect(0, 10, 6, 1)}
        assert minimum_grid_size(placed) == (11, 12)

    @pytest.mark.unit
    def test_resize_safe(self):
        """Growing or keeping the grid is safe."""
        result = check_grid_resize(8, 12, {"c1": Rect(0, 0, 4, 4)})
        assert result.safe
        assert result.affected_ids == []
        assert (result.minimum_rows, result.minimum_cols) == (4, 4)

    @pytest.mark.unit
    def test_resize_rows_unsafe(self):
        """Clipping rows names the affected components."""
        placed = {"c1": Rect(0, 0, 4, 2), "c2": Rect(0, 5, 4, 3)}
        result = check_grid_resize(6, 12, placed)
        assert not result.safe
        assert result.affected_ids == ["c2"]
        assert "6 rows" in result.reason

    @pytest.mark.unit
    def test_resize_cols_unsafe(self):
        """Clipping columns is reported once rows are fine."""
        placed = {"c1": Rect(0, 0, 10, 1)}
        result = check_grid_resize(8, 8, placed)
        assert not result.safe
        assert result.affected_ids == ["c1"]
        assert "columns" in result.reason

    @pytest.mark.unit
    def test_suggest_compaction(self):
        """Unused trailing rows and columns are reported."""
        assert suggest_grid_compaction({"c1": Rect(0, 0, 4, 3)}, 8, 12) == (5, 8)


class TestAutomaticPlacement:
    """Tests for free-slot search and default sizes."""

    @pytest.mark.unit
    def test_empty_grid_uses_origin(self):
        assert find_empty_slot({}, 12, 8, 3, 2) == Rect(0, 0, 3, 2)

    @pytest.mark.unit
    def test_scans_rows_before_columns(self):
        """The first free slot on the top row wins, touching its neighbour."""
        placed = {"header": Rect(0, 0, 4, 1)}
        assert find_empty_slot(placed, 12, 8, 2, 1) == Rect(4, 0, 2, 1)

    @pytest.mark.unit
    def test_skips_to_next_free_row(self):
        placed = {"header": Rect(0, 0, 12, 1)}
        assert find_empty_slot(placed, 12, 8, 6, 2) == Rect(0, 1, 6, 2)

    @pytest.mark.unit
    def test_finds_space_under_lowest_rectangle(self):
        placed = {"top": Rect(0, 0, 4, 3), "bottom": Rect(0, 3, 4, 1)}
        slot = find_empty_slot(placed, 4, 8, 4, 4)
        assert slot == Rect(0, 4, 4, 4)
        assert is_valid_placement(slot, placed.values(), 4, 8)

    @pytest.mark.unit
    def test_full_grid_falls_below_bottom_most(self):
        """With no free slot the result moves down as far as the grid allows."""
        placed = {"tall": Rect(0, 0, 4, 5)}
        assert find_empty_slot(placed, 4, 12, 4, 8) == Rect(0, 4, 4, 8)

    @pytest.mark.unit
    def test_full_grid_fallback_is_clamped(self):
        """The fallback never leaves the grid but may overlap."""
        placed = {"all": Rect(0, 0, 4, 8)}
        slot = find_empty_slot(placed, 4, 8, 2, 2)
        assert slot == Rect(0, 6, 2, 2)
        assert in_bounds(slot, 4, 8)
        assert not is_valid_placement(slot, placed.values(), 4, 8)

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "tag, expected",
        [
            ("header", (12, 1)),
            ("nav", (12, 1)),
            ("footer", (12, 1)),
            ("aside", (3, 6)),
            ("main", (9, 6)),
            ("section", (6, 2)),
            ("article", (6, 2)),
            ("form", (1, 1)),
            ("div", (1, 1)),
        ],
    )
    def test_recommended_size(self, tag, expected):
        assert recommended_size(tag, 12, 8) == expected

    @pytest.mark.unit
    def test_recommended_size_small_grid(self):
        """Sizes never drop below one cell."""
        assert recommended_size("aside", 2, 2) == (1, 1)
        assert recommended_size(SemanticTag.MAIN, 1, 1) == (1, 1)


class TestOrdering:
    """Tests for canvas ordering helpers."""

    @pytest.mark.unit
    def test_sort_top_to_bottom_left_to_right(self):
        """Rows sort before columns."""
        rects = {"a": Rect(6, 1, 6, 1), "b": Rect(0, 1, 6, 1), "c": Rect(0, 0, 12, 1)}
        assert sort_by_canvas_position(["a", "b", "c"], rects.get) == ["c", "b", "a"]

    @pytest.mark.unit
    def test_missing_rectangles_sort_last(self):
        """Unplaced ids keep their relative order at the end."""
        rects = {"b": Rect(0, 0, 1, 1)}
        assert sort_by_canvas_position(["x", "b", "y"], rects.get) == ["b", "x", "y"]

    @pytest.mark.unit
    def test_group_by_row(self):
        """Row groups span the tallest member."""
        placed = {
            "header": Rect(0, 0, 12, 1),
            "main": Rect(3, 1, 9, 6),
            "side": Rect(0, 1, 3, 4),
        }
        groups = group_by_row(placed)
        assert [g.ids for g in groups] == [["header"], ["side", "main"]]
        assert groups[1].row_range == [1, 2, 3, 4, 5, 6]

    @pytest.mark.unit
    def test_rows_intersect(self):
        """Row intersection ignores columns."""
        assert rows_intersect(Rect(0, 1, 3, 4), Rect(5, 4, 1, 1))
        assert not rows_intersect(Rect(0, 0, 12, 1), Rect(0, 1, 12, 1))
