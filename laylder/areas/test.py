"""Unit tests for the grid-area converter."""

import pytest

from laylder.areas import AreaRect, area_component_ids, areas_to_rects, rects_to_areas


def _sorted(rects):
    return sorted(rects, key=lambda r: (r.id, r.x, r.y, r.width, r.height))


class TestAreasToRects:
    """Tests for matrix to rectangle extraction."""

    @pytest.mark.unit
    def test_holy_grail_layout(self):
        """Header, sidebar, main and footer come out as four rectangles."""
        areas = [
            ["header", "header", "header"],
            ["side", "main", "main"],
            ["side", "main", "main"],
            ["footer", "footer", "footer"],
        ]
        assert areas_to_rects(areas) == [
            AreaRect("header", 0, 0, 3, 1),
            AreaRect("side", 0, 1, 1, 2),
            AreaRect("main", 1, 1, 2, 2),
            AreaRect("footer", 0, 3, 3, 1),
        ]

    @pytest.mark.unit
    def test_empty_cells_are_skipped(self):
        """Free cells produce no rectangle."""
        assert areas_to_rects([["", ""], ["", "a"]]) == [AreaRect("a", 1, 1, 1, 1)]

    @pytest.mark.unit
    def test_empty_matrix(self):
        """No rows, no rectangles."""
        assert areas_to_rects([]) == []

    @pytest.mark.unit
    def test_non_rectangular_region_stops_growth(self):
        """An L-shaped region yields the rectangle above the break, once."""
        areas = [
            ["a", "a"],
            ["a", "a"],
            ["a", ""],
        ]
        assert areas_to_rects(areas) == [AreaRect("a", 0, 0, 2, 2)]

    @pytest.mark.unit
    def test_id_processed_once(self):
        """A disconnected repeat of an id is ignored."""
        areas = [["a", "b", "a"]]
        assert areas_to_rects(areas) == [AreaRect("a", 0, 0, 1, 1), AreaRect("b", 1, 0, 1, 1)]

    @pytest.mark.unit
    def test_ragged_rows(self):
        """Short rows behave like trailing empty cells."""
        areas = [["a", "a"], ["a"]]
        assert areas_to_rects(areas) == [AreaRect("a", 0, 0, 2, 1)]


class TestRectsToAreas:
    """Tests for rectangle stamping."""

    @pytest.mark.unit
    def test_stamps_cells(self):
        """Each rectangle fills exactly its cells."""
        areas = rects_to_areas([AreaRect("a", 1, 0, 2, 1)], cols=3, rows=2)
        assert areas == [["", "a", "a"], ["", "", ""]]

    @pytest.mark.unit
    def test_later_rect_wins(self):
        """Overlapping cells take the id of the later rectangle."""
        rects = [AreaRect("a", 0, 0, 2, 1), AreaRect("b", 1, 0, 2, 1)]
        assert rects_to_areas(rects, cols=3, rows=1) == [["a", "b", "b"]]

    @pytest.mark.unit
    def test_out_of_bounds_cells_dropped(self):
        """Cells beyond the matrix are clipped."""
        assert rects_to_areas([AreaRect("a", 1, 0, 5, 1)], cols=2, rows=1) == [["", "a"]]

    @pytest.mark.unit
    def test_negative_size_rejected(self):
        """A negative grid size is a programming error."""
        with pytest.raises(ValueError):
            rects_to_areas([], cols=-1, rows=2)


class TestRoundTrip:
    """Collision-free, in-bounds rectangle sets survive a round trip."""

    @pytest.mark.unit
    def test_desktop_layout(self):
        rects = [
            AreaRect("c1", 0, 0, 12, 1),
            AreaRect("c2", 0, 1, 3, 6),
            AreaRect("c3", 3, 1, 9, 6),
            AreaRect("c4", 0, 7, 12, 1),
        ]
        assert _sorted(areas_to_rects(rects_to_areas(rects, 12, 8))) == _sorted(rects)

    @pytest.mark.unit
    def test_sparse_layout_with_gaps(self):
        rects = [
            AreaRect("b", 5, 3, 2, 2),
            AreaRect("a", 0, 0, 1, 4),
            AreaRect("c", 2, 0, 3, 1),
        ]
        assert _sorted(areas_to_rects(rects_to_areas(rects, 8, 6))) == _sorted(rects)


class TestHelpers:
    """Tests for dict conversion and id listing."""

    @pytest.mark.unit
    def test_from_dict(self):
        rect = AreaRect.from_dict({"id": "a", "x": 1, "y": 2, "width": 3, "height": 4})
        assert rect == AreaRect("a", 1, 2, 3, 4)
        assert rect.to_dict() == {"id": "a", "x": 1, "y": 2, "width": 3, "height": 4}

    @pytest.mark.unit
    def test_from_dict_rejects_floats(self):
        with pytest.raises(TypeError):
            AreaRect.from_dict({"id": "a", "x": 0.5, "y": 0, "width": 1, "height": 1})

    @pytest.mark.unit
    def test_area_component_ids(self):
        assert area_component_ids([["b", "a"], ["a", "", "c"]]) == ["b", "a", "c"]
