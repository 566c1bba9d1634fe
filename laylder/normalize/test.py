"""Unit tests for breakpoint normalization."""

import pytest

from laylder.links import LinkPolicy
from laylder.normalize import normalize_schema
from laylder.schema import load_schema


def component(cid, name, tag="div", rects=None, legacy=None):
    data = {
        "id": cid,
        "name": name,
        "semanticTag": tag,
        "positioning": {"type": "static"},
        "layout": {"type": "none"},
        "responsiveCanvasLayout": rects or {},
    }
    if legacy:
        data["canvasLayout"] = legacy
    return data


def rect(x, y, width, height):
    return {"x": x, "y": y, "width": width, "height": height}


BREAKPOINTS = [
    {"name": "mobile", "minWidth": 0, "gridCols": 4, "gridRows": 8},
    {"name": "tablet", "minWidth": 768, "gridCols": 8, "gridRows": 8},
    {"name": "desktop", "minWidth": 1024, "gridCols": 12, "gridRows": 8},
]


def make_schema(components, layouts, links=None, breakpoints=None):
    return load_schema(
        {
            "schemaVersion": "2.0",
            "components": components,
            "breakpoints": breakpoints or BREAKPOINTS,
            "layouts": layouts,
            "componentLinks": links or [],
        }
    )


@pytest.fixture
def mobile_only():
    """Two components authored only for mobile."""
    return make_schema(
        [
            component("c1", "Header", "header", {"mobile": rect(0, 0, 4, 1)}),
            component("c2", "Main", "main", {"mobile": rect(0, 1, 4, 6)}),
        ],
        {"mobile": {"structure": "vertical", "components": ["c1", "c2"]}},
    )


class TestMembershipInheritance:
    """Tests for cascading layout membership."""

    @pytest.mark.unit
    def test_missing_layouts_are_derived(self, mobile_only):
        """Tablet and desktop copy mobile's membership and structure."""
        result = normalize_schema(mobile_only)
        for name in ("tablet", "desktop"):
            assert result.layouts[name].components == ["c1", "c2"]
            assert result.layouts[name].structure == result.layouts["mobile"].structure

    @pytest.mark.unit
    def test_missing_ids_appended_in_source_order(self):
        """An existing layout gains the ids it lacks, after its own."""
        schema = make_schema(
            [component("c1", "A"), component("c2", "B"), component("c3", "C")],
            {
                "mobile": {"components": ["c1", "c2", "c3"]},
                "tablet": {"components": ["c3"]},
            },
        )
        result = normalize_schema(schema)
        assert result.layouts["tablet"].components == ["c3", "c1", "c2"]

    @pytest.mark.unit
    def test_nearest_smaller_layout_is_source(self):
        """Desktop inherits from tablet, not mobile."""
        schema = make_schema(
            [component("c1", "A"), component("c2", "B")],
            {
                "mobile": {"components": ["c1"]},
                "tablet": {"components": ["c2"]},
            },
        )
        result = normalize_schema(schema)
        assert result.layouts["tablet"].components == ["c2", "c1"]
        assert result.layouts["desktop"].components == ["c2", "c1"]

    @pytest.mark.unit
    def test_smallest_breakpoint_never_inherits(self):
        """A missing smallest layout stays missing."""
        schema = make_schema(
            [component("c1", "A")],
            {"tablet": {"components": ["c1"]}},
        )
        result = normalize_schema(schema)
        assert "mobile" not in result.layouts
        assert result.layouts["desktop"].components == ["c1"]

    @pytest.mark.unit
    def test_unknown_ids_not_inherited(self):
        """Dangling references stay where the user put them."""
        schema = make_schema(
            [component("c1", "A")],
            {"mobile": {"components": ["c1", "ghost"]}},
        )
        result = normalize_schema(schema)
        assert result.layouts["mobile"].components == ["c1", "ghost"]
        assert result.layouts["tablet"].components == ["c1"]

    @pytest.mark.unit
    def test_linked_counterpart_blocks_inheritance(self):
        """A mobile nav is not carried into desktop where its linked sidebar lives."""
        schema = make_schema(
            [
                component("c1", "MobileNav", "nav", {"mobile": rect(0, 0, 4, 1)}),
                component("c2", "Sidebar", "aside", {"desktop": rect(0, 0, 3, 8)}),
            ],
            {
                "mobile": {"components": ["c1"]},
                "desktop": {"components": ["c2"]},
            },
            links=[{"source": "c1", "target": "c2"}],
        )
        result = normalize_schema(schema)
        assert result.layouts["tablet"].components == ["c1"]
        assert result.layouts["desktop"].components == ["c2"]

    @pytest.mark.unit
    def test_link_policy_changes_groups(self):
        """Under one-to-one, an evicted link no longer blocks inheritance."""
        schema = make_schema(
            [component("c1", "A"), component("c2", "B"), component("c3", "C")],
            {
                "mobile": {"components": ["c1"]},
                "tablet": {"components": ["c2"]},
            },
            links=[{"source": "c1", "target": "c2"}, {"source": "c2", "target": "c3"}],
        )
        transitive = normalize_schema(schema)
        one_to_one = normalize_schema(schema, policy=LinkPolicy.ONE_TO_ONE)
        assert transitive.layouts["tablet"].components == ["c2"]
        assert one_to_one.layouts["tablet"].components == ["c2", "c1"]


class TestExplicitRectangles:
    """Tests for user-authored per-breakpoint rectangles."""

    @pytest.mark.unit
    def test_authored_rectangle_activates_component(self):
        """A rectangle for desktop puts the component into desktop's layout."""
        schema = make_schema(
            [
                component("c1", "A", rects={"mobile": rect(0, 0, 4, 1)}),
                component("c2", "B", rects={"desktop": rect(0, 1, 12, 1)}),
            ],
            {"mobile": {"components": ["c1"]}},
        )
        result = normalize_schema(schema)
        assert result.layouts["tablet"].components == ["c1"]
        assert result.layouts["desktop"].components == ["c2", "c1"]

    @pytest.mark.unit
    def test_authored_rectangles_never_overwritten(self):
        """Inheritance only fills gaps."""
        schema = make_schema(
            [
                component(
                    "c1",
                    "A",
                    rects={"mobile": rect(0, 0, 4, 1), "desktop": rect(2, 0, 8, 1)},
                )
            ],
            {"mobile": {"components": ["c1"]}},
        )
        result = normalize_schema(schema)
        layouts = result.component("c1").responsive_canvas_layout
        assert layouts["tablet"] == layouts["mobile"]
        assert (layouts["desktop"].x, layouts["desktop"].width) == (2, 8)


class TestRectangleInheritance:
    """Tests for cascading canvas rectangles."""

    @pytest.mark.unit
    def test_rectangles_cascade_upward(self, mobile_only):
        """Every active component gets a rectangle at every breakpoint."""
        result = normalize_schema(mobile_only)
        for cid in ("c1", "c2"):
            layouts = result.component(cid).responsive_canvas_layout
            assert set(layouts) == {"mobile", "tablet", "desktop"}
            assert layouts["desktop"] == layouts["mobile"]

    @pytest.mark.unit
    def test_inactive_components_get_no_rectangle(self):
        """Rectangles are only derived where the component is active."""
        schema = make_schema(
            [component("c1", "A", rects={"mobile": rect(0, 0, 4, 1)}), component("c2", "B")],
            {
                "mobile": {"components": ["c1"]},
                "tablet": {"components": ["c2"]},
                "desktop": {"components": ["c2"]},
            },
            links=[{"source": "c1", "target": "c2"}],
        )
        result = normalize_schema(schema)
        assert "tablet" not in result.component("c1").responsive_canvas_layout
        assert result.component("c2").responsive_canvas_layout == {}

    @pytest.mark.unit
    def test_nearest_rectangle_wins(self):
        """Desktop takes tablet's rectangle over mobile's."""
        schema = make_schema(
            [
                component(
                    "c1",
                    "A",
                    rects={"mobile": rect(0, 0, 4, 1), "tablet": rect(0, 0, 8, 2)},
                )
            ],
            {"mobile": {"components": ["c1"]}},
        )
        result = normalize_schema(schema)
        assert result.component("c1").responsive_canvas_layout["desktop"].height == 2

    @pytest.mark.unit
    def test_legacy_layout_is_left_as_fallback(self):
        """A legacy-only component is not given per-breakpoint entries."""
        schema = make_schema(
            [component("c1", "A", legacy=rect(0, 0, 4, 1))],
            {"mobile": {"components": ["c1"]}},
        )
        result = normalize_schema(schema)
        component_ = result.component("c1")
        assert component_.responsive_canvas_layout == {}
        assert component_.layout_for("desktop") == component_.canvas_layout


class TestNormalizeContract:
    """Purity and idempotence."""

    @pytest.mark.unit
    def test_input_not_mutated(self, mobile_only):
        before = mobile_only.model_dump()
        normalize_schema(mobile_only)
        assert mobile_only.model_dump() == before

    @pytest.mark.unit
    def test_idempotent(self, mobile_only):
        once = normalize_schema(mobile_only)
        assert normalize_schema(once) == once

    @pytest.mark.unit
    def test_idempotent_with_links_and_partial_layouts(self):
        schema = make_schema(
            [
                component("c1", "MobileNav", "nav", {"mobile": rect(0, 0, 4, 1)}),
                component("c2", "Sidebar", "aside", {"desktop": rect(0, 0, 3, 8)}),
                component("c3", "Main", "main", {"mobile": rect(0, 1, 4, 7)}),
                component("c4", "Footer", "footer", {"tablet": rect(0, 7, 8, 1)}),
                component("c5", "Ad", "aside"),
            ],
            {
                "mobile": {"components": ["c1", "c3", "c5"]},
                "desktop": {"components": ["c2"]},
            },
            links=[{"source": "c2", "target": "c1"}],
        )
        once = normalize_schema(schema)
        assert normalize_schema(once) == once

    @pytest.mark.unit
    def test_unsorted_breakpoints_keep_order(self):
        """Processing is by min_width; the list order is preserved."""
        schema = make_schema(
            [component("c1", "A")],
            {"mobile": {"components": ["c1"]}},
            breakpoints=list(reversed(BREAKPOINTS)),
        )
        result = normalize_schema(schema)
        assert [bp.name for bp in result.breakpoints] == ["desktop", "tablet", "mobile"]
        assert result.layouts["desktop"].components == ["c1"]
