"""End-to-end tests: edit, normalize, validate and convert placements."""

import pytest

from laylder.areas import AreaRect, areas_to_rects, rects_to_areas
from laylder.editing import (
    add_breakpoint,
    add_component,
    delete_component,
    link_components,
    resize_component,
)
from laylder.links import LinkPolicy
from laylder.normalize import normalize_schema
from laylder.schema import (
    Breakpoint,
    CanvasLayout,
    create_empty_schema,
    default_component_data,
    dump_schema,
    load_schema,
)
from laylder.validation import normalize_and_validate, validate_schema


@pytest.mark.integration
class TestEditingPipeline:
    """A page built through edit operations validates cleanly."""

    def test_build_page_from_empty_schema(self):
        schema = create_empty_schema()
        schema = add_component(
            schema,
            default_component_data("header"),
            "mobile",
            rect=CanvasLayout(x=0, y=0, width=4, height=1),
        )
        schema = add_component(
            schema,
            default_component_data("main"),
            "mobile",
            rect=CanvasLayout(x=0, y=1, width=4, height=6),
        )
        schema = add_component(
            schema,
            default_component_data("footer"),
            "mobile",
            rect=CanvasLayout(x=0, y=7, width=4, height=1),
        )

        result = normalize_and_validate(schema)
        assert result.valid, [e.code for e in result.errors]

        normalized = normalize_schema(schema)
        for name in ("tablet", "desktop"):
            assert normalized.layouts[name].components == ["c1", "c2", "c3"]

    def test_delete_then_validate(self, responsive_schema):
        schema = delete_component(responsive_schema, "c4")
        result = normalize_and_validate(schema)
        assert result.valid
        assert "c4" not in normalize_schema(schema).layouts["tablet"].components

    def test_added_breakpoint_inherits(self, responsive_schema):
        wide = Breakpoint(name="wide", min_width=1440, grid_cols=12, grid_rows=8)
        schema = add_breakpoint(responsive_schema, wide)
        normalized = normalize_schema(schema)
        assert normalized.layouts["wide"].components == ["c1", "c3", "c4", "c5"]
        assert validate_schema(normalized).valid

    def test_inherited_rectangle_out_of_bounds_is_reported(self, responsive_schema):
        """A desktop rectangle inherited into a narrower grid is caught."""
        narrow = Breakpoint(name="wide", min_width=1440, grid_cols=8, grid_rows=8)
        schema = add_breakpoint(responsive_schema, narrow)
        result = normalize_and_validate(schema)
        assert "CANVAS_OUT_OF_BOUNDS" in [e.code for e in result.errors]


@pytest.mark.integration
class TestLinkPolicyPipeline:
    """The link policy flows through normalization and validation."""

    def test_one_to_one_changes_inheritance(self, responsive_schema):
        linked = link_components(responsive_schema, "c3", "c1", LinkPolicy.TRANSITIVE)
        transitive = normalize_schema(linked, LinkPolicy.TRANSITIVE)
        one_to_one = normalize_schema(linked, LinkPolicy.ONE_TO_ONE)
        assert "c2" not in transitive.layouts["desktop"].components
        assert "c2" in one_to_one.layouts["desktop"].components


@pytest.mark.integration
class TestPlacementRoundTrip:
    """Rectangles survive conversion to areas and back."""

    def test_desktop_rectangles_round_trip(self, responsive_schema):
        normalized = normalize_schema(responsive_schema)
        desktop = normalized.breakpoint("desktop")
        rects = [
            AreaRect(component.id, r.x, r.y, r.width, r.height)
            for component in normalized.active_components("desktop")
            if (r := component.layout_for("desktop")) is not None
        ]
        areas = rects_to_areas(rects, desktop.grid_cols, desktop.grid_rows)
        key = lambda r: r.id  # noqa: E731
        assert sorted(areas_to_rects(areas), key=key) == sorted(rects, key=key)

    def test_resize_reflected_in_areas(self, responsive_schema):
        schema = resize_component(responsive_schema, "c4", "desktop", 8, 6)
        component = schema.component("c4")
        r = component.layout_for("desktop")
        areas = rects_to_areas([AreaRect("c4", r.x, r.y, r.width, r.height)], 12, 8)
        assert areas[1][11] == ""
        assert areas[1][10] == "c4"


@pytest.mark.integration
class TestSerializationPipeline:
    """JSON round trip preserves normalization results."""

    def test_dump_load_normalized(self, responsive_schema):
        normalized = normalize_schema(responsive_schema)
        reloaded = load_schema(dump_schema(normalized))
        assert reloaded == normalized
        assert normalize_schema(reloaded) == reloaded
