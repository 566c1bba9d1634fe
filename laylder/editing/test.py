"""Unit tests for schema edit operations."""

import pytest

from laylder.editing import (
    PlacementError,
    add_breakpoint,
    add_component,
    clear_links,
    delete_breakpoint,
    delete_component,
    duplicate_component,
    link_components,
    move_component,
    place_component,
    reorder_layout,
    resize_component,
    suggest_placement,
    unlink_components,
    update_breakpoint,
    update_component,
)
from laylder.links import LinkPolicy
from laylder.schema import Breakpoint, CanvasLayout, ComponentLink, default_component_data


def rect(x, y, width, height):
    return CanvasLayout(x=x, y=y, width=width, height=height)


class TestComponentOperations:
    """Adding, duplicating, updating and deleting components."""

    @pytest.mark.unit
    def test_add_component(self, responsive_schema):
        result = add_component(responsive_schema, default_component_data("aside"), "desktop")
        added = result.components[-1]
        assert added.id == "c6"
        assert result.layouts["desktop"].components[-1] == "c6"
        assert len(responsive_schema.components) == 5

    @pytest.mark.unit
    def test_add_component_creates_missing_layout(self, responsive_schema):
        result = add_component(responsive_schema, default_component_data("div"), "tablet")
        assert result.layouts["tablet"].components == ["c6"]

    @pytest.mark.unit
    def test_add_component_with_rect_is_checked(self, responsive_schema):
        with pytest.raises(PlacementError):
            add_component(
                responsive_schema,
                default_component_data("div"),
                "desktop",
                rect=rect(0, 0, 2, 2),
            )

    @pytest.mark.unit
    def test_add_component_finds_free_slot(self, minimal_schema):
        """A new section takes the first free slot sized for its tag."""
        schema = place_component(minimal_schema, "c1", "mobile", rect(0, 0, 4, 2))
        result = add_component(schema, default_component_data("section"), "mobile")
        assert result.component("c2").explicit_layout("mobile") == rect(0, 2, 2, 2)

    @pytest.mark.unit
    def test_add_component_full_grid_stays_unplaced(self, responsive_schema):
        """With every cell taken the component is added without a rectangle."""
        result = add_component(responsive_schema, default_component_data("div"), "mobile")
        added = result.component("c6")
        assert added.explicit_layout("mobile") is None
        assert result.layouts["mobile"].components[-1] == "c6"

    @pytest.mark.unit
    def test_add_component_without_auto_place(self, minimal_schema):
        result = add_component(
            minimal_schema, default_component_data("div"), "mobile", auto_place=False
        )
        assert result.component("c2").responsive_canvas_layout == {}

    @pytest.mark.unit
    def test_suggest_placement_falls_back_to_single_cell(self, minimal_schema):
        """A tag-sized slot that cannot fit shrinks to one cell."""
        schema = place_component(minimal_schema, "c1", "mobile", rect(0, 0, 4, 7))
        schema = add_component(
            schema, default_component_data("section"), "mobile", auto_place=False
        )
        assert suggest_placement(schema, "c2", "mobile") == rect(0, 7, 1, 1)

    @pytest.mark.unit
    def test_add_component_unknown_breakpoint(self, responsive_schema):
        with pytest.raises(KeyError):
            add_component(responsive_schema, default_component_data("div"), "watch")

    @pytest.mark.unit
    def test_delete_cascades(self, responsive_schema):
        """Membership, roles and links all drop the deleted id."""
        result = delete_component(responsive_schema, "c3")
        assert result.component("c3") is None
        assert "c3" not in result.layouts["desktop"].components
        assert result.layouts["desktop"].roles.sidebar is None
        assert result.layouts["desktop"].roles.main == "c4"
        assert result.component_links == []

    @pytest.mark.unit
    def test_delete_unknown(self, responsive_schema):
        with pytest.raises(KeyError):
            delete_component(responsive_schema, "c99")

    @pytest.mark.unit
    def test_duplicate(self, responsive_schema):
        result = duplicate_component(responsive_schema, "c4", "mobile")
        copy = result.components[-1]
        assert copy.id == "c6"
        assert copy.name == "MainCopy"
        assert copy.semantic_tag == responsive_schema.component("c4").semantic_tag
        assert copy.responsive_canvas_layout == {}
        assert "c6" in result.layouts["mobile"].components

    @pytest.mark.unit
    def test_update_component(self, responsive_schema):
        result = update_component(responsive_schema, "c3", {"name": "SideNav"})
        assert result.component("c3").name == "SideNav"
        assert responsive_schema.component("c3").name == "Sidebar"

    @pytest.mark.unit
    def test_update_component_id_rejected(self, responsive_schema):
        with pytest.raises(ValueError):
            update_component(responsive_schema, "c3", {"id": "x"})

    @pytest.mark.unit
    def test_reorder_layout(self, responsive_schema):
        result = reorder_layout(responsive_schema, "mobile", ["c2", "c1", "c4", "c5"])
        assert result.layouts["mobile"].components == ["c2", "c1", "c4", "c5"]
        with pytest.raises(ValueError):
            reorder_layout(responsive_schema, "mobile", ["c1"])


class TestPlacement:
    """Moving and resizing rectangles."""

    @pytest.mark.unit
    def test_move_into_free_space(self, responsive_schema):
        shrunk = resize_component(responsive_schema, "c4", "desktop", 6, 6)
        moved = move_component(shrunk, "c3", "desktop", 9, 1)
        assert moved.component("c3").responsive_canvas_layout["desktop"] == rect(9, 1, 3, 6)

    @pytest.mark.unit
    def test_touching_is_allowed(self, responsive_schema):
        """Growing the sidebar up to the main area's edge succeeds."""
        shrunk = resize_component(responsive_schema, "c3", "desktop", 2, 6)
        grown = resize_component(shrunk, "c3", "desktop", 3, 6)
        assert grown.component("c3").responsive_canvas_layout["desktop"].width == 3

    @pytest.mark.unit
    def test_overlap_rejected(self, responsive_schema):
        with pytest.raises(PlacementError) as exc_info:
            resize_component(responsive_schema, "c3", "desktop", 4, 6)
        assert exc_info.value.conflicts == ["c4"]
        assert exc_info.value.breakpoint == "desktop"

    @pytest.mark.unit
    def test_out_of_bounds_rejected(self, responsive_schema):
        with pytest.raises(PlacementError):
            move_component(responsive_schema, "c1", "mobile", 1, 0)

    @pytest.mark.unit
    def test_move_without_rectangle(self, responsive_schema):
        with pytest.raises(PlacementError):
            move_component(responsive_schema, "c2", "desktop", 0, 0)

    @pytest.mark.unit
    def test_place_activates_component(self, responsive_schema):
        result = place_component(responsive_schema, "c2", "tablet", rect(0, 0, 8, 1))
        assert result.layouts["tablet"].components == ["c2"]


class TestBreakpointOperations:
    """Adding, deleting and renaming breakpoints."""

    @pytest.mark.unit
    def test_add_breakpoint_sorted(self, responsive_schema):
        wide = Breakpoint(name="wide", min_width=1440, grid_cols=16, grid_rows=8)
        small = Breakpoint(name="small", min_width=480, grid_cols=4, grid_rows=8)
        result = add_breakpoint(add_breakpoint(responsive_schema, wide), small)
        names = [bp.name for bp in result.breakpoints]
        assert names == ["mobile", "small", "tablet", "desktop", "wide"]
        assert result.layouts["wide"].components == []

    @pytest.mark.unit
    def test_add_duplicate_breakpoint(self, responsive_schema):
        with pytest.raises(ValueError):
            add_breakpoint(
                responsive_schema,
                Breakpoint(name="mobile", min_width=0, grid_cols=4, grid_rows=8),
            )

    @pytest.mark.unit
    def test_delete_breakpoint_cascades(self, responsive_schema):
        result = delete_breakpoint(responsive_schema, "desktop")
        assert "desktop" not in result.layouts
        assert all("desktop" not in c.responsive_canvas_layout for c in result.components)

    @pytest.mark.unit
    def test_cannot_delete_last_breakpoint(self, minimal_schema):
        with pytest.raises(ValueError):
            delete_breakpoint(minimal_schema, "mobile")

    @pytest.mark.unit
    def test_rename_cascades(self, responsive_schema):
        renamed = Breakpoint(name="laptop", min_width=1024, grid_cols=12, grid_rows=8)
        result = update_breakpoint(responsive_schema, "desktop", renamed)
        assert "laptop" in result.layouts and "desktop" not in result.layouts
        assert "laptop" in result.component("c1").responsive_canvas_layout
        assert result.breakpoint("desktop") is None

    @pytest.mark.unit
    def test_rename_moves_responsive_overrides(self, responsive_schema):
        """Per-breakpoint behaviour follows the renamed breakpoint."""
        schema = update_component(
            responsive_schema, "c3", {"responsive": {"desktop": {"hidden": False, "order": 2}}}
        )
        renamed = Breakpoint(name="laptop", min_width=1024, grid_cols=12, grid_rows=8)
        result = update_breakpoint(schema, "desktop", renamed)
        overrides = result.component("c3").responsive
        assert list(overrides) == ["laptop"]
        assert overrides["laptop"].order == 2

    @pytest.mark.unit
    def test_delete_drops_responsive_overrides(self, responsive_schema):
        schema = update_component(
            responsive_schema, "c2", {"responsive": {"mobile": {"hidden": True}}}
        )
        result = delete_breakpoint(schema, "mobile")
        assert result.component("c2").responsive == {}

    @pytest.mark.unit
    def test_rename_collision(self, responsive_schema):
        clash = Breakpoint(name="mobile", min_width=1024, grid_cols=12, grid_rows=8)
        with pytest.raises(ValueError):
            update_breakpoint(responsive_schema, "desktop", clash)


class TestLinkOperations:
    """Linking honours the policy and validates ids."""

    @pytest.mark.unit
    def test_link_transitive(self, responsive_schema):
        result = link_components(responsive_schema, "c3", "c1", LinkPolicy.TRANSITIVE)
        assert len(result.component_links) == 2

    @pytest.mark.unit
    def test_link_one_to_one_evicts(self, responsive_schema):
        result = link_components(responsive_schema, "c3", "c1", LinkPolicy.ONE_TO_ONE)
        assert result.component_links == [ComponentLink(source="c3", target="c1")]

    @pytest.mark.unit
    def test_link_uses_configured_policy(self, responsive_schema, clean_env):
        clean_env.setenv("LAYLDER_LINK_POLICY", "one-to-one")
        result = link_components(responsive_schema, "c3", "c1")
        assert len(result.component_links) == 1

    @pytest.mark.unit
    def test_link_unknown_component(self, responsive_schema):
        with pytest.raises(KeyError):
            link_components(responsive_schema, "c1", "c99")

    @pytest.mark.unit
    def test_unlink_and_clear(self, responsive_schema):
        assert unlink_components(responsive_schema, "c3", "c2").component_links == []
        assert clear_links(responsive_schema).component_links == []
