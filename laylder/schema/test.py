"""Unit tests for the Schema module."""

import json

import pytest
from pydantic import ValidationError

from laylder.schema import (
    DEFAULT_GRID_CONFIG,
    Breakpoint,
    CanvasLayout,
    Component,
    ComponentLink,
    LayoutConfig,
    LayoutStructure,
    PositioningType,
    Schema,
    SemanticTag,
    create_empty_schema,
    create_schema_with_breakpoint,
    default_component_data,
    dump_schema,
    export_json_schema,
    generate_component_id,
    load_schema,
    schema_to_dict,
)


def _wire_schema() -> dict:
    return {
        "schemaVersion": "2.0",
        "components": [
            {
                "id": "c1",
                "name": "Header",
                "semanticTag": "header",
                "positioning": {"type": "sticky", "position": {"top": 0, "zIndex": 50}},
                "layout": {"type": "flex", "flex": {"direction": "row"}},
                "responsiveCanvasLayout": {
                    "mobile": {"x": 0, "y": 0, "width": 4, "height": 1},
                },
            }
        ],
        "breakpoints": [
            {"name": "mobile", "minWidth": 0, "gridCols": 4, "gridRows": 8},
        ],
        "layouts": {"mobile": {"structure": "vertical", "components": ["c1"]}},
    }


class TestWireFormat:
    """Tests for camelCase JSON loading and dumping."""

    @pytest.mark.unit
    def test_load_camel_case_dict(self):
        """camelCase keys map onto snake_case attributes."""
        schema = load_schema(_wire_schema())
        header = schema.components[0]
        assert schema.schema_version == "2.0"
        assert header.semantic_tag == SemanticTag.HEADER
        assert header.positioning.type == PositioningType.STICKY
        assert header.positioning.position.z_index == 50
        assert schema.breakpoints[0].grid_cols == 4

    @pytest.mark.unit
    def test_load_json_text(self):
        """JSON text is accepted as well as dicts."""
        schema = load_schema(json.dumps(_wire_schema()))
        assert schema.layouts["mobile"].components == ["c1"]

    @pytest.mark.unit
    def test_dump_uses_camel_case(self):
        """Dumped JSON uses the application's keys."""
        data = json.loads(dump_schema(load_schema(_wire_schema())))
        assert "schemaVersion" in data
        assert "responsiveCanvasLayout" in data["components"][0]
        assert data["components"][0]["positioning"]["position"]["zIndex"] == 50
        assert data["componentLinks"] == []

    @pytest.mark.unit
    def test_dump_load_preserves_schema(self):
        """A dumped schema loads back to an equal model."""
        schema = load_schema(_wire_schema())
        assert load_schema(dump_schema(schema)) == schema

    @pytest.mark.unit
    def test_schema_to_dict_is_json_compatible(self):
        """Enum members are emitted as plain strings."""
        data = schema_to_dict(load_schema(_wire_schema()))
        assert data["components"][0]["semanticTag"] == "header"

    @pytest.mark.unit
    def test_unknown_opaque_keys_survive(self):
        """Extra keys in opaque configuration blocks are kept."""
        raw = _wire_schema()
        raw["components"][0]["positioning"]["custom"] = "keep-me"
        data = schema_to_dict(load_schema(raw))
        assert data["components"][0]["positioning"]["custom"] == "keep-me"


class TestProgrammingErrors:
    """Malformed shapes fail fast."""

    @pytest.mark.unit
    def test_missing_required_field(self):
        """A component without a name is rejected."""
        raw = _wire_schema()
        del raw["components"][0]["name"]
        with pytest.raises(ValidationError):
            load_schema(raw)

    @pytest.mark.unit
    def test_fractional_rectangle(self):
        """Rectangles must be integers."""
        with pytest.raises(ValidationError):
            CanvasLayout(x=0.5, y=0, width=1, height=1)

    @pytest.mark.unit
    def test_grid_cols_below_one(self):
        """Grid dimensions must be at least one."""
        with pytest.raises(ValidationError):
            Breakpoint(name="mobile", min_width=0, grid_cols=0, grid_rows=8)

    @pytest.mark.unit
    def test_negative_min_width_is_accepted(self):
        """Negative min_width is a data error left to the validator."""
        bp = Breakpoint(name="mobile", min_width=-1, grid_cols=4, grid_rows=8)
        assert bp.min_width == -1

    @pytest.mark.unit
    def test_unknown_semantic_tag(self):
        """Semantic tags are a closed set."""
        with pytest.raises(ValidationError):
            Component(id="c1", name="Thing", semantic_tag="marquee")


class TestLookupSemantics:
    """Tests for sparse per-breakpoint rectangle lookup."""

    @pytest.mark.unit
    def test_explicit_layout_ignores_fallback(self):
        """explicit_layout only sees the per-breakpoint map."""
        comp = Component(
            id="c1",
            name="Main",
            semantic_tag="main",
            canvas_layout=CanvasLayout(x=0, y=0, width=2, height=2),
        )
        assert comp.explicit_layout("desktop") is None
        assert comp.layout_for("desktop") == CanvasLayout(x=0, y=0, width=2, height=2)

    @pytest.mark.unit
    def test_responsive_entry_wins_over_fallback(self):
        """Per-breakpoint rectangles shadow the legacy rectangle."""
        comp = Component(
            id="c1",
            name="Main",
            semantic_tag="main",
            canvas_layout=CanvasLayout(x=0, y=0, width=2, height=2),
            responsive_canvas_layout={
                "desktop": CanvasLayout(x=1, y=1, width=3, height=3)
            },
        )
        assert comp.layout_for("desktop").x == 1
        assert comp.layout_for("mobile").x == 0

    @pytest.mark.unit
    def test_has_canvas_layout(self):
        """has_canvas_layout checks one or any breakpoint."""
        bare = Component(id="c1", name="Main", semantic_tag="main")
        placed = Component(
            id="c2",
            name="Main",
            semantic_tag="main",
            responsive_canvas_layout={"tablet": CanvasLayout(x=0, y=0, width=1, height=1)},
        )
        assert not bare.has_canvas_layout()
        assert placed.has_canvas_layout()
        assert placed.has_canvas_layout("tablet")
        assert not placed.has_canvas_layout("mobile")

    @pytest.mark.unit
    def test_active_components_skip_unknown_ids(self):
        """Unknown ids in a layout do not resolve to components."""
        schema = load_schema(_wire_schema())
        schema.layouts["mobile"].components.append("ghost")
        assert [c.id for c in schema.active_components("mobile")] == ["c1"]
        assert schema.active_components("desktop") == []

    @pytest.mark.unit
    def test_active_components_count_repeated_ids_once(self):
        """A repeated id resolves once, at its first position."""
        schema = load_schema(_wire_schema())
        schema.layouts["mobile"].components.extend(["c1", "c1"])
        assert [c.id for c in schema.active_components("mobile")] == ["c1"]

    @pytest.mark.unit
    def test_sorted_breakpoints_is_stable(self):
        """Breakpoints sort by min_width without reordering the schema."""
        schema = create_empty_schema()
        schema.breakpoints.reverse()
        names = [bp.name for bp in schema.sorted_breakpoints()]
        assert names == ["mobile", "tablet", "desktop"]
        assert schema.breakpoints[0].name == "desktop"


class TestComponentLink:
    """Tests for unordered links."""

    @pytest.mark.unit
    def test_key_is_direction_independent(self):
        """Reversed links share a key."""
        assert (
            ComponentLink(source="c1", target="c2").key()
            == ComponentLink(source="c2", target="c1").key()
        )

    @pytest.mark.unit
    def test_touches(self):
        """touches checks both endpoints."""
        link = ComponentLink(source="c1", target="c2")
        assert link.touches("c2")
        assert not link.touches("c3")


class TestFactories:
    """Tests for schema and component factories."""

    @pytest.mark.unit
    def test_create_empty_schema(self):
        """Empty schema has three standard breakpoints and layouts."""
        schema = create_empty_schema()
        assert [bp.name for bp in schema.breakpoints] == ["mobile", "tablet", "desktop"]
        assert [bp.min_width for bp in schema.breakpoints] == [0, 768, 1024]
        assert schema.breakpoint("desktop").grid_cols == DEFAULT_GRID_CONFIG["desktop"]["grid_cols"]
        assert all(
            layout.structure == LayoutStructure.VERTICAL and layout.components == []
            for layout in schema.layouts.values()
        )

    @pytest.mark.unit
    def test_create_schema_with_breakpoint(self):
        """Single-breakpoint schema uses the standard min width."""
        schema = create_schema_with_breakpoint("tablet")
        assert [bp.name for bp in schema.breakpoints] == ["tablet"]
        assert schema.breakpoints[0].min_width == 768
        assert list(schema.layouts) == ["tablet"]

    @pytest.mark.unit
    def test_create_schema_with_unknown_breakpoint(self):
        """Unknown breakpoint kinds are rejected."""
        with pytest.raises(ValueError):
            create_schema_with_breakpoint("watch")

    @pytest.mark.unit
    def test_generate_component_id(self):
        """Ids continue after the highest numeric id."""
        comps = [
            Component(id="c2", name="A", semantic_tag="div"),
            Component(id="c10", name="B", semantic_tag="div"),
            Component(id="hero", name="C", semantic_tag="div"),
        ]
        assert generate_component_id(comps) == "c11"
        assert generate_component_id([]) == "c1"

    @pytest.mark.unit
    @pytest.mark.parametrize("tag", list(SemanticTag))
    def test_default_component_data_builds_components(self, tag):
        """Every tag's defaults form a valid component."""
        component = Component(id="c1", **default_component_data(tag))
        assert component.semantic_tag == tag
        assert component.name[0].isupper()

    @pytest.mark.unit
    def test_default_component_data_is_a_copy(self):
        """Mutating returned defaults does not leak into later calls."""
        first = default_component_data("header")
        first["positioning"]["type"] = "static"
        assert default_component_data("header")["positioning"]["type"] == "sticky"

    @pytest.mark.unit
    def test_export_json_schema(self):
        """JSON Schema export names the wire fields."""
        exported = export_json_schema()
        assert "schemaVersion" in exported["properties"]
        assert "layouts" in exported["required"]


class TestSchemaModel:
    """Tests for the top-level model."""

    @pytest.mark.unit
    def test_component_lookup(self):
        """component() and breakpoint() find by identity."""
        schema = load_schema(_wire_schema())
        assert schema.component("c1").name == "Header"
        assert schema.component("c9") is None
        assert schema.breakpoint("mobile").grid_rows == 8
        assert schema.breakpoint("tv") is None
        assert schema.component_ids() == ["c1"]

    @pytest.mark.unit
    def test_links_default_to_empty(self):
        """Schemas without links load with an empty link list."""
        schema = Schema(
            schema_version="2.0",
            components=[],
            breakpoints=[],
            layouts={"mobile": LayoutConfig()},
        )
        assert schema.component_links == []
