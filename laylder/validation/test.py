"""Unit tests for schema validation rules."""

import copy

import pytest

from laylder.schema import load_schema
from laylder.validation import (
    MAX_BREAKPOINTS,
    RULES,
    Severity,
    ValidationIssue,
    ValidationResult,
    breakpoint_name_issues,
    format_validation_result,
    get_rule,
    is_valid,
    normalize_and_validate,
    validate_schema,
)


def _breakpoints(count):
    return [
        {"name": f"bp{i}", "minWidth": i * 100, "gridCols": 12, "gridRows": 8}
        for i in range(count)
    ]


def _with(data, **changes):
    updated = copy.deepcopy(data)
    updated.update(changes)
    return load_schema(updated)


def _codes(issues):
    return [issue.code for issue in issues]


class TestMinimalSchemas:
    """The smallest failing and passing schemas."""

    @pytest.mark.unit
    def test_no_components_fails(self, minimal_schema_data):
        result = validate_schema(_with(minimal_schema_data, components=[]))
        assert result.valid is False
        assert "NO_COMPONENTS" in _codes(result.errors)

    @pytest.mark.unit
    def test_minimal_schema_passes(self, minimal_schema):
        result = validate_schema(minimal_schema)
        assert result.valid is True
        assert result.errors == []

    @pytest.mark.unit
    def test_warnings_do_not_affect_validity(self, minimal_schema):
        """The minimal schema has no rectangle, which is only advisory."""
        result = validate_schema(minimal_schema)
        assert "MISSING_CANVAS_LAYOUT" in _codes(result.warnings)
        assert result.valid

    @pytest.mark.unit
    def test_responsive_schema_passes_after_normalization(self, responsive_schema):
        result = normalize_and_validate(responsive_schema)
        assert result.errors == []
        assert _codes(result.warnings) == ["COMPLEX_GRID_LAYOUT_DETECTED"]

    @pytest.mark.unit
    def test_raw_responsive_schema_reports_missing_layout(self, responsive_schema):
        """Without normalization the tablet gap is an error."""
        result = validate_schema(responsive_schema)
        assert "MISSING_LAYOUT" in _codes(result.errors)


class TestIdentityRules:
    """Version, component ids and names."""

    @pytest.mark.unit
    def test_invalid_version(self, minimal_schema_data):
        result = validate_schema(_with(minimal_schema_data, schemaVersion="1.0"))
        assert _codes(result.errors) == ["INVALID_VERSION"]
        assert result.errors[0].field == "schemaVersion"

    @pytest.mark.unit
    def test_duplicate_component_id(self, minimal_schema_data):
        component = minimal_schema_data["components"][0]
        schema = _with(minimal_schema_data, components=[component, dict(component)])
        assert "DUPLICATE_COMPONENT_ID" in _codes(validate_schema(schema).errors)

    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["header", "Main Content", "Nav-Bar", "1Hero", ""])
    def test_non_pascal_case_name(self, minimal_schema_data, name):
        data = copy.deepcopy(minimal_schema_data)
        data["components"][0]["name"] = name
        issues = get_rule("components").run(load_schema(data)).errors
        assert _codes(issues) == ["INVALID_COMPONENT_NAME"]
        assert issues[0].component_id == "c1"

    @pytest.mark.unit
    def test_empty_component_id(self, minimal_schema_data):
        data = copy.deepcopy(minimal_schema_data)
        data["components"][0]["id"] = "  "
        assert "INVALID_COMPONENT_ID" in _codes(validate_schema(load_schema(data)).errors)


class TestBreakpointRules:
    """Breakpoint names, count, order and widths."""

    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["mobile tablet", "모바일", "mobile📱", "__proto__"])
    def test_rejected_names(self, name):
        codes = _codes(breakpoint_name_issues(name))
        assert {"INVALID_BREAKPOINT_NAME", "RESERVED_BREAKPOINT_NAME"} & set(codes)

    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["mobile-sm", "4k", "tablet_md"])
    def test_accepted_names(self, name):
        assert breakpoint_name_issues(name) == []

    @pytest.mark.unit
    def test_reserved_name(self):
        assert _codes(breakpoint_name_issues("constructor")) == ["RESERVED_BREAKPOINT_NAME"]

    @pytest.mark.unit
    def test_empty_name_reported_alone(self):
        assert _codes(breakpoint_name_issues("   ")) == ["EMPTY_BREAKPOINT_NAME"]

    @pytest.mark.unit
    def test_name_too_long(self):
        assert _codes(breakpoint_name_issues("a" * 101)) == ["BREAKPOINT_NAME_TOO_LONG"]
        assert breakpoint_name_issues("a" * 100) == []

    @pytest.mark.unit
    def test_trailing_newline_rejected(self):
        assert _codes(breakpoint_name_issues("mobile\n")) == ["INVALID_BREAKPOINT_NAME"]

    @pytest.mark.unit
    def test_exactly_max_breakpoints_passes(self, minimal_schema_data):
        breakpoints = _breakpoints(MAX_BREAKPOINTS)
        layouts = {bp["name"]: {"components": ["c1"]} for bp in breakpoints}
        result = validate_schema(
            _with(minimal_schema_data, breakpoints=breakpoints, layouts=layouts)
        )
        assert "TOO_MANY_BREAKPOINTS" not in _codes(result.errors)
        assert result.valid

    @pytest.mark.unit
    def test_one_over_max_breakpoints_fails(self, minimal_schema_data):
        breakpoints = _breakpoints(MAX_BREAKPOINTS + 1)
        layouts = {bp["name"]: {"components": ["c1"]} for bp in breakpoints}
        result = validate_schema(
            _with(minimal_schema_data, breakpoints=breakpoints, layouts=layouts)
        )
        assert _codes(result.errors) == ["TOO_MANY_BREAKPOINTS"]

    @pytest.mark.unit
    def test_no_breakpoints(self, minimal_schema_data):
        result = get_rule("breakpoints").run(_with(minimal_schema_data, breakpoints=[]))
        assert _codes(result.errors) == ["NO_BREAKPOINTS"]

    @pytest.mark.unit
    def test_duplicates_unsorted_and_negative(self, minimal_schema_data):
        breakpoints = [
            {"name": "b", "minWidth": 500, "gridCols": 4, "gridRows": 4},
            {"name": "a", "minWidth": -1, "gridCols": 4, "gridRows": 4},
            {"name": "b", "minWidth": 900, "gridCols": 4, "gridRows": 4},
        ]
        result = get_rule("breakpoints").run(
            _with(minimal_schema_data, breakpoints=breakpoints)
        )
        assert _codes(result.errors) == ["DUPLICATE_BREAKPOINT_NAME", "INVALID_MIN_WIDTH"]
        assert _codes(result.warnings) == ["BREAKPOINTS_NOT_SORTED"]


class TestLayoutRules:
    """Layout presence, references, roles and structure advice."""

    @pytest.mark.unit
    def test_missing_layout(self, minimal_schema_data):
        result = validate_schema(_with(minimal_schema_data, layouts={}))
        assert _codes(result.errors) == ["MISSING_LAYOUT"]
        assert result.errors[0].field == "layouts.mobile"

    @pytest.mark.unit
    def test_invalid_reference(self, minimal_schema_data):
        layouts = {"mobile": {"components": ["c1", "ghost"]}}
        result = validate_schema(_with(minimal_schema_data, layouts=layouts))
        assert _codes(result.errors) == ["INVALID_COMPONENT_REFERENCE"]

    @pytest.mark.unit
    def test_empty_layout_is_error(self, minimal_schema_data):
        layouts = {"mobile": {"components": []}}
        result = validate_schema(_with(minimal_schema_data, layouts=layouts))
        assert result.valid is False
        assert "EMPTY_LAYOUT" in _codes(result.errors)
        assert "CANVAS_COMPONENT_NOT_IN_LAYOUT" not in _codes(result.warnings)

    @pytest.mark.unit
    def test_empty_smallest_breakpoint_fails_after_normalization(self, minimal_schema_data):
        """Wider breakpoints cannot inherit from an empty smallest layout."""
        breakpoints = [
            {"name": "mobile", "minWidth": 0, "gridCols": 4, "gridRows": 8},
            {"name": "tablet", "minWidth": 768, "gridCols": 8, "gridRows": 8},
            {"name": "desktop", "minWidth": 1024, "gridCols": 12, "gridRows": 8},
        ]
        layouts = {
            "mobile": {"components": []},
            "tablet": {"components": []},
            "desktop": {"components": ["c1"]},
        }
        schema = _with(minimal_schema_data, breakpoints=breakpoints, layouts=layouts)
        result = normalize_and_validate(schema)
        assert result.valid is False
        empty = [e.field for e in result.errors if e.code == "EMPTY_LAYOUT"]
        assert empty == ["layouts.mobile.components", "layouts.tablet.components"]

    @pytest.mark.unit
    def test_empty_layout_without_components_is_warning(self, minimal_schema_data):
        layouts = {"mobile": {"components": []}}
        schema = _with(minimal_schema_data, components=[], layouts=layouts)
        result = validate_schema(schema)
        assert "EMPTY_LAYOUT" in _codes(result.warnings)
        assert "EMPTY_LAYOUT" not in _codes(result.errors)

    @pytest.mark.unit
    def test_repeated_membership_is_not_an_overlap(self, minimal_schema_data):
        """A component listed twice is reported once, never against itself."""
        data = copy.deepcopy(minimal_schema_data)
        data["components"][0]["responsiveCanvasLayout"] = {
            "mobile": {"x": 0, "y": 0, "width": 4, "height": 2}
        }
        data["layouts"]["mobile"]["components"] = ["c1", "c1"]
        result = validate_schema(load_schema(data))
        assert result.valid is True
        assert _codes(result.warnings).count("DUPLICATE_LAYOUT_COMPONENT") == 1
        assert "CANVAS_COMPONENTS_OVERLAP" not in _codes(result.errors)
        assert "COMPLEX_GRID_LAYOUT_DETECTED" not in _codes(result.warnings)

    @pytest.mark.unit
    def test_role_not_in_layout(self, minimal_schema_data):
        layouts = {"mobile": {"components": ["c1"], "roles": {"main": "c9"}}}
        result = validate_schema(_with(minimal_schema_data, layouts=layouts))
        assert _codes(result.errors) == ["ROLE_COMPONENT_NOT_IN_LAYOUT"]
        assert result.errors[0].field == "layouts.mobile.roles.main"

    @pytest.mark.unit
    def test_sidebar_main_without_roles(self, minimal_schema_data):
        layouts = {"mobile": {"structure": "sidebar-main", "components": ["c1"]}}
        result = validate_schema(_with(minimal_schema_data, layouts=layouts))
        assert "SIDEBAR_MAIN_WITHOUT_ROLES" in _codes(result.warnings)

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "structure, direction, code",
        [
            ("vertical", "row", "VERTICAL_STRUCTURE_NOT_COLUMN"),
            ("horizontal", "column", "HORIZONTAL_STRUCTURE_NOT_ROW"),
        ],
    )
    def test_structure_direction(self, minimal_schema_data, structure, direction, code):
        layouts = {
            "mobile": {
                "structure": structure,
                "components": ["c1"],
                "containerLayout": {"type": "flex", "flex": {"direction": direction}},
            }
        }
        result = get_rule("layouts").run(_with(minimal_schema_data, layouts=layouts))
        assert _codes(result.warnings) == [code]


class TestComponentAdvisories:
    """Positioning, layout configuration and semantic tag advice."""

    def _run(self, minimal_schema_data, rule, **component_changes):
        data = copy.deepcopy(minimal_schema_data)
        data["components"][0].update(component_changes)
        return get_rule(rule).run(load_schema(data))

    @pytest.mark.unit
    def test_header_not_fixed_or_sticky(self, minimal_schema_data):
        result = self._run(minimal_schema_data, "semantic-tags", semanticTag="header")
        assert _codes(result.warnings) == ["HEADER_NOT_FIXED_OR_STICKY"]

    @pytest.mark.unit
    def test_footer_not_static(self, minimal_schema_data):
        result = self._run(
            minimal_schema_data,
            "semantic-tags",
            semanticTag="footer",
            positioning={"type": "sticky", "position": {"bottom": 0}},
        )
        assert _codes(result.warnings) == ["FOOTER_NOT_STATIC"]

    @pytest.mark.unit
    def test_nav_not_flex(self, minimal_schema_data):
        result = self._run(minimal_schema_data, "semantic-tags", semanticTag="nav")
        assert _codes(result.warnings) == ["NAV_NOT_FLEX"]

    @pytest.mark.unit
    def test_main_with_flex1_class_is_fine(self, minimal_schema_data):
        result = self._run(
            minimal_schema_data,
            "semantic-tags",
            semanticTag="main",
            styling={"className": "flex-1 overflow-auto"},
        )
        assert result.warnings == []

    @pytest.mark.unit
    def test_main_without_flex1_or_container(self, minimal_schema_data):
        result = self._run(minimal_schema_data, "semantic-tags", semanticTag="main")
        assert _codes(result.warnings) == ["MAIN_WITHOUT_FLEX1_OR_CONTAINER"]

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "layout, code",
        [
            ({"type": "flex"}, "FLEX_WITHOUT_CONFIG"),
            ({"type": "grid"}, "GRID_WITHOUT_CONFIG"),
            ({"type": "grid", "grid": {"gap": "1rem"}}, "GRID_WITHOUT_COLS_OR_ROWS"),
            ({"type": "container"}, "CONTAINER_WITHOUT_CONFIG"),
        ],
    )
    def test_layout_without_config(self, minimal_schema_data, layout, code):
        result = self._run(minimal_schema_data, "component-layout", layout=layout)
        assert _codes(result.warnings) == [code]

    @pytest.mark.unit
    def test_missing_position_values(self, minimal_schema_data):
        result = self._run(minimal_schema_data, "positioning", positioning={"type": "sticky"})
        assert _codes(result.warnings) == ["MISSING_POSITION_VALUES"]

    @pytest.mark.unit
    def test_fixed_without_vertical_position(self, minimal_schema_data):
        result = self._run(
            minimal_schema_data,
            "positioning",
            positioning={"type": "fixed", "position": {"left": 0}},
        )
        assert _codes(result.warnings) == ["FIXED_WITHOUT_VERTICAL_POSITION"]

    @pytest.mark.unit
    @pytest.mark.parametrize("z_index, flagged", [(-1, True), (0, False), (9999, False), (10000, True)])
    def test_unusual_zindex(self, minimal_schema_data, z_index, flagged):
        result = self._run(
            minimal_schema_data,
            "positioning",
            positioning={"type": "relative", "position": {"zIndex": z_index}},
        )
        assert ("UNUSUAL_ZINDEX" in _codes(result.warnings)) is flagged


class TestCanvasRules:
    """Canvas bounds, overlap and order."""

    def _schema(self, minimal_schema_data, rects, order=None):
        data = copy.deepcopy(minimal_schema_data)
        data["components"] = [
            {
                "id": cid,
                "name": f"Block{cid.upper()}",
                "semanticTag": "div",
                "responsiveCanvasLayout": {"mobile": rect},
            }
            for cid, rect in rects.items()
        ]
        data["layouts"]["mobile"]["components"] = order or list(rects)
        return load_schema(data)

    @staticmethod
    def _rect(x, y, width, height):
        return {"x": x, "y": y, "width": width, "height": height}

    @pytest.mark.unit
    def test_overlap_is_error(self, minimal_schema_data):
        schema = self._schema(
            minimal_schema_data,
            {"a": self._rect(0, 0, 3, 3), "b": self._rect(2, 2, 2, 2)},
        )
        result = validate_schema(schema)
        assert "CANVAS_COMPONENTS_OVERLAP" in _codes(result.errors)
        assert not result.valid

    @pytest.mark.unit
    def test_adjacent_is_not_overlap(self, minimal_schema_data):
        schema = self._schema(
            minimal_schema_data,
            {"a": self._rect(0, 0, 2, 2), "b": self._rect(2, 0, 2, 2)},
        )
        result = validate_schema(schema)
        assert result.valid
        assert "COMPLEX_GRID_LAYOUT_DETECTED" in _codes(result.warnings)

    @pytest.mark.unit
    def test_out_of_bounds_is_error(self, minimal_schema_data):
        schema = self._schema(minimal_schema_data, {"a": self._rect(2, 0, 3, 1)})
        result = validate_schema(schema)
        assert _codes(result.errors) == ["CANVAS_OUT_OF_BOUNDS"]
        assert result.errors[0].component_id == "a"

    @pytest.mark.unit
    def test_negative_coordinate(self, minimal_schema_data):
        schema = self._schema(minimal_schema_data, {"a": self._rect(-1, 0, 1, 1)})
        assert _codes(validate_schema(schema).errors) == ["CANVAS_NEGATIVE_COORDINATE"]

    @pytest.mark.unit
    def test_zero_size(self, minimal_schema_data):
        schema = self._schema(minimal_schema_data, {"a": self._rect(0, 0, 0, 1)})
        assert "CANVAS_ZERO_SIZE" in _codes(validate_schema(schema).warnings)

    @pytest.mark.unit
    def test_order_mismatch(self, minimal_schema_data):
        schema = self._schema(
            minimal_schema_data,
            {"a": self._rect(0, 1, 4, 1), "b": self._rect(0, 0, 4, 1)},
        )
        result = validate_schema(schema)
        assert "CANVAS_LAYOUT_ORDER_MISMATCH" in _codes(result.warnings)
        assert result.valid

    @pytest.mark.unit
    def test_order_matches(self, minimal_schema_data):
        schema = self._schema(
            minimal_schema_data,
            {"a": self._rect(0, 1, 4, 1), "b": self._rect(0, 0, 4, 1)},
            order=["b", "a"],
        )
        assert validate_schema(schema).warnings == []

    @pytest.mark.unit
    def test_missing_canvas_layout_per_component(self, minimal_schema_data):
        schema = self._schema(minimal_schema_data, {"a": self._rect(0, 0, 4, 1)})
        data = schema.model_dump(by_alias=True)
        data["components"].append({"id": "b", "name": "Loose", "semanticTag": "div"})
        data["layouts"]["mobile"]["components"].append("b")
        result = validate_schema(load_schema(data))
        missing = [w for w in result.warnings if w.code == "MISSING_CANVAS_LAYOUT"]
        assert [w.component_id for w in missing] == ["b"]

    @pytest.mark.unit
    def test_canvas_component_not_in_layout(self, minimal_schema_data):
        schema = self._schema(
            minimal_schema_data,
            {"a": self._rect(0, 0, 4, 1), "b": self._rect(0, 1, 4, 1)},
            order=["a"],
        )
        result = validate_schema(schema)
        assert [w.component_id for w in result.warnings] == ["b"]
        assert _codes(result.warnings) == ["CANVAS_COMPONENT_NOT_IN_LAYOUT"]


class TestLinkRule:
    """Link list hygiene."""

    @pytest.mark.unit
    def test_orphaned_link(self, minimal_schema_data):
        links = [{"source": "c1", "target": "ghost"}]
        result = validate_schema(_with(minimal_schema_data, componentLinks=links))
        assert "INVALID_COMPONENT_LINK" in _codes(result.warnings)
        assert result.valid


class TestEngine:
    """Rule engine plumbing and reporting."""

    @pytest.mark.unit
    def test_rules_are_named_uniquely(self):
        names = [rule.name for rule in RULES]
        assert len(names) == len(set(names))

    @pytest.mark.unit
    def test_unknown_rule(self):
        with pytest.raises(KeyError):
            get_rule("nope")

    @pytest.mark.unit
    def test_collects_all_findings(self, minimal_schema_data):
        """Validation does not stop at the first error."""
        schema = _with(minimal_schema_data, schemaVersion="3.0", components=[])
        codes = _codes(validate_schema(schema).errors)
        assert "INVALID_VERSION" in codes
        assert "NO_COMPONENTS" in codes

    @pytest.mark.unit
    def test_validation_does_not_mutate(self, responsive_schema):
        before = responsive_schema.model_dump()
        validate_schema(responsive_schema)
        assert responsive_schema.model_dump() == before

    @pytest.mark.unit
    def test_is_valid(self, minimal_schema):
        assert is_valid(minimal_schema)

    @pytest.mark.unit
    def test_to_dict(self):
        result = ValidationResult(
            errors=[ValidationIssue("X", "bad", component_id="c1", field="name")],
            warnings=[ValidationIssue("Y", "meh", Severity.WARNING)],
        )
        assert result.to_dict() == {
            "valid": False,
            "errors": [{"code": "X", "message": "bad", "componentId": "c1", "field": "name"}],
            "warnings": [{"code": "Y", "message": "meh"}],
        }

    @pytest.mark.unit
    def test_format_validation_result(self):
        result = ValidationResult(errors=[ValidationIssue("X", "bad", component_id="c1")])
        report = format_validation_result(result)
        assert report.startswith("Schema validation failed")
        assert "1. [X] bad (Component: c1)" in report

    @pytest.mark.unit
    def test_format_passed(self):
        assert format_validation_result(ValidationResult()) == "Schema validation passed"
