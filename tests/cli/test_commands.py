"""Tests for the laylder CLI commands."""

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).parent.parent.parent


def run_cli(*args: str, **env: str) -> subprocess.CompletedProcess:
    """Run ``python . <args>`` from the project root with a clean config."""
    environ = {k: v for k, v in os.environ.items() if not k.startswith("LAYLDER_")}
    environ.update(env)
    return subprocess.run(
        [sys.executable, ".", *args],
        capture_output=True,
        text=True,
        cwd=PROJECT_ROOT,
        env=environ,
        timeout=60,
    )


@pytest.mark.integration
class TestValidateCommand:
    """validate normalizes, validates and sets the exit code."""

    def test_valid_schema(self, schema_file):
        result = run_cli("validate", str(schema_file))
        assert result.returncode == 0
        assert "Schema validation passed" in result.stdout

    def test_json_output(self, schema_file):
        result = run_cli("validate", str(schema_file), "--json")
        payload = json.loads(result.stdout)
        assert payload["valid"] is True
        assert payload["errors"] == []
        assert [w["code"] for w in payload["warnings"]] == ["COMPLEX_GRID_LAYOUT_DETECTED"]

    def test_no_normalize_reports_gap(self, schema_file):
        result = run_cli("validate", str(schema_file), "--no-normalize", "--json")
        assert result.returncode == 1
        codes = [e["code"] for e in json.loads(result.stdout)["errors"]]
        assert "MISSING_LAYOUT" in codes

    def test_strict_mode_fails_on_warnings(self, schema_file):
        assert run_cli("validate", str(schema_file), "--strict").returncode == 1
        assert run_cli("validate", str(schema_file), LAYLDER_STRICT="true").returncode == 1

    def test_missing_file(self, tmp_path):
        result = run_cli("validate", str(tmp_path / "nope.json"))
        assert result.returncode == 1
        assert "File not found" in result.stderr

    def test_malformed_schema(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"schemaVersion": "2.0"}), encoding="utf-8")
        result = run_cli("validate", str(path))
        assert result.returncode == 1
        assert "Malformed schema" in result.stderr


@pytest.mark.integration
class TestNormalizeCommand:
    """normalize writes the filled-in schema."""

    def test_writes_output_file(self, schema_file, tmp_path):
        output = tmp_path / "out" / "normalized.json"
        result = run_cli("normalize", str(schema_file), "-o", str(output))
        assert result.returncode == 0
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["layouts"]["tablet"]["components"] == ["c1", "c2", "c4", "c5"]
        assert "tablet" in data["components"][0]["responsiveCanvasLayout"]

    def test_stdout(self, schema_file):
        result = run_cli("normalize", str(schema_file))
        assert json.loads(result.stdout)["schemaVersion"] == "2.0"


@pytest.mark.integration
class TestGroupsCommand:
    """groups prints link groups under the chosen policy."""

    def test_json_groups(self, schema_file):
        result = run_cli("groups", str(schema_file), "--json")
        assert json.loads(result.stdout) == [["c1"], ["c2", "c3"], ["c4"], ["c5"]]

    def test_text_groups(self, schema_file):
        result = run_cli("groups", str(schema_file))
        assert "MobileNav (c2), Sidebar (c3)" in result.stdout


@pytest.mark.integration
class TestAreasCommand:
    """areas converts in both directions."""

    def test_to_rects(self, tmp_path):
        path = tmp_path / "areas.json"
        path.write_text(json.dumps([["a", "a"], ["b", ""]]), encoding="utf-8")
        result = run_cli("areas", "to-rects", str(path))
        assert json.loads(result.stdout) == [
            {"id": "a", "x": 0, "y": 0, "width": 2, "height": 1},
            {"id": "b", "x": 0, "y": 1, "width": 1, "height": 1},
        ]

    def test_to_areas_uses_configured_grid(self, tmp_path):
        path = tmp_path / "rects.json"
        path.write_text(
            json.dumps([{"id": "a", "x": 0, "y": 0, "width": 2, "height": 1}]),
            encoding="utf-8",
        )
        result = run_cli(
            "areas", "to-areas", str(path), LAYLDER_GRID_COLS="3", LAYLDER_GRID_ROWS="2"
        )
        assert json.loads(result.stdout) == [["a", "a", ""], ["", "", ""]]

    def test_to_areas_rejects_floats(self, tmp_path):
        path = tmp_path / "rects.json"
        path.write_text(
            json.dumps([{"id": "a", "x": 0.5, "y": 0, "width": 2, "height": 1}]),
            encoding="utf-8",
        )
        assert run_cli("areas", "to-areas", str(path)).returncode == 1


@pytest.mark.integration
class TestMisc:
    """Help, unknown commands and schema export."""

    def test_help(self):
        result = run_cli("--help")
        assert result.returncode == 0
        assert "validate" in result.stdout

    def test_unknown_command(self):
        assert run_cli("frobnicate").returncode == 1

    def test_json_schema(self):
        result = run_cli("json-schema")
        assert "schemaVersion" in json.loads(result.stdout)["properties"]
