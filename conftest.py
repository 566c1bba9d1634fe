"""Root pytest configuration and fixtures.

This module provides:
- Environment setup (loads .env)
- Tier marking for tests collected without an explicit marker
- Schema fixtures shared by unit and integration tests
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from dotenv import load_dotenv

from laylder.config import EnvVar
from laylder.schema import Schema, load_schema

# Load environment variables from .env file
load_dotenv()


# =============================================================================
# Pytest Hooks
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]):
    """Give unmarked tests a tier marker based on where they live.

    Tests under ``tests/integration`` become integration tests; the rest
    are unit tests.
    """
    for item in items:
        if "unit" in item.keywords or "integration" in item.keywords:
            continue
        if "integration" in Path(str(item.fspath)).parts:
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove every LAYLDER_* variable so defaults apply."""
    for var in EnvVar:
        monkeypatch.delenv(var.name, raising=False)
    return monkeypatch


# =============================================================================
# Schema Fixtures
# =============================================================================


def _component(
    cid: str,
    name: str,
    tag: str,
    rects: dict[str, dict[str, int]] | None = None,
    **overrides: Any,
) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": cid,
        "name": name,
        "semanticTag": tag,
        "positioning": {"type": "static"},
        "layout": {"type": "none"},
        "responsiveCanvasLayout": rects or {},
    }
    data.update(overrides)
    return data


def _rect(x: int, y: int, width: int, height: int) -> dict[str, int]:
    return {"x": x, "y": y, "width": width, "height": height}


@pytest.fixture
def minimal_schema_data() -> dict[str, Any]:
    """One PascalCase component, one breakpoint at 0, one matching layout."""
    return {
        "schemaVersion": "2.0",
        "components": [_component("c1", "Hero", "section")],
        "breakpoints": [{"name": "mobile", "minWidth": 0, "gridCols": 4, "gridRows": 8}],
        "layouts": {"mobile": {"structure": "vertical", "components": ["c1"]}},
    }


@pytest.fixture
def minimal_schema(minimal_schema_data: dict[str, Any]) -> Schema:
    return load_schema(minimal_schema_data)


@pytest.fixture
def responsive_schema_data() -> dict[str, Any]:
    """A header/nav/main/footer page authored on mobile and desktop.

    Tablet has no layout and no rectangles; the mobile nav is linked to
    the desktop sidebar.
    """
    return {
        "schemaVersion": "2.0",
        "components": [
            _component(
                "c1",
                "Header",
                "header",
                {"mobile": _rect(0, 0, 4, 1), "desktop": _rect(0, 0, 12, 1)},
                positioning={"type": "sticky", "position": {"top": 0, "zIndex": 50}},
            ),
            _component(
                "c2",
                "MobileNav",
                "nav",
                {"mobile": _rect(0, 1, 4, 1)},
                layout={"type": "flex", "flex": {"direction": "row"}},
            ),
            _component(
                "c3",
                "Sidebar",
                "aside",
                {"desktop": _rect(0, 1, 3, 6)},
            ),
            _component(
                "c4",
                "Main",
                "main",
                {"mobile": _rect(0, 2, 4, 5), "desktop": _rect(3, 1, 9, 6)},
                layout={"type": "container", "container": {"maxWidth": "full"}},
            ),
            _component(
                "c5",
                "Footer",
                "footer",
                {"mobile": _rect(0, 7, 4, 1), "desktop": _rect(0, 7, 12, 1)},
            ),
        ],
        "breakpoints": [
            {"name": "mobile", "minWidth": 0, "gridCols": 4, "gridRows": 8},
            {"name": "tablet", "minWidth": 768, "gridCols": 8, "gridRows": 8},
            {"name": "desktop", "minWidth": 1024, "gridCols": 12, "gridRows": 8},
        ],
        "layouts": {
            "mobile": {"structure": "vertical", "components": ["c1", "c2", "c4", "c5"]},
            "desktop": {
                "structure": "sidebar-main",
                "components": ["c1", "c3", "c4", "c5"],
                "roles": {"header": "c1", "sidebar": "c3", "main": "c4", "footer": "c5"},
            },
        },
        "componentLinks": [{"source": "c2", "target": "c3"}],
    }


@pytest.fixture
def responsive_schema(responsive_schema_data: dict[str, Any]) -> Schema:
    return load_schema(responsive_schema_data)


@pytest.fixture
def schema_file(tmp_path: Path, responsive_schema_data: dict[str, Any]) -> Path:
    """The responsive schema written to a JSON file."""
    path = tmp_path / "schema.json"
    path.write_text(json.dumps(responsive_schema_data, indent=2), encoding="utf-8")
    return path
