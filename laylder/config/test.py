"""Tests for configuration management."""

from pathlib import Path

import pytest

from .lib import (
    EnvConfig,
    EnvVar,
    _convert_value,
    get_default_grid_size,
    get_environment,
    get_environment_info,
    list_environment_variables,
)

# =============================================================================
# Tests for get_environment (main interface)
# =============================================================================


class TestGetEnvironment:
    """Tests for the unified get_environment interface."""

    @pytest.mark.unit
    def test_returns_default_when_not_set(self, monkeypatch):
        """Returns default value when env var is not set."""
        monkeypatch.delenv("LAYLDER_GRID_COLS", raising=False)
        assert get_environment(EnvVar.LAYLDER_GRID_COLS) == 12

    @pytest.mark.unit
    def test_override_takes_priority(self, monkeypatch):
        """Override parameter takes highest priority."""
        monkeypatch.setenv("LAYLDER_GRID_COLS", "20")
        assert get_environment(EnvVar.LAYLDER_GRID_COLS, override=4) == 4

    @pytest.mark.unit
    def test_env_var_overrides_default(self, monkeypatch):
        """Environment variable overrides default value."""
        monkeypatch.setenv("LAYLDER_GRID_ROWS", "16")
        result = get_environment(EnvVar.LAYLDER_GRID_ROWS)
        assert result == 16
        assert isinstance(result, int)

    @pytest.mark.unit
    def test_invalid_int_falls_back_to_default(self, monkeypatch):
        """Unparseable integers fall back to the default."""
        monkeypatch.setenv("LAYLDER_GRID_ROWS", "many")
        assert get_environment(EnvVar.LAYLDER_GRID_ROWS) == 8

    @pytest.mark.unit
    def test_bool_type_conversion_true(self, monkeypatch):
        """Boolean type conversion for true values."""
        for value in ("true", "1", "yes", "TRUE", "Yes"):
            monkeypatch.setenv("LAYLDER_STRICT", value)
            assert get_environment(EnvVar.LAYLDER_STRICT) is True

    @pytest.mark.unit
    def test_bool_type_conversion_false(self, monkeypatch):
        """Boolean type conversion for false values."""
        for value in ("false", "0", "no", "FALSE", "No"):
            monkeypatch.setenv("LAYLDER_STRICT", value)
            assert get_environment(EnvVar.LAYLDER_STRICT) is False

    @pytest.mark.unit
    def test_string_type(self, monkeypatch):
        """String type returns as-is."""
        monkeypatch.setenv("LAYLDER_LINK_POLICY", "one_to_one")
        assert get_environment(EnvVar.LAYLDER_LINK_POLICY) == "one_to_one"


class TestConvertValue:
    """Tests for the conversion helper."""

    @pytest.mark.unit
    def test_path_conversion(self):
        """Path values are wrapped in Path."""
        assert _convert_value("/tmp/x", Path, None) == Path("/tmp/x")

    @pytest.mark.unit
    def test_none_returns_default(self):
        """Missing values return the default."""
        assert _convert_value(None, int, 3) == 3


class TestIntrospection:
    """Tests for metadata helpers."""

    @pytest.mark.unit
    def test_info_is_env_config(self):
        """Metadata lookup returns the EnvConfig."""
        info = get_environment_info(EnvVar.LAYLDER_LOG_LEVEL)
        assert isinstance(info, EnvConfig)
        assert info.name == "LAYLDER_LOG_LEVEL"
        assert info.category == "logging"

    @pytest.mark.unit
    def test_list_by_category(self):
        """Category filter narrows the listing."""
        grid_vars = list_environment_variables("grid")
        assert set(grid_vars) == {EnvVar.LAYLDER_GRID_COLS, EnvVar.LAYLDER_GRID_ROWS}
        assert len(list_environment_variables()) == len(EnvVar)

    @pytest.mark.unit
    def test_default_grid_size(self, monkeypatch):
        """Default grid size reads both grid variables."""
        monkeypatch.setenv("LAYLDER_GRID_COLS", "6")
        monkeypatch.delenv("LAYLDER_GRID_ROWS", raising=False)
        assert get_default_grid_size() == (6, 8)
