"""Tests for the dev env CLI command."""

import os
import subprocess
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).parent.parent.parent


def run_env(**env: str) -> subprocess.CompletedProcess:
    environ = {k: v for k, v in os.environ.items() if not k.startswith("LAYLDER_")}
    environ.update(env)
    return subprocess.run(
        [sys.executable, ".", "dev", "env"],
        capture_output=True,
        text=True,
        cwd=PROJECT_ROOT,
        env=environ,
        timeout=30,
    )


@pytest.mark.integration
def test_env_runs_without_error():
    """dev env should run and exit cleanly."""
    result = run_env()
    assert result.returncode == 0


@pytest.mark.integration
def test_env_lists_every_variable():
    """Each configuration variable is printed."""
    result = run_env()
    for name in ("LAYLDER_LOG_LEVEL", "LAYLDER_LINK_POLICY", "LAYLDER_STRICT"):
        assert name in result.stdout


@pytest.mark.integration
def test_env_shows_resolved_override():
    """Values set in the environment are reported."""
    result = run_env(LAYLDER_LINK_POLICY="one-to-one")
    assert "LAYLDER_LINK_POLICY=one-to-one" in result.stdout
