"""Shared test fixtures for specgraph.

Provides reusable fixtures for loading spec fixtures, creating isolated
config environments, resetting output state, and running CLI commands.
These fixtures are automatically discovered by pytest and available to
all test modules without explicit imports.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

from specgraph.models import ApiSpecDomainModel
from specgraph.output import reset_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale.
    Resetting forces a fresh manager to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Raw spec fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def pets_raw() -> dict[str, Any]:
    """Two paths, three operations, one shared ``Pet`` schema."""
    with open(FIXTURES_DIR / "pets.json") as f:
        return json.load(f)


@pytest.fixture
def pets_text() -> str:
    return (FIXTURES_DIR / "pets.json").read_text(encoding="utf-8")


@pytest.fixture
def store_yaml() -> str:
    """YAML spec with composition, arrays, a dangling ref, and an untagged path."""
    return (FIXTURES_DIR / "store.yaml").read_text(encoding="utf-8")


# ---------------------------------------------------------------------------
# Parsed model fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def pets_model(pets_raw: dict[str, Any]) -> ApiSpecDomainModel:
    from specgraph.parser import parse_spec

    return parse_spec(pets_raw)


@pytest.fixture
def store_model(store_yaml: str) -> ApiSpecDomainModel:
    from specgraph.parser import parse_spec

    return parse_spec(store_yaml)


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path so
    that tests never touch real user config, clears all SPECGRAPH_*
    environment variables, and changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setattr("specgraph.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in ["SPECGRAPH_FORMAT", "SPECGRAPH_STORE_DIR", "NO_COLOR"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner() -> CliRunner:
    """Typer CLI test runner."""
    return CliRunner()
