"""Fixtures shared by the whole specex test suite.

Spec fixtures are plain dicts read from ``tests/fixtures``; every test gets
a fresh copy, so tests may modify what they receive.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from specex.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


def load_fixture(relative: str) -> dict[str, Any]:
    """Load a JSON fixture by its path below ``tests/fixtures``."""
    with open(FIXTURES_DIR / relative, encoding="utf-8") as f:
        return json.load(f)


# ---------------------------------------------------------------------------
# Output state
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Drop the process-wide OutputManager once a test is done.

    A manager keeps the streams that were current when it was built, and
    CliRunner closes its streams when an invocation ends.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Specification documents
# ---------------------------------------------------------------------------


@pytest.fixture
def v2_valid_raw() -> dict[str, Any]:
    """Swagger 2.0 spec whose two embedded examples are valid."""
    return load_fixture("v2/valid.json")


@pytest.fixture
def v2_invalid_raw() -> dict[str, Any]:
    """Swagger 2.0 spec with one example violating its referenced schema."""
    return load_fixture("v2/invalid_type.json")


@pytest.fixture
def v2_missing_pairs_raw() -> dict[str, Any]:
    """Swagger 2.0 spec with an example lacking a schema and vice versa."""
    return load_fixture("v2/missing_pairs.json")


@pytest.fixture
def v3_raw() -> dict[str, Any]:
    """OpenAPI 3.0 spec with a ``$ref`` example and an invalid request example."""
    return load_fixture("v3/ref_examples.json")


@pytest.fixture
def external_dir() -> Path:
    """Directory holding the external-example spec, example and mapping files."""
    return FIXTURES_DIR / "external"


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point every config location at *tmp_path* and run the test from there.

    ``SPECEX_*`` variables are removed so the host environment cannot leak
    into config resolution. Returns *tmp_path*.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setattr("specex.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in ["SPECEX_FORMAT", "SPECEX_CWD_TO_MAPPING_FILE"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def plain_output() -> OutputManager:
    """Install a PLAIN-format OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def json_output() -> OutputManager:
    """Install a JSON-format OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.JSON, no_color=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """A Typer ``CliRunner`` for invoking ``specex.app.app``."""
    from typer.testing import CliRunner

    return CliRunner()
