"""End-to-end tests for the specex command line."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from specex import __version__
from specex.app import app
from specex.config import load_global_config
from specex.exceptions import ConfigError

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"
V2_VALID = str(FIXTURES_DIR / "v2" / "valid.json")
V2_INVALID = str(FIXTURES_DIR / "v2" / "invalid_type.json")
V2_MISSING_PAIRS = str(FIXTURES_DIR / "v2" / "missing_pairs.json")
EXTERNAL_SPEC = str(FIXTURES_DIR / "external" / "spec.json")


class TestRoot:
    """Root options."""

    def test_version(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"specex {__version__}" in result.output

    def test_invalid_configured_format(self, cli_runner, isolated_config, monkeypatch) -> None:
        monkeypatch.setenv("SPECEX_FORMAT", "fancy")
        result = cli_runner.invoke(app, ["validate", V2_VALID])
        assert result.exit_code == 1
        assert isinstance(result.exception, ConfigError)


class TestValidateCommand:
    """Exit codes and output of ``specex validate``."""

    def test_valid_spec_exits_zero(self, cli_runner, isolated_config) -> None:
        result = cli_runner.invoke(app, ["validate", V2_VALID])
        assert result.exit_code == 0
        assert "Schemas with examples found: 2" in result.output
        assert "No errors found." in result.output

    def test_invalid_spec_exits_one(self, cli_runner, isolated_config) -> None:
        result = cli_runner.invoke(app, ["validate", V2_INVALID])
        assert result.exit_code == 1
        assert "'links' is a required property" in result.output

    def test_json_output(self, cli_runner, isolated_config) -> None:
        result = cli_runner.invoke(app, ["--json", "validate", V2_INVALID])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["valid"] is False
        assert [error["keyword"] for error in data["errors"]] == ["required", "type"]
        assert data["errors"][0]["dataPath"] == ".versions[0]"
        assert data["statistics"]["examplesTotal"] == 2

    def test_missing_spec_file(self, cli_runner, isolated_config) -> None:
        result = cli_runner.invoke(app, ["--json", "validate", "missing.json"])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["errors"][0]["type"] == "ENOENT"

    def test_external_example(self, cli_runner, isolated_config) -> None:
        result = cli_runner.invoke(
            app,
            [
                "--json",
                "validate",
                EXTERNAL_SPEC,
                "-s",
                "$.paths./.get.responses.200.schema",
                "-e",
                str(FIXTURES_DIR / "external" / "examples" / "valid.json"),
            ],
        )
        assert result.exit_code == 0
        assert json.loads(result.output)["statistics"]["examplesTotal"] == 1

    def test_mapping_files(self, cli_runner, isolated_config) -> None:
        result = cli_runner.invoke(
            app,
            [
                "--json",
                "validate",
                EXTERNAL_SPEC,
                "-m",
                str(FIXTURES_DIR / "external" / "maps" / "map-*.json"),
                "-c",
            ],
        )
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["statistics"]["matchingFilePathsMapping"] == 2
        assert len(data["errors"]) == 2

    def test_mapping_relative_paths_from_env(
        self, cli_runner, isolated_config, monkeypatch
    ) -> None:
        monkeypatch.setenv("SPECEX_CWD_TO_MAPPING_FILE", "true")
        result = cli_runner.invoke(
            app,
            [
                "--json",
                "validate",
                EXTERNAL_SPEC,
                "-m",
                str(FIXTURES_DIR / "external" / "maps" / "map-pets.json"),
            ],
        )
        data = json.loads(result.output)
        assert data["statistics"]["examplesTotal"] == 2
        assert [error["dataPath"] for error in data["errors"]] == ["[1]"]

    @pytest.mark.parametrize(
        ("extra", "message"),
        [
            (["-s", "$.a"], "must be given together"),
            (["-e", "example.json"], "must be given together"),
            (["-m", "map.json", "-s", "$.a", "-e", "x.json"], "cannot be combined"),
            (["-c"], "requires --mapping-filepath"),
        ],
    )
    def test_conflicting_options_exit_two(
        self, cli_runner, isolated_config, extra, message
    ) -> None:
        result = cli_runner.invoke(app, ["validate", V2_VALID, *extra])
        assert result.exit_code == 2
        assert message in result.output


class TestInspectCommand:
    """``specex inspect locations``."""

    def test_locations_json(self, cli_runner, isolated_config) -> None:
        result = cli_runner.invoke(app, ["--json", "inspect", "locations", V2_MISSING_PAIRS])
        assert result.exit_code == 0
        assert json.loads(result.output) == [
            {
                "Schema": "/paths/~1/get/responses/300/schema",
                "Example": "-",
                "Schema found": "yes",
            },
            {
                "Schema": "/paths/~1/get/responses/200/schema",
                "Example": "/paths/~1/get/responses/200/examples/application~1json",
                "Schema found": "no",
            },
        ]

    def test_unsupported_document(self, cli_runner, isolated_config) -> None:
        spec = isolated_config / "spec.json"
        spec.write_text('{"info": {}}', encoding="utf-8")
        result = cli_runner.invoke(app, ["inspect", "locations", str(spec)])
        assert result.exit_code == 1
        assert "Missing 'openapi' or 'swagger' field" in result.output


class TestConfigCommand:
    """``specex config``."""

    def test_show(self, cli_runner, isolated_config) -> None:
        result = cli_runner.invoke(app, ["--json", "-q", "config", "show"])
        assert result.exit_code == 0
        assert json.loads(result.output) == {
            "output": {"format": "auto"},
            "cwd_to_mapping_file": False,
        }

    def test_set_and_reset(self, cli_runner, isolated_config) -> None:
        result = cli_runner.invoke(app, ["config", "set", "cwd_to_mapping_file", "yes"])
        assert result.exit_code == 0
        assert load_global_config().cwd_to_mapping_file is True

        result = cli_runner.invoke(app, ["config", "set", "output.format", "plain"])
        assert result.exit_code == 0
        assert load_global_config().output.format == "plain"

        result = cli_runner.invoke(app, ["config", "reset", "--force"])
        assert result.exit_code == 0
        assert load_global_config().output.format == "auto"
        assert load_global_config().cwd_to_mapping_file is False

    @pytest.mark.parametrize(
        ("key", "value"),
        [("nope", "x"), ("output.nope", "x"), ("output", "x"), ("cwd_to_mapping_file", "maybe")],
    )
    def test_set_rejects_bad_input(self, cli_runner, isolated_config, key, value) -> None:
        result = cli_runner.invoke(app, ["config", "set", key, value])
        assert result.exit_code == 2

    def test_reset_can_be_cancelled(self, cli_runner, isolated_config) -> None:
        cli_runner.invoke(app, ["config", "set", "output.format", "plain"])
        result = cli_runner.invoke(app, ["config", "reset"], input="n\n")
        assert result.exit_code == 0
        assert load_global_config().output.format == "plain"
