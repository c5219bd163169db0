"""Tests for specex.config -- XDG paths, atomic writes, precedence."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from specex.config import (
    _atomic_write,
    get_config_dir,
    get_data_dir,
    global_config_path,
    load_global_config,
    load_project_config,
    parse_bool,
    resolve_config,
    save_global_config,
)
from specex.exceptions import ConfigError
from specex.models import GlobalConfig, OutputConfig


def _write_json(path: Path, data: Any) -> None:
    """Write a value as JSON to *path*, creating parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


# ---------------------------------------------------------------------------
# XDG path resolution
# ---------------------------------------------------------------------------


class TestXDGPaths:
    """XDG paths on Linux and the fallback elsewhere."""

    def test_config_dir_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("specex.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
        result = get_config_dir()
        assert result == tmp_path / "cfg" / "specex"
        assert result.is_dir()

    def test_config_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("specex.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
        assert get_config_dir() == tmp_path / ".config" / "specex"

    def test_data_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("specex.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_DATA_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
        assert get_data_dir() == tmp_path / ".local" / "share" / "specex"

    def test_fallback_dirs(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("specex.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
        assert get_config_dir() == tmp_path / ".specex"
        assert get_data_dir() == tmp_path / ".specex" / "logs"


# ---------------------------------------------------------------------------
# Atomic writes
# ---------------------------------------------------------------------------


class TestAtomicWrite:
    """Temp-file-then-rename writes."""

    def test_writes_content(self, tmp_path: Path) -> None:
        target = tmp_path / "nested" / "file.json"
        _atomic_write(target, '{"a": 1}\n')
        assert target.read_text(encoding="utf-8") == '{"a": 1}\n'

    def test_no_temp_file_left_on_failure(self, tmp_path: Path) -> None:
        target = tmp_path / "file.json"
        with patch("specex.config.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(OSError):
                _atomic_write(target, "data")
        assert list(tmp_path.iterdir()) == []


# ---------------------------------------------------------------------------
# Global and project config
# ---------------------------------------------------------------------------


class TestGlobalConfigFile:
    """Loading and saving ~/.config/specex/config.json."""

    def test_missing_file_gives_defaults(self, isolated_config: Path) -> None:
        assert load_global_config() == GlobalConfig()

    def test_round_trip(self, isolated_config: Path) -> None:
        config = GlobalConfig(output=OutputConfig(format="json"), cwd_to_mapping_file=True)
        save_global_config(config)
        assert load_global_config() == config

    def test_invalid_json_raises(self, isolated_config: Path) -> None:
        global_config_path().write_text("{", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid global config"):
            load_global_config()


class TestProjectConfig:
    """./specex.json in the working directory."""

    def test_absent(self, isolated_config: Path) -> None:
        assert load_project_config() is None

    def test_loaded(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "specex.json", {"cwd_to_mapping_file": True})
        assert load_project_config() == {"cwd_to_mapping_file": True}

    def test_non_object_raises(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "specex.json", [1])
        with pytest.raises(ConfigError, match="expected a JSON object"):
            load_project_config()


# ---------------------------------------------------------------------------
# Precedence resolution
# ---------------------------------------------------------------------------


class TestResolveConfig:
    """CLI > env > project > global > defaults."""

    def test_defaults(self, isolated_config: Path) -> None:
        config = resolve_config()
        assert config.output.format == "auto"
        assert config.cwd_to_mapping_file is False

    def test_global_applies(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig(output=OutputConfig(format="plain")))
        assert resolve_config().output.format == "plain"

    def test_project_overrides_global(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig(output=OutputConfig(format="plain")))
        _write_json(isolated_config / "specex.json", {"output": {"format": "rich"}})
        assert resolve_config().output.format == "rich"

    def test_env_overrides_project(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _write_json(isolated_config / "specex.json", {"cwd_to_mapping_file": False})
        monkeypatch.setenv("SPECEX_CWD_TO_MAPPING_FILE", "yes")
        monkeypatch.setenv("SPECEX_FORMAT", "json")
        config = resolve_config()
        assert config.cwd_to_mapping_file is True
        assert config.output.format == "json"

    def test_cli_overrides_env(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SPECEX_FORMAT", "json")
        monkeypatch.setenv("SPECEX_CWD_TO_MAPPING_FILE", "0")
        config = resolve_config(cli_format="plain", cli_cwd_to_mapping_file=True)
        assert config.output.format == "plain"
        assert config.cwd_to_mapping_file is True

    def test_does_not_write_global_file(self, isolated_config: Path) -> None:
        resolve_config(cli_format="json")
        assert load_global_config().output.format == "auto"

    def test_invalid_env_bool_raises(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SPECEX_CWD_TO_MAPPING_FILE", "maybe")
        with pytest.raises(ConfigError, match="Invalid boolean"):
            resolve_config()


class TestParseBool:
    """Boolean spellings accepted in env vars and ``config set``."""

    @pytest.mark.parametrize("value", ["1", "true", "TRUE", "yes", "on"])
    def test_truthy(self, value: str) -> None:
        assert parse_bool(value, "X") is True

    @pytest.mark.parametrize("value", ["0", "false", "no", "off", ""])
    def test_falsy(self, value: str) -> None:
        assert parse_bool(value, "X") is False
