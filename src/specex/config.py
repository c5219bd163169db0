"""Persistent settings for specex and the order in which they apply.

Settings come from four places, highest precedence first:

1. CLI flags,
2. ``SPECEX_*`` environment variables,
3. ``./specex.json`` in the working directory (project config),
4. the user's global ``config.json`` (see :func:`global_config_path`).

:func:`resolve_config` folds them into one
:class:`~specex.models.GlobalConfig`. Only ``specex config set|reset`` ever
write, and only to the global file.

Linux and the BSDs follow the XDG base directory layout; every other
platform keeps everything below ``~/.specex/``.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from specex.exceptions import ConfigError
from specex.models import GlobalConfig

_APP_NAME = "specex"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "specex.json"

ENV_FORMAT = "SPECEX_FORMAT"
ENV_CWD_TO_MAPPING_FILE = "SPECEX_CWD_TO_MAPPING_FILE"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


def _is_xdg_platform() -> bool:
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def _app_dir(xdg_var: str, xdg_default: tuple[str, ...], *fallback: str) -> Path:
    if _is_xdg_platform():
        root = os.environ.get(xdg_var) or Path.home().joinpath(*xdg_default)
        path = Path(root) / _APP_NAME
    else:
        path = Path.home().joinpath(f".{_APP_NAME}", *fallback)
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """Directory of the global config file, created on demand.

    ``$XDG_CONFIG_HOME/specex`` (default ``~/.config/specex``) on XDG
    platforms, ``~/.specex`` elsewhere.
    """
    return _app_dir("XDG_CONFIG_HOME", (".config",))


def get_data_dir() -> Path:
    """Directory for crash logs, created on demand.

    ``$XDG_DATA_HOME/specex`` (default ``~/.local/share/specex``) on XDG
    platforms, ``~/.specex/logs`` elsewhere.
    """
    return _app_dir("XDG_DATA_HOME", (".local", "share"), "logs")


def _atomic_write(path: Path, data: str) -> None:
    """Replace *path* with *data* so readers never see a partial file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


def global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Read the global config file.

    A missing file yields the defaults.

    Raises:
        ConfigError: If the file holds invalid JSON or unknown values.
    """
    path = global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        return GlobalConfig.model_validate(json.loads(path.read_text(encoding="utf-8")))
    except (json.JSONDecodeError, ValidationError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    _atomic_write(global_config_path(), json.dumps(config.model_dump(mode="json"), indent=2) + "\n")


def load_project_config() -> Optional[dict[str, Any]]:
    """Read ``./specex.json`` if there is one.

    Raises:
        ConfigError: If the file is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


def resolve_config(
    cli_format: Optional[str] = None,
    cli_cwd_to_mapping_file: Optional[bool] = None,
) -> GlobalConfig:
    """Resolve config with full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_format``, ``cli_cwd_to_mapping_file``)
        2. Environment variables (``SPECEX_FORMAT``, ``SPECEX_CWD_TO_MAPPING_FILE``)
        3. Project config (``./specex.json``)
        4. User config (``~/.config/specex/config.json``)
        5. Defaults

    Returns:
        The effective :class:`~specex.models.GlobalConfig`. The file on disk
        is not modified.

    Raises:
        ConfigError: If a config file or environment variable is invalid.
    """
    merged = load_global_config().model_dump(mode="json")

    project = load_project_config()
    if project is not None:
        if "output" in project:
            merged["output"].update(project["output"])
        if "cwd_to_mapping_file" in project:
            merged["cwd_to_mapping_file"] = project["cwd_to_mapping_file"]

    env_format = os.environ.get(ENV_FORMAT)
    if env_format:
        merged["output"]["format"] = env_format
    env_cwd = os.environ.get(ENV_CWD_TO_MAPPING_FILE)
    if env_cwd is not None:
        merged["cwd_to_mapping_file"] = parse_bool(env_cwd, ENV_CWD_TO_MAPPING_FILE)

    if cli_format is not None:
        merged["output"]["format"] = cli_format
    if cli_cwd_to_mapping_file is not None:
        merged["cwd_to_mapping_file"] = cli_cwd_to_mapping_file

    try:
        return GlobalConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def parse_bool(value: str, name: str) -> bool:
    """Interpret a config string such as ``"true"``/``"0"`` as a boolean.

    Raises:
        ConfigError: If *value* is not a recognised boolean spelling.
    """
    normalized = value.strip().lower()
    if normalized in _TRUTHY:
        return True
    if normalized in _FALSY:
        return False
    raise ConfigError(f"Invalid boolean for {name}: '{value}'")
