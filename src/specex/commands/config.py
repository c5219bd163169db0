"""``specex config`` -- read and edit the global configuration file.

The file holds defaults for the other commands: ``output.format`` and
``cwd_to_mapping_file`` (the default of ``validate -c``). Project files and
environment variables are never written; ``show --effective`` displays the
result of layering them over the global file.
"""

from __future__ import annotations

from typing import Any

import typer
from pydantic import ValidationError

from specex.exceptions import ConfigError, InvalidUsageError
from specex.output import error, format_data, info, success

config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show(
    effective: bool = typer.Option(
        False,
        "--effective",
        help="Apply ./specex.json and SPECEX_* variables before printing.",
    ),
) -> None:
    """Print the configuration.

    Example::

        specex config show
        specex --json config show --effective
    """
    from specex.config import global_config_path, load_global_config, resolve_config

    config = resolve_config() if effective else load_global_config()
    info(f"Global config: {global_config_path()}")
    format_data(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Setting to change, e.g. 'output.format'."),
    value: str = typer.Argument(help="New value."),
) -> None:
    """Change one setting of the global configuration.

    Boolean settings accept ``true/false``, ``yes/no``, ``on/off`` and
    ``1/0``.

    Example::

        specex config set output.format json
        specex config set cwd_to_mapping_file true
    """
    from specex.config import load_global_config, save_global_config
    from specex.models import GlobalConfig

    data = load_global_config().model_dump(mode="json")
    try:
        stored = _assign(data, key, value)
        updated = GlobalConfig.model_validate(data)
    except ValidationError as exc:
        error(f"Invalid value for {key}: {exc}")
        raise typer.Exit(code=InvalidUsageError.exit_code) from None
    except InvalidUsageError as exc:
        error(exc.message)
        raise typer.Exit(code=exc.exit_code) from None

    save_global_config(updated)
    success(f"{key} = {stored}")


def _assign(data: dict[str, Any], key: str, value: str) -> Any:
    """Set the dotted *key* of *data* to *value*, coerced to the current type.

    Raises:
        InvalidUsageError: If *key* does not name a leaf setting or *value*
            is not a valid boolean for a boolean setting.
    """
    from specex.config import parse_bool

    *parents, leaf = key.split(".")
    section = data
    for part in parents:
        section = section.get(part)
        if not isinstance(section, dict):
            raise InvalidUsageError(f"Unknown config key: {key}")
    if leaf not in section or isinstance(section[leaf], dict):
        raise InvalidUsageError(f"Unknown config key: {key}")

    if isinstance(section[leaf], bool):
        try:
            section[leaf] = parse_bool(value, key)
        except ConfigError as exc:
            raise InvalidUsageError(exc.message) from exc
    else:
        section[leaf] = value
    return section[leaf]


@config_app.command("reset")
def config_reset(
    force: bool = typer.Option(False, "--force", "-f", help="Do not ask for confirmation."),
) -> None:
    """Restore every setting of the global configuration to its default.

    Example::

        specex config reset --force
    """
    from specex.config import save_global_config
    from specex.models import GlobalConfig

    if not force and not typer.confirm("Restore the default configuration?"):
        info("Nothing changed.")
        raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration restored to defaults.")
