"""The ``specex`` command line.

``specex validate`` is the main command; ``specex inspect`` and
``specex config`` are helpers around it. The root callback decides the
output format before any of them runs (``--json``/``--plain`` first, then
``SPECEX_FORMAT``, then the project and global config files) and installs
the process-wide :class:`~specex.output.OutputManager`.

:func:`main` is what the ``specex`` console script calls. Anything that
escapes a command is turned into an exit status there: a
:class:`~specex.exceptions.SpecexError` exits with its own code, any other
exception leaves a traceback under the data directory and exits with 1.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime, timezone
from typing import Any

import typer

from specex import __version__
from specex.exit_codes import EXIT_GENERIC_FAILURE

_EXIT_INTERRUPTED = 130

app = typer.Typer(
    name="specex",
    help="Validate the embedded and external examples of OpenAPI 2.x/3.x specs.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"specex {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", callback=_print_version, is_eager=True,
        help="Print the specex version and exit.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Write results as JSON on stdout."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Write results as plain text, without tables."
    ),
    no_color: bool = typer.Option(False, "--no-color", help="Never use colours."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Only print results and errors."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Trace example discovery on stderr."
    ),
) -> None:
    """Validate the examples of Swagger 2.x and OpenAPI 3.x documents."""
    from specex.config import resolve_config
    from specex.exceptions import ConfigError
    from specex.output import OutputFormat, OutputManager, set_output

    cli_format = None
    if json_output:
        cli_format = OutputFormat.JSON.value
    elif plain_output:
        cli_format = OutputFormat.PLAIN.value

    requested = resolve_config(cli_format=cli_format).output.format
    try:
        fmt = OutputFormat(requested)
    except ValueError:
        raise ConfigError(
            f"Invalid output format: '{requested}' (expected auto, json, plain or rich)"
        ) from None

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


from specex.commands.config import config_app  # noqa: E402
from specex.commands.inspect import inspect_app  # noqa: E402
from specex.commands.validate import validate_command  # noqa: E402

app.command("validate")(validate_command)
app.add_typer(inspect_app, name="inspect", help="Show how examples are paired with schemas.")
app.add_typer(config_app, name="config", help="Show or change the global configuration.")


def _on_interrupt(signum: int, frame: Any) -> None:  # noqa: ANN401
    sys.stderr.write("\nInterrupted.\n")
    sys.exit(_EXIT_INTERRUPTED)


def _write_crash_log() -> str:
    """Save the traceback being handled and return where it was written."""
    from specex.config import get_data_dir

    crash_dir = get_data_dir() / "crashes"
    crash_dir.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    path = crash_dir / f"specex-{stamp}.log"
    path.write_text(traceback.format_exc(), encoding="utf-8")
    return str(path)


def main() -> None:
    """Run the CLI and translate escaped exceptions into exit codes."""
    signal.signal(signal.SIGINT, _on_interrupt)
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nInterrupted.\n")
        sys.exit(_EXIT_INTERRUPTED)
    except Exception as exc:
        from specex.exceptions import SpecexError
        from specex.output import error

        if isinstance(exc, SpecexError):
            error(exc.message)
            sys.exit(exc.exit_code)
        error(f"Unexpected failure, traceback saved to {_write_crash_log()}")
        sys.exit(EXIT_GENERIC_FAILURE)
