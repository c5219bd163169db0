"""Terminal rendering for specex.

Data and diagnostics never share a stream:

* **stdout** receives what a caller may want to parse: the statistics of a
  run, the complete response in JSON mode, and location tables.
* **stderr** receives everything addressed to a human: each validation
  error, status lines, and ``--verbose`` traces.

The output format is chosen once per process. ``auto`` becomes ``rich``
on an interactive terminal with colour enabled and ``plain`` otherwise;
``NO_COLOR``, ``TERM=dumb`` and ``--no-color`` all disable colour
(see https://no-color.org).

The CLI installs an :class:`OutputManager` with :func:`set_output`. Library
code only calls the module-level :func:`debug`, which falls back to a
default manager when nothing was installed.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from specex.models import ApplicationError, ValidationResponse

_STATISTICS_LABELS = {
    "schemasWithExamples": "Schemas with examples found",
    "examplesWithoutSchema": "Examples without schema found",
    "examplesTotal": "Total examples found",
    "matchingFilePathsMapping": "Matching mapping files found",
}


class OutputFormat(str, Enum):
    """How data written to stdout is rendered."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


def _resolve_format(requested: OutputFormat, no_color: bool) -> OutputFormat:
    if requested != OutputFormat.AUTO:
        return requested
    if _is_tty() and not no_color:
        return OutputFormat.RICH
    return OutputFormat.PLAIN


class OutputManager:
    """Renders responses, tables and diagnostics in one output format.

    Args:
        format: Requested format; ``AUTO`` is resolved immediately.
        no_color: Write diagnostics and errors without any styling.
        quiet: Drop informational and success lines.
        verbose: Show :meth:`debug` traces.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._format = _resolve_format(format, self._no_color)
        self._quiet = quiet
        self._verbose = verbose
        self._out = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=self._format == OutputFormat.RICH,
        )
        self._err = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    # -- stdout ------------------------------------------------------------

    def report_response(self, response: ValidationResponse) -> None:
        """Render the outcome of a validation run.

        JSON mode writes the serialised response to stdout and nothing else.
        The other modes write the statistics to stdout, then each error to
        stderr, then a closing success line when the response is valid.
        """
        data = response.to_dict()
        if self._format == OutputFormat.JSON:
            self.format_data(data)
            return

        self._render_statistics(data["statistics"])
        for entry in response.errors:
            self.report_error(entry)
        if response.valid:
            self.success("No errors found.")

    def _render_statistics(self, statistics: dict[str, int]) -> None:
        counts = [
            (label, str(statistics[key]))
            for key, label in _STATISTICS_LABELS.items()
            if key in statistics
        ]
        if self._format == OutputFormat.PLAIN:
            for label, count in counts:
                self.print_data(f"{label}: {count}")
            return
        self.print_table(
            ["Statistic", "Count"],
            [list(pair) for pair in counts],
            title="Validation statistics",
        )

    def report_error(self, entry: ApplicationError) -> None:
        """Write one error entry to stderr as indented JSON."""
        payload = json.dumps(
            entry.model_dump(mode="json", by_alias=True, exclude_none=True),
            indent=2,
            ensure_ascii=False,
        )
        if self._no_color or self._format == OutputFormat.PLAIN:
            print(payload, file=sys.stderr, flush=True)
            return
        self._err.print(Syntax(payload, "json", theme="monokai", word_wrap=True))

    def format_data(self, data: Any) -> None:
        """Write a JSON-compatible value to stdout.

        Plain mode flattens a mapping into ``key<TAB>value`` lines; Rich mode
        highlights the JSON; JSON mode prints it as is.
        """
        if self._format == OutputFormat.PLAIN and isinstance(data, dict):
            for key, value in data.items():
                self.print_data(f"{key}\t{value}")
            return
        dumped = json.dumps(data, indent=2, ensure_ascii=False, default=str)
        if self._format == OutputFormat.RICH:
            self._out.print(Syntax(dumped, "json", theme="monokai", word_wrap=True))
        else:
            self.print_data(dumped)

    def print_data(self, text: str) -> None:
        print(text, file=sys.stdout, flush=True)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Write rows to stdout.

        JSON mode emits one object per row keyed by *headers*, plain mode
        emits tab-separated lines, and Rich mode draws a table with *title*.
        """
        if self._format == OutputFormat.JSON:
            self.print_data(
                json.dumps([dict(zip(headers, row)) for row in rows], indent=2, ensure_ascii=False)
            )
        elif self._format == OutputFormat.PLAIN:
            for line in [headers, *rows]:
                self.print_data("\t".join(line))
        else:
            table = Table(*headers, title=title, header_style="bold cyan")
            for row in rows:
                table.add_row(*row)
            self._out.print(table)

    # -- stderr ------------------------------------------------------------

    def info(self, message: str) -> None:
        if not self._quiet:
            self._diagnostic(message)

    def success(self, message: str) -> None:
        if not self._quiet:
            self._diagnostic(message, style="green")

    def error(self, message: str) -> None:
        """Report a failure. Shown even with ``--quiet``."""
        self._diagnostic(f"Error: {message}", style="bold red")

    def debug(self, message: str) -> None:
        if self._verbose:
            self._diagnostic(f"[debug] {message}", style="dim")

    def _diagnostic(self, text: str, style: str = "") -> None:
        if self._no_color:
            print(text, file=sys.stderr, flush=True)
        else:
            self._err.print(Text(text, style=style), highlight=False)


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """``NO_COLOR`` set to anything, or a dumb terminal."""
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


# -- process-wide manager --------------------------------------------------

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed manager, creating a default one on first use."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager so the next call builds a fresh one.

    Managers hold the streams that were current when they were created, so
    tests that swap ``sys.stdout`` must reset between runs.
    """
    global _output
    _output = None


def report_response(response: ValidationResponse) -> None:
    get_output().report_response(response)


def format_data(data: Any) -> None:
    get_output().format_data(data)


def print_table(headers: list[str], rows: list[list[str]], title: Optional[str] = None) -> None:
    get_output().print_table(headers, rows, title)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
