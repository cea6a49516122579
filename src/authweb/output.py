"""Console output and the diagnostic log sink.

Verdict records and listings go to stdout so wrapper scripts can parse
them. Everything else (the debug trace of an attempt, warnings, errors)
goes to stderr. Colour is dropped for ``--no-color``, ``NO_COLOR`` and
``TERM=dumb``.

Engine modules log through the module-level :func:`debug` and
:func:`error`, which write to the :class:`OutputManager` installed by the
CLI callback (or a default one).
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


class OutputFormat(str, Enum):
    """How stdout records are rendered. ``AUTO`` picks ``RICH`` on a colour TTY."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


def _color_disabled_by_env() -> bool:
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


class OutputManager:
    """Renders data to stdout and diagnostics to stderr.

    Args:
        format: Record format; ``AUTO`` is resolved once, here.
        no_color: Write plain text, without Rich styling.
        quiet: Drop informational stderr lines (errors and warnings stay).
        verbose: Emit :meth:`debug` lines.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _color_disabled_by_env()
        self._quiet = quiet
        self._verbose = verbose
        if format is OutputFormat.AUTO:
            interactive = sys.stdout.isatty() if hasattr(sys.stdout, "isatty") else False
            format = OutputFormat.RICH if interactive and not self._no_color else OutputFormat.PLAIN
        self._format = format
        self._stdout = Console(
            file=sys.stdout, no_color=self._no_color, force_terminal=format is OutputFormat.RICH
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    # --- stdout ---

    def print_data(self, text: str) -> None:
        print(text, file=sys.stdout, flush=True)

    def format_response(self, data: Any) -> None:
        """Write one record: a dict, a list, or a scalar."""
        if self._format is OutputFormat.JSON:
            self.print_data(json.dumps(data, indent=2, ensure_ascii=False, default=str))
        elif self._format is OutputFormat.RICH and isinstance(data, (dict, list)):
            text = json.dumps(data, indent=2, ensure_ascii=False, default=str)
            self._stdout.print(Syntax(text, "json", theme="monokai", word_wrap=True))
        elif isinstance(data, dict):
            for key, value in data.items():
                self.print_data(f"{key}\t{value}")
        elif isinstance(data, list):
            for item in data:
                self.print_data(
                    "\t".join(str(v) for v in item.values()) if isinstance(item, dict) else str(item)
                )
        else:
            self.print_data(str(data))

    def print_table(
        self, headers: list[str], rows: list[list[str]], title: Optional[str] = None
    ) -> None:
        """Write rows as a Rich table, a JSON array of objects, or TSV."""
        if self._format is OutputFormat.JSON:
            self.print_data(json.dumps([dict(zip(headers, row)) for row in rows], indent=2))
            return
        if self._format is OutputFormat.PLAIN:
            for line in [headers, *rows]:
                self.print_data("\t".join(line))
            return
        table = Table(*headers, title=title, header_style="bold cyan")
        for row in rows:
            table.add_row(*row)
        self._stdout.print(table)

    # --- stderr ---

    def _emit(self, message: str, style: Optional[str] = None) -> None:
        # Messages carry remote header text, so Rich markup is never parsed.
        if self._no_color:
            print(message, file=sys.stderr, flush=True)
        else:
            self._stderr.print(message, style=style, markup=False)

    def info(self, message: str) -> None:
        if not self._quiet:
            self._emit(message)

    def success(self, message: str) -> None:
        if not self._quiet:
            self._emit(message, "green")

    def suggest(self, message: str) -> None:
        if not self._quiet:
            self._emit(f"→ {message}", "dim")

    def warning(self, message: str) -> None:
        self._emit(f"Warning: {message}", "yellow")

    def error(self, message: str) -> None:
        self._emit(f"Error: {message}", "bold red")

    def debug(self, message: str) -> None:
        if self._verbose:
            self._emit(f"[debug] {message}", "dim")


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
    """Forget the installed manager (tests swap stdout between runs)."""
    global _output
    _output = None


def format_response(data: Any) -> None:
    get_output().format_response(data)


def print_table(headers: list[str], rows: list[list[str]], title: Optional[str] = None) -> None:
    get_output().print_table(headers, rows, title)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def suggest(message: str) -> None:
    get_output().suggest(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
