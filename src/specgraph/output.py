"""Terminal output for the specgraph CLI.

Analysis results (tables and JSON documents) are written to **stdout** so
they can be piped into other tools; everything else (progress notes,
warnings, errors, next-step hints, log records) goes to **stderr**.

The format is one of :class:`OutputFormat`.  ``AUTO`` becomes ``RICH`` on an
interactive terminal with colour enabled and ``PLAIN`` otherwise.  Colour is
turned off by ``--no-color``, by a ``NO_COLOR`` environment variable (any
value), or by ``TERM=dumb``.

Commands do not pass an :class:`OutputManager` around.  The root callback
installs one with :func:`set_output` and the module-level helpers
(:func:`info`, :func:`error`, ...) look it up through :func:`get_output`.
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
    """How results are rendered on stdout."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Routes results to stdout and diagnostics to stderr.

    Args:
        format: Requested format; ``AUTO`` is resolved once, here.
        no_color: Disable colour and Rich markup on both streams.
        quiet: Drop ``info``, ``success`` and ``suggest`` messages.
            Warnings, errors and results are always shown.
        output_file: Write results to this path instead of stdout.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        output_file: Optional[str] = None,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._output_file = output_file

        if format == OutputFormat.AUTO:
            rich_ok = _is_tty() and not self._no_color
            format = OutputFormat.RICH if rich_ok else OutputFormat.PLAIN
        self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=format == OutputFormat.RICH,
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        """The resolved format (never ``AUTO``)."""
        return self._format

    @property
    def stderr_console(self) -> Console:
        return self._stderr

    # --- results (stdout) ---

    def format_response(self, data: Any) -> None:
        """Render a result document.

        JSON mode prints indented JSON (a string that already holds JSON is
        re-indented, any other string is printed as is).  Plain mode prints
        ``key<TAB>value`` lines for a dict and one line per list item.  Rich
        mode syntax-highlights dicts and lists.  With an output file the
        document is written there as JSON, replacing the file.
        """
        if self._output_file:
            with open(self._output_file, "w", encoding="utf-8") as f:
                f.write(_with_newline(_as_text(data)))
        elif self._format == OutputFormat.JSON:
            if isinstance(data, str):
                try:
                    data = json.loads(data)
                except ValueError:
                    self.print_data(data)
                    return
            self.print_data(_as_text(data))
        elif self._format == OutputFormat.PLAIN:
            for line in _plain_lines(data):
                self.print_data(line)
        elif isinstance(data, (dict, list)):
            self._stdout.print(Syntax(_as_text(data), "json", theme="monokai", word_wrap=True))
        else:
            self._stdout.print(str(data))

    def print_data(self, text: str) -> None:
        """Print *text* verbatim, or append it to the output file."""
        if not self._output_file:
            print(text, file=sys.stdout, flush=True)
            return
        with open(self._output_file, "a", encoding="utf-8") as f:
            f.write(_with_newline(text))

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Print rows under *headers*.

        JSON mode emits a list of ``{header: cell}`` objects, plain mode
        tab-separated lines with a header line first, and Rich mode a
        :class:`~rich.table.Table` captioned with *title*.
        """
        if self._format == OutputFormat.JSON:
            records = [dict(zip(headers, row)) for row in rows]
            self.print_data(json.dumps(records, indent=2, ensure_ascii=False))
            return
        if self._format == OutputFormat.PLAIN:
            for row in [headers, *rows]:
                self.print_data("\t".join(row))
            return

        table = Table(title=title, header_style="bold cyan")
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*row)
        if not self._output_file:
            self._stdout.print(table)
            return
        with open(self._output_file, "a", encoding="utf-8") as f:
            Console(file=f, no_color=True).print(table)

    # --- diagnostics (stderr) ---

    def info(self, message: str) -> None:
        self._diagnostic(message, quiet_ok=True)

    def success(self, message: str) -> None:
        self._diagnostic(message, markup="green", quiet_ok=True)

    def suggest(self, message: str) -> None:
        self._diagnostic(f"→ {message}", markup="dim", quiet_ok=True)

    def warning(self, message: str) -> None:
        self._diagnostic(message, label="Warning:", markup="yellow")

    def error(self, message: str) -> None:
        self._diagnostic(message, label="Error:", markup="bold red")

    def _diagnostic(
        self,
        message: str,
        label: str = "",
        markup: str = "",
        quiet_ok: bool = False,
    ) -> None:
        if quiet_ok and self._quiet:
            return
        if self._no_color:
            print(f"{label} {message}" if label else message, file=sys.stderr, flush=True)
        elif label:
            self._stderr.print(f"[{markup}]{label}[/{markup}] {message}")
        elif markup:
            self._stderr.print(f"[{markup}]{message}[/{markup}]")
        else:
            self._stderr.print(message)


def _as_text(data: Any) -> str:
    if not isinstance(data, str):
        return json.dumps(data, indent=2, ensure_ascii=False, default=str)
    return data


def _with_newline(text: str) -> str:
    return text if text.endswith("\n") else text + "\n"


def _plain_lines(data: Any) -> list[str]:
    if isinstance(data, dict):
        return [f"{key}\t{value}" for key, value in data.items()]
    if isinstance(data, list):
        return [
            "\t".join(str(v) for v in item.values()) if isinstance(item, dict) else str(item)
            for item in data
        ]
    return [str(data)]


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set (to anything) or ``TERM`` is ``dumb``."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


# --- process-wide instance ---

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one if needed."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager (tests call this between CLI runs)."""
    global _output
    _output = None


def format_response(data: Any) -> None:
    get_output().format_response(data)


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
