"""The ``specgraph`` command-line application.

Sub-commands:

* ``analyze``, ``endpoints``, ``schemas``, ``graph``, ``metrics`` -- read a
  spec from a file, URL or stdin and report on it
  (:mod:`specgraph.commands.analyze`).
* ``specs ...`` -- keep raw specs in the local store and analyse them later
  (:mod:`specgraph.commands.specs`).
* ``config ...`` -- inspect and edit the saved defaults
  (:mod:`specgraph.commands.config`).

Global flags are handled once in :func:`main_callback`, which resolves the
effective :class:`~specgraph.models.GlobalConfig` and installs the
:class:`~specgraph.output.OutputManager` every command writes through.
:func:`main` is the console-script entry point.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import typer
from rich.logging import RichHandler

from specgraph import __version__
from specgraph.commands.analyze import (
    analyze_command,
    endpoints_command,
    graph_command,
    metrics_command,
    schemas_command,
)
from specgraph.commands.config import config_app
from specgraph.commands.specs import specs_app
from specgraph.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INVALID_USAGE

EXIT_INTERRUPTED = 130

app = typer.Typer(
    name="specgraph",
    help="Map the endpoints, schemas and schema dependencies of an OpenAPI document.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("analyze")(analyze_command)
app.command("endpoints")(endpoints_command)
app.command("schemas")(schemas_command)
app.command("graph")(graph_command)
app.command("metrics")(metrics_command)
app.add_typer(specs_app, name="specs", help="Store specs locally and analyse them by ID.")
app.add_typer(config_app, name="config", help="Show or change saved defaults.")


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"specgraph {__version__}")
        raise typer.Exit()


def _requested_format(json_output: bool, plain_output: bool) -> Optional[str]:
    """Format forced on the command line, if any (``--json`` wins over ``--plain``)."""
    if json_output:
        return "json"
    if plain_output:
        return "plain"
    return None


def _configure_logging(output: Any) -> None:
    """Route ``specgraph.*`` log records to stderr at DEBUG level."""
    logger = logging.getLogger("specgraph")
    for existing in [h for h in logger.handlers if isinstance(h, RichHandler)]:
        logger.removeHandler(existing)
    handler = RichHandler(console=output.stderr_console, show_path=False)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", callback=_print_version, is_eager=True,
        help="Print the specgraph version and exit.",
    ),
    json_output: bool = typer.Option(False, "--json", help="Print results as JSON."),
    plain_output: bool = typer.Option(
        False, "--plain", help="Print tables as tab-separated text."
    ),
    no_color: bool = typer.Option(False, "--no-color", help="Turn off colour."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Only print results, warnings and errors."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show debug logs from the analysis pipeline."
    ),
    output_file: Optional[str] = typer.Option(
        None, "-o", "--output", help="Write results to this file instead of stdout."
    ),
    store_dir: Optional[str] = typer.Option(
        None, "--store-dir", help="Directory holding stored specs."
    ),
) -> None:
    """Resolve configuration and set up output before any sub-command runs.

    The resolved :class:`~specgraph.models.GlobalConfig` is kept in
    ``ctx.obj["config"]``; its ``store.directory`` is always filled in.

    Args:
        ctx: Typer invocation context.
        version: Handled eagerly by ``_print_version``.
        json_output: Force JSON output.
        plain_output: Force tab-separated output.
        no_color: Disable colour on both streams.
        quiet: Hide info, success and hint messages.
        verbose: Attach a Rich log handler to the ``specgraph`` logger.
        output_file: Send results to a file.
        store_dir: Highest-precedence override of the store directory.
    """
    from specgraph.config import resolve_config
    from specgraph.exceptions import SpecgraphError
    from specgraph.output import OutputFormat, OutputManager, error, set_output

    try:
        config = resolve_config(
            cli_format=_requested_format(json_output, plain_output),
            cli_store_dir=store_dir,
        )
    except SpecgraphError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    try:
        fmt = OutputFormat(config.output.format)
    except ValueError:
        error(f"Unknown output format: {config.output.format}")
        raise typer.Exit(code=EXIT_INVALID_USAGE) from None

    output = OutputManager(format=fmt, no_color=no_color, quiet=quiet, output_file=output_file)
    set_output(output)
    if verbose:
        _configure_logging(output)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


def _setup_signal_handlers() -> None:
    def _on_sigint(signum: int, frame: Any) -> None:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)

    signal.signal(signal.SIGINT, _on_sigint)


def _write_crash_log() -> Path:
    """Save the traceback being handled to ``<data_dir>/logs/crash-<timestamp>.log``."""
    from specgraph.config import get_data_dir

    log_path = get_data_dir() / "logs" / f"crash-{datetime.now():%Y%m%d-%H%M%S}.log"
    log_path.parent.mkdir(parents=True, exist_ok=True)
    log_path.write_text(traceback.format_exc(), encoding="utf-8")
    return log_path


def main() -> None:
    """Console-script entry point.

    A :class:`~specgraph.exceptions.SpecgraphError` that escapes a command
    ends the process with that error's exit code.  Anything else is saved to
    a crash log and ends it with :data:`~specgraph.exit_codes.EXIT_GENERIC_FAILURE`.
    """
    from specgraph.exceptions import SpecgraphError
    from specgraph.output import error

    _setup_signal_handlers()
    try:
        app()
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)
    except SpecgraphError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception:
        error(f"Unexpected error. Debug log: {_write_crash_log()}")
        sys.exit(EXIT_GENERIC_FAILURE)
