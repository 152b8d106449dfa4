"""Spec storage commands -- keep raw documents and analyse them later.

Provides the ``specgraph specs`` sub-command group.  ``add`` parses the
document before saving it so that invalid specs are rejected up front;
``show`` re-parses the stored text on every call, so a stored spec is always
analysed with the current pipeline.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from specgraph.commands.analyze import render_analysis
from specgraph.commands.common import analyze_content, cli_errors, get_config
from specgraph.output import (
    OutputFormat,
    format_response,
    get_output,
    info,
    success,
    suggest,
)
from specgraph.parser import load_source, parse_spec
from specgraph.store import SpecStore


specs_app = typer.Typer(no_args_is_help=True)


def _store(ctx: typer.Context) -> SpecStore:
    config = get_config(ctx)
    return SpecStore(Path(config.store.directory))


@specs_app.command("add")
def specs_add(
    ctx: typer.Context,
    source: str = typer.Argument(..., help="Spec file path, URL, or '-' for stdin."),
    name: Optional[str] = typer.Option(
        None, "--name", "-n", help="Display name (defaults to the API title)."
    ),
) -> None:
    """Validate a spec and store it.

    Example::

        specgraph specs add petstore.yaml --name "Petstore"
    """
    with cli_errors():
        content = load_source(source)
        model = parse_spec(content)
        stored = _store(ctx).save(name or model.title or source, content)

    success(f"Stored '{stored.name}' ({len(model.endpoints)} endpoints)")
    suggest(f"specgraph specs show {stored.id}")
    get_output().print_data(stored.id)


@specs_app.command("list")
def specs_list(ctx: typer.Context) -> None:
    """List stored specs, newest first."""
    with cli_errors():
        specs = _store(ctx).list_specs()

    if not specs:
        info("No stored specs.")
        return

    rows = [
        [spec.id, spec.name, spec.created_at.strftime("%Y-%m-%d %H:%M")]
        for spec in specs
    ]
    get_output().print_table(["ID", "Name", "Created"], rows, title=f"Specs ({len(rows)})")


@specs_app.command("show")
def specs_show(
    ctx: typer.Context,
    spec_id: str = typer.Argument(..., help="Stored spec ID."),
) -> None:
    """Analyse a stored spec.

    In JSON mode the output carries ``id``, ``name``, ``createdAt``,
    ``model``, ``graph``, and ``metrics``.
    """
    with cli_errors():
        stored = _store(ctx).get(spec_id)
        analysis = analyze_content(stored.content)

    output = get_output()
    if output.format == OutputFormat.JSON:
        document = {
            "id": stored.id,
            "name": stored.name,
            "createdAt": stored.created_at.isoformat(),
        }
        document.update(analysis.to_document())
        format_response(document)
        return

    info(f"{stored.name} (stored {stored.created_at:%Y-%m-%d %H:%M})")
    render_analysis(analysis, get_config(ctx))


@specs_app.command("raw")
def specs_raw(
    ctx: typer.Context,
    spec_id: str = typer.Argument(..., help="Stored spec ID."),
) -> None:
    """Print the stored document text exactly as it was saved."""
    with cli_errors():
        stored = _store(ctx).get(spec_id)
    get_output().print_data(stored.content)


@specs_app.command("delete")
def specs_delete(
    ctx: typer.Context,
    spec_id: str = typer.Argument(..., help="Stored spec ID."),
) -> None:
    """Delete a stored spec."""
    with cli_errors():
        _store(ctx).delete(spec_id)
    success(f"Deleted spec {spec_id}")
