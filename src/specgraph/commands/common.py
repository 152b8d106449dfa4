"""Helpers shared by the CLI sub-commands.

The analysis pipeline raises :class:`~specgraph.exceptions.SpecInputError`
for documents it cannot accept; :func:`cli_errors` turns those into an
"invalid specification" message and the matching exit code, and every other
:class:`~specgraph.exceptions.SpecgraphError` into its plain message.
Anything else is left to the crash handler in :func:`specgraph.app.main`.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, NamedTuple

import typer

from specgraph.exceptions import SpecgraphError, SpecInputError
from specgraph.graph import build_dependency_graph
from specgraph.metrics import calculate_metrics
from specgraph.models import ApiMetrics, ApiSpecDomainModel, DependencyGraph, GlobalConfig
from specgraph.output import error
from specgraph.parser import parse_spec


class Analysis(NamedTuple):
    model: ApiSpecDomainModel
    graph: DependencyGraph
    metrics: ApiMetrics

    def to_document(self) -> dict[str, Any]:
        """JSON-ready ``{model, graph, metrics}`` document with camelCase keys."""
        return {
            "model": self.model.model_dump(mode="json", by_alias=True),
            "graph": self.graph.model_dump(mode="json", by_alias=True),
            "metrics": self.metrics.model_dump(mode="json", by_alias=True),
        }


def analyze_content(content: str) -> Analysis:
    """Run parse, graph and metrics over raw document text."""
    model = parse_spec(content)
    return Analysis(model, build_dependency_graph(model), calculate_metrics(model))


@contextmanager
def cli_errors() -> Iterator[None]:
    """Report specgraph errors on stderr and exit with their code."""
    try:
        yield
    except SpecInputError as exc:
        error(f"Invalid specification: {exc}")
        raise typer.Exit(code=exc.exit_code) from None
    except SpecgraphError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


def get_config(ctx: typer.Context) -> GlobalConfig:
    """Return the configuration resolved by the root callback."""
    if ctx.obj and "config" in ctx.obj:
        return ctx.obj["config"]

    from specgraph.config import resolve_config

    return resolve_config()
