"""Analysis commands -- examine a spec read from a file, URL, or stdin.

Provides the ``analyze``, ``endpoints``, ``schemas``, ``graph``, and
``metrics`` commands.  Each reads the source with
:func:`~specgraph.parser.load_source`, runs the analysis pipeline, and
presents the result as tables, or as the model's JSON document when
``--json`` is active.
"""

from __future__ import annotations

import typer

from specgraph.commands.common import Analysis, analyze_content, cli_errors, get_config
from specgraph.models import EdgeKind, GlobalConfig
from specgraph.output import OutputFormat, format_response, get_output, info, warning
from specgraph.parser import load_source

SOURCE_ARGUMENT = typer.Argument(..., help="Spec file path, URL, or '-' for stdin.")


def _is_json() -> bool:
    return get_output().format == OutputFormat.JSON


def _names(refs: list) -> str:
    return ", ".join(ref.name for ref in refs) or "-"


def _load(source: str) -> Analysis:
    with cli_errors():
        return analyze_content(load_source(source))


def render_metrics(analysis: Analysis, config: GlobalConfig, include_graph: bool = True) -> None:
    """Print the metrics summary, most-used schemas, and tag distribution tables."""
    output = get_output()
    metrics = analysis.metrics
    heading = analysis.model.title or "API"
    if analysis.model.version:
        heading += f" {analysis.model.version}"

    rows = [
        ["Endpoints", str(metrics.endpoint_count)],
        ["Schemas", str(metrics.schema_count)],
        ["Avg schemas per endpoint", f"{metrics.avg_schemas_per_endpoint:.2f}"],
    ]
    if include_graph:
        graph = analysis.graph
        rows.extend([
            ["Graph nodes", str(len(graph.nodes))],
            ["Graph edges", str(len(graph.edges))],
            ["Shared-schema links", str(len(graph.edges_of_kind(EdgeKind.SHARED_SCHEMA)))],
        ])
    output.print_table(["Metric", "Value"], rows, title=heading)

    top = metrics.most_used_schemas[: config.analysis.top_schemas]
    if top:
        output.print_table(
            ["Schema", "Endpoints"],
            [[usage.schema_, str(usage.usage_count)] for usage in top],
            title="Most used schemas",
        )
    else:
        info("No schema references found.")

    if metrics.tag_distribution:
        output.print_table(
            ["Tag", "Endpoints"],
            [[entry.tag, str(entry.count)] for entry in metrics.tag_distribution],
            title="Tags",
        )


def render_analysis(analysis: Analysis, config: GlobalConfig) -> None:
    """Print a full analysis: the whole document in JSON mode, tables otherwise."""
    if _is_json():
        format_response(analysis.to_document())
        return
    render_metrics(analysis, config)


def analyze_command(ctx: typer.Context, source: str = SOURCE_ARGUMENT) -> None:
    """Parse a spec and summarise its endpoints, schemas, graph, and metrics.

    Example::

        specgraph analyze openapi.yaml
        specgraph --json analyze https://petstore3.swagger.io/api/v3/openapi.json
    """
    render_analysis(_load(source), get_config(ctx))


def endpoints_command(source: str = SOURCE_ARGUMENT) -> None:
    """List every endpoint with its tags, schemas, and status codes."""
    model = _load(source).model
    if _is_json():
        format_response([e.model_dump(mode="json", by_alias=True) for e in model.endpoints])
        return

    rows = [
        [
            endpoint.method.value.upper(),
            endpoint.path,
            ", ".join(endpoint.tags) or "-",
            _names(endpoint.request_schemas),
            _names(endpoint.response_schemas),
            " ".join(endpoint.status_codes) or "-",
        ]
        for endpoint in model.endpoints
    ]
    get_output().print_table(
        ["Method", "Path", "Tags", "Request", "Response", "Status"],
        rows,
        title=f"Endpoints ({len(rows)})",
    )


def schemas_command(source: str = SOURCE_ARGUMENT) -> None:
    """List declared schemas with complexity scores and endpoint usage.

    Schema names that endpoints reference without a matching declaration
    are reported as a warning on stderr.
    """
    analysis = _load(source)
    model = analysis.model
    if _is_json():
        format_response([s.model_dump(mode="json", by_alias=True) for s in model.schemas])
        return

    usage: dict[str, int] = {}
    for endpoint in model.endpoints:
        for name in endpoint.referenced_schema_names():
            usage[name] = usage.get(name, 0) + 1

    declared = {schema.name for schema in model.schemas}
    undeclared = [name for name in usage if name not in declared]
    if undeclared:
        warning(f"Referenced but not declared: {', '.join(undeclared)}")

    if not model.schemas:
        info("No schemas defined in this spec.")
        return

    rows = [
        [schema.name, str(schema.complexity_score), str(usage.get(schema.name, 0))]
        for schema in model.schemas
    ]
    get_output().print_table(
        ["Schema", "Complexity", "Endpoints"], rows, title=f"Schemas ({len(rows)})"
    )


def graph_command(source: str = SOURCE_ARGUMENT) -> None:
    """Print the dependency graph's nodes and edges."""
    graph = _load(source).graph
    if _is_json():
        format_response(graph.model_dump(mode="json", by_alias=True))
        return

    output = get_output()
    output.print_table(
        ["Node", "Kind", "Label"],
        [[node.id, node.kind.value, node.label] for node in graph.nodes],
        title=f"Nodes ({len(graph.nodes)})",
    )
    output.print_table(
        ["Source", "Target", "Kind"],
        [[edge.source, edge.target, edge.kind.value] for edge in graph.edges],
        title=f"Edges ({len(graph.edges)})",
    )


def metrics_command(ctx: typer.Context, source: str = SOURCE_ARGUMENT) -> None:
    """Print summary metrics for a spec."""
    analysis = _load(source)
    if _is_json():
        format_response(analysis.metrics.model_dump(mode="json", by_alias=True))
        return
    render_metrics(analysis, get_config(ctx), include_graph=False)
