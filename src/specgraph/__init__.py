"""specgraph -- Analyse OpenAPI/Swagger documents as a dependency graph.

This package turns an OpenAPI document (JSON or YAML) into three derived
artifacts: a normalised domain model of endpoints and schemas, a dependency
graph linking endpoints, schemas, and tags, and summary metrics over that
graph.

Typical usage::

    from specgraph import parse_spec, build_dependency_graph, calculate_metrics

    model = parse_spec(open("openapi.yaml").read())
    graph = build_dependency_graph(model)
    metrics = calculate_metrics(model)

Modules:
    parser: Decoding, ``$ref`` discovery, and domain model extraction.
    graph: Dependency graph construction.
    metrics: Aggregate statistics over the domain model.
    models: Pydantic models shared across the entire package.
    store: On-disk storage of raw spec text.
    config: XDG-aware configuration management.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
    app: Typer application and CLI entry point.
"""

__version__ = "0.1.0"

from specgraph.graph import build_dependency_graph  # noqa: E402
from specgraph.metrics import calculate_metrics  # noqa: E402
from specgraph.parser import decode, parse_spec  # noqa: E402

__all__ = [
    "__version__",
    "build_dependency_graph",
    "calculate_metrics",
    "decode",
    "parse_spec",
]
