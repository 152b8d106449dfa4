"""Build the dependency graph linking schemas, endpoints, and tags.

The graph is derived from an :class:`~specgraph.models.ApiSpecDomainModel`
and holds three kinds of node, each with an id namespaced by its kind so ids
never collide across kinds:

* ``schema:<name>`` -- one per declared schema, plus one per schema name an
  endpoint references without the document declaring it.
* ``endpoint:<METHOD path>`` -- one per endpoint.
* ``tag:<name>`` -- one per distinct tag.

Edges:

* ``schema-usage`` -- schema -> endpoint, for every schema the endpoint's
  request or responses reference.
* ``tag-group`` -- tag -> endpoint, for every tag on the endpoint.
* ``shared-schema`` -- endpoint -> endpoint, one per unordered pair of
  endpoints that use the same schema, and per schema: two endpoints sharing
  two schemas are linked twice.

Edges are keyed by their id (``shared:<schema>:<a>:<b>`` for shared-schema
edges, ``<source>-><target>:<kind>`` for the others) and a key is only ever
inserted once.
"""

from __future__ import annotations

import logging
from typing import Optional

from specgraph.models import (
    ApiSpecDomainModel,
    DependencyGraph,
    EdgeKind,
    GraphEdge,
    GraphNode,
    NodeKind,
)

logger = logging.getLogger(__name__)


def schema_node_id(name: str) -> str:
    return f"schema:{name}"


def endpoint_node_id(endpoint_id: str) -> str:
    return f"endpoint:{endpoint_id}"


def tag_node_id(tag: str) -> str:
    return f"tag:{tag}"


class _EdgeSet:
    """Insertion-ordered edge list that drops repeated keys."""

    def __init__(self) -> None:
        self.edges: list[GraphEdge] = []
        self._keys: set[str] = set()

    def add(
        self,
        source: str,
        target: str,
        kind: EdgeKind,
        forced_id: Optional[str] = None,
    ) -> None:
        key = forced_id if forced_id is not None else f"{source}->{target}:{kind.value}"
        if key in self._keys:
            return
        self._keys.add(key)
        self.edges.append(GraphEdge(id=key, source=source, target=target, kind=kind))


def build_dependency_graph(model: ApiSpecDomainModel) -> DependencyGraph:
    """Build a :class:`~specgraph.models.DependencyGraph` from *model*.

    The function is pure: the same model always yields the same nodes and
    edges, in the same order.

    Args:
        model: The parsed domain model.

    Returns:
        The graph, with nodes de-duplicated by id (first occurrence wins).
    """
    nodes: list[GraphNode] = []
    edges = _EdgeSet()
    # schema name -> endpoint ids using it (dict as an ordered set)
    schema_users: dict[str, dict[str, None]] = {}

    for schema in model.schemas:
        nodes.append(
            GraphNode(id=schema_node_id(schema.name), label=schema.name, kind=NodeKind.SCHEMA)
        )

    referenced: list[str] = []
    for endpoint in model.endpoints:
        endpoint_node = endpoint_node_id(endpoint.id)
        nodes.append(GraphNode(id=endpoint_node, label=endpoint.id, kind=NodeKind.ENDPOINT))

        names = [ref.name for ref in endpoint.request_schemas]
        names.extend(ref.name for ref in endpoint.response_schemas)
        for name in names:
            schema_users.setdefault(name, {})[endpoint.id] = None
            referenced.append(name)
            edges.add(schema_node_id(name), endpoint_node, EdgeKind.SCHEMA_USAGE)

        for tag in endpoint.tags:
            edges.add(tag_node_id(tag), endpoint_node, EdgeKind.TAG_GROUP)

    # Referenced but undeclared schemas still get a node.
    for name in referenced:
        nodes.append(GraphNode(id=schema_node_id(name), label=name, kind=NodeKind.SCHEMA))

    for endpoint in model.endpoints:
        for tag in endpoint.tags:
            nodes.append(GraphNode(id=tag_node_id(tag), label=tag, kind=NodeKind.TAG))

    for name, users in schema_users.items():
        if len(users) < 2:
            continue
        endpoint_ids = list(users)
        for i, first in enumerate(endpoint_ids):
            for second in endpoint_ids[i + 1:]:
                edges.add(
                    endpoint_node_id(first),
                    endpoint_node_id(second),
                    EdgeKind.SHARED_SCHEMA,
                    forced_id=f"shared:{name}:{first}:{second}",
                )

    graph = DependencyGraph(nodes=_dedupe_nodes(nodes), edges=edges.edges)
    logger.debug("Built graph with %d nodes and %d edges", len(graph.nodes), len(graph.edges))
    return graph


def _dedupe_nodes(nodes: list[GraphNode]) -> list[GraphNode]:
    """Remove duplicate nodes while preserving order."""
    seen: set[str] = set()
    result: list[GraphNode] = []
    for node in nodes:
        if node.id in seen:
            continue
        seen.add(node.id)
        result.append(node)
    return result
