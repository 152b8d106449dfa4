"""Canonical Pydantic models shared across all specgraph modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into three groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`OutputConfig`, :class:`AnalysisConfig`, :class:`StoreConfig`,
    and :class:`GlobalConfig`.

**Storage models** -- persisted by :class:`~specgraph.store.SpecStore`:
    :class:`StoredSpec`.

**Analysis models** -- produced by the parser, graph builder, and metrics
calculator:
    :class:`HTTPMethod`, :class:`ApiSchemaRef`, :class:`ApiSchema`,
    :class:`ApiEndpoint`, :class:`ApiSpecDomainModel`, :class:`NodeKind`,
    :class:`EdgeKind`, :class:`GraphNode`, :class:`GraphEdge`,
    :class:`DependencyGraph`, :class:`SchemaUsage`, :class:`TagCount`, and
    :class:`ApiMetrics`.

Analysis models are frozen and serialise with camelCase aliases
(``model_dump(by_alias=True)``) so that JSON consumers see
``complexityScore``, ``statusCodes``, ``avgSchemasPerEndpoint`` and so on.
"""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# --- Config ---


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: Literal["auto", "json", "plain", "rich"] = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class AnalysisConfig(BaseModel):
    """Presentation settings for analysis commands."""

    top_schemas: int = Field(
        default=5, ge=1, le=5, description="Rows shown in the most-used schemas table"
    )


class StoreConfig(BaseModel):
    """Location of the on-disk spec store."""

    directory: Optional[str] = Field(
        default=None, description="Override for <data_dir>/specs"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/specgraph/config.json``.

    Loaded and saved by :func:`~specgraph.config.load_global_config` and
    :func:`~specgraph.config.save_global_config`. Fields here have the
    lowest precedence and can be overridden by environment variables or CLI
    flags. See :func:`~specgraph.config.resolve_config` for the full
    precedence chain.
    """

    output: OutputConfig = Field(default_factory=OutputConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)


# --- Storage ---


class StoredSpec(BaseModel):
    """A raw spec document kept in the :class:`~specgraph.store.SpecStore`.

    The content is opaque text; it is validated by parsing when it is read
    back, never at storage time.
    """

    id: str
    name: str
    content: str
    created_at: datetime


# --- Analysis ---


class _AnalysisModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised under an OpenAPI path item.

    Declaration order is the order in which operations are visited for
    each path.
    """

    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"
    OPTIONS = "options"
    HEAD = "head"


class ApiSchemaRef(_AnalysisModel):
    """Pointer to a named schema (a ``components.schemas`` key)."""

    name: str


class ApiSchema(_AnalysisModel):
    """A schema declared under ``components.schemas``.

    ``raw`` is the untouched schema fragment from the source document.
    """

    name: str
    raw: Any = None
    complexity_score: int = Field(ge=1)


class ApiEndpoint(_AnalysisModel):
    """One operation: a path paired with a declared HTTP method.

    ``id`` is the uppercased method, a single space, and the path
    (``"GET /pets/{id}"``).  ``status_codes`` keeps one entry per declared
    response in document order.
    """

    id: str
    method: HTTPMethod
    path: str
    summary: Optional[str] = None
    description: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    request_schemas: list[ApiSchemaRef] = Field(default_factory=list)
    response_schemas: list[ApiSchemaRef] = Field(default_factory=list)
    status_codes: list[str] = Field(default_factory=list)

    def referenced_schema_names(self) -> list[str]:
        """Unique schema names used by the request or responses, first-seen order."""
        names = [ref.name for ref in self.request_schemas]
        names.extend(ref.name for ref in self.response_schemas)
        return list(dict.fromkeys(names))


class ApiSpecDomainModel(_AnalysisModel):
    """Parsed OpenAPI document: metadata, endpoints, and declared schemas."""

    title: Optional[str] = None
    version: Optional[str] = None
    endpoints: list[ApiEndpoint] = Field(default_factory=list)
    schemas: list[ApiSchema] = Field(default_factory=list)


class NodeKind(str, enum.Enum):
    """Kinds of node in a :class:`DependencyGraph`."""

    ENDPOINT = "endpoint"
    SCHEMA = "schema"
    TAG = "tag"


class EdgeKind(str, enum.Enum):
    """Relationship kinds between graph nodes.

    ``STATUS_CODE_CHAIN`` is reserved; the graph builder does not emit it.
    """

    SCHEMA_USAGE = "schema-usage"
    SHARED_SCHEMA = "shared-schema"
    TAG_GROUP = "tag-group"
    STATUS_CODE_CHAIN = "status-code-chain"


class GraphNode(_AnalysisModel):
    """A graph node.  ``id`` is namespaced by kind (``schema:Pet``)."""

    id: str
    label: str
    kind: NodeKind


class GraphEdge(_AnalysisModel):
    """A directed graph edge between two node ids."""

    id: str
    source: str
    target: str
    kind: EdgeKind


class DependencyGraph(_AnalysisModel):
    """Nodes and edges derived from an :class:`ApiSpecDomainModel`.

    Recomputed from the model on every call to
    :func:`~specgraph.graph.build_dependency_graph`; never updated in place.
    """

    nodes: list[GraphNode] = Field(default_factory=list)
    edges: list[GraphEdge] = Field(default_factory=list)

    def nodes_of_kind(self, kind: NodeKind) -> list[GraphNode]:
        return [node for node in self.nodes if node.kind == kind]

    def edges_of_kind(self, kind: EdgeKind) -> list[GraphEdge]:
        return [edge for edge in self.edges if edge.kind == kind]


class SchemaUsage(_AnalysisModel):
    """Number of endpoints referencing a schema."""

    schema_: str = Field(alias="schema")
    usage_count: int


class TagCount(_AnalysisModel):
    """Number of endpoints carrying a tag."""

    tag: str
    count: int


class ApiMetrics(_AnalysisModel):
    """Summary statistics over an :class:`ApiSpecDomainModel`."""

    endpoint_count: int
    schema_count: int
    avg_schemas_per_endpoint: float
    most_used_schemas: list[SchemaUsage] = Field(default_factory=list)
    tag_distribution: list[TagCount] = Field(default_factory=list)
