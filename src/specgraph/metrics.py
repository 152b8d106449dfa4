"""Summary metrics over a parsed API.

:func:`calculate_metrics` counts endpoints and schemas, measures how many
distinct schemas an endpoint uses on average, ranks the most widely used
schemas, and counts endpoints per tag.  A schema counts once per endpoint
no matter how many times that endpoint references it.
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal

from specgraph.models import ApiMetrics, ApiSpecDomainModel, SchemaUsage, TagCount

logger = logging.getLogger(__name__)

MOST_USED_LIMIT = 5


def _round2(value: float) -> float:
    # Half-up on the exact binary value: 0.125 -> 0.13.
    return float(Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def calculate_metrics(model: ApiSpecDomainModel) -> ApiMetrics:
    """Compute :class:`~specgraph.models.ApiMetrics` for *model*.

    Args:
        model: The parsed domain model.

    Returns:
        The metrics.  ``most_used_schemas`` holds at most five entries,
        highest usage first; ties keep the order in which schemas were first
        referenced.  ``tag_distribution`` follows first-seen tag order.
    """
    endpoint_count = len(model.endpoints)
    schema_usage: dict[str, int] = {}
    tag_counts: dict[str, int] = {}
    total_schemas_used = 0

    for endpoint in model.endpoints:
        names = endpoint.referenced_schema_names()
        total_schemas_used += len(names)
        for name in names:
            schema_usage[name] = schema_usage.get(name, 0) + 1
        for tag in endpoint.tags:
            tag_counts[tag] = tag_counts.get(tag, 0) + 1

    ranked = sorted(schema_usage.items(), key=lambda item: item[1], reverse=True)
    avg = _round2(total_schemas_used / endpoint_count) if endpoint_count else 0.0

    metrics = ApiMetrics(
        endpoint_count=endpoint_count,
        schema_count=len(model.schemas),
        avg_schemas_per_endpoint=avg,
        most_used_schemas=[
            SchemaUsage(schema_=name, usage_count=count)
            for name, count in ranked[:MOST_USED_LIMIT]
        ],
        tag_distribution=[TagCount(tag=tag, count=count) for tag, count in tag_counts.items()],
    )
    logger.debug(
        "Metrics: %d endpoints, %d schemas, %.2f schemas per endpoint",
        metrics.endpoint_count,
        metrics.schema_count,
        metrics.avg_schemas_per_endpoint,
    )
    return metrics
