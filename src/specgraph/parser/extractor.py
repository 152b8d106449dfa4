"""Build the analysis domain model from a decoded OpenAPI document.

This module walks the ``paths`` object of an OpenAPI (or Swagger-shaped)
document and produces an :class:`~specgraph.models.ApiSpecDomainModel`
holding one :class:`~specgraph.models.ApiEndpoint` per path + HTTP method
combination and one :class:`~specgraph.models.ApiSchema` per entry under
``components.schemas``.

The single public entry point is :func:`parse_spec`.  Internally it delegates
to private helpers that each handle one section of the document:

* ``_extract_endpoints`` -- the ``paths`` object.
* ``_extract_responses`` -- status codes and response schema references of
  one operation.
* ``_extract_schemas`` -- the ``components.schemas`` map, with complexity
  scores.

The document is treated as an untyped tree: every access checks the type it
expects and ignores values of any other shape.  Only the absence of a
``paths`` mapping, or of any recognised operation under it, is an error.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date
from typing import Any, Optional

from specgraph.exceptions import InvalidStructureError, NoEndpointsFoundError
from specgraph.models import (
    ApiEndpoint,
    ApiSchema,
    ApiSchemaRef,
    ApiSpecDomainModel,
    HTTPMethod,
)
from specgraph.parser.complexity import estimate_complexity
from specgraph.parser.loader import decode
from specgraph.parser.resolver import collect_content_refs

logger = logging.getLogger(__name__)


def parse_spec(raw: Any) -> ApiSpecDomainModel:
    """Parse an OpenAPI document into an :class:`~specgraph.models.ApiSpecDomainModel`.

    Args:
        raw: Document text (JSON or YAML) or an already-decoded document.
            The input is never modified.

    Returns:
        The domain model: title and version from ``info``, every endpoint,
        and every declared schema.

    Raises:
        EmptyInputError: If *raw* is blank text.
        UnparseableContentError: If *raw* is neither JSON nor YAML.
        InvalidStructureError: If the document is not a mapping or has no
            ``paths`` mapping.
        NoEndpointsFoundError: If no path declares a recognised operation.

    Example::

        model = parse_spec(Path("petstore.yaml").read_text())
        for endpoint in model.endpoints:
            print(endpoint.id, [ref.name for ref in endpoint.response_schemas])
    """
    document = decode(raw)
    paths = document.get("paths") if isinstance(document, Mapping) else None
    if not isinstance(paths, Mapping):
        raise InvalidStructureError(
            "Specification is not a valid OpenAPI/Swagger structure: "
            "missing or malformed 'paths'."
        )

    endpoints = _extract_endpoints(paths)
    if not endpoints:
        raise NoEndpointsFoundError("No endpoints found in the specification.")

    schemas = _extract_schemas(document.get("components"))
    title, version = _extract_info(document.get("info"))

    logger.debug(
        "Parsed %d endpoints and %d schemas from %r",
        len(endpoints),
        len(schemas),
        title,
    )
    return ApiSpecDomainModel(
        title=title,
        version=version,
        endpoints=endpoints,
        schemas=schemas,
    )


def _extract_info(info: Any) -> tuple[Optional[str], Optional[str]]:
    """Read ``info.title`` and ``info.version``.

    YAML turns ``version: 1.0`` into a float and ``version: 2024-01-01``
    into a date, so such scalars are stringified (dates in ISO format).
    """
    if not isinstance(info, Mapping):
        return None, None
    return _scalar_text(info.get("title")), _scalar_text(info.get("version"))


def _scalar_text(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    if isinstance(value, date):
        return value.isoformat()
    return None


def _optional_text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _extract_endpoints(paths: Mapping[str, Any]) -> list[ApiEndpoint]:
    """Extract one endpoint per path + recognised HTTP method.

    Methods are visited in :class:`~specgraph.models.HTTPMethod` order for
    each path, and paths in document order.
    """
    endpoints: list[ApiEndpoint] = []

    for path, path_item in paths.items():
        if not isinstance(path_item, Mapping):
            continue
        path = str(path)

        for method in HTTPMethod:
            operation = path_item.get(method.value)
            if not isinstance(operation, Mapping):
                continue

            response_schemas, status_codes = _extract_responses(
                operation.get("responses")
            )

            endpoints.append(
                ApiEndpoint(
                    id=f"{method.value.upper()} {path}",
                    method=method,
                    path=path,
                    summary=_optional_text(operation.get("summary")),
                    description=_optional_text(operation.get("description")),
                    tags=_extract_tags(operation.get("tags")),
                    request_schemas=collect_content_refs(operation.get("requestBody")),
                    response_schemas=response_schemas,
                    status_codes=status_codes,
                )
            )

    return endpoints


def _extract_tags(tags: Any) -> list[str]:
    """Normalise an operation's ``tags`` into unique strings.

    A single tag given as a bare value is accepted; empty entries are
    dropped and duplicates keep their first position.
    """
    if tags is None:
        return []
    if not isinstance(tags, list):
        tags = [tags]

    unique: dict[str, None] = {}
    for tag in tags:
        if tag and not isinstance(tag, (dict, list)):
            unique[str(tag)] = None
    return list(unique)


def _extract_responses(responses: Any) -> tuple[list[ApiSchemaRef], list[str]]:
    """Collect response schema references and status codes.

    Every key of ``responses`` contributes a status code, in document order.
    Schema references from all responses with a ``content`` map are merged
    into one de-duplicated list.

    Args:
        responses: The operation's ``responses`` value.

    Returns:
        A ``(response_schemas, status_codes)`` tuple.
    """
    if not isinstance(responses, Mapping):
        return [], []

    names: dict[str, None] = {}
    status_codes: list[str] = []

    for status_code, response in responses.items():
        status_codes.append(str(status_code))
        if not isinstance(response, Mapping):
            continue
        content = response.get("content")
        if content:
            for ref in collect_content_refs(content):
                names[ref.name] = None

    return [ApiSchemaRef(name=name) for name in names], status_codes


def _extract_schemas(components: Any) -> list[ApiSchema]:
    """Convert ``components.schemas`` entries into scored schemas."""
    if not isinstance(components, Mapping):
        return []
    schemas = components.get("schemas")
    if not isinstance(schemas, Mapping):
        return []

    return [
        ApiSchema(
            name=str(name),
            raw=schema,
            complexity_score=estimate_complexity(schema),
        )
        for name, schema in schemas.items()
    ]
