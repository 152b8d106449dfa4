"""Discover the named schemas a schema fragment depends on.

OpenAPI documents point at shared schemas with ``$ref`` strings such as
``"#/components/schemas/Pet"``.  Rather than inlining the targets, this
module walks a fragment and collects the *names* of every schema it refers
to, descending through composition keywords (``allOf``, ``oneOf``,
``anyOf``), array ``items``, object ``properties`` and object-valued
``additionalProperties``.

A ``$ref`` is a leaf: its target is never followed, so a well-formed
document cannot make the walk loop.  YAML aliases can still produce a
fragment that contains itself; such a node is visited only once.

Public functions:

* :func:`extract_ref_name` -- name of the schema a ``$ref`` string points at.
* :func:`collect_schema_refs` -- recursive name collection for one fragment.
* :func:`collect_content_refs` -- collection over an OpenAPI ``content`` map.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from specgraph.models import ApiSchemaRef

_COMPONENT_REF = re.compile(r"#/components/schemas/([^/\s]+)")

_COMPOSITION_KEYWORDS = ("allOf", "oneOf", "anyOf")


def extract_ref_name(ref: Any) -> Optional[str]:
    """Return the schema name a ``$ref`` string points at.

    ``#/components/schemas/<name>`` is matched literally; any other pointer
    falls back to its last ``/``-separated segment, so
    ``#/definitions/Pet`` yields ``"Pet"``.

    Args:
        ref: The ``$ref`` value.  Anything other than a non-empty string
            yields ``None``.

    Returns:
        The schema name, or ``None`` when nothing usable can be extracted.
    """
    if not isinstance(ref, str) or not ref:
        return None

    match = _COMPONENT_REF.search(ref)
    if match:
        return match.group(1)

    return ref.rsplit("/", 1)[-1] or None


def collect_schema_refs(
    fragment: Any,
    refs: dict[str, None],
    _visited: Optional[set[int]] = None,
) -> None:
    """Add every schema name referenced by *fragment* to *refs*.

    *refs* is used as an insertion-ordered set (values are ``None``) so that
    names come out in the order they were first found.

    Args:
        fragment: A schema object.  Non-mapping values are ignored.
        refs: Accumulator that receives the discovered names.
    """
    if not isinstance(fragment, dict):
        return

    if _visited is None:
        _visited = set()
    if id(fragment) in _visited:
        return
    _visited.add(id(fragment))

    name = extract_ref_name(fragment.get("$ref"))
    if name:
        refs[name] = None

    for keyword in _COMPOSITION_KEYWORDS:
        variants = fragment.get(keyword)
        if isinstance(variants, list):
            for variant in variants:
                collect_schema_refs(variant, refs, _visited)

    if "items" in fragment:
        collect_schema_refs(fragment["items"], refs, _visited)

    properties = fragment.get("properties")
    if isinstance(properties, dict):
        for prop in properties.values():
            collect_schema_refs(prop, refs, _visited)

    additional = fragment.get("additionalProperties")
    if isinstance(additional, dict):
        collect_schema_refs(additional, refs, _visited)


def collect_content_refs(content: Any) -> list[ApiSchemaRef]:
    """Collect schema references from a ``content`` map.

    Accepts either a request body / response object that wraps its media
    types in a ``content`` key, or the media-type map itself.  Each media
    type's ``schema`` is walked with :func:`collect_schema_refs`.

    Args:
        content: A ``requestBody`` object, a response ``content`` map, or
            anything else (which yields no references).

    Returns:
        One :class:`~specgraph.models.ApiSchemaRef` per distinct name, in
        first-seen order.
    """
    if not isinstance(content, dict):
        return []

    media_types = content["content"] if "content" in content else content
    if not isinstance(media_types, dict):
        return []

    refs: dict[str, None] = {}
    for media in media_types.values():
        if isinstance(media, dict):
            collect_schema_refs(media.get("schema"), refs)

    return [ApiSchemaRef(name=name) for name in refs]
