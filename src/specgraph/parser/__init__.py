"""OpenAPI spec parser -- decode, discover ``$ref`` names, and build the domain model.

This sub-package is responsible for the first half of the specgraph pipeline:
turning raw OpenAPI text (JSON or YAML) into an
:class:`~specgraph.models.ApiSpecDomainModel` that the graph builder and the
metrics calculator consume.

Typical usage::

    from specgraph.parser import load_source, parse_spec

    raw = load_source("https://petstore3.swagger.io/api/v3/openapi.json")
    model = parse_spec(raw)

Sub-modules:

* :mod:`~specgraph.parser.loader` -- I/O layer (URL, file, stdin) plus
  JSON/YAML decoding.
* :mod:`~specgraph.parser.resolver` -- Recursive discovery of the schema
  names a fragment references.
* :mod:`~specgraph.parser.complexity` -- Heuristic schema complexity score.
* :mod:`~specgraph.parser.extractor` -- Walks the decoded document and
  produces the domain model.
"""

from specgraph.parser.extractor import parse_spec
from specgraph.parser.loader import decode, load_source

__all__ = ["decode", "load_source", "parse_spec"]
