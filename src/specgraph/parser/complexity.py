"""Heuristic complexity score for a schema fragment.

The score grows with the number of properties, with array nesting, and with
composition (``allOf``/``oneOf``/``anyOf``).  Deeper levels weigh more
because every object fragment contributes ``1 + depth * 0.5`` on its own.
It is a rough ranking aid, not a formal measure: there is no normalisation
and no upper bound.
"""

from __future__ import annotations

import math
from typing import Any, Optional

_COMPOSITION_KEYWORDS = ("allOf", "oneOf", "anyOf")


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with halves going up (``2.5 -> 3``)."""
    return math.floor(value + 0.5)


def estimate_complexity(
    fragment: Any,
    depth: int = 1,
    _active: Optional[set[int]] = None,
) -> int:
    """Score *fragment* at the given nesting *depth*.

    Scoring rules:

    * A non-mapping fragment scores ``1``.
    * Otherwise start from ``1 + depth * 0.5``.
    * ``properties``: add the property count plus each property's score
      at ``depth + 1``.
    * ``items``: add ``1`` plus the items' score at ``depth + 1``.
    * ``allOf``/``oneOf``/``anyOf`` lists: add each member's score at
      ``depth + 1``.

    The total is rounded half-up at every level.  A fragment that contains
    itself (possible through YAML aliases) scores ``1`` at the point where
    it recurs.

    Args:
        fragment: The schema fragment to score.
        depth: Nesting depth of *fragment*; top-level schemas use ``1``.

    Returns:
        An integer score, always at least ``1``.
    """
    if not isinstance(fragment, dict):
        return 1

    if _active is None:
        _active = set()
    if id(fragment) in _active:
        return 1
    _active.add(id(fragment))

    score = 1 + depth * 0.5

    properties = fragment.get("properties")
    if isinstance(properties, dict):
        score += len(properties)
        score += sum(
            estimate_complexity(prop, depth + 1, _active) for prop in properties.values()
        )

    items = fragment.get("items")
    if isinstance(items, (dict, list)) or items:
        score += 1 + estimate_complexity(items, depth + 1, _active)

    for keyword in _COMPOSITION_KEYWORDS:
        variants = fragment.get(keyword)
        if isinstance(variants, list):
            score += sum(
                estimate_complexity(variant, depth + 1, _active) for variant in variants
            )

    _active.discard(id(fragment))
    return round_half_up(score)
