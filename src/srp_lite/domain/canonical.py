"""Canonical cache keys for filter state.

Two filter states that select the same things must produce the same key,
whatever order their names or values were added in.
"""

from __future__ import annotations

import dataclasses
import json
from collections.abc import Mapping, Set
from enum import Enum
from typing import Any

from srp_lite.domain.filters import FilterState, RangeValue


def canonicalize(
    filters: Mapping[str, Any] | None,
    sort_by: str | None = None,
    order: str | None = None,
    search: str | None = None,
    page: int | None = None,
) -> str:
    """
    Build the cache key for a filter state plus its sort/search/page parameters.

    Mapping keys are sorted at every nesting level and arrays of primitive
    values are sorted, so key and selection order never matter. Missing or
    empty auxiliary parameters serialise as null.

    Never raises: values that JSON cannot encode are stringified.
    """
    key_object = {
        "filters": normalize(filters or {}),
        "sortBy": normalize(sort_by) if sort_by else None,
        "order": normalize(order) if order else None,
        "search": search or None,
        "page": page,
    }
    return json.dumps(key_object, sort_keys=True, separators=(",", ":"), default=str)


def normalize(value: Any) -> Any:
    """Recursively convert `value` into sorted, JSON-friendly structures."""
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, Enum):
        return normalize(value.value)
    if isinstance(value, RangeValue):
        return value.to_dict()
    if isinstance(value, FilterState):
        return normalize(value.to_dict())
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return normalize(dataclasses.asdict(value))
    if isinstance(value, Mapping):
        return {str(key): normalize(value[key]) for key in sorted(value, key=str)}
    if isinstance(value, (list, tuple, Set)):
        items = [normalize(item) for item in value]
        if all(_is_primitive(item) for item in items):
            items.sort(key=_primitive_sort_key)
        return items
    return str(value)


def _is_primitive(value: Any) -> bool:
    return value is None or isinstance(value, (bool, int, float, str))


def _primitive_sort_key(value: Any) -> tuple[int, Any]:
    # Type rank first so mixed lists stay comparable
    if value is None:
        return (0, 0)
    if isinstance(value, bool):
        return (1, int(value))
    if isinstance(value, (int, float)):
        return (2, value)
    return (3, value)
