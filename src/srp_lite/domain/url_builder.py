"""
URL builder for results pages.

Produces the SEO path and query string for a filter state:
/{condition}/{make}/{model}/?[query_params]

1. Condition always comes first (new-vehicles, used-vehicles, used-vehicles/certified)
2. Make comes second (first make alphabetically)
3. Model comes third (only with a make, first model alphabetically)
4. Everything else becomes a query parameter
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlencode

from srp_lite.domain.filters import (
    DEFAULT_FILTER_SCHEMA,
    SEARCH_KEY,
    SLUG_FILTERS,
    FilterKind,
    FilterSchema,
    FilterState,
    Primitive,
    RangeValue,
    SortOrder,
)
from srp_lite.domain.slug import normalize_for_url

ALL_CONDITIONS: tuple[str, ...] = ("new", "used", "certified")

# Query value ordering per filter; unlisted filters sort ascending
QUERY_PARAM_SORT_ORDER: dict[str, SortOrder] = {"year": SortOrder.DESC}


@dataclass(frozen=True, slots=True)
class BuiltUrl:
    path: str
    query_params: dict[str, str]
    full_url: str
    normalized_filters: FilterState


def normalize_filter_state(filters: FilterState) -> FilterState:
    """
    Apply the condition business rules before building a URL.

    - used always includes certified
    - no condition means every condition
    """
    conditions = filters.values_of("condition")
    if not conditions:
        return filters.with_value("condition", ALL_CONDITIONS)
    if "used" in conditions and "certified" not in conditions:
        return filters.with_value("condition", (*conditions, "certified"))
    return filters


def build_url(
    filters: FilterState,
    sort_by: str | None = None,
    order: SortOrder | str | None = None,
    schema: FilterSchema = DEFAULT_FILTER_SCHEMA,
) -> BuiltUrl:
    normalized = normalize_filter_state(filters)

    segments, query_conditions = _condition_segments(normalized.values_of("condition"))
    makes = sorted(str(make) for make in normalized.values_of("make"))
    models = sorted(str(model) for model in normalized.values_of("model"))

    if makes:
        segments.append(normalize_for_url(makes[0]))
        if models:
            segments.append(normalize_for_url(models[0]))

    params: dict[str, str] = {}
    if query_conditions:
        params["condition"] = ",".join(query_conditions)
    if len(makes) > 1:
        params["make"] = ",".join(makes[1:])
    if models:
        remaining = models[1:] if makes else models
        if remaining:
            params["model"] = ",".join(remaining)

    for name, value in normalized.items():
        if name in SLUG_FILTERS or name == SEARCH_KEY:
            continue
        kind = schema.kind_of(name)
        if isinstance(value, RangeValue):
            if value.min is not None:
                params[f"{name}_min"] = _format_number(value.min)
            if value.max is not None:
                params[f"{name}_max"] = _format_number(value.max)
        elif kind is FilterKind.SWITCH:
            if isinstance(value, tuple) and True in value:
                params[name] = "true"
        elif isinstance(value, tuple) and value:
            params[name] = ",".join(_sorted_values(name, value))

    if normalized.search:
        params[SEARCH_KEY] = normalized.search
    if sort_by:
        params["sort_by"] = sort_by
    order_value = SortOrder(order) if order else None
    if order_value is SortOrder.DESC:
        params["order"] = order_value.value

    path = "/".join(segments)
    query_string = f"?{urlencode(params)}" if params else ""

    return BuiltUrl(
        path=path,
        query_params=params,
        full_url=f"/{path}/{query_string}",
        normalized_filters=normalized,
    )


def _condition_segments(conditions: tuple[Primitive, ...]) -> tuple[list[str], list[str]]:
    """
    Map selected conditions to path segments plus conditions left for the query.

    - new                      → new-vehicles
    - used (+ certified)       → used-vehicles
    - certified                → used-vehicles/certified
    - new + used (+ certified) → used-vehicles, new in the query
    - new + certified          → used-vehicles/certified, new in the query
    """
    has_new = "new" in conditions
    has_used = "used" in conditions
    has_certified = "certified" in conditions

    if has_used:
        return ["used-vehicles"], (["new"] if has_new else [])
    if has_certified:
        return ["used-vehicles", "certified"], (["new"] if has_new else [])
    if has_new:
        return ["new-vehicles"], []
    return ["used-vehicles"], []


def _sorted_values(name: str, values: tuple[Primitive, ...]) -> list[str]:
    ordered = sorted(str(value) for value in values)
    if QUERY_PARAM_SORT_ORDER.get(name) is SortOrder.DESC:
        ordered.reverse()
    return ordered


def _format_number(value: int | float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
