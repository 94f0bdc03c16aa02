from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Union

from srp_lite.domain.filters import (
    DEFAULT_FILTER_SCHEMA,
    RESERVED_QUERY_KEYS,
    SEARCH_KEY,
    SLUG_FILTERS,
    FilterKind,
    FilterSchema,
    FilterState,
    FilterValue,
    Primitive,
    RangeValue,
    SortOrder,
    unique,
)
from srp_lite.domain.slug import DEFAULT_SLUG_GRAMMAR, SlugGrammar, split_path

logger = logging.getLogger(__name__)

QueryValue = Union[str, Sequence[str]]
QueryParams = Mapping[str, QueryValue]


@dataclass(frozen=True, slots=True)
class Sorting:
    sort_by: str | None = None
    order: SortOrder | None = None
    page: int | None = None


@dataclass(frozen=True, slots=True)
class ResolvedPage:
    filters: FilterState
    is_valid_path: bool


@dataclass(frozen=True, slots=True)
class FilterStateResolver:
    """
    Builds the single filter state shown on a results page.

    The route path carries the structural filters (condition/make/model) and
    the query string carries refinements. Path values are canonical and come
    first; query values for the same dimensions are added after them. Every
    other filter comes from the query string only.

    Malformed input never raises: unparsable numbers are dropped and unknown
    names are treated as plain value sets.
    """

    schema: FilterSchema = field(default_factory=lambda: DEFAULT_FILTER_SCHEMA)
    grammar: SlugGrammar = field(default_factory=lambda: DEFAULT_SLUG_GRAMMAR)

    def resolve(self, path_segments: Sequence[str] | None, query_params: QueryParams | None) -> FilterState:
        slug_filters = self.grammar.parse(path_segments).filters
        query_filters = self.parse_query(query_params or {})
        return merge_filters(slug_filters, query_filters)

    def resolve_path(self, path: str, query_params: QueryParams | None) -> FilterState:
        return self.resolve_page(path, query_params).filters

    def resolve_page(self, path: str, query_params: QueryParams | None) -> ResolvedPage:
        """Like resolve_path, also reporting whether the path follows the slug grammar."""
        parsed = self.grammar.parse(split_path(path))
        filters = merge_filters(parsed.filters, self.parse_query(query_params or {}))
        return ResolvedPage(filters=filters, is_valid_path=parsed.is_valid)

    def parse_query(self, query_params: QueryParams) -> FilterState:
        """Turn flat query parameters into filter state (no slug values)."""
        sets: dict[str, list[Primitive]] = {}
        ranges: dict[str, dict[str, int | float]] = {}
        values: dict[str, FilterValue] = {}

        for key, raw in query_params.items():
            if key in RESERVED_QUERY_KEYS:
                continue
            items = _as_list(raw)
            if not items:
                continue

            range_name = self.schema.range_name(key)
            if range_name is not None:
                bound = "min" if key.endswith("_min") else "max"
                number = parse_number(items[-1])
                if number is None:
                    logger.debug(
                        "Dropping malformed range bound",
                        extra={"param": key, "value": items[-1]},
                    )
                    continue
                ranges.setdefault(range_name, {})[bound] = number
                values.setdefault(range_name, RangeValue())
                continue

            kind = self.schema.kind_of(key)
            if kind is FilterKind.SEARCH:
                values[key] = items[-1]
            elif kind is FilterKind.SWITCH:
                values[key] = (items[-1].strip().lower() == "true",)
            elif kind is FilterKind.NUMBER:
                # A bare range name without _min/_max carries no bounds
                logger.debug("Ignoring range filter without bounds", extra={"param": key})
            else:
                parts = [part.strip() for item in items for part in item.split(",")]
                sets.setdefault(key, []).extend(part for part in parts if part)
                values.setdefault(key, ())

        result: dict[str, FilterValue] = {}
        for name, value in values.items():
            if name in sets:
                if sets[name]:
                    result[name] = unique(sets[name])
            elif name in ranges:
                result[name] = RangeValue(**ranges[name])
            elif not isinstance(value, RangeValue):
                result[name] = value
        return FilterState(result)


DEFAULT_RESOLVER = FilterStateResolver()


def resolve(
    path_segments: Sequence[str] | None,
    query_params: QueryParams | None,
    schema: FilterSchema = DEFAULT_FILTER_SCHEMA,
) -> FilterState:
    """Resolve path segments and query parameters into one filter state."""
    if schema is DEFAULT_FILTER_SCHEMA:
        return DEFAULT_RESOLVER.resolve(path_segments, query_params)
    return FilterStateResolver(schema=schema).resolve(path_segments, query_params)


def parse_query_filters(
    query_params: QueryParams,
    schema: FilterSchema = DEFAULT_FILTER_SCHEMA,
) -> FilterState:
    return FilterStateResolver(schema=schema).parse_query(query_params)


def merge_filters(slug_filters: FilterState, query_filters: FilterState) -> FilterState:
    """
    Merge slug-derived values into the query-derived state.

    For condition, make and model the slug values come first, followed by any
    query values not already present. Other names keep the query value.
    """
    merged: dict[str, FilterValue] = dict(query_filters)
    for name in SLUG_FILTERS:
        slug_values = slug_filters.values_of(name)
        if not slug_values:
            continue
        merged[name] = unique((*slug_values, *query_filters.values_of(name)))
    # Keep path dimensions ahead of query refinements when iterating
    ordered = {name: merged.pop(name) for name in SLUG_FILTERS if name in merged}
    ordered.update(merged)
    return FilterState(ordered)


def resolve_sorting(query_params: QueryParams | None) -> Sorting:
    """Extract sort field, sort order and page from query parameters."""
    params = query_params or {}
    sort_by = _last(params.get("sort_by"))
    raw_order = (_last(params.get("order")) or "").lower()
    order = SortOrder(raw_order) if raw_order in ("asc", "desc") else None

    page = None
    raw_page = _last(params.get("page"))
    number = parse_number(raw_page) if raw_page else None
    if number is not None and float(number).is_integer() and number >= 1:
        page = int(number)

    return Sorting(sort_by=sort_by or None, order=order, page=page)


def parse_number(raw: str) -> int | float | None:
    """Permissive numeric parsing: '10000' -> 10000, '99.5' -> 99.5, 'abc' -> None."""
    text = raw.strip().replace(",", "") if isinstance(raw, str) else ""
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _as_list(raw: QueryValue | None) -> list[str]:
    if raw is None:
        return []
    if isinstance(raw, str):
        return [raw]
    return [str(item) for item in raw]


def _last(raw: QueryValue | None) -> str | None:
    items = _as_list(raw)
    return items[-1] if items else None
