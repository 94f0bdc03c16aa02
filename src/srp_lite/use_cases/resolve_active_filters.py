from __future__ import annotations

from dataclasses import dataclass, field

from srp_lite.domain.filters import AvailableFilter, FilterState, SelectedFilter
from srp_lite.domain.resolver import (
    DEFAULT_RESOLVER,
    FilterStateResolver,
    QueryParams,
    Sorting,
    resolve_sorting,
)
from srp_lite.domain.selected_filters import project_selected_filters


@dataclass(frozen=True, slots=True)
class ResolveActiveFiltersRequest:
    path: str
    query: QueryParams = field(default_factory=dict)
    available_filters: tuple[AvailableFilter, ...] = ()


@dataclass(frozen=True, slots=True)
class ResolveActiveFiltersResponse:
    filters: FilterState
    sorting: Sorting
    selected_filters: list[SelectedFilter]
    is_valid_path: bool = True


class ResolveActiveFilters:
    """
    Derive the filter state and the active filter chips from a URL.

    Needs no inventory call: chips only depend on the URL and the filter
    catalog already on the page. A path outside the slug grammar still
    resolves (to whatever it could parse) and is flagged by `is_valid_path`.
    """

    def __init__(self, resolver: FilterStateResolver = DEFAULT_RESOLVER) -> None:
        self._resolver = resolver

    def execute(self, request: ResolveActiveFiltersRequest) -> ResolveActiveFiltersResponse:
        resolved = self._resolver.resolve_page(request.path, request.query)
        return ResolveActiveFiltersResponse(
            filters=resolved.filters,
            sorting=resolve_sorting(request.query),
            selected_filters=project_selected_filters(resolved.filters, request.available_filters),
            is_valid_path=resolved.is_valid_path,
        )
