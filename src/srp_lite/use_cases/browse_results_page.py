from __future__ import annotations

from dataclasses import dataclass, field

from srp_lite.domain.errors import NotFoundError
from srp_lite.domain.filters import FilterState, SelectedFilter
from srp_lite.domain.resolver import QueryParams, Sorting
from srp_lite.domain.selected_filters import project_selected_filters
from srp_lite.use_cases.resolve_active_filters import (
    ResolveActiveFilters,
    ResolveActiveFiltersRequest,
)
from srp_lite.use_cases.search_inventory import (
    SearchInventory,
    SearchInventoryRequest,
    SearchInventoryResponse,
)


@dataclass(frozen=True, slots=True)
class BrowseResultsPageRequest:
    path: str
    query: QueryParams = field(default_factory=dict)
    items_per_page: int = 24


@dataclass(frozen=True, slots=True)
class BrowseResultsPageResponse:
    filters: FilterState
    sorting: Sorting
    search: SearchInventoryResponse
    selected_filters: list[SelectedFilter]


class BrowseResultsPage:
    """
    Results page flow: URL → filter state → (cached) inventory → chips.

    Chips are projected against the catalog returned with the results, so
    they always match the filters shown beside them.
    """

    def __init__(self, resolve_active_filters: ResolveActiveFilters, search_inventory: SearchInventory) -> None:
        self._resolve = resolve_active_filters
        self._search = search_inventory

    def execute(self, request: BrowseResultsPageRequest) -> BrowseResultsPageResponse:
        """
        Raises:
            NotFoundError: If the path does not follow the slug grammar
            ValidationError: If paging parameters are invalid
            UpstreamError: If the inventory collaborator fails on a cache miss
        """
        resolved = self._resolve.execute(ResolveActiveFiltersRequest(path=request.path, query=request.query))
        if not resolved.is_valid_path:
            raise NotFoundError(resource="Results page", identifier=request.path)

        search = self._search.execute(
            SearchInventoryRequest(
                filters=resolved.filters,
                sort_by=resolved.sorting.sort_by,
                order=resolved.sorting.order,
                page=resolved.sorting.page or 1,
                items_per_page=request.items_per_page,
            )
        )

        return BrowseResultsPageResponse(
            filters=resolved.filters,
            sorting=resolved.sorting,
            search=search,
            selected_filters=project_selected_filters(resolved.filters, search.catalog.available_filters),
        )
