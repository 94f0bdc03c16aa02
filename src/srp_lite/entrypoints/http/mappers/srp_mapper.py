from __future__ import annotations

from collections.abc import Iterable

from srp_lite.domain.filters import (
    AvailableFilter,
    FilterKind,
    FilterOption,
    RangeValue,
    SelectedFilter,
)
from srp_lite.domain.resolver import Sorting, parse_number
from srp_lite.entrypoints.http.dtos.srp import (
    AvailableFilterDTO,
    FilterOptionDTO,
    ResultsPageResponseDTO,
    RevalidateResponseDTO,
    SelectedFilterDTO,
    SelectedFiltersRequestDTO,
    SelectedFiltersResponseDTO,
    SortingDTO,
)
from srp_lite.use_cases.browse_results_page import (
    BrowseResultsPageRequest,
    BrowseResultsPageResponse,
)
from srp_lite.use_cases.resolve_active_filters import (
    ResolveActiveFiltersRequest,
    ResolveActiveFiltersResponse,
)
from srp_lite.use_cases.revalidate_cache import RevalidateCacheResponse

DEFAULT_ITEMS_PER_PAGE = 24

# Transport-only query keys, never part of the filter state
TRANSPORT_QUERY_KEYS = frozenset({"items_per_page"})


class SrpMapper:
    """Maps between REST DTOs and domain models for results pages."""

    @staticmethod
    def to_query_params(items: Iterable[tuple[str, str]]) -> dict[str, list[str]]:
        """
        Groups raw query string pairs by key, keeping repeated keys.

        Args:
            items: (key, value) pairs, e.g. `request.query_params.multi_items()`

        Returns:
            dict[str, list[str]]: Values per key in arrival order
        """
        grouped: dict[str, list[str]] = {}
        for key, value in items:
            if key in TRANSPORT_QUERY_KEYS:
                continue
            grouped.setdefault(key, []).append(value)
        return grouped

    @staticmethod
    def to_items_per_page(raw: str | None) -> int:
        """Permissive page size: missing or unparsable values use the default."""
        number = parse_number(raw) if raw else None
        if number is None or not float(number).is_integer():
            return DEFAULT_ITEMS_PER_PAGE
        return int(number)

    @staticmethod
    def to_browse_request(path: str, items: Iterable[tuple[str, str]], items_per_page: str | None) -> BrowseResultsPageRequest:
        return BrowseResultsPageRequest(
            path=path,
            query=SrpMapper.to_query_params(items),
            items_per_page=SrpMapper.to_items_per_page(items_per_page),
        )

    @staticmethod
    def to_domain_available_filter(dto: AvailableFilterDTO) -> AvailableFilter:
        return AvailableFilter(
            name=dto.name,
            label=dto.label,
            type=FilterKind(dto.type),
            options=tuple(
                FilterOption(value=option.value, label=option.label, count=option.count) for option in dto.options
            ),
            bounds=dto.bounds,
        )

    @staticmethod
    def to_resolve_request(dto: SelectedFiltersRequestDTO) -> ResolveActiveFiltersRequest:
        return ResolveActiveFiltersRequest(
            path=dto.path,
            query=dto.query,
            available_filters=tuple(SrpMapper.to_domain_available_filter(item) for item in dto.available_filters),
        )

    @staticmethod
    def to_available_filter_response(available: AvailableFilter) -> AvailableFilterDTO:
        return AvailableFilterDTO(
            name=available.name,
            label=available.label,
            type=available.type.value,
            options=[
                FilterOptionDTO(value=option.value, label=option.label, count=option.count)
                for option in available.options
            ],
            bounds=available.bounds,
        )

    @staticmethod
    def to_selected_filter_response(selected: SelectedFilter) -> SelectedFilterDTO:
        value = selected.value.to_dict() if isinstance(selected.value, RangeValue) else selected.value
        return SelectedFilterDTO(
            name=selected.name,
            label=selected.label,
            value=value,
            type=selected.type.value,
            removable=selected.removable,
        )

    @staticmethod
    def to_sorting_response(sorting: Sorting) -> SortingDTO:
        return SortingDTO(
            sort_by=sorting.sort_by,
            order=sorting.order.value if sorting.order else None,
            page=sorting.page,
        )

    @staticmethod
    def to_selected_filters_response(result: ResolveActiveFiltersResponse) -> SelectedFiltersResponseDTO:
        return SelectedFiltersResponseDTO(
            filters=result.filters.to_dict(),
            sorting=SrpMapper.to_sorting_response(result.sorting),
            selected_filters=[SrpMapper.to_selected_filter_response(item) for item in result.selected_filters],
            is_valid_path=result.is_valid_path,
        )

    @staticmethod
    def to_results_page_response(result: BrowseResultsPageResponse) -> ResultsPageResponseDTO:
        page = result.search.page
        catalog = result.search.catalog
        return ResultsPageResponseDTO(
            filters=result.filters.to_dict(),
            sorting=SrpMapper.to_sorting_response(result.sorting),
            vehicles=page.vehicles,
            total=page.total_count,
            page=page.page,
            items_per_page=page.items_per_page,
            available_filters=[SrpMapper.to_available_filter_response(item) for item in catalog.available_filters],
            available_sorting=list(catalog.available_sorting),
            selected_filters=[SrpMapper.to_selected_filter_response(item) for item in result.selected_filters],
            cache_key=result.search.cache_key,
            from_cache=result.search.from_cache,
        )

    @staticmethod
    def to_revalidate_response(result: RevalidateCacheResponse) -> RevalidateResponseDTO:
        return RevalidateResponseDTO(
            success=True,
            invalidated=result.invalidated,
            timestamp=result.timestamp,
        )
