from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from srp_lite.domain.filters import AvailableFilter, FilterState, SortOrder


@dataclass(frozen=True, slots=True)
class InventoryQuery:
    filters: FilterState
    sort_by: str | None = None
    order: SortOrder | None = None
    page: int = 1
    items_per_page: int = 24


@dataclass(frozen=True, slots=True)
class InventoryPage:
    """Vehicle rows for one results page."""

    vehicles: list[dict[str, Any]]
    total_count: int
    page: int
    items_per_page: int


@dataclass(frozen=True, slots=True)
class FilterCatalog:
    """Filters the backend offers for the current selection."""

    available_filters: tuple[AvailableFilter, ...] = ()
    available_sorting: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class FetchResult:
    payload: InventoryPage
    filter_payload: FilterCatalog


class InventoryFetcher(ABC):
    """
    Port for the inventory search collaborator.

    Implementations perform the actual search (network, database, fixture)
    and return both the result rows and the filter catalog for that state.

    Contract:
        - query.filters is already resolved and canonical
        - Implementations raise UpstreamError when the search cannot be answered
    """

    @abstractmethod
    def fetch(self, query: InventoryQuery) -> FetchResult:
        """
        Search inventory for a filter state.

        Args:
            query: Resolved filters plus sort and paging

        Returns:
            FetchResult with the vehicle page and the filter catalog

        Raises:
            UpstreamError: If the collaborator fails
        """
        ...
