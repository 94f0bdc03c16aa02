from __future__ import annotations

import logging
from dataclasses import dataclass

from srp_lite.domain.errors import ValidationError
from srp_lite.domain.filters import SEARCH_KEY, FilterState, SortOrder
from srp_lite.infra.cache.response_cache import ResponseCache
from srp_lite.ports.inventory_fetcher import (
    FetchResult,
    FilterCatalog,
    InventoryFetcher,
    InventoryPage,
    InventoryQuery,
)

logger = logging.getLogger(__name__)

MAX_ITEMS_PER_PAGE = 200


@dataclass(frozen=True, slots=True)
class SearchInventoryRequest:
    filters: FilterState
    sort_by: str | None = None
    order: SortOrder | None = None
    page: int = 1
    items_per_page: int = 24

    def validate(self) -> None:
        """
        Validate paging parameters.

        Raises:
            ValidationError: If paging parameters are invalid
        """
        errors = []
        if self.page < 1:
            errors.append({"field": "page", "message": "page must be >= 1"})
        if not 1 <= self.items_per_page <= MAX_ITEMS_PER_PAGE:
            errors.append(
                {"field": "items_per_page", "message": f"items_per_page must be between 1 and {MAX_ITEMS_PER_PAGE}"}
            )
        if errors:
            raise ValidationError(errors=errors)


@dataclass(frozen=True, slots=True)
class SearchInventoryResponse:
    page: InventoryPage
    catalog: FilterCatalog
    cache_key: str
    from_cache: bool = False


class SearchInventory:
    """
    Cache-aware inventory search.

    Looks the request up in the session's response cache first and only calls
    the inventory collaborator on a miss, storing what it returns. Fetch
    failures propagate and leave the cache untouched.

    The response carries the canonical cache key. One instance is shared by
    every request of an app, so `latest_key` names the most recent search;
    callers applying responses asynchronously compare their key with it and
    discard responses for a state the visitor has already navigated away from.
    """

    def __init__(self, inventory_fetcher: InventoryFetcher, response_cache: ResponseCache) -> None:
        self._fetcher = inventory_fetcher
        self._cache = response_cache
        self._latest_key: str | None = None

    @property
    def latest_key(self) -> str | None:
        return self._latest_key

    def is_latest(self, cache_key: str) -> bool:
        return cache_key == self._latest_key

    def execute(self, request: SearchInventoryRequest) -> SearchInventoryResponse:
        """
        Execute a search, serving it from cache when possible.

        Raises:
            ValidationError: If paging parameters are invalid
            UpstreamError: If the inventory collaborator fails on a cache miss
        """
        request.validate()

        filters, search = _split_search(request.filters)
        order = request.order.value if request.order else None
        key = self._cache.key_for(filters, request.sort_by, order, search, request.page)
        self._latest_key = key

        entry = self._cache.get(filters, request.sort_by, order, search, request.page)
        # Page size is not part of the key; a different size is a miss
        if entry is not None and entry.payload.items_per_page == request.items_per_page:
            return SearchInventoryResponse(
                page=entry.payload,
                catalog=entry.filter_payload,
                cache_key=key,
                from_cache=True,
            )

        result = self._fetcher.fetch(
            InventoryQuery(
                filters=request.filters,
                sort_by=request.sort_by,
                order=request.order,
                page=request.page,
                items_per_page=request.items_per_page,
            )
        )
        self._store(filters, request, order, search, result)

        logger.info(
            "Inventory fetched",
            extra={"cache_key": key, "total_count": result.payload.total_count},
        )

        return SearchInventoryResponse(
            page=result.payload,
            catalog=result.filter_payload,
            cache_key=key,
            from_cache=False,
        )

    def seed(self, request: SearchInventoryRequest, result: FetchResult) -> str:
        """Store server-rendered initial data so the first client request hits the cache."""
        filters, search = _split_search(request.filters)
        order = request.order.value if request.order else None
        self._store(filters, request, order, search, result)
        return self._cache.key_for(filters, request.sort_by, order, search, request.page)

    def _store(
        self,
        filters: FilterState,
        request: SearchInventoryRequest,
        order: str | None,
        search: str | None,
        result: FetchResult,
    ) -> None:
        self._cache.set(
            filters,
            result.payload,
            result.filter_payload,
            request.sort_by,
            order,
            search,
            request.page,
        )


def _split_search(filters: FilterState) -> tuple[FilterState, str | None]:
    """Search text is keyed separately from the structured filters."""
    return filters.without(SEARCH_KEY), filters.search
