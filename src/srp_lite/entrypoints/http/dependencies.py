"""
Dependency injection for FastAPI routes.

Key principle: the response cache, the cache-aware search and the tag
invalidator are owned by the application (one per app instance, created in
build_app) and stored on `app.state`. The other use cases are cheap and built
per request.
"""

from __future__ import annotations

from fastapi import Depends, Request

from srp_lite.domain.errors import ConfigurationError
from srp_lite.infra.config import dealer_id, revalidation_secret
from srp_lite.ports.tag_invalidator import TagInvalidator
from srp_lite.use_cases.browse_results_page import BrowseResultsPage
from srp_lite.use_cases.resolve_active_filters import ResolveActiveFilters
from srp_lite.use_cases.revalidate_cache import RevalidateCache
from srp_lite.use_cases.search_inventory import SearchInventory


def get_search_inventory_use_case(request: Request) -> SearchInventory:
    """
    Provides the application's cache-aware search.

    The same instance is returned for every request of an app, so entries
    stored by one request are served to the next and `latest_key` always
    names the most recent search.
    """
    return request.app.state.search_inventory


def get_tag_invalidator(request: Request) -> TagInvalidator:
    return request.app.state.tag_invalidator


def get_resolve_active_filters_use_case() -> ResolveActiveFilters:
    return ResolveActiveFilters()


def get_browse_results_page_use_case(
    resolve_use_case: ResolveActiveFilters = Depends(get_resolve_active_filters_use_case),
    search_use_case: SearchInventory = Depends(get_search_inventory_use_case),
) -> BrowseResultsPage:
    return BrowseResultsPage(resolve_active_filters=resolve_use_case, search_inventory=search_use_case)


def get_revalidate_cache_use_case(
    invalidator: TagInvalidator = Depends(get_tag_invalidator),
) -> RevalidateCache:
    """
    Factory function for the revalidation webhook use case.

    Raises:
        ConfigurationError: If the revalidation secret is not configured
    """
    try:
        secret = revalidation_secret()
    except RuntimeError as exc:
        raise ConfigurationError("Server configuration error") from exc

    return RevalidateCache(tag_invalidator=invalidator, dealer_id=dealer_id(), secret=secret)
