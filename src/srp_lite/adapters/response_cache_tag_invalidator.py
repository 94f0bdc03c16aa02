from __future__ import annotations

import logging

from srp_lite.infra.cache.response_cache import ResponseCache
from srp_lite.ports.tag_invalidator import TagInvalidator

logger = logging.getLogger(__name__)

# Dealer-wide tags whose data lives in the results page cache
CACHED_DIMENSIONS: frozenset[str] = frozenset({"srp-rows", "srp-filters"})


class ResponseCacheTagInvalidator(TagInvalidator):
    """
    Invalidates the application's results page response cache.

    Every cache entry holds rows and the filter catalog together, and keys
    carry no dealer, so a `{dealer}:srp-rows` or `{dealer}:srp-filters` tag
    clears the whole cache. Other tags (vehicle pages, forms, staff) have no
    entries here and are ignored.
    """

    def __init__(self, response_cache: ResponseCache) -> None:
        self._cache = response_cache

    def invalidate(self, tag: str) -> None:
        _, _, dimension = tag.partition(":")
        if dimension not in CACHED_DIMENSIONS:
            return

        dropped = len(self._cache)
        self._cache.clear()
        logger.info("Response cache cleared", extra={"tag": tag, "dropped_entries": dropped})
