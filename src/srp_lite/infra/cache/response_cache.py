"""
Bounded in-memory cache for filtered result sets.

Caches inventory responses so re-applying a filter combination already seen
during the session is served without a new request.

- Capacity: fixed at construction (10 entries by default)
- Eviction: FIFO, the oldest inserted entry goes first; reads never refresh it
- Key: canonical form of filter state + sort + order + search + page
"""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from srp_lite.domain.canonical import canonicalize

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 10


@dataclass(frozen=True, slots=True)
class CacheEntry:
    payload: Any
    filter_payload: Any
    timestamp: float


@dataclass(frozen=True, slots=True)
class CacheStats:
    size: int
    capacity: int
    keys: list[str]
    oldest_key: str | None
    newest_key: str | None


class ResponseCache:
    """
    Fixed-capacity key -> CacheEntry store with FIFO eviction.

    One instance is owned by the composition root for the lifetime of a
    session and injected where needed. Misses return None; capacity pressure
    only evicts. Nothing in here raises during normal operation.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self._capacity = capacity
        # Insertion order doubles as eviction order
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return len(self._entries)

    def key_for(
        self,
        filters: Mapping[str, Any] | None,
        sort_by: str | None = None,
        order: str | None = None,
        search: str | None = None,
        page: int | None = None,
    ) -> str:
        return canonicalize(filters, sort_by, order, search, page)

    def get(
        self,
        filters: Mapping[str, Any] | None,
        sort_by: str | None = None,
        order: str | None = None,
        search: str | None = None,
        page: int | None = None,
    ) -> CacheEntry | None:
        key = self.key_for(filters, sort_by, order, search, page)
        entry = self._entries.get(key)

        logger.debug("Filter cache hit" if entry else "Filter cache miss", extra={"cache_key": key})

        return entry

    def set(
        self,
        filters: Mapping[str, Any] | None,
        payload: Any,
        filter_payload: Any,
        sort_by: str | None = None,
        order: str | None = None,
        search: str | None = None,
        page: int | None = None,
    ) -> None:
        key = self.key_for(filters, sort_by, order, search, page)

        if key in self._entries:
            # Re-inserted at the newest position, never duplicated
            del self._entries[key]
        elif len(self._entries) >= self._capacity:
            evicted_key, _ = self._entries.popitem(last=False)
            logger.debug("Filter cache eviction", extra={"cache_key": evicted_key})

        self._entries[key] = CacheEntry(
            payload=payload,
            filter_payload=filter_payload,
            timestamp=time.time(),
        )
        logger.debug("Filter cache store", extra={"cache_key": key, "size": len(self._entries)})

    def has(
        self,
        filters: Mapping[str, Any] | None,
        sort_by: str | None = None,
        order: str | None = None,
        search: str | None = None,
        page: int | None = None,
    ) -> bool:
        return self.key_for(filters, sort_by, order, search, page) in self._entries

    def clear(self) -> None:
        self._entries.clear()

    def get_stats(self) -> CacheStats:
        keys = list(self._entries)
        return CacheStats(
            size=len(keys),
            capacity=self._capacity,
            keys=keys,
            oldest_key=keys[0] if keys else None,
            newest_key=keys[-1] if keys else None,
        )
