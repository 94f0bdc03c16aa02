from __future__ import annotations

from abc import ABC, abstractmethod


class TagInvalidator(ABC):
    """
    Port for server-side tag-based cache invalidation.

    Implementations drop every cached upstream response labelled with `tag`.
    A failure for one tag must not prevent invalidating the others; callers
    handle that by invalidating tags one at a time.
    """

    @abstractmethod
    def invalidate(self, tag: str) -> None: ...
