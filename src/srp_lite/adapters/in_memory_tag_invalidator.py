from __future__ import annotations

from srp_lite.ports.tag_invalidator import TagInvalidator

MAX_RECORDED_TAGS = 100


class InMemoryTagInvalidator(TagInvalidator):
    """
    Tag store for tests.

    Upstream responses are registered under their tags; invalidating a tag
    drops every request key registered under it. The most recent invalidated
    tags are kept in `invalidated`.
    """

    def __init__(self) -> None:
        self._keys_by_tag: dict[str, set[str]] = {}
        self.invalidated: list[str] = []

    def register(self, request_key: str, tags: list[str]) -> None:
        for tag in tags:
            self._keys_by_tag.setdefault(tag, set()).add(request_key)

    def keys_for(self, tag: str) -> set[str]:
        return set(self._keys_by_tag.get(tag, set()))

    def invalidate(self, tag: str) -> None:
        self._keys_by_tag.pop(tag, None)
        self.invalidated.append(tag)
        del self.invalidated[:-MAX_RECORDED_TAGS]
