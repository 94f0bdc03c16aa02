from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from srp_lite.domain.cache_tags import invalidation_tags_from_body
from srp_lite.domain.errors import UnauthorizedError
from srp_lite.ports.tag_invalidator import TagInvalidator

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RevalidateCacheRequest:
    secret: str | None
    tags: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class RevalidateCacheResponse:
    invalidated: list[str]
    timestamp: datetime


class RevalidateCache:
    """
    Webhook use case: invalidate the configured dealer's cached data.

    The dealer id always comes from server configuration, never from the
    request, so one tenant cannot invalidate another tenant's cache. Extra
    tags in the request (a form, a single vehicle page) are invalidated too.
    """

    def __init__(self, tag_invalidator: TagInvalidator, dealer_id: str, secret: str) -> None:
        self._invalidator = tag_invalidator
        self._dealer_id = dealer_id
        self._secret = secret

    def execute(self, request: RevalidateCacheRequest) -> RevalidateCacheResponse:
        """
        Raises:
            UnauthorizedError: If the request secret does not match
        """
        if not request.secret or not hmac.compare_digest(request.secret.encode(), self._secret.encode()):
            logger.warning("Revalidation rejected: invalid secret")
            raise UnauthorizedError("Invalid secret")

        invalidated: list[str] = []
        for tag in invalidation_tags_from_body(dealer_id=self._dealer_id, tags=request.tags):
            try:
                self._invalidator.invalidate(tag)
            except Exception:
                # One broken tag must not block the rest of the webhook
                logger.exception("Failed to invalidate tag", extra={"tag": tag})
                continue
            invalidated.append(tag)

        logger.info("Cache revalidated", extra={"invalidated": invalidated})

        return RevalidateCacheResponse(
            invalidated=invalidated,
            timestamp=datetime.now(timezone.utc),
        )
