"""Cache tags and request keys for server-side tag-based invalidation.

Tags are namespaced by dealer: `{dealer_id}:{dimension}` for dealer-wide
data (`494a1788:srp-rows`), `{dealer_id}:vdp:{slug}` for one vehicle page and
`form:{form_id}` for a form definition.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Iterable, Mapping
from typing import Any

# Every tag that belongs to a dealer as a whole, in invalidation order
DEALER_DIMENSIONS: tuple[str, ...] = (
    "srp-rows",
    "srp-filters",
    "vdp-similars",
    "lineup",
    "dealer",
    "dealer-staff",
    "specials",
)

SRP_ROWS_PATH = "/vehicles/srp/rows"
SRP_FILTERS_PATH = "/vehicles/srp/filters"


def _dealer_tag(dimension: str, dealer_id: str) -> list[str]:
    return [f"{dealer_id}:{dimension}"]


def srp_rows_tags(dealer_id: str) -> list[str]:
    return _dealer_tag("srp-rows", dealer_id)


def srp_filters_tags(dealer_id: str) -> list[str]:
    return _dealer_tag("srp-filters", dealer_id)


def vdp_tags(vdp_slug: str, dealer_id: str) -> list[str]:
    return _dealer_tag(f"vdp:{vdp_slug}", dealer_id)


def vdp_similars_tags(dealer_id: str) -> list[str]:
    return _dealer_tag("vdp-similars", dealer_id)


def lineup_tags(dealer_id: str) -> list[str]:
    return _dealer_tag("lineup", dealer_id)


def dealer_tags(dealer_id: str) -> list[str]:
    return _dealer_tag("dealer", dealer_id)


def dealer_staff_tags(dealer_id: str) -> list[str]:
    return _dealer_tag("dealer-staff", dealer_id)


def specials_tags(dealer_id: str) -> list[str]:
    return _dealer_tag("specials", dealer_id)


def form_tags(form_id: str) -> list[str]:
    """Forms are shared across dealers, so their tag carries no dealer prefix."""
    return [f"form:{form_id}"]


def invalidation_tags(dealer_id: str) -> list[str]:
    """All dealer-wide tags, used when a dealer's inventory changes wholesale."""
    return [f"{dealer_id}:{dimension}" for dimension in DEALER_DIMENSIONS]


def invalidation_tags_from_body(
    dealer_id: str | None = None,
    tags: Iterable[str] | None = None,
) -> list[str]:
    """
    Tags to invalidate for a revalidation webhook.

    Args:
        dealer_id: When given, every dealer-wide tag is included
        tags: Specific tags to invalidate (e.g. `form:abc`, `dealer:vdp:slug`)

    Returns:
        Deduplicated tags, dealer-wide tags first
    """
    result: list[str] = []
    if dealer_id:
        result.extend(invalidation_tags(dealer_id))
    for tag in tags or ():
        if tag and tag not in result:
            result.append(tag)
    return result


# ==============================================================================
# Request keys
# ==============================================================================


def request_cache_key(hostname: str, path: str, body: Mapping[str, Any]) -> str:
    """
    Deterministic key for an upstream inventory request.

    Format: `{hostname}:{path}:{hash}` where hash is the first 12 hex chars of
    the SHA-256 of the key-sorted body and hostname drops any `www.` prefix.
    """
    serialized = json.dumps(body, sort_keys=True, separators=(",", ":"), default=str)
    body_hash = hashlib.sha256(serialized.encode("utf-8")).hexdigest()[:12]
    normalized_hostname = hostname.lower().removeprefix("www.")
    return f"{normalized_hostname}:{path}:{body_hash}"


def srp_rows_cache_key(hostname: str, body: Mapping[str, Any]) -> str:
    return request_cache_key(hostname, SRP_ROWS_PATH, body)


def srp_filters_cache_key(hostname: str, body: Mapping[str, Any]) -> str:
    return request_cache_key(hostname, SRP_FILTERS_PATH, body)


def filter_values_cache_key(hostname: str, filter_name: str, body: Mapping[str, Any]) -> str:
    return request_cache_key(hostname, f"{SRP_FILTERS_PATH}/{filter_name}", body)
