from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)

DEFAULT_DEALER_ID = "unknown-dealer"
DEFAULT_FILTER_CACHE_SIZE = 10


def dealer_id() -> str:
    dealer = os.getenv("SRP_DEALER_ID")

    if not dealer:
        logger.warning("SRP_DEALER_ID not set, using fallback", extra={"fallback": DEFAULT_DEALER_ID})
        return DEFAULT_DEALER_ID

    return dealer


def filter_cache_capacity() -> int:
    raw = os.getenv("SRP_FILTER_CACHE_SIZE")

    if not raw:
        return DEFAULT_FILTER_CACHE_SIZE

    try:
        capacity = int(raw)
    except ValueError:
        capacity = 0

    if capacity < 1:
        logger.warning(
            "Invalid SRP_FILTER_CACHE_SIZE, using default",
            extra={"value": raw, "default": DEFAULT_FILTER_CACHE_SIZE},
        )
        return DEFAULT_FILTER_CACHE_SIZE

    return capacity


def revalidation_secret() -> str:
    secret = os.getenv("SRP_REVALIDATION_SECRET")

    if not secret:
        raise RuntimeError("SRP_REVALIDATION_SECRET environment variable is not set")

    return secret
