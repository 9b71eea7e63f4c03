"""
In-memory cache of per-account transaction listings.

Strategy:
- Read-through: listings read from the transactions table are cached per account id
- Single account syncs, link changes and deletes drop that account's entry
- A bulk sync clears the whole cache once, after every account has settled
"""

from typing import Any, Callable, Optional

import structlog

from bank_sync.cache import TTLCache
from bank_sync.config import TRANSACTIONS_CACHE_TTL_SECONDS
from bank_sync.metrics import (
    transactions_cache_hits,
    transactions_cache_invalidations,
    transactions_cache_misses,
)

logger = structlog.get_logger(__name__)

Listing = list[dict[str, Any]]

_transactions: TTLCache[int, Listing] = TTLCache(ttl_seconds=TRANSACTIONS_CACHE_TTL_SECONDS)


def get_cached_transactions(account_id: int) -> Optional[Listing]:
    """
    Look up the cached listing for an account.

    Args:
        account_id: Local account ID

    Returns:
        Optional[Listing]: Cached booked transactions, or None on a miss
    """
    listing = _transactions.get(account_id)
    if listing is None:
        transactions_cache_misses.inc()
        return None
    transactions_cache_hits.inc()
    return listing


def get_or_load_transactions(account_id: int, loader: Callable[[], Listing]) -> Listing:
    """
    Return the cached listing, calling loader and caching its result on a miss.

    Exceptions from loader propagate and nothing is cached.
    """
    listing = get_cached_transactions(account_id)
    if listing is not None:
        return listing

    listing = loader()
    _transactions.set(account_id, listing)
    return listing


def invalidate_account_transactions(account_id: int) -> None:
    """Drop one account's cached listing."""
    _transactions.invalidate(account_id)
    transactions_cache_invalidations.labels(scope="account").inc()
    logger.debug("transactions_cache_invalidated", account_id=account_id)


def invalidate_transactions_cache() -> None:
    """
    Clear every cached listing.

    Signals that transaction data for at least the synced accounts may have
    changed and any cached view should be refetched.
    """
    _transactions.clear()
    transactions_cache_invalidations.labels(scope="all").inc()
    logger.info("transactions_cache_cleared")


def get_cache_size() -> int:
    return _transactions.size()
