"""
Cache Manager: TTL cache for upstream search and transaction results.

The caller owns the session and the transaction: methods flush but never
commit, so a route can cache its result in the same unit of work as the
rest of the request.

Expiry is evaluated in SQL against the current UTC time; an expired row is
a miss until it is overwritten or purged.
"""

import hashlib
import logging
from datetime import timedelta
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from prosecution_tracker.models.base import utcnow
from prosecution_tracker.models.cache import SearchCacheEntry, TransactionCacheEntry

logger = logging.getLogger(__name__)


def search_query_hash(query: str, *qualifiers: object) -> str:
    """
    Cache key for a search: md5 of the lower-cased, trimmed query, followed
    by any qualifiers (page size, offset) separated by "|".
    """
    key = "|".join([query.strip().lower(), *(str(q) for q in qualifiers)])
    return hashlib.md5(key.encode("utf-8")).hexdigest()


class CacheManager:
    """
    Usage:
        cache = CacheManager(db)
        data = cache.get_transactions("16123456")
        if data is None:
            ...
            cache.set_transactions("16123456", result, ttl_hours=168)
    """

    def __init__(self, db: Session):
        self.db = db

    # ── Search cache ──────────────────────────────────────────────────────────

    def get_search(self, query_hash: str) -> Optional[dict[str, Any]]:
        row = self.db.scalars(
            select(SearchCacheEntry).where(
                SearchCacheEntry.query_hash == query_hash,
                SearchCacheEntry.expires_at > utcnow(),
            )
        ).first()
        logger.debug("Search cache %s for %s", "hit" if row else "miss", query_hash)
        return row.result_data if row else None

    def set_search(
        self, query_hash: str, query: str, data: dict[str, Any], ttl_hours: int = 24
    ) -> None:
        fetched_at = utcnow()
        expires_at = fetched_at + timedelta(hours=ttl_hours)

        row = self.db.scalars(
            select(SearchCacheEntry).where(SearchCacheEntry.query_hash == query_hash)
        ).first()
        if row is None:
            row = SearchCacheEntry(query_hash=query_hash, search_query=query)
            self.db.add(row)
        row.result_data = data
        row.fetched_at = fetched_at
        row.expires_at = expires_at
        self.db.flush()

    # ── Transaction cache ─────────────────────────────────────────────────────

    def get_transactions(self, application_number: str) -> Optional[dict[str, Any]]:
        row = self.db.scalars(
            select(TransactionCacheEntry).where(
                TransactionCacheEntry.application_number == application_number,
                TransactionCacheEntry.expires_at > utcnow(),
            )
        ).first()
        logger.debug(
            "Transaction cache %s for %s", "hit" if row else "miss", application_number
        )
        return row.transaction_data if row else None

    def set_transactions(
        self, application_number: str, data: dict[str, Any], ttl_hours: int = 168
    ) -> None:
        fetched_at = utcnow()
        expires_at = fetched_at + timedelta(hours=ttl_hours)

        row = self.db.scalars(
            select(TransactionCacheEntry).where(
                TransactionCacheEntry.application_number == application_number
            )
        ).first()
        if row is None:
            row = TransactionCacheEntry(application_number=application_number)
            self.db.add(row)
        row.transaction_data = data
        row.fetched_at = fetched_at
        row.expires_at = expires_at
        self.db.flush()

    # ── Maintenance ───────────────────────────────────────────────────────────

    def purge_expired(self) -> int:
        """Delete expired entries from both tables. Returns the number of rows deleted."""
        now = utcnow()
        deleted = self._delete_rows(
            select(SearchCacheEntry).where(SearchCacheEntry.expires_at < now)
        ) + self._delete_rows(
            select(TransactionCacheEntry).where(TransactionCacheEntry.expires_at < now)
        )
        logger.info("Purged %d expired cache entries", deleted)
        return deleted

    def clear_all(self) -> int:
        """Delete every cached entry. Returns the number of rows deleted."""
        deleted = self._delete_rows(select(SearchCacheEntry)) + self._delete_rows(
            select(TransactionCacheEntry)
        )
        logger.info("Cleared all cache entries (%d rows)", deleted)
        return deleted

    def _delete_rows(self, stmt) -> int:
        # Row-by-row through the session so the identity map stays consistent
        rows = self.db.scalars(stmt).all()
        for row in rows:
            self.db.delete(row)
        self.db.flush()
        return len(rows)
