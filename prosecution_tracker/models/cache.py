"""
Cache tables for upstream USPTO responses.

Rows are overwritten on refresh (one row per query hash / application number).
An entry is live while expires_at is in the future; expired rows are treated
as misses and removed by CacheManager.purge_expired().
"""

from datetime import datetime

from sqlalchemy import JSON, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from prosecution_tracker.models.base import Base, utcnow


class SearchCacheEntry(Base):
    __tablename__ = "search_cache"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    query_hash: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        unique=True,
        comment="md5 of the lower-cased, trimmed search query",
    )
    search_query: Mapped[str] = mapped_column(Text, nullable=False)
    result_data: Mapped[dict] = mapped_column(JSON, nullable=False)
    fetched_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )

    def __repr__(self) -> str:
        return f"<SearchCacheEntry query={self.search_query!r} expires_at={self.expires_at}>"


class TransactionCacheEntry(Base):
    __tablename__ = "transaction_cache"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    application_number: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)
    transaction_data: Mapped[dict] = mapped_column(
        JSON,
        nullable=False,
        comment="Serialized TimelineResult: events + entity_status_timeline",
    )
    fetched_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )

    def __repr__(self) -> str:
        return (
            f"<TransactionCacheEntry app={self.application_number!r} "
            f"expires_at={self.expires_at}>"
        )
