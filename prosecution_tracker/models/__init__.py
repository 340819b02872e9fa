# Import all models here so Alembic's env.py can discover them via Base.metadata
from prosecution_tracker.models.base import Base  # noqa: F401
from prosecution_tracker.models.cache import SearchCacheEntry, TransactionCacheEntry  # noqa: F401
