"""
Purge expired cache entries: run daily from cron or the platform scheduler.

Usage:
    python scripts/purge_cache.py          # delete expired entries only
    python scripts/purge_cache.py --all    # delete every cached entry
"""

import argparse
import logging
import os
import sys

# Ensure the project root is on the path when run directly
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from prosecution_tracker.database import SessionLocal
from prosecution_tracker.services.cache.manager import CacheManager

logger = logging.getLogger("purge_cache")


def main() -> None:
    parser = argparse.ArgumentParser(description="Purge cached USPTO responses.")
    parser.add_argument("--all", action="store_true", help="Clear the whole cache")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    with SessionLocal() as db:
        cache = CacheManager(db)
        try:
            if args.all:
                cache.clear_all()
                db.commit()
                print("✓ Cache cleared")
            else:
                deleted = cache.purge_expired()
                db.commit()
                print(f"✓ Purged {deleted} expired entries")
        except Exception as e:
            db.rollback()
            print(f"✗ Cache purge failed: {e}", file=sys.stderr)
            sys.exit(1)


if __name__ == "__main__":
    main()
