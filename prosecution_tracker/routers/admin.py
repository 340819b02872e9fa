"""
Admin cache maintenance routes.

  POST   /admin/cache/purge  → delete expired search and transaction entries
  DELETE /admin/cache        → delete every cached entry

Both require a bearer token with the admin role.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from prosecution_tracker.database import get_db
from prosecution_tracker.routers.auth import ROLE_ADMIN, require_role
from prosecution_tracker.schemas.common import MessageResponse
from prosecution_tracker.schemas.transactions import PurgeResponse
from prosecution_tracker.services.cache.manager import CacheManager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/cache/purge", response_model=PurgeResponse)
def purge_expired_cache(
    db: Session = Depends(get_db),
    admin=Depends(require_role(ROLE_ADMIN)),
) -> PurgeResponse:
    deleted = CacheManager(db).purge_expired()
    db.commit()
    logger.info("Cache purge by %s: %d entries removed", admin.get("sub"), deleted)
    return PurgeResponse(deleted=deleted)


@router.delete("/cache", response_model=MessageResponse)
def clear_cache(
    db: Session = Depends(get_db),
    admin=Depends(require_role(ROLE_ADMIN)),
) -> MessageResponse:
    CacheManager(db).clear_all()
    db.commit()
    logger.info("Cache cleared by %s", admin.get("sub"))
    return MessageResponse(message="Cache cleared.")
