"""
Prosecution history route.

  GET /transactions/{app_number}            → classified events + entity-status timeline
  GET /transactions/{app_number}?groups=fees&groups=entity
                                            → same, events limited to the display groups

The full (unfiltered) engine output is cached per application for
TRANSACTION_CACHE_TTL_HOURS; group filtering is applied on the way out so
one cached result serves every filter combination.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Response
from sqlalchemy.orm import Session

from prosecution_tracker.database import get_db
from prosecution_tracker.routers.auth import require_viewer
from prosecution_tracker.routers.common import apply_no_store, client_error_to_http
from prosecution_tracker.schemas.transactions import TransactionsResponse
from prosecution_tracker.services.cache.manager import CacheManager
from prosecution_tracker.services.classification.timeline_engine import (
    categories_for_groups,
    filter_events,
    process_transactions,
)
from prosecution_tracker.services.uspto.client import (
    USPTOClient,
    USPTOClientError,
    get_uspto_client,
)
from prosecution_tracker.settings import settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.get("/{app_number}", response_model=TransactionsResponse)
def get_transactions(
    response: Response,
    app_number: str = Path(..., pattern=r"^\d+$", max_length=20),
    groups: Optional[list[str]] = Query(None),
    db: Session = Depends(get_db),
    client: USPTOClient = Depends(get_uspto_client),
    _viewer=Depends(require_viewer),
) -> TransactionsResponse:
    apply_no_store(response)

    # Unknown group names are rejected before the cache or upstream is touched
    if groups:
        try:
            categories_for_groups(groups)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc))

    cache = CacheManager(db)
    data = cache.get_transactions(app_number)
    cached = data is not None

    if data is None:
        try:
            raw_events = client.get_transactions(app_number)
        except USPTOClientError as exc:
            logger.warning("Transaction fetch failed for %s: %s", app_number, exc.message)
            raise client_error_to_http(exc)

        result = process_transactions(raw_events)
        logger.info(
            "Application %s: %d raw events → %d classified, %d entity periods",
            app_number,
            len(raw_events),
            len(result.events),
            len(result.entity_timeline),
        )
        data = result.to_dict()
        cache.set_transactions(
            app_number, data, ttl_hours=settings.transaction_cache_ttl_hours
        )
        db.commit()

    events = data["events"]
    if groups:
        events = filter_events(events, groups)

    return TransactionsResponse.model_validate(
        {
            "application_number": app_number,
            "events": events,
            "entity_status_timeline": data["entity_status_timeline"],
            "cached": cached,
        }
    )
