"""
Applicant search route.

  POST /search   → applicant names with application counts (faceted search)

Results are cached per normalized query for SEARCH_CACHE_TTL_HOURS.
"""

import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from prosecution_tracker.database import get_db
from prosecution_tracker.routers.auth import require_viewer
from prosecution_tracker.routers.common import apply_no_store, client_error_to_http
from prosecution_tracker.schemas.transactions import SearchRequest, SearchResponse
from prosecution_tracker.services.cache.manager import CacheManager, search_query_hash
from prosecution_tracker.services.uspto.client import (
    USPTOClient,
    USPTOClientError,
    get_uspto_client,
)
from prosecution_tracker.settings import settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["search"])


@router.post("/search", response_model=SearchResponse)
def search_applicants(
    body: SearchRequest,
    response: Response,
    db: Session = Depends(get_db),
    client: USPTOClient = Depends(get_uspto_client),
    _viewer=Depends(require_viewer),
) -> SearchResponse:
    apply_no_store(response)

    # Pagination is part of the key; the same text with a different page is a different result
    query_hash = search_query_hash(body.query, body.limit, body.offset)
    cache = CacheManager(db)

    cached = cache.get_search(query_hash)
    if cached is not None:
        return SearchResponse.model_validate(cached)

    try:
        names = client.search_applicants(body.query, limit=body.limit, offset=body.offset)
    except USPTOClientError as exc:
        logger.warning("Applicant search failed for %r: %s", body.query, exc.message)
        raise client_error_to_http(exc)

    result = {"applicant_names": names}
    cache.set_search(query_hash, body.query, result, ttl_hours=settings.search_cache_ttl_hours)
    db.commit()

    return SearchResponse.model_validate(result)
