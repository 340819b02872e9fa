"""
Application listing route.

  POST /applications   → applications filed by the selected applicants

This is the step between an applicant search and a transaction history: the
caller picks names from /search and gets back application numbers. Each name
is forwarded as given and the names are OR-ed together. Results are not
cached; the listing changes as new applications are published.
"""

import logging

from fastapi import APIRouter, Depends, Response

from prosecution_tracker.routers.auth import require_viewer
from prosecution_tracker.routers.common import apply_no_store, client_error_to_http
from prosecution_tracker.schemas.transactions import ApplicationsRequest, ApplicationsResponse
from prosecution_tracker.services.uspto.client import (
    USPTOClient,
    USPTOClientError,
    get_uspto_client,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["applications"])


@router.post("/applications", response_model=ApplicationsResponse)
def list_applications(
    body: ApplicationsRequest,
    response: Response,
    client: USPTOClient = Depends(get_uspto_client),
    _viewer=Depends(require_viewer),
) -> ApplicationsResponse:
    apply_no_store(response)

    query = " OR ".join(name.strip() for name in body.applicant_names if name.strip())
    try:
        applications = client.get_applications(query, limit=body.limit, offset=body.offset)
    except USPTOClientError as exc:
        logger.warning("Application listing failed for %r: %s", body.applicant_names, exc.message)
        raise client_error_to_http(exc)

    logger.info("%d application(s) for %d applicant name(s)", len(applications), len(body.applicant_names))
    return ApplicationsResponse(applications=applications, total=len(applications))
