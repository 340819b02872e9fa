"""Helpers shared by the data routers."""

from fastapi import HTTPException, Response, status

from prosecution_tracker.services.uspto.client import (
    InvalidApplicantNamesError,
    InvalidApplicationNumberError,
    MissingAPIKeyError,
    USPTOClientError,
)

# Responses are per-application and already cached server-side
NO_STORE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate",
}


def apply_no_store(response: Response) -> None:
    for name, value in NO_STORE_HEADERS.items():
        response.headers[name] = value


def client_error_to_http(exc: USPTOClientError) -> HTTPException:
    """Translate a USPTO client failure into an HTTPException."""
    if isinstance(exc, MissingAPIKeyError):
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    elif isinstance(exc, (InvalidApplicationNumberError, InvalidApplicantNamesError)):
        status_code = 422
    else:
        status_code = status.HTTP_502_BAD_GATEWAY
    return HTTPException(
        status_code=status_code,
        detail={"error": exc.code, "message": exc.message},
    )
