"""
USPTO Open Data Portal API client.

Thin HTTP wrapper: one request per call, no retries. Failures are raised as
USPTOClientError subclasses carrying a short machine-readable code so the
routers can translate them into HTTP errors.

Transaction records are normalized to RawEvent here; nothing downstream
knows the upstream field names.
"""

import json
import logging
import re
from typing import Any, Optional

import requests

from prosecution_tracker.services.classification.timeline_engine import RawEvent
from prosecution_tracker.settings import settings

logger = logging.getLogger(__name__)

APPLICANT_FACET = "applicationMetaData.firstApplicantName"

# Columns returned by the application listing, newest filing first
APPLICATION_FIELDS = ",".join(
    [
        "applicationNumberText",
        "filingDate",
        "patentNumber",
        "inventionTitle",
        "applicationStatusDescriptionText",
        APPLICANT_FACET,
        "businessEntityStatusCategory",
    ]
)
APPLICATION_SORT = "filingDate desc"

# Digits, slashes and commas: "16123456", "16/123456", "16/123,456"
_APPLICATION_NUMBER_RE = re.compile(r"^[0-9/,]+$")
_MAX_APPLICATION_NUMBER_LENGTH = 20
_LOGGED_BODY_CHARS = 1000


# ── Errors ────────────────────────────────────────────────────────────────────


class USPTOClientError(Exception):
    """Base error. `code` is stable and safe to return to API consumers."""

    code = "uspto_error"

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class MissingAPIKeyError(USPTOClientError):
    code = "missing_api_key"


class InvalidApplicationNumberError(USPTOClientError):
    code = "invalid_application_number"


class InvalidApplicantNamesError(USPTOClientError):
    code = "invalid_applicant_names"


class UpstreamAPIError(USPTOClientError):
    """Connection failure, non-200 status, or unparseable body."""

    code = "api_error"


# ── Normalization ─────────────────────────────────────────────────────────────


def normalize_transaction_record(record: dict[str, Any]) -> RawEvent:
    """Map one upstream eventData record to a RawEvent. Missing fields become ""."""
    return RawEvent(
        date=record.get("recordEventDate") or "",
        code=record.get("recordTransactionCode") or "",
        description=record.get("recordEventDescription") or "",
    )


def parse_applicant_facets(data: dict[str, Any]) -> list[dict[str, Any]]:
    """
    Extract [{"name": ..., "count": ...}] from a faceted search response.

    The facet list is an alternating [name1, count1, name2, count2, ...]
    array. Depending on API version it appears under one of three paths.
    A trailing unpaired name is ignored. A non-numeric count means the body
    is not what the facet API promises and raises UpstreamAPIError.
    """
    facet_array = None
    facet_counts = data.get("facetCounts") or {}
    facets = data.get("facets") or {}
    facet_fields = (data.get("facet_counts") or {}).get("facet_fields") or {}

    if isinstance(facet_counts.get("firstApplicantName"), list):
        facet_array = facet_counts["firstApplicantName"]
    elif isinstance(facets.get(APPLICANT_FACET), list):
        facet_array = facets[APPLICANT_FACET]
    elif isinstance(facet_fields.get(APPLICANT_FACET), list):
        facet_array = facet_fields[APPLICANT_FACET]

    if facet_array is None:
        logger.warning("No applicant facet data found in USPTO search response")
        return []

    names = []
    for i in range(0, len(facet_array) - 1, 2):
        name, count = facet_array[i], facet_array[i + 1]
        try:
            names.append({"name": name, "count": int(count)})
        except (TypeError, ValueError) as exc:
            raise UpstreamAPIError(
                f"Malformed facet count {count!r} for applicant {name!r}",
                code="json_decode_error",
            ) from exc
    return names


# ── Client ────────────────────────────────────────────────────────────────────


class USPTOClient:
    """
    Usage:
        client = USPTOClient(api_key="...")
        events = client.get_transactions("16123456")
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.uspto.gov/api/v1/patent",
        timeout: int = 30,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def search_applicants(
        self, query: str, limit: int = 50, offset: int = 0
    ) -> list[dict[str, Any]]:
        """
        Faceted applicant-name search. `query` is forwarded verbatim as `q`.
        Only the facet counts are used, so the document page size is 1.
        """
        data = self._get_json(
            "/applications/search",
            params={"q": query, "facets": APPLICANT_FACET, "limit": 1},
        )
        names = parse_applicant_facets(data)
        return names[offset : offset + limit]

    def get_applications(
        self, query: str, limit: int = 100, offset: int = 0
    ) -> list[dict[str, Any]]:
        """
        Applications matching `query`, newest filing first. `query` is
        forwarded verbatim as `q`; pagination is done upstream.
        Returns the raw `results` records.
        """
        if not (query or "").strip():
            raise InvalidApplicantNamesError("Applicant names must be a non-empty list.")

        data = self._get_json(
            "/applications/search",
            params={
                "q": query,
                "fields": APPLICATION_FIELDS,
                "limit": limit,
                "offset": offset,
                "sort": APPLICATION_SORT,
            },
        )
        results = data.get("results")
        if not isinstance(results, list):
            return []
        return [r for r in results if isinstance(r, dict)]

    def get_transactions(self, application_number: str) -> list[RawEvent]:
        """Transaction history for one application, normalized to RawEvents."""
        application_number = self.validate_application_number(application_number)
        data = self._get_json(f"/applications/{application_number}/transactions")

        records = data.get("eventData")
        if not isinstance(records, list):
            return []
        return [normalize_transaction_record(r) for r in records if isinstance(r, dict)]

    @staticmethod
    def validate_application_number(application_number: str) -> str:
        number = (application_number or "").strip()
        if not number:
            raise InvalidApplicationNumberError("Application number is required.")
        if not _APPLICATION_NUMBER_RE.match(number):
            raise InvalidApplicationNumberError(
                "Application number contains invalid characters."
            )
        if len(number) > _MAX_APPLICATION_NUMBER_LENGTH:
            raise InvalidApplicationNumberError("Application number is too long.")
        return number

    # ── Internals ─────────────────────────────────────────────────────────────

    def _get_json(self, path: str, params: Optional[dict] = None) -> dict[str, Any]:
        if not self.api_key:
            raise MissingAPIKeyError("USPTO API key is not configured.")

        url = f"{self.base_url}{path}"
        logger.info("USPTO request: %s params=%s", url, params)

        try:
            response = self.session.get(
                url,
                params=params,
                headers={"X-API-KEY": self.api_key, "Accept": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise UpstreamAPIError(
                f"Failed to connect to USPTO API: {exc}", code="api_request_failed"
            ) from exc

        logger.debug("USPTO response code: %s", response.status_code)
        logger.debug("USPTO response body: %s", response.text[:_LOGGED_BODY_CHARS])

        if response.status_code != 200:
            raise UpstreamAPIError(
                f"USPTO API returned error code {response.status_code}: "
                f"{response.text[:_LOGGED_BODY_CHARS]}"
            )

        try:
            data = response.json()
        except (json.JSONDecodeError, ValueError) as exc:
            raise UpstreamAPIError(
                f"Failed to parse USPTO API response: {exc}", code="json_decode_error"
            ) from exc

        if not isinstance(data, dict):
            raise UpstreamAPIError(
                "USPTO API response is not a JSON object", code="json_decode_error"
            )
        return data


# ── FastAPI dependency ────────────────────────────────────────────────────────


def get_uspto_client() -> USPTOClient:
    """Client configured from settings. Overridden in tests."""
    return USPTOClient(
        api_key=settings.uspto_api_key,
        base_url=settings.uspto_base_url,
        timeout=settings.uspto_timeout_seconds,
    )
