"""
Request and response shapes for search, applications, transactions and taxonomy routes.

Timeline periods serialize their bounds as "from"/"to"; `from` is a Python
keyword, so the fields are aliased.
"""

from typing import Any, Optional

from pydantic import Field

from prosecution_tracker.schemas.common import BaseSchema


# ── Search ───────────────────────────────────────────────────────────────────


class SearchRequest(BaseSchema):
    query: str = Field(..., min_length=1, max_length=500)
    limit: int = Field(50, ge=1, le=500)
    offset: int = Field(0, ge=0)


class ApplicantName(BaseSchema):
    name: str
    count: int


class SearchResponse(BaseSchema):
    applicant_names: list[ApplicantName]


# ── Applications ─────────────────────────────────────────────────────────────


class ApplicationsRequest(BaseSchema):
    applicant_names: list[str] = Field(..., min_length=1, max_length=100)
    limit: int = Field(100, ge=1, le=500)
    offset: int = Field(0, ge=0)


class ApplicationsResponse(BaseSchema):
    # Upstream records pass through untouched (applicationNumberText, filingDate, ...)
    applications: list[dict[str, Any]]
    total: int


# ── Transactions ─────────────────────────────────────────────────────────────


class ClassificationOut(BaseSchema):
    category: str
    label: str
    icon: str
    color: str


class ClassifiedEventOut(BaseSchema):
    date: str
    code: str
    description: str
    classification: Optional[ClassificationOut] = None
    entity_rate: Optional[str] = None
    is_fee_event: bool
    is_entity_change: bool


class EntityPeriodOut(BaseSchema):
    from_date: str = Field(..., alias="from")
    to_date: Optional[str] = Field(None, alias="to")
    status: str


class TransactionsResponse(BaseSchema):
    application_number: str
    events: list[ClassifiedEventOut]
    entity_status_timeline: list[EntityPeriodOut]
    cached: bool = False


# ── Taxonomy ─────────────────────────────────────────────────────────────────


class TaxonomyCodeOut(BaseSchema):
    label: str
    icon: str
    color: str


class TaxonomyResponse(BaseSchema):
    categories: dict[str, dict[str, TaxonomyCodeOut]]


# ── Admin ────────────────────────────────────────────────────────────────────


class PurgeResponse(BaseSchema):
    deleted: int
