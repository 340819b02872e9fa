"""
Test fixtures and shared setup.

Uses an in-memory SQLite database shared through a StaticPool.
All tests run in a transaction that is rolled back after each test,
so the cache tables are always clean without needing to truncate them.
"""

import os
import pytest

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

# ── Override settings BEFORE importing app modules ────────────────────────────
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("USPTO_API_KEY", "test-api-key")

from prosecution_tracker.main import app
from prosecution_tracker.database import get_db
from prosecution_tracker.models import Base
from prosecution_tracker.routers.auth import ROLE_ADMIN, ROLE_VIEWER, create_access_token
from prosecution_tracker.services.classification.timeline_engine import RawEvent
from prosecution_tracker.services.uspto.client import InvalidApplicantNamesError, get_uspto_client


# ── Test engine ───────────────────────────────────────────────────────────────
test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(bind=test_engine, autocommit=False, autoflush=False)


@pytest.fixture(scope="session")
def create_test_tables():
    """
    Create all tables once per test session.
    NOT autouse: engine and taxonomy tests run without it.
    """
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def db(create_test_tables) -> Session:
    """Provide a DB session that is rolled back after each test."""
    connection = test_engine.connect()
    transaction = connection.begin()
    session = TestSessionLocal(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()


# ── Upstream stub ─────────────────────────────────────────────────────────────


class FakeUSPTOClient:
    """Stands in for USPTOClient; records calls and returns canned data."""

    def __init__(self, events=None, applicant_names=None, applications=None, error=None):
        self.events = list(events or [])
        self.applicant_names = list(applicant_names or [])
        self.applications = list(applications or [])
        self.error = error
        self.transaction_calls: list[str] = []
        self.search_calls: list[tuple] = []
        self.application_calls: list[tuple] = []

    def get_transactions(self, application_number: str):
        self.transaction_calls.append(application_number)
        if self.error is not None:
            raise self.error
        return list(self.events)

    def search_applicants(self, query: str, limit: int = 50, offset: int = 0):
        self.search_calls.append((query, limit, offset))
        if self.error is not None:
            raise self.error
        return self.applicant_names[offset : offset + limit]

    def get_applications(self, query: str, limit: int = 100, offset: int = 0):
        self.application_calls.append((query, limit, offset))
        if self.error is not None:
            raise self.error
        if not query.strip():
            raise InvalidApplicantNamesError("Applicant names must be a non-empty list.")
        return self.applications[offset : offset + limit]


@pytest.fixture
def sample_events() -> list[RawEvent]:
    """A small prosecution history: small entity, then micro, plus noise."""
    return [
        RawEvent("2021-09-01", "IFEE", "Issue Fee Payment Verified"),
        RawEvent("2018-05-01", "SMAL", "Small Entity Status Asserted"),
        RawEvent("2020-03-15", "FEE.", "Fee Payment"),
        RawEvent("2019-02-11", "CTNF", "Non-Final Rejection"),
        RawEvent("2019-02-12", "MM327", "Mail Notice of Rejection"),  # not in taxonomy
        RawEvent("2021-07-01", "MICR", "Micro Entity Status Certified"),
    ]


@pytest.fixture
def fake_uspto(sample_events) -> FakeUSPTOClient:
    return FakeUSPTOClient(
        events=sample_events,
        applicant_names=[
            {"name": "ACME CORP", "count": 42},
            {"name": "ACME CORPORATION", "count": 7},
        ],
        applications=[
            {"applicationNumberText": "16123456", "filingDate": "2018-04-30", "inventionTitle": "Widget"},
            {"applicationNumberText": "15987654", "filingDate": "2016-01-12", "inventionTitle": "Gadget"},
        ],
    )


@pytest.fixture
def client(db: Session, fake_uspto: FakeUSPTOClient) -> TestClient:
    """
    FastAPI test client with the DB and USPTO client dependencies overridden.
    """

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_uspto_client] = lambda: fake_uspto
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers() -> dict:
    token = create_access_token({"sub": "admin@example.com", "role": ROLE_ADMIN})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def viewer_headers() -> dict:
    token = create_access_token({"sub": "viewer@example.com", "role": ROLE_VIEWER})
    return {"Authorization": f"Bearer {token}"}
