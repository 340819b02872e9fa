"""Health check endpoint for the hosting platform's service monitor."""

from fastapi import APIRouter
from pydantic import BaseModel

from prosecution_tracker.database import check_db_connection
from prosecution_tracker.settings import settings

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: str
    environment: str
    database: str
    version: str = "1.0.0"


@router.get("/health", response_model=HealthResponse, include_in_schema=False)
def health_check() -> HealthResponse:
    """
    Returns "ok" if the service is up and the cache database is reachable,
    "degraded" otherwise. Upstream USPTO availability is not probed.
    """
    db_ok = check_db_connection()
    return HealthResponse(
        status="ok" if db_ok else "degraded",
        environment=settings.environment,
        database="connected" if db_ok else "unreachable",
    )
