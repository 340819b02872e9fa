"""
FastAPI application factory.

Uses lifespan context manager (preferred over on_event decorators in FastAPI 0.93+)
to handle startup/shutdown tasks cleanly.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from prosecution_tracker.routers import admin, applications, health, search, taxonomy, transactions
from prosecution_tracker.settings import settings

# ── Logging ───────────────────────────────────────────────────────────────────
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan ──────────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown logic."""
    logger.info("Starting Prosecution Tracker API [env=%s]", settings.environment)

    from prosecution_tracker.database import check_db_connection

    if not check_db_connection():
        logger.error("Cache database is not reachable on startup, check DATABASE_URL")
    else:
        logger.info("Cache database connection verified")

    if not settings.uspto_api_key:
        logger.warning("USPTO_API_KEY is not set; upstream requests will fail with 503")

    yield  # ── Application runs here ──

    logger.info("Shutting down Prosecution Tracker API")


# ── App factory ───────────────────────────────────────────────────────────────
def create_app() -> FastAPI:
    app = FastAPI(
        title="Patent Prosecution Tracker",
        description=(
            "Retrieves USPTO prosecution histories, classifies transaction events "
            "into a fee/milestone taxonomy and reconstructs the entity-status "
            "(undiscounted/small/micro) timeline that governs fee discounts."
        ),
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
    )

    # ── CORS ──────────────────────────────────────────────────────────────────
    # Dev: allow all origins. Staging/prod: explicit allowlist from ALLOWED_ORIGINS env var.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.is_development else settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Routers ───────────────────────────────────────────────────────────────
    app.include_router(health.router)
    app.include_router(taxonomy.router)
    app.include_router(search.router)
    app.include_router(applications.router)
    app.include_router(transactions.router)
    app.include_router(admin.router)

    return app


app = create_app()
