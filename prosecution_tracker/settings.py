"""
Central settings module.

All configuration comes from environment variables (or .env in local dev).
Never import settings directly from this file; always use the `settings`
singleton at the bottom so the entire app shares one instance.
"""

import json

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # silently ignore unrecognised env vars
        case_sensitive=False,
    )

    # ── Environment ────────────────────────────────────────────────────────
    environment: str = "development"
    log_level: str = "INFO"

    # ── Security ───────────────────────────────────────────────────────────
    secret_key: str = "CHANGE_ME_IN_PRODUCTION"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 480  # 8 hours
    # When true, data routes require a bearer token (admin routes always do)
    require_login: bool = False

    # ── Database (cache tables) ────────────────────────────────────────────
    database_url: str = "sqlite:///./prosecution_tracker.db"

    # ── USPTO Open Data Portal ─────────────────────────────────────────────
    uspto_api_key: str = ""
    uspto_base_url: str = "https://api.uspto.gov/api/v1/patent"
    uspto_timeout_seconds: int = 30

    # ── Cache TTLs ─────────────────────────────────────────────────────────
    search_cache_ttl_hours: int = 24
    transaction_cache_ttl_hours: int = 168  # 7 days

    # ── CORS ───────────────────────────────────────────────────────────────
    # Stored as str so pydantic-settings doesn't try to JSON-parse it at the
    # source layer. Use the `allowed_origins` property below for the parsed list.
    # Accepts: plain URL, comma-separated, or JSON array.
    allowed_origins_raw: str = Field(default="", validation_alias="allowed_origins")

    @property
    def allowed_origins(self) -> list[str]:
        raw = self.allowed_origins_raw.strip()
        if not raw:
            return []
        if raw.startswith("["):
            try:
                parsed = json.loads(raw)
                if isinstance(parsed, list):
                    return [str(x) for x in parsed]
            except json.JSONDecodeError:
                pass
        return [origin.strip() for origin in raw.split(",") if origin.strip()]

    # ── Derived helpers ────────────────────────────────────────────────────
    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


# Singleton: import this everywhere
settings = Settings()
