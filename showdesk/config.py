"""
Application configuration using pydantic-settings.
All settings read from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Central configuration for the show catalogue service."""

    # ── Application ──────────────────────────────────────────
    APP_NAME: str = "showdesk"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # ── Backend API ──────────────────────────────────────────
    BACKEND_API_URL: str = "http://localhost:8000/api"
    BACKEND_API_TOKEN: Optional[str] = None
    BACKEND_TIMEOUT_SECONDS: float = 30.0

    # ── CSV Import ───────────────────────────────────────────
    MAX_UPLOAD_SIZE_MB: int = 5
    ALLOWED_UPLOAD_TYPES: str = "text/csv,application/vnd.ms-excel,application/octet-stream"
    MAX_IMPORT_ROWS: int = 5000
    IMPORT_SESSION_TTL_SECONDS: int = 1800

    # ── Interactive title check ──────────────────────────────
    TITLE_CHECK_DEBOUNCE_MS: int = 500

    # ── Listing ──────────────────────────────────────────────
    DEFAULT_PAGE_SIZE: int = 25

    # ── Observability ────────────────────────────────────────
    SENTRY_DSN: Optional[str] = None
    PROMETHEUS_ENABLED: bool = True

    # ── Security ─────────────────────────────────────────────
    API_KEY: Optional[str] = None
    CORS_ORIGINS: str = "*"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
    }


# Singleton instance
settings = Settings()
