"""
core/config.py
──────────────
Centralised application settings via ``pydantic-settings``.

All configuration is driven by environment variables (or a ``.env`` file
in the ``backend/`` directory).  ``pydantic-settings`` validates types at
startup, so a malformed value fails fast with a clear error message.

Usage
-----
    from core.config import get_settings

    settings = get_settings()
    print(settings.JSONPLACEHOLDER_URL)
"""

from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve the backend/ directory so relative .env paths work from any cwd.
_BACKEND_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables / ``.env`` file.

    Attributes:
        APP_TITLE:              Human-readable API name shown in OpenAPI docs.
        APP_VERSION:            Semantic version string.
        APP_DESCRIPTION:        Short description shown in the OpenAPI UI.
        DEBUG:                  Enable verbose logging.
        FRONTEND_URL:           Optional deployed frontend origin for CORS.
        SOURCE_TIMEOUT_SECONDS: Per-request timeout for every data source.
        JSONPLACEHOLDER_URL:    Base URL of the posts/users/comments/albums API.
        COINDESK_URL:           Bitcoin price index endpoint (optional source).
        QUOTES_URL:             Quotes feed endpoint (optional source).
        WEATHER_URL:            Current-weather endpoint (optional source).
        WEATHER_API_KEY:        ``appid`` passed to the weather endpoint.
        CORRELATION_MAX_POINTS: Cap on scatter points per correlation chart.
        AUTO_REFRESH_SECONDS:   Timer-triggered refresh period; ``0`` disables it.
        PREFERENCES_PATH:       JSON file holding persisted user preferences.
        EXPORT_DIR:             Directory where server-side exports are written.
    """

    model_config = SettingsConfigDict(
        env_file=str(_BACKEND_DIR / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=True,
        # Extra env vars are ignored; don't raise on unexpected keys.
        extra="ignore",
    )

    # ── API metadata ──────────────────────────────────────────────────────
    APP_TITLE: str = "Pulseboard API"
    APP_VERSION: str = "0.3.0"
    APP_DESCRIPTION: str = (
        "Analytics aggregation backend for the Pulseboard dashboard. "
        "Fetches public data sources, derives metrics and chart projections, "
        "and exposes refresh, retry and export endpoints."
    )

    # ── Feature flags ─────────────────────────────────────────────────────
    DEBUG: bool = False

    # ── CORS ──────────────────────────────────────────────────────────────
    # Optional extra origin injected by the hosting environment.
    FRONTEND_URL: str = ""

    # ── Data sources ──────────────────────────────────────────────────────
    SOURCE_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0, le=120)
    JSONPLACEHOLDER_URL: str = "https://jsonplaceholder.typicode.com"
    COINDESK_URL: str = "https://api.coindesk.com/v1/bpi/currentprice.json"
    QUOTES_URL: str = "https://api.quotable.io/quotes"
    WEATHER_URL: str = "https://api.openweathermap.org/data/2.5/weather"
    WEATHER_API_KEY: str = "demo"

    # ── Derivation / refresh ──────────────────────────────────────────────
    CORRELATION_MAX_POINTS: int = Field(default=20, ge=1, le=500)
    AUTO_REFRESH_SECONDS: float = Field(default=0.0, ge=0)

    # ── Local state ───────────────────────────────────────────────────────
    PREFERENCES_PATH: Path = _BACKEND_DIR / ".pulseboard" / "preferences.json"
    EXPORT_DIR: Path = _BACKEND_DIR / ".pulseboard" / "exports"

    @property
    def CORS_ORIGINS(self) -> List[str]:
        """
        Build the full CORS allow-list.

        Hard-coded dev origins plus the optional ``FRONTEND_URL`` env var.

        Returns:
            List of allowed origin strings.
        """
        origins: List[str] = [
            "http://localhost:8501",   # Streamlit
            "http://127.0.0.1:8501",
        ]
        if self.FRONTEND_URL:
            origins.append(self.FRONTEND_URL)
        return origins

    @field_validator("JSONPLACEHOLDER_URL")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        """Raise if the base URL is blank; drop a trailing slash otherwise."""
        if not v:
            raise ValueError("JSONPLACEHOLDER_URL must not be empty")
        return v.rstrip("/")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Return a cached ``Settings`` singleton.

    The instance is created (and the ``.env`` file parsed) only once per
    process lifetime, courtesy of ``functools.lru_cache``.

    Returns:
        Settings: Validated application configuration.
    """
    return Settings()
