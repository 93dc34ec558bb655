# qrtix/app/core/config.py
"""
Application configuration using pydantic-settings.

Deployment considerations:
- Face++ credentials are never hardcoded (FACEPP_API_KEY / FACEPP_API_SECRET)
- CORS_ORIGINS parsed from comma-separated env var, never defaults to "*"
- Database URLs normalized for async drivers automatically
- The local mirror is optional: an empty LOCAL_DATABASE_URL disables it
"""
from functools import lru_cache
from typing import List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _normalize_async_url(url: str) -> str:
    """
    Normalize database URLs for async SQLAlchemy compatibility.

    Conversions:
    - postgres://     → postgresql+asyncpg://  (hosted providers)
    - postgresql://   → postgresql+asyncpg://  (standard PostgreSQL)
    - sqlite:///      → sqlite+aiosqlite:///   (local mirror / development)
    """
    url = url.strip()

    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+asyncpg://", 1)

    if url.startswith("postgresql://") and "+asyncpg" not in url:
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)

    if url.startswith("sqlite:///") and "+aiosqlite" not in url:
        return url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)

    return url


class Settings(BaseSettings):
    """
    Strictly typed application settings.

    Priority for loading:
    1. Environment variables (highest priority)
    2. .env file (via pydantic-settings)
    3. Default values (lowest priority, dev-safe only)
    """

    # ─────────────────────────────────────────────────────────────
    # Application metadata
    # ─────────────────────────────────────────────────────────────
    PROJECT_NAME: str = "QRTix"
    PROJECT_VERSION: str = "1.0.0"

    ENVIRONMENT: str = "development"

    HOST: str = "0.0.0.0"
    PORT: int = 8080
    LOG_LEVEL: str = "INFO"

    # ─────────────────────────────────────────────────────────────
    # Primary store (authoritative)
    # Failures here fail the request.
    # ─────────────────────────────────────────────────────────────
    DATABASE_URL: str = "sqlite+aiosqlite:///./qrtix.db"

    # ─────────────────────────────────────────────────────────────
    # Secondary store (local mirror, best-effort)
    # Empty string → mirror disabled
    # ─────────────────────────────────────────────────────────────
    LOCAL_DATABASE_URL: str = ""

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def normalize_database_url(cls, v: Optional[str]) -> str:
        if v is None:
            return "sqlite+aiosqlite:///./qrtix.db"
        return _normalize_async_url(v)

    @field_validator("LOCAL_DATABASE_URL", mode="before")
    @classmethod
    def normalize_local_database_url(cls, v: Optional[str]) -> str:
        if not v:
            return ""
        return _normalize_async_url(v)

    DATABASE_ECHO: bool = False

    # ─────────────────────────────────────────────────────────────
    # Store timeouts (seconds)
    # ─────────────────────────────────────────────────────────────
    STORE_TIMEOUT_SECONDS: float = 5.0
    STORE_LOOKUP_TIMEOUT_SECONDS: float = 10.0

    # ─────────────────────────────────────────────────────────────
    # Mirror replication
    # Update paths retry with a fixed delay, insert/delete are single-shot
    # ─────────────────────────────────────────────────────────────
    MIRROR_TIMEOUT_SECONDS: float = 5.0
    MIRROR_PROBE_TIMEOUT_SECONDS: float = 2.0
    MIRROR_UPDATE_ATTEMPTS: int = 3
    MIRROR_RETRY_DELAY_SECONDS: float = 2.0

    # ─────────────────────────────────────────────────────────────
    # Face++ compare API
    # ─────────────────────────────────────────────────────────────
    FACEPP_COMPARE_URL: str = "https://api-us.faceplusplus.com/facepp/v3/compare"
    FACEPP_API_KEY: str = ""
    FACEPP_API_SECRET: str = ""
    FACE_MATCH_THRESHOLD: float = 70.0
    FACE_MATCH_TIMEOUT_SECONDS: float = 10.0

    # Login log timestamps are written in this zone
    LOGIN_LOG_TIMEZONE: str = "America/Bogota"

    # ─────────────────────────────────────────────────────────────
    # CORS Configuration
    # Parsed from comma-separated CORS_ORIGINS env var
    # Empty string → empty list (NOT "*")
    # ─────────────────────────────────────────────────────────────
    CORS_ORIGINS: str = "http://localhost:3000"

    @property
    def BACKEND_CORS_ORIGINS(self) -> List[str]:
        """
        Parse CORS_ORIGINS string into a list of allowed origins.

        Returns:
            List of allowed origin URLs
        """
        if not self.CORS_ORIGINS or not self.CORS_ORIGINS.strip():
            return []

        return [
            origin.strip()
            for origin in self.CORS_ORIGINS.split(",")
            if origin.strip()
        ]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def has_mirror(self) -> bool:
        """Check if a local mirror store is configured."""
        return bool(self.LOCAL_DATABASE_URL)


@lru_cache()
def get_settings() -> Settings:
    """
    Cached settings instance.

    Settings are loaded once per process; tests build their own
    ``Settings`` objects and pass them to ``create_app`` instead.
    """
    return Settings()


settings = get_settings()
