"""
Configuration helpers for the story backend.

Exposes a frozen Settings object built from environment variables so that
routers/services never fetch os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    database_url: str
    port: int
    log_level: str
    refresh_token_secret: str
    access_token_secret: str
    refresh_token_ttl_seconds: int
    access_token_ttl_seconds: int
    token_save_timeout_seconds: float


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _float(value: str, default: float = 0.0) -> float:
        try:
            return float(value)
        except (TypeError, ValueError):
            return default

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        database_url=os.getenv("DATABASE_URL", "sqlite:///./storyapi.db"),
        port=_int(os.getenv("PORT", "4000"), 4000),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        refresh_token_secret=os.getenv("REFRESH_TOKEN_SECRET", ""),
        access_token_secret=os.getenv("ACCESS_TOKEN_SECRET", ""),
        refresh_token_ttl_seconds=_int(os.getenv("REFRESH_TOKEN_TTL_SECONDS", "604800"), 604800),
        access_token_ttl_seconds=_int(os.getenv("ACCESS_TOKEN_TTL_SECONDS", "600"), 600),
        token_save_timeout_seconds=_float(os.getenv("TOKEN_SAVE_TIMEOUT_SECONDS", "1.0"), 1.0),
    )
