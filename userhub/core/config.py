"""
Configuration helpers for the userhub backend.

Routers and services read settings through get_settings() so that nothing
fetches os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    database_url: str
    user_online_window_seconds: int
    log_level: str


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        database_url=os.getenv("DATABASE_URL", ""),
        user_online_window_seconds=max(0, _int(os.getenv("USER_ONLINE_WINDOW_SECONDS", "300"), 300)),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
