"""
Global settings: read through pydantic-settings from the environment or an optional .env
"""

from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings, loaded from the process environment or .env"""

    model_config = SettingsConfigDict(
        env_file=Path(__file__).parent / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Database ──
    DATABASE_URL: str = "sqlite+aiosqlite:///./taskboard.db"
    DB_ECHO: bool = False  # echo SQL, handy while debugging

    # ── Access gate ──
    API_KEY: str | None = None  # unset → gate bypassed
    ADMIN_USER: str = "thedabolical"  # compared case-insensitively

    # ── Browser client ──
    API_URL: str | None = None

    # ── Event stream ──
    SSE_KEEPALIVE_SECONDS: float = 15.0
    SUBSCRIBER_QUEUE_SIZE: int = 16

    # ── Application ──
    ENV: str = "development"  # development | production
    APP_NAME: str = "taskboard"
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    @field_validator("API_KEY", "API_URL", mode="before")
    @classmethod
    def _blank_as_unset(cls, v: object) -> object:
        """API_KEY= in a .env file means "not configured", same as leaving it out"""
        if isinstance(v, str) and not v.strip():
            return None
        return v


@lru_cache
def get_settings() -> Settings:
    """Cached settings singleton"""
    return Settings()
