"""
Arena Teams – Application configuration.
Reads environment variables from a .env file via pydantic-settings.
"""

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration loaded from environment / .env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # ── App ──
    APP_NAME: str = "Arena Teams"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # ── Database ──
    DATABASE_URL: str = "sqlite+aiosqlite:///./arena.db"

    # ── CORS ──
    CORS_ORIGINS: List[str] = ["*"]

    # ── Join requests ──
    DEFAULT_JOIN_ROLE: str = "Mid"
    DEFAULT_JOIN_RANK: str = "Unranked"
    EXPERIENCE_MAX_LENGTH: int = 100

settings = Settings()
