"""
Idea Board – Application configuration.
Reads environment variables from a .env file via pydantic-settings.
"""

from typing import List, Union

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration loaded from environment / .env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # ── App ──
    APP_NAME: str = "Idea Board"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # ── Database ──
    DATABASE_URL: str = "sqlite+aiosqlite:///./ideaboard.db"

    # ── JWT session cookie ──
    SECRET_KEY: str = "change-me-to-a-random-secret"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30 * 24 * 60
    COOKIE_SECURE: bool = False
    BCRYPT_ROUNDS: int = 12

    # ── CORS ──
    CORS_ORIGINS: Union[List[str], str] = ["http://localhost:3000"]

    # ── Deleted-user sentinel ──
    ANONYMOUS_EMAIL: str = "anonymous@example.com"
    ANONYMOUS_NAME: str = "Anonymous"

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Accept a comma-separated string as well as a list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v


settings = Settings()
