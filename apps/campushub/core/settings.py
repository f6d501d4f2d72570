from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Unified application settings for campushub.

    Loads from env with support for repo ".env" files. Avoids manual load_dotenv().
    """

    _app_env = (os.getenv("APP_ENV") or "").strip().lower()
    _env_files = (
        []
        if _app_env in {"test", "ci"}
        else [
            str((Path(__file__).resolve().parents[1] / ".env")),  # apps/campushub/.env
            str((Path(__file__).resolve().parents[3] / ".env")),  # repo root .env
        ]
    )

    model_config = SettingsConfigDict(
        env_file=_env_files,
        case_sensitive=False,
        extra="ignore",
    )

    # --- App / Core ---
    app_env: str = Field(default="dev", alias="APP_ENV")
    app_name: str = Field(default="CampusHub API", alias="APP_NAME")
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8000, alias="PORT", ge=1, le=65535)
    # Logging
    log_level: str | None = Field(default=None, alias="CAMPUSHUB_LOG_LEVEL")
    log_level_fallback: str | None = Field(default=None, alias="LOG_LEVEL")

    cors_allow_origins: list[str] = Field(default=["*"], alias="CORS_ALLOW_ORIGINS")

    # --- Auth ---
    secret_key: SecretStr = Field(
        default=SecretStr("campushub-dev-secret-change-me"), alias="SECRET_KEY"
    )
    access_token_ttl_minutes: int = Field(
        default=60 * 24 * 7, alias="ACCESS_TOKEN_TTL_MINUTES", ge=1
    )

    # --- Realtime ---
    typing_expiry_seconds: float = Field(default=3.0, alias="TYPING_EXPIRY_SECONDS", gt=0)
    close_superseded_sessions: bool = Field(
        default=False,
        alias="CLOSE_SUPERSEDED_SESSIONS",
        description="Close the previous connection when a user opens a second one.",
    )

    # --- Notifications ---
    notify_on_group_messages: bool = Field(
        default=False,
        alias="NOTIFY_ON_GROUP_MESSAGES",
        description="Create a notification for every other member on each chat message.",
    )
    enable_reminder_sweep: bool = Field(default=True, alias="ENABLE_REMINDER_SWEEP")
    reminder_sweep_interval_seconds: float = Field(
        default=5 * 60, alias="REMINDER_SWEEP_INTERVAL_SECONDS", gt=0
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()


# Convenience singleton for modules expecting a module-level "settings"
settings = get_settings()
