"""Environment-driven configuration for the sessionauth app.

``AppSettings`` centralises every knob the service reads at startup: where the
database lives, how the session cookie is signed, and how logging behaves.
Values come from the process environment first, then ``.env`` files, then the
defaults below, so a fresh checkout boots without extra setup.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError, NoSuchModuleError

PACKAGE_DIR = Path(__file__).resolve().parent.parent
INSECURE_SECRET = "dev-insecure-secret-change-me"


class AppSettings(BaseSettings):
    """Environment-driven application configuration."""

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    APP_NAME: str = "sessionauth"

    # Users and sessions share one SQLAlchemy database.
    DATABASE_URL: str = Field(
        default="sqlite:///data/sessionauth.db",
        validation_alias=AliasChoices("DATABASE_URL", "DB_URL"),
    )

    SESSION_SECRET: str = INSECURE_SECRET
    SESSION_COOKIE_NAME: str = "sessionauth.sid"
    SESSION_MAX_AGE: int = 60 * 60 * 24 * 14
    SESSION_HTTPS_ONLY: bool = False

    BCRYPT_ROUNDS: int = 10

    TEMPLATES_DIR: Path = PACKAGE_DIR / "templates"

    HOST: str = "0.0.0.0"
    PORT: int = 3000

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    @field_validator("DATABASE_URL")
    @classmethod
    def check_database_url(cls, value: str) -> str:
        # Fail at startup with a readable message instead of inside create_engine.
        try:
            make_url(value).get_dialect()
        except (ArgumentError, NoSuchModuleError) as exc:
            raise ValueError(f"DATABASE_URL is not a SQLAlchemy database URL: {value.split(':', 1)[0]}://...") from exc
        return value

    @field_validator("BCRYPT_ROUNDS")
    @classmethod
    def check_rounds(cls, value: int) -> int:
        # bcrypt only accepts log2 rounds in this range
        if not 4 <= value <= 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31")
        return value

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalise_level(cls, value: str) -> str:
        return (value or "INFO").strip().upper()

    @property
    def uses_insecure_secret(self) -> bool:
        return self.SESSION_SECRET == INSECURE_SECRET


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    return AppSettings()
