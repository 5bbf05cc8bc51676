"""Environment-driven configuration.

Every knob the service reads lives on ``AppSettings``. Values come from the
process environment or a local ``.env`` file and are read once, when this
module is first imported.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Iterable

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PROTECTED_PATHS = [
    "/dashboard",
    "/clientes",
    "/proveedores",
    "/productos",
    "/personal",
    "/configuracion",
    "/api/",
]


class AppSettings(BaseSettings):
    """Environment-driven application configuration."""

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "PresuX"
    APP_ENV: str = "production"
    # Only honoured when APP_ENV is "development".
    DISABLE_AUTH_FOR_DEV: bool = False

    BASE_DIR: Path = Field(default_factory=lambda: Path(__file__).resolve().parent.parent)
    TEMPLATES_DIR: Path | None = None

    # Hosted auth API (GoTrue protocol)
    SUPABASE_URL: str = Field(
        default="http://localhost:54321",
        validation_alias=AliasChoices("SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL"),
    )
    SUPABASE_ANON_KEY: str = Field(
        default="",
        validation_alias=AliasChoices("SUPABASE_ANON_KEY", "NEXT_PUBLIC_SUPABASE_ANON_KEY"),
    )
    # When present, access tokens are verified locally instead of asking the auth API.
    SUPABASE_JWT_SECRET: str = ""
    JWT_AUDIENCE: str = "authenticated"
    AUTH_TIMEOUT_SECONDS: float = 6.0

    SESSION_COOKIE_PREFIX: str = "presux"
    SESSION_COOKIE_SECURE: bool = False
    SESSION_MAX_AGE: int = 60 * 60 * 24 * 30

    # Comma separated path prefixes, kept as plain strings so env values need no JSON.
    PROTECTED_PATHS: str = ",".join(DEFAULT_PROTECTED_PATHS)
    AUTH_PAGES: str = "/login,/signup"
    LOGIN_PATH: str = "/login"
    HOME_PATH: str = "/dashboard"

    DB_URL: str = Field(default="sqlite:///./presux.db", validation_alias=AliasChoices("DB_URL", "DATABASE_URL"))

    LOG_LEVEL: str = "INFO"

    HOST: str = "0.0.0.0"
    PORT: int = 8000

    @property
    def auth_bypass_enabled(self) -> bool:
        return self.APP_ENV.lower() == "development" and self.DISABLE_AUTH_FOR_DEV

    @property
    def access_cookie_name(self) -> str:
        return f"{self.SESSION_COOKIE_PREFIX}-access-token"

    @property
    def refresh_cookie_name(self) -> str:
        return f"{self.SESSION_COOKIE_PREFIX}-refresh-token"

    @property
    def code_verifier_cookie_name(self) -> str:
        return f"{self.SESSION_COOKIE_PREFIX}-code-verifier"

    @property
    def protected_paths(self) -> list[str]:
        return _split_paths(self.PROTECTED_PATHS)

    @property
    def auth_pages(self) -> list[str]:
        return _split_paths(self.AUTH_PAGES)

    @field_validator("PROTECTED_PATHS", "AUTH_PAGES", mode="before")
    @classmethod
    def join_path_list(cls, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, str):
            return value
        if isinstance(value, Iterable):
            return ",".join(str(item).strip() for item in value if str(item).strip())
        raise TypeError("path lists must be a comma separated string or list")


def _split_paths(raw: str) -> list[str]:
    return [item.strip() for item in (raw or "").split(",") if item.strip()]


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    settings = AppSettings()
    if settings.TEMPLATES_DIR is None:
        settings.TEMPLATES_DIR = settings.BASE_DIR / "templates"
    return settings


settings = get_settings()
