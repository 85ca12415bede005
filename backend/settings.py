"""Centralized configuration management for the Country Atlas backend."""

from __future__ import annotations

import logging
import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field, PrivateAttr
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables defined in a local .env file before instantiating the
# settings singleton so every importer of :mod:`backend.settings` sees them.
load_dotenv()

# -- Application-wide constants -------------------------------------------------

DEFAULT_COUNTRIES_API_BASE_URL = "https://restcountries.com/v3.1"
# ``/all`` refuses requests without an explicit field list (ten fields at most).
DEFAULT_COUNTRIES_API_FIELDS = (
    "cca3,name,region,subregion,population,languages,currencies,borders,flags,capital"
)
DEFAULT_SQLITE_DATABASE_URL = "sqlite+aiosqlite:///./data/atlas.db"
DEFAULT_FAVORITES_STORAGE_KEY = "favoriteCountries"
DEFAULT_LOG_LEVEL = "INFO"


def _normalize_origin(origin: str) -> str:
    """Return the origin stripped of whitespace and trailing slashes."""

    return origin.strip().rstrip("/")


class AppSettings(BaseSettings):
    """Typed configuration surface built on top of ``pydantic-settings``.

    Besides the raw environment values the class exposes a few derived helpers
    (normalized API base URL, parsed CORS origins, numeric log level) so the
    rest of the code base never re-parses environment strings.
    """

    _explicit_database_url: bool = PrivateAttr(default=False)
    _explicit_cors_allow_origins: bool = PrivateAttr(default=False)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    def __init__(self, **values: object) -> None:  # noqa: D401
        """Capture explicit overrides prior to delegating to ``BaseSettings``."""

        normalized_keys = {str(key).lower() for key in values}
        super().__init__(**values)
        self._explicit_database_url = "database_url" in normalized_keys
        self._explicit_cors_allow_origins = (
            "cors_allow_origins_raw" in normalized_keys
            or "cors_allow_origins" in normalized_keys
        )
        database_env = os.getenv("DATABASE_URL")
        if database_env is not None and database_env.strip():
            self._explicit_database_url = True
        cors_env = os.getenv("CORS_ALLOW_ORIGINS")
        if cors_env is not None and cors_env.strip():
            self._explicit_cors_allow_origins = True

    countries_api_base_url: str = Field(
        default=DEFAULT_COUNTRIES_API_BASE_URL,
        alias="COUNTRIES_API_BASE_URL",
        description="Base URL of the REST Countries API (without trailing slash).",
    )
    countries_api_fields: str | None = Field(
        default=DEFAULT_COUNTRIES_API_FIELDS,
        alias="COUNTRIES_API_FIELDS",
        description=(
            "Comma-separated field list sent with ``/all`` requests. An empty"
            " value omits the parameter entirely."
        ),
    )
    database_url: str | None = Field(
        default=None,
        alias="DATABASE_URL",
        description=(
            "SQLAlchemy async URL for the key-value store holding favorites."
            " Falls back to a local SQLite file."
        ),
    )
    favorites_storage_key: str = Field(
        default=DEFAULT_FAVORITES_STORAGE_KEY,
        alias="FAVORITES_STORAGE_KEY",
        description="Storage key under which the favorites array is persisted.",
    )
    cors_allow_origins_raw: str | None = Field(
        default=None,
        alias="CORS_ALLOW_ORIGINS",
        description="Comma-separated list of additional CORS origins.",
    )
    cors_allow_origin_regex: str | None = Field(
        default=None,
        alias="CORS_ALLOW_ORIGIN_REGEX",
        description="Optional regular expression evaluated by FastAPI's CORS middleware.",
    )
    log_level: str = Field(
        default=DEFAULT_LOG_LEVEL,
        alias="LOG_LEVEL",
        description="Root logging level (e.g. INFO, DEBUG, WARNING).",
    )

    @property
    def resolved_countries_api_base_url(self) -> str:
        """Return the API base URL without a trailing slash."""

        return self.countries_api_base_url.strip().rstrip("/")

    @property
    def resolved_database_url(self) -> str:
        """Return the configured database URL or the SQLite fallback."""

        if not self.database_url or not self.database_url.strip():
            return DEFAULT_SQLITE_DATABASE_URL
        return self.database_url.strip()

    @property
    def database_type(self) -> str:
        """Return the SQLAlchemy backend name (``sqlite``, ``postgresql`` ...)."""

        scheme = self.resolved_database_url.split("://", 1)[0]
        return scheme.split("+", 1)[0]

    @property
    def cors_allow_origins(self) -> list[str]:
        """Return normalised CORS origins supplied via environment variables."""

        if not self.cors_allow_origins_raw:
            return []

        origins = [
            _normalize_origin(origin)
            for origin in self.cors_allow_origins_raw.split(",")
            if origin.strip()
        ]
        return [origin for origin in origins if origin]

    @property
    def log_level_numeric(self) -> int:
        """Translate ``log_level`` into the numeric constant expected by logging."""

        candidate = logging.getLevelName(self.log_level.upper())
        if isinstance(candidate, int):
            return candidate
        return logging.INFO

    def optional_config_warnings(self) -> list[str]:
        """Return human-readable warnings for unset optional configuration."""

        warnings: list[str] = []

        if not self._explicit_database_url:
            warnings.append(
                "DATABASE_URL is not set - favorites are stored in the local "
                f"SQLite file ({DEFAULT_SQLITE_DATABASE_URL})"
            )

        if not self._explicit_cors_allow_origins and not self.cors_allow_origins:
            warnings.append(
                "CORS_ALLOW_ORIGINS is not set - using default localhost origins only "
                "(may cause CORS issues in production)"
            )

        return warnings


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Return a cached instance of :class:`AppSettings`."""

    return AppSettings()


__all__ = [
    "AppSettings",
    "DEFAULT_COUNTRIES_API_BASE_URL",
    "DEFAULT_COUNTRIES_API_FIELDS",
    "DEFAULT_FAVORITES_STORAGE_KEY",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_SQLITE_DATABASE_URL",
    "get_settings",
]
