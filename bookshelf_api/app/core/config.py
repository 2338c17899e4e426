"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Values are read when a ``Settings`` instance is
created rather than when this module is imported, so tests and scripts
can build their own instance after adjusting the environment.  Defaults
are provided for every field except the token signing secret, which
must be supplied via ``JWT_SECRET``; ``validate`` refuses to continue
without it.
"""

import os
from dataclasses import dataclass, field
from typing import List

from .exceptions import ConfigError


def _env(name: str, default: str = "") -> str:
    return os.getenv(name, default)


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = field(default_factory=lambda: _env("PROJECT_NAME", "Bookshelf API"))
    api_version: str = field(default_factory=lambda: _env("API_VERSION", "1.0.0"))
    # ``production`` hides the details of unexpected errors from clients.
    environment: str = field(default_factory=lambda: _env("ENVIRONMENT", "development"))
    debug: bool = field(default_factory=lambda: _env_bool("DEBUG"))
    log_level: str = field(default_factory=lambda: _env("LOG_LEVEL", "INFO"))
    log_file: str = field(default_factory=lambda: _env("LOG_FILE"))

    jwt_secret: str = field(default_factory=lambda: _env("JWT_SECRET"))
    access_token_expire_minutes: int = field(
        default_factory=lambda: int(_env("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
    )

    # Path to the SQLite database file.  Relative paths are resolved
    # against the project root by ``core.db``.
    database_url: str = field(default_factory=lambda: _env("DATABASE_URL", "bookshelf.db"))

    # Prefix under which the resource routers are mounted, e.g. ``/api``.
    # ``/health`` is always served from the root.
    api_prefix: str = field(default_factory=lambda: _env("API_PREFIX"))

    # Comma-separated list of allowed CORS origins.
    cors_origins: str = field(default_factory=lambda: _env("CORS_ORIGINS", "*"))

    host: str = field(default_factory=lambda: _env("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(_env("PORT", "5000")))

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    def validate(self) -> None:
        """Fail fast on settings the application cannot run without.

        Raises
        ------
        ConfigError
            If the token signing secret is missing or the token lifetime
            is not a positive number of minutes.
        """
        if not self.jwt_secret:
            raise ConfigError("JWT_SECRET is not defined")
        if self.access_token_expire_minutes <= 0:
            raise ConfigError("ACCESS_TOKEN_EXPIRE_MINUTES must be a positive integer")
