"""
Configuration for Taskify.

This module defines the configuration options for:
- Database connection and pool bounds
- HTTP server
- Terminal client
"""

import os
from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, Field, model_validator
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.engine import URL, make_url

from .shared.exceptions import ConfigurationError

_TRUE_VALUES = {"1", "true", "yes", "on"}


class DatabaseSettings(BaseModel):
    """Database connection and pool configuration."""

    url: Optional[str] = Field(
        default=None,
        description="Full SQLAlchemy async URL; overrides the individual parts",
    )
    driver: str = Field(
        default="postgresql+asyncpg",
        description="SQLAlchemy dialect+driver used when building the URL",
    )
    host: str = Field(default="localhost", description="Database server host")
    port: Optional[int] = Field(default=None, description="Database server port")
    user: Optional[str] = Field(default=None, description="Database login")
    password: Optional[str] = Field(default=None, description="Database password")
    name: str = Field(default="taskify_db", description="Database name")
    pool_min: int = Field(
        default=0, ge=0, description="Connections opened eagerly at startup"
    )
    pool_max: int = Field(
        default=10, ge=1, description="Upper bound on concurrent connections"
    )
    idle_timeout_seconds: float = Field(
        default=30.0, gt=0, description="Recycle pooled connections older than this"
    )
    pool_timeout_seconds: float = Field(
        default=30.0, gt=0, description="Wait this long for a free pooled connection"
    )
    echo: bool = Field(default=False, description="Echo SQL statements")

    @model_validator(mode="after")
    def _check_pool_bounds(self) -> "DatabaseSettings":
        if self.pool_min > self.pool_max:
            raise ValueError(
                f"pool_min ({self.pool_min}) cannot exceed pool_max ({self.pool_max})"
            )
        return self

    def sqlalchemy_url(self) -> URL:
        """Build the SQLAlchemy URL for the configured database."""
        if self.url:
            return make_url(self.url)
        return URL.create(
            self.driver,
            username=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.name,
        )


class ServerSettings(BaseModel):
    """HTTP server configuration."""

    host: str = Field(default="0.0.0.0", description="Interface to bind")
    port: int = Field(default=5000, ge=0, le=65535, description="Listening port")
    cors_origins: List[str] = Field(
        default_factory=lambda: ["*"], description="Origins allowed by CORS"
    )
    init_schema: bool = Field(
        default=False, description="Create the tasks table on startup if missing"
    )


class ClientSettings(BaseModel):
    """Terminal client configuration."""

    api_url: str = Field(
        default="http://localhost:5000/api",
        description="Base URL of the task service",
    )
    timeout_seconds: float = Field(
        default=10.0, gt=0, description="Per-request timeout"
    )


class Settings(BaseModel):
    """Top-level Taskify configuration."""

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    client: ClientSettings = Field(default_factory=ClientSettings)
    log_level: str = Field(default="INFO", description="Root logging level")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read from (defaults to ``os.environ``).

        Raises:
            ConfigurationError: If a value cannot be parsed or is out of range.
        """
        env = os.environ if environ is None else environ

        database: dict[str, Any] = {
            "url": env.get("TASKIFY_DATABASE_URL") or None,
            "driver": env.get("DB_DRIVER", "postgresql+asyncpg"),
            "host": env.get("DB_SERVER", "localhost"),
            "port": _int_or_none(env, "DB_PORT"),
            "user": env.get("DB_USER") or None,
            "password": env.get("DB_PASSWORD") or None,
            "name": env.get("DB_DATABASE", "taskify_db"),
            "pool_min": _int(env, "DB_POOL_MIN", 0),
            "pool_max": _int(env, "DB_POOL_MAX", 10),
            "idle_timeout_seconds": _float(env, "DB_IDLE_TIMEOUT_SECONDS", 30.0),
            "pool_timeout_seconds": _float(env, "DB_POOL_TIMEOUT_SECONDS", 30.0),
            "echo": _bool(env, "DB_ECHO", False),
        }
        server: dict[str, Any] = {
            "host": env.get("HOST", "0.0.0.0"),
            "port": _int(env, "PORT", 5000),
            "cors_origins": _list(env, "CORS_ORIGINS", ["*"]),
            "init_schema": _bool(env, "TASKIFY_INIT_SCHEMA", False),
        }
        client: dict[str, Any] = {
            "api_url": env.get("TASKIFY_API_URL", "http://localhost:5000/api"),
            "timeout_seconds": _float(env, "TASKIFY_API_TIMEOUT_SECONDS", 10.0),
        }

        try:
            return cls(
                database=DatabaseSettings(**database),
                server=ServerSettings(**server),
                client=ClientSettings(**client),
                log_level=env.get("LOG_LEVEL", "INFO").upper(),
            )
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e


def _int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{key} must be an integer, got {raw!r}")


def _int_or_none(env: Mapping[str, str], key: str) -> Optional[int]:
    if not env.get(key, "").strip():
        return None
    return _int(env, key, 0)


def _float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{key} must be a number, got {raw!r}")


def _bool(env: Mapping[str, str], key: str, default: bool) -> bool:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in _TRUE_VALUES


def _list(env: Mapping[str, str], key: str, default: List[str]) -> List[str]:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]
