"""
PlumChat settings.

Environment-driven configuration grouped by concern (target database,
logging, tools). Values come from the process environment and an optional
``.env`` file; ``get_settings()`` loads them once per process.

Usage:
    from plumchat.config import get_settings

    settings = get_settings()
    settings.database.url
    settings.database.absolute_max_rows
"""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import AnyUrl, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SUPPORTED_URL_SCHEMES = frozenset({"postgres", "postgresql", "greenplum"})


class DatabaseSettings(BaseSettings):
    """Connection and row-cap settings for the queried Greenplum/PostgreSQL database."""

    url: AnyUrl | None = Field(
        None,
        description="Connection URL of the Greenplum/PostgreSQL database to query",
    )
    pool_size: int = Field(
        default=5,
        gt=0,
        le=20,
        description="Maximum pooled connections per connector",
    )
    timeout: int = Field(
        default=30,
        gt=0,
        description="Seconds allowed for connection checkout and each statement",
    )
    default_max_rows: int = Field(
        default=1000,
        gt=0,
        description="Row cap used when a caller does not ask for one",
    )
    absolute_max_rows: int = Field(
        default=10000,
        gt=0,
        description="Largest row cap any caller may request",
    )

    model_config = SettingsConfigDict(env_prefix="DATABASE_", env_file=".env", extra="ignore")

    @field_validator("url", mode="before")
    @classmethod
    def blank_url_is_unset(cls, value):
        return None if value == "" else value

    @field_validator("url")
    @classmethod
    def require_postgres_scheme(cls, value: AnyUrl | None) -> AnyUrl | None:
        if value is not None and value.scheme.split("+")[0].lower() not in SUPPORTED_URL_SCHEMES:
            raise ValueError(f"Unsupported database URL scheme: {value.scheme}")
        return value

    @model_validator(mode="after")
    def validate_row_caps(self) -> "DatabaseSettings":
        if self.default_max_rows > self.absolute_max_rows:
            raise ValueError(
                f"default_max_rows ({self.default_max_rows}) must not exceed "
                f"absolute_max_rows ({self.absolute_max_rows})"
            )
        return self


class LoggingSettings(BaseSettings):
    """Root logger setup."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: str = Field(
        default="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
        description="logging.Formatter format string",
    )
    date_format: str = Field(default="%Y-%m-%d %H:%M:%S", description="strftime format")
    file: Path | None = Field(default=None, description="Also write logs to this file")

    model_config = SettingsConfigDict(env_prefix="LOG_", env_file=".env", extra="ignore")

    def configure(self) -> None:
        """Install stream (and optional file) handlers on the root logger."""
        handlers: list[logging.Handler] = [logging.StreamHandler()]
        if self.file is not None:
            self.file.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(self.file))

        logging.basicConfig(
            level=self.level,
            format=self.format,
            datefmt=self.date_format,
            handlers=handlers,
            force=True,
        )


class ToolsSettings(BaseSettings):
    """LLM tool switches."""

    enabled: bool = Field(default=True, description="Master switch for tool execution")
    policy_path: str | None = Field(
        default=None,
        description="YAML file with per-tool policy overrides",
    )

    model_config = SettingsConfigDict(env_prefix="TOOLS_", env_file=".env", extra="ignore")


class Settings(BaseSettings):
    """
    Top-level PlumChat settings.

    Environment Variables:
        ENVIRONMENT: development, staging or production
        APP_NAME: Name used in log records
        DEBUG: Verbose behaviour toggle
        DATABASE_*: see DatabaseSettings
        LOG_*: see LoggingSettings
        TOOLS_*: see ToolsSettings

    Example:
        >>> get_settings().database.default_max_rows
        1000
    """

    environment: Literal["development", "staging", "production"] = "development"
    app_name: str = "PlumChat"
    debug: bool = False

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    tools: ToolsSettings = Field(default_factory=ToolsSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @model_validator(mode="after")
    def configure_logging(self) -> "Settings":
        self.logging.configure()
        return self

    def model_post_init(self, __context) -> None:
        logging.getLogger(__name__).info(
            f"{self.app_name} settings loaded ({self.environment})",
            extra={
                "environment": self.environment,
                "pool_size": self.database.pool_size,
                "default_max_rows": self.database.default_max_rows,
                "absolute_max_rows": self.database.absolute_max_rows,
                "tools_enabled": self.tools.enabled,
            },
        )


_PROJECT_ENV_FILE = Path(__file__).resolve().parents[1] / ".env"


def _load_project_env_file() -> None:
    # PLUMCHAT_ENV_SOURCE=environment keeps the process environment authoritative
    source = os.getenv("PLUMCHAT_ENV_SOURCE", "dotenv").lower()
    if source in {"dotenv", "envfile", "file"} and _PROJECT_ENV_FILE.exists():
        load_dotenv(_PROJECT_ENV_FILE, override=True)


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings, loaded on first use."""
    _load_project_env_file()
    return Settings()


def clear_settings_cache() -> None:
    """Drop the cached settings so the next ``get_settings()`` re-reads the environment."""
    get_settings.cache_clear()
