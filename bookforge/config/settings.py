"""Configuration management using Pydantic Settings.

Settings are loaded from the environment (and a local ``.env`` file) and
grouped into:
- DatabaseConfig: store location and connection behaviour
- LoggingConfig: console/file log levels and destinations
- AppConfig: values carried for the web front end (locale, base path, listener)
"""

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseConfig(BaseModel):
    """Relational store connection settings."""

    url: str = "sqlite+aiosqlite:///data/db/bookforge.db"
    echo: bool = False
    pool_timeout: int = 30
    busy_timeout_ms: int = 30000


class LoggingConfig(BaseModel):
    """Logging configuration for console and file output."""

    console_level: str = "INFO"
    file_level: str = "DEBUG"
    log_file: Path = Path("data/logs/bookforge.log")
    real_time_debug: bool = True


class AppConfig(BaseModel):
    """Front-end settings passed through to the web layer."""

    locale: str = "en"
    base_path: str = ""
    host: str = "0.0.0.0"
    port: int = 8000

    @field_validator("base_path")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


# Flat environment names mapped to (section, field)
_FLAT_ENV_MAP = {
    "database": {
        "database_url": "url",
        "database_echo": "echo",
        "database_pool_timeout": "pool_timeout",
        "database_busy_timeout_ms": "busy_timeout_ms",
    },
    "logging": {
        "console_log_level": "console_level",
        "file_log_level": "file_level",
        "log_file": "log_file",
        "log_real_time_debug": "real_time_debug",
    },
    "app": {
        "bookforge_locale": "locale",
        "bookforge_base_path": "base_path",
        "bookforge_host": "host",
        "bookforge_port": "port",
    },
}


class Settings(BaseSettings):
    """Main application settings with environment variable support.

    Environment variables can use flat names (DATABASE_URL, CONSOLE_LOG_LEVEL,
    BOOKFORGE_LOCALE) or nested names (DATABASE__URL, LOGGING__CONSOLE_LEVEL,
    APP__LOCALE).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    database: DatabaseConfig = DatabaseConfig()
    logging: LoggingConfig = LoggingConfig()
    app: AppConfig = AppConfig()

    @model_validator(mode="before")
    @classmethod
    def transform_flat_env_vars(cls, data: Any) -> Any:
        """Map flat environment variables onto the nested structure."""
        if not isinstance(data, dict):
            return data

        # The env source only reads declared fields, so flat names are
        # picked up from the process environment here (.env entries arrive
        # in ``data`` already).
        for section_mapping in _FLAT_ENV_MAP.values():
            for env_key in section_mapping:
                if env_key not in data and env_key.upper() in os.environ:
                    data[env_key] = os.environ[env_key.upper()]

        transformed: dict[str, dict[str, Any]] = {}
        for section, section_mapping in _FLAT_ENV_MAP.items():
            for env_key, field_key in section_mapping.items():
                if env_key in data:
                    transformed.setdefault(section, {})[field_key] = data.pop(env_key)

        for section, values in transformed.items():
            existing = data.get(section)
            if isinstance(existing, dict):
                values = {**existing, **values}
            data[section] = values

        return data


# Singleton instance for application use
settings = Settings()

