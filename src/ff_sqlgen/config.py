"""
Settings for ff-sqlgen using Pydantic Settings.

Values come from the environment (FF_SQLGEN_*) or an optional .env file.
"""

import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .dialects import Dialect

# Maximum number of elements bound to one IN clause placeholder
IN_CLAUSE_LIMIT = 1000


class SqlGenSettings(BaseSettings):
    """Library-wide defaults."""

    model_config = SettingsConfigDict(
        env_prefix="FF_SQLGEN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    default_dialect: Dialect = Dialect.SQLSERVER
    parameter_base_index: int = Field(default=1, ge=1)
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value}")
        return level


@lru_cache
def get_settings() -> SqlGenSettings:
    """Get cached settings instance."""
    return SqlGenSettings()


def configure_logging(settings: SqlGenSettings | None = None) -> None:
    """Apply the configured level to the package logger."""
    settings = settings or get_settings()
    logging.getLogger("ff_sqlgen").setLevel(settings.log_level)
