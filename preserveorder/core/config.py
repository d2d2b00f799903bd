"""
Configuration management for preserveorder.

Provides centralized, validated configuration from environment variables
with proper type checking and defaults.
"""

from __future__ import annotations

import codecs
from typing import Dict, Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from preserveorder.core.exceptions import ConfigurationError

OUTPUT_FORMATS = ("text", "json")


def _parse_flag(v) -> bool:
    if isinstance(v, str):
        return v.strip().lower() in ("1", "true", "yes", "y")
    return bool(v)


class Settings(BaseSettings):
    """Main application settings."""

    # Logging
    debug: bool = Field(default=False, alias="DEBUG")
    json_logs: bool = Field(default=False, alias="LOG_JSON")

    # CSV handling
    strict_validation: bool = Field(default=True, alias="STRICT_VALIDATION")
    csv_delimiter: str = Field(default=",", alias="CSV_DELIMITER")
    csv_encoding: str = Field(default="utf-8", alias="CSV_ENCODING")

    # CLI output
    output_format: str = Field(default="text", alias="OUTPUT_FORMAT")

    @field_validator("debug", "json_logs", "strict_validation", mode="before")
    @classmethod
    def parse_flags(cls, v):
        return _parse_flag(v)

    @field_validator("csv_delimiter")
    @classmethod
    def check_delimiter(cls, v: str) -> str:
        if len(v) != 1:
            raise ValueError("CSV_DELIMITER must be a single character")
        return v

    @field_validator("csv_encoding")
    @classmethod
    def check_encoding(cls, v: str) -> str:
        try:
            codecs.lookup(v)
        except LookupError as e:
            raise ValueError(f"CSV_ENCODING is not a known encoding: {v}") from e
        return v

    @field_validator("output_format", mode="before")
    @classmethod
    def check_output_format(cls, v):
        v = str(v).strip().lower()
        if v not in OUTPUT_FORMATS:
            raise ValueError(f"OUTPUT_FORMAT must be one of {OUTPUT_FORMATS}")
        return v

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )


# Global settings instance
settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global settings
    if settings is None:
        try:
            settings = Settings()
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid configuration: {e.error_count()} error(s)",
                details={"errors": [err["msg"] for err in e.errors()]},
            ) from e
    return settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global settings
    settings = None


def configuration_summary() -> Dict[str, str]:
    """Return the active configuration as display strings."""
    config = get_settings()
    return {
        "Debug": str(config.debug),
        "JSON logs": str(config.json_logs),
        "Strict validation": str(config.strict_validation),
        "CSV delimiter": repr(config.csv_delimiter),
        "CSV encoding": config.csv_encoding,
        "Output format": config.output_format,
    }
