"""Configuration management.

Uses pydantic-settings for type-safe configuration from environment variables,
optionally overlaid with a YAML import profile.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    All settings can be overridden via environment variables.
    Prefix: SHEETSCHEMA_
    """

    model_config = SettingsConfigDict(
        env_prefix="SHEETSCHEMA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Parsing
    delimiter: str = Field(
        default="auto",
        min_length=1,
        description="Field delimiter, or 'auto' to detect ',', ';' or tab",
    )
    comment_prefix: str = Field(
        default="#",
        description="Lines starting with this prefix (or '//') are comments",
    )
    header_row_count: int = Field(
        default=1,
        ge=1,
        le=3,
        description="1 = headers only, 2 = + type hints, 3 = + flags",
    )

    # Schema generation
    sanitize_field_names: bool = Field(
        default=True,
        description="Convert headers into identifier-safe field names",
    )
    default_class_name: str | None = Field(default=None)
    default_database_name: str | None = Field(default=None)
    default_namespace_name: str | None = Field(default=None)

    # Value conversion
    array_delimiter: str = Field(
        default=";",
        min_length=1,
        description="Separator between elements of array cells",
    )
    null_token: str = Field(
        default="null",
        description="String cell value treated as an explicit null",
    )

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")  # 'json' or 'console'


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def load_settings(config_path: Path | None = None) -> Settings:
    """Load settings, overlaying an optional YAML import profile.

    Values from the profile take precedence over environment variables.
    Unknown keys in the profile are ignored.

    Args:
        config_path: Path to a YAML mapping of setting names to values

    Returns:
        Settings instance (not cached)
    """
    if config_path is None:
        return Settings()

    with open(config_path, encoding="utf-8") as f:
        profile: Any = yaml.safe_load(f) or {}

    if not isinstance(profile, dict):
        raise ValueError(f"Import profile must be a mapping: {config_path}")

    return Settings(**profile)
