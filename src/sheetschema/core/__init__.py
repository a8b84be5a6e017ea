"""Core module - configuration, logging, and shared models."""

from sheetschema.core.config import Settings, get_settings, load_settings
from sheetschema.core.models.base import (
    ResolvedType,
    Result,
    ValidationWarning,
    WarningLevel,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    "load_settings",
    # Models
    "ResolvedType",
    "Result",
    "ValidationWarning",
    "WarningLevel",
]
