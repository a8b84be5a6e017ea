"""Base models and types used across all modules.

This module contains the fundamental types that don't belong to any specific
component (parsing, schema building, dependency resolution).
"""

from __future__ import annotations

from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class Result(BaseModel, Generic[T]):
    """Result type for operations that can fail.

    Use this instead of exceptions for expected failures.
    Exceptions are reserved for unexpected/programming errors.
    """

    success: bool
    value: T | None = None
    error: str | None = None
    warnings: list[str] = Field(default_factory=list)

    @classmethod
    def ok(cls, value: T, warnings: list[str] | None = None) -> Result[T]:
        """Create a successful result."""
        return cls(success=True, value=value, warnings=warnings or [])

    @classmethod
    def fail(cls, error: str) -> Result[T]:
        """Create a failed result."""
        return cls(success=False, error=error)

    def unwrap(self) -> T:
        """Get the value or raise if failed."""
        if not self.success:
            raise ValueError(f"Result failed: {self.error}")
        assert self.value is not None
        return self.value


# === Enums ===


class ResolvedType(str, Enum):
    """Closed set of column types a schema can resolve to."""

    INT = "int"
    FLOAT = "float"
    DOUBLE = "double"
    LONG = "long"
    BOOL = "bool"
    STRING = "string"
    ENUM = "enum"
    VECTOR2 = "vector2"
    VECTOR3 = "vector3"
    COLOR = "color"
    SPRITE = "sprite"
    PREFAB = "prefab"
    ASSET = "asset"
    INT_ARRAY = "int[]"
    FLOAT_ARRAY = "float[]"
    STRING_ARRAY = "string[]"
    BOOL_ARRAY = "bool[]"

    @property
    def is_array(self) -> bool:
        return self in _ARRAY_ELEMENT_TYPES

    @property
    def element_type(self) -> ResolvedType:
        """Element type of an array type, or the type itself for scalars."""
        return _ARRAY_ELEMENT_TYPES.get(self, self)


_ARRAY_ELEMENT_TYPES = {
    ResolvedType.INT_ARRAY: ResolvedType.INT,
    ResolvedType.FLOAT_ARRAY: ResolvedType.FLOAT,
    ResolvedType.STRING_ARRAY: ResolvedType.STRING,
    ResolvedType.BOOL_ARRAY: ResolvedType.BOOL,
}


class WarningLevel(str, Enum):
    """Severity of a validation warning."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


# === Warnings ===


class ValidationWarning(BaseModel):
    """A non-fatal problem found while importing a table.

    Warnings are data: every component returns them as part of its result
    and callers merge the lists. They are never removed once recorded.
    """

    level: WarningLevel = WarningLevel.WARNING
    message: str
    table: str | None = None
    column: str | None = None
    row: int = -1  # -1 if not row-specific

    def __str__(self) -> str:
        location = ".".join(part for part in (self.table, self.column) if part)
        if self.row >= 0:
            location = f"{location}[row {self.row}]" if location else f"row {self.row}"
        prefix = f"[{self.level.value}]"
        return f"{prefix} {location}: {self.message}" if location else f"{prefix} {self.message}"
