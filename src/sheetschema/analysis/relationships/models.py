"""Dependency resolution models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from sheetschema.core.models.base import ValidationWarning
from sheetschema.schema.models import TableSchema


class DependencyResolveResult(BaseModel):
    """Outcome of ordering a batch of tables by their foreign keys.

    On success, ordered_schemas lists every table after the tables it
    references. On failure (a cycle), ordered_schemas is empty and
    error_message names the cycle. Warnings are kept in both cases.
    """

    success: bool
    ordered_schemas: list[TableSchema] = Field(default_factory=list)
    error_message: str | None = None
    warnings: list[ValidationWarning] = Field(default_factory=list)

    @classmethod
    def ok(
        cls,
        ordered_schemas: list[TableSchema],
        warnings: list[ValidationWarning] | None = None,
    ) -> DependencyResolveResult:
        return cls(success=True, ordered_schemas=ordered_schemas, warnings=warnings or [])

    @classmethod
    def fail(
        cls,
        error_message: str,
        warnings: list[ValidationWarning] | None = None,
    ) -> DependencyResolveResult:
        return cls(success=False, error_message=error_message, warnings=warnings or [])

    @property
    def table_names(self) -> list[str]:
        return [s.source_table_name for s in self.ordered_schemas]
