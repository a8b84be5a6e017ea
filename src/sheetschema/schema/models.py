"""Table schema models.

Models for:
- ColumnSchema: one typed column with its flags, attributes and foreign key
- TableSchema: columns, per-row string maps and build warnings
- GenerationOptions: naming defaults and header layout for schema building
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, Field, model_validator

from sheetschema.core.models.base import ResolvedType, ValidationWarning

if TYPE_CHECKING:
    from sheetschema.core.config import Settings

DEFAULT_CLASS_NAME = "GeneratedEntry"


class ColumnSchema(BaseModel):
    """A typed column.

    enum_values is set exactly when resolved_type is ENUM. Foreign-key
    fields are filled in by relational sources before dependency
    resolution; tabular text never declares them.
    """

    field_name: str
    original_header: str
    resolved_type: ResolvedType = ResolvedType.STRING

    is_key: bool = False
    is_name: bool = False
    is_optional: bool = False
    is_skipped: bool = False
    is_list: bool = False

    enum_values: list[str] | None = None
    attributes: dict[str, str] = Field(default_factory=dict)

    # Foreign key
    is_foreign_key: bool = False
    foreign_key_table: str | None = None
    foreign_key_column: str | None = None
    foreign_key_reference_type: str | None = None

    @model_validator(mode="after")
    def _enum_values_match_type(self) -> ColumnSchema:
        is_enum = self.resolved_type == ResolvedType.ENUM
        if is_enum and self.enum_values is None:
            raise ValueError(f"Enum column '{self.field_name}' requires enum_values")
        if not is_enum and self.enum_values is not None:
            raise ValueError(f"Column '{self.field_name}' is not an enum but has enum_values")
        return self

    def without_foreign_key(self) -> ColumnSchema:
        """Copy of this column demoted to a plain integer."""
        return self.model_copy(
            update={
                "is_foreign_key": False,
                "foreign_key_table": None,
                "foreign_key_column": None,
                "foreign_key_reference_type": None,
                "resolved_type": ResolvedType.INT,
                "enum_values": None,
            }
        )


class TableSchema(BaseModel):
    """A resolved table: typed columns plus the raw rows keyed by field name."""

    class_name: str = DEFAULT_CLASS_NAME
    database_name: str = f"{DEFAULT_CLASS_NAME}Database"
    namespace_name: str | None = None
    source_table_name: str = ""

    columns: list[ColumnSchema] = Field(default_factory=list)
    rows: list[dict[str, str]] = Field(default_factory=list)
    warnings: list[ValidationWarning] = Field(default_factory=list)

    @property
    def key_column(self) -> ColumnSchema | None:
        """First column flagged as key, if any."""
        return next((c for c in self.columns if c.is_key), None)

    @property
    def foreign_key_columns(self) -> list[ColumnSchema]:
        return [c for c in self.columns if c.is_foreign_key and c.foreign_key_table]

    def get_column(self, field_name: str) -> ColumnSchema | None:
        return next((c for c in self.columns if c.field_name == field_name), None)


class GenerationOptions(BaseModel):
    """Options for building a TableSchema from a RawTable."""

    sanitize_field_names: bool = True
    class_name: str | None = None
    database_name: str | None = None
    namespace_name: str | None = None
    header_row_count: int = Field(default=1, ge=1, le=3)
    # Name of the source table (file stem, sheet or relation name)
    table_name: str | None = None

    @classmethod
    def from_settings(cls, settings: Settings, table_name: str | None = None) -> GenerationOptions:
        return cls(
            sanitize_field_names=settings.sanitize_field_names,
            class_name=settings.default_class_name,
            database_name=settings.default_database_name,
            namespace_name=settings.default_namespace_name,
            header_row_count=settings.header_row_count,
            table_name=table_name,
        )
