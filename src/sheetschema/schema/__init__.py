"""Typed table schemas built from raw tables."""

from sheetschema.schema.builder import build_schema
from sheetschema.schema.models import ColumnSchema, GenerationOptions, TableSchema
from sheetschema.schema.naming import (
    sanitize_class_name,
    sanitize_field_name,
    sanitize_file_name,
)

__all__ = [
    "build_schema",
    "ColumnSchema",
    "GenerationOptions",
    "TableSchema",
    "sanitize_class_name",
    "sanitize_field_name",
    "sanitize_file_name",
]
