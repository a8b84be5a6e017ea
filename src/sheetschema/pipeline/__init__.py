"""Import pipeline: raw table texts to typed, ordered tables."""

from sheetschema.pipeline.runner import (
    ImportedTable,
    ImportResult,
    TableSource,
    build_table,
    run_import,
)

__all__ = [
    "ImportedTable",
    "ImportResult",
    "TableSource",
    "build_table",
    "run_import",
]
