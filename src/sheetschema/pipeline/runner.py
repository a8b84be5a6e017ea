"""Import pipeline runner.

Runs one import batch end to end:
    parse -> build schema -> resolve dependencies -> convert rows

The batch is all-or-nothing on dependency cycles: if the tables cannot be
ordered, nothing is returned for materialization. All other problems are
warnings collected on the result.

Usage:
    from sheetschema.pipeline import TableSource, run_import

    result = run_import([TableSource(name="items", text=items_csv)])
    for table in result.tables:
        print(table.schema.class_name, len(table.typed_rows))
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any
from uuid import uuid4

from sheetschema.analysis.relationships.dependencies import resolve_dependencies
from sheetschema.analysis.typing.converters import convert_rows
from sheetschema.core.config import Settings, get_settings
from sheetschema.core.logging import ImportMetrics, get_logger, log_context
from sheetschema.core.models.base import ValidationWarning
from sheetschema.schema.builder import build_schema
from sheetschema.schema.models import GenerationOptions, TableSchema
from sheetschema.sources.csv.models import ParserConfig
from sheetschema.sources.csv.parser import parse_table

logger = get_logger(__name__)


@dataclass
class TableSource:
    """Raw text of one table, already fetched by the caller."""

    name: str
    text: str


@dataclass
class ImportedTable:
    """A table ready for materialization."""

    schema: TableSchema
    typed_rows: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class ImportResult:
    """Result of an import batch."""

    success: bool
    import_id: str
    tables: list[ImportedTable] = field(default_factory=list)
    warnings: list[ValidationWarning] = field(default_factory=list)
    error: str | None = None
    duration_seconds: float = 0.0
    metrics: dict[str, Any] = field(default_factory=dict)

    @property
    def creation_order(self) -> list[str]:
        return [t.schema.source_table_name for t in self.tables]


def build_table(source: TableSource, settings: Settings) -> TableSchema:
    """Parse and build one table from its raw text."""
    raw = parse_table(source.text, ParserConfig.from_settings(settings))
    logger.debug(
        "table_parsed",
        table=source.name,
        directives=len(raw.directives),
        columns=raw.column_count,
        rows=len(raw.data_rows),
    )
    return build_schema(raw, GenerationOptions.from_settings(settings, table_name=source.name))


def run_import(
    sources: list[TableSource | TableSchema],
    settings: Settings | None = None,
) -> ImportResult:
    """Run an import batch.

    Args:
        sources: Raw table texts, or schemas built elsewhere (for example
            from a relational source with foreign keys already populated)
        settings: Parsing and conversion settings (defaults to environment)

    Returns:
        ImportResult with tables in safe creation order, or the cycle error
    """
    settings = settings or get_settings()
    import_id = str(uuid4())
    metrics = ImportMetrics(import_id=import_id)
    start_time = time.time()
    warnings: list[ValidationWarning] = []

    with log_context(import_id=import_id):
        logger.info("import_started", tables=len(sources))

        schemas: list[TableSchema] = []
        for source in sources:
            if isinstance(source, TableSource):
                step_start = time.time()
                schema = build_table(source, settings)
                metrics.record_timing("build", time.time() - step_start)
                logger.info(
                    "schema_built",
                    table=schema.source_table_name,
                    columns=len(schema.columns),
                    rows=len(schema.rows),
                )
            else:
                schema = source
            warnings.extend(schema.warnings)
            schemas.append(schema)

        step_start = time.time()
        resolved = resolve_dependencies(schemas)
        metrics.record_timing("resolve", time.time() - step_start)
        warnings.extend(resolved.warnings)

        if not resolved.success:
            metrics.warnings_emitted = len(warnings)
            logger.error("import_failed", error=resolved.error_message)
            return ImportResult(
                success=False,
                import_id=import_id,
                warnings=warnings,
                error=resolved.error_message,
                duration_seconds=time.time() - start_time,
                metrics=metrics.finish().to_dict(),
            )

        tables: list[ImportedTable] = []
        step_start = time.time()
        for schema in resolved.ordered_schemas:
            typed_rows, conversion_warnings = convert_rows(
                schema,
                array_delimiter=settings.array_delimiter,
                null_token=settings.null_token,
            )
            warnings.extend(conversion_warnings)
            tables.append(ImportedTable(schema=schema, typed_rows=typed_rows))

            metrics.tables_processed += 1
            metrics.columns_processed += len(schema.columns)
            metrics.rows_processed += len(schema.rows)
        metrics.record_timing("convert", time.time() - step_start)
        metrics.warnings_emitted = len(warnings)

        logger.info(
            "dependencies_resolved",
            order=[t.schema.source_table_name for t in tables],
            warnings=len(warnings),
        )

        return ImportResult(
            success=True,
            import_id=import_id,
            tables=tables,
            warnings=warnings,
            duration_seconds=time.time() - start_time,
            metrics=metrics.finish().to_dict(),
        )
