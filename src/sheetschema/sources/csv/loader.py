"""CSV file source - validation and schema extraction for one file.

CSV files are untyped sources: all cells are text until the schema
builder resolves column types from type hints or values.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from sheetschema.core.config import Settings, get_settings
from sheetschema.core.logging import get_logger
from sheetschema.core.models.base import Result, ValidationWarning, WarningLevel
from sheetschema.schema.builder import build_schema
from sheetschema.schema.models import GenerationOptions, TableSchema
from sheetschema.sources.csv.models import ParserConfig
from sheetschema.sources.csv.parser import parse_table

logger = get_logger(__name__)

SUPPORTED_EXTENSIONS = (".csv", ".txt")


class SourceStatus(str, Enum):
    """Validation state of a source."""

    NOT_LOADED = "not_loaded"
    VALIDATING = "validating"
    VALID = "valid"
    INVALID_SOURCE = "invalid_source"
    INVALID_FORMAT = "invalid_format"
    INVALID_CONTENT = "invalid_content"
    INVALID_SCHEMA = "invalid_schema"
    NETWORK_ERROR = "network_error"
    ACCESS_DENIED = "access_denied"
    NOT_FOUND = "not_found"


class SourceValidationResult(BaseModel):
    """Outcome of validating a source before import."""

    is_valid: bool = False
    status: SourceStatus = SourceStatus.NOT_LOADED
    error_message: str | None = None
    warnings: list[ValidationWarning] = Field(default_factory=list)
    table_count: int = 0
    total_row_count: int = 0
    total_column_count: int = 0
    table_names: list[str] = Field(default_factory=list)

    @classmethod
    def invalid(cls, status: SourceStatus, error_message: str) -> SourceValidationResult:
        return cls(is_valid=False, status=status, error_message=error_message)


class CSVSource:
    """A CSV file on disk.

    The table name is the file stem. Parsing honours the configured
    delimiter, comment prefix and header layout.
    """

    def __init__(self, path: Path | str, settings: Settings | None = None):
        self.path = Path(path)
        self.settings = settings or get_settings()
        self._cached_schemas: list[TableSchema] | None = None

    @property
    def table_name(self) -> str:
        return self.path.stem

    def validate_quick(self) -> SourceValidationResult:
        """Check the file exists, is readable and is not empty."""
        if not self.path.is_file():
            return SourceValidationResult.invalid(
                SourceStatus.INVALID_SOURCE, f"File not found: {self.path}"
            )

        warnings: list[ValidationWarning] = []
        extension = self.path.suffix.lower()
        if extension not in SUPPORTED_EXTENSIONS:
            warnings.append(
                ValidationWarning(
                    level=WarningLevel.WARNING,
                    message=(
                        f"Unexpected file extension '{extension}'. Expected .csv or .txt. "
                        f"Attempting to read as CSV anyway."
                    ),
                    table=self.table_name,
                )
            )

        try:
            with open(self.path, "rb") as f:
                if not f.read(1):
                    return SourceValidationResult.invalid(
                        SourceStatus.INVALID_CONTENT, "File is empty."
                    )
        except PermissionError as e:
            return SourceValidationResult.invalid(
                SourceStatus.ACCESS_DENIED, f"Permission denied when reading file. {e}"
            )
        except OSError as e:
            return SourceValidationResult.invalid(
                SourceStatus.INVALID_SOURCE, f"Cannot read file. {e}"
            )

        return SourceValidationResult(is_valid=True, status=SourceStatus.VALID, warnings=warnings)

    def validate_full(self) -> SourceValidationResult:
        """Parse the file and build its schema, reporting counts and warnings."""
        quick = self.validate_quick()
        if not quick.is_valid:
            return quick

        text_result = self.read_text()
        if not text_result.success:
            return SourceValidationResult.invalid(
                SourceStatus.INVALID_FORMAT, text_result.error or "Cannot decode file"
            )

        raw = parse_table(text_result.unwrap(), ParserConfig.from_settings(self.settings))
        if raw.is_empty:
            return SourceValidationResult.invalid(
                SourceStatus.INVALID_CONTENT,
                "CSV file has no headers. Ensure the file has at least a header row.",
            )

        schema = build_schema(raw, self._generation_options())
        self._cached_schemas = [schema]

        result = SourceValidationResult(
            is_valid=True,
            status=SourceStatus.VALID,
            warnings=quick.warnings + schema.warnings,
            table_count=1,
            total_row_count=len(raw.data_rows),
            total_column_count=raw.column_count,
            table_names=[schema.class_name],
        )
        logger.info(
            "source_validated",
            path=str(self.path),
            rows=result.total_row_count,
            columns=result.total_column_count,
            warnings=len(result.warnings),
        )
        return result

    def extract_schemas(self) -> Result[list[TableSchema]]:
        """Parse and build the file's schema (cached after the first call)."""
        if self._cached_schemas is not None:
            return Result.ok(self._cached_schemas)

        text_result = self.read_text()
        if not text_result.success:
            return Result.fail(text_result.error or "Cannot read file")

        raw = parse_table(text_result.unwrap(), ParserConfig.from_settings(self.settings))
        schema = build_schema(raw, self._generation_options())
        self._cached_schemas = [schema]
        return Result.ok(self._cached_schemas, warnings=[str(w) for w in schema.warnings])

    def read_text(self) -> Result[str]:
        """Read the file as UTF-8 text."""
        try:
            return Result.ok(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return Result.fail(f"CSV file not found: {self.path}")
        except UnicodeDecodeError as e:
            return Result.fail(f"CSV file is not valid UTF-8: {e}")
        except OSError as e:
            return Result.fail(f"Cannot read CSV file: {e}")

    def _generation_options(self) -> GenerationOptions:
        return GenerationOptions.from_settings(self.settings, table_name=self.table_name)
