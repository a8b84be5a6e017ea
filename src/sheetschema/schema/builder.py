"""Schema building from raw tables.

Turns a RawTable into a TableSchema:
1. Directives set class, database and namespace names
2. Headers are normalized (blank -> column_{i}, duplicates -> name_2, ...)
3. Each column's type comes from its type hint, or is inferred from values
4. The flags row sets per-column markers and attributes, or enum literals
5. Every data row becomes a map from field name to raw string

Building never raises on malformed input: problems become warnings on the
returned schema.
"""

from __future__ import annotations

from sheetschema.analysis.typing.inference import infer_type, parse_type_hint
from sheetschema.core.logging import get_logger
from sheetschema.core.models.base import ResolvedType, ValidationWarning, WarningLevel
from sheetschema.schema.models import (
    DEFAULT_CLASS_NAME,
    ColumnSchema,
    GenerationOptions,
    TableSchema,
)
from sheetschema.schema.naming import sanitize_field_name
from sheetschema.sources.csv.models import RawTable

logger = get_logger(__name__)

CLASS_DIRECTIVE = "#class:"
DATABASE_DIRECTIVE = "#database:"
NAMESPACE_DIRECTIVE = "#namespace:"

FLAG_SEPARATOR = "|"
BOOLEAN_FLAGS = {
    "key": "is_key",
    "name": "is_name",
    "optional": "is_optional",
    "skip": "is_skipped",
    "list": "is_list",
}
ATTRIBUTE_FLAGS = {"hide"}
PARAMETRIZED_FLAGS = ("header", "tooltip", "range", "multiline")


def build_schema(raw: RawTable, options: GenerationOptions | None = None) -> TableSchema:
    """Build a typed table schema from a parsed raw table.

    Args:
        raw: Parser output
        options: Naming defaults, field-name sanitizing and header layout

    Returns:
        TableSchema with columns in source order, one row map per data row
        and any warnings raised while building
    """
    options = options or GenerationOptions()
    warnings: list[ValidationWarning] = []

    class_name, database_name, namespace_name = _apply_directives(raw.directives, options)
    table_name = options.table_name or class_name

    if not raw.headers:
        warnings.append(
            ValidationWarning(
                level=WarningLevel.WARNING,
                message="Table has no header row; no columns were created",
                table=table_name,
            )
        )
        return TableSchema(
            class_name=class_name,
            database_name=database_name,
            namespace_name=namespace_name,
            source_table_name=table_name,
            warnings=warnings,
        )

    headers = _normalize_headers(raw.headers, table_name, warnings)
    field_names = _field_names(headers, options.sanitize_field_names, table_name, warnings)

    columns: list[ColumnSchema] = []
    for index, (header, field_name) in enumerate(zip(headers, field_names, strict=True)):
        resolved_type = _resolve_type(raw, index, header, table_name, warnings)
        columns.append(
            _build_column(raw, index, header, field_name, resolved_type, table_name, warnings)
        )

    rows = [
        {
            field_name: (data_row[index] if index < len(data_row) else "")
            for index, field_name in enumerate(field_names)
        }
        for data_row in raw.data_rows
    ]

    if not rows:
        warnings.append(
            ValidationWarning(
                level=WarningLevel.INFO,
                message="Table has no data rows",
                table=table_name,
            )
        )

    schema = TableSchema(
        class_name=class_name,
        database_name=database_name,
        namespace_name=namespace_name,
        source_table_name=table_name,
        columns=columns,
        rows=rows,
        warnings=warnings,
    )

    logger.debug(
        "schema_built",
        table=table_name,
        columns=len(columns),
        rows=len(rows),
        warnings=len(warnings),
    )
    return schema


def _apply_directives(
    directives: list[str],
    options: GenerationOptions,
) -> tuple[str, str, str | None]:
    """Resolve class, database and namespace names; later directives win."""
    class_name = options.class_name
    database_name = options.database_name
    namespace_name = options.namespace_name

    for directive in directives:
        line = directive.strip()
        if line.startswith(CLASS_DIRECTIVE):
            value = line[len(CLASS_DIRECTIVE) :].strip()
            if value:
                class_name = value
        elif line.startswith(DATABASE_DIRECTIVE):
            value = line[len(DATABASE_DIRECTIVE) :].strip()
            if value:
                database_name = value
        elif line.startswith(NAMESPACE_DIRECTIVE):
            value = line[len(NAMESPACE_DIRECTIVE) :].strip()
            if value:
                namespace_name = value

    class_name = class_name or DEFAULT_CLASS_NAME
    database_name = database_name or f"{class_name}Database"
    return class_name, database_name, namespace_name


def _normalize_headers(
    raw_headers: list[str],
    table_name: str,
    warnings: list[ValidationWarning],
) -> list[str]:
    """Fill blank headers and make duplicates unique; other headers keep their whitespace."""
    seen: set[str] = set()
    headers: list[str] = []

    for index, raw_header in enumerate(raw_headers):
        header = raw_header
        if not header.strip():
            header = f"column_{index}"
            warnings.append(
                ValidationWarning(
                    level=WarningLevel.WARNING,
                    message=f"Empty header at column {index}, using '{header}'",
                    table=table_name,
                    column=header,
                )
            )

        if header in seen:
            unique = _unique_name(header, seen)
            warnings.append(
                ValidationWarning(
                    level=WarningLevel.WARNING,
                    message=f"Duplicate header '{header}', renamed to '{unique}'",
                    table=table_name,
                    column=unique,
                )
            )
            header = unique

        seen.add(header)
        headers.append(header)

    return headers


def _field_names(
    headers: list[str],
    sanitize: bool,
    table_name: str,
    warnings: list[ValidationWarning],
) -> list[str]:
    """Derive field names, keeping them unique after sanitizing."""
    if not sanitize:
        return list(headers)

    seen: set[str] = set()
    names: list[str] = []
    for header in headers:
        name = sanitize_field_name(header)
        if name in seen:
            unique = _unique_name(name, seen)
            warnings.append(
                ValidationWarning(
                    level=WarningLevel.WARNING,
                    message=(
                        f"Header '{header}' sanitizes to existing field '{name}', "
                        f"renamed to '{unique}'"
                    ),
                    table=table_name,
                    column=header,
                )
            )
            name = unique
        seen.add(name)
        names.append(name)
    return names


def _unique_name(name: str, taken: set[str]) -> str:
    count = 2
    while f"{name}_{count}" in taken:
        count += 1
    return f"{name}_{count}"


def _resolve_type(
    raw: RawTable,
    index: int,
    header: str,
    table_name: str,
    warnings: list[ValidationWarning],
) -> ResolvedType:
    hint = raw.type_hints[index] if raw.type_hints and index < len(raw.type_hints) else ""

    if hint.strip():
        resolved = parse_type_hint(hint)
        if resolved is not None:
            return resolved
        warnings.append(
            ValidationWarning(
                level=WarningLevel.WARNING,
                message=f"Unrecognized type hint '{hint.strip()}', defaulting to string",
                table=table_name,
                column=header,
            )
        )
        return ResolvedType.STRING

    return infer_type(row[index] for row in raw.data_rows if index < len(row))


def _build_column(
    raw: RawTable,
    index: int,
    header: str,
    field_name: str,
    resolved_type: ResolvedType,
    table_name: str,
    warnings: list[ValidationWarning],
) -> ColumnSchema:
    flags_row = raw.flags or []
    cell = flags_row[index] if index < len(flags_row) else ""

    if resolved_type == ResolvedType.ENUM:
        enum_values: list[str] = []
        if cell.strip():
            # Literals run from this column to the end of the flags row
            enum_values = [c.strip() for c in flags_row[index:] if c.strip()]
        else:
            warnings.append(
                ValidationWarning(
                    level=WarningLevel.WARNING,
                    message="Enum column has no values in the flags row",
                    table=table_name,
                    column=header,
                )
            )
        return ColumnSchema(
            field_name=field_name,
            original_header=header,
            resolved_type=resolved_type,
            enum_values=enum_values,
        )

    column = ColumnSchema(
        field_name=field_name,
        original_header=header,
        resolved_type=resolved_type,
    )
    if cell.strip():
        _apply_flags(cell, column)
    return column


def _apply_flags(cell: str, column: ColumnSchema) -> None:
    """Apply '|'-separated flag tokens to a column.

    Unrecognized tokens are ignored without a warning.
    """
    for token in (t.strip() for t in cell.split(FLAG_SEPARATOR)):
        if not token:
            continue
        lower = token.lower()

        if lower in BOOLEAN_FLAGS:
            setattr(column, BOOLEAN_FLAGS[lower], True)
            continue
        if lower in ATTRIBUTE_FLAGS:
            column.attributes[lower] = ""
            continue

        name, value = _split_parametrized(token)
        if name == "range":
            bounds = value.split(";") if value is not None else []
            if len(bounds) == 2:
                column.attributes["range"] = f"{bounds[0].strip()},{bounds[1].strip()}"
                continue
        elif name in PARAMETRIZED_FLAGS and value is not None:
            column.attributes[name] = value
            continue

        logger.debug("flag_ignored", column=column.original_header, token=token)


def _split_parametrized(token: str) -> tuple[str | None, str | None]:
    """Split 'name(value)' into its parts; (None, None) for other shapes."""
    open_paren = token.find("(")
    if open_paren <= 0 or not token.endswith(")"):
        return None, None
    return token[:open_paren].strip().lower(), token[open_paren + 1 : -1]
