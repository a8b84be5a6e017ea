"""Conversion of raw cell strings into typed values.

Every ResolvedType has exactly one conversion and one default value; both
are exhaustive matches over the enum, so adding a type without handling it
fails type checking. Blank cells convert to the type's default. Cells that
cannot be converted raise ConversionError; convert_rows() turns those into
row-level warnings and substitutes the default.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, assert_never

from sheetschema.analysis.typing.inference import is_float, is_int
from sheetschema.core.models.base import ResolvedType, ValidationWarning, WarningLevel

if TYPE_CHECKING:
    from sheetschema.schema.models import TableSchema

COLOR_BYTE_MAX = 255.0
WHITE = (1.0, 1.0, 1.0, 1.0)

_TRUE_TOKENS = frozenset({"true", "yes", "1"})
_FALSE_TOKENS = frozenset({"false", "no", "0"})


class ConversionError(ValueError):
    """A cell value cannot be converted to its column type."""

    def __init__(self, value: str, resolved_type: ResolvedType):
        super().__init__(f"Cannot convert '{value}' to {resolved_type.value}")
        self.value = value
        self.resolved_type = resolved_type


def default_value(resolved_type: ResolvedType, enum_values: list[str] | None = None) -> Any:
    """Value used for blank or unconvertible cells."""
    match resolved_type:
        case ResolvedType.INT | ResolvedType.LONG:
            return 0
        case ResolvedType.FLOAT | ResolvedType.DOUBLE:
            return 0.0
        case ResolvedType.BOOL:
            return False
        case ResolvedType.STRING:
            return ""
        case ResolvedType.ENUM:
            return enum_values[0] if enum_values else None
        case ResolvedType.VECTOR2:
            return (0.0, 0.0)
        case ResolvedType.VECTOR3:
            return (0.0, 0.0, 0.0)
        case ResolvedType.COLOR:
            return WHITE
        case ResolvedType.SPRITE | ResolvedType.PREFAB | ResolvedType.ASSET:
            return None
        case (
            ResolvedType.INT_ARRAY
            | ResolvedType.FLOAT_ARRAY
            | ResolvedType.STRING_ARRAY
            | ResolvedType.BOOL_ARRAY
        ):
            return []
        case _:
            assert_never(resolved_type)


def convert_value(
    raw: str,
    resolved_type: ResolvedType,
    *,
    enum_values: list[str] | None = None,
    array_delimiter: str = ";",
    null_token: str = "null",
) -> Any:
    """Convert one cell to the Python value for its column type.

    Args:
        raw: Raw cell string
        resolved_type: Column type
        enum_values: Declared literals for ENUM columns
        array_delimiter: Separator between array elements
        null_token: STRING cells equal to this (case-insensitive) become None

    Returns:
        int, float, bool, str, tuple, list or None depending on the type

    Raises:
        ConversionError: If a non-blank value does not fit the type
    """
    value = raw.strip()
    if not value and resolved_type != ResolvedType.STRING and not resolved_type.is_array:
        return default_value(resolved_type, enum_values)

    match resolved_type:
        case ResolvedType.STRING:
            if null_token and raw.lower() == null_token.lower():
                return None
            return raw
        case ResolvedType.INT | ResolvedType.LONG:
            if not is_int(value):
                raise ConversionError(raw, resolved_type)
            return int(value)
        case ResolvedType.FLOAT | ResolvedType.DOUBLE:
            return _to_float(value, resolved_type)
        case ResolvedType.BOOL:
            return _to_bool(value)
        case ResolvedType.ENUM:
            return _to_enum(value, enum_values)
        case ResolvedType.VECTOR2:
            return _to_vector(value, 2, resolved_type)
        case ResolvedType.VECTOR3:
            return _to_vector(value, 3, resolved_type)
        case ResolvedType.COLOR:
            return _to_color(value)
        case ResolvedType.SPRITE | ResolvedType.PREFAB | ResolvedType.ASSET:
            # Asset paths are resolved to objects by the materialization tier
            return value
        case (
            ResolvedType.INT_ARRAY
            | ResolvedType.FLOAT_ARRAY
            | ResolvedType.STRING_ARRAY
            | ResolvedType.BOOL_ARRAY
        ):
            return _to_array(raw, resolved_type, array_delimiter, null_token)
        case _:
            assert_never(resolved_type)


def convert_rows(
    schema: TableSchema,
    *,
    array_delimiter: str = ";",
    null_token: str = "null",
) -> tuple[list[dict[str, Any]], list[ValidationWarning]]:
    """Convert every row of a schema into typed values.

    Skipped columns are left out. A failed conversion uses the column's
    default value and records a row-specific warning.

    Returns:
        Tuple of (typed rows keyed by field name, conversion warnings)
    """
    columns = [c for c in schema.columns if not c.is_skipped]
    typed_rows: list[dict[str, Any]] = []
    warnings: list[ValidationWarning] = []

    for row_index, row in enumerate(schema.rows):
        typed: dict[str, Any] = {}
        for column in columns:
            raw = row.get(column.field_name, "")
            try:
                typed[column.field_name] = convert_value(
                    raw,
                    column.resolved_type,
                    enum_values=column.enum_values,
                    array_delimiter=array_delimiter,
                    null_token=null_token,
                )
            except ConversionError as e:
                fallback = default_value(column.resolved_type, column.enum_values)
                typed[column.field_name] = fallback
                warnings.append(
                    ValidationWarning(
                        level=WarningLevel.WARNING,
                        message=f"{e}. Using default: {fallback!r}",
                        table=schema.source_table_name,
                        column=column.original_header,
                        row=row_index,
                    )
                )
        typed_rows.append(typed)

    return typed_rows, warnings


def _to_float(value: str, resolved_type: ResolvedType) -> float:
    if not is_float(value):
        raise ConversionError(value, resolved_type)
    return float(value)


def _to_bool(value: str) -> bool:
    lower = value.lower()
    if lower in _TRUE_TOKENS:
        return True
    if lower in _FALSE_TOKENS:
        return False
    raise ConversionError(value, ResolvedType.BOOL)


def _to_enum(value: str, enum_values: list[str] | None) -> str | None:
    if not enum_values:
        raise ConversionError(value, ResolvedType.ENUM)
    for literal in enum_values:
        if literal.lower() == value.lower():
            return literal
    raise ConversionError(value, ResolvedType.ENUM)


def _to_vector(value: str, size: int, resolved_type: ResolvedType) -> tuple[float, ...]:
    parts = [p.strip() for p in value.strip("()").split(",")]
    if len(parts) < size:
        raise ConversionError(value, resolved_type)
    return tuple(_to_float(p, resolved_type) for p in parts[:size])


def _to_color(value: str) -> tuple[float, float, float, float]:
    if value.startswith("#"):
        return _hex_color(value)

    parts = [p.strip() for p in value.strip("()").split(",")]
    if len(parts) < 3:
        raise ConversionError(value, ResolvedType.COLOR)

    components = [_normalize_component(_to_float(p, ResolvedType.COLOR)) for p in parts[:4]]
    if len(components) == 3:
        components.append(1.0)
    r, g, b, a = components
    return (r, g, b, a)


def _hex_color(value: str) -> tuple[float, float, float, float]:
    digits = value[1:]
    if len(digits) in (3, 4):
        digits = "".join(ch * 2 for ch in digits)
    if len(digits) == 6:
        digits += "ff"
    if len(digits) != 8:
        raise ConversionError(value, ResolvedType.COLOR)
    try:
        channels = [int(digits[i : i + 2], 16) / COLOR_BYTE_MAX for i in range(0, 8, 2)]
    except ValueError as e:
        raise ConversionError(value, ResolvedType.COLOR) from e
    r, g, b, a = channels
    return (r, g, b, a)


def _normalize_component(component: float) -> float:
    return component / COLOR_BYTE_MAX if component > 1.0 else component


def _to_array(
    raw: str,
    resolved_type: ResolvedType,
    array_delimiter: str,
    null_token: str,
) -> list[Any]:
    if not raw.strip():
        return []
    element_type = resolved_type.element_type
    return [
        convert_value(part.strip(), element_type, null_token=null_token)
        for part in raw.split(array_delimiter)
    ]
