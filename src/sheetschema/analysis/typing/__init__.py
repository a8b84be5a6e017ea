"""Column typing: type hints, value-based inference and value conversion."""

from sheetschema.analysis.typing.converters import (
    ConversionError,
    convert_rows,
    convert_value,
    default_value,
)
from sheetschema.analysis.typing.inference import (
    BOOL_TOKENS,
    TYPE_HINTS,
    infer_type,
    parse_type_hint,
)

__all__ = [
    "BOOL_TOKENS",
    "TYPE_HINTS",
    "ConversionError",
    "convert_rows",
    "convert_value",
    "default_value",
    "infer_type",
    "parse_type_hint",
]
