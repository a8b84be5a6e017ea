"""Column type resolution.

Two paths lead to a column's ResolvedType:
1. An explicit type hint from the second header row, looked up verbatim
2. Inference over the column's non-empty values

Inference tests every value against each rule in order (bool, int, float)
and the first rule that accepts ALL values wins. One non-conforming value
sends the column to the next rule; nothing is a partial match.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from sheetschema.core.models.base import ResolvedType

BOOL_TOKENS = frozenset({"true", "false", "yes", "no", "1", "0"})

_INT_RE = re.compile(r"^[+-]?\d+$")
_FLOAT_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")

# Case-sensitive, matched against the trimmed hint cell
TYPE_HINTS: dict[str, ResolvedType] = {t.value: t for t in ResolvedType}


def parse_type_hint(hint: str) -> ResolvedType | None:
    """Map a type hint cell to a ResolvedType.

    Returns:
        The matching type, or None when the hint is not in the vocabulary
    """
    return TYPE_HINTS.get(hint.strip())


def is_bool_token(value: str) -> bool:
    return value.strip().lower() in BOOL_TOKENS


def is_int(value: str) -> bool:
    return _INT_RE.match(value.strip()) is not None


def is_float(value: str) -> bool:
    return _FLOAT_RE.match(value.strip()) is not None


def infer_type(values: Iterable[str]) -> ResolvedType:
    """Infer a column type from its raw values.

    Blank values are ignored; a column with no non-blank values is STRING.

    Args:
        values: Raw cell values of one column

    Returns:
        BOOL, INT, FLOAT or STRING
    """
    non_empty = [v for v in values if v and v.strip()]
    if not non_empty:
        return ResolvedType.STRING

    if all(is_bool_token(v) for v in non_empty):
        return ResolvedType.BOOL
    if all(is_int(v) for v in non_empty):
        return ResolvedType.INT
    if all(is_float(v) for v in non_empty):
        return ResolvedType.FLOAT
    return ResolvedType.STRING
