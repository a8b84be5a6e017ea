"""Core models: ONLY truly shared base types.

Domain models live in their respective packages:
- sources/csv/models.py              → Parser configuration and raw tables
- schema/models.py                   → Column and table schemas
- analysis/relationships/models.py   → Dependency resolution results

Import domain models directly from their packages:
    from sheetschema.sources.csv.models import RawTable
    from sheetschema.schema.models import TableSchema
"""

from sheetschema.core.models.base import (
    ResolvedType,
    Result,
    ValidationWarning,
    WarningLevel,
)

__all__ = [
    "Result",
    "ResolvedType",
    "ValidationWarning",
    "WarningLevel",
]
