"""sheetschema.

Turns spreadsheet exports into typed, cross-referenced table schemas.
"""

__version__ = "0.1.0"

from sheetschema.core.models.base import Result

__all__ = [
    "Result",
    "__version__",
]
