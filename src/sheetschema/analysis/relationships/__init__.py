"""Foreign-key relationships between tables of one import batch.

- resolve_dependencies: creation order (Kahn's sort) with cycle detection
- CrossReferenceResolver: key -> handle lookup for materialized tables
"""

from sheetschema.analysis.relationships.dependencies import resolve_dependencies
from sheetschema.analysis.relationships.models import DependencyResolveResult
from sheetschema.analysis.relationships.references import CrossReferenceResolver

__all__ = [
    "resolve_dependencies",
    "CrossReferenceResolver",
    "DependencyResolveResult",
]
