"""Analysis modules for imported tables.

This package contains modules for:
- typing: Type inference, type hints and value conversion
- relationships: Foreign-key dependency ordering and cross-references
"""
