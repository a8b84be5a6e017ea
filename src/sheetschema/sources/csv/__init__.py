"""Tabular text parsing.

The file-backed source (CSVSource) lives in sources.csv.loader and is
imported from there directly.
"""

from sheetschema.sources.csv.models import ParserConfig, RawTable
from sheetschema.sources.csv.parser import detect_delimiter, parse_table, split_records

__all__ = [
    "ParserConfig",
    "RawTable",
    "detect_delimiter",
    "parse_table",
    "split_records",
]
