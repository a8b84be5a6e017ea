"""Tabular text models.

Defines the parser configuration and the raw table it produces."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from sheetschema.core.config import Settings

AUTO_DELIMITER = "auto"

DIRECTIVE_PREFIXES: tuple[str, ...] = (
    "#class:",
    "#database:",
    "#namespace:",
)

LINE_COMMENT_PREFIX = "//"


class ParserConfig(BaseModel):
    """Immutable configuration for one parse call."""

    model_config = ConfigDict(frozen=True)

    delimiter: str = Field(default=AUTO_DELIMITER, min_length=1)
    comment_prefix: str = "#"
    header_row_count: int = Field(default=1, ge=1, le=3)
    directive_prefixes: tuple[str, ...] = DIRECTIVE_PREFIXES

    @property
    def comment_prefixes(self) -> tuple[str, ...]:
        """Full-line comment markers, always including '//'."""
        if self.comment_prefix and self.comment_prefix != LINE_COMMENT_PREFIX:
            return (self.comment_prefix, LINE_COMMENT_PREFIX)
        return (LINE_COMMENT_PREFIX,)

    @classmethod
    def from_settings(cls, settings: Settings) -> ParserConfig:
        return cls(
            delimiter=settings.delimiter,
            comment_prefix=settings.comment_prefix,
            header_row_count=settings.header_row_count,
        )


class RawTable(BaseModel):
    """Parsed but untyped table.

    Every row in data_rows and type_hints has exactly len(headers) cells.
    The flags row has at least len(headers) cells. Short rows are padded,
    long rows are kept whole: enum literals may run past the last header.
    """

    model_config = ConfigDict(frozen=True)

    directives: list[str] = Field(default_factory=list)
    headers: list[str] = Field(default_factory=list)
    type_hints: list[str] | None = None
    flags: list[str] | None = None
    data_rows: list[list[str]] = Field(default_factory=list)

    @property
    def column_count(self) -> int:
        return len(self.headers)

    @property
    def is_empty(self) -> bool:
        return not self.headers
