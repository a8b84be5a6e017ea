"""Tolerant parser for spreadsheet-exported tabular text.

The parser turns raw text into a RawTable in three passes:
1. Prelude scan: collect naming directives, skip comments and blank lines
2. Delimiter detection (when configured as 'auto')
3. Record scanning: quoted fields, escaped quotes and multiline cells

It never raises on malformed input. Ragged rows are padded or truncated,
stray text after a closing quote is dropped, and an empty input yields an
empty table that still carries the captured directives.
"""

from __future__ import annotations

from sheetschema.core.logging import get_logger
from sheetschema.sources.csv.models import AUTO_DELIMITER, ParserConfig, RawTable

logger = get_logger(__name__)

BOM = "\ufeff"
QUOTE = '"'
DELIMITER_CANDIDATES = (",", ";", "\t")
DEFAULT_DELIMITER = ","
DELIMITER_SAMPLE_LINES = 5


def parse_table(text: str, config: ParserConfig | None = None) -> RawTable:
    """Parse tabular text into a RawTable.

    Args:
        text: Raw text, optionally starting with a byte-order mark
        config: Parser configuration (defaults: auto delimiter, '#' comments,
            one header row)

    Returns:
        RawTable with directives, headers, optional type hints and flags,
        and width-normalized data rows
    """
    config = config or ParserConfig()

    if not text:
        return RawTable()

    text = normalize_text(text)
    directives, data_text = split_prelude(text, config)

    if not data_text:
        return RawTable(directives=directives)

    delimiter = config.delimiter
    if delimiter == AUTO_DELIMITER:
        delimiter = detect_delimiter(data_text, config.comment_prefixes)
        logger.debug("delimiter_detected", delimiter=delimiter)

    records = split_records(data_text, delimiter, config.comment_prefixes)
    if not records:
        return RawTable(directives=directives)

    headers = records[0]
    column_count = len(headers)
    current = 1

    type_hints: list[str] | None = None
    if config.header_row_count >= 2 and len(records) > current:
        type_hints = _normalize_width(records[current], column_count)
        current += 1

    flags: list[str] | None = None
    if config.header_row_count >= 3 and len(records) > current:
        # Padded but never truncated: enum literals may extend past the last column
        flags = _pad_to_width(records[current], column_count)
        current += 1

    data_rows = [_normalize_width(record, column_count) for record in records[current:]]

    return RawTable(
        directives=directives,
        headers=headers,
        type_hints=type_hints,
        flags=flags,
        data_rows=data_rows,
    )


def normalize_text(text: str) -> str:
    """Strip a leading BOM and normalize line endings to '\\n'."""
    if text.startswith(BOM):
        text = text[1:]
    return text.replace("\r\n", "\n").replace("\r", "\n")


def split_prelude(text: str, config: ParserConfig) -> tuple[list[str], str]:
    """Separate prelude directives from the table data.

    Directive lines are captured verbatim anywhere in the prelude. Blank and
    comment lines are dropped. The prelude ends at the first other line,
    which starts the table data; directives after that point are data.

    Returns:
        Tuple of (directives, table data text)
    """
    directives: list[str] = []
    lines = text.split("\n")

    for index, line in enumerate(lines):
        trimmed = line.strip()
        if trimmed.startswith(config.directive_prefixes):
            directives.append(line)
        elif not trimmed or trimmed.startswith(config.comment_prefixes):
            continue
        else:
            return directives, "\n".join(lines[index:])

    return directives, ""


def detect_delimiter(text: str, comment_prefixes: tuple[str, ...] = ("#", "//")) -> str:
    """Pick the delimiter that splits the first lines into a constant width.

    Samples up to five non-blank, non-comment lines. A candidate qualifies
    when it yields the same field count on every sampled line and that count
    is greater than one. The highest field count wins; ties keep candidate
    order (',' then ';' then tab). Falls back to ','.
    """
    sample: list[str] = []
    for line in text.split("\n"):
        trimmed = line.strip()
        if not trimmed or trimmed.startswith(comment_prefixes):
            continue
        sample.append(line)
        if len(sample) >= DELIMITER_SAMPLE_LINES:
            break

    if not sample:
        return DEFAULT_DELIMITER

    best: str | None = None
    best_count = 0
    for candidate in DELIMITER_CANDIDATES:
        counts = {line.count(candidate) + 1 for line in sample}
        if len(counts) != 1:
            continue
        count = counts.pop()
        if count > 1 and count > best_count:
            best, best_count = candidate, count

    return best or DEFAULT_DELIMITER


def split_records(
    text: str,
    delimiter: str,
    comment_prefixes: tuple[str, ...] = ("#", "//"),
) -> list[list[str]]:
    """Split table data into logical records.

    A record normally spans one physical line, but a quoted field may carry
    embedded newlines and keep the record open across several lines.
    Blank lines and full-line comments between records are skipped. A
    comment marker is only recognized at the start of a line that is not
    inside an open quote.
    """
    records: list[list[str]] = []
    length = len(text)
    pos = 0

    while pos < length:
        line_end = _line_end(text, pos)
        trimmed = text[pos:line_end].strip()

        if not trimmed or trimmed.startswith(comment_prefixes):
            pos = line_end + 1
            continue

        record, pos = _read_record(text, pos, delimiter)
        records.append(record)

    return records


def _read_record(text: str, pos: int, delimiter: str) -> tuple[list[str], int]:
    """Read one logical record starting at pos.

    Returns:
        Tuple of (fields, position after the record's terminating newline)
    """
    fields: list[str] = []
    length = len(text)

    while True:
        if pos < length and text[pos] == QUOTE:
            value, pos = _read_quoted(text, pos + 1)
            # Tolerate junk between the closing quote and the next separator
            pos = _next_separator(text, pos, delimiter)
        else:
            end = _next_separator(text, pos, delimiter)
            value = text[pos:end]
            pos = end

        fields.append(value)

        if text.startswith(delimiter, pos):
            pos += len(delimiter)
            continue

        # At a newline or end of input
        return fields, pos + 1


def _read_quoted(text: str, pos: int) -> tuple[str, int]:
    """Read a quoted field body; pos is just past the opening quote.

    '""' is an escaped quote. A single quote closes the field. Newlines are
    literal content. An unterminated quote runs to the end of input.
    """
    parts: list[str] = []
    length = len(text)

    while pos < length:
        close = text.find(QUOTE, pos)
        if close == -1:
            parts.append(text[pos:])
            return "".join(parts), length

        parts.append(text[pos:close])
        if close + 1 < length and text[close + 1] == QUOTE:
            parts.append(QUOTE)
            pos = close + 2
            continue

        return "".join(parts), close + 1

    return "".join(parts), length


def _next_separator(text: str, pos: int, delimiter: str) -> int:
    """Position of the next delimiter or newline at or after pos."""
    line_end = _line_end(text, pos)
    found = text.find(delimiter, pos, line_end)
    return found if found != -1 else line_end


def _line_end(text: str, pos: int) -> int:
    end = text.find("\n", pos)
    return end if end != -1 else len(text)


def _normalize_width(row: list[str], width: int) -> list[str]:
    """Pad with empty strings or truncate to exactly width cells."""
    if len(row) >= width:
        return row[:width]
    return row + [""] * (width - len(row))


def _pad_to_width(row: list[str], width: int) -> list[str]:
    """Pad with empty strings up to width cells; longer rows are kept whole."""
    return row + [""] * max(0, width - len(row))
