"""
Delimited text parser for scholar uploads.

Splits raw file text into a header row and one mapping per data line.
This is deliberately not an RFC 4180 reader: fields are split on every
comma and only a single layer of wrapping double quotes is removed.
"""

from dataclasses import dataclass, field

import structlog

from models.imports import RawRow
from utils.text_utils import clean_cell

logger = structlog.get_logger(__name__)

DELIMITER = ","


@dataclass
class ParsedFile:
    """Headers and rows in file order. Row order is the row's identity."""
    headers: list[str] = field(default_factory=list)
    rows: list[RawRow] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.rows)


def split_line(line: str, delimiter: str = DELIMITER) -> list[str]:
    """Split one line into cleaned tokens."""
    return [clean_cell(token) for token in line.split(delimiter)]


def parse_delimited_text(text: str, delimiter: str = DELIMITER) -> ParsedFile:
    """
    Parse delimited text into headers and raw rows.

    Blank lines at the start and end of the text are dropped. The first
    remaining line is the header line and every later line becomes one row,
    a blank one included, so row positions match the file. Rows are
    zipped against the headers by position: missing
    trailing cells become "" and extra cells are dropped. A header that
    appears twice keeps the value of its last occurrence.

    Never raises on malformed content; the worst case is empty cells.

    Args:
        text: Whole file contents
        delimiter: Field delimiter

    Returns:
        ParsedFile with headers and rows (rows may be empty)
    """
    lines = text.split("\n")
    filled = [i for i, line in enumerate(lines) if line.strip()]

    if not filled:
        logger.info("csv_parsed", header_count=0, row_count=0)
        return ParsedFile()

    # Trim blank lines off both ends only; interior blank lines stay rows
    lines = lines[filled[0]:filled[-1] + 1]

    headers = split_line(lines[0], delimiter)
    rows: list[RawRow] = []

    for line in lines[1:]:
        values = split_line(line, delimiter)
        row: RawRow = {}
        for i, header in enumerate(headers):
            row[header] = values[i] if i < len(values) else ""
        rows.append(row)

    logger.info("csv_parsed", header_count=len(headers), row_count=len(rows))

    return ParsedFile(headers=headers, rows=rows)
