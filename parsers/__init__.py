"""
File parsers module.
"""

from parsers.csv_parser import (
    parse_delimited_text,
    ParsedFile,
)

__all__ = [
    "parse_delimited_text",
    "ParsedFile",
]
