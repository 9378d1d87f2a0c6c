"""
Text utilities for cleaning CSV cells and comparing header names.
"""

import re
from typing import Optional

_HEADER_NOISE = re.compile(r"[\s_\-]")


def normalize_header(header: str) -> str:
    """
    Normalize a column header for synonym lookup.

    Lowercases and drops whitespace, underscores and hyphens:
    - "Last Name" → "lastname"
    - "contact_number" → "contactnumber"
    - "E-mail" → "email"

    Args:
        header: Header exactly as it appeared in the file

    Returns:
        Normalized key (may be empty)
    """
    return _HEADER_NOISE.sub("", header.lower())


def clean_cell(token: str) -> str:
    """
    Clean one delimited token.

    Strips surrounding whitespace, then one leading and one trailing
    double quote when both are present. Embedded quotes are left alone.

    Args:
        token: Raw token between delimiters

    Returns:
        Cleaned cell value
    """
    value = token.strip()
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        value = value[1:-1]
    return value


def is_blank(value: Optional[str]) -> bool:
    """True if value is missing or whitespace-only."""
    return value is None or not value.strip()
