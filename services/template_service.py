"""
Downloadable CSV template for scholar imports.

The header line lists every importable catalog field (catalog order,
no "ignore") and the file carries no data rows.
"""

from models.scholar import importable_fields
from parsers.csv_parser import DELIMITER


def template_headers() -> list[str]:
    return [f.value for f in importable_fields()]


def build_template_csv() -> str:
    """Template contents: one comma-joined header line ending in a newline."""
    return DELIMITER.join(template_headers()) + "\n"
