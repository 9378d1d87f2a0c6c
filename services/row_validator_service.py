"""
Row validation for scholar uploads.

Checks every raw row against the required-field and email rules under
the current column mapping. Problems are collected, never raised: a row
with issues is skipped at commit, the rest of the batch still imports.
"""

import re
from typing import Optional

import structlog

from models.imports import (
    ColumnMapping,
    RawRow,
    ValidationIssue,
    REQUIRED_FIELD_MESSAGE,
    INVALID_EMAIL_MESSAGE,
)
from models.scholar import CanonicalField, REQUIRED_FIELDS, field_label
from utils.text_utils import is_blank

logger = structlog.get_logger(__name__)

# local@domain.tld shaped; not full RFC 5322
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# Data rows start on file line 2 (line 1 is the header)
FIRST_DATA_ROW = 2


def source_row_number(index: int) -> int:
    """File row number for a 0-based position in the parsed rows."""
    return index + FIRST_DATA_ROW


def build_field_index(mapping: ColumnMapping) -> dict[CanonicalField, str]:
    """
    Reverse a column mapping to field -> header.

    When two headers target the same field the one registered last in
    the mapping wins; only that header is validated and imported.
    """
    index: dict[CanonicalField, str] = {}
    for header, target in mapping.items():
        if target is not CanonicalField.IGNORE:
            index[target] = header
    return index


def is_valid_email(value: str) -> bool:
    return EMAIL_PATTERN.match(value.strip()) is not None


def validate_row(
    row: RawRow,
    row_number: int,
    field_index: dict[CanonicalField, str],
) -> list[ValidationIssue]:
    """
    Validate one row.

    Required fields first (catalog order), then the email format.
    """
    issues: list[ValidationIssue] = []

    for required in REQUIRED_FIELDS:
        header: Optional[str] = field_index.get(required)
        if header is None or is_blank(row.get(header)):
            issues.append(ValidationIssue(
                row=row_number,
                field=field_label(required),
                message=REQUIRED_FIELD_MESSAGE,
            ))

    email_header = field_index.get(CanonicalField.EMAIL)
    if email_header is not None:
        email = row.get(email_header, "")
        if not is_blank(email) and not is_valid_email(email):
            issues.append(ValidationIssue(
                row=row_number,
                field=field_label(CanonicalField.EMAIL),
                message=INVALID_EMAIL_MESSAGE,
            ))

    return issues


def validate_rows(rows: list[RawRow], mapping: ColumnMapping) -> list[ValidationIssue]:
    """
    Validate all rows against the mapping.

    Pure: the same rows and mapping always give the same list, ordered
    row by row, then required fields in catalog order, then email.

    Args:
        rows: Parsed rows in file order
        mapping: Header -> catalog field

    Returns:
        Every issue found (empty when all rows are importable)
    """
    field_index = build_field_index(mapping)

    issues: list[ValidationIssue] = []
    for i, row in enumerate(rows):
        issues.extend(validate_row(row, source_row_number(i), field_index))

    logger.info(
        "rows_validated",
        row_count=len(rows),
        issue_count=len(issues),
        invalid_rows=len({issue.row for issue in issues}),
    )

    return issues


def invalid_row_numbers(issues: list[ValidationIssue]) -> set[int]:
    """File row numbers referenced by at least one issue."""
    return {issue.row for issue in issues}


def partition_rows(
    rows: list[RawRow],
    issues: list[ValidationIssue],
) -> tuple[list[RawRow], list[RawRow]]:
    """
    Split rows into (valid, invalid) using the issue row numbers.

    Every row lands in exactly one of the two lists, in file order.
    """
    flagged = invalid_row_numbers(issues)
    valid: list[RawRow] = []
    invalid: list[RawRow] = []
    for i, row in enumerate(rows):
        (invalid if source_row_number(i) in flagged else valid).append(row)
    return valid, invalid
