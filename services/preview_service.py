"""
Preview tables for the import Map and Preview steps.
"""

from typing import Any, Optional

import pandas as pd
import structlog

from config import settings
from models.imports import ColumnMapping, ColumnPreview, RawRow, ValidationIssue
from models.scholar import CanonicalField, field_label
from services.row_validator_service import invalid_row_numbers, source_row_number

logger = structlog.get_logger(__name__)

STATUS_VALID = "valid"
STATUS_ISSUES = "issues"


def column_previews(
    headers: list[str],
    rows: list[RawRow],
    mapping: ColumnMapping,
) -> list[ColumnPreview]:
    """One entry per header with its mapped field and a first-row sample."""
    first = rows[0] if rows else None
    return [
        ColumnPreview(
            header=header,
            sample=first.get(header) if first is not None else None,
            field=mapping.get(header, CanonicalField.IGNORE),
        )
        for header in headers
    ]


def build_preview_frame(
    headers: list[str],
    rows: list[RawRow],
    mapping: ColumnMapping,
    issues: list[ValidationIssue],
    limit: Optional[int] = None,
) -> pd.DataFrame:
    """
    Preview table of the first rows.

    Columns: "row" (file row number), one column per mapped header labelled
    with its field label, and "status" (valid / issues). Ignored columns
    are left out.
    """
    limit = settings.import_preview_row_limit if limit is None else limit
    mapped = [h for h in headers if mapping.get(h, CanonicalField.IGNORE) is not CanonicalField.IGNORE]
    flagged = invalid_row_numbers(issues)

    columns = ["row"] + [field_label(mapping[h]) for h in mapped] + ["status"]

    records = []
    for i, row in enumerate(rows[:limit]):
        row_number = source_row_number(i)
        records.append(
            [row_number]
            + [row.get(h, "") for h in mapped]
            + [STATUS_ISSUES if row_number in flagged else STATUS_VALID]
        )

    # Two headers can share a label when mapped to the same field
    df = pd.DataFrame(records, columns=columns)

    logger.debug("preview_frame_built", rows=len(df), columns=len(columns))
    return df


def frame_to_records(df: pd.DataFrame) -> list[dict[str, Any]]:
    """
    Serialize a preview frame for JSON responses.

    Duplicate column labels get a numeric suffix so no cell is lost.
    """
    seen: dict[str, int] = {}
    labels = []
    for col in df.columns:
        count = seen.get(col, 0)
        labels.append(col if count == 0 else f"{col} ({count + 1})")
        seen[col] = count + 1

    out = df.copy()
    out.columns = labels
    return [
        {k: (int(v) if k == "row" else v) for k, v in record.items()}
        for record in out.to_dict(orient="records")
    ]
