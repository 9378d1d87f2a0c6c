"""
Bulk import schemas.

Covers the in-memory types shared by the parser, mapper, validator and
workflow controller, plus the API request/response models.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from models.scholar import CanonicalField

# Raw cell values keyed by the header as it appeared in the file
RawRow = dict[str, str]

# Header -> catalog field (or CanonicalField.IGNORE)
ColumnMapping = dict[str, CanonicalField]


class ImportStep(str, Enum):
    """Import workflow steps, in order."""
    UPLOAD = "upload"
    MAP = "map"
    PREVIEW = "preview"
    DONE = "done"


REQUIRED_FIELD_MESSAGE = "Required field is empty"
INVALID_EMAIL_MESSAGE = "Invalid email format"


@dataclass(frozen=True)
class ValidationIssue:
    """
    Single problem that keeps a row out of the import.

    row is the line number in the source file: the header is row 1,
    so the first data row is row 2.
    """
    row: int
    field: str
    message: str

    def to_dict(self) -> dict:
        return {"row": self.row, "field": self.field, "message": self.message}


# ===================
# API MODELS
# ===================

class FieldOption(BaseModel):
    """One selectable mapping target."""
    value: CanonicalField
    label: str
    required: bool = False


class FieldCatalogResponse(BaseModel):
    """Mapping targets offered for every column."""
    fields: list[FieldOption]
    required: list[CanonicalField]


class ColumnPreview(BaseModel):
    """A file column as shown in the Map step."""
    header: str
    sample: Optional[str] = Field(None, description="Value from the first data row")
    field: CanonicalField


class MappingUpdateRequest(BaseModel):
    """Reassign one header to a different catalog field."""
    header: str = Field(..., min_length=1)
    field: CanonicalField


class UploadResponse(BaseModel):
    """File accepted and auto-mapped."""
    filename: str
    step: ImportStep
    row_count: int
    columns: list[ColumnPreview]


class ValidationIssueResponse(BaseModel):
    row: int
    field: str
    message: str


class PreviewResponse(BaseModel):
    """
    Validation outcome shown before commit.

    issues holds the first few problems only; more_issues counts the rest.
    """
    step: ImportStep
    valid_count: int
    invalid_count: int
    issue_count: int
    issues: list[ValidationIssueResponse]
    more_issues: int = Field(0, ge=0)
    rows: list[dict[str, Any]] = Field(default_factory=list)
    total_rows: int = 0


class ImportResult(BaseModel):
    """Completion summary after commit."""
    filename: Optional[str] = None
    valid_count: int = Field(..., ge=0, description="Records accepted by the scholar store")
    skipped_count: int = Field(..., ge=0, description="Rows skipped due to validation issues")
    issue_count: int = Field(0, ge=0)


class SessionResponse(BaseModel):
    """Current import session state."""
    step: ImportStep
    filename: Optional[str] = None
    headers: list[str] = Field(default_factory=list)
    row_count: int = 0
    mapping: dict[str, CanonicalField] = Field(default_factory=dict)
    committing: bool = False
    result: Optional[ImportResult] = None
