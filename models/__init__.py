"""
Pydantic models for validation and serialization.
"""

from models.base import BaseSchema
from models.scholar import (
    CanonicalField,
    FIELD_LABELS,
    REQUIRED_FIELDS,
    ScholarRecord,
    field_label,
    importable_fields,
)
from models.imports import (
    ImportStep,
    ValidationIssue,
    RawRow,
    ColumnMapping,
    FieldOption,
    FieldCatalogResponse,
    ColumnPreview,
    MappingUpdateRequest,
    UploadResponse,
    PreviewResponse,
    ImportResult,
    SessionResponse,
)

__all__ = [
    "BaseSchema",
    "CanonicalField",
    "FIELD_LABELS",
    "REQUIRED_FIELDS",
    "ScholarRecord",
    "field_label",
    "importable_fields",
    "ImportStep",
    "ValidationIssue",
    "RawRow",
    "ColumnMapping",
    "FieldOption",
    "FieldCatalogResponse",
    "ColumnPreview",
    "MappingUpdateRequest",
    "UploadResponse",
    "PreviewResponse",
    "ImportResult",
    "SessionResponse",
]
