"""
Scholar field catalog and canonical record schema.

The catalog is static configuration: it is never derived from uploaded data.
"""

from pydantic import ConfigDict, Field, model_validator
from typing import Optional
from enum import Enum

from models.base import BaseSchema


class CanonicalField(str, Enum):
    """Scholar record attributes the import pipeline understands."""
    LAST_NAME = "lastName"
    FIRST_NAME = "firstName"
    MIDDLE_NAME = "middleName"
    SUFFIX = "suffix"
    STREET = "street"
    MUNICIPALITY = "municipality"
    BARANGAY = "barangay"
    DISTRICT = "district"
    CONTACT_NUMBER = "contactNumber"
    EMAIL = "email"
    SCHOLARSHIP_YEAR = "scholarshipYear"
    CATEGORY = "category"
    UNIVERSITY = "university"
    STATUS_OF_ENTRY = "statusOfEntry"
    COURSE = "course"
    YEAR_LEVEL = "yearLevel"
    STATUS = "status"
    YEAR_GRADUATED = "yearGraduated"
    AWARD = "award"
    SENIOR_HS_ATTENDED = "seniorHSAttended"
    IGNORE = "ignore"


FIELD_LABELS: dict[CanonicalField, str] = {
    CanonicalField.LAST_NAME: "Last Name",
    CanonicalField.FIRST_NAME: "First Name",
    CanonicalField.MIDDLE_NAME: "Middle Name",
    CanonicalField.SUFFIX: "Suffix",
    CanonicalField.STREET: "Street/Purok",
    CanonicalField.MUNICIPALITY: "Municipality",
    CanonicalField.BARANGAY: "Barangay",
    CanonicalField.DISTRICT: "District",
    CanonicalField.CONTACT_NUMBER: "Contact Number",
    CanonicalField.EMAIL: "Email Address",
    CanonicalField.SCHOLARSHIP_YEAR: "Scholarship Year",
    CanonicalField.CATEGORY: "Category",
    CanonicalField.UNIVERSITY: "University",
    CanonicalField.STATUS_OF_ENTRY: "Status of Entry",
    CanonicalField.COURSE: "Course",
    CanonicalField.YEAR_LEVEL: "Year Level",
    CanonicalField.STATUS: "Status",
    CanonicalField.YEAR_GRADUATED: "Year Graduated",
    CanonicalField.AWARD: "Award",
    CanonicalField.SENIOR_HS_ATTENDED: "Senior HS Attended",
    CanonicalField.IGNORE: "Ignore this column",
}

# Checked in this order for every row
REQUIRED_FIELDS: tuple[CanonicalField, ...] = (
    CanonicalField.LAST_NAME,
    CanonicalField.FIRST_NAME,
    CanonicalField.DISTRICT,
    CanonicalField.MUNICIPALITY,
    CanonicalField.STATUS,
    CanonicalField.UNIVERSITY,
    CanonicalField.COURSE,
)


def field_label(field: CanonicalField) -> str:
    """Human-readable label for a catalog field."""
    return FIELD_LABELS[field]


def importable_fields() -> list[CanonicalField]:
    """Catalog fields a column can be imported into (everything but ignore)."""
    return [f for f in CanonicalField if f is not CanonicalField.IGNORE]


# ===================
# CANONICAL RECORD
# ===================

class ScholarRecord(BaseSchema):
    """
    One validated scholar, keyed by catalog field.

    Built from a row that passed validation, so required fields are
    always populated. Serialize with by_alias=True to get catalog keys.
    """

    last_name: str = Field(..., min_length=1, alias="lastName")
    first_name: str = Field(..., min_length=1, alias="firstName")
    middle_name: Optional[str] = Field(None, alias="middleName")
    suffix: Optional[str] = None
    street: Optional[str] = None
    municipality: str = Field(..., min_length=1)
    barangay: Optional[str] = None
    district: str = Field(..., min_length=1)
    contact_number: Optional[str] = Field(None, alias="contactNumber")
    email: Optional[str] = None
    scholarship_year: Optional[str] = Field(None, alias="scholarshipYear")
    category: Optional[str] = None
    university: str = Field(..., min_length=1)
    status_of_entry: Optional[str] = Field(None, alias="statusOfEntry")
    course: str = Field(..., min_length=1)
    year_level: Optional[str] = Field(None, alias="yearLevel")
    status: str = Field(..., min_length=1)
    year_graduated: Optional[str] = Field(None, alias="yearGraduated")
    award: Optional[str] = None
    senior_hs_attended: Optional[str] = Field(None, alias="seniorHSAttended")

    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def blank_to_none(cls, data):
        """Empty optional cells are stored as missing, not as ''."""
        if isinstance(data, dict):
            return {k: (v if not isinstance(v, str) or v.strip() else None) for k, v in data.items()}
        return data
