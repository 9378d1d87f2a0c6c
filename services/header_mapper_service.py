"""
Header auto-mapping for scholar uploads.

Guesses which catalog field each uploaded column holds, using only the
column name. Matching is exact on the normalized header: there is no
fuzzy or partial matching and no confidence score. Anything unknown is
mapped to CanonicalField.IGNORE and left for the user to reassign.
"""

import structlog

from models.imports import ColumnMapping
from models.scholar import CanonicalField
from utils.text_utils import normalize_header

logger = structlog.get_logger(__name__)

F = CanonicalField

# Normalized header spelling -> catalog field.
# Static configuration; extend here when offices report new column names.
HEADER_SYNONYMS: dict[str, CanonicalField] = {
    # Name
    "lastname": F.LAST_NAME,
    "surname": F.LAST_NAME,
    "familyname": F.LAST_NAME,
    "firstname": F.FIRST_NAME,
    "givenname": F.FIRST_NAME,
    "middlename": F.MIDDLE_NAME,
    "mi": F.MIDDLE_NAME,
    "suffix": F.SUFFIX,

    # Address
    "street": F.STREET,
    "purok": F.STREET,
    "streetpurok": F.STREET,
    "municipality": F.MUNICIPALITY,
    "city": F.MUNICIPALITY,
    "barangay": F.BARANGAY,
    "brgy": F.BARANGAY,
    "district": F.DISTRICT,

    # Contact
    "contactnumber": F.CONTACT_NUMBER,
    "contact": F.CONTACT_NUMBER,
    "phone": F.CONTACT_NUMBER,
    "mobile": F.CONTACT_NUMBER,
    "email": F.EMAIL,
    "emailaddress": F.EMAIL,

    # Scholarship
    "scholarshipyear": F.SCHOLARSHIP_YEAR,
    "year": F.SCHOLARSHIP_YEAR,
    "category": F.CATEGORY,
    "university": F.UNIVERSITY,
    "school": F.UNIVERSITY,
    "statusofentry": F.STATUS_OF_ENTRY,
    "entrytype": F.STATUS_OF_ENTRY,
    "course": F.COURSE,
    "program": F.COURSE,
    "yearlevel": F.YEAR_LEVEL,
    "level": F.YEAR_LEVEL,
    "status": F.STATUS,
    "yeargraduated": F.YEAR_GRADUATED,
    "graduationyear": F.YEAR_GRADUATED,
    "award": F.AWARD,
    "honor": F.AWARD,
    "honors": F.AWARD,
    "seniorhsattended": F.SENIOR_HS_ATTENDED,
    "seniorhs": F.SENIOR_HS_ATTENDED,
    "shs": F.SENIOR_HS_ATTENDED,
}


def match_header(header: str) -> CanonicalField:
    """
    Catalog field for a single header.

    Args:
        header: Column name as it appeared in the file

    Returns:
        Matching field, or CanonicalField.IGNORE when unknown
    """
    return HEADER_SYNONYMS.get(normalize_header(header), CanonicalField.IGNORE)


def auto_map_headers(headers: list[str]) -> ColumnMapping:
    """
    Build the initial column mapping for an upload.

    Pure function of the header names; row contents are never consulted.
    Every header gets an entry.

    Args:
        headers: Headers in file order

    Returns:
        Header -> catalog field (IGNORE when unmatched)
    """
    mapping: ColumnMapping = {header: match_header(header) for header in headers}

    unmatched = [h for h, f in mapping.items() if f is CanonicalField.IGNORE]
    logger.info(
        "headers_auto_mapped",
        header_count=len(mapping),
        matched=len(mapping) - len(unmatched),
        unmatched=unmatched,
    )

    return mapping
