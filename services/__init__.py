"""
Business logic services.

Each service handles one stage of the scholar import pipeline.
"""

from services.header_mapper_service import auto_map_headers, match_header, HEADER_SYNONYMS
from services.row_validator_service import validate_rows, partition_rows
from services.scholar_store_service import (
    ScholarStore,
    InMemoryScholarStore,
    get_scholar_store,
)
from services.import_workflow_service import (
    ImportWorkflowService,
    ImportSession,
    get_import_workflow_service,
)

__all__ = [
    "auto_map_headers",
    "match_header",
    "HEADER_SYNONYMS",
    "validate_rows",
    "partition_rows",
    "ScholarStore",
    "InMemoryScholarStore",
    "get_scholar_store",
    "ImportWorkflowService",
    "ImportSession",
    "get_import_workflow_service",
]
