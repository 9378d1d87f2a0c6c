"""
Scholar import routes.

Drives the import workflow: upload a CSV, adjust the column mapping,
preview validation results, then commit the valid rows.

See services/import_workflow_service.py for the step rules.
"""

from fastapi import APIRouter, UploadFile, File
from fastapi.responses import JSONResponse, Response
import structlog

from config import settings
from exceptions import AppError
from models.imports import (
    FieldCatalogResponse,
    FieldOption,
    ImportResult,
    MappingUpdateRequest,
    PreviewResponse,
    SessionResponse,
    UploadResponse,
    ValidationIssueResponse,
)
from models.scholar import CanonicalField, FIELD_LABELS, REQUIRED_FIELDS
from services.import_workflow_service import ImportWorkflowService, get_import_workflow_service
from services.preview_service import build_preview_frame, column_previews, frame_to_records
from services.template_service import build_template_csv

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["Scholar Import"])


# ===================
# EXCEPTION HANDLER
# ===================

def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        return JSONResponse(status_code=e.status_code, content=e.to_dict())
    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
            }
        },
    )


# ===================
# RESPONSE BUILDERS
# ===================

def _session_response(service: ImportWorkflowService) -> SessionResponse:
    session = service.session
    return SessionResponse(
        step=session.step,
        filename=session.filename,
        headers=session.headers,
        row_count=session.row_count,
        mapping=session.mapping,
        committing=session.committing,
        result=session.result,
    )


def _preview_response(service: ImportWorkflowService) -> PreviewResponse:
    session = service.session
    shown, more = service.issue_summary()
    frame = build_preview_frame(session.headers, session.rows or [], session.mapping, session.issues)
    return PreviewResponse(
        step=session.step,
        valid_count=service.valid_count,
        invalid_count=service.invalid_count,
        issue_count=len(session.issues),
        issues=[ValidationIssueResponse(**issue.to_dict()) for issue in shown],
        more_issues=more,
        rows=frame_to_records(frame),
        total_rows=session.row_count,
    )


# ===================
# CATALOG + TEMPLATE
# ===================

@router.get("/fields", response_model=FieldCatalogResponse)
async def list_fields():
    """
    Mapping targets for the Map step.

    Always includes the "ignore" option.
    """
    return FieldCatalogResponse(
        fields=[
            FieldOption(value=f, label=FIELD_LABELS[f], required=f in REQUIRED_FIELDS)
            for f in CanonicalField
        ],
        required=list(REQUIRED_FIELDS),
    )


@router.get("/template")
async def download_template():
    """CSV template with every importable column header and no rows."""
    return Response(
        content=build_template_csv(),
        media_type="text/csv",
        headers={
            "Content-Disposition": f'attachment; filename="{settings.import_template_filename}"'
        },
    )


# ===================
# WORKFLOW
# ===================

@router.get("/session", response_model=SessionResponse)
async def get_session():
    """Current step and session contents."""
    return _session_response(get_import_workflow_service())


@router.post("/upload", response_model=UploadResponse)
async def upload_file(file: UploadFile = File(...)):
    """
    Upload a CSV file (Upload -> Map).

    Headers are auto-mapped to catalog fields; unknown headers are ignored
    until the user reassigns them.
    """
    try:
        service = get_import_workflow_service()
        session = await service.load_file(file.filename, file.read)

        return UploadResponse(
            filename=session.filename,
            step=session.step,
            row_count=session.row_count,
            columns=column_previews(session.headers, session.rows or [], session.mapping),
        )

    except Exception as e:
        return handle_error(e)


@router.put("/mapping", response_model=SessionResponse)
async def update_mapping(data: MappingUpdateRequest):
    """Reassign one column (Map step only)."""
    try:
        service = get_import_workflow_service()
        service.update_mapping(data.header, data.field)
        return _session_response(service)

    except Exception as e:
        return handle_error(e)


@router.post("/preview", response_model=PreviewResponse)
async def preview_import():
    """Validate all rows with the current mapping (Map -> Preview)."""
    try:
        service = get_import_workflow_service()
        service.proceed_to_preview()
        return _preview_response(service)

    except Exception as e:
        return handle_error(e)


@router.get("/preview", response_model=PreviewResponse)
async def get_preview():
    """Validation results from the last preview (Preview and Done steps only)."""
    try:
        service = get_import_workflow_service()
        service.preview_issues()
        return _preview_response(service)

    except Exception as e:
        return handle_error(e)


@router.post("/back", response_model=SessionResponse)
async def go_back():
    """
    Go back one step.

    Map -> Upload discards the file; Preview -> Map keeps the mapping.
    """
    try:
        service = get_import_workflow_service()
        service.back()
        return _session_response(service)

    except Exception as e:
        return handle_error(e)


@router.post("/commit", response_model=ImportResult)
async def commit_import():
    """
    Import the valid rows (Preview -> Done).

    Rows with validation issues are skipped. A second call while the first
    is still saving returns 409.
    """
    try:
        service = get_import_workflow_service()
        result = await service.commit()

        if result is None:
            return JSONResponse(
                status_code=409,
                content={
                    "error": {
                        "code": "COMMIT_IN_PROGRESS",
                        "message": "Import is already being committed",
                    }
                },
            )

        return result

    except Exception as e:
        return handle_error(e)


@router.post("/reset", response_model=SessionResponse)
async def reset_import():
    """Discard the session and start over (Done -> Upload)."""
    try:
        service = get_import_workflow_service()
        service.reset()
        return _session_response(service)

    except Exception as e:
        return handle_error(e)
