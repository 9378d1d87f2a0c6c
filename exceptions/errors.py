"""
Custom exception classes for the application.

Every error raised by the import pipeline inherits from AppError so routes
can render it with a single handler.
"""

from typing import Optional, Any
from datetime import datetime


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "UNSUPPORTED_FILE_TYPE")
        message: Human-readable message
        status_code: HTTP status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.utcnow().isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class NotFoundError(AppError):
    """Resource not found (404)."""

    def __init__(
        self,
        resource: str,
        identifier: str,
        code: Optional[str] = None
    ):
        super().__init__(
            code=code or f"{resource.upper()}_NOT_FOUND",
            message=f"{resource} not found",
            status_code=404,
            details={"id": identifier}
        )


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details
        )


class ConflictError(AppError):
    """Conflict with current state (409)."""

    def __init__(
        self,
        message: str,
        code: str = "CONFLICT",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=409,
            details=details
        )


class ExternalServiceError(AppError):
    """External service failure (503)."""

    def __init__(
        self,
        service: str,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code=f"{service.upper()}_ERROR",
            message=message,
            status_code=503,
            details={"service": service, **(details or {})}
        )


# ===================
# UPLOAD ERRORS
# ===================

class UnsupportedFileTypeError(ValidationError):
    """Uploaded file does not have the accepted extension."""

    def __init__(self, filename: str, allowed_extension: str = ".csv"):
        super().__init__(
            code="UNSUPPORTED_FILE_TYPE",
            message=f"Only {allowed_extension} files are supported",
            details={"filename": filename, "allowed_extension": allowed_extension}
        )


class FileReadError(ValidationError):
    """Uploaded file could not be read or decoded."""

    def __init__(self, filename: str, reason: str):
        super().__init__(
            code="FILE_READ_ERROR",
            message="Failed to read uploaded file",
            details={"filename": filename, "reason": reason}
        )


# ===================
# IMPORT WORKFLOW ERRORS
# ===================

class UnknownColumnError(NotFoundError):
    """Mapping edit names a header that is not in the parsed file."""

    def __init__(self, header: str):
        super().__init__(
            resource="Column",
            identifier=header,
            code="COLUMN_NOT_FOUND"
        )


class InvalidImportStateError(ConflictError):
    """Action not allowed in the current import step."""

    def __init__(self, current_step: str, action: str):
        super().__init__(
            code="INVALID_IMPORT_STATE",
            message=f"Cannot {action} while import is at step '{current_step}'",
            details={"current_step": current_step, "action": action}
        )


class NothingToImportError(ValidationError):
    """Commit requested but every row has validation issues."""

    def __init__(self, skipped_count: int):
        super().__init__(
            code="NOTHING_TO_IMPORT",
            message="No valid rows to import",
            details={"skipped_count": skipped_count}
        )


class CommitFailedError(ExternalServiceError):
    """Scholar store rejected the batch. Nothing was persisted."""

    def __init__(self, message: str, record_count: int):
        super().__init__(
            service="scholar_store",
            message=message,
            details={"record_count": record_count}
        )
