"""
Custom exceptions module.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    NotFoundError,
    ValidationError,
    ConflictError,
    ExternalServiceError,

    # Upload
    UnsupportedFileTypeError,
    FileReadError,

    # Import workflow
    UnknownColumnError,
    InvalidImportStateError,
    NothingToImportError,
    CommitFailedError,
)

__all__ = [
    # Base
    "AppError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "ExternalServiceError",

    # Upload
    "UnsupportedFileTypeError",
    "FileReadError",

    # Import workflow
    "UnknownColumnError",
    "InvalidImportStateError",
    "NothingToImportError",
    "CommitFailedError",
]
