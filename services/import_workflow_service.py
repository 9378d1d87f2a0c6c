"""
Scholar bulk import workflow.

Owns the single live import session and moves it through

    upload -> map -> preview -> done

Each step change happens in exactly one method below, so the mapping and
the validation issues can never drift apart: issues are produced only by
proceed_to_preview() and thrown away whenever the mapping may change.

Back transitions:
- map -> upload discards the whole session
- preview -> map keeps rows and mapping, discards issues
"""

from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional, Union

import structlog

from config import settings
from exceptions import (
    AppError,
    CommitFailedError,
    FileReadError,
    InvalidImportStateError,
    NothingToImportError,
    UnknownColumnError,
    UnsupportedFileTypeError,
)
from models.imports import ColumnMapping, ImportResult, ImportStep, RawRow, ValidationIssue
from models.scholar import CanonicalField, ScholarRecord
from parsers.csv_parser import parse_delimited_text
from services.header_mapper_service import auto_map_headers
from services.row_validator_service import (
    build_field_index,
    invalid_row_numbers,
    partition_rows,
    validate_rows,
)
from services.scholar_store_service import ScholarStore, get_scholar_store

logger = structlog.get_logger(__name__)

FileReader = Callable[[], Awaitable[Union[bytes, str]]]


@dataclass
class ImportSession:
    """Working state of the one in-progress import."""
    step: ImportStep = ImportStep.UPLOAD
    filename: Optional[str] = None
    headers: list[str] = field(default_factory=list)
    rows: Optional[list[RawRow]] = None
    mapping: ColumnMapping = field(default_factory=dict)
    issues: list[ValidationIssue] = field(default_factory=list)
    committing: bool = False
    result: Optional[ImportResult] = None

    @property
    def row_count(self) -> int:
        return len(self.rows) if self.rows is not None else 0


class ImportWorkflowService:
    """
    Import workflow controller.

    One instance holds one session; there is no concurrent multi-file import.
    """

    def __init__(
        self,
        store: Optional[ScholarStore] = None,
        allowed_extension: Optional[str] = None,
    ):
        self.store = store if store is not None else get_scholar_store()
        self.allowed_extension = (allowed_extension or settings.import_allowed_extension).lower()
        self._session = ImportSession()

    # ===================
    # STATE
    # ===================

    @property
    def session(self) -> ImportSession:
        return self._session

    @property
    def step(self) -> ImportStep:
        return self._session.step

    @property
    def committing(self) -> bool:
        return self._session.committing

    def _require_step(self, expected: ImportStep, action: str) -> None:
        if self._session.step != expected or self._session.committing:
            raise InvalidImportStateError(self._session.step.value, action)

    # ===================
    # UPLOAD -> MAP
    # ===================

    def is_supported_file(self, filename: Optional[str]) -> bool:
        return bool(filename) and filename.lower().endswith(self.allowed_extension)

    def _check_upload(self, filename: Optional[str]) -> None:
        self._require_step(ImportStep.UPLOAD, "upload a file")
        if not self.is_supported_file(filename):
            logger.info("import_file_rejected", filename=filename)
            raise UnsupportedFileTypeError(filename or "", self.allowed_extension)

    def accept_text(self, filename: str, text: str) -> ImportSession:
        """
        Accept already-read file text and move to the Map step.

        Raises:
            UnsupportedFileTypeError: Wrong extension (session unchanged)
            InvalidImportStateError: Not at the Upload step
        """
        self._check_upload(filename)

        parsed = parse_delimited_text(text)
        mapping = auto_map_headers(parsed.headers)

        self._session = ImportSession(
            step=ImportStep.MAP,
            filename=filename,
            headers=parsed.headers,
            rows=parsed.rows,
            mapping=mapping,
        )

        logger.info(
            "import_file_accepted",
            filename=filename,
            header_count=len(parsed.headers),
            row_count=parsed.row_count,
        )

        return self._session

    async def load_file(self, filename: str, read: FileReader) -> ImportSession:
        """
        Read an uploaded file and move to the Map step.

        Nothing in the session changes until the read resolves; a failed
        read leaves the workflow at Upload.

        Args:
            filename: Original file name (extension is checked)
            read: Awaitable returning the file bytes or text

        Raises:
            UnsupportedFileTypeError: Wrong extension
            FileReadError: Read failed or bytes are not UTF-8
            InvalidImportStateError: Not at the Upload step
        """
        self._check_upload(filename)

        try:
            content = await read()
        except Exception as e:
            logger.error("import_file_read_failed", filename=filename, error=str(e))
            raise FileReadError(filename, str(e)) from e

        if isinstance(content, bytes):
            try:
                content = content.decode("utf-8-sig")
            except UnicodeDecodeError as e:
                logger.error("import_file_decode_failed", filename=filename, error=str(e))
                raise FileReadError(filename, "File is not UTF-8 text") from e

        return self.accept_text(filename, content)

    # ===================
    # MAP
    # ===================

    def update_mapping(self, header: str, target: CanonicalField) -> ColumnMapping:
        """
        Point one column at a different catalog field.

        Only allowed at the Map step; go back from Preview to edit.

        Raises:
            InvalidImportStateError: Not at the Map step
            UnknownColumnError: Header is not in the uploaded file
        """
        self._require_step(ImportStep.MAP, "change the column mapping")

        if header not in self._session.mapping:
            raise UnknownColumnError(header)

        target = CanonicalField(target)
        previous = self._session.mapping[header]
        self._session.mapping[header] = target

        logger.info(
            "import_mapping_updated",
            header=header,
            previous=previous.value,
            field=target.value,
        )

        return self._session.mapping

    # ===================
    # MAP -> PREVIEW
    # ===================

    def proceed_to_preview(self) -> list[ValidationIssue]:
        """
        Validate all rows with the current mapping and move to Preview.

        This is the only place validation runs.
        """
        self._require_step(ImportStep.MAP, "preview the import")

        self._session.issues = validate_rows(self._session.rows or [], self._session.mapping)
        self._session.step = ImportStep.PREVIEW

        logger.info(
            "import_previewed",
            filename=self._session.filename,
            valid_count=self.valid_count,
            invalid_count=self.invalid_count,
            issue_count=len(self._session.issues),
        )

        return self._session.issues

    def back(self) -> ImportStep:
        """
        Go back one step.

        Map -> Upload discards the session. Preview -> Map keeps rows and
        mapping and drops the validation issues.
        """
        current = self._session.step

        if current == ImportStep.MAP:
            self._session = ImportSession()
        elif current == ImportStep.PREVIEW and not self._session.committing:
            self._session.issues = []
            self._session.step = ImportStep.MAP
        else:
            raise InvalidImportStateError(current.value, "go back")

        logger.info("import_step_back", from_step=current.value, to_step=self._session.step.value)
        return self._session.step

    # ===================
    # PREVIEW DERIVED VIEWS
    # ===================

    @property
    def invalid_row_numbers(self) -> set[int]:
        return invalid_row_numbers(self._session.issues)

    @property
    def valid_rows(self) -> list[RawRow]:
        valid, _ = partition_rows(self._session.rows or [], self._session.issues)
        return valid

    @property
    def invalid_rows(self) -> list[RawRow]:
        _, invalid = partition_rows(self._session.rows or [], self._session.issues)
        return invalid

    @property
    def valid_count(self) -> int:
        return self._session.row_count - self.invalid_count

    @property
    def invalid_count(self) -> int:
        return len(self.invalid_row_numbers)

    @property
    def can_commit(self) -> bool:
        return (
            self._session.step == ImportStep.PREVIEW
            and not self._session.committing
            and self.valid_count > 0
        )

    def preview_issues(self) -> list[ValidationIssue]:
        """
        Issues from the last Map -> Preview.

        Raises:
            InvalidImportStateError: Validation has not run for this mapping
        """
        if self._session.step not in (ImportStep.PREVIEW, ImportStep.DONE):
            raise InvalidImportStateError(self._session.step.value, "view the preview")
        return self._session.issues

    def issue_summary(self, limit: Optional[int] = None) -> tuple[list[ValidationIssue], int]:
        """
        First issues to display and how many more exist beyond them.

        Args:
            limit: Issues to show (defaults to the configured preview limit)
        """
        limit = settings.import_preview_error_limit if limit is None else limit
        issues = self._session.issues
        return issues[:limit], max(len(issues) - limit, 0)

    def build_records(self, rows: list[RawRow]) -> list[ScholarRecord]:
        """Convert rows to canonical records using the current mapping."""
        field_index = build_field_index(self._session.mapping)
        return [
            ScholarRecord.model_validate({
                target.value: row.get(header, "")
                for target, header in field_index.items()
            })
            for row in rows
        ]

    # ===================
    # PREVIEW -> DONE
    # ===================

    async def commit(self) -> Optional[ImportResult]:
        """
        Save every valid row and move to Done.

        Invalid rows are skipped. The whole valid batch is saved or nothing
        is; on failure the workflow stays at Preview. Calling again while a
        commit is in flight does nothing and returns None.

        Raises:
            InvalidImportStateError: Not at the Preview step
            NothingToImportError: Every row has issues
            CommitFailedError: The scholar store rejected the batch
        """
        if self._session.committing:
            logger.info("import_commit_ignored", reason="commit_in_progress")
            return None

        self._require_step(ImportStep.PREVIEW, "commit the import")

        valid, invalid = partition_rows(self._session.rows or [], self._session.issues)
        if not valid:
            raise NothingToImportError(len(invalid))

        session = self._session
        records = self.build_records(valid)
        session.committing = True
        logger.info("import_commit_started", filename=session.filename, record_count=len(records))

        try:
            saved = await self.store.save_many(records)
        except AppError:
            session.committing = False
            raise
        except Exception as e:
            session.committing = False
            logger.error("import_commit_failed", filename=session.filename, error=str(e))
            raise CommitFailedError(str(e), len(records)) from e

        session.committing = False
        session.result = ImportResult(
            filename=session.filename,
            valid_count=saved,
            skipped_count=len(invalid),
            issue_count=len(session.issues),
        )
        session.step = ImportStep.DONE

        logger.info(
            "import_committed",
            filename=session.filename,
            valid_count=session.result.valid_count,
            skipped_count=session.result.skipped_count,
        )

        return session.result

    # ===================
    # DONE -> UPLOAD
    # ===================

    def reset(self) -> None:
        """Discard the session and return to Upload (import another file)."""
        if self._session.committing:
            raise InvalidImportStateError(self._session.step.value, "reset the import")

        previous = self._session.step
        self._session = ImportSession()
        logger.info("import_reset", from_step=previous.value)


_service: Optional[ImportWorkflowService] = None


def get_import_workflow_service() -> ImportWorkflowService:
    global _service
    if _service is None:
        _service = ImportWorkflowService()
    return _service
