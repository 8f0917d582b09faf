"""
Pydantic schemas for the CSV import pipeline and its /api/v1/imports endpoints.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from showdesk.models.enums import ImportAction, NoticeLevel, TitleSuggestion
from showdesk.schemas.shows import Show, ShowRecord


class Notice(BaseModel):
    """User-facing outcome of an operation (the toast, in the old UI)."""
    level: NoticeLevel
    message: str


# ── Backend duplicate-check payloads ─────────────────────────

class DuplicateCheckResult(BaseModel):
    title: Optional[str] = None
    exists: bool = False
    existing_show: Optional[Show] = None
    is_archived: Optional[bool] = None

    @property
    def archived(self) -> bool:
        if self.is_archived is not None:
            return self.is_archived
        return bool(self.existing_show and self.existing_show.is_archived)


class DuplicateCheckResponse(BaseModel):
    duplicates: list[DuplicateCheckResult]
    total_checked: Optional[int] = None
    duplicates_found: Optional[int] = None
    message: str = ""


class DuplicateAction(BaseModel):
    title: str
    action: ImportAction


class BulkImportWithActionsResponse(BaseModel):
    message: str = ""
    total: int = 0
    successful: int = 0
    updated: int = 0
    skipped: Optional[int] = None
    failed: int = 0
    errors: list[str] = []


# ── Preview ──────────────────────────────────────────────────

class ImportPreviewRow(BaseModel):
    index: int
    row_number: int
    record: ShowRecord
    duplicate: bool = False
    existing_show: Optional[Show] = None
    is_archived: bool = False
    action: ImportAction = ImportAction.CREATE


class ImportPreview(BaseModel):
    session_id: str
    file_name: str
    created_at: datetime
    rows: list[ImportPreviewRow]
    total: int
    duplicates_found: int
    archived_duplicates: int
    ignored_headers: list[str] = []


class RowActionUpdate(BaseModel):
    action: ImportAction


class CommitResult(BaseModel):
    success: bool
    message: str
    total: int
    successful: int
    updated: int
    skipped: int
    failed: int
    ignored_updates: int = 0
    errors: list[str] = []
    refresh_required: bool = False
    notice: Notice


class ImportErrorDetail(BaseModel):
    message: str
    error_code: str
    errors: list[str] = []


# ── Interactive title check ─────────────────────────────────

class TitleCheckRequest(BaseModel):
    title: str = Field(min_length=1)
    exclude_show_id: Optional[str] = None


class TitleCheckState(BaseModel):
    title: str = ""
    checking: bool = False
    is_duplicate: bool = False
    existing_show: Optional[Show] = None
    is_archived: bool = False
    suggestion: Optional[TitleSuggestion] = None
    error: Optional[str] = None
