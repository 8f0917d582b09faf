"""
Import review sessions.

A session holds the preview rows of one uploaded file between upload and
commit. Nothing is persisted: sessions live in process memory, expire after
IMPORT_SESSION_TTL_SECONDS and vanish on commit or discard.
"""

import time
import uuid
from datetime import datetime, timezone
from typing import Optional

import structlog

from showdesk.config import settings
from showdesk.models.enums import ImportAction
from showdesk.pipeline.errors import ImportInProgressError, ImportSessionNotFound, InvalidActionError
from showdesk.schemas.imports import DuplicateAction, ImportPreview, ImportPreviewRow
from showdesk.schemas.shows import ShowRecord

logger = structlog.get_logger(__name__)


class ImportSession:
    """Preview state for one import file."""

    def __init__(
        self,
        file_name: str,
        ignored_headers: Optional[list[str]] = None,
        ttl: Optional[int] = None,
        session_id: Optional[str] = None,
    ):
        self.session_id = session_id or str(uuid.uuid4())
        self.file_name = file_name
        self.ignored_headers = ignored_headers or []
        self.created_at = datetime.now(timezone.utc)
        if ttl is None:
            ttl = settings.IMPORT_SESSION_TTL_SECONDS
        self.expires_at = time.monotonic() + ttl
        self.rows: list[ImportPreviewRow] = []
        self.committing = False
        self._closed = False

    @property
    def is_open(self) -> bool:
        return not self._closed and time.monotonic() < self.expires_at

    def close(self) -> None:
        self._closed = True

    def attach_rows(self, rows: list[ImportPreviewRow]) -> None:
        self.rows = rows

    def set_action(self, index: int, action: ImportAction) -> ImportPreviewRow:
        """Change one row's action. 'update' needs a duplicate to update."""
        if self.committing:
            raise ImportInProgressError("This import is being committed; row actions can no longer change.")
        if index < 0 or index >= len(self.rows):
            raise InvalidActionError(f"No row {index} in this import.")
        row = self.rows[index]
        if action == ImportAction.UPDATE and not row.duplicate:
            raise InvalidActionError(
                f"'{row.record.title}' does not match an existing show, so it cannot be updated."
            )
        row.action = action
        return row

    def build_commit(self) -> tuple[list[ShowRecord], list[DuplicateAction], int]:
        """
        Records and their parallel action list.
        An 'update' with no matched show is sent as 'skip'; the count of
        those is returned as the third element.
        """
        records: list[ShowRecord] = []
        actions: list[DuplicateAction] = []
        ignored = 0
        for row in self.rows:
            action = row.action
            if action == ImportAction.UPDATE and (not row.duplicate or row.existing_show is None):
                logger.warning(
                    "update_without_match_ignored",
                    session_id=self.session_id,
                    row=row.row_number,
                    title=row.record.title,
                )
                action = ImportAction.SKIP
                ignored += 1
            records.append(row.record)
            actions.append(DuplicateAction(title=row.record.title, action=action))
        return records, actions, ignored

    def to_preview(self) -> ImportPreview:
        return ImportPreview(
            session_id=self.session_id,
            file_name=self.file_name,
            created_at=self.created_at,
            rows=self.rows,
            total=len(self.rows),
            duplicates_found=sum(1 for r in self.rows if r.duplicate),
            archived_duplicates=sum(1 for r in self.rows if r.duplicate and r.is_archived),
            ignored_headers=self.ignored_headers,
        )


class ImportSessionStore:
    """In-memory registry of open import sessions."""

    def __init__(self, ttl: Optional[int] = None):
        self.ttl = ttl if ttl is not None else settings.IMPORT_SESSION_TTL_SECONDS
        self._sessions: dict[str, ImportSession] = {}

    def open(
        self,
        file_name: str,
        ignored_headers: Optional[list[str]] = None,
        session_id: Optional[str] = None,
    ) -> ImportSession:
        self.purge_expired()
        if session_id is not None and session_id in self._sessions:
            raise ImportInProgressError(f"Import {session_id} is already open.")
        session = ImportSession(file_name, ignored_headers, ttl=self.ttl, session_id=session_id)
        self._sessions[session.session_id] = session
        logger.info("import_session_opened", session_id=session.session_id, file_name=file_name)
        return session

    def get(self, session_id: str) -> ImportSession:
        session = self._sessions.get(session_id)
        if session is None or not session.is_open:
            self._sessions.pop(session_id, None)
            raise ImportSessionNotFound("Import session not found or expired. Please upload the file again.")
        return session

    def discard(self, session_id: str) -> bool:
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.close()
        logger.info("import_session_discarded", session_id=session_id)
        return True

    def release(self, session: ImportSession) -> bool:
        """Discard this exact session, not a newer one reusing its id."""
        if self._sessions.get(session.session_id) is not session:
            session.close()
            return False
        return self.discard(session.session_id)

    def purge_expired(self) -> int:
        expired = [sid for sid, s in self._sessions.items() if not s.is_open]
        for sid in expired:
            self._sessions.pop(sid).close()
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)
