"""
Import pipeline orchestrator.

Stages: PARSE → VALIDATE → DUPLICATE CHECK → PREVIEW → (user review) → COMMIT
Each stage starts only after the previous one has produced its result.
"""

from typing import Optional

import structlog

from showdesk.client.backend import BackendClient
from showdesk.models.enums import ImportAction
from showdesk.notices import bulk_notice, commit_message
from showdesk.observability.metrics import (
    import_commit_rows_total,
    import_files_total,
    import_rows_parsed_total,
    import_validation_errors_total,
)
from showdesk.pipeline.csv_reader import read_csv
from showdesk.pipeline.duplicates import check_for_duplicates
from showdesk.pipeline.errors import (
    CsvParseError,
    DuplicateCheckError,
    ImportInProgressError,
    ImportSessionNotFound,
    ImportValidationError,
)
from showdesk.pipeline.row_validator import parse_rows
from showdesk.review.sessions import ImportSession, ImportSessionStore
from showdesk.schemas.imports import CommitResult

logger = structlog.get_logger(__name__)


class ImportPipeline:
    """
    Runs one CSV file from upload to a reviewable preview, and commits a
    reviewed preview through the backend.
    """

    def __init__(self, client: BackendClient, store: Optional[ImportSessionStore] = None):
        self.client = client
        self.store = store if store is not None else ImportSessionStore()

    async def prepare(
        self,
        data: bytes,
        file_name: str = "import.csv",
        session_id: Optional[str] = None,
    ) -> ImportSession:
        """
        Parse, validate and duplicate-check a file.
        Raises CsvParseError, ImportValidationError or DuplicateCheckError;
        on any of them no session survives.

        A caller-chosen session_id lets the import be discarded while the
        duplicate check is still in flight; the late result is then dropped.
        """
        log = logger.bind(file_name=file_name)

        # ── Stage 1: PARSE ──
        try:
            table = read_csv(data)
        except CsvParseError as e:
            import_files_total.labels(outcome="parse_error").inc()
            log.info("import_parse_failed", error=e.message)
            raise
        rows = table.rows
        import_rows_parsed_total.inc(len(rows))

        # ── Stage 2: VALIDATE ──
        parsed = parse_rows(rows)
        if parsed.errors:
            import_files_total.labels(outcome="invalid").inc()
            import_validation_errors_total.inc(len(parsed.errors))
            log.info("import_validation_failed", rows=len(rows), errors=len(parsed.errors))
            raise ImportValidationError(
                "Import failed due to validation errors.", errors=parsed.error_messages,
            )
        if not parsed.records:
            import_files_total.labels(outcome="invalid").inc()
            raise ImportValidationError("The file does not contain any shows to import.")

        session = self.store.open(file_name, table.ignored_headers, session_id=session_id)

        # ── Stage 3: DUPLICATE CHECK ──
        try:
            preview_rows = await check_for_duplicates(
                self.client, parsed.records, parsed.row_numbers,
            )
        except DuplicateCheckError:
            import_files_total.labels(outcome="duplicate_check_failed").inc()
            self.store.release(session)
            raise
        except BaseException:
            # Cancelled (client went away) or unexpected: drop the half-built session
            self.store.release(session)
            raise

        # Discarded or expired while the check was in flight
        if not session.is_open:
            self.store.release(session)
            log.info("duplicate_check_result_dropped", session_id=session.session_id)
            raise ImportSessionNotFound("The import was cancelled.")

        # ── Stage 4: PREVIEW ──
        session.attach_rows(preview_rows)
        import_files_total.labels(outcome="previewed").inc()
        log.info(
            "import_preview_ready",
            session_id=session.session_id,
            rows=len(preview_rows),
            duplicates=sum(1 for r in preview_rows if r.duplicate),
        )
        return session

    async def commit(self, session_id: str) -> CommitResult:
        """
        Send every record with its action in one batch call.
        Partial failure is a normal result, not an exception; nothing is retried.
        A BackendError leaves the session open so the user can try again.
        A second commit while the first is in flight raises ImportInProgressError.
        """
        session = self.store.get(session_id)
        if session.committing:
            logger.warning("import_commit_rejected_in_progress", session_id=session_id)
            raise ImportInProgressError("This import is already being committed.")
        records, actions, ignored = session.build_commit()

        session.committing = True
        try:
            response = await self.client.bulk_create_with_actions(records, actions)
        finally:
            session.committing = False
        self.store.release(session)

        skipped = response.skipped
        if skipped is None:
            skipped = sum(1 for a in actions if a.action == ImportAction.SKIP)
        message = commit_message(response.successful, response.updated, skipped, response.failed)

        for result, count in (
            ("created", response.successful),
            ("updated", response.updated),
            ("skipped", skipped),
            ("failed", response.failed),
        ):
            if count:
                import_commit_rows_total.labels(result=result).inc(count)

        logger.info(
            "import_committed",
            session_id=session_id,
            total=len(records),
            successful=response.successful,
            updated=response.updated,
            skipped=skipped,
            failed=response.failed,
            backend_message=response.message,
        )

        return CommitResult(
            success=response.failed == 0,
            message=message,
            total=len(records),
            successful=response.successful,
            updated=response.updated,
            skipped=skipped,
            failed=response.failed,
            ignored_updates=ignored,
            errors=response.errors,
            refresh_required=(response.successful + response.updated) > 0,
            notice=bulk_notice(response.successful, response.failed, message, response.updated),
        )

    def discard(self, session_id: str) -> bool:
        return self.store.discard(session_id)
