"""
Duplicate check orchestration for a parsed import file.

One batch round-trip to the backend per file. The response is index-aligned
with the records sent; each row defaults to 'update' when a match exists and
'create' otherwise. 'skip' is never a default.
"""

import structlog

from showdesk.client.backend import BackendClient, BackendError
from showdesk.models.enums import ImportAction
from showdesk.observability.metrics import duplicate_checks_total
from showdesk.pipeline.errors import DuplicateCheckError
from showdesk.schemas.imports import DuplicateCheckResponse, ImportPreviewRow
from showdesk.schemas.shows import ShowRecord

logger = structlog.get_logger(__name__)


def build_preview(
    records: list[ShowRecord],
    row_numbers: list[int],
    response: DuplicateCheckResponse,
) -> list[ImportPreviewRow]:
    """Zip records with their duplicate results into preview rows."""
    if len(response.duplicates) != len(records):
        raise DuplicateCheckError(
            f"Duplicate check returned {len(response.duplicates)} results "
            f"for {len(records)} shows."
        )

    rows = []
    for index, (record, row_number, result) in enumerate(
        zip(records, row_numbers, response.duplicates)
    ):
        duplicate = bool(result.exists)
        rows.append(ImportPreviewRow(
            index=index,
            row_number=row_number,
            record=record,
            duplicate=duplicate,
            existing_show=result.existing_show if duplicate else None,
            is_archived=result.archived if duplicate else False,
            action=ImportAction.UPDATE if duplicate else ImportAction.CREATE,
        ))
    return rows


async def check_for_duplicates(
    client: BackendClient,
    records: list[ShowRecord],
    row_numbers: list[int],
) -> list[ImportPreviewRow]:
    """
    Run the batch duplicate check and build preview rows.
    Any failure aborts with DuplicateCheckError; no partial preview.
    """
    if not records:
        return []

    try:
        response = await client.check_duplicates(records)
    except BackendError as e:
        duplicate_checks_total.labels(mode="batch", outcome="failed").inc()
        logger.warning("duplicate_check_failed", records=len(records), error=e.message)
        raise DuplicateCheckError(
            "Could not check for duplicate shows. Please try the import again.",
        ) from e

    try:
        rows = build_preview(records, row_numbers, response)
    except DuplicateCheckError:
        duplicate_checks_total.labels(mode="batch", outcome="failed").inc()
        logger.warning(
            "duplicate_check_misaligned",
            records=len(records),
            results=len(response.duplicates),
        )
        raise

    duplicate_checks_total.labels(mode="batch", outcome="ok").inc()
    logger.info(
        "duplicate_check_complete",
        records=len(records),
        duplicates=sum(1 for r in rows if r.duplicate),
    )
    return rows
