"""
/api/v1/imports endpoints.
Upload a CSV, review the duplicate preview, set row actions, commit.
"""

import uuid
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, File, Form, HTTPException, Response, UploadFile, status

from showdesk.api.errors import backend_http_error, pipeline_http_error
from showdesk.client.backend import BackendError
from showdesk.config import settings
from showdesk.dependencies import get_import_pipeline, get_session_store, verify_api_key
from showdesk.pipeline.errors import ImportPipelineError, ImportSessionNotFound
from showdesk.pipeline.exporter import TEMPLATE_FILE_NAME, render_template
from showdesk.pipeline.orchestrator import ImportPipeline
from showdesk.review.sessions import ImportSessionStore
from showdesk.schemas.imports import CommitResult, ImportPreview, ImportPreviewRow, RowActionUpdate

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/v1/imports", tags=["imports"], dependencies=[Depends(verify_api_key)])


def csv_response(content: str, file_name: str) -> Response:
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{file_name}"'},
    )


@router.get("/template")
async def download_template():
    """Header-only CSV in import column order."""
    return csv_response(render_template(), TEMPLATE_FILE_NAME)


@router.post("", response_model=ImportPreview, status_code=status.HTTP_201_CREATED)
async def upload_import(
    file: UploadFile = File(...),
    session_id: Optional[str] = Form(None),
    pipeline: ImportPipeline = Depends(get_import_pipeline),
):
    """
    Parse, validate and duplicate-check a CSV file; returns the preview to review.
    A client-generated session_id (UUID) can be discarded before this returns.
    """
    file_name = file.filename or "import.csv"

    if session_id is not None:
        try:
            session_id = str(uuid.UUID(session_id))
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="session_id must be a UUID",
            )

    # Validate file type
    allowed = settings.ALLOWED_UPLOAD_TYPES.split(",")
    if file.content_type not in allowed and not file_name.lower().endswith(".csv"):
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail=f"Unsupported file type: {file.content_type}. Please upload a .csv file",
        )

    file_bytes = await file.read()
    file_size = len(file_bytes)

    # Validate size
    max_bytes = settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024
    if file_size > max_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File too large: {file_size} bytes. Max: {max_bytes} bytes",
        )

    if file_size == 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Empty file uploaded",
        )

    try:
        session = await pipeline.prepare(file_bytes, file_name, session_id=session_id)
    except ImportPipelineError as e:
        raise pipeline_http_error(e)

    logger.info("import_uploaded", session_id=session.session_id, file_name=file_name, file_size_bytes=file_size)
    return session.to_preview()


@router.get("/{session_id}", response_model=ImportPreview)
async def get_import(session_id: str, store: ImportSessionStore = Depends(get_session_store)):
    try:
        return store.get(session_id).to_preview()
    except ImportPipelineError as e:
        raise pipeline_http_error(e)


@router.patch("/{session_id}/rows/{index}", response_model=ImportPreviewRow)
async def set_row_action(
    session_id: str,
    index: int,
    body: RowActionUpdate,
    store: ImportSessionStore = Depends(get_session_store),
):
    """Choose create / update / skip for one preview row."""
    try:
        return store.get(session_id).set_action(index, body.action)
    except ImportPipelineError as e:
        raise pipeline_http_error(e)


@router.post("/{session_id}/commit", response_model=CommitResult)
async def commit_import(session_id: str, pipeline: ImportPipeline = Depends(get_import_pipeline)):
    """Send the reviewed rows to the backend in one batch."""
    try:
        return await pipeline.commit(session_id)
    except ImportPipelineError as e:
        raise pipeline_http_error(e)
    except BackendError as e:
        raise backend_http_error(e)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def discard_import(session_id: str, pipeline: ImportPipeline = Depends(get_import_pipeline)):
    """Close the import without committing. Late duplicate-check results are dropped."""
    if not pipeline.discard(session_id):
        raise pipeline_http_error(ImportSessionNotFound("Import session not found."))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
