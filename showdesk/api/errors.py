"""
Map pipeline and backend failures onto HTTP responses.
The detail body is always {"message", "error_code", "errors"}.
"""

from fastapi import HTTPException, status

from showdesk.client.backend import BackendError
from showdesk.pipeline.errors import (
    CsvParseError,
    DuplicateCheckError,
    ImportInProgressError,
    ImportPipelineError,
    ImportSessionNotFound,
    ImportValidationError,
    InvalidActionError,
)
from showdesk.schemas.imports import ImportErrorDetail

PIPELINE_STATUS = {
    CsvParseError: status.HTTP_400_BAD_REQUEST,
    ImportValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    DuplicateCheckError: status.HTTP_502_BAD_GATEWAY,
    InvalidActionError: status.HTTP_409_CONFLICT,
    ImportSessionNotFound: status.HTTP_404_NOT_FOUND,
    ImportInProgressError: status.HTTP_409_CONFLICT,
}


def pipeline_http_error(e: ImportPipelineError) -> HTTPException:
    code = PIPELINE_STATUS.get(type(e), status.HTTP_400_BAD_REQUEST)
    detail = ImportErrorDetail(message=e.message, error_code=e.error_code, errors=e.errors)
    return HTTPException(status_code=code, detail=detail.model_dump())


def backend_http_error(e: BackendError) -> HTTPException:
    # Client errors from the backend pass through; anything else is a gateway failure
    if e.status_code is not None and 400 <= e.status_code < 500:
        code = e.status_code
    else:
        code = status.HTTP_502_BAD_GATEWAY
    detail = ImportErrorDetail(message=e.message, error_code=e.error_code, errors=e.errors)
    return HTTPException(status_code=code, detail=detail.model_dump())
