"""
Import pipeline errors.
Each carries a user-safe message and a stable error_code.
"""

from typing import Optional


class ImportPipelineError(Exception):
    """Fatal import pipeline error."""
    error_code = "ERR_IMPORT"

    def __init__(self, message: str, errors: Optional[list[str]] = None):
        self.message = message
        self.errors = errors or []
        super().__init__(message)


class CsvParseError(ImportPipelineError):
    """The file is not structurally valid CSV. Nothing was processed."""
    error_code = "ERR_CSV_PARSE"


class ImportValidationError(ImportPipelineError):
    """One or more rows failed validation. The whole file is rejected."""
    error_code = "ERR_VALIDATION"


class DuplicateCheckError(ImportPipelineError):
    """The backend duplicate check failed; duplicate status is unknown."""
    error_code = "ERR_DUPLICATE_CHECK"


class InvalidActionError(ImportPipelineError):
    """A preview row action that cannot be applied."""
    error_code = "ERR_INVALID_ACTION"


class ImportSessionNotFound(ImportPipelineError):
    """Unknown, expired or discarded import session."""
    error_code = "ERR_SESSION_NOT_FOUND"


class ImportInProgressError(ImportPipelineError):
    """The session is already being committed, or its id is taken."""
    error_code = "ERR_IMPORT_IN_PROGRESS"
