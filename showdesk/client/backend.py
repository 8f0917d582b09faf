"""
Async client for the catalogue backend REST API.

The backend owns persistence and business rules; this client only moves
ShowRecords over the wire and turns failures into BackendError.
"""

import time
from typing import Any, Optional, Union

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from showdesk.config import settings
from showdesk.observability.metrics import (
    backend_request_failures_total,
    backend_request_latency_seconds,
)
from showdesk.schemas.imports import (
    BulkImportWithActionsResponse,
    DuplicateAction,
    DuplicateCheckResponse,
    DuplicateCheckResult,
)
from showdesk.schemas.shows import BulkOperationResult, Show, ShowRecord

logger = structlog.get_logger(__name__)

Payload = Union[ShowRecord, dict]


class BackendError(Exception):
    """A backend call failed (network error or non-2xx response)."""
    error_code = "ERR_BACKEND"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        detail: Any = None,
        operation: Optional[str] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.detail = detail
        self.operation = operation
        super().__init__(message)

    @property
    def errors(self) -> list[str]:
        if isinstance(self.detail, dict):
            return [str(e) for e in self.detail.get("errors", [])]
        return []


def record_payload(record: Payload) -> dict:
    """JSON body for a create: absent fields are omitted rather than sent as null."""
    if isinstance(record, ShowRecord):
        return record.model_dump(mode="json", exclude_none=True)
    return {k: v for k, v in record.items() if v is not None}


def update_payload(record: Payload) -> dict:
    """
    JSON body for an update: drop empty strings so stored values are not
    blanked, and cut ISO datetimes down to dates.
    """
    data = record_payload(record)
    start = data.get("start_date")
    if isinstance(start, str) and "T" in start:
        data["start_date"] = start[:10]
    return {k: v for k, v in data.items() if v != ""}


def _error_message(response: httpx.Response, body: Any) -> str:
    if response.status_code == 401:
        return "Authentication required. Please log in again."
    if response.status_code == 404:
        return "Endpoint not found. Please check that the backend is running the latest version."
    detail = body.get("detail") if isinstance(body, dict) else None
    if isinstance(detail, str) and detail:
        return detail
    if isinstance(detail, dict) and detail.get("message"):
        return str(detail["message"])
    return f"HTTP error! status: {response.status_code}"


def parse_response(operation: str, model: type[BaseModel], data: Any) -> Any:
    """Validate a 2xx body; a payload that does not fit the schema is a BackendError."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        backend_request_failures_total.labels(operation=operation, status_code="invalid_body").inc()
        logger.warning("backend_response_invalid", operation=operation, errors=e.error_count())
        raise BackendError(
            "Unexpected response from backend.",
            detail={"errors": [err["msg"] for err in e.errors()]},
            operation=operation,
        ) from e


class BackendClient:
    """Thin async wrapper over the backend's /podcasts endpoints."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        headers = {"Content-Type": "application/json"}
        token = token if token is not None else settings.BACKEND_API_TOKEN
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=(base_url or settings.BACKEND_API_URL).rstrip("/"),
            headers=headers,
            timeout=timeout if timeout is not None else settings.BACKEND_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Optional[dict] = None,
    ) -> Any:
        started = time.perf_counter()
        try:
            response = await self._client.request(method, path, json=json, params=params)
        except httpx.HTTPError as e:
            backend_request_failures_total.labels(operation=operation, status_code="network").inc()
            logger.warning("backend_request_failed", operation=operation, error=str(e))
            raise BackendError(
                "Could not reach the backend API.", operation=operation,
            ) from e
        finally:
            backend_request_latency_seconds.labels(operation=operation).observe(
                time.perf_counter() - started
            )

        if response.status_code == 204:
            return None

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.is_error:
            backend_request_failures_total.labels(
                operation=operation, status_code=str(response.status_code),
            ).inc()
            logger.warning(
                "backend_request_failed",
                operation=operation,
                status_code=response.status_code,
                detail=body.get("detail") if isinstance(body, dict) else None,
            )
            raise BackendError(
                _error_message(response, body),
                status_code=response.status_code,
                detail=body.get("detail") if isinstance(body, dict) else None,
                operation=operation,
            )

        return body

    # ── Shows ────────────────────────────────────────────────

    async def list_shows(self) -> list[Show]:
        data = await self._request("list_shows", "GET", "/podcasts")
        return [parse_response("list_shows", Show, s) for s in data or []]

    async def filter_shows(self, **filters) -> list[Show]:
        params = {k: str(v).lower() if isinstance(v, bool) else str(v)
                  for k, v in filters.items() if v is not None}
        data = await self._request("filter_shows", "GET", "/podcasts/filter", params=params)
        return [parse_response("filter_shows", Show, s) for s in data or []]

    async def get_show(self, show_id: str) -> Show:
        data = await self._request("get_show", "GET", f"/podcasts/{show_id}")
        return parse_response("get_show", Show, data)

    async def create_show(self, record: Payload) -> Show:
        data = await self._request("create_show", "POST", "/podcasts", json=record_payload(record))
        return parse_response("create_show", Show, data)

    async def update_show(self, show_id: str, record: Payload) -> Show:
        data = await self._request(
            "update_show", "PUT", f"/podcasts/{show_id}", json=update_payload(record),
        )
        return parse_response("update_show", Show, data)

    async def delete_show(self, show_id: str) -> None:
        await self._request("delete_show", "DELETE", f"/podcasts/{show_id}")

    # ── Archive ──────────────────────────────────────────────

    async def archive_show(self, show_id: str) -> Show:
        data = await self._request("archive_show", "PATCH", f"/podcasts/{show_id}/archive")
        return parse_response("archive_show", Show, data)

    async def unarchive_show(self, show_id: str) -> Show:
        data = await self._request("unarchive_show", "PATCH", f"/podcasts/{show_id}/unarchive")
        return parse_response("unarchive_show", Show, data)

    async def list_archived_shows(self) -> list[Show]:
        try:
            data = await self._request("list_archived_shows", "GET", "/podcasts/archived")
        except BackendError as e:
            # Older backends have no archive endpoint
            if e.status_code == 404:
                return []
            raise
        return [parse_response("list_archived_shows", Show, s) for s in data or []]

    async def bulk_archive(self, show_ids: list[str]) -> BulkOperationResult:
        data = await self._request(
            "bulk_archive", "PATCH", "/podcasts/bulk-archive", json={"show_ids": show_ids},
        )
        return parse_response("bulk_archive", BulkOperationResult, data or {})

    async def bulk_unarchive(self, show_ids: list[str]) -> BulkOperationResult:
        data = await self._request(
            "bulk_unarchive", "PATCH", "/podcasts/bulk-unarchive", json={"show_ids": show_ids},
        )
        return parse_response("bulk_unarchive", BulkOperationResult, data or {})

    async def bulk_delete(self, show_ids: list[str]) -> BulkOperationResult:
        data = await self._request(
            "bulk_delete", "DELETE", "/podcasts/bulk-delete", json={"show_ids": show_ids},
        )
        return parse_response("bulk_delete", BulkOperationResult, data or {})

    # ── Duplicates & bulk import ─────────────────────────────

    async def check_single_duplicate(self, record: Payload) -> DuplicateCheckResult:
        data = await self._request(
            "check_single_duplicate", "POST", "/podcasts/check-duplicate",
            json=record_payload(record),
        )
        return parse_response("check_single_duplicate", DuplicateCheckResult, data or {})

    async def check_duplicates(self, records: list[ShowRecord]) -> DuplicateCheckResponse:
        data = await self._request(
            "check_duplicates", "POST", "/podcasts/check-duplicates",
            json=[record_payload(r) for r in records],
        )
        return parse_response("check_duplicates", DuplicateCheckResponse, data or {"duplicates": []})

    async def bulk_create_with_actions(
        self,
        records: list[ShowRecord],
        actions: list[DuplicateAction],
    ) -> BulkImportWithActionsResponse:
        data = await self._request(
            "bulk_create_with_actions", "POST", "/podcasts/bulk-import-with-actions",
            json={
                "shows_data": [record_payload(r) for r in records],
                "actions": [a.model_dump(mode="json") for a in actions],
            },
        )
        return parse_response("bulk_create_with_actions", BulkImportWithActionsResponse, data or {})
