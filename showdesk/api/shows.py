"""
/api/v1/shows endpoints.
Listing, export, CRUD, archive and the interactive title check, all proxied
to the backend. Mutations return the backend payload plus a Notice.
"""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status

from showdesk.api.errors import backend_http_error
from showdesk.api.imports import csv_response
from showdesk.client.backend import BackendClient, BackendError
from showdesk.dependencies import get_backend_client, verify_api_key
from showdesk.models.enums import SortDirection
from showdesk.notices import bulk_result_notice, success
from showdesk.pipeline.exporter import export_file_name, export_shows
from showdesk.pipeline.title_check import check_title
from showdesk.schemas.imports import TitleCheckRequest, TitleCheckState
from showdesk.schemas.responses import BulkMutationResponse, ShowListResponse, ShowMutationResponse
from showdesk.schemas.shows import BulkIdsRequest, Show, ShowRecord
from showdesk.state.listing import derive_view, state_from_query

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/v1/shows", tags=["shows"], dependencies=[Depends(verify_api_key)])


@router.get("", response_model=ShowListResponse)
async def list_shows(
    search: Optional[str] = Query(None),
    sort_key: str = Query("title"),
    sort_direction: SortDirection = Query(SortDirection.ASC),
    page: int = Query(1, ge=1),
    page_size: Optional[int] = Query(None, ge=1, le=500),
    show_type: Optional[str] = Query(None),
    media_type: Optional[str] = Query(None),
    relationship_level: Optional[str] = Query(None),
    ranking_category: Optional[str] = Query(None),
    genre_name: Optional[str] = Query(None),
    rate_card: Optional[bool] = Query(None),
    is_original: Optional[bool] = Query(None),
    is_active: Optional[bool] = Query(None),
    client: BackendClient = Depends(get_backend_client),
):
    """Active shows, filtered, sorted and paginated."""
    filters = {
        "show_type": show_type,
        "media_type": media_type,
        "relationship_level": relationship_level,
        "ranking_category": ranking_category,
        "genre_name": genre_name,
        "rate_card": rate_card,
        "is_original": is_original,
        "is_active": is_active,
    }
    try:
        state = state_from_query(search, filters, sort_key, sort_direction, page, page_size)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))

    try:
        shows = await client.list_shows()
    except BackendError as e:
        raise backend_http_error(e)

    view = derive_view(shows, state)
    return ShowListResponse(
        items=view.items,
        total=view.total,
        page=view.page,
        page_size=view.page_size,
        page_count=view.page_count,
        sort_key=state.sort_key,
        sort_direction=state.sort_direction,
    )


@router.get("/archived", response_model=list[Show])
async def list_archived_shows(client: BackendClient = Depends(get_backend_client)):
    try:
        return await client.list_archived_shows()
    except BackendError as e:
        raise backend_http_error(e)


@router.get("/export")
async def export_all_shows(client: BackendClient = Depends(get_backend_client)):
    """All active shows as CSV in import column order."""
    try:
        shows = await client.list_shows()
    except BackendError as e:
        raise backend_http_error(e)
    logger.info("shows_exported", count=len(shows))
    return csv_response(export_shows(shows), export_file_name())


@router.post("/check-title", response_model=TitleCheckState)
async def check_show_title(body: TitleCheckRequest, client: BackendClient = Depends(get_backend_client)):
    """Does a show with this title already exist (archived or not)?"""
    try:
        return await check_title(client, body.title.strip(), body.exclude_show_id)
    except BackendError as e:
        raise backend_http_error(e)


# ── Bulk ─────────────────────────────────────────────────────

@router.patch("/bulk-archive", response_model=BulkMutationResponse)
async def bulk_archive_shows(body: BulkIdsRequest, client: BackendClient = Depends(get_backend_client)):
    try:
        result = await client.bulk_archive(body.show_ids)
    except BackendError as e:
        raise backend_http_error(e)
    notice = bulk_result_notice("archive", "archived", result.successful, result.failed, result.message)
    return BulkMutationResponse(result=result, notice=notice)


@router.patch("/bulk-unarchive", response_model=BulkMutationResponse)
async def bulk_unarchive_shows(body: BulkIdsRequest, client: BackendClient = Depends(get_backend_client)):
    try:
        result = await client.bulk_unarchive(body.show_ids)
    except BackendError as e:
        raise backend_http_error(e)
    notice = bulk_result_notice("unarchive", "unarchived", result.successful, result.failed, result.message)
    return BulkMutationResponse(result=result, notice=notice)


@router.delete("/bulk-delete", response_model=BulkMutationResponse)
async def bulk_delete_shows(body: BulkIdsRequest, client: BackendClient = Depends(get_backend_client)):
    try:
        result = await client.bulk_delete(body.show_ids)
    except BackendError as e:
        raise backend_http_error(e)
    notice = bulk_result_notice("delete", "deleted", result.successful, result.failed, result.message)
    return BulkMutationResponse(result=result, notice=notice)


# ── Single show ──────────────────────────────────────────────

@router.post("", response_model=ShowMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_show(body: ShowRecord, client: BackendClient = Depends(get_backend_client)):
    try:
        show = await client.create_show(body)
    except BackendError as e:
        raise backend_http_error(e)
    logger.info("show_created", show_id=show.id, title=show.title)
    return ShowMutationResponse(show=show, notice=success("Show created successfully!"))


@router.get("/{show_id}", response_model=Show)
async def get_show(show_id: str, client: BackendClient = Depends(get_backend_client)):
    try:
        return await client.get_show(show_id)
    except BackendError as e:
        raise backend_http_error(e)


@router.put("/{show_id}", response_model=ShowMutationResponse)
async def update_show(show_id: str, body: ShowRecord, client: BackendClient = Depends(get_backend_client)):
    try:
        show = await client.update_show(show_id, body)
    except BackendError as e:
        raise backend_http_error(e)
    logger.info("show_updated", show_id=show_id)
    return ShowMutationResponse(show=show, notice=success("Show updated successfully!"))


@router.delete("/{show_id}", response_model=ShowMutationResponse)
async def delete_show(show_id: str, client: BackendClient = Depends(get_backend_client)):
    try:
        await client.delete_show(show_id)
    except BackendError as e:
        raise backend_http_error(e)
    logger.info("show_deleted", show_id=show_id)
    return ShowMutationResponse(notice=success("Show deleted successfully!"))


@router.patch("/{show_id}/archive", response_model=ShowMutationResponse)
async def archive_show(show_id: str, client: BackendClient = Depends(get_backend_client)):
    try:
        show = await client.archive_show(show_id)
    except BackendError as e:
        raise backend_http_error(e)
    return ShowMutationResponse(show=show, notice=success("Show archived successfully!"))


@router.patch("/{show_id}/unarchive", response_model=ShowMutationResponse)
async def unarchive_show(show_id: str, client: BackendClient = Depends(get_backend_client)):
    try:
        show = await client.unarchive_show(show_id)
    except BackendError as e:
        raise backend_http_error(e)
    return ShowMutationResponse(show=show, notice=success("Show unarchived successfully!"))
