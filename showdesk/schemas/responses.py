"""
Response envelopes for the /api/v1/shows endpoints.
Mutations carry the backend payload plus a Notice.
"""

from typing import Optional

from pydantic import BaseModel

from showdesk.models.enums import SortDirection
from showdesk.schemas.imports import Notice
from showdesk.schemas.shows import BulkOperationResult, Show


class ShowListResponse(BaseModel):
    items: list[Show]
    total: int
    page: int
    page_size: int
    page_count: int
    sort_key: str
    sort_direction: SortDirection


class ShowMutationResponse(BaseModel):
    show: Optional[Show] = None
    notice: Notice


class BulkMutationResponse(BaseModel):
    result: BulkOperationResult
    notice: Notice
