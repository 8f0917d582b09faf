"""
Filter / sort / pagination state for show tables.

State is an immutable ListingState; every user interaction is an action
object passed through reduce(). The visible page is derived from the
records and the state, never stored.
"""

from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import Any, Optional, Sequence, Union

from showdesk.config import settings
from showdesk.models.enums import SortDirection
from showdesk.schemas.shows import ShowRecord

FILTERABLE_FIELDS = {
    "show_type",
    "media_type",
    "relationship_level",
    "ranking_category",
    "cadence",
    "region",
    "genre_name",
    "age_demographic",
    "rate_card",
    "is_original",
    "is_active",
    "is_undersized",
    "tentpole",
    "has_sponsorship_revenue",
    "has_non_evergreen_revenue",
    "requires_partner_access",
    "has_branded_revenue",
    "has_marketing_revenue",
    "has_web_mgmt_revenue",
}

SORTABLE_FIELDS = {
    "title",
    "show_type",
    "media_type",
    "relationship_level",
    "ranking_category",
    "genre_name",
    "start_date",
    "minimum_guarantee",
    "evergreen_ownership_pct",
    "latest_cpm_usd",
    "revenue_2023",
    "revenue_2024",
    "revenue_2025",
}


@dataclass(frozen=True)
class ListingState:
    search: str = ""
    filters: tuple[tuple[str, str], ...] = ()
    sort_key: str = "title"
    sort_direction: SortDirection = SortDirection.ASC
    page: int = 1
    page_size: int = settings.DEFAULT_PAGE_SIZE

    def filter_value(self, field: str) -> Optional[str]:
        return dict(self.filters).get(field)


# ── Actions ──────────────────────────────────────────────────

@dataclass(frozen=True)
class SetSearch:
    text: str


@dataclass(frozen=True)
class SetFilter:
    field: str
    value: Optional[Any]  # None clears the filter


@dataclass(frozen=True)
class ClearFilters:
    pass


@dataclass(frozen=True)
class ToggleSort:
    key: str


@dataclass(frozen=True)
class SetPage:
    page: int


@dataclass(frozen=True)
class SetPageSize:
    page_size: int


Action = Union[SetSearch, SetFilter, ClearFilters, ToggleSort, SetPage, SetPageSize]


def _filter_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value).lower()
    return str(value).strip().lower()


def reduce(state: ListingState, action: Action) -> ListingState:
    """Apply one action. Changing what is shown always returns to page 1."""
    if isinstance(action, SetSearch):
        return replace(state, search=action.text.strip(), page=1)

    if isinstance(action, SetFilter):
        if action.field not in FILTERABLE_FIELDS:
            raise ValueError(f"Cannot filter on '{action.field}'")
        filters = {k: v for k, v in state.filters if k != action.field}
        if action.value is not None and action.value != "":
            filters[action.field] = _filter_text(action.value)
        return replace(state, filters=tuple(sorted(filters.items())), page=1)

    if isinstance(action, ClearFilters):
        return replace(state, search="", filters=(), page=1)

    if isinstance(action, ToggleSort):
        if action.key not in SORTABLE_FIELDS:
            raise ValueError(f"Cannot sort on '{action.key}'")
        if action.key == state.sort_key:
            direction = (
                SortDirection.DESC if state.sort_direction == SortDirection.ASC else SortDirection.ASC
            )
        else:
            direction = SortDirection.ASC
        return replace(state, sort_key=action.key, sort_direction=direction, page=1)

    if isinstance(action, SetPage):
        return replace(state, page=max(1, action.page))

    if isinstance(action, SetPageSize):
        return replace(state, page_size=max(1, action.page_size), page=1)

    raise TypeError(f"Unknown listing action: {action!r}")


# ── Derived view ─────────────────────────────────────────────

@dataclass(frozen=True)
class ListingPage:
    items: list
    total: int
    page: int
    page_size: int
    page_count: int


def _matches(record: ShowRecord, state: ListingState) -> bool:
    if state.search and state.search.lower() not in record.title.lower():
        return False
    for field, wanted in state.filters:
        value = getattr(record, field, None)
        if value is None or _filter_text(value) != wanted:
            return False
    return True


def _sort_value(value: Any):
    if isinstance(value, Enum):
        return str(value.value).lower()
    if isinstance(value, str):
        return value.lower()
    if isinstance(value, date):
        return value.toordinal()
    return value


def derive_view(records: Sequence[ShowRecord], state: ListingState) -> ListingPage:
    """Filter, sort and slice. Records with no value for the sort key go last."""
    matched = [r for r in records if _matches(r, state)]

    present = [r for r in matched if getattr(r, state.sort_key, None) is not None]
    missing = [r for r in matched if getattr(r, state.sort_key, None) is None]
    present.sort(
        key=lambda r: _sort_value(getattr(r, state.sort_key)),
        reverse=state.sort_direction == SortDirection.DESC,
    )
    ordered = present + missing

    total = len(ordered)
    page_count = max(1, -(-total // state.page_size))
    page = min(state.page, page_count)
    start = (page - 1) * state.page_size
    return ListingPage(
        items=ordered[start:start + state.page_size],
        total=total,
        page=page,
        page_size=state.page_size,
        page_count=page_count,
    )


class ListingView:
    """Holds a ListingState and memoises the last derived page."""

    def __init__(self, state: Optional[ListingState] = None):
        self.state = state if state is not None else ListingState()
        # The records object itself is held so identity checks never see a reused id
        self._cached_records: Optional[Sequence[ShowRecord]] = None
        self._cache_key: Optional[tuple] = None
        self._cached: Optional[ListingPage] = None

    def dispatch(self, *actions: Action) -> ListingState:
        for action in actions:
            self.state = reduce(self.state, action)
        return self.state

    def page(self, records: Sequence[ShowRecord]) -> ListingPage:
        key = (len(records), self.state)
        if records is not self._cached_records or key != self._cache_key:
            self._cached = derive_view(records, self.state)
            self._cached_records = records
            self._cache_key = key
        return self._cached


def state_from_query(
    search: Optional[str] = None,
    filters: Optional[dict] = None,
    sort_key: str = "title",
    sort_direction: SortDirection = SortDirection.ASC,
    page: int = 1,
    page_size: Optional[int] = None,
) -> ListingState:
    """Build a state from request parameters through the same reducer the UI uses."""
    if sort_key not in SORTABLE_FIELDS:
        raise ValueError(f"Cannot sort on '{sort_key}'")
    state = ListingState(sort_key=sort_key, sort_direction=sort_direction)
    if page_size is not None:
        state = reduce(state, SetPageSize(page_size))
    if search:
        state = reduce(state, SetSearch(search))
    for field, value in (filters or {}).items():
        state = reduce(state, SetFilter(field, value))
    return reduce(state, SetPage(page))
