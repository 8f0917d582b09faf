"""
Interactive duplicate-title check for the create/edit form.

Every title change restarts a debounce timer; when it fires, one
single-record check goes to the backend. Requests already in flight are
not cancelled. Instead each carries the generation it was issued for, and
its response is applied only if no newer change has happened since.
"""

import asyncio
from typing import Optional

import structlog

from showdesk.client.backend import BackendClient, BackendError
from showdesk.config import settings
from showdesk.models.enums import TitleSuggestion
from showdesk.observability.metrics import duplicate_checks_total
from showdesk.schemas.imports import DuplicateCheckResult, TitleCheckState

logger = structlog.get_logger(__name__)


def state_from_result(
    title: str,
    result: DuplicateCheckResult,
    exclude_show_id: Optional[str] = None,
) -> TitleCheckState:
    """Turn a backend check result into the form's warning state."""
    existing = result.existing_show
    if not result.exists or (existing is not None and existing.id == exclude_show_id):
        return TitleCheckState(title=title)

    archived = result.archived
    return TitleCheckState(
        title=title,
        is_duplicate=True,
        existing_show=existing,
        is_archived=archived,
        suggestion=(
            TitleSuggestion.UNARCHIVE_AND_EDIT if archived else TitleSuggestion.EDIT_EXISTING
        ),
    )


async def check_title(
    client: BackendClient,
    title: str,
    exclude_show_id: Optional[str] = None,
) -> TitleCheckState:
    """One-shot check, no debounce."""
    try:
        result = await client.check_single_duplicate({"title": title})
    except BackendError:
        duplicate_checks_total.labels(mode="single", outcome="failed").inc()
        raise
    duplicate_checks_total.labels(mode="single", outcome="ok").inc()
    return state_from_result(title, result, exclude_show_id)


class TitleCheckWatcher:
    """Debounced, last-change-wins duplicate check bound to one form."""

    def __init__(
        self,
        client: BackendClient,
        debounce_ms: Optional[int] = None,
        exclude_show_id: Optional[str] = None,
    ):
        self.client = client
        self.debounce = (debounce_ms if debounce_ms is not None else settings.TITLE_CHECK_DEBOUNCE_MS) / 1000
        self.exclude_show_id = exclude_show_id
        self.state = TitleCheckState()
        self._generation = 0
        self._timer: Optional[asyncio.Task] = None
        self._in_flight: set[asyncio.Task] = set()
        self._open = True

    @property
    def generation(self) -> int:
        return self._generation

    def title_changed(self, title: str) -> None:
        """Record a keystroke. Must be called from a running event loop."""
        if not self._open:
            return
        self._generation += 1
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()

        title = title.strip()
        self.state = TitleCheckState(title=title)
        if not title:
            self._timer = None
            return
        self._timer = asyncio.create_task(self._debounced(self._generation, title))

    async def _debounced(self, generation: int, title: str) -> None:
        await asyncio.sleep(self.debounce)
        if not self._is_current(generation, title):
            return
        self.state = TitleCheckState(title=title, checking=True)
        task = asyncio.create_task(self._check(generation, title))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

    async def _check(self, generation: int, title: str) -> None:
        try:
            state = await check_title(self.client, title, self.exclude_show_id)
        except BackendError as e:
            if self._is_current(generation, title):
                logger.warning("title_check_failed", title=title, error=e.message)
                self.state = TitleCheckState(
                    title=title, error="Could not check whether this title already exists.",
                )
            return

        if not self._is_current(generation, title):
            logger.debug(
                "title_check_stale_response_ignored",
                title=title,
                generation=generation,
                latest=self._generation,
            )
            return
        self.state = state

    def _is_current(self, generation: int, title: str) -> bool:
        return self._open and generation == self._generation and title == self.state.title

    async def wait_idle(self) -> None:
        """Wait until no timer or request is pending."""
        while True:
            pending = [t for t in (self._timer, *self._in_flight) if t is not None and not t.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    def close(self) -> None:
        """Form closed: drop the timer and ignore any late responses."""
        self._open = False
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
