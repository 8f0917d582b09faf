"""
Shared test fixtures.
"""

import asyncio
import csv
import io
import json
from typing import Optional

import httpx
import pytest

from showdesk.client.backend import BackendClient
from showdesk.dependencies import get_backend_client, get_session_store
from showdesk.main import create_app
from showdesk.pipeline.orchestrator import ImportPipeline
from showdesk.review.sessions import ImportSessionStore

BACKEND_URL = "http://backend.test/api"


class FakeBackend:
    """
    In-memory stand-in for the catalogue backend's /podcasts API.
    Mounted through httpx.MockTransport, so the real client code runs.
    """

    def __init__(self):
        self.shows: dict[str, dict] = {}
        self.requests: list[httpx.Request] = []
        self.failures: dict[tuple[str, str], tuple[int, object]] = {}
        self.title_delays: dict[str, float] = {}
        self.delays: dict[str, float] = {}
        self.canned: dict[tuple[str, str], object] = {}
        self.bulk_import_response: Optional[dict] = None
        self._next_id = 1

    # ── Setup helpers ──

    def add_show(self, title: str, archived: bool = False, **fields) -> dict:
        show_id = str(self._next_id)
        self._next_id += 1
        show = {"id": show_id, "title": title, "is_archived": archived, **fields}
        self.shows[show_id] = show
        return show

    def fail(self, method: str, path: str, status_code: int = 500, detail: object = "Internal error"):
        self.failures[(method, path)] = (status_code, detail)

    def respond(self, method: str, path: str, body: object):
        """Answer (method, path) with a fixed 200 body, shaped or not."""
        self.canned[(method, path)] = body

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and self._path(r) == path]

    # ── Transport ──

    @staticmethod
    def _path(request: httpx.Request) -> str:
        path = request.url.path
        return path[len("/api"):] if path.startswith("/api") else path

    def _find(self, title: str) -> Optional[dict]:
        key = title.strip().lower()
        for show in self.shows.values():
            if show["title"].strip().lower() == key:
                return show
        return None

    def _check(self, title: str) -> dict:
        show = self._find(title)
        return {
            "title": title,
            "exists": show is not None,
            "existing_show": show,
            "is_archived": show["is_archived"] if show else None,
        }

    def _bulk(self, show_ids: list[str], archived: Optional[bool]) -> dict:
        successful, failed, errors = 0, 0, []
        for show_id in show_ids:
            if show_id not in self.shows:
                failed += 1
                errors.append(f"Show {show_id} not found")
                continue
            if archived is None:
                del self.shows[show_id]
            else:
                self.shows[show_id]["is_archived"] = archived
            successful += 1
        return {
            "successful": successful,
            "failed": failed,
            "errors": errors,
            "message": f"{successful} processed, {failed} failed",
        }

    def _bulk_import(self, body: dict) -> dict:
        created = updated = skipped = 0
        for data, action in zip(body["shows_data"], body["actions"]):
            if action["action"] == "skip":
                skipped += 1
            elif action["action"] == "update":
                self._find(data["title"]).update(data)
                updated += 1
            else:
                self.add_show(**data)
                created += 1
        return {
            "message": "Bulk import completed",
            "total": len(body["shows_data"]),
            "successful": created,
            "updated": updated,
            "skipped": skipped,
            "failed": 0,
            "errors": [],
        }

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        method, path = request.method, self._path(request)
        body = json.loads(request.content) if request.content else None

        if path in self.delays:
            await asyncio.sleep(self.delays[path])

        if (method, path) in self.failures:
            status_code, detail = self.failures[(method, path)]
            return httpx.Response(status_code, json={"detail": detail})
        if (method, path) in self.canned:
            return httpx.Response(200, json=self.canned[(method, path)])

        parts = path.strip("/").split("/")

        if path == "/podcasts" and method == "GET":
            return httpx.Response(200, json=[s for s in self.shows.values() if not s["is_archived"]])
        if path == "/podcasts" and method == "POST":
            return httpx.Response(201, json=self.add_show(**body))
        if path == "/podcasts/archived":
            return httpx.Response(200, json=[s for s in self.shows.values() if s["is_archived"]])
        if path == "/podcasts/check-duplicate":
            delay = self.title_delays.get(body["title"])
            if delay:
                await asyncio.sleep(delay)
            return httpx.Response(200, json=self._check(body["title"]))
        if path == "/podcasts/check-duplicates":
            results = [self._check(s["title"]) for s in body]
            return httpx.Response(200, json={
                "duplicates": results,
                "total_checked": len(results),
                "duplicates_found": sum(1 for r in results if r["exists"]),
                "message": "ok",
            })
        if path == "/podcasts/bulk-import-with-actions":
            return httpx.Response(200, json=self.bulk_import_response or self._bulk_import(body))
        if path == "/podcasts/bulk-archive":
            return httpx.Response(200, json=self._bulk(body["show_ids"], True))
        if path == "/podcasts/bulk-unarchive":
            return httpx.Response(200, json=self._bulk(body["show_ids"], False))
        if path == "/podcasts/bulk-delete":
            return httpx.Response(200, json=self._bulk(body["show_ids"], None))

        if len(parts) >= 2 and parts[1] in self.shows:
            show = self.shows[parts[1]]
            if len(parts) == 3 and parts[2] in ("archive", "unarchive"):
                show["is_archived"] = parts[2] == "archive"
                return httpx.Response(200, json=show)
            if method == "GET":
                return httpx.Response(200, json=show)
            if method == "PUT":
                show.update(body)
                return httpx.Response(200, json=show)
            if method == "DELETE":
                del self.shows[parts[1]]
                return httpx.Response(204)

        return httpx.Response(404, json={"detail": "Not Found"})


@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest.fixture
async def backend_client(fake_backend):
    client = BackendClient(
        base_url=BACKEND_URL,
        token="test-token",
        transport=httpx.MockTransport(fake_backend.handler),
    )
    yield client
    await client.aclose()


@pytest.fixture
def session_store():
    return ImportSessionStore(ttl=60)


@pytest.fixture
def pipeline(backend_client, session_store):
    return ImportPipeline(backend_client, session_store)


def build_csv(headers: list[str], rows: list[list[str]]) -> bytes:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(headers)
    writer.writerows(rows)
    return buffer.getvalue().encode("utf-8")


@pytest.fixture
def sample_csv():
    """Three valid shows using a subset of template columns."""
    return build_csv(
        ["Show Name", "Format", "Relationship", "Ranking Category", "Start Date",
         "Side Bonus (%)", "Is Rate Card Show", "Genre"],
        [
            ["Morning Brief", "Audio", "Strong", "Level 2", "2024-01-15", "25", "Yes", "News & Politics"],
            ["Night Owls", "video", "medium", "3", "01/15/2024", "10.5%", "no", "true crime"],
            ["Weekend Roundup", "both", "", "", "", "", "", ""],
        ],
    )


@pytest.fixture
def make_csv():
    return build_csv


# ── API ──────────────────────────────────────────────────────

@pytest.fixture
def app(backend_client, session_store):
    """The real app with the backend client wired to the fake backend."""
    app = create_app()
    app.dependency_overrides[get_backend_client] = lambda: backend_client
    app.dependency_overrides[get_session_store] = lambda: session_store
    return app


@pytest.fixture
async def api(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
