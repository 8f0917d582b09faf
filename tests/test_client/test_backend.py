"""
Tests for the backend REST client.
"""

import json
from datetime import date

import httpx
import pytest

from showdesk.client.backend import BackendClient, BackendError, record_payload, update_payload
from showdesk.schemas.shows import ShowRecord


def client_returning(status_code: int, body=None) -> BackendClient:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=body)
    return BackendClient(base_url="http://backend.test/api", transport=httpx.MockTransport(handler))


class TestPayloads:

    def test_create_omits_absent(self):
        payload = record_payload(ShowRecord(title="Alpha", start_date=date(2024, 1, 2)))
        assert payload["title"] == "Alpha"
        assert payload["start_date"] == "2024-01-02"
        assert "genre_name" not in payload

    def test_update_drops_empty_strings_and_trims_datetime(self):
        payload = update_payload({"title": "Alpha", "genre_name": "", "start_date": "2024-01-02T00:00:00Z"})
        assert payload == {"title": "Alpha", "start_date": "2024-01-02"}


class TestRequests:

    async def test_bearer_token(self, backend_client, fake_backend):
        await backend_client.list_shows()
        assert fake_backend.requests[0].headers["Authorization"] == "Bearer test-token"

    async def test_create(self, backend_client, fake_backend):
        show = await backend_client.create_show(ShowRecord(title="Alpha", rate_card=True))
        assert show.id == "1"
        body = json.loads(fake_backend.requests[0].content)
        assert body["rate_card"] is True

    async def test_archive_roundtrip(self, backend_client, fake_backend):
        fake_backend.add_show("Alpha")
        archived = await backend_client.archive_show("1")
        assert archived.is_archived
        assert [s.title for s in await backend_client.list_archived_shows()] == ["Alpha"]
        assert await backend_client.list_shows() == []

    async def test_bulk_delete_counts(self, backend_client, fake_backend):
        fake_backend.add_show("Alpha")
        result = await backend_client.bulk_delete(["1", "99"])
        assert (result.successful, result.failed) == (1, 1)
        assert fake_backend.calls("DELETE", "/podcasts/bulk-delete")

    async def test_check_duplicates_index_aligned(self, backend_client, fake_backend):
        fake_backend.add_show("Beta", archived=True)
        response = await backend_client.check_duplicates([ShowRecord(title="Alpha"), ShowRecord(title="beta")])
        assert [d.exists for d in response.duplicates] == [False, True]
        assert response.duplicates[1].archived


class TestErrors:

    async def test_401(self):
        client = client_returning(401, {"detail": "Not authenticated"})
        with pytest.raises(BackendError) as exc:
            await client.list_shows()
        assert exc.value.message == "Authentication required. Please log in again."
        assert exc.value.status_code == 401

    async def test_404(self):
        client = client_returning(404, {"detail": "Not Found"})
        with pytest.raises(BackendError, match="Endpoint not found"):
            await client.get_show("1")

    async def test_detail_string(self):
        client = client_returning(409, {"detail": "Show with this title already exists"})
        with pytest.raises(BackendError, match="already exists"):
            await client.create_show(ShowRecord(title="Alpha"))

    async def test_detail_dict_errors(self):
        client = client_returning(422, {"detail": {"message": "Bad rows", "errors": ["Row 1: bad"]}})
        with pytest.raises(BackendError) as exc:
            await client.bulk_create_with_actions([], [])
        assert exc.value.message == "Bad rows"
        assert exc.value.errors == ["Row 1: bad"]

    async def test_no_body(self):
        client = client_returning(500)
        with pytest.raises(BackendError, match="HTTP error! status: 500"):
            await client.list_shows()

    async def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)
        client = BackendClient(base_url="http://backend.test/api", transport=httpx.MockTransport(handler))
        with pytest.raises(BackendError, match="Could not reach"):
            await client.list_shows()

    async def test_archived_listing_missing_endpoint(self):
        client = client_returning(404, {"detail": "Not Found"})
        assert await client.list_archived_shows() == []

    async def test_show_without_id(self):
        client = client_returning(200, {"title": "Alpha"})
        with pytest.raises(BackendError, match="Unexpected response from backend") as exc:
            await client.get_show("1")
        assert exc.value.operation == "get_show"
        assert exc.value.status_code is None
        assert exc.value.errors

    async def test_duplicate_result_without_show_id(self):
        client = client_returning(200, {
            "duplicates": [{"title": "Alpha", "exists": True, "existing_show": {"title": "Alpha"}}],
        })
        with pytest.raises(BackendError, match="Unexpected response"):
            await client.check_duplicates([ShowRecord(title="Alpha")])

    async def test_error_objects_in_bulk_result(self):
        client = client_returning(200, {"successful": 0, "failed": 1, "errors": [{"row": 1}]})
        with pytest.raises(BackendError, match="Unexpected response"):
            await client.bulk_create_with_actions([], [])


class TestFilterShows:

    async def test_query_params(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[{"id": 1, "title": "Alpha", "rate_card": True}])

        client = BackendClient(base_url="http://backend.test/api", transport=httpx.MockTransport(handler))
        shows = await client.filter_shows(rate_card=True, media_type="audio", genre_name=None)

        assert [s.title for s in shows] == ["Alpha"]
        assert seen[0].url.path == "/api/podcasts/filter"
        assert dict(seen[0].url.params) == {"rate_card": "true", "media_type": "audio"}
        await client.aclose()
