"""
Tests for /api/v1/shows endpoints.
"""

import csv
import io


class TestListing:

    async def test_filtered_sorted_paged(self, api, fake_backend):
        fake_backend.add_show("Gamma", media_type="audio")
        fake_backend.add_show("Alpha", media_type="audio")
        fake_backend.add_show("Beta", media_type="video")
        fake_backend.add_show("Old", media_type="audio", archived=True)

        resp = await api.get("/api/v1/shows", params={
            "media_type": "Audio", "sort_direction": "desc", "page_size": 1, "page": 2,
        })
        assert resp.status_code == 200
        body = resp.json()
        assert body["total"] == 2
        assert body["page_count"] == 2
        assert [s["title"] for s in body["items"]] == ["Alpha"]

    async def test_bad_sort_key(self, api):
        resp = await api.get("/api/v1/shows", params={"sort_key": "nonsense"})
        assert resp.status_code == 422

    async def test_archived(self, api, fake_backend):
        fake_backend.add_show("Old", archived=True)
        resp = await api.get("/api/v1/shows/archived")
        assert [s["title"] for s in resp.json()] == ["Old"]

    async def test_backend_down(self, api, fake_backend):
        fake_backend.fail("GET", "/podcasts", 503)
        resp = await api.get("/api/v1/shows")
        assert resp.status_code == 502


class TestExport:

    async def test_export(self, api, fake_backend):
        fake_backend.add_show("Alpha", rate_card=True)
        resp = await api.get("/api/v1/shows/export")
        assert resp.status_code == 200
        assert "evergreen-shows-" in resp.headers["content-disposition"]
        rows = list(csv.reader(io.StringIO(resp.text)))
        cells = dict(zip(rows[0], rows[1]))
        assert cells["Show Name"] == "Alpha"
        assert cells["Is Rate Card Show"] == "Yes"


class TestMutations:

    async def test_create(self, api, fake_backend):
        resp = await api.post("/api/v1/shows", json={"title": "Alpha", "show_type": "original"})
        assert resp.status_code == 201
        body = resp.json()
        assert body["show"]["show_type"] == "Original"
        assert body["notice"] == {"level": "success", "message": "Show created successfully!"}

    async def test_create_rejects_bad_percent(self, api):
        resp = await api.post("/api/v1/shows", json={"title": "Alpha", "side_bonus_percent": 150})
        assert resp.status_code == 422

    async def test_update(self, api, fake_backend):
        fake_backend.add_show("Alpha")
        resp = await api.put("/api/v1/shows/1", json={"title": "Alpha II"})
        assert resp.json()["show"]["title"] == "Alpha II"

    async def test_delete(self, api, fake_backend):
        fake_backend.add_show("Alpha")
        resp = await api.delete("/api/v1/shows/1")
        assert resp.status_code == 200
        assert resp.json()["show"] is None
        assert fake_backend.shows == {}

    async def test_missing_show(self, api):
        resp = await api.put("/api/v1/shows/42", json={"title": "Nope"})
        assert resp.status_code == 404

    async def test_archive_unarchive(self, api, fake_backend):
        fake_backend.add_show("Alpha")
        resp = await api.patch("/api/v1/shows/1/archive")
        assert resp.json()["show"]["is_archived"] is True
        resp = await api.patch("/api/v1/shows/1/unarchive")
        assert resp.json()["notice"]["message"] == "Show unarchived successfully!"

    async def test_bulk_archive_partial(self, api, fake_backend):
        fake_backend.add_show("Alpha")
        resp = await api.patch("/api/v1/shows/bulk-archive", json={"show_ids": ["1", "9"]})
        body = resp.json()
        assert (body["result"]["successful"], body["result"]["failed"]) == (1, 1)
        assert body["notice"]["level"] == "warning"

    async def test_bulk_delete(self, api, fake_backend):
        fake_backend.add_show("Alpha")
        fake_backend.add_show("Beta")
        resp = await api.request("DELETE", "/api/v1/shows/bulk-delete", json={"show_ids": ["1", "2"]})
        assert resp.json()["notice"]["message"] == "Successfully deleted all 2 selected shows!"

    async def test_bulk_requires_ids(self, api):
        resp = await api.patch("/api/v1/shows/bulk-unarchive", json={"show_ids": []})
        assert resp.status_code == 422


class TestCheckTitle:

    async def test_archived_duplicate(self, api, fake_backend):
        fake_backend.add_show("Alpha", archived=True)
        resp = await api.post("/api/v1/shows/check-title", json={"title": " alpha "})
        body = resp.json()
        assert body["is_duplicate"]
        assert body["suggestion"] == "unarchive_and_edit"

    async def test_editing_self(self, api, fake_backend):
        fake_backend.add_show("Alpha")
        resp = await api.post("/api/v1/shows/check-title", json={"title": "Alpha", "exclude_show_id": "1"})
        assert not resp.json()["is_duplicate"]
