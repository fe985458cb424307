"""Patch notes: public reads, admin-only writes."""

from httpx import AsyncClient

from conftest import auth_headers

NOTE = {"version": "1.2.0", "title": "Bigger grid", "content": "The canvas grew.", "release_date": "2026-03-01"}


class TestPatchNotesApi:
    async def test_non_admin_cannot_create(self, authed_client: AsyncClient):
        response = await authed_client.post("/api/v1/patch-notes", json=NOTE)
        assert response.status_code == 403
        assert response.json()["code"] == "forbidden"

    async def test_unpublished_hidden_from_public(self, admin_client: AsyncClient):
        created = await admin_client.post("/api/v1/patch-notes", json=NOTE)
        assert created.status_code == 201
        note_id = created.json()["id"]

        public = await admin_client.get("/api/v1/patch-notes")
        assert public.json()["notes"] == []
        assert (await admin_client.get(f"/api/v1/patch-notes/{note_id}")).status_code == 404

        everything = await admin_client.get("/api/v1/patch-notes/admin/all")
        assert len(everything.json()["notes"]) == 1

    async def test_publish_and_order(self, admin_client: AsyncClient):
        await admin_client.post("/api/v1/patch-notes", json={**NOTE, "is_published": True})
        newer = await admin_client.post(
            "/api/v1/patch-notes", json={**NOTE, "version": "1.3.0", "release_date": "2026-04-01"},
        )
        await admin_client.patch(f"/api/v1/patch-notes/{newer.json()['id']}", json={"is_published": True})

        notes = (await admin_client.get("/api/v1/patch-notes")).json()["notes"]
        assert [n["version"] for n in notes] == ["1.3.0", "1.2.0"]

    async def test_delete(self, admin_client: AsyncClient):
        created = await admin_client.post("/api/v1/patch-notes", json={**NOTE, "is_published": True})
        note_id = created.json()["id"]
        assert (await admin_client.delete(f"/api/v1/patch-notes/{note_id}")).status_code == 204
        assert (await admin_client.get(f"/api/v1/patch-notes/{note_id}")).status_code == 404

    async def test_admin_list_requires_admin(self, client: AsyncClient):
        response = await client.get("/api/v1/patch-notes/admin/all", headers=auth_headers())
        assert response.status_code == 403
