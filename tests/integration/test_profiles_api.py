"""Profile endpoints over HTTP."""

from httpx import AsyncClient

from conftest import auth_headers


class TestProfilesApi:
    async def test_me_uses_token_username(self, authed_client: AsyncClient):
        response = await authed_client.get("/api/v1/profiles/me")
        assert response.status_code == 200
        assert response.json()["username"] == "builder"
        assert response.json()["role"] == "developer"

    async def test_invalid_token_username_falls_back(self, client: AsyncClient):
        response = await client.get("/api/v1/profiles/me", headers=auth_headers("abcd-1234", "no spaces!"))
        assert response.json()["username"] == "user_abcd1234"

    async def test_fallback_username_taken_gets_suffix(self, client: AsyncClient):
        squatter = await client.get("/api/v1/profiles/me", headers=auth_headers("aaaa-1", "user_111111112222"))
        assert squatter.json()["username"] == "user_111111112222"

        profile_id = "11111111-2222-3333-4444-555555555555"
        response = await client.get("/api/v1/profiles/me", headers=auth_headers(profile_id, None))
        assert response.status_code == 200
        assert response.json()["username"] == "user_111111112222_2"

        twin = await client.get("/api/v1/profiles/me", headers=auth_headers("11111111-2222-9999", None))
        assert twin.json()["username"] == "user_111111112222_3"

    async def test_my_stats(self, authed_client: AsyncClient):
        stats = (await authed_client.get("/api/v1/profiles/me/stats")).json()
        assert stats["level"] == 1
        assert stats["available_bricks"] == stats["total_bricks"] == 20

    async def test_update_fields(self, authed_client: AsyncClient):
        response = await authed_client.patch(
            "/api/v1/profiles/me",
            json={"name": "Ada", "role": "founder", "headline": "Builds towers", "bio": "Hi"},
        )
        assert response.status_code == 200
        body = response.json()
        assert (body["name"], body["role"], body["headline"], body["bio"]) == ("Ada", "founder", "Builds towers", "Hi")

    async def test_unknown_role_rejected(self, authed_client: AsyncClient):
        response = await authed_client.patch("/api/v1/profiles/me", json={"role": "wizard"})
        assert response.status_code == 422

    async def test_username_change_and_conflict(self, client: AsyncClient):
        await client.get("/api/v1/profiles/me", headers=auth_headers("other-id", "Taken"))

        conflict = await client.patch(
            "/api/v1/profiles/me/identity", json={"username": "taken"}, headers=auth_headers(),
        )
        assert conflict.status_code == 409
        assert conflict.json()["code"] == "conflict"

        ok = await client.patch(
            "/api/v1/profiles/me/identity", json={"username": "NewName", "name": "New"}, headers=auth_headers(),
        )
        assert ok.status_code == 200
        assert ok.json()["username"] == "NewName"

    async def test_malformed_username_is_validation_error(self, authed_client: AsyncClient):
        response = await authed_client.patch("/api/v1/profiles/me/identity", json={"username": "no spaces!"})
        assert response.status_code == 422
        assert response.json()["code"] == "validation_error"

    async def test_public_profile_case_insensitive(self, authed_client: AsyncClient):
        await authed_client.get("/api/v1/profiles/me")
        response = await authed_client.get("/api/v1/profiles/BUILDER")
        assert response.status_code == 200
        assert response.json()["stats"]["total_bricks"] == 20
        assert "profile_id" not in response.json()

    async def test_public_profile_not_found(self, client: AsyncClient):
        response = await client.get("/api/v1/profiles/ghost")
        assert response.status_code == 404
        assert response.json()["code"] == "not_found"

    async def test_avatar(self, authed_client: AsyncClient):
        response = await authed_client.put("/api/v1/profiles/me/avatar", json={"avatar_url": "https://cdn.example/a.png"})
        assert response.json()["avatar"] == "https://cdn.example/a.png"
        bad = await authed_client.put("/api/v1/profiles/me/avatar", json={"avatar_url": "ftp://x"})
        assert bad.status_code == 422
        assert bad.json()["code"] == "validation_error"
