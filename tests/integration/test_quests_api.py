"""Quest endpoints over HTTP, including the quest-to-tower brick flow."""

from httpx import AsyncClient

from dotlife.tower.grid import GRID_HEIGHT


class TestQuestsApi:
    async def test_create_and_list(self, authed_client: AsyncClient):
        created = await authed_client.post("/api/v1/quests", json={"title": "Write tests", "difficulty": "hard"})
        assert created.status_code == 201
        assert created.json()["reward_bricks"] == 3

        today = await authed_client.get("/api/v1/quests/today")
        assert [q["title"] for q in today.json()["quests"]] == ["Write tests"]

    async def test_unknown_difficulty_is_validation_error(self, authed_client: AsyncClient):
        response = await authed_client.post("/api/v1/quests", json={"title": "x", "difficulty": "epic"})
        assert response.status_code == 422

    async def test_complete_requires_confirmation(self, authed_client: AsyncClient):
        quest = (await authed_client.post("/api/v1/quests", json={"title": "Run"})).json()
        response = await authed_client.post(f"/api/v1/quests/{quest['quest_id']}/complete")
        assert response.status_code == 409
        assert response.json()["code"] == "quest_state"

    async def test_full_day(self, authed_client: AsyncClient):
        quest = (await authed_client.post("/api/v1/quests", json={"title": "Run", "difficulty": "medium"})).json()
        confirmed = await authed_client.post("/api/v1/quests/confirm")
        assert confirmed.status_code == 200

        completed = await authed_client.post(f"/api/v1/quests/{quest['quest_id']}/complete")
        assert completed.status_code == 200
        body = completed.json()
        assert body["total_bricks"] == 22
        assert body["available_bricks"] == 22
        assert body["total_xp"] == 20
        assert body["consecutive_days"] == 1

        summary = (await authed_client.get("/api/v1/quests/today/summary")).json()
        assert summary["all_completed"] is True
        assert summary["all_confirmed"] is True

        history = (await authed_client.get("/api/v1/quests/history")).json()["days"]
        assert history[0]["perfect_day"] is True

        # the new bricks are spendable on the tower
        blocks = [{"x": i, "y": GRID_HEIGHT - 1, "color": "#34d399"} for i in range(22)]
        spent = await authed_client.post("/api/v1/tower/confirm", json={"session_id": "s1", "blocks": blocks})
        assert spent.status_code == 200
        assert spent.json()["available_bricks"] == 0

    async def test_confirm_empty_day(self, authed_client: AsyncClient):
        response = await authed_client.post("/api/v1/quests/confirm")
        assert response.status_code == 400
        assert response.json()["code"] == "empty_batch"

    async def test_update_and_delete(self, authed_client: AsyncClient):
        quest = (await authed_client.post("/api/v1/quests", json={"title": "Old"})).json()
        updated = await authed_client.patch(f"/api/v1/quests/{quest['quest_id']}", json={"title": "New"})
        assert updated.json()["title"] == "New"

        deleted = await authed_client.delete(f"/api/v1/quests/{quest['quest_id']}")
        assert deleted.status_code == 204
        missing = await authed_client.patch(f"/api/v1/quests/{quest['quest_id']}", json={"title": "x"})
        assert missing.status_code == 404
