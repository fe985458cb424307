"""Leaderboards over HTTP with several profiles."""

from httpx import AsyncClient

from conftest import auth_headers
from dotlife.tower.grid import GRID_HEIGHT


async def _complete_quest(client: AsyncClient, headers: dict, difficulty: str) -> None:
    quest = (await client.post("/api/v1/quests", json={"title": "q", "difficulty": difficulty}, headers=headers)).json()
    await client.post("/api/v1/quests/confirm", headers=headers)
    response = await client.post(f"/api/v1/quests/{quest['quest_id']}/complete", headers=headers)
    assert response.status_code == 200


class TestLeaderboardsApi:
    async def test_overall_ranks_by_total_bricks(self, client: AsyncClient):
        alice = auth_headers("alice-id", "alice")
        bob = auth_headers("bob-id", "bob")
        await client.get("/api/v1/profiles/me", headers=alice)
        await _complete_quest(client, bob, "hard")

        response = await client.get("/api/v1/leaderboards/overall")
        assert response.status_code == 200
        entries = response.json()["entries"]
        assert [(e["rank"], e["username"]) for e in entries] == [(1, "bob"), (2, "alice")]
        assert entries[0]["bricks"] == 23

    async def test_spending_bricks_does_not_change_overall_rank(self, client: AsyncClient):
        alice = auth_headers("alice-id", "alice")
        await client.get("/api/v1/profiles/me", headers=alice)
        blocks = [{"x": i, "y": GRID_HEIGHT - 1, "color": "#34d399"} for i in range(5)]
        await client.post("/api/v1/tower/confirm", json={"session_id": "s1", "blocks": blocks}, headers=alice)

        entries = (await client.get("/api/v1/leaderboards/overall")).json()["entries"]
        assert entries[0]["bricks"] == 20

    async def test_daily_board_counts_completed_quests(self, client: AsyncClient):
        alice = auth_headers("alice-id", "alice")
        bob = auth_headers("bob-id", "bob")
        await _complete_quest(client, alice, "easy")
        await _complete_quest(client, bob, "medium")

        for period in ("daily", "weekly", "monthly", "yearly"):
            entries = (await client.get(f"/api/v1/leaderboards/{period}")).json()["entries"]
            assert [e["username"] for e in entries] == ["bob", "alice"]
            assert entries[0]["xp"] == 20
            assert entries[0]["quests_completed"] == 1

    async def test_unknown_period(self, client: AsyncClient):
        response = await client.get("/api/v1/leaderboards/hourly")
        assert response.status_code == 422

    async def test_around_me(self, client: AsyncClient):
        me = auth_headers()
        await client.get("/api/v1/profiles/me", headers=me)
        response = await client.get("/api/v1/leaderboards/overall/me", headers=me)
        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 1
        assert body["top"][0]["username"] == "builder"
        assert body["me"] is None
