"""Health, readiness and version endpoints."""

from httpx import AsyncClient


class TestHealth:
    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    async def test_ready_without_redis(self, client: AsyncClient):
        response = await client.get("/ready")
        body = response.json()
        assert body["checks"]["database"] == "ok"
        assert body["checks"]["redis"] == "disabled"
        assert body["status"] == "ready"

    async def test_version(self, client: AsyncClient):
        body = (await client.get("/version")).json()
        assert body["version"] == "0.1.0"
