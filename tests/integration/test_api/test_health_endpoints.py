"""Integration tests for health check endpoints."""

from unittest.mock import AsyncMock, patch

import pytest

from hrpulse.database.mongodb import MongoDB

API = "/api/v1"


class TestHealthEndpoints:
    """Integration tests for health endpoints."""

    @pytest.mark.asyncio
    async def test_root_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert "X-Process-Time" in response.headers

    @pytest.mark.asyncio
    async def test_root(self, client):
        response = await client.get("/")

        assert response.status_code == 200
        assert response.json()["health"] == "/health"

    @pytest.mark.asyncio
    async def test_liveness(self, client):
        response = await client.get(f"{API}/health/live")

        assert response.json() == {"status": "ok"}

    @pytest.mark.asyncio
    async def test_detailed_health(self, client):
        with patch.object(MongoDB, "ping", AsyncMock(return_value=True)):
            response = await client.get(f"{API}/health/detailed")

        body = response.json()
        assert body["status"] == "healthy"
        assert body["services"]["database"]["status"] == "healthy"
        assert body["services"]["cache"]["status"] == "disabled"

    @pytest.mark.asyncio
    async def test_database_outage(self, client):
        with patch.object(MongoDB, "ping", AsyncMock(return_value=False)):
            detailed = await client.get(f"{API}/health/detailed")
            ready = await client.get(f"{API}/health/ready")

        assert detailed.json()["status"] == "unhealthy"
        assert ready.json() == {"status": "not_ready"}
        assert ready.status_code == 503

    @pytest.mark.asyncio
    async def test_unknown_route(self, client):
        response = await client.get(f"{API}/no-such-route")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == 404
