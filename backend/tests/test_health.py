"""Health endpoint smoke test."""

import pytest
from httpx import ASGITransport, AsyncClient

from lodging_admin.main import app


@pytest.mark.asyncio
async def test_healthcheck_reports_store_and_dashboard_range() -> None:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/api/v1/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ok"
    assert payload["service"] == "Lodging Admin API"
    assert payload["store"] in {"database", "memory"}
    assert payload["dashboard_weeks"] == ["2024 1W", "2027 1W"]
    assert isinstance(payload["notifications_configured"], bool)
    assert "X-Request-ID" in response.headers
