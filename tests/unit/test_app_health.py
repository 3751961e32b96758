"""Unit tests for the health endpoint and startup failure handling."""

import pytest

from services.storefront_service.app.main import app


@pytest.mark.asyncio
@pytest.mark.unit
async def test_health_ok(app_client):
    response = await app_client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "storefront"}


@pytest.mark.asyncio
@pytest.mark.unit
async def test_health_reports_startup_error(app_client):
    app.state.startup_error = "JWT_SECRET is not set"
    try:
        response = await app_client.get("/health")
    finally:
        app.state.startup_error = None

    assert response.status_code == 503
    body = response.json()
    assert body["status"] == "unhealthy"
    assert body["message"] == "JWT_SECRET is not set"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_database_routes_unavailable_without_database(app_client):
    app.state.database = None
    response = await app_client.get("/api/categories")

    assert response.status_code == 503
    assert response.json()["code"] == "SERVICE_UNAVAILABLE"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_unknown_route_uses_error_body(app_client):
    response = await app_client.get("/api/does-not-exist")
    assert response.status_code == 404
    assert "detail" in response.json()
