"""Integration tests for admin settings: secrets stay write-only."""

import pytest
from sqlalchemy import select

from services.storefront_service.models import AuditLog, IntegrationSettings, PaymentSettings


@pytest.mark.asyncio
@pytest.mark.integration
async def test_payment_settings_defaults_without_row(client, db_session, admin_headers):
    response = await client.get("/api/admin/payment-settings", headers=admin_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["stripe_secret_key_set"] is False
    assert "stripe_secret_key" not in data


@pytest.mark.asyncio
@pytest.mark.integration
async def test_secret_is_stored_but_never_returned(client, db_session, admin_headers):
    response = await client.put(
        "/api/admin/payment-settings",
        headers=admin_headers,
        json={"upi_id": "reweara@okaxis", "stripe_secret_key": "sk_test_hidden_value"},
    )

    assert response.status_code == 200, response.text
    assert "sk_test_hidden_value" not in response.text
    assert response.json()["stripe_secret_key_set"] is True
    assert response.json()["upi_id"] == "reweara@okaxis"

    again = await client.get("/api/admin/payment-settings", headers=admin_headers)
    assert "sk_test_hidden_value" not in again.text

    row = await db_session.scalar(select(PaymentSettings))
    assert row.stripe_secret_key == "sk_test_hidden_value"

    log = await db_session.scalar(
        select(AuditLog).where(AuditLog.action == "UPDATE_PAYMENT_SETTINGS")
    )
    assert "sk_test_hidden_value" not in str(log.changes)


@pytest.mark.asyncio
@pytest.mark.integration
async def test_read_flags_are_ignored_on_write(client, db_session, admin_headers):
    await client.put(
        "/api/admin/integration-settings",
        headers=admin_headers,
        json={"sendgrid_api_key": "SG.real-key", "sendgrid_enabled": True},
    )

    # Round-tripping the masked view must not wipe the stored key
    current = (
        await client.get("/api/admin/integration-settings", headers=admin_headers)
    ).json()
    response = await client.put(
        "/api/admin/integration-settings", headers=admin_headers, json=current
    )

    assert response.status_code == 200, response.text
    assert response.json()["sendgrid_api_key_set"] is True
    row = await db_session.scalar(select(IntegrationSettings))
    assert row.sendgrid_api_key == "SG.real-key"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_upi_check_reports_success(client, db_session, admin_headers):
    await client.put(
        "/api/admin/payment-settings", headers=admin_headers, json={"upi_id": "shop@ybl"}
    )

    response = await client.post("/api/admin/payment-settings/test-upi", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["success"] is True
    settings = await client.get("/api/admin/payment-settings", headers=admin_headers)
    assert settings.json()["last_test_status"] == "success"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_upi_check_reports_failure(client, db_session, admin_headers):
    await client.put(
        "/api/admin/payment-settings", headers=admin_headers, json={"upi_id": "not-a-upi"}
    )

    response = await client.post("/api/admin/payment-settings/test-upi", headers=admin_headers)

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "CONNECTION_TEST_FAILED"
    assert body["success"] is False


@pytest.mark.asyncio
@pytest.mark.integration
async def test_connection_test_without_key(client, db_session, admin_headers):
    response = await client.post(
        "/api/admin/integration-settings/test-openai", headers=admin_headers
    )
    assert response.status_code == 400
    assert response.json()["code"] == "MISSING_API_KEY"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_store_setting_upsert(client, db_session, admin_headers):
    created = await client.put(
        "/api/admin/settings/store_hours",
        headers=admin_headers,
        json={"value": {"open": "10:00", "close": "20:00"}},
    )
    assert created.status_code == 200, created.text

    updated = await client.put(
        "/api/admin/settings/store_hours",
        headers=admin_headers,
        json={"value": {"open": "09:00", "close": "20:00"}},
    )
    assert updated.json()["value"]["open"] == "09:00"

    listing = await client.get("/api/admin/settings", headers=admin_headers)
    keys = [s["key"] for s in listing.json()]
    assert keys.count("store_hours") == 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_ai_config_can_disable_feature(client, db_session, admin_headers):
    await client.put(
        "/api/admin/integration-settings",
        headers=admin_headers,
        json={"gemini_api_key": "test-gemini-key", "gemini_enabled": True},
    )
    response = await client.put(
        "/api/admin/ai-config/chat",
        headers=admin_headers,
        json={"is_enabled": False},
    )
    assert response.status_code == 200, response.text
    assert response.json()["is_enabled"] is False

    chat = await client.post("/api/ai/chat", json={"message": "Hi"})
    assert chat.status_code == 503
    assert chat.json()["code"] == "AI_UNAVAILABLE"
