"""Integration tests for AI features, the contact form and the shopper profile."""

import pytest

from services.storefront_service.integrations.gemini import GeminiClient, GeminiError
from services.storefront_service.routers import contact as contact_router
from tests.factories import CategoryFactory, ProductFactory


async def _enable_gemini(client, admin_headers):
    response = await client.put(
        "/api/admin/integration-settings",
        headers=admin_headers,
        json={"gemini_api_key": "test-gemini-key", "gemini_enabled": True},
    )
    assert response.status_code == 200, response.text


# ---------------------------------------------------------------------------
# AI
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_chat_unavailable_without_key(client, db_session):
    response = await client.post("/api/ai/chat", json={"message": "What fits a size M?"})
    assert response.status_code == 503


@pytest.mark.asyncio
@pytest.mark.integration
async def test_chat_reply(client, db_session, admin_headers, monkeypatch):
    await _enable_gemini(client, admin_headers)

    async def fake_chat(self, message, context=None):
        assert self.api_key == "test-gemini-key"
        return f"Echo: {message}"

    monkeypatch.setattr(GeminiClient, "chat", fake_chat)

    response = await client.post("/api/ai/chat", json={"message": "Hello"})

    assert response.status_code == 200
    assert response.json()["reply"] == "Echo: Hello"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_chat_upstream_failure_has_fallback(client, db_session, admin_headers, monkeypatch):
    await _enable_gemini(client, admin_headers)

    async def broken_chat(self, message, context=None):
        raise GeminiError("quota exceeded")

    monkeypatch.setattr(GeminiClient, "chat", broken_chat)

    response = await client.post("/api/ai/chat", json={"message": "Hello"})

    assert response.status_code == 502
    assert response.json()["code"] == "AI_UPSTREAM_ERROR"
    assert response.json()["reply"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_recommendations_fall_back_to_catalog(client, db_session, admin_headers, monkeypatch):
    category = CategoryFactory.create()
    db_session.add(category)
    await db_session.flush()
    target = ProductFactory.create(category.id, name="Khadi shirt")
    others = [ProductFactory.create(category.id, name=f"Pick {i}") for i in range(3)]
    db_session.add_all([target, *others])
    await db_session.commit()
    await _enable_gemini(client, admin_headers)

    async def broken_rank(self, name, description, candidates):
        raise GeminiError("timeout")

    monkeypatch.setattr(GeminiClient, "rank_products", broken_rank)

    response = await client.get(
        "/api/ai/recommendations", params={"product_id": str(target.id)}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["source"] == "catalog"
    ids = {p["id"] for p in data["products"]}
    assert ids == {str(p.id) for p in others}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_recommendations_use_ai_order(client, db_session, admin_headers, monkeypatch):
    category = CategoryFactory.create()
    db_session.add(category)
    await db_session.flush()
    target = ProductFactory.create(category.id, name="Khadi shirt")
    first = ProductFactory.create(category.id, name="Linen trousers")
    second = ProductFactory.create(category.id, name="Cotton scarf")
    db_session.add_all([target, first, second])
    await db_session.commit()
    await _enable_gemini(client, admin_headers)

    async def rank(self, name, description, candidates):
        return ["cotton scarf", "Linen Trousers"]

    monkeypatch.setattr(GeminiClient, "rank_products", rank)

    response = await client.get(
        "/api/ai/recommendations", params={"product_id": str(target.id)}
    )

    data = response.json()
    assert data["source"] == "ai"
    assert [p["id"] for p in data["products"]] == [str(second.id), str(first.id)]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_tryon_rejects_bad_uploads(client, db_session):
    category = CategoryFactory.create()
    db_session.add(category)
    await db_session.flush()
    product = ProductFactory.create(category.id)
    db_session.add(product)
    await db_session.commit()

    wrong_type = await client.post(
        "/api/ai/tryon",
        data={"product_id": str(product.id)},
        files={"image": ("photo.gif", b"GIF89a", "image/gif")},
    )
    assert wrong_type.status_code == 400

    too_big = await client.post(
        "/api/ai/tryon",
        data={"product_id": str(product.id)},
        files={"image": ("photo.jpg", b"\xff" * (5 * 1024 * 1024 + 1), "image/jpeg")},
    )
    assert too_big.status_code == 413


@pytest.mark.asyncio
@pytest.mark.integration
async def test_tryon_describes_product(client, db_session, admin_headers, monkeypatch):
    category = CategoryFactory.create()
    db_session.add(category)
    await db_session.flush()
    product = ProductFactory.create(category.id, name="Indigo dress")
    db_session.add(product)
    await db_session.commit()
    await _enable_gemini(client, admin_headers)

    async def describe(self, product_name, image, mime_type, prompt=None):
        return f"{product_name} looks great"

    monkeypatch.setattr(GeminiClient, "describe_try_on", describe)

    response = await client.post(
        "/api/ai/tryon",
        data={"product_id": str(product.id)},
        files={"image": ("me.png", b"\x89PNG fake", "image/png")},
    )

    assert response.status_code == 200, response.text
    assert response.json()["description"] == "Indigo dress looks great"


# ---------------------------------------------------------------------------
# Contact & profile
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_contact_form_in_console_mode(client, db_session):
    response = await client.post(
        "/api/contact",
        json={"name": "Asha", "email": "asha@example.com", "message": "Hi there"},
    )
    assert response.status_code == 200
    assert response.json() == {"message": "Message sent successfully"}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_contact_form_delivery_failure(client, db_session, monkeypatch):
    async def failed_send(*args, **kwargs):
        return False

    monkeypatch.setattr(contact_router, "send_contact_message_email", failed_send)

    response = await client.post(
        "/api/contact",
        json={"name": "Asha", "email": "asha@example.com", "message": "Hi there"},
    )
    assert response.status_code == 502
    assert response.json()["code"] == "EMAIL_DELIVERY_FAILED"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_profile_synced_from_token(client, db_session, user_token):
    token = user_token("profile-user-1", first_name="Ira", last_name="Sen")

    response = await client.get(
        "/api/auth/user", headers={"Authorization": f"Bearer {token}"}
    )

    assert response.status_code == 200, response.text
    data = response.json()
    assert data["id"] == "profile-user-1"
    assert data["email"] == "profile-user-1@example.com"
    assert data["first_name"] == "Ira"
