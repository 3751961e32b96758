"""Integration tests for the cart and wishlist."""

import uuid
from decimal import Decimal

import pytest
from tests.factories import CategoryFactory, ProductFactory


async def _product(db_session, **overrides):
    category = CategoryFactory.create()
    db_session.add(category)
    await db_session.flush()
    product = ProductFactory.create(category.id, **overrides)
    db_session.add(product)
    await db_session.commit()
    return product


# ---------------------------------------------------------------------------
# Guest cart
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_cart_requires_user_or_session(client, db_session):
    response = await client.get("/api/cart")
    assert response.status_code == 400


@pytest.mark.asyncio
@pytest.mark.integration
async def test_guest_cart_merges_lines(client, db_session):
    product = await _product(db_session, price=Decimal("250"))
    session_id = f"guest-{uuid.uuid4().hex}"

    first = await client.post(
        "/api/cart/items",
        params={"session_id": session_id},
        json={"product_id": str(product.id), "quantity": 1},
    )
    assert first.status_code == 201, first.text

    second = await client.post(
        "/api/cart/items",
        params={"session_id": session_id},
        json={"product_id": str(product.id), "quantity": 2},
    )
    data = second.json()
    assert len(data["items"]) == 1
    assert data["item_count"] == 3
    assert Decimal(data["subtotal"]) == Decimal("750")


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_to_zero_removes_line(client, db_session):
    product = await _product(db_session)
    session_id = f"guest-{uuid.uuid4().hex}"

    added = await client.post(
        "/api/cart/items",
        params={"session_id": session_id},
        json={"product_id": str(product.id), "quantity": 1},
    )
    item_id = added.json()["items"][0]["id"]

    response = await client.put(
        f"/api/cart/items/{item_id}",
        params={"session_id": session_id},
        json={"quantity": 0},
    )
    assert response.status_code == 200
    assert response.json()["items"] == []


@pytest.mark.asyncio
@pytest.mark.integration
async def test_other_sessions_cannot_touch_items(client, db_session):
    product = await _product(db_session)

    added = await client.post(
        "/api/cart/items",
        params={"session_id": "owner-session"},
        json={"product_id": str(product.id), "quantity": 1},
    )
    item_id = added.json()["items"][0]["id"]

    response = await client.delete(
        f"/api/cart/items/{item_id}", params={"session_id": "someone-else"}
    )
    assert response.status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_inactive_product_cannot_be_added(client, db_session):
    product = await _product(db_session, is_active=False)

    response = await client.post(
        "/api/cart/items",
        params={"session_id": "guest-x"},
        json={"product_id": str(product.id), "quantity": 1},
    )
    assert response.status_code == 404


# ---------------------------------------------------------------------------
# Signed-in cart & wishlist
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_user_cart_ignores_session_id(client, db_session, user_token):
    product = await _product(db_session)
    headers = {"Authorization": f"Bearer {user_token(f'cart-{uuid.uuid4().hex[:8]}')}"}

    await client.post(
        "/api/cart/items",
        headers=headers,
        json={"product_id": str(product.id), "quantity": 2},
    )
    response = await client.get(
        "/api/cart", headers=headers, params={"session_id": "unrelated"}
    )

    assert response.status_code == 200
    assert response.json()["item_count"] == 2


@pytest.mark.asyncio
@pytest.mark.integration
async def test_wishlist_requires_auth(client, db_session):
    response = await client.get("/api/wishlist")
    assert response.status_code == 401
    assert response.json()["code"] == "AUTH_REQUIRED"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_wishlist_add_is_idempotent(client, db_session, user_token):
    product = await _product(db_session)
    headers = {"Authorization": f"Bearer {user_token(f'wish-{uuid.uuid4().hex[:8]}')}"}

    first = await client.post(
        "/api/wishlist", headers=headers, json={"product_id": str(product.id)}
    )
    second = await client.post(
        "/api/wishlist", headers=headers, json={"product_id": str(product.id)}
    )
    assert first.status_code == 201
    assert first.json()["id"] == second.json()["id"]

    listing = await client.get("/api/wishlist", headers=headers)
    assert len(listing.json()) == 1

    removed = await client.delete(f"/api/wishlist/{product.id}", headers=headers)
    assert removed.status_code == 204
    again = await client.delete(f"/api/wishlist/{product.id}", headers=headers)
    assert again.status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_invalid_user_token_is_rejected(client, db_session):
    response = await client.get(
        "/api/wishlist", headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert response.status_code == 401
    assert response.json()["code"] == "INVALID_TOKEN"
