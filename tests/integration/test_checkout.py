"""Integration tests for order placement."""

import asyncio
import uuid
from decimal import Decimal

import pytest
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from services.storefront_service.models import (
    Category,
    Coupon,
    Order,
    OrderItem,
    Product,
)
from services.storefront_service.services.orders import (
    OrderPlacementError,
    create_order_with_items,
)
from tests.factories import (
    CategoryFactory,
    CouponFactory,
    ProductFactory,
    TaxRateFactory,
)

ADDRESS = {
    "first_name": "Asha",
    "last_name": "Rao",
    "address": "12 MG Road",
    "city": "Bengaluru",
    "zip": "560001",
    "country": "India",
}


async def _products(db_session, *specs):
    category = CategoryFactory.create()
    db_session.add(category)
    await db_session.flush()
    products = [ProductFactory.create(category.id, **spec) for spec in specs]
    db_session.add_all(products)
    await db_session.commit()
    return products


def _guest_order(*lines, **extra) -> dict:
    body = {
        "guest_email": "guest@example.com",
        "shipping_address": ADDRESS,
        "items": [
            {"product_id": str(product.id), "quantity": quantity}
            for product, quantity in lines
        ],
    }
    body.update(extra)
    return body


# ---------------------------------------------------------------------------
# Happy path
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_guest_checkout_decrements_stock(client, db_session):
    (product,) = await _products(db_session, {"price": Decimal("400"), "stock": 5})

    response = await client.post("/api/orders", json=_guest_order((product, 2)))

    assert response.status_code == 201, response.text
    data = response.json()
    assert data["status"] == "pending"
    assert data["payment_status"] == "pending"
    assert Decimal(data["subtotal"]) == Decimal("800")
    assert Decimal(data["shipping_amount"]) == Decimal("99")
    assert Decimal(data["total_amount"]) == Decimal("899")
    assert data["items"][0]["quantity"] == 2

    await db_session.refresh(product)
    assert product.stock == 3


@pytest.mark.asyncio
@pytest.mark.integration
async def test_client_prices_are_ignored(client, db_session):
    (product,) = await _products(db_session, {"price": Decimal("1200")})
    body = _guest_order((product, 1))
    body["items"][0]["price"] = "1.00"
    body["total_amount"] = "1.00"

    response = await client.post("/api/orders", json=body)

    assert response.status_code == 201
    data = response.json()
    assert Decimal(data["items"][0]["price"]) == Decimal("1200")
    # Above the free shipping threshold
    assert Decimal(data["shipping_amount"]) == Decimal("0")
    assert Decimal(data["total_amount"]) == Decimal("1200")


@pytest.mark.asyncio
@pytest.mark.integration
async def test_duplicate_lines_are_merged(client, db_session):
    (product,) = await _products(db_session, {"stock": 3})

    response = await client.post(
        "/api/orders", json=_guest_order((product, 1), (product, 2))
    )

    assert response.status_code == 201
    assert len(response.json()["items"]) == 1
    await db_session.refresh(product)
    assert product.stock == 0


@pytest.mark.asyncio
@pytest.mark.integration
async def test_tax_and_coupon_are_applied(client, db_session):
    (product,) = await _products(db_session, {"price": Decimal("1000")})
    coupon = CouponFactory.create(code=f"TEN{uuid.uuid4().hex[:6].upper()}")
    db_session.add_all([coupon, TaxRateFactory.create(rate=Decimal("5"), priority=100)])
    await db_session.commit()

    response = await client.post(
        "/api/orders",
        json=_guest_order((product, 1), coupon_code=coupon.code.lower()),
    )

    assert response.status_code == 201, response.text
    data = response.json()
    assert Decimal(data["tax_amount"]) == Decimal("50")
    assert Decimal(data["discount_amount"]) == Decimal("100")
    assert Decimal(data["total_amount"]) == Decimal("950")
    assert data["coupon_code"] == coupon.code

    await db_session.refresh(coupon)
    assert coupon.usage_count == 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_signed_in_checkout_uses_cart(client, db_session, user_token):
    (product,) = await _products(db_session, {"stock": 4})
    sub = f"buyer-{uuid.uuid4().hex[:8]}"
    headers = {"Authorization": f"Bearer {user_token(sub)}"}

    await client.post(
        "/api/cart/items",
        headers=headers,
        json={"product_id": str(product.id), "quantity": 2},
    )
    response = await client.post(
        "/api/orders", headers=headers, json={"shipping_address": ADDRESS}
    )

    assert response.status_code == 201, response.text
    data = response.json()
    assert data["user_id"] == sub
    assert data["guest_email"] is None
    assert data["shipping_address"]["email"] == f"{sub}@example.com"

    cart = await client.get("/api/cart", headers=headers)
    assert cart.json()["items"] == []

    mine = await client.get("/api/orders", headers=headers)
    assert mine.json()["total"] == 1

    invoice = await client.get(f"/api/orders/{data['id']}/pdf", headers=headers)
    assert invoice.status_code == 200
    assert invoice.headers["content-type"] == "application/pdf"
    assert invoice.content.startswith(b"%PDF")


@pytest.mark.asyncio
@pytest.mark.integration
async def test_guest_checkout_from_session_cart_empties_it(client, db_session):
    (product,) = await _products(db_session, {"price": Decimal("300"), "stock": 4})
    session_id = f"guest-{uuid.uuid4().hex}"

    added = await client.post(
        "/api/cart/items",
        params={"session_id": session_id},
        json={"product_id": str(product.id), "quantity": 2},
    )
    assert added.status_code == 201, added.text

    response = await client.post(
        "/api/orders",
        json={
            "guest_email": "guest@example.com",
            "session_id": session_id,
            "shipping_address": ADDRESS,
        },
    )
    assert response.status_code == 201, response.text
    assert response.json()["items"][0]["quantity"] == 2

    cart = await client.get("/api/cart", params={"session_id": session_id})
    assert cart.json()["items"] == []

    again = await client.post(
        "/api/orders",
        json={
            "guest_email": "guest@example.com",
            "session_id": session_id,
            "shipping_address": ADDRESS,
        },
    )
    assert again.status_code == 400
    assert again.json()["detail"] == "Your cart is empty"


# ---------------------------------------------------------------------------
# Failures roll back
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_insufficient_stock_rolls_back_every_line(client, db_session):
    plenty, scarce = await _products(db_session, {"stock": 10}, {"stock": 1})
    email = f"oversell-{uuid.uuid4().hex[:6]}@example.com"

    response = await client.post(
        "/api/orders",
        json=_guest_order((plenty, 3), (scarce, 2), guest_email=email),
    )

    assert response.status_code == 409
    assert "Insufficient stock" in response.json()["detail"]

    stocks = await db_session.execute(
        select(Product.id, Product.stock).where(Product.id.in_([plenty.id, scarce.id]))
    )
    assert dict(stocks.all()) == {plenty.id: 10, scarce.id: 1}
    orders = await db_session.execute(select(Order).where(Order.guest_email == email))
    assert orders.scalars().all() == []


@pytest.mark.asyncio
@pytest.mark.integration
async def test_invalid_coupon_rejects_order(client, db_session):
    (product,) = await _products(db_session, {"stock": 2})
    coupon = CouponFactory.create(usage_limit=1, usage_count=1)
    db_session.add(coupon)
    await db_session.commit()

    response = await client.post(
        "/api/orders", json=_guest_order((product, 1), coupon_code=coupon.code)
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Coupon usage limit reached"
    stock = await db_session.scalar(select(Product.stock).where(Product.id == product.id))
    assert stock == 2
    usage = await db_session.scalar(select(Coupon.usage_count).where(Coupon.id == coupon.id))
    assert usage == 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_guest_checkout_needs_email(client, db_session):
    (product,) = await _products(db_session, {})
    body = _guest_order((product, 1))
    del body["guest_email"]

    response = await client.post("/api/orders", json=body)
    assert response.status_code == 400


@pytest.mark.asyncio
@pytest.mark.integration
async def test_empty_cart_cannot_check_out(client, db_session):
    response = await client.post(
        "/api/orders",
        json={"guest_email": "guest@example.com", "shipping_address": ADDRESS},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Your cart is empty"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_orders_are_private(client, db_session, user_token):
    (product,) = await _products(db_session, {})
    owner = {"Authorization": f"Bearer {user_token('owner-' + uuid.uuid4().hex[:6])}"}
    other = {"Authorization": f"Bearer {user_token('other-' + uuid.uuid4().hex[:6])}"}

    placed = await client.post(
        "/api/orders",
        headers=owner,
        json={"shipping_address": ADDRESS, "items": [{"product_id": str(product.id), "quantity": 1}]},
    )
    order_id = placed.json()["id"]

    assert (await client.get(f"/api/orders/{order_id}", headers=owner)).status_code == 200
    assert (await client.get(f"/api/orders/{order_id}", headers=other)).status_code == 404
    assert (await client.get(f"/api/orders/{order_id}/tracking", headers=other)).status_code == 404


# ---------------------------------------------------------------------------
# Concurrency
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_concurrent_checkouts_never_oversell(test_engine):
    """Two buyers race for the last piece on separate connections.

    Runs outside the savepoint session because the row lock only
    serializes real concurrent transactions; rows are cleaned up after.
    """
    session_factory = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )
    category = CategoryFactory.create()
    product = ProductFactory.create(category.id, price=Decimal("650"), stock=1)
    async with session_factory() as setup:
        setup.add(category)
        await setup.flush()
        setup.add(product)
        await setup.commit()

    async def _buy(email: str):
        async with session_factory() as session:
            return await create_order_with_items(
                session,
                {"guest_email": email, "shipping_address": ADDRESS},
                [{"product_id": product.id, "quantity": 1}],
            )

    try:
        results = await asyncio.gather(
            _buy("first-racer@example.com"),
            _buy("second-racer@example.com"),
            return_exceptions=True,
        )

        placed = [r for r in results if isinstance(r, Order)]
        refused = [r for r in results if isinstance(r, OrderPlacementError)]
        assert len(placed) == 1, results
        assert len(refused) == 1, results
        assert refused[0].status_code == 409

        async with session_factory() as check:
            stock = await check.scalar(
                select(Product.stock).where(Product.id == product.id)
            )
            sold_lines = await check.scalar(
                select(func.count(OrderItem.id)).where(
                    OrderItem.product_id == product.id
                )
            )
        assert stock == 0
        assert sold_lines == 1
    finally:
        async with session_factory() as cleanup:
            order_ids = select(OrderItem.order_id).where(
                OrderItem.product_id == product.id
            )
            await cleanup.execute(delete(Order).where(Order.id.in_(order_ids)))
            await cleanup.execute(delete(Product).where(Product.id == product.id))
            await cleanup.execute(delete(Category).where(Category.id == category.id))
            await cleanup.commit()
