"""Integration tests for the admin order workflow."""

import pytest
from sqlalchemy import select

from services.storefront_service.models import AuditLog, OrderAdminLog, OrderStatus
from tests.factories import (
    CategoryFactory,
    OrderFactory,
    OrderItemFactory,
    ProductFactory,
)


async def _order(db_session, **overrides):
    category = CategoryFactory.create()
    db_session.add(category)
    await db_session.flush()
    product = ProductFactory.create(category.id)
    order = OrderFactory.create(**overrides)
    db_session.add_all([product, order])
    await db_session.flush()
    db_session.add(OrderItemFactory.create(order.id, product.id))
    await db_session.commit()
    return order


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_orders_filters_by_status(client, db_session, admin_headers):
    pending = await _order(db_session)
    shipped = await _order(db_session, status=OrderStatus.SHIPPED)

    response = await client.get(
        "/api/admin/orders", headers=admin_headers, params={"status": "shipped"}
    )

    assert response.status_code == 200
    ids = {o["id"] for o in response.json()["items"]}
    assert str(shipped.id) in ids
    assert str(pending.id) not in ids


@pytest.mark.asyncio
@pytest.mark.integration
async def test_search_orders_by_guest_email(client, db_session, admin_headers):
    order = await _order(db_session, guest_email="findme-7731@example.com")

    response = await client.get(
        "/api/admin/orders", headers=admin_headers, params={"search": "findme-7731"}
    )

    assert [o["id"] for o in response.json()["items"]] == [str(order.id)]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_status_is_audited(client, db_session, admin_headers):
    order = await _order(db_session)

    response = await client.put(
        f"/api/admin/orders/{order.id}/status",
        headers=admin_headers,
        json={"status": "processing"},
    )

    assert response.status_code == 200, response.text
    assert response.json()["status"] == "processing"
    log = await db_session.scalar(
        select(AuditLog).where(
            AuditLog.action == "UPDATE_ORDER_STATUS", AuditLog.entity_id == str(order.id)
        )
    )
    assert log.changes == {"old_status": "pending", "new_status": "processing"}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_verify_and_reject_payment(client, db_session, admin_user, admin_headers):
    order = await _order(db_session)

    verified = await client.put(
        f"/api/admin/orders/{order.id}/verify-payment", headers=admin_headers
    )
    assert verified.status_code == 200
    data = verified.json()
    assert data["status"] == "payment_verified"
    assert data["payment_status"] == "verified"
    assert data["payment_verified_by"] == admin_user.email
    assert data["payment_verified_at"] is not None

    rejected = await client.put(
        f"/api/admin/orders/{order.id}/reject-payment", headers=admin_headers
    )
    assert rejected.json()["status"] == "payment_failed"
    assert rejected.json()["payment_status"] == "failed"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_patch_order_keeps_before_and_after(client, db_session, admin_user, admin_headers):
    order = await _order(db_session, notes="leave at door")

    response = await client.patch(
        f"/api/admin/orders/{order.id}",
        headers=admin_headers,
        json={"notes": "ring the bell", "tracking_number": "DLV-1"},
    )

    assert response.status_code == 200, response.text
    assert response.json()["notes"] == "ring the bell"

    entry = await db_session.scalar(
        select(OrderAdminLog).where(OrderAdminLog.order_id == order.id)
    )
    assert entry.actor_id == str(admin_user.id)
    assert entry.changes["before"]["notes"] == "leave at door"
    assert entry.changes["after"]["notes"] == "ring the bell"
    assert set(entry.changes["fields_changed"]) == {"notes", "tracking_number"}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_patch_order_requires_fields(client, db_session, admin_headers):
    order = await _order(db_session)
    response = await client.patch(
        f"/api/admin/orders/{order.id}", headers=admin_headers, json={}
    )
    assert response.status_code == 400


@pytest.mark.asyncio
@pytest.mark.integration
async def test_tracking_entry_confirms_verified_payment(client, db_session, admin_headers):
    order = await _order(db_session)

    response = await client.post(
        f"/api/admin/orders/{order.id}/tracking",
        headers=admin_headers,
        json={
            "payment_status": "verified",
            "message": "Packed and handed to courier",
            "tracking_number": "AWB123",
            "carrier": "Delhivery",
        },
    )

    assert response.status_code == 201, response.text
    assert response.json()["status"] == "confirmed"
    assert response.json()["carrier"] == "Delhivery"

    detail = await client.get(f"/api/admin/orders/{order.id}", headers=admin_headers)
    assert detail.json()["status"] == "confirmed"
    assert detail.json()["tracking_number"] == "AWB123"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_admin_order_pdf(client, db_session, admin_headers):
    order = await _order(db_session)

    response = await client.get(f"/api/admin/orders/{order.id}/pdf", headers=admin_headers)

    assert response.status_code == 200
    assert response.content.startswith(b"%PDF")
    reference = str(order.id)[:8].upper()
    assert f"ReWeara-Admin-Order-{reference}.pdf" in response.headers["content-disposition"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_unknown_order_is_404(client, db_session, admin_headers):
    response = await client.get(
        "/api/admin/orders/00000000-0000-4000-8000-000000000000", headers=admin_headers
    )
    assert response.status_code == 404
