"""Integration tests for coupon validation and admin coupon management."""

from datetime import timedelta
from decimal import Decimal

import pytest

from libs.common.datetime_utils import utc_now
from tests.factories import CouponFactory


@pytest.mark.asyncio
@pytest.mark.integration
async def test_validate_coupon(client, db_session):
    coupon = CouponFactory.create(discount_value=Decimal("20"))
    db_session.add(coupon)
    await db_session.commit()

    response = await client.post(
        "/api/coupons/validate",
        json={"code": coupon.code.lower(), "subtotal": "500"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["valid"] is True
    assert Decimal(data["discount_amount"]) == Decimal("100")


@pytest.mark.asyncio
@pytest.mark.integration
async def test_validate_expired_and_unknown_coupons(client, db_session):
    expired = CouponFactory.create(end_date=utc_now() - timedelta(days=1))
    db_session.add(expired)
    await db_session.commit()

    response = await client.post(
        "/api/coupons/validate", json={"code": expired.code, "subtotal": "500"}
    )
    assert response.json() == {
        "valid": False,
        "discount_amount": "0.00",
        "message": "Coupon has expired",
    }

    unknown = await client.post(
        "/api/coupons/validate", json={"code": "NOPE-CODE", "subtotal": "500"}
    )
    assert unknown.json()["message"] == "Invalid coupon code"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_admin_coupon_codes_are_normalized_and_unique(client, db_session, admin_headers):
    body = {"code": " monsoon25 ", "discount_type": "percentage", "discount_value": "25"}

    created = await client.post("/api/admin/coupons", headers=admin_headers, json=body)
    assert created.status_code == 201, created.text
    assert created.json()["code"] == "MONSOON25"

    duplicate = await client.post(
        "/api/admin/coupons",
        headers=admin_headers,
        json={**body, "code": "MONSOON25"},
    )
    assert duplicate.status_code == 409

    updated = await client.put(
        f"/api/admin/coupons/{created.json()['id']}",
        headers=admin_headers,
        json={"is_active": False},
    )
    assert updated.json()["is_active"] is False

    deleted = await client.delete(
        f"/api/admin/coupons/{created.json()['id']}", headers=admin_headers
    )
    assert deleted.status_code == 204
