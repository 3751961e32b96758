"""Unit tests for coupon eligibility and discount math."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from services.storefront_service.models import Coupon, DiscountType
from services.storefront_service.services.coupons import (
    calculate_discount,
    evaluate_coupon,
    normalize_code,
)

NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)


def _coupon(**overrides) -> Coupon:
    defaults = {
        "code": "SAVE10",
        "discount_type": DiscountType.PERCENTAGE,
        "discount_value": Decimal("10"),
        "usage_count": 0,
        "is_active": True,
    }
    defaults.update(overrides)
    return Coupon(**defaults)


@pytest.mark.unit
def test_percentage_discount():
    assert calculate_discount(_coupon(), Decimal("1250")) == Decimal("125.00")


@pytest.mark.unit
def test_percentage_discount_is_capped():
    coupon = _coupon(discount_value=Decimal("50"), max_discount_amount=Decimal("200"))
    assert calculate_discount(coupon, Decimal("1000")) == Decimal("200.00")


@pytest.mark.unit
def test_fixed_discount_never_exceeds_subtotal():
    coupon = _coupon(discount_type=DiscountType.FIXED, discount_value=Decimal("300"))
    assert calculate_discount(coupon, Decimal("250")) == Decimal("250.00")
    assert calculate_discount(coupon, Decimal("1000")) == Decimal("300.00")


@pytest.mark.unit
def test_normalize_code():
    assert normalize_code("  welcome10 ") == "WELCOME10"


@pytest.mark.unit
def test_valid_coupon_is_applied():
    check = evaluate_coupon(_coupon(), Decimal("500"), now=NOW)
    assert check.valid
    assert check.discount_amount == Decimal("50.00")
    assert check.message == "Coupon applied"


@pytest.mark.unit
@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"is_active": False}, "Invalid coupon code"),
        ({"start_date": NOW + timedelta(days=1)}, "Coupon is not active yet"),
        ({"end_date": NOW - timedelta(seconds=1)}, "Coupon has expired"),
        ({"usage_limit": 5, "usage_count": 5}, "Coupon usage limit reached"),
        ({"min_purchase_amount": Decimal("999")}, "Minimum purchase of 999.00 required"),
    ],
)
def test_ineligible_coupons(overrides, message):
    check = evaluate_coupon(_coupon(**overrides), Decimal("500"), now=NOW)
    assert not check.valid
    assert check.discount_amount == Decimal("0.00")
    assert check.message == message


@pytest.mark.unit
def test_missing_coupon_is_invalid():
    check = evaluate_coupon(None, Decimal("500"), now=NOW)
    assert not check.valid
    assert check.message == "Invalid coupon code"
