"""Unit tests for slug, name, UPI and pricing helpers."""

import uuid
from decimal import Decimal

import pytest

from libs.common.config import Settings
from services.storefront_service.integrations.probes import validate_upi_id
from services.storefront_service.models import Order
from services.storefront_service.services.catalog import (
    normalize_brand_id,
    sanitize_name,
    slugify,
)
from services.storefront_service.services.orders import order_email, shipping_fee


@pytest.mark.unit
@pytest.mark.parametrize(
    "name, slug",
    [
        ("Thrift Store", "thrift-store"),
        ("  Vintage   Denim  ", "vintage-denim"),
        ("Men's Shirts & Tees!", "mens-shirts-tees"),
        ("Summer -- Sale", "summer-sale"),
    ],
)
def test_slugify(name, slug):
    assert slugify(name) == slug


@pytest.mark.unit
def test_sanitize_name_strips_markup():
    assert sanitize_name(' <b>Linen & "Cotton"</b> ') == "bLinen  Cotton/b"


@pytest.mark.unit
def test_normalize_brand_id():
    brand_id = uuid.uuid4()
    assert normalize_brand_id("") is None
    assert normalize_brand_id(None) is None
    assert normalize_brand_id(str(brand_id)) == brand_id
    with pytest.raises(ValueError):
        normalize_brand_id("not-a-uuid")


@pytest.mark.unit
@pytest.mark.parametrize(
    "upi_id, valid",
    [
        ("reweara@okaxis", True),
        ("store.payments-1@ybl", True),
        ("a@b", False),
        ("no-at-sign", False),
        ("name@bank123", False),
        ("", False),
    ],
)
def test_validate_upi_id(upi_id, valid):
    assert validate_upi_id(upi_id)[0] is valid


@pytest.mark.unit
def test_shipping_is_free_above_threshold():
    settings = Settings(
        FREE_SHIPPING_THRESHOLD=Decimal("999"), STANDARD_SHIPPING_FEE=Decimal("99")
    )
    assert shipping_fee(Decimal("998.99"), settings) == Decimal("99.00")
    assert shipping_fee(Decimal("999"), settings) == Decimal("0.00")


@pytest.mark.unit
def test_order_email_prefers_guest_email():
    guest = Order(guest_email="guest@example.com", shipping_address={"email": "x@y.com"})
    member = Order(guest_email=None, shipping_address={"email": "member@example.com"})
    unknown = Order(guest_email=None, shipping_address=None)

    assert order_email(guest) == "guest@example.com"
    assert order_email(member) == "member@example.com"
    assert order_email(unknown) is None
