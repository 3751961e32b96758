"""Unit tests for invoice and admin order PDFs."""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from libs.common.pdf import (
    admin_order_filename,
    format_money,
    generate_order_pdf,
    invoice_filename,
    order_reference,
)

ORDER_ID = uuid.UUID("3f2a9c1e-0000-4000-8000-000000000001")


def _order(**overrides) -> dict:
    order = {
        "id": ORDER_ID,
        "created_at": datetime(2026, 3, 14, 10, 30, tzinfo=timezone.utc),
        "status": "confirmed",
        "payment_method": "upi",
        "payment_status": "verified",
        "payment_verified_at": datetime(2026, 3, 14, 11, 0, tzinfo=timezone.utc),
        "customer_email": "asha@example.com",
        "tracking_number": "TRK123",
        "shipping_address": {
            "first_name": "Asha",
            "last_name": "Rao",
            "address": "12 MG Road",
            "city": "Bengaluru",
            "zip": "560001",
        },
        "items": [
            {"name": "Linen shirt <vintage>", "quantity": 2, "price": Decimal("450")},
            {"name": "Denim jacket", "quantity": 1, "price": Decimal("1200")},
        ],
        "subtotal": Decimal("2100"),
        "tax_amount": Decimal("105"),
        "shipping_amount": Decimal("0"),
        "discount_amount": Decimal("210"),
        "total_amount": Decimal("1995"),
        "notes": "Leave at the door",
    }
    order.update(overrides)
    return order


@pytest.mark.unit
def test_invoice_pdf_is_rendered():
    pdf = generate_order_pdf(_order())
    assert pdf.startswith(b"%PDF")
    assert len(pdf) > 1000


@pytest.mark.unit
def test_admin_slip_is_rendered():
    pdf = generate_order_pdf(_order(), admin=True, store_name="ReWeara")
    assert pdf.startswith(b"%PDF")


@pytest.mark.unit
def test_pdf_tolerates_missing_optional_fields():
    pdf = generate_order_pdf(
        _order(
            shipping_address=None,
            payment_verified_at=None,
            tracking_number=None,
            notes=None,
            items=[],
        )
    )
    assert pdf.startswith(b"%PDF")


@pytest.mark.unit
def test_filenames_use_short_reference():
    assert order_reference(ORDER_ID) == "3F2A9C1E"
    assert invoice_filename(ORDER_ID) == "ReWeara-Invoice-3F2A9C1E.pdf"
    assert admin_order_filename(ORDER_ID) == "ReWeara-Admin-Order-3F2A9C1E.pdf"


@pytest.mark.unit
def test_format_money():
    assert format_money(Decimal("1995")) == "Rs. 1,995.00"
    assert format_money(None) == "Rs. 0.00"
