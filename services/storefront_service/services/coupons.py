"""Coupon eligibility and discount math."""

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from libs.common.datetime_utils import utc_now
from services.storefront_service.models import Coupon, DiscountType
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

CENTS = Decimal("0.01")


def to_money(value) -> Decimal:
    return Decimal(str(value or 0)).quantize(CENTS, rounding=ROUND_HALF_UP)


def normalize_code(code: str) -> str:
    return code.strip().upper()


@dataclass
class CouponCheck:
    valid: bool
    discount_amount: Decimal = Decimal("0.00")
    message: Optional[str] = None


def calculate_discount(coupon: Coupon, subtotal: Decimal) -> Decimal:
    """Discount for ``subtotal``. Never more than the subtotal itself."""
    subtotal = to_money(subtotal)
    value = Decimal(str(coupon.discount_value))

    if coupon.discount_type == DiscountType.PERCENTAGE:
        discount = subtotal * value / Decimal("100")
        if coupon.max_discount_amount is not None:
            discount = min(discount, Decimal(str(coupon.max_discount_amount)))
    else:
        discount = value

    return to_money(max(Decimal("0"), min(discount, subtotal)))


def evaluate_coupon(
    coupon: Optional[Coupon], subtotal: Decimal, now: Optional[datetime] = None
) -> CouponCheck:
    """Check a coupon against the cart subtotal at ``now``."""
    now = now or utc_now()

    if coupon is None or not coupon.is_active:
        return CouponCheck(False, message="Invalid coupon code")
    if coupon.start_date and now < coupon.start_date:
        return CouponCheck(False, message="Coupon is not active yet")
    if coupon.end_date and now > coupon.end_date:
        return CouponCheck(False, message="Coupon has expired")
    if coupon.usage_limit is not None and coupon.usage_count >= coupon.usage_limit:
        return CouponCheck(False, message="Coupon usage limit reached")
    if coupon.min_purchase_amount is not None and Decimal(str(subtotal)) < Decimal(
        str(coupon.min_purchase_amount)
    ):
        return CouponCheck(
            False,
            message=f"Minimum purchase of {to_money(coupon.min_purchase_amount)} required",
        )

    return CouponCheck(True, calculate_discount(coupon, subtotal), "Coupon applied")


async def get_coupon_by_code(
    db: AsyncSession, code: str, for_update: bool = False
) -> Optional[Coupon]:
    query = select(Coupon).where(Coupon.code == normalize_code(code))
    if for_update:
        query = query.with_for_update()
    result = await db.execute(query)
    return result.scalar_one_or_none()
