"""Order placement and admin order workflow.

``create_order_with_items`` is the only place product stock is decremented.
Product rows are locked with SELECT ... FOR UPDATE in id order so concurrent
checkouts for the same pieces serialize instead of overselling.
"""

import uuid
from decimal import Decimal
from typing import Any, Iterable, Optional

from fastapi import status
from libs.common.config import Settings, get_settings
from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger
from services.storefront_service.models import (
    Cart,
    CartItem,
    Order,
    OrderAdminLog,
    OrderItem,
    OrderStatus,
    OrderTracking,
    PaymentStatus,
    Product,
    TaxRate,
)
from services.storefront_service.services.coupons import (
    evaluate_coupon,
    get_coupon_by_code,
    to_money,
)
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

logger = get_logger(__name__)


class OrderPlacementError(Exception):
    """Checkout failed; nothing was written."""

    def __init__(self, message: str, status_code: int = status.HTTP_409_CONFLICT):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


# ---------------------------------------------------------------------------
# Pricing helpers
# ---------------------------------------------------------------------------


def shipping_fee(subtotal: Decimal, settings: Optional[Settings] = None) -> Decimal:
    settings = settings or get_settings()
    if subtotal >= settings.FREE_SHIPPING_THRESHOLD:
        return Decimal("0.00")
    return to_money(settings.STANDARD_SHIPPING_FEE)


async def resolve_tax_amount(db: AsyncSession, subtotal: Decimal) -> Decimal:
    """Apply the highest-priority active tax rate (0 when none)."""
    result = await db.execute(
        select(TaxRate)
        .where(TaxRate.is_active.is_(True))
        .order_by(TaxRate.priority.desc(), TaxRate.created_at.desc())
        .limit(1)
    )
    rate = result.scalar_one_or_none()
    if rate is None:
        return Decimal("0.00")
    return to_money(subtotal * Decimal(str(rate.rate)) / Decimal("100"))


def _merge_lines(items: Iterable[Any]) -> dict[uuid.UUID, int]:
    """Collapse lines into {product_id: quantity}. Accepts dicts or schemas."""
    merged: dict[uuid.UUID, int] = {}
    for item in items:
        if isinstance(item, dict):
            product_id, quantity = item["product_id"], item["quantity"]
        else:
            product_id, quantity = item.product_id, item.quantity
        product_id = uuid.UUID(str(product_id))
        merged[product_id] = merged.get(product_id, 0) + int(quantity)
    return merged


async def get_order_with_items(
    db: AsyncSession, order_id: uuid.UUID, user_id: Optional[str] = None
) -> Optional[Order]:
    query = (
        select(Order)
        .where(Order.id == order_id)
        .options(
            selectinload(Order.items).selectinload(OrderItem.product),
            selectinload(Order.tracking),
        )
        .execution_options(populate_existing=True)
    )
    if user_id is not None:
        query = query.where(Order.user_id == user_id)
    result = await db.execute(query)
    return result.scalar_one_or_none()


# ---------------------------------------------------------------------------
# Order placement
# ---------------------------------------------------------------------------


async def create_order_with_items(
    db: AsyncSession,
    order_data: dict,
    items: Iterable[Any],
    settings: Optional[Settings] = None,
) -> Order:
    """Place an order atomically.

    ``order_data`` carries the owner and shipping fields (user_id,
    guest_email, shipping_address, payment_method, notes, coupon_code) and,
    for guest checkouts from a session cart, the ``cart_id`` to empty.
    Amounts are always recomputed here from the locked product rows; any
    amount or price supplied by the caller is ignored.

    Raises:
        OrderPlacementError: a product is missing, inactive or short on stock,
            or the coupon cannot be applied. The session is rolled back.
    """
    lines = _merge_lines(items)
    if not lines:
        raise OrderPlacementError("Order has no items", status.HTTP_400_BAD_REQUEST)

    try:
        result = await db.execute(
            select(Product)
            .where(Product.id.in_(list(lines)))
            .order_by(Product.id)
            .with_for_update()
        )
        products = {product.id: product for product in result.scalars().all()}

        subtotal = Decimal("0")
        for product_id, quantity in lines.items():
            product = products.get(product_id)
            if product is None:
                raise OrderPlacementError(
                    f"Product {product_id} not found", status.HTTP_404_NOT_FOUND
                )
            if not product.is_active:
                raise OrderPlacementError(f"Product {product.name} is not available")
            if product.stock < quantity:
                raise OrderPlacementError(
                    f"Insufficient stock for {product.name}. "
                    f"Available: {product.stock}, Requested: {quantity}"
                )
            subtotal += Decimal(str(product.price)) * quantity
        subtotal = to_money(subtotal)

        tax_amount = await resolve_tax_amount(db, subtotal)
        shipping_amount = shipping_fee(subtotal, settings)

        discount_amount = Decimal("0.00")
        coupon_code = order_data.get("coupon_code")
        if coupon_code:
            coupon = await get_coupon_by_code(db, coupon_code, for_update=True)
            check = evaluate_coupon(coupon, subtotal)
            if not check.valid:
                raise OrderPlacementError(check.message, status.HTTP_400_BAD_REQUEST)
            discount_amount = check.discount_amount
            coupon.usage_count += 1
            coupon_code = coupon.code

        total_amount = to_money(
            subtotal + tax_amount + shipping_amount - discount_amount
        )

        order = Order(
            user_id=order_data.get("user_id"),
            guest_email=order_data.get("guest_email"),
            shipping_address=order_data.get("shipping_address"),
            payment_method=order_data.get("payment_method"),
            notes=order_data.get("notes"),
            coupon_code=coupon_code,
            subtotal=subtotal,
            tax_amount=tax_amount,
            shipping_amount=shipping_amount,
            discount_amount=discount_amount,
            total_amount=total_amount,
            status=OrderStatus.PENDING,
            payment_status=PaymentStatus.PENDING,
        )
        db.add(order)
        await db.flush()

        for product_id, quantity in lines.items():
            product = products[product_id]
            db.add(
                OrderItem(
                    order_id=order.id,
                    product_id=product_id,
                    quantity=quantity,
                    price=product.price,
                )
            )
            product.stock -= quantity

        # Empty the originating cart: the user's carts, or the guest session cart
        cart_filter = None
        if order.user_id:
            cart_filter = CartItem.cart_id.in_(
                select(Cart.id).where(Cart.user_id == order.user_id)
            )
        elif order_data.get("cart_id"):
            cart_filter = CartItem.cart_id == order_data["cart_id"]
        if cart_filter is not None:
            await db.execute(
                delete(CartItem)
                .where(cart_filter)
                .execution_options(synchronize_session=False)
            )

        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(
        "Order %s placed: %d line(s), total %s", order.id, len(lines), total_amount
    )
    return await get_order_with_items(db, order.id)


# ---------------------------------------------------------------------------
# Admin workflow
# ---------------------------------------------------------------------------

PATCHABLE_FIELDS = (
    "status",
    "payment_status",
    "shipping_address",
    "notes",
    "tracking_number",
    "estimated_delivery",
)


def _jsonable(value: Any) -> Any:
    if hasattr(value, "value"):
        return value.value
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return value


def order_snapshot(order: Order, fields: Iterable[str] = PATCHABLE_FIELDS) -> dict:
    return {field: _jsonable(getattr(order, field)) for field in fields}


async def apply_order_patch(
    db: AsyncSession, order: Order, changes: dict, actor_id: str
) -> OrderAdminLog:
    """Apply an admin edit and record before/after in the per-order log."""
    before = order_snapshot(order)
    for field, value in changes.items():
        setattr(order, field, value)
    after = order_snapshot(order)

    fields_changed = [field for field in changes if before[field] != after[field]]
    entry = OrderAdminLog(
        order_id=order.id,
        actor_id=actor_id,
        action="manual_edit",
        changes={"before": before, "after": after, "fields_changed": fields_changed},
    )
    db.add(entry)
    return entry


def mark_payment_verified(order: Order, verified_by: str) -> None:
    order.status = OrderStatus.PAYMENT_VERIFIED
    order.payment_status = PaymentStatus.VERIFIED
    order.payment_verified_by = verified_by
    order.payment_verified_at = utc_now()


def mark_payment_rejected(order: Order) -> None:
    order.status = OrderStatus.PAYMENT_FAILED
    order.payment_status = PaymentStatus.FAILED


def add_tracking_entry(
    db: AsyncSession,
    order: Order,
    payment_status: PaymentStatus,
    verified_by: str,
    **tracking: Any,
) -> OrderTracking:
    """Update payment status and append a tracking row in the caller's transaction."""
    order.payment_status = payment_status
    if payment_status == PaymentStatus.VERIFIED:
        order.status = OrderStatus.CONFIRMED
        order.payment_verified_by = verified_by
        order.payment_verified_at = utc_now()

    if tracking.get("tracking_number"):
        order.tracking_number = tracking["tracking_number"]
    if tracking.get("estimated_delivery"):
        order.estimated_delivery = tracking["estimated_delivery"]

    entry = OrderTracking(
        order_id=order.id,
        status=tracking.get("status") or order.status.value,
        message=tracking.get("message"),
        location=tracking.get("location"),
        tracking_number=tracking.get("tracking_number"),
        carrier=tracking.get("carrier"),
        estimated_delivery=tracking.get("estimated_delivery"),
    )
    db.add(entry)
    return entry


# ---------------------------------------------------------------------------
# Presentation
# ---------------------------------------------------------------------------


def order_email(order: Order) -> Optional[str]:
    if order.guest_email:
        return order.guest_email
    address = order.shipping_address or {}
    return address.get("email")


def order_to_pdf_dict(order: Order) -> dict:
    """Flatten an order (items and products loaded) for the PDF renderer."""
    return {
        "id": order.id,
        "created_at": order.created_at,
        "status": order.status.value,
        "payment_method": order.payment_method,
        "payment_status": order.payment_status.value,
        "payment_verified_at": order.payment_verified_at,
        "customer_email": order_email(order),
        "tracking_number": order.tracking_number,
        "shipping_address": order.shipping_address,
        "items": [
            {
                "name": item.product_name or str(item.product_id),
                "quantity": item.quantity,
                "price": item.price,
            }
            for item in order.items
        ],
        "subtotal": order.subtotal,
        "tax_amount": order.tax_amount,
        "shipping_amount": order.shipping_amount,
        "discount_amount": order.discount_amount,
        "total_amount": order.total_amount,
        "notes": order.notes,
    }
