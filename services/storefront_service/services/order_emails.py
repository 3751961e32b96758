"""Customer emails for order events. Failures are logged, never raised."""

from libs.common.emails.store import (
    send_order_confirmation_email,
    send_order_status_email,
)
from libs.common.logging import get_logger
from libs.common.pdf import order_reference
from services.storefront_service.models import Order
from services.storefront_service.services.orders import order_email
from services.storefront_service.services.settings import get_email_config
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


def _customer_name(order: Order) -> str:
    address = order.shipping_address or {}
    return address.get("first_name") or address.get("name") or "there"


async def notify_order_placed(db: AsyncSession, order: Order) -> bool:
    to_email = order_email(order)
    if not to_email:
        return False

    # The order is already committed; nothing here may fail the request
    try:
        sent = await send_order_confirmation_email(
            to_email=to_email,
            customer_name=_customer_name(order),
            order_number=order_reference(order.id),
            items=[
                {
                    "name": item.product_name or "Item",
                    "quantity": item.quantity,
                    "price": item.price,
                }
                for item in order.items
            ],
            subtotal=order.subtotal,
            tax=order.tax_amount,
            shipping=order.shipping_amount,
            discount=order.discount_amount,
            total=order.total_amount,
            config=await get_email_config(db),
        )
    except Exception:
        logger.exception("Order confirmation email errored for order %s", order.id)
        return False

    if not sent:
        logger.warning("Order confirmation email failed for order %s", order.id)
    return sent


async def notify_status_change(db: AsyncSession, order: Order) -> bool:
    to_email = order_email(order)
    if not to_email:
        return False

    try:
        sent = await send_order_status_email(
            to_email=to_email,
            order_number=order_reference(order.id),
            status=order.status.value,
            tracking_number=order.tracking_number,
            config=await get_email_config(db),
        )
    except Exception:
        logger.exception("Status email errored for order %s", order.id)
        return False

    if not sent:
        logger.warning("Status email failed for order %s", order.id)
    return sent
