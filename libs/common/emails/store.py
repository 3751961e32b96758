"""
Storefront email templates.
"""

from decimal import Decimal
from html import escape
from typing import Optional

from libs.common.emails.core import EmailConfig, send_email

STATUS_MESSAGES = {
    "pending": "We have received your order and are waiting for payment confirmation.",
    "payment_verified": "Your payment has been verified. We are preparing your order.",
    "payment_failed": "We could not verify your payment. Please contact us for help.",
    "confirmed": "Your order is confirmed and will be packed soon.",
    "processing": "Your order is being packed.",
    "shipped": "Your order is on its way!",
    "delivered": "Your order has been delivered. Enjoy your pre-loved finds!",
    "cancelled": "Your order has been cancelled.",
}

_HTML_SHELL = """<!DOCTYPE html>
<html>
<head>
    <style>
        body {{ font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; line-height: 1.6; color: #333; }}
        .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
        .header {{ background: #166534; color: white; padding: 24px; border-radius: 12px 12px 0 0; }}
        .content {{ background: #f8fafc; padding: 24px; border-radius: 0 0 12px 12px; }}
        table {{ width: 100%; border-collapse: collapse; }}
        th, td {{ padding: 8px; text-align: left; border-bottom: 1px solid #e2e8f0; }}
    </style>
</head>
<body>
<div class="container">
    <div class="header"><h1>{title}</h1></div>
    <div class="content">{content}</div>
</div>
</body>
</html>
"""


def _money(value) -> str:
    return f"Rs. {Decimal(str(value or 0)):,.2f}"


async def send_order_confirmation_email(
    to_email: str,
    customer_name: str,
    order_number: str,
    items: list[dict],  # [{"name": str, "quantity": int, "price": Decimal}]
    subtotal: Decimal,
    tax: Decimal,
    shipping: Decimal,
    discount: Decimal,
    total: Decimal,
    config: Optional[EmailConfig] = None,
) -> bool:
    """
    Send the order confirmation right after checkout.
    """
    subject = f"Order Confirmed - #{order_number}"

    items_text = "\n".join(
        f"  - {item['name']} x{item['quantity']} - {_money(item['price'])}"
        for item in items
    )
    items_html = "".join(
        f"<tr><td>{escape(item['name'])}</td><td>{item['quantity']}</td>"
        f"<td style='text-align:right'>{_money(item['price'])}</td></tr>"
        for item in items
    )
    discount_line = f"Discount: -{_money(discount)}\n" if discount else ""

    body = f"""Hi {customer_name},

Thank you for your order! Every pre-loved piece you buy keeps clothing out of landfill.

Order #{order_number}

Items:
{items_text}

Subtotal: {_money(subtotal)}
Tax: {_money(tax)}
Shipping: {_money(shipping)}
{discount_line}Total: {_money(total)}

We'll email you again when your order ships.

- The ReWeara Team
"""

    html_body = _HTML_SHELL.format(
        title="Order Confirmed",
        content=(
            f"<p>Hi {escape(customer_name)},</p>"
            f"<p>Thank you for your order <strong>#{order_number}</strong>.</p>"
            f"<table><tr><th>Item</th><th>Qty</th><th>Price</th></tr>{items_html}</table>"
            f"<p>Total: <strong>{_money(total)}</strong></p>"
        ),
    )

    return await send_email(to_email, subject, body, html_body, config=config)


async def send_order_status_email(
    to_email: str,
    order_number: str,
    status: str,
    tracking_number: Optional[str] = None,
    config: Optional[EmailConfig] = None,
) -> bool:
    """
    Notify the customer that their order moved to a new status.
    """
    status_label = status.replace("_", " ").title()
    message = STATUS_MESSAGES.get(status, f"Your order status is now {status_label}.")
    subject = f"Order #{order_number} - {status_label}"
    tracking_line = f"Tracking number: {tracking_number}\n" if tracking_number else ""

    body = f"""Hi,

{message}

Order #{order_number}
Status: {status_label}
{tracking_line}
- The ReWeara Team
"""
    html_body = _HTML_SHELL.format(
        title=status_label,
        content=(
            f"<p>{escape(message)}</p>"
            f"<p>Order <strong>#{order_number}</strong></p>"
            + (f"<p>Tracking number: {escape(tracking_number)}</p>" if tracking_number else "")
        ),
    )
    return await send_email(to_email, subject, body, html_body, config=config)


async def send_contact_message_email(
    store_email: str,
    name: str,
    email: str,
    message: str,
    subject: Optional[str] = None,
    config: Optional[EmailConfig] = None,
) -> bool:
    """Forward a contact-form message to the store inbox."""
    body = f"""New contact form message

From: {name} <{email}>
Subject: {subject or '-'}

{message}
"""
    return await send_email(
        store_email,
        f"Contact form: {subject or name}",
        body,
        config=config,
        reply_to=email,
    )
