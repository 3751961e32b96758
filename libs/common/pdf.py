"""
PDF generation utilities using ReportLab.
"""

import io
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

BRAND_COLOR = colors.HexColor("#166534")
MUTED_COLOR = colors.HexColor("#64748b")
BORDER_COLOR = colors.HexColor("#e2e8f0")


def format_money(value: Any, currency: str = "Rs.") -> str:
    amount = Decimal(str(value or 0)).quantize(Decimal("0.01"))
    return f"{currency} {amount:,.2f}"


def _format_date(value: Optional[datetime]) -> str:
    return value.strftime("%B %d, %Y") if value else "-"


def _address_lines(address: Optional[dict]) -> list[str]:
    if not address:
        return ["-"]
    name = " ".join(
        part for part in (address.get("first_name"), address.get("last_name")) if part
    ) or address.get("name")
    city_line = ", ".join(
        part
        for part in (address.get("city"), address.get("state"), address.get("zip"))
        if part
    )
    lines = [
        name,
        address.get("address") or address.get("line1"),
        address.get("line2"),
        city_line,
        address.get("country"),
        address.get("phone"),
    ]
    return [line for line in lines if line] or ["-"]


def order_reference(order_id: Any) -> str:
    return str(order_id)[:8].upper()


def admin_order_filename(order_id: Any) -> str:
    return f"ReWeara-Admin-Order-{order_reference(order_id)}.pdf"


def invoice_filename(order_id: Any) -> str:
    return f"ReWeara-Invoice-{order_reference(order_id)}.pdf"


def generate_order_pdf(
    order: dict,
    admin: bool = False,
    store_name: str = "ReWeara",
) -> bytes:
    """
    Generate a customer invoice (or an admin order slip) for an order.

    ``order`` is a plain dict with the order fields, a ``customer_email`` and an
    ``items`` list of ``{"name", "quantity", "price"}``.

    Returns PDF as bytes for email attachment or download.
    """
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=0.75 * inch,
        leftMargin=0.75 * inch,
        topMargin=0.75 * inch,
        bottomMargin=0.75 * inch,
        title=f"{store_name} Order {order_reference(order['id'])}",
    )

    styles = getSampleStyleSheet()
    elements = []

    title_style = ParagraphStyle(
        "InvoiceTitle",
        parent=styles["Heading1"],
        fontSize=22,
        textColor=BRAND_COLOR,
        spaceAfter=6,
    )
    heading_style = ParagraphStyle(
        "InvoiceHeading",
        parent=styles["Heading2"],
        fontSize=13,
        textColor=colors.HexColor("#1e293b"),
        spaceBefore=16,
        spaceAfter=8,
    )
    normal_style = styles["Normal"]

    # Header
    elements.append(Paragraph(store_name, title_style))
    subtitle = "Admin Order Summary" if admin else "Tax Invoice"
    elements.append(Paragraph(subtitle, styles["Heading3"]))
    elements.append(Spacer(1, 12))

    # Order meta
    meta = [
        ["Order:", f"#{order_reference(order['id'])}"],
        ["Date:", _format_date(order.get("created_at"))],
        ["Status:", str(order.get("status") or "-").replace("_", " ").title()],
        ["Payment:", str(order.get("payment_method") or "-").upper()],
    ]
    if order.get("customer_email"):
        meta.append(["Customer:", order["customer_email"]])
    if admin:
        meta.append(
            [
                "Payment status:",
                str(order.get("payment_status") or "-").replace("_", " ").title(),
            ]
        )
        if order.get("payment_verified_at"):
            meta.append(["Verified at:", _format_date(order["payment_verified_at"])])
        if order.get("tracking_number"):
            meta.append(["Tracking:", order["tracking_number"]])

    meta_table = Table(meta, colWidths=[1.5 * inch, 4.5 * inch])
    meta_table.setStyle(
        TableStyle(
            [
                ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), 10),
                ("TEXTCOLOR", (0, 0), (0, -1), MUTED_COLOR),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
            ]
        )
    )
    elements.append(meta_table)

    # Shipping address
    elements.append(Paragraph("Ship To", heading_style))
    for line in _address_lines(order.get("shipping_address")):
        elements.append(Paragraph(escape(str(line)), normal_style))

    # Items
    elements.append(Paragraph("Items", heading_style))
    rows = [["Product", "Qty", "Price", "Total"]]
    for item in order.get("items", []):
        quantity = int(item.get("quantity") or 0)
        price = Decimal(str(item.get("price") or 0))
        name = item.get("name") or "Product"
        if len(name) > 45:
            name = name[:42] + "..."
        rows.append(
            [name, str(quantity), format_money(price), format_money(price * quantity)]
        )

    items_table = Table(
        rows, colWidths=[3.2 * inch, 0.6 * inch, 1.2 * inch, 1.2 * inch]
    )
    items_table.setStyle(
        TableStyle(
            [
                # Header
                ("BACKGROUND", (0, 0), (-1, 0), BRAND_COLOR),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                # Body
                ("FONTSIZE", (0, 0), (-1, -1), 9),
                ("ALIGN", (1, 0), (-1, -1), "RIGHT"),
                ("GRID", (0, 0), (-1, -1), 0.5, BORDER_COLOR),
                ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#f8fafc")]),
                ("PADDING", (0, 0), (-1, -1), 6),
            ]
        )
    )
    elements.append(items_table)
    elements.append(Spacer(1, 12))

    # Totals
    totals = [
        ["Subtotal", format_money(order.get("subtotal"))],
        ["Tax", format_money(order.get("tax_amount"))],
        ["Shipping", format_money(order.get("shipping_amount"))],
    ]
    if Decimal(str(order.get("discount_amount") or 0)) > 0:
        totals.append(["Discount", "- " + format_money(order.get("discount_amount"))])
    totals.append(["Total", format_money(order.get("total_amount"))])

    totals_table = Table(totals, colWidths=[4.0 * inch, 2.2 * inch])
    totals_table.setStyle(
        TableStyle(
            [
                ("ALIGN", (0, 0), (-1, -1), "RIGHT"),
                ("FONTSIZE", (0, 0), (-1, -1), 10),
                ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
                ("LINEABOVE", (0, -1), (-1, -1), 1, BRAND_COLOR),
                ("TOPPADDING", (0, -1), (-1, -1), 8),
            ]
        )
    )
    elements.append(totals_table)

    if admin and order.get("notes"):
        elements.append(Paragraph("Notes", heading_style))
        elements.append(Paragraph(escape(str(order["notes"])), normal_style))

    elements.append(Spacer(1, 30))
    elements.append(
        Paragraph(
            f"Thank you for shopping sustainably with {store_name}.",
            ParagraphStyle("Footer", parent=normal_style, textColor=MUTED_COLOR),
        )
    )

    doc.build(elements)
    return buffer.getvalue()
