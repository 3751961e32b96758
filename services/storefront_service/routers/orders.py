"""Checkout and the shopper's order history."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from libs.auth.dependencies import get_current_user, get_optional_user
from libs.auth.models import AuthUser
from libs.common.config import get_settings
from libs.common.error_handler import ApiError
from libs.common.logging import get_logger
from libs.common.pdf import generate_order_pdf, invoice_filename
from libs.db.session import get_async_db
from services.storefront_service.models import Order, OrderItem, OrderTracking
from services.storefront_service.routers.cart import load_cart
from services.storefront_service.schemas import (
    CheckoutRequest,
    OrderListResponse,
    OrderResponse,
    OrderTrackingResponse,
)
from services.storefront_service.services.catalog import count_rows
from services.storefront_service.services.order_emails import notify_order_placed
from services.storefront_service.services.orders import (
    OrderPlacementError,
    create_order_with_items,
    get_order_with_items,
    order_to_pdf_dict,
)
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

logger = get_logger(__name__)

router = APIRouter(tags=["orders"])


@router.post(
    "/orders", response_model=OrderResponse, status_code=status.HTTP_201_CREATED
)
async def checkout(
    checkout_in: CheckoutRequest,
    current_user: Optional[AuthUser] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Place an order from explicit lines or from the caller's cart.

    Prices come from the catalog at the moment of purchase; any price the
    client sends is ignored.
    """
    if not current_user and not checkout_in.guest_email:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Sign in or provide guest_email to check out",
        )

    items = list(checkout_in.items)
    cart_id = None
    if not items:
        cart = await load_cart(db, current_user, checkout_in.session_id)
        cart_id = cart.id if cart else None
        items = [
            {"product_id": item.product_id, "quantity": item.quantity}
            for item in (cart.items if cart else [])
        ]
    if not items:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Your cart is empty"
        )

    shipping_address = dict(checkout_in.shipping_address)
    if current_user and current_user.email and not shipping_address.get("email"):
        shipping_address["email"] = current_user.email

    order_data = {
        "user_id": current_user.user_id if current_user else None,
        "guest_email": None if current_user else checkout_in.guest_email,
        "shipping_address": shipping_address,
        "payment_method": checkout_in.payment_method,
        "coupon_code": checkout_in.coupon_code,
        "notes": checkout_in.notes,
        "cart_id": cart_id,
    }

    try:
        order = await create_order_with_items(db, order_data, items)
    except OrderPlacementError as e:
        raise ApiError(e.status_code, e.message)

    await notify_order_placed(db, order)
    return order


@router.get("/orders", response_model=OrderListResponse)
async def list_my_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    query = select(Order).where(Order.user_id == current_user.user_id)
    total = await count_rows(db, query)

    query = (
        query.options(selectinload(Order.items).selectinload(OrderItem.product))
        .order_by(Order.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    result = await db.execute(query)
    orders = result.scalars().all()

    return OrderListResponse(
        items=[OrderResponse.model_validate(o) for o in orders],
        total=total,
        page=page,
        limit=limit,
        total_pages=(total + limit - 1) // limit,
    )


async def _get_my_order(
    db: AsyncSession, order_id: uuid.UUID, user: AuthUser
) -> Order:
    order = await get_order_with_items(db, order_id, user_id=user.user_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


@router.get("/orders/{order_id}", response_model=OrderResponse)
async def get_my_order(
    order_id: uuid.UUID,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    return await _get_my_order(db, order_id, current_user)


@router.get("/orders/{order_id}/pdf")
async def download_invoice(
    order_id: uuid.UUID,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    order = await _get_my_order(db, order_id, current_user)
    pdf = generate_order_pdf(
        order_to_pdf_dict(order), store_name=get_settings().STORE_NAME
    )
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{invoice_filename(order.id)}"'
        },
    )


@router.get(
    "/orders/{order_id}/tracking", response_model=list[OrderTrackingResponse]
)
async def get_order_tracking(
    order_id: uuid.UUID,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    await _get_my_order(db, order_id, current_user)
    result = await db.execute(
        select(OrderTracking)
        .where(OrderTracking.order_id == order_id)
        .order_by(OrderTracking.created_at)
    )
    return result.scalars().all()
