"""Admin order management: listing, status workflow, payment review, PDFs."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from libs.common.config import get_settings
from libs.common.pdf import admin_order_filename, generate_order_pdf
from libs.db.session import get_async_db
from services.storefront_service.dependencies import get_current_admin
from services.storefront_service.models import (
    AdminUser,
    Order,
    OrderItem,
    OrderStatus,
)
from services.storefront_service.schemas import (
    OrderListResponse,
    OrderPatch,
    OrderResponse,
    OrderStatusUpdate,
    OrderTrackingResponse,
    TrackingCreate,
)
from services.storefront_service.services.audit import log_audit
from services.storefront_service.services.catalog import count_rows
from services.storefront_service.services.order_emails import notify_status_change
from services.storefront_service.services.orders import (
    add_tracking_entry,
    apply_order_patch,
    get_order_with_items,
    mark_payment_rejected,
    mark_payment_verified,
    order_to_pdf_dict,
)
from sqlalchemy import String, cast, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

router = APIRouter(tags=["admin-orders"])


async def _get_order_or_404(db: AsyncSession, order_id: uuid.UUID) -> Order:
    order = await get_order_with_items(db, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


@router.get("/orders", response_model=OrderListResponse)
async def list_orders(
    status_filter: Optional[OrderStatus] = Query(None, alias="status"),
    search: Optional[str] = Query(None, max_length=100),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    query = select(Order)
    if status_filter:
        query = query.where(Order.status == status_filter)
    if search:
        term = f"%{search.strip()}%"
        query = query.where(
            or_(cast(Order.id, String).ilike(term), Order.guest_email.ilike(term))
        )

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


@router.get("/orders/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: uuid.UUID,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await _get_order_or_404(db, order_id)


@router.put("/orders/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: uuid.UUID,
    payload: OrderStatusUpdate,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    order = await _get_order_or_404(db, order_id)
    old_status = order.status
    order.status = payload.status

    await log_audit(
        db, request, admin.id, "UPDATE_ORDER_STATUS", "order", order.id,
        {"old_status": old_status.value, "new_status": payload.status.value},
    )
    await db.commit()

    order = await get_order_with_items(db, order_id)
    await notify_status_change(db, order)
    return order


@router.patch("/orders/{order_id}", response_model=OrderResponse)
async def patch_order(
    order_id: uuid.UUID,
    payload: OrderPatch,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Edit order fields. Every edit is kept with a before/after snapshot."""
    changes = payload.model_dump(exclude_unset=True)
    # Status columns are not nullable
    for field in ("status", "payment_status"):
        if field in changes and changes[field] is None:
            del changes[field]
    if not changes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update"
        )

    order = await _get_order_or_404(db, order_id)
    try:
        entry = await apply_order_patch(db, order, changes, actor_id=str(admin.id))
        await log_audit(
            db, request, admin.id, "EDIT_ORDER", "order", order.id,
            {"fields_changed": entry.changes["fields_changed"]},
        )
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    return await get_order_with_items(db, order_id)


@router.put("/orders/{order_id}/verify-payment", response_model=OrderResponse)
async def verify_payment(
    order_id: uuid.UUID,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    order = await _get_order_or_404(db, order_id)
    mark_payment_verified(order, verified_by=admin.email)
    await log_audit(db, request, admin.id, "VERIFY_PAYMENT", "order", order.id)
    await db.commit()

    order = await get_order_with_items(db, order_id)
    await notify_status_change(db, order)
    return order


@router.put("/orders/{order_id}/reject-payment", response_model=OrderResponse)
async def reject_payment(
    order_id: uuid.UUID,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    order = await _get_order_or_404(db, order_id)
    mark_payment_rejected(order)
    await log_audit(db, request, admin.id, "REJECT_PAYMENT", "order", order.id)
    await db.commit()

    order = await get_order_with_items(db, order_id)
    await notify_status_change(db, order)
    return order


@router.post(
    "/orders/{order_id}/tracking",
    response_model=OrderTrackingResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_order_tracking(
    order_id: uuid.UUID,
    payload: TrackingCreate,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Update payment status and append a tracking entry in one transaction."""
    order = await _get_order_or_404(db, order_id)
    tracking = payload.model_dump(exclude={"payment_status"})
    try:
        entry = add_tracking_entry(
            db, order, payload.payment_status, verified_by=admin.email, **tracking
        )
        await log_audit(
            db, request, admin.id, "ADD_TRACKING", "order", order.id,
            payload.model_dump(mode="json", exclude_none=True),
        )
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    await db.refresh(entry)
    return entry


@router.get("/orders/{order_id}/pdf")
async def download_order_pdf(
    order_id: uuid.UUID,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    order = await _get_order_or_404(db, order_id)
    pdf = generate_order_pdf(
        order_to_pdf_dict(order), admin=True, store_name=get_settings().STORE_NAME
    )
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{admin_order_filename(order.id)}"'
        },
    )
