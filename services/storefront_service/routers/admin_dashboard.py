"""Admin dashboard, user directory, audit trail and notifications."""

import uuid
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from services.storefront_service.dependencies import get_current_admin
from services.storefront_service.models import (
    AdminUser,
    AuditLog,
    Brand,
    Notification,
    Order,
    OrderItem,
    OrderStatus,
    Product,
    User,
)
from services.storefront_service.schemas import (
    AuditLogListResponse,
    AuditLogResponse,
    DashboardStats,
    NotificationSendRequest,
    OrderResponse,
    RevenuePoint,
    UserListResponse,
    UserResponse,
)
from services.storefront_service.services.audit import log_audit
from services.storefront_service.services.catalog import count_rows
from sqlalchemy import Date, cast, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

logger = get_logger(__name__)

router = APIRouter(tags=["admin-dashboard"])

# Orders that never turned into money
NON_REVENUE_STATUSES = (OrderStatus.CANCELLED, OrderStatus.PAYMENT_FAILED)


async def _count(db: AsyncSession, model) -> int:
    return (await db.execute(select(func.count(model.id)))).scalar() or 0


@router.get("/dashboard/stats", response_model=DashboardStats)
async def dashboard_stats(
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    total_products = await _count(db, Product)
    total_orders = await _count(db, Order)
    total_users = await _count(db, User)
    total_brands = await _count(db, Brand)

    revenue_result = await db.execute(
        select(func.coalesce(func.sum(Order.total_amount), 0)).where(
            Order.status.notin_(NON_REVENUE_STATUSES)
        )
    )
    total_revenue = Decimal(revenue_result.scalar() or 0)

    recent_result = await db.execute(
        select(Order)
        .options(selectinload(Order.items).selectinload(OrderItem.product))
        .order_by(Order.created_at.desc())
        .limit(5)
    )
    recent_orders = recent_result.scalars().all()

    # Last 7 days including today
    since = (utc_now() - timedelta(days=6)).replace(
        hour=0, minute=0, second=0, microsecond=0
    )
    day = cast(Order.created_at, Date)
    by_day_result = await db.execute(
        select(
            day.label("day"),
            func.coalesce(func.sum(Order.total_amount), 0).label("revenue"),
            func.count(Order.id).label("orders"),
        )
        .where(
            Order.created_at >= since,
            Order.status.notin_(NON_REVENUE_STATUSES),
        )
        .group_by(day)
        .order_by(day)
    )
    revenue_by_day = [
        RevenuePoint(
            date=row.day.isoformat(),
            revenue=Decimal(row.revenue),
            orders=row.orders,
        )
        for row in by_day_result.all()
    ]

    return DashboardStats(
        total_products=total_products,
        total_orders=total_orders,
        total_users=total_users,
        total_brands=total_brands,
        total_revenue=total_revenue,
        recent_orders=[OrderResponse.model_validate(o) for o in recent_orders],
        revenue_by_day=revenue_by_day,
    )


@router.get("/users", response_model=UserListResponse)
async def list_users(
    search: Optional[str] = Query(None, max_length=100),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    query = select(User)
    if search:
        term = f"%{search.strip()}%"
        query = query.where(
            or_(
                User.email.ilike(term),
                User.first_name.ilike(term),
                User.last_name.ilike(term),
            )
        )

    total = await count_rows(db, query)
    result = await db.execute(
        query.order_by(User.created_at.desc()).offset((page - 1) * limit).limit(limit)
    )
    return UserListResponse(
        items=[UserResponse.model_validate(u) for u in result.scalars().all()],
        total=total,
        page=page,
        limit=limit,
    )


@router.get("/audit-logs", response_model=AuditLogListResponse)
async def list_audit_logs(
    admin_id: Optional[uuid.UUID] = None,
    entity_type: Optional[str] = None,
    action: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    query = select(AuditLog, AdminUser.email).outerjoin(
        AdminUser, AuditLog.admin_id == AdminUser.id
    )
    if admin_id:
        query = query.where(AuditLog.admin_id == admin_id)
    if entity_type:
        query = query.where(AuditLog.entity_type == entity_type)
    if action:
        query = query.where(AuditLog.action == action)
    if start_date:
        query = query.where(AuditLog.created_at >= start_date)
    if end_date:
        query = query.where(AuditLog.created_at <= end_date)

    total = await count_rows(db, query)
    result = await db.execute(
        query.order_by(AuditLog.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )

    items = []
    for log, admin_email in result.all():
        item = AuditLogResponse.model_validate(log)
        item.admin_email = admin_email
        items.append(item)

    return AuditLogListResponse(items=items, total=total, page=page, limit=limit)


@router.post("/notifications/send", status_code=status.HTTP_201_CREATED)
async def send_notifications(
    payload: NotificationSendRequest,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    user_ids = list(dict.fromkeys(payload.user_ids))
    for user_id in user_ids:
        db.add(
            Notification(
                user_id=user_id,
                title=payload.title,
                message=payload.message,
                type=payload.type,
            )
        )

    await log_audit(
        db, request, admin.id, "SEND_NOTIFICATION", "notification", None,
        {"user_count": len(user_ids), "title": payload.title, "type": payload.type},
    )
    await db.commit()

    logger.info("Admin %s sent notification to %d users", admin.email, len(user_ids))
    return {"sent": len(user_ids)}
