"""Coupon validation (public) and coupon management (admin)."""

import uuid

from fastapi import APIRouter, Depends, HTTPException, Request, status
from libs.db.session import get_async_db
from services.storefront_service.dependencies import get_current_admin
from services.storefront_service.models import AdminUser, Coupon
from services.storefront_service.schemas import (
    CouponCreate,
    CouponResponse,
    CouponUpdate,
    CouponValidateRequest,
    CouponValidateResponse,
)
from services.storefront_service.services.audit import log_audit
from services.storefront_service.services.coupons import (
    evaluate_coupon,
    get_coupon_by_code,
    normalize_code,
)
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["coupons"])
admin_router = APIRouter(tags=["admin-coupons"])


@router.post("/coupons/validate", response_model=CouponValidateResponse)
async def validate_coupon(
    payload: CouponValidateRequest, db: AsyncSession = Depends(get_async_db)
):
    coupon = await get_coupon_by_code(db, payload.code)
    check = evaluate_coupon(coupon, payload.subtotal)
    return CouponValidateResponse(
        valid=check.valid,
        discount_amount=check.discount_amount,
        message=check.message,
    )


# ============================================================================
# ADMIN
# ============================================================================


async def _get_coupon_or_404(db: AsyncSession, coupon_id: uuid.UUID) -> Coupon:
    coupon = await db.get(Coupon, coupon_id)
    if not coupon:
        raise HTTPException(status_code=404, detail="Coupon not found")
    return coupon


async def _ensure_code_free(db: AsyncSession, code: str, exclude_id=None) -> None:
    query = select(Coupon.id).where(Coupon.code == code)
    if exclude_id is not None:
        query = query.where(Coupon.id != exclude_id)
    if (await db.execute(query)).first() is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Coupon with this code already exists",
        )


@admin_router.get("/coupons", response_model=list[CouponResponse])
async def list_coupons(
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    result = await db.execute(select(Coupon).order_by(Coupon.created_at.desc()))
    return result.scalars().all()


@admin_router.post(
    "/coupons", response_model=CouponResponse, status_code=status.HTTP_201_CREATED
)
async def create_coupon(
    coupon_in: CouponCreate,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    data = coupon_in.model_dump()
    data["code"] = normalize_code(data["code"])
    await _ensure_code_free(db, data["code"])

    coupon = Coupon(**data)
    db.add(coupon)
    await db.flush()

    await log_audit(
        db, request, admin.id, "CREATE_COUPON", "coupon", coupon.id, changes=data
    )
    await db.commit()
    await db.refresh(coupon)
    return coupon


@admin_router.put("/coupons/{coupon_id}", response_model=CouponResponse)
async def update_coupon(
    coupon_id: uuid.UUID,
    coupon_in: CouponUpdate,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    coupon = await _get_coupon_or_404(db, coupon_id)

    update_data = coupon_in.model_dump(exclude_unset=True)
    if update_data.get("code"):
        update_data["code"] = normalize_code(update_data["code"])
        await _ensure_code_free(db, update_data["code"], exclude_id=coupon.id)

    for field, value in update_data.items():
        setattr(coupon, field, value)

    await log_audit(
        db, request, admin.id, "UPDATE_COUPON", "coupon", coupon.id, update_data
    )
    await db.commit()
    await db.refresh(coupon)
    return coupon


@admin_router.delete("/coupons/{coupon_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_coupon(
    coupon_id: uuid.UUID,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    coupon = await _get_coupon_or_404(db, coupon_id)
    await log_audit(
        db, request, admin.id, "DELETE_COUPON", "coupon", coupon.id, {"code": coupon.code}
    )
    await db.delete(coupon)
    await db.commit()
    return None
