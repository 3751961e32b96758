"""Super admin: manage back-office accounts."""

import uuid

from fastapi import APIRouter, Depends, HTTPException, Request, status
from libs.common.error_handler import ApiError
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from services.storefront_service.dependencies import require_super_admin
from services.storefront_service.models import AdminUser
from services.storefront_service.schemas import (
    AdminCreate,
    AdminProfile,
    AdminRoleUpdate,
)
from services.storefront_service.services.admin_auth import create_admin
from services.storefront_service.services.audit import log_audit
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

router = APIRouter(prefix="/super", tags=["admin-super"])


async def _get_admin_or_404(db: AsyncSession, admin_id: uuid.UUID) -> AdminUser:
    target = await db.get(AdminUser, admin_id)
    if target is None:
        raise HTTPException(status_code=404, detail="Admin not found")
    return target


@router.get("/users", response_model=list[AdminProfile])
async def list_admins(
    admin: AdminUser = Depends(require_super_admin),
    db: AsyncSession = Depends(get_async_db),
):
    result = await db.execute(select(AdminUser).order_by(AdminUser.created_at))
    return result.scalars().all()


@router.post(
    "/users", response_model=AdminProfile, status_code=status.HTTP_201_CREATED
)
async def create_admin_user(
    payload: AdminCreate,
    request: Request,
    admin: AdminUser = Depends(require_super_admin),
    db: AsyncSession = Depends(get_async_db),
):
    new_admin = await create_admin(db, payload.email, payload.password, payload.role)
    await log_audit(
        db, request, admin.id, "CREATE_ADMIN", "admin_user", new_admin.id,
        {"email": new_admin.email, "role": new_admin.role.value},
    )
    await db.commit()
    await db.refresh(new_admin)

    logger.info("Admin %s created by %s", new_admin.email, admin.email)
    return new_admin


@router.patch("/users/{admin_id}/role", response_model=AdminProfile)
async def update_admin_role(
    admin_id: uuid.UUID,
    payload: AdminRoleUpdate,
    request: Request,
    admin: AdminUser = Depends(require_super_admin),
    db: AsyncSession = Depends(get_async_db),
):
    if admin_id == admin.id:
        raise ApiError(
            status.HTTP_400_BAD_REQUEST,
            "You cannot change your own role",
            code="SELF_ROLE_CHANGE",
        )

    target = await _get_admin_or_404(db, admin_id)
    old_role = target.role
    target.role = payload.role

    await log_audit(
        db, request, admin.id, "UPDATE_ADMIN_ROLE", "admin_user", target.id,
        {"old_role": old_role.value, "new_role": payload.role.value},
    )
    await db.commit()
    await db.refresh(target)
    return target


@router.delete("/users/{admin_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_admin_user(
    admin_id: uuid.UUID,
    request: Request,
    admin: AdminUser = Depends(require_super_admin),
    db: AsyncSession = Depends(get_async_db),
):
    if admin_id == admin.id:
        raise ApiError(
            status.HTTP_400_BAD_REQUEST,
            "You cannot delete your own account",
            code="SELF_DELETE",
        )

    target = await _get_admin_or_404(db, admin_id)
    await log_audit(
        db, request, admin.id, "DELETE_ADMIN", "admin_user", target.id,
        {"email": target.email},
    )
    await db.delete(target)
    await db.commit()

    logger.info("Admin %s deleted by %s", target.email, admin.email)
