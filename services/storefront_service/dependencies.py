"""Admin session dependencies backed by the admin_users table."""

import uuid

from fastapi import Depends, status
from libs.auth.dependencies import get_admin_claims
from libs.auth.models import AdminClaims
from libs.common.error_handler import ApiError
from libs.db.session import get_async_db
from services.storefront_service.models import AdminRole, AdminUser
from sqlalchemy.ext.asyncio import AsyncSession


def _admin_not_found() -> ApiError:
    return ApiError(
        status.HTTP_401_UNAUTHORIZED,
        "Admin not found",
        code="ADMIN_NOT_FOUND",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_admin(
    claims: AdminClaims = Depends(get_admin_claims),
    db: AsyncSession = Depends(get_async_db),
) -> AdminUser:
    """Resolve the bearer token to a live admin account."""
    try:
        admin_id = uuid.UUID(claims.admin_id)
    except ValueError:
        raise _admin_not_found()

    admin = await db.get(AdminUser, admin_id)
    if admin is None:
        raise _admin_not_found()
    return admin


async def require_super_admin(
    admin: AdminUser = Depends(get_current_admin),
) -> AdminUser:
    if admin.role != AdminRole.SUPER_ADMIN:
        raise ApiError(
            status.HTTP_403_FORBIDDEN,
            "Super admin access required",
            code="INSUFFICIENT_PERMISSIONS",
        )
    return admin
