"""Admin login, lockout and account management."""

from datetime import timedelta
from typing import Optional

from fastapi import status
from libs.auth.security import (
    create_admin_token,
    hash_password,
    verify_password,
    verify_totp,
)
from libs.common.config import Settings, get_settings
from libs.common.datetime_utils import utc_now
from libs.common.error_handler import ApiError
from libs.common.logging import get_logger
from services.storefront_service.models import AdminRole, AdminUser
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

MAX_LOGIN_ATTEMPTS = 5
LOCKOUT_DURATION = timedelta(minutes=30)


def _invalid_credentials() -> ApiError:
    return ApiError(
        status.HTTP_401_UNAUTHORIZED,
        "Invalid credentials",
        code="INVALID_CREDENTIALS",
    )


def is_locked(admin: AdminUser) -> bool:
    return admin.locked_until is not None and admin.locked_until > utc_now()


def register_failed_attempt(admin: AdminUser) -> None:
    admin.login_attempts = (admin.login_attempts or 0) + 1
    if admin.login_attempts >= MAX_LOGIN_ATTEMPTS:
        admin.locked_until = utc_now() + LOCKOUT_DURATION
        logger.warning(
            "Admin %s locked after %d failed attempts", admin.email, admin.login_attempts
        )


def register_successful_login(admin: AdminUser) -> None:
    admin.login_attempts = 0
    admin.locked_until = None
    admin.last_login = utc_now()


async def get_admin_by_email(db: AsyncSession, email: str) -> Optional[AdminUser]:
    result = await db.execute(
        select(AdminUser).where(func.lower(AdminUser.email) == email.strip().lower())
    )
    return result.scalar_one_or_none()


async def authenticate_admin(
    db: AsyncSession,
    email: Optional[str],
    password: Optional[str],
    otp_token: Optional[str] = None,
) -> Optional[AdminUser]:
    """Check credentials and, when enabled, the TOTP code.

    Returns the admin on success, or None when the password was right but a
    TOTP code is still required. Failed attempts are committed before the
    error is raised so the lockout counter survives the request.
    """
    if not email or not password:
        raise ApiError(
            status.HTTP_400_BAD_REQUEST,
            "Email and password are required",
            code="VALIDATION_ERROR",
        )

    admin = await get_admin_by_email(db, email)
    if admin is None:
        raise _invalid_credentials()

    if is_locked(admin):
        raise ApiError(
            status.HTTP_423_LOCKED,
            "Account temporarily locked due to too many failed attempts",
            code="ACCOUNT_LOCKED",
            extra={"locked_until": admin.locked_until.isoformat()},
        )

    if not verify_password(password, admin.password_hash):
        register_failed_attempt(admin)
        await db.commit()
        raise _invalid_credentials()

    if admin.totp_enabled:
        if not otp_token:
            return None
        if not verify_totp(admin.totp_secret, otp_token):
            raise ApiError(
                status.HTTP_401_UNAUTHORIZED, "Invalid 2FA code", code="INVALID_OTP"
            )

    register_successful_login(admin)
    return admin


def issue_token(admin: AdminUser, settings: Optional[Settings] = None) -> str:
    return create_admin_token(
        str(admin.id), admin.email, admin.role.value, settings=settings
    )


async def create_admin(
    db: AsyncSession,
    email: str,
    password: str,
    role: AdminRole = AdminRole.ADMIN,
) -> AdminUser:
    if await get_admin_by_email(db, email) is not None:
        raise ApiError(
            status.HTTP_409_CONFLICT,
            "An admin with this email already exists",
            code="ADMIN_EXISTS",
        )
    admin = AdminUser(
        email=email.strip().lower(),
        password_hash=hash_password(password),
        role=role,
    )
    db.add(admin)
    await db.flush()
    return admin


async def ensure_bootstrap_admin(
    db: AsyncSession, settings: Optional[Settings] = None
) -> Optional[AdminUser]:
    """Create the configured super admin once. No-op without credentials."""
    settings = settings or get_settings()
    email = settings.BOOTSTRAP_ADMIN_EMAIL
    password = settings.BOOTSTRAP_ADMIN_PASSWORD
    if not email or not password:
        return None

    if await get_admin_by_email(db, email) is not None:
        return None

    admin = await create_admin(db, email, password, role=AdminRole.SUPER_ADMIN)
    await db.commit()
    logger.info("Bootstrap super admin created: %s", admin.email)
    return admin
