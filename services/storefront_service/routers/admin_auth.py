"""Admin login and two-factor setup."""

from fastapi import APIRouter, Depends, Request, status
from libs.auth.security import (
    generate_totp_secret,
    qr_code_data_url,
    totp_provisioning_uri,
    verify_totp,
)
from libs.common.error_handler import ApiError
from libs.common.logging import get_logger
from libs.common.rate_limit import login_limit, two_factor_limit
from libs.db.session import get_async_db
from services.storefront_service.dependencies import get_current_admin
from services.storefront_service.models import AdminUser
from services.storefront_service.schemas import (
    AdminLoginRequest,
    AdminLoginResponse,
    AdminProfile,
    TwoFactorEnableRequest,
    TwoFactorSetupResponse,
)
from services.storefront_service.services.admin_auth import (
    authenticate_admin,
    issue_token,
)
from services.storefront_service.services.audit import log_audit
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

router = APIRouter(tags=["admin-auth"])


@router.post(
    "/login", response_model=AdminLoginResponse, response_model_exclude_none=True
)
@login_limit
async def admin_login(
    request: Request,
    credentials: AdminLoginRequest,
    db: AsyncSession = Depends(get_async_db),
):
    """
    Password login with optional TOTP.

    When 2FA is enabled and no ``otp_token`` is sent, the response only says
    ``requires_otp`` and the client asks for the code.
    """
    admin = await authenticate_admin(
        db, credentials.email, credentials.password, credentials.otp_token
    )
    if admin is None:
        return AdminLoginResponse(requires_otp=True)

    token = issue_token(admin)
    await log_audit(db, request, admin.id, "LOGIN", "admin_user", admin.id)
    await db.commit()

    logger.info("Admin %s logged in", admin.email)
    return AdminLoginResponse(token=token, admin=AdminProfile.model_validate(admin))


@router.get("/me", response_model=AdminProfile)
async def get_me(admin: AdminUser = Depends(get_current_admin)):
    return admin


@router.post("/2fa/setup", response_model=TwoFactorSetupResponse)
@two_factor_limit
async def setup_two_factor(
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Generate and store a new TOTP secret. It takes effect once enabled."""
    secret = generate_totp_secret()
    admin.totp_secret = secret
    await log_audit(db, request, admin.id, "SETUP_2FA", "admin_user", admin.id)
    await db.commit()

    otpauth_url = totp_provisioning_uri(secret, admin.email)
    return TwoFactorSetupResponse(
        secret=secret,
        otpauth_url=otpauth_url,
        qr_code=qr_code_data_url(otpauth_url),
    )


@router.post("/2fa/enable", response_model=AdminProfile)
@two_factor_limit
async def enable_two_factor(
    request: Request,
    payload: TwoFactorEnableRequest,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    if not admin.totp_secret:
        raise ApiError(
            status.HTTP_400_BAD_REQUEST,
            "2FA setup has not been started",
            code="TOTP_NOT_SETUP",
        )
    if not verify_totp(admin.totp_secret, payload.token):
        raise ApiError(
            status.HTTP_400_BAD_REQUEST, "Invalid 2FA code", code="INVALID_OTP"
        )

    admin.totp_enabled = True
    await log_audit(db, request, admin.id, "ENABLE_2FA", "admin_user", admin.id)
    await db.commit()
    await db.refresh(admin)
    return admin
