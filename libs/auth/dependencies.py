from typing import Annotated, Optional

from fastapi import Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import ValidationError

from libs.auth.models import AdminClaims, AuthUser
from libs.auth.security import decode_admin_token
from libs.common.config import get_settings
from libs.common.error_handler import ApiError

# auto_error=False so missing tokens get our own 401 payload
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str, code: str) -> ApiError:
    return ApiError(
        status.HTTP_401_UNAUTHORIZED,
        detail,
        code=code,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _decode_user_token(token: str) -> AuthUser:
    settings = get_settings()
    if not settings.USER_JWT_SECRET:
        raise _unauthorized("User authentication is not configured", "AUTH_REQUIRED")
    try:
        payload = jwt.decode(
            token,
            settings.USER_JWT_SECRET,
            algorithms=["HS256"],
            options={"verify_aud": False},
        )
        return AuthUser(**payload)
    except (JWTError, ValidationError):
        raise _unauthorized("Invalid token", "INVALID_TOKEN")


# ---------------------------------------------------------------------------
# Shoppers
# ---------------------------------------------------------------------------


async def get_current_user(
    request: Request,
    token: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
) -> AuthUser:
    """
    Validate the shopper JWT and return the authenticated user.
    """
    if token is None:
        raise _unauthorized("No token provided", "AUTH_REQUIRED")
    user = _decode_user_token(token.credentials)
    request.state.user = user
    return user


async def get_optional_user(
    request: Request,
    token: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
) -> Optional[AuthUser]:
    """Like get_current_user, but guests get None instead of a 401."""
    if token is None:
        return None
    user = _decode_user_token(token.credentials)
    request.state.user = user
    return user


# ---------------------------------------------------------------------------
# Admins
# ---------------------------------------------------------------------------


async def get_admin_claims(
    token: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
) -> AdminClaims:
    """
    Verify an admin session token. The admin row itself is loaded by the
    storefront service, which owns the admin table.
    """
    if token is None:
        raise _unauthorized("No token provided", "AUTH_REQUIRED")
    try:
        payload = decode_admin_token(token.credentials)
        return AdminClaims(**payload)
    except (JWTError, ValidationError):
        raise _unauthorized("Invalid token", "INVALID_TOKEN")
