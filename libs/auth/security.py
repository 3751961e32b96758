"""Password hashing, admin token and TOTP helpers."""

import base64
import io
from datetime import timedelta
from typing import Optional

import bcrypt
import pyotp
import qrcode
from jose import jwt

from libs.common.config import Settings, get_settings
from libs.common.datetime_utils import utc_now
from libs.common.security import get_jwt_secret

BCRYPT_ROUNDS = 10
JWT_ALGORITHM = "HS256"
TOTP_VALID_WINDOW = 2
TOTP_ISSUER = "ReWeara Admin"


# ---------------------------------------------------------------------------
# Passwords
# ---------------------------------------------------------------------------


def hash_password(password: str) -> str:
    return bcrypt.hashpw(
        password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    ).decode("utf-8")


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


# ---------------------------------------------------------------------------
# Admin tokens
# ---------------------------------------------------------------------------


def create_admin_token(
    admin_id: str,
    email: str,
    role: str,
    settings: Optional[Settings] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Issue a signed HS256 admin session token (1 hour by default)."""
    settings = settings or get_settings()
    expires_delta = expires_delta or timedelta(minutes=settings.ADMIN_TOKEN_TTL_MINUTES)
    now = utc_now()
    payload = {
        "sub": str(admin_id),
        "email": email,
        "role": role,
        "iat": int(now.timestamp()),
        "exp": int((now + expires_delta).timestamp()),
    }
    return jwt.encode(payload, get_jwt_secret(settings), algorithm=JWT_ALGORITHM)


def decode_admin_token(token: str, settings: Optional[Settings] = None) -> dict:
    """Decode and verify an admin token. Raises jose.JWTError when invalid."""
    settings = settings or get_settings()
    return jwt.decode(token, get_jwt_secret(settings), algorithms=[JWT_ALGORITHM])


# ---------------------------------------------------------------------------
# TOTP
# ---------------------------------------------------------------------------


def generate_totp_secret() -> str:
    return pyotp.random_base32()


def totp_provisioning_uri(secret: str, email: str) -> str:
    return pyotp.TOTP(secret).provisioning_uri(
        name=email, issuer_name=f"{TOTP_ISSUER} ({email})"
    )


def verify_totp(secret: Optional[str], code: Optional[str]) -> bool:
    if not secret or not code:
        return False
    return pyotp.TOTP(secret).verify(str(code).strip(), valid_window=TOTP_VALID_WINDOW)


def qr_code_data_url(data: str) -> str:
    """Render ``data`` as a PNG QR code and return it as a data URL."""
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=8,
        border=4,
    )
    qr.add_data(data)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")

    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"data:image/png;base64,{encoded}"
