"""Startup checks for signing secrets."""

import secrets
from typing import Optional

from libs.common.config import Settings
from libs.common.logging import get_logger

logger = get_logger(__name__)

MIN_SECRET_LENGTH = 32

INSECURE_SECRETS = {
    "secret",
    "changeme",
    "change-me",
    "password",
    "jwt-secret",
    "your-secret-key",
    "your-jwt-secret",
    "development-secret",
    "test-jwt-secret",
    "reweara-secret",
}

_ephemeral_secret: Optional[str] = None


def is_secure_secret(value: Optional[str]) -> bool:
    if not value:
        return False
    if value.lower() in INSECURE_SECRETS:
        return False
    return len(value) >= MIN_SECRET_LENGTH


def validate_secrets(settings: Settings) -> tuple[bool, Optional[str]]:
    """Return ``(ok, error)`` for the configured signing secrets.

    Only production is strict. Elsewhere a missing JWT secret is replaced by a
    random per-process one (see ``get_jwt_secret``).
    """
    if not settings.is_production:
        return True, None

    for name in ("JWT_SECRET", "SESSION_SECRET"):
        value = getattr(settings, name)
        if not value:
            return False, f"{name} is not set"
        if not is_secure_secret(value):
            return False, (
                f"{name} is insecure: use at least {MIN_SECRET_LENGTH} random "
                "characters"
            )
    return True, None


def get_jwt_secret(settings: Settings) -> str:
    """Secret used to sign admin tokens."""
    global _ephemeral_secret
    if settings.JWT_SECRET:
        return settings.JWT_SECRET
    if settings.is_production:
        raise RuntimeError("JWT_SECRET must be configured in production")
    if _ephemeral_secret is None:
        _ephemeral_secret = secrets.token_hex(32)
        logger.warning(
            "JWT_SECRET not set; using a random secret. Admin tokens will not "
            "survive a restart."
        )
    return _ephemeral_secret
