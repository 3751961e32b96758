"""Auth fixtures shared by the storefront test suite."""

from typing import Callable

import pytest
import pytest_asyncio
from jose import jwt

from libs.auth.security import create_admin_token
from libs.common.config import get_settings
from services.storefront_service.models import AdminRole
from tests.factories import AdminUserFactory


def _admin_headers(admin) -> dict:
    token = create_admin_token(str(admin.id), admin.email, admin.role.value)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_token() -> Callable[..., str]:
    """Build a shopper JWT the way the identity provider would."""

    def _make(sub: str = "user-test-1", **claims) -> str:
        payload = {"sub": sub, "email": f"{sub}@example.com", **claims}
        return jwt.encode(payload, get_settings().USER_JWT_SECRET, algorithm="HS256")

    return _make


@pytest.fixture
def user_headers(user_token) -> dict:
    return {"Authorization": f"Bearer {user_token()}"}


@pytest_asyncio.fixture
async def admin_user(db_session):
    admin = AdminUserFactory.create(role=AdminRole.ADMIN)
    db_session.add(admin)
    await db_session.commit()
    return admin


@pytest_asyncio.fixture
async def super_admin(db_session):
    admin = AdminUserFactory.create(role=AdminRole.SUPER_ADMIN)
    db_session.add(admin)
    await db_session.commit()
    return admin


@pytest.fixture
def admin_headers(admin_user) -> dict:
    return _admin_headers(admin_user)


@pytest.fixture
def super_admin_headers(super_admin) -> dict:
    return _admin_headers(super_admin)
