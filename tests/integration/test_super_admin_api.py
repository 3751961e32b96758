"""Integration tests for super-admin account management."""

import uuid

import pytest
from sqlalchemy import select

from services.storefront_service.models import AdminRole, AdminUser, AuditLog
from tests.factories import AdminUserFactory


@pytest.mark.asyncio
@pytest.mark.integration
async def test_plain_admin_is_forbidden(client, db_session, admin_headers):
    response = await client.get("/api/admin/super/users", headers=admin_headers)

    assert response.status_code == 403
    assert response.json()["code"] == "INSUFFICIENT_PERMISSIONS"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_admin_hashes_password(client, db_session, super_admin_headers):
    email = f"new-{uuid.uuid4().hex[:6]}@reweara.com"

    response = await client.post(
        "/api/admin/super/users",
        headers=super_admin_headers,
        json={"email": email, "password": "a-long-enough-password"},
    )

    assert response.status_code == 201, response.text
    assert response.json()["role"] == "admin"
    assert "password" not in response.text

    admin = await db_session.scalar(select(AdminUser).where(AdminUser.email == email))
    assert admin.password_hash != "a-long-enough-password"

    duplicate = await client.post(
        "/api/admin/super/users",
        headers=super_admin_headers,
        json={"email": email, "password": "a-long-enough-password"},
    )
    assert duplicate.status_code == 409


@pytest.mark.asyncio
@pytest.mark.integration
async def test_short_password_is_rejected(client, db_session, super_admin_headers):
    response = await client.post(
        "/api/admin/super/users",
        headers=super_admin_headers,
        json={"email": "short@reweara.com", "password": "short"},
    )
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_change_role_and_self_guard(client, db_session, super_admin, super_admin_headers):
    target = AdminUserFactory.create()
    db_session.add(target)
    await db_session.commit()

    promoted = await client.patch(
        f"/api/admin/super/users/{target.id}/role",
        headers=super_admin_headers,
        json={"role": "super_admin"},
    )
    assert promoted.status_code == 200
    assert promoted.json()["role"] == "super_admin"

    self_change = await client.patch(
        f"/api/admin/super/users/{super_admin.id}/role",
        headers=super_admin_headers,
        json={"role": "admin"},
    )
    assert self_change.status_code == 400
    assert self_change.json()["code"] == "SELF_ROLE_CHANGE"

    log = await db_session.scalar(
        select(AuditLog).where(
            AuditLog.action == "UPDATE_ADMIN_ROLE", AuditLog.entity_id == str(target.id)
        )
    )
    assert log.changes == {"old_role": "admin", "new_role": "super_admin"}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_delete_admin(client, db_session, super_admin, super_admin_headers):
    target = AdminUserFactory.create(role=AdminRole.ADMIN)
    db_session.add(target)
    await db_session.commit()

    assert (
        await client.delete(f"/api/admin/super/users/{super_admin.id}", headers=super_admin_headers)
    ).json()["code"] == "SELF_DELETE"

    response = await client.delete(
        f"/api/admin/super/users/{target.id}", headers=super_admin_headers
    )
    assert response.status_code == 204

    listing = await client.get("/api/admin/super/users", headers=super_admin_headers)
    assert str(target.id) not in {a["id"] for a in listing.json()}
