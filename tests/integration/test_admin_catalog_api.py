"""Integration tests for admin product, category and tax rate management."""

from decimal import Decimal

import pytest
from sqlalchemy import select

from services.storefront_service.models import AuditLog, Category, Product
from tests.factories import CategoryFactory, ProductFactory


async def _category(db_session, **overrides):
    category = CategoryFactory.create(**overrides)
    db_session.add(category)
    await db_session.commit()
    return category


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_product_slugifies_and_audits(client, db_session, admin_user, admin_headers):
    category = await _category(db_session)

    response = await client.post(
        "/api/admin/products",
        headers=admin_headers,
        json={
            "name": "Hand-Woven Kurta",
            "category_id": str(category.id),
            "brand_id": "",
            "price": "799.00",
            "stock": 2,
        },
    )

    assert response.status_code == 201, response.text
    data = response.json()
    assert data["slug"] == "hand-woven-kurta"
    assert data["brand_id"] is None
    assert Decimal(data["price"]) == Decimal("799")

    log = await db_session.scalar(
        select(AuditLog).where(
            AuditLog.action == "CREATE_PRODUCT", AuditLog.entity_id == data["id"]
        )
    )
    assert log is not None
    assert log.admin_id == admin_user.id


@pytest.mark.asyncio
@pytest.mark.integration
async def test_duplicate_product_slug_conflicts(client, db_session, admin_headers):
    category = await _category(db_session)
    body = {"name": "Patchwork Tote", "category_id": str(category.id), "price": "300"}

    first = await client.post("/api/admin/products", headers=admin_headers, json=body)
    second = await client.post("/api/admin/products", headers=admin_headers, json=body)

    assert first.status_code == 201
    assert second.status_code == 409


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_product_unknown_category(client, db_session, admin_headers):
    response = await client.post(
        "/api/admin/products",
        headers=admin_headers,
        json={
            "name": "Orphan",
            "category_id": "00000000-0000-4000-8000-000000000000",
            "price": "10",
        },
    )
    assert response.status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_archive_hides_product_from_storefront(client, db_session, admin_headers):
    category = await _category(db_session)
    product = ProductFactory.create(category.id)
    db_session.add(product)
    await db_session.commit()

    response = await client.delete(f"/api/admin/products/{product.id}", headers=admin_headers)
    assert response.status_code == 204

    assert (await client.get(f"/api/products/{product.id}")).status_code == 404
    admin_view = await client.get(f"/api/admin/products/{product.id}", headers=admin_headers)
    assert admin_view.status_code == 200
    assert admin_view.json()["is_active"] is False


@pytest.mark.asyncio
@pytest.mark.integration
async def test_product_routes_require_admin(client, db_session):
    response = await client.get("/api/admin/products")
    assert response.status_code == 401


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_category_sanitizes_name(client, db_session, admin_headers):
    response = await client.post(
        "/api/admin/categories",
        headers=admin_headers,
        json={"name": "<Upcycled> Denim"},
    )

    assert response.status_code == 201, response.text
    assert response.json()["name"] == "Upcycled Denim"
    assert response.json()["slug"] == "upcycled-denim"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_admin_category_list_counts_active_products(client, db_session, admin_headers):
    category = await _category(db_session, name="Counted Category")
    db_session.add_all(
        [
            ProductFactory.create(category.id),
            ProductFactory.create(category.id),
            ProductFactory.create(category.id, is_active=False),
        ]
    )
    await db_session.commit()

    response = await client.get(
        "/api/admin/categories", headers=admin_headers, params={"search": "Counted"}
    )

    assert response.status_code == 200
    items = response.json()["items"]
    assert [(c["id"], c["product_count"]) for c in items] == [(str(category.id), 2)]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_visibility_toggle_rejects_extra_fields(client, db_session, admin_headers):
    category = await _category(db_session)

    bad = await client.patch(
        f"/api/admin/categories/{category.id}/visibility",
        headers=admin_headers,
        json={"is_active": False, "name": "sneaky"},
    )
    assert bad.status_code == 400

    ok = await client.patch(
        f"/api/admin/categories/{category.id}/visibility",
        headers=admin_headers,
        json={"is_active": False},
    )
    assert ok.status_code == 200
    assert ok.json()["is_active"] is False


@pytest.mark.asyncio
@pytest.mark.integration
async def test_category_in_use_cannot_be_deleted(client, db_session, admin_headers):
    category = await _category(db_session)
    db_session.add(ProductFactory.create(category.id))
    await db_session.commit()

    response = await client.delete(f"/api/admin/categories/{category.id}", headers=admin_headers)
    assert response.status_code == 409

    empty = await _category(db_session)
    response = await client.delete(f"/api/admin/categories/{empty.id}", headers=admin_headers)
    assert response.status_code == 204
    assert await db_session.get(Category, empty.id) is None


@pytest.mark.asyncio
@pytest.mark.integration
async def test_category_with_only_archived_products_cannot_be_deleted(
    client, db_session, admin_headers
):
    category = await _category(db_session)
    archived = ProductFactory.create(category.id, is_active=False)
    db_session.add(archived)
    await db_session.commit()

    response = await client.delete(f"/api/admin/categories/{category.id}", headers=admin_headers)

    assert response.status_code == 409
    assert "archived" in response.json()["detail"]
    assert await db_session.get(Category, category.id) is not None
    await db_session.refresh(archived)
    assert archived.category_id == category.id


# ---------------------------------------------------------------------------
# Tax rates
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_tax_rate_crud(client, db_session, admin_headers):
    created = await client.post(
        "/api/admin/tax-rates",
        headers=admin_headers,
        json={"name": "GST", "rate": "12", "country": "India"},
    )
    assert created.status_code == 201, created.text
    rate_id = created.json()["id"]

    updated = await client.put(
        f"/api/admin/tax-rates/{rate_id}", headers=admin_headers, json={"rate": "5"}
    )
    assert Decimal(updated.json()["rate"]) == Decimal("5")

    deleted = await client.delete(f"/api/admin/tax-rates/{rate_id}", headers=admin_headers)
    assert deleted.status_code == 204
