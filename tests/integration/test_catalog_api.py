"""Integration tests for the public catalog endpoints."""

import uuid
from decimal import Decimal

import pytest
from tests.factories import BrandFactory, CategoryFactory, ProductFactory


async def _seed_catalog(db_session):
    category = CategoryFactory.create(name="Thrift Store", slug=f"thrift-{uuid.uuid4().hex[:6]}")
    hidden = CategoryFactory.create(is_active=False)
    brand = BrandFactory.create(is_featured=True)
    db_session.add_all([category, hidden, brand])
    await db_session.flush()

    jacket = ProductFactory.create(
        category.id, name="Vintage denim jacket", brand_id=brand.id, is_featured=True
    )
    shirt = ProductFactory.create(category.id, name="Linen shirt", price=Decimal("350"))
    retired = ProductFactory.create(category.id, name="Retired tee", is_active=False)
    db_session.add_all([jacket, shirt, retired])
    await db_session.commit()
    return category, hidden, brand, jacket, shirt, retired


# ---------------------------------------------------------------------------
# Categories & brands
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_categories_hides_inactive(client, db_session):
    category, hidden, *_ = await _seed_catalog(db_session)

    response = await client.get("/api/categories")

    assert response.status_code == 200
    ids = {c["id"] for c in response.json()}
    assert str(category.id) in ids
    assert str(hidden.id) not in ids


@pytest.mark.asyncio
@pytest.mark.integration
async def test_get_category_by_slug(client, db_session):
    category, hidden, *_ = await _seed_catalog(db_session)

    response = await client.get(f"/api/categories/{category.slug}")
    assert response.status_code == 200
    assert response.json()["name"] == "Thrift Store"

    response = await client.get(f"/api/categories/{hidden.slug}")
    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_brands_filtered_by_stocked_category(client, db_session):
    category, hidden, brand, *_ = await _seed_catalog(db_session)

    response = await client.get("/api/brands", params={"category_id": str(category.id)})
    assert response.status_code == 200
    assert [b["id"] for b in response.json()] == [str(brand.id)]

    response = await client.get("/api/brands", params={"category_id": str(hidden.id)})
    assert response.json() == []

    response = await client.get("/api/brands/featured")
    assert str(brand.id) in {b["id"] for b in response.json()}


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_products_filters_and_paginates(client, db_session):
    category, _, brand, jacket, shirt, retired = await _seed_catalog(db_session)

    response = await client.get(
        "/api/products", params={"category_id": str(category.id), "limit": 1}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 2
    assert data["limit"] == 1
    assert len(data["items"]) == 1

    response = await client.get(
        "/api/products",
        params={"category_id": str(category.id), "search": "denim"},
    )
    names = [p["name"] for p in response.json()["items"]]
    assert names == ["Vintage denim jacket"]

    response = await client.get(
        "/api/products", params={"brand_id": str(brand.id)}
    )
    assert {p["id"] for p in response.json()["items"]} == {str(jacket.id)}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_product_detail_counts_views(client, db_session):
    *_, jacket, shirt, retired = await _seed_catalog(db_session)

    first = await client.get(f"/api/products/{shirt.id}")
    second = await client.get(f"/api/products/{shirt.id}")

    assert first.status_code == 200
    assert Decimal(first.json()["price"]) == Decimal("350")
    assert second.json()["view_count"] == first.json()["view_count"] + 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_inactive_or_unknown_product_is_404(client, db_session):
    *_, retired = await _seed_catalog(db_session)

    assert (await client.get(f"/api/products/{retired.id}")).status_code == 404
    assert (await client.get(f"/api/products/{uuid.uuid4()}")).status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_invalid_query_returns_validation_error(client, db_session):
    response = await client.get("/api/products", params={"limit": 0})

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "VALIDATION_ERROR"
    assert body["errors"][0]["field"].endswith("limit")
