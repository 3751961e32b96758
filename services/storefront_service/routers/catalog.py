"""Public catalog router: categories, brands, products."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from libs.db.session import get_async_db
from services.storefront_service.models import Brand, Category, Product
from services.storefront_service.schemas import (
    BrandResponse,
    CategoryResponse,
    ProductListResponse,
    ProductResponse,
)
from services.storefront_service.services.catalog import (
    apply_product_filters,
    count_rows,
    get_product,
    product_query,
)
from services.storefront_service.services.featured import get_featured_panel
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["catalog"])


# ============================================================================
# CATEGORIES
# ============================================================================


@router.get("/categories", response_model=list[CategoryResponse])
async def list_categories(db: AsyncSession = Depends(get_async_db)):
    """List active categories."""
    query = (
        select(Category)
        .where(Category.is_active.is_(True))
        .order_by(Category.sort_order, Category.name)
    )
    result = await db.execute(query)
    return result.scalars().all()


@router.get("/categories/{slug}", response_model=CategoryResponse)
async def get_category(slug: str, db: AsyncSession = Depends(get_async_db)):
    query = select(Category).where(
        Category.slug == slug, Category.is_active.is_(True)
    )
    result = await db.execute(query)
    category = result.scalar_one_or_none()

    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


# ============================================================================
# BRANDS
# ============================================================================


def _brand_query(category_id: Optional[uuid.UUID]):
    query = select(Brand).where(Brand.is_active.is_(True))
    if category_id:
        # Only brands that actually have live stock in the category
        stocked = select(Product.brand_id).where(
            Product.category_id == category_id,
            Product.is_active.is_(True),
            Product.brand_id.is_not(None),
        )
        query = query.where(Brand.id.in_(stocked))
    return query.order_by(Brand.sort_order, Brand.name)


@router.get("/brands", response_model=list[BrandResponse])
async def list_brands(
    category_id: Optional[uuid.UUID] = None,
    db: AsyncSession = Depends(get_async_db),
):
    result = await db.execute(_brand_query(category_id))
    return result.scalars().all()


@router.get("/brands/featured", response_model=list[BrandResponse])
async def list_featured_brands(
    category_id: Optional[uuid.UUID] = None,
    db: AsyncSession = Depends(get_async_db),
):
    query = _brand_query(category_id).where(Brand.is_featured.is_(True))
    result = await db.execute(query)
    return result.scalars().all()


@router.get("/brands/{slug}", response_model=BrandResponse)
async def get_brand(slug: str, db: AsyncSession = Depends(get_async_db)):
    query = select(Brand).where(Brand.slug == slug, Brand.is_active.is_(True))
    result = await db.execute(query)
    brand = result.scalar_one_or_none()

    if not brand:
        raise HTTPException(status_code=404, detail="Brand not found")
    return brand


# ============================================================================
# PRODUCTS
# ============================================================================


@router.get("/products", response_model=ProductListResponse)
async def list_products(
    category_id: Optional[uuid.UUID] = None,
    brand_id: Optional[uuid.UUID] = None,
    featured: Optional[bool] = None,
    hot_selling: Optional[bool] = None,
    is_thrift: Optional[bool] = None,
    is_original: Optional[bool] = None,
    search: Optional[str] = Query(None, max_length=100),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_async_db),
):
    """List active products, newest first."""
    query = apply_product_filters(
        product_query(),
        category_id=category_id,
        brand_id=brand_id,
        featured=featured,
        hot_selling=hot_selling,
        is_thrift=is_thrift,
        is_original=is_original,
        search=search,
    )
    total = await count_rows(db, query)

    query = query.order_by(Product.created_at.desc()).offset(offset).limit(limit)
    result = await db.execute(query)
    products = result.scalars().all()

    return ProductListResponse(
        items=[ProductResponse.model_validate(p) for p in products],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/products/featured", response_model=list[ProductResponse])
async def list_featured_products(db: AsyncSession = Depends(get_async_db)):
    """Featured products in the admin-curated panel order."""
    _, products = await get_featured_panel(db)
    return products


@router.get("/products/{product_id}", response_model=ProductResponse)
async def get_product_detail(
    product_id: uuid.UUID, db: AsyncSession = Depends(get_async_db)
):
    product = await get_product(db, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    await db.execute(
        update(Product)
        .where(Product.id == product_id)
        .values(view_count=Product.view_count + 1)
        .execution_options(synchronize_session=False)
    )
    await db.commit()

    product.view_count = (product.view_count or 0) + 1
    return product
