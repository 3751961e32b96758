"""Admin catalog router: products, categories, brands, tax rates."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from libs.db.session import get_async_db
from services.storefront_service.dependencies import get_current_admin
from services.storefront_service.models import (
    AdminUser,
    Brand,
    Category,
    Product,
    TaxRate,
)
from services.storefront_service.schemas import (
    BrandCreate,
    BrandResponse,
    BrandUpdate,
    CategoryAdminListResponse,
    CategoryAdminResponse,
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    CategoryVisibilityUpdate,
    ProductCreate,
    ProductListResponse,
    ProductResponse,
    ProductUpdate,
    TaxRateCreate,
    TaxRateResponse,
    TaxRateUpdate,
)
from services.storefront_service.services.audit import log_audit
from services.storefront_service.services.catalog import (
    active_product_count,
    apply_product_filters,
    count_rows,
    ensure_unique_slug,
    get_brand_or_404,
    get_category_or_404,
    get_product,
    normalize_brand_id,
    product_count,
    product_query,
    sanitize_name,
    slugify,
)
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["admin-catalog"])


# ============================================================================
# PRODUCTS
# ============================================================================


@router.get("/products", response_model=ProductListResponse)
async def list_all_products(
    category_id: Optional[uuid.UUID] = None,
    brand_id: Optional[uuid.UUID] = None,
    search: Optional[str] = Query(None, max_length=100),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """List all products, including soft-deleted ones."""
    query = apply_product_filters(
        product_query(include_inactive=True),
        category_id=category_id,
        brand_id=brand_id,
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


@router.get("/products/{product_id}", response_model=ProductResponse)
async def get_product_admin(
    product_id: uuid.UUID,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    product = await get_product(db, product_id, include_inactive=True)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.post(
    "/products", response_model=ProductResponse, status_code=status.HTTP_201_CREATED
)
async def create_product(
    product_in: ProductCreate,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    data = product_in.model_dump()
    data["brand_id"] = normalize_brand_id(data.get("brand_id"))
    await get_category_or_404(db, data["category_id"])
    if data["brand_id"]:
        await get_brand_or_404(db, data["brand_id"])

    slug = await ensure_unique_slug(db, Product, slugify(product_in.name))
    product = Product(**data, slug=slug)
    db.add(product)
    await db.flush()

    await log_audit(
        db, request, admin.id, "CREATE_PRODUCT", "product", product.id,
        {"name": product.name, "slug": product.slug, "price": product.price},
    )
    await db.commit()
    return await get_product(db, product.id, include_inactive=True)


@router.put("/products/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: uuid.UUID,
    product_in: ProductUpdate,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    product = await get_product(db, product_id, include_inactive=True)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    update_data = product_in.model_dump(exclude_unset=True)
    if "brand_id" in update_data:
        update_data["brand_id"] = normalize_brand_id(update_data["brand_id"])
        if update_data["brand_id"]:
            await get_brand_or_404(db, update_data["brand_id"])
    if update_data.get("category_id"):
        await get_category_or_404(db, update_data["category_id"])
    if update_data.get("name") and update_data["name"] != product.name:
        update_data["slug"] = await ensure_unique_slug(
            db, Product, slugify(update_data["name"]), exclude_id=product.id
        )

    for field, value in update_data.items():
        setattr(product, field, value)

    await log_audit(
        db, request, admin.id, "UPDATE_PRODUCT", "product", product.id, update_data
    )
    await db.commit()
    return await get_product(db, product.id, include_inactive=True)


@router.delete("/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def archive_product(
    product_id: uuid.UUID,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Soft delete: the product disappears from the storefront."""
    product = await db.get(Product, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    product.is_active = False
    await log_audit(db, request, admin.id, "DELETE_PRODUCT", "product", product.id)
    await db.commit()
    return None


# ============================================================================
# CATEGORIES
# ============================================================================


@router.get("/categories", response_model=CategoryAdminListResponse)
async def list_all_categories(
    search: Optional[str] = Query(None, max_length=100),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """List categories (including hidden) with their live product counts."""
    active_count = (
        select(func.count(Product.id))
        .where(Product.category_id == Category.id, Product.is_active.is_(True))
        .correlate(Category)
        .scalar_subquery()
    )
    query = select(Category)
    if search:
        query = query.where(Category.name.ilike(f"%{search.strip()}%"))
    total = await count_rows(db, query)

    query = (
        query.add_columns(active_count.label("product_count"))
        .order_by(Category.sort_order, Category.name)
        .offset((page - 1) * limit)
        .limit(limit)
    )
    rows = (await db.execute(query)).all()

    items = [
        CategoryAdminResponse(
            **CategoryResponse.model_validate(category).model_dump(),
            product_count=count or 0,
        )
        for category, count in rows
    ]
    return CategoryAdminListResponse(items=items, total=total)


@router.post(
    "/categories", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED
)
async def create_category(
    category_in: CategoryCreate,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    data = category_in.model_dump()
    data["name"] = sanitize_name(data["name"])
    if not data["name"]:
        raise HTTPException(status_code=400, detail="Category name is required")

    slug = await ensure_unique_slug(db, Category, slugify(data["name"]))
    category = Category(**data, slug=slug)
    db.add(category)
    await db.flush()

    await log_audit(
        db, request, admin.id, "CREATE_CATEGORY", "category", category.id,
        {"name": category.name, "slug": category.slug},
    )
    await db.commit()
    await db.refresh(category)
    return category


@router.patch("/categories/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: uuid.UUID,
    category_in: CategoryUpdate,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    category = await get_category_or_404(db, category_id)
    old_values = {"name": category.name, "slug": category.slug}

    update_data = category_in.model_dump(exclude_unset=True)
    if "name" in update_data:
        name = sanitize_name(update_data["name"] or "")
        if not name:
            raise HTTPException(status_code=400, detail="Category name is required")
        update_data["name"] = name
        if name != category.name:
            update_data["slug"] = await ensure_unique_slug(
                db, Category, slugify(name), exclude_id=category.id
            )

    for field, value in update_data.items():
        setattr(category, field, value)

    await log_audit(
        db, request, admin.id, "UPDATE_CATEGORY", "category", category.id,
        {"old": old_values, "new": update_data},
    )
    await db.commit()
    await db.refresh(category)
    return category


@router.patch("/categories/{category_id}/visibility", response_model=CategoryResponse)
async def set_category_visibility(
    category_id: uuid.UUID,
    payload: CategoryVisibilityUpdate,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    category = await get_category_or_404(db, category_id)
    category.is_active = payload.is_active

    await log_audit(
        db, request, admin.id, "UPDATE_CATEGORY_VISIBILITY", "category", category.id,
        {"is_active": payload.is_active},
    )
    await db.commit()
    await db.refresh(category)
    return category


@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: uuid.UUID,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Hard delete, refused while any product still references the category.

    Archived products keep their category for order history, so they block
    the delete too.
    """
    category = await get_category_or_404(db, category_id)

    active = await active_product_count(db, category.id)
    if active:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Category has {active} active product(s); move or archive them first",
        )
    archived = await product_count(db, category.id)
    if archived:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=(
                f"Category has {archived} archived product(s); "
                "hide the category instead of deleting it"
            ),
        )

    await log_audit(
        db, request, admin.id, "DELETE_CATEGORY", "category", category.id,
        {"name": category.name},
    )
    await db.delete(category)
    await db.commit()
    return None


# ============================================================================
# BRANDS
# ============================================================================


@router.get("/brands", response_model=list[BrandResponse])
async def list_all_brands(
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    result = await db.execute(select(Brand).order_by(Brand.sort_order, Brand.name))
    return result.scalars().all()


@router.post(
    "/brands", response_model=BrandResponse, status_code=status.HTTP_201_CREATED
)
async def create_brand(
    brand_in: BrandCreate,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    slug = await ensure_unique_slug(db, Brand, slugify(brand_in.name))
    brand = Brand(**brand_in.model_dump(), slug=slug)
    db.add(brand)
    await db.flush()

    await log_audit(
        db, request, admin.id, "CREATE_BRAND", "brand", brand.id,
        {"name": brand.name, "slug": brand.slug},
    )
    await db.commit()
    await db.refresh(brand)
    return brand


@router.patch("/brands/{brand_id}", response_model=BrandResponse)
async def update_brand(
    brand_id: uuid.UUID,
    brand_in: BrandUpdate,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    brand = await get_brand_or_404(db, brand_id)
    update_data = brand_in.model_dump(exclude_unset=True)
    if update_data.get("name") and update_data["name"] != brand.name:
        update_data["slug"] = await ensure_unique_slug(
            db, Brand, slugify(update_data["name"]), exclude_id=brand.id
        )

    for field, value in update_data.items():
        setattr(brand, field, value)

    await log_audit(db, request, admin.id, "UPDATE_BRAND", "brand", brand.id, update_data)
    await db.commit()
    await db.refresh(brand)
    return brand


# ============================================================================
# TAX RATES
# ============================================================================


@router.get("/tax-rates", response_model=list[TaxRateResponse])
async def list_tax_rates(
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    result = await db.execute(
        select(TaxRate).order_by(TaxRate.priority.desc(), TaxRate.name)
    )
    return result.scalars().all()


@router.post(
    "/tax-rates", response_model=TaxRateResponse, status_code=status.HTTP_201_CREATED
)
async def create_tax_rate(
    tax_in: TaxRateCreate,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    tax_rate = TaxRate(**tax_in.model_dump())
    db.add(tax_rate)
    await db.flush()

    await log_audit(
        db, request, admin.id, "CREATE_TAX_RATE", "tax_rate", tax_rate.id,
        tax_in.model_dump(),
    )
    await db.commit()
    await db.refresh(tax_rate)
    return tax_rate


async def _get_tax_rate_or_404(db: AsyncSession, tax_rate_id: uuid.UUID) -> TaxRate:
    tax_rate = await db.get(TaxRate, tax_rate_id)
    if not tax_rate:
        raise HTTPException(status_code=404, detail="Tax rate not found")
    return tax_rate


@router.put("/tax-rates/{tax_rate_id}", response_model=TaxRateResponse)
async def update_tax_rate(
    tax_rate_id: uuid.UUID,
    tax_in: TaxRateUpdate,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    tax_rate = await _get_tax_rate_or_404(db, tax_rate_id)
    update_data = tax_in.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(tax_rate, field, value)

    await log_audit(
        db, request, admin.id, "UPDATE_TAX_RATE", "tax_rate", tax_rate.id, update_data
    )
    await db.commit()
    await db.refresh(tax_rate)
    return tax_rate


@router.delete("/tax-rates/{tax_rate_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tax_rate(
    tax_rate_id: uuid.UUID,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    tax_rate = await _get_tax_rate_or_404(db, tax_rate_id)
    await log_audit(db, request, admin.id, "DELETE_TAX_RATE", "tax_rate", tax_rate.id)
    await db.delete(tax_rate)
    await db.commit()
    return None
