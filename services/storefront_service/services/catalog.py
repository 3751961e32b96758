"""Catalog queries and slug helpers shared by public and admin routers."""

import re
import uuid
from typing import Optional, Type

from fastapi import HTTPException, status
from libs.db.base import Base
from services.storefront_service.models import Brand, Category, Product
from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

_SLUG_STRIP = re.compile(r"[^a-z0-9\s-]")
_SLUG_SPACES = re.compile(r"[\s_-]+")
_UNSAFE_NAME_CHARS = re.compile(r'[<>"&]')


def slugify(value: str) -> str:
    slug = _SLUG_STRIP.sub("", value.lower().strip())
    return _SLUG_SPACES.sub("-", slug).strip("-")


def sanitize_name(value: str) -> str:
    """Strip markup characters from a display name."""
    return _UNSAFE_NAME_CHARS.sub("", value).strip()


async def ensure_unique_slug(
    db: AsyncSession,
    model: Type[Base],
    slug: str,
    exclude_id: Optional[uuid.UUID] = None,
) -> str:
    """Raise 409 when ``slug`` is taken by another row."""
    if not slug:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Name must contain letters or digits",
        )
    query = select(model.id).where(model.slug == slug)
    if exclude_id is not None:
        query = query.where(model.id != exclude_id)
    if (await db.execute(query)).first() is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"{model.__name__} with slug '{slug}' already exists",
        )
    return slug


def normalize_brand_id(value) -> Optional[uuid.UUID]:
    """Admin forms post "" for no brand."""
    if value in (None, ""):
        return None
    return uuid.UUID(str(value))


def product_query(include_inactive: bool = False) -> Select:
    query = select(Product).options(
        selectinload(Product.brand), selectinload(Product.category)
    )
    if not include_inactive:
        query = query.where(Product.is_active.is_(True))
    return query


def apply_product_filters(
    query: Select,
    category_id: Optional[uuid.UUID] = None,
    brand_id: Optional[uuid.UUID] = None,
    featured: Optional[bool] = None,
    hot_selling: Optional[bool] = None,
    is_thrift: Optional[bool] = None,
    is_original: Optional[bool] = None,
    search: Optional[str] = None,
) -> Select:
    if category_id:
        query = query.where(Product.category_id == category_id)
    if brand_id:
        query = query.where(Product.brand_id == brand_id)
    if featured is not None:
        query = query.where(Product.is_featured.is_(featured))
    if hot_selling is not None:
        query = query.where(Product.is_hot_selling.is_(hot_selling))
    if is_thrift is not None:
        query = query.where(Product.is_thrift.is_(is_thrift))
    if is_original is not None:
        query = query.where(Product.is_original.is_(is_original))
    if search:
        term = f"%{search.strip()}%"
        query = query.where(
            or_(Product.name.ilike(term), Product.description.ilike(term))
        )
    return query


async def count_rows(db: AsyncSession, query: Select) -> int:
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    return (await db.execute(count_query)).scalar() or 0


async def get_product(
    db: AsyncSession, product_id: uuid.UUID, include_inactive: bool = False
) -> Optional[Product]:
    result = await db.execute(
        product_query(include_inactive)
        .where(Product.id == product_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def active_product_count(db: AsyncSession, category_id: uuid.UUID) -> int:
    result = await db.execute(
        select(func.count(Product.id)).where(
            Product.category_id == category_id, Product.is_active.is_(True)
        )
    )
    return result.scalar() or 0


async def product_count(db: AsyncSession, category_id: uuid.UUID) -> int:
    """All products in the category, archived ones included."""
    result = await db.execute(
        select(func.count(Product.id)).where(Product.category_id == category_id)
    )
    return result.scalar() or 0


async def get_category_or_404(db: AsyncSession, category_id: uuid.UUID) -> Category:
    category = await db.get(Category, category_id)
    if category is None:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


async def get_brand_or_404(db: AsyncSession, brand_id: uuid.UUID) -> Brand:
    brand = await db.get(Brand, brand_id)
    if brand is None:
        raise HTTPException(status_code=404, detail="Brand not found")
    return brand
