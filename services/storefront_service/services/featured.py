"""Homepage featured-products panel."""

import uuid
from typing import Iterable, Optional

from libs.common.logging import get_logger
from pydantic import ValidationError
from services.storefront_service.models import Product
from services.storefront_service.schemas import FeaturedPanelSettings
from services.storefront_service.services.settings import (
    get_store_setting,
    upsert_store_setting,
)
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

logger = get_logger(__name__)

FEATURED_PANEL_KEY = "featured_products_panel"


def parse_panel_settings(value: Optional[dict]) -> FeaturedPanelSettings:
    """Stored value -> settings, falling back to defaults when unusable."""
    if not value:
        return FeaturedPanelSettings()
    try:
        return FeaturedPanelSettings.model_validate(value)
    except ValidationError:
        logger.warning("Stored featured panel settings are invalid, using defaults")
        return FeaturedPanelSettings()


def order_featured(
    products: Iterable[Product], settings: FeaturedPanelSettings
) -> list[Product]:
    """Pinned ids first (in their order), then the rest newest first."""
    products = list(products)
    by_id = {product.id: product for product in products}

    # pop so an id pinned twice is placed once
    ordered = [by_id.pop(pid) for pid in settings.order if pid in by_id]
    pinned = {product.id for product in ordered}
    rest = sorted(
        (product for product in products if product.id not in pinned),
        key=lambda product: product.created_at,
        reverse=True,
    )
    return (ordered + rest)[: settings.max_items]


async def load_panel_settings(db: AsyncSession) -> FeaturedPanelSettings:
    setting = await get_store_setting(db, FEATURED_PANEL_KEY)
    return parse_panel_settings(setting.value if setting else None)


async def active_featured_products(db: AsyncSession) -> list[Product]:
    result = await db.execute(
        select(Product)
        .where(Product.is_active.is_(True), Product.is_featured.is_(True))
        .options(selectinload(Product.brand), selectinload(Product.category))
        .order_by(Product.created_at.desc())
    )
    return list(result.scalars().all())


async def get_featured_panel(
    db: AsyncSession,
) -> tuple[FeaturedPanelSettings, list[Product]]:
    settings = await load_panel_settings(db)
    products = await active_featured_products(db)
    return settings, order_featured(products, settings)


async def save_panel_settings(
    db: AsyncSession, settings: FeaturedPanelSettings
) -> list[uuid.UUID]:
    """Persist the panel. Returns the ids that are not active featured products.

    Nothing is written when any id is invalid.
    """
    valid_ids = {product.id for product in await active_featured_products(db)}
    invalid_ids = [pid for pid in settings.order if pid not in valid_ids]
    if invalid_ids:
        return invalid_ids

    await upsert_store_setting(
        db,
        FEATURED_PANEL_KEY,
        settings.model_dump(mode="json"),
        description="Homepage featured products panel",
    )
    return []
