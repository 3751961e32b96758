"""Banners, promotional popups, featured panel and content pages."""

import uuid
from typing import Type

from fastapi import APIRouter, Depends, HTTPException, Request, status
from libs.common.datetime_utils import utc_now
from libs.common.error_handler import ApiError
from libs.db.base import Base
from libs.db.session import get_async_db
from services.storefront_service.dependencies import get_current_admin
from services.storefront_service.models import (
    AdminUser,
    Banner,
    ContentPage,
    PromotionalPopup,
)
from services.storefront_service.schemas import (
    BannerCreate,
    BannerResponse,
    BannerUpdate,
    ContentPageResponse,
    ContentPageUpsert,
    FeaturedPanelResponse,
    FeaturedPanelUpdate,
    PopupCreate,
    PopupResponse,
    PopupUpdate,
    ProductResponse,
)
from services.storefront_service.services.audit import log_audit
from services.storefront_service.services.featured import (
    get_featured_panel,
    save_panel_settings,
)
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["content"])
admin_router = APIRouter(tags=["admin-content"])


def _scheduled_now(model):
    """Active rows whose optional start/end window contains now."""
    now = utc_now()
    return (
        model.is_active.is_(True),
        or_(model.start_date.is_(None), model.start_date <= now),
        or_(model.end_date.is_(None), model.end_date >= now),
    )


# ============================================================================
# PUBLIC
# ============================================================================


@router.get("/banners", response_model=list[BannerResponse])
async def list_banners(db: AsyncSession = Depends(get_async_db)):
    query = (
        select(Banner)
        .where(*_scheduled_now(Banner))
        .order_by(Banner.sort_order.desc(), Banner.created_at.desc())
    )
    result = await db.execute(query)
    return result.scalars().all()


@router.get("/promotional-popups", response_model=list[PopupResponse])
async def list_popups(db: AsyncSession = Depends(get_async_db)):
    query = (
        select(PromotionalPopup)
        .where(*_scheduled_now(PromotionalPopup))
        .order_by(PromotionalPopup.priority.desc(), PromotionalPopup.created_at.desc())
    )
    result = await db.execute(query)
    return result.scalars().all()


@router.get("/pages/{slug}", response_model=ContentPageResponse)
async def get_page(slug: str, db: AsyncSession = Depends(get_async_db)):
    query = select(ContentPage).where(
        ContentPage.slug == slug, ContentPage.is_published.is_(True)
    )
    page = (await db.execute(query)).scalar_one_or_none()
    if not page:
        raise HTTPException(status_code=404, detail="Page not found")
    return page


# ============================================================================
# ADMIN: BANNERS & POPUPS
# ============================================================================


async def _get_or_404(db: AsyncSession, model: Type[Base], row_id: uuid.UUID, label: str):
    row = await db.get(model, row_id)
    if not row:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return row


@admin_router.get("/banners", response_model=list[BannerResponse])
async def admin_list_banners(
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    result = await db.execute(
        select(Banner).order_by(Banner.sort_order.desc(), Banner.created_at.desc())
    )
    return result.scalars().all()


@admin_router.post(
    "/banners", response_model=BannerResponse, status_code=status.HTTP_201_CREATED
)
async def create_banner(
    banner_in: BannerCreate,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    banner = Banner(**banner_in.model_dump())
    db.add(banner)
    await db.flush()
    await log_audit(
        db, request, admin.id, "CREATE_BANNER", "banner", banner.id, banner_in.model_dump()
    )
    await db.commit()
    await db.refresh(banner)
    return banner


@admin_router.put("/banners/{banner_id}", response_model=BannerResponse)
async def update_banner(
    banner_id: uuid.UUID,
    banner_in: BannerUpdate,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    banner = await _get_or_404(db, Banner, banner_id, "Banner")
    update_data = banner_in.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(banner, field, value)

    await log_audit(db, request, admin.id, "UPDATE_BANNER", "banner", banner.id, update_data)
    await db.commit()
    await db.refresh(banner)
    return banner


@admin_router.delete("/banners/{banner_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_banner(
    banner_id: uuid.UUID,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    banner = await _get_or_404(db, Banner, banner_id, "Banner")
    await db.delete(banner)
    await log_audit(db, request, admin.id, "DELETE_BANNER", "banner", banner_id)
    await db.commit()
    return None


@admin_router.get("/promotional-popups", response_model=list[PopupResponse])
async def admin_list_popups(
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    result = await db.execute(
        select(PromotionalPopup).order_by(
            PromotionalPopup.priority.desc(), PromotionalPopup.created_at.desc()
        )
    )
    return result.scalars().all()


@admin_router.post(
    "/promotional-popups",
    response_model=PopupResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_popup(
    popup_in: PopupCreate,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    popup = PromotionalPopup(**popup_in.model_dump())
    db.add(popup)
    await db.flush()
    await log_audit(
        db, request, admin.id, "CREATE_POPUP", "promotional_popup", popup.id,
        {"title": popup.title},
    )
    await db.commit()
    await db.refresh(popup)
    return popup


@admin_router.put("/promotional-popups/{popup_id}", response_model=PopupResponse)
async def update_popup(
    popup_id: uuid.UUID,
    popup_in: PopupUpdate,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    popup = await _get_or_404(db, PromotionalPopup, popup_id, "Popup")
    update_data = popup_in.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(popup, field, value)

    await log_audit(
        db, request, admin.id, "UPDATE_POPUP", "promotional_popup", popup.id, update_data
    )
    await db.commit()
    await db.refresh(popup)
    return popup


@admin_router.delete(
    "/promotional-popups/{popup_id}", status_code=status.HTTP_204_NO_CONTENT
)
async def delete_popup(
    popup_id: uuid.UUID,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    popup = await _get_or_404(db, PromotionalPopup, popup_id, "Popup")
    await db.delete(popup)
    await log_audit(db, request, admin.id, "DELETE_POPUP", "promotional_popup", popup_id)
    await db.commit()
    return None


# ============================================================================
# ADMIN: FEATURED PANEL
# ============================================================================


@admin_router.get("/featured-products", response_model=FeaturedPanelResponse)
async def get_featured_products_panel(
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    settings, products = await get_featured_panel(db)
    return FeaturedPanelResponse(
        settings=settings,
        products=[ProductResponse.model_validate(p) for p in products],
    )


@admin_router.put("/featured-products", response_model=FeaturedPanelResponse)
async def update_featured_products_panel(
    payload: FeaturedPanelUpdate,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    invalid_ids = await save_panel_settings(db, payload.settings)
    if invalid_ids:
        raise ApiError(
            status.HTTP_400_BAD_REQUEST,
            "Some products are not active featured products",
            code="INVALID_PRODUCTS",
            extra={"invalid_ids": [str(pid) for pid in invalid_ids]},
        )

    await log_audit(
        db, request, admin.id, "UPDATE_FEATURED_PANEL", "store_setting",
        "featured_products_panel", payload.settings.model_dump(mode="json"),
    )
    await db.commit()

    settings, products = await get_featured_panel(db)
    return FeaturedPanelResponse(
        settings=settings,
        products=[ProductResponse.model_validate(p) for p in products],
    )


# ============================================================================
# ADMIN: CONTENT PAGES
# ============================================================================


@admin_router.get("/pages", response_model=list[ContentPageResponse])
async def admin_list_pages(
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    result = await db.execute(select(ContentPage).order_by(ContentPage.slug))
    return result.scalars().all()


@admin_router.put("/pages/{slug}", response_model=ContentPageResponse)
async def upsert_page(
    slug: str,
    page_in: ContentPageUpsert,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    page = (
        await db.execute(select(ContentPage).where(ContentPage.slug == slug))
    ).scalar_one_or_none()
    if page is None:
        page = ContentPage(slug=slug)
        db.add(page)

    for field, value in page_in.model_dump().items():
        setattr(page, field, value)
    await db.flush()

    await log_audit(
        db, request, admin.id, "UPSERT_PAGE", "content_page", page.slug,
        {"title": page.title, "is_published": page.is_published},
    )
    await db.commit()
    await db.refresh(page)
    return page
