"""Storefront service routers package."""

from services.storefront_service.routers.account import router as account_router
from services.storefront_service.routers.admin_auth import router as admin_auth_router
from services.storefront_service.routers.admin_catalog import (
    router as admin_catalog_router,
)
from services.storefront_service.routers.admin_dashboard import (
    router as admin_dashboard_router,
)
from services.storefront_service.routers.admin_orders import (
    router as admin_orders_router,
)
from services.storefront_service.routers.admin_settings import (
    router as admin_settings_router,
)
from services.storefront_service.routers.admin_super import router as admin_super_router
from services.storefront_service.routers.ai import router as ai_router
from services.storefront_service.routers.cart import router as cart_router
from services.storefront_service.routers.catalog import router as catalog_router
from services.storefront_service.routers.contact import router as contact_router
from services.storefront_service.routers.content import (
    admin_router as admin_content_router,
)
from services.storefront_service.routers.content import router as content_router
from services.storefront_service.routers.coupons import (
    admin_router as admin_coupons_router,
)
from services.storefront_service.routers.coupons import router as coupons_router
from services.storefront_service.routers.orders import router as orders_router

__all__ = [
    "account_router",
    "admin_auth_router",
    "admin_catalog_router",
    "admin_content_router",
    "admin_coupons_router",
    "admin_dashboard_router",
    "admin_orders_router",
    "admin_settings_router",
    "admin_super_router",
    "ai_router",
    "cart_router",
    "catalog_router",
    "contact_router",
    "content_router",
    "coupons_router",
    "orders_router",
]
