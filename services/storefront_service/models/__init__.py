"""Storefront Service models package."""

from services.storefront_service.models.admin import (
    AdminUser,
    AuditLog,
    OrderAdminLog,
)
from services.storefront_service.models.catalog import (
    Brand,
    Category,
    Product,
    TaxRate,
    User,
)
from services.storefront_service.models.commerce import (
    Cart,
    CartItem,
    Coupon,
    Order,
    OrderItem,
    OrderTracking,
    WishlistItem,
)
from services.storefront_service.models.content import (
    Banner,
    ContentPage,
    Notification,
    PromotionalPopup,
)
from services.storefront_service.models.enums import (
    AdminRole,
    DiscountType,
    OrderStatus,
    PaymentStatus,
)
from services.storefront_service.models.settings import (
    AIConfig,
    AnalyticsSettings,
    IntegrationSettings,
    PaymentSettings,
    StoreSetting,
)

__all__ = [
    "AIConfig",
    "AdminRole",
    "AdminUser",
    "AnalyticsSettings",
    "AuditLog",
    "Banner",
    "Brand",
    "Cart",
    "CartItem",
    "Category",
    "ContentPage",
    "Coupon",
    "DiscountType",
    "IntegrationSettings",
    "Notification",
    "Order",
    "OrderAdminLog",
    "OrderItem",
    "OrderStatus",
    "OrderTracking",
    "PaymentSettings",
    "PaymentStatus",
    "Product",
    "PromotionalPopup",
    "StoreSetting",
    "TaxRate",
    "User",
    "WishlistItem",
]
