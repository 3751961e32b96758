"""Pydantic schemas for the storefront service."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from services.storefront_service.models import (
    AdminRole,
    DiscountType,
    OrderStatus,
    PaymentStatus,
)

# ============================================================================
# CATEGORY SCHEMAS
# ============================================================================


class CategoryBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    image_url: Optional[str] = None
    sort_order: int = 0
    is_active: bool = True


class CategoryCreate(CategoryBase):
    pass


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    image_url: Optional[str] = None
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None


class CategoryVisibilityUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    is_active: bool


class CategoryResponse(CategoryBase):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    slug: str
    created_at: datetime
    updated_at: datetime


class CategoryAdminResponse(CategoryResponse):
    product_count: int = 0


class CategoryAdminListResponse(BaseModel):
    items: list[CategoryAdminResponse]
    total: int


# ============================================================================
# BRAND SCHEMAS
# ============================================================================


class BrandBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    logo_url: Optional[str] = None
    is_active: bool = True
    is_featured: bool = False
    sort_order: int = 0


class BrandCreate(BrandBase):
    pass


class BrandUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    logo_url: Optional[str] = None
    is_active: Optional[bool] = None
    is_featured: Optional[bool] = None
    sort_order: Optional[int] = None


class BrandResponse(BrandBase):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    slug: str
    created_at: datetime
    updated_at: datetime


# ============================================================================
# PRODUCT SCHEMAS
# ============================================================================


class ProductBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    short_description: Optional[str] = None
    category_id: uuid.UUID
    brand_id: Optional[uuid.UUID] = None
    price: Decimal = Field(..., ge=0)
    original_price: Optional[Decimal] = Field(None, ge=0)
    condition: Optional[str] = None
    size: Optional[str] = None
    sizes: list[str] = Field(default_factory=list)
    color: Optional[str] = None
    material: Optional[str] = None
    fabric: Optional[str] = None
    wash_care: Optional[str] = None
    measurements: Optional[dict] = None
    eco_badges: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)
    videos: list[str] = Field(default_factory=list)
    is_featured: bool = False
    is_hot_selling: bool = False
    is_original: bool = False
    is_thrift: bool = False
    stock: int = Field(1, ge=0)
    stock_alert: int = Field(5, ge=0)
    discount: Decimal = Field(Decimal("0"), ge=0)
    discount_type: Optional[Literal["percentage", "fixed"]] = None
    discount_expiry: Optional[datetime] = None
    related_products: list[str] = Field(default_factory=list)
    ai_try_on_prompt: Optional[str] = None


class ProductCreate(ProductBase):
    # Admin forms send "" for "no brand"
    brand_id: Optional[uuid.UUID | str] = None


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    short_description: Optional[str] = None
    category_id: Optional[uuid.UUID] = None
    brand_id: Optional[uuid.UUID | str] = None
    price: Optional[Decimal] = Field(None, ge=0)
    original_price: Optional[Decimal] = Field(None, ge=0)
    condition: Optional[str] = None
    size: Optional[str] = None
    sizes: Optional[list[str]] = None
    color: Optional[str] = None
    material: Optional[str] = None
    fabric: Optional[str] = None
    wash_care: Optional[str] = None
    measurements: Optional[dict] = None
    eco_badges: Optional[list[str]] = None
    tags: Optional[list[str]] = None
    images: Optional[list[str]] = None
    videos: Optional[list[str]] = None
    is_active: Optional[bool] = None
    is_featured: Optional[bool] = None
    is_hot_selling: Optional[bool] = None
    is_original: Optional[bool] = None
    is_thrift: Optional[bool] = None
    stock: Optional[int] = Field(None, ge=0)
    stock_alert: Optional[int] = Field(None, ge=0)
    discount: Optional[Decimal] = Field(None, ge=0)
    discount_type: Optional[Literal["percentage", "fixed"]] = None
    discount_expiry: Optional[datetime] = None
    related_products: Optional[list[str]] = None
    ai_try_on_prompt: Optional[str] = None


class ProductResponse(ProductBase):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    slug: str
    is_active: bool
    view_count: int = 0
    brand_name: Optional[str] = None
    category_name: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class ProductListResponse(BaseModel):
    items: list[ProductResponse]
    total: int
    limit: int
    offset: int


# ============================================================================
# CART / WISHLIST SCHEMAS
# ============================================================================


class CartItemCreate(BaseModel):
    product_id: uuid.UUID
    quantity: int = Field(1, ge=1, le=99)


class CartItemUpdate(BaseModel):
    # 0 removes the line
    quantity: int = Field(..., ge=0, le=99)


class CartItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    product_id: uuid.UUID
    quantity: int
    product: Optional[ProductResponse] = None
    line_total: Decimal = Decimal("0")


class CartResponse(BaseModel):
    id: uuid.UUID
    items: list[CartItemResponse]
    item_count: int
    subtotal: Decimal


class WishlistAdd(BaseModel):
    product_id: uuid.UUID


class WishlistItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    product_id: uuid.UUID
    product: Optional[ProductResponse] = None
    created_at: datetime


# ============================================================================
# ORDER SCHEMAS
# ============================================================================


class OrderLineIn(BaseModel):
    """Requested order line. Any client-side price is ignored."""

    model_config = ConfigDict(extra="ignore")

    product_id: uuid.UUID
    quantity: int = Field(..., ge=1, le=99)


class CheckoutRequest(BaseModel):
    items: list[OrderLineIn] = Field(default_factory=list)
    session_id: Optional[str] = None
    guest_email: Optional[EmailStr] = None
    shipping_address: dict
    payment_method: str = Field("upi", max_length=30)
    coupon_code: Optional[str] = None
    notes: Optional[str] = None


class OrderItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    product_id: uuid.UUID
    quantity: int
    price: Decimal
    product_name: Optional[str] = None


class OrderTrackingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    status: str
    message: Optional[str] = None
    location: Optional[str] = None
    tracking_number: Optional[str] = None
    carrier: Optional[str] = None
    estimated_delivery: Optional[datetime] = None
    created_at: datetime


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: Optional[str] = None
    guest_email: Optional[str] = None
    status: OrderStatus
    subtotal: Decimal
    tax_amount: Decimal
    shipping_amount: Decimal
    discount_amount: Decimal
    total_amount: Decimal
    coupon_code: Optional[str] = None
    tracking_number: Optional[str] = None
    estimated_delivery: Optional[datetime] = None
    payment_method: Optional[str] = None
    payment_status: PaymentStatus
    payment_proof: Optional[str] = None
    payment_verified_by: Optional[str] = None
    payment_verified_at: Optional[datetime] = None
    shipping_address: Optional[dict] = None
    notes: Optional[str] = None
    items: list[OrderItemResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class OrderListResponse(BaseModel):
    items: list[OrderResponse]
    total: int
    page: int
    limit: int
    total_pages: int


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class OrderPatch(BaseModel):
    status: Optional[OrderStatus] = None
    payment_status: Optional[PaymentStatus] = None
    shipping_address: Optional[dict] = None
    notes: Optional[str] = None
    tracking_number: Optional[str] = None
    estimated_delivery: Optional[datetime] = None


class TrackingCreate(BaseModel):
    payment_status: PaymentStatus
    status: Optional[str] = None
    message: Optional[str] = None
    location: Optional[str] = None
    tracking_number: Optional[str] = None
    carrier: Optional[str] = None
    estimated_delivery: Optional[datetime] = None


# ============================================================================
# COUPON SCHEMAS
# ============================================================================


class CouponBase(BaseModel):
    code: str = Field(..., min_length=2, max_length=50)
    description: Optional[str] = None
    discount_type: DiscountType
    discount_value: Decimal = Field(..., gt=0)
    min_purchase_amount: Optional[Decimal] = Field(None, ge=0)
    max_discount_amount: Optional[Decimal] = Field(None, ge=0)
    usage_limit: Optional[int] = Field(None, ge=1)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: bool = True


class CouponCreate(CouponBase):
    pass


class CouponUpdate(BaseModel):
    code: Optional[str] = Field(None, min_length=2, max_length=50)
    description: Optional[str] = None
    discount_type: Optional[DiscountType] = None
    discount_value: Optional[Decimal] = Field(None, gt=0)
    min_purchase_amount: Optional[Decimal] = Field(None, ge=0)
    max_discount_amount: Optional[Decimal] = Field(None, ge=0)
    usage_limit: Optional[int] = Field(None, ge=1)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: Optional[bool] = None


class CouponResponse(CouponBase):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    usage_count: int
    created_at: datetime
    updated_at: datetime


class CouponValidateRequest(BaseModel):
    code: str = Field(..., min_length=1)
    subtotal: Decimal = Field(..., ge=0)


class CouponValidateResponse(BaseModel):
    valid: bool
    discount_amount: Decimal = Decimal("0")
    message: Optional[str] = None


# ============================================================================
# TAX RATE SCHEMAS
# ============================================================================


class TaxRateBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    rate: Decimal = Field(..., ge=0, le=100)
    country: Optional[str] = None
    state: Optional[str] = None
    city: Optional[str] = None
    zip_code: Optional[str] = None
    is_active: bool = True
    priority: int = 0


class TaxRateCreate(TaxRateBase):
    pass


class TaxRateUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    rate: Optional[Decimal] = Field(None, ge=0, le=100)
    country: Optional[str] = None
    state: Optional[str] = None
    city: Optional[str] = None
    zip_code: Optional[str] = None
    is_active: Optional[bool] = None
    priority: Optional[int] = None


class TaxRateResponse(TaxRateBase):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    created_at: datetime


# ============================================================================
# CONTENT SCHEMAS
# ============================================================================


class BannerBase(BaseModel):
    title: Optional[str] = Field(None, max_length=255)
    subtitle: Optional[str] = None
    image_url: str = Field(..., min_length=1)
    link_url: Optional[str] = None
    button_text: Optional[str] = None
    position: str = "hero"
    sort_order: int = 0
    is_active: bool = True
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class BannerCreate(BannerBase):
    pass


class BannerUpdate(BaseModel):
    title: Optional[str] = Field(None, max_length=255)
    subtitle: Optional[str] = None
    image_url: Optional[str] = Field(None, min_length=1)
    link_url: Optional[str] = None
    button_text: Optional[str] = None
    position: Optional[str] = None
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class BannerResponse(BannerBase):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    created_at: datetime
    updated_at: datetime


class PopupBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    image_url: Optional[str] = None
    button_text: Optional[str] = None
    button_url: Optional[str] = None
    background_color: str = "#ffffff"
    text_color: str = "#000000"
    button_color: str = "#10b981"
    position: str = "center"
    size: str = "medium"
    trigger: str = "page_load"
    trigger_value: int = Field(0, ge=0)
    show_frequency: str = "once"
    target_pages: list[str] = Field(default_factory=list)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: bool = True
    priority: int = 0


class PopupCreate(PopupBase):
    pass


class PopupUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    image_url: Optional[str] = None
    button_text: Optional[str] = None
    button_url: Optional[str] = None
    background_color: Optional[str] = None
    text_color: Optional[str] = None
    button_color: Optional[str] = None
    position: Optional[str] = None
    size: Optional[str] = None
    trigger: Optional[str] = None
    trigger_value: Optional[int] = Field(None, ge=0)
    show_frequency: Optional[str] = None
    target_pages: Optional[list[str]] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: Optional[bool] = None
    priority: Optional[int] = None


class PopupResponse(PopupBase):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    created_at: datetime
    updated_at: datetime


class FeaturedPanelSettings(BaseModel):
    order: list[uuid.UUID] = Field(default_factory=list)
    max_items: int = Field(8, ge=1, le=50)
    auto_scroll_ms: int = Field(3000, ge=1000, le=60000)


class FeaturedPanelUpdate(BaseModel):
    settings: FeaturedPanelSettings


class FeaturedPanelResponse(BaseModel):
    settings: FeaturedPanelSettings
    products: list[ProductResponse]


class ContentPageUpsert(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    content: Optional[str] = None
    meta_description: Optional[str] = None
    is_published: bool = True


class ContentPageResponse(ContentPageUpsert):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    slug: str
    updated_at: datetime


# ============================================================================
# ADMIN AUTH SCHEMAS
# ============================================================================


class AdminLoginRequest(BaseModel):
    # Optional so missing credentials get a specific 400 message
    email: Optional[str] = None
    password: Optional[str] = None
    otp_token: Optional[str] = None


class AdminProfile(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    role: AdminRole
    totp_enabled: bool = False
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None


class AdminLoginResponse(BaseModel):
    token: Optional[str] = None
    admin: Optional[AdminProfile] = None
    requires_otp: bool = False


class TwoFactorSetupResponse(BaseModel):
    secret: str
    otpauth_url: str
    qr_code: str


class TwoFactorEnableRequest(BaseModel):
    token: str = Field(..., min_length=6, max_length=8)


class AdminCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=12, max_length=128)
    role: AdminRole = AdminRole.ADMIN


class AdminRoleUpdate(BaseModel):
    role: AdminRole


# ============================================================================
# SETTINGS SCHEMAS (secrets are write-only)
# ============================================================================


class PaymentSettingsUpdate(BaseModel):
    # Unknown keys, including the read-side *_set flags, are dropped
    model_config = ConfigDict(extra="ignore")

    upi_id: Optional[str] = None
    qr_code_url: Optional[str] = None
    bank_details: Optional[dict] = None
    upi_enabled: Optional[bool] = None
    cod_enabled: Optional[bool] = None
    stripe_secret_key: Optional[str] = None
    stripe_publishable_key: Optional[str] = None
    stripe_webhook_secret: Optional[str] = None
    stripe_enabled: Optional[bool] = None


class PaymentSettingsResponse(BaseModel):
    upi_id: Optional[str] = None
    qr_code_url: Optional[str] = None
    bank_details: Optional[dict] = None
    upi_enabled: bool = True
    cod_enabled: bool = True
    stripe_publishable_key: Optional[str] = None
    stripe_enabled: bool = False
    stripe_secret_key_set: bool = False
    stripe_webhook_secret_set: bool = False
    last_test_status: Optional[str] = None
    last_test_at: Optional[datetime] = None


class AnalyticsSettingsUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    google_analytics_id: Optional[str] = None
    facebook_pixel_id: Optional[str] = None
    google_tag_manager_id: Optional[str] = None
    hotjar_id: Optional[str] = None
    mixpanel_token: Optional[str] = None
    amplitude_api_key: Optional[str] = None
    google_analytics_enabled: Optional[bool] = None
    facebook_pixel_enabled: Optional[bool] = None
    google_tag_manager_enabled: Optional[bool] = None
    hotjar_enabled: Optional[bool] = None
    mixpanel_enabled: Optional[bool] = None
    amplitude_enabled: Optional[bool] = None


class AnalyticsSettingsResponse(BaseModel):
    google_analytics_id: Optional[str] = None
    facebook_pixel_id: Optional[str] = None
    google_tag_manager_id: Optional[str] = None
    hotjar_id: Optional[str] = None
    google_analytics_enabled: bool = False
    facebook_pixel_enabled: bool = False
    google_tag_manager_enabled: bool = False
    hotjar_enabled: bool = False
    mixpanel_enabled: bool = False
    amplitude_enabled: bool = False
    mixpanel_token_set: bool = False
    amplitude_api_key_set: bool = False
    last_test_status: Optional[str] = None
    last_test_at: Optional[datetime] = None


class IntegrationSettingsUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    sendgrid_api_key: Optional[str] = None
    sendgrid_from_email: Optional[EmailStr] = None
    openai_api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None
    twilio_account_sid: Optional[str] = None
    twilio_auth_token: Optional[str] = None
    twilio_from_number: Optional[str] = None
    razorpay_key_id: Optional[str] = None
    razorpay_key_secret: Optional[str] = None
    sendgrid_enabled: Optional[bool] = None
    openai_enabled: Optional[bool] = None
    gemini_enabled: Optional[bool] = None
    twilio_enabled: Optional[bool] = None
    razorpay_enabled: Optional[bool] = None


class IntegrationSettingsResponse(BaseModel):
    sendgrid_from_email: Optional[str] = None
    twilio_account_sid: Optional[str] = None
    twilio_from_number: Optional[str] = None
    razorpay_key_id: Optional[str] = None
    sendgrid_enabled: bool = False
    openai_enabled: bool = False
    gemini_enabled: bool = False
    twilio_enabled: bool = False
    razorpay_enabled: bool = False
    sendgrid_api_key_set: bool = False
    openai_api_key_set: bool = False
    gemini_api_key_set: bool = False
    twilio_auth_token_set: bool = False
    razorpay_key_secret_set: bool = False
    last_test_status: Optional[str] = None
    last_test_at: Optional[datetime] = None


class ConnectionTestResponse(BaseModel):
    success: bool
    message: str


class StoreSettingUpsert(BaseModel):
    value: Any
    description: Optional[str] = None


class StoreSettingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    key: str
    value: Any = None
    description: Optional[str] = None
    updated_at: datetime


class AIConfigUpsert(BaseModel):
    is_enabled: Optional[bool] = None
    model: Optional[str] = None
    prompt: Optional[str] = None
    settings: Optional[dict] = None


class AIConfigResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, protected_namespaces=())

    id: uuid.UUID
    feature: str
    is_enabled: bool
    model: Optional[str] = None
    prompt: Optional[str] = None
    settings: Optional[dict] = None
    updated_at: datetime


# ============================================================================
# ADMIN REPORTING SCHEMAS
# ============================================================================


class AuditLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    admin_id: Optional[uuid.UUID] = None
    admin_email: Optional[str] = None
    action: str
    entity_type: str
    entity_id: Optional[str] = None
    changes: Optional[dict] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime


class AuditLogListResponse(BaseModel):
    items: list[AuditLogResponse]
    total: int
    page: int
    limit: int


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    created_at: datetime


class UserListResponse(BaseModel):
    items: list[UserResponse]
    total: int
    page: int
    limit: int


class NotificationSendRequest(BaseModel):
    user_ids: list[str] = Field(..., min_length=1)
    title: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1)
    type: str = "system"


class RevenuePoint(BaseModel):
    date: str
    revenue: Decimal
    orders: int


class DashboardStats(BaseModel):
    total_products: int
    total_orders: int
    total_users: int
    total_brands: int
    total_revenue: Decimal
    recent_orders: list[OrderResponse]
    revenue_by_day: list[RevenuePoint]


# ============================================================================
# PUBLIC MISC SCHEMAS
# ============================================================================


class ContactRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    subject: Optional[str] = Field(None, max_length=200)
    message: str = Field(..., min_length=1, max_length=5000)


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=2000)
    context: Optional[dict] = None


class ChatResponse(BaseModel):
    reply: str
    timestamp: datetime


class RecommendationResponse(BaseModel):
    products: list[ProductResponse]
    source: str  # "ai" or "catalog"


class TryOnResponse(BaseModel):
    description: str
    product_id: uuid.UUID
