"""initial storefront schema

Revision ID: 0001_initial_storefront
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ARRAY, JSONB, UUID


# revision identifiers, used by Alembic.
revision: str = '0001_initial_storefront'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ORDER_STATUSES = (
    'pending', 'payment_verified', 'confirmed', 'processing',
    'shipped', 'delivered', 'cancelled', 'payment_failed',
)
PAYMENT_STATUSES = ('pending', 'verified', 'paid', 'failed')


def _timestamps(updated: bool = True) -> list:
    columns = [sa.Column('created_at', sa.DateTime(timezone=True), nullable=False)]
    if updated:
        columns.append(sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False))
    return columns


def _settings_bookkeeping() -> list:
    return [
        sa.Column('last_test_status', sa.String(20), nullable=True),
        sa.Column('last_test_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
        *_timestamps(),
    ]


def upgrade() -> None:
    """Create every storefront table."""

    # Shoppers and catalog
    op.create_table(
        'users',
        sa.Column('id', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('first_name', sa.String(100), nullable=True),
        sa.Column('last_name', sa.String(100), nullable=True),
        sa.Column('profile_image_url', sa.String(512), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )

    op.create_table(
        'categories',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('slug', sa.String(120), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('image_url', sa.String(512), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('sort_order', sa.Integer(), server_default='0', nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('slug'),
    )

    op.create_table(
        'brands',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('slug', sa.String(120), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('logo_url', sa.String(512), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('is_featured', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('sort_order', sa.Integer(), server_default='0', nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('slug'),
    )

    op.create_table(
        'products',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('category_id', UUID(as_uuid=True), nullable=False),
        sa.Column('brand_id', UUID(as_uuid=True), nullable=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(280), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('short_description', sa.Text(), nullable=True),
        sa.Column('price', sa.Numeric(12, 2), nullable=False),
        sa.Column('original_price', sa.Numeric(12, 2), nullable=True),
        sa.Column('discount', sa.Numeric(5, 2), server_default='0', nullable=False),
        sa.Column('discount_type', sa.String(20), nullable=True),
        sa.Column('discount_expiry', sa.DateTime(timezone=True), nullable=True),
        sa.Column('condition', sa.String(50), nullable=True),
        sa.Column('size', sa.String(50), nullable=True),
        sa.Column('sizes', ARRAY(sa.String()), server_default='{}', nullable=False),
        sa.Column('color', sa.String(50), nullable=True),
        sa.Column('material', sa.String(100), nullable=True),
        sa.Column('fabric', sa.Text(), nullable=True),
        sa.Column('wash_care', sa.Text(), nullable=True),
        sa.Column('measurements', JSONB(), nullable=True),
        sa.Column('eco_badges', ARRAY(sa.String()), server_default='{}', nullable=False),
        sa.Column('tags', ARRAY(sa.String()), server_default='{}', nullable=False),
        sa.Column('images', ARRAY(sa.String()), server_default='{}', nullable=False),
        sa.Column('videos', ARRAY(sa.String()), server_default='{}', nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('is_featured', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('is_hot_selling', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('is_original', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('is_thrift', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('stock', sa.Integer(), server_default='1', nullable=False),
        sa.Column('stock_alert', sa.Integer(), server_default='5', nullable=False),
        sa.Column('view_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('related_products', ARRAY(sa.String()), server_default='{}', nullable=False),
        sa.Column('ai_try_on_prompt', sa.Text(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('stock >= 0', name='ck_products_stock_non_negative'),
        sa.CheckConstraint('price >= 0', name='ck_products_price_non_negative'),
        sa.ForeignKeyConstraint(['category_id'], ['categories.id']),
        sa.ForeignKeyConstraint(['brand_id'], ['brands.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('slug'),
    )
    op.create_index('ix_products_category_active', 'products', ['category_id', 'is_active'])
    op.create_index('ix_products_created_at', 'products', ['created_at'])

    op.create_table(
        'tax_rates',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('rate', sa.Numeric(5, 2), nullable=False),
        sa.Column('country', sa.String(100), nullable=True),
        sa.Column('state', sa.String(100), nullable=True),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('zip_code', sa.String(20), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('priority', sa.Integer(), server_default='0', nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )

    # Carts, wishlists, orders
    op.create_table(
        'carts',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', sa.String(255), nullable=True),
        sa.Column('session_id', sa.String(255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_carts_user_id', 'carts', ['user_id'])
    op.create_index('ix_carts_session_id', 'carts', ['session_id'])

    op.create_table(
        'cart_items',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('cart_id', UUID(as_uuid=True), nullable=False),
        sa.Column('product_id', UUID(as_uuid=True), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('quantity > 0', name='ck_cart_items_quantity_positive'),
        sa.ForeignKeyConstraint(['cart_id'], ['carts.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['product_id'], ['products.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('cart_id', 'product_id', name='uq_cart_items_cart_product'),
    )

    op.create_table(
        'wishlists',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', sa.String(255), nullable=False),
        sa.Column('product_id', UUID(as_uuid=True), nullable=False),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(['product_id'], ['products.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'product_id', name='uq_wishlists_user_product'),
    )
    op.create_index('ix_wishlists_user_id', 'wishlists', ['user_id'])

    op.create_table(
        'orders',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', sa.String(255), nullable=True),
        sa.Column('guest_email', sa.String(255), nullable=True),
        sa.Column(
            'status',
            sa.Enum(*ORDER_STATUSES, name='order_status_enum'),
            server_default='pending',
            nullable=False,
        ),
        sa.Column('subtotal', sa.Numeric(12, 2), nullable=False),
        sa.Column('tax_amount', sa.Numeric(12, 2), server_default='0', nullable=False),
        sa.Column('shipping_amount', sa.Numeric(12, 2), server_default='0', nullable=False),
        sa.Column('discount_amount', sa.Numeric(12, 2), server_default='0', nullable=False),
        sa.Column('total_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('coupon_code', sa.String(50), nullable=True),
        sa.Column('tracking_number', sa.String(100), nullable=True),
        sa.Column('estimated_delivery', sa.DateTime(timezone=True), nullable=True),
        sa.Column('shipping_address', JSONB(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('payment_method', sa.String(30), nullable=True),
        sa.Column(
            'payment_status',
            sa.Enum(*PAYMENT_STATUSES, name='payment_status_enum'),
            server_default='pending',
            nullable=False,
        ),
        sa.Column('payment_proof', sa.String(512), nullable=True),
        sa.Column('payment_verified_by', sa.String(255), nullable=True),
        sa.Column('payment_verified_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('total_amount >= 0', name='ck_orders_total_non_negative'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_orders_user_id', 'orders', ['user_id'])
    op.create_index('ix_orders_status', 'orders', ['status'])
    op.create_index('ix_orders_created_at', 'orders', ['created_at'])

    op.create_table(
        'order_items',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('order_id', UUID(as_uuid=True), nullable=False),
        sa.Column('product_id', UUID(as_uuid=True), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('price', sa.Numeric(12, 2), nullable=False),
        *_timestamps(updated=False),
        sa.CheckConstraint('quantity > 0', name='ck_order_items_quantity_positive'),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['product_id'], ['products.id']),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'order_tracking',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('order_id', UUID(as_uuid=True), nullable=False),
        sa.Column('status', sa.String(50), nullable=False),
        sa.Column('message', sa.Text(), nullable=True),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('tracking_number', sa.String(100), nullable=True),
        sa.Column('carrier', sa.String(100), nullable=True),
        sa.Column('estimated_delivery', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'coupons',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('code', sa.String(50), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column(
            'discount_type',
            sa.Enum('percentage', 'fixed', name='discount_type_enum'),
            nullable=False,
        ),
        sa.Column('discount_value', sa.Numeric(12, 2), nullable=False),
        sa.Column('min_purchase_amount', sa.Numeric(12, 2), nullable=True),
        sa.Column('max_discount_amount', sa.Numeric(12, 2), nullable=True),
        sa.Column('usage_limit', sa.Integer(), nullable=True),
        sa.Column('usage_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('code'),
    )

    # Back office
    op.create_table(
        'admin_users',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column(
            'role',
            sa.Enum('admin', 'super_admin', name='admin_role_enum'),
            server_default='admin',
            nullable=False,
        ),
        sa.Column('totp_secret', sa.String(64), nullable=True),
        sa.Column('totp_enabled', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
        sa.Column('login_attempts', sa.Integer(), server_default='0', nullable=False),
        sa.Column('locked_until', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )

    op.create_table(
        'audit_logs',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('admin_id', UUID(as_uuid=True), nullable=True),
        sa.Column('action', sa.String(80), nullable=False),
        sa.Column('entity_type', sa.String(50), nullable=False),
        sa.Column('entity_id', sa.String(255), nullable=True),
        sa.Column('changes', JSONB(), nullable=True),
        sa.Column('ip_address', sa.String(64), nullable=True),
        sa.Column('user_agent', sa.Text(), nullable=True),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(['admin_id'], ['admin_users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_audit_logs_entity', 'audit_logs', ['entity_type', 'entity_id'])
    op.create_index('ix_audit_logs_created_at', 'audit_logs', ['created_at'])

    op.create_table(
        'order_admin_logs',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('order_id', UUID(as_uuid=True), nullable=False),
        sa.Column('actor_id', sa.String(255), nullable=False),
        sa.Column('action', sa.String(50), nullable=False),
        sa.Column('changes', JSONB(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_order_admin_logs_order_id', 'order_admin_logs', ['order_id'])

    # Merchandising content
    op.create_table(
        'banners',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('title', sa.String(255), nullable=True),
        sa.Column('subtitle', sa.Text(), nullable=True),
        sa.Column('image_url', sa.String(512), nullable=False),
        sa.Column('link_url', sa.String(512), nullable=True),
        sa.Column('button_text', sa.String(100), nullable=True),
        sa.Column('position', sa.String(50), server_default='hero', nullable=False),
        sa.Column('sort_order', sa.Integer(), server_default='0', nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'promotional_popups',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('image_url', sa.String(512), nullable=True),
        sa.Column('button_text', sa.String(100), nullable=True),
        sa.Column('button_url', sa.String(512), nullable=True),
        sa.Column('background_color', sa.String(20), server_default='#ffffff', nullable=False),
        sa.Column('text_color', sa.String(20), server_default='#000000', nullable=False),
        sa.Column('button_color', sa.String(20), server_default='#10b981', nullable=False),
        sa.Column('position', sa.String(20), server_default='center', nullable=False),
        sa.Column('size', sa.String(20), server_default='medium', nullable=False),
        sa.Column('trigger', sa.String(30), server_default='page_load', nullable=False),
        sa.Column('trigger_value', sa.Integer(), server_default='0', nullable=False),
        sa.Column('show_frequency', sa.String(20), server_default='once', nullable=False),
        sa.Column('target_pages', ARRAY(sa.String()), server_default='{}', nullable=False),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('priority', sa.Integer(), server_default='0', nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'content_pages',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('slug', sa.String(120), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('meta_description', sa.Text(), nullable=True),
        sa.Column('is_published', sa.Boolean(), server_default='true', nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('slug'),
    )

    op.create_table(
        'notifications',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', sa.String(255), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('type', sa.String(30), server_default='system', nullable=False),
        sa.Column('is_read', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('metadata', JSONB(), nullable=True),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])

    # Store configuration
    op.create_table(
        'store_settings',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('key', sa.String(100), nullable=False),
        sa.Column('value', JSONB(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('key'),
    )

    op.create_table(
        'ai_config',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('feature', sa.String(50), nullable=False),
        sa.Column('is_enabled', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('model', sa.String(100), nullable=True),
        sa.Column('prompt', sa.Text(), nullable=True),
        sa.Column('settings', JSONB(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('feature'),
    )

    op.create_table(
        'payment_settings',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('upi_id', sa.String(300), nullable=True),
        sa.Column('qr_code_url', sa.String(512), nullable=True),
        sa.Column('bank_details', JSONB(), nullable=True),
        sa.Column('upi_enabled', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('cod_enabled', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('stripe_secret_key', sa.String(255), nullable=True),
        sa.Column('stripe_publishable_key', sa.String(255), nullable=True),
        sa.Column('stripe_webhook_secret', sa.String(255), nullable=True),
        sa.Column('stripe_enabled', sa.Boolean(), server_default='false', nullable=False),
        *_settings_bookkeeping(),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'analytics_settings',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('google_analytics_id', sa.String(50), nullable=True),
        sa.Column('facebook_pixel_id', sa.String(50), nullable=True),
        sa.Column('google_tag_manager_id', sa.String(50), nullable=True),
        sa.Column('hotjar_id', sa.String(50), nullable=True),
        sa.Column('mixpanel_token', sa.String(255), nullable=True),
        sa.Column('amplitude_api_key', sa.String(255), nullable=True),
        sa.Column('google_analytics_enabled', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('facebook_pixel_enabled', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('google_tag_manager_enabled', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('hotjar_enabled', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('mixpanel_enabled', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('amplitude_enabled', sa.Boolean(), server_default='false', nullable=False),
        *_settings_bookkeeping(),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'integration_settings',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('sendgrid_api_key', sa.String(255), nullable=True),
        sa.Column('sendgrid_from_email', sa.String(255), nullable=True),
        sa.Column('openai_api_key', sa.String(255), nullable=True),
        sa.Column('gemini_api_key', sa.String(255), nullable=True),
        sa.Column('twilio_account_sid', sa.String(100), nullable=True),
        sa.Column('twilio_auth_token', sa.String(255), nullable=True),
        sa.Column('twilio_from_number', sa.String(30), nullable=True),
        sa.Column('razorpay_key_id', sa.String(100), nullable=True),
        sa.Column('razorpay_key_secret', sa.String(255), nullable=True),
        sa.Column('sendgrid_enabled', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('openai_enabled', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('gemini_enabled', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('twilio_enabled', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('razorpay_enabled', sa.Boolean(), server_default='false', nullable=False),
        *_settings_bookkeeping(),
        sa.PrimaryKeyConstraint('id'),
    )


def downgrade() -> None:
    """Drop every storefront table and enum type."""
    for table in (
        'integration_settings',
        'analytics_settings',
        'payment_settings',
        'ai_config',
        'store_settings',
        'notifications',
        'content_pages',
        'promotional_popups',
        'banners',
        'order_admin_logs',
        'audit_logs',
        'admin_users',
        'coupons',
        'order_tracking',
        'order_items',
        'orders',
        'wishlists',
        'cart_items',
        'carts',
        'tax_rates',
        'products',
        'brands',
        'categories',
        'users',
    ):
        op.drop_table(table)

    for enum_name in (
        'admin_role_enum',
        'discount_type_enum',
        'payment_status_enum',
        'order_status_enum',
    ):
        sa.Enum(name=enum_name).drop(op.get_bind(), checkfirst=True)
