"""Store configuration models.

Payment, analytics and integration settings each keep a single active row.
Secret columns are never returned by the API; see ``services.settings``.
"""

import uuid
from datetime import datetime
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from sqlalchemy import Boolean, DateTime, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column


class StoreSetting(Base):
    """Generic key/value store settings (JSON values)."""

    __tablename__ = "store_settings"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    key: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    value: Mapped[Optional[dict]] = mapped_column(JSONB, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    def __repr__(self):
        return f"<StoreSetting {self.key}>"


class AIConfig(Base):
    """Per-feature AI switches (recommendations, chat, try-on)."""

    __tablename__ = "ai_config"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    feature: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    is_enabled: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default="true"
    )
    model: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    prompt: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    settings: Mapped[Optional[dict]] = mapped_column(JSONB, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )


class PaymentSettings(Base):
    __tablename__ = "payment_settings"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )

    # UPI / bank transfer
    upi_id: Mapped[Optional[str]] = mapped_column(String(300), nullable=True)
    qr_code_url: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    bank_details: Mapped[Optional[dict]] = mapped_column(JSONB, nullable=True)
    upi_enabled: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default="true"
    )
    cod_enabled: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default="true"
    )

    # Stripe
    stripe_secret_key: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    stripe_publishable_key: Mapped[Optional[str]] = mapped_column(
        String(255), nullable=True
    )
    stripe_webhook_secret: Mapped[Optional[str]] = mapped_column(
        String(255), nullable=True
    )
    stripe_enabled: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="false"
    )

    last_test_status: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    last_test_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default="true"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )


class AnalyticsSettings(Base):
    __tablename__ = "analytics_settings"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    google_analytics_id: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    facebook_pixel_id: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    google_tag_manager_id: Mapped[Optional[str]] = mapped_column(
        String(50), nullable=True
    )
    hotjar_id: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    mixpanel_token: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    amplitude_api_key: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    google_analytics_enabled: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="false"
    )
    facebook_pixel_enabled: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="false"
    )
    google_tag_manager_enabled: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="false"
    )
    hotjar_enabled: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="false"
    )
    mixpanel_enabled: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="false"
    )
    amplitude_enabled: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="false"
    )

    last_test_status: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    last_test_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default="true"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )


class IntegrationSettings(Base):
    __tablename__ = "integration_settings"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    sendgrid_api_key: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    sendgrid_from_email: Mapped[Optional[str]] = mapped_column(
        String(255), nullable=True
    )
    openai_api_key: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    gemini_api_key: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    twilio_account_sid: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    twilio_auth_token: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    twilio_from_number: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    razorpay_key_id: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    razorpay_key_secret: Mapped[Optional[str]] = mapped_column(
        String(255), nullable=True
    )

    sendgrid_enabled: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="false"
    )
    openai_enabled: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="false"
    )
    gemini_enabled: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="false"
    )
    twilio_enabled: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="false"
    )
    razorpay_enabled: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="false"
    )

    last_test_status: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    last_test_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default="true"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )
