"""Merchandising content: banners, popups, pages, notifications."""

import uuid
from datetime import datetime
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from sqlalchemy import Boolean, DateTime, Integer, String, Text
from sqlalchemy.dialects.postgresql import ARRAY, JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column


class Banner(Base):
    """Hero/sidebar slides, optionally scheduled."""

    __tablename__ = "banners"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    subtitle: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image_url: Mapped[str] = mapped_column(String(512), nullable=False)
    link_url: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    button_text: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    position: Mapped[str] = mapped_column(
        String(50), default="hero", server_default="hero"
    )  # hero, sidebar, footer
    sort_order: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default="true"
    )
    start_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    end_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    def __repr__(self):
        return f"<Banner {self.title}>"


class PromotionalPopup(Base):
    """Storefront popup with display rules."""

    __tablename__ = "promotional_popups"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image_url: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    button_text: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    button_url: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)

    # Appearance
    background_color: Mapped[str] = mapped_column(
        String(20), default="#ffffff", server_default="#ffffff"
    )
    text_color: Mapped[str] = mapped_column(
        String(20), default="#000000", server_default="#000000"
    )
    button_color: Mapped[str] = mapped_column(
        String(20), default="#10b981", server_default="#10b981"
    )
    position: Mapped[str] = mapped_column(
        String(20), default="center", server_default="center"
    )  # center, bottom, top
    size: Mapped[str] = mapped_column(
        String(20), default="medium", server_default="medium"
    )

    # Display rules
    trigger: Mapped[str] = mapped_column(
        String(30), default="page_load", server_default="page_load"
    )  # page_load, exit_intent, time_delay
    trigger_value: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    show_frequency: Mapped[str] = mapped_column(
        String(20), default="once", server_default="once"
    )  # once, daily, weekly, always
    target_pages: Mapped[list[str]] = mapped_column(
        ARRAY(String), default=list, server_default="{}"
    )

    start_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    end_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default="true"
    )
    priority: Mapped[int] = mapped_column(Integer, default=0, server_default="0")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    def __repr__(self):
        return f"<PromotionalPopup {self.title}>"


class ContentPage(Base):
    """Editable static pages (About, FAQs, ...)."""

    __tablename__ = "content_pages"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    slug: Mapped[str] = mapped_column(String(120), unique=True, nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    meta_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_published: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default="true"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )


class Notification(Base):
    """In-app notification for a shopper."""

    __tablename__ = "notifications"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(
        String(30), default="system", server_default="system"
    )  # order, promotion, system
    is_read: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="false"
    )
    extra_data: Mapped[Optional[dict]] = mapped_column(
        "metadata", JSONB, nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
