"""Payment, analytics and integration settings.

Secret columns never leave this module in clear text: ``mask_secrets`` swaps
each one for a ``<field>_set`` boolean before anything is serialized.
"""

from typing import Any, Optional, Type, TypeVar

from libs.common.config import get_settings
from libs.common.datetime_utils import utc_now
from libs.common.emails.core import EmailConfig
from services.storefront_service.models import (
    AnalyticsSettings,
    IntegrationSettings,
    PaymentSettings,
    StoreSetting,
)
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

SettingsRow = TypeVar(
    "SettingsRow", PaymentSettings, AnalyticsSettings, IntegrationSettings
)

SECRET_FIELDS: dict[type, tuple[str, ...]] = {
    PaymentSettings: ("stripe_secret_key", "stripe_webhook_secret"),
    AnalyticsSettings: ("mixpanel_token", "amplitude_api_key"),
    IntegrationSettings: (
        "sendgrid_api_key",
        "openai_api_key",
        "gemini_api_key",
        "twilio_auth_token",
        "razorpay_key_secret",
    ),
}

# Bookkeeping columns that are never part of the API payload
_INTERNAL_FIELDS = {"id", "is_active", "created_at", "updated_at"}


def row_to_dict(row: Any) -> dict:
    return {
        column.key: getattr(row, column.key)
        for column in row.__table__.columns
        if column.key not in _INTERNAL_FIELDS
    }


def mask_secrets(data: dict, secret_fields: tuple[str, ...]) -> dict:
    """Replace every secret value with a ``<field>_set`` flag."""
    masked = {key: value for key, value in data.items() if key not in secret_fields}
    for field in secret_fields:
        masked[f"{field}_set"] = bool(data.get(field))
    return masked


def masked_view(model: Type[SettingsRow], row: Optional[SettingsRow]) -> dict:
    """Masked dict for a settings row; column defaults when there is no row."""
    if row is None:
        data = {
            column.key: column.default.arg if column.default is not None else None
            for column in model.__table__.columns
            if column.key not in _INTERNAL_FIELDS
        }
    else:
        data = row_to_dict(row)
    return mask_secrets(data, SECRET_FIELDS[model])


async def get_active_row(
    db: AsyncSession, model: Type[SettingsRow]
) -> Optional[SettingsRow]:
    result = await db.execute(
        select(model)
        .where(model.is_active.is_(True))
        .order_by(model.updated_at.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def upsert_active_row(
    db: AsyncSession, model: Type[SettingsRow], changes: dict
) -> SettingsRow:
    """Apply ``changes`` to the active row, creating it when missing.

    Only known columns are written; ``*_set`` flags from a previous read and
    other unknown keys are ignored.
    """
    columns = {column.key for column in model.__table__.columns} - _INTERNAL_FIELDS
    row = await get_active_row(db, model)
    if row is None:
        row = model(is_active=True)
        db.add(row)
    for key, value in changes.items():
        if key in columns:
            setattr(row, key, value)
    await db.flush()
    return row


async def record_test_result(
    db: AsyncSession, model: Type[SettingsRow], success: bool
) -> None:
    row = await get_active_row(db, model)
    if row is None:
        row = model(is_active=True)
        db.add(row)
    row.last_test_status = "success" if success else "failed"
    row.last_test_at = utc_now()


# ---------------------------------------------------------------------------
# Effective keys (DB row first, then environment)
# ---------------------------------------------------------------------------


async def get_gemini_api_key(db: AsyncSession) -> Optional[str]:
    row = await get_active_row(db, IntegrationSettings)
    if row is not None and row.gemini_api_key:
        return row.gemini_api_key
    return get_settings().GEMINI_API_KEY


async def get_openai_api_key(db: AsyncSession) -> Optional[str]:
    row = await get_active_row(db, IntegrationSettings)
    return row.openai_api_key if row is not None else None


async def get_stripe_secret_key(db: AsyncSession) -> Optional[str]:
    row = await get_active_row(db, PaymentSettings)
    if row is not None and row.stripe_secret_key:
        return row.stripe_secret_key
    return get_settings().STRIPE_SECRET_KEY


async def get_email_config(db: AsyncSession) -> EmailConfig:
    """SendGrid config from the integration settings row, else from env."""
    row = await get_active_row(db, IntegrationSettings)
    if row is not None and row.sendgrid_enabled and row.sendgrid_api_key:
        return EmailConfig(
            enabled=True,
            api_key=row.sendgrid_api_key,
            from_email=row.sendgrid_from_email,
        )
    return EmailConfig.from_settings()


# ---------------------------------------------------------------------------
# Generic key/value settings
# ---------------------------------------------------------------------------


async def get_store_setting(db: AsyncSession, key: str) -> Optional[StoreSetting]:
    result = await db.execute(select(StoreSetting).where(StoreSetting.key == key))
    return result.scalar_one_or_none()


async def upsert_store_setting(
    db: AsyncSession, key: str, value: Any, description: Optional[str] = None
) -> StoreSetting:
    setting = await get_store_setting(db, key)
    if setting is None:
        setting = StoreSetting(key=key)
        db.add(setting)
    setting.value = value
    if description is not None:
        setting.description = description
    await db.flush()
    return setting
