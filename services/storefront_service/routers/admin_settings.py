"""Admin settings: payment, analytics, integrations, store keys, AI features.

Secret values are write-only. Reads return ``<field>_set`` flags instead.
"""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from libs.common.error_handler import ApiError
from libs.db.session import get_async_db
from services.storefront_service.dependencies import get_current_admin
from services.storefront_service.integrations.probes import (
    probe_gemini,
    probe_openai,
    probe_sendgrid,
    probe_stripe,
    validate_upi_id,
)
from services.storefront_service.models import (
    AdminUser,
    AIConfig,
    AnalyticsSettings,
    IntegrationSettings,
    PaymentSettings,
    StoreSetting,
)
from services.storefront_service.schemas import (
    AIConfigResponse,
    AIConfigUpsert,
    AnalyticsSettingsResponse,
    AnalyticsSettingsUpdate,
    ConnectionTestResponse,
    IntegrationSettingsResponse,
    IntegrationSettingsUpdate,
    PaymentSettingsResponse,
    PaymentSettingsUpdate,
    StoreSettingResponse,
    StoreSettingUpsert,
)
from services.storefront_service.services.audit import log_audit
from services.storefront_service.services.settings import (
    SECRET_FIELDS,
    get_active_row,
    get_gemini_api_key,
    get_openai_api_key,
    get_stripe_secret_key,
    masked_view,
    record_test_result,
    upsert_active_row,
    upsert_store_setting,
)
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["admin-settings"])


def _audit_changes(model, changes: dict) -> dict:
    """Changed field names only; secret values never reach the audit log."""
    return {
        "fields": sorted(changes),
        "secrets_updated": sorted(k for k in changes if k in SECRET_FIELDS[model]),
    }


async def _finish_test(
    db: AsyncSession,
    request: Request,
    admin: AdminUser,
    model,
    action: str,
    result: tuple[bool, str],
) -> ConnectionTestResponse:
    success, message = result
    await record_test_result(db, model, success)
    await log_audit(
        db, request, admin.id, action, model.__tablename__, None,
        {"success": success},
    )
    await db.commit()

    if not success:
        raise ApiError(
            status.HTTP_400_BAD_REQUEST,
            message,
            code="CONNECTION_TEST_FAILED",
            extra={"success": False, "message": message},
        )
    return ConnectionTestResponse(success=True, message=message)


def _missing_key(name: str) -> ApiError:
    return ApiError(
        status.HTTP_400_BAD_REQUEST,
        f"{name} is not configured",
        code="MISSING_API_KEY",
        extra={"success": False, "message": f"{name} is not configured"},
    )


# ============================================================================
# PAYMENT SETTINGS
# ============================================================================


@router.get("/payment-settings", response_model=PaymentSettingsResponse)
async def get_payment_settings(
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    row = await get_active_row(db, PaymentSettings)
    return masked_view(PaymentSettings, row)


@router.put("/payment-settings", response_model=PaymentSettingsResponse)
async def update_payment_settings(
    payload: PaymentSettingsUpdate,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    changes = payload.model_dump(exclude_unset=True)
    row = await upsert_active_row(db, PaymentSettings, changes)
    await log_audit(
        db, request, admin.id, "UPDATE_PAYMENT_SETTINGS", "payment_settings", row.id,
        _audit_changes(PaymentSettings, changes),
    )
    await db.commit()
    return masked_view(PaymentSettings, row)


@router.post("/payment-settings/test-stripe", response_model=ConnectionTestResponse)
async def test_stripe_connection(
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    secret_key = await get_stripe_secret_key(db)
    if not secret_key:
        raise _missing_key("Stripe secret key")
    result = await probe_stripe(secret_key)
    return await _finish_test(
        db, request, admin, PaymentSettings, "TEST_STRIPE", result
    )


@router.post("/payment-settings/test-upi", response_model=ConnectionTestResponse)
async def test_upi_settings(
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    row = await get_active_row(db, PaymentSettings)
    if row is None or not row.upi_id:
        raise _missing_key("UPI ID")
    return await _finish_test(
        db, request, admin, PaymentSettings, "TEST_UPI", validate_upi_id(row.upi_id)
    )


# ============================================================================
# ANALYTICS SETTINGS
# ============================================================================


@router.get("/analytics-settings", response_model=AnalyticsSettingsResponse)
async def get_analytics_settings(
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    row = await get_active_row(db, AnalyticsSettings)
    return masked_view(AnalyticsSettings, row)


@router.put("/analytics-settings", response_model=AnalyticsSettingsResponse)
async def update_analytics_settings(
    payload: AnalyticsSettingsUpdate,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    changes = payload.model_dump(exclude_unset=True)
    row = await upsert_active_row(db, AnalyticsSettings, changes)
    await log_audit(
        db, request, admin.id, "UPDATE_ANALYTICS_SETTINGS", "analytics_settings",
        row.id, _audit_changes(AnalyticsSettings, changes),
    )
    await db.commit()
    return masked_view(AnalyticsSettings, row)


# ============================================================================
# INTEGRATION SETTINGS
# ============================================================================


@router.get("/integration-settings", response_model=IntegrationSettingsResponse)
async def get_integration_settings(
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    row = await get_active_row(db, IntegrationSettings)
    return masked_view(IntegrationSettings, row)


@router.put("/integration-settings", response_model=IntegrationSettingsResponse)
async def update_integration_settings(
    payload: IntegrationSettingsUpdate,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    changes = payload.model_dump(exclude_unset=True)
    row = await upsert_active_row(db, IntegrationSettings, changes)
    await log_audit(
        db, request, admin.id, "UPDATE_INTEGRATION_SETTINGS", "integration_settings",
        row.id, _audit_changes(IntegrationSettings, changes),
    )
    await db.commit()
    return masked_view(IntegrationSettings, row)


@router.post(
    "/integration-settings/test-sendgrid", response_model=ConnectionTestResponse
)
async def test_sendgrid_connection(
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    row = await get_active_row(db, IntegrationSettings)
    if row is None or not row.sendgrid_api_key:
        raise _missing_key("SendGrid API key")
    result = await probe_sendgrid(row.sendgrid_api_key)
    return await _finish_test(
        db, request, admin, IntegrationSettings, "TEST_SENDGRID", result
    )


@router.post("/integration-settings/test-openai", response_model=ConnectionTestResponse)
async def test_openai_connection(
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    api_key = await get_openai_api_key(db)
    if not api_key:
        raise _missing_key("OpenAI API key")
    result = await probe_openai(api_key)
    return await _finish_test(
        db, request, admin, IntegrationSettings, "TEST_OPENAI", result
    )


@router.post("/integration-settings/test-gemini", response_model=ConnectionTestResponse)
async def test_gemini_connection(
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    api_key = await get_gemini_api_key(db)
    if not api_key:
        raise _missing_key("Gemini API key")
    result = await probe_gemini(api_key)
    return await _finish_test(
        db, request, admin, IntegrationSettings, "TEST_GEMINI", result
    )


# ============================================================================
# STORE SETTINGS & AI CONFIG
# ============================================================================


@router.get("/settings", response_model=list[StoreSettingResponse])
async def list_store_settings(
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    result = await db.execute(select(StoreSetting).order_by(StoreSetting.key))
    return result.scalars().all()


@router.put("/settings/{key}", response_model=StoreSettingResponse)
async def put_store_setting(
    key: str,
    payload: StoreSettingUpsert,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    if not key.strip() or len(key) > 100:
        raise HTTPException(status_code=400, detail="Invalid setting key")

    setting = await upsert_store_setting(db, key, payload.value, payload.description)
    await log_audit(
        db, request, admin.id, "UPDATE_SETTING", "store_setting", key,
        {"value": payload.value},
    )
    await db.commit()
    await db.refresh(setting)
    return setting


@router.get("/ai-config", response_model=list[AIConfigResponse])
async def list_ai_config(
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    result = await db.execute(select(AIConfig).order_by(AIConfig.feature))
    return result.scalars().all()


@router.put("/ai-config/{feature}", response_model=AIConfigResponse)
async def put_ai_config(
    feature: str,
    payload: AIConfigUpsert,
    request: Request,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db),
):
    result = await db.execute(select(AIConfig).where(AIConfig.feature == feature))
    config = result.scalar_one_or_none()
    if config is None:
        config = AIConfig(feature=feature)
        db.add(config)

    changes = payload.model_dump(exclude_unset=True)
    for field, value in changes.items():
        setattr(config, field, value)
    await db.flush()

    await log_audit(
        db, request, admin.id, "UPDATE_AI_CONFIG", "ai_config", feature, changes
    )
    await db.commit()
    await db.refresh(config)
    return config
