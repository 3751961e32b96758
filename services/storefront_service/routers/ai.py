"""AI shopping features: recommendations, chat assistant, virtual try-on."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from libs.common.datetime_utils import utc_now
from libs.common.error_handler import ApiError
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from services.storefront_service.integrations.gemini import (
    CHAT_FALLBACK_REPLY,
    GeminiClient,
    GeminiError,
)
from services.storefront_service.models import AIConfig, Product
from services.storefront_service.schemas import (
    ChatRequest,
    ChatResponse,
    ProductResponse,
    RecommendationResponse,
    TryOnResponse,
)
from services.storefront_service.services.catalog import get_product, product_query
from services.storefront_service.services.settings import get_gemini_api_key
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

router = APIRouter(prefix="/ai", tags=["ai"])

RECOMMENDATION_LIMIT = 6
# Gemini sees at most this many same-category names
RANKING_POOL_SIZE = 30

TRY_ON_CONTENT_TYPES = {"image/jpeg", "image/png"}
TRY_ON_MAX_BYTES = 5 * 1024 * 1024


async def _feature_config(db: AsyncSession, feature: str) -> Optional[AIConfig]:
    result = await db.execute(select(AIConfig).where(AIConfig.feature == feature))
    return result.scalar_one_or_none()


async def _client_for(db: AsyncSession, feature: str) -> Optional[GeminiClient]:
    """Gemini client for ``feature``, or None when unconfigured or switched off."""
    config = await _feature_config(db, feature)
    if config is not None and not config.is_enabled:
        return None
    api_key = await get_gemini_api_key(db)
    if not api_key:
        return None
    return GeminiClient(api_key, model=config.model if config else None)


def _unavailable() -> ApiError:
    return ApiError(
        status.HTTP_503_SERVICE_UNAVAILABLE,
        "AI service unavailable",
        code="AI_UNAVAILABLE",
    )


def _order_by_names(products: list[Product], names: list[str]) -> list[Product]:
    """Products named by Gemini first (in its order), then the rest."""
    by_name = {p.name.lower(): p for p in products}
    ranked = []
    for name in names:
        product = by_name.pop(name.lower(), None)
        if product is not None:
            ranked.append(product)
    remaining = [p for p in products if p.name.lower() in by_name]
    return ranked + remaining


@router.get("/recommendations", response_model=RecommendationResponse)
async def recommendations(
    product_id: Optional[uuid.UUID] = None,
    db: AsyncSession = Depends(get_async_db),
):
    """
    Similar products for a product page, or featured picks without one.

    Gemini only reorders the same-category candidates; any failure keeps the
    catalog order.
    """
    target = await get_product(db, product_id) if product_id else None

    if target is None:
        result = await db.execute(
            product_query()
            .where(Product.is_featured.is_(True))
            .order_by(Product.created_at.desc())
            .limit(RECOMMENDATION_LIMIT)
        )
        products = list(result.scalars().all())
        return RecommendationResponse(
            products=[ProductResponse.model_validate(p) for p in products],
            source="catalog",
        )

    result = await db.execute(
        product_query()
        .where(Product.category_id == target.category_id, Product.id != target.id)
        .order_by(Product.is_featured.desc(), Product.created_at.desc())
        .limit(RANKING_POOL_SIZE)
    )
    candidates = list(result.scalars().all())
    source = "catalog"

    client = await _client_for(db, "recommendations")
    if client is not None and len(candidates) > 1:
        try:
            names = await client.rank_products(
                target.name, target.description, [p.name for p in candidates]
            )
            candidates = _order_by_names(candidates, names)
            source = "ai"
        except GeminiError:
            logger.warning("AI ranking failed for %s, using category order", target.id)

    return RecommendationResponse(
        products=[
            ProductResponse.model_validate(p)
            for p in candidates[:RECOMMENDATION_LIMIT]
        ],
        source=source,
    )


@router.post("/chat", response_model=ChatResponse)
async def chat(payload: ChatRequest, db: AsyncSession = Depends(get_async_db)):
    client = await _client_for(db, "chat")
    if client is None:
        raise _unavailable()

    try:
        reply = await client.chat(payload.message, payload.context)
    except GeminiError:
        raise ApiError(
            status.HTTP_502_BAD_GATEWAY,
            "AI assistant failed to respond",
            code="AI_UPSTREAM_ERROR",
            extra={"reply": CHAT_FALLBACK_REPLY},
        )
    return ChatResponse(reply=reply, timestamp=utc_now())


@router.post("/tryon", response_model=TryOnResponse)
async def try_on(
    product_id: uuid.UUID = Form(...),
    image: UploadFile = File(...),
    db: AsyncSession = Depends(get_async_db),
):
    """Describe the product on the uploaded photo. The photo stays in memory."""
    if image.content_type not in TRY_ON_CONTENT_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only JPEG and PNG images are allowed",
        )

    data = await image.read(TRY_ON_MAX_BYTES + 1)
    if len(data) > TRY_ON_MAX_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="Image must be 5 MB or smaller",
        )
    if not data:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Image is empty"
        )

    product = await get_product(db, product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")

    client = await _client_for(db, "tryon")
    if client is None:
        raise _unavailable()

    try:
        description = await client.describe_try_on(
            product.name, data, image.content_type, prompt=product.ai_try_on_prompt
        )
    except GeminiError:
        raise ApiError(
            status.HTTP_502_BAD_GATEWAY,
            "Virtual try-on failed",
            code="AI_UPSTREAM_ERROR",
        )
    return TryOnResponse(description=description, product_id=product.id)
