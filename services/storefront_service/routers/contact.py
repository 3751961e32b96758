"""Public contact form."""

from fastapi import APIRouter, Depends, Request, status
from libs.common.config import get_settings
from libs.common.emails.store import send_contact_message_email
from libs.common.error_handler import ApiError
from libs.common.logging import get_logger
from libs.common.rate_limit import api_limit
from libs.db.session import get_async_db
from services.storefront_service.schemas import ContactRequest
from services.storefront_service.services.settings import get_email_config
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

router = APIRouter(tags=["contact"])


@router.post("/contact")
@api_limit
async def submit_contact(
    request: Request,
    payload: ContactRequest,
    db: AsyncSession = Depends(get_async_db),
):
    config = await get_email_config(db)
    sent = await send_contact_message_email(
        get_settings().STORE_EMAIL,
        name=payload.name,
        email=payload.email,
        message=payload.message,
        subject=payload.subject,
        config=config,
    )
    if not sent:
        raise ApiError(
            status.HTTP_502_BAD_GATEWAY,
            "Failed to send message",
            code="EMAIL_DELIVERY_FAILED",
        )

    logger.info("Contact message received from %s", payload.email)
    return {"message": "Message sent successfully"}
