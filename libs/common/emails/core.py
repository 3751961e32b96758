"""
Core email sending: SendGrid when configured, log-only otherwise.
"""

from dataclasses import dataclass
from typing import Optional

import httpx

from libs.common.config import get_settings
from libs.common.emails.client import SendGridClient, SendGridError
from libs.common.logging import get_logger

logger = get_logger(__name__)


@dataclass
class EmailConfig:
    """Effective sender configuration for one send."""

    enabled: bool = False
    api_key: Optional[str] = None
    from_email: Optional[str] = None

    @property
    def can_send(self) -> bool:
        return self.enabled and bool(self.api_key)

    @classmethod
    def from_settings(cls) -> "EmailConfig":
        settings = get_settings()
        return cls(
            enabled=bool(settings.SENDGRID_API_KEY),
            api_key=settings.SENDGRID_API_KEY,
            from_email=settings.SENDGRID_FROM_EMAIL,
        )


async def send_email(
    to_email: str,
    subject: str,
    body: str,
    html_body: Optional[str] = None,
    config: Optional[EmailConfig] = None,
    reply_to: Optional[str] = None,
) -> bool:
    """
    Send an email through SendGrid.

    Without an enabled SendGrid configuration the email is only logged
    ("console mode") and counted as sent.

    Returns:
        True if the email was sent or logged, False if SendGrid failed
    """
    config = config or EmailConfig.from_settings()

    if not config.can_send:
        logger.info("Email (console mode) to %s: %s", to_email, subject)
        logger.debug("Email body: %s", body[:500])
        return True

    from_email = config.from_email or get_settings().SENDGRID_FROM_EMAIL
    try:
        client = SendGridClient(config.api_key, from_email=from_email)
        await client.send(
            to_email=to_email,
            subject=subject,
            body=body,
            html_body=html_body,
            reply_to=reply_to,
        )
    except (SendGridError, httpx.HTTPError) as e:
        logger.error("Failed to send email to %s: %s", to_email, e)
        return False

    logger.info("Email sent successfully to %s", to_email)
    return True
