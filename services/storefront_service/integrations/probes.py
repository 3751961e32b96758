"""Connection tests for third-party credentials.

Each probe returns ``(success, message)`` and never raises for remote
failures, so the settings screen can show the outcome directly.
"""

import re

import httpx
from libs.common.emails.client import SendGridClient, SendGridError
from libs.common.logging import get_logger
from services.storefront_service.integrations.gemini import GeminiClient, GeminiError

logger = get_logger(__name__)

STRIPE_BASE_URL = "https://api.stripe.com/v1"
OPENAI_BASE_URL = "https://api.openai.com/v1"

UPI_ID_PATTERN = re.compile(r"^[a-zA-Z0-9.\-_]{2,256}@[a-zA-Z]{2,64}$")


def validate_upi_id(upi_id: str) -> tuple[bool, str]:
    if UPI_ID_PATTERN.match(upi_id or ""):
        return True, "UPI ID format is valid"
    return False, "Invalid UPI ID format (expected name@bank)"


async def _get(url: str, api_key: str) -> httpx.Response:
    async with httpx.AsyncClient(timeout=30.0) as client:
        return await client.get(url, headers={"Authorization": f"Bearer {api_key}"})


async def probe_stripe(secret_key: str) -> tuple[bool, str]:
    try:
        response = await _get(f"{STRIPE_BASE_URL}/balance", secret_key)
    except httpx.HTTPError as e:
        logger.warning("Stripe probe failed: %s", e)
        return False, "Could not reach Stripe"
    if response.is_success:
        return True, "Stripe connection successful"
    return False, f"Stripe rejected the key ({response.status_code})"


async def probe_openai(api_key: str) -> tuple[bool, str]:
    try:
        response = await _get(f"{OPENAI_BASE_URL}/models", api_key)
    except httpx.HTTPError as e:
        logger.warning("OpenAI probe failed: %s", e)
        return False, "Could not reach OpenAI"
    if response.is_success:
        return True, "OpenAI connection successful"
    return False, f"OpenAI rejected the key ({response.status_code})"


async def probe_sendgrid(api_key: str) -> tuple[bool, str]:
    try:
        await SendGridClient(api_key).get_profile()
    except SendGridError as e:
        return False, f"SendGrid rejected the key ({e.status_code})"
    except httpx.HTTPError as e:
        logger.warning("SendGrid probe failed: %s", e)
        return False, "Could not reach SendGrid"
    return True, "SendGrid connection successful"


async def probe_gemini(api_key: str) -> tuple[bool, str]:
    try:
        await GeminiClient(api_key).ping()
    except GeminiError:
        return False, "Gemini rejected the request"
    return True, "Gemini connection successful"
