"""
SendGrid v3 REST client.

Usage:
    from libs.common.emails.client import SendGridClient

    client = SendGridClient(api_key, from_email="orders@reweara.com")
    await client.send(
        to_email="user@example.com",
        subject="Hello",
        body="Plain text body",
        html_body="<p>HTML body</p>",
    )
"""

from typing import Any, Optional

import httpx

from libs.common.logging import get_logger

logger = get_logger(__name__)

SENDGRID_BASE_URL = "https://api.sendgrid.com/v3"


class SendGridError(Exception):
    """Raised when SendGrid rejects a request."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class SendGridClient:
    """Async client for the SendGrid mail and profile APIs."""

    def __init__(self, api_key: str, from_email: Optional[str] = None, from_name: str = "ReWeara"):
        if not api_key:
            raise ValueError("SendGrid API key is required")
        self.from_email = from_email
        self.from_name = from_name
        self.timeout = 30.0
        self._headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    async def _request(self, method: str, endpoint: str, json_data: Optional[dict] = None) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.request(
                method=method,
                url=f"{SENDGRID_BASE_URL}{endpoint}",
                headers=self._headers,
                json=json_data,
            )
        if not response.is_success:
            logger.error(
                "SendGrid API error: %s - %s", response.status_code, response.text
            )
            raise SendGridError(
                f"SendGrid returned {response.status_code}",
                status_code=response.status_code,
            )
        return response

    async def send(
        self,
        to_email: str,
        subject: str,
        body: str,
        html_body: Optional[str] = None,
        reply_to: Optional[str] = None,
    ) -> None:
        """
        Send one email. Raises SendGridError when SendGrid rejects it.
        """
        content = [{"type": "text/plain", "value": body}]
        if html_body:
            content.append({"type": "text/html", "value": html_body})

        payload: dict[str, Any] = {
            "personalizations": [{"to": [{"email": to_email}]}],
            "from": {"email": self.from_email, "name": self.from_name},
            "subject": subject,
            "content": content,
        }
        if reply_to:
            payload["reply_to"] = {"email": reply_to}

        await self._request("POST", "/mail/send", json_data=payload)

    async def get_profile(self) -> dict:
        """Fetch the account profile. Used as a connectivity check."""
        response = await self._request("GET", "/user/profile")
        return response.json()
