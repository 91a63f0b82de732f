"""
OrderDesk Backend - Resend Email Provider
=========================================

What:  EmailProvider implementation over the Resend HTTP API.
How:   POST {RESEND_API_URL}/emails with a bearer API key, using a shared
       httpx.AsyncClient. One attempt per send.
Who:   Built by the application factory; used by NotificationSender.

Failure mapping (all → UpstreamError 502 "Failed to send email"):
    - transport fault (connect error, timeout, ...)
    - non-2xx status
    - 2xx body carrying an "error" object, or no message id
"""

import logging
from typing import Optional

import httpx

from orderdesk.exceptions import ConfigError, UpstreamError
from orderdesk.services.email_base import EmailMessage, EmailProvider

logger = logging.getLogger(__name__)

SEND_FAILED_MESSAGE = "Failed to send email"


class ResendEmailProvider(EmailProvider):
    """Sends mail through Resend."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.resend.com",
        client: Optional[httpx.AsyncClient] = None,
    ):
        if not api_key:
            raise ConfigError(message="Missing RESEND_API_KEY", context={"missing": ["RESEND_API_KEY"]})
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient()
        self._owns_client = client is None

    async def send(self, message: EmailMessage) -> str:
        payload = {
            "from": message.sender,
            "to": message.to,
            "subject": message.subject,
            "html": message.html,
        }
        try:
            response = await self._client.post(
                f"{self._base_url}/emails",
                json=payload,
                headers={"Authorization": f"Bearer {self._api_key}"},
            )
        except httpx.HTTPError as e:
            logger.error("Resend exception: %s", str(e))
            raise UpstreamError(
                message=SEND_FAILED_MESSAGE,
                status_code=502,
                context={"error_type": type(e).__name__, "error": str(e)},
            )

        body = _json_or_none(response)
        error = body.get("error") if isinstance(body, dict) else None
        if response.is_error or error:
            detail = error or body or response.text
            logger.error("Resend error (%d): %s", response.status_code, detail)
            raise UpstreamError(
                message=SEND_FAILED_MESSAGE,
                status_code=502,
                context={"status": response.status_code, "error": detail},
            )

        message_id = body.get("id") if isinstance(body, dict) else None
        if not message_id:
            logger.error("Resend accepted the request but returned no id: %s", body)
            raise UpstreamError(
                message=SEND_FAILED_MESSAGE,
                status_code=502,
                context={"status": response.status_code, "body": body},
            )
        return str(message_id)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


def _json_or_none(response: httpx.Response):
    try:
        return response.json()
    except ValueError:
        return None
