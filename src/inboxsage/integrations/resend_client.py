"""Resend transactional email API client."""

from typing import Dict, List, Optional

import httpx

from inboxsage.utils.exceptions import ConfigurationError, EmailServiceError
from inboxsage.utils.logging import get_logger

logger = get_logger(__name__)


class ResendClient:
    """Minimal async client for the Resend `/emails` endpoint."""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://api.resend.com",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize Resend client.

        Args:
            api_key: Resend API key.
            base_url: API base URL.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (used by tests).

        Raises:
            ConfigurationError: If no API key is configured.
        """
        if not api_key:
            raise ConfigurationError("RESEND_API_KEY is not configured")

        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def send_email(
        self,
        from_address: str,
        to: List[str],
        subject: str,
        html: str,
        headers: Optional[Dict[str, str]] = None,
    ) -> str:
        """Send one email.

        Args:
            from_address: Sender, e.g. "InboxSage <digest@inboxsage.com>".
            to: Recipient addresses.
            subject: Subject line.
            html: HTML body.
            headers: Extra email headers.

        Returns:
            Provider message id.

        Raises:
            EmailServiceError: If the request fails or is rejected.
        """
        payload: Dict[str, object] = {
            "from": from_address,
            "to": to,
            "subject": subject,
            "html": html,
        }
        if headers:
            payload["headers"] = headers

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self.transport,
                headers={"Authorization": f"Bearer {self.api_key}"},
            ) as client:
                response = await client.post("/emails", json=payload)
                response.raise_for_status()
                data = response.json()

        except httpx.HTTPStatusError as e:
            message = _error_message(e.response)
            logger.error(
                "resend_request_rejected",
                status_code=e.response.status_code,
                error=message,
            )
            raise EmailServiceError(message) from e

        except (httpx.HTTPError, ValueError) as e:
            logger.error("resend_request_failed", error=str(e))
            raise EmailServiceError(f"Email request failed: {e}") from e

        message_id = data.get("id") if isinstance(data, dict) else None
        if not message_id:
            raise EmailServiceError("Email provider returned no message id")

        logger.debug("resend_email_accepted", message_id=message_id, recipients=len(to))
        return message_id


def _error_message(response: httpx.Response) -> str:
    """Extract the provider's error message from a failed response."""
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"

    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"HTTP {response.status_code}"
