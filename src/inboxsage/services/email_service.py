"""Email service for sending digest and test emails."""

from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol
from urllib.parse import urlencode

from inboxsage.core.digest import DigestPreview
from inboxsage.services.digest_formatter import HtmlEmailFormatter
from inboxsage.utils.exceptions import EmailServiceError
from inboxsage.utils.logging import get_logger

logger = get_logger(__name__)

TEST_EMAIL_SUBJECT = "InboxSage Test Email"


@dataclass
class EmailResult:
    """Result of an email operation."""

    success: bool
    message: str
    message_id: Optional[str] = None


class Mailer(Protocol):
    """Anything that can deliver one HTML email and return its message id."""

    async def send_email(
        self,
        from_address: str,
        to: List[str],
        subject: str,
        html: str,
        headers: Optional[Dict[str, str]] = None,
    ) -> str: ...


class EmailService:
    """Renders emails and hands them to the mail provider.

    Delivery failures are reported through EmailResult rather than raised,
    so a caller sending to several recipients sees every outcome.
    """

    def __init__(
        self,
        mailer: Mailer,
        formatter: Optional[HtmlEmailFormatter] = None,
        from_address: str = "InboxSage <digest@inboxsage.com>",
        test_from_address: str = "InboxSage <test@inboxsage.com>",
        unsubscribe_base_url: str = "http://localhost:3000/unsubscribe",
        preferences_url: str = "http://localhost:3000/dashboard/settings",
    ) -> None:
        """Initialize the email service.

        Args:
            mailer: Mail provider client.
            formatter: HTML formatter (created when omitted).
            from_address: Sender for digests.
            test_from_address: Sender for test emails.
            unsubscribe_base_url: Unsubscribe endpoint; the user id is appended as a token.
            preferences_url: Link to the settings page.
        """
        self.mailer = mailer
        self.formatter = formatter or HtmlEmailFormatter()
        self.from_address = from_address
        self.test_from_address = test_from_address
        self.unsubscribe_base_url = unsubscribe_base_url
        self.preferences_url = preferences_url

    def unsubscribe_url(self, user_id: str) -> str:
        """Per-user unsubscribe link."""
        return f"{self.unsubscribe_base_url}?{urlencode({'token': user_id})}"

    async def send_digest(
        self,
        to: str,
        preview: DigestPreview,
        user_id: str,
        user_name: str,
    ) -> EmailResult:
        """Send a digest to one recipient.

        Args:
            to: Recipient address.
            preview: Digest content.
            user_id: Owner of the digest (for the unsubscribe link).
            user_name: Name used in the greeting.

        Returns:
            EmailResult with the provider message id on success.
        """
        unsubscribe_url = self.unsubscribe_url(user_id)
        html = self.formatter.format_digest(
            preview,
            user_name=user_name,
            unsubscribe_url=unsubscribe_url,
            preferences_url=self.preferences_url,
        )

        try:
            message_id = await self.mailer.send_email(
                from_address=self.from_address,
                to=[to],
                subject=preview.title,
                html=html,
                headers={
                    "List-Unsubscribe": f"<{unsubscribe_url}>",
                    "List-Unsubscribe-Post": "List-Unsubscribe=One-Click",
                },
            )
        except EmailServiceError as e:
            logger.error("digest_email_failed", user_id=user_id, recipient=to, error=str(e))
            return EmailResult(success=False, message=str(e))

        logger.info("digest_email_sent", user_id=user_id, recipient=to, message_id=message_id)
        return EmailResult(
            success=True,
            message=f"Email sent successfully to {to}",
            message_id=message_id,
        )

    async def send_test_email(self, to: str, user_name: str) -> EmailResult:
        """Send the connectivity test email."""
        try:
            message_id = await self.mailer.send_email(
                from_address=self.test_from_address,
                to=[to],
                subject=TEST_EMAIL_SUBJECT,
                html=self.formatter.format_test_email(user_name),
            )
        except EmailServiceError as e:
            logger.error("test_email_failed", recipient=to, error=str(e))
            return EmailResult(success=False, message=str(e))

        logger.info("test_email_sent", recipient=to, message_id=message_id)
        return EmailResult(
            success=True,
            message=f"Test email sent to {to}",
            message_id=message_id,
        )
