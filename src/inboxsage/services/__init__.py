"""Services for email rendering and delivery."""

from inboxsage.services.digest_formatter import HtmlEmailFormatter
from inboxsage.services.email_service import EmailResult, EmailService

__all__ = ["EmailResult", "EmailService", "HtmlEmailFormatter"]
