"""Third-party service clients."""

from inboxsage.integrations.openai_client import OpenAIClient, get_usage_summary
from inboxsage.integrations.resend_client import ResendClient

__all__ = ["OpenAIClient", "ResendClient", "get_usage_summary"]
