"""Digest generator: compose, persist and deliver per-user digests."""

import asyncio
import random
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Sequence

from inboxsage.core.article import Article
from inboxsage.core.digest import Digest, DigestArticle, DigestItemPreview, DigestPreview
from inboxsage.core.enums import ScheduleType
from inboxsage.core.user import User
from inboxsage.database.digest_repository import DigestRepository
from inboxsage.database.repository import ArticleRepository
from inboxsage.database.user_repository import UserRepository
from inboxsage.services.email_service import EmailResult, EmailService
from inboxsage.utils.date_utils import format_long_date, now_utc
from inboxsage.utils.exceptions import (
    ConfigurationError,
    DigestDeliveryError,
    NoContentError,
    UserNotFoundError,
)
from inboxsage.utils.logging import get_logger

logger = get_logger(__name__)

HIGHLIGHT_COUNT = 3
HIGHLIGHT_SUMMARY_LENGTH = 100

INTRODUCTIONS = [
    "Here's your curated digest with {count} articles from your favorite sources.",
    "We've summarized {count} articles to help you stay informed.",
    "Your personalized digest contains {count} key articles from this period.",
]

CONCLUSIONS = [
    "Thanks for reading! We hope you found these insights valuable.",
    "Stay curious and keep learning. See you in the next digest!",
    "That's a wrap for this digest. Happy reading!",
]


def generate_digest_title(schedule_type: ScheduleType, date: datetime) -> str:
    """Schedule-dependent digest title, e.g. "Daily Digest - October 18, 2026"."""
    date_str = format_long_date(date)

    if schedule_type == ScheduleType.DAILY:
        return f"Daily Digest - {date_str}"
    if schedule_type == ScheduleType.WEEKLY:
        return f"Weekly Digest - Week of {date_str}"
    return f"InboxSage Digest - {date_str}"


def format_highlight(article: Article) -> str:
    """One-line highlight: title plus the start of the summary."""
    return f"{article.title} - {(article.summary or '')[:HIGHLIGHT_SUMMARY_LENGTH]}..."


class DigestGenerator:
    """Builds digests from a user's summarized articles and sends them."""

    def __init__(
        self,
        user_repository: UserRepository,
        article_repository: ArticleRepository,
        digest_repository: DigestRepository,
        email_service: Optional[EmailService] = None,
        lookback_days: int = 7,
        chooser: Callable[[Sequence[str]], str] = random.choice,
        clock: Callable[[], datetime] = now_utc,
    ):
        """Initialize digest generator.

        Args:
            user_repository: User and profile lookup.
            article_repository: Digest candidate selection.
            digest_repository: Digest persistence.
            email_service: Delivery service (required for sending only).
            lookback_days: Age window for eligible articles.
            chooser: Picks the introduction and conclusion sentences.
            clock: Current-time provider.
        """
        self.users = user_repository
        self.articles = article_repository
        self.digests = digest_repository
        self.email_service = email_service
        self.lookback_days = lookback_days
        self.chooser = chooser
        self.clock = clock

    def _load_user(self, user_id: str) -> User:
        user = self.users.get_user(user_id)
        if user is None or user.profile is None:
            raise UserNotFoundError(f"User or profile not found: {user_id}")
        return user

    async def generate_user_digest(self, user_id: str) -> DigestPreview:
        """Compose a digest from the user's best recent articles.

        Args:
            user_id: Recipient user.

        Returns:
            Composed, unsaved digest.

        Raises:
            UserNotFoundError: If the user or profile is missing.
            NoContentError: If no article is eligible.
        """
        user = self._load_user(user_id)
        now = self.clock()

        articles = self.articles.get_digest_candidates(
            user_id,
            since=now - timedelta(days=self.lookback_days),
            limit=user.profile.max_items_per_digest,
        )
        if not articles:
            raise NoContentError("No articles available for digest")

        return self.build_digest(user, articles, now)

    def build_digest(self, user: User, articles: List[Article], now: datetime) -> DigestPreview:
        """Assemble title, highlights, items and framing text for ranked articles."""
        count = len(articles)

        return DigestPreview(
            title=generate_digest_title(user.profile.schedule_type, now),
            introduction=self.chooser(INTRODUCTIONS).format(count=count),
            highlights=[format_highlight(a) for a in articles[:HIGHLIGHT_COUNT]],
            items=[
                DigestItemPreview(
                    article=DigestArticle.from_article(article),
                    is_highlight=index < HIGHLIGHT_COUNT,
                    order=index,
                )
                for index, article in enumerate(articles)
            ],
            conclusion=self.chooser(CONCLUSIONS),
            generated_at=now,
        )

    async def get_digest_preview(self, user_id: str) -> DigestPreview:
        """Compose a digest without saving or sending it."""
        return await self.generate_user_digest(user_id)

    async def create_and_send_digest(
        self, user_id: str, scheduled_for: Optional[datetime] = None
    ) -> Digest:
        """Compose, persist and email a digest to every configured recipient.

        Recipients are the profile's digest addresses, or the account email
        when none are configured. Sends that succeeded are not undone when
        another recipient fails.

        Args:
            user_id: Recipient user.
            scheduled_for: Delivery slot the digest was generated for.

        Returns:
            Stored digest marked as sent.

        Raises:
            UserNotFoundError: If the user or profile is missing.
            NoContentError: If no article is eligible.
            DigestDeliveryError: If any recipient could not be reached.
            ConfigurationError: If no email service is configured.
        """
        if self.email_service is None:
            raise ConfigurationError("No email service configured")

        user = self._load_user(user_id)
        preview = await self.generate_user_digest(user_id)
        digest = self.digests.save_digest(user_id, preview, scheduled_for=scheduled_for)

        recipients = user.profile.digest_emails or [user.email]
        results = await asyncio.gather(
            *(
                self.email_service.send_digest(
                    to=recipient,
                    preview=preview,
                    user_id=user.id,
                    user_name=user.name,
                )
                for recipient in recipients
            ),
            return_exceptions=True,
        )

        errors = []
        message_ids = []
        for recipient, result in zip(recipients, results):
            if isinstance(result, BaseException):
                errors.append(f"{recipient}: {result}")
            elif not result.success:
                errors.append(f"{recipient}: {result.message}")
            else:
                message_ids.append(result.message_id)

        if errors:
            error = "; ".join(errors)
            self.digests.mark_failed(digest.id, error)
            logger.error(
                "digest_delivery_failed",
                user_id=user_id,
                digest_id=digest.id,
                failed=len(errors),
                recipients=len(recipients),
            )
            raise DigestDeliveryError(error)

        self.digests.mark_sent(digest.id, self.clock(), message_ids[0] if message_ids else None)
        logger.info(
            "digest_sent",
            user_id=user_id,
            digest_id=digest.id,
            recipients=len(recipients),
            items=len(preview.items),
        )

        return self.digests.get_digest(digest.id) or digest

    async def send_test_digest(self, user_id: str) -> EmailResult:
        """Send a connectivity test email to the user's account address.

        Raises:
            UserNotFoundError: If the user does not exist.
            DigestDeliveryError: If the email could not be sent.
        """
        if self.email_service is None:
            raise ConfigurationError("No email service configured")

        user = self.users.get_user(user_id)
        if user is None:
            raise UserNotFoundError(f"User not found: {user_id}")

        result = await self.email_service.send_test_email(user.email, user.name)
        if not result.success:
            raise DigestDeliveryError(result.message or "Failed to send test email")

        return result
