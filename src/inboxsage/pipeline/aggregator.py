"""Per-user content aggregation: fetch sources and store new articles."""

import asyncio
from datetime import datetime
from typing import Callable

from inboxsage.core.source import Source
from inboxsage.database.repository import ArticleRepository
from inboxsage.database.source_repository import SourceRepository
from inboxsage.pipeline.collectors import BaseCollector, create_collector
from inboxsage.utils.date_utils import now_utc
from inboxsage.utils.exceptions import SourceNotFoundError
from inboxsage.utils.logging import get_logger

logger = get_logger(__name__)


class ContentAggregator:
    """Fetches a user's active sources and persists unseen entries."""

    def __init__(
        self,
        source_repository: SourceRepository,
        article_repository: ArticleRepository,
        collector_factory: Callable[[Source], BaseCollector] = create_collector,
        clock: Callable[[], datetime] = now_utc,
    ):
        """Initialize aggregator.

        Args:
            source_repository: Source persistence.
            article_repository: Article persistence (dedup on source + URL).
            collector_factory: Builds the collector for a source.
            clock: Current-time provider.
        """
        self.sources = source_repository
        self.articles = article_repository
        self.collector_factory = collector_factory
        self.clock = clock

    async def fetch_all_user_content(self, user_id: str) -> int:
        """Fetch every active source of a user concurrently.

        A failing source is logged and does not affect the others.

        Args:
            user_id: Owner of the sources.

        Returns:
            Number of new articles stored across all sources.
        """
        sources = self.sources.list_active_sources(user_id)
        logger.info("fetching_user_content", user_id=user_id, source_count=len(sources))

        results = await asyncio.gather(
            *(self.fetch_source_content(source.id) for source in sources),
            return_exceptions=True,
        )

        total_saved = 0
        for source, result in zip(sources, results):
            if isinstance(result, BaseException):
                logger.error(
                    "source_fetch_failed",
                    user_id=user_id,
                    source_id=source.id,
                    error=str(result),
                )
                continue
            total_saved += result

        logger.info("user_content_fetched", user_id=user_id, new_articles=total_saved)
        return total_saved

    async def fetch_source_content(self, source_id: str) -> int:
        """Fetch one source and store its unseen entries.

        The source's fetch bookkeeping is updated on every attempt: success
        resets the error counter, failure increments it. Either way
        last_fetched is stamped.

        Args:
            source_id: Source to fetch.

        Returns:
            Number of new articles stored.

        Raises:
            SourceNotFoundError: If the source is missing or inactive.
            CollectorError: If the feed cannot be fetched or parsed.
        """
        source = self.sources.get_source(source_id)
        if source is None or not source.is_active:
            raise SourceNotFoundError(f"Source {source_id} not found or inactive")

        collector = self.collector_factory(source)
        try:
            entries = await collector.collect()
        except Exception:
            self.sources.record_fetch_failure(source.id, self.clock())
            raise

        saved = self.articles.save_feed_entries(source, entries) if entries else 0
        self.sources.record_fetch_success(source.id, self.clock())

        logger.info(
            "source_fetched",
            source_id=source.id,
            entries=len(entries),
            new_articles=saved,
        )
        return saved

    async def trigger_manual_fetch(self, source_id: str, user_id: str) -> int:
        """Fetch one source on behalf of its owner.

        Raises:
            SourceNotFoundError: If the source does not belong to the user.
        """
        source = self.sources.get_user_source(source_id, user_id)
        if source is None:
            raise SourceNotFoundError("Source not found or access denied")

        return await self.fetch_source_content(source.id)
