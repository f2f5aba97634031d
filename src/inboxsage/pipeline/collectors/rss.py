"""RSS/Atom feed collector."""

from typing import Any, List, Optional

import feedparser
import httpx

from inboxsage.core.source import FeedEntry, Source
from inboxsage.pipeline.collectors.base import BaseCollector
from inboxsage.utils.date_utils import now_utc, parse_date
from inboxsage.utils.exceptions import CollectorError
from inboxsage.utils.logging import get_logger
from inboxsage.utils.text_utils import (
    estimate_reading_time,
    extract_excerpt,
    extract_image_url,
)

logger = get_logger(__name__)


class RSSCollector(BaseCollector):
    """Collector for RSS and Atom feeds."""

    def __init__(
        self,
        source: Source,
        timeout: int = 30,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize RSS collector.

        Args:
            source: Source to fetch.
            timeout: HTTP request timeout in seconds.
            transport: Optional httpx transport (used by tests).
        """
        super().__init__(source)
        self.timeout = timeout
        self.transport = transport

    async def collect(self) -> List[FeedEntry]:
        """Collect entries from the RSS feed.

        Returns:
            List of normalized feed entries.

        Raises:
            CollectorError: If RSS feed fetch or parse fails.
        """
        logger.info(
            "collecting_rss",
            source_id=self.source.id,
            feed_url=self.source.url,
        )

        feed_content = await self._fetch_feed()
        feed = feedparser.parse(feed_content)

        if feed.bozo:
            # feedparser sets bozo for recoverable quirks too; only fail when nothing parsed
            if not feed.entries:
                raise CollectorError(
                    f"Failed to parse RSS feed {self.source.url}: {feed.get('bozo_exception')}"
                )
            logger.warning(
                "rss_parse_warning",
                source_id=self.source.id,
                exception=str(feed.get("bozo_exception")),
            )

        entries = self._extract_entries(feed)

        logger.info(
            "rss_collection_complete",
            source_id=self.source.id,
            entries_collected=len(entries),
        )

        return entries

    async def _fetch_feed(self) -> str:
        """Fetch raw feed content via HTTP.

        Raises:
            CollectorError: If HTTP request fails.
        """
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                transport=self.transport,
            ) as client:
                response = await client.get(self.source.url)
                response.raise_for_status()
                return response.text

        except httpx.HTTPError as e:
            logger.error("rss_fetch_failed", source_id=self.source.id, error=str(e))
            raise CollectorError(f"HTTP request failed for {self.source.url}: {e}") from e

    def _extract_entries(self, feed: Any) -> List[FeedEntry]:
        """Normalize parsed feed entries.

        Args:
            feed: Parsed feedparser feed object.

        Returns:
            Entries that carry a link.
        """
        fetched_at = now_utc()
        entries = []

        for entry in feed.entries:
            url = entry.get("link")
            if not url:
                logger.debug("rss_entry_no_link", entry_title=entry.get("title", "Unknown"))
                continue

            summary = entry.get("summary") or ""
            content = self._entry_content(entry) or summary

            published_at = parse_date(entry.get("published") or entry.get("updated"))

            entries.append(
                FeedEntry(
                    title=(entry.get("title") or "").strip() or "Untitled",
                    url=url,
                    content=content,
                    excerpt=extract_excerpt(summary or content),
                    author=entry.get("author") or None,
                    published_at=published_at or fetched_at,
                    reading_time=estimate_reading_time(content),
                    image_url=extract_image_url(content),
                )
            )

        return entries

    def _entry_content(self, entry: Any) -> str:
        """Full body (content:encoded / atom:content) if the feed provides one."""
        for block in entry.get("content") or []:
            value = block.get("value")
            if value:
                return value
        return ""
