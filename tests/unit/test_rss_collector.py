# tests/unit/test_rss_collector.py
"""Unit tests for feed collectors."""

from datetime import datetime, timezone

import httpx
import pytest

from inboxsage.core.enums import SourceType
from inboxsage.core.source import Source
from inboxsage.pipeline.collectors import RSSCollector, UnsupportedCollector, create_collector
from inboxsage.utils.exceptions import CollectorError

FEED_URL = "https://blog.example.com/feed.xml"

FEED_WITH_MISSING_LINK = """<?xml version="1.0"?>
<rss version="2.0"><channel><title>t</title>
  <item><title>Has link</title><link>https://blog.example.com/a</link></item>
  <item><title>No link</title><description>orphan</description></item>
  <item><link>https://blog.example.com/untitled</link></item>
</channel></rss>
"""


def make_source(source_type=SourceType.RSS) -> Source:
    return Source(id="s1", user_id="u1", name="Example", url=FEED_URL, type=source_type)


def serving(body: str, status_code: int = 200) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        assert str(request.url) == FEED_URL
        return httpx.Response(status_code, text=body)

    return httpx.MockTransport(handler)


@pytest.mark.unit
class TestRSSCollector:
    """Tests for RSSCollector."""

    @pytest.mark.asyncio
    async def test_collect_entries(self, sample_rss_feed):
        """Should normalize every linked entry in the feed."""
        collector = RSSCollector(make_source(), transport=serving(sample_rss_feed))

        entries = await collector.collect()

        assert [e.url for e in entries] == [
            "https://blog.example.com/evaluating-prompts",
            "https://blog.example.com/design-review",
            "https://blog.example.com/shipping-fridays",
        ]

        first = entries[0]
        assert first.title == "Evaluating prompts like code"
        assert first.author == "Dana Reyes"
        assert first.published_at == datetime(2026, 10, 17, 8, 30, tzinfo=timezone.utc)
        assert first.image_url == "https://blog.example.com/eval.png"
        assert "evaluation problems" in first.content
        assert first.excerpt == "How we test prompts before every deploy."
        assert first.reading_time == 1

    @pytest.mark.asyncio
    async def test_summary_used_without_content(self, sample_rss_feed):
        """Should fall back to the description when there is no full body."""
        collector = RSSCollector(make_source(), transport=serving(sample_rss_feed))

        entries = await collector.collect()

        second = entries[1]
        assert second.content == "What the design team learned this quarter."
        assert second.author is None
        assert second.image_url is None

    @pytest.mark.asyncio
    async def test_missing_date_uses_fetch_time(self, sample_rss_feed):
        """Should stamp undated entries with the fetch time."""
        collector = RSSCollector(make_source(), transport=serving(sample_rss_feed))
        before = datetime.now(timezone.utc)

        entries = await collector.collect()

        assert entries[2].published_at >= before

    @pytest.mark.asyncio
    async def test_skips_entries_without_link(self):
        """Should drop entries with no link and title untitled ones."""
        collector = RSSCollector(make_source(), transport=serving(FEED_WITH_MISSING_LINK))

        entries = await collector.collect()

        assert [e.url for e in entries] == [
            "https://blog.example.com/a",
            "https://blog.example.com/untitled",
        ]
        assert entries[1].title == "Untitled"

    @pytest.mark.asyncio
    async def test_http_error(self):
        """Should raise CollectorError on an HTTP error status."""
        collector = RSSCollector(make_source(), transport=serving("gone", status_code=404))

        with pytest.raises(CollectorError):
            await collector.collect()

    @pytest.mark.asyncio
    async def test_connection_error(self):
        """Should raise CollectorError when the request fails."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        collector = RSSCollector(make_source(), transport=httpx.MockTransport(handler))

        with pytest.raises(CollectorError):
            await collector.collect()

    @pytest.mark.asyncio
    async def test_unparseable_feed(self):
        """Should raise CollectorError when nothing can be parsed."""
        collector = RSSCollector(make_source(), transport=serving("<html><body>not a feed"))

        with pytest.raises(CollectorError):
            await collector.collect()


@pytest.mark.unit
class TestCreateCollector:
    """Tests for the collector factory."""

    def test_rss_and_medium_use_rss(self):
        """Should fetch RSS and Medium sources as feeds."""
        assert isinstance(create_collector(make_source(SourceType.RSS)), RSSCollector)
        assert isinstance(create_collector(make_source(SourceType.MEDIUM)), RSSCollector)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "source_type",
        [SourceType.NEWSLETTER, SourceType.TWITTER, SourceType.CUSTOM_URL],
    )
    async def test_other_types_yield_nothing(self, source_type):
        """Should return no entries for unsupported source types."""
        collector = create_collector(make_source(source_type))

        assert isinstance(collector, UnsupportedCollector)
        assert await collector.collect() == []
