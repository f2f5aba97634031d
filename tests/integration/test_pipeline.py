# tests/integration/test_pipeline.py
"""Integration tests for fetch, summarize and digest delivery over SQLite."""

import httpx
import pytest

from inboxsage.pipeline.collectors import create_collector
from inboxsage.pipeline.orchestrator import PipelineOrchestrator
from inboxsage.utils.exceptions import (
    CollectorError,
    DigestDeliveryError,
    EmailServiceError,
    SourceNotFoundError,
)


@pytest.fixture
def orchestrator(test_config, test_db, mock_llm_client, mock_mailer, clock):
    return PipelineOrchestrator(
        test_config,
        test_db,
        llm_client=mock_llm_client,
        mailer=mock_mailer,
        clock=clock,
    )


def serve_feed(orchestrator, body, status_code=200):
    """Point the aggregator at an in-memory feed server."""
    transport = httpx.MockTransport(lambda request: httpx.Response(status_code, text=body))
    orchestrator.aggregator.collector_factory = lambda source: create_collector(
        source, transport=transport
    )


@pytest.mark.integration
class TestContentAggregation:
    """Integration tests for ContentAggregator."""

    @pytest.mark.asyncio
    async def test_fetch_new_source(self, orchestrator, sample_source, sample_rss_feed, fixed_now):
        """Should store three articles and reset fetch bookkeeping."""
        sources = orchestrator.source_repository
        sources.record_fetch_failure(sample_source.id, fixed_now)
        serve_feed(orchestrator, sample_rss_feed)

        saved = await orchestrator.aggregator.fetch_source_content(sample_source.id)

        assert saved == 3
        assert orchestrator.article_repository.count_for_source(sample_source.id) == 3
        source = sources.get_source(sample_source.id)
        assert source.fetch_errors == 0
        assert source.last_fetched == fixed_now

    @pytest.mark.asyncio
    async def test_refetch_is_idempotent(self, orchestrator, sample_user, sample_source, sample_rss_feed):
        """Should store nothing new when the feed is unchanged."""
        serve_feed(orchestrator, sample_rss_feed)

        first = await orchestrator.aggregator.fetch_all_user_content(sample_user.id)
        second = await orchestrator.aggregator.fetch_all_user_content(sample_user.id)

        assert first == 3
        assert second == 0
        assert orchestrator.article_repository.count_for_source(sample_source.id) == 3

    @pytest.mark.asyncio
    async def test_fetch_failure_counted(self, orchestrator, sample_source):
        """Should count a failed fetch and surface the error."""
        serve_feed(orchestrator, "unavailable", status_code=503)

        with pytest.raises(CollectorError):
            await orchestrator.aggregator.fetch_source_content(sample_source.id)

        assert orchestrator.source_repository.get_source(sample_source.id).fetch_errors == 1

    @pytest.mark.asyncio
    async def test_failing_source_isolated(self, orchestrator, sample_user, sample_source, sample_rss_feed):
        """Should keep fetching other sources when one fails."""
        broken = orchestrator.source_repository.create_source(
            sample_user.id, "Broken", "https://broken.example.com/feed"
        )

        def handler(request):
            if request.url.host == "broken.example.com":
                return httpx.Response(500, text="error")
            return httpx.Response(200, text=sample_rss_feed)

        transport = httpx.MockTransport(handler)
        orchestrator.aggregator.collector_factory = lambda source: create_collector(
            source, transport=transport
        )

        saved = await orchestrator.aggregator.fetch_all_user_content(sample_user.id)

        assert saved == 3
        assert orchestrator.source_repository.get_source(broken.id).fetch_errors == 1
        assert orchestrator.source_repository.get_source(sample_source.id).fetch_errors == 0

    @pytest.mark.asyncio
    async def test_manual_fetch_checks_owner(self, orchestrator, sample_source):
        """Should refuse to fetch another user's source."""
        other = orchestrator.user_repository.create_user("other@example.com", "Other")

        with pytest.raises(SourceNotFoundError, match="Source not found or access denied"):
            await orchestrator.aggregator.trigger_manual_fetch(sample_source.id, other.id)

    @pytest.mark.asyncio
    async def test_inactive_source_not_fetched(self, orchestrator, sample_source):
        """Should refuse to fetch an inactive source."""
        orchestrator.source_repository.set_active(sample_source.id, False)

        with pytest.raises(SourceNotFoundError):
            await orchestrator.aggregator.fetch_source_content(sample_source.id)


@pytest.mark.integration
class TestSummarization:
    """Integration tests for ArticleSummarizer over stored articles."""

    @pytest.mark.asyncio
    async def test_every_article_processed(self, orchestrator, sample_user, sample_source, sample_rss_feed):
        """Should mark every attempted article processed, including failures."""
        serve_feed(orchestrator, sample_rss_feed)
        await orchestrator.aggregator.fetch_source_content(sample_source.id)

        stats = await orchestrator.summarizer.process_articles(sample_user.id, max_articles=10)

        # Two feed entries carry only a one-line description
        assert stats == {"attempted": 3, "succeeded": 1, "failed": 2}
        assert orchestrator.article_repository.get_unprocessed_for_user(sample_user.id, 10) == []

    @pytest.mark.asyncio
    async def test_failed_llm_call_still_processed(
        self, orchestrator, sample_user, sample_source, make_entries, mock_llm_client
    ):
        """Should mark articles processed when the summary call raises."""
        orchestrator.article_repository.save_feed_entries(sample_source, make_entries(2))
        mock_llm_client.create_completion.side_effect = RuntimeError("network down")

        stats = await orchestrator.summarizer.process_articles(sample_user.id)

        assert stats["failed"] == 2
        assert orchestrator.article_repository.get_unprocessed_for_user(sample_user.id, 10) == []


@pytest.mark.integration
class TestDigestDelivery:
    """Integration tests for digest composition and delivery."""

    async def summarize(self, orchestrator, sample_user, sample_source, make_entries, count):
        orchestrator.article_repository.save_feed_entries(sample_source, make_entries(count))
        await orchestrator.summarizer.process_articles(sample_user.id, max_articles=count)

    @pytest.mark.asyncio
    async def test_digest_respects_item_cap(
        self, orchestrator, sample_user, sample_source, make_entries, mock_mailer
    ):
        """Should send exactly five items with the top three highlighted."""
        await self.summarize(orchestrator, sample_user, sample_source, make_entries, 12)
        profile = sample_user.profile.model_copy(update={"max_items_per_digest": 5})
        orchestrator.user_repository.update_profile(profile)

        digest = await orchestrator.digest_generator.create_and_send_digest(sample_user.id)

        assert len(digest.items) == 5
        assert [item.is_highlight for item in digest.items] == [True, True, True, False, False]
        assert [item.order for item in digest.items] == [0, 1, 2, 3, 4]
        assert digest.email_sent is True
        assert digest.email_id == "msg-1"
        mock_mailer.send_email.assert_awaited_once()
        assert mock_mailer.send_email.call_args.kwargs["to"] == ["reader@example.com"]

    @pytest.mark.asyncio
    async def test_one_recipient_fails(
        self, orchestrator, sample_user, sample_source, make_entries, mock_mailer
    ):
        """Should leave the digest unsent with an error when one recipient fails."""
        await self.summarize(orchestrator, sample_user, sample_source, make_entries, 3)
        profile = sample_user.profile.model_copy(
            update={"digest_emails": ["one@example.com", "two@example.com"]}
        )
        orchestrator.user_repository.update_profile(profile)

        async def send_email(**kwargs):
            if kwargs["to"] == ["two@example.com"]:
                raise EmailServiceError("mailbox unavailable")
            return "msg-ok"

        mock_mailer.send_email.side_effect = send_email

        with pytest.raises(DigestDeliveryError):
            await orchestrator.digest_generator.create_and_send_digest(sample_user.id)

        assert mock_mailer.send_email.await_count == 2
        digest = orchestrator.digest_repository.list_digests(sample_user.id)[0]
        assert digest.email_sent is False
        assert "two@example.com: mailbox unavailable" in digest.email_error

    @pytest.mark.asyncio
    async def test_daily_digest_sent_once(
        self, orchestrator, sample_user, sample_source, make_entries, mock_mailer
    ):
        """Should not send a second daily digest in the same day."""
        await self.summarize(orchestrator, sample_user, sample_source, make_entries, 3)
        scheduler = orchestrator.build_scheduler(enabled=False)

        first = await scheduler.check_daily_digests()
        second = await scheduler.check_daily_digests()

        assert first == {"users": 1, "succeeded": 1, "failed": 0}
        assert second == {"users": 1, "succeeded": 1, "failed": 0}
        mock_mailer.send_email.assert_awaited_once()
        assert len(orchestrator.digest_repository.list_digests(sample_user.id)) == 1

    @pytest.mark.asyncio
    async def test_sent_digest_reads_back_unchanged(
        self, orchestrator, sample_user, sample_source, make_entries
    ):
        """Should keep item order and highlights after sending."""
        await self.summarize(orchestrator, sample_user, sample_source, make_entries, 4)
        preview = await orchestrator.digest_generator.get_digest_preview(sample_user.id)

        digest = await orchestrator.digest_generator.create_and_send_digest(sample_user.id)
        stored = orchestrator.digest_repository.get_digest(digest.id)

        assert [i.article_id for i in stored.items] == [i.article.id for i in preview.items]
        assert [i.is_highlight for i in stored.items] == [i.is_highlight for i in preview.items]
