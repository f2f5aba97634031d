# tests/conftest.py
"""Shared test fixtures and configuration."""

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Generator, List
from unittest.mock import AsyncMock, Mock

import pytest

from inboxsage.core.config import Config
from inboxsage.core.source import FeedEntry, Source
from inboxsage.core.user import User, UserProfile
from inboxsage.database.connection import DatabaseConnection
from inboxsage.database.digest_repository import DigestRepository
from inboxsage.database.repository import ArticleRepository
from inboxsage.database.source_repository import SourceRepository
from inboxsage.database.user_repository import UserRepository

# Sunday, 09:00 UTC
FIXED_NOW = datetime(2026, 10, 18, 9, 0, tzinfo=timezone.utc)

ARTICLE_BODY = (
    "<p>Teams shipping AI features keep running into the same problem: evaluation. "
    "This piece walks through how one startup built a small regression suite for "
    "its prompts and what changed once every deploy ran it.</p>"
)

SAMPLE_RSS_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"
     xmlns:content="http://purl.org/rss/1.0/modules/content/"
     xmlns:dc="http://purl.org/dc/elements/1.1/">
  <channel>
    <title>Example Engineering</title>
    <link>https://blog.example.com</link>
    <description>Posts from the example team</description>
    <item>
      <title>Evaluating prompts like code</title>
      <link>https://blog.example.com/evaluating-prompts</link>
      <description>How we test prompts before every deploy.</description>
      <content:encoded><![CDATA[<p><img src="https://blog.example.com/eval.png" alt="chart"/>Teams shipping AI features keep running into evaluation problems.</p>]]></content:encoded>
      <dc:creator>Dana Reyes</dc:creator>
      <pubDate>Sat, 17 Oct 2026 08:30:00 GMT</pubDate>
    </item>
    <item>
      <title>Quarterly design review notes</title>
      <link>https://blog.example.com/design-review</link>
      <description>What the design team learned this quarter.</description>
      <pubDate>Fri, 16 Oct 2026 12:00:00 GMT</pubDate>
    </item>
    <item>
      <title>Shipping on Fridays</title>
      <link>https://blog.example.com/shipping-fridays</link>
      <description>Why we stopped worrying about release days.</description>
    </item>
  </channel>
</rss>
"""


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def clock() -> Callable[[], datetime]:
    """Clock frozen at FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def test_config(tmp_path: Path) -> Config:
    """Test configuration with temporary paths and fake credentials."""
    return Config(
        _env_file=None,
        openai_api_key="test-key-12345",
        resend_api_key="re_test_12345",
        db_path=tmp_path / "test.db",
        app_url="https://app.example.com",
        enable_cron_jobs=False,
        scheduler_timezone="UTC",
        environment="staging",
    )


@pytest.fixture
def test_db(tmp_path: Path) -> Generator[DatabaseConnection, None, None]:
    """Temporary SQLite database; the schema is created on first connect."""
    db = DatabaseConnection(tmp_path / "test.db")
    db.connect()

    yield db

    db.close()


@pytest.fixture
def user_repo(test_db: DatabaseConnection) -> UserRepository:
    return UserRepository(test_db)


@pytest.fixture
def source_repo(test_db: DatabaseConnection) -> SourceRepository:
    return SourceRepository(test_db)


@pytest.fixture
def article_repo(test_db: DatabaseConnection) -> ArticleRepository:
    return ArticleRepository(test_db)


@pytest.fixture
def digest_repo(test_db: DatabaseConnection) -> DigestRepository:
    return DigestRepository(test_db)


@pytest.fixture
def sample_user(user_repo: UserRepository) -> User:
    """Daily-schedule user whose delivery hour is 09:00 UTC."""
    return user_repo.create_user(
        email="reader@example.com",
        name="Dana Reader",
        profile=UserProfile(user_id="pending", time_of_day=9, timezone="UTC"),
    )


@pytest.fixture
def sample_source(source_repo: SourceRepository, sample_user: User) -> Source:
    return source_repo.create_source(
        user_id=sample_user.id,
        name="Example Engineering",
        url="https://blog.example.com/feed.xml",
    )


@pytest.fixture
def make_entries() -> Callable[..., List[FeedEntry]]:
    """Factory for feed entries published shortly before FIXED_NOW."""

    def _make(count: int, prefix: str = "post") -> List[FeedEntry]:
        return [
            FeedEntry(
                title=f"Article {i}",
                url=f"https://blog.example.com/{prefix}-{i}",
                content=ARTICLE_BODY,
                excerpt="Teams shipping AI features keep running into the same problem.",
                author="Dana Reyes",
                published_at=FIXED_NOW - timedelta(hours=i + 1),
                reading_time=2,
            )
            for i in range(count)
        ]

    return _make


def llm_response(text: str) -> dict:
    return {
        "content": {"text": text},
        "usage": {"input_tokens": 10, "output_tokens": 5, "total_tokens": 15, "cost": 0.0},
    }


@pytest.fixture
def mock_llm_client() -> Mock:
    """Text-generation client answering by request type."""
    answers = {
        "summary": "A startup describes how it regression-tests prompts before each deploy.",
        "takeaways": '["Treat prompts like code", "Run evaluations on every deploy", "Track regressions"]',
        "sentiment": "Positive.",
    }

    async def create_completion(**kwargs):
        return llm_response(answers[kwargs["request_type"]])

    client = Mock()
    client.create_completion = AsyncMock(side_effect=create_completion)
    return client


@pytest.fixture
def mock_mailer() -> Mock:
    """Mail provider that accepts everything and returns sequential ids."""
    counter = {"n": 0}

    async def send_email(**kwargs):
        counter["n"] += 1
        return f"msg-{counter['n']}"

    mailer = Mock()
    mailer.send_email = AsyncMock(side_effect=send_email)
    return mailer


@pytest.fixture
def sample_rss_feed() -> str:
    """RSS 2.0 feed with three linked entries."""
    return SAMPLE_RSS_FEED
