"""Core domain models and configurations."""

from inboxsage.core.article import Article, ArticleProcessingResult
from inboxsage.core.config import Config
from inboxsage.core.digest import (
    Digest,
    DigestArticle,
    DigestItem,
    DigestItemPreview,
    DigestPreview,
)
from inboxsage.core.enums import (
    JobName,
    ScheduleType,
    Sentiment,
    SourceType,
    SummaryDepth,
    SummaryFormat,
    SummaryStyle,
)
from inboxsage.core.source import FeedEntry, Source
from inboxsage.core.user import Topic, User, UserProfile

__all__ = [
    # Article models
    "Article",
    "ArticleProcessingResult",
    # Digest models
    "Digest",
    "DigestArticle",
    "DigestItem",
    "DigestItemPreview",
    "DigestPreview",
    # Source models
    "FeedEntry",
    "Source",
    # User models
    "Topic",
    "User",
    "UserProfile",
    # Configuration
    "Config",
    # Enums
    "JobName",
    "ScheduleType",
    "Sentiment",
    "SourceType",
    "SummaryDepth",
    "SummaryFormat",
    "SummaryStyle",
]
