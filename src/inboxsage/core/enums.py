"""Enums for InboxSage."""

from enum import Enum


class SourceType(str, Enum):
    """Content source types.

    Only RSS and MEDIUM are fetched; the rest are accepted but yield nothing.
    """

    RSS = "RSS"
    NEWSLETTER = "NEWSLETTER"
    TWITTER = "TWITTER"
    MEDIUM = "MEDIUM"
    CUSTOM_URL = "CUSTOM_URL"


class ScheduleType(str, Enum):
    """Digest delivery schedules."""

    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    CUSTOM = "CUSTOM"


class SummaryDepth(str, Enum):
    """How much detail a summary carries."""

    BASIC = "BASIC"
    DEEP = "DEEP"
    EXTRACTIVE = "EXTRACTIVE"


class SummaryFormat(str, Enum):
    """Layout of a summary."""

    BULLETS = "BULLETS"
    PARAGRAPHS = "PARAGRAPHS"
    MIXED = "MIXED"


class SummaryStyle(str, Enum):
    """Tone of a summary."""

    PROFESSIONAL = "PROFESSIONAL"
    CASUAL = "CASUAL"
    WITTY = "WITTY"


class Sentiment(str, Enum):
    """Article sentiment classification."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class JobName(str, Enum):
    """Recurring scheduler jobs."""

    CONTENT_FETCH = "content-fetch"
    AI_PROCESSING = "ai-processing"
    DAILY_DIGEST = "daily-digest"
    WEEKLY_DIGEST = "weekly-digest"
