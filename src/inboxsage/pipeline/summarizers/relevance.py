"""Deterministic article relevance scoring."""

from datetime import datetime

from inboxsage.core.article import Article
from inboxsage.utils.date_utils import days_between

BASE_SCORE = 0.5
IDEAL_READING_TIME = 5  # minutes
RECENCY_WINDOW_DAYS = 7
TAG_WEIGHT = 0.05


def calculate_relevance_score(article: Article, now: datetime) -> float:
    """Score an article in [0, 1] from reading time, recency and tags.

    Reading times near five minutes earn up to +0.5, articles from the last
    week earn up to +0.5 (linearly decaying), and each tag adds 0.05.

    Args:
        article: Article to score.
        now: Reference time for recency.

    Returns:
        Relevance score clamped to [0, 1].
    """
    score = BASE_SCORE

    reading_time = article.reading_time or IDEAL_READING_TIME
    time_diff = abs(reading_time - IDEAL_READING_TIME)
    score += max(0.0, (IDEAL_READING_TIME - time_diff) / 10)

    if article.published_at is not None:
        days_old = max(0, days_between(article.published_at, now))
        score += max(0.0, (RECENCY_WINDOW_DAYS - days_old) / 14)

    score += len(article.tags) * TAG_WEIGHT

    return min(1.0, max(0.0, score))
