"""Article summarization."""

from inboxsage.pipeline.summarizers.article_summarizer import ArticleSummarizer
from inboxsage.pipeline.summarizers.relevance import calculate_relevance_score

__all__ = ["ArticleSummarizer", "calculate_relevance_score"]
