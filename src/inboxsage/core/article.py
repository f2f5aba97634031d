"""Article domain models."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from inboxsage.core.enums import Sentiment
from inboxsage.utils.date_utils import now_utc


class ArticleProcessingResult(BaseModel):
    """AI-derived fields for one article."""

    summary: str = Field(..., min_length=1)
    key_takeaways: List[str] = Field(default_factory=list, max_length=5)
    relevance_score: float = Field(..., ge=0.0, le=1.0)
    sentiment: Sentiment = Sentiment.NEUTRAL
    reading_time: int = Field(default=1, ge=1)
    tags: List[str] = Field(default_factory=list)


class Article(BaseModel):
    """Article ingested from a source, with its summarization state."""

    id: str
    source_id: str
    topic_id: Optional[str] = None

    # Ingestion
    title: str
    url: str
    content: Optional[str] = None
    excerpt: Optional[str] = None
    author: Optional[str] = None
    published_at: datetime
    reading_time: Optional[int] = None
    image_url: Optional[str] = None
    tags: List[str] = Field(default_factory=list)

    # State
    is_processed: bool = False
    is_included: bool = True

    # Summarization
    summary: Optional[str] = None
    key_takeaways: List[str] = Field(default_factory=list)
    relevance_score: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    sentiment: Optional[Sentiment] = None

    created_at: datetime = Field(default_factory=now_utc)
    updated_at: datetime = Field(default_factory=now_utc)

    @property
    def text_for_processing(self) -> str:
        """Best available text: content, then excerpt, then title."""
        return self.content or self.excerpt or self.title
