"""Digest domain models."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from inboxsage.core.article import Article
from inboxsage.utils.date_utils import now_utc


class DigestArticle(BaseModel):
    """Article fields carried into a digest preview and email."""

    id: str
    title: str
    url: str
    author: Optional[str] = None
    published_at: datetime
    summary: Optional[str] = None
    key_takeaways: List[str] = Field(default_factory=list)
    relevance_score: Optional[float] = None
    reading_time: Optional[int] = None
    image_url: Optional[str] = None
    tags: List[str] = Field(default_factory=list)

    @classmethod
    def from_article(cls, article: Article) -> "DigestArticle":
        return cls(
            id=article.id,
            title=article.title,
            url=article.url,
            author=article.author,
            published_at=article.published_at,
            summary=article.summary,
            key_takeaways=article.key_takeaways,
            relevance_score=article.relevance_score,
            reading_time=article.reading_time,
            image_url=article.image_url,
            tags=article.tags,
        )


class DigestItemPreview(BaseModel):
    """Ranked article in a composed digest."""

    article: DigestArticle
    is_highlight: bool = False
    order: int = Field(..., ge=0)


class DigestPreview(BaseModel):
    """Composed digest, before it is persisted or sent."""

    title: str
    introduction: str
    highlights: List[str] = Field(default_factory=list)
    items: List[DigestItemPreview] = Field(default_factory=list)
    conclusion: str
    generated_at: datetime = Field(default_factory=now_utc)


class DigestItem(BaseModel):
    """Persisted digest entry; order and highlight flag are fixed at creation."""

    id: Optional[int] = None
    digest_id: str
    article_id: str
    order: int = Field(..., ge=0)
    is_highlight: bool = False
    custom_summary: Optional[str] = None


class Digest(BaseModel):
    """Generated (and possibly sent) digest for one user."""

    id: str
    user_id: str
    title: str
    introduction: Optional[str] = None
    highlights: List[str] = Field(default_factory=list)
    conclusion: Optional[str] = None

    scheduled_for: Optional[datetime] = None
    generated_at: datetime = Field(default_factory=now_utc)
    sent_at: Optional[datetime] = None

    email_sent: bool = False
    email_error: Optional[str] = None
    email_id: Optional[str] = None

    items: List[DigestItem] = Field(default_factory=list)
