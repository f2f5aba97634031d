"""Source and feed entry domain models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from inboxsage.core.enums import SourceType
from inboxsage.utils.date_utils import now_utc


class Source(BaseModel):
    """External content feed a user subscribes to."""

    id: str
    user_id: str
    name: str
    url: str = Field(..., min_length=1)
    type: SourceType = SourceType.RSS
    description: Optional[str] = None
    topic_id: Optional[str] = None

    is_active: bool = True
    last_fetched: Optional[datetime] = None
    fetch_errors: int = Field(default=0, ge=0)

    created_at: datetime = Field(default_factory=now_utc)


class FeedEntry(BaseModel):
    """Normalized entry fetched from a feed, before persistence."""

    title: str = "Untitled"
    url: str = Field(..., min_length=1)
    content: str = ""
    excerpt: str = ""
    author: Optional[str] = None
    published_at: datetime = Field(default_factory=now_utc)
    reading_time: int = Field(default=1, ge=1)
    image_url: Optional[str] = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "title": "Shipping a vector index in a weekend",
                "url": "https://blog.example.com/vector-index",
                "content": "<p>We needed a small vector index...</p>",
                "excerpt": "We needed a small vector index...",
                "author": "Dana Reyes",
                "published_at": "2026-10-17T08:30:00+00:00",
                "reading_time": 4,
                "image_url": "https://blog.example.com/cover.png",
            }
        }
    }
