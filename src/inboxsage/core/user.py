"""User, profile and topic domain models."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from inboxsage.core.enums import ScheduleType, SummaryDepth, SummaryFormat, SummaryStyle
from inboxsage.utils.date_utils import now_utc


class UserProfile(BaseModel):
    """Per-user delivery and summarization preferences."""

    user_id: str

    # Schedule
    schedule_type: ScheduleType = ScheduleType.DAILY
    time_of_day: int = Field(default=8, ge=0, le=23)
    timezone: str = "UTC"
    custom_days: List[int] = Field(default_factory=list)  # 0=Sunday ... 6=Saturday

    # Summaries
    summary_depth: SummaryDepth = SummaryDepth.BASIC
    summary_format: SummaryFormat = SummaryFormat.PARAGRAPHS
    summary_style: SummaryStyle = SummaryStyle.PROFESSIONAL
    language_preference: str = "en"

    # Digest
    max_items_per_digest: int = Field(default=10, gt=0)
    digest_emails: List[str] = Field(default_factory=list)
    include_images: bool = True
    include_videos: bool = False

    @field_validator("custom_days")
    @classmethod
    def validate_custom_days(cls, v: List[int]) -> List[int]:
        """Weekday numbers must be 0-6."""
        for day in v:
            if not 0 <= day <= 6:
                raise ValueError(f"Invalid weekday {day}, expected 0-6")
        return v


class User(BaseModel):
    """Account owning sources, topics and digests."""

    id: str
    email: str
    name: str
    created_at: datetime = Field(default_factory=now_utc)

    profile: Optional[UserProfile] = None


class Topic(BaseModel):
    """User-scoped label grouping sources and articles."""

    id: str
    user_id: str
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    color: Optional[str] = None
    created_at: datetime = Field(default_factory=now_utc)
