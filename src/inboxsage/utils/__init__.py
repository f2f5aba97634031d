"""Utility modules for InboxSage."""

from inboxsage.utils.date_utils import (
    days_between,
    ensure_utc,
    format_long_date,
    from_db_datetime,
    get_timezone,
    js_weekday,
    local_hour,
    now_utc,
    parse_date,
    start_of_day,
    start_of_week,
    to_db_datetime,
)
from inboxsage.utils.exceptions import (
    AIServiceError,
    APIError,
    CollectorError,
    ConfigurationError,
    DatabaseError,
    DigestDeliveryError,
    DigestError,
    EmailServiceError,
    InboxSageError,
    NoContentError,
    NotFoundError,
    PipelineError,
    SourceNotFoundError,
    SummarizationError,
    UserNotFoundError,
)
from inboxsage.utils.logging import get_logger, log_context, setup_logging
from inboxsage.utils.text_utils import (
    count_words,
    estimate_reading_time,
    extract_excerpt,
    extract_image_url,
    extract_tags,
    strip_html,
)

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "log_context",
    # Exceptions
    "InboxSageError",
    "ConfigurationError",
    "PipelineError",
    "CollectorError",
    "SummarizationError",
    "DigestError",
    "NoContentError",
    "DigestDeliveryError",
    "DatabaseError",
    "NotFoundError",
    "UserNotFoundError",
    "SourceNotFoundError",
    "APIError",
    "AIServiceError",
    "EmailServiceError",
    # Date utils
    "parse_date",
    "now_utc",
    "ensure_utc",
    "get_timezone",
    "local_hour",
    "js_weekday",
    "start_of_day",
    "start_of_week",
    "days_between",
    "to_db_datetime",
    "from_db_datetime",
    "format_long_date",
    # Text utils
    "strip_html",
    "count_words",
    "estimate_reading_time",
    "extract_excerpt",
    "extract_image_url",
    "extract_tags",
]
