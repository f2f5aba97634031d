"""Date and time utilities."""

from datetime import datetime, timedelta, timezone, tzinfo
from typing import Optional

from dateutil import parser as date_parser
from dateutil import tz


def parse_date(date_string: Optional[str]) -> Optional[datetime]:
    """Parse date string to datetime object.

    Handles various date formats commonly found in news feeds.

    Args:
        date_string: Date string to parse

    Returns:
        Parsed timezone-aware datetime or None if parsing fails
    """
    if not date_string:
        return None

    try:
        dt = date_parser.parse(date_string)

        # Naive feed dates are treated as UTC
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)

        return dt
    except (ValueError, TypeError, OverflowError):
        return None


def now_utc() -> datetime:
    """Get current UTC datetime.

    Returns:
        Current UTC datetime (timezone-aware)
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Return dt as an aware UTC datetime (naive values are assumed UTC)."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def get_timezone(name: str) -> Optional[tzinfo]:
    """Resolve an IANA timezone name.

    Args:
        name: Timezone name such as "Europe/Berlin"

    Returns:
        tzinfo instance, or None if the name is unknown
    """
    if not name:
        return None
    return tz.gettz(name)


def local_hour(now: datetime, timezone_name: str) -> Optional[int]:
    """Hour of day for `now` in the given timezone, or None if unknown."""
    zone = get_timezone(timezone_name)
    if zone is None:
        return None
    return ensure_utc(now).astimezone(zone).hour


def js_weekday(dt: datetime) -> int:
    """Weekday with Sunday=0 ... Saturday=6."""
    return (dt.weekday() + 1) % 7


def start_of_day(dt: datetime) -> datetime:
    """Midnight at the start of dt's day, in dt's timezone."""
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_week(dt: datetime) -> datetime:
    """Midnight on the Sunday starting dt's week, in dt's timezone."""
    return start_of_day(dt) - timedelta(days=js_weekday(dt))


def days_between(earlier: datetime, later: datetime) -> int:
    """Whole days elapsed from earlier to later (floored)."""
    delta = ensure_utc(later) - ensure_utc(earlier)
    return delta.days


def to_db_datetime(dt: Optional[datetime]) -> Optional[str]:
    """Serialize a datetime for SQLite as a UTC ISO-8601 string."""
    if dt is None:
        return None
    return ensure_utc(dt).isoformat(timespec="microseconds")


def from_db_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 string written by to_db_datetime."""
    if not value:
        return None
    try:
        return ensure_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
    except (ValueError, AttributeError):
        return None


def format_long_date(dt: datetime) -> str:
    """Format as e.g. "October 18, 2026"."""
    return f"{dt:%B} {dt.day}, {dt.year}"
