# tests/unit/test_date_utils.py
"""Unit tests for date utilities."""

from datetime import datetime, timedelta, timezone

import pytest

from inboxsage.utils.date_utils import (
    days_between,
    ensure_utc,
    format_long_date,
    from_db_datetime,
    js_weekday,
    local_hour,
    parse_date,
    start_of_day,
    start_of_week,
    to_db_datetime,
)


@pytest.mark.unit
class TestParseDate:
    """Tests for parse_date function."""

    def test_parse_rfc822(self):
        """Should parse RSS pubDate format."""
        dt = parse_date("Sat, 17 Oct 2026 08:30:00 GMT")
        assert dt == datetime(2026, 10, 17, 8, 30, tzinfo=timezone.utc)

    def test_parse_naive_assumes_utc(self):
        """Should treat naive dates as UTC."""
        dt = parse_date("2026-10-17T08:30:00")
        assert dt.tzinfo is not None
        assert dt.utcoffset() == timedelta(0)

    def test_parse_invalid(self):
        """Should return None for unparseable input."""
        assert parse_date("not a date") is None
        assert parse_date(None) is None
        assert parse_date("") is None


@pytest.mark.unit
class TestTimezones:
    """Tests for timezone helpers."""

    def test_local_hour(self):
        """Should convert to the named zone."""
        now = datetime(2026, 7, 1, 12, 0, tzinfo=timezone.utc)
        assert local_hour(now, "UTC") == 12
        assert local_hour(now, "Europe/Berlin") == 14
        assert local_hour(now, "America/New_York") == 8

    def test_local_hour_unknown_zone(self):
        """Should return None for an unknown zone."""
        now = datetime(2026, 7, 1, 12, 0, tzinfo=timezone.utc)
        assert local_hour(now, "Mars/Olympus_Mons") is None

    def test_ensure_utc(self):
        """Should attach or convert to UTC."""
        naive = datetime(2026, 1, 1, 10, 0)
        assert ensure_utc(naive).tzinfo == timezone.utc

        plus_two = datetime(2026, 1, 1, 10, 0, tzinfo=timezone(timedelta(hours=2)))
        assert ensure_utc(plus_two).hour == 8


@pytest.mark.unit
class TestCalendarHelpers:
    """Tests for weekday and period helpers."""

    def test_js_weekday(self):
        """Should number Sunday as 0 and Monday as 1."""
        assert js_weekday(datetime(2026, 10, 18)) == 0  # Sunday
        assert js_weekday(datetime(2026, 10, 19)) == 1  # Monday
        assert js_weekday(datetime(2026, 10, 24)) == 6  # Saturday

    def test_start_of_day(self):
        """Should return midnight of the same day."""
        dt = datetime(2026, 10, 18, 15, 42, 7, 123, tzinfo=timezone.utc)
        assert start_of_day(dt) == datetime(2026, 10, 18, tzinfo=timezone.utc)

    def test_start_of_week_is_sunday(self):
        """Should return the Sunday starting the week."""
        wednesday = datetime(2026, 10, 21, 9, 0, tzinfo=timezone.utc)
        assert start_of_week(wednesday) == datetime(2026, 10, 18, tzinfo=timezone.utc)

        sunday = datetime(2026, 10, 18, 23, 0, tzinfo=timezone.utc)
        assert start_of_week(sunday) == datetime(2026, 10, 18, tzinfo=timezone.utc)

    def test_days_between_floors(self):
        """Should count whole elapsed days."""
        later = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)
        assert days_between(later - timedelta(days=2, hours=23), later) == 2
        assert days_between(later, later) == 0

    def test_format_long_date(self):
        """Should format as month day, year."""
        assert format_long_date(datetime(2026, 10, 8)) == "October 8, 2026"


@pytest.mark.unit
class TestDbDatetime:
    """Tests for database datetime serialization."""

    def test_round_trip(self):
        """Should restore the same instant."""
        dt = datetime(2026, 10, 18, 9, 0, 0, 1234, tzinfo=timezone.utc)
        assert from_db_datetime(to_db_datetime(dt)) == dt

    def test_sortable_text(self):
        """Should produce strings that sort chronologically."""
        earlier = datetime(2026, 10, 18, 9, 0, tzinfo=timezone.utc)
        later = earlier + timedelta(microseconds=1)
        assert to_db_datetime(earlier) < to_db_datetime(later)

    def test_none(self):
        """Should pass None through."""
        assert to_db_datetime(None) is None
        assert from_db_datetime(None) is None
        assert from_db_datetime("garbage") is None
