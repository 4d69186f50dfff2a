"""Unit tests for time literals."""

from datetime import datetime, timedelta, timezone

import pytest
from dateutil.relativedelta import relativedelta

from feedterm.query import parse_time


class TestRelativeTimes:
    """Tests for relative time expressions."""

    @pytest.mark.parametrize(
        "text, delta",
        [
            ("now", timedelta()),
            ("2 days ago", timedelta(days=-2)),
            ("1 week", timedelta(weeks=1)),
            ("+3 hours", timedelta(hours=3)),
            ("-90 min", timedelta(minutes=-90)),
            ("yesterday", timedelta(days=-1)),
            ("tomorrow", timedelta(days=1)),
            ("next week", timedelta(weeks=1)),
            ("a fortnight ago", timedelta(weeks=-2)),
            ("1 day, 2 hours ago", timedelta(days=-1, hours=-2)),
        ],
    )
    def test_offsets(self, now, text, delta):
        assert parse_time(text, now) == now + delta

    def test_calendar_units(self, now):
        assert parse_time("last month", now) == now + relativedelta(months=-1)
        assert parse_time("1 year 2 months ago", now) == now - relativedelta(years=1, months=2)

    def test_case_and_spacing(self, now):
        assert parse_time("  2   DAYS   ago ", now) == now - timedelta(days=2)

    def test_naive_reference_is_utc(self):
        naive = datetime(2024, 1, 1, 12, 0)
        assert parse_time("1 hour ago", naive) == datetime(2024, 1, 1, 11, 0, tzinfo=timezone.utc)


class TestAbsoluteTimes:
    """Tests for absolute dates."""

    def test_with_zone(self, now):
        result = parse_time("2024-05-01 13:30 +02:00", now)
        assert result == datetime(2024, 5, 1, 11, 30, tzinfo=timezone.utc)
        assert result.tzinfo == timezone.utc

    def test_without_zone_is_aware(self, now):
        assert parse_time("2024-05-01", now).tzinfo == timezone.utc


class TestInvalidTimes:
    """Tests for rejected expressions."""

    @pytest.mark.parametrize("text", ["", "   ", "whenever", "3 parsecs ago"])
    def test_rejected(self, now, text):
        with pytest.raises(ValueError):
            parse_time(text, now)

    @pytest.mark.parametrize("text", ["1000000000 days ago", "99999999 hours", "100000 years"])
    def test_out_of_range(self, now, text):
        with pytest.raises(ValueError):
            parse_time(text, now)
