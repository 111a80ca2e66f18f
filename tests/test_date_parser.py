from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from greenbot.utils.activity_exceptions import DateRangeError
from greenbot.utils.clock import FixedClock
from greenbot.utils.date_parser import format_range, parse_date_bound, resolve_range


def test_day_bounds_cover_the_whole_day(clock):
    start, end = clock.day_bounds()

    assert start == datetime(2025, 6, 10, 0, 0)
    assert end == datetime(2025, 6, 10, 23, 59, 59, 999000)


@pytest.mark.parametrize("text, expected", [
    ("today", datetime(2025, 6, 10)),
    ("week", datetime(2025, 6, 9)),
    ("month", datetime(2025, 6, 1)),
    ("TODAY", datetime(2025, 6, 10)),
    ("2025-05-31", datetime(2025, 5, 31)),
    ("2025-05-31T18:30", datetime(2025, 5, 31, 18, 30)),
])
def test_lower_bounds(clock, text, expected):
    assert parse_date_bound(text, clock) == expected


@pytest.mark.parametrize("text", ["today", "week", "month"])
def test_keywords_as_upper_bound_mean_end_of_today(clock, text):
    assert parse_date_bound(text, clock, upper=True) == datetime(2025, 6, 10, 23, 59, 59, 999000)


def test_bare_date_upper_bound_is_end_of_that_day(clock):
    assert parse_date_bound("2025-06-01", clock, upper=True) == datetime(2025, 6, 1, 23, 59, 59, 999000)


def test_offset_datetimes_are_converted_to_clock_zone():
    clock = FixedClock(datetime(2025, 6, 10, 9, 30))
    clock.tz = ZoneInfo("UTC")

    parsed = parse_date_bound("2025-06-10T12:00+02:00", clock)

    assert parsed == datetime(2025, 6, 10, 10, 0)
    assert parsed.tzinfo is None


@pytest.mark.parametrize("text", ["yesterday", "2025-13-01", "10/06/2025", ""])
def test_invalid_dates(clock, text):
    with pytest.raises(DateRangeError):
        parse_date_bound(text, clock)


def test_resolve_range_defaults_to_today(clock):
    assert resolve_range(None, None, clock) == clock.day_bounds()


def test_resolve_range_with_start_only(clock):
    start, end = resolve_range("week", None, clock)

    assert start == datetime(2025, 6, 9)
    assert end == datetime(2025, 6, 10, 23, 59, 59, 999000)


def test_resolve_range_rejects_inverted_range(clock):
    with pytest.raises(DateRangeError):
        resolve_range("2025-06-10", "2025-06-01", clock)


def test_format_range():
    assert format_range(datetime(2025, 6, 1), datetime(2025, 6, 1, 23, 59)) == "2025-06-01"
    assert format_range(datetime(2025, 6, 1), datetime(2025, 6, 7)) == "2025-06-01 → 2025-06-07"
