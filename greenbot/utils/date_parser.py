"""
Date parsing utilities for activity, score and leaderboard commands.

Handles conversion of user-typed date arguments into the naive datetimes the
ledger stores.
"""

from datetime import date, datetime
from typing import Optional, Tuple

from greenbot.utils.activity_exceptions import DateRangeError
from greenbot.utils.clock import Clock, END_OF_DAY


def parse_date_bound(text: str, clock: Clock, upper: bool = False) -> datetime:
    """
    Parse a date argument into a datetime bound.

    Supported formats:
    - today, week, month (start of the current day/week/month; as an upper
      bound they all mean the end of today)
    - YYYY-MM-DD (start of that day, or its end when used as an upper bound)
    - Full ISO datetime (e.g., 2025-06-01T18:30). Offsets are converted into
      the clock's zone.

    Args:
        text: Date string to parse
        clock: Clock supplying "now" and the zone
        upper: Whether the value closes a range

    Returns:
        Naive datetime in the clock's zone

    Raises:
        DateRangeError: If the format is invalid
    """
    text = text.strip()
    keyword = text.lower()

    if keyword in ("today", "week", "month"):
        day_start, day_end = clock.day_bounds()
        if upper:
            return day_end
        if keyword == "week":
            return clock.week_start()
        if keyword == "month":
            return clock.month_start()
        return day_start

    if len(text) == 10 and "T" not in text:
        try:
            day = date.fromisoformat(text)
        except ValueError:
            raise DateRangeError(f"Invalid date: {text}. Use YYYY-MM-DD, an ISO datetime, today, week or month")
        return datetime.combine(day, END_OF_DAY if upper else datetime.min.time())

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise DateRangeError(f"Invalid date: {text}. Use YYYY-MM-DD, an ISO datetime, today, week or month")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(clock.tz).replace(tzinfo=None)
    return parsed


def resolve_range(date_from: Optional[str], date_to: Optional[str], clock: Clock) -> Tuple[datetime, datetime]:
    """
    Resolve optional command arguments into an inclusive range.

    A missing start defaults to the beginning of today and a missing end to
    the end of today.

    Raises:
        DateRangeError: If either bound is invalid or the range is inverted
    """
    day_start, day_end = clock.day_bounds()
    start = parse_date_bound(date_from, clock) if date_from else day_start
    end = parse_date_bound(date_to, clock, upper=True) if date_to else day_end

    if start > end:
        raise DateRangeError("The start date must not be after the end date")
    return start, end


def format_range(start: datetime, end: datetime) -> str:
    """Human-readable range label, e.g. '2025-06-01' or '2025-06-01 → 2025-06-07'"""
    if start.date() == end.date():
        return start.strftime("%Y-%m-%d")
    return f"{start.strftime('%Y-%m-%d')} → {end.strftime('%Y-%m-%d')}"
