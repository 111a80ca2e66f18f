"""
Single time source for the activity ledger.

Writer and reader must agree on what "today" means, so both take their
instants and calendar-day bounds from the same Clock instance.
"""

from datetime import datetime, time, timedelta
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

# Last representable instant of a day at millisecond resolution
END_OF_DAY = time(23, 59, 59, 999000)


class Clock:
    """Produces naive timestamps in the configured zone (server-local by default)."""

    def __init__(self, timezone: Optional[str] = None):
        self.tz = ZoneInfo(timezone) if timezone else None

    def now(self) -> datetime:
        if self.tz is None:
            return datetime.now()
        return datetime.now(self.tz).replace(tzinfo=None)

    def day_bounds(self, instant: Optional[datetime] = None) -> Tuple[datetime, datetime]:
        """Return [00:00:00.000, 23:59:59.999] of the calendar day containing instant."""
        instant = instant or self.now()
        day = instant.date()
        return datetime.combine(day, time.min), datetime.combine(day, END_OF_DAY)

    def week_start(self, instant: Optional[datetime] = None) -> datetime:
        """Monday 00:00 of the week containing instant."""
        start, _ = self.day_bounds(instant)
        return start - timedelta(days=start.weekday())

    def month_start(self, instant: Optional[datetime] = None) -> datetime:
        start, _ = self.day_bounds(instant)
        return start.replace(day=1)


class FixedClock(Clock):
    """Clock pinned to a settable instant."""

    def __init__(self, instant: datetime):
        super().__init__()
        self.instant = instant

    def now(self) -> datetime:
        return self.instant

    def advance(self, **kwargs) -> datetime:
        self.instant = self.instant + timedelta(**kwargs)
        return self.instant
