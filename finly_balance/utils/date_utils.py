"""Date manipulation utilities and the injectable calendar clock"""

import calendar
from datetime import date, datetime, timedelta, timezone
from typing import List
from zoneinfo import ZoneInfo


def generate_date_range(start: date, end: date) -> List[date]:
    """Generate list of dates from start to end (inclusive)"""
    days = (end - start).days + 1
    return [start + timedelta(days=i) for i in range(days)]


def days_in_month(day: date) -> int:
    return calendar.monthrange(day.year, day.month)[1]


def days_remaining_in_period(today: date, period: str = "month") -> int:
    """
    Whole days left after today in the current period.

    month: days_in_month - day_of_month (0 on the last day)
    week:  days until Sunday (0 on Sunday)
    """
    if period == "month":
        return days_in_month(today) - today.day
    if period == "week":
        return 6 - today.weekday()
    raise ValueError(f"Unsupported projection period: {period!r}")


class Clock:
    """
    Calendar clock bound to one timezone.

    Transaction timestamps are truncated to a calendar day in this zone.
    Naive timestamps are taken to be local already. Days that straddle a DST
    change keep plain local-calendar truncation, so a transaction near midnight
    lands on whatever day the local wall clock shows.
    """

    def __init__(self, tz_name: str = "UTC"):
        self.tz = ZoneInfo(tz_name)

    def now(self) -> datetime:
        return datetime.now(timezone.utc).astimezone(self.tz)

    def today(self) -> date:
        return self.now().date()

    def local_date(self, moment: datetime) -> date:
        if moment.tzinfo is None:
            return moment.date()
        return moment.astimezone(self.tz).date()


class FixedClock(Clock):
    """Clock pinned to a single instant, for deterministic runs"""

    def __init__(self, instant: datetime, tz_name: str = "UTC"):
        super().__init__(tz_name)
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=self.tz)
        self.instant = instant

    def now(self) -> datetime:
        return self.instant.astimezone(self.tz)
