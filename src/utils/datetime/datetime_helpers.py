"""
DateTime Helper Utilities

Centralized wall-clock helpers shared by the extractors and the scheduler.
"""
from datetime import datetime
from typing import Callable, Optional

import pytz

Clock = Callable[[], datetime]


def make_clock(timezone: Optional[str] = None) -> Clock:
    """
    Build a clock returning the current naive wall-clock time in `timezone`.

    Args:
        timezone: IANA timezone name; the system local time is used when None

    Returns:
        Zero-argument callable returning a naive datetime
    """
    if not timezone:
        return datetime.now

    tz = pytz.timezone(timezone)

    def _now() -> datetime:
        return datetime.now(tz).replace(tzinfo=None)

    return _now


def to_24_hour(hour: int, meridiem: Optional[str]) -> int:
    """
    Convert a 12-hour clock hour to 24-hour.

    Hours without an AM/PM marker are returned unchanged.
    """
    if not meridiem:
        return hour
    meridiem = meridiem.upper()
    if meridiem == 'PM' and hour < 12:
        return hour + 12
    if meridiem == 'AM' and hour == 12:
        return 0
    return hour


def time_to_minutes(value: str) -> int:
    """'HH:MM' -> minutes since midnight."""
    hours, minutes = value.split(':')
    return int(hours) * 60 + int(minutes)


def minutes_to_time(minutes: int) -> str:
    """Minutes since midnight -> 'HH:MM'."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def format_long_date(value) -> str:
    """Format a date as 'January 5, 2025'."""
    return f"{value.strftime('%B')} {value.day}, {value.year}"
