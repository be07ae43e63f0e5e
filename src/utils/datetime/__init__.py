"""
Date/Time Utilities

Provides wall-clock helpers shared by the extraction and scheduling services.
"""

from .datetime_helpers import (
    Clock,
    make_clock,
    to_24_hour,
    time_to_minutes,
    minutes_to_time,
    format_long_date,
)

__all__ = [
    "Clock",
    "make_clock",
    "to_24_hour",
    "time_to_minutes",
    "minutes_to_time",
    "format_long_date",
]
