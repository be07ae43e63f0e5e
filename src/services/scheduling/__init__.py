"""
Scheduling - availability reconciliation, event matching, calendar collaborators
"""

from .models import (
    TimeSlot,
    BusyInterval,
    AvailabilityResult,
    CalendarEvent,
    EventStatus,
    EventSearchResult,
    ScheduleRequest,
    RescheduleRequest,
    CRMSyncRequest,
)
from .exceptions import (
    CalendarServiceException,
    EventNotFoundException,
    InvalidTimeRangeException,
    wrap_external_exception,
)
from .availability import AvailabilityReconciler, build_grid, mark_busy, suggest_times
from .event_matcher import EventMatcher
from .collaborators import InMemoryCalendar, InMemoryCRM

__all__ = [
    "TimeSlot",
    "BusyInterval",
    "AvailabilityResult",
    "CalendarEvent",
    "EventStatus",
    "EventSearchResult",
    "ScheduleRequest",
    "RescheduleRequest",
    "CRMSyncRequest",
    "CalendarServiceException",
    "EventNotFoundException",
    "InvalidTimeRangeException",
    "wrap_external_exception",
    "AvailabilityReconciler",
    "build_grid",
    "mark_busy",
    "suggest_times",
    "EventMatcher",
    "InMemoryCalendar",
    "InMemoryCRM",
]
