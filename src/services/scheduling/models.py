"""
Scheduling data types

Slots and busy intervals are "HH:MM" wall-clock strings on one target
day; events carry full datetimes.
"""
from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import List, Optional

from src.utils.datetime import minutes_to_time, time_to_minutes

from .exceptions import InvalidTimeRangeException

MINUTES_PER_DAY = 24 * 60


class EventStatus(str, Enum):
    CONFIRMED = "confirmed"
    TENTATIVE = "tentative"
    CANCELLED = "cancelled"


def _check_range(start: str, end: str) -> None:
    try:
        start_minutes, end_minutes = time_to_minutes(start), time_to_minutes(end)
    except (ValueError, AttributeError) as e:
        raise InvalidTimeRangeException(f"Malformed time range {start!r}-{end!r}", cause=e) from e
    if not 0 <= start_minutes < end_minutes <= MINUTES_PER_DAY:
        raise InvalidTimeRangeException(
            f"Invalid time range {start}-{end}",
            details={'start': start, 'end': end}
        )


@dataclass(frozen=True)
class TimeSlot:
    """One cell of the business-hours grid"""
    start: str
    end: str
    available: bool = True

    def __post_init__(self):
        _check_range(self.start, self.end)

    def overlaps(self, other_start: str, other_end: str) -> bool:
        """Half-open overlap: [start, end) intersects [other_start, other_end)"""
        return (
            time_to_minutes(self.start) < time_to_minutes(other_end)
            and time_to_minutes(other_start) < time_to_minutes(self.end)
        )

    def contains(self, value: str) -> bool:
        minutes = time_to_minutes(value)
        return time_to_minutes(self.start) <= minutes < time_to_minutes(self.end)


@dataclass(frozen=True)
class BusyInterval:
    """Occupied range on the target day"""
    start: str
    end: str

    def __post_init__(self):
        _check_range(self.start, self.end)

    @classmethod
    def parse(cls, value: str) -> "BusyInterval":
        """'09:00-09:30' -> BusyInterval"""
        try:
            start, end = (part.strip() for part in value.split('-'))
        except ValueError as e:
            raise InvalidTimeRangeException(f"Expected HH:MM-HH:MM, got {value!r}", cause=e) from e
        return cls(start, end)

    @classmethod
    def from_datetimes(cls, start: datetime, end: datetime, day: date) -> Optional["BusyInterval"]:
        """Clip an event's span to `day`; None when it does not touch the day."""
        day_start = datetime.combine(day, time.min)
        start_minutes = max(0, int((start - day_start).total_seconds() // 60))
        end_minutes = min(MINUTES_PER_DAY, int((end - day_start).total_seconds() // 60))
        if start_minutes >= end_minutes:
            return None
        return cls(minutes_to_time(start_minutes), minutes_to_time(end_minutes))


@dataclass
class AvailabilityResult:
    """Business-hours grid for one day plus ranked suggestions"""
    date: date
    slots: List[TimeSlot]
    suggested_times: List[str] = field(default_factory=list)

    @property
    def available_slots(self) -> List[TimeSlot]:
        return [slot for slot in self.slots if slot.available]

    def to_dict(self) -> dict:
        return {
            'date': self.date.isoformat(),
            'slots': [
                {'start': s.start, 'end': s.end, 'available': s.available}
                for s in self.slots
            ],
            'suggestedTimes': list(self.suggested_times),
        }


@dataclass
class CalendarEvent:
    """Existing calendar event as seen by the matcher"""
    id: str
    title: str
    start: datetime
    end: datetime
    attendees: List[str] = field(default_factory=list)
    description: str = ""
    location: str = ""
    status: EventStatus = EventStatus.CONFIRMED

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'title': self.title,
            'start': self.start.isoformat(),
            'end': self.end.isoformat(),
            'attendees': list(self.attendees),
            'description': self.description,
            'location': self.location,
            'status': self.status.value,
        }


@dataclass
class EventSearchResult:
    events: List[CalendarEvent] = field(default_factory=list)
    matched_event: Optional[CalendarEvent] = None
    confidence: float = 0.0


@dataclass
class ScheduleRequest:
    title: str
    start: datetime
    end: datetime
    attendees: List[str] = field(default_factory=list)
    description: str = ""
    location: str = ""


@dataclass
class RescheduleRequest:
    event_id: str
    new_start: datetime
    new_end: datetime
    reason: Optional[str] = None


@dataclass
class CRMSyncRequest:
    """One-way contact sync derived from a parsed email"""
    name: str
    email: str
    company: str
    email_text: str = ""
    source: str = "email_parsing"
