"""
In-memory collaborators for local runs and tests
"""
import uuid
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional

from src.utils.logger import setup_logger

from .exceptions import EventNotFoundException, InvalidTimeRangeException
from .models import (
    BusyInterval,
    CalendarEvent,
    CRMSyncRequest,
    EventStatus,
    RescheduleRequest,
    ScheduleRequest,
)

logger = setup_logger(__name__)


class InMemoryCalendar:
    """
    Calendar held in a list.

    Cancelled events stay in the list with status CANCELLED; reschedule
    and cancel reasons are appended to the event description.
    """

    service_name = "InMemoryCalendar"

    def __init__(self, events: Optional[Iterable[CalendarEvent]] = None):
        self._events: List[CalendarEvent] = list(events or [])

    @classmethod
    def with_sample_events(cls, now: Optional[datetime] = None) -> "InMemoryCalendar":
        """A calendar seeded with a few events around `now`."""
        base = (now or datetime.now()).replace(hour=0, minute=0, second=0, microsecond=0)
        return cls([
            CalendarEvent(
                id="evt-1",
                title="Meeting with Sarah - TechCorp Inc.",
                start=base + timedelta(days=1, hours=14),
                end=base + timedelta(days=1, hours=15),
                attendees=["sarah@techcorp.com"],
                description="Partnership discussion",
                location="Video Conference",
            ),
            CalendarEvent(
                id="evt-2",
                title="Andersen hiring call",
                start=base + timedelta(days=3, hours=10),
                end=base + timedelta(days=3, hours=11),
                attendees=["alesia@andersen.com"],
                description="Interview with the hiring manager",
            ),
            CalendarEvent(
                id="evt-3",
                title="Quarterly review",
                start=base + timedelta(days=20, hours=9),
                end=base + timedelta(days=20, hours=10),
                attendees=["team@example.com"],
            ),
        ])

    def _index(self, event_id: str) -> int:
        for i, event in enumerate(self._events):
            if event.id == event_id:
                return i
        return -1

    def get_event(self, event_id: str) -> Optional[CalendarEvent]:
        i = self._index(event_id)
        return self._events[i] if i >= 0 else None

    def list_events(self) -> List[CalendarEvent]:
        return list(self._events)

    def busy_intervals(self, day: date, participants: Optional[List[str]] = None) -> List[BusyInterval]:
        intervals = []
        for event in self._events:
            if event.status == EventStatus.CANCELLED:
                continue
            interval = BusyInterval.from_datetimes(
                event.start.replace(tzinfo=None), event.end.replace(tzinfo=None), day
            )
            if interval:
                intervals.append(interval)
        return intervals

    def schedule_event(self, request: ScheduleRequest) -> CalendarEvent:
        if request.end <= request.start:
            raise InvalidTimeRangeException(
                f"Event end {request.end} is not after start {request.start}",
                service_name=self.service_name
            )
        event = CalendarEvent(
            id=f"evt-{uuid.uuid4().hex[:8]}",
            title=request.title,
            start=request.start,
            end=request.end,
            attendees=list(request.attendees),
            description=request.description,
            location=request.location,
        )
        self._events.append(event)
        logger.info(f"[Calendar] Scheduled {event.id}: {event.title} at {event.start.isoformat()}")
        return event

    def reschedule_event(self, request: RescheduleRequest) -> CalendarEvent:
        i = self._index(request.event_id)
        if i < 0:
            raise EventNotFoundException(
                f"Event {request.event_id} not found",
                service_name=self.service_name,
                details={'event_id': request.event_id}
            )
        if request.new_end <= request.new_start:
            raise InvalidTimeRangeException(
                f"Event end {request.new_end} is not after start {request.new_start}",
                service_name=self.service_name
            )
        event = self._events[i]
        updated = replace(
            event,
            start=request.new_start,
            end=request.new_end,
            description=f"{event.description}\n\nRescheduled: {request.reason or 'Time changed'}"
        )
        self._events[i] = updated
        logger.info(f"[Calendar] Rescheduled {updated.id} to {updated.start.isoformat()}")
        return updated

    def cancel_event(self, event_id: str, reason: Optional[str] = None) -> bool:
        i = self._index(event_id)
        if i < 0:
            return False
        event = self._events[i]
        self._events[i] = replace(
            event,
            status=EventStatus.CANCELLED,
            description=f"{event.description}\n\nCancelled: {reason or 'Meeting cancelled'}"
        )
        logger.info(f"[Calendar] Cancelled {event_id}")
        return True


class InMemoryCRM:
    """Records sync requests instead of sending them anywhere"""

    def __init__(self):
        self.synced: List[CRMSyncRequest] = []

    def sync_contact(self, request: CRMSyncRequest) -> dict:
        self.synced.append(request)
        logger.info(f"[CRM] Synced contact {request.name} <{request.email}> ({request.company})")
        return {'status': 'synced', 'email': request.email}
