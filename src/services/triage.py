"""
Meeting Triage Service

Runs one email through the parsing pipeline and acts on the intent:
    schedule_meeting   -> reconcile availability, create an event
    reschedule_meeting -> find the event, move it to the first free slot
    cancel_meeting     -> find the event, cancel it
Contacts are synced to the CRM collaborator when one is configured.

Collaborator failures are logged and recorded on the result; they never
abort triage.
"""
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Callable, List, Optional, TypeVar

from src.utils.config import Config
from src.utils.datetime import minutes_to_time, time_to_minutes
from src.utils.logger import setup_logger

from .extraction import (
    EmailParsingPipeline,
    FatalError,
    MeetingIntent,
    NO_EMAIL,
    ParsedEmailRecord,
    ParseOutcome,
    UNKNOWN_COMPANY,
    UNKNOWN_CONTACT,
)
from .interfaces import CalendarCollaborator, CRMCollaborator
from .scheduling import (
    AvailabilityReconciler,
    AvailabilityResult,
    BusyInterval,
    CalendarEvent,
    CRMSyncRequest,
    EventMatcher,
    EventSearchResult,
    RescheduleRequest,
    ScheduleRequest,
    TimeSlot,
    wrap_external_exception,
)
from .scheduling.collaborators import InMemoryCalendar

logger = setup_logger(__name__)

T = TypeVar("T")

MEETING_LOCATION = "Video Conference"


class TriageAction(str, Enum):
    SCHEDULED = "scheduled"
    RESCHEDULED = "rescheduled"
    CANCELLED = "cancelled"
    NONE = "none"


@dataclass
class TriageResult:
    """What triage found and did for one email"""
    record: ParsedEmailRecord
    outcome: ParseOutcome
    action: TriageAction = TriageAction.NONE
    event: Optional[CalendarEvent] = None
    availability: Optional[AvailabilityResult] = None
    search: Optional[EventSearchResult] = None
    crm_synced: bool = False
    notes: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


class _CollaboratorFailed(Exception):
    pass


class MeetingTriageService:
    """
    Email -> parsed record -> calendar/CRM actions.

    Args:
        pipeline: Parsing pipeline (its clock and datetime extractor are shared)
        calendar: Calendar collaborator; None skips calendar actions
        crm: CRM collaborator; None skips contact sync
        config: Thresholds and scheduling settings (pipeline's config when None)
    """

    def __init__(
        self,
        pipeline: EmailParsingPipeline,
        calendar: Optional[CalendarCollaborator] = None,
        crm: Optional[CRMCollaborator] = None,
        config: Optional[Config] = None
    ):
        self.pipeline = pipeline
        self.calendar = calendar
        self.crm = crm
        self.config = config or pipeline.config
        self.threshold = self.config.triage.auto_schedule_threshold
        self.duration = timedelta(minutes=self.config.scheduling.meeting_duration_minutes)
        self.reconciler = AvailabilityReconciler(self.config.scheduling, pipeline.datetime_extractor)
        self.matcher = EventMatcher(self.config.scheduling.recency_days, clock=pipeline.clock)

    @classmethod
    def with_in_memory_calendar(cls, config: Config, crm: Optional[CRMCollaborator] = None) -> "MeetingTriageService":
        """Service backed by a sample in-memory calendar, for local runs."""
        pipeline = EmailParsingPipeline.from_config(config)
        calendar = InMemoryCalendar.with_sample_events(pipeline.clock())
        return cls(pipeline, calendar=calendar, crm=crm, config=config)

    def triage(self, email_text: str) -> TriageResult:
        outcome = self.pipeline.parse_with_outcome(email_text)
        record = outcome.record or self.pipeline.parse(email_text)
        result = TriageResult(record=record, outcome=outcome)

        if isinstance(outcome, FatalError):
            result.errors.append(f"model {outcome.kind.value}: {outcome.message}")

        if self.calendar is not None:
            handler = {
                MeetingIntent.SCHEDULE: self._schedule,
                MeetingIntent.RESCHEDULE: self._reschedule,
                MeetingIntent.CANCEL: self._cancel,
            }.get(record.intent)
            if handler:
                try:
                    handler(record, result)
                except _CollaboratorFailed:
                    # Already logged and recorded on the result
                    pass

        if self.crm is not None:
            self._sync_crm(record, email_text, result)

        logger.info(
            f"[Triage] intent={record.intent.value} action={result.action.value} "
            f"confidence={record.confidence} errors={len(result.errors)}"
        )
        return result

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _call(self, result: TriageResult, operation: str, func: Callable[..., T], *args) -> T:
        """Run a calendar call; failures are recorded and stop the current action."""
        try:
            return func(*args)
        except Exception as e:
            service = getattr(self.calendar, 'service_name', type(self.calendar).__name__)
            error = wrap_external_exception(e, service, operation)
            logger.warning(f"[Triage] {error.message}")
            result.errors.append(error.message)
            raise _CollaboratorFailed() from e

    @staticmethod
    def _participants(record: ParsedEmailRecord) -> List[str]:
        return [p for p in record.participants if p != NO_EMAIL]

    @staticmethod
    def _search_query(record: ParsedEmailRecord) -> str:
        if record.company != UNKNOWN_COMPANY:
            return record.company
        if record.contact_name != UNKNOWN_CONTACT:
            return record.contact_name
        return ""

    def _first_free_slot(
        self,
        record: ParsedEmailRecord,
        result: TriageResult,
        duration: timedelta,
        moving: Optional[CalendarEvent] = None
    ) -> Optional[datetime]:
        """
        Start of the first candidate whose whole [start, start + duration)
        span is free and ends within business hours.

        Suggested times are tried first, then the remaining free grid slots.
        `moving` is the event being rescheduled; its current span does not
        count as busy.
        """
        day: Optional[date] = self.pipeline.datetime_extractor.resolve_date(record.datetime)
        if day is None:
            result.notes.append("no resolvable date")
            return None

        busy = list(self._call(result, "busy_intervals", self.calendar.busy_intervals, day, self._participants(record)))
        if moving is not None:
            own = BusyInterval.from_datetimes(
                moving.start.replace(tzinfo=None), moving.end.replace(tzinfo=None), day
            )
            if own in busy:
                busy.remove(own)
        availability = self.reconciler.reconcile(day, busy, record.datetime)
        result.availability = availability

        length = max(int(duration.total_seconds() // 60), 1)
        day_end = self.config.scheduling.business_end_hour * 60
        candidates = list(availability.suggested_times)
        candidates += [s.start for s in availability.available_slots if s.start not in candidates]
        for candidate in candidates:
            start_minutes = time_to_minutes(candidate)
            end_minutes = start_minutes + length
            if end_minutes > day_end:
                continue
            span = TimeSlot(candidate, minutes_to_time(end_minutes))
            if any(span.overlaps(b.start, b.end) for b in busy):
                continue
            hours, minutes = divmod(start_minutes, 60)
            return datetime(day.year, day.month, day.day, hours, minutes)

        result.notes.append(f"no free {length}-minute slot on {day.isoformat()}")
        return None

    def _find_event(self, record: ParsedEmailRecord, result: TriageResult) -> Optional[CalendarEvent]:
        events = self._call(result, "list_events", self.calendar.list_events)
        search = self.matcher.search(self._search_query(record), self._participants(record), events)
        result.search = search
        if search.matched_event is None:
            result.notes.append("no matching event")
        return search.matched_event

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _schedule(self, record: ParsedEmailRecord, result: TriageResult) -> None:
        if record.confidence <= self.threshold:
            result.notes.append(f"confidence {record.confidence} not above {self.threshold}")
            return

        start = self._first_free_slot(record, result, self.duration)
        if start is None:
            return

        request = ScheduleRequest(
            title=f"Meeting with {record.contact_name} - {record.company}",
            start=start,
            end=start + self.duration,
            attendees=self._participants(record),
            description=f"Scheduled from email ({record.reasoning})",
            location=MEETING_LOCATION,
        )
        result.event = self._call(result, "schedule_event", self.calendar.schedule_event, request)
        result.action = TriageAction.SCHEDULED

    def _reschedule(self, record: ParsedEmailRecord, result: TriageResult) -> None:
        event = self._find_event(record, result)
        if event is None:
            return

        duration = event.end - event.start
        start = self._first_free_slot(record, result, duration, moving=event)
        if start is None:
            return

        request = RescheduleRequest(
            event_id=event.id,
            new_start=start,
            new_end=start + duration,
            reason=f"Rescheduled via email from {record.contact_name}",
        )
        result.event = self._call(result, "reschedule_event", self.calendar.reschedule_event, request)
        result.action = TriageAction.RESCHEDULED

    def _cancel(self, record: ParsedEmailRecord, result: TriageResult) -> None:
        event = self._find_event(record, result)
        if event is None:
            return

        reason = f"Cancelled via email from {record.contact_name}"
        if self._call(result, "cancel_event", self.calendar.cancel_event, event.id, reason):
            result.action = TriageAction.CANCELLED
            result.event = self._call(result, "get_event", self.calendar.get_event, event.id) or event
        else:
            result.errors.append(f"event {event.id} could not be cancelled")

    def _sync_crm(self, record: ParsedEmailRecord, email_text: str, result: TriageResult) -> None:
        request = CRMSyncRequest(
            name=record.contact_name,
            email=record.email,
            company=record.company,
            email_text=email_text,
        )
        try:
            self.crm.sync_contact(request)
            result.crm_synced = True
        except Exception as e:
            logger.warning(f"[Triage] CRM sync failed for {record.email}: {e}")
            result.errors.append(f"crm sync failed: {e}")
