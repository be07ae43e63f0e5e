"""
Event Matcher

Finds the existing calendar event an email most likely refers to, for
reschedule and cancel requests. Scoring weights:
    title contains query                    +0.4
    share of participants among attendees   up to +0.4
    start within the recency window of now  +0.2
"""
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Sequence

from src.utils.config import ConfigDefaults
from src.utils.logger import setup_logger

from .models import CalendarEvent, EventSearchResult, EventStatus

logger = setup_logger(__name__)

TITLE_WEIGHT = 0.4
ATTENDEE_WEIGHT = 0.4
RECENCY_WEIGHT = 0.2


def _normalized(values: Sequence[str]) -> List[str]:
    return [v.strip().lower() for v in values if v and v.strip()]


def _attendee_overlaps(participant: str, attendees: Sequence[str]) -> bool:
    return any(participant in a or a in participant for a in attendees)


def _comparable(value: datetime, reference: datetime) -> datetime:
    """Drop or borrow tzinfo so `value` can be subtracted from `reference`."""
    if (value.tzinfo is None) == (reference.tzinfo is None):
        return value
    if value.tzinfo is None:
        return value.replace(tzinfo=reference.tzinfo)
    return value.replace(tzinfo=None)


class EventMatcher:
    """
    Scores candidate events against a free-text query and participants.

    Args:
        recency_days: Window around "now" that earns the recency bonus
        clock: Returns "now"; defaults to the wall clock
    """

    def __init__(
        self,
        recency_days: int = ConfigDefaults.SCHEDULING_RECENCY_DAYS,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.recency = timedelta(days=recency_days)
        self._clock = clock or datetime.now

    def matches(self, event: CalendarEvent, query: str, participants: Sequence[str]) -> bool:
        """Loose filter: query in title/description, or any participant among attendees."""
        if event.status == EventStatus.CANCELLED:
            return False
        attendees = _normalized(event.attendees)
        if query and (query in event.title.lower() or query in (event.description or "").lower()):
            return True
        return any(_attendee_overlaps(p, attendees) for p in participants)

    def score(self, event: CalendarEvent, query: str, participants: Sequence[str], now: datetime) -> float:
        value = 0.0
        if query and query in event.title.lower():
            value += TITLE_WEIGHT

        attendees = _normalized(event.attendees)
        matched = sum(1 for p in participants if any(p in a for a in attendees))
        value += (matched / max(len(participants), 1)) * ATTENDEE_WEIGHT

        start = _comparable(event.start, now)
        if abs(start - now) <= self.recency:
            value += RECENCY_WEIGHT

        return round(value, 4)

    def search(
        self,
        query: str,
        participants: Sequence[str],
        candidates: Sequence[CalendarEvent],
        now: Optional[datetime] = None
    ) -> EventSearchResult:
        """
        Filter and rank candidate events.

        `matched_event` is the highest-scoring event (earliest start on ties);
        an event scoring zero is never selected.
        """
        query_lower = (query or "").strip().lower()
        participant_keys = _normalized(participants)
        now = now or self._clock()

        relevant = [e for e in candidates if self.matches(e, query_lower, participant_keys)]

        best: Optional[CalendarEvent] = None
        best_score = 0.0
        for event in sorted(relevant, key=lambda e: _comparable(e.start, now)):
            value = self.score(event, query_lower, participant_keys, now)
            # Strictly greater keeps the earliest event on ties
            if value > best_score:
                best, best_score = event, value

        if best:
            logger.info(f"[Matcher] '{query}' matched event {best.id} ({best.title}) score={best_score}")
        else:
            logger.info(f"[Matcher] '{query}' matched none of {len(candidates)} events")

        return EventSearchResult(events=relevant, matched_event=best, confidence=best_score)
