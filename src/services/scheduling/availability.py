"""
Availability Reconciler

Merges a calendar's busy intervals with the requester's preferred time
into a business-hours grid and a short ranked list of suggested starts.
When the preferred time is free it is always suggested first.
"""
from datetime import date
from typing import Iterable, List, Optional, Sequence

from src.core.base.exceptions import ConfigurationException
from src.utils.config import ConfigDefaults, SchedulingConfig
from src.utils.datetime import minutes_to_time, time_to_minutes
from src.utils.logger import setup_logger

from ..extraction.datetime_extractor import DateTimeExtractor
from .models import AvailabilityResult, BusyInterval, TimeSlot

logger = setup_logger(__name__)


def build_grid(start_hour: int, end_hour: int, slot_minutes: int) -> List[TimeSlot]:
    """Contiguous, non-overlapping slots covering [start_hour, end_hour)."""
    slots = []
    cursor = start_hour * 60
    limit = end_hour * 60
    while cursor + slot_minutes <= limit:
        slots.append(TimeSlot(minutes_to_time(cursor), minutes_to_time(cursor + slot_minutes)))
        cursor += slot_minutes
    return slots


def mark_busy(slots: Iterable[TimeSlot], busy: Sequence[BusyInterval]) -> List[TimeSlot]:
    """Flag every slot overlapping any busy interval as unavailable."""
    return [
        TimeSlot(slot.start, slot.end, not any(slot.overlaps(b.start, b.end) for b in busy))
        for slot in slots
    ]


def suggest_times(
    available: Sequence[TimeSlot],
    preferred: Optional[str],
    limit: int = ConfigDefaults.SCHEDULING_MAX_SUGGESTIONS
) -> List[str]:
    """
    Ranked suggestions from the available slots.

    A free preferred time (a slot start, or inside a slot) comes first as
    written; the remaining slot starts follow in order, without duplicates.
    Pure and deterministic: same inputs, same list.
    """
    suggestions: List[str] = []
    if preferred and any(slot.start == preferred or slot.contains(preferred) for slot in available):
        suggestions.append(preferred)

    for slot in sorted(available, key=lambda s: time_to_minutes(s.start)):
        if len(suggestions) >= limit:
            break
        if slot.start not in suggestions:
            suggestions.append(slot.start)

    return suggestions[:limit]


class AvailabilityReconciler:
    """
    Computes availability for one day.

    Args:
        scheduling: Business hours, slot size and suggestion limit
        datetime_extractor: Used to pull a clock time out of preferred-time text
    """

    def __init__(
        self,
        scheduling: Optional[SchedulingConfig] = None,
        datetime_extractor: Optional[DateTimeExtractor] = None
    ):
        self.scheduling = scheduling or SchedulingConfig()
        if self.scheduling.slot_minutes > (self.scheduling.business_end_hour - self.scheduling.business_start_hour) * 60:
            raise ConfigurationException(
                "slot_minutes does not fit inside business hours",
                setting="scheduling.slot_minutes"
            )
        self.datetime_extractor = datetime_extractor or DateTimeExtractor()

    def reconcile(
        self,
        target_date: date,
        busy: Sequence[BusyInterval],
        preferred_time_text: Optional[str] = None
    ) -> AvailabilityResult:
        grid = build_grid(
            self.scheduling.business_start_hour,
            self.scheduling.business_end_hour,
            self.scheduling.slot_minutes
        )
        slots = mark_busy(grid, busy)
        available = [slot for slot in slots if slot.available]

        preferred = self.datetime_extractor.extract_time_24h(preferred_time_text)
        suggestions = suggest_times(available, preferred, self.scheduling.max_suggestions)

        logger.info(
            f"[Availability] {target_date.isoformat()}: {len(available)}/{len(slots)} slots free, "
            f"preferred={preferred}, suggested={suggestions}"
        )
        return AvailabilityResult(date=target_date, slots=slots, suggested_times=suggestions)

    def regenerate_suggestions(self, result: AvailabilityResult, preferred_time_text: Optional[str] = None) -> List[str]:
        """Suggestions derived again from an existing result's slots."""
        preferred = self.datetime_extractor.extract_time_24h(preferred_time_text)
        return suggest_times(result.available_slots, preferred, self.scheduling.max_suggestions)
