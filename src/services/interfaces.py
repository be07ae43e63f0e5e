"""
Service Interfaces - Contracts for external collaborators

The triage core talks to calendars and CRMs only through these
protocols; provider adapters (Google, Outlook, CRM vendors) live outside
this package. In-memory implementations are in
src/services/scheduling/collaborators.py.
"""
from datetime import date
from typing import Any, List, Optional, Protocol

from .scheduling.models import (
    BusyInterval,
    CalendarEvent,
    CRMSyncRequest,
    RescheduleRequest,
    ScheduleRequest,
)


# ===================================================================
# CALENDAR COLLABORATOR
# ===================================================================

class CalendarCollaborator(Protocol):
    """Calendar backend used for availability and event mutation"""

    def busy_intervals(self, day: date, participants: List[str]) -> List[BusyInterval]:
        """Occupied ranges on `day`"""
        ...

    def list_events(self) -> List[CalendarEvent]:
        """Candidate events for reschedule/cancel matching"""
        ...

    def get_event(self, event_id: str) -> Optional[CalendarEvent]:
        """Current state of one event; None for unknown ids"""
        ...

    def schedule_event(self, request: ScheduleRequest) -> CalendarEvent:
        """Create an event"""
        ...

    def reschedule_event(self, request: RescheduleRequest) -> CalendarEvent:
        """Move an event; raises EventNotFoundException for unknown ids"""
        ...

    def cancel_event(self, event_id: str, reason: str) -> bool:
        """Cancel an event; False for unknown ids"""
        ...


# ===================================================================
# CRM COLLABORATOR
# ===================================================================

class CRMCollaborator(Protocol):
    """One-way contact sync"""

    def sync_contact(self, request: CRMSyncRequest) -> Any:
        ...
