"""
Tests for the in-memory calendar and CRM collaborators
"""
import pytest
from datetime import date, datetime, timedelta

from src.services.scheduling import (
    BusyInterval,
    CRMSyncRequest,
    EventNotFoundException,
    EventStatus,
    InMemoryCalendar,
    InMemoryCRM,
    InvalidTimeRangeException,
    RescheduleRequest,
    ScheduleRequest,
    wrap_external_exception,
)


NOW = datetime(2025, 3, 10, 9, 30)


@pytest.fixture
def calendar():
    return InMemoryCalendar.with_sample_events(NOW)


class TestInMemoryCalendar:
    """Calendar operations"""

    def test_sample_events(self, calendar):
        events = calendar.list_events()

        assert [e.id for e in events] == ["evt-1", "evt-2", "evt-3"]
        assert events[0].start == datetime(2025, 3, 11, 14, 0)

    def test_busy_intervals_for_day(self, calendar):
        assert calendar.busy_intervals(date(2025, 3, 11)) == [BusyInterval("14:00", "15:00")]
        assert calendar.busy_intervals(date(2025, 3, 12)) == []

    def test_schedule_event(self, calendar):
        start = datetime(2025, 3, 12, 9, 0)
        event = calendar.schedule_event(ScheduleRequest(
            title="Intro call", start=start, end=start + timedelta(hours=1), attendees=["a@x.com"]
        ))

        assert event.id.startswith("evt-")
        assert calendar.get_event(event.id) == event
        assert calendar.busy_intervals(date(2025, 3, 12)) == [BusyInterval("09:00", "10:00")]

    def test_schedule_rejects_inverted_range(self, calendar):
        start = datetime(2025, 3, 12, 9, 0)
        with pytest.raises(InvalidTimeRangeException):
            calendar.schedule_event(ScheduleRequest(title="Bad", start=start, end=start))

    def test_reschedule_event(self, calendar):
        new_start = datetime(2025, 3, 12, 11, 0)
        updated = calendar.reschedule_event(RescheduleRequest(
            event_id="evt-1", new_start=new_start, new_end=new_start + timedelta(hours=1), reason="Conflict"
        ))

        assert updated.start == new_start
        assert updated.description.endswith("Rescheduled: Conflict")
        assert calendar.get_event("evt-1").start == new_start

    def test_reschedule_unknown_event(self, calendar):
        with pytest.raises(EventNotFoundException) as exc_info:
            calendar.reschedule_event(RescheduleRequest(
                event_id="missing", new_start=NOW, new_end=NOW + timedelta(hours=1)
            ))
        assert exc_info.value.service_name == "InMemoryCalendar"

    def test_cancel_event(self, calendar):
        assert calendar.cancel_event("evt-1", "No longer needed") is True

        event = calendar.get_event("evt-1")
        assert event.status == EventStatus.CANCELLED
        assert event.description.endswith("Cancelled: No longer needed")
        assert calendar.busy_intervals(date(2025, 3, 11)) == []

    def test_cancel_unknown_event(self, calendar):
        assert calendar.cancel_event("missing") is False


class TestInMemoryCRM:
    """CRM sync recording"""

    def test_sync_contact(self):
        crm = InMemoryCRM()
        response = crm.sync_contact(CRMSyncRequest(name="Sarah", email="sarah@techcorp.com", company="TechCorp Inc."))

        assert response == {'status': 'synced', 'email': 'sarah@techcorp.com'}
        assert crm.synced[0].source == "email_parsing"


class TestWrapExternalException:
    """Collaborator error wrapping"""

    def test_wraps_with_context(self):
        error = wrap_external_exception(RuntimeError("timeout"), "Calendar", "list_events")

        assert error.message == "Calendar operation 'list_events' failed: timeout"
        assert error.details['error_type'] == "RuntimeError"
        assert isinstance(error.cause, RuntimeError)

    def test_calendar_errors_pass_through(self):
        original = EventNotFoundException("Event x not found")
        assert wrap_external_exception(original, "Calendar", "reschedule_event") is original
