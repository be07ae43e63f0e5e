"""
Tests for availability reconciliation and suggestion ranking
"""
import pytest
from datetime import date, datetime

from src.core.base import ConfigurationException
from src.services.scheduling import (
    AvailabilityReconciler,
    BusyInterval,
    InvalidTimeRangeException,
    TimeSlot,
    build_grid,
    suggest_times,
)
from src.utils.config import SchedulingConfig


DAY = date(2025, 3, 11)


@pytest.fixture
def reconciler(pipeline):
    return AvailabilityReconciler(SchedulingConfig(), pipeline.datetime_extractor)


def _starts(slots):
    return [slot.start for slot in slots]


class TestGrid:
    """Business-hours grid"""

    def test_default_grid(self):
        assert _starts(build_grid(9, 17, 60)) == [
            "09:00", "10:00", "11:00", "12:00", "13:00", "14:00", "15:00", "16:00",
        ]

    def test_half_hour_grid(self):
        slots = build_grid(9, 17, 30)
        assert len(slots) == 16
        assert (slots[-1].start, slots[-1].end) == ("16:30", "17:00")

    def test_slot_longer_than_business_hours(self):
        with pytest.raises(ConfigurationException):
            AvailabilityReconciler(SchedulingConfig(slot_minutes=600))


class TestReconcile:
    """Busy intervals and preferred times"""

    def test_partial_overlap_excludes_slot(self, reconciler):
        result = reconciler.reconcile(DAY, [BusyInterval("09:00", "09:30")])

        assert "09:00" not in _starts(result.available_slots)
        assert len(result.slots) == 8
        assert result.suggested_times == ["10:00", "11:00", "12:00", "13:00"]

    def test_touching_interval_does_not_exclude(self, reconciler):
        result = reconciler.reconcile(DAY, [BusyInterval("09:00", "10:00")])
        assert _starts(result.available_slots)[0] == "10:00"

    def test_preferred_time_promoted(self, reconciler):
        busy = [BusyInterval("12:00", "17:00")]
        result = reconciler.reconcile(DAY, busy, "Can we do 10:00 AM?")

        assert _starts(result.available_slots) == ["09:00", "10:00", "11:00"]
        assert result.suggested_times[0] == "10:00"
        assert result.suggested_times == ["10:00", "09:00", "11:00"]

    def test_preferred_time_inside_slot(self, reconciler):
        result = reconciler.reconcile(DAY, [], "March 11, 2025 at 10:30 AM")
        assert result.suggested_times == ["10:30", "09:00", "10:00", "11:00"]

    def test_busy_preferred_time_not_suggested(self, reconciler):
        result = reconciler.reconcile(DAY, [BusyInterval("14:00", "15:00")], "at 2:00 PM")

        assert "14:00" not in result.suggested_times
        assert result.suggested_times[0] == "09:00"

    def test_suggestions_capped(self, reconciler):
        assert len(reconciler.reconcile(DAY, []).suggested_times) == 4

    def test_fully_booked_day(self, reconciler):
        result = reconciler.reconcile(DAY, [BusyInterval("08:00", "18:00")], "10:00 AM")

        assert result.available_slots == []
        assert result.suggested_times == []

    def test_regenerate_is_deterministic(self, reconciler):
        result = reconciler.reconcile(DAY, [BusyInterval("09:00", "09:30")], "at 11:00 AM")

        assert reconciler.regenerate_suggestions(result, "at 11:00 AM") == result.suggested_times
        assert reconciler.regenerate_suggestions(result) == ["10:00", "11:00", "12:00", "13:00"]

    def test_to_dict(self, reconciler):
        data = reconciler.reconcile(DAY, [BusyInterval("09:00", "09:30")]).to_dict()

        assert data["date"] == "2025-03-11"
        assert data["slots"][0] == {"start": "09:00", "end": "10:00", "available": False}
        assert data["suggestedTimes"][0] == "10:00"


class TestSuggestTimes:
    """Ranking without the reconciler"""

    def test_preferred_first(self):
        available = [TimeSlot("09:00", "10:00"), TimeSlot("10:00", "11:00"), TimeSlot("11:00", "12:00")]
        assert suggest_times(available, "10:00") == ["10:00", "09:00", "11:00"]

    def test_no_preferred(self):
        available = [TimeSlot("11:00", "12:00"), TimeSlot("09:00", "10:00")]
        assert suggest_times(available, None) == ["09:00", "11:00"]


class TestBusyInterval:
    """Parsing and clipping busy intervals"""

    def test_parse(self):
        assert BusyInterval.parse("09:00 - 09:30") == BusyInterval("09:00", "09:30")

    @pytest.mark.parametrize("value", ["garbage", "10:00-09:00", "9:00-10"])
    def test_parse_rejects_bad_ranges(self, value):
        with pytest.raises(InvalidTimeRangeException):
            BusyInterval.parse(value)

    def test_clipped_to_day(self):
        interval = BusyInterval.from_datetimes(datetime(2025, 3, 11, 16, 30), datetime(2025, 3, 12, 1, 0), DAY)
        assert interval == BusyInterval("16:30", "24:00")

    def test_other_day(self):
        assert BusyInterval.from_datetimes(datetime(2025, 3, 12, 9), datetime(2025, 3, 12, 10), DAY) is None
