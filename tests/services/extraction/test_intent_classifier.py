"""
Tests for IntentClassifier precedence and model-label coercion
"""
import pytest

from src.services.extraction import IntentClassifier, MeetingIntent


@pytest.fixture
def classifier(keywords):
    return IntentClassifier(keywords)


class TestClassify:
    """Phrase-set precedence"""

    def test_reschedule_beats_schedule(self, classifier):
        text = "I need to reschedule our meeting with Acme for tomorrow"
        assert classifier.classify(text) == MeetingIntent.RESCHEDULE

    def test_postpone_is_reschedule(self, classifier):
        assert classifier.classify("Can we postpone the call?") == MeetingIntent.RESCHEDULE

    def test_cancel_beats_schedule(self, classifier):
        text = "We need to cancel tomorrow's meeting, sorry for the short notice."
        assert classifier.classify(text) == MeetingIntent.CANCEL

    def test_schedule(self, classifier):
        assert classifier.classify("Let's schedule a call next week") == MeetingIntent.SCHEDULE

    def test_case_insensitive(self, classifier):
        assert classifier.classify("CALL OFF the sync") == MeetingIntent.CANCEL

    def test_general(self, classifier):
        assert classifier.classify("Here is the invoice you asked for.") == MeetingIntent.GENERAL
        assert classifier.classify("") == MeetingIntent.GENERAL

    def test_evidence(self, classifier):
        intent, matched = classifier.classify_with_evidence("Please reschedule, I have to postpone")
        assert intent == MeetingIntent.RESCHEDULE
        assert matched == ["reschedule", "postpone"]

    def test_general_has_no_evidence(self, classifier):
        assert classifier.classify_with_evidence("Quarterly numbers attached") == (MeetingIntent.GENERAL, [])


class TestCoerce:
    """Intent labels coming back from the model"""

    @pytest.mark.parametrize("value,expected", [
        ("schedule_meeting", MeetingIntent.SCHEDULE),
        (" Cancel_Meeting ", MeetingIntent.CANCEL),
        (MeetingIntent.GENERAL, MeetingIntent.GENERAL),
    ])
    def test_known_labels(self, value, expected):
        assert IntentClassifier.coerce(value) == expected

    @pytest.mark.parametrize("value", ["book_meeting", None, 3])
    def test_unknown_labels(self, value):
        assert IntentClassifier.coerce(value) is None
