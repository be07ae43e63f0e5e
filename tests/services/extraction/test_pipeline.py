"""
Tests for EmailParsingPipeline: heuristic path, model path and outcome variants
"""
import json

import pytest

from src.ai.exceptions import ModelErrorKind
from src.services.extraction import (
    FallbackUsed,
    FatalError,
    MeetingIntent,
    NO_EMAIL,
    NOT_SPECIFIED,
    ParsedEmailRecord,
    ParsedOk,
    UNKNOWN_COMPANY,
    UNKNOWN_CONTACT,
)
from src.services.extraction.pipeline import build_participants


SCENARIO_SCHEDULE = (
    "Hi John Smith, let's schedule a call with TechCorp Inc. on January 15th, 2024 "
    "at 2:00 PM. Best regards, Sarah"
)
SCENARIO_CANCEL = "We need to cancel tomorrow's meeting, sorry for the short notice."

MODEL_ANSWER = json.dumps({
    "contactName": "Sarah Lee",
    "email": "sarah@techcorp.com",
    "company": "TechCorp Inc.",
    "datetime": "January 15, 2024 at 2:00 PM",
    "participants": ["sarah@techcorp.com", "john@acme.com"],
    "intent": "schedule_meeting",
    "confidence": 0.9,
    "reasoning": "explicit request with date and time",
})


class TestHeuristicScenarios:
    """End-to-end parsing without a language model"""

    def test_schedule_scenario(self, pipeline):
        record = pipeline.parse(SCENARIO_SCHEDULE)

        assert record.contact_name == "Sarah"
        assert record.company == "TechCorp Inc."
        assert record.datetime == "January 15, 2024 at 2:00 PM"
        assert record.intent == MeetingIntent.SCHEDULE
        assert record.confidence == 0.95
        assert record.reasoning.startswith("fallback:")
        assert not record.from_model

    def test_cancel_scenario(self, pipeline):
        record = pipeline.parse(SCENARIO_CANCEL)

        assert record.intent == MeetingIntent.CANCEL
        assert record.datetime == "March 11, 2025"
        assert record.contact_name == UNKNOWN_CONTACT

    def test_empty_input(self, pipeline):
        record = pipeline.parse("")

        assert record.contact_name == UNKNOWN_CONTACT
        assert record.email == NO_EMAIL
        assert record.company == UNKNOWN_COMPANY
        assert record.datetime == NOT_SPECIFIED
        assert record.participants == (NO_EMAIL,)
        assert record.intent == MeetingIntent.GENERAL
        assert record.confidence == 0.5

    def test_sentinel_participants_still_contain_at(self, pipeline):
        record = pipeline.parse("Let's schedule a call. Best regards, Sarah")
        assert record.email == NO_EMAIL
        assert all('@' in p for p in record.participants)

    def test_emails_become_participants(self, pipeline):
        text = (
            "Let's meet. Loop in b@acme.com, c@acme.com, d@acme.com and B@acme.com.\n"
            "Sarah\nsarah@acme.com"
        )
        record = pipeline.parse(text)

        assert record.email == "b@acme.com"
        assert record.participants == ("b@acme.com", "c@acme.com", "d@acme.com")

    def test_parse_is_idempotent(self, pipeline):
        assert pipeline.parse(SCENARIO_SCHEDULE) == pipeline.parse(SCENARIO_SCHEDULE)

    def test_extra_field_never_lowers_confidence(self, pipeline):
        without_date = pipeline.parse("Let's schedule a call. Best regards, Sarah")
        with_date = pipeline.parse("Let's schedule a call on March 20, 2025. Best regards, Sarah")

        assert with_date.datetime == "March 20, 2025"
        assert with_date.confidence >= without_date.confidence

    def test_messy_whitespace_is_cleaned(self, pipeline):
        record = pipeline.parse("Hi,\r\n\r\n\r\n\r\nCan we   meet tomorrow at 3pm?\r\n")
        assert record.datetime == "March 11, 2025 at 3:00 PM"

    def test_parse_never_raises(self, pipeline, monkeypatch):
        def explode(text):
            raise RuntimeError("boom")

        monkeypatch.setattr(pipeline.entity_extractor, "extract_emails", explode)
        record = pipeline.parse(SCENARIO_SCHEDULE)

        assert record.reasoning == "fallback: unexpected error"
        assert record.confidence == 0.5

    def test_record_dict_uses_camel_case(self, pipeline):
        data = pipeline.parse(SCENARIO_SCHEDULE).to_dict()

        assert data["contactName"] == "Sarah"
        assert data["intent"] == "schedule_meeting"
        assert data["participants"] == [NO_EMAIL]


class TestOutcomes:
    """parse_with_outcome variants"""

    def test_no_model_is_fallback(self, pipeline):
        outcome = pipeline.parse_with_outcome(SCENARIO_SCHEDULE)

        assert isinstance(outcome, FallbackUsed)
        assert outcome.reason == "model not configured"

    def test_required_model_missing_is_fatal(self, pipeline):
        outcome = pipeline.parse_with_outcome(SCENARIO_SCHEDULE, require_model=True)

        assert isinstance(outcome, FatalError)
        assert outcome.kind == ModelErrorKind.NOT_CONFIGURED
        assert outcome.record.contact_name == "Sarah"

    def test_model_answer_adopted(self, make_model_pipeline):
        pipeline, llm = make_model_pipeline(f"```json\n{MODEL_ANSWER}\n```")
        outcome = pipeline.parse_with_outcome(SCENARIO_SCHEDULE)

        assert isinstance(outcome, ParsedOk)
        record = outcome.record
        assert record.contact_name == "Sarah Lee"
        assert record.email == "sarah@techcorp.com"
        assert record.participants == ("sarah@techcorp.com", "john@acme.com")
        assert record.confidence == 0.9
        assert record.reasoning == "model: explicit request with date and time"
        assert record.from_model
        assert len(llm.calls) == 1

    def test_partial_model_answer_filled_by_heuristics(self, make_model_pipeline):
        pipeline, _ = make_model_pipeline('{"intent": "book_it", "confidence": 1.7, "participants": "bob"}')
        record = pipeline.parse_with_outcome(SCENARIO_SCHEDULE).record

        assert record.contact_name == "Sarah"
        assert record.company == "TechCorp Inc."
        assert record.datetime == "January 15, 2024 at 2:00 PM"
        assert record.intent == MeetingIntent.SCHEDULE
        assert record.confidence == 1.0
        assert record.participants == (NO_EMAIL,)

    def test_transient_failure_is_retried(self, make_model_pipeline):
        pipeline, llm = make_model_pipeline(ConnectionError("connection reset"), MODEL_ANSWER)
        outcome = pipeline.parse_with_outcome(SCENARIO_SCHEDULE)

        assert isinstance(outcome, ParsedOk)
        assert len(llm.calls) == 2

    def test_exhausted_retries_fall_back(self, make_model_pipeline):
        pipeline, llm = make_model_pipeline(TimeoutError("deadline exceeded"), max_attempts=2)
        outcome = pipeline.parse_with_outcome(SCENARIO_SCHEDULE)

        assert isinstance(outcome, FallbackUsed)
        assert outcome.reason.startswith("model unavailable")
        assert outcome.record.contact_name == "Sarah"
        assert len(llm.calls) == 2

    def test_authentication_failure_is_fatal(self, make_model_pipeline):
        pipeline, llm = make_model_pipeline(Exception("400 API key not valid. Please pass a valid API key."))
        outcome = pipeline.parse_with_outcome(SCENARIO_SCHEDULE)

        assert isinstance(outcome, FatalError)
        assert outcome.kind == ModelErrorKind.AUTHENTICATION
        assert outcome.record is not None
        assert len(llm.calls) == 1

    def test_quota_failure_is_fatal(self, make_model_pipeline):
        pipeline, llm = make_model_pipeline(Exception("429 RESOURCE_EXHAUSTED"))
        outcome = pipeline.parse_with_outcome(SCENARIO_SCHEDULE)

        assert isinstance(outcome, FatalError)
        assert outcome.kind == ModelErrorKind.QUOTA
        assert len(llm.calls) == 1

    def test_parse_returns_record_on_fatal_error(self, make_model_pipeline):
        pipeline, _ = make_model_pipeline(Exception("401 unauthorized"))
        record = pipeline.parse(SCENARIO_SCHEDULE)

        assert isinstance(record, ParsedEmailRecord)
        assert record.reasoning == "fallback: model authentication"

    def test_malformed_answer_is_reconstructed(self, make_model_pipeline):
        pipeline, _ = make_model_pipeline("Sorry, I cannot help with that.")
        outcome = pipeline.parse_with_outcome(SCENARIO_SCHEDULE)

        assert isinstance(outcome, FallbackUsed)
        assert outcome.reason == "malformed model response"
        assert outcome.record.company == "TechCorp Inc."

    def test_wrong_field_types_are_malformed(self, make_model_pipeline):
        pipeline, _ = make_model_pipeline('{"confidence": "very high"}')
        outcome = pipeline.parse_with_outcome(SCENARIO_SCHEDULE)

        assert isinstance(outcome, FallbackUsed)
        assert outcome.reason == "malformed model response"

    def test_empty_input_skips_model(self, make_model_pipeline):
        pipeline, llm = make_model_pipeline(MODEL_ANSWER)
        outcome = pipeline.parse_with_outcome("   ")

        assert isinstance(outcome, FallbackUsed)
        assert outcome.reason == "empty input"
        assert llm.calls == []


class TestBuildParticipants:
    """Participant list assembly"""

    def test_primary_first_and_deduplicated(self):
        result = build_participants("a@x.com", ["b@x.com", "A@x.com", "c@x.com"], limit=3)
        assert result == ("a@x.com", "b@x.com", "c@x.com")

    def test_entries_without_at_dropped(self):
        assert build_participants(NO_EMAIL, ["bob", "", None], limit=3) == (NO_EMAIL,)

    def test_capped(self):
        candidates = [f"user{i}@x.com" for i in range(10)]
        assert len(build_participants(NO_EMAIL, candidates, limit=5)) == 5
