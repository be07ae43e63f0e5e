"""
Tests for intent phrase loading
"""
from src.utils.intent import (
    IntentKeywords,
    load_intent_keywords,
    RESCHEDULE_PHRASES,
    CANCEL_PHRASES,
    SCHEDULE_PHRASES,
)
from src.utils.intent.intent_keywords import FALLBACK_PHRASES


class TestIntentKeywords:
    """Loading phrase sets from YAML with built-in fallback"""

    def test_missing_file_uses_fallback(self, tmp_path):
        keywords = IntentKeywords(str(tmp_path / "absent.yaml"))
        assert keywords.get_phrases(CANCEL_PHRASES) == FALLBACK_PHRASES[CANCEL_PHRASES]

    def test_empty_file_uses_fallback(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        keywords = IntentKeywords(str(path))
        assert keywords.get_phrases(SCHEDULE_PHRASES) == FALLBACK_PHRASES[SCHEDULE_PHRASES]

    def test_yaml_overrides_and_missing_category(self, tmp_path):
        """Configured categories replace the built-ins; absent ones keep them"""
        path = tmp_path / "keywords.yaml"
        path.write_text("cancel_phrases:\n  - Scrap\n  - drop the call\n")

        keywords = IntentKeywords(str(path))

        assert keywords.get_phrases(CANCEL_PHRASES) == ("scrap", "drop the call")
        assert keywords.get_phrases(RESCHEDULE_PHRASES) == FALLBACK_PHRASES[RESCHEDULE_PHRASES]

    def test_default_project_file_loads(self):
        """The shipped config/intent_keywords.yaml is found without a path"""
        keywords = load_intent_keywords()
        assert "reschedule" in keywords.get_phrases(RESCHEDULE_PHRASES)
        assert "call off" in keywords.get_phrases(CANCEL_PHRASES)

    def test_matched_keywords(self, tmp_path):
        keywords = IntentKeywords(str(tmp_path / "absent.yaml"))
        matched = keywords.get_matched_keywords("Can we Reschedule the meeting?")

        assert "reschedule" in matched
        assert "meeting" in matched
        assert keywords.get_matched_keywords("nothing here", CANCEL_PHRASES) == []

    def test_unknown_category(self, tmp_path):
        keywords = IntentKeywords(str(tmp_path / "absent.yaml"))
        assert keywords.get_phrases("unknown") == ()
