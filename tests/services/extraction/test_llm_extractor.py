"""
Tests for ModelExtractor request/decode and the model error taxonomy
"""
import pytest
from langchain_core.messages import HumanMessage, SystemMessage

from src.ai.exceptions import (
    ModelAuthenticationError,
    ModelErrorKind,
    ModelQuotaExceededError,
    ModelResponseParseError,
    ModelUnavailableError,
    classify_model_error,
)
from src.services.extraction import ModelExtractor


@pytest.fixture
def make_extractor(make_model_pipeline):
    def _make(*responses, max_attempts=3):
        pipeline, llm = make_model_pipeline(*responses, max_attempts=max_attempts)
        return pipeline.model_extractor, llm
    return _make


class TestBuildMessages:
    """Prompt assembly"""

    def test_system_and_user_messages(self, make_extractor):
        extractor, _ = make_extractor("{}")
        system, user = extractor.build_messages("Lunch on Friday?")

        assert isinstance(system, SystemMessage)
        assert isinstance(user, HumanMessage)
        assert "March 10, 2025" in system.content
        assert "Lunch on Friday?" in user.content


class TestRequest:
    """Calling the model with retries"""

    def test_returns_text(self, make_extractor):
        extractor, llm = make_extractor('{"intent": "general"}')
        assert extractor.request("hello") == '{"intent": "general"}'
        assert len(llm.calls) == 1

    def test_list_content_is_joined(self, make_extractor):
        extractor, llm = make_extractor("")
        llm.responses = [[{"type": "text", "text": '{"a": '}, {"type": "text", "text": "1}"}]]
        assert extractor.request("hello") == '{"a": 1}'

    def test_transient_error_exhausts_attempts(self, make_extractor):
        extractor, llm = make_extractor(ConnectionError("reset by peer"), max_attempts=3)

        with pytest.raises(ModelUnavailableError):
            extractor.request("hello")
        assert len(llm.calls) == 3

    def test_auth_error_is_not_retried(self, make_extractor):
        extractor, llm = make_extractor(PermissionError("PERMISSION_DENIED: API key not valid"))

        with pytest.raises(ModelAuthenticationError):
            extractor.request("hello")
        assert len(llm.calls) == 1

    def test_quota_error_is_not_retried(self, make_extractor):
        extractor, llm = make_extractor(RuntimeError("insufficient_quota"))

        with pytest.raises(ModelQuotaExceededError):
            extractor.request("hello")
        assert len(llm.calls) == 1


class TestDecode:
    """Decoding the model answer"""

    def test_prose_around_object(self):
        response = ModelExtractor.decode('Here you go: {"contactName": "Ann", "confidence": 0.7} Thanks!')
        assert response.contactName == "Ann"
        assert response.confidence == 0.7

    def test_unknown_keys_ignored(self):
        assert ModelExtractor.decode('{"mood": "happy", "email": "a@b.com"}').email == "a@b.com"

    def test_single_participant_string(self):
        assert ModelExtractor.decode('{"participants": "a@b.com"}').participants == ["a@b.com"]

    def test_no_object(self):
        with pytest.raises(ModelResponseParseError):
            ModelExtractor.decode("no json here")

    def test_wrong_types(self):
        with pytest.raises(ModelResponseParseError):
            ModelExtractor.decode('{"participants": 5}')


class TestFromConfig:
    """Construction from configuration"""

    def test_none_without_credentials(self, test_config, fixed_clock):
        assert ModelExtractor.from_config(test_config, fixed_clock) is None


class TestErrorClassification:
    """Raw provider exceptions mapped onto kinds"""

    class ProviderError(Exception):
        def __init__(self, message, status_code=None):
            super().__init__(message)
            self.status_code = status_code

    def test_status_code_auth(self):
        assert classify_model_error(self.ProviderError("denied", status_code=403)) == ModelErrorKind.AUTHENTICATION

    def test_rate_limit_without_quota_marker_is_transient(self):
        assert classify_model_error(self.ProviderError("slow down", status_code=429)) == ModelErrorKind.UNAVAILABLE

    def test_quota_marker(self):
        assert classify_model_error(self.ProviderError("429 RESOURCE_EXHAUSTED")) == ModelErrorKind.QUOTA

    def test_parse_error_keeps_kind(self):
        assert classify_model_error(ModelResponseParseError("bad")) == ModelErrorKind.PARSE
        assert ModelResponseParseError("bad").is_fatal is False
        assert ModelQuotaExceededError("q").is_fatal is True
