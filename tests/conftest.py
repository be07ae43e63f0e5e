"""
Pytest configuration and fixtures
"""
import pytest
from datetime import datetime

from src.utils.config import (
    Config,
    AgentConfig,
    AIConfig,
    TriageConfig,
    SchedulingConfig,
)
from src.utils.intent import IntentKeywords
from src.services.extraction import EmailParsingPipeline, ModelExtractor


FIXED_NOW = datetime(2025, 3, 10, 9, 30)


class StubMessage:
    """Mimics a LangChain AIMessage"""

    def __init__(self, content):
        self.content = content


class StubLLM:
    """
    LangChain-style chat model returning canned answers.

    Each item in `responses` is either a string (returned as message
    content) or an exception instance (raised).
    """

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def invoke(self, messages):
        self.calls.append(messages)
        item = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(item, BaseException):
            raise item
        return StubMessage(item)


@pytest.fixture
def fixed_clock():
    """Clock pinned to Monday, March 10, 2025 09:30"""
    return lambda: FIXED_NOW


@pytest.fixture
def test_config():
    """Test configuration without model credentials"""
    return Config(
        agent=AgentConfig(
            name="Test Agent",
            timezone="UTC"
        ),
        triage=TriageConfig(),
        scheduling=SchedulingConfig()
    )


@pytest.fixture
def model_config(test_config):
    """Test configuration with model credentials"""
    return test_config.model_copy(update={
        "ai": AIConfig(
            provider="gemini",
            model="gemini-2.5-flash",
            api_key="test_key",
            temperature=0.1,
            max_tokens=500,
            max_attempts=3,
            retry_wait_seconds=0
        )
    })


@pytest.fixture
def keywords(tmp_path):
    """Built-in intent phrases (no YAML file)"""
    return IntentKeywords(str(tmp_path / "missing.yaml"))


@pytest.fixture
def pipeline(test_config, fixed_clock, keywords):
    """Heuristic-only pipeline"""
    return EmailParsingPipeline(test_config, keywords=keywords, clock=fixed_clock)


@pytest.fixture
def make_model_pipeline(test_config, fixed_clock, keywords):
    """Factory: pipeline whose model answers with the given responses"""
    def _make(*responses, max_attempts=3):
        llm = StubLLM(responses)
        extractor = ModelExtractor(llm, max_attempts=max_attempts, wait_seconds=0, clock=fixed_clock)
        return EmailParsingPipeline(
            test_config,
            model_extractor=extractor,
            keywords=keywords,
            clock=fixed_clock
        ), llm
    return _make
