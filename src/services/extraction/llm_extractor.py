"""
Model-backed extraction

Sends the cleaned email to a LangChain chat model and decodes the first
JSON object of its answer. Transient failures are retried with a fixed
wait; authentication and quota failures surface immediately.
"""
from datetime import datetime
from typing import Any, List, Optional

from langchain_core.messages import HumanMessage, SystemMessage
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from src.ai.exceptions import (
    ModelResponseParseError,
    ModelServiceError,
    is_transient_model_error,
    to_model_service_error,
)
from src.ai.llm_factory import LLMFactory
from src.ai.prompts import EMAIL_TRIAGE_SYSTEM_PROMPT, EMAIL_TRIAGE_USER_PROMPT
from src.utils.config import Config, ConfigDefaults
from src.utils.datetime import Clock, format_long_date
from src.utils.json_utils import extract_json_object
from src.utils.logger import setup_logger
from src.utils.resilience import retry_model_call

logger = setup_logger(__name__)


class ModelResponse(BaseModel):
    """Shape of the JSON object the model is asked to return"""
    model_config = ConfigDict(extra="ignore")

    contactName: Optional[str] = None
    email: Optional[str] = None
    company: Optional[str] = None
    datetime: Optional[str] = None
    participants: Optional[List[str]] = None
    intent: Optional[str] = None
    confidence: Optional[float] = None
    reasoning: Optional[str] = None

    @field_validator("participants", mode="before")
    @classmethod
    def _participants_as_list(cls, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, str):
            return [value]
        if isinstance(value, (list, tuple)):
            return [str(p) for p in value if p]
        return value


def _message_text(response: Any) -> str:
    content = response.content if hasattr(response, 'content') else response
    if isinstance(content, list):
        # Multi-part content from Gemini: keep the text parts
        parts = []
        for part in content:
            if isinstance(part, dict):
                parts.append(str(part.get("text", "")))
            else:
                parts.append(str(part))
        return "".join(parts)
    return content if isinstance(content, str) else str(content)


class ModelExtractor:
    """
    Language-model extraction client.

    Args:
        llm: LangChain chat model (anything with `invoke(messages)`)
        max_attempts: Attempts per request, transient failures only
        wait_seconds: Fixed wait between attempts
        clock: "now" used to tell the model today's date
    """

    def __init__(
        self,
        llm,
        max_attempts: int = ConfigDefaults.AI_MAX_ATTEMPTS,
        wait_seconds: float = ConfigDefaults.AI_RETRY_WAIT_SECONDS,
        clock: Optional[Clock] = None
    ):
        self.llm = llm
        self.max_attempts = max_attempts
        self.wait_seconds = wait_seconds
        self._clock = clock or datetime.now

    @classmethod
    def from_config(cls, config: Config, clock: Optional[Clock] = None) -> Optional["ModelExtractor"]:
        """Build from config; None when no model is configured."""
        factory = LLMFactory(config)
        if not factory.is_configured():
            logger.info("[Model] No language model configured, heuristics only")
            return None
        return cls(
            factory.create(),
            max_attempts=config.ai.max_attempts,
            wait_seconds=config.ai.retry_wait_seconds,
            clock=clock
        )

    def build_messages(self, email_text: str) -> list:
        system = EMAIL_TRIAGE_SYSTEM_PROMPT.format(current_date=format_long_date(self._clock()))
        return [
            SystemMessage(content=system),
            HumanMessage(content=EMAIL_TRIAGE_USER_PROMPT.format(email_text=email_text)),
        ]

    def request(self, email_text: str) -> str:
        """
        Call the model and return its raw text.

        Raises:
            ModelServiceError: subclass matching the failure kind, after
                retries are exhausted for transient failures
        """
        invoke = retry_model_call(
            is_transient=is_transient_model_error,
            max_attempts=self.max_attempts,
            wait_seconds=self.wait_seconds
        )(self.llm.invoke)

        try:
            response = invoke(self.build_messages(email_text))
        except Exception as e:
            error = to_model_service_error(e)
            logger.warning(f"[Model] Request failed ({error.kind.value}): {error.message}")
            raise error from e

        return _message_text(response)

    @staticmethod
    def decode(raw: str) -> ModelResponse:
        """
        Decode and shape-check the model answer.

        Raises:
            ModelResponseParseError: no JSON object, or wrong field types
        """
        data = extract_json_object(raw)
        if data is None:
            raise ModelResponseParseError(f"No JSON object in model response: {raw[:100]!r}")
        try:
            return ModelResponse.model_validate(data)
        except ValidationError as e:
            raise ModelResponseParseError(f"Model response has invalid fields: {e}", cause=e) from e

    def extract(self, email_text: str) -> ModelResponse:
        """request() then decode(); raises ModelServiceError subclasses."""
        return self.decode(self.request(email_text))


__all__ = ["ModelExtractor", "ModelResponse", "ModelServiceError"]
