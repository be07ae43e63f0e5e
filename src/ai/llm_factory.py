"""
LLM Client Factory for Google Gemini with validation and caching

Each factory is an explicit object built from an injected Config, so
independent pipelines (and tests) never share a cached client.

Usage:
    from src.ai.llm_factory import LLMFactory
    from src.utils.config import load_config

    config = load_config()
    factory = LLMFactory(config)

    llm = factory.create()
    response = llm.invoke([HumanMessage(content="Hello")])
"""
from typing import Optional

from langchain_google_genai import ChatGoogleGenerativeAI

from ..core.base.exceptions import ConfigurationException
from ..utils.config import Config
from ..utils.logger import setup_logger
from .llm_constants import (
    GEMINI_ALIASES, DEFAULT_TRANSPORT,
    LOG_ERROR, LOG_INFO, LOG_DEBUG
)

logger = setup_logger(__name__)

# Constants for validation
MIN_TEMPERATURE = 0.0
MAX_TEMPERATURE = 2.0
MIN_MAX_TOKENS = 1
MAX_MAX_TOKENS = 100000


class LLMFactory:
    """
    Factory for creating and caching a Google Gemini LLM client.

    The client is created lazily on first use and reused while the
    requested temperature and token limit stay the same.
    """

    def __init__(self, config: Config):
        self.config = config
        self._client: Optional[ChatGoogleGenerativeAI] = None
        self._client_key: Optional[tuple] = None

    @staticmethod
    def _validate_temperature(temperature: float) -> None:
        """
        Validate temperature parameter.

        Raises:
            ValueError: If temperature is out of valid range
        """
        if not (MIN_TEMPERATURE <= temperature <= MAX_TEMPERATURE):
            raise ValueError(
                f"Temperature must be between {MIN_TEMPERATURE} and {MAX_TEMPERATURE}, "
                f"got {temperature}"
            )

    @staticmethod
    def _validate_max_tokens(max_tokens: Optional[int]) -> None:
        """
        Validate max_tokens parameter.

        Raises:
            ValueError: If max_tokens is out of valid range
        """
        if max_tokens is not None and not (MIN_MAX_TOKENS <= max_tokens <= MAX_MAX_TOKENS):
            raise ValueError(
                f"max_tokens must be between {MIN_MAX_TOKENS} and {MAX_MAX_TOKENS}, "
                f"got {max_tokens}"
            )

    def _validate_config(self) -> None:
        """
        Validate the AI section of the configuration.

        Raises:
            ConfigurationException: If credentials or provider are missing or unsupported
        """
        ai = self.config.ai if self.config else None
        if not ai:
            raise ConfigurationException("Config must have an 'ai' section", setting="ai")

        if not ai.api_key:
            raise ConfigurationException("API key is required in config.ai.api_key", setting="ai.api_key")

        if not ai.provider:
            raise ConfigurationException("Provider is required in config.ai.provider", setting="ai.provider")

        provider = ai.provider.lower()
        if provider not in GEMINI_ALIASES:
            raise ConfigurationException(
                f"Unsupported provider: '{provider}'. "
                f"Only Gemini/Google providers are supported: {', '.join(GEMINI_ALIASES)}",
                setting="ai.provider"
            )

    def is_configured(self) -> bool:
        """True when a client could be created from the current config."""
        try:
            self._validate_config()
        except ConfigurationException:
            return False
        return True

    def create(
        self,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None
    ) -> ChatGoogleGenerativeAI:
        """
        Get or create the Gemini client.

        Args:
            temperature: Model temperature (config default if None)
            max_tokens: Maximum output tokens (config default if None)

        Returns:
            Configured ChatGoogleGenerativeAI instance

        Raises:
            ConfigurationException: If the AI config is missing or unsupported
            ValueError: If parameters are out of range
        """
        self._validate_config()
        ai = self.config.ai

        temp = temperature if temperature is not None else ai.temperature
        tokens = max_tokens or ai.max_tokens
        self._validate_temperature(temp)
        self._validate_max_tokens(tokens)

        key = (temp, tokens)
        if self._client is None or self._client_key != key:
            try:
                # Retries are handled by the caller with tenacity
                self._client = ChatGoogleGenerativeAI(
                    model=ai.model,
                    google_api_key=ai.api_key,
                    temperature=temp,
                    max_output_tokens=tokens,
                    timeout=ai.request_timeout_seconds,
                    max_retries=0,
                    transport=DEFAULT_TRANSPORT
                )
                self._client_key = key
                logger.debug(
                    f"{LOG_DEBUG} Created Google LLM client "
                    f"(model={ai.model}, temp={temp}, max_tokens={tokens})"
                )
            except Exception as e:
                logger.error(f"{LOG_ERROR} Failed to create Google LLM client: {e}")
                raise ValueError(f"Failed to create Google LLM client: {e}") from e

        return self._client

    def reset(self) -> None:
        """Drop the cached client so the next create() builds a fresh one."""
        self._client = None
        self._client_key = None
        logger.info(f"{LOG_INFO} Reset LLM client cache")
