"""
Configuration management
"""
import os
from typing import Any, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, model_validator


# ============================================
# CONFIGURATION DEFAULTS
# ============================================

class ConfigDefaults:
    """Default configuration values as constants"""

    # Agent defaults
    AGENT_NAME = "Meeting Triage Assistant"
    AGENT_TIMEZONE_DEFAULT = "America/Los_Angeles"

    # AI/LLM defaults
    AI_PROVIDER_GEMINI = "gemini"
    AI_MODEL_DEFAULT = "gemini-2.5-flash"
    AI_TEMPERATURE_DEFAULT = 0.1
    AI_MAX_TOKENS_DEFAULT = 500
    AI_REQUEST_TIMEOUT_SECONDS = 15.0
    AI_MAX_ATTEMPTS = 3
    AI_RETRY_WAIT_SECONDS = 2.0

    # Triage defaults
    TRIAGE_MAX_PARTICIPANTS = 3
    TRIAGE_CONFIDENCE_BASE = 0.5
    TRIAGE_CONFIDENCE_INCREMENT = 0.15
    TRIAGE_CONFIDENCE_CAP = 0.95
    TRIAGE_AUTO_SCHEDULE_THRESHOLD = 0.7
    TRIAGE_KEYWORDS_PATH_DEFAULT = "config/intent_keywords.yaml"

    # Scheduling defaults
    SCHEDULING_BUSINESS_START_HOUR = 9
    SCHEDULING_BUSINESS_END_HOUR = 17
    SCHEDULING_SLOT_MINUTES = 60
    SCHEDULING_MAX_SUGGESTIONS = 4
    SCHEDULING_MEETING_DURATION_MINUTES = 60
    SCHEDULING_RECENCY_DAYS = 7

    # Logging defaults
    LOGGING_LEVEL_INFO = "INFO"
    LOGGING_FORMAT_CONSOLE = "console"

    # Config file defaults
    CONFIG_PATH_DEFAULT = "config/config.yaml"

    # Timezone mapping
    TIMEZONE_AUTO = "auto"
    TIMEZONE_DEFAULT = "America/Los_Angeles"


# ============================================
# CONFIGURATION MODELS
# ============================================

class AgentConfig(BaseModel):
    """Agent configuration"""
    name: str = ConfigDefaults.AGENT_NAME
    timezone: str = ConfigDefaults.AGENT_TIMEZONE_DEFAULT  # IANA name, or "auto" to detect from system


class AIConfig(BaseModel):
    """AI/LLM configuration"""
    provider: str = ConfigDefaults.AI_PROVIDER_GEMINI
    model: str = ConfigDefaults.AI_MODEL_DEFAULT
    api_key: Optional[str] = None
    temperature: float = ConfigDefaults.AI_TEMPERATURE_DEFAULT
    max_tokens: int = ConfigDefaults.AI_MAX_TOKENS_DEFAULT
    request_timeout_seconds: float = ConfigDefaults.AI_REQUEST_TIMEOUT_SECONDS
    max_attempts: int = ConfigDefaults.AI_MAX_ATTEMPTS
    retry_wait_seconds: float = ConfigDefaults.AI_RETRY_WAIT_SECONDS


class TriageConfig(BaseModel):
    """Email parsing pipeline configuration"""
    max_participants: int = ConfigDefaults.TRIAGE_MAX_PARTICIPANTS
    confidence_base: float = ConfigDefaults.TRIAGE_CONFIDENCE_BASE
    confidence_increment: float = ConfigDefaults.TRIAGE_CONFIDENCE_INCREMENT
    confidence_cap: float = ConfigDefaults.TRIAGE_CONFIDENCE_CAP
    auto_schedule_threshold: float = ConfigDefaults.TRIAGE_AUTO_SCHEDULE_THRESHOLD
    keywords_path: str = ConfigDefaults.TRIAGE_KEYWORDS_PATH_DEFAULT

    @model_validator(mode="after")
    def _check_bounds(self) -> "TriageConfig":
        if not 3 <= self.max_participants <= 5:
            raise ValueError("max_participants must be between 3 and 5")
        if not 0.0 <= self.confidence_base <= self.confidence_cap <= 1.0:
            raise ValueError("confidence values must satisfy 0 <= base <= cap <= 1")
        if self.confidence_increment < 0:
            raise ValueError("confidence_increment must be non-negative")
        return self


class SchedulingConfig(BaseModel):
    """Availability and event matching configuration"""
    business_start_hour: int = ConfigDefaults.SCHEDULING_BUSINESS_START_HOUR
    business_end_hour: int = ConfigDefaults.SCHEDULING_BUSINESS_END_HOUR
    slot_minutes: int = ConfigDefaults.SCHEDULING_SLOT_MINUTES
    max_suggestions: int = ConfigDefaults.SCHEDULING_MAX_SUGGESTIONS
    meeting_duration_minutes: int = ConfigDefaults.SCHEDULING_MEETING_DURATION_MINUTES
    recency_days: int = ConfigDefaults.SCHEDULING_RECENCY_DAYS

    @model_validator(mode="after")
    def _check_hours(self) -> "SchedulingConfig":
        if not 0 <= self.business_start_hour < self.business_end_hour <= 24:
            raise ValueError("business hours must satisfy 0 <= start < end <= 24")
        if self.slot_minutes <= 0:
            raise ValueError("slot_minutes must be positive")
        return self


class LoggingConfig(BaseModel):
    """Logging configuration"""
    level: str = ConfigDefaults.LOGGING_LEVEL_INFO
    file: Optional[str] = None
    format: str = ConfigDefaults.LOGGING_FORMAT_CONSOLE


class Config(BaseModel):
    """Main configuration"""
    agent: AgentConfig = AgentConfig()
    ai: Optional[AIConfig] = None
    triage: TriageConfig = TriageConfig()
    scheduling: SchedulingConfig = SchedulingConfig()
    logging: LoggingConfig = LoggingConfig()


def load_config(config_path: str = ConfigDefaults.CONFIG_PATH_DEFAULT) -> Config:
    """
    Load configuration from YAML file and environment variables.

    A missing file yields the default configuration.
    """
    load_dotenv()

    if not os.path.exists(config_path):
        return Config()

    with open(config_path, 'r') as f:
        config_dict = yaml.safe_load(f) or {}

    config_dict = _replace_env_vars(config_dict)

    return Config(**config_dict)


def _replace_env_vars(obj: Any) -> Any:
    """
    Recursively replace ${VAR} placeholders with environment variables.

    Unset variables become None so optional fields (api_key) stay unset.
    """
    if isinstance(obj, dict):
        return {k: _replace_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_replace_env_vars(item) for item in obj]
    elif isinstance(obj, str) and obj.startswith("${") and obj.endswith("}"):
        var_name = obj[2:-1]
        return os.getenv(var_name) or None
    return obj


def get_timezone(config: Optional[Config] = None) -> str:
    """
    Get timezone from config or environment variable.

    Args:
        config: Optional Config object

    Returns:
        Timezone string (e.g., "America/Los_Angeles", "UTC")
    """
    env_tz = os.getenv("TIMEZONE")
    if env_tz and env_tz != ConfigDefaults.TIMEZONE_AUTO:
        return env_tz

    if config and config.agent and config.agent.timezone:
        tz = config.agent.timezone
        if tz == ConfigDefaults.TIMEZONE_AUTO:
            import datetime
            local_tz = datetime.datetime.now().astimezone().tzinfo
            return getattr(local_tz, 'key', ConfigDefaults.TIMEZONE_DEFAULT)
        return tz

    return ConfigDefaults.TIMEZONE_DEFAULT
