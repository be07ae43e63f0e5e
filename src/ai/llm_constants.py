"""
LLM Factory Constants

Centralized constants for LLM provider names and configuration.
"""
from typing import Tuple

# Provider Names
PROVIDER_GEMINI = "gemini"
PROVIDER_GOOGLE = "google"

# Provider Aliases (for flexible matching)
GEMINI_ALIASES: Tuple[str, ...] = (PROVIDER_GEMINI, PROVIDER_GOOGLE)

# Default Values
DEFAULT_TRANSPORT = "rest"  # REST is more stable than gRPC for Google

# Log Prefix Constants
LOG_ERROR = "[ERROR]"
LOG_INFO = "[INFO]"
LOG_DEBUG = "[DEBUG]"
