"""
Utility modules - Shared utilities for the application

This module should NEVER import from other src modules (ai, core, services)
to maintain the import hierarchy and prevent circular dependencies.

All utilities are exported here for consistent access across the application.
"""

# ============================================
# CONFIGURATION
# ============================================
from .config import Config, ConfigDefaults, load_config, get_timezone

# ============================================
# LOGGING
# ============================================
from .logger import setup_logger, configure_from_config

# ============================================
# DATE/TIME HELPERS
# ============================================
from .datetime import (
    Clock,
    make_clock,
    to_24_hour,
    time_to_minutes,
    minutes_to_time,
    format_long_date,
)

# ============================================
# JSON (MODEL OUTPUT)
# ============================================
from .json_utils import extract_json_object

# ============================================
# RESILIENCE (RETRY)
# ============================================
from .resilience import (
    RetryConfig,
    retry_model_call,
)

# ============================================
# INTENT KEYWORDS
# ============================================
from .intent import (
    IntentKeywords,
    load_intent_keywords,
)

__all__ = [
    # Config
    "Config",
    "ConfigDefaults",
    "load_config",
    "get_timezone",
    # Logging
    "setup_logger",
    "configure_from_config",
    # Date/time helpers
    "Clock",
    "make_clock",
    "to_24_hour",
    "time_to_minutes",
    "minutes_to_time",
    "format_long_date",
    # JSON
    "extract_json_object",
    # Retry logic
    "RetryConfig",
    "retry_model_call",
    # Intent keywords
    "IntentKeywords",
    "load_intent_keywords",
]
