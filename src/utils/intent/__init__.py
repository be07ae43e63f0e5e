"""
Intent Utilities

Provides meeting-intent phrase loading.
"""

from .intent_keywords import (
    IntentKeywords,
    load_intent_keywords,
    RESCHEDULE_PHRASES,
    CANCEL_PHRASES,
    SCHEDULE_PHRASES,
)

__all__ = [
    "IntentKeywords",
    "load_intent_keywords",
    "RESCHEDULE_PHRASES",
    "CANCEL_PHRASES",
    "SCHEDULE_PHRASES",
]
