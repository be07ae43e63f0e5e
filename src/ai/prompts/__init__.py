"""
Prompt templates for AI operations

Centralized prompt management with consistent formatting.
"""

from .email_triage_prompts import (
    EMAIL_TRIAGE_SYSTEM_PROMPT,
    EMAIL_TRIAGE_USER_PROMPT,
)

__all__ = [
    "EMAIL_TRIAGE_SYSTEM_PROMPT",
    "EMAIL_TRIAGE_USER_PROMPT",
]
