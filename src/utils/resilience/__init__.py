"""
Resilience Utilities

Provides bounded retry logic for remote model calls.
"""

from .retry import (
    RetryConfig,
    retry_model_call,
)

__all__ = [
    "RetryConfig",
    "retry_model_call",
]
