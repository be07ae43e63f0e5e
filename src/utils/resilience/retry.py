"""
Retry Logic Utilities for External API Calls
Provides bounded, fixed-backoff retry strategies for remote model calls
"""
import logging
from functools import wraps
from typing import Callable

from tenacity import (
    retry,
    stop_after_attempt,
    wait_fixed,
    retry_if_exception,
    before_sleep_log,
)

from ..logger import setup_logger

logger = setup_logger(__name__)


# ============================================
# RETRY CONFIGURATIONS
# ============================================

class RetryConfig:
    """Retry configuration constants"""

    # Language-model API retry settings
    MODEL_MAX_ATTEMPTS = 3
    MODEL_WAIT_SECONDS = 2.0

    # Generic API retry settings
    DEFAULT_MAX_ATTEMPTS = 2
    DEFAULT_WAIT_SECONDS = 1.0


# ============================================
# RETRY CONDITION FUNCTIONS
# ============================================

def _never_retry(exception: BaseException) -> bool:
    return False


# ============================================
# RETRY DECORATORS
# ============================================

def retry_model_call(
    is_transient: Callable[[BaseException], bool] = _never_retry,
    max_attempts: int = RetryConfig.MODEL_MAX_ATTEMPTS,
    wait_seconds: float = RetryConfig.MODEL_WAIT_SECONDS
) -> Callable:
    """
    Decorator for language-model calls with retry logic

    Only exceptions accepted by `is_transient` are retried; anything else
    propagates on the first failure. The last exception is re-raised once
    attempts are exhausted.

    Args:
        is_transient: Predicate deciding whether an exception is retryable
        max_attempts: Maximum attempts (including the first call)
        wait_seconds: Fixed delay between attempts

    Example:
        @retry_model_call(is_transient=is_transient_model_error, max_attempts=3)
        def invoke(messages):
            return llm.invoke(messages)
    """
    def decorator(func: Callable) -> Callable:
        @retry(
            stop=stop_after_attempt(max(1, max_attempts)),
            wait=wait_fixed(wait_seconds),
            retry=retry_if_exception(is_transient),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True
        )
        @wraps(func)
        def wrapper(*args, **kwargs):
            logger.debug(f"Calling model API: {getattr(func, '__name__', type(func).__name__)}")
            return func(*args, **kwargs)

        return wrapper
    return decorator

