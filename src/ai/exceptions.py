"""
Language-model service exceptions

Structured errors for remote model calls, plus classification of raw
provider exceptions into fatal and transient kinds.
"""
from enum import Enum
from typing import Optional


class ModelErrorKind(str, Enum):
    """Why a model-backed extraction could not be used"""
    AUTHENTICATION = "authentication"
    QUOTA = "quota"
    UNAVAILABLE = "unavailable"
    PARSE = "parse"
    NOT_CONFIGURED = "not_configured"


# Markers looked up in the exception text (case-insensitive)
AUTH_MARKERS = (
    "permission_denied",
    "api key not valid",
    "invalid_api_key",
    "invalid api key",
    "unauthenticated",
    "unauthorized",
)
QUOTA_MARKERS = (
    "insufficient_quota",
    "resource_exhausted",
    "quota",
)
AUTH_STATUS_CODES = (401, 403)


class ModelServiceError(Exception):
    """Base exception for language-model service failures"""

    kind: ModelErrorKind = ModelErrorKind.UNAVAILABLE

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.message = message
        self.cause = cause
        super().__init__(message)

    @property
    def is_fatal(self) -> bool:
        """Fatal errors are reported to the caller instead of silently falling back"""
        return self.kind in (ModelErrorKind.AUTHENTICATION, ModelErrorKind.QUOTA)


class ModelAuthenticationError(ModelServiceError):
    """Invalid or missing credentials"""
    kind = ModelErrorKind.AUTHENTICATION


class ModelQuotaExceededError(ModelServiceError):
    """Account quota exhausted"""
    kind = ModelErrorKind.QUOTA


class ModelUnavailableError(ModelServiceError):
    """Network errors, timeouts, server errors and plain rate limits"""
    kind = ModelErrorKind.UNAVAILABLE


class ModelResponseParseError(ModelServiceError):
    """Model answered with something that is not a usable record"""
    kind = ModelErrorKind.PARSE


def _status_code(exc: BaseException) -> Optional[int]:
    for attr in ("status_code", "code", "status"):
        value = getattr(exc, attr, None)
        if isinstance(value, int):
            return value
    response = getattr(exc, "response", None)
    value = getattr(response, "status_code", None)
    return value if isinstance(value, int) else None


def classify_model_error(exc: BaseException) -> ModelErrorKind:
    """
    Map a raw provider exception onto a ModelErrorKind.

    Only AUTHENTICATION, QUOTA and UNAVAILABLE are produced here; anything
    not recognized as an auth or quota failure counts as transient.
    """
    if isinstance(exc, ModelServiceError):
        return exc.kind

    text = f"{type(exc).__name__} {exc}".lower()

    if _status_code(exc) in AUTH_STATUS_CODES or any(m in text for m in AUTH_MARKERS):
        return ModelErrorKind.AUTHENTICATION
    if any(m in text for m in QUOTA_MARKERS):
        return ModelErrorKind.QUOTA
    return ModelErrorKind.UNAVAILABLE


def is_transient_model_error(exc: BaseException) -> bool:
    """Retry predicate: only UNAVAILABLE failures are worth another attempt"""
    return classify_model_error(exc) == ModelErrorKind.UNAVAILABLE


def to_model_service_error(exc: BaseException) -> ModelServiceError:
    """Wrap a raw provider exception in the matching ModelServiceError subclass"""
    if isinstance(exc, ModelServiceError):
        return exc

    kind = classify_model_error(exc)
    error_cls = {
        ModelErrorKind.AUTHENTICATION: ModelAuthenticationError,
        ModelErrorKind.QUOTA: ModelQuotaExceededError,
    }.get(kind, ModelUnavailableError)
    return error_cls(f"{type(exc).__name__}: {exc}", cause=exc)
