"""
Email extraction - heuristic extractors, model path and the parsing pipeline
"""

from .models import (
    MeetingIntent,
    ParsedEmailRecord,
    ParsedOk,
    FallbackUsed,
    FatalError,
    ParseOutcome,
    UNKNOWN_CONTACT,
    UNKNOWN_COMPANY,
    NO_EMAIL,
    NOT_SPECIFIED,
)
from .datetime_extractor import DateTimeExtractor
from .entity_extractor import EntityExtractor
from .intent_classifier import IntentClassifier
from .confidence import ConfidenceScorer
from .llm_extractor import ModelExtractor, ModelResponse
from .pipeline import EmailParsingPipeline, build_participants

__all__ = [
    "MeetingIntent",
    "ParsedEmailRecord",
    "ParsedOk",
    "FallbackUsed",
    "FatalError",
    "ParseOutcome",
    "UNKNOWN_CONTACT",
    "UNKNOWN_COMPANY",
    "NO_EMAIL",
    "NOT_SPECIFIED",
    "DateTimeExtractor",
    "EntityExtractor",
    "IntentClassifier",
    "ConfidenceScorer",
    "ModelExtractor",
    "ModelResponse",
    "EmailParsingPipeline",
    "build_participants",
]
