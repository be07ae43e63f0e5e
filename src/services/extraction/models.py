"""
Extraction result types

ParsedEmailRecord is the pipeline's immutable output. Parse outcomes are a
closed set of variants so callers can tell the model path from a fallback
without catching exceptions.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from src.ai.exceptions import ModelErrorKind

# Sentinels used when a field cannot be resolved
UNKNOWN_CONTACT = "Unknown Contact"
NO_EMAIL = "no-email@example.com"
UNKNOWN_COMPANY = "Unknown Company"
NOT_SPECIFIED = "Not specified"

# Provenance prefixes carried in `reasoning`
REASONING_MODEL = "model"
REASONING_FALLBACK = "fallback"


class MeetingIntent(str, Enum):
    """Purpose of an email relative to meetings"""
    SCHEDULE = "schedule_meeting"
    RESCHEDULE = "reschedule_meeting"
    CANCEL = "cancel_meeting"
    GENERAL = "general"


class ParsedEmailRecord(BaseModel):
    """Normalized extraction result for one email"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    contact_name: str = Field(default=UNKNOWN_CONTACT, alias="contactName")
    email: str = NO_EMAIL
    company: str = UNKNOWN_COMPANY
    datetime: str = NOT_SPECIFIED
    participants: Tuple[str, ...] = (NO_EMAIL,)
    intent: MeetingIntent = MeetingIntent.GENERAL
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)
    reasoning: str = ""

    @property
    def from_model(self) -> bool:
        return self.reasoning.startswith(f"{REASONING_MODEL}:")

    def to_dict(self) -> dict:
        """camelCase dictionary, the shape the model is asked to produce"""
        return self.model_dump(by_alias=True, mode="json")


@dataclass(frozen=True)
class ParsedOk:
    """The model path produced the record"""
    record: ParsedEmailRecord


@dataclass(frozen=True)
class FallbackUsed:
    """Heuristics produced the record"""
    record: ParsedEmailRecord
    reason: str


@dataclass(frozen=True)
class FatalError:
    """Model failure the user has to act on (credentials, quota, parse)"""
    kind: ModelErrorKind
    message: str
    record: Optional[ParsedEmailRecord] = None


ParseOutcome = Union[ParsedOk, FallbackUsed, FatalError]
