"""
Confidence Scorer

A bounded heuristic quality score: a base value plus a fixed increment per
resolved field, capped below certainty. Not a calibrated probability.
"""
from typing import Sequence

from src.utils.config import ConfigDefaults, TriageConfig

from .entity_extractor import MAX_ENTITY_LENGTH, NAME_STOPLIST
from .models import NOT_SPECIFIED, UNKNOWN_COMPANY, UNKNOWN_CONTACT


class ConfidenceScorer:
    """
    Scores an extraction from the fields it resolved.

    Each of contact name, company, datetime and "at least one email" adds
    `increment` once, so adding a resolved field never lowers the score.
    """

    def __init__(
        self,
        base: float = ConfigDefaults.TRIAGE_CONFIDENCE_BASE,
        increment: float = ConfigDefaults.TRIAGE_CONFIDENCE_INCREMENT,
        cap: float = ConfigDefaults.TRIAGE_CONFIDENCE_CAP
    ):
        self.base = base
        self.increment = increment
        self.cap = cap

    @classmethod
    def from_config(cls, triage: TriageConfig) -> "ConfidenceScorer":
        return cls(
            base=triage.confidence_base,
            increment=triage.confidence_increment,
            cap=triage.confidence_cap
        )

    def score(
        self,
        contact_name: str,
        company: str,
        datetime_text: str,
        emails: Sequence[str]
    ) -> float:
        resolved = 0
        if contact_name and contact_name != UNKNOWN_CONTACT and contact_name.lower() not in NAME_STOPLIST:
            resolved += 1
        if company and company != UNKNOWN_COMPANY and len(company) <= MAX_ENTITY_LENGTH:
            resolved += 1
        if datetime_text and datetime_text != NOT_SPECIFIED:
            resolved += 1
        if any('@' in e for e in emails):
            resolved += 1

        value = min(self.cap, self.base + resolved * self.increment)
        return round(max(0.0, value), 4)
