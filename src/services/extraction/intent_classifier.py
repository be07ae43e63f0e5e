"""
Intent Classifier

Keyword/phrase matching over three ordered phrase sets. The most specific
set is checked first: "reschedule the meeting" contains the schedule
phrase "meeting" but must classify as a reschedule.
"""
from typing import List, Optional, Tuple

from src.utils.intent import (
    IntentKeywords,
    RESCHEDULE_PHRASES,
    CANCEL_PHRASES,
    SCHEDULE_PHRASES,
)
from src.utils.logger import setup_logger

from .models import MeetingIntent

logger = setup_logger(__name__)

# Phrase set -> intent, in precedence order
INTENT_PRECEDENCE: Tuple[Tuple[str, MeetingIntent], ...] = (
    (RESCHEDULE_PHRASES, MeetingIntent.RESCHEDULE),
    (CANCEL_PHRASES, MeetingIntent.CANCEL),
    (SCHEDULE_PHRASES, MeetingIntent.SCHEDULE),
)


class IntentClassifier:
    """Maps email text to a MeetingIntent"""

    def __init__(self, keywords: Optional[IntentKeywords] = None):
        self.keywords = keywords or IntentKeywords()

    def classify(self, text: str) -> MeetingIntent:
        intent, _ = self.classify_with_evidence(text)
        return intent

    def classify_with_evidence(self, text: str) -> Tuple[MeetingIntent, List[str]]:
        """
        Classify and report the phrases that decided it.

        Returns:
            (intent, matched phrases of the winning set); GENERAL has no evidence
        """
        if not text:
            return MeetingIntent.GENERAL, []

        for category, intent in INTENT_PRECEDENCE:
            matched = self.keywords.get_matched_keywords(text, category)
            if matched:
                logger.debug(f"[Intent] {intent.value} via {matched}")
                return intent, matched

        return MeetingIntent.GENERAL, []

    @staticmethod
    def coerce(value) -> Optional[MeetingIntent]:
        """Parse an intent label from model output; None if unknown."""
        if isinstance(value, MeetingIntent):
            return value
        if not isinstance(value, str):
            return None
        try:
            return MeetingIntent(value.strip().lower())
        except ValueError:
            return None
