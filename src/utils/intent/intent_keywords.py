"""
Intent Keywords Loader
Loads meeting-intent phrase sets from YAML files
"""
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import yaml

from ..logger import setup_logger

logger = setup_logger(__name__)

# Phrase set names, in the order they are checked
RESCHEDULE_PHRASES = 'reschedule_phrases'
CANCEL_PHRASES = 'cancel_phrases'
SCHEDULE_PHRASES = 'schedule_phrases'

CATEGORIES: Tuple[str, ...] = (RESCHEDULE_PHRASES, CANCEL_PHRASES, SCHEDULE_PHRASES)

FALLBACK_PHRASES: Dict[str, Tuple[str, ...]] = {
    RESCHEDULE_PHRASES: (
        'reschedule', 'move the meeting', 'move our meeting',
        'change the time', 'change the date', 'postpone',
    ),
    CANCEL_PHRASES: (
        'cancel', 'call off',
    ),
    SCHEDULE_PHRASES: (
        'meeting', 'schedule', 'appointment', 'call', 'arrange',
        'invite you to', 'available on', "let's connect", 'set up a time',
        'book a time', 'catch up',
    ),
}


class IntentKeywords:
    """
    Container for meeting-intent phrase sets

    Loads phrases from YAML configuration and falls back to the
    built-in sets when the file is missing, empty or unreadable.
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize keyword loader

        Args:
            config_path: Path to intent keywords YAML file
        """
        if config_path:
            self.config_path = Path(config_path)
        else:
            project_root = Path(__file__).parent.parent.parent.parent
            self.config_path = project_root / 'config' / 'intent_keywords.yaml'

        self.phrases: Dict[str, Tuple[str, ...]] = {}

        self._load_keywords()

    def _load_keywords(self):
        """Load phrase sets from YAML configuration"""
        if not self.config_path.exists():
            logger.warning(f"Keywords config not found: {self.config_path}")
            self._use_fallback_keywords()
            return

        try:
            with open(self.config_path, 'r') as f:
                config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load keywords config: {e}")
            self._use_fallback_keywords()
            return

        if not isinstance(config, dict) or not config:
            logger.warning("Empty keywords config, using fallback")
            self._use_fallback_keywords()
            return

        for category in CATEGORIES:
            configured = config.get(category) or []
            phrases = tuple(str(p).lower().strip() for p in configured if str(p).strip())
            # A category missing from the file keeps its built-in phrases
            self.phrases[category] = phrases or FALLBACK_PHRASES[category]

        logger.info(f"Loaded {self._total_keywords()} intent phrases from {self.config_path}")

    def _use_fallback_keywords(self):
        """Use built-in phrase sets"""
        logger.info("Using fallback intent phrases")
        self.phrases = dict(FALLBACK_PHRASES)

    def _total_keywords(self) -> int:
        return sum(len(p) for p in self.phrases.values())

    def get_phrases(self, category: str) -> Tuple[str, ...]:
        """Phrases for one category (empty for unknown categories)"""
        return self.phrases.get(category, ())

    def get_matched_keywords(self, text: str, category: Optional[str] = None) -> List[str]:
        """
        Get all phrases that occur in the text

        Args:
            text: Text to search
            category: Optional category to limit search

        Returns:
            List of matched phrases, in configured order
        """
        text_lower = text.lower()
        categories = (category,) if category else CATEGORIES
        matched = []
        for name in categories:
            matched.extend(p for p in self.get_phrases(name) if p in text_lower)
        return matched


def load_intent_keywords(config_path: Optional[str] = None) -> IntentKeywords:
    """
    Load intent keywords from configuration

    Args:
        config_path: Optional path to keywords config file

    Returns:
        A fresh IntentKeywords instance
    """
    return IntentKeywords(config_path)
