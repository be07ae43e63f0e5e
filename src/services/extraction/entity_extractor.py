"""
Entity Extractor

Heuristic contact-name, company and email-address extraction from email
text. Each field is resolved by an ordered chain of strategies; weaker
strategies are consulted only when every stronger one fails, and every
candidate passes the same guards (stoplist, exclusion phrases, length).
"""
import re
from typing import List, Optional

from src.utils.logger import setup_logger

from .models import UNKNOWN_COMPANY, UNKNOWN_CONTACT
from .strategies import Strategy, StrategyChain

logger = setup_logger(__name__)

# Words that make a name candidate a greeting/sign-off fragment
NAME_STOPLIST = frozenset({
    'best', 'regards', 'thanks', 'sincerely', 'hello', 'hi', 'dear',
    'meeting', 'details', 'looking', 'please', 'hope',
})

KNOWN_COMPANIES = (
    'Andersen', 'HighTechIno', 'Microsoft', 'Google', 'Apple', 'Amazon', 'Meta',
    'Tesla', 'Netflix', 'Spotify', 'Salesforce', 'Oracle', 'IBM', 'Intel',
    'Adobe', 'Zoom', 'Slack', 'Dropbox', 'TechCorp', 'DataSoft', 'CloudTech',
    'InnovateLab', 'DigitalWorks',
)
_KNOWN_LOOKUP = {name.lower(): name for name in KNOWN_COMPANIES}

COMPANY_EXCLUSIONS = (
    'the team', 'the office', 'the meeting', 'the same', 'the time',
    'your convenience', 'your office', 'our team', 'best regards',
)
PRONOUNS = frozenset({'you', 'me', 'us', 'them', 'everyone', 'all'})
CALENDAR_WORDS = frozenset({
    'monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday', 'sunday',
    'january', 'february', 'march', 'april', 'may', 'june', 'july', 'august',
    'september', 'october', 'november', 'december', 'today', 'tomorrow',
})
# Sentence-initial words stripped from the front of company candidates
LEAD_WORDS = frozenset({
    'hi', 'hello', 'dear', 'please', 'thanks', 'the', 'our', 'your', 'my',
    'this', 'that', 'at', 'from', 'with', 'meeting', 're', 'fwd',
})

MIN_ENTITY_LENGTH = 3
MAX_ENTITY_LENGTH = 50
MAX_SUFFIX_WORDS = 4

NAME = r"([A-Z][a-z]+(?:[ \t]+[A-Z][a-z]+)?)"
CAP_WORDS = r"([A-Z][A-Za-z0-9&]*(?:[ \t]+[A-Z][A-Za-z0-9&]*)*)"
LEGAL_SUFFIX = r"(?:Corporation|Company|Limited|Inc\.?|LLC|Corp\.?|Ltd\.?|Co\.)"

SELF_INTRO = re.compile(rf"\b(?i:this\s+is|I'm|I\s+am|my\s+name\s+is)\s+{NAME}")
SIGNATURE_CLOSING = re.compile(
    rf"\b(?i:best\s+regards|kind\s+regards|regards|best|sincerely|thank\s+you|thanks|cheers)\b"
    rf"[ \t]*[,!.]?\s*{NAME}"
)
NAME_LINE = re.compile(r"[A-Z][a-z]+(?:[ \t]+[A-Z][a-z]+)?")

SUFFIXED_COMPANY = re.compile(
    rf"\b([A-Z][A-Za-z&]*(?:[ \t]+[A-Z&][A-Za-z&]*)*?[ \t]+{LEGAL_SUFFIX})(?![A-Za-z])"
)
ROLE_AT = re.compile(
    r"\b(?i:recruiter|manager|engineer|director|founder|ceo|cto|employee|work|working|"
    r"consultant|developer|designer|lead|intern|analyst)\s+at\s+" + CAP_WORDS
)
FROM_COMPANY = re.compile(r"\b(?i:from)\s+(?:the\s+)?" + CAP_WORDS)
WITH_COMPANY = re.compile(r"\b(?i:with)\s+(?:the\s+team\s+at\s+)?" + CAP_WORDS)
KNOWN_COMPANY = re.compile(
    r"\b(" + "|".join(KNOWN_COMPANIES) + r")\b(?:[ \t]+(Inc\.?|LLC|Corp\.?|Ltd\.?|Co\.))?",
    re.IGNORECASE
)
COMPANY_CONTEXT_AFTER = re.compile(
    r"\b([A-Z][A-Za-z0-9&]+(?:[ \t]+[A-Z][A-Za-z0-9&]+)?)[ \t]+"
    r"(?i:team|company|group|labs|solutions|technologies|agency|startup)\b"
)
COMPANY_WORD_NEXT = re.compile(
    r"[ \t]+(?i:team|company|group|labs|solutions|technologies|agency|startup)\b"
)
COMPANY_CONTEXT_BEFORE = re.compile(
    r"\b(?i:company|organization|firm|startup|agency)\s+(?i:called|named)\s+"
    r"([A-Z][A-Za-z0-9&]+(?:[ \t]+[A-Z][A-Za-z0-9&]+)?)"
)

EMAIL_ADDRESS = re.compile(r"[\w.+-]+@[\w-]+(?:\.[\w-]+)+")


def _is_known_company(candidate: str) -> bool:
    return candidate.lower() in _KNOWN_LOOKUP


def is_valid_name(candidate: Optional[str]) -> bool:
    """Reject greeting/sign-off fragments and company names posing as people."""
    if not candidate:
        return False
    words = candidate.split()
    if any(word.lower() in NAME_STOPLIST for word in words):
        return False
    if _is_known_company(candidate) or candidate.lower() in CALENDAR_WORDS:
        return False
    return 2 <= len(candidate) <= MAX_ENTITY_LENGTH


def _strip_lead_words(candidate: str) -> str:
    words = candidate.split()
    while words and words[0].lower() in LEAD_WORDS:
        words.pop(0)
    return " ".join(words)


def _looks_like_person(candidate: str) -> bool:
    """First and last name shape that is not a known company."""
    return (
        len(candidate.split()) == 2
        and NAME_LINE.fullmatch(candidate) is not None
        and not _is_known_company(candidate)
    )


def is_valid_company(candidate: Optional[str], max_words: Optional[int] = None) -> bool:
    """Exclusion phrases, pronoun/calendar words and length bounds."""
    if not candidate:
        return False
    lowered = candidate.lower()
    if any(phrase in lowered for phrase in COMPANY_EXCLUSIONS):
        return False
    if lowered in PRONOUNS or lowered in CALENDAR_WORDS or lowered in NAME_STOPLIST:
        return False
    if max_words is not None and len(candidate.split()) > max_words:
        return False
    return MIN_ENTITY_LENGTH <= len(candidate) <= MAX_ENTITY_LENGTH


class EntityExtractor:
    """
    Extracts contact name, company and email addresses from email text.

    Both `extract_contact_name` and `extract_company` fall back to their
    sentinel values and never raise.
    """

    def __init__(self):
        self.contact_chain: StrategyChain[str] = StrategyChain([
            Strategy("self_introduction", self._self_introduction),
            Strategy("signature_closing", self._signature_closing),
            Strategy("name_before_company", self._name_before_company),
            Strategy("trailing_line", self._trailing_line),
        ])
        self.company_chain: StrategyChain[str] = StrategyChain([
            Strategy("legal_suffix", self._legal_suffix),
            Strategy("role_at", self._role_at),
            Strategy("from", self._from_company),
            Strategy("with", self._with_company),
            Strategy("known_company", self._known_company),
            Strategy("capitalized_context", self._capitalized_context),
        ])

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def extract_contact_name(self, text: str) -> str:
        if not text:
            return UNKNOWN_CONTACT
        name, value = self.contact_chain.run(text)
        if value is None:
            return UNKNOWN_CONTACT
        logger.debug(f"[Entities] Contact via '{name}': {value}")
        return value

    def extract_company(self, text: str) -> str:
        if not text:
            return UNKNOWN_COMPANY
        name, value = self.company_chain.run(text)
        if value is None:
            return UNKNOWN_COMPANY
        logger.debug(f"[Entities] Company via '{name}': {value}")
        return value

    @staticmethod
    def extract_emails(text: str) -> List[str]:
        """Email addresses in order of first appearance, without duplicates."""
        if not text:
            return []
        seen = set()
        emails = []
        for match in EMAIL_ADDRESS.finditer(text):
            address = match.group(0)
            key = address.lower()
            if key not in seen:
                seen.add(key)
                emails.append(address)
        return emails

    # ------------------------------------------------------------------
    # Contact name strategies
    # ------------------------------------------------------------------

    @staticmethod
    def _first_valid_name(pattern: re.Pattern, text: str) -> Optional[str]:
        for match in pattern.finditer(text):
            candidate = match.group(1).strip()
            if is_valid_name(candidate):
                return candidate
        return None

    def _self_introduction(self, text: str) -> Optional[str]:
        return self._first_valid_name(SELF_INTRO, text)

    def _signature_closing(self, text: str) -> Optional[str]:
        return self._first_valid_name(SIGNATURE_CLOSING, text)

    def _name_before_company(self, text: str) -> Optional[str]:
        lines = [line.strip() for line in text.split("\n") if line.strip()]
        for line, next_line in zip(lines, lines[1:]):
            if not NAME_LINE.fullmatch(line) or not is_valid_name(line):
                continue
            if SUFFIXED_COMPANY.search(next_line) or KNOWN_COMPANY.search(next_line):
                return line
        return None

    def _trailing_line(self, text: str) -> Optional[str]:
        lines = [line.strip() for line in text.split("\n") if line.strip()]
        if not lines:
            return None
        last = lines[-1].rstrip(".,!")
        if NAME_LINE.fullmatch(last) and is_valid_name(last):
            return last
        return None

    # ------------------------------------------------------------------
    # Company strategies
    # ------------------------------------------------------------------

    def _legal_suffix(self, text: str) -> Optional[str]:
        for match in SUFFIXED_COMPANY.finditer(text):
            if not is_valid_company(match.group(1)):
                continue
            candidate = _strip_lead_words(match.group(1))
            # Only the suffix left means the name part was all lead words
            if len(candidate.split()) < 2:
                continue
            if is_valid_company(candidate, max_words=MAX_SUFFIX_WORDS):
                return candidate
        return None

    @staticmethod
    def _first_valid_company(pattern: re.Pattern, text: str,
                             reject_person_names: bool = False) -> Optional[str]:
        for match in pattern.finditer(text):
            raw = match.group(1).strip()
            # Exclusion phrases are checked before lead words are stripped
            if not is_valid_company(raw):
                continue
            candidate = _strip_lead_words(raw)
            if not is_valid_company(candidate):
                continue
            if reject_person_names and _looks_like_person(candidate) \
                    and not COMPANY_WORD_NEXT.match(text, match.end()):
                continue
            return candidate
        return None

    def _role_at(self, text: str) -> Optional[str]:
        return self._first_valid_company(ROLE_AT, text)

    def _from_company(self, text: str) -> Optional[str]:
        return self._first_valid_company(FROM_COMPANY, text)

    def _with_company(self, text: str) -> Optional[str]:
        # "meeting with Sarah Johnson" names a person, not an organization
        return self._first_valid_company(WITH_COMPANY, text, reject_person_names=True)

    def _known_company(self, text: str) -> Optional[str]:
        match = KNOWN_COMPANY.search(text)
        if not match:
            return None
        canonical = _KNOWN_LOOKUP[match.group(1).lower()]
        suffix = match.group(2)
        return f"{canonical} {suffix}" if suffix else canonical

    def _capitalized_context(self, text: str) -> Optional[str]:
        return (
            self._first_valid_company(COMPANY_CONTEXT_AFTER, text)
            or self._first_valid_company(COMPANY_CONTEXT_BEFORE, text)
        )
