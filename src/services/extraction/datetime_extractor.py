"""
DateTime Extractor

Finds the meeting date/time mentioned in free-form email text and renders
it as a normalized phrase such as "January 15, 2024 at 2:00 PM".

Patterns are tried from most to least specific; the first hit wins. When
no dated phrase is found the extractor degrades to a date-only or a
time-only ("Today at 4:00 PM") rendering, and finally to "Not specified".
"""
import re
from datetime import date, datetime, timedelta
from typing import Iterator, Optional, Tuple

from src.utils.datetime import Clock, format_long_date, to_24_hour
from src.utils.logger import setup_logger

from .models import NOT_SPECIFIED
from .strategies import Strategy, StrategyChain

logger = setup_logger(__name__)

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
# First three letters -> (month number, full name); "Sept" shares "sep"
MONTH_LOOKUP = {name[:3].lower(): (i + 1, name) for i, name in enumerate(MONTH_NAMES)}

MONTH = (
    r"\b(January|February|March|April|May|June|July|August|September|October|"
    r"November|December|Jan|Feb|Mar|Apr|Jun|Jul|Aug|Sept|Sep|Oct|Nov|Dec)\b\.?"
)
DAY = r"(\d{1,2})(?:st|nd|rd|th)?"
YEAR = r"(\d{4})"
WEEKDAY = (
    r"\b(?:Monday|Tuesday|Wednesday|Thursday|Friday|Saturday|Sunday|"
    r"Mon|Tues|Tue|Wed|Thurs|Thur|Thu|Fri|Sat|Sun)\b\.?"
)
MERIDIEM = r"(AM|PM)"
MERIDIEM_OR_OFFSET = r"(AM|PM|GMT[+-]\d{1,2})"
# Bounded filler between a dated phrase and its time label; may span lines
GAP = r"[\s\S]{0,80}?"

_FLAGS = re.IGNORECASE

DATE_TIME_BLOCK = re.compile(
    rf"Date:\s*{MONTH}\s+{DAY},?\s+{YEAR}{GAP}Time:\s*(\d{{1,2}}):(\d{{2}})\s*{MERIDIEM}?", _FLAGS
)
MONTH_DAY_AT = re.compile(
    rf"{MONTH}\s+{DAY}\s+at\s+(\d{{1,2}})[.:](\d{{2}})\s*{MERIDIEM_OR_OFFSET}?", _FLAGS
)
DATED_TIME = re.compile(
    rf"{MONTH}\s+{DAY},?\s+{YEAR}{GAP}(?:Time:|\bat\b)\s*(\d{{1,2}}):(\d{{2}})\s*{MERIDIEM}?", _FLAGS
)
AVAILABLE_ON = re.compile(
    rf"available\s+on\s+(?:{WEEKDAY},?\s+)?{MONTH}\s+{DAY},?\s+{YEAR}{GAP}(\d{{1,2}}):(\d{{2}})\s*{MERIDIEM}",
    _FLAGS
)
TOMORROW_AT = re.compile(
    rf"\btomorrow\s+at\s+(\d{{1,2}})(?:[.:](\d{{2}}))?\s*{MERIDIEM}?", _FLAGS
)
AT_TIME_TOMORROW = re.compile(
    rf"\bat\s+(\d{{1,2}})(?:[.:](\d{{2}}))?\s*{MERIDIEM}?\s+tomorrow\b", _FLAGS
)
NEXT_WEEK_ON = re.compile(
    rf"\bnext\s+week\s+on\s+{WEEKDAY}\s+at\s+(\d{{1,2}}):(\d{{2}})\s*{MERIDIEM}?", _FLAGS
)
TOMORROW = re.compile(r"\btomorrow\b", _FLAGS)
NEXT_WEEK = re.compile(r"\bnext\s+week\b", _FLAGS)
DATED = re.compile(rf"{MONTH}\s+{DAY},?\s+{YEAR}\b", _FLAGS)
ISO_DATE = re.compile(r"\b(\d{4})-(\d{1,2})-(\d{1,2})\b")
US_NUMERIC_DATE = re.compile(r"\b(\d{1,2})/(\d{1,2})/(\d{4})\b")

# Time-only phrases, most explicit first
TIME_ONLY_PATTERNS = (
    re.compile(rf"Time:\s*(\d{{1,2}}):(\d{{2}})\s*{MERIDIEM}?", _FLAGS),
    re.compile(rf"\bat\s+(\d{{1,2}})[.:](\d{{2}})\s*{MERIDIEM_OR_OFFSET}?", _FLAGS),
    re.compile(rf"\b(\d{{1,2}}):(\d{{2}})\s*{MERIDIEM}", _FLAGS),
)

# Clock times for 24-hour normalization, (hour, minute, meridiem) groups
CLOCK_PATTERNS = (
    re.compile(rf"\bat\s+(\d{{1,2}})[.:](\d{{2}})\s*{MERIDIEM}?", _FLAGS),
    re.compile(rf"Time:\s*(\d{{1,2}})[.:](\d{{2}})\s*{MERIDIEM}?", _FLAGS),
    re.compile(rf"\b(\d{{1,2}}):(\d{{2}})\s*{MERIDIEM}?", _FLAGS),
    re.compile(rf"\b(\d{{1,2}})()\s*{MERIDIEM}\b", _FLAGS),
)

TODAY_PREFIX = "Today at "


def normalize_month(token: str) -> Tuple[int, str]:
    """'Sept.' -> (9, 'September')"""
    return MONTH_LOOKUP[token.rstrip('.')[:3].lower()]


def format_clock(hour: str, minute: Optional[str], suffix: Optional[str] = None) -> str:
    """12-hour display as written in the source: '2:00 PM', '11:30 GMT+3', '14:00'"""
    display = f"{int(hour)}:{minute or '00'}"
    if suffix:
        display += f" {suffix.upper()}"
    return display


def _valid_clock(hour: str, minute: Optional[str], meridiem: Optional[str]) -> bool:
    h, m = int(hour), int(minute or 0)
    if m > 59:
        return False
    if meridiem and meridiem.upper() in ("AM", "PM"):
        return 1 <= h <= 12
    return h <= 23


def _safe_date(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


class DateTimeExtractor:
    """
    Extracts a normalized date/time phrase from email text.

    Args:
        clock: Zero-argument callable returning "now"; relative dates
            ("tomorrow", "next week") and missing years resolve against it
    """

    def __init__(self, clock: Optional[Clock] = None):
        self._clock: Clock = clock or datetime.now
        self.chain: StrategyChain[str] = StrategyChain([
            Strategy("date_time_block", self._date_time_block),
            Strategy("month_day_at", self._month_day_at),
            Strategy("dated_time", self._dated_time),
            Strategy("available_on", self._available_on),
            Strategy("tomorrow_at", self._tomorrow_at),
            Strategy("next_week_on", self._next_week_on),
            Strategy("relative_day", self._relative_day),
            Strategy("dated_only", self._dated_only),
            Strategy("time_only", self._time_only),
        ])

    def now(self) -> datetime:
        return self._clock()

    def extract(self, text: str) -> str:
        """Normalized date/time phrase, or "Not specified". Never raises."""
        if not text:
            return NOT_SPECIFIED
        name, value = self.chain.run(text)
        if value is None:
            return NOT_SPECIFIED
        logger.debug(f"[DateTime] Matched '{name}': {value}")
        return value

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------

    def _dated_with_clock(self, pattern: re.Pattern, text: str) -> Optional[str]:
        """Shared body for patterns capturing month, day, year, hour, minute, meridiem."""
        for match in pattern.finditer(text):
            month_token, day, year, hour, minute, meridiem = match.groups()
            month_number, month_name = normalize_month(month_token)
            if not _safe_date(int(year), month_number, int(day)):
                continue
            if not _valid_clock(hour, minute, meridiem):
                continue
            return f"{month_name} {int(day)}, {year} at {format_clock(hour, minute, meridiem)}"
        return None

    def _date_time_block(self, text: str) -> Optional[str]:
        return self._dated_with_clock(DATE_TIME_BLOCK, text)

    def _month_day_at(self, text: str) -> Optional[str]:
        now = self.now()
        for match in MONTH_DAY_AT.finditer(text):
            month_token, day, hour, minute, suffix = match.groups()
            month_number, month_name = normalize_month(month_token)
            # A month already behind us this year refers to next year
            year = now.year + 1 if month_number < now.month else now.year
            if not _safe_date(year, month_number, int(day)):
                continue
            if not _valid_clock(hour, minute, suffix):
                continue
            return f"{month_name} {int(day)}, {year} at {format_clock(hour, minute, suffix)}"
        return None

    def _dated_time(self, text: str) -> Optional[str]:
        return self._dated_with_clock(DATED_TIME, text)

    def _available_on(self, text: str) -> Optional[str]:
        return self._dated_with_clock(AVAILABLE_ON, text)

    def _tomorrow_at(self, text: str) -> Optional[str]:
        matches = list(TOMORROW_AT.finditer(text)) + list(AT_TIME_TOMORROW.finditer(text))
        for match in matches:
            hour, minute, meridiem = match.groups()
            if not _valid_clock(hour, minute, meridiem):
                continue
            tomorrow = self.now().date() + timedelta(days=1)
            return f"{format_long_date(tomorrow)} at {format_clock(hour, minute, meridiem)}"
        return None

    def _next_week_on(self, text: str) -> Optional[str]:
        for match in NEXT_WEEK_ON.finditer(text):
            hour, minute, meridiem = match.groups()
            if not _valid_clock(hour, minute, meridiem):
                continue
            # The named weekday is not located; "next week" is always +7 days
            target = self.now().date() + timedelta(days=7)
            return f"{format_long_date(target)} at {format_clock(hour, minute, meridiem)}"
        return None

    def _relative_day(self, text: str) -> Optional[str]:
        today = self.now().date()
        if TOMORROW.search(text):
            return format_long_date(today + timedelta(days=1))
        if NEXT_WEEK.search(text):
            return format_long_date(today + timedelta(days=7))
        return None

    def _dated_only(self, text: str) -> Optional[str]:
        for match in DATED.finditer(text):
            month_token, day, year = match.groups()
            month_number, month_name = normalize_month(month_token)
            if _safe_date(int(year), month_number, int(day)):
                return f"{month_name} {int(day)}, {year}"

        for match in ISO_DATE.finditer(text):
            year, month, day = (int(g) for g in match.groups())
            value = _safe_date(year, month, day)
            if value:
                return format_long_date(value)

        for match in US_NUMERIC_DATE.finditer(text):
            month, day, year = (int(g) for g in match.groups())
            value = _safe_date(year, month, day)
            if value:
                return format_long_date(value)
        return None

    def _time_only(self, text: str) -> Optional[str]:
        for pattern in TIME_ONLY_PATTERNS:
            for match in pattern.finditer(text):
                hour, minute, suffix = match.groups()
                if _valid_clock(hour, minute, suffix):
                    return f"{TODAY_PREFIX}{format_clock(hour, minute, suffix)}"
        return None

    # ------------------------------------------------------------------
    # Helpers for scheduling
    # ------------------------------------------------------------------

    def extract_time_24h(self, text: Optional[str]) -> Optional[str]:
        """
        First clock time in `text`, normalized to 24-hour "HH:MM".

        "at 2:00 PM" -> "14:00", "10:00 AM" -> "10:00", "3pm" -> "15:00"
        """
        if not text:
            return None
        for pattern in CLOCK_PATTERNS:
            for match in pattern.finditer(text):
                hour, minute, meridiem = match.groups()
                if not _valid_clock(hour, minute, meridiem):
                    continue
                hour_24 = to_24_hour(int(hour), meridiem)
                return f"{hour_24:02d}:{int(minute or 0):02d}"
        return None

    def resolve_date(self, datetime_text: Optional[str]) -> Optional[date]:
        """
        Calendar date named by a normalized datetime phrase.

        Returns None for "Not specified" and anything without a usable date.
        """
        if not datetime_text or datetime_text == NOT_SPECIFIED:
            return None

        today = self.now().date()
        if datetime_text.startswith(TODAY_PREFIX):
            return today

        match = DATED.search(datetime_text)
        if match:
            month_token, day, year = match.groups()
            month_number, _ = normalize_month(month_token)
            return _safe_date(int(year), month_number, int(day))

        match = ISO_DATE.search(datetime_text)
        if match:
            year, month, day = (int(g) for g in match.groups())
            return _safe_date(year, month, day)

        if TOMORROW.search(datetime_text):
            return today + timedelta(days=1)
        if NEXT_WEEK.search(datetime_text):
            return today + timedelta(days=7)
        return None
