"""
Pattern library for scheduling detection.

Plain, immutable tables: scheduling keywords, availability vocabulary and the
ordered date/time recognizers used by the extractor. Order inside each tuple
is the priority order; the extractor stops at the first pattern that both
matches and resolves.

When two exact date patterns could match the same substring (a month name
and a slash date, say), the earlier entry in ``EXACT_DATE_PATTERNS`` wins.
Inside one pattern every occurrence is tried in text order before the
extractor moves on to the next pattern.

Month names match in any case except "May", which must be capitalized so
the modal verb ("you may 3 times") is not read as a date.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, timedelta
from functools import lru_cache

from ..domain.errors import PatternResolutionFailure
from ..domain.time_of_day import TimeOfDay

SCHEDULING_KEYWORDS: tuple[str, ...] = (
    "meeting",
    "schedule",
    "sync",
    "call",
    "meet",
    "catch up",
    "get together",
    "touch base",
    "video call",
    "zoom",
    "when can we",
    "let's meet",
    "let's schedule",
    "what time",
    "available for",
    "free to",
    "calendar",
    "appointment",
)

AVAILABILITY_VOCABULARY: tuple[str, ...] = (
    "available",
    "free",
    "works for me",
    "i can do",
    "i can make",
    "that works",
    "how about",
    "open on",
    "open at",
)

_QUOTE_TRANSLATION = str.maketrans({"’": "'", "‘": "'", "ʼ": "'"})


def normalize_quotes(text: str) -> str:
    """Replace typographic apostrophes; keeps string length (and match spans) intact."""
    return (text or "").translate(_QUOTE_TRANSLATION)


def normalize_text(text: str) -> str:
    """Lower-cased, quote-normalized text used for vocabulary matching."""
    return normalize_quotes(text).lower()


class VocabularyMatcher:
    """
    Substring matcher over a fixed vocabulary.

    Overlapping entries resolve longest-first, so "meeting" is counted once
    rather than as both "meet" and "meeting".
    """

    def __init__(self, vocabulary: tuple[str, ...]):
        terms = sorted({normalize_text(term) for term in vocabulary if term}, key=len, reverse=True)
        if not terms:
            raise ValueError("Vocabulary must contain at least one term")
        self.vocabulary = tuple(terms)
        self._regex = re.compile("|".join(re.escape(term) for term in terms), re.IGNORECASE)

    def find_all(self, text: str) -> tuple[str, ...]:
        """Lower-cased vocabulary terms found in ``text``, in order of appearance."""
        return tuple(
            match.group(0).lower() for match in self._regex.finditer(normalize_quotes(text))
        )

    def contains_any(self, text: str) -> bool:
        return self._regex.search(normalize_quotes(text)) is not None

    def strip(self, text: str) -> str:
        """Remove every vocabulary occurrence from ``text``, keeping the rest as written."""
        return self._regex.sub(" ", normalize_quotes(text))


@lru_cache(maxsize=32)
def vocabulary_matcher(vocabulary: tuple[str, ...]) -> VocabularyMatcher:
    return VocabularyMatcher(vocabulary)


# =================================================================
# DATE RECOGNIZERS
# =================================================================

MONTHS = {
    "jan": 1,
    "feb": 2,
    "mar": 3,
    "apr": 4,
    "may": 5,
    "jun": 6,
    "jul": 7,
    "aug": 8,
    "sep": 9,
    "oct": 10,
    "nov": 11,
    "dec": 12,
}

WEEKDAYS = {
    "monday": 0,
    "tuesday": 1,
    "wednesday": 2,
    "thursday": 3,
    "friday": 4,
    "saturday": 5,
    "sunday": 6,
}


@dataclass(frozen=True, slots=True)
class DatePattern:
    name: str
    regex: re.Pattern[str]
    resolve: Callable[[re.Match[str], date], date]


@dataclass(frozen=True, slots=True)
class TimePattern:
    name: str
    regex: re.Pattern[str]
    resolve: Callable[[re.Match[str]], TimeOfDay]


@dataclass(frozen=True, slots=True)
class VaguePattern:
    name: str
    regex: re.Pattern[str]
    description: str
    suggested_value: TimeOfDay | None = None


def _upcoming(month: int, day: int, reference: date) -> date:
    """Calendar date for month/day in the reference year, rolled to next year if already past."""
    try:
        candidate = date(reference.year, month, day)
        if candidate < reference:
            candidate = date(reference.year + 1, month, day)
    except ValueError as e:
        raise PatternResolutionFailure(f"Invalid calendar date {month}/{day}: {e}") from e
    return candidate


def _resolve_tomorrow(match: re.Match[str], reference: date) -> date:
    return reference + timedelta(days=1)


def _resolve_today(match: re.Match[str], reference: date) -> date:
    return reference


def _resolve_month_day(match: re.Match[str], reference: date) -> date:
    month = MONTHS[match.group("month").lower()[:3]]
    return _upcoming(month, int(match.group("day")), reference)


def _resolve_slash_date(match: re.Match[str], reference: date) -> date:
    return _upcoming(int(match.group("month")), int(match.group("day")), reference)


def _resolve_weekday(match: re.Match[str], reference: date) -> date:
    target = WEEKDAYS[match.group("weekday").lower()]
    days_ahead = (target - reference.weekday()) % 7 or 7
    return reference + timedelta(days=days_ahead)


EXACT_DATE_PATTERNS: tuple[DatePattern, ...] = (
    DatePattern("tomorrow", re.compile(r"\btomorrow\b", re.IGNORECASE), _resolve_tomorrow),
    DatePattern("today", re.compile(r"\btoday\b", re.IGNORECASE), _resolve_today),
    DatePattern(
        "month_day",
        re.compile(
            r"\b(?P<month>jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|(?-i:May)|june?|july?"
            r"|aug(?:ust)?|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)\.?"
            r"\s*(?P<day>\d{1,2})(?:st|nd|rd|th)?\b",
            re.IGNORECASE,
        ),
        _resolve_month_day,
    ),
    DatePattern(
        "slash_date",
        re.compile(r"\b(?P<month>\d{1,2})/(?P<day>\d{1,2})\b"),
        _resolve_slash_date,
    ),
    DatePattern(
        "weekday",
        re.compile(
            r"\b(?:(?:next|this|on)\s+)?"
            r"(?P<weekday>monday|tuesday|wednesday|thursday|friday|saturday|sunday)\b",
            re.IGNORECASE,
        ),
        _resolve_weekday,
    ),
)

VAGUE_DATE_PATTERNS: tuple[VaguePattern, ...] = (
    VaguePattern("next_week", re.compile(r"\bnext\s+week\b", re.IGNORECASE), "next week"),
    VaguePattern("this_week", re.compile(r"\bthis\s+week\b", re.IGNORECASE), "this week"),
    VaguePattern("next_month", re.compile(r"\bnext\s+month\b", re.IGNORECASE), "next month"),
    VaguePattern("weekend", re.compile(r"\bweekend\b", re.IGNORECASE), "weekend"),
    VaguePattern("soon", re.compile(r"\b(?:soon|sometime|later)\b", re.IGNORECASE), "soon"),
)


# =================================================================
# TIME RECOGNIZERS
# =================================================================


def _resolve_meridiem(match: re.Match[str]) -> TimeOfDay:
    minute = int(match.group("minute") or 0)
    try:
        return TimeOfDay.from_clock(int(match.group("hour")), minute, f"{match.group('half')}m")
    except ValueError as e:
        raise PatternResolutionFailure(f"Invalid 12-hour time {match.group(0)!r}: {e}") from e


def _resolve_24_hour(match: re.Match[str]) -> TimeOfDay:
    return TimeOfDay.from_clock(int(match.group("hour")), int(match.group("minute")))


def _resolve_noon(match: re.Match[str]) -> TimeOfDay:
    return TimeOfDay.from_clock(12, 0, "pm")


def _resolve_midnight(match: re.Match[str]) -> TimeOfDay:
    return TimeOfDay.from_clock(12, 0, "am")


EXACT_TIME_PATTERNS: tuple[TimePattern, ...] = (
    TimePattern(
        "meridiem",
        re.compile(
            r"\b(?P<hour>\d{1,2})(?::(?P<minute>[0-5]\d))?\s*(?P<half>[ap])\.?m\b\.?",
            re.IGNORECASE,
        ),
        _resolve_meridiem,
    ),
    TimePattern(
        "24_hour",
        re.compile(r"\b(?P<hour>[01]?\d|2[0-3]):(?P<minute>[0-5]\d)\b"),
        _resolve_24_hour,
    ),
    TimePattern("noon", re.compile(r"\bnoon\b", re.IGNORECASE), _resolve_noon),
    TimePattern("midnight", re.compile(r"\bmidnight\b", re.IGNORECASE), _resolve_midnight),
)

VAGUE_TIME_PATTERNS: tuple[VaguePattern, ...] = (
    VaguePattern(
        "morning",
        re.compile(r"\bmorning\b", re.IGNORECASE),
        "morning",
        TimeOfDay.from_clock(10, 0, "am"),
    ),
    VaguePattern(
        "lunch",
        re.compile(r"\blunch(?:time)?\b", re.IGNORECASE),
        "lunch",
        TimeOfDay.from_clock(12, 0, "pm"),
    ),
    VaguePattern(
        "afternoon",
        re.compile(r"\bafternoon\b", re.IGNORECASE),
        "afternoon",
        TimeOfDay.from_clock(2, 0, "pm"),
    ),
    VaguePattern(
        "evening",
        re.compile(r"\b(?:evening|tonight)\b", re.IGNORECASE),
        "evening",
        TimeOfDay.from_clock(6, 0, "pm"),
    ),
)
