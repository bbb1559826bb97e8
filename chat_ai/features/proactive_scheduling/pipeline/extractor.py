"""
Date/time extraction over the pattern library.

Both extractors run the same cascade: exact patterns in priority order, then
vague descriptors, then the "not mentioned" terminal. Every occurrence of a
pattern is tried in text order; when none of them resolves the cascade
moves on to the next pattern.
"""

from __future__ import annotations

from datetime import date

from chat_ai.infrastructure.observability.logging import get_logger

from ..domain.errors import PatternResolutionFailure
from ..domain.models import TemporalHint
from .patterns import (
    EXACT_DATE_PATTERNS,
    EXACT_TIME_PATTERNS,
    VAGUE_DATE_PATTERNS,
    VAGUE_TIME_PATTERNS,
    DatePattern,
    TimePattern,
    VaguePattern,
    normalize_quotes,
)

logger = get_logger(__name__)


def _match_vague(text: str, patterns: tuple[VaguePattern, ...]) -> TemporalHint | None:
    for pattern in patterns:
        match = pattern.regex.search(text)
        if match:
            return TemporalHint.vague_hint(
                description=pattern.description,
                original_text=match.group(0),
                suggested_value=pattern.suggested_value,
            )
    return None


def extract_date(
    text: str,
    reference_date: date,
    patterns: tuple[DatePattern, ...] = EXACT_DATE_PATTERNS,
    vague_patterns: tuple[VaguePattern, ...] = VAGUE_DATE_PATTERNS,
) -> TemporalHint:
    """
    Extract a date hint from ``text``.

    Relative words ("tomorrow", weekday names) resolve against ``reference_date``.
    """
    normalized = normalize_quotes(text)

    for pattern in patterns:
        for match in pattern.regex.finditer(normalized):
            try:
                value = pattern.resolve(match, reference_date)
            except (PatternResolutionFailure, ValueError) as e:
                logger.debug(
                    "Date pattern did not resolve", pattern=pattern.name, error=str(e)
                )
                continue
            return TemporalHint.exact(value, match.group(0))

    return _match_vague(normalized, vague_patterns) or TemporalHint.not_mentioned()


def extract_time(
    text: str,
    patterns: tuple[TimePattern, ...] = EXACT_TIME_PATTERNS,
    vague_patterns: tuple[VaguePattern, ...] = VAGUE_TIME_PATTERNS,
) -> TemporalHint:
    """Extract a time-of-day hint from ``text``."""
    normalized = normalize_quotes(text)

    for pattern in patterns:
        for match in pattern.regex.finditer(normalized):
            try:
                value = pattern.resolve(match)
            except (PatternResolutionFailure, ValueError) as e:
                logger.debug(
                    "Time pattern did not resolve", pattern=pattern.name, error=str(e)
                )
                continue
            return TemporalHint.exact(value, match.group(0))

    return _match_vague(normalized, vague_patterns) or TemporalHint.not_mentioned()
