"""
Thread segmentation: split one message window into independent scheduling intents.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from chat_ai.infrastructure.observability.logging import get_logger

from ..domain.models import Message
from .patterns import SCHEDULING_KEYWORDS, vocabulary_matcher

logger = get_logger(__name__)

DEFAULT_TRIGGER_RADIUS = 2


@dataclass(frozen=True, slots=True)
class TriggerCandidate:
    index: int
    text: str
    matched_keywords: tuple[str, ...]

    @property
    def keyword_count(self) -> int:
        return len(self.matched_keywords)


def suppression_window(index: int, radius: int, size: int | None = None) -> range:
    """Indices ``[index - radius, index + radius]`` clamped to the window."""
    start = max(0, index - radius)
    stop = index + radius + 1
    if size is not None:
        stop = min(size, stop)
    return range(start, stop)


def suppressed_indices(
    trigger_indices: Iterable[int], radius: int, size: int | None = None
) -> frozenset[int]:
    """Every index that falls inside the suppression window of any trigger."""
    suppressed: set[int] = set()
    for index in trigger_indices:
        suppressed.update(suppression_window(index, radius, size))
    return frozenset(suppressed)


def segment(
    messages: Sequence[Message],
    keywords: tuple[str, ...] = SCHEDULING_KEYWORDS,
    radius: int = DEFAULT_TRIGGER_RADIUS,
) -> list[TriggerCandidate]:
    """
    Find trigger messages in one pass, oldest first.

    Once a trigger is accepted its neighbours within ``radius`` can no longer
    start a thread of their own. Accepted triggers are never withdrawn.
    """
    matcher = vocabulary_matcher(keywords)
    size = len(messages)
    suppressed: set[int] = set()
    triggers: list[TriggerCandidate] = []

    for position, message in enumerate(messages):
        if position in suppressed:
            continue

        matched = matcher.find_all(message.content)
        if not matched:
            continue

        triggers.append(
            TriggerCandidate(index=position, text=message.content, matched_keywords=matched)
        )
        suppressed.update(suppression_window(position, radius, size))

    logger.debug("Segmented message window", messages=size, triggers=len(triggers))
    return triggers
