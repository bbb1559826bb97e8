"""
Availability hint scanning around a trigger message.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date

from ..domain.models import AvailabilityHint, Message
from .extractor import extract_date, extract_time
from .patterns import AVAILABILITY_VOCABULARY, vocabulary_matcher

DEFAULT_AVAILABILITY_RADIUS = 3


def scan_neighborhood(
    messages: Sequence[Message],
    trigger_index: int,
    reference_date: date,
    radius: int = DEFAULT_AVAILABILITY_RADIUS,
    vocabulary: tuple[str, ...] = AVAILABILITY_VOCABULARY,
) -> list[AvailabilityHint]:
    """
    Collect availability statements within ``radius`` messages of the trigger.

    Only statements that pin down a date or a time are kept. Results are in
    message order, which the synthesizer treats as priority order.
    """
    matcher = vocabulary_matcher(vocabulary)
    start = max(0, trigger_index - radius)
    stop = min(len(messages), trigger_index + radius + 1)

    hints: list[AvailabilityHint] = []
    for position in range(start, stop):
        if position == trigger_index:
            continue

        text = messages[position].content
        if not matcher.contains_any(text):
            continue

        hint = AvailabilityHint(
            source_message_index=position,
            text=text,
            date_info=extract_date(text, reference_date),
            time_info=extract_time(text),
        )
        if hint.is_useful:
            hints.append(hint)

    return hints
