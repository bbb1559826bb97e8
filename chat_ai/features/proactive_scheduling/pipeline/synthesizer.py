"""
Time-slot suggestion synthesis.

Strategies are tried in order and the first one that produces slots wins
outright; results from different strategies are never mixed:

1. hint-driven   - nearby availability statements, in message order
2. anchor-driven - the trigger's own date and/or time, plus/minus two hours
3. default       - fixed morning / afternoon / late-afternoon slots

All arithmetic is done on datetimes built from ``TimeOfDay`` values, so a
slot that crosses midnight lands on the neighbouring date.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from chat_ai.infrastructure.observability.logging import get_logger

from ..domain.models import (
    QUALITY_ORDER,
    AvailabilityHint,
    SuggestionQuality,
    TemporalHint,
    TimeSlotSuggestion,
)
from ..domain.time_of_day import TimeOfDay

logger = get_logger(__name__)

MAX_SUGGESTIONS = len(QUALITY_ORDER)
DEFAULT_DURATION_MINUTES = 30
DEFAULT_ANCHOR_TIME = TimeOfDay.from_clock(10, 0, "am")
DEFAULT_ANCHOR_OFFSET_DAYS = 3
ANCHOR_SHIFT = timedelta(hours=2)
FRAGMENT_LENGTH = 40

# (days from reference, start time, reason) for the fallback strategy
DEFAULT_SLOTS: tuple[tuple[int, TimeOfDay, str], ...] = (
    (1, TimeOfDay.from_clock(10, 0, "am"), "Morning slot"),
    (3, TimeOfDay.from_clock(2, 0, "pm"), "Afternoon slot"),
    (5, TimeOfDay.from_clock(4, 0, "pm"), "Late afternoon"),
)


@dataclass(frozen=True, slots=True)
class SynthesisRequest:
    date_info: TemporalHint
    time_info: TemporalHint
    availability_hints: tuple[AvailabilityHint, ...]
    reference_date: date
    duration_minutes: int = DEFAULT_DURATION_MINUTES


Strategy = Callable[[SynthesisRequest], list[TimeSlotSuggestion] | None]


def _fragment(text: str, limit: int = FRAGMENT_LENGTH) -> str:
    text = " ".join(text.split())
    return text if len(text) <= limit else text[: limit - 3].rstrip() + "..."


def build_slot(
    start: datetime, duration_minutes: int, quality: SuggestionQuality, reason: str
) -> TimeSlotSuggestion:
    start_of_day = TimeOfDay.from_time(start.time())
    return TimeSlotSuggestion(
        date=start.date(),
        start_time=start_of_day.display(),
        end_time=start_of_day.shifted(duration_minutes).display(),
        quality=quality,
        reason=reason,
    )


def _preferred_time(hint: TemporalHint) -> TimeOfDay | None:
    """The hint's explicit time, else its vague-descriptor default."""
    return hint.time_value or hint.suggested_value


def hint_driven(request: SynthesisRequest) -> list[TimeSlotSuggestion] | None:
    starts: list[tuple[datetime, AvailabilityHint]] = []

    for hint in request.availability_hints:
        if len(starts) == MAX_SUGGESTIONS:
            break

        rank = len(starts) + 1
        try:
            slot_date = hint.date_info.date_value or request.reference_date + timedelta(days=rank)
            if slot_date < request.reference_date:
                raise ValueError(f"date {slot_date} is in the past")
            slot_time = (
                _preferred_time(hint.time_info)
                or _preferred_time(request.time_info)
                or DEFAULT_ANCHOR_TIME
            )
            start = slot_time.on(slot_date)
        except (ValueError, OverflowError) as e:
            logger.debug(
                "Skipping unusable availability hint",
                message_index=hint.source_message_index,
                error=str(e),
            )
            continue

        starts.append((start, hint))

    if not starts:
        return None

    return [
        build_slot(
            start,
            request.duration_minutes,
            quality,
            f'Suggested in message: "{_fragment(hint.text)}"',
        )
        for (start, hint), quality in zip(starts, QUALITY_ORDER)
    ]


def anchor_driven(request: SynthesisRequest) -> list[TimeSlotSuggestion] | None:
    date_info, time_info = request.date_info, request.time_info
    if not (date_info.specified or time_info.specified):
        return None

    anchor_date = date_info.date_value or request.reference_date + timedelta(
        days=DEFAULT_ANCHOR_OFFSET_DAYS
    )
    anchor_time = _preferred_time(time_info) or DEFAULT_ANCHOR_TIME
    anchor = anchor_time.on(anchor_date)
    requested = "time" if time_info.specified else "date"

    candidates = (
        (anchor, f"Matches requested {requested}"),
        (anchor + ANCHOR_SHIFT, "2 hours later"),
        (anchor - ANCHOR_SHIFT, "2 hours earlier"),
    )
    return [
        build_slot(start, request.duration_minutes, quality, reason)
        for (start, reason), quality in zip(candidates, QUALITY_ORDER)
    ]


def default_slots(request: SynthesisRequest) -> list[TimeSlotSuggestion]:
    return [
        build_slot(
            start_time.on(request.reference_date + timedelta(days=offset)),
            request.duration_minutes,
            quality,
            reason,
        )
        for (offset, start_time, reason), quality in zip(DEFAULT_SLOTS, QUALITY_ORDER)
    ]


DEFAULT_STRATEGIES: tuple[Strategy, ...] = (hint_driven, anchor_driven, default_slots)


def synthesize(
    date_info: TemporalHint,
    time_info: TemporalHint,
    availability_hints: Sequence[AvailabilityHint],
    reference_date: date,
    duration_minutes: int | None = None,
    strategies: tuple[Strategy, ...] = DEFAULT_STRATEGIES,
) -> list[TimeSlotSuggestion]:
    """
    Produce 1-3 ranked slots for one thread.

    ``duration_minutes`` only affects end times and defaults to 30 minutes.
    """
    request = SynthesisRequest(
        date_info=date_info,
        time_info=time_info,
        availability_hints=tuple(availability_hints),
        reference_date=reference_date,
        duration_minutes=duration_minutes or DEFAULT_DURATION_MINUTES,
    )

    for strategy in strategies:
        suggestions = strategy(request)
        if suggestions:
            logger.debug("Suggestion strategy selected", strategy=strategy.__name__)
            return suggestions[:MAX_SUGGESTIONS]

    return default_slots(request)
