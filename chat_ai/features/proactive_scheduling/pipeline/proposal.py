"""
Meeting proposal builder.

Turns a thread's ranked slots into a proposal the client can show or send:
title and purpose, participant names, each slot rendered in every participant
timezone, and a Google Calendar "add event" link per slot. Pure and
deterministic; nothing here talks to a calendar backend.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime, timedelta
from urllib.parse import urlencode
from zoneinfo import ZoneInfo

from ..config import SchedulingConfig
from ..domain.models import (
    LocalSlotTime,
    MeetingProposal,
    ProposalSlot,
    SchedulingThread,
    TimeSlotSuggestion,
)
from ..domain.time_of_day import TimeOfDay

GOOGLE_CALENDAR_URL = "https://calendar.google.com/calendar/render"


def _utc_stamp(value: datetime) -> str:
    return value.astimezone(UTC).strftime("%Y%m%dT%H%M%SZ")


def google_calendar_url(
    title: str, details: str, start: datetime, end: datetime, timezone: str
) -> str:
    """Google Calendar event template link; ``start``/``end`` must be timezone-aware."""
    params = {
        "action": "TEMPLATE",
        "text": title,
        "details": details,
        "dates": f"{_utc_stamp(start)}/{_utc_stamp(end)}",
        "ctz": timezone,
    }
    return f"{GOOGLE_CALENDAR_URL}?{urlencode(params)}"


def local_times(start: datetime, timezones: Iterable[str]) -> tuple[LocalSlotTime, ...]:
    """Render ``start`` once per distinct timezone, first-seen order."""
    rendered = []
    for name in dict.fromkeys(timezones):
        local = start.astimezone(ZoneInfo(name))
        rendered.append(
            LocalSlotTime(
                timezone=name,
                date=f"{local:%A}, {local:%b} {local.day}",
                time=TimeOfDay.from_time(local.time()).display(),
            )
        )
    return tuple(rendered)


def slot_start(suggestion: TimeSlotSuggestion, zone: ZoneInfo) -> datetime:
    start_time = TimeOfDay.parse(suggestion.start_time)
    return datetime.combine(suggestion.date, start_time.to_time(), tzinfo=zone)


def build_proposal(thread: SchedulingThread, config: SchedulingConfig) -> MeetingProposal:
    """
    Build the meeting proposal for ``thread``.

    Slot times are wall-clock times in ``config.timezone``. The purpose falls
    back to the trigger message when enrichment has not supplied one.
    """
    zone = ZoneInfo(config.timezone)
    duration = timedelta(minutes=config.default_duration_minutes)
    names = tuple(participant.name for participant in thread.participants)
    timezones = [participant.timezone for participant in thread.participants] or [
        config.timezone
    ]
    purpose = thread.purpose or thread.trigger_text
    details = f"{purpose}\n\nParticipants: {', '.join(names)}"

    slots = []
    for suggestion in thread.suggested_times:
        start = slot_start(suggestion, zone)
        end = start + duration
        slots.append(
            ProposalSlot(
                id=f"slot_{int(start.timestamp())}",
                start=start,
                end=end,
                quality=suggestion.quality,
                reason=suggestion.reason,
                local_times=local_times(start, timezones),
                calendar_url=google_calendar_url(
                    thread.topic, details, start, end, config.timezone
                ),
            )
        )

    return MeetingProposal(
        title=thread.topic,
        purpose=purpose,
        duration_minutes=config.default_duration_minutes,
        participant_names=names,
        location=config.meeting_location,
        timezone=config.timezone,
        slots=tuple(slots),
        created_at=thread.created_at,
    )
