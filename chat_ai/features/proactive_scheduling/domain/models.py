"""
Domain models for the proactive scheduling feature.

Every record here is a frozen dataclass: values produced by one coordinator
run are never mutated afterwards, enrichment builds copies with
``dataclasses.replace``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, date, datetime
from enum import Enum
from typing import Any

from .errors import InputError
from .time_of_day import TimeOfDay

NOT_MENTIONED = "not mentioned"


class ThreadStatus(str, Enum):
    READY = "ready"
    NEEDS_DATE = "needs_date"
    NEEDS_TIME = "needs_time"
    NEEDS_BOTH = "needs_both"


class SuggestionQuality(str, Enum):
    BEST = "best"
    GOOD = "good"
    ACCEPTABLE = "acceptable"


# Assigned to suggestions in this order, one tier per slot.
QUALITY_ORDER: tuple[SuggestionQuality, ...] = (
    SuggestionQuality.BEST,
    SuggestionQuality.GOOD,
    SuggestionQuality.ACCEPTABLE,
)

QUALITY_LABELS: dict[SuggestionQuality, str] = {
    SuggestionQuality.BEST: "⭐ Best overlap",
    SuggestionQuality.GOOD: "✓ Good time",
    SuggestionQuality.ACCEPTABLE: "◌ Acceptable",
}


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=UTC)
    if isinstance(value, int | float) and not isinstance(value, bool):
        # Firestore-style millisecond epoch
        return datetime.fromtimestamp(value / 1000, tz=UTC)
    if isinstance(value, str) and value:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)
    raise InputError(f"Invalid message timestamp: {value!r}")


@dataclass(frozen=True, slots=True)
class Message:
    """A text-bearing chat message at a fixed position in the fetched window."""

    index: int
    sender_id: str
    content: str
    timestamp: datetime
    id: str | None = None
    sender_name: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], index: int) -> Message:
        """Build a message from a raw store/API mapping (camelCase or snake_case)."""
        sender_id = data.get("sender_id", data.get("senderId"))
        content = data.get("content")

        if not isinstance(sender_id, str) or not sender_id:
            raise InputError(f"Message {index} is missing sender_id")
        if not isinstance(content, str):
            raise InputError(f"Message {index} is missing text content")

        try:
            timestamp = _parse_timestamp(data.get("timestamp", data.get("created_at")))
        except ValueError as e:
            raise InputError(f"Message {index} has an invalid timestamp: {e}") from e

        message_id = data.get("id")
        return cls(
            index=index,
            sender_id=sender_id,
            content=content,
            timestamp=timestamp,
            id=str(message_id) if message_id is not None else None,
            sender_name=data.get("sender_name", data.get("senderName")),
        )


@dataclass(frozen=True, slots=True)
class TemporalHint:
    """Date or time information extracted from a single piece of text."""

    specified: bool
    resolved_value: date | TimeOfDay | None = None
    original_text: str | None = None
    vague: bool = True
    description: str | None = NOT_MENTIONED
    suggested_value: TimeOfDay | None = None

    def __post_init__(self):
        if self.specified and (self.resolved_value is None or self.vague):
            raise ValueError("A specified hint needs a resolved value and cannot be vague")
        if not self.specified and self.vague and not self.description:
            raise ValueError("A vague hint needs a description")

    @classmethod
    def exact(cls, value: date | TimeOfDay, original_text: str) -> TemporalHint:
        return cls(
            specified=True,
            resolved_value=value,
            original_text=original_text,
            vague=False,
            description=None,
        )

    @classmethod
    def vague_hint(
        cls, description: str, original_text: str, suggested_value: TimeOfDay | None = None
    ) -> TemporalHint:
        return cls(
            specified=False,
            original_text=original_text,
            vague=True,
            description=description,
            suggested_value=suggested_value,
        )

    @classmethod
    def not_mentioned(cls) -> TemporalHint:
        return cls(specified=False, vague=True, description=NOT_MENTIONED)

    @property
    def date_value(self) -> date | None:
        if self.specified and isinstance(self.resolved_value, date):
            return self.resolved_value
        return None

    @property
    def time_value(self) -> TimeOfDay | None:
        if self.specified and isinstance(self.resolved_value, TimeOfDay):
            return self.resolved_value
        return None

    def to_dict(self) -> dict[str, Any]:
        value = self.resolved_value
        if isinstance(value, TimeOfDay):
            value = value.display()
        elif isinstance(value, date):
            value = value.isoformat()

        return {
            "specified": self.specified,
            "value": value,
            "original": self.original_text,
            "vague": self.vague,
            "description": self.description,
            "suggested_value": self.suggested_value.display() if self.suggested_value else None,
        }


@dataclass(frozen=True, slots=True)
class AvailabilityHint:
    """Secondary temporal signal found near a trigger message."""

    source_message_index: int
    text: str
    date_info: TemporalHint
    time_info: TemporalHint

    @property
    def is_useful(self) -> bool:
        return self.date_info.specified or self.time_info.specified

    def to_dict(self) -> dict[str, Any]:
        return {
            "source_message_index": self.source_message_index,
            "text": self.text,
            "date_info": self.date_info.to_dict(),
            "time_info": self.time_info.to_dict(),
        }


@dataclass(frozen=True, slots=True)
class TimeSlotSuggestion:
    date: date
    start_time: str
    end_time: str
    quality: SuggestionQuality
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "start_time": self.start_time,
            "end_time": self.end_time,
            "quality": self.quality.value,
            "reason": self.reason,
        }


@dataclass(frozen=True, slots=True)
class Participant:
    user_id: str
    name: str
    timezone: str

    def to_dict(self) -> dict[str, Any]:
        return {"user_id": self.user_id, "name": self.name, "timezone": self.timezone}


@dataclass(frozen=True, slots=True)
class LocalSlotTime:
    """A slot start rendered in one participant timezone."""

    timezone: str
    date: str
    time: str


@dataclass(frozen=True, slots=True)
class ProposalSlot:
    id: str
    start: datetime
    end: datetime
    quality: SuggestionQuality
    reason: str
    local_times: tuple[LocalSlotTime, ...]
    calendar_url: str

    @property
    def quality_label(self) -> str:
        return QUALITY_LABELS[self.quality]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "day_of_week": self.start.strftime("%A"),
            "date": f"{self.start:%b} {self.start.day}, {self.start.year}",
            "time": TimeOfDay.from_time(self.start.time()).display(),
            "duration_minutes": int((self.end - self.start).total_seconds() // 60),
            "timezones": {
                local.timezone: {"date": local.date, "time": local.time}
                for local in self.local_times
            },
            "quality": self.quality.value,
            "quality_label": self.quality_label,
            "reason": self.reason,
            "calendar_url": self.calendar_url,
        }


@dataclass(frozen=True, slots=True)
class MeetingProposal:
    """Ready-to-send meeting proposal built from a thread's ranked slots."""

    title: str
    purpose: str
    duration_minutes: int
    participant_names: tuple[str, ...]
    location: str
    timezone: str
    slots: tuple[ProposalSlot, ...]
    created_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "purpose": self.purpose,
            "duration": f"{self.duration_minutes} minutes",
            "duration_minutes": self.duration_minutes,
            "participant_count": len(self.participant_names),
            "participant_names": ", ".join(self.participant_names),
            "location": self.location,
            "timezone": self.timezone,
            "suggested_times": [slot.to_dict() for slot in self.slots],
            "created_at": self.created_at.isoformat(),
        }


@dataclass(frozen=True, slots=True)
class SchedulingThread:
    """One independent scheduling intent found in a conversation."""

    id: str
    topic: str
    trigger_message_index: int
    trigger_text: str
    date_info: TemporalHint
    time_info: TemporalHint
    status: ThreadStatus
    suggested_times: tuple[TimeSlotSuggestion, ...]
    confidence: float
    created_at: datetime
    availability_hints: tuple[AvailabilityHint, ...] = ()
    matched_keywords: tuple[str, ...] = ()
    message_context: tuple[str, ...] = ()
    participants: tuple[Participant, ...] = ()
    purpose: str | None = None
    proposal: MeetingProposal | None = None

    @property
    def needs_action(self) -> bool:
        return self.status is not ThreadStatus.READY

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "topic": self.topic,
            "purpose": self.purpose,
            "trigger_message_index": self.trigger_message_index,
            "trigger_text": self.trigger_text,
            "date_info": self.date_info.to_dict(),
            "time_info": self.time_info.to_dict(),
            "availability_hints": [hint.to_dict() for hint in self.availability_hints],
            "status": self.status.value,
            "suggested_times": [slot.to_dict() for slot in self.suggested_times],
            "confidence": self.confidence,
            "created_at": self.created_at.isoformat(),
            "matched_keywords": list(self.matched_keywords),
            "message_context": list(self.message_context),
            "participants": [p.to_dict() for p in self.participants],
            "proposal": self.proposal.to_dict() if self.proposal else None,
        }


@dataclass(frozen=True, slots=True)
class ProactiveResult:
    """Aggregate returned to the API layer and stored in the cache."""

    conversation_id: str
    threads: tuple[SchedulingThread, ...]
    message_count: int
    duration_ms: float = 0.0
    cached: bool = False

    @property
    def total_threads(self) -> int:
        return len(self.threads)

    @property
    def needs_action(self) -> int:
        return sum(1 for thread in self.threads if thread.needs_action)

    def to_dict(self) -> dict[str, Any]:
        return {
            "threads": [thread.to_dict() for thread in self.threads],
            "total_threads": self.total_threads,
            "needs_action": self.needs_action,
            "conversation_id": self.conversation_id,
            "message_count": self.message_count,
            "duration_ms": self.duration_ms,
            "cached": self.cached,
        }
