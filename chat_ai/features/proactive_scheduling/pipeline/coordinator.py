"""
Scheduling coordinator - turns one conversation window into scheduling threads.

The coordinator is synchronous and side-effect free apart from logging: the
same window, configuration and reference date always give the same threads.
Fetching messages, caching and topic enrichment live in the service layer.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import replace
from datetime import date, datetime
from typing import Any
from zoneinfo import ZoneInfo

from chat_ai.infrastructure.observability.logging import get_logger

from ..config import SchedulingConfig
from ..domain.errors import InputError
from ..domain.models import Message, Participant, SchedulingThread, ThreadStatus
from .availability import scan_neighborhood
from .extractor import extract_date, extract_time
from .patterns import vocabulary_matcher
from .proposal import build_proposal
from .segmenter import TriggerCandidate, segment, suppression_window
from .synthesizer import synthesize

logger = get_logger(__name__)

FALLBACK_TOPIC = "Meeting"
_TOPIC_TRIM = " \t\n,.;:!?-–—'\""


def resolve_status(date_specified: bool, time_specified: bool) -> ThreadStatus:
    if date_specified and time_specified:
        return ThreadStatus.READY
    if date_specified:
        return ThreadStatus.NEEDS_TIME
    if time_specified:
        return ThreadStatus.NEEDS_DATE
    return ThreadStatus.NEEDS_BOTH


def score_confidence(keyword_count: int, config: SchedulingConfig) -> float:
    """Grows with the number of keyword hits, from the floor up to the cap."""
    raw = config.confidence_floor + config.confidence_step * max(0, keyword_count - 1)
    return round(min(config.confidence_cap, raw), 2)


def extract_topic(text: str, keywords: tuple[str, ...], max_length: int = 50) -> str:
    """Best-effort topic: the trigger text without its scheduling vocabulary."""
    stripped = vocabulary_matcher(keywords).strip(text)
    topic = " ".join(stripped.split()).strip(_TOPIC_TRIM)
    if not topic:
        return FALLBACK_TOPIC
    if len(topic) > max_length:
        return topic[:max_length].rstrip() + "..."
    return topic


def build_window(rows: Iterable[Mapping[str, Any]]) -> list[Message]:
    """Index raw message mappings (oldest first) into a message window."""
    if rows is None:
        raise InputError("Message window is missing")
    return [Message.from_dict(row, index) for index, row in enumerate(rows)]


def summarize_threads(threads: Sequence[SchedulingThread]) -> dict[str, int]:
    return {
        "total_threads": len(threads),
        "needs_action": sum(1 for thread in threads if thread.needs_action),
    }


class SchedulingCoordinator:
    """Runs segmentation, extraction, hint scanning and synthesis over one window."""

    def __init__(self, config: SchedulingConfig | None = None):
        self.config = config or SchedulingConfig()

    def today(self, now: datetime | None = None) -> date:
        """Reference date in the configured timezone."""
        tz = ZoneInfo(self.config.timezone)
        current = now.astimezone(tz) if now else datetime.now(tz)
        return current.date()

    def run(
        self,
        messages: Sequence[Message],
        user_id: str,
        *,
        reference_date: date | None = None,
    ) -> list[SchedulingThread]:
        """
        Detect every scheduling thread in ``messages``.

        Args:
            messages: Window ordered oldest to newest, ``index`` equal to position
            user_id: Requesting user, labelled "You" among participants
            reference_date: Date that relative expressions resolve against
                (defaults to today in the configured timezone)

        Returns:
            Threads in trigger order; empty when no scheduling intent is found

        Raises:
            InputError: If the window is missing or a message is malformed
        """
        self._validate(messages)
        if not messages:
            return []

        reference = reference_date or self.today()
        participants = self._participants(messages, user_id)
        triggers = segment(messages, self.config.keywords, self.config.trigger_radius)

        threads = [
            self._build_thread(messages, trigger, reference, participants) for trigger in triggers
        ]

        logger.info(
            "Scheduling threads detected",
            messages=len(messages),
            threads=len(threads),
            reference_date=reference.isoformat(),
            **summarize_threads(threads),
        )
        return threads

    def _validate(self, messages: Sequence[Message]) -> None:
        if messages is None:
            raise InputError("Message window is missing")

        for position, message in enumerate(messages):
            if not isinstance(message, Message):
                raise InputError(f"Message {position} is not a Message record")
            if message.index != position:
                raise InputError(
                    f"Message {position} has index {message.index}; window must be contiguous"
                )
            if not isinstance(message.content, str):
                raise InputError(f"Message {position} is missing text content")
            if not message.sender_id:
                raise InputError(f"Message {position} is missing sender_id")

    def _participants(self, messages: Sequence[Message], user_id: str) -> tuple[Participant, ...]:
        seen: dict[str, Participant] = {}
        for message in messages:
            if message.sender_id in seen:
                continue
            if message.sender_id == user_id:
                name = "You"
            else:
                name = message.sender_name or f"User {message.sender_id[:6]}"
            seen[message.sender_id] = Participant(
                user_id=message.sender_id, name=name, timezone=self.config.timezone
            )
        return tuple(seen.values())

    def _build_thread(
        self,
        messages: Sequence[Message],
        trigger: TriggerCandidate,
        reference: date,
        participants: tuple[Participant, ...],
    ) -> SchedulingThread:
        message = messages[trigger.index]
        date_info = extract_date(trigger.text, reference)
        time_info = extract_time(trigger.text)

        hints = scan_neighborhood(
            messages,
            trigger.index,
            reference,
            radius=self.config.availability_radius,
            vocabulary=self.config.availability_vocabulary,
        )
        suggestions = synthesize(
            date_info,
            time_info,
            hints,
            reference,
            duration_minutes=self.config.default_duration_minutes,
        )
        context = suppression_window(trigger.index, self.config.context_radius, len(messages))

        thread = SchedulingThread(
            id=f"thread_{trigger.index}_{int(message.timestamp.timestamp())}",
            topic=extract_topic(trigger.text, self.config.keywords, self.config.topic_max_length),
            trigger_message_index=trigger.index,
            trigger_text=trigger.text,
            date_info=date_info,
            time_info=time_info,
            status=resolve_status(date_info.specified, time_info.specified),
            suggested_times=tuple(suggestions),
            confidence=score_confidence(trigger.keyword_count, self.config),
            created_at=message.timestamp,
            availability_hints=tuple(hints),
            matched_keywords=trigger.matched_keywords,
            message_context=tuple(messages[i].content for i in context),
            participants=participants,
        )
        return replace(thread, proposal=build_proposal(thread, self.config))
