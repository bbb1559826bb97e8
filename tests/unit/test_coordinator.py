from datetime import UTC, date, datetime

import pytest

from chat_ai.features.proactive_scheduling.config import SchedulingConfig
from chat_ai.features.proactive_scheduling.domain.errors import InputError
from chat_ai.features.proactive_scheduling.domain.models import (
    Message,
    SuggestionQuality,
    ThreadStatus,
)
from chat_ai.features.proactive_scheduling.pipeline.coordinator import (
    SchedulingCoordinator,
    build_window,
    extract_topic,
    resolve_status,
    score_confidence,
    summarize_threads,
)
from chat_ai.features.proactive_scheduling.pipeline.patterns import SCHEDULING_KEYWORDS

REFERENCE = date(2025, 1, 15)


@pytest.fixture
def coordinator():
    return SchedulingCoordinator()


def test_ready_thread_from_exact_date_and_time(coordinator, make_messages):
    messages = make_messages("Let's sync tomorrow at 2pm")

    (thread,) = coordinator.run(messages, "user-123", reference_date=REFERENCE)

    assert thread.date_info.specified is True
    assert thread.date_info.date_value == date(2025, 1, 16)
    assert thread.time_info.specified is True
    assert thread.time_info.to_dict()["value"] == "2:00 PM"
    assert thread.status is ThreadStatus.READY
    assert thread.needs_action is False
    assert thread.id == f"thread_0_{int(messages[0].timestamp.timestamp())}"
    assert thread.created_at == messages[0].timestamp


def test_vague_request_uses_default_slots(coordinator, make_messages):
    (thread,) = coordinator.run(
        make_messages("We should catch up sometime"), "user-123", reference_date=REFERENCE
    )

    assert thread.date_info.specified is False
    assert thread.date_info.vague is True
    assert thread.date_info.description == "soon"
    assert thread.time_info.specified is False
    assert thread.status is ThreadStatus.NEEDS_BOTH
    assert [s.reason for s in thread.suggested_times] == [
        "Morning slot",
        "Afternoon slot",
        "Late afternoon",
    ]


def test_nearby_availability_becomes_best_suggestion(coordinator, make_messages):
    messages = make_messages(
        "let's meet next week",
        "sounds good",
        "I'm free Tuesday at 10am",
    )

    threads = coordinator.run(messages, "user-123", reference_date=REFERENCE)

    assert len(threads) == 1
    thread = threads[0]
    assert [h.source_message_index for h in thread.availability_hints] == [2]
    best = thread.suggested_times[0]
    assert best.quality is SuggestionQuality.BEST
    assert (best.date, best.start_time) == (date(2025, 1, 21), "10:00 AM")
    assert best.reason == 'Suggested in message: "I\'m free Tuesday at 10am"'


def test_empty_window_yields_no_threads(coordinator):
    assert coordinator.run([], "user-123", reference_date=REFERENCE) == []


def test_keyword_without_temporal_information(coordinator, make_messages):
    (thread,) = coordinator.run(make_messages("Team meeting"), "user-123", reference_date=REFERENCE)

    assert thread.status is ThreadStatus.NEEDS_BOTH
    assert len(thread.suggested_times) == 3
    assert thread.confidence == 0.5
    assert thread.topic == "Team"
    assert thread.matched_keywords == ("meeting",)


def test_multiple_threads_in_one_window(coordinator, make_messages):
    messages = make_messages(
        "Can we schedule a call about the launch tomorrow at 3pm?",
        "sure",
        "what time works for the call?",
        "also need a zoom sync with design next week",
        "ok",
    )

    threads = coordinator.run(messages, "user-123", reference_date=REFERENCE)

    assert [t.trigger_message_index for t in threads] == [0, 3]
    assert [t.status for t in threads] == [ThreadStatus.READY, ThreadStatus.NEEDS_BOTH]
    assert [t.confidence for t in threads] == [0.65, 0.65]
    assert threads[1].message_context == tuple(m.content for m in messages[1:5])
    assert summarize_threads(threads) == {"total_threads": 2, "needs_action": 1}


def test_status_always_matches_specified_flags(coordinator, make_messages):
    messages = make_messages(
        "meeting tomorrow?",
        "x",
        "x",
        "call at 4pm?",
        "x",
        "x",
        "sync Friday at noon",
        "x",
        "x",
        "zoom whenever",
    )

    threads = coordinator.run(messages, "user-123", reference_date=REFERENCE)

    assert [t.status for t in threads] == [
        ThreadStatus.NEEDS_TIME,
        ThreadStatus.NEEDS_DATE,
        ThreadStatus.READY,
        ThreadStatus.NEEDS_BOTH,
    ]
    for thread in threads:
        assert thread.status is resolve_status(
            thread.date_info.specified, thread.time_info.specified
        )
        assert 1 <= len(thread.suggested_times) <= 3
        qualities = [s.quality for s in thread.suggested_times]
        assert qualities == list(SuggestionQuality)[: len(qualities)]


def test_runs_are_deterministic(coordinator, make_messages):
    messages = make_messages(
        "Can we meet Friday afternoon?",
        "I'm free at 3pm",
        "works for me",
    )

    first = [t.to_dict() for t in coordinator.run(messages, "user-123", reference_date=REFERENCE)]
    second = [t.to_dict() for t in coordinator.run(messages, "user-123", reference_date=REFERENCE)]

    assert first == second


def test_participants_are_labelled(coordinator):
    ts = datetime(2025, 1, 15, 17, 0, tzinfo=UTC)
    messages = [
        Message(index=0, sender_id="user-123", content="meeting?", timestamp=ts),
        Message(index=1, sender_id="user-456", content="sure", timestamp=ts, sender_name="Dana"),
        Message(index=2, sender_id="abcdefgh", content="me too", timestamp=ts),
        Message(index=3, sender_id="user-123", content="great", timestamp=ts),
    ]

    (thread,) = coordinator.run(messages, "user-123", reference_date=REFERENCE)

    assert [(p.user_id, p.name) for p in thread.participants] == [
        ("user-123", "You"),
        ("user-456", "Dana"),
        ("abcdefgh", "User abcdef"),
    ]
    assert {p.timezone for p in thread.participants} == {"America/Los_Angeles"}


def test_config_radius_is_honoured(make_messages):
    messages = make_messages("meeting?", "sync tomorrow?")

    default_threads = SchedulingCoordinator().run(messages, "u", reference_date=REFERENCE)
    tight_threads = SchedulingCoordinator(SchedulingConfig(trigger_radius=0)).run(
        messages, "u", reference_date=REFERENCE
    )

    assert len(default_threads) == 1
    assert len(tight_threads) == 2


def test_non_contiguous_window_is_rejected(coordinator):
    ts = datetime(2025, 1, 15, 17, 0, tzinfo=UTC)
    messages = [Message(index=1, sender_id="u", content="meeting", timestamp=ts)]

    with pytest.raises(InputError):
        coordinator.run(messages, "u", reference_date=REFERENCE)


def test_non_message_entries_are_rejected(coordinator):
    with pytest.raises(InputError):
        coordinator.run([{"content": "meeting"}], "u", reference_date=REFERENCE)
    with pytest.raises(InputError):
        coordinator.run(None, "u", reference_date=REFERENCE)


def test_reference_date_defaults_to_configured_timezone(coordinator):
    # 05:00 UTC on the 16th is still the evening of the 15th in Los Angeles
    assert coordinator.today(datetime(2025, 1, 16, 5, 0, tzinfo=UTC)) == date(2025, 1, 15)


@pytest.mark.parametrize(
    "count, expected",
    [(1, 0.5), (2, 0.65), (3, 0.8), (4, 0.95), (7, 0.95)],
)
def test_confidence_grows_to_cap(count, expected):
    assert score_confidence(count, SchedulingConfig()) == expected


def test_topic_extraction():
    assert extract_topic("Quarterly planning meeting", SCHEDULING_KEYWORDS) == "Quarterly planning"
    assert extract_topic("Let's meet!", SCHEDULING_KEYWORDS) == "Meeting"

    long_topic = extract_topic("meeting " + "x" * 80, SCHEDULING_KEYWORDS)
    assert long_topic == "x" * 50 + "..."


def test_build_window_from_raw_rows():
    window = build_window(
        [
            {"senderId": "a", "content": "meeting?", "timestamp": 1736960400000},
            {"sender_id": "b", "content": "sure", "created_at": "2025-01-15T17:01:00Z"},
        ]
    )

    assert [m.index for m in window] == [0, 1]
    assert window[0].timestamp == datetime(2025, 1, 15, 17, 0, tzinfo=UTC)
    assert window[1].sender_id == "b"

    with pytest.raises(InputError):
        build_window([{"senderId": "a", "timestamp": 1736960400000}])


def test_config_validation():
    with pytest.raises(ValueError):
        SchedulingConfig(confidence_floor=0.9, confidence_cap=0.5)
    with pytest.raises(ValueError):
        SchedulingConfig(trigger_radius=-1)
