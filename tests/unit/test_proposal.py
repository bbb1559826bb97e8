from dataclasses import replace
from datetime import UTC, date, datetime
from urllib.parse import parse_qs, urlsplit

import pytest

from chat_ai.features.proactive_scheduling.config import SchedulingConfig
from chat_ai.features.proactive_scheduling.domain.models import Participant, SuggestionQuality
from chat_ai.features.proactive_scheduling.pipeline.coordinator import SchedulingCoordinator
from chat_ai.features.proactive_scheduling.pipeline.proposal import (
    build_proposal,
    google_calendar_url,
)

REFERENCE = date(2025, 1, 15)


@pytest.fixture
def ready_thread(make_messages):
    coordinator = SchedulingCoordinator()
    (thread,) = coordinator.run(
        make_messages("Let's sync tomorrow at 2pm"), "user-123", reference_date=REFERENCE
    )
    return thread


def query(url):
    parts = urlsplit(url)
    assert f"{parts.scheme}://{parts.netloc}{parts.path}" == (
        "https://calendar.google.com/calendar/render"
    )
    return {key: values[0] for key, values in parse_qs(parts.query).items()}


def test_coordinator_attaches_proposal(ready_thread):
    proposal = ready_thread.proposal

    assert proposal is not None
    assert proposal.title == ready_thread.topic
    assert proposal.purpose == "Let's sync tomorrow at 2pm"
    assert proposal.participant_names == ("You",)
    assert proposal.location == "Virtual"
    assert proposal.timezone == "America/Los_Angeles"
    assert proposal.created_at == ready_thread.created_at
    assert [slot.quality for slot in proposal.slots] == [
        SuggestionQuality.BEST,
        SuggestionQuality.GOOD,
        SuggestionQuality.ACCEPTABLE,
    ]


def test_slot_times_are_in_scheduling_timezone(ready_thread):
    best = ready_thread.proposal.slots[0]

    assert best.start.isoformat() == "2025-01-16T14:00:00-08:00"
    assert best.end.isoformat() == "2025-01-16T14:30:00-08:00"
    assert best.id == f"slot_{int(datetime(2025, 1, 16, 22, 0, tzinfo=UTC).timestamp())}"
    assert best.quality_label == "⭐ Best overlap"


def test_calendar_link_carries_event_template(ready_thread):
    params = query(ready_thread.proposal.slots[0].calendar_url)

    assert params["action"] == "TEMPLATE"
    assert params["text"] == ready_thread.topic
    assert params["details"] == "Let's sync tomorrow at 2pm\n\nParticipants: You"
    assert params["dates"] == "20250116T220000Z/20250116T223000Z"
    assert params["ctz"] == "America/Los_Angeles"


def test_slot_rendered_per_participant_timezone(ready_thread):
    thread = replace(
        ready_thread,
        participants=(
            Participant("user-123", "You", "America/Los_Angeles"),
            Participant("user-456", "Dana", "Europe/London"),
            Participant("user-789", "Priya", "Asia/Kolkata"),
            Participant("user-999", "Sam", "Europe/London"),
        ),
    )

    proposal = build_proposal(thread, SchedulingConfig())
    local = {t.timezone: (t.date, t.time) for t in proposal.slots[0].local_times}

    assert local == {
        "America/Los_Angeles": ("Thursday, Jan 16", "2:00 PM"),
        "Europe/London": ("Thursday, Jan 16", "10:00 PM"),
        "Asia/Kolkata": ("Friday, Jan 17", "3:30 AM"),
    }
    assert proposal.participant_names == ("You", "Dana", "Priya", "Sam")


def test_enriched_purpose_and_configured_duration(ready_thread):
    thread = replace(ready_thread, topic="Launch review", purpose="Walk the checklist.")
    config = SchedulingConfig(default_duration_minutes=45, meeting_location="Room 4")

    proposal = build_proposal(thread, config)
    params = query(proposal.slots[0].calendar_url)

    assert proposal.title == "Launch review"
    assert proposal.purpose == "Walk the checklist."
    assert proposal.location == "Room 4"
    assert params["text"] == "Launch review"
    assert params["dates"] == "20250116T220000Z/20250116T224500Z"


def test_proposal_serializes_for_api(ready_thread):
    data = ready_thread.to_dict()["proposal"]

    assert data["title"] == ready_thread.topic
    assert data["duration"] == "30 minutes"
    assert data["participant_count"] == 1
    assert data["participant_names"] == "You"
    first = data["suggested_times"][0]
    assert first["day_of_week"] == "Thursday"
    assert first["date"] == "Jan 16, 2025"
    assert first["time"] == "2:00 PM"
    assert first["duration_minutes"] == 30
    assert first["timezones"] == {
        "America/Los_Angeles": {"date": "Thursday, Jan 16", "time": "2:00 PM"}
    }
    assert first["quality"] == "best"
    assert first["reason"] == "Matches requested time"
    assert [slot["quality_label"] for slot in data["suggested_times"]] == [
        "⭐ Best overlap",
        "✓ Good time",
        "◌ Acceptable",
    ]


def test_google_calendar_url_converts_to_utc():
    start = datetime(2025, 3, 3, 9, 30, tzinfo=UTC)
    end = datetime(2025, 3, 3, 10, 0, tzinfo=UTC)

    params = query(google_calendar_url("Standup", "Daily", start, end, "Europe/London"))

    assert params["dates"] == "20250303T093000Z/20250303T100000Z"
    assert params["ctz"] == "Europe/London"
