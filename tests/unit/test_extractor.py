from datetime import date

import pytest

from chat_ai.features.proactive_scheduling.domain.models import NOT_MENTIONED
from chat_ai.features.proactive_scheduling.domain.time_of_day import TimeOfDay
from chat_ai.features.proactive_scheduling.pipeline.extractor import extract_date, extract_time
from chat_ai.features.proactive_scheduling.pipeline.patterns import (
    EXACT_DATE_PATTERNS,
    DatePattern,
)

REFERENCE = date(2025, 1, 15)  # Wednesday


def test_tomorrow_resolves_against_reference_date():
    hint = extract_date("Let's sync tomorrow at 2pm", REFERENCE)

    assert hint.specified is True
    assert hint.vague is False
    assert hint.date_value == date(2025, 1, 16)
    assert hint.original_text == "tomorrow"
    assert hint.description is None


def test_list_priority_beats_position_in_text():
    # "tomorrow" is listed before weekday names, so it wins even when it appears later
    hint = extract_date("Friday or tomorrow, whichever", REFERENCE)

    assert hint.date_value == date(2025, 1, 16)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("how about Jan 20", date(2025, 1, 20)),
        ("March 3rd works", date(2025, 3, 3)),
        ("on 3/15?", date(2025, 3, 15)),
        ("Jan 10 maybe", date(2026, 1, 10)),
        ("today please", REFERENCE),
    ],
)
def test_calendar_dates(text, expected):
    assert extract_date(text, REFERENCE).date_value == expected


def test_weekday_is_next_occurrence_after_reference():
    assert extract_date("next Friday", REFERENCE).date_value == date(2025, 1, 17)
    assert extract_date("next Friday", REFERENCE).original_text == "next Friday"
    # same weekday as the reference jumps a full week
    assert extract_date("Wednesday?", REFERENCE).date_value == date(2025, 1, 22)


def test_failed_resolution_falls_through_to_vague():
    hint = extract_date("Feb 30 or sometime next week", REFERENCE)

    assert hint.specified is False
    assert hint.vague is True
    assert hint.description == "next week"
    assert hint.original_text == "next week"


def test_invalid_slash_date_is_not_mentioned():
    hint = extract_date("ticket 2/30 is blocked", REFERENCE)

    assert hint.specified is False
    assert hint.description == NOT_MENTIONED


@pytest.mark.parametrize(
    "text, description",
    [
        ("catch up sometime", "soon"),
        ("this week if possible", "this week"),
        ("maybe next month", "next month"),
        ("over the weekend", "weekend"),
        ("let's talk later", "soon"),
    ],
)
def test_vague_dates(text, description):
    hint = extract_date(text, REFERENCE)

    assert hint.specified is False
    assert hint.description == description


def test_no_date_information():
    hint = extract_date("Team meeting", REFERENCE)

    assert hint.to_dict() == {
        "specified": False,
        "value": None,
        "original": None,
        "vague": True,
        "description": NOT_MENTIONED,
        "suggested_value": None,
    }


def test_custom_pattern_table():
    only_weekdays = tuple(p for p in EXACT_DATE_PATTERNS if p.name == "weekday")
    assert all(isinstance(p, DatePattern) for p in only_weekdays)

    hint = extract_date("tomorrow or Friday", REFERENCE, patterns=only_weekdays)

    assert hint.date_value == date(2025, 1, 17)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("at 2pm", "2:00 PM"),
        ("2:30 p.m. works", "2:30 PM"),
        ("10AM sharp", "10:00 AM"),
        ("14:30", "2:30 PM"),
        ("around noon", "12:00 PM"),
        ("by midnight", "12:00 AM"),
    ],
)
def test_exact_times(text, expected):
    hint = extract_time(text)

    assert hint.specified is True
    assert hint.time_value.display() == expected
    assert hint.to_dict()["value"] == expected


def test_exact_time_beats_vague_descriptor():
    hint = extract_time("tomorrow morning at 9am")

    assert hint.time_value == TimeOfDay.from_clock(9, 0, "am")
    assert hint.original_text == "9am"


def test_vague_time_carries_default():
    hint = extract_time("sometime in the afternoon")

    assert hint.specified is False
    assert hint.description == "afternoon"
    assert hint.suggested_value == TimeOfDay.from_clock(14, 0)
    assert hint.to_dict()["suggested_value"] == "2:00 PM"


def test_unresolvable_time_falls_through():
    hint = extract_time("13pm tomorrow afternoon")

    assert hint.specified is False
    assert hint.description == "afternoon"


def test_no_time_information():
    hint = extract_time("Let's catch up")

    assert hint.specified is False
    assert hint.description == NOT_MENTIONED
    assert hint.time_value is None


def test_later_occurrence_of_same_pattern_resolves():
    hint = extract_time("13pm or 2pm")

    assert hint.specified is True
    assert hint.time_value.display() == "2:00 PM"
    assert hint.original_text == "2pm"


def test_invalid_month_day_tries_next_month_day():
    hint = extract_date("Feb 30 or Mar 3", REFERENCE)

    assert hint.date_value == date(2025, 3, 3)
    assert hint.original_text == "Mar 3"


def test_modal_may_is_not_a_date():
    hint = extract_date("you may 3 times", REFERENCE)

    assert hint.specified is False
    assert hint.description == NOT_MENTIONED


def test_capitalized_may_is_a_date():
    assert extract_date("How about May 3?", REFERENCE).date_value == date(2025, 5, 3)
