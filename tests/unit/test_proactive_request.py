"""
Tests for the proactive assistant request model.
"""

import pytest
from pydantic import ValidationError

from chat_ai.config import settings
from chat_ai.models.api.proactive_request import ProactiveAssistantRequest


def test_limit_defaults_to_configured_value():
    request = ProactiveAssistantRequest(conversation_id="conv-1")

    assert request.limit == settings.PROACTIVE_DEFAULT_LIMIT
    assert request.force_refresh is False


def test_limit_accepts_configured_maximum():
    request = ProactiveAssistantRequest(
        conversation_id="conv-1", limit=settings.PROACTIVE_MAX_LIMIT
    )

    assert request.limit == settings.PROACTIVE_MAX_LIMIT


def test_limit_above_configured_maximum_is_rejected():
    with pytest.raises(ValidationError):
        ProactiveAssistantRequest(conversation_id="conv-1", limit=settings.PROACTIVE_MAX_LIMIT + 1)
