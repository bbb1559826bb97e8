from datetime import UTC, date, datetime, timedelta

import pytest

from chat_ai.auth.verify import auth_dependency
from chat_ai.features.proactive_scheduling.domain.models import Message

# Wednesday
REFERENCE_DATE = date(2025, 1, 15)
WINDOW_START = datetime(2025, 1, 15, 17, 0, tzinfo=UTC)


@pytest.fixture
def auth_override():
    def _override():
        return {"sub": "user-123"}

    return _override


class FakeRedis:
    def __init__(self):
        self.store: dict[str, str] = {}
        self.ttls: dict[str, int | None] = {}

    async def set_with_ttl(self, key: str, value: str, ttl_s: int | None = None) -> bool:
        self.store[key] = value
        self.ttls[key] = ttl_s
        return True

    async def get(self, key: str) -> str | None:
        return self.store.get(key)

    async def delete(self, key: str) -> bool:
        return self.store.pop(key, None) is not None


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def apply_auth_override(auth_override):
    def _apply(app):
        app.dependency_overrides[auth_dependency] = auth_override

    return _apply


@pytest.fixture
def reference_date():
    return REFERENCE_DATE


def build_messages(*texts: str, senders: tuple[str, ...] = ("user-123", "user-456")) -> list:
    """Window of text messages one minute apart, alternating between ``senders``."""
    return [
        Message(
            index=i,
            sender_id=senders[i % len(senders)],
            content=text,
            timestamp=WINDOW_START + timedelta(minutes=i),
            id=f"msg-{i}",
            sender_name=None if senders[i % len(senders)] == "user-123" else "Dana",
        )
        for i, text in enumerate(texts)
    ]


@pytest.fixture
def make_messages():
    return build_messages
