"""
Read-only access to conversation messages for the proactive assistant.
"""

from chat_ai.db.helpers import DatabaseError, fetch_all
from chat_ai.features.proactive_scheduling.domain.errors import InputError
from chat_ai.features.proactive_scheduling.domain.models import Message
from chat_ai.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class MessageStoreError(DatabaseError):
    """Raised when the message window cannot be loaded."""


class MessageRepository:
    """Loads the most recent text messages of a conversation, oldest first."""

    RECENT_MESSAGES_QUERY = """
        SELECT id, sender_id, sender_name, content, created_at
        FROM messages
        WHERE conversation_id = %s
          AND message_type = 'text'
          AND content IS NOT NULL
          AND content <> ''
        ORDER BY created_at DESC, id DESC
        LIMIT %s
    """

    @classmethod
    def _rows_to_window(cls, rows: list[dict]) -> list[Message]:
        window = []
        for index, row in enumerate(reversed(rows)):
            try:
                window.append(Message.from_dict(row, index))
            except InputError as e:
                raise MessageStoreError(
                    f"Malformed message row: {e}", operation="get_recent_messages"
                ) from e
        return window

    @classmethod
    async def get_recent_messages(cls, conversation_id: str, limit: int) -> list[Message]:
        """
        Fetch up to ``limit`` text messages ordered oldest to newest.

        Raises:
            MessageStoreError: If the query fails or returns malformed rows
        """
        try:
            rows = await fetch_all(cls.RECENT_MESSAGES_QUERY, (conversation_id, limit))
        except DatabaseError as e:
            logger.error(
                "Failed to load conversation messages",
                conversation_id=conversation_id,
                error=str(e),
            )
            raise MessageStoreError(str(e), operation="get_recent_messages") from e

        window = cls._rows_to_window(rows)
        logger.debug(
            "Loaded conversation messages", conversation_id=conversation_id, count=len(window)
        )
        return window
