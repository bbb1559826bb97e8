# chat_ai/models/api/proactive_request.py
"""
Proactive assistant API request models.
"""

from pydantic import BaseModel, Field

from chat_ai.config import settings


class ProactiveAssistantRequest(BaseModel):
    """Request for scanning a conversation for scheduling intent."""

    conversation_id: str = Field(..., min_length=1, description="Conversation to analyze")
    limit: int = Field(
        default=settings.PROACTIVE_DEFAULT_LIMIT,
        ge=1,
        le=settings.PROACTIVE_MAX_LIMIT,
        description="Number of recent messages to scan",
    )
    force_refresh: bool = Field(default=False, description="Bypass the cached analysis")
