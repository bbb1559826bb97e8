"""
Proactive assistant service.

Handles one ``POST /ai/proactive-assistant`` request: cache lookup, message
window fetch, coordinator run, optional topic enrichment and caching of the
aggregate. The coordinator stays synchronous and I/O free; everything async
lives here.
"""

import time
from dataclasses import replace
from datetime import date
from typing import Any, Protocol

from chat_ai.config import settings
from chat_ai.infrastructure.observability.logging import get_logger
from chat_ai.services.infrastructure.redis_client import fast_redis
from chat_ai.services.openai_service import OpenAITopicSummarizer

from ..domain.errors import InputError
from ..domain.models import Message, ProactiveResult, SchedulingThread
from ..pipeline.coordinator import SchedulingCoordinator
from ..pipeline.proposal import build_proposal
from ..repository.message_repository import MessageRepository
from .result_cache import ProactiveResultCache

logger = get_logger(__name__)


class MessageSource(Protocol):
    async def get_recent_messages(self, conversation_id: str, limit: int) -> list[Message]: ...


class TopicSummarizer(Protocol):
    async def summarize(self, trigger_text: str, context: list[str]) -> Any: ...


class ProactiveAssistantService:
    def __init__(
        self,
        coordinator: SchedulingCoordinator,
        cache: ProactiveResultCache,
        message_source: MessageSource = MessageRepository,
        summarizer: TopicSummarizer | None = None,
    ):
        self.coordinator = coordinator
        self.cache = cache
        self.message_source = message_source
        self.summarizer = summarizer

    async def analyze_conversation(
        self,
        conversation_id: str,
        user_id: str,
        limit: int,
        force_refresh: bool = False,
        reference_date: date | None = None,
    ) -> dict[str, Any]:
        """
        Detect scheduling threads in the latest messages of a conversation.

        Returns:
            The serialized ProactiveResult (``cached`` is True for cache hits)

        Raises:
            InputError: If the conversation has no text messages or the window is malformed
            MessageStoreError: If messages cannot be loaded
        """
        if not force_refresh:
            cached = await self.cache.get(conversation_id, limit)
            if cached is not None:
                logger.info(
                    "Returning cached proactive analysis",
                    conversation_id=conversation_id,
                    threads=cached.get("total_threads"),
                )
                return {**cached, "cached": True}

        start = time.perf_counter()
        messages = await self.message_source.get_recent_messages(conversation_id, limit)
        if not messages:
            raise InputError("No messages found")

        threads = self.coordinator.run(messages, user_id, reference_date=reference_date)
        if self.summarizer and threads:
            threads = [await self._enrich(thread) for thread in threads]

        result = ProactiveResult(
            conversation_id=conversation_id,
            threads=tuple(threads),
            message_count=len(messages),
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        payload = result.to_dict()
        await self.cache.set(conversation_id, limit, payload)

        logger.info(
            "Proactive analysis complete",
            conversation_id=conversation_id,
            user_id=user_id,
            message_count=result.message_count,
            threads=result.total_threads,
            needs_action=result.needs_action,
            duration_ms=result.duration_ms,
        )
        return payload

    async def _enrich(self, thread: SchedulingThread) -> SchedulingThread:
        """
        Replace the heuristic topic with a model summary and rebuild the proposal.

        The thread is returned unchanged on any summarizer failure.
        """
        try:
            summary = await self.summarizer.summarize(
                thread.trigger_text, list(thread.message_context)
            )
        except Exception as e:
            logger.warning(
                "Topic enrichment failed, keeping heuristic topic",
                thread_id=thread.id,
                error=str(e),
                error_type=type(e).__name__,
            )
            return thread

        enriched = replace(thread, topic=summary.topic, purpose=summary.purpose)
        return replace(enriched, proposal=build_proposal(enriched, self.coordinator.config))


_service: ProactiveAssistantService | None = None


def get_proactive_assistant_service() -> ProactiveAssistantService:
    """FastAPI dependency returning the process-wide service."""
    global _service
    if _service is None:
        summarizer = None
        if settings.topic_enrichment_enabled():
            summarizer = OpenAITopicSummarizer()

        _service = ProactiveAssistantService(
            coordinator=SchedulingCoordinator(settings.scheduling_config()),
            cache=ProactiveResultCache(fast_redis, settings.PROACTIVE_CACHE_TTL_SECONDS),
            summarizer=summarizer,
        )
        logger.info("Proactive assistant service created", topic_enrichment=bool(summarizer))
    return _service
