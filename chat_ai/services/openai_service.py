# chat_ai/services/openai_service.py
"""
OpenAI Service for scheduling topic summaries.
Turns a scheduling thread's trigger message and nearby context into a short
topic and one-sentence purpose. Only used for enrichment; never for dates,
times or thread detection.
"""

import asyncio
import json
from dataclasses import dataclass

import openai
from openai import AsyncOpenAI

from chat_ai.config import settings
from chat_ai.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

MAX_TOPIC_LENGTH = 60


class OpenAIServiceError(Exception):
    """Base exception for OpenAI service errors."""

    def __init__(self, message: str, api_error: str | None = None, recoverable: bool = True):
        super().__init__(message)
        self.api_error = api_error
        self.recoverable = recoverable


@dataclass(frozen=True, slots=True)
class TopicSummary:
    topic: str
    purpose: str | None = None


SYSTEM_MESSAGE = """You help a distributed team schedule meetings in a chat app.

Given the message that started a scheduling discussion and the messages around it,
return ONLY valid JSON: {"topic": "...", "purpose": "..."}

- topic: main subject of the meeting, 3-5 words (e.g. "Database migration strategy")
- purpose: why they are meeting, one sentence
- Do not invent dates, times or participants
"""


class OpenAITopicSummarizer:
    """
    Produces short meeting topics with a chat completion in JSON mode.
    """

    def __init__(self, client: AsyncOpenAI | None = None, model: str | None = None):
        self.model = model or settings.OPENAI_MODEL
        self.max_retries = 2
        self.client = client or self._initialize_client()

    def _initialize_client(self) -> AsyncOpenAI:
        if not settings.OPENAI_API_KEY:
            raise OpenAIServiceError("OPENAI_API_KEY not configured in settings", recoverable=False)

        logger.info("OpenAI client initialized", model=self.model)
        return AsyncOpenAI(
            api_key=settings.OPENAI_API_KEY,
            timeout=settings.OPENAI_TIMEOUT_SECONDS,
        )

    def _build_user_message(self, trigger_text: str, context: list[str]) -> str:
        conversation = "\n".join(f"- {line}" for line in context)
        return f"""TRIGGER MESSAGE (most important):
{trigger_text.strip()}

NEARBY MESSAGES:
{conversation}"""

    async def summarize(self, trigger_text: str, context: list[str]) -> TopicSummary:
        """
        Summarize one scheduling thread.

        Raises:
            OpenAIServiceError: If the API keeps failing or returns unusable JSON
        """
        raw = await self._call_openai_with_retry(
            SYSTEM_MESSAGE, self._build_user_message(trigger_text, context)
        )
        return self._parse_summary(raw)

    async def _call_openai_with_retry(self, system_message: str, user_message: str) -> str:
        """Call OpenAI API with retry logic for transient failures."""
        last_error = None

        for attempt in range(self.max_retries):
            try:
                response = await self.client.chat.completions.create(
                    model=self.model,
                    messages=[
                        {"role": "system", "content": system_message},
                        {"role": "user", "content": user_message},
                    ],
                    max_tokens=150,
                    temperature=0.3,
                    response_format={"type": "json_object"},
                )

                if not response.choices or not response.choices[0].message.content:
                    raise OpenAIServiceError("Empty response from OpenAI API")

                return response.choices[0].message.content.strip()

            except openai.RateLimitError as e:
                last_error = e
                wait_time = min(2**attempt, 8)
                logger.warning(
                    "OpenAI rate limit hit, retrying",
                    attempt=attempt + 1,
                    wait_time=wait_time,
                    error=str(e),
                )
                if attempt < self.max_retries - 1:
                    await asyncio.sleep(wait_time)

            except openai.APITimeoutError as e:
                last_error = e
                logger.warning("OpenAI API timeout, retrying", attempt=attempt + 1, error=str(e))

            except openai.APIError as e:
                last_error = e
                status_code = getattr(e, "status_code", None)
                if status_code is not None and 400 <= status_code < 500:
                    logger.error("OpenAI client error (not retrying)", error=str(e))
                    break
                logger.warning("OpenAI API error, retrying", attempt=attempt + 1, error=str(e))

            except OpenAIServiceError as e:
                last_error = e
                logger.warning("OpenAI returned no content", attempt=attempt + 1)

        logger.error(
            "OpenAI API call failed after all retries",
            max_retries=self.max_retries,
            final_error=str(last_error),
        )
        raise OpenAIServiceError(
            f"OpenAI API failed after {self.max_retries} attempts", api_error=str(last_error)
        ) from last_error

    def _parse_summary(self, raw_result: str) -> TopicSummary:
        try:
            result = json.loads(raw_result)
        except json.JSONDecodeError as e:
            logger.error("Failed to parse OpenAI response as JSON", raw_result=raw_result[:200])
            raise OpenAIServiceError("OpenAI returned invalid JSON") from e

        if not isinstance(result, dict):
            raise OpenAIServiceError("OpenAI returned a non-object JSON payload")

        topic = str(result.get("topic") or "").strip()
        if not topic:
            raise OpenAIServiceError("OpenAI response is missing a topic")

        purpose = str(result.get("purpose") or "").strip() or None
        return TopicSummary(topic=topic[:MAX_TOPIC_LENGTH], purpose=purpose)
