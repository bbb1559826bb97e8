"""
Proactive scheduling routes.

HTTP entry point for the proactive assistant; all scheduling logic lives in
the feature's service and pipeline packages.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from chat_ai.auth.verify import auth_dependency
from chat_ai.infrastructure.observability.logging import bind_request_context, get_logger
from chat_ai.models.api.proactive_request import ProactiveAssistantRequest
from chat_ai.models.api.proactive_response import ProactiveAssistantResponse

from ..domain.errors import InputError
from ..repository.message_repository import MessageStoreError
from ..services.assistant_service import (
    ProactiveAssistantService,
    get_proactive_assistant_service,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/ai", tags=["proactive-assistant"])


@router.post("/proactive-assistant", response_model=ProactiveAssistantResponse)
async def proactive_assistant(
    request: ProactiveAssistantRequest,
    claims: dict = Depends(auth_dependency),
    service: ProactiveAssistantService = Depends(get_proactive_assistant_service),
):
    """Detect scheduling threads in the latest messages of a conversation."""
    user_id = claims.get("sub") or claims.get("user_id")
    if not user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    bind_request_context(conversation_id=request.conversation_id, user_id=user_id)

    try:
        data = await service.analyze_conversation(
            request.conversation_id,
            user_id,
            request.limit,
            force_refresh=request.force_refresh,
        )
        return ProactiveAssistantResponse(success=True, data=data)

    except InputError as e:
        logger.warning(
            "Proactive assistant rejected input",
            conversation_id=request.conversation_id,
            error=str(e),
        )
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except MessageStoreError as e:
        logger.error(
            "Message store unavailable",
            conversation_id=request.conversation_id,
            operation=e.operation,
            error=str(e),
        )
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to load conversation messages"
        ) from e
    except Exception as e:
        logger.error(
            "Proactive assistant failed",
            conversation_id=request.conversation_id,
            user_id=user_id,
            error=str(e),
            error_type=type(e).__name__,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to analyze conversation",
        ) from e
