"""Chat endpoints: streaming relay and non-streaming sibling."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse

from src.completion import CompletionError, CompletionService, get_completion_service
from src.models.schemas import ChatReply, ChatRequest
from src.relay.producer import produce_frames
from src.relay.writer import event_stream_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


def completion_service() -> CompletionService:
    """Resolve the completion service for a request.

    Raises:
        HTTPException: 503 if the provider is not configured.
    """
    try:
        return get_completion_service()
    except ValueError as e:
        logger.error(f"Completion provider is not configured: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="LLM provider is not configured",
        ) from e


@router.post("/stream")
async def chat_stream(
    request: ChatRequest,
    service: CompletionService = Depends(completion_service),
) -> StreamingResponse:
    """Stream the assistant reply as Server-Sent Events.

    Each delta is sent as `data: {"content": ...}`; the stream ends with
    `data: [DONE]` or, if the provider fails, `data: [ERROR]`.
    """
    logger.info(f"Streaming reply for prompt of {len(request.message)} characters")
    return event_stream_response(produce_frames(service.stream_deltas(request.message)))


@router.post("", response_model=ChatReply)
async def chat(
    request: ChatRequest,
    service: CompletionService = Depends(completion_service),
) -> ChatReply:
    """Return the complete assistant reply in one response.

    Raises:
        500: Upstream provider failure.
    """
    try:
        reply = await service.complete(request.message)
    except CompletionError as e:
        logger.error(f"Chat completion failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Something went wrong",
        ) from e
    return ChatReply(reply=reply)
