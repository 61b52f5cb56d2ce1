"""Pydantic models shared by the API, the relay and the UI.

Provides type safety, validation, and automatic OpenAPI documentation.

Models:
    - Message / MessageKind: Conversation entries
    - StreamState: Client-side stream session lifecycle
    - ChatRequest / ChatReply: HTTP request and non-streaming response
    - ContentPayload: JSON body of a content frame
    - HealthStatus: Health check response
"""

from src.models.schemas import (
    ChatReply,
    ChatRequest,
    ContentPayload,
    HealthStatus,
    Message,
    MessageKind,
    StreamState,
)

__all__ = [
    "ChatReply",
    "ChatRequest",
    "ContentPayload",
    "HealthStatus",
    "Message",
    "MessageKind",
    "StreamState",
]
