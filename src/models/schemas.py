from enum import Enum

from pydantic import BaseModel, Field, field_validator


class MessageKind(str, Enum):
    """Kinds of message shown in a conversation."""

    USER = "user"
    ASSISTANT = "assistant"
    ERROR = "error"


class StreamState(str, Enum):
    """Lifecycle of one streaming response on the client."""

    IDLE = "idle"
    STREAMING = "streaming"
    DONE = "done"
    FAILED = "failed"


class Message(BaseModel):
    """A single message in the conversation.

    Attributes:
        kind: Who or what produced the message.
        content: The message text. Grows in place while an assistant reply streams.
    """

    kind: MessageKind
    content: str = ""


class ChatRequest(BaseModel):
    """Request payload for both chat endpoints.

    Attributes:
        message: User's prompt.
    """

    message: str = Field(..., min_length=1)

    @field_validator("message", mode="before")
    @classmethod
    def strip_message(cls, v: str) -> str:
        """Strip whitespace from message before validation."""
        if isinstance(v, str):
            return v.strip()
        return v


class ChatReply(BaseModel):
    """Response from the non-streaming chat endpoint."""

    reply: str


class ContentPayload(BaseModel):
    """JSON payload of a content frame on the event stream."""

    content: str


class HealthStatus(BaseModel):
    """Service health report."""

    status: str
    service: str
    timestamp: str
