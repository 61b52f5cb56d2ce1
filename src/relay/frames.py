"""Frame types and wire encoding for the chat event stream.

Wire format (one record per frame, records separated by a blank line):

    data: {"content": "<delta>"}
    data: [DONE]
    data: [ERROR]
"""

from enum import Enum

from pydantic import BaseModel

from src.models.schemas import ContentPayload

DATA_PREFIX = "data: "
FRAME_DELIMITER = "\n"
RECORD_TERMINATOR = "\n\n"
DONE_MARKER = "[DONE]"
ERROR_MARKER = "[ERROR]"
EVENT_STREAM_MEDIA_TYPE = "text/event-stream"


class FrameKind(str, Enum):
    """Kinds of frame carried by the event stream."""

    CONTENT = "content"
    DONE = "done"
    ERROR = "error"


class Frame(BaseModel):
    """One unit of the event stream.

    Attributes:
        kind: Content frame or one of the two terminal sentinels.
        content: Text delta, only set for content frames.
    """

    kind: FrameKind
    content: str = ""

    @classmethod
    def delta(cls, content: str) -> "Frame":
        return cls(kind=FrameKind.CONTENT, content=content)

    @classmethod
    def done(cls) -> "Frame":
        return cls(kind=FrameKind.DONE)

    @classmethod
    def error(cls) -> "Frame":
        return cls(kind=FrameKind.ERROR)

    @property
    def is_terminal(self) -> bool:
        return self.kind is not FrameKind.CONTENT


def encode_frame(frame: Frame) -> str:
    """Serialize a frame as a complete event stream record."""
    if frame.kind is FrameKind.DONE:
        payload = DONE_MARKER
    elif frame.kind is FrameKind.ERROR:
        payload = ERROR_MARKER
    else:
        payload = ContentPayload(content=frame.content).model_dump_json()
    return f"{DATA_PREFIX}{payload}{RECORD_TERMINATOR}"
