"""Streaming chat relay.

Server side:
    - producer: upstream text deltas -> frames
    - writer: frames -> text/event-stream records, always ending in a sentinel

Client side:
    - reader: raw body bytes -> complete frames across chunk boundaries
    - accumulator: frames -> in-place growth of the in-flight assistant message
    - client: httpx glue tying reader and accumulator to a Conversation
"""

from src.relay.accumulator import (
    Conversation,
    MessageHandle,
    StaleMessageError,
    StreamBusyError,
    StreamSession,
)
from src.relay.frames import Frame, FrameKind, encode_frame
from src.relay.producer import produce_frames
from src.relay.reader import FrameReader, read_frames
from src.relay.writer import event_stream_response, write_frames

__all__ = [
    "Conversation",
    "Frame",
    "FrameKind",
    "FrameReader",
    "MessageHandle",
    "StaleMessageError",
    "StreamBusyError",
    "StreamSession",
    "encode_frame",
    "event_stream_response",
    "produce_frames",
    "read_frames",
    "write_frames",
]
