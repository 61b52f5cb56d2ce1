"""Stream writer: serializes frames onto a streaming HTTP response."""

import logging
from collections.abc import AsyncGenerator
from contextlib import aclosing

from fastapi.responses import StreamingResponse

from src.relay.frames import EVENT_STREAM_MEDIA_TYPE, Frame, encode_frame

logger = logging.getLogger(__name__)

# X-Accel-Buffering stops nginx-style proxies from batching records
EVENT_STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "Access-Control-Allow-Origin": "*",
    "X-Accel-Buffering": "no",
}


async def write_frames(frames: AsyncGenerator[Frame]) -> AsyncGenerator[str]:
    """Encode frames as event stream records, one record per yield.

    Guarantees a terminal record: if the source ends without a sentinel a
    done record is appended, and if the source raises an error record is
    written instead. Nothing is written after the first terminal record.

    Args:
        frames: Frame source, normally produce_frames(). Closed on exit.

    Yields:
        Complete wire records.
    """
    try:
        async with aclosing(frames) as source:
            async for frame in source:
                yield encode_frame(frame)
                if frame.is_terminal:
                    return
    except Exception as e:
        logger.error(f"Frame source failed mid-stream: {e}")
        yield encode_frame(Frame.error())
        return

    logger.warning("Frame source ended without a terminal frame")
    yield encode_frame(Frame.done())


def event_stream_response(frames: AsyncGenerator[Frame]) -> StreamingResponse:
    """Wrap a frame source in an unbuffered text/event-stream response.

    Starlette sends each yielded record as its own body message, so every
    frame reaches the peer as soon as it is produced.
    """
    return StreamingResponse(
        write_frames(frames),
        media_type=EVENT_STREAM_MEDIA_TYPE,
        headers=EVENT_STREAM_HEADERS,
    )
