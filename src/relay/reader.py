"""Stream reader: rebuilds complete frames from raw response bytes.

Network reads split the byte stream at arbitrary points, including inside a
record and inside a multi-byte UTF-8 character. Decoding is done with an
incremental decoder so a character split across two chunks is only emitted
once its last byte arrives.
"""

import codecs
import logging
from collections.abc import AsyncGenerator, AsyncIterable

from src.relay.frames import FRAME_DELIMITER

logger = logging.getLogger(__name__)


class FrameReader:
    """Reassembly buffer for one stream session.

    After every feed() the buffer holds at most one partial frame: the text
    after the last delimiter seen so far.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._buffer = ""

    @property
    def pending(self) -> str:
        """Undelimited tail waiting for more bytes."""
        return self._buffer

    def feed(self, chunk: bytes) -> list[str]:
        """Add a network chunk and return the frames it completed.

        Args:
            chunk: Raw bytes as read from the response body.

        Returns:
            Complete frames in arrival order, without their delimiter.
        """
        self._buffer += self._decoder.decode(chunk)
        *frames, self._buffer = self._buffer.split(FRAME_DELIMITER)
        return [frame.removesuffix("\r") for frame in frames]

    def close(self) -> str:
        """End the stream and return the discarded partial tail, if any."""
        tail = self._buffer + self._decoder.decode(b"", final=True)
        self._buffer = ""
        self._decoder.reset()
        return tail


async def read_frames(chunks: AsyncIterable[bytes]) -> AsyncGenerator[str]:
    """Yield complete frames from an async byte stream.

    A partial frame still buffered when the stream ends is dropped.

    Args:
        chunks: Response body chunks, e.g. httpx Response.aiter_bytes().

    Yields:
        Complete frames in arrival order.
    """
    reader = FrameReader()
    async for chunk in chunks:
        for frame in reader.feed(chunk):
            yield frame

    tail = reader.close()
    if tail:
        logger.debug(f"Discarding {len(tail)} characters of incomplete frame")
