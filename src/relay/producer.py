"""Stream producer: turns upstream text deltas into frames."""

import logging
from collections.abc import AsyncGenerator
from contextlib import aclosing

from src.relay.frames import Frame

logger = logging.getLogger(__name__)


async def produce_frames(deltas: AsyncGenerator[str]) -> AsyncGenerator[Frame]:
    """Frame an upstream delta sequence.

    Every non-empty delta becomes one content frame, in arrival order.
    The sequence always ends with exactly one terminal frame: done on
    natural exhaustion, error if the upstream source raises. The upstream
    generator is closed as soon as framing stops, including when the
    consumer goes away mid-stream.

    Args:
        deltas: Upstream text deltas. Empty or non-string items are ignored.

    Yields:
        Content frames followed by a single terminal frame.
    """
    count = 0
    try:
        async with aclosing(deltas) as source:
            async for delta in source:
                if not isinstance(delta, str) or not delta:
                    continue
                count += 1
                yield Frame.delta(delta)
    except Exception as e:
        logger.error(f"Upstream stream failed after {count} deltas: {e}")
        yield Frame.error()
        return

    logger.debug(f"Upstream stream finished after {count} deltas")
    yield Frame.done()
