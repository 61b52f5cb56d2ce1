"""Small async helpers shared by the test modules."""

from collections.abc import AsyncGenerator, AsyncIterable, Iterable
from typing import Any


async def async_items(items: Iterable[Any], error: Exception | None = None) -> AsyncGenerator[Any]:
    """Yield items in order, then raise error if one is given."""
    for item in items:
        yield item
    if error is not None:
        raise error


async def collect(source: AsyncIterable[Any]) -> list[Any]:
    """Drain an async iterable into a list."""
    return [item async for item in source]


def split_at(data: bytes, cuts: Iterable[int]) -> list[bytes]:
    """Split data at the given byte offsets."""
    chunks: list[bytes] = []
    start = 0
    for cut in sorted(cuts):
        chunks.append(data[start:cut])
        start = cut
    chunks.append(data[start:])
    return chunks
