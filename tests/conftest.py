"""Pytest fixtures and shared test configuration.

Fixtures:
    - fake_service: Scriptable stand-in for the upstream completion service
    - async_client: HTTPX client bound to the app with fake_service installed
"""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from src.api import app
from src.api.chat import completion_service
from src.completion import CompletionError


class FakeCompletionService:
    """Upstream stand-in that replays scripted deltas.

    Attributes:
        deltas: Deltas streamed in order.
        error: Raised after the deltas if set.
        reply: Returned by complete().
    """

    def __init__(self) -> None:
        self.deltas: list[str] = ["Hel", "lo, ", "world!"]
        self.error: Exception | None = None
        self.reply = "Hello, world!"
        self.prompts: list[str] = []

    async def stream_deltas(self, message: str) -> AsyncGenerator[str]:
        self.prompts.append(message)
        for delta in self.deltas:
            yield delta
        if self.error is not None:
            raise self.error

    async def complete(self, message: str) -> str:
        self.prompts.append(message)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def fake_service() -> FakeCompletionService:
    """Return a fresh fake upstream."""
    return FakeCompletionService()


@pytest.fixture
def upstream_failure() -> CompletionError:
    """A typical upstream failure."""
    return CompletionError("Upstream stream failed: connection reset")


@pytest.fixture
async def async_client(
    fake_service: FakeCompletionService,
) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        AsyncClient wired to the app, with the fake upstream installed.
    """
    app.dependency_overrides[completion_service] = lambda: fake_service
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()
