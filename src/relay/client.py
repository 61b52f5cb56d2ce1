"""HTTP client side of the relay.

Sends a prompt to the API and feeds the response into a Conversation.
Transport problems never raise out of these functions; they end the turn
with an error-kind message instead.
"""

import logging
import os
from collections.abc import AsyncGenerator, Callable
from contextlib import aclosing, asynccontextmanager

import httpx

from src.models.schemas import ChatReply, MessageKind, StreamState
from src.relay.accumulator import Conversation, StreamSession
from src.relay.frames import EVENT_STREAM_MEDIA_TYPE
from src.relay.reader import read_frames

logger = logging.getLogger(__name__)

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")
REQUEST_TIMEOUT = 120.0

STREAM_PATH = "/chat/stream"
CHAT_PATH = "/chat"

STREAM_ERROR_TEXT = "Sorry, the streaming request failed. Please try again later."
CHAT_ERROR_TEXT = "Sorry, the request failed. Please try again later."


@asynccontextmanager
async def _client_scope(
    client: httpx.AsyncClient | None,
) -> AsyncGenerator[httpx.AsyncClient]:
    """Use the caller's client, or open a short-lived one against API_BASE_URL."""
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(base_url=API_BASE_URL, timeout=REQUEST_TIMEOUT) as owned:
        yield owned


def _surface_failure(conversation: Conversation, session: StreamSession, text: str) -> None:
    """Append the error bubble for a failed turn, unless the conversation was reset."""
    logger.warning(f"Chat turn failed: {session.failure}")
    if not session.detached:
        conversation.add_message(MessageKind.ERROR, text)


async def stream_chat(
    conversation: Conversation,
    prompt: str,
    client: httpx.AsyncClient | None = None,
    on_update: Callable[[], None] | None = None,
) -> StreamSession:
    """Stream an assistant reply for prompt into the conversation.

    Appends the user message, then an assistant placeholder once the server
    accepts the request, and grows the placeholder frame by frame. On any
    failure the partial reply is kept and an error message is appended.
    The conversation is released on every exit path, including cancellation
    and exceptions raised by on_update, which are re-raised afterwards.

    Args:
        conversation: Target conversation. Must not have an active session.
        prompt: The user's message.
        client: Optional client whose base_url points at the API.
        on_update: Called after every change visible to the render layer.

    Returns:
        The finished session (state done or failed).

    Raises:
        StreamBusyError: If the conversation is already streaming.
    """
    session = conversation.begin_session()

    def notify() -> None:
        if on_update is not None:
            on_update()

    try:
        conversation.add_message(MessageKind.USER, prompt)
        notify()

        async with (
            _client_scope(client) as http,
            http.stream(
                "POST",
                STREAM_PATH,
                json={"message": prompt},
                headers={"Accept": EVENT_STREAM_MEDIA_TYPE},
            ) as response,
        ):
            response.raise_for_status()
            if session.finished:
                return session
            session.start()
            notify()

            async with aclosing(read_frames(response.aiter_bytes())) as frames:
                async for frame in frames:
                    if session.process_frame(frame):
                        notify()
                    if session.finished:
                        break

        if not session.finished:
            session.fail("stream ended without a terminal frame")
    except httpx.HTTPStatusError as e:
        session.fail(f"HTTP {e.response.status_code}")
    except (httpx.RequestError, httpx.StreamError) as e:
        session.fail(f"Connection failed: {e}")
    finally:
        if not session.finished:
            # Cancelled, or the render callback raised
            session.fail("stream interrupted")
            _surface_failure(conversation, session, STREAM_ERROR_TEXT)

    if session.state is StreamState.FAILED:
        _surface_failure(conversation, session, STREAM_ERROR_TEXT)
    notify()
    return session


async def send_chat(
    conversation: Conversation,
    prompt: str,
    client: httpx.AsyncClient | None = None,
    on_update: Callable[[], None] | None = None,
) -> bool:
    """Request a complete reply through the non-streaming endpoint.

    Returns:
        True if an assistant reply was appended, False if an error message was.

    Raises:
        StreamBusyError: If the conversation is already streaming.
    """
    # Reserve the conversation for the duration of the request
    session = conversation.begin_session()
    ok = False
    try:
        conversation.add_message(MessageKind.USER, prompt)
        if on_update is not None:
            on_update()

        async with _client_scope(client) as http:
            response = await http.post(CHAT_PATH, json={"message": prompt})
            response.raise_for_status()
            reply = ChatReply.model_validate(response.json()).reply
    except (httpx.HTTPError, ValueError) as e:
        session.fail(str(e))
        _surface_failure(conversation, session, CHAT_ERROR_TEXT)
    else:
        if not session.detached:
            conversation.add_message(MessageKind.ASSISTANT, reply)
            ok = True
        session.finish()
    finally:
        if not session.finished:
            session.fail("request interrupted")
            _surface_failure(conversation, session, CHAT_ERROR_TEXT)

    if on_update is not None:
        on_update()
    return ok
