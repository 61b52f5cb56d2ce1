"""Event accumulator: applies frames to the in-flight assistant message.

Conversation holds the live message list the UI renders. A StreamSession
owns one assistant reply from placeholder creation to a terminal state and
writes into it through a MessageHandle captured at session start.
"""

import logging

from pydantic import ValidationError

from src.models.schemas import ContentPayload, Message, MessageKind, StreamState
from src.relay.frames import DATA_PREFIX, DONE_MARKER, ERROR_MARKER

logger = logging.getLogger(__name__)


class StreamBusyError(RuntimeError):
    """Raised when a conversation already has an active stream session."""

    pass


class StaleMessageError(RuntimeError):
    """Raised when a message handle no longer points at its message."""

    pass


class MessageHandle:
    """Reference to one message record in a conversation.

    The handle stays valid while the conversation still holds the same
    record at the same position. A reset or a replaced record invalidates it.
    """

    def __init__(self, conversation: "Conversation", index: int) -> None:
        self._conversation = conversation
        self._index = index
        self._message = conversation.messages[index]

    @property
    def message(self) -> Message:
        return self._message

    @property
    def valid(self) -> bool:
        messages = self._conversation.messages
        return self._index < len(messages) and messages[self._index] is self._message

    def append(self, text: str) -> None:
        """Append text to the referenced message in place.

        Raises:
            StaleMessageError: If the handle has been invalidated.
        """
        if not self.valid:
            raise StaleMessageError(f"Message #{self._index} is no longer in the conversation")
        self._message.content += text


class Conversation:
    """Ordered message sequence with at most one active stream session."""

    def __init__(self) -> None:
        self.messages: list[Message] = []
        self.active_session: StreamSession | None = None
        self.generation = 0

    @property
    def is_streaming(self) -> bool:
        return self.active_session is not None

    def add_message(self, kind: MessageKind, content: str = "") -> MessageHandle:
        self.messages.append(Message(kind=kind, content=content))
        return MessageHandle(self, len(self.messages) - 1)

    def begin_session(self) -> "StreamSession":
        """Reserve the conversation for a new stream session.

        Raises:
            StreamBusyError: If another session is still active.
        """
        if self.active_session is not None:
            raise StreamBusyError("A response is already streaming in this conversation")
        self.active_session = StreamSession(self)
        return self.active_session

    def reset(self) -> None:
        """Discard all messages and fail the active session, if any.

        Handles into the old sequence become stale and sessions begun
        before the reset report themselves as detached.
        """
        self.messages = []
        self.generation += 1
        if self.active_session is not None:
            self.active_session.fail("conversation reset")

    def _release(self, session: "StreamSession") -> None:
        if self.active_session is session:
            self.active_session = None


class StreamSession:
    """State machine for one streaming reply.

    idle -> streaming -> done | failed, and idle -> failed when the request
    fails before streaming starts. Terminal states ignore further input.
    """

    def __init__(self, conversation: Conversation) -> None:
        self._conversation = conversation
        self._generation = conversation.generation
        self._target: MessageHandle | None = None
        self.state = StreamState.IDLE
        self.failure: str | None = None

    @property
    def finished(self) -> bool:
        return self.state in (StreamState.DONE, StreamState.FAILED)

    @property
    def detached(self) -> bool:
        """True once the conversation was reset after this session began."""
        return self._conversation.generation != self._generation

    @property
    def target(self) -> MessageHandle | None:
        return self._target

    def start(self) -> MessageHandle:
        """Append the empty assistant placeholder and enter streaming."""
        if self.state is not StreamState.IDLE:
            raise RuntimeError(f"Cannot start a session in state {self.state.value}")
        self._target = self._conversation.add_message(MessageKind.ASSISTANT)
        self.state = StreamState.STREAMING
        return self._target

    def finish(self) -> None:
        if self.finished:
            return
        self.state = StreamState.DONE
        self._conversation._release(self)
        logger.debug("Stream session finished")

    def fail(self, reason: str) -> None:
        if self.finished:
            return
        self.state = StreamState.FAILED
        self.failure = reason
        self._conversation._release(self)
        logger.info(f"Stream session failed: {reason}")

    def process_frame(self, frame: str) -> bool:
        """Apply one complete frame.

        Args:
            frame: A complete line from the reader, without its delimiter.

        Returns:
            True if the target message content changed.
        """
        if self.state is not StreamState.STREAMING:
            return False
        if not frame.startswith(DATA_PREFIX):
            return False

        payload = frame[len(DATA_PREFIX):]
        if payload == DONE_MARKER:
            self.finish()
            return False
        if payload == ERROR_MARKER:
            self.fail("upstream error")
            return False

        try:
            content = ContentPayload.model_validate_json(payload).content
        except ValidationError:
            logger.debug(f"Skipping malformed frame: {payload[:80]!r}")
            return False
        if not content:
            return False

        try:
            self._target.append(content)
        except StaleMessageError as e:
            self.fail(str(e))
            return False
        return True
