"""Unit tests for the event accumulator, conversation and message handles."""

import pytest
import pytest_check as check

from src.models.schemas import MessageKind, StreamState
from src.relay.accumulator import (
    Conversation,
    StaleMessageError,
    StreamBusyError,
    StreamSession,
)


def content(text: str) -> str:
    return f'data: {{"content":"{text}"}}'


@pytest.fixture
def conversation() -> Conversation:
    conv = Conversation()
    conv.add_message(MessageKind.USER, "hi")
    return conv


@pytest.fixture
def session(conversation: Conversation) -> StreamSession:
    session = conversation.begin_session()
    session.start()
    return session


class TestSessionLifecycle:
    """Tests for the idle -> streaming -> done/failed state machine."""

    def test_new_session_is_idle(self, conversation: Conversation) -> None:
        session = conversation.begin_session()

        check.equal(session.state, StreamState.IDLE)
        check.is_none(session.target)
        check.is_true(conversation.is_streaming)

    def test_start_appends_empty_assistant_placeholder(
        self, conversation: Conversation
    ) -> None:
        session = conversation.begin_session()
        handle = session.start()

        check.equal(session.state, StreamState.STREAMING)
        check.equal(len(conversation.messages), 2)
        check.equal(conversation.messages[-1].kind, MessageKind.ASSISTANT)
        check.equal(conversation.messages[-1].content, "")
        check.is_(handle.message, conversation.messages[-1])

    def test_cannot_start_twice(self, session: StreamSession) -> None:
        with pytest.raises(RuntimeError, match="Cannot start"):
            session.start()

    def test_second_session_rejected_while_active(
        self, conversation: Conversation, session: StreamSession
    ) -> None:
        with pytest.raises(StreamBusyError):
            conversation.begin_session()

    def test_new_session_allowed_after_terminal_state(
        self, conversation: Conversation, session: StreamSession
    ) -> None:
        session.process_frame("data: [DONE]")

        assert not conversation.is_streaming
        assert conversation.begin_session() is conversation.active_session

    def test_idle_session_can_fail(self, conversation: Conversation) -> None:
        """Transport failure before streaming starts goes straight to failed."""
        session = conversation.begin_session()
        session.fail("HTTP 500")

        check.equal(session.state, StreamState.FAILED)
        check.equal(session.failure, "HTTP 500")
        check.is_false(conversation.is_streaming)
        check.equal(len(conversation.messages), 1)


class TestProcessFrame:
    """Tests for frame interpretation."""

    def test_content_appends_in_order(
        self, conversation: Conversation, session: StreamSession
    ) -> None:
        for part in ["Hel", "lo, ", "world!"]:
            assert session.process_frame(content(part)) is True
        session.process_frame("data: [DONE]")

        check.equal(conversation.messages[-1].content, "Hello, world!")
        check.equal(session.state, StreamState.DONE)

    def test_frames_without_prefix_ignored(
        self, conversation: Conversation, session: StreamSession
    ) -> None:
        for frame in ["", ": keepalive", "event: message", "data:[DONE]", "id: 4"]:
            assert session.process_frame(frame) is False

        check.equal(session.state, StreamState.STREAMING)
        check.equal(conversation.messages[-1].content, "")

    def test_malformed_frame_skipped_between_valid_frames(
        self, conversation: Conversation, session: StreamSession
    ) -> None:
        session.process_frame(content("first "))
        assert session.process_frame("data: {not json}") is False
        session.process_frame(content("second"))

        check.equal(conversation.messages[-1].content, "first second")
        check.equal(session.state, StreamState.STREAMING)

    def test_json_error_payload_is_not_a_sentinel(
        self, conversation: Conversation, session: StreamSession
    ) -> None:
        """Only the literal [ERROR] token ends the stream."""
        assert session.process_frame('data: {"error":"Stream failed"}') is False

        check.equal(session.state, StreamState.STREAMING)

    def test_empty_or_non_string_content_ignored(
        self, conversation: Conversation, session: StreamSession
    ) -> None:
        check.is_false(session.process_frame('data: {"content":""}'))
        check.is_false(session.process_frame('data: {"content":5}'))
        check.is_false(session.process_frame("data: [1, 2]"))
        check.equal(conversation.messages[-1].content, "")

    def test_duplicate_done_has_no_effect(
        self, conversation: Conversation, session: StreamSession
    ) -> None:
        session.process_frame(content("ok"))
        session.process_frame("data: [DONE]")
        session.process_frame("data: [DONE]")
        session.process_frame(content("late"))

        check.equal(session.state, StreamState.DONE)
        check.equal(conversation.messages[-1].content, "ok")

    def test_error_sentinel_keeps_partial_content(
        self, conversation: Conversation, session: StreamSession
    ) -> None:
        session.process_frame(content("Par"))
        session.process_frame(content("tial"))
        session.process_frame("data: [ERROR]")

        check.equal(session.state, StreamState.FAILED)
        check.equal(conversation.messages[-1].content, "Partial")
        check.is_false(session.process_frame(content("more")))
        check.is_false(session.process_frame("data: [DONE]"))
        check.equal(session.state, StreamState.FAILED)
        check.equal(conversation.messages[-1].content, "Partial")

    def test_frames_ignored_before_start(self, conversation: Conversation) -> None:
        session = conversation.begin_session()

        assert session.process_frame(content("early")) is False
        assert session.state is StreamState.IDLE


class TestMessageHandle:
    """Tests for the fixed append target."""

    def test_append_after_later_messages_added(
        self, conversation: Conversation, session: StreamSession
    ) -> None:
        """Appending to the sequence does not move the target."""
        target = session.target.message
        conversation.add_message(MessageKind.ERROR, "unrelated")

        session.process_frame(content("still here"))

        check.equal(target.content, "still here")
        check.equal(conversation.messages[-1].content, "unrelated")

    def test_reset_invalidates_handle_and_fails_session(
        self, conversation: Conversation, session: StreamSession
    ) -> None:
        conversation.reset()

        assert session.process_frame(content("lost")) is False
        check.equal(session.state, StreamState.FAILED)
        check.equal(conversation.messages, [])

    def test_stale_handle_raises(self, conversation: Conversation) -> None:
        handle = conversation.add_message(MessageKind.ASSISTANT)
        conversation.reset()

        with pytest.raises(StaleMessageError):
            handle.append("x")

    def test_replaced_record_fails_session(
        self, conversation: Conversation, session: StreamSession
    ) -> None:
        """A swapped-out record is stale even though the index still exists."""
        conversation.messages[-1] = conversation.messages[-1].model_copy()

        assert session.process_frame(content("lost")) is False
        check.equal(session.state, StreamState.FAILED)
        check.is_false(conversation.is_streaming)


class TestConversationReset:
    """Tests for clearing a conversation while a session may be active."""

    def test_reset_mid_stream_releases_conversation(
        self, conversation: Conversation, session: StreamSession
    ) -> None:
        conversation.reset()

        check.equal(session.state, StreamState.FAILED)
        check.equal(session.failure, "conversation reset")
        check.is_true(session.detached)
        check.is_false(conversation.is_streaming)

    def test_new_session_allowed_right_after_reset(
        self, conversation: Conversation, session: StreamSession
    ) -> None:
        conversation.reset()

        fresh = conversation.begin_session()

        check.is_true(conversation.active_session is fresh)
        check.is_false(fresh.detached)
        check.is_true(session.detached)

    def test_reset_without_session(self, conversation: Conversation) -> None:
        conversation.reset()

        check.equal(conversation.messages, [])
        check.equal(conversation.generation, 1)
        check.is_none(conversation.active_session)

    def test_finished_session_keeps_its_outcome(
        self, conversation: Conversation, session: StreamSession
    ) -> None:
        """Only the active session is failed; completed ones stay done."""
        session.process_frame("data: [DONE]")
        conversation.reset()

        check.equal(session.state, StreamState.DONE)
        check.is_none(session.failure)
        check.is_true(session.detached)
