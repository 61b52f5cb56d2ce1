"""NiceGUI chat interface with SSE streaming support."""

import httpx
from nicegui import ui

from src.models.schemas import Message, MessageKind
from src.relay.accumulator import Conversation
from src.relay.client import API_BASE_URL, REQUEST_TIMEOUT, send_chat, stream_chat

CUSTOM_CSS = """
<style>
    body { background: #f5f5f5; }
    .app-container {
        background: white;
        border-radius: 12px;
        box-shadow: 0 2px 8px rgba(0, 0, 0, 0.1);
        overflow: hidden;
    }
    .message-user { background: #4f46e5; color: white; border-radius: 18px 18px 4px 18px; }
    .message-assistant { background: #f3f4f6; color: #1f2937; border-radius: 18px 18px 18px 4px; }
    .message-error { background: #fef2f2; color: #b91c1c; border-radius: 18px; }
    .typing-dot {
        width: 8px; height: 8px;
        background: #4f46e5;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.2s; }
    .typing-dot:nth-child(3) { animation-delay: 0.4s; }
    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }
</style>
"""

AVATARS = {
    MessageKind.USER: "person",
    MessageKind.ASSISTANT: "smart_toy",
    MessageKind.ERROR: "warning",
}


@ui.page("/")
def chat_page() -> None:
    """Main chat page. Each page load gets its own conversation."""
    ui.add_head_html(CUSTOM_CSS)
    conversation = Conversation()
    settings = {"stream": True}

    messages_container: ui.column
    input_field: ui.textarea
    send_btn: ui.button
    labels: list[ui.label] = []

    def render_message(msg: Message) -> ui.label:
        is_user = msg.kind is MessageKind.USER
        align = "justify-end" if is_user else "justify-start"
        with ui.row().classes(f"w-full {align} gap-3 items-end"):
            ui.icon(AVATARS[msg.kind]).classes("text-2xl text-gray-500")
            with ui.element("div").classes(f"max-w-[70%] px-4 py-3 message-{msg.kind.value}"):
                label = ui.label(msg.content).classes("text-sm whitespace-pre-wrap")
        return label

    def render_typing_indicator() -> None:
        with ui.row().classes("w-full justify-start gap-3 items-end"):
            ui.icon(AVATARS[MessageKind.ASSISTANT]).classes("text-2xl text-gray-500")
            with ui.element("div").classes("message-assistant px-4 py-3"), ui.row().classes("gap-1"):
                for _ in range(3):
                    ui.element("div").classes("typing-dot")

    def refresh_messages() -> None:
        messages_container.clear()
        labels.clear()
        with messages_container:
            if not conversation.messages:
                with ui.column().classes("w-full h-64 items-center justify-center gap-3"):
                    ui.label("Chat AI Demo").classes("text-2xl text-gray-500")
                    ui.label("Send a message to start chatting.").classes("text-gray-400")
            for msg in conversation.messages:
                labels.append(render_message(msg))
            if conversation.is_streaming and not _has_placeholder():
                render_typing_indicator()

    def _has_placeholder() -> bool:
        session = conversation.active_session
        return session is not None and session.target is not None

    def on_update() -> None:
        # Content growth only touches the in-flight label
        if len(labels) == len(conversation.messages) and labels:
            labels[-1].set_text(conversation.messages[-1].content)
        else:
            refresh_messages()

    async def send_message() -> None:
        text = (input_field.value or "").strip()
        if not text or conversation.is_streaming:
            return

        input_field.value = ""
        send_btn.disable()
        try:
            async with httpx.AsyncClient(base_url=API_BASE_URL, timeout=REQUEST_TIMEOUT) as client:
                if settings["stream"]:
                    await stream_chat(conversation, text, client=client, on_update=on_update)
                else:
                    await send_chat(conversation, text, client=client, on_update=on_update)
        finally:
            send_btn.enable()
            refresh_messages()

    def new_chat() -> None:
        if conversation.is_streaming:
            ui.notify("Wait for the current reply to finish", type="warning")
            return
        conversation.reset()
        refresh_messages()

    # === UI Layout ===
    with (
        ui.element("div").classes("w-full min-h-screen p-4 md:p-8"),
        ui.column().classes("w-full max-w-3xl mx-auto app-container").style(
            "height: calc(100vh - 4rem)"
        ),
    ):
        with ui.row().classes("w-full bg-indigo-600 px-5 py-4 items-center justify-between"):
            ui.label("Chat AI Demo").classes("text-lg font-semibold text-white")
            ui.button(icon="add", on_click=new_chat).props("flat round color=white")

        with (
            ui.scroll_area().classes("flex-grow w-full bg-gray-50"),
            ui.column().classes("w-full p-5"),
        ):
            messages_container = ui.column().classes("w-full gap-4")
            refresh_messages()

        with ui.column().classes("w-full p-4 gap-2 bg-white border-t"):
            ui.checkbox("Streaming Response").bind_value(settings, "stream")
            with ui.row().classes("w-full gap-3 items-end"):
                input_field = (
                    ui.textarea(placeholder="Send a message...")
                    .props("autogrow outlined dense rows=1")
                    .classes("flex-grow")
                    .on("keydown.enter.prevent", send_message)
                )
                send_btn = ui.button(icon="send", on_click=send_message).props("round unelevated")


def main() -> None:
    ui.run(title="Chat AI Demo", port=8080, reload=False)


if __name__ in {"__main__", "__mp_main__"}:
    main()
