"""NiceGUI chat interface driving the streaming consumer."""

import os
from datetime import datetime

import httpx
from nicegui import events, ui

from docchat.models.records import ChatRecord, Message
from docchat.models.schemas import ConversationTurn, Role
from docchat.ui.history_client import load_chats, register_file, save_turn
from docchat.ui.stream_consumer import CompletionResult, stream_completion

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")
USER_ID = os.getenv("CHAT_USER_ID", "local-user")
REQUEST_TIMEOUT = float(os.getenv("CHAT_CLIENT_TIMEOUT", "120"))

CUSTOM_CSS = """
<style>
    body { background: #f5f5f5; }
    .message-user { background: #667eea; color: white; border-radius: 18px 18px 4px 18px; }
    .message-assistant { background: #f3f4f6; color: #1f2937; border-radius: 18px 18px 18px 4px; }
</style>
"""


class ChatSession:
    """Client-held conversation state for one browser tab.

    The server is stateless, so the turns and the cached document text
    live here and are resent with every request.
    """

    def __init__(self, user_id: str = USER_ID) -> None:
        self.user_id = user_id
        self.chat_id: str | None = None
        self.messages: list[dict] = []
        self.is_streaming: bool = False
        self.document_text: str | None = None
        self.pending_file: tuple[str, bytes] | None = None

    def add_message(self, role: str, content: str, failed: bool = False) -> None:
        self.messages.append({
            "role": role,
            "content": content,
            "time": datetime.now().strftime("%I:%M %p"),
            "failed": failed,
        })

    def history(self) -> list[ConversationTurn]:
        """Turns to send as history; fallback text of failed answers is left out."""
        return [
            ConversationTurn(
                role=Role.USER if msg["role"] == "user" else Role.MODEL,
                text=msg["content"],
            )
            for msg in self.messages
            if not msg.get("failed")
        ]

    def apply_result(self, result: CompletionResult) -> None:
        """Record the finished assistant turn and update the document state.

        A rejected request drops the pending file so it is not resent with
        the next prompt; the cached document text is kept.
        """
        self.add_message("assistant", result.message, failed=not result.succeeded)
        if result.succeeded:
            self.pending_file = None
            if result.document_text:
                self.document_text = result.document_text
        elif result.rejected:
            self.pending_file = None

    async def persist_turn(self, client: httpx.AsyncClient) -> None:
        """Save the last user/assistant pair if the answer succeeded."""
        if len(self.messages) < 2 or self.messages[-1].get("failed"):
            return
        turn = [
            Message(role=msg["role"], content=msg["content"])
            for msg in self.messages[-2:]
        ]
        self.chat_id = await save_turn(client, self.user_id, self.chat_id, turn)

    def load_chat(self, record: ChatRecord) -> None:
        """Switch to a stored chat; document context does not carry over."""
        self.chat_id = record.id
        self.messages = [
            {
                "role": m.role,
                "content": m.content,
                "time": m.timestamp.strftime("%I:%M %p"),
                "failed": False,
            }
            for m in record.messages
        ]
        self.document_text = None
        self.pending_file = None

    def reset(self) -> None:
        self.chat_id = None
        self.messages.clear()
        self.document_text = None
        self.pending_file = None


def _api_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(base_url=API_BASE_URL, timeout=REQUEST_TIMEOUT)


@ui.page("/")
async def chat_page() -> None:
    """Main chat page."""
    ui.add_head_html(CUSTOM_CSS)
    session = ChatSession()

    messages_container: ui.column
    chats_container: ui.column
    input_field: ui.textarea
    send_btn: ui.button
    file_label: ui.label

    def render_message(msg: dict) -> None:
        is_user = msg["role"] == "user"
        align = "justify-end" if is_user else "justify-start"
        bubble = "message-user" if is_user else "message-assistant"
        with ui.row().classes(f"w-full {align}"):
            with ui.column().classes("max-w-[75%] gap-1"):
                with ui.element("div").classes(f"px-4 py-3 {bubble}"):
                    ui.markdown(msg["content"]).classes("text-sm")
                ui.label(msg["time"]).classes("text-[10px] text-gray-400")

    def refresh_messages() -> None:
        messages_container.clear()
        with messages_container:
            if not session.messages:
                ui.label("Start a conversation").classes("text-lg text-gray-400")
            for msg in session.messages:
                render_message(msg)

    def refresh_file_label() -> None:
        if session.pending_file:
            file_label.set_text(f"Attached: {session.pending_file[0]}")
        elif session.document_text:
            file_label.set_text("Document context loaded")
        else:
            file_label.set_text("")

    async def refresh_chats() -> None:
        async with _api_client() as client:
            chats = await load_chats(client, session.user_id)
        chats_container.clear()
        with chats_container:
            if not chats:
                ui.label("No saved chats").classes("text-xs text-gray-400")
            for record in chats:
                ui.button(
                    record.title,
                    on_click=lambda r=record: open_chat(r),
                ).props("flat no-caps align=left").classes("w-full text-sm")

    def open_chat(record: ChatRecord) -> None:
        if session.is_streaming:
            return
        session.load_chat(record)
        refresh_messages()
        refresh_file_label()

    async def handle_upload(e: events.UploadEventArguments) -> None:
        content = await e.file.read()
        session.pending_file = (e.file.name, content)
        refresh_file_label()
        async with _api_client() as client:
            await register_file(client, session.user_id, e.file.name, content)

    async def send_message() -> None:
        text = (input_field.value or "").strip()
        if not text or session.is_streaming:
            return

        history = session.history()
        input_field.value = ""
        session.is_streaming = True
        send_btn.disable()

        session.add_message("user", text)
        refresh_messages()

        with messages_container:
            with ui.row().classes("w-full justify-start"):
                with ui.element("div").classes("message-assistant px-4 py-3 max-w-[75%]"):
                    live = ui.markdown("_Thinking..._").classes("text-sm")

        def on_update(accumulated: str) -> None:
            live.set_content(accumulated)

        new_chat_started = session.chat_id is None
        try:
            async with _api_client() as client:
                result = await stream_completion(
                    client,
                    text,
                    history=history,
                    document_text=session.document_text,
                    file=session.pending_file,
                    on_update=on_update,
                )
                session.apply_result(result)
                await session.persist_turn(client)
        finally:
            session.is_streaming = False
            send_btn.enable()

        if result.rejected:
            ui.notify(result.detail or "The request was rejected.", type="negative")
        elif not result.succeeded:
            ui.notify("The assistant could not answer. Please try again.", type="negative")
        refresh_messages()
        refresh_file_label()
        if new_chat_started and session.chat_id is not None:
            await refresh_chats()

    def new_chat() -> None:
        session.reset()
        refresh_messages()
        refresh_file_label()

    # === UI Layout ===
    with ui.left_drawer().classes("bg-white p-2"):
        ui.label("Chats").classes("text-sm font-semibold")
        chats_container = ui.column().classes("w-full gap-1")

    with ui.column().classes("w-full max-w-3xl mx-auto p-4 gap-4"):
        with ui.row().classes("w-full items-center justify-between"):
            ui.label("docchat").classes("text-lg font-semibold")
            ui.button(icon="add", on_click=new_chat).props("flat round")

        with ui.scroll_area().classes("w-full h-[60vh] bg-gray-50"):
            messages_container = ui.column().classes("w-full gap-4 p-4")
            refresh_messages()

        ui.upload(
            label="Attach PDF",
            on_upload=handle_upload,
            auto_upload=True,
            max_files=1,
        ).props("accept=.pdf flat").classes("w-full")
        file_label = ui.label("").classes("text-xs text-gray-500")

        with ui.row().classes("w-full gap-3 items-end"):
            input_field = (
                ui.textarea(placeholder="Type a message...")
                .props("autogrow dense rows=1")
                .classes("flex-grow")
                .on("keydown.enter.prevent", send_message)
            )
            send_btn = ui.button(icon="send", on_click=send_message).props("round unelevated")

    await refresh_chats()


def main() -> None:
    ui.run(title="docchat", port=8080, reload=False)


if __name__ == "__main__":
    main()
