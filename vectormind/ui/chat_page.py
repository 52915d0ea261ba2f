"""NiceGUI chat page driven by the streaming exchange controller."""

from nicegui import ui

from vectormind.config import get_client_config
from vectormind.errors import ExchangeError
from vectormind.models.schemas import Message, MessageStatus, Role
from vectormind.streaming.controller import ExchangeController
from vectormind.ui.common import CUSTOM_CSS, load_session, markdown_to_html

FALLBACK_ANSWER = "Sorry, there was an error processing your message."


@ui.page("/")
async def chat_page() -> None:
    """Main chat page."""
    ui.add_head_html(CUSTOM_CSS)
    ui.dark_mode().enable()
    config = get_client_config()
    session = await load_session(config)

    messages_container: ui.column
    input_field: ui.textarea
    stop_btn: ui.button
    live_answer: ui.html | None = None
    typing_shown = False
    failures: dict[str, str] = {}
    interrupted: set[str] = set()

    def render_sources(msg: Message) -> None:
        with ui.column().classes("gap-0 mt-2"):
            for source in msg.sources:
                ui.label(
                    f"{source.filename}, p. {source.page_number} "
                    f"({source.relevance_score:.0%})"
                ).classes("text-[11px] text-gray-400")

    def render_message(msg: Message) -> None:
        nonlocal live_answer, typing_shown
        is_user = msg.role == Role.USER
        align = "justify-end" if is_user else "justify-start"
        bubble = "message-user" if is_user else "message-assistant"

        with ui.row().classes(f"w-full {align}"):
            with ui.column().classes("max-w-[75%] gap-1"):
                with ui.element("div").classes(f"px-4 py-3 {bubble}"):
                    if is_user:
                        ui.label(msg.content).classes("text-sm whitespace-pre-wrap")
                    elif msg.id in failures:
                        if msg.content:
                            ui.html(markdown_to_html(msg.content), sanitize=False).classes("text-sm")
                        ui.label(FALLBACK_ANSWER).classes("text-sm text-red-400")
                    elif msg.status == MessageStatus.STREAMING and msg.id not in interrupted:
                        if not msg.content:
                            typing_shown = True
                            with ui.row().classes("gap-1 py-1"):
                                for _ in range(3):
                                    ui.element("div").classes("typing-dot")
                        live_answer = ui.html(
                            markdown_to_html(msg.content), sanitize=False
                        ).classes("text-sm leading-relaxed")
                    else:
                        ui.html(markdown_to_html(msg.content), sanitize=False).classes(
                            "text-sm leading-relaxed"
                        )
                    if msg.sources:
                        render_sources(msg)
                caption = msg.created_at.strftime("%I:%M %p")
                if msg.id in interrupted:
                    caption = f"{caption} · interrupted"
                ui.label(caption).classes(
                    f"text-[10px] text-gray-500 {'self-end' if is_user else 'self-start'}"
                )

    def refresh_messages() -> None:
        nonlocal live_answer, typing_shown
        live_answer = None
        typing_shown = False
        messages_container.clear()
        with messages_container:
            if not controller.transcript:
                with ui.column().classes("w-full h-64 items-center justify-center gap-2"):
                    ui.label("Welcome to VectorMind").classes("text-2xl font-bold text-gray-400")
                    ui.label("Ask me anything about your internal knowledge base").classes(
                        "text-sm text-gray-500"
                    )
            else:
                for msg in controller.transcript:
                    render_message(msg)
        stop_btn.set_visibility(controller.is_active)

    def on_start(message: Message) -> None:
        refresh_messages()

    def on_content(message: Message) -> None:
        # The first delta replaces the typing indicator, later ones patch in place.
        if live_answer is None or typing_shown:
            refresh_messages()
        else:
            live_answer.set_content(markdown_to_html(message.content))

    def on_complete(message: Message) -> None:
        refresh_messages()

    def on_error(message: Message, error: ExchangeError) -> None:
        failures[message.id] = error.message
        refresh_messages()
        ui.notify(error.message, type="negative")

    def on_cancel(message: Message) -> None:
        interrupted.add(message.id)
        refresh_messages()

    controller = ExchangeController(
        config,
        token_provider=session.get_token,
        on_start=on_start,
        on_content=on_content,
        on_complete=on_complete,
        on_error=on_error,
        on_cancel=on_cancel,
    )

    async def send_message() -> None:
        text = (input_field.value or "").strip()
        if not text:
            return
        input_field.value = ""
        await controller.send(text)

    def new_chat() -> None:
        controller.reset()
        failures.clear()
        interrupted.clear()
        refresh_messages()

    # === UI Layout ===
    with ui.column().classes("w-full max-w-3xl mx-auto app-container p-0").style(
        "height: calc(100vh - 2rem)"
    ):
        with ui.row().classes("w-full header px-5 py-4 items-center justify-between"):
            ui.label("VectorMind").classes("text-xl font-bold")
            with ui.row().classes("items-center gap-2"):
                if session.is_admin():
                    ui.link("Settings", "/settings").classes("text-sm text-gray-300")
                ui.button(icon="add", on_click=new_chat).props("flat round")

        with ui.scroll_area().classes("flex-grow w-full"):
            messages_container = ui.column().classes("w-full gap-4 p-5")

        with ui.row().classes("w-full p-4 gap-3 items-end border-t border-gray-700"):
            input_field = (
                ui.textarea(placeholder="Ask me anything about your internal knowledge...")
                .props("autogrow dense outlined rows=1")
                .classes("flex-grow")
                .on("keydown.enter.prevent", send_message)
            )
            stop_btn = ui.button(icon="stop", on_click=controller.cancel).props("round flat")
            ui.button(icon="send", on_click=send_message).props("round unelevated")

    refresh_messages()
