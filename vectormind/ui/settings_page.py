"""NiceGUI settings page: knowledge base documents and user permissions.

Only administrators may open it; everyone else is sent back to the chat.
"""

import logging

from nicegui import events, ui

from vectormind.api.client import BackendClient
from vectormind.config import get_client_config
from vectormind.errors import PDFValidationError, TransportError
from vectormind.models.schemas import DocumentInfo, User
from vectormind.ui.common import CUSTOM_CSS, load_session

logger = logging.getLogger(__name__)


@ui.page("/settings")
async def settings_page() -> None:
    """Admin settings page."""
    ui.add_head_html(CUSTOM_CSS)
    ui.dark_mode().enable()
    config = get_client_config()
    session = await load_session(config)

    if not session.is_admin():
        logger.info("Non-admin visit to /settings, redirecting to chat")
        ui.navigate.to("/")
        return

    backend = BackendClient(config, session)
    documents_container: ui.column
    users_container: ui.column
    knowledge_input: ui.textarea

    def render_document(doc: DocumentInfo) -> None:
        with ui.row().classes("w-full items-center justify-between"):
            with ui.column().classes("gap-0"):
                ui.label(doc.filename).classes("text-sm")
                ui.label(
                    f"{doc.pages} pages · {doc.chunks} chunks · {doc.uploaded_by or 'unknown'}"
                ).classes("text-[11px] text-gray-500")
            ui.button(
                icon="delete",
                on_click=lambda d=doc: delete_document(d.document_id),
            ).props("flat round color=negative")

    def render_user(user: User) -> None:
        with ui.row().classes("w-full items-center justify-between"):
            with ui.column().classes("gap-0"):
                ui.label(user.display_name or user.email).classes("text-sm")
                ui.label(f"{user.email} · {user.role.upper()}").classes(
                    "text-[11px] text-gray-500"
                )
            if user.role != "admin":
                label = "Revoke upload" if user.can_upload else "Grant upload"
                ui.button(label, on_click=lambda u=user: toggle_permission(u)).props("flat dense")

    async def refresh_documents() -> None:
        try:
            documents = await backend.list_documents()
        except TransportError as e:
            ui.notify(f"Could not load documents: {e.message}", type="negative")
            return
        documents_container.clear()
        with documents_container:
            if not documents:
                ui.label("No documents uploaded yet").classes("text-sm text-gray-500")
            for doc in documents:
                render_document(doc)

    async def refresh_users() -> None:
        try:
            users = await backend.list_users()
        except TransportError as e:
            ui.notify(f"Could not load users: {e.message}", type="negative")
            return
        users_container.clear()
        with users_container:
            for user in users:
                render_user(user)

    async def handle_upload(e: events.UploadEventArguments) -> None:
        content = await e.file.read()
        try:
            doc = await backend.upload_document(e.file.name, content)
        except (PDFValidationError, PermissionError) as err:
            ui.notify(str(err), type="warning")
            return
        except TransportError as err:
            ui.notify(f"Upload failed: {err.message}", type="negative")
            return
        ui.notify(f"Uploaded {doc.filename} ({doc.pages} pages)", type="positive")
        await refresh_documents()

    async def delete_document(document_id: str) -> None:
        try:
            await backend.delete_document(document_id)
        except TransportError as e:
            ui.notify(f"Delete failed: {e.message}", type="negative")
            return
        await refresh_documents()

    async def toggle_permission(user: User) -> None:
        try:
            if user.can_upload:
                await backend.revoke_permission(user.uid)
            else:
                await backend.grant_permission(user.uid)
        except TransportError as e:
            ui.notify(f"Permission change failed: {e.message}", type="negative")
            return
        await refresh_users()

    async def add_knowledge() -> None:
        text = (knowledge_input.value or "").strip()
        if not text:
            return
        try:
            await backend.add_knowledge(text)
        except TransportError as e:
            ui.notify(f"Could not add knowledge: {e.message}", type="negative")
            return
        knowledge_input.value = ""
        ui.notify("Knowledge entry added", type="positive")

    # === UI Layout ===
    with ui.column().classes("w-full max-w-3xl mx-auto app-container p-5 gap-6"):
        with ui.row().classes("w-full items-center justify-between"):
            ui.label("Settings").classes("text-xl font-bold")
            ui.link("Back to chat", "/").classes("text-sm text-gray-300")

        ui.label("Knowledge base").classes("text-lg font-semibold")
        ui.upload(on_upload=handle_upload, auto_upload=True).props("accept=.pdf").classes("w-full")
        documents_container = ui.column().classes("w-full gap-2")
        with ui.row().classes("w-full items-end gap-3"):
            knowledge_input = (
                ui.textarea(placeholder="Add a text entry to the knowledge base...")
                .props("autogrow dense outlined rows=1")
                .classes("flex-grow")
            )
            ui.button("Add", on_click=add_knowledge).props("unelevated")

        with ui.row().classes("w-full items-center justify-between"):
            ui.label("Users").classes("text-lg font-semibold")
            ui.link("Register user", "/register").classes("text-sm text-gray-300")
        users_container = ui.column().classes("w-full gap-2")

    await refresh_documents()
    await refresh_users()
