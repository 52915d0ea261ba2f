"""NiceGUI page for creating accounts. Administrators only."""

import logging

from nicegui import ui

from vectormind.api.client import BackendClient
from vectormind.config import get_client_config
from vectormind.errors import ApiError, TransportError
from vectormind.ui.common import CUSTOM_CSS, MIN_PASSWORD_LENGTH, load_session, validate_registration

logger = logging.getLogger(__name__)


@ui.page("/register")
async def register_page() -> None:
    """Register a new user."""
    ui.add_head_html(CUSTOM_CSS)
    ui.dark_mode().enable()
    config = get_client_config()
    session = await load_session(config)

    if not session.is_admin():
        logger.info("Non-admin visit to /register, redirecting to chat")
        ui.navigate.to("/")
        return

    backend = BackendClient(config, session)

    def show_error(text: str) -> None:
        error_label.set_text(text)
        error_label.set_visibility(True)

    async def register() -> None:
        error_label.set_visibility(False)
        problem = validate_registration(email.value or "", password.value or "", confirm.value or "")
        if problem:
            show_error(problem)
            return

        submit_btn.disable()
        try:
            user = await backend.register_user(
                email.value.strip(),
                password.value,
                display_name=(display_name.value or "").strip() or None,
            )
        except ApiError as e:
            show_error(e.detail or "Registration failed")
            return
        except TransportError as e:
            show_error(e.message)
            return
        finally:
            submit_btn.enable()

        ui.notify(f"Registered {user.email}", type="positive")
        ui.navigate.to("/settings")

    # === UI Layout ===
    with ui.column().classes("w-full max-w-md mx-auto app-container p-8 gap-4 mt-16"):
        ui.label("Register New User").classes("text-xl font-bold self-center")
        error_label = ui.label().classes("text-sm text-red-400")
        error_label.set_visibility(False)

        email = ui.input("Email", placeholder="newuser@example.com").classes("w-full")
        display_name = ui.input("Display Name (Optional)").classes("w-full")
        password = ui.input(
            "Password",
            password=True,
            password_toggle_button=True,
            validation={
                f"At least {MIN_PASSWORD_LENGTH} characters": lambda v: len(v or "")
                >= MIN_PASSWORD_LENGTH
            },
        ).classes("w-full")
        confirm = ui.input("Confirm Password", password=True).classes("w-full")

        submit_btn = ui.button("Register User", on_click=register).classes("w-full")
        ui.link("Back to Settings", "/settings").classes("text-sm text-gray-300 self-center")
