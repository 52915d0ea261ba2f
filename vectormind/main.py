"""Main application entry point.

Runs FastAPI with the NiceGUI chat and settings pages mounted on it.
Environment variables are loaded from .env file.
"""

import logging
import os
import sys

from dotenv import load_dotenv

# Load environment variables before any other imports that might need them
load_dotenv()

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def main() -> None:
    """Application entry point.

    Both the pages and the health endpoint are served on the same port.
    """
    import uvicorn
    from nicegui import ui

    from vectormind.app import create_app
    from vectormind.ui import chat_page, register_page, settings_page  # noqa: F401 - Registers the pages

    app = create_app()

    ui.run_with(
        app,
        title="VectorMind",
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "vectormind-secret"),
    )

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8080"))
    logger.info(f"Chat UI available at http://localhost:{port}/")

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


if __name__ == "__main__":
    main()
