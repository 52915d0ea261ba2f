"""FastAPI host for the NiceGUI client.

NiceGUI pages are mounted onto this application by ``vectormind.main``.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from vectormind import __version__
from vectormind.config import get_client_config

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Log startup and shutdown of the client host."""
    config = get_client_config()
    logger.info(f"Starting VectorMind client (backend: {config.api_base_url})")
    yield
    logger.info("Shutting down VectorMind client...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="VectorMind Client",
        description="Chat client for the VectorMind retrieval-augmented generation service.",
        version=__version__,
        lifespan=lifespan,
    )

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "vectormind-client"}

    return application
