"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - config: ClientConfig pointing at a fake backend
    - session: Admin session with a bearer token
    - sse_client: Factory for httpx clients that stream scripted bodies
    - pdf_bytes: A small valid PDF generated with pypdf
"""

import io
from collections.abc import AsyncIterator, Callable

import httpx
import pytest
from pypdf import PdfWriter

from vectormind.api.session import Session
from vectormind.config import ClientConfig
from vectormind.models.schemas import User

BASE_URL = "http://backend.test/api"

Body = list[bytes] | Callable[[], AsyncIterator[bytes]]


async def _iter_chunks(chunks: list[bytes]) -> AsyncIterator[bytes]:
    for chunk in chunks:
        yield chunk


@pytest.fixture
def config() -> ClientConfig:
    """Return a configuration for the fake backend."""
    return ClientConfig(
        api_base_url=BASE_URL,
        conversation_id="test-conversation",
        auth_token="test-token",
    )


@pytest.fixture
def session() -> Session:
    """Return an admin session."""
    user = User(uid="u-1", email="admin@example.com", role="admin", canUpload=True)
    return Session(token="session-token", user=user)


@pytest.fixture
def sse_client() -> Callable[..., httpx.AsyncClient]:
    """Return a factory for httpx clients answering with scripted bodies.

    Each request consumes the next body. A body is either a list of byte
    chunks, delivered one per read, or a callable returning an async
    iterator for bodies that block or fail midway. Requests are recorded on
    ``client.requests``.
    """

    def factory(*bodies: Body, status_code: int = 200) -> httpx.AsyncClient:
        pending = list(bodies)
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            body = pending.pop(0)
            content = _iter_chunks(body) if isinstance(body, list) else body()
            return httpx.Response(
                status_code,
                content=content,
                headers={"content-type": "text/event-stream"},
            )

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        client.requests = requests  # type: ignore[attr-defined]
        return client

    return factory


@pytest.fixture
def pdf_bytes() -> bytes:
    """Return a valid two-page PDF."""
    writer = PdfWriter()
    writer.add_blank_page(width=612, height=792)
    writer.add_blank_page(width=612, height=792)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()
