"""Integration tests for BackendClient against a mocked REST backend."""

import json

import httpx
import pytest

from vectormind.api.client import BackendClient
from vectormind.api.session import Session
from vectormind.config import ClientConfig
from vectormind.errors import ApiError, PDFValidationError, TransportError
from vectormind.models.schemas import User


class FakeBackend:
    """Answers every request with a canned response and records requests."""

    def __init__(self, status_code: int = 200, payload: object = None, text: str | None = None):
        self.status_code = status_code
        self.payload = payload
        self.text = text
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text)
        return httpx.Response(self.status_code, json=self.payload)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


def make_backend_client(config: ClientConfig, session: Session, backend: FakeBackend) -> BackendClient:
    return BackendClient(config, session, client=backend.client())


class TestChatFallback:
    """Tests for the non-streaming chat endpoint."""

    async def test_send_message(self, config: ClientConfig, session: Session) -> None:
        backend = FakeBackend(
            payload={
                "response": "RAG combines retrieval with generation.",
                "sources": [{"filename": "rag.pdf", "pageNumber": 2, "relevanceScore": 0.9}],
                "conversationId": "test-conversation",
            }
        )
        client = make_backend_client(config, session, backend)

        response = await client.send_message("What is RAG?")

        (request,) = backend.requests
        assert str(request.url) == "http://backend.test/api/chat"
        assert request.headers["authorization"] == "Bearer session-token"
        assert json.loads(request.content) == {
            "message": "What is RAG?",
            "conversationId": "test-conversation",
        }
        assert response.response == "RAG combines retrieval with generation."
        assert response.sources[0].page_number == 2


class TestErrors:
    """Tests for error mapping of REST calls."""

    async def test_unauthorized_clears_session(self, config: ClientConfig, session: Session) -> None:
        backend = FakeBackend(status_code=401, payload={"error": "Token expired"})
        client = make_backend_client(config, session, backend)

        with pytest.raises(ApiError) as exc_info:
            await client.get_current_user()

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Token expired"
        assert session.get_token() is None
        assert session.user is None

    @pytest.mark.parametrize(
        ("backend", "detail"),
        [
            (FakeBackend(status_code=400, payload={"message": "Bad query"}), "Bad query"),
            (FakeBackend(status_code=422, payload={"detail": "Missing field"}), "Missing field"),
            (FakeBackend(status_code=502, text="Bad Gateway"), "Bad Gateway"),
            (FakeBackend(status_code=500, payload={"code": 1}), None),
        ],
    )
    async def test_error_detail_extraction(
        self,
        backend: FakeBackend,
        detail: str | None,
        config: ClientConfig,
        session: Session,
    ) -> None:
        client = make_backend_client(config, session, backend)

        with pytest.raises(ApiError) as exc_info:
            await client.search_knowledge("rag")

        assert exc_info.value.detail == detail
        assert exc_info.value.status_code == backend.status_code

    async def test_unreachable_backend(self, config: ClientConfig, session: Session) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused")

        client = BackendClient(
            config, session, client=httpx.AsyncClient(transport=httpx.MockTransport(handler))
        )

        with pytest.raises(TransportError, match="Connection failed"):
            await client.list_documents()


class TestDocuments:
    """Tests for knowledge base document management."""

    async def test_list_documents(self, config: ClientConfig, session: Session) -> None:
        backend = FakeBackend(
            payload={
                "pdfs": [
                    {"id": 1, "filename": "a.pdf", "pages": 3, "chunks": 12},
                    {"documentId": "b", "filename": "b.pdf"},
                ]
            }
        )
        client = make_backend_client(config, session, backend)

        documents = await client.list_documents()

        assert [d.document_id for d in documents] == ["1", "b"]
        assert documents[0].chunks == 12

    async def test_upload_sends_multipart(
        self, config: ClientConfig, session: Session, pdf_bytes: bytes
    ) -> None:
        backend = FakeBackend(payload={"id": "doc-1", "filename": "guide.pdf", "pages": 2})
        client = make_backend_client(config, session, backend)

        document = await client.upload_document("guide.pdf", pdf_bytes, metadata={"topic": "rag"})

        (request,) = backend.requests
        assert str(request.url) == "http://backend.test/api/pdf/upload"
        assert request.headers["content-type"].startswith("multipart/form-data")
        assert b'name="pdf"; filename="guide.pdf"' in request.content
        assert b'{"topic": "rag"}' in request.content
        assert document.document_id == "doc-1"

    async def test_invalid_pdf_never_sent(self, config: ClientConfig, session: Session) -> None:
        backend = FakeBackend(payload={})
        client = make_backend_client(config, session, backend)

        with pytest.raises(PDFValidationError):
            await client.upload_document("notes.pdf", b"plain text, not a PDF")

        assert backend.requests == []

    async def test_upload_requires_permission(self, config: ClientConfig, pdf_bytes: bytes) -> None:
        session = Session(token="t", user=User(uid="u", email="u@example.com"))
        backend = FakeBackend(payload={})
        client = make_backend_client(config, session, backend)

        with pytest.raises(PermissionError):
            await client.upload_document("guide.pdf", pdf_bytes)

        assert backend.requests == []

    async def test_delete_document(self, config: ClientConfig, session: Session) -> None:
        backend = FakeBackend(payload={"success": True})
        client = make_backend_client(config, session, backend)

        await client.delete_document("doc-1")

        (request,) = backend.requests
        assert request.method == "DELETE"
        assert request.url.path == "/api/pdf/doc-1"


class TestAdministration:
    """Tests for user management and knowledge endpoints."""

    async def test_list_users_requires_admin(self, config: ClientConfig) -> None:
        session = Session(token="t", user=User(uid="u", email="u@example.com", role="editor"))
        backend = FakeBackend(payload={"users": []})
        client = make_backend_client(config, session, backend)

        with pytest.raises(PermissionError, match="Administrator"):
            await client.list_users()

        assert backend.requests == []

    async def test_list_users(self, config: ClientConfig, session: Session) -> None:
        backend = FakeBackend(
            payload={"users": [{"uid": "u2", "email": "b@example.com", "canUpload": False}]}
        )
        client = make_backend_client(config, session, backend)

        users = await client.list_users()

        assert [u.email for u in users] == ["b@example.com"]
        assert users[0].role == "user"

    async def test_grant_permission(self, config: ClientConfig, session: Session) -> None:
        backend = FakeBackend(payload={"success": True})
        client = make_backend_client(config, session, backend)

        await client.grant_permission("u2")

        (request,) = backend.requests
        assert request.url.path == "/api/auth/grant-permission"
        assert json.loads(request.content) == {"userId": "u2"}

    async def test_search_knowledge(self, config: ClientConfig, session: Session) -> None:
        backend = FakeBackend(payload={"results": [{"text": "chunk", "score": 0.42}]})
        client = make_backend_client(config, session, backend)

        results = await client.search_knowledge("embeddings", limit=3)

        (request,) = backend.requests
        assert request.url.params["query"] == "embeddings"
        assert request.url.params["limit"] == "3"
        assert results[0].score == 0.42
        assert results[0].metadata == {}

    async def test_register_user(self, config: ClientConfig, session: Session) -> None:
        backend = FakeBackend(
            payload={"user": {"uid": "u3", "email": "new@example.com", "displayName": "New"}}
        )
        client = make_backend_client(config, session, backend)

        user = await client.register_user("new@example.com", "secret1", display_name="New")

        (request,) = backend.requests
        assert request.url.path == "/api/auth/register"
        assert json.loads(request.content) == {
            "email": "new@example.com",
            "password": "secret1",
            "displayName": "New",
        }
        assert user.uid == "u3"
        assert user.display_name == "New"

    async def test_register_user_requires_admin(self, config: ClientConfig) -> None:
        session = Session(token="t", user=User(uid="u", email="u@example.com", can_upload=True))
        backend = FakeBackend(payload={})
        client = make_backend_client(config, session, backend)

        with pytest.raises(PermissionError):
            await client.register_user("new@example.com", "secret1")

        assert backend.requests == []

    async def test_register_user_conflict(self, config: ClientConfig, session: Session) -> None:
        backend = FakeBackend(status_code=409, payload={"error": "Email already registered"})
        client = make_backend_client(config, session, backend)

        with pytest.raises(ApiError) as exc_info:
            await client.register_user("taken@example.com", "secret1")

        assert exc_info.value.detail == "Email already registered"

    async def test_add_knowledge(self, config: ClientConfig, session: Session) -> None:
        backend = FakeBackend(payload={"success": True})
        client = make_backend_client(config, session, backend)

        result = await client.add_knowledge("Chunks are 1000 characters", metadata={"source": "notes"})

        (request,) = backend.requests
        assert request.method == "POST"
        assert request.url.path == "/api/knowledge/add"
        assert json.loads(request.content) == {
            "text": "Chunks are 1000 characters",
            "metadata": {"source": "notes"},
        }
        assert result == {"success": True}


class StaticSession:
    """Session provider with fixed answers, independent of Session."""

    def __init__(self) -> None:
        self.cleared = False

    def get_token(self) -> str | None:
        return "static-token"

    def is_admin(self) -> bool:
        return False

    def can_upload(self) -> bool:
        return True

    def clear(self) -> None:
        self.cleared = True


class TestSessionProvider:
    """BackendClient only relies on the session provider protocol."""

    async def test_uses_provider_token_and_capabilities(
        self, config: ClientConfig, pdf_bytes: bytes
    ) -> None:
        provider = StaticSession()
        backend = FakeBackend(payload={"id": "doc-2", "filename": "guide.pdf", "pages": 2})
        client = BackendClient(config, provider, client=backend.client())

        await client.upload_document("guide.pdf", pdf_bytes)

        (request,) = backend.requests
        assert request.headers["authorization"] == "Bearer static-token"
        with pytest.raises(PermissionError):
            await client.list_users()

    async def test_unauthorized_clears_provider(self, config: ClientConfig) -> None:
        provider = StaticSession()
        backend = FakeBackend(status_code=401, payload={"error": "Token expired"})
        client = BackendClient(config, provider, client=backend.client())

        with pytest.raises(ApiError):
            await client.list_documents()

        assert provider.cleared is True
