"""REST client for the non-streaming backend endpoints.

Covers the chat fallback for callers that do not render incrementally, and
the administrative endpoints behind the settings page: users, permissions,
knowledge base documents and raw knowledge entries.
"""

import json
import logging
from typing import Any

import httpx

from vectormind.api.session import SessionProvider
from vectormind.config import ClientConfig
from vectormind.errors import ApiError, TransportError
from vectormind.models.schemas import (
    ChatRequest,
    ChatResponse,
    DocumentInfo,
    KnowledgeResult,
    User,
)
from vectormind.parsing.pdf_validator import validate_pdf

logger = logging.getLogger(__name__)


def _error_detail(response: httpx.Response) -> str | None:
    """Extract the server's error message from a failed response."""
    try:
        data = response.json()
    except ValueError:
        return response.text[:200] or None

    if isinstance(data, dict):
        for key in ("error", "message", "detail"):
            if isinstance(data.get(key), str):
                return data[key]
    return None


class BackendClient:
    """Async client for the VectorMind REST API.

    Args:
        config: Client configuration.
        session: Login session supplying the bearer token and role checks.
        client: Shared httpx client. When omitted, one is created per call.
    """

    def __init__(
        self,
        config: ClientConfig,
        session: SessionProvider,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config
        self._session = session
        self._client = client
        self._timeout = httpx.Timeout(config.request_timeout, connect=config.connect_timeout)

    def _headers(self) -> dict[str, str]:
        token = self._session.get_token()
        return {"Authorization": f"Bearer {token}"} if token else {}

    def _require_admin(self) -> None:
        if not self._session.is_admin():
            raise PermissionError("Administrator role required")

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send a request and return the decoded JSON body.

        Raises:
            TransportError: If the backend cannot be reached.
            ApiError: If the backend answers with a non-success status.
        """
        url = self._config.url(path)
        try:
            if self._client is not None:
                response = await self._client.request(
                    method, url, headers=self._headers(), timeout=self._timeout, **kwargs
                )
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.request(method, url, headers=self._headers(), **kwargs)
        except httpx.RequestError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise TransportError(f"Connection failed: {e}") from e

        if response.status_code == 401:
            self._session.clear()

        if not response.is_success:
            detail = _error_detail(response)
            logger.warning(f"{method} {path} returned HTTP {response.status_code}: {detail}")
            raise ApiError(response.status_code, detail)

        return response.json() if response.content else {}

    async def send_message(self, message: str, conversation_id: str | None = None) -> ChatResponse:
        """Ask a question and wait for the whole answer.

        Args:
            message: The user's question.
            conversation_id: Conversation identifier, defaults to the configured one.

        Returns:
            The answer with its sources.
        """
        request = ChatRequest(
            message=message,
            conversation_id=conversation_id or self._config.conversation_id,
        )
        data = await self._request(
            "POST", self._config.chat_path, json=request.model_dump(by_alias=True)
        )
        return ChatResponse.model_validate(data)

    async def get_current_user(self) -> User:
        data = await self._request("GET", "/auth/me")
        return User.model_validate(data["user"])

    async def list_users(self) -> list[User]:
        self._require_admin()
        data = await self._request("GET", "/auth/users")
        return [User.model_validate(u) for u in data.get("users", [])]

    async def register_user(
        self,
        email: str,
        password: str,
        display_name: str | None = None,
    ) -> User:
        """Create an account. Admin only."""
        self._require_admin()
        payload = {"email": email, "password": password, "displayName": display_name}
        data = await self._request("POST", "/auth/register", json=payload)
        logger.info(f"Registered user {email}")
        return User.model_validate(data["user"])

    async def grant_permission(self, user_id: str) -> dict[str, Any]:
        self._require_admin()
        return await self._request("POST", "/auth/grant-permission", json={"userId": user_id})

    async def revoke_permission(self, user_id: str) -> dict[str, Any]:
        self._require_admin()
        return await self._request("POST", "/auth/revoke-permission", json={"userId": user_id})

    async def list_documents(self) -> list[DocumentInfo]:
        data = await self._request("GET", "/pdf/list")
        return [DocumentInfo.model_validate(d) for d in data.get("pdfs", [])]

    async def upload_document(
        self,
        filename: str,
        content: bytes,
        metadata: dict[str, Any] | None = None,
    ) -> DocumentInfo:
        """Upload a PDF to the knowledge base.

        The file is checked locally first so obviously invalid uploads never
        leave the client.

        Args:
            filename: Original file name.
            content: Raw PDF bytes.
            metadata: Optional metadata stored with the document.

        Returns:
            The stored document.

        Raises:
            PermissionError: If the session may not upload.
            PDFValidationError: If the file is not an acceptable PDF.
        """
        if not self._session.can_upload():
            raise PermissionError("Upload permission required")

        pages = validate_pdf(content, max_size=self._config.max_upload_size)
        form = {"metadata": json.dumps(metadata)} if metadata else None
        data = await self._request(
            "POST",
            "/pdf/upload",
            files={"pdf": (filename, content, "application/pdf")},
            data=form,
        )
        logger.info(f"Uploaded {filename} ({pages} pages)")
        return DocumentInfo.model_validate(data)

    async def delete_document(self, document_id: str) -> dict[str, Any]:
        if not self._session.can_upload():
            raise PermissionError("Upload permission required")
        data = await self._request("DELETE", f"/pdf/{document_id}")
        logger.info(f"Deleted document {document_id}")
        return data

    async def search_knowledge(self, query: str, limit: int = 10) -> list[KnowledgeResult]:
        data = await self._request(
            "GET", "/knowledge/search", params={"query": query, "limit": limit}
        )
        return [KnowledgeResult.model_validate(r) for r in data.get("results", [])]

    async def add_knowledge(
        self,
        text: str,
        metadata: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        return await self._request(
            "POST", "/knowledge/add", json={"text": text, "metadata": metadata}
        )
