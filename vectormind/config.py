"""Client configuration with environment variable loading.

Pydantic-based configuration for talking to the VectorMind backend.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()

MAX_UPLOAD_SIZE = 10 * 1024 * 1024  # 10MB


class ClientConfig(BaseModel):
    """Configuration for the backend client.

    Attributes:
        api_base_url: Backend base URL, without trailing slash.
        stream_path: Path of the streaming chat endpoint.
        chat_path: Path of the non-streaming chat endpoint.
        conversation_id: Conversation identifier sent with every query.
        auth_token: Bearer token used when no session provides one.
        connect_timeout: Seconds allowed to establish a connection.
        request_timeout: Overall timeout for non-streaming REST calls.
        max_upload_size: Largest document accepted for upload, in bytes.
    """

    api_base_url: str = Field(
        default_factory=lambda: os.getenv("VECTORMIND_API_URL", "http://localhost:3001/api"),
        description="Backend base URL",
    )
    stream_path: str = Field(default="/chat/stream", description="Streaming chat path")
    chat_path: str = Field(default="/chat", description="Non-streaming chat path")
    conversation_id: str = Field(
        default_factory=lambda: os.getenv("VECTORMIND_CONVERSATION_ID", "default"),
        min_length=1,
        description="Conversation identifier",
    )
    auth_token: str | None = Field(
        default_factory=lambda: os.getenv("VECTORMIND_AUTH_TOKEN") or None,
        description="Bearer token for the backend",
    )
    connect_timeout: float = Field(
        default=10.0,
        gt=0.0,
        description="Connection timeout in seconds",
    )
    request_timeout: float = Field(
        default=30.0,
        gt=0.0,
        description="Timeout for non-streaming requests in seconds",
    )
    max_upload_size: int = Field(
        default=MAX_UPLOAD_SIZE,
        ge=1,
        description="Maximum upload size in bytes",
    )

    @field_validator("api_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an http(s) URL and drop the trailing slash."""
        v = v.strip().rstrip("/")
        if not v.startswith(("http://", "https://")):
            raise ValueError("api_base_url must start with http:// or https://")
        return v

    @field_validator("stream_path", "chat_path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Endpoint paths are joined to the base URL and must be absolute."""
        if not v.startswith("/"):
            raise ValueError("endpoint paths must start with '/'")
        return v

    def url(self, path: str) -> str:
        """Join an endpoint path to the base URL."""
        return f"{self.api_base_url}{path}"


def get_client_config() -> ClientConfig:
    """Create client configuration from environment.

    Returns:
        Configured ClientConfig instance.

    Raises:
        ValidationError: If an environment value is invalid.
    """
    return ClientConfig()
