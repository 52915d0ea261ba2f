import uuid
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class Role(str, Enum):
    """Speaker of a conversation message."""

    USER = "user"
    ASSISTANT = "assistant"


class MessageStatus(str, Enum):
    """Lifecycle of a message in the transcript."""

    STREAMING = "streaming"
    COMPLETE = "complete"


class Source(BaseModel):
    """A citation attached to an assistant answer.

    Attributes:
        filename: Name of the cited document.
        page_number: Page of the citation, starting at 1.
        relevance_score: Retrieval score between 0 and 1.
        document_id: Backend document identifier, when the backend sends it.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    filename: str
    page_number: int = Field(..., ge=1, alias="pageNumber")
    relevance_score: float = Field(..., ge=0.0, le=1.0, alias="relevanceScore")
    document_id: str | None = Field(None, alias="documentId")


class Message(BaseModel):
    """A single message in the conversation transcript.

    Assistant messages are created with status ``streaming`` and only grow
    through the conversation assembler until they are complete.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    role: Role
    content: str = ""
    sources: list[Source] = Field(default_factory=list)
    status: MessageStatus = MessageStatus.STREAMING
    created_at: datetime = Field(default_factory=datetime.now)

    @property
    def is_complete(self) -> bool:
        return self.status == MessageStatus.COMPLETE


class ContentDelta(BaseModel):
    """An incremental fragment of assistant text."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["content"] = "content"
    text: str


class SourceSet(BaseModel):
    """The list of sources cited by the answer."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["sources"] = "sources"
    sources: list[Source]


class Complete(BaseModel):
    """End of the answer."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["complete"] = "complete"


class StreamError(BaseModel):
    """Error reported by the backend in the middle of a stream."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["error"] = "error"
    message: str


Event = Annotated[
    ContentDelta | SourceSet | Complete | StreamError,
    Field(discriminator="kind"),
]


class ChatRequest(BaseModel):
    """Request payload for the chat endpoints.

    Attributes:
        message: User's question.
        conversation_id: Conversation the question belongs to.
    """

    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(..., min_length=1)
    conversation_id: str = Field("default", alias="conversationId")

    @field_validator("message", mode="before")
    @classmethod
    def strip_message(cls, v: str) -> str:
        """Strip whitespace from message before validation."""
        if isinstance(v, str):
            return v.strip()
        return v


class ChatResponse(BaseModel):
    """Answer of the non-streaming chat endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    response: str
    sources: list[Source] = Field(default_factory=list)
    conversation_id: str = Field(..., alias="conversationId")


class User(BaseModel):
    """An account known to the backend.

    Attributes:
        uid: Backend user identifier.
        email: Login email.
        display_name: Name shown in the UI.
        role: One of user, editor or admin.
        can_upload: Whether the user may manage knowledge base files.
        created_at: Creation timestamp as sent by the backend.
    """

    model_config = ConfigDict(populate_by_name=True)

    uid: str
    email: str
    display_name: str = Field("", alias="displayName")
    role: Literal["user", "editor", "admin"] = "user"
    can_upload: bool = Field(False, alias="canUpload")
    created_at: str | None = Field(None, alias="createdAt")


class DocumentInfo(BaseModel):
    """A document stored in the knowledge base."""

    model_config = ConfigDict(populate_by_name=True)

    document_id: str = Field(..., validation_alias=AliasChoices("documentId", "id"))
    filename: str
    pages: int = Field(0, ge=0)
    chunks: int = Field(0, ge=0)
    uploaded_by: str | None = Field(None, alias="uploadedBy")
    uploaded_at: str | None = Field(None, alias="uploadedAt")
    metadata: dict[str, Any] | None = None

    @field_validator("document_id", mode="before")
    @classmethod
    def coerce_document_id(cls, v: Any) -> str:
        """Accept numeric identifiers from the backend."""
        return str(v) if v is not None else v


class KnowledgeResult(BaseModel):
    """A knowledge base search hit."""

    text: str
    score: float
    metadata: dict[str, Any] = Field(default_factory=dict)
