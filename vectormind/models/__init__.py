"""Pydantic models shared by the streaming engine, the REST client and the UI.

Models:
    - Message: One entry of the conversation transcript
    - Source: Citation attached to an assistant answer
    - ContentDelta, SourceSet, Complete, StreamError: Interpreted stream events
    - ChatRequest / ChatResponse: Chat endpoint payloads
    - User, DocumentInfo, KnowledgeResult: Administrative REST payloads
"""

from vectormind.models.schemas import (
    ChatRequest,
    ChatResponse,
    Complete,
    ContentDelta,
    DocumentInfo,
    Event,
    KnowledgeResult,
    Message,
    MessageStatus,
    Role,
    Source,
    SourceSet,
    StreamError,
    User,
)

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "Complete",
    "ContentDelta",
    "DocumentInfo",
    "Event",
    "KnowledgeResult",
    "Message",
    "MessageStatus",
    "Role",
    "Source",
    "SourceSet",
    "StreamError",
    "User",
]
