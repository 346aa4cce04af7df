"""Chat session and message models."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from backend.app.models.common import MessageRole


class ChatSession(BaseModel):
    """User-owned conversation thread, optionally linked to a document."""

    model_config = ConfigDict(frozen=True)

    session_id: UUID
    user_id: UUID
    document_id: UUID | None = None
    title: str
    created_at: datetime


class ChatMessage(BaseModel):
    """Immutable message within a chat session."""

    message_id: UUID
    session_id: UUID
    role: MessageRole
    content: str
    timestamp: datetime
