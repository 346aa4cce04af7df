"""Repository protocol interfaces for data access.

Methods taking a RequestContext enforce ownership and return None/False for
entities the caller does not own. Methods suffixed ``_internal`` (and the
lifecycle writes) are for background jobs, which run without a caller.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID

from backend.app.db.context import RequestContext
from backend.app.models.chat import ChatMessage, ChatSession
from backend.app.models.common import Category, MessageRole
from backend.app.models.documents import AnalysisResultV1, Document
from backend.app.models.profile import Preferences, UserProfile


class DocumentRepository(Protocol):
    """Repository for document operations."""

    async def create_document(
        self,
        ctx: RequestContext,
        *,
        title: str,
        category: Category,
        file_ref: str,
        original_text: str,
    ) -> Document:
        """Create a document in status uploaded.

        Args:
            ctx: Request context with the owner's user ID
            title: Document title
            category: Document category
            file_ref: Opaque handle to the stored file
            original_text: Extracted (or placeholder) text

        Returns:
            Created document
        """
        ...

    async def get_document(self, document_id: UUID, ctx: RequestContext) -> Document | None:
        """Get document by ID, or None if absent or not owned by the caller."""
        ...

    async def list_documents(self, ctx: RequestContext) -> list[Document]:
        """List the caller's documents, newest first."""
        ...

    async def update_notes(self, document_id: UUID, ctx: RequestContext, notes: str) -> bool:
        """Patch notes on an owned document.

        Returns:
            False if the document is absent or not owned by the caller
        """
        ...

    async def get_document_internal(self, document_id: UUID) -> Document | None:
        """Get document by ID without ownership checks."""
        ...

    async def claim_for_processing(self, document_id: UUID) -> Document | None:
        """Atomically move a document from uploaded to processing.

        Returns:
            The claimed document, or None if absent or not in uploaded
        """
        ...

    async def complete_analysis(self, document_id: UUID, analysis: AnalysisResultV1) -> None:
        """Write all analysis fields plus status=completed in one write."""
        ...

    async def revert_to_uploaded(self, document_id: UUID) -> None:
        """Set status back to uploaded, leaving every other field untouched."""
        ...


class ChatRepository(Protocol):
    """Repository for chat sessions and messages."""

    async def create_session(
        self, ctx: RequestContext, *, title: str, document_id: UUID | None = None
    ) -> ChatSession:
        """Create a chat session owned by the caller."""
        ...

    async def list_sessions(self, ctx: RequestContext) -> list[ChatSession]:
        """List the caller's sessions, newest first."""
        ...

    async def get_session(self, session_id: UUID, ctx: RequestContext) -> ChatSession | None:
        """Get session by ID, or None if absent or not owned by the caller."""
        ...

    async def get_session_internal(self, session_id: UUID) -> ChatSession | None:
        """Get session by ID without ownership checks."""
        ...

    async def list_messages(self, session_id: UUID) -> list[ChatMessage]:
        """List messages of a session, oldest first."""
        ...

    async def add_message(
        self, session_id: UUID, *, role: MessageRole, content: str
    ) -> ChatMessage:
        """Append a message.

        The timestamp is strictly greater than every earlier message in the
        same session.
        """
        ...


class ProfileRepository(Protocol):
    """Repository for user profiles."""

    async def get_profile(self, ctx: RequestContext) -> UserProfile | None:
        """Get the caller's profile, if one was saved."""
        ...

    async def upsert_profile(
        self, ctx: RequestContext, *, category: Category, preferences: Preferences
    ) -> UserProfile:
        """Create the caller's profile or patch it in place."""
        ...


@dataclass
class RetryAfter:
    """Rate limit retry-after information."""

    seconds: int


class RateLimiter(Protocol):
    """Rate limiter interface."""

    def check_quota(self, key: str, now: datetime) -> RetryAfter | None:
        """Check if quota is available.

        Args:
            key: Rate limit key
            now: Current timestamp

        Returns:
            RetryAfter if over quota, None if allowed
        """
        ...
