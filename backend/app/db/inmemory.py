"""In-memory implementations of repository interfaces."""

import uuid
from datetime import datetime, timedelta

from backend.app.db.context import RequestContext
from backend.app.db.repositories import RetryAfter
from backend.app.models.chat import ChatMessage, ChatSession
from backend.app.models.common import (
    Category,
    DocumentStatus,
    MessageRole,
    next_timestamp,
    utcnow,
)
from backend.app.models.documents import AnalysisResultV1, Document
from backend.app.models.profile import Preferences, UserProfile


class InMemoryDocumentRepository:
    """In-memory implementation of DocumentRepository.

    Records are replaced whole on every update, so readers never see a
    half-written document.
    """

    def __init__(self) -> None:
        self._documents: dict[uuid.UUID, Document] = {}

    async def create_document(
        self,
        ctx: RequestContext,
        *,
        title: str,
        category: Category,
        file_ref: str,
        original_text: str,
    ) -> Document:
        """Create a document in status uploaded."""
        document = Document(
            document_id=uuid.uuid4(),
            user_id=ctx.user_id,
            title=title,
            category=category,
            file_ref=file_ref,
            original_text=original_text,
            status=DocumentStatus.uploaded,
            created_at=utcnow(),
        )
        self._documents[document.document_id] = document
        return document.model_copy(deep=True)

    async def get_document(self, document_id: uuid.UUID, ctx: RequestContext) -> Document | None:
        """Get document by ID."""
        document = self._documents.get(document_id)

        # Enforce ownership
        if document is None or document.user_id != ctx.user_id:
            return None

        return document.model_copy(deep=True)

    async def list_documents(self, ctx: RequestContext) -> list[Document]:
        """List the caller's documents, newest first."""
        results = [
            d.model_copy(deep=True) for d in self._documents.values() if d.user_id == ctx.user_id
        ]
        results.sort(key=lambda d: d.created_at, reverse=True)
        return results

    async def update_notes(self, document_id: uuid.UUID, ctx: RequestContext, notes: str) -> bool:
        """Patch notes on an owned document."""
        document = await self.get_document(document_id, ctx)
        if document is None:
            return False

        self._documents[document_id] = document.model_copy(update={"notes": notes})
        return True

    async def get_document_internal(self, document_id: uuid.UUID) -> Document | None:
        """Get document by ID without ownership checks."""
        document = self._documents.get(document_id)
        return document.model_copy(deep=True) if document else None

    async def claim_for_processing(self, document_id: uuid.UUID) -> Document | None:
        """Move uploaded -> processing."""
        document = self._documents.get(document_id)
        if document is None or document.status != DocumentStatus.uploaded:
            return None

        claimed = document.model_copy(update={"status": DocumentStatus.processing})
        self._documents[document_id] = claimed
        return claimed.model_copy(deep=True)

    async def complete_analysis(self, document_id: uuid.UUID, analysis: AnalysisResultV1) -> None:
        """Write analysis fields and status=completed together."""
        document = self._documents.get(document_id)
        if document is None:
            return

        self._documents[document_id] = document.model_copy(
            update={
                "summary": analysis.summary,
                "key_points": list(analysis.key_points),
                "risk_level": analysis.risk_level,
                "glossary_terms": list(analysis.glossary_terms),
                "status": DocumentStatus.completed,
            }
        )

    async def revert_to_uploaded(self, document_id: uuid.UUID) -> None:
        """Set status back to uploaded."""
        document = self._documents.get(document_id)
        if document is None:
            return

        self._documents[document_id] = document.model_copy(
            update={"status": DocumentStatus.uploaded}
        )


class InMemoryChatRepository:
    """In-memory implementation of ChatRepository."""

    def __init__(self) -> None:
        self._sessions: dict[uuid.UUID, ChatSession] = {}
        self._messages: dict[uuid.UUID, list[ChatMessage]] = {}

    async def create_session(
        self, ctx: RequestContext, *, title: str, document_id: uuid.UUID | None = None
    ) -> ChatSession:
        """Create a chat session."""
        session = ChatSession(
            session_id=uuid.uuid4(),
            user_id=ctx.user_id,
            document_id=document_id,
            title=title,
            created_at=utcnow(),
        )
        self._sessions[session.session_id] = session
        self._messages[session.session_id] = []
        return session

    async def list_sessions(self, ctx: RequestContext) -> list[ChatSession]:
        """List the caller's sessions, newest first."""
        results = [s for s in self._sessions.values() if s.user_id == ctx.user_id]
        results.sort(key=lambda s: s.created_at, reverse=True)
        return results

    async def get_session(self, session_id: uuid.UUID, ctx: RequestContext) -> ChatSession | None:
        """Get session by ID."""
        session = self._sessions.get(session_id)

        # Enforce ownership
        if session is None or session.user_id != ctx.user_id:
            return None

        return session

    async def get_session_internal(self, session_id: uuid.UUID) -> ChatSession | None:
        """Get session by ID without ownership checks."""
        return self._sessions.get(session_id)

    async def list_messages(self, session_id: uuid.UUID) -> list[ChatMessage]:
        """List messages, oldest first."""
        return list(self._messages.get(session_id, []))

    async def add_message(
        self, session_id: uuid.UUID, *, role: MessageRole, content: str
    ) -> ChatMessage:
        """Append a message with a strictly increasing timestamp."""
        messages = self._messages.setdefault(session_id, [])
        previous = messages[-1].timestamp if messages else None

        message = ChatMessage(
            message_id=uuid.uuid4(),
            session_id=session_id,
            role=role,
            content=content,
            timestamp=next_timestamp(previous),
        )
        messages.append(message)
        return message


class InMemoryProfileRepository:
    """In-memory implementation of ProfileRepository."""

    def __init__(self) -> None:
        self._profiles: dict[uuid.UUID, UserProfile] = {}

    async def get_profile(self, ctx: RequestContext) -> UserProfile | None:
        """Get the caller's profile."""
        return self._profiles.get(ctx.user_id)

    async def upsert_profile(
        self, ctx: RequestContext, *, category: Category, preferences: Preferences
    ) -> UserProfile:
        """Create or patch the caller's profile."""
        profile = UserProfile(
            user_id=ctx.user_id,
            category=category,
            preferences=preferences,
            updated_at=utcnow(),
        )
        self._profiles[ctx.user_id] = profile
        return profile


class InMemoryRateLimiter:
    """In-memory implementation of RateLimiter using fixed window."""

    def __init__(self, max_requests: int, window_seconds: int = 60) -> None:
        """Initialize rate limiter.

        Args:
            max_requests: Maximum requests per window
            window_seconds: Window size in seconds (default 60)
        """
        self._max_requests = max_requests
        self._window_seconds = window_seconds
        self._windows: dict[str, tuple[datetime, int]] = {}

    def check_quota(self, key: str, now: datetime) -> RetryAfter | None:
        """Check if quota is available."""
        if key not in self._windows:
            self._windows[key] = (now, 1)
            return None

        window_start, count = self._windows[key]
        window_end = window_start + timedelta(seconds=self._window_seconds)

        if now >= window_end:
            self._windows[key] = (now, 1)
            return None

        if count >= self._max_requests:
            return RetryAfter(seconds=max(1, int((window_end - now).total_seconds())))

        self._windows[key] = (window_start, count + 1)
        return None
