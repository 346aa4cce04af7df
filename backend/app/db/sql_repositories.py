"""SQL implementations of repository interfaces.

Each method opens its own session, so the same repository instance can be
shared by request handlers and background jobs.
"""

import uuid

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from backend.app.db.context import RequestContext
from backend.app.db.models import ChatMessage as ChatMessageDB
from backend.app.db.models import ChatSession as ChatSessionDB
from backend.app.db.models import Document as DocumentDB
from backend.app.db.models import UserProfile as UserProfileDB
from backend.app.db.queries import select_chat_sessions, select_documents
from backend.app.models.chat import ChatMessage, ChatSession
from backend.app.models.common import (
    Category,
    DocumentStatus,
    MessageRole,
    next_timestamp,
    utcnow,
)
from backend.app.models.documents import AnalysisResultV1, Document, GlossaryTerm
from backend.app.models.profile import Preferences, UserProfile


def _to_document(row: DocumentDB) -> Document:
    return Document(
        document_id=row.document_id,
        user_id=row.user_id,
        title=row.title,
        category=Category(row.category),
        file_ref=row.file_ref,
        original_text=row.original_text,
        notes=row.notes,
        summary=row.summary,
        key_points=row.key_points,
        risk_level=row.risk_level,
        glossary_terms=(
            [GlossaryTerm.model_validate(t) for t in row.glossary_terms]
            if row.glossary_terms is not None
            else None
        ),
        status=DocumentStatus(row.status),
        created_at=row.created_at,
    )


def _to_session(row: ChatSessionDB) -> ChatSession:
    return ChatSession(
        session_id=row.session_id,
        user_id=row.user_id,
        document_id=row.document_id,
        title=row.title,
        created_at=row.created_at,
    )


def _to_message(row: ChatMessageDB) -> ChatMessage:
    return ChatMessage(
        message_id=row.message_id,
        session_id=row.session_id,
        role=MessageRole(row.role),
        content=row.content,
        timestamp=row.timestamp,
    )


class SqlDocumentRepository:
    """SQL implementation of DocumentRepository."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

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
        row = DocumentDB(
            document_id=uuid.uuid4(),
            user_id=ctx.user_id,
            title=title,
            category=category.value,
            file_ref=file_ref,
            original_text=original_text,
            status=DocumentStatus.uploaded.value,
            created_at=utcnow(),
        )

        async with self._session_factory() as session:
            session.add(row)
            await session.commit()

        return _to_document(row)

    async def get_document(self, document_id: uuid.UUID, ctx: RequestContext) -> Document | None:
        """Get document by ID."""
        async with self._session_factory() as session:
            result = await session.execute(
                select_documents(ctx).where(DocumentDB.document_id == document_id)
            )
            row = result.scalar_one_or_none()

        return _to_document(row) if row is not None else None

    async def list_documents(self, ctx: RequestContext) -> list[Document]:
        """List the caller's documents, newest first."""
        async with self._session_factory() as session:
            result = await session.execute(
                select_documents(ctx).order_by(DocumentDB.created_at.desc())
            )
            rows = list(result.scalars().all())

        return [_to_document(row) for row in rows]

    async def update_notes(self, document_id: uuid.UUID, ctx: RequestContext, notes: str) -> bool:
        """Patch notes on an owned document."""
        async with self._session_factory() as session:
            result = await session.execute(
                update(DocumentDB)
                .where(DocumentDB.document_id == document_id)
                .where(DocumentDB.user_id == ctx.user_id)
                .values(notes=notes)
            )
            await session.commit()

        return result.rowcount > 0

    async def get_document_internal(self, document_id: uuid.UUID) -> Document | None:
        """Get document by ID without ownership checks."""
        async with self._session_factory() as session:
            row = await session.get(DocumentDB, document_id)

        return _to_document(row) if row is not None else None

    async def claim_for_processing(self, document_id: uuid.UUID) -> Document | None:
        """Move uploaded -> processing with a conditional UPDATE."""
        async with self._session_factory() as session:
            result = await session.execute(
                update(DocumentDB)
                .where(DocumentDB.document_id == document_id)
                .where(DocumentDB.status == DocumentStatus.uploaded.value)
                .values(status=DocumentStatus.processing.value)
            )
            await session.commit()

            if result.rowcount == 0:
                return None

            row = await session.get(DocumentDB, document_id)

        return _to_document(row) if row is not None else None

    async def complete_analysis(self, document_id: uuid.UUID, analysis: AnalysisResultV1) -> None:
        """Write analysis fields and status=completed in a single UPDATE."""
        async with self._session_factory() as session:
            await session.execute(
                update(DocumentDB)
                .where(DocumentDB.document_id == document_id)
                .values(
                    summary=analysis.summary,
                    key_points=list(analysis.key_points),
                    risk_level=analysis.risk_level.value,
                    glossary_terms=[t.model_dump() for t in analysis.glossary_terms],
                    status=DocumentStatus.completed.value,
                )
            )
            await session.commit()

    async def revert_to_uploaded(self, document_id: uuid.UUID) -> None:
        """Set status back to uploaded."""
        async with self._session_factory() as session:
            await session.execute(
                update(DocumentDB)
                .where(DocumentDB.document_id == document_id)
                .values(status=DocumentStatus.uploaded.value)
            )
            await session.commit()


class SqlChatRepository:
    """SQL implementation of ChatRepository."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create_session(
        self, ctx: RequestContext, *, title: str, document_id: uuid.UUID | None = None
    ) -> ChatSession:
        """Create a chat session."""
        row = ChatSessionDB(
            session_id=uuid.uuid4(),
            user_id=ctx.user_id,
            document_id=document_id,
            title=title,
            created_at=utcnow(),
        )

        async with self._session_factory() as session:
            session.add(row)
            await session.commit()

        return _to_session(row)

    async def list_sessions(self, ctx: RequestContext) -> list[ChatSession]:
        """List the caller's sessions, newest first."""
        async with self._session_factory() as session:
            result = await session.execute(
                select_chat_sessions(ctx).order_by(ChatSessionDB.created_at.desc())
            )
            rows = list(result.scalars().all())

        return [_to_session(row) for row in rows]

    async def get_session(self, session_id: uuid.UUID, ctx: RequestContext) -> ChatSession | None:
        """Get session by ID."""
        async with self._session_factory() as session:
            result = await session.execute(
                select_chat_sessions(ctx).where(ChatSessionDB.session_id == session_id)
            )
            row = result.scalar_one_or_none()

        return _to_session(row) if row is not None else None

    async def get_session_internal(self, session_id: uuid.UUID) -> ChatSession | None:
        """Get session by ID without ownership checks."""
        async with self._session_factory() as session:
            row = await session.get(ChatSessionDB, session_id)

        return _to_session(row) if row is not None else None

    async def list_messages(self, session_id: uuid.UUID) -> list[ChatMessage]:
        """List messages, oldest first."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(ChatMessageDB)
                .where(ChatMessageDB.session_id == session_id)
                .order_by(ChatMessageDB.timestamp.asc())
            )
            rows = list(result.scalars().all())

        return [_to_message(row) for row in rows]

    async def add_message(
        self, session_id: uuid.UUID, *, role: MessageRole, content: str
    ) -> ChatMessage:
        """Append a message with a strictly increasing timestamp."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(func.max(ChatMessageDB.timestamp)).where(
                    ChatMessageDB.session_id == session_id
                )
            )
            previous = result.scalar_one_or_none()

            row = ChatMessageDB(
                message_id=uuid.uuid4(),
                session_id=session_id,
                role=role.value,
                content=content,
                timestamp=next_timestamp(previous),
            )
            session.add(row)
            await session.commit()

        return _to_message(row)


class SqlProfileRepository:
    """SQL implementation of ProfileRepository."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @staticmethod
    def _to_profile(row: UserProfileDB) -> UserProfile:
        return UserProfile(
            user_id=row.user_id,
            category=Category(row.category),
            preferences=Preferences(theme=row.theme, notifications=row.notifications),
            updated_at=row.updated_at,
        )

    async def get_profile(self, ctx: RequestContext) -> UserProfile | None:
        """Get the caller's profile."""
        async with self._session_factory() as session:
            row = await session.get(UserProfileDB, ctx.user_id)

        return self._to_profile(row) if row is not None else None

    async def upsert_profile(
        self, ctx: RequestContext, *, category: Category, preferences: Preferences
    ) -> UserProfile:
        """Create or patch the caller's profile."""
        row = UserProfileDB(
            user_id=ctx.user_id,
            category=category.value,
            theme=preferences.theme.value,
            notifications=preferences.notifications,
            updated_at=utcnow(),
        )

        async with self._session_factory() as session:
            merged = await session.merge(row)
            await session.commit()

        return self._to_profile(merged)
