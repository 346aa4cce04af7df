"""Chat sessions: owner-scoped threads whose assistant replies are generated in the background."""

import asyncio
import logging
import time
from uuid import UUID

from backend.app.db.context import RequestContext
from backend.app.db.repositories import ChatRepository, DocumentRepository
from backend.app.errors import NotFoundError
from backend.app.llm.client import CHAT_APOLOGY, LLMClient
from backend.app.llm.prompts import build_document_context
from backend.app.models.chat import ChatMessage, ChatSession
from backend.app.models.common import Category, MessageRole
from backend.app.tasks.queue import Job, JobQueue
from backend.app.utils.logging import StructuredLifecycleLogger
from backend.app.utils.metrics import PrometheusLifecycleMetrics

logger = logging.getLogger(__name__)


class ChatController:
    """Creates sessions, persists user messages and schedules assistant replies."""

    def __init__(
        self,
        chats: ChatRepository,
        documents: DocumentRepository,
        llm: LLMClient,
        queue: JobQueue,
        *,
        llm_timeout_seconds: float = 60.0,
    ) -> None:
        self._chats = chats
        self._documents = documents
        self._llm = llm
        self._queue = queue
        self._llm_timeout_seconds = llm_timeout_seconds
        self._log = StructuredLifecycleLogger()
        self._metrics = PrometheusLifecycleMetrics()

    async def create_session(
        self, ctx: RequestContext, *, title: str, document_id: UUID | None = None
    ) -> ChatSession:
        """Create a session, optionally linked to one of the caller's documents.

        Raises:
            NotFoundError: If document_id is given but not owned by the caller
        """
        if document_id is not None:
            if await self._documents.get_document(document_id, ctx) is None:
                raise NotFoundError("Document")
        return await self._chats.create_session(ctx, title=title, document_id=document_id)

    async def list_sessions(self, ctx: RequestContext) -> list[ChatSession]:
        return await self._chats.list_sessions(ctx)

    async def list_messages(self, session_id: UUID, ctx: RequestContext) -> list[ChatMessage]:
        """List a session's messages, oldest first.

        Raises:
            NotFoundError: If absent or owned by someone else
        """
        await self._require_session(session_id, ctx)
        return await self._chats.list_messages(session_id)

    async def send_message(
        self, session_id: UUID, ctx: RequestContext, content: str
    ) -> ChatMessage:
        """Persist a user message and schedule exactly one assistant reply.

        Returns the stored user message; the reply is appended later by
        generate_reply.

        Raises:
            NotFoundError: If absent or owned by someone else
        """
        await self._require_session(session_id, ctx)
        message = await self._chats.add_message(session_id, role=MessageRole.user, content=content)

        self._queue.enqueue(
            Job(
                kind="reply",
                key=f"session:{session_id}",
                run=lambda: self.generate_reply(session_id, content),
            )
        )
        return message

    async def generate_reply(self, session_id: UUID, user_message: str) -> None:
        """Ask the model for a reply and append it as an assistant message.

        A failing model call still appends CHAT_APOLOGY, so every user
        message gets exactly one assistant reply.
        """
        session = await self._chats.get_session_internal(session_id)
        if session is None:
            logger.info(f"Chat session {session_id} no longer exists, skipping reply")
            return

        context: str | None = None
        category: Category | None = None
        if session.document_id is not None:
            document = await self._documents.get_document_internal(session.document_id)
            if document is not None:
                context = build_document_context(document.title, document.summary)
                category = document.category

        started = time.perf_counter()
        error_reason: str | None = None
        try:
            reply = await asyncio.wait_for(
                self._llm.chat(user_message, context=context, category=category),
                timeout=self._llm_timeout_seconds,
            )
        except Exception as e:
            error_reason = f"{type(e).__name__}: {e}" if str(e) else type(e).__name__
            reply = CHAT_APOLOGY

        await self._chats.add_message(session_id, role=MessageRole.assistant, content=reply)

        outcome = "apology" if reply == CHAT_APOLOGY else "ok"
        self._log.log_reply(
            session_id,
            outcome,
            (time.perf_counter() - started) * 1000,
            error_reason=error_reason,
        )
        self._metrics.inc_chat_reply(outcome)

    async def _require_session(self, session_id: UUID, ctx: RequestContext) -> ChatSession:
        session = await self._chats.get_session(session_id, ctx)
        if session is None:
            raise NotFoundError("Chat session")
        return session
