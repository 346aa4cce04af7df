"""Ownership-safe query helpers."""

from sqlalchemy import Select, select

from backend.app.db.context import RequestContext
from backend.app.db.models import ChatSession, Document


def select_documents(ctx: RequestContext) -> Select[tuple[Document]]:
    """Select from the document table with user scoping enforced.

    Args:
        ctx: Request context with user_id

    Returns:
        Select filtered by user_id
    """
    return select(Document).where(Document.user_id == ctx.user_id)


def select_chat_sessions(ctx: RequestContext) -> Select[tuple[ChatSession]]:
    """Select from the chat_session table with user scoping enforced.

    Args:
        ctx: Request context with user_id

    Returns:
        Select filtered by user_id
    """
    return select(ChatSession).where(ChatSession.user_id == ctx.user_id)
