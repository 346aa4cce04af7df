"""Chat endpoints - sessions and messages."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from backend.app.api.auth import get_current_context
from backend.app.api.deps import AppServices, enforce_rate_limit, get_services
from backend.app.db.context import RequestContext
from backend.app.models.chat import ChatMessage, ChatSession

router = APIRouter(prefix="/chat/sessions", tags=["chat"])


class CreateSessionRequest(BaseModel):
    """Request body for POST /chat/sessions."""

    title: str = Field(..., min_length=1, max_length=200, description="Session title")
    document_id: UUID | None = Field(None, description="Optional owned document to ground replies")


class SendMessageRequest(BaseModel):
    """Request body for POST /chat/sessions/{session_id}/messages."""

    content: str = Field(..., min_length=1, description="User message text")


class SessionListResponse(BaseModel):
    """Response for GET /chat/sessions."""

    sessions: list[ChatSession]


class MessageListResponse(BaseModel):
    """Response for GET /chat/sessions/{session_id}/messages."""

    messages: list[ChatMessage]


@router.post("", response_model=ChatSession, status_code=status.HTTP_201_CREATED)
async def create_session(
    request: CreateSessionRequest,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    services: Annotated[AppServices, Depends(get_services)],
) -> ChatSession:
    """Create a chat session.

    Raises:
        NotFoundError: 404 if document_id is not one of the caller's documents
    """
    return await services.chat.create_session(
        ctx, title=request.title, document_id=request.document_id
    )


@router.get("", response_model=SessionListResponse)
async def list_sessions(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    services: Annotated[AppServices, Depends(get_services)],
) -> SessionListResponse:
    sessions = await services.chat.list_sessions(ctx)
    return SessionListResponse(sessions=sessions)


@router.get("/{session_id}/messages", response_model=MessageListResponse)
async def list_messages(
    session_id: UUID,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    services: Annotated[AppServices, Depends(get_services)],
) -> MessageListResponse:
    """List a session's messages, oldest first."""
    messages = await services.chat.list_messages(session_id, ctx)
    return MessageListResponse(messages=messages)


@router.post(
    "/{session_id}/messages",
    response_model=ChatMessage,
    status_code=status.HTTP_202_ACCEPTED,
    dependencies=[Depends(enforce_rate_limit)],
)
async def send_message(
    session_id: UUID,
    request: SendMessageRequest,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    services: Annotated[AppServices, Depends(get_services)],
) -> ChatMessage:
    """Store a user message and schedule the assistant reply.

    Returns the stored user message; the reply appears in the message list
    once generated.
    """
    return await services.chat.send_message(session_id, ctx, request.content)
