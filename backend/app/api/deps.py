"""Service container and FastAPI dependencies."""

import logging
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncEngine

from backend.app.api.auth import get_current_context
from backend.app.chat.sessions import ChatController
from backend.app.config import Settings
from backend.app.db.context import RequestContext
from backend.app.db.engine import create_all, create_async_engine_from_settings, create_session_factory
from backend.app.db.inmemory import (
    InMemoryChatRepository,
    InMemoryDocumentRepository,
    InMemoryProfileRepository,
    InMemoryRateLimiter,
)
from backend.app.db.repositories import ChatRepository, DocumentRepository, ProfileRepository
from backend.app.db.sql_repositories import (
    SqlChatRepository,
    SqlDocumentRepository,
    SqlProfileRepository,
)
from backend.app.documents.lifecycle import DocumentLifecycle
from backend.app.llm.client import DeterministicStubClient, LLMClient, get_llm_client
from backend.app.middleware.ratelimit import (
    CHAT_BUCKET,
    UPLOAD_BUCKET,
    RateLimitMiddleware,
    create_default_bucket_map,
    create_rate_limit_middleware,
)
from backend.app.tasks.queue import JobQueue

logger = logging.getLogger(__name__)


@dataclass
class AppServices:
    """Everything a request handler needs, built once per application."""

    documents: DocumentRepository
    chats: ChatRepository
    profiles: ProfileRepository
    llm: LLMClient
    queue: JobQueue
    lifecycle: DocumentLifecycle
    chat: ChatController
    rate_limits: RateLimitMiddleware
    engine: AsyncEngine | None = None


def _wire(
    documents: DocumentRepository,
    chats: ChatRepository,
    profiles: ProfileRepository,
    llm: LLMClient,
    rate_limits: RateLimitMiddleware,
    *,
    worker_concurrency: int,
    llm_timeout_seconds: float,
    engine: AsyncEngine | None = None,
) -> AppServices:
    queue = JobQueue(concurrency=worker_concurrency)
    return AppServices(
        documents=documents,
        chats=chats,
        profiles=profiles,
        llm=llm,
        queue=queue,
        lifecycle=DocumentLifecycle(
            documents, llm, queue, llm_timeout_seconds=llm_timeout_seconds
        ),
        chat=ChatController(
            chats, documents, llm, queue, llm_timeout_seconds=llm_timeout_seconds
        ),
        rate_limits=rate_limits,
        engine=engine,
    )


async def build_services(settings: Settings) -> AppServices:
    """Build SQL-backed services from settings.

    Raises:
        ValueError: If DATABASE_URL is not configured
    """
    engine = create_async_engine_from_settings(settings)
    if settings.db_create_all:
        logger.info("DB_CREATE_ALL set, creating tables without Alembic")
        await create_all(engine)

    session_factory = create_session_factory(engine)
    return _wire(
        SqlDocumentRepository(session_factory),
        SqlChatRepository(session_factory),
        SqlProfileRepository(session_factory),
        await get_llm_client(settings),
        create_rate_limit_middleware(settings),
        worker_concurrency=settings.worker_concurrency,
        llm_timeout_seconds=settings.llm_timeout_seconds,
        engine=engine,
    )


def build_inmemory_services(
    llm: LLMClient | None = None,
    *,
    worker_concurrency: int = 4,
    llm_timeout_seconds: float = 60.0,
    upload_ops_per_min: int = 10,
    chat_ops_per_min: int = 30,
) -> AppServices:
    """Build services over in-memory repositories (tests and local demos)."""
    rate_limits = RateLimitMiddleware(
        {
            UPLOAD_BUCKET: InMemoryRateLimiter(upload_ops_per_min),
            CHAT_BUCKET: InMemoryRateLimiter(chat_ops_per_min),
        },
        create_default_bucket_map(),
    )
    return _wire(
        InMemoryDocumentRepository(),
        InMemoryChatRepository(),
        InMemoryProfileRepository(),
        llm or DeterministicStubClient(),
        rate_limits,
        worker_concurrency=worker_concurrency,
        llm_timeout_seconds=llm_timeout_seconds,
    )


def get_services(request: Request) -> AppServices:
    """Services installed on app.state by the lifespan."""
    services: AppServices = request.app.state.services
    return services


async def enforce_rate_limit(
    request: Request,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    services: Annotated[AppServices, Depends(get_services)],
) -> None:
    """Reject the request with 429 when the caller's bucket is over quota."""
    allowed, retry_after = services.rate_limits.check_rate_limit(request.url.path, ctx)
    if not allowed:
        logger.info(f"Rate limit exceeded for user {ctx.user_id} on {request.url.path}")
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Rate limit exceeded",
            headers={"Retry-After": str(retry_after)},
        )
