"""Shared pytest fixtures for all test suites."""

import uuid
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from backend.app.config import Settings
from backend.app.db.context import RequestContext
from backend.app.db.engine import create_all, create_async_engine_from_settings, create_session_factory
from backend.app.tasks.queue import JobQueue
from tests.fakes import FakeLLM


@pytest.fixture
def fake_llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def ctx() -> RequestContext:
    """Caller context for the owning user."""
    return RequestContext(user_id=uuid.uuid4())


@pytest.fixture
def other_ctx() -> RequestContext:
    """Caller context for a second, unrelated user."""
    return RequestContext(user_id=uuid.uuid4())


@pytest_asyncio.fixture
async def job_queue() -> AsyncGenerator[JobQueue, None]:
    """Started job queue, stopped after the test."""
    queue = JobQueue(concurrency=4)
    await queue.start()
    yield queue
    await queue.stop(drain_timeout=1.0)


@pytest_asyncio.fixture
async def sqlite_engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory SQLite engine with all tables created."""
    engine = create_async_engine_from_settings(
        Settings(database_url="sqlite+aiosqlite:///:memory:")
    )
    await create_all(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(sqlite_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(sqlite_engine)
