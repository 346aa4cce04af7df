"""Integration tests for the SQL repositories on SQLite (aiosqlite)."""

import asyncio
import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from backend.app.db.context import RequestContext
from backend.app.db.sql_repositories import (
    SqlChatRepository,
    SqlDocumentRepository,
    SqlProfileRepository,
)
from backend.app.documents.lifecycle import DocumentLifecycle
from backend.app.models.common import Category, DocumentStatus, MessageRole, RiskLevel, Theme
from backend.app.models.documents import AnalysisResultV1, GlossaryTerm
from backend.app.models.profile import Preferences
from backend.app.tasks.queue import JobQueue
from tests.fakes import FakeLLM

ANALYSIS = AnalysisResultV1(
    summary="Employment agreement with a two-year non-compete.",
    key_points=["Two-year non-compete", "At-will employment"],
    risk_level=RiskLevel.high,
    glossary_terms=[GlossaryTerm(term="Non-compete", definition="Restriction on future work")],
)


@pytest.fixture
def documents(session_factory: async_sessionmaker[AsyncSession]) -> SqlDocumentRepository:
    return SqlDocumentRepository(session_factory)


@pytest.fixture
def chats(session_factory: async_sessionmaker[AsyncSession]) -> SqlChatRepository:
    return SqlChatRepository(session_factory)


@pytest.fixture
def profiles(session_factory: async_sessionmaker[AsyncSession]) -> SqlProfileRepository:
    return SqlProfileRepository(session_factory)


async def _create(documents: SqlDocumentRepository, ctx: RequestContext, title: str = "Contract"):
    return await documents.create_document(
        ctx,
        title=title,
        category=Category.business,
        file_ref="sha256:aaa",
        original_text="The employee agrees...",
    )


@pytest.mark.asyncio
async def test_create_and_get_document(
    documents: SqlDocumentRepository, ctx: RequestContext
) -> None:
    created = await _create(documents, ctx)

    fetched = await documents.get_document(created.document_id, ctx)

    assert fetched is not None
    assert fetched.title == "Contract"
    assert fetched.category == Category.business
    assert fetched.status == DocumentStatus.uploaded
    assert fetched.summary is None
    assert fetched.key_points is None


@pytest.mark.asyncio
async def test_documents_are_isolated_per_user(
    documents: SqlDocumentRepository, ctx: RequestContext, other_ctx: RequestContext
) -> None:
    """Test that DocumentRepository enforces user isolation."""
    mine = await _create(documents, ctx)
    theirs = await _create(documents, other_ctx, title="Theirs")

    assert await documents.get_document(theirs.document_id, ctx) is None
    assert [d.document_id for d in await documents.list_documents(ctx)] == [mine.document_id]
    assert await documents.update_notes(theirs.document_id, ctx, "hijack") is False

    untouched = await documents.get_document(theirs.document_id, other_ctx)
    assert untouched is not None
    assert untouched.notes is None


@pytest.mark.asyncio
async def test_claim_only_from_uploaded(
    documents: SqlDocumentRepository, ctx: RequestContext
) -> None:
    created = await _create(documents, ctx)

    claimed = await documents.claim_for_processing(created.document_id)
    assert claimed is not None
    assert claimed.status == DocumentStatus.processing

    # Second claim loses
    assert await documents.claim_for_processing(created.document_id) is None
    assert await documents.claim_for_processing(uuid.uuid4()) is None


@pytest.mark.asyncio
async def test_complete_analysis_writes_all_fields(
    documents: SqlDocumentRepository, ctx: RequestContext
) -> None:
    created = await _create(documents, ctx)
    await documents.claim_for_processing(created.document_id)

    await documents.complete_analysis(created.document_id, ANALYSIS)

    stored = await documents.get_document(created.document_id, ctx)
    assert stored is not None
    assert stored.status == DocumentStatus.completed
    assert stored.summary == ANALYSIS.summary
    assert stored.key_points == ANALYSIS.key_points
    assert stored.risk_level == RiskLevel.high
    assert stored.glossary_terms == ANALYSIS.glossary_terms


@pytest.mark.asyncio
async def test_completed_document_cannot_be_claimed(
    documents: SqlDocumentRepository, ctx: RequestContext
) -> None:
    created = await _create(documents, ctx)
    await documents.claim_for_processing(created.document_id)
    await documents.complete_analysis(created.document_id, ANALYSIS)

    assert await documents.claim_for_processing(created.document_id) is None


@pytest.mark.asyncio
async def test_revert_only_touches_status(
    documents: SqlDocumentRepository, ctx: RequestContext
) -> None:
    created = await _create(documents, ctx)
    await documents.update_notes(created.document_id, ctx, "check clause 7")
    await documents.claim_for_processing(created.document_id)

    await documents.revert_to_uploaded(created.document_id)

    stored = await documents.get_document(created.document_id, ctx)
    assert stored is not None
    assert stored.status == DocumentStatus.uploaded
    assert stored.notes == "check clause 7"
    assert stored.summary is None


@pytest.mark.asyncio
async def test_lifecycle_end_to_end_on_sql(
    documents: SqlDocumentRepository, ctx: RequestContext
) -> None:
    fake_llm = FakeLLM()
    queue = JobQueue(concurrency=2)
    await queue.start()
    try:
        lifecycle = DocumentLifecycle(documents, fake_llm, queue)
        document = await lifecycle.submit(
            ctx,
            title="Lease",
            category=Category.citizen,
            file_ref="sha256:bbb",
            original_text="Rent is due monthly.",
        )
        await queue.join()
    finally:
        await queue.stop()

    stored = await lifecycle.get_document(document.document_id, ctx)
    assert stored.status == DocumentStatus.completed
    assert stored.summary == fake_llm.analysis.summary


@pytest.mark.asyncio
async def test_chat_sessions_and_messages(
    chats: SqlChatRepository,
    documents: SqlDocumentRepository,
    ctx: RequestContext,
    other_ctx: RequestContext,
) -> None:
    document = await _create(documents, ctx)
    session = await chats.create_session(ctx, title="About it", document_id=document.document_id)

    assert (await chats.get_session(session.session_id, ctx)) == session
    assert await chats.get_session(session.session_id, other_ctx) is None
    assert await chats.list_sessions(other_ctx) == []
    internal = await chats.get_session_internal(session.session_id)
    assert internal is not None
    assert internal.document_id == document.document_id


@pytest.mark.asyncio
async def test_list_sessions_newest_first(
    chats: SqlChatRepository, ctx: RequestContext, other_ctx: RequestContext
) -> None:
    first = await chats.create_session(ctx, title="First")
    await asyncio.sleep(0.001)
    second = await chats.create_session(ctx, title="Second")
    await chats.create_session(other_ctx, title="Not mine")

    listed = await chats.list_sessions(ctx)

    assert [s.session_id for s in listed] == [second.session_id, first.session_id]


@pytest.mark.asyncio
async def test_message_timestamps_strictly_increase(
    chats: SqlChatRepository, ctx: RequestContext
) -> None:
    session = await chats.create_session(ctx, title="Rapid fire")

    for i in range(5):
        role = MessageRole.user if i % 2 == 0 else MessageRole.assistant
        await chats.add_message(session.session_id, role=role, content=f"message {i}")

    messages = await chats.list_messages(session.session_id)
    assert [m.content for m in messages] == [f"message {i}" for i in range(5)]
    timestamps = [m.timestamp for m in messages]
    assert all(earlier < later for earlier, later in zip(timestamps, timestamps[1:]))


@pytest.mark.asyncio
async def test_profile_upsert(profiles: SqlProfileRepository, ctx: RequestContext) -> None:
    assert await profiles.get_profile(ctx) is None

    await profiles.upsert_profile(ctx, category=Category.student, preferences=Preferences())
    updated = await profiles.upsert_profile(
        ctx,
        category=Category.business,
        preferences=Preferences(theme=Theme.dark, notifications=False),
    )

    stored = await profiles.get_profile(ctx)
    assert stored == updated
    assert stored is not None
    assert stored.category == Category.business
    assert stored.preferences.theme == Theme.dark
    assert stored.preferences.notifications is False
