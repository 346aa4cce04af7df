"""Database engine and session factory."""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from backend.app.config import Settings
from backend.app.db.models import Base


def normalize_async_url(database_url: str) -> str:
    """Map sync driver URLs onto their async drivers."""
    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if database_url.startswith("sqlite://"):
        return database_url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return database_url


def create_async_engine_from_settings(settings: Settings) -> AsyncEngine:
    """Create async SQLAlchemy engine from settings.

    Raises:
        ValueError: If DATABASE_URL is unset or empty.
    """
    if not settings.database_url:
        raise ValueError(
            "DATABASE_URL must be set to a valid connection string. "
            "Please configure the database_url setting."
        )

    database_url = normalize_async_url(settings.database_url)

    if database_url.startswith("sqlite") and ":memory:" in database_url:
        # One shared connection, otherwise every session sees an empty database
        return create_async_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=False,
        )

    return create_async_engine(database_url, pool_pre_ping=True, echo=False)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create sessionmaker for creating database sessions.

    Args:
        engine: Async SQLAlchemy engine

    Returns:
        Sessionmaker bound to the engine
    """
    return async_sessionmaker(bind=engine, expire_on_commit=False)


async def create_all(engine: AsyncEngine) -> None:
    """Create all tables (dev/test shortcut for running Alembic)."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
