"""Database engine and session factory for the SQL store adapters.

SQLite URLs are switched to the aiosqlite driver; an in-memory SQLite
database uses a single shared connection so every session sees the same data.
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from statement_ledger.models import Base


def to_async_url(database_url: str) -> str:
    """Rewrite a sync SQLite URL to its aiosqlite form; other URLs pass through."""
    if database_url.startswith("sqlite:///"):
        return database_url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
    return database_url


def create_engine_for_url(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Create an async engine for a database URL.

    Args:
        database_url: SQLAlchemy database URL (e.g., "sqlite:///./statement_ledger.db")
        echo: Log SQL statements
    """
    async_database_url = to_async_url(database_url)

    if async_database_url.startswith("sqlite"):
        if ":memory:" in async_database_url or async_database_url.endswith("://"):
            return create_async_engine(
                async_database_url,
                echo=echo,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        return create_async_engine(
            async_database_url, echo=echo, connect_args={"check_same_thread": False}
        )

    return create_async_engine(async_database_url, echo=echo, pool_pre_ping=True)


def create_session_factory(
    database_url: str, echo: bool = False
) -> async_sessionmaker[AsyncSession]:
    """
    Create an async session factory bound to a new engine.

    Example:
        ```python
        session_factory = create_session_factory("sqlite:///./statement_ledger.db")
        async with session_factory() as session:
            result = await session.execute(select(DuesYear))
        ```
    """
    engine = create_engine_for_url(database_url, echo=echo)
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def create_all(session_factory: async_sessionmaker[AsyncSession]) -> None:
    """Create all tables that do not exist yet (development databases and tests)."""
    async with session_factory() as session:
        await session.run_sync(
            lambda sync_session: Base.metadata.create_all(sync_session.connection())
        )
        await session.commit()


__all__ = ["to_async_url", "create_engine_for_url", "create_session_factory", "create_all"]
