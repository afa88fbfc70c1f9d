"""Async Session Factory — provides async DB sessions for juggled models.

Invariants:
    - expire_on_commit=False: coerced values stay readable after commit

Design Decisions:
    - Async engine, matching the aiosqlite/asyncpg drivers the host applications use
"""

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker


def create_session_factory(
    database_url: str, echo: bool = False,
) -> async_sessionmaker[AsyncSession]:
    """Create an async session factory for the given database URL."""
    engine = create_async_engine(database_url, echo=echo)
    return async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False,
    )
