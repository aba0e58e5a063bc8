"""Database engine, session factory, and the declarative base.

Every request gets one AsyncSession from ``get_db()``.  Write services take
that session as an explicit argument and wrap their statements in
``transaction(db)`` so the commit/rollback boundary is visible at the call
site instead of hiding inside the dependency.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    create_async_engine,
    async_sessionmaker,
)
from sqlalchemy.orm import DeclarativeBase

from app.config import settings

engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    pool_size=20,
    max_overflow=10,
    pool_pre_ping=True,
)

async_session = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


class Base(DeclarativeBase):
    pass


# ── Session dependency ──────────────────────────────────────

async def get_db() -> AsyncIterator[AsyncSession]:
    """Yield a session for the current request; always closed on exit."""
    async with async_session() as session:
        yield session


@asynccontextmanager
async def transaction(db: AsyncSession) -> AsyncIterator[AsyncSession]:
    """Run a block of statements as one unit.

    Commits when the block finishes, rolls back and re-raises on any
    exception.  Nothing is retried.
    """
    try:
        yield db
        await db.commit()
    except Exception:
        await db.rollback()
        raise
