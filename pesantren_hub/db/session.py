"""
db/session.py
-------------
Async SQLAlchemy engine and session factory.

The engine is built once at process start (see main.lifespan) and the
session factory is handed to the facade explicitly; nothing in the service
layer reaches for a module-level connection.

Design decisions:
  - AsyncEngine with asyncpg driver for non-blocking I/O.
  - Connection pool sized by DATABASE_POOL_SIZE + DATABASE_MAX_OVERFLOW
    (server databases only; SQLite uses the driver default).
  - pool_pre_ping=True: validates connections before checkout to handle
    stale connections after DB restarts or idle timeouts.
  - expire_on_commit=False: avoids lazy-load errors after commit in async
    context (attributes are already loaded, no implicit SELECT needed).
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from pesantren_hub.core.config import Settings


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    pool_options = {}
    if not settings.is_sqlite:
        pool_options = {
            "pool_size": settings.DATABASE_POOL_SIZE,
            "max_overflow": settings.DATABASE_MAX_OVERFLOW,
            "pool_pre_ping": True,
            "pool_recycle": 3600,  # Recycle connections every hour
        }
    return create_async_engine(
        settings.DATABASE_URL,
        echo=settings.DATABASE_ECHO,
        **pool_options,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@asynccontextmanager
async def unit_of_work(
    sessions: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """
    One session, one transaction.
    Commits when the block exits cleanly, rolls back on any exception.

    Usage:
        async with unit_of_work(sessions) as db:
            db.add(row)
    """
    async with sessions() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
