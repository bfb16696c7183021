"""Database configuration and session management."""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    create_async_engine,
    async_sessionmaker,
)
from sqlalchemy.orm import declarative_base

from lifecycle.config import get_settings

settings = get_settings()

# Engine configuration
_engine_kwargs: dict = {
    "echo": settings.db_echo,
    "future": True,
}

# Add connection pool settings for non-SQLite databases
if not settings.is_sqlite:
    _engine_kwargs.update({
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_pre_ping": True,
        "pool_recycle": 3600,  # Recycle connections after 1 hour
    })

engine = create_async_engine(settings.database_url, **_engine_kwargs)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

Base = declarative_base()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get async database session.

    The whole request runs in one transaction that is committed here.

    Yields:
        AsyncSession: Database session
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


@asynccontextmanager
async def transaction(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """Run a block atomically on the given session.

    If the session has no open transaction, one is started and committed
    when the block succeeds or rolled back when it raises. If a transaction
    is already open, the block joins it: pending changes are flushed and the
    outermost owner decides about commit or rollback.

    Args:
        session: Database session.

    Yields:
        The same session.
    """
    if session.in_transaction():
        yield session
        await session.flush()
        return

    async with session.begin():
        yield session


async def init_db() -> None:
    """Initialize database tables.

    Creates every table registered on ``Base`` that does not exist yet.
    """
    # Import models to register them
    from lifecycle.models import (  # noqa: F401
        Workflow,
        TriggerInstance,
        StepInstance,
        Process,
        Setting,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
