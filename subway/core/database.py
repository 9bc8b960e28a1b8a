"""Database configuration and session management."""

import threading
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from subway.core.config import settings
from subway.domain.errors import PersistenceError

logger = structlog.get_logger(__name__)

# Module-level globals for lazy initialization (fork-safety)
_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None

_engine_lock = threading.Lock()
_session_factory_lock = threading.Lock()


def get_engine() -> AsyncEngine:
    """
    Get or create database engine (lazy initialization).

    Lazy initialization keeps forked processes from inheriting an engine
    whose asyncio primitives are bound to the parent's event loop.
    Double-checked locking ensures only one engine instance is created.

    Returns:
        AsyncEngine: SQLAlchemy async engine
    """
    global _engine  # noqa: PLW0603
    if _engine is None:
        with _engine_lock:
            if _engine is None:  # Double-checked locking
                if settings.DEBUG:
                    # NullPool doesn't accept pool_size/max_overflow parameters
                    _engine = create_async_engine(
                        settings.DATABASE_URL,
                        echo=settings.DATABASE_ECHO,
                        poolclass=NullPool,
                    )
                else:
                    _engine = create_async_engine(
                        settings.DATABASE_URL,
                        echo=settings.DATABASE_ECHO,
                        pool_size=settings.DATABASE_POOL_SIZE,
                        max_overflow=settings.DATABASE_MAX_OVERFLOW,
                    )
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Get or create session factory (lazy initialization).

    Returns:
        async_sessionmaker[AsyncSession]: SQLAlchemy async session factory
    """
    global _session_factory  # noqa: PLW0603
    if _session_factory is None:
        with _session_factory_lock:
            if _session_factory is None:  # Double-checked locking
                _session_factory = async_sessionmaker(
                    get_engine(),
                    class_=AsyncSession,
                    expire_on_commit=False,
                    autoflush=False,
                )
    return _session_factory


async def get_db() -> AsyncGenerator[AsyncSession]:
    """
    Yield an async database session for one unit of work.

    Yields:
        AsyncSession: Database session
    """
    async with get_session_factory()() as session:
        try:
            yield session
        finally:
            await session.close()


async def dispose_engine() -> None:
    """Dispose the engine's connection pool and forget the cached singletons."""
    global _engine, _session_factory  # noqa: PLW0603
    with _session_factory_lock, _engine_lock:
        engine = _engine
        _engine = None
        _session_factory = None
    if engine is not None:
        await engine.dispose()


@asynccontextmanager
async def transaction(session: AsyncSession, operation: str, *, commit: bool = True) -> AsyncIterator[None]:
    """
    Run a block of row operations as one unit of work.

    Commits when the block finishes (unless ``commit`` is False, for reads).
    Any failure rolls the whole block back; database errors are re-raised as
    PersistenceError so callers never see a partially applied change.

    Args:
        session: Session the row operations run on
        operation: Short description used in the log event and error message
        commit: Whether to commit on success

    Raises:
        PersistenceError: If any SQLAlchemy operation in the block fails
    """
    try:
        yield
        if commit:
            await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error("transaction_rolled_back", operation=operation, error=str(e))
        msg = f"Failed to {operation}"
        raise PersistenceError(msg) from e
    except Exception:
        await session.rollback()
        raise
