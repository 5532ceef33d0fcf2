"""Database dependency injection for FastAPI.

Provides the async engine, its sessionmaker, and a per-request session.
"""

from __future__ import annotations

import threading
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from infrastructure.database.engines import create_engine
from infrastructure.database.exceptions import DatabaseConnectionError
from infrastructure.observability import DefaultConnectionProbe
from infrastructure.settings import get_database_settings

# Module-level probe for observability
_probe = DefaultConnectionProbe()

# Created on first use
_engine: AsyncEngine | None = None
_sessionmaker: async_sessionmaker[AsyncSession] | None = None

# Thread lock for safe engine initialization
_engine_lock = threading.Lock()


def get_engine() -> AsyncEngine:
    """Get the database engine (singleton).

    Creates the engine and its sessionmaker on first call. Uses double-check
    locking for thread-safe initialization.

    Returns:
        Configured async engine
    """
    global _engine, _sessionmaker
    if _engine is None:
        with _engine_lock:
            # Double-check after acquiring lock
            if _engine is None:
                settings = get_database_settings()
                _engine = create_engine(settings)
                _sessionmaker = async_sessionmaker(
                    _engine,
                    expire_on_commit=False,
                    class_=AsyncSession,
                )
                _probe.engine_created(
                    host=settings.host,
                    database=settings.database,
                    pool_size=settings.pool_max_connections,
                )
    return _engine


def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """Get the sessionmaker bound to the application engine.

    Raises:
        DatabaseConnectionError: If the engine could not be initialized
    """
    get_engine()
    if _sessionmaker is None:
        raise DatabaseConnectionError("database engine is not initialized")
    return _sessionmaker


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a session for one request (FastAPI dependency).

    The session does NOT auto-commit. Repositories open their own
    transaction per operation with `async with session.begin()`.

    Yields:
        AsyncSession for database operations
    """
    async with get_sessionmaker()() as session:
        yield session


async def close_database_connections() -> None:
    """Dispose the engine on application shutdown.

    Also resets the sessionmaker to allow reinitialization.
    """
    global _engine, _sessionmaker

    if _engine is not None:
        await _engine.dispose()
        _probe.engine_disposed()
        _engine = None
        _sessionmaker = None
