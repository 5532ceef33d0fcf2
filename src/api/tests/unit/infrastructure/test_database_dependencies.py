"""Unit tests for database dependency injection.

Tests the FastAPI dependency providers for the async engine and sessions.
No connection is opened: engine creation is lazy.
"""

from unittest.mock import patch

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from infrastructure.database import DatabaseConnectionError
from infrastructure.database import dependencies
from infrastructure.database.dependencies import (
    close_database_connections,
    get_engine,
    get_session,
    get_sessionmaker,
)


@pytest.mark.asyncio
async def test_get_engine_returns_asyncpg_engine():
    """Test that get_engine returns an asyncpg-backed AsyncEngine."""
    try:
        engine = get_engine()

        assert isinstance(engine, AsyncEngine)
        assert engine.url.drivername == "postgresql+asyncpg"
    finally:
        await close_database_connections()


@pytest.mark.asyncio
async def test_engine_is_singleton():
    """Test that the engine is cached and reused."""
    try:
        assert get_engine() is get_engine()
    finally:
        await close_database_connections()


@pytest.mark.asyncio
async def test_get_session_yields_session():
    """Test that get_session yields an AsyncSession bound to the engine."""
    try:
        async for session in get_session():
            assert isinstance(session, AsyncSession)
            assert session.bind is get_engine()
    finally:
        await close_database_connections()


@pytest.mark.asyncio
async def test_close_resets_engine():
    """Test that closing allows a fresh engine to be created."""
    first = get_engine()
    await close_database_connections()
    try:
        assert get_engine() is not first
    finally:
        await close_database_connections()


def test_get_sessionmaker_raises_when_engine_missing(monkeypatch):
    """An uninitialized engine surfaces as a connection error, not an assert."""
    monkeypatch.setattr(dependencies, "_sessionmaker", None)

    with patch.object(dependencies, "get_engine"):
        with pytest.raises(DatabaseConnectionError):
            get_sessionmaker()
