"""Unit tests for the main FastAPI application.

Covers health endpoints and the lifespan that warms the pronoun cache.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import insert
from sqlalchemy.exc import OperationalError

from infrastructure.database import DatabaseConnectionError
from infrastructure.database.dependencies import get_session
from users.domain.value_objects import Pronouns
from users.infrastructure.models import PronounModel
from users.infrastructure.pronoun_cache import PronounCache
from users.ports.exceptions import UserRepositoryError


class TestHealthEndpoints:
    """Tests for /health and /health/db."""

    def test_health_returns_ok(self) -> None:
        from main import app

        client = TestClient(app)

        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_health_db_reports_connected(self) -> None:
        from main import app

        session = MagicMock()
        session.execute = AsyncMock()
        app.dependency_overrides[get_session] = lambda: session
        try:
            response = TestClient(app).get("/health/db")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "connected": True}

    def test_health_db_reports_driver_error(self) -> None:
        from main import app

        session = MagicMock()
        session.execute = AsyncMock(side_effect=RuntimeError("connection refused"))
        app.dependency_overrides[get_session] = lambda: session
        try:
            response = TestClient(app).get("/health/db")
        finally:
            app.dependency_overrides.clear()

        body = response.json()
        assert body["status"] == "error"
        assert body["connected"] is False
        assert "connection refused" in body["error"]


class TestWarmPronounCache:
    """Tests for loading stored pronoun pairs at startup."""

    @pytest.mark.asyncio
    async def test_loads_every_stored_pair(self, sessionmaker) -> None:
        from main import warm_pronoun_cache

        async with sessionmaker() as session:
            async with session.begin():
                await session.execute(
                    insert(PronounModel),
                    [
                        {"id": 1, "subjective": "she", "objective": "her"},
                        {"id": 2, "subjective": "they", "objective": "them"},
                    ],
                )

        cache = PronounCache()
        with patch("main.get_sessionmaker", return_value=sessionmaker):
            entries = await warm_pronoun_cache(cache)

        assert entries == 2
        assert cache.get_by_id(2) == Pronouns("they", "them")
        assert cache.get_by_pronouns(Pronouns("she", "her")) == 1

    @pytest.mark.asyncio
    async def test_store_failure_raises_connection_error(self, sessionmaker) -> None:
        from main import warm_pronoun_cache

        with (
            patch("main.get_sessionmaker", return_value=sessionmaker),
            patch(
                "main.UserRepository.load_pronouns",
                AsyncMock(side_effect=UserRepositoryError("load_pronouns failed")),
            ),
        ):
            with pytest.raises(DatabaseConnectionError):
                await warm_pronoun_cache(PronounCache())


class TestLifespan:
    """Tests for the application lifespan."""

    def test_startup_stores_warmed_cache_on_app_state(self) -> None:
        from main import app

        probe = MagicMock()
        with (
            patch("main.configure_logging"),
            patch("main.DefaultStartupProbe", return_value=probe),
            patch("main.warm_pronoun_cache", AsyncMock(return_value=3)),
            patch("main.close_database_connections", AsyncMock()) as close,
        ):
            with TestClient(app):
                assert isinstance(app.state.pronoun_cache, PronounCache)
                probe.pronoun_cache_warmed.assert_called_once_with(entries=3)
                close.assert_not_awaited()

            close.assert_awaited_once()
            probe.application_stopped.assert_called_once_with()

    def test_startup_fails_when_cache_cannot_be_warmed(self) -> None:
        from main import app

        probe = MagicMock()
        error = OperationalError("SELECT", {}, Exception("connection refused"))
        with (
            patch("main.configure_logging"),
            patch("main.DefaultStartupProbe", return_value=probe),
            patch("main.warm_pronoun_cache", AsyncMock(side_effect=error)),
            patch("main.close_database_connections", AsyncMock()) as close,
        ):
            with pytest.raises(OperationalError):
                with TestClient(app):
                    pass

            probe.pronoun_cache_warm_failed.assert_called_once()
            close.assert_awaited_once()
            probe.pronoun_cache_warmed.assert_not_called()
