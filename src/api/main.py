"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database import DatabaseConnectionError
from infrastructure.database.dependencies import (
    close_database_connections,
    get_session,
    get_sessionmaker,
)
from infrastructure.logging import configure_logging
from infrastructure.observability import DefaultStartupProbe
from infrastructure.settings import get_settings
from infrastructure.version import __version__
from users.infrastructure.pronoun_cache import PronounCache
from users.infrastructure.user_repository import UserRepository
from users.ports.exceptions import UserRepositoryError
from users.presentation import auth_router, users_router


async def warm_pronoun_cache(cache: PronounCache) -> int:
    """Load every stored pronoun pair into the cache.

    Raises:
        DatabaseConnectionError: If the pronouns table cannot be read
    """
    async with get_sessionmaker()() as session:
        repository = UserRepository(session=session, pronoun_cache=cache)
        try:
            return await repository.load_pronouns()
        except UserRepositoryError as e:
            raise DatabaseConnectionError("could not load pronouns") from e


@asynccontextmanager
async def users_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - Logging configuration
    - The process-wide pronoun cache, warmed before serving requests
    - Engine disposal on shutdown
    """
    configure_logging(get_settings().debug)
    probe = DefaultStartupProbe()

    cache = PronounCache()
    try:
        entries = await warm_pronoun_cache(cache)
    except Exception as e:
        probe.pronoun_cache_warm_failed(error=str(e))
        await close_database_connections()
        raise
    probe.pronoun_cache_warmed(entries=entries)
    app.state.pronoun_cache = cache

    yield

    await close_database_connections()
    probe.application_stopped()


app = FastAPI(
    title="Hackathon Users API",
    description="Identity and profile service for hackathon participants",
    version=__version__,
    lifespan=users_lifespan,
)

app.include_router(auth_router)
app.include_router(users_router)


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok"}


@app.get("/health/db")
async def health_db(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> dict:
    """Check database connection health."""
    try:
        await session.execute(text("SELECT 1"))
        return {"status": "ok", "connected": True}
    except Exception as e:
        return {"status": "error", "connected": False, "error": str(e)}
