"""Integration test fixtures for database tests.

These fixtures require a running PostgreSQL instance. Use docker-compose
for testing.
"""

from collections.abc import AsyncGenerator
import os

import pytest
import pytest_asyncio
from pydantic import SecretStr
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

import users.infrastructure.models  # noqa: F401
from infrastructure.database.engines import create_engine
from infrastructure.database.models import Base
from infrastructure.settings import DatabaseSettings
from users.domain.inputs import NewUser
from users.domain.value_objects import Pronouns, Race, ShirtSize
from users.infrastructure.pronoun_cache import PronounCache


@pytest.fixture(scope="session")
def integration_db_settings() -> DatabaseSettings:
    """Database settings for integration tests.

    Override with environment variables:
        USERS_DB_HOST, USERS_DB_PORT, etc.
    """
    return DatabaseSettings(
        host=os.getenv("USERS_DB_HOST", "localhost"),
        port=int(os.getenv("USERS_DB_PORT", "5432")),
        database=os.getenv("USERS_DB_DATABASE", "users_test"),
        username=os.getenv("USERS_DB_USERNAME", "users"),
        password=SecretStr(os.getenv("USERS_DB_PASSWORD", "users_dev_password")),
    )


@pytest_asyncio.fixture
async def engine(
    integration_db_settings: DatabaseSettings,
) -> AsyncGenerator[AsyncEngine, None]:
    """Provide an engine on a freshly created schema.

    Tables are truncated after each test so ids restart from one.
    """
    engine = create_engine(integration_db_settings)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    tables = ", ".join(table.name for table in Base.metadata.sorted_tables)
    async with engine.begin() as conn:
        await conn.execute(text(f"TRUNCATE {tables} RESTART IDENTITY CASCADE"))
    await engine.dispose()


@pytest.fixture
def sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
def pronoun_cache() -> PronounCache:
    return PronounCache()


@pytest.fixture
def new_user() -> NewUser:
    """Provide a registration profile with pronouns and a race list."""
    return NewUser(
        first_name="Ada",
        last_name="Lovelace",
        email="ada@example.com",
        phone_number="+15555550100",
        race=[Race.CAUCASIAN, Race.OTHER],
        shirt_size=ShirtSize.M,
        pronouns=Pronouns(subjective="she", objective="her"),
    )
