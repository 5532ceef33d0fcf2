"""Unit test fixtures.

Repository tests run against an in-memory SQLite database through
aiosqlite. The schema comes from the ORM metadata, so PostgreSQL-only
pieces (text arrays, the full-text index) fall back to their portable
variants.
"""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime

import pytest
import pytest_asyncio
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

import users.infrastructure.models  # noqa: F401
from infrastructure.database.models import Base
from users.domain.aggregates import EducationInfo, MailingAddress, MLHTerms
from users.domain.inputs import NewUser
from users.domain.value_objects import LevelOfStudy, Pronouns, Race, ShirtSize
from users.infrastructure.pronoun_cache import PronounCache
from users.infrastructure.user_repository import UserRepository


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Provide an in-memory SQLite engine with the users schema created."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # Let SQLAlchemy own BEGIN so SAVEPOINTs behave as on PostgreSQL
    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Provide a sessionmaker bound to the test engine."""
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


@pytest_asyncio.fixture
async def session(
    sessionmaker: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Provide a session with no transaction open."""
    async with sessionmaker() as session:
        yield session


@pytest.fixture
def pronoun_cache() -> PronounCache:
    """Provide an empty pronoun cache."""
    return PronounCache()


@pytest.fixture
def user_repository(session: AsyncSession, pronoun_cache: PronounCache) -> UserRepository:
    """Provide a repository over the test session."""
    return UserRepository(session=session, pronoun_cache=pronoun_cache)


@pytest.fixture
def new_user() -> NewUser:
    """Provide a complete registration profile."""
    return NewUser(
        first_name="Ada",
        last_name="Lovelace",
        email="ada@example.com",
        phone_number="+15555550100",
        age=28,
        gender="female",
        race=[Race.CAUCASIAN],
        years_of_experience=4.5,
        shirt_size=ShirtSize.M,
        pronouns=Pronouns(subjective="she", objective="her"),
        mailing_address=MailingAddress(
            country="US",
            state="FL",
            city="Gainesville",
            postal_code="32611",
            address_lines=["1 Museum Rd", "Apt 2"],
        ),
        education_info=EducationInfo(
            name="University of Florida",
            major="Computer Science",
            graduation_date=datetime(2027, 5, 1, tzinfo=UTC),
            level=LevelOfStudy.JUNIOR,
        ),
        mlh=MLHTerms(send_messages=True, share_info=False, code_of_conduct=True),
    )


@pytest.fixture
def minimal_user() -> NewUser:
    """Provide a registration profile with only the required fields."""
    return NewUser(
        first_name="Grace",
        last_name="Hopper",
        email="grace@example.com",
        phone_number="+15555550101",
    )
