"""SQLAlchemy implementation of IUserRepository.

The facade owns the transaction boundary: each public method opens exactly
one transaction on the request session and hands that session to the
reader and writer. Pronoun pairs inserted by a transaction reach the shared
cache only after it commits.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from users.domain.aggregates import (
    APIKey,
    EducationInfo,
    MailingAddress,
    MLHTerms,
    User,
)
from users.domain.inputs import NewUser, UserPatch
from users.domain.value_objects import OAuthIdentity
from users.infrastructure.observability import (
    DefaultUserRepositoryProbe,
    PronounProbe,
    UserRepositoryProbe,
)
from users.infrastructure.pronoun_cache import PronounCache
from users.infrastructure.pronoun_resolver import PronounResolver
from users.infrastructure.user_reader import UserReader, search_terms
from users.infrastructure.user_writer import UserWriter
from users.ports.exceptions import (
    EmptyUpdateError,
    UserAlreadyExistsError,
    UserNotFoundError,
    UserRepositoryError,
)
from users.ports.repositories import IUserRepository


def parse_user_id(user_id: str) -> int:
    """Convert an external user id to the integer primary key.

    Raises:
        UserNotFoundError: If the id is not a decimal integer
    """
    if not user_id.isascii() or not user_id.isdigit():
        raise UserNotFoundError("user not found")
    return int(user_id)


class UserRepository(IUserRepository):
    """PostgreSQL-backed repository for User aggregates."""

    def __init__(
        self,
        session: AsyncSession,
        pronoun_cache: PronounCache,
        probe: UserRepositoryProbe | None = None,
        pronoun_probe: PronounProbe | None = None,
    ) -> None:
        """Initialize repository with database session and the shared cache.

        Args:
            session: AsyncSession from FastAPI dependency injection
            pronoun_cache: Process-wide pronoun cache owned by the application
            probe: Optional domain probe for observability
            pronoun_probe: Optional probe for pronoun resolution events
        """
        self._session = session
        self._probe = probe or DefaultUserRepositoryProbe()
        self._pronouns = PronounResolver(pronoun_cache, probe=pronoun_probe)
        self._reader = UserReader(self._pronouns)
        self._writer = UserWriter(self._reader, self._pronouns)

    @asynccontextmanager
    async def _transaction(self, operation: str) -> AsyncIterator[AsyncSession]:
        try:
            async with self._session.begin():
                yield self._session
        except SQLAlchemyError as e:
            self._pronouns.discard_pending(self._session)
            self._probe.repository_error(operation, str(e))
            raise UserRepositoryError(f"{operation} failed") from e
        except BaseException:
            self._pronouns.discard_pending(self._session)
            raise
        self._pronouns.publish_pending(self._session)

    async def get_user_by_id(self, user_id: str) -> User:
        """Retrieve a user by id with pronouns resolved."""
        try:
            key = parse_user_id(user_id)
            async with self._transaction("get_user_by_id") as session:
                user = await self._reader.get_by_id(session, key)
        except UserNotFoundError:
            self._probe.user_not_found(user_id)
            raise
        self._probe.user_retrieved(user.id)
        return user

    async def get_user_by_oauth(self, identity: OAuthIdentity) -> User:
        """Retrieve the user registered with an external OAuth identity."""
        try:
            async with self._transaction("get_user_by_oauth") as session:
                user = await self._reader.get_by_oauth_identity(session, identity)
        except UserNotFoundError:
            self._probe.user_not_found(str(identity))
            raise
        self._probe.user_retrieved(user.id)
        return user

    async def search_users(self, name: str) -> list[User]:
        """Search users by name prefix terms."""
        async with self._transaction("search_users") as session:
            users = await self._reader.search_by_name(session, name)
        self._probe.users_searched(len(search_terms(name)), len(users))
        return users

    async def list_users(self, first: int, after_id: int) -> tuple[list[User], int]:
        """List a page of users with ids greater than after_id."""
        async with self._transaction("list_users") as session:
            users, total_count = await self._reader.list_page(session, first, after_id)
        self._probe.users_listed(len(users), total_count)
        return users, total_count

    async def get_oauth(self, user_id: str) -> OAuthIdentity | None:
        """Retrieve the OAuth identity of a user, None if absent."""
        key = parse_user_id(user_id)
        async with self._transaction("get_oauth") as session:
            return await self._reader.get_oauth_identity(session, key)

    async def get_mailing_address(self, user_id: str) -> MailingAddress | None:
        """Retrieve the mailing address of a user, None if absent."""
        key = parse_user_id(user_id)
        async with self._transaction("get_mailing_address") as session:
            return await self._reader.get_mailing_address(session, key)

    async def get_mlh_terms(self, user_id: str) -> MLHTerms | None:
        """Retrieve the MLH terms of a user, None if absent."""
        key = parse_user_id(user_id)
        async with self._transaction("get_mlh_terms") as session:
            return await self._reader.get_mlh_terms(session, key)

    async def get_education_info(self, user_id: str) -> EducationInfo | None:
        """Retrieve the education info of a user, None if absent."""
        key = parse_user_id(user_id)
        async with self._transaction("get_education_info") as session:
            return await self._reader.get_education_info(session, key)

    async def get_api_key(self, user_id: str) -> APIKey | None:
        """Retrieve the API key of a user, None if absent."""
        key = parse_user_id(user_id)
        async with self._transaction("get_api_key") as session:
            return await self._reader.get_api_key(session, key)

    async def create_user(self, identity: OAuthIdentity, new_user: NewUser) -> User:
        """Create a user bound to an OAuth identity."""
        try:
            async with self._transaction("create_user") as session:
                user = await self._writer.create(session, identity, new_user)
        except UserAlreadyExistsError:
            self._probe.duplicate_user(identity.provider.value)
            raise
        self._probe.user_created(user.id, identity.provider.value)
        return user

    async def update_user(self, user_id: str, patch: UserPatch) -> User:
        """Apply every present field of the patch and return the updated user."""
        if patch.is_empty():
            raise EmptyUpdateError("empty user field")
        key = parse_user_id(user_id)
        async with self._transaction("update_user") as session:
            user = await self._writer.update(session, key, patch)
        self._probe.user_updated(user.id, list(patch.present_fields()))
        return user

    async def delete_user(self, user_id: str) -> bool:
        """Delete a user and every row that references it."""
        key = parse_user_id(user_id)
        async with self._transaction("delete_user") as session:
            deleted = await self._writer.delete(session, key)
        self._probe.user_deleted(user_id)
        return deleted

    async def add_api_key(self, user_id: str, key: str) -> APIKey:
        """Store an API key for a user."""
        user_key = parse_user_id(user_id)
        async with self._transaction("add_api_key") as session:
            api_key = await self._writer.add_api_key(session, user_key, key)
        self._probe.api_key_added(user_id)
        return api_key

    async def delete_api_key(self, user_id: str) -> bool:
        """Delete the API key of a user."""
        key = parse_user_id(user_id)
        async with self._transaction("delete_api_key") as session:
            deleted = await self._writer.delete_api_key(session, key)
        self._probe.api_key_deleted(user_id, deleted)
        return deleted

    async def load_pronouns(self) -> int:
        """Load every stored pronoun pair into the cache."""
        async with self._transaction("load_pronouns") as session:
            return await self._pronouns.load_all(session)
