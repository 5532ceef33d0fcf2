"""Repository protocols (ports) for the Users bounded context.

The repository owns the transaction boundary: every method runs in exactly
one transaction and either commits fully or leaves the store untouched.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from users.domain.aggregates import (
    APIKey,
    EducationInfo,
    MailingAddress,
    MLHTerms,
    User,
)
from users.domain.inputs import NewUser, UserPatch
from users.domain.value_objects import OAuthIdentity


@runtime_checkable
class IUserRepository(Protocol):
    """Repository for User aggregate persistence."""

    async def get_user_by_id(self, user_id: str) -> User:
        """Retrieve a user by id with pronouns resolved.

        Raises:
            UserNotFoundError: If no user has this id (including non-numeric ids)
        """
        ...

    async def get_user_by_oauth(self, identity: OAuthIdentity) -> User:
        """Retrieve the user registered with an external OAuth identity.

        Raises:
            UserNotFoundError: If the identity has no account yet
        """
        ...

    async def search_users(self, name: str) -> list[User]:
        """Search users by name prefix terms.

        Returns:
            At most ten users; empty when nothing matches
        """
        ...

    async def list_users(self, first: int, after_id: int) -> tuple[list[User], int]:
        """List a page of users with ids greater than after_id.

        Returns:
            Tuple of (users ordered by id descending, total user count)
        """
        ...

    async def get_oauth(self, user_id: str) -> OAuthIdentity | None:
        """Retrieve the OAuth identity of a user, None if absent."""
        ...

    async def get_mailing_address(self, user_id: str) -> MailingAddress | None:
        """Retrieve the mailing address of a user, None if absent."""
        ...

    async def get_mlh_terms(self, user_id: str) -> MLHTerms | None:
        """Retrieve the MLH terms of a user, None if absent."""
        ...

    async def get_education_info(self, user_id: str) -> EducationInfo | None:
        """Retrieve the education info of a user, None if absent."""
        ...

    async def get_api_key(self, user_id: str) -> APIKey | None:
        """Retrieve the API key of a user, None if absent."""
        ...

    async def create_user(self, identity: OAuthIdentity, new_user: NewUser) -> User:
        """Create a user bound to an OAuth identity.

        Raises:
            UserAlreadyExistsError: If the identity is already registered
        """
        ...

    async def update_user(self, user_id: str, patch: UserPatch) -> User:
        """Apply every present field of the patch and return the updated user.

        Raises:
            EmptyUpdateError: If the patch has no present fields
            UserNotFoundError: If the user (or a patched satellite row) is missing
        """
        ...

    async def delete_user(self, user_id: str) -> bool:
        """Delete a user and every row that references it.

        Raises:
            UserNotFoundError: If no user has this id
        """
        ...

    async def add_api_key(self, user_id: str, key: str) -> APIKey:
        """Store an API key for a user.

        Raises:
            UserNotFoundError: If no user has this id
            APIKeyAlreadyExistsError: If the user already holds a key
        """
        ...

    async def delete_api_key(self, user_id: str) -> bool:
        """Delete the API key of a user.

        Returns:
            True if a key was deleted, False if the user had none
        """
        ...

    async def load_pronouns(self) -> int:
        """Load every stored pronoun pair into the cache.

        Returns:
            Number of pronoun pairs loaded
        """
        ...
