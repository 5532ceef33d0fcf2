"""User application service.

Resolver layer for user queries and mutations: authorization, input
validation and cursor handling around the user repository.
"""

from __future__ import annotations

from users.application.observability import (
    DefaultUserServiceProbe,
    UserServiceProbe,
)
from users.application.security import generate_api_key
from users.application.value_objects import CurrentUser, PageInfo, UsersConnection
from users.domain.aggregates import (
    APIKey,
    EducationInfo,
    MailingAddress,
    MLHTerms,
    User,
)
from users.domain.inputs import UserPatch
from users.domain.value_objects import OAuthIdentity
from users.ports.exceptions import (
    EmptyUpdateError,
    InvalidUserInputError,
    UnauthorizedError,
)
from users.ports.repositories import IUserRepository
from shared_kernel.pagination import InvalidCursorError, decode_cursor, encode_cursor

MAX_PAGE_SIZE = 100


class UserService:
    """Application service for user profiles."""

    def __init__(
        self,
        user_repository: IUserRepository,
        api_key_length: int = 32,
        probe: UserServiceProbe | None = None,
    ):
        """Initialize UserService with dependencies.

        Args:
            user_repository: Repository for user persistence
            api_key_length: Length of generated API keys
            probe: Optional domain probe for observability
        """
        self._user_repository = user_repository
        self._api_key_length = api_key_length
        self._probe = probe or DefaultUserServiceProbe()

    async def get_user(self, user_id: str) -> User:
        """Return a user by id.

        Raises:
            UserNotFoundError: If no user has this id
        """
        return await self._user_repository.get_user_by_id(user_id)

    async def me(self, current_user: CurrentUser) -> User:
        """Return the caller's own profile."""
        return await self._user_repository.get_user_by_id(current_user.user_id)

    async def list_users(
        self, current_user: CurrentUser, first: int, after: str | None = None
    ) -> UsersConnection:
        """Return a page of users after the given cursor.

        Args:
            current_user: The caller, who must be an admin
            first: Page size between 1 and MAX_PAGE_SIZE
            after: Cursor from a previous page, None for the first page

        Raises:
            UnauthorizedError: If the caller is not an admin
            InvalidUserInputError: If first or after is invalid
        """
        self._require_admin(current_user, "list_users")
        if not 1 <= first <= MAX_PAGE_SIZE:
            self._probe.invalid_input("list_users", "page_size_out_of_range")
            raise InvalidUserInputError(
                f"first must be between 1 and {MAX_PAGE_SIZE}"
            )
        try:
            after_id = decode_cursor(after)
        except InvalidCursorError as e:
            self._probe.invalid_input("list_users", "invalid_cursor")
            raise InvalidUserInputError(str(e)) from e

        users, total_count = await self._user_repository.list_users(first, after_id)
        page_info = PageInfo(start_cursor=None, end_cursor=None)
        if users:
            page_info = PageInfo(
                start_cursor=encode_cursor(users[0].id),
                end_cursor=encode_cursor(users[-1].id),
            )
        self._probe.users_page_served(len(users), total_count)
        return UsersConnection(
            total_count=total_count, page_info=page_info, users=users
        )

    async def search_users(self, current_user: CurrentUser, name: str) -> list[User]:
        """Search users by name.

        Raises:
            UnauthorizedError: If the caller is not an admin
            InvalidUserInputError: If the name contains non-ASCII characters
        """
        self._require_admin(current_user, "search_users")
        if not name.isascii():
            self._probe.invalid_input("search_users", "non_ascii_name")
            raise InvalidUserInputError("the name must include only ascii characters")
        return await self._user_repository.search_users(name)

    async def update_user(
        self, current_user: CurrentUser, user_id: str, patch: UserPatch
    ) -> User:
        """Apply a partial update to a user.

        Raises:
            EmptyUpdateError: If the patch has no present fields
            UnauthorizedError: If the caller is neither the user nor an admin
            UserNotFoundError: If the user does not exist
        """
        if patch.is_empty():
            self._probe.invalid_input("update_user", "empty_patch")
            raise EmptyUpdateError("no field has been updated")
        self._require_self_or_admin(current_user, user_id, "update_user")

        user = await self._user_repository.update_user(user_id, patch)
        self._probe.user_updated(user_id, current_user.user_id)
        return user

    async def delete_user(self, current_user: CurrentUser, user_id: str) -> bool:
        """Delete a user and everything that references it.

        Raises:
            UnauthorizedError: If the caller is neither the user nor an admin
            UserNotFoundError: If the user does not exist
        """
        self._require_self_or_admin(current_user, user_id, "delete_user")
        deleted = await self._user_repository.delete_user(user_id)
        self._probe.user_deleted(user_id, current_user.user_id)
        return deleted

    async def add_api_key(self, current_user: CurrentUser, user_id: str) -> APIKey:
        """Generate and store a new API key for a user.

        Raises:
            UnauthorizedError: If the caller is neither the user nor an admin
            APIKeyAlreadyExistsError: If the user already holds a key
        """
        self._require_self_or_admin(current_user, user_id, "add_api_key")
        api_key = await self._user_repository.add_api_key(
            user_id, generate_api_key(self._api_key_length)
        )
        self._probe.api_key_issued(user_id, current_user.user_id)
        return api_key

    async def delete_api_key(self, current_user: CurrentUser, user_id: str) -> bool:
        """Delete a user's API key.

        Raises:
            UnauthorizedError: If the caller is neither the user nor an admin
        """
        self._require_self_or_admin(current_user, user_id, "delete_api_key")
        deleted = await self._user_repository.delete_api_key(user_id)
        self._probe.api_key_revoked(user_id, current_user.user_id, deleted)
        return deleted

    async def get_oauth(
        self, current_user: CurrentUser, user_id: str
    ) -> OAuthIdentity | None:
        """Return a user's OAuth identity."""
        self._require_self_or_admin(current_user, user_id, "get_oauth")
        return await self._user_repository.get_oauth(user_id)

    async def get_mailing_address(
        self, current_user: CurrentUser, user_id: str
    ) -> MailingAddress | None:
        """Return a user's mailing address."""
        self._require_self_or_admin(current_user, user_id, "get_mailing_address")
        return await self._user_repository.get_mailing_address(user_id)

    async def get_mlh_terms(
        self, current_user: CurrentUser, user_id: str
    ) -> MLHTerms | None:
        """Return a user's MLH terms."""
        self._require_self_or_admin(current_user, user_id, "get_mlh_terms")
        return await self._user_repository.get_mlh_terms(user_id)

    async def get_education_info(
        self, current_user: CurrentUser, user_id: str
    ) -> EducationInfo | None:
        """Return a user's education info."""
        self._require_self_or_admin(current_user, user_id, "get_education_info")
        return await self._user_repository.get_education_info(user_id)

    async def get_api_key(
        self, current_user: CurrentUser, user_id: str
    ) -> APIKey | None:
        """Return a user's API key."""
        self._require_self_or_admin(current_user, user_id, "get_api_key")
        return await self._user_repository.get_api_key(user_id)

    def _require_admin(self, current_user: CurrentUser, operation: str) -> None:
        if not current_user.is_admin:
            self._probe.access_denied(current_user.user_id, "*", operation)
            raise UnauthorizedError(f"{operation} requires the ADMIN role")

    def _require_self_or_admin(
        self, current_user: CurrentUser, user_id: str, operation: str
    ) -> None:
        if not current_user.can_act_on(user_id):
            self._probe.access_denied(current_user.user_id, user_id, operation)
            raise UnauthorizedError(
                f"unauthorized to {operation.replace('_', ' ')} for a user that is not you"
            )
