"""Application-layer value objects for the Users bounded context.

These represent the authentication context of a request and the result
shapes returned by the resolver layer.
"""

from __future__ import annotations

from dataclasses import dataclass

from users.domain.aggregates import User
from users.domain.value_objects import Role


@dataclass(frozen=True)
class CurrentUser:
    """The authenticated caller, taken from access token claims."""

    user_id: str
    role: Role

    @property
    def is_admin(self) -> bool:
        """Return True when the caller holds the ADMIN role."""
        return self.role == Role.ADMIN

    def can_act_on(self, user_id: str) -> bool:
        """Return True when the caller is the target user or an admin."""
        return self.is_admin or self.user_id == user_id


@dataclass(frozen=True)
class PageInfo:
    """Cursors bounding a page of users."""

    start_cursor: str | None
    end_cursor: str | None


@dataclass(frozen=True)
class UsersConnection:
    """A page of users with the total user count."""

    total_count: int
    page_info: PageInfo
    users: list[User]


@dataclass(frozen=True)
class LoginPayload:
    """Outcome of an OAuth login.

    When the account exists the user and session tokens are set. Otherwise
    only the encrypted provider token is set, to be passed to register.
    """

    account_exists: bool
    user: User | None = None
    refresh_token: str | None = None
    access_token: str | None = None
    encrypted_oauth_access_token: str | None = None


@dataclass(frozen=True)
class RegistrationPayload:
    """Outcome of a registration: the new user and its session tokens."""

    user: User
    refresh_token: str
    access_token: str
