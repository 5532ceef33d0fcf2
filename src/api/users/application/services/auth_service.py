"""Authentication application service.

Resolver layer for the OAuth login flow: redirect link, login, register,
access token refresh and account lookup by provider token.
"""

from __future__ import annotations

import secrets

from shared_kernel.auth import OAuthClient, TokenCipher, TokenService
from users.application.observability import (
    AuthServiceProbe,
    DefaultAuthServiceProbe,
)
from users.application.security import generate_oauth_state
from users.application.value_objects import LoginPayload, RegistrationPayload
from users.domain.aggregates import User
from users.domain.inputs import NewUser
from users.domain.value_objects import OAuthIdentity, Provider
from users.ports.exceptions import InvalidOAuthStateError, UserNotFoundError
from users.ports.repositories import IUserRepository


class AuthService:
    """Application service for OAuth login and session tokens."""

    def __init__(
        self,
        user_repository: IUserRepository,
        oauth_client: OAuthClient,
        token_service: TokenService,
        token_cipher: TokenCipher,
        probe: AuthServiceProbe | None = None,
    ):
        self._user_repository = user_repository
        self._oauth_client = oauth_client
        self._token_service = token_service
        self._token_cipher = token_cipher
        self._probe = probe or DefaultAuthServiceProbe()

    def get_auth_redirect_link(self, provider: Provider) -> tuple[str, str]:
        """Build the provider consent URL.

        Returns:
            Tuple of (url, state). The caller stores state in the
            `oauthstate` cookie and compares it on login.
        """
        state = generate_oauth_state()
        url = self._oauth_client.auth_code_url(provider.value, state)
        self._probe.redirect_link_issued(provider.value)
        return url, state

    async def login(
        self,
        provider: Provider,
        code: str,
        state: str,
        expected_state: str | None,
    ) -> LoginPayload:
        """Complete an OAuth login.

        A registered identity gets session tokens. An unregistered one gets
        the provider token back, encrypted, for the register call.

        Raises:
            InvalidOAuthStateError: If state does not match expected_state
            OAuthExchangeError: If the provider rejects the code
        """
        if not expected_state or not secrets.compare_digest(state, expected_state):
            self._probe.oauth_state_mismatch(provider.value)
            raise InvalidOAuthStateError("invalid oauth state")

        access_token = await self._oauth_client.exchange_code(provider.value, code)
        uid = await self._oauth_client.get_uid(provider.value, access_token)

        try:
            user = await self._user_repository.get_user_by_oauth(
                OAuthIdentity(provider=provider, uid=uid)
            )
        except UserNotFoundError:
            self._probe.login_unregistered(provider.value)
            return LoginPayload(
                account_exists=False,
                encrypted_oauth_access_token=self._token_cipher.encrypt(access_token),
            )

        refresh_token, session_token = self._token_service.new_token_pair(
            user.id, user.role.value
        )
        self._probe.login_succeeded(user.id, provider.value)
        return LoginPayload(
            account_exists=True,
            user=user,
            refresh_token=refresh_token,
            access_token=session_token,
        )

    async def register(
        self,
        provider: Provider,
        encrypted_oauth_access_token: str,
        new_user: NewUser,
    ) -> RegistrationPayload:
        """Create an account for the identity behind an encrypted provider token.

        Raises:
            InvalidTokenError: If the encrypted token cannot be decrypted
            OAuthExchangeError: If the provider lookup fails
            UserAlreadyExistsError: If the identity is already registered
        """
        try:
            access_token = self._token_cipher.decrypt(encrypted_oauth_access_token)
            uid = await self._oauth_client.get_uid(provider.value, access_token)
            user = await self._user_repository.create_user(
                OAuthIdentity(provider=provider, uid=uid), new_user
            )
        except Exception as e:
            self._probe.registration_failed(provider.value, str(e))
            raise

        refresh_token, session_token = self._token_service.new_token_pair(
            user.id, user.role.value
        )
        self._probe.user_registered(user.id, provider.value)
        return RegistrationPayload(
            user=user, refresh_token=refresh_token, access_token=session_token
        )

    async def find_user_by_oauth_access_token(
        self, provider: Provider, access_token: str
    ) -> User:
        """Return the account behind a raw provider access token.

        Raises:
            OAuthExchangeError: If the provider rejects the token
            UserNotFoundError: If the identity has no account
        """
        uid = await self._oauth_client.get_uid(provider.value, access_token)
        return await self._user_repository.get_user_by_oauth(
            OAuthIdentity(provider=provider, uid=uid)
        )

    def refresh_jwt(self, refresh_token: str) -> str:
        """Issue a new access token from a refresh token.

        Raises:
            InvalidTokenError: If the refresh token is invalid or expired
        """
        return self._token_service.new_access_token(refresh_token)
