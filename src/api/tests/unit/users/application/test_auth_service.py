"""Unit tests for AuthService."""

from unittest.mock import create_autospec

import pytest
from cryptography.fernet import Fernet

from shared_kernel.auth import (
    InvalidTokenError,
    OAuthClient,
    OAuthExchangeError,
    TokenCipher,
    TokenService,
    TokenServiceProbe,
    TokenType,
)
from users.application.observability import AuthServiceProbe
from users.application.services.auth_service import AuthService
from users.domain.aggregates import User
from users.domain.inputs import NewUser
from users.domain.value_objects import OAuthIdentity, Provider, Role
from users.ports.exceptions import (
    InvalidOAuthStateError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from users.ports.repositories import IUserRepository

ADA = User(
    id="7",
    first_name="Ada",
    last_name="Lovelace",
    email="ada@example.com",
    phone_number="+15555550100",
    role=Role.ADMIN,
)

NEW_ADA = NewUser(
    first_name="Ada",
    last_name="Lovelace",
    email="ada@example.com",
    phone_number="+15555550100",
)


@pytest.fixture
def mock_user_repository():
    """Create mock user repository."""
    return create_autospec(IUserRepository, instance=True)


@pytest.fixture
def mock_oauth_client():
    """Create mock OAuth client that hands out a provider token for uid 1001."""
    client = create_autospec(OAuthClient, instance=True)
    client.auth_code_url.return_value = "https://github.com/login/oauth/authorize?x=1"
    client.exchange_code.return_value = "provider-token"
    client.get_uid.return_value = "1001"
    return client


@pytest.fixture
def token_service():
    return TokenService(
        secret="test-secret",
        probe=create_autospec(TokenServiceProbe, instance=True),
    )


@pytest.fixture
def token_cipher():
    return TokenCipher(Fernet.generate_key().decode())


@pytest.fixture
def mock_probe():
    """Create mock auth service probe."""
    return create_autospec(AuthServiceProbe, instance=True)


@pytest.fixture
def auth_service(
    mock_user_repository, mock_oauth_client, token_service, token_cipher, mock_probe
):
    """Create AuthService with mock dependencies."""
    return AuthService(
        user_repository=mock_user_repository,
        oauth_client=mock_oauth_client,
        token_service=token_service,
        token_cipher=token_cipher,
        probe=mock_probe,
    )


class TestRedirectLink:
    """Tests for the consent URL."""

    def test_returns_url_and_fresh_state(self, auth_service, mock_oauth_client):
        url, state = auth_service.get_auth_redirect_link(Provider.GITHUB)
        _, other_state = auth_service.get_auth_redirect_link(Provider.GITHUB)

        assert url.startswith("https://github.com/")
        assert state != other_state
        mock_oauth_client.auth_code_url.assert_any_call("GITHUB", state)


class TestLogin:
    """Tests for the OAuth login branches."""

    @pytest.mark.asyncio
    async def test_registered_identity_gets_session_tokens(
        self, auth_service, mock_user_repository, token_service, mock_probe
    ):
        mock_user_repository.get_user_by_oauth.return_value = ADA

        payload = await auth_service.login(
            Provider.GITHUB, code="code", state="s1", expected_state="s1"
        )

        assert payload.account_exists is True
        assert payload.user == ADA
        assert payload.encrypted_oauth_access_token is None
        claims = token_service.parse_token(payload.access_token, TokenType.ACCESS)
        assert claims.user_id == "7"
        assert claims.role == "ADMIN"
        token_service.parse_token(payload.refresh_token, TokenType.REFRESH)
        mock_user_repository.get_user_by_oauth.assert_awaited_once_with(
            OAuthIdentity(provider=Provider.GITHUB, uid="1001")
        )
        mock_probe.login_succeeded.assert_called_once_with("7", "GITHUB")

    @pytest.mark.asyncio
    async def test_unregistered_identity_gets_encrypted_provider_token(
        self, auth_service, mock_user_repository, token_cipher
    ):
        mock_user_repository.get_user_by_oauth.side_effect = UserNotFoundError("nope")

        payload = await auth_service.login(
            Provider.GMAIL, code="code", state="s1", expected_state="s1"
        )

        assert payload.account_exists is False
        assert payload.access_token is None
        assert payload.user is None
        assert token_cipher.decrypt(payload.encrypted_oauth_access_token) == (
            "provider-token"
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("expected_state", [None, "", "other"])
    async def test_state_mismatch_is_rejected_before_exchange(
        self, auth_service, mock_oauth_client, mock_probe, expected_state
    ):
        with pytest.raises(InvalidOAuthStateError):
            await auth_service.login(
                Provider.GITHUB, code="code", state="s1", expected_state=expected_state
            )

        mock_oauth_client.exchange_code.assert_not_called()
        mock_probe.oauth_state_mismatch.assert_called_once_with("GITHUB")

    @pytest.mark.asyncio
    async def test_exchange_failure_propagates(self, auth_service, mock_oauth_client):
        mock_oauth_client.exchange_code.side_effect = OAuthExchangeError("rejected")

        with pytest.raises(OAuthExchangeError):
            await auth_service.login(
                Provider.GITHUB, code="bad", state="s1", expected_state="s1"
            )


class TestRegister:
    """Tests for registration with an encrypted provider token."""

    @pytest.mark.asyncio
    async def test_creates_user_for_token_owner(
        self, auth_service, mock_user_repository, mock_oauth_client, token_cipher
    ):
        mock_user_repository.create_user.return_value = ADA
        encrypted = token_cipher.encrypt("provider-token")

        payload = await auth_service.register(Provider.GITHUB, encrypted, NEW_ADA)

        assert payload.user == ADA
        assert payload.access_token
        assert payload.refresh_token
        mock_oauth_client.get_uid.assert_awaited_once_with("GITHUB", "provider-token")
        mock_user_repository.create_user.assert_awaited_once_with(
            OAuthIdentity(provider=Provider.GITHUB, uid="1001"), NEW_ADA
        )

    @pytest.mark.asyncio
    async def test_tampered_token_is_rejected(
        self, auth_service, mock_user_repository, mock_probe
    ):
        with pytest.raises(InvalidTokenError):
            await auth_service.register(Provider.GITHUB, "not-a-fernet-token", NEW_ADA)

        mock_user_repository.create_user.assert_not_called()
        mock_probe.registration_failed.assert_called_once()

    @pytest.mark.asyncio
    async def test_duplicate_registration_propagates(
        self, auth_service, mock_user_repository, token_cipher
    ):
        mock_user_repository.create_user.side_effect = UserAlreadyExistsError("dup")

        with pytest.raises(UserAlreadyExistsError):
            await auth_service.register(
                Provider.GITHUB, token_cipher.encrypt("provider-token"), NEW_ADA
            )


class TestFindUserByOAuthAccessToken:
    """Tests for resolving an account from a raw provider token."""

    @pytest.mark.asyncio
    async def test_returns_account_for_provider_uid(
        self, auth_service, mock_oauth_client, mock_user_repository
    ):
        mock_user_repository.get_user_by_oauth.return_value = ADA

        user = await auth_service.find_user_by_oauth_access_token(
            Provider.GITHUB, "provider-token"
        )

        assert user == ADA
        mock_oauth_client.get_uid.assert_awaited_once_with("GITHUB", "provider-token")
        mock_user_repository.get_user_by_oauth.assert_awaited_once_with(
            OAuthIdentity(provider=Provider.GITHUB, uid="1001")
        )

    @pytest.mark.asyncio
    async def test_unregistered_identity_propagates_not_found(
        self, auth_service, mock_user_repository
    ):
        mock_user_repository.get_user_by_oauth.side_effect = UserNotFoundError(
            "user not found"
        )

        with pytest.raises(UserNotFoundError):
            await auth_service.find_user_by_oauth_access_token(
                Provider.GITHUB, "provider-token"
            )


class TestRefresh:
    """Tests for access token refresh."""

    def test_refresh_token_yields_access_token(self, auth_service, token_service):
        refresh_token, _ = token_service.new_token_pair("7", "NORMAL")

        access_token = auth_service.refresh_jwt(refresh_token)

        claims = token_service.parse_token(access_token, TokenType.ACCESS)
        assert claims.user_id == "7"

    def test_access_token_cannot_refresh(self, auth_service, token_service):
        _, access_token = token_service.new_token_pair("7", "NORMAL")

        with pytest.raises(InvalidTokenError):
            auth_service.refresh_jwt(access_token)
