"""OAuth authorization-code flow against GitHub and Google.

Builds the provider consent URL, exchanges the returned code for a
provider access token and resolves the provider's stable user id.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

import httpx

if TYPE_CHECKING:
    from shared_kernel.auth.observability import OAuthClientProbe


@dataclass(frozen=True)
class OAuthProviderConfig:
    """Endpoints and credentials of one OAuth provider."""

    client_id: str
    client_secret: str
    authorize_url: str
    token_url: str
    userinfo_url: str
    scopes: tuple[str, ...]
    uid_field: str


class OAuthExchangeError(Exception):
    """Raised when a provider rejects a code or its user lookup fails."""

    pass


class UnknownProviderError(ValueError):
    """Raised for a provider with no configuration."""

    pass


def github_provider(client_id: str, client_secret: str) -> OAuthProviderConfig:
    """Configuration for GitHub OAuth apps."""
    return OAuthProviderConfig(
        client_id=client_id,
        client_secret=client_secret,
        authorize_url="https://github.com/login/oauth/authorize",
        token_url="https://github.com/login/oauth/access_token",
        userinfo_url="https://api.github.com/user",
        scopes=("read:user", "user:email"),
        uid_field="id",
    )


def google_provider(client_id: str, client_secret: str) -> OAuthProviderConfig:
    """Configuration for Google OAuth clients."""
    return OAuthProviderConfig(
        client_id=client_id,
        client_secret=client_secret,
        authorize_url="https://accounts.google.com/o/oauth2/v2/auth",
        token_url="https://oauth2.googleapis.com/token",
        userinfo_url="https://openidconnect.googleapis.com/v1/userinfo",
        scopes=("openid", "email", "profile"),
        uid_field="sub",
    )


class OAuthClient:
    """Talks to OAuth providers on behalf of the login and register flows."""

    def __init__(
        self,
        providers: dict[str, OAuthProviderConfig],
        redirect_uri: str,
        probe: OAuthClientProbe,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
    ):
        """Initialize the OAuth client.

        Args:
            providers: Provider name (e.g. "GITHUB") to its configuration.
            redirect_uri: Redirect URI registered with every provider.
            probe: Observability probe for logging events.
            transport: Optional httpx transport, used to stub providers.
            timeout: Per-request timeout in seconds.
        """
        self._providers = providers
        self._redirect_uri = redirect_uri
        self._probe = probe
        self._transport = transport
        self._timeout = timeout

    def auth_code_url(self, provider: str, state: str) -> str:
        """Return the provider consent URL carrying the anti-forgery state."""
        config = self._config(provider)
        params = {
            "client_id": config.client_id,
            "redirect_uri": self._redirect_uri,
            "response_type": "code",
            "scope": " ".join(config.scopes),
            "state": state,
        }
        return f"{config.authorize_url}?{urlencode(params)}"

    async def exchange_code(self, provider: str, code: str) -> str:
        """Exchange an authorization code for a provider access token.

        Raises:
            OAuthExchangeError: If the provider rejects the code
        """
        config = self._config(provider)
        data = {
            "client_id": config.client_id,
            "client_secret": config.client_secret,
            "code": code,
            "redirect_uri": self._redirect_uri,
            "grant_type": "authorization_code",
        }
        payload = await self._request(
            provider,
            "POST",
            config.token_url,
            data=data,
            headers={"Accept": "application/json"},
        )

        access_token = payload.get("access_token")
        if not access_token:
            reason = payload.get("error", "missing access_token")
            self._probe.code_exchange_failed(provider=provider, error=str(reason))
            raise OAuthExchangeError(f"{provider} rejected the authorization code")

        self._probe.code_exchanged(provider=provider)
        return access_token

    async def get_uid(self, provider: str, access_token: str) -> str:
        """Return the provider's stable id for the token's owner.

        Raises:
            OAuthExchangeError: If the lookup fails or has no id
        """
        config = self._config(provider)
        payload = await self._request(
            provider,
            "GET",
            config.userinfo_url,
            headers={
                "Accept": "application/json",
                "Authorization": f"Bearer {access_token}",
            },
        )

        uid = payload.get(config.uid_field)
        if uid is None:
            self._probe.code_exchange_failed(
                provider=provider, error=f"missing {config.uid_field}"
            )
            raise OAuthExchangeError(f"{provider} did not return a user id")
        return str(uid)

    def _config(self, provider: str) -> OAuthProviderConfig:
        try:
            return self._providers[provider]
        except KeyError:
            raise UnknownProviderError(f"Unsupported OAuth provider: {provider}")

    async def _request(
        self, provider: str, method: str, url: str, **kwargs: Any
    ) -> dict[str, Any]:
        try:
            async with httpx.AsyncClient(
                transport=self._transport, timeout=self._timeout
            ) as client:
                response = await client.request(method, url, **kwargs)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPError as e:
            self._probe.code_exchange_failed(provider=provider, error=str(e))
            raise OAuthExchangeError(f"{provider} request failed: {e}") from e
        except ValueError as e:
            self._probe.code_exchange_failed(provider=provider, error=str(e))
            raise OAuthExchangeError(f"{provider} returned invalid JSON") from e
