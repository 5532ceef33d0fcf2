"""Authentication shared kernel module."""

from shared_kernel.auth.oauth import (
    OAuthClient,
    OAuthExchangeError,
    OAuthProviderConfig,
    UnknownProviderError,
    github_provider,
    google_provider,
)
from shared_kernel.auth.observability import (
    DefaultOAuthClientProbe,
    DefaultTokenServiceProbe,
    OAuthClientProbe,
    TokenServiceProbe,
)
from shared_kernel.auth.token_cipher import TokenCipher
from shared_kernel.auth.tokens import (
    InvalidTokenError,
    TokenClaims,
    TokenService,
    TokenType,
)

__all__ = [
    "DefaultOAuthClientProbe",
    "DefaultTokenServiceProbe",
    "InvalidTokenError",
    "OAuthClient",
    "OAuthClientProbe",
    "OAuthExchangeError",
    "OAuthProviderConfig",
    "TokenCipher",
    "TokenClaims",
    "TokenService",
    "TokenServiceProbe",
    "TokenType",
    "UnknownProviderError",
    "github_provider",
    "google_provider",
]
