"""Dependency injection for the Users bounded context.

Composes infrastructure resources (database session, pronoun cache, auth
primitives) with Users components (repository, services).
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated
from uuid import uuid4

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import get_session
from infrastructure.settings import get_auth_settings
from shared_kernel.auth import (
    DefaultOAuthClientProbe,
    DefaultTokenServiceProbe,
    InvalidTokenError,
    OAuthClient,
    TokenCipher,
    TokenService,
    TokenType,
    github_provider,
    google_provider,
)
from shared_kernel.observability_context import ObservationContext
from users.application.observability import (
    AuthServiceProbe,
    DefaultAuthServiceProbe,
    DefaultUserServiceProbe,
    UserServiceProbe,
)
from users.application.services import AuthService, UserService
from users.application.value_objects import CurrentUser
from users.domain.value_objects import Provider, Role
from users.infrastructure.observability import (
    DefaultPronounProbe,
    DefaultUserRepositoryProbe,
)
from users.infrastructure.pronoun_cache import PronounCache
from users.infrastructure.user_repository import UserRepository

REQUEST_ID_HEADER = "X-Request-ID"

bearer_scheme = HTTPBearer(auto_error=False)


def get_pronoun_cache(request: Request) -> PronounCache:
    """Get the process-wide pronoun cache created by the application lifespan."""
    return request.app.state.pronoun_cache


@lru_cache
def get_token_service() -> TokenService:
    """Get cached token service configured from auth settings."""
    settings = get_auth_settings()
    return TokenService(
        secret=settings.jwt_secret.get_secret_value(),
        probe=DefaultTokenServiceProbe(),
        algorithm=settings.jwt_algorithm,
        access_token_ttl=settings.access_token_ttl,
        refresh_token_ttl=settings.refresh_token_ttl,
    )


@lru_cache
def get_token_cipher() -> TokenCipher:
    """Get cached cipher for provider access tokens."""
    return TokenCipher(get_auth_settings().encryption_key.get_secret_value())


@lru_cache
def get_oauth_client() -> OAuthClient:
    """Get cached OAuth client for the GitHub and Gmail providers."""
    settings = get_auth_settings()
    return OAuthClient(
        providers={
            Provider.GITHUB.value: github_provider(
                settings.github_client_id,
                settings.github_client_secret.get_secret_value(),
            ),
            Provider.GMAIL.value: google_provider(
                settings.gmail_client_id,
                settings.gmail_client_secret.get_secret_value(),
            ),
        },
        redirect_uri=settings.oauth_redirect_uri,
        probe=DefaultOAuthClientProbe(),
    )


def get_observation_context(request: Request) -> ObservationContext:
    """Build the observation context for one request.

    Reuses the caller's X-Request-ID when present so log lines can be
    joined with upstream proxies.
    """
    route = request.scope.get("route")
    return ObservationContext(
        request_id=request.headers.get(REQUEST_ID_HEADER) or str(uuid4()),
        operation=getattr(route, "name", None),
    )


async def get_current_user(
    token_service: Annotated[TokenService, Depends(get_token_service)],
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ] = None,
) -> CurrentUser:
    """Resolve the caller from a Bearer access token.

    Raises:
        HTTPException 401: If the token is missing, invalid or not an access token
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        claims = token_service.parse_token(credentials.credentials, TokenType.ACCESS)
        return CurrentUser(user_id=claims.user_id, role=Role(claims.role))
    except (InvalidTokenError, ValueError) as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


def get_user_repository(
    session: Annotated[AsyncSession, Depends(get_session)],
    pronoun_cache: Annotated[PronounCache, Depends(get_pronoun_cache)],
    context: Annotated[ObservationContext, Depends(get_observation_context)],
) -> UserRepository:
    """Get UserRepository bound to the request session."""
    return UserRepository(
        session=session,
        pronoun_cache=pronoun_cache,
        probe=DefaultUserRepositoryProbe().with_context(context),
        pronoun_probe=DefaultPronounProbe().with_context(context),
    )


def get_user_service_probe(
    context: Annotated[ObservationContext, Depends(get_observation_context)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> UserServiceProbe:
    """Get UserServiceProbe bound to the request and its caller."""
    return DefaultUserServiceProbe().with_context(
        context.with_actor(current_user.user_id, current_user.role.value)
    )


def get_auth_service_probe(
    context: Annotated[ObservationContext, Depends(get_observation_context)],
) -> AuthServiceProbe:
    """Get AuthServiceProbe bound to the request."""
    return DefaultAuthServiceProbe().with_context(context)


def get_user_service(
    user_repository: Annotated[UserRepository, Depends(get_user_repository)],
    probe: Annotated[UserServiceProbe, Depends(get_user_service_probe)],
) -> UserService:
    """Get UserService instance."""
    return UserService(
        user_repository=user_repository,
        api_key_length=get_auth_settings().api_key_length,
        probe=probe,
    )


def get_auth_service(
    user_repository: Annotated[UserRepository, Depends(get_user_repository)],
    oauth_client: Annotated[OAuthClient, Depends(get_oauth_client)],
    token_service: Annotated[TokenService, Depends(get_token_service)],
    token_cipher: Annotated[TokenCipher, Depends(get_token_cipher)],
    probe: Annotated[AuthServiceProbe, Depends(get_auth_service_probe)],
) -> AuthService:
    """Get AuthService instance."""
    return AuthService(
        user_repository=user_repository,
        oauth_client=oauth_client,
        token_service=token_service,
        token_cipher=token_cipher,
        probe=probe,
    )
