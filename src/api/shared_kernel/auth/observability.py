"""Domain probes for session token and OAuth operations.

Following Domain-Oriented Observability patterns, these probes capture
domain-significant events related to authentication.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TokenServiceProbe(Protocol):
    """Domain probe for session token operations."""

    def token_pair_issued(self, user_id: str) -> None:
        """Record that a refresh/access token pair was issued."""
        ...

    def access_token_refreshed(self, user_id: str) -> None:
        """Record that a refresh token was exchanged for an access token."""
        ...

    def token_validation_failed(self, reason: str) -> None:
        """Record that token validation failed."""
        ...

    def with_context(self, context: ObservationContext) -> TokenServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class OAuthClientProbe(Protocol):
    """Domain probe for OAuth provider calls."""

    def code_exchanged(self, provider: str) -> None:
        """Record that an authorization code was exchanged."""
        ...

    def code_exchange_failed(self, provider: str, error: str) -> None:
        """Record that a provider call failed."""
        ...

    def with_context(self, context: ObservationContext) -> OAuthClientProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTokenServiceProbe:
    """Default implementation of TokenServiceProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultTokenServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultTokenServiceProbe(logger=self._logger, context=context)

    def token_pair_issued(self, user_id: str) -> None:
        """Record that a refresh/access token pair was issued."""
        self._logger.info(
            "token_pair_issued",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def access_token_refreshed(self, user_id: str) -> None:
        """Record that a refresh token was exchanged for an access token."""
        self._logger.info(
            "access_token_refreshed",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def token_validation_failed(self, reason: str) -> None:
        """Record that token validation failed."""
        self._logger.warning(
            "token_validation_failed",
            reason=reason,
            **self._get_context_kwargs(),
        )


class DefaultOAuthClientProbe:
    """Default implementation of OAuthClientProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultOAuthClientProbe:
        """Create a new probe with observation context bound."""
        return DefaultOAuthClientProbe(logger=self._logger, context=context)

    def code_exchanged(self, provider: str) -> None:
        """Record that an authorization code was exchanged."""
        self._logger.info(
            "oauth_code_exchanged",
            provider=provider,
            **self._get_context_kwargs(),
        )

    def code_exchange_failed(self, provider: str, error: str) -> None:
        """Record that a provider call failed."""
        self._logger.warning(
            "oauth_code_exchange_failed",
            provider=provider,
            error=error,
            **self._get_context_kwargs(),
        )
