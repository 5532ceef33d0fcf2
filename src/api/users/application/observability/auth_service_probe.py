"""Protocol for authentication application service observability.

Captures domain events of the OAuth login and registration flows.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class AuthServiceProbe(Protocol):
    """Domain probe for authentication service operations."""

    def redirect_link_issued(self, provider: str) -> None:
        """Record that a provider consent URL was handed out."""
        ...

    def oauth_state_mismatch(self, provider: str) -> None:
        """Record that a login carried a state that does not match the cookie."""
        ...

    def login_succeeded(self, user_id: str, provider: str) -> None:
        """Record that a registered user logged in."""
        ...

    def login_unregistered(self, provider: str) -> None:
        """Record that a login resolved to an identity with no account yet."""
        ...

    def user_registered(self, user_id: str, provider: str) -> None:
        """Record that a new account was registered."""
        ...

    def registration_failed(self, provider: str, error: str) -> None:
        """Record that registration failed."""
        ...

    def with_context(self, context: ObservationContext) -> AuthServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultAuthServiceProbe:
    """Default implementation of AuthServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultAuthServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultAuthServiceProbe(logger=self._logger, context=context)

    def redirect_link_issued(self, provider: str) -> None:
        """Record that a provider consent URL was handed out."""
        self._logger.debug(
            "oauth_redirect_link_issued",
            provider=provider,
            **self._get_context_kwargs(),
        )

    def oauth_state_mismatch(self, provider: str) -> None:
        """Record that a login carried a state that does not match the cookie."""
        self._logger.warning(
            "oauth_state_mismatch",
            provider=provider,
            **self._get_context_kwargs(),
        )

    def login_succeeded(self, user_id: str, provider: str) -> None:
        """Record that a registered user logged in."""
        self._logger.info(
            "login_succeeded",
            user_id=user_id,
            provider=provider,
            **self._get_context_kwargs(),
        )

    def login_unregistered(self, provider: str) -> None:
        """Record that a login resolved to an identity with no account yet."""
        self._logger.info(
            "login_unregistered",
            provider=provider,
            **self._get_context_kwargs(),
        )

    def user_registered(self, user_id: str, provider: str) -> None:
        """Record that a new account was registered."""
        self._logger.info(
            "user_registered",
            user_id=user_id,
            provider=provider,
            **self._get_context_kwargs(),
        )

    def registration_failed(self, provider: str, error: str) -> None:
        """Record that registration failed."""
        self._logger.error(
            "registration_failed",
            provider=provider,
            error=error,
            **self._get_context_kwargs(),
        )
