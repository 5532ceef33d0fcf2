"""Protocol for user application service observability.

Defines the interface for domain probes that capture application-level
domain events for user queries and mutations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class UserServiceProbe(Protocol):
    """Domain probe for user application service operations."""

    def access_denied(self, actor_id: str, target_user_id: str, operation: str) -> None:
        """Record that a caller tried to act on another user's account."""
        ...

    def invalid_input(self, operation: str, reason: str) -> None:
        """Record that a request was rejected by validation."""
        ...

    def users_page_served(self, count: int, total_count: int) -> None:
        """Record that a page of users was returned."""
        ...

    def user_updated(self, user_id: str, actor_id: str) -> None:
        """Record that a user profile was updated."""
        ...

    def user_deleted(self, user_id: str, actor_id: str) -> None:
        """Record that a user was deleted."""
        ...

    def api_key_issued(self, user_id: str, actor_id: str) -> None:
        """Record that an API key was generated for a user."""
        ...

    def api_key_revoked(self, user_id: str, actor_id: str, deleted: bool) -> None:
        """Record that an API key delete was requested."""
        ...

    def with_context(self, context: ObservationContext) -> UserServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultUserServiceProbe:
    """Default implementation of UserServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultUserServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultUserServiceProbe(logger=self._logger, context=context)

    def access_denied(self, actor_id: str, target_user_id: str, operation: str) -> None:
        """Record that a caller tried to act on another user's account."""
        self._logger.warning(
            "user_access_denied",
            actor_id=actor_id,
            target_user_id=target_user_id,
            operation=operation,
            **self._get_context_kwargs(),
        )

    def invalid_input(self, operation: str, reason: str) -> None:
        """Record that a request was rejected by validation."""
        self._logger.info(
            "user_input_rejected",
            operation=operation,
            reason=reason,
            **self._get_context_kwargs(),
        )

    def users_page_served(self, count: int, total_count: int) -> None:
        """Record that a page of users was returned."""
        self._logger.debug(
            "users_page_served",
            count=count,
            total_count=total_count,
            **self._get_context_kwargs(),
        )

    def user_updated(self, user_id: str, actor_id: str) -> None:
        """Record that a user profile was updated."""
        self._logger.info(
            "user_profile_updated",
            user_id=user_id,
            actor_id=actor_id,
            **self._get_context_kwargs(),
        )

    def user_deleted(self, user_id: str, actor_id: str) -> None:
        """Record that a user was deleted."""
        self._logger.info(
            "user_account_deleted",
            user_id=user_id,
            actor_id=actor_id,
            **self._get_context_kwargs(),
        )

    def api_key_issued(self, user_id: str, actor_id: str) -> None:
        """Record that an API key was generated for a user."""
        self._logger.info(
            "api_key_issued",
            user_id=user_id,
            actor_id=actor_id,
            **self._get_context_kwargs(),
        )

    def api_key_revoked(self, user_id: str, actor_id: str, deleted: bool) -> None:
        """Record that an API key delete was requested."""
        self._logger.info(
            "api_key_revoked",
            user_id=user_id,
            actor_id=actor_id,
            deleted=deleted,
            **self._get_context_kwargs(),
        )
