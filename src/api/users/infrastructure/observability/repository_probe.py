"""Domain probe for user repository operations.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to user persistence.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class UserRepositoryProbe(Protocol):
    """Domain probe for user repository operations.

    Records domain events during user persistence operations.
    """

    def user_retrieved(self, user_id: str) -> None:
        """Record that a user was retrieved."""
        ...

    def user_not_found(self, user_id: str) -> None:
        """Record that a user was not found."""
        ...

    def users_listed(self, count: int, total_count: int) -> None:
        """Record that a page of users was listed."""
        ...

    def users_searched(self, term_count: int, result_count: int) -> None:
        """Record that a name search completed."""
        ...

    def user_created(self, user_id: str, provider: str) -> None:
        """Record that a user was created."""
        ...

    def duplicate_user(self, provider: str) -> None:
        """Record that a registration collided with an existing account."""
        ...

    def user_updated(self, user_id: str, fields: list[str]) -> None:
        """Record that a user was updated."""
        ...

    def user_deleted(self, user_id: str) -> None:
        """Record that a user and its dependent rows were deleted."""
        ...

    def api_key_added(self, user_id: str) -> None:
        """Record that an API key was stored for a user."""
        ...

    def api_key_deleted(self, user_id: str, deleted: bool) -> None:
        """Record that an API key delete ran."""
        ...

    def repository_error(self, operation: str, error: str) -> None:
        """Record that the store failed during an operation."""
        ...

    def with_context(self, context: ObservationContext) -> UserRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultUserRepositoryProbe:
    """Default implementation of UserRepositoryProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultUserRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultUserRepositoryProbe(logger=self._logger, context=context)

    def user_retrieved(self, user_id: str) -> None:
        """Record that a user was retrieved."""
        self._logger.debug(
            "user_retrieved",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def user_not_found(self, user_id: str) -> None:
        """Record that a user was not found."""
        self._logger.debug(
            "user_not_found",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def users_listed(self, count: int, total_count: int) -> None:
        """Record that a page of users was listed."""
        self._logger.debug(
            "users_listed",
            count=count,
            total_count=total_count,
            **self._get_context_kwargs(),
        )

    def users_searched(self, term_count: int, result_count: int) -> None:
        """Record that a name search completed."""
        self._logger.debug(
            "users_searched",
            term_count=term_count,
            result_count=result_count,
            **self._get_context_kwargs(),
        )

    def user_created(self, user_id: str, provider: str) -> None:
        """Record that a user was created."""
        self._logger.info(
            "user_created",
            user_id=user_id,
            provider=provider,
            **self._get_context_kwargs(),
        )

    def duplicate_user(self, provider: str) -> None:
        """Record that a registration collided with an existing account."""
        self._logger.warning(
            "duplicate_user",
            provider=provider,
            **self._get_context_kwargs(),
        )

    def user_updated(self, user_id: str, fields: list[str]) -> None:
        """Record that a user was updated."""
        self._logger.info(
            "user_updated",
            user_id=user_id,
            fields=fields,
            **self._get_context_kwargs(),
        )

    def user_deleted(self, user_id: str) -> None:
        """Record that a user and its dependent rows were deleted."""
        self._logger.info(
            "user_deleted",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def api_key_added(self, user_id: str) -> None:
        """Record that an API key was stored for a user."""
        self._logger.info(
            "api_key_added",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def api_key_deleted(self, user_id: str, deleted: bool) -> None:
        """Record that an API key delete ran."""
        self._logger.info(
            "api_key_deleted",
            user_id=user_id,
            deleted=deleted,
            **self._get_context_kwargs(),
        )

    def repository_error(self, operation: str, error: str) -> None:
        """Record that the store failed during an operation."""
        self._logger.error(
            "user_repository_error",
            operation=operation,
            error=error,
            **self._get_context_kwargs(),
        )
