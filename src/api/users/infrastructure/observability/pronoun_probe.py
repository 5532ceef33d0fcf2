"""Domain probe for pronoun cache and resolver operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class PronounProbe(Protocol):
    """Domain probe for pronoun resolution."""

    def pronoun_cache_miss(self, pronoun_id: int | None, pronouns: str | None) -> None:
        """Record that a lookup had to go to the store."""
        ...

    def pronoun_created(self, pronoun_id: int, pronouns: str) -> None:
        """Record that a new pronoun pair was inserted."""
        ...

    def pronoun_insert_conflict(self, pronouns: str) -> None:
        """Record that a concurrent request inserted the same pair first."""
        ...

    def dangling_pronoun_reference(self, pronoun_id: int) -> None:
        """Record that a user references a pronoun id with no row."""
        ...

    def pronouns_loaded(self, count: int) -> None:
        """Record that the cache was populated from every stored pair."""
        ...

    def pending_pronouns_published(self, count: int) -> None:
        """Record that pairs inserted by a committed transaction were cached."""
        ...

    def with_context(self, context: ObservationContext) -> PronounProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultPronounProbe:
    """Default implementation of PronounProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultPronounProbe:
        """Create a new probe with observation context bound."""
        return DefaultPronounProbe(logger=self._logger, context=context)

    def pronoun_cache_miss(self, pronoun_id: int | None, pronouns: str | None) -> None:
        """Record that a lookup had to go to the store."""
        self._logger.debug(
            "pronoun_cache_miss",
            pronoun_id=pronoun_id,
            pronouns=pronouns,
            **self._get_context_kwargs(),
        )

    def pronoun_created(self, pronoun_id: int, pronouns: str) -> None:
        """Record that a new pronoun pair was inserted."""
        self._logger.info(
            "pronoun_created",
            pronoun_id=pronoun_id,
            pronouns=pronouns,
            **self._get_context_kwargs(),
        )

    def pronoun_insert_conflict(self, pronouns: str) -> None:
        """Record that a concurrent request inserted the same pair first."""
        self._logger.info(
            "pronoun_insert_conflict",
            pronouns=pronouns,
            **self._get_context_kwargs(),
        )

    def dangling_pronoun_reference(self, pronoun_id: int) -> None:
        """Record that a user references a pronoun id with no row."""
        self._logger.error(
            "dangling_pronoun_reference",
            pronoun_id=pronoun_id,
            **self._get_context_kwargs(),
        )

    def pronouns_loaded(self, count: int) -> None:
        """Record that the cache was populated from every stored pair."""
        self._logger.info(
            "pronouns_loaded",
            count=count,
            **self._get_context_kwargs(),
        )

    def pending_pronouns_published(self, count: int) -> None:
        """Record that pairs inserted by a committed transaction were cached."""
        self._logger.debug(
            "pending_pronouns_published",
            count=count,
            **self._get_context_kwargs(),
        )
