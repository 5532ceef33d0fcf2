"""Observation context for domain-oriented observability.

Observation contexts collect request-scoped metadata that probes attach to
every event they emit.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ObservationContext:
    """Immutable context containing metadata for observability.

    Attributes:
        request_id: Unique identifier for the current request/operation.
        actor_id: Identifier of the authenticated user performing the operation.
        actor_role: Role claim of the authenticated user.
        operation: Name of the query or mutation being served.
        extra: Additional contextual metadata.

    Example:
        context = ObservationContext(request_id="req-123", operation="updateUser")
        probe = DefaultUserRepositoryProbe().with_context(context)
    """

    request_id: str | None = None
    actor_id: str | None = None
    actor_role: str | None = None
    operation: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for logging.

        Only includes non-None values to keep logs clean.
        """
        result: dict[str, Any] = {}
        if self.request_id is not None:
            result["request_id"] = self.request_id
        if self.actor_id is not None:
            result["actor_id"] = self.actor_id
        if self.actor_role is not None:
            result["actor_role"] = self.actor_role
        if self.operation is not None:
            result["operation"] = self.operation
        result.update(self.extra)
        return result

    def with_actor(self, actor_id: str, actor_role: str) -> ObservationContext:
        """Create a new context attributed to an authenticated caller."""
        return ObservationContext(
            request_id=self.request_id,
            actor_id=actor_id,
            actor_role=actor_role,
            operation=self.operation,
            extra=self.extra,
        )
