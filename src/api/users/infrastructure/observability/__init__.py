"""Domain-Oriented Observability for Users infrastructure.

Probes for repository and pronoun resolution operations.
"""

from users.infrastructure.observability.pronoun_probe import (
    DefaultPronounProbe,
    PronounProbe,
)
from users.infrastructure.observability.repository_probe import (
    DefaultUserRepositoryProbe,
    UserRepositoryProbe,
)

__all__ = [
    "DefaultPronounProbe",
    "DefaultUserRepositoryProbe",
    "PronounProbe",
    "UserRepositoryProbe",
]
