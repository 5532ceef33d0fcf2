"""Domain probes for Users application services."""

from users.application.observability.auth_service_probe import (
    AuthServiceProbe,
    DefaultAuthServiceProbe,
)
from users.application.observability.user_service_probe import (
    DefaultUserServiceProbe,
    UserServiceProbe,
)

__all__ = [
    "AuthServiceProbe",
    "DefaultAuthServiceProbe",
    "DefaultUserServiceProbe",
    "UserServiceProbe",
]
