"""Application services for the Users bounded context."""

from users.application.services.auth_service import AuthService
from users.application.services.user_service import UserService

__all__ = ["AuthService", "UserService"]
