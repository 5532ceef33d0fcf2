"""Ports for the Users bounded context."""

from users.ports.exceptions import (
    APIKeyAlreadyExistsError,
    DanglingPronounReferenceError,
    EmptyUpdateError,
    InvalidOAuthStateError,
    InvalidUserInputError,
    UnauthorizedError,
    UserAlreadyExistsError,
    UserNotFoundError,
    UserRepositoryError,
)
from users.ports.repositories import IUserRepository

__all__ = [
    "APIKeyAlreadyExistsError",
    "DanglingPronounReferenceError",
    "EmptyUpdateError",
    "InvalidOAuthStateError",
    "InvalidUserInputError",
    "IUserRepository",
    "UnauthorizedError",
    "UserAlreadyExistsError",
    "UserNotFoundError",
    "UserRepositoryError",
]
