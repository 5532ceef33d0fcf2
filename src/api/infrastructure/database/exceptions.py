"""Database-level exceptions shared by bounded contexts."""


class DatabaseError(Exception):
    """Base exception for database operations."""

    pass


class DatabaseConnectionError(DatabaseError):
    """Raised when the store cannot be reached during startup."""

    pass
