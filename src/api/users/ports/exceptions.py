"""Domain exceptions for the Users bounded context.

These exceptions represent domain-level errors that can occur during
repository and service operations. The presentation layer maps them to
HTTP status codes.
"""


class UserNotFoundError(Exception):
    """Raised when no user matches the requested id or OAuth identity.

    During login this is the expected "not yet registered" branch rather
    than a failure.
    """

    pass


class UserAlreadyExistsError(Exception):
    """Raised when registering an OAuth identity that already has an account.

    The unique constraint on (oauth_provider, oauth_uid) is the authoritative
    guard; the pre-insert lookup only short-circuits the common case.
    """

    pass


class InvalidUserInputError(ValueError):
    """Raised when caller-supplied input fails validation."""

    pass


class EmptyUpdateError(InvalidUserInputError):
    """Raised when an update request carries no fields to change."""

    pass


class UnauthorizedError(Exception):
    """Raised when a user lacks permission to perform an operation.

    Users may only modify their own profile unless they hold the ADMIN role.
    """

    pass


class InvalidOAuthStateError(Exception):
    """Raised when the OAuth state parameter does not match the issued one."""

    pass


class UserRepositoryError(Exception):
    """Raised when the user store fails for a reason the caller cannot fix."""

    pass


class DanglingPronounReferenceError(UserRepositoryError):
    """Raised when a user row references a pronoun id with no pronouns row.

    This is a store consistency failure, never a user error.
    """

    def __init__(self, pronoun_id: int):
        super().__init__(f"pronoun id {pronoun_id} has no pronouns row")
        self.pronoun_id = pronoun_id


class APIKeyAlreadyExistsError(Exception):
    """Raised when adding an API key for a user who already holds one."""

    pass
