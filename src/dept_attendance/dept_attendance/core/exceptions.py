class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a class, student, period or bookmark does not exist."""


class NoActivePeriodError(DomainError):
    """Raised when attendance is marked outside the teacher's scheduled period."""


class ConflictError(DomainError):
    """Raised on duplicates, or when a period vanished while a mark was being written.

    The latter case is safe to retry.
    """


class StorageError(DomainError):
    """Raised when the underlying database call fails."""
