class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is missing, malformed or negative."""


class ConflictError(DomainError):
    """Raised when a seat/shift reference is unknown or already taken."""


class NotFoundError(DomainError):
    """Raised when a student (or its membership history) does not exist."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""
