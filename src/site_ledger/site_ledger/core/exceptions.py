class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when an identity may not touch a record (not its own, or locked)."""


class StoreError(DomainError):
    """Raised when the backing store fails or refuses a request."""
