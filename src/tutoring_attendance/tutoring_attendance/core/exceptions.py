class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is malformed or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced class, school, student or teacher does not exist."""


class PolicyConflictError(DomainError):
    """Raised when several policies tie for the same scope and instant.

    Reserved for a stricter resolution mode; default resolution breaks ties
    deterministically and never raises this.
    """
