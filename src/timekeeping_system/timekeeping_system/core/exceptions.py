class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a record, schedule or assignment does not exist."""


class InvalidStateError(DomainError):
    """Raised when an entity is not in a state that allows the operation."""


class InsufficientBalanceError(DomainError):
    """Raised when a compensation exceeds the available time-bank minutes."""
