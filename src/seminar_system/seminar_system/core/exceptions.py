class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is missing, malformed or violates domain rules."""


class MismatchError(ValidationError):
    """Raised when two references that must agree point at different records."""


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""


class ConflictError(DomainError):
    """Raised when a uniqueness rule would be violated (already exists)."""


class DuplicateRegistrationError(ConflictError):
    """Raised when an email is already registered for a seminar."""


class InvalidStateError(DomainError):
    """Raised when the entity's state forbids the operation (e.g. archived seminar)."""


class CapacityExceededError(DomainError):
    """Raised when a seminar has no seats left."""


class AuthenticationError(DomainError):
    """Raised when credentials or tokens are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""
