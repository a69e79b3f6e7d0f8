class DomainError(Exception):
    """Base exception for business rule violations."""


class BadRequestError(DomainError):
    """Raised when a request is missing required parameters."""


class ValidationError(BadRequestError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced employee, attendance or payroll record is absent."""


class ConflictError(DomainError):
    """Raised when a write would duplicate a unique ledger key."""


class InvalidStateError(DomainError):
    """Raised when a record is not in a state that allows the operation."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class StorageError(DomainError):
    """Raised when the database fails for reasons other than a key conflict."""
