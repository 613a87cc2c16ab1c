from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidTransitionError(ValidationError):
    """Raised when a record status change is not allowed."""


class DuplicateRecordError(DomainError):
    """Raised when a (worker, date, source) record already exists."""


class AuthorizationError(DomainError):
    """Raised when the acting user may not perform an action."""


class NotFoundError(DomainError):
    """Raised when an update targets a record that does not exist."""


class PersistenceError(DomainError):
    """Raised when the store or its transport fails.

    Carries the name of the failing operation; the driver error is chained.
    """

    def __init__(self, operation: str, message: Optional[str] = None):
        self.operation = operation
        super().__init__(f"{operation} failed" + (f": {message}" if message else ""))
