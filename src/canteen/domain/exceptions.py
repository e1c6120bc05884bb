"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
Each subclass carries an ``error_kind`` tag that transports use when they
report ``{errorKind, detail}`` to a caller.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""

    error_kind = "DomainError"


class ValidationError(DomainException):
    """A business rule or invariant was violated.

    ``details`` holds one message per failing field or line when several
    problems are reported together.
    """

    error_kind = "ValidationError"

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = list(details) if details else [message]


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""

    error_kind = "NotFound"


class CatalogItemNotFoundError(EntityNotFoundError):
    """A menu item name has no catalog entry."""

    def __init__(self, name: str) -> None:
        super().__init__(f'"{name}" not found in menu')
        self.name = name


class IllegalTransitionError(DomainException):
    """The requested status change is not an edge of the lifecycle graph."""

    error_kind = "IllegalTransition"

    def __init__(self, current: str, requested: str) -> None:
        super().__init__(
            f"Cannot move order from '{current}' to '{requested}'"
        )
        self.current = current
        self.requested = requested


class ConcurrencyConflictError(DomainException):
    """A conditional store update found a different status than expected."""

    error_kind = "Conflict"


class StoreUnavailableError(DomainException):
    """The backing persistence failed; the request cannot be completed."""

    error_kind = "StoreUnavailable"


class AuthorizationError(DomainException):
    """The actor is not allowed to perform the requested action."""

    error_kind = "Forbidden"
