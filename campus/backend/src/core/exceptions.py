"""Domain errors shared by the store, the controllers and the auth gate."""

from __future__ import annotations

from typing import Any


class DomainError(Exception):
    """Base exception for business rule violations."""


class RecordNotFound(DomainError):
    """Raised when a record key does not exist in the store."""

    def __init__(self, label: str, key: object) -> None:
        self.label = label
        self.key = key
        super().__init__(f"{label} not found")


class ValidationFailed(DomainError):
    """Raised when a candidate record violates one or more field constraints."""

    def __init__(self, errors: list[dict[str, Any]]) -> None:
        self.errors = errors
        super().__init__(f"{len(errors)} validation error(s)")


class UniquenessConflict(DomainError):
    """Raised when the store rejects a save because of a constraint."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class Unauthorized(DomainError):
    """Raised when the bearer credential is missing, invalid or expired."""

    def __init__(self, detail: str = "Not authenticated") -> None:
        self.detail = detail
        super().__init__(detail)


class AlreadyAuthenticated(DomainError):
    """Raised by the login-view guard when the caller already holds a session."""

    def __init__(self, location: str) -> None:
        self.location = location
        super().__init__(location)


__all__ = [
    "AlreadyAuthenticated",
    "DomainError",
    "RecordNotFound",
    "Unauthorized",
    "UniquenessConflict",
    "ValidationFailed",
]
