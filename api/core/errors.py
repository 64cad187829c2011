"""
Repository error taxonomy.

Every failure a repository reports carries a machine-checkable `kind` and a
human-readable message. Transport layers map kinds to status codes (see
`core.error_handlers`); repositories never retry.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    INSERT_FAILED = "insert_failed"
    UPDATE_FAILED = "update_failed"
    DELETE_FAILED = "delete_failed"
    INVALID_INPUT = "invalid_input"
    NOT_AUTHORIZED = "not_authorized"
    CONSTRAINT_VIOLATION = "constraint_violation"


class RepositoryError(Exception):
    """Base class for classified repository failures."""

    kind: ErrorKind

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r}, message={self.message!r})"


class NotFoundError(RepositoryError):
    kind = ErrorKind.NOT_FOUND


class InsertFailedError(RepositoryError):
    kind = ErrorKind.INSERT_FAILED


class UpdateFailedError(RepositoryError):
    kind = ErrorKind.UPDATE_FAILED


class DeleteFailedError(RepositoryError):
    kind = ErrorKind.DELETE_FAILED


class InvalidInputError(RepositoryError):
    kind = ErrorKind.INVALID_INPUT


class NotAuthorizedError(RepositoryError):
    kind = ErrorKind.NOT_AUTHORIZED


class ConstraintViolationError(RepositoryError):
    """Raised when the store rejects a write (FK, unique, check, not-null)."""

    kind = ErrorKind.CONSTRAINT_VIOLATION

    def __init__(self, message: str, *, constraint: str | None = None) -> None:
        self.constraint = constraint
        super().__init__(message)


__all__ = [
    "ErrorKind",
    "RepositoryError",
    "NotFoundError",
    "InsertFailedError",
    "UpdateFailedError",
    "DeleteFailedError",
    "InvalidInputError",
    "NotAuthorizedError",
    "ConstraintViolationError",
]
