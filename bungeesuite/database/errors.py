"""
Error types raised by the database access layer.

Two kinds cross the boundary: DependencyUnavailable (the driver cannot be
loaded) and OperationFailure (anything that goes wrong while talking to the
server). OperationFailure is refined into ConnectionFailure and QueryFailure so
callers can tell a lease problem from a statement problem when they care to.
"""

from __future__ import annotations

from typing import Optional


class DatabaseError(Exception):
    """
    Base class for all database access errors.

    Attributes
    ----------
    cause : Optional[BaseException]
        The low-level exception that triggered this error, if any.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause

    def __str__(self) -> str:
        message = super().__str__()
        if self.cause is None:
            return message
        return f"{message}: {self.cause}"


class DependencyUnavailable(DatabaseError):
    """Raised when the database driver cannot be loaded."""


class OperationFailure(DatabaseError):
    """Raised when an operation against the database fails."""


class ConnectionFailure(OperationFailure):
    """Raised when a connection cannot be obtained from the pool."""


class QueryFailure(OperationFailure):
    """Raised when a statement cannot be prepared or executed."""


__all__ = [
    "DatabaseError",
    "DependencyUnavailable",
    "OperationFailure",
    "ConnectionFailure",
    "QueryFailure",
]
