"""Exceptions raised by the storage layer."""

from typing import Any


class StorageError(Exception):
    """Base exception for storage failures.

    Carries the attempted operation and the key it targeted so callers
    can report something actionable.
    """

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        key: Any = None,
    ):
        super().__init__(message)
        self.operation = operation
        self.key = key


class DatabaseConnectionError(StorageError, ConnectionError):
    """Raised when a connection to PostgreSQL cannot be established or kept."""

    pass


class PersistenceError(StorageError):
    """Raised when PostgreSQL rejects a statement that was sent."""

    pass
