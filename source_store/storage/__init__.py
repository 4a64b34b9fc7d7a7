"""Storage layer: connection management and error taxonomy."""

from source_store.storage.database import Database, close_database, get_database
from source_store.storage.errors import (
    DatabaseConnectionError,
    PersistenceError,
    StorageError,
)

__all__ = [
    "Database",
    "DatabaseConnectionError",
    "PersistenceError",
    "StorageError",
    "close_database",
    "get_database",
]
