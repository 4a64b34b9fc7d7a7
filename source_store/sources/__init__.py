"""Sources: data access for the source table."""

from source_store.sources.repository import SourcesRepository
from source_store.sources.schemas import Source

__all__ = [
    "Source",
    "SourcesRepository",
]
