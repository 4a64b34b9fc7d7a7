"""
Dependency injection for FastAPI endpoints.
"""

from source_store.sources.repository import SourcesRepository
from source_store.storage.database import close_database, get_database

__all__ = ["get_database", "get_sources_repository", "cleanup_dependencies"]


async def get_sources_repository() -> SourcesRepository:
    """Get a SourcesRepository bound to the shared Database."""
    return SourcesRepository(await get_database())


async def cleanup_dependencies() -> None:
    """Clean up global dependencies on shutdown."""
    await close_database()
