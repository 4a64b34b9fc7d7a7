"""Shared fixtures for sources tests."""

from unittest.mock import AsyncMock

import pytest

from source_store.sources.schemas import Source


@pytest.fixture
def mock_database() -> AsyncMock:
    """Mock Database instance matching the Database API."""
    db = AsyncMock()
    db.fetch = AsyncMock(return_value=[])
    db.fetchval = AsyncMock(return_value=None)
    db.fetchrow = AsyncMock(return_value=None)
    db.execute = AsyncMock(return_value="UPDATE 1")
    return db


@pytest.fixture
def sample_source() -> Source:
    """An unsaved Source for testing."""
    return Source(
        name="Example Source",
        url="https://example.com",
        description="Example description",
    )


@pytest.fixture
def sample_db_row() -> dict:
    """A dict mimicking an asyncpg Record for a source."""
    return {
        "id": 7,
        "name": "Example Source",
        "url": "https://example.com",
        "description": "Example description",
    }


@pytest.fixture
def sparse_db_row() -> dict:
    """A row whose optional columns are NULL."""
    return {
        "id": 8,
        "name": "Name Only",
        "url": None,
        "description": None,
    }
