"""Database repository for the source table."""

import logging

from source_store.sources.schemas import Source
from source_store.storage.database import Database
from source_store.storage.errors import PersistenceError

logger = logging.getLogger(__name__)

_CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS source (
    id          SERIAL PRIMARY KEY,
    name        VARCHAR(255) NOT NULL,
    url         VARCHAR(512),
    description VARCHAR(512)
)
"""

_INSERT_SQL = """
INSERT INTO source (name, url, description)
VALUES ($1, $2, $3)
RETURNING id
"""

# No ORDER BY: get_all returns rows in whatever order PostgreSQL yields them.
_SELECT_ALL_SQL = "SELECT id, name, url, description FROM source"

_SELECT_BY_ID_SQL = "SELECT id, name, url, description FROM source WHERE id = $1"

_UPDATE_SQL = """
UPDATE source SET name = $1, url = $2, description = $3
WHERE id = $4
"""

_DELETE_SQL = "DELETE FROM source WHERE id = $1"


def _record_to_source(record) -> Source:
    """Convert an asyncpg Record to a Source dataclass."""
    return Source(
        id=record["id"],
        name=record["name"],
        url=record["url"],
        description=record["description"],
    )


def _require_name(source: Source, operation: str) -> None:
    """Reject a missing or empty name before it reaches the database."""
    if not source.name:
        raise PersistenceError(
            "Source name is required",
            operation=operation,
            key=source.id,
        )


def _affected_rows(status: str) -> int:
    """Parse the row count from a command tag such as ``UPDATE 1``."""
    try:
        return int(status.rsplit(" ", 1)[-1])
    except (AttributeError, ValueError):
        return 0


class SourcesRepository:
    """CRUD operations for the source table.

    Every read goes to the database; nothing is cached between calls.
    """

    def __init__(self, database: Database) -> None:
        self._db = database

    async def create_table(self) -> None:
        """Create the source table (idempotent)."""
        await self._db.execute(_CREATE_TABLE_SQL, operation="create_table")
        logger.info("Source table ensured")

    async def create(self, source: Source) -> Source:
        """Insert a new source and write the assigned id back onto it.

        Returns the same ``source`` instance, now carrying its id.

        Raises:
            PersistenceError: the source already has an id, has an empty name,
                or the insert was rejected.
        """
        if source.id is not None:
            raise PersistenceError(
                f"Source already persisted with id {source.id}",
                operation="create",
                key=source.id,
            )
        _require_name(source, "create")

        source.id = await self._db.fetchval(
            _INSERT_SQL,
            source.name,
            source.url,
            source.description,
            operation="create",
        )
        logger.debug("Created source %s", source.id)
        return source

    async def get_by_id(self, source_id: int) -> Source | None:
        """Fetch a single source by id, or None if no row matches."""
        row = await self._db.fetchrow(
            _SELECT_BY_ID_SQL,
            source_id,
            operation="get_by_id",
            key=source_id,
        )
        return _record_to_source(row) if row else None

    async def get_all(self) -> list[Source]:
        """Fetch every source. Order is undefined."""
        rows = await self._db.fetch(_SELECT_ALL_SQL, operation="get_all")
        return [_record_to_source(r) for r in rows]

    async def update(self, source: Source) -> None:
        """Rewrite name, url and description for the row matching ``source.id``.

        An id with no matching row is not an error; the statement simply
        affects zero rows.

        A missing id or an empty name is rejected before the round trip.
        """
        if source.id is None:
            raise PersistenceError(
                "Cannot update a source that has no id",
                operation="update",
            )
        _require_name(source, "update")

        status = await self._db.execute(
            _UPDATE_SQL,
            source.name,
            source.url,
            source.description,
            source.id,
            operation="update",
            key=source.id,
        )
        logger.debug(
            "Updated source %s (%d rows affected)",
            source.id,
            _affected_rows(status),
        )

    async def delete(self, source_id: int) -> None:
        """Delete the source with ``source_id``. Missing ids are a no-op."""
        status = await self._db.execute(
            _DELETE_SQL,
            source_id,
            operation="delete",
            key=source_id,
        )
        logger.debug(
            "Deleted source %s (%d rows affected)",
            source_id,
            _affected_rows(status),
        )
