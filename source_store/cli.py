"""
Command-line interface for source-store.

Usage:
    source-store init-db              # Create the source table
    source-store health               # Check database connectivity
    source-store add NAME [--url URL] [--description TEXT]
    source-store get ID
    source-store list
    source-store update ID NAME [--url URL] [--description TEXT]
    source-store delete ID
    source-store demo                 # Walk through create/read/update/delete
    source-store serve                # Run the HTTP API
"""

import asyncio
import sys
from collections.abc import Awaitable, Callable
from typing import Any

import click
import structlog

from source_store.config.settings import get_settings
from source_store.observability.logging import bind_context, setup_logging
from source_store.sources.repository import SourcesRepository
from source_store.sources.schemas import Source
from source_store.storage.database import Database
from source_store.storage.errors import StorageError

logger = structlog.get_logger(__name__)


def _format_source(source: Source) -> str:
    url = source.url or "-"
    description = source.description or "-"
    return f"[{source.id}] {source.name}  url={url}  description={description}"


def _run_with_repository(
    work: Callable[[SourcesRepository], Awaitable[Any]],
) -> Any:
    """Run ``work`` against a fresh repository and close the pool afterwards.

    Storage errors are reported on stderr and end the process with status 1.
    """

    async def run():
        db = Database()
        try:
            return await work(SourcesRepository(db))
        finally:
            await db.close()

    try:
        return asyncio.run(run())
    except StorageError as e:
        logger.error("Command failed", operation=e.operation, key=e.key, error=str(e))
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool) -> None:
    """Source Store - manage rows of the source table."""
    setup_logging(log_level="DEBUG" if debug else None)


@main.command("init-db")
def init_db() -> None:
    """Initialize the database schema."""
    bind_context(command="init-db")

    async def work(repo: SourcesRepository) -> None:
        await repo.create_table()

    _run_with_repository(work)
    click.echo("Database initialized successfully")


@main.command()
def health() -> None:
    """Check database connectivity."""
    bind_context(command="health")

    async def check() -> bool:
        db = Database()
        try:
            return await db.health_check()
        finally:
            await db.close()

    healthy = asyncio.run(check())
    if healthy:
        click.echo(click.style("  ✓ postgres: True", fg="green"))
        sys.exit(0)
    click.echo(click.style("  ✗ postgres: False", fg="red"))
    sys.exit(1)


@main.command()
@click.argument("name")
@click.option("--url", default=None, help="Source URL")
@click.option("--description", default=None, help="Free-text description")
def add(name: str, url: str | None, description: str | None) -> None:
    """Create a source."""
    bind_context(command="add")

    async def work(repo: SourcesRepository) -> Source:
        return await repo.create(Source(name=name, url=url, description=description))

    source = _run_with_repository(work)
    click.echo(f"Created {_format_source(source)}")


@main.command()
@click.argument("source_id", type=int)
def get(source_id: int) -> None:
    """Show one source by id."""
    bind_context(command="get", source_id=source_id)

    async def work(repo: SourcesRepository) -> Source | None:
        return await repo.get_by_id(source_id)

    source = _run_with_repository(work)
    if source is None:
        click.echo(f"Source {source_id} not found")
        sys.exit(1)
    click.echo(_format_source(source))


@main.command("list")
def list_sources() -> None:
    """List every source."""
    bind_context(command="list")

    async def work(repo: SourcesRepository) -> list[Source]:
        return await repo.get_all()

    sources = _run_with_repository(work)
    if not sources:
        click.echo("No sources found")
        return
    for source in sources:
        click.echo(_format_source(source))


@main.command()
@click.argument("source_id", type=int)
@click.argument("name")
@click.option("--url", default=None, help="Source URL")
@click.option("--description", default=None, help="Free-text description")
def update(
    source_id: int,
    name: str,
    url: str | None,
    description: str | None,
) -> None:
    """Rewrite name, url and description of a source.

    Every field is replaced: omitting --url or --description clears it.
    """
    bind_context(command="update", source_id=source_id)

    async def work(repo: SourcesRepository) -> None:
        await repo.update(
            Source(id=source_id, name=name, url=url, description=description)
        )

    _run_with_repository(work)
    click.echo(f"Updated source {source_id}")


@main.command()
@click.argument("source_id", type=int)
def delete(source_id: int) -> None:
    """Delete a source by id."""
    bind_context(command="delete", source_id=source_id)

    async def work(repo: SourcesRepository) -> None:
        await repo.delete(source_id)

    _run_with_repository(work)
    click.echo(f"Deleted source {source_id}")


@main.command()
@click.option("--host", default=None, help="API server host")
@click.option("--port", default=None, type=int, help="API server port")
@click.option("--reload", is_flag=True, help="Enable auto-reload (dev only)")
def serve(host: str | None, port: int | None, reload: bool) -> None:
    """Start the HTTP API server."""
    import uvicorn

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port

    click.echo(f"Starting API server on {host}:{port}")
    click.echo(f"API docs available on http://localhost:{port}/docs")

    uvicorn.run(
        "source_store.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level="info",
    )


@main.command()
def demo() -> None:
    """Create, read, update and delete an example source."""
    bind_context(command="demo")

    async def work(repo: SourcesRepository) -> None:
        source = Source(
            name="Example Source",
            url="https://example.com",
            description="Example description",
        )
        await repo.create(source)
        click.echo(f"Created source with id {source.id}")

        click.echo("All sources:")
        for s in await repo.get_all():
            click.echo(f"  {_format_source(s)}")

        source.description = "Updated description"
        await repo.update(source)
        click.echo(f"Updated source {source.id}")

        fetched = await repo.get_by_id(source.id)
        if fetched is not None:
            click.echo(f"Fetched {_format_source(fetched)}")

        await repo.delete(source.id)
        click.echo(f"Deleted source {source.id}")

        click.echo("All sources:")
        for s in await repo.get_all():
            click.echo(f"  {_format_source(s)}")

    _run_with_repository(work)


if __name__ == "__main__":
    main()
