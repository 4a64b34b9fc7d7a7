"""Sources endpoints: CRUD for the source table."""

import time

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from source_store.api.dependencies import get_sources_repository
from source_store.api.models import (
    CreateSourceRequest,
    ErrorResponse,
    SourceItem,
    SourcesListResponse,
    UpdateSourceRequest,
)
from source_store.sources.repository import SourcesRepository
from source_store.sources.schemas import Source

logger = structlog.get_logger(__name__)
router = APIRouter()

_STORAGE_ERRORS = {
    500: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


def _source_to_item(s: Source) -> SourceItem:
    return SourceItem(
        id=s.id,
        name=s.name,
        url=s.url,
        description=s.description,
    )


@router.get(
    "/sources",
    response_model=SourcesListResponse,
    responses=_STORAGE_ERRORS,
    summary="List all sources",
)
async def list_sources(
    repo: SourcesRepository = Depends(get_sources_repository),
) -> SourcesListResponse:
    start = time.perf_counter()
    sources = await repo.get_all()
    latency_ms = (time.perf_counter() - start) * 1000
    return SourcesListResponse(
        sources=[_source_to_item(s) for s in sources],
        total=len(sources),
        latency_ms=round(latency_ms, 2),
    )


@router.post(
    "/sources",
    response_model=SourceItem,
    status_code=status.HTTP_201_CREATED,
    responses=_STORAGE_ERRORS,
    summary="Create a new source",
)
async def create_source(
    body: CreateSourceRequest,
    repo: SourcesRepository = Depends(get_sources_repository),
) -> SourceItem:
    source = await repo.create(
        Source(name=body.name, url=body.url, description=body.description)
    )
    logger.info("Source created", source_id=source.id)
    return _source_to_item(source)


@router.get(
    "/sources/{source_id}",
    response_model=SourceItem,
    responses={404: {"model": ErrorResponse}, **_STORAGE_ERRORS},
    summary="Get a source by id",
)
async def get_source(
    source_id: int,
    repo: SourcesRepository = Depends(get_sources_repository),
) -> SourceItem:
    source = await repo.get_by_id(source_id)
    if source is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Source {source_id} not found",
        )
    return _source_to_item(source)


@router.put(
    "/sources/{source_id}",
    response_model=SourceItem,
    responses={404: {"model": ErrorResponse}, **_STORAGE_ERRORS},
    summary="Update a source",
)
async def update_source(
    source_id: int,
    body: UpdateSourceRequest,
    repo: SourcesRepository = Depends(get_sources_repository),
) -> SourceItem:
    await repo.update(
        Source(
            id=source_id,
            name=body.name,
            url=body.url,
            description=body.description,
        )
    )

    # The repository treats a missing id as a no-op; HTTP clients get a 404.
    # Reading back after the write also catches a row deleted concurrently.
    stored = await repo.get_by_id(source_id)
    if stored is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Source {source_id} not found",
        )

    logger.info("Source updated", source_id=source_id)
    return _source_to_item(stored)


@router.delete(
    "/sources/{source_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=_STORAGE_ERRORS,
    summary="Delete a source",
)
async def delete_source(
    source_id: int,
    repo: SourcesRepository = Depends(get_sources_repository),
) -> None:
    await repo.delete(source_id)
    logger.info("Source deleted", source_id=source_id)
