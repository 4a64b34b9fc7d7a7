"""
FastAPI application factory.
"""

import time
import uuid
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from source_store.api.dependencies import cleanup_dependencies
from source_store.api.routes import health, sources
from source_store.observability.logging import bind_context, clear_context
from source_store.storage.errors import DatabaseConnectionError, PersistenceError

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("Source Store API starting up")

    yield

    logger.info("Source Store API shutting down")
    await cleanup_dependencies()


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Source Store API",
        description="Create, read, update and delete rows of the source table.",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "health", "description": "Service health checks"},
            {"name": "sources", "description": "Source CRUD"},
        ],
    )

    # Request logging and correlation ID middleware
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = (
            request.headers.get("X-Request-ID")
            or request.headers.get("X-Correlation-ID")
            or str(uuid.uuid4())
        )
        bind_context(request_id=request_id)
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
            duration = time.perf_counter() - start_time
            response.headers["X-Request-ID"] = request_id

            logger.info(
                "HTTP request",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round(duration * 1000, 2),
            )
            return response
        finally:
            clear_context()

    @app.exception_handler(DatabaseConnectionError)
    async def connection_error_handler(request: Request, exc: DatabaseConnectionError):
        logger.error("Database unavailable", operation=exc.operation, error=str(exc))
        return JSONResponse(
            status_code=503,
            content={"detail": "Database unavailable", "error_type": "connection"},
        )

    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(request: Request, exc: PersistenceError):
        logger.error(
            "Statement rejected",
            operation=exc.operation,
            key=exc.key,
            error=str(exc),
        )
        return JSONResponse(
            status_code=500,
            content={"detail": str(exc), "error_type": "persistence"},
        )

    app.include_router(health.router, tags=["health"])
    app.include_router(sources.router, tags=["sources"])

    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "service": "Source Store API",
            "version": "0.1.0",
            "docs": "/docs",
        }

    return app
