"""
Pydantic models for API request/response schemas.
"""

from typing import Literal

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Response model for errors."""

    detail: str = Field(
        ...,
        description="Error message",
    )
    error_type: str = Field(
        default="error",
        description="Error type",
    )


class HealthResponse(BaseModel):
    """Response model for the health endpoint."""

    status: Literal["healthy", "unhealthy"]
    database: bool = Field(..., description="Whether SELECT 1 succeeded")
    latency_ms: float = Field(..., description="Time spent on the check")


class SourceItem(BaseModel):
    """A persisted source."""

    id: int
    name: str
    url: str | None = None
    description: str | None = None


class CreateSourceRequest(BaseModel):
    """Request body for creating a source."""

    name: str = Field(..., min_length=1, max_length=255)
    url: str | None = Field(default=None, max_length=512)
    description: str | None = Field(default=None, max_length=512)


class UpdateSourceRequest(BaseModel):
    """Request body for updating a source. Every field is rewritten."""

    name: str = Field(..., min_length=1, max_length=255)
    url: str | None = Field(default=None, max_length=512)
    description: str | None = Field(default=None, max_length=512)


class SourcesListResponse(BaseModel):
    """Response model for listing sources."""

    sources: list[SourceItem]
    total: int
    latency_ms: float
