"""API request and response schemas.

Pydantic v2 models for API serialization/deserialization. Ingest endpoints
accept the telemetry record models directly.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class IngestResponse(BaseModel):
    """Response for the ingest endpoints."""

    accepted: int = Field(description="Number of records added by this request")
    total: int = Field(description="Number of records now held by the store")


class TaskMetricsResponse(BaseModel):
    """Execution counters of a scheduled task."""

    name: str
    last_run: datetime | None = None
    success_count: int
    failure_count: int

    model_config = {"from_attributes": True}


class TaskListResponse(BaseModel):
    """Response for listing scheduler tasks."""

    running: bool = Field(description="Whether the background loop is active")
    interval_seconds: float
    tasks: list[TaskMetricsResponse]


class GenerateResponse(BaseModel):
    """Response for a manual generation cycle."""

    succeeded: int
    total: int
    tasks: list[TaskMetricsResponse]


class CacheClearResponse(BaseModel):
    """Response for clearing the template cache."""

    cleared: list[str] = Field(description="Template names that were cached")


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str = Field(description="Error message")
    error_code: str | None = Field(default=None, description="Application-specific error code")
    extra: dict[str, Any] | None = Field(default=None, description="Additional error context")
