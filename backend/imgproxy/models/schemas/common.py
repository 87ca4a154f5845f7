"""Common Pydantic schemas for API responses."""

from typing import Any

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Error detail structure."""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Human readable message")
    details: dict[str, Any] | None = Field(None, description="Additional details")


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: ErrorDetail


class MemoryCacheStats(BaseModel):
    """Decoded-original cache counters."""

    entries: int
    capacity: int
    hits: int
    misses: int
    evictions: int


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Health status: ok, degraded, error")
    cache_dir: str
    cache_dir_exists: bool
    memory_cache: MemoryCacheStats
