"""Response DTOs for API endpoints."""

from pydantic import BaseModel, Field


class ThemeItem(BaseModel):
    """Single theme in the ``GET /themas`` listing."""

    namespace: str = Field(..., description="Theme namespace (directory without 'theme-')")
    name: str | None = Field(None, description="Display name")
    description: str | None = Field(None, description="Theme description")
    author: str | None = Field(None, description="Theme author")
    version: str | None = Field(None, description="Theme version")
    preview: str | None = Field(None, description="Absolute preview URL")


class CacheClearResponse(BaseModel):
    """Response DTO for the cache clear operation."""

    success: bool = Field(..., description="Whether the operation succeeded")
    message: str = Field(..., description="Human-readable status message")
    removed: int = Field(..., description="Number of entries removed", ge=0)


class CacheStatsResponse(BaseModel):
    """Response DTO for page cache statistics."""

    total: int = Field(..., description="Entries currently held", ge=0)
    valid: int = Field(..., description="Entries younger than the TTL", ge=0)
    expired: int = Field(..., description="Entries older than the TTL", ge=0)
