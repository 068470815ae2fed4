"""Request DTOs for API endpoints."""

from pydantic import BaseModel, Field


class SetThemeRequest(BaseModel):
    """Request DTO for switching the active theme.

    ``theme`` is optional at the model level so that a missing field can be
    reported separately from a body that fails to parse.
    """

    theme: str | None = Field(None, description="Namespace of a discovered theme")
