"""Theme manifest (``theme.json``) schema."""

from pydantic import BaseModel


class ThemeManifest(BaseModel):
    """Fields read from a theme's ``theme.json``; unknown keys are ignored."""

    name: str | None = None
    description: str | None = None
    author: str | None = None
    version: str | None = None
    preview: str | None = None

    model_config = {"extra": "ignore", "coerce_numbers_to_str": True}
