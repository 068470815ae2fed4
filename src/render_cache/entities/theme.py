"""Theme domain entity."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ThemeDescriptor:
    """A presentation theme discovered on disk.

    Attributes:
        namespace: Directory name without the ``theme-`` prefix
        name: Display name from the manifest
        description: Free-form description
        author: Theme author
        version: Theme version string
        preview: Absolute preview URL (site URL + manifest path)
    """

    namespace: str
    name: str | None = None
    description: str | None = None
    author: str | None = None
    version: str | None = None
    preview: str | None = None
