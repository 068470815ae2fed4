"""Static file domain entities."""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class StaticFileEntry:
    """Content-addressed snapshot of a file on disk.

    Attributes:
        path: Absolute path of the file
        content: The file bytes as read from disk
        etag: MD5 hex digest of ``content``
        mtime: Modification time (ns) the snapshot was taken at
    """

    path: Path
    content: bytes
    etag: str
    mtime: int


@dataclass(frozen=True)
class StaticFileResponse:
    """Result of serving a static file (200 or 304)."""

    status: int
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""
