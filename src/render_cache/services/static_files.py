"""Static file cache with content-hash entity tags.

Entries are keyed by absolute path and stay valid as long as the file's
modification time does not change. There is no size bound.
"""

import hashlib
import mimetypes
from pathlib import Path

from render_cache.entities import StaticFileEntry, StaticFileResponse
from render_cache.logging import get_logger
from render_cache.services import compression

logger = get_logger(__name__)

COMPRESSIBLE_TYPES = (
    "text/",
    "application/javascript",
    "application/json",
    "image/svg+xml",
    "application/xml",
)


def is_compressible(content_type: str) -> bool:
    """Check if a content type belongs to the compressible set."""
    return any(kind in content_type for kind in COMPRESSIBLE_TYPES)


def resolve_under(root: str | Path, url_path: str) -> Path | None:
    """Map a URL path onto a file below ``root``.

    Returns None when the path would escape ``root``.
    """
    base = Path(root).resolve()
    candidate = (base / url_path.lstrip("/")).resolve()
    if candidate != base and base not in candidate.parents:
        return None
    return candidate


class StaticFileCache:
    """Serves files from disk, caching their bytes and ETag by mtime.

    Example:
        ```python
        files = StaticFileCache(max_age=900)
        response = files.serve(Path("dist/assets/app.js"), "", "gzip, br")
        if response is None:
            ...  # fall through to the next route
        ```
    """

    def __init__(self, max_age: int = 900) -> None:
        """Initialize the static file cache.

        Args:
            max_age: Seconds advertised in ``Cache-Control``.
        """
        self._entries: dict[Path, StaticFileEntry] = {}
        self._max_age = max_age

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, path: Path) -> StaticFileEntry | None:
        """Return the cached snapshot for ``path`` without touching the disk."""
        return self._entries.get(path)

    def load(self, path: Path) -> StaticFileEntry | None:
        """Return a current snapshot of ``path``, reading it only when changed.

        Args:
            path: Absolute file path

        Returns:
            The entry, or None if the path is not a regular file
        """
        if not path.is_file():
            return None

        mtime = path.stat().st_mtime_ns
        entry = self._entries.get(path)
        if entry is not None and entry.mtime == mtime:
            return entry

        content = path.read_bytes()
        entry = StaticFileEntry(
            path=path,
            content=content,
            etag=hashlib.md5(content).hexdigest(),
            mtime=mtime,
        )
        self._entries[path] = entry
        return entry

    def serve(
        self,
        path: Path,
        if_none_match: str = "",
        accept_encoding: str = "",
    ) -> StaticFileResponse | None:
        """Serve a file, answering conditional requests.

        Args:
            path: Absolute file path
            if_none_match: Raw ``If-None-Match`` header value
            accept_encoding: Raw ``Accept-Encoding`` header value

        Returns:
            A 200/304 response, or None when the file cannot be served
        """
        try:
            entry = self.load(path)
        except OSError as e:
            logger.error("static_file_error", path=str(path), error=str(e))
            return None

        if entry is None:
            return None

        if if_none_match == entry.etag:
            return StaticFileResponse(status=304, headers={"ETag": entry.etag})

        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        headers = {
            "Content-Type": content_type,
            "ETag": entry.etag,
            "Cache-Control": f"public, max-age={self._max_age}",
        }

        body = entry.content
        if is_compressible(content_type):
            body, encoding = compression.compress(entry.content, accept_encoding)
            if encoding.header_value:
                headers["Content-Encoding"] = encoding.header_value
                headers["Vary"] = "Accept-Encoding"

        return StaticFileResponse(status=200, headers=headers, body=body)
