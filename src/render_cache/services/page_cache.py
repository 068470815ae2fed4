"""Page render cache.

Maps ``(target, device class)`` keys to rendered documents with three
precomputed payload variants. Entries expire after a fixed TTL; expired
entries read as misses and are only removed by ``sweep_expired``.
"""

import time
from collections.abc import Callable

from render_cache.entities import CacheStats, CompressedVariants, PageCacheEntry
from render_cache.logging import get_logger
from render_cache.services import compression
from render_cache.services.compression import Encoding

logger = get_logger(__name__)

DEFAULT_TTL = 30 * 60


def device_class(user_agent: str | None) -> str:
    """Classify a client as ``mobile`` or ``desktop`` from its User-Agent."""
    if user_agent and "mobile" in user_agent.lower():
        return "mobile"
    return "desktop"


def cache_key(target: str, user_agent: str | None = None) -> str:
    """Build the page cache key for a request target and User-Agent."""
    return f"{target}:{device_class(user_agent)}"


class PageCache:
    """TTL-bounded in-memory cache of rendered pages.

    The clock is injectable so expiry can be tested deterministically.

    Example:
        ```python
        cache = PageCache(ttl=1800)
        cache.store("/:desktop", "<html>...</html>", {"Content-Type": "text/html"})
        entry = cache.lookup("/:desktop")
        ```
    """

    def __init__(
        self,
        ttl: float = DEFAULT_TTL,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the page cache.

        Args:
            ttl: Maximum entry age in seconds.
            clock: Returns the current time in seconds.
        """
        self._entries: dict[str, PageCacheEntry] = {}
        self._ttl = ttl
        self._clock = clock

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    @property
    def ttl(self) -> float:
        """Get the entry time-to-live in seconds."""
        return self._ttl

    def _is_expired(self, entry: PageCacheEntry, now: float) -> bool:
        return entry.age(now) > self._ttl

    def lookup(self, key: str) -> PageCacheEntry | None:
        """Get a valid entry.

        Args:
            key: Cache key

        Returns:
            The entry, or None if absent or older than the TTL
        """
        entry = self._entries.get(key)
        if entry is None or self._is_expired(entry, self._clock()):
            return None
        return entry

    def store(self, key: str, document: str, headers: dict[str, str]) -> PageCacheEntry:
        """Store a rendered document with all of its payload variants.

        Args:
            key: Cache key
            document: Final HTML document
            headers: Response headers to replay on hits

        Returns:
            The stored entry
        """
        payload = document.encode("utf-8")
        entry = PageCacheEntry(
            key=key,
            document=document,
            variants=CompressedVariants(
                uncompressed=payload,
                gzip=compression.encode(payload, Encoding.GZIP),
                br=compression.encode(payload, Encoding.BROTLI),
            ),
            created_at=self._clock(),
            headers=dict(headers),
        )
        self._entries[key] = entry
        return entry

    def clear(self) -> int:
        """Remove every entry.

        Returns:
            Number of entries removed
        """
        count = len(self._entries)
        self._entries.clear()
        logger.info("page_cache_cleared", removed=count)
        return count

    def stats(self) -> CacheStats:
        """Classify entries by age without mutating the cache."""
        now = self._clock()
        expired = sum(1 for entry in self._entries.values() if self._is_expired(entry, now))
        return CacheStats(
            total=len(self._entries),
            valid=len(self._entries) - expired,
            expired=expired,
        )

    def sweep_expired(self) -> int:
        """Physically remove expired entries.

        Returns:
            Number of entries removed
        """
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if self._is_expired(entry, now)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    @staticmethod
    def select_variant(entry: PageCacheEntry, accept_encoding: str | None) -> tuple[bytes, Encoding]:
        """Pick the stored payload matching the client's accepted encodings."""
        accepted = compression.accepted_encodings(accept_encoding or "")
        variants = {Encoding.BROTLI: entry.variants.br, Encoding.GZIP: entry.variants.gzip}
        # A missing compressed variant falls through to the next accepted one
        for encoding in compression.PRIORITY:
            payload = variants[encoding]
            if encoding.value in accepted and payload is not None:
                return payload, encoding
        return entry.variants.uncompressed, Encoding.IDENTITY
