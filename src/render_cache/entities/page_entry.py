"""Page cache domain entities."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class CompressedVariants:
    """Payload variants precomputed from one rendered document.

    ``uncompressed`` is always present; the compressed variants are
    best-effort.
    """

    uncompressed: bytes
    gzip: bytes | None = None
    br: bytes | None = None


@dataclass(frozen=True)
class PageCacheEntry:
    """Domain entity for a rendered page kept in the page cache.

    Attributes:
        key: Cache key (``"{target}:{device}"``)
        document: The final HTML document
        variants: Uncompressed and compressed payloads
        created_at: Clock reading when the entry was stored
        headers: Response headers replayed on every hit
    """

    key: str
    document: str
    variants: CompressedVariants
    created_at: float
    headers: dict[str, str] = field(default_factory=dict)

    def age(self, now: float) -> float:
        """Seconds elapsed since the entry was stored."""
        return now - self.created_at


@dataclass(frozen=True)
class CacheStats:
    """Entry counts classified against the TTL at query time."""

    total: int
    valid: int
    expired: int
