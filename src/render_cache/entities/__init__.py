"""Domain entities for internal representation.

These are pure dataclasses (frozen) used internally by services,
repositories and the dispatcher. They are NOT used for API contracts -
use DTOs from the dto package for that.
"""

from .exchange import CacheEffect, PageRequest, PageResponse
from .page_entry import CacheStats, CompressedVariants, PageCacheEntry
from .render_result import RenderResult
from .static_file import StaticFileEntry, StaticFileResponse
from .theme import ThemeDescriptor

__all__ = [
    "CacheEffect",
    "CacheStats",
    "CompressedVariants",
    "PageCacheEntry",
    "PageRequest",
    "PageResponse",
    "RenderResult",
    "StaticFileEntry",
    "StaticFileResponse",
    "ThemeDescriptor",
]
