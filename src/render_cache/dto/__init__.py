"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract and the on-disk
theme manifest. They are used for validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .manifest import ThemeManifest
from .requests import SetThemeRequest
from .responses import CacheClearResponse, CacheStatsResponse, ThemeItem

__all__ = [
    "CacheClearResponse",
    "CacheStatsResponse",
    "SetThemeRequest",
    "ThemeItem",
    "ThemeManifest",
]
