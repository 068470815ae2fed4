"""Rendering engine result entity."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class RenderResult:
    """What the rendering engine produced for one route.

    Attributes:
        markup: Rendered application markup for the mount point
        head: Head payload (``headTags``, ``htmlAttrs``, ``bodyAttrs``,
            ``bodyTagsOpen``, ``bodyTags``)
        metadata: Placeholder name -> replacement value
        redirect: Target URL when the route resolves to a redirect
        state: Serializable application state for client hydration
        settings: Site settings (injection snippets among them)
        entities: Entity data shipped to the client
        prefetch: Prefetched data shipped to the client
    """

    markup: str = ""
    head: Mapping[str, str] = field(default_factory=dict)
    metadata: Mapping[str, str] = field(default_factory=dict)
    redirect: str | None = None
    state: Any = None
    settings: Mapping[str, str] = field(default_factory=dict)
    entities: Any = None
    prefetch: Any = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RenderResult":
        """Build a result from the mapping returned by an entry module."""
        return cls(
            markup=data.get("markup") or "",
            head=data.get("head") or {},
            metadata=data.get("metadata") or {},
            redirect=data.get("redirect") or None,
            state=data.get("state"),
            settings=data.get("settings") or {},
            entities=data.get("entities"),
            prefetch=data.get("prefetch"),
        )
