"""Theme discovery and lookup.

Themes live in immediate subdirectories named ``theme-<namespace>``, each
with an optional ``theme.json`` manifest. Discovery runs once per
bootstrap; the registry is read-only afterwards.
"""

from collections.abc import Iterable
from pathlib import Path

import pydantic

from render_cache.dto import ThemeManifest
from render_cache.entities import ThemeDescriptor
from render_cache.logging import get_logger

logger = get_logger(__name__)

THEME_PREFIX = "theme-"
MANIFEST_NAME = "theme.json"


def load_theme(directory: Path, base_url: str = "") -> ThemeDescriptor | None:
    """Build a descriptor from a theme directory.

    Args:
        directory: A ``theme-*`` directory
        base_url: Site URL prepended to the manifest's preview path

    Returns:
        The descriptor, or None when the manifest is missing or malformed
    """
    manifest_path = directory / MANIFEST_NAME
    if not manifest_path.is_file():
        return None

    try:
        manifest = ThemeManifest.model_validate_json(manifest_path.read_bytes())
    except (OSError, pydantic.ValidationError) as e:
        logger.error("theme_manifest_invalid", path=str(manifest_path), error=str(e))
        return None

    return ThemeDescriptor(
        namespace=directory.name.removeprefix(THEME_PREFIX),
        name=manifest.name,
        description=manifest.description,
        author=manifest.author,
        version=manifest.version,
        preview=f"{base_url}{manifest.preview}" if manifest.preview else None,
    )


class ThemeRegistry:
    """Read-only set of themes found at startup.

    Example:
        ```python
        registry = ThemeRegistry.discover("src", base_url="https://blog.example")
        registry.exists("classic")  # True if src/theme-classic/theme.json is valid
        ```
    """

    def __init__(self, themes: Iterable[ThemeDescriptor] = ()) -> None:
        self._themes = {theme.namespace: theme for theme in themes}

    @classmethod
    def discover(cls, root: str | Path, base_url: str = "") -> "ThemeRegistry":
        """Scan ``root`` for theme directories.

        Directories with a missing or malformed manifest are skipped; a
        missing root yields an empty registry.

        Args:
            root: Directory holding ``theme-*`` subdirectories
            base_url: Site URL used for preview links

        Returns:
            A registry with every valid theme
        """
        root = Path(root)
        try:
            candidates = sorted(
                entry for entry in root.iterdir()
                if entry.name.startswith(THEME_PREFIX) and entry.is_dir()
            )
        except OSError as e:
            logger.warning("theme_root_unreadable", root=str(root), error=str(e))
            return cls()

        themes = [theme for theme in (load_theme(d, base_url) for d in candidates) if theme]
        logger.info("themes_discovered", root=str(root), count=len(themes))
        return cls(themes)

    def __len__(self) -> int:
        return len(self._themes)

    def list(self) -> list[ThemeDescriptor]:
        """Get every theme in discovery order."""
        return list(self._themes.values())

    def exists(self, namespace: str) -> bool:
        """Check if a theme namespace was discovered."""
        return namespace in self._themes

    def get(self, namespace: str) -> ThemeDescriptor | None:
        """Get a theme by namespace."""
        return self._themes.get(namespace)
