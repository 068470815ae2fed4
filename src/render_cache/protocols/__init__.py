"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Swapping the rendering engine bridge by environment
- Unit testing with fake engines, stores and listeners
- Clear separation of concerns
"""

from .listener import Listener
from .render_engine import RenderEngine
from .settings_store import SettingsStore

__all__ = [
    "Listener",
    "RenderEngine",
    "SettingsStore",
]
