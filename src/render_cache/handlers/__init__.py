"""Handler layer for HTTP endpoints.

This layer contains the HTTP request/response handlers.
Handlers depend on services, not directly on the rendering engine.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Logic)  -> (External access)
"""

from .admin_handler import AdminHandler
from .page_handler import PageHandler

__all__ = [
    "AdminHandler",
    "PageHandler",
]
