"""Per-request decision tree for page and asset requests.

Order:
1. ``/assets/*`` -> static file from the build output
2. other paths ending in a file extension (no query) -> static file
3. extension-like paths that were not served -> 404
4. page cache hit -> replay stored headers and payload
5. miss -> render, assemble, store, respond

Admin routes are registered as explicit FastAPI routes ahead of the
catch-all page route, so they never reach the dispatcher.
"""

import re
from pathlib import Path

from render_cache.entities import CacheEffect, PageRequest, PageResponse, StaticFileResponse
from render_cache.errors import RenderError
from render_cache.logging import get_logger
from render_cache.protocols import RenderEngine
from render_cache.services.document import DocumentAssembler
from render_cache.services.page_cache import PageCache, cache_key
from render_cache.services.static_files import StaticFileCache, resolve_under

logger = get_logger(__name__)

ASSET_PREFIX = "/assets/"
FILE_SUFFIX = re.compile(r"\.\w+$")


def _plain_text(status: int, message: str) -> PageResponse:
    return PageResponse(
        status=status,
        headers={"Content-Type": "text/plain"},
        body=message.encode("utf-8"),
    )


class Dispatcher:
    """Maps a PageRequest to a PageResponse, filling caches on the way.

    Example:
        ```python
        dispatcher = Dispatcher(
            static_files=StaticFileCache(),
            page_cache=PageCache(),
            engine=create_render_engine(settings, theme="default"),
            assembler=DocumentAssembler(production=True),
            dist_dir="dist",
            template_path=Path("dist/index.html"),
        )
        response = await dispatcher.dispatch(PageRequest(method="GET", path="/"))
        ```
    """

    def __init__(
        self,
        static_files: StaticFileCache,
        page_cache: PageCache,
        engine: RenderEngine,
        assembler: DocumentAssembler,
        dist_dir: str | Path,
        template_path: str | Path,
        page_max_age: int = 900,
    ) -> None:
        self._static_files = static_files
        self._page_cache = page_cache
        self._engine = engine
        self._assembler = assembler
        self._dist_dir = Path(dist_dir)
        self._template_path = Path(template_path)
        self._page_max_age = page_max_age

    async def dispatch(self, request: PageRequest) -> PageResponse:
        """Produce the response for a page or asset request."""
        served = self._serve_static(request)
        if served is not None:
            return PageResponse(status=served.status, headers=served.headers, body=served.body)

        target = request.target
        if FILE_SUFFIX.search(target):
            return _plain_text(404, f"Not found: {target}")

        self._page_cache.sweep_expired()
        key = cache_key(target, request.user_agent)

        entry = self._page_cache.lookup(key)
        if entry is not None:
            body, encoding = PageCache.select_variant(entry, request.accept_encoding)
            headers = dict(entry.headers)
            if encoding.header_value:
                headers["Content-Encoding"] = encoding.header_value
            return PageResponse(status=200, headers=headers, body=body)

        try:
            return await self._render(request, key)
        except RenderError as e:
            logger.error("render_failed", target=target, error=e.message)
            return _plain_text(e.status_code, e.message)

    def _serve_file(self, url_path: str, request: PageRequest) -> StaticFileResponse | None:
        path = resolve_under(self._dist_dir, url_path)
        if path is None:
            return None
        return self._static_files.serve(path, request.if_none_match, request.accept_encoding)

    def _serve_static(self, request: PageRequest) -> StaticFileResponse | None:
        if request.path.startswith(ASSET_PREFIX):
            served = self._serve_file(request.path, request)
            if served is not None:
                return served

        if request.path != "/" and not request.query and FILE_SUFFIX.search(request.path):
            return self._serve_file(request.path, request)

        return None

    def _load_template(self) -> str:
        try:
            return self._template_path.read_text(encoding="utf-8")
        except OSError as e:
            raise RenderError(f"Cannot read template {self._template_path}: {e}") from e

    async def _render(self, request: PageRequest, key: str) -> PageResponse:
        template = self._load_template()
        result = await self._engine.render(request.target)

        if result.redirect:
            return PageResponse(status=301, headers={"Location": result.redirect})

        document = self._assembler.assemble(template, result)
        headers = {
            "Content-Type": "text/html",
            "Cache-Control": f"public, max-age={self._page_max_age}",
        }
        entry = self._page_cache.store(key, document, headers)

        body, encoding = PageCache.select_variant(entry, request.accept_encoding)
        if encoding.header_value:
            headers["Content-Encoding"] = encoding.header_value

        return PageResponse(
            status=200,
            headers=headers,
            body=body,
            effects=[CacheEffect(kind="page_cache.store", key=key)],
        )
