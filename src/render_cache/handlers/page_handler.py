"""HTTP handler for the catch-all page route."""

from fastapi import Request, Response

from render_cache.entities import PageRequest
from render_cache.services import Dispatcher


class PageHandler:
    """Adapts Starlette requests to the dispatcher's descriptors."""

    def __init__(self, dispatcher: Dispatcher) -> None:
        self._dispatcher = dispatcher

    @staticmethod
    def to_page_request(request: Request) -> PageRequest:
        return PageRequest(
            method=request.method,
            path=request.url.path,
            query=request.url.query,
            headers=dict(request.headers.items()),
        )

    async def handle(self, request: Request) -> Response:
        """Dispatch a page or asset request and build the HTTP response."""
        result = await self._dispatcher.dispatch(self.to_page_request(request))
        return Response(content=result.body, status_code=result.status, headers=result.headers)
