"""HTTP listener protocol.

The listener owns the socket; the supervisor owns component state. Keeping
them apart lets tests drive ``Supervisor.restart()`` with a fake listener.
"""

from typing import Protocol, runtime_checkable

from fastapi import FastAPI


@runtime_checkable
class Listener(Protocol):
    """Protocol for something that serves an ASGI app on a socket."""

    async def start(self, app: FastAPI) -> None:
        """Open the socket and start serving ``app``."""
        ...

    async def stop(self) -> None:
        """Close the socket, letting in-flight requests finish."""
        ...

    async def wait_closed(self) -> None:
        """Wait until the current server stops serving."""
        ...
