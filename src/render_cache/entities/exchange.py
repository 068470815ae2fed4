"""Request and response descriptors for the page dispatcher."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class PageRequest:
    """Transport-independent view of an incoming request.

    Header names in ``headers`` are lower-case.
    """

    method: str
    path: str
    query: str = ""
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def target(self) -> str:
        """Path plus query string, as sent on the request line."""
        return f"{self.path}?{self.query}" if self.query else self.path

    @property
    def accept_encoding(self) -> str:
        return self.headers.get("accept-encoding", "")

    @property
    def if_none_match(self) -> str:
        return self.headers.get("if-none-match", "")

    @property
    def user_agent(self) -> str:
        return self.headers.get("user-agent", "")


@dataclass(frozen=True)
class CacheEffect:
    """A cache mutation performed while producing a response."""

    kind: str
    key: str


@dataclass(frozen=True)
class PageResponse:
    """Response descriptor plus the side effects that produced it."""

    status: int
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    effects: list[CacheEffect] = field(default_factory=list)
