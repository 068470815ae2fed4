"""Compression negotiation.

Picks an encoding from the client's ``Accept-Encoding`` header with a
fixed priority: brotli, then gzip, then identity.
"""

import gzip
from enum import Enum

import brotli


class Encoding(str, Enum):
    """Content encodings the server can produce."""

    BROTLI = "br"
    GZIP = "gzip"
    IDENTITY = "identity"

    @property
    def header_value(self) -> str | None:
        """Value for the ``Content-Encoding`` header, None for identity."""
        return None if self is Encoding.IDENTITY else self.value


PRIORITY = (Encoding.BROTLI, Encoding.GZIP)


def accepted_encodings(accept_encoding: str) -> set[str]:
    """Parse an ``Accept-Encoding`` header into the set of accepted tokens.

    Tokens explicitly refused with ``q=0`` are left out.
    """
    accepted = set()
    for part in accept_encoding.split(","):
        token, _, params = part.strip().partition(";")
        token = token.strip().lower()
        if not token:
            continue
        params = params.replace(" ", "").lower()
        if params.startswith("q="):
            try:
                if float(params[2:]) == 0:
                    continue
            except ValueError:
                continue
        accepted.add(token)
    return accepted


def choose(accept_encoding: str | None) -> Encoding:
    """Choose the preferred encoding the client accepts.

    Args:
        accept_encoding: Raw ``Accept-Encoding`` header value

    Returns:
        BROTLI if accepted, else GZIP if accepted, else IDENTITY
    """
    accepted = accepted_encodings(accept_encoding or "")
    for encoding in PRIORITY:
        if encoding.value in accepted:
            return encoding
    return Encoding.IDENTITY


def encode(payload: bytes, encoding: Encoding) -> bytes:
    """Compress ``payload`` with the given encoding."""
    if encoding is Encoding.BROTLI:
        return brotli.compress(payload)
    if encoding is Encoding.GZIP:
        return gzip.compress(payload, mtime=0)
    return payload


def compress(payload: bytes, accept_encoding: str | None) -> tuple[bytes, Encoding]:
    """Negotiate an encoding and compress ``payload`` with it."""
    encoding = choose(accept_encoding)
    return encode(payload, encoding), encoding
