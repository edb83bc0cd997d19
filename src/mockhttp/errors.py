"""Errors raised by the in-process transport."""

from __future__ import annotations

import httpx


class ServerNotFound(httpx.ConnectError):
    """Raised when no handler is registered for the requested host."""

    def __init__(self, host: str, *, request: httpx.Request | None = None):
        super().__init__(f"mockhttp: server not found: {host!r}", request=request)
        self.host = host
