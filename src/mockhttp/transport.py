"""In-process HTTP transport.

Transport plugs into ``httpx.Client`` and ``httpx.AsyncClient`` in place of a
network transport. Each request is dispatched by host to a handler registered
in the same process; the handler runs on the caller's thread (or task) and its
output is returned as an ``httpx.Response``.

Failures:
  - ServerNotFound when no handler is registered for the host
  - anything the handler raises propagates unchanged
"""

from __future__ import annotations

import inspect
import logging
from typing import Any

import httpx
from typing_extensions import override

from .config import Config
from .errors import ServerNotFound
from .hosts import host_of
from .http.handler import Handler
from .http.request import HttpRequest
from .http.response import ResponseWriter
from .registry.local import Registry


logger = logging.getLogger(__name__)

REMOTE_ADDR_EXTENSION = "remote_addr"


class Transport(httpx.BaseTransport, httpx.AsyncBaseTransport):
    """
    Dispatches requests to handlers registered by host name.

    Without an explicit registry the transport gets a brand-new empty one,
    so independently constructed transports never share registrations.

    The remote address is transport-wide: every round trip sees the value
    most recently passed to set_remote_addr(). Callers that need distinct
    addresses at the same time should use separate transports.
    """

    def __init__(
        self,
        registry: Registry | None = None,
        *,
        remote_addr: str | None = None,
        config: Config | None = None,
    ):
        self.registry = registry if registry is not None else Registry()
        if remote_addr is None:
            remote_addr = (config or Config()).remote_addr
        self._remote_addr = remote_addr

    @property
    def remote_addr(self) -> str:
        return self._remote_addr

    def set_remote_addr(self, addr: str) -> None:
        self._remote_addr = addr

    def register(self, host: str, handler: Any) -> None:
        self.registry.register(host, handler)

    # --- round trip ---

    def round_trip(self, request: httpx.Request) -> httpx.Response:
        """Dispatch ``request`` to its host's handler and capture the response."""
        handler = self._resolve(request)
        request.read()
        view, writer = self._prepare(request)

        result = handler.handle(view, writer)
        if inspect.isawaitable(result):
            if inspect.iscoroutine(result):
                result.close()
            raise TypeError(
                f"handler {handler!r} returned an awaitable; use an httpx.AsyncClient to reach it"
            )
        return writer.finalize(request)

    async def round_trip_async(self, request: httpx.Request) -> httpx.Response:
        """Same as round_trip(), awaiting handlers that return an awaitable."""
        handler = self._resolve(request)
        await request.aread()
        view, writer = self._prepare(request)

        result = handler.handle(view, writer)
        if inspect.isawaitable(result):
            await result
        return writer.finalize(request)

    @override
    def handle_request(self, request: httpx.Request) -> httpx.Response:
        return self.round_trip(request)

    @override
    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        return await self.round_trip_async(request)

    def _resolve(self, request: httpx.Request) -> Handler:
        host = host_of(request.url)
        handler = self.registry.lookup(host)
        if handler is None:
            logger.debug("No server registered for host '%s'", host)
            raise ServerNotFound(host, request=request)
        logger.debug("Dispatching %s %s to %r", request.method, request.url, handler)
        return handler

    def _prepare(self, request: httpx.Request) -> tuple[HttpRequest, ResponseWriter]:
        remote_addr = self._remote_addr
        request.extensions[REMOTE_ADDR_EXTENSION] = remote_addr
        return HttpRequest.from_httpx(request, remote_addr), ResponseWriter()

    # --- clients ---

    def client(self, **kwargs: Any) -> httpx.Client:
        """Build an httpx.Client that sends through this transport."""
        return httpx.Client(transport=self, **kwargs)

    def async_client(self, **kwargs: Any) -> httpx.AsyncClient:
        """Build an httpx.AsyncClient that sends through this transport."""
        return httpx.AsyncClient(transport=self, **kwargs)

    def __repr__(self) -> str:
        return f"Transport(hosts={self.registry.hosts()!r}, remote_addr={self._remote_addr!r})"


def new_transport() -> Transport:
    """Return a transport bound to a new, empty registry."""
    return Transport()
