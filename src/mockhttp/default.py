"""Process-wide default instances.

These are ordinary objects built with the same constructors callers use;
tests that want isolation create their own Transport instead of resetting
these.
"""

from __future__ import annotations

from typing import Any

import httpx

from .http.mux import default_serve_mux
from .registry.local import Registry
from .transport import Transport


default_registry = Registry()
default_transport = Transport(default_registry)
default_client = httpx.Client(transport=default_transport)


def listen_and_serve(host: str, handler: Any = None, *, transport: Transport | None = None) -> None:
    """
    Serve ``handler`` under ``host``, the way a server would start listening.

    With no handler, requests to ``host`` go to default_serve_mux. With no
    transport, the handler is registered on default_transport.
    """
    if handler is None:
        handler = default_serve_mux
    (transport or default_transport).register(host, handler)
