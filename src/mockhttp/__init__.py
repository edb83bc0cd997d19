"""In-process HTTP servers for testing httpx clients without a network."""

from .config import Config
from .errors import ServerNotFound
from .http.handler import Handler, HandlerFunc
from .http.request import HttpRequest
from .http.response import ResponseWriter, reply
from .http.mux import ServeMux, default_serve_mux
from .registry.local import Registry
from .transport import Transport, new_transport
from .default import default_registry, default_transport, default_client, listen_and_serve

__all__ = [
    # Configuration
    "Config",
    # Errors
    "ServerNotFound",
    # Handlers
    "Handler",
    "HandlerFunc",
    "HttpRequest",
    "ResponseWriter",
    "reply",
    "ServeMux",
    "default_serve_mux",
    # Dispatch
    "Registry",
    "Transport",
    "new_transport",
    # Defaults
    "default_registry",
    "default_transport",
    "default_client",
    "listen_and_serve",
]
