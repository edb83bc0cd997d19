"""HTTP-facing pieces of mockhttp.

Handlers receive an HttpRequest and write their answer to a ResponseWriter;
a ServeMux routes by path when one host serves several endpoints.
"""

from .handler import Handler, HandlerFunc, as_handler
from .request import HttpRequest
from .response import ResponseWriter, WriterState, reply
from .mux import ServeMux, default_serve_mux

__all__ = [
    "Handler",
    "HandlerFunc",
    "as_handler",
    "HttpRequest",
    "ResponseWriter",
    "WriterState",
    "reply",
    "ServeMux",
    "default_serve_mux",
]
