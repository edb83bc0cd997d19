"""Path-pattern request multiplexer.

Patterns are ``[METHOD ]/path``. A path ending in ``/`` names a subtree and
matches every path below it; any other path matches only itself. The longest
matching pattern wins. A GET pattern also answers HEAD.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .handler import Handler, MaybeAwaitable, as_handler
from .request import HttpRequest
from .response import ResponseWriter


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Pattern:
    method: Optional[str]
    path: str

    @staticmethod
    def parse(pattern: str) -> "Pattern":
        text = pattern.strip()
        method: Optional[str] = None
        if " " in text:
            method, _, text = text.partition(" ")
            method = method.upper()
            text = text.strip()
        if not text.startswith("/"):
            raise ValueError(f"invalid pattern {pattern!r}: path must start with '/'")
        return Pattern(method, text)

    def matches_path(self, path: str) -> bool:
        if self.path.endswith("/"):
            return path.startswith(self.path)
        return path == self.path

    def matches_method(self, method: str) -> bool:
        if self.method is None or self.method == method:
            return True
        return self.method == "GET" and method == "HEAD"

    def methods(self) -> tuple[str, ...]:
        if self.method is None:
            return ()
        if self.method == "GET":
            return ("GET", "HEAD")
        return (self.method,)

    def __str__(self) -> str:
        return self.path if self.method is None else f"{self.method} {self.path}"


def not_found(request: HttpRequest, writer: ResponseWriter) -> None:
    writer.set_header("Content-Type", "text/plain; charset=utf-8")
    writer.set_header("X-Content-Type-Options", "nosniff")
    writer.write_header(404)
    writer.write(b"404 page not found\n")


def method_not_allowed(writer: ResponseWriter, allowed: list[str]) -> None:
    writer.set_header("Allow", ", ".join(allowed))
    writer.set_header("Content-Type", "text/plain; charset=utf-8")
    writer.set_header("X-Content-Type-Options", "nosniff")
    writer.write_header(405)
    writer.write(b"Method Not Allowed\n")


class ServeMux:
    """A Handler that dispatches on request path (and optionally method)."""

    def __init__(self):
        self._routes: dict[Pattern, Handler] = {}
        self._lock = threading.Lock()

    def register(self, pattern: str, handler: Any) -> None:
        parsed = Pattern.parse(pattern)
        resolved = as_handler(handler)
        with self._lock:
            if parsed in self._routes:
                raise ValueError(f"pattern {str(parsed)!r} is already registered")
            self._routes[parsed] = resolved
        logger.debug("Registered route '%s'", parsed)

    def route(self, pattern: str) -> Callable[[Any], Any]:
        """Decorator form of register()."""
        def decorator(func):
            self.register(pattern, func)
            return func
        return decorator

    def patterns(self) -> list[str]:
        with self._lock:
            return [str(p) for p in self._routes]

    def match(self, method: str, path: str) -> tuple[Optional[Handler], list[str]]:
        """
        Find the handler for a request.

        Returns (handler, []) on a match. Otherwise returns (None, allowed)
        where ``allowed`` lists the methods some pattern would accept for
        this path; it is empty when nothing matches the path at all.
        """
        with self._lock:
            routes = sorted(
                self._routes.items(),
                key=lambda item: (len(item[0].path), item[0].method is not None),
                reverse=True,
            )

        allowed: set[str] = set()
        for pattern, handler in routes:
            if not pattern.matches_path(path):
                continue
            if pattern.matches_method(method):
                return handler, []
            allowed.update(pattern.methods())
        return None, sorted(allowed)

    def handle(self, request: HttpRequest, writer: ResponseWriter) -> MaybeAwaitable:
        handler, allowed = self.match(request.method, request.path)
        if handler is not None:
            return handler.handle(request, writer)
        if allowed:
            method_not_allowed(writer, allowed)
        else:
            not_found(request, writer)
        return None

    def __repr__(self) -> str:
        return f"ServeMux(patterns={self.patterns()!r})"


# Global multiplexer used when no handler is given to listen_and_serve
default_serve_mux = ServeMux()
