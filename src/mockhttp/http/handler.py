"""The handler capability: ``handle(request, writer)``."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Awaitable, Callable, Protocol, Union, runtime_checkable

if TYPE_CHECKING:
    from .request import HttpRequest
    from .response import ResponseWriter


MaybeAwaitable = Union[None, Awaitable[None]]
HandlerCallable = Callable[["HttpRequest", "ResponseWriter"], MaybeAwaitable]


@runtime_checkable
class Handler(Protocol):
    """Anything that can answer a request by writing to a ResponseWriter.

    Handlers used through an ``httpx.AsyncClient`` may return an awaitable;
    it is awaited on the caller's task.
    """

    def handle(self, request: HttpRequest, writer: ResponseWriter) -> MaybeAwaitable:
        ...


class HandlerFunc:
    """Adapts a plain ``fn(request, writer)`` callable to the Handler protocol."""

    __slots__ = ("func",)

    def __init__(self, func: HandlerCallable):
        self.func = func

    def handle(self, request: HttpRequest, writer: ResponseWriter) -> MaybeAwaitable:
        return self.func(request, writer)

    def __repr__(self) -> str:
        name = getattr(self.func, "__qualname__", repr(self.func))
        return f"HandlerFunc({name})"


def as_handler(obj: Any) -> Handler:
    """Return ``obj`` as a Handler, wrapping bare callables in HandlerFunc."""
    if isinstance(obj, Handler):
        return obj
    if callable(obj):
        return HandlerFunc(obj)
    raise TypeError(f"{obj!r} is not a handler: expected handle(request, writer) or a callable")
