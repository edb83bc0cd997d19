"""Host registry mapping server names to handlers."""

from .local import Registry

__all__ = [
    "Registry",
]
