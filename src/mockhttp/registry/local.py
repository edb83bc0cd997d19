"""Host name registry for in-process servers."""

import logging
import threading
from typing import Any, Dict, Optional

from ..hosts import normalize_host
from ..http.handler import Handler, as_handler


logger = logging.getLogger(__name__)


class Registry:
    """
    Thread-safe host registry.

    Maps normalized host names to handlers. Registering a host that is
    already present replaces its handler.
    """

    def __init__(self):
        self._hosts: Dict[str, Handler] = {}
        self._lock = threading.Lock()

    def register(self, host: str, handler: Any) -> None:
        """Register ``handler`` (a Handler or a ``fn(request, writer)``) for ``host``."""
        key = normalize_host(host)
        resolved = as_handler(handler)
        with self._lock:
            replaced = key in self._hosts
            self._hosts[key] = resolved
        if replaced:
            logger.debug("Replaced handler for host '%s'", key)
        else:
            logger.debug("Registered handler for host '%s'", key)

    def unregister(self, host: str) -> bool:
        """
        Remove the handler registered for ``host``.

        Returns True if a handler was removed, False if the host was unknown.
        """
        key = normalize_host(host)
        with self._lock:
            if key not in self._hosts:
                return False
            del self._hosts[key]
            return True

    def lookup(self, host: str) -> Optional[Handler]:
        """
        Look up the handler for ``host``.

        Returns the handler if found, None otherwise. A malformed host can
        never have been registered, so it is simply not found.
        """
        try:
            key = normalize_host(host)
        except ValueError:
            return None
        with self._lock:
            return self._hosts.get(key)

    def hosts(self) -> list[str]:
        """Return list of all registered hosts."""
        with self._lock:
            return list(self._hosts.keys())

    def clear(self) -> None:
        with self._lock:
            self._hosts.clear()

    def __contains__(self, host: object) -> bool:
        return isinstance(host, str) and self.lookup(host) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._hosts)

    def __repr__(self) -> str:
        return f"Registry(hosts={self.hosts()!r})"
