"""Environment-driven configuration."""

import os
from dataclasses import dataclass, field

DEFAULT_REMOTE_ADDR = "127.0.0.1:13579"


def _env_remote_addr() -> str:
    return os.environ.get("MOCKHTTP_REMOTE_ADDR", DEFAULT_REMOTE_ADDR).strip()


@dataclass
class Config:
    """
    Defaults for new transports.

    Attributes:
        remote_addr: Synthetic client address handlers see, from
            ``MOCKHTTP_REMOTE_ADDR`` when set.
    """
    remote_addr: str = field(default_factory=_env_remote_addr)

    def __post_init__(self):
        """Validate the remote address."""
        host, sep, port = self.remote_addr.rpartition(":")
        if not sep or not host or not port.isdigit():
            raise ValueError(f"remote_addr must be host:port, got {self.remote_addr!r}")
