"""Host authority normalization.

Keys use the wire form of the authority: ASCII (IDNA-encoded) names, and no
port when the port is a scheme default, since ``httpx.URL`` drops those too.
"""

import httpx

DEFAULT_PORTS = ("80", "443")


def _ascii_name(name: str) -> str:
    if name.isascii():
        return name
    return httpx.URL(f"http://{name}/").raw_host.decode("ascii")


def normalize_host(host: str) -> str:
    """
    Normalize a ``host[:port]`` authority into a registry key.

    Names are lower-cased, IDNA-encoded and lose a trailing root dot, IPv6
    literals are bracketed, and an explicit non-default port is kept.
    """
    raw = host.strip().lower()
    if not raw:
        raise ValueError("host is required")

    if raw.startswith("["):
        end = raw.find("]")
        if end == -1:
            raise ValueError(f"invalid host {host!r}: unterminated IPv6 literal")
        name, rest = raw[: end + 1], raw[end + 1:]
        if rest and not rest.startswith(":"):
            raise ValueError(f"invalid host {host!r}")
        port = rest[1:]
    elif raw.count(":") > 1:
        name, port = f"[{raw}]", ""
    else:
        name, _, port = raw.partition(":")
        name = name.rstrip(".")

    if name in ("", "[]"):
        raise ValueError(f"invalid host {host!r}: empty name")
    if port and not port.isdigit():
        raise ValueError(f"invalid port in host {host!r}")

    name = _ascii_name(name)
    if not port or port in DEFAULT_PORTS:
        return name
    return f"{name}:{port}"


def host_of(url: httpx.URL) -> str:
    """Return the dispatch key a request URL addresses, or "" if it has no host."""
    host = url.raw_host.decode("ascii")
    if not host:
        return ""
    if ":" in host:
        host = f"[{host}]"
    if url.port is None:
        return host
    return f"{host}:{url.port}"
