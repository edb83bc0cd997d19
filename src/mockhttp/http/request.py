"""Server-side view of a request dispatched to a handler."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

import httpx

from ..hosts import host_of


@dataclass(frozen=True, slots=True)
class HttpRequest:
    method: str
    url: httpx.URL
    host: str
    headers: httpx.Headers
    body: bytes
    remote_addr: str
    raw: httpx.Request

    @classmethod
    def from_httpx(cls, request: httpx.Request, remote_addr: str) -> "HttpRequest":
        """Build the view from a request whose body has already been read."""
        return cls(
            method=request.method,
            url=request.url,
            host=request.headers.get("host") or host_of(request.url),
            headers=request.headers,
            body=request.content,
            remote_addr=remote_addr,
            raw=request,
        )

    @property
    def path(self) -> str:
        return self.url.path or "/"

    @property
    def query(self) -> str:
        return self.url.query.decode("ascii")

    @property
    def params(self) -> httpx.QueryParams:
        return self.url.params

    def text(self, encoding: str = "utf-8") -> str:
        return self.body.decode(encoding)

    def json(self) -> Any:
        return json.loads(self.body)
