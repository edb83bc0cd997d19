"""Response capture.

A ResponseWriter is the sink a handler writes to. It moves through explicit
states and is finalized into an ``httpx.Response``:

  UNSET -> HEADER_WRITTEN -> BODY_WRITTEN -> FINALIZED

The header block is fixed the moment the status is written, either by an
explicit write_header() or implicitly (200) by the first write().
"""

from __future__ import annotations

import dataclasses
import json
import logging
from enum import Enum, auto
from typing import Any, Iterable

import httpx


logger = logging.getLogger(__name__)

BodyData = bytes | bytearray | memoryview | str


class WriterState(Enum):
    UNSET = auto()
    HEADER_WRITTEN = auto()
    BODY_WRITTEN = auto()
    FINALIZED = auto()


def _check_status(status: int) -> None:
    if not isinstance(status, int) or isinstance(status, bool):
        raise ValueError(f"invalid status code {status!r}")
    if status < 100 or status > 999:
        raise ValueError(f"invalid status code {status}")


class ResponseWriter:
    """In-memory response sink handed to handlers."""

    def __init__(self):
        self._state = WriterState.UNSET
        self._status = 200
        self._staged: list[tuple[str, str]] = []
        self._sent: list[tuple[str, str]] = []
        self._body = bytearray()

    # --- headers ---

    @property
    def headers(self) -> httpx.Headers:
        """A copy of the headers staged so far."""
        return httpx.Headers(self._staged)

    def get_header(self, name: str, default: str | None = None) -> str | None:
        lowered = name.lower()
        for key, value in self._staged:
            if key.lower() == lowered:
                return value
        return default

    def set_header(self, name: str, value: str) -> None:
        """Set ``name`` to a single value, dropping earlier values."""
        self.del_header(name)
        self._staged.append((name, str(value)))

    def add_header(self, name: str, value: str) -> None:
        """Append another value for ``name``."""
        self._staged.append((name, str(value)))

    def del_header(self, name: str) -> None:
        lowered = name.lower()
        self._staged = [(k, v) for k, v in self._staged if k.lower() != lowered]

    # --- status and body ---

    @property
    def state(self) -> WriterState:
        return self._state

    @property
    def status(self) -> int | None:
        if self._state is WriterState.UNSET:
            return None
        return self._status

    @property
    def written(self) -> int:
        return len(self._body)

    def write_header(self, status: int) -> None:
        """Send the status line and the staged headers. The first call wins."""
        self._ensure_open()
        _check_status(status)
        if self._state is not WriterState.UNSET:
            logger.warning("superfluous write_header(%d): status already %d", status, self._status)
            return
        self._status = status
        self._sent = list(self._staged)
        self._state = WriterState.HEADER_WRITTEN

    def write(self, data: BodyData) -> int:
        self._ensure_open()
        if isinstance(data, str):
            data = data.encode("utf-8")
        if self._state is WriterState.UNSET:
            self.write_header(200)
        self._body.extend(data)
        self._state = WriterState.BODY_WRITTEN
        return len(data)

    def writelines(self, lines: Iterable[BodyData]) -> None:
        for line in lines:
            self.write(line)

    def flush(self) -> None:
        self._ensure_open()

    def finalize(self, request: httpx.Request | None = None) -> httpx.Response:
        """Materialize the captured output. Further writes are rejected."""
        self._ensure_open()
        if self._state is WriterState.UNSET:
            self.write_header(200)
        self._state = WriterState.FINALIZED

        response = httpx.Response(
            status_code=self._status,
            headers=self._sent,
            stream=httpx.ByteStream(bytes(self._body)),
            request=request,
            extensions={
                "http_version": b"HTTP/1.1",
                "reason_phrase": httpx.codes.get_reason_phrase(self._status).encode("ascii"),
            },
        )
        response.read()
        return response

    def _ensure_open(self) -> None:
        if self._state is WriterState.FINALIZED:
            raise RuntimeError("response already finalized")

    def __repr__(self) -> str:
        return f"ResponseWriter(state={self._state.name}, status={self.status}, written={self.written})"


def reply(writer: ResponseWriter, status: int, data: Any) -> None:
    """Write ``data`` as a JSON body with the given status."""
    if dataclasses.is_dataclass(data) and not isinstance(data, type):
        data = dataclasses.asdict(data)
    body = json.dumps(data, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    writer.set_header("Content-Length", str(len(body)))
    writer.set_header("Content-Type", "application/json")
    writer.write_header(status)
    writer.write(body)
