"""
In-process server example

Serves a couple of routes under a symbolic host and calls them through
httpx without opening a socket.

- Routes live on a ServeMux, registered for "api.local".
- One sync client and one async client share the same Transport.

Run:
  uv run python examples/01_in_process_server.py
"""

from __future__ import annotations

import anyio

from mockhttp import HttpRequest, ResponseWriter, ServeMux, Transport, reply


mux = ServeMux()


@mux.route("GET /")
def handle_root(_req: HttpRequest, w: ResponseWriter) -> None:
    w.set_header("Content-Type", "text/plain; charset=utf-8")
    w.write("hello from mockhttp\n")


@mux.route("GET /health")
def handle_health(req: HttpRequest, w: ResponseWriter) -> None:
    reply(w, 200, {"ok": True, "remote": req.remote_addr})


@mux.route("POST /echo")
async def handle_echo(req: HttpRequest, w: ResponseWriter) -> None:
    # Echo the raw body bytes back.
    w.set_header("Content-Type", req.headers.get("content-type", "application/octet-stream"))
    w.write(req.body)


async def main() -> None:
    transport = Transport(remote_addr="203.0.113.9:52000")
    transport.register("api.local", mux)

    with transport.client(base_url="http://api.local") as client:
        print(client.get("/").text, end="")
        print(client.get("/health").json())

    async with transport.async_client(base_url="http://api.local") as client:
        response = await client.post("/echo", content=b"hello there")
        print(response.status_code, response.text)


if __name__ == "__main__":
    anyio.run(main)
