"""Tests for Transport round trips through httpx.Client."""

from __future__ import annotations

import threading
from dataclasses import dataclass

import httpx
import pytest

from mockhttp import (
    HttpRequest,
    ResponseWriter,
    ServeMux,
    ServerNotFound,
    Transport,
    new_transport,
    reply,
)
from mockhttp.transport import REMOTE_ADDR_EXTENSION


@dataclass
class FooRet:
    a: int
    b: str
    c: str


class FooServer:
    """Test server exposing a few routes on a ServeMux."""

    def foo(self, request: HttpRequest, writer: ResponseWriter) -> None:
        reply(writer, 200, FooRet(1, request.host, request.path))

    def index(self, request: HttpRequest, writer: ResponseWriter) -> None:
        reply(writer, 200, {"foo": "1", "bar": "2"})

    def post_dump(self, request: HttpRequest, writer: ResponseWriter) -> None:
        writer.write(request.body)

    def register_handlers(self, mux: ServeMux) -> None:
        mux.register("/foo", self.foo)
        mux.register("/", self.index)
        mux.register("/dump", self.post_dump)


@pytest.fixture
def transport() -> Transport:
    mux = ServeMux()
    FooServer().register_handlers(mux)
    transport = Transport(remote_addr="127.0.0.1:8080")
    transport.register("foo.com", mux)
    return transport


@pytest.fixture
def client(transport):
    with transport.client() as client:
        yield client


def test_structured_reply(client):
    response = client.post("http://foo.com/foo")
    assert response.status_code == 200
    assert FooRet(**response.json()) == FooRet(1, "foo.com", "/foo")

    ret = client.post("http://foo.com/bar").json()
    assert ret["foo"] == "1" and ret["bar"] == "2"


def test_body_round_trip(client):
    response = client.post("http://foo.com/dump")
    assert response.content == b""
    response.close()

    response = client.post("http://foo.com/dump", content=b"hello")
    assert response.text == "hello"


def test_streamed_request_body(client):
    def chunks():
        yield b"hel"
        yield b"lo"

    response = client.post("http://foo.com/dump", content=chunks())
    assert response.content == b"hello"


def test_streamed_response(client):
    with client.stream("POST", "http://foo.com/dump", content=b"x" * 10) as response:
        assert b"".join(response.iter_bytes()) == b"x" * 10


def test_response_fidelity():
    def handler(request, writer):
        writer.add_header("X-Multi", "1")
        writer.add_header("X-Multi", "2")
        writer.set_header("Content-Type", "text/csv")
        writer.write_header(207)
        writer.write(b"a,b\n")
        writer.write(b"1,2\n")

    transport = Transport()
    transport.register("csv.local", handler)
    with transport.client() as client:
        response = client.get("http://csv.local/report")

    assert response.status_code == 207
    assert response.headers.get_list("x-multi") == ["1", "2"]
    assert response.headers["content-type"] == "text/csv"
    assert response.content == b"a,b\n1,2\n"


def test_error_status_is_not_a_transport_error():
    def handler(request, writer):
        writer.write_header(503)
        writer.write(b"down for maintenance")

    transport = Transport()
    transport.register("flaky.local", handler)
    with transport.client() as client:
        response = client.get("http://flaky.local/")

    assert response.status_code == 503
    with pytest.raises(httpx.HTTPStatusError):
        response.raise_for_status()


def test_err_round_trip():
    transport = new_transport()
    with pytest.raises(ServerNotFound) as exc_info:
        transport.round_trip(httpx.Request("GET", "http://unknown.com/"))
    assert exc_info.value.host == "unknown.com"
    assert exc_info.value.request.url.host == "unknown.com"


def test_server_not_found_is_connect_error():
    with new_transport().client() as client:
        with pytest.raises(httpx.ConnectError):
            client.get("http://unknown.com/")


def test_handler_not_invoked_for_unknown_host():
    calls = []
    transport = Transport()
    transport.register("known.local", lambda request, writer: calls.append(request))

    with pytest.raises(ServerNotFound):
        transport.round_trip(httpx.Request("GET", "http://known.local:8080/"))
    assert calls == []


def test_round_trip_attaches_request():
    transport = Transport()
    transport.register("foo.com", lambda request, writer: writer.write(b"hi"))

    request = httpx.Request("GET", "http://foo.com/")
    response = transport.round_trip(request)
    assert response.request is request
    assert response.content == b"hi"


def test_reregister_invokes_latest():
    called = []
    transport = Transport()
    transport.register("foo.com", lambda request, writer: called.append("f1"))
    transport.register("foo.com", lambda request, writer: called.append("f2"))

    with transport.client() as client:
        client.get("http://foo.com/")
    assert called == ["f2"]


def test_remote_addr_visible_to_handler():
    seen = []

    def handler(request, writer):
        seen.append(request.remote_addr)
        seen.append(request.raw.extensions[REMOTE_ADDR_EXTENSION])

    transport = Transport()
    transport.set_remote_addr("10.0.0.7:4242")
    transport.register("foo.com", handler)
    with transport.client() as client:
        client.get("http://foo.com/")

    assert seen == ["10.0.0.7:4242", "10.0.0.7:4242"]
    assert transport.remote_addr == "10.0.0.7:4242"


def test_remote_addr_from_environment(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("MOCKHTTP_REMOTE_ADDR", "192.0.2.1:1234")
    assert Transport().remote_addr == "192.0.2.1:1234"


def test_transports_are_isolated():
    first, second = new_transport(), new_transport()
    first.register("only-first.local", lambda request, writer: None)

    assert first.round_trip(httpx.Request("GET", "http://only-first.local/")).status_code == 200
    with pytest.raises(ServerNotFound):
        second.round_trip(httpx.Request("GET", "http://only-first.local/"))


def test_host_matching_follows_authority(client):
    assert client.get("http://FOO.com:80/foo").json()["a"] == 1
    with pytest.raises(ServerNotFound):
        client.get("http://foo.com:8080/foo")


def test_request_view():
    seen: list[HttpRequest] = []
    transport = Transport()
    transport.register("api.local:8080", lambda request, writer: seen.append(request))

    with transport.client() as client:
        client.put(
            "http://api.local:8080/v1/items?id=7",
            json={"name": "widget"},
            headers={"X-Trace": "abc"},
        )

    request = seen[0]
    assert request.method == "PUT"
    assert request.host == "api.local:8080"
    assert request.path == "/v1/items"
    assert request.query == "id=7"
    assert request.params["id"] == "7"
    assert request.headers["x-trace"] == "abc"
    assert request.json() == {"name": "widget"}


def test_handler_exception_propagates():
    class Boom(Exception):
        pass

    def handler(request, writer):
        raise Boom("handler failed")

    transport = Transport()
    transport.register("boom.local", handler)
    with transport.client() as client:
        with pytest.raises(Boom):
            client.get("http://boom.local/")


def test_async_handler_rejected_on_sync_client():
    async def handler(request, writer):
        writer.write(b"never")

    transport = Transport()
    transport.register("async.local", handler)
    with transport.client() as client:
        with pytest.raises(TypeError, match="AsyncClient"):
            client.get("http://async.local/")


def test_concurrent_round_trips(transport):
    errors = []

    def worker(n):
        try:
            with transport.client() as client:
                for i in range(20):
                    body = f"{n}-{i}".encode()
                    response = client.post("http://foo.com/dump", content=body)
                    assert response.content == body
        except AssertionError as e:
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []


def test_explicit_default_port_registration():
    transport = Transport()
    transport.register("foo.com:80", lambda request, writer: writer.write(b"port 80"))

    with transport.client() as client:
        assert client.get("http://foo.com:80/").text == "port 80"
        assert client.get("http://foo.com/").text == "port 80"


@pytest.mark.parametrize("registered", ["xn--mnchen-3ya.de", "münchen.de"])
@pytest.mark.parametrize("url", ["http://xn--mnchen-3ya.de/", "http://münchen.de/"])
def test_international_host_names(registered, url):
    seen = []
    transport = Transport()
    transport.register(registered, lambda request, writer: seen.append(request.host))

    with transport.client() as client:
        assert client.get(url).status_code == 200
    assert seen == ["xn--mnchen-3ya.de"]
