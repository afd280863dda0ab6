import asyncio

import pytest

from webweave.connection import (
    Connection,
    ConnectionManager,
    ConnState,
    is_valid_request,
    wants_keep_alive,
)
from webweave.request import Header, Request

OK = b"HTTP/1.0 200 OK\r\nContent-Length: 0\r\nContent-Type: text/html\r\n\r\n"
BAD = b"HTTP/1.0 400 Bad Request\r\nContent-Length: 0\r\nContent-Type: text/html\r\n\r\n"
ERROR = (
    b"HTTP/1.0 500 Internal Server Error\r\n"
    b"Content-Length: 0\r\nContent-Type: text/html\r\n\r\n"
)


class FakeReader:
    def __init__(self, *chunks, block=False):
        self._chunks = list(chunks)
        self._block = block

    async def read(self, n=-1):
        if self._chunks:
            return self._chunks.pop(0)
        if self._block:
            await asyncio.sleep(3600)
        return b""


class FakeWriter:
    def __init__(self):
        self.data = bytearray()
        self.closed = False

    def write(self, data):
        self.data += data

    async def drain(self):
        return None

    def close(self):
        self.closed = True

    def is_closing(self):
        return self.closed


def make_connection(*chunks, block=False, **options):
    writer = FakeWriter()
    manager = ConnectionManager()
    conn = Connection(FakeReader(*chunks, block=block), writer, manager, **options)
    return conn, writer, manager


def test_keep_alive_flag_leaves_state_idle():
    conn, _, _ = make_connection()
    conn.keep_alive = True
    assert conn.state is ConnState.IDLE
    assert conn.keep_alive is True


def test_timeout_settings():
    conn, _, _ = make_connection()
    conn.idle_timeout = 0.1
    conn.read_timeout = 0.1
    conn.write_timeout = 0.1
    assert conn.state is ConnState.IDLE
    assert (conn.idle_timeout, conn.read_timeout, conn.write_timeout) == (0.1, 0.1, 0.1)


def test_stop_closes():
    conn, writer, _ = make_connection()
    conn.stop()
    assert conn.state is ConnState.CLOSED
    assert writer.closed is True


@pytest.mark.asyncio
async def test_http10_request_answered_and_closed():
    conn, writer, _ = make_connection(b"GET / HTTP/1.0\r\n\r\n")
    await conn.run()
    assert bytes(writer.data) == OK
    assert writer.closed is True
    assert conn.state is ConnState.CLOSED


@pytest.mark.asyncio
async def test_keep_alive_then_eof_sends_error():
    conn, writer, _ = make_connection(b"GET / HTTP/1.1\r\nHost: localhost\r\n\r\n")
    await conn.run()
    assert bytes(writer.data) == OK + ERROR
    assert conn.state is ConnState.CLOSED


@pytest.mark.asyncio
async def test_two_requests_on_kept_alive_connection():
    request = b"GET / HTTP/1.0\r\nConnection: keep-alive\r\n\r\n"
    conn, writer, _ = make_connection(request, request, block=True, idle_timeout=0.01)
    await conn.run()
    assert bytes(writer.data) == OK + OK
    assert conn.state is ConnState.CLOSED


@pytest.mark.asyncio
async def test_missing_host_is_bad_request():
    conn, writer, _ = make_connection(b"GET / HTTP/1.1\r\nConnection: close\r\n\r\n")
    await conn.run()
    assert bytes(writer.data) == BAD


@pytest.mark.asyncio
async def test_malformed_request_is_bad_request():
    conn, writer, _ = make_connection(b"BADREQUEST\r\n\r\n")
    await conn.run()
    assert bytes(writer.data) == BAD
    assert writer.closed is True


@pytest.mark.asyncio
async def test_request_split_across_reads():
    conn, writer, _ = make_connection(b"GET /a HTTP/1.", b"0\r\nX: y\r\n\r\n")
    await conn.run()
    assert bytes(writer.data) == OK


@pytest.mark.asyncio
async def test_read_timeout_closes_connection():
    conn, writer, _ = make_connection(block=True, read_timeout=0.01)
    await conn.run()
    assert conn.state is ConnState.CLOSED
    assert writer.closed is True
    assert bytes(writer.data) == b""


@pytest.mark.asyncio
async def test_manager_forgets_finished_connection():
    conn, writer, manager = make_connection(b"GET / HTTP/1.0\r\n\r\n")
    task = manager.start(conn)
    assert conn in manager
    await task
    assert conn not in manager
    assert len(manager) == 0
    assert bytes(writer.data) == OK


@pytest.mark.asyncio
async def test_stop_all_cancels_running_connections():
    manager = ConnectionManager()
    conns = [Connection(FakeReader(block=True), FakeWriter(), manager) for _ in range(2)]
    tasks = [manager.start(c) for c in conns]
    await asyncio.sleep(0)
    manager.stop_all()
    await asyncio.gather(*tasks, return_exceptions=True)
    assert [c.state for c in conns] == [ConnState.CLOSED, ConnState.CLOSED]
    assert all(t.cancelled() for t in tasks)
    assert len(manager) == 0


@pytest.mark.parametrize(
    "request_, expected",
    [
        (Request(http_version_major=1, http_version_minor=1), True),
        (Request(http_version_major=1, http_version_minor=0), False),
        (
            Request(http_version_major=1, http_version_minor=0,
                    headers=[Header("Connection", "Keep-Alive")]),
            True,
        ),
        (
            Request(http_version_major=1, http_version_minor=1,
                    headers=[Header("Connection", "close")]),
            False,
        ),
    ],
)
def test_wants_keep_alive(request_, expected):
    assert wants_keep_alive(request_) is expected


@pytest.mark.parametrize(
    "request_, expected",
    [
        (Request("GET", "/", 1, 1, [Header("Host", "localhost")]), True),
        (Request("GET", "/", 1, 1), False),
        (Request("GET", "/", 1, 0), True),
        (Request("GET", "/", 2, 0), False),
        (Request("", "/", 1, 0), False),
        (Request("GET", "", 1, 0), False),
    ],
)
def test_is_valid_request(request_, expected):
    assert is_valid_request(request_) is expected