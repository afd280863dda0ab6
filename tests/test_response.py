import pytest

from webweave.request import Header
from webweave.response import Response, StatusCode


def test_stock_response():
    res = Response.stock_response(StatusCode.NOT_FOUND)
    assert res.status == StatusCode.NOT_FOUND
    assert res.content == ""
    assert len(res.headers) == 2
    assert res.headers[0].name == "Content-Length"
    assert res.headers[0].value == "0"
    assert res.headers[1].name == "Content-Type"
    assert res.headers[1].value == "text/html"


def make_hello_response():
    return Response(
        status=StatusCode.OK,
        content="Hello, World!",
        headers=[Header("Content-Length", "13"), Header("Content-Type", "text/plain")],
    )


def test_to_buffers():
    buffers = make_hello_response().to_buffers()
    assert buffers[0] == b"HTTP/1.0 200 OK\r\n"
    assert buffers[1] == b"Content-Length"
    assert buffers[2] == b": "
    assert buffers[3] == b"13"
    assert buffers[4] == b"\r\n"
    assert buffers[5] == b"Content-Type"
    assert buffers[6] == b": "
    assert buffers[7] == b"text/plain"
    assert buffers[8] == b"\r\n"
    assert buffers[9] == b"\r\n"
    assert buffers[10] == b"Hello, World!"
    assert len(buffers) == 11


def test_to_bytes_joins_buffers():
    res = make_hello_response()
    assert res.to_bytes() == b"".join(res.to_buffers())
    assert res.to_bytes().startswith(b"HTTP/1.0 200 OK\r\n")
    assert res.to_bytes().endswith(b"\r\n\r\nHello, World!")


@pytest.mark.parametrize(
    "status,line",
    [
        (StatusCode.CREATED, b"HTTP/1.0 201 Created\r\n"),
        (StatusCode.MOVED_TEMPORARILY, b"HTTP/1.0 302 Moved Temporarily\r\n"),
        (StatusCode.BAD_REQUEST, b"HTTP/1.0 400 Bad Request\r\n"),
        (StatusCode.NOT_FOUND, b"HTTP/1.0 404 Not Found\r\n"),
        (StatusCode.INTERNAL_SERVER_ERROR, b"HTTP/1.0 500 Internal Server Error\r\n"),
        (StatusCode.SERVICE_UNAVAILABLE, b"HTTP/1.0 503 Service Unavailable\r\n"),
    ],
)
def test_status_lines(status, line):
    assert Response(status=status).to_buffers()[0] == line


def test_unknown_status_falls_back_to_internal_server_error():
    res = Response(status=418)
    assert res.to_buffers()[0] == b"HTTP/1.0 500 Internal Server Error\r\n"


def test_no_headers_gives_status_crlf_and_content():
    res = Response(status=StatusCode.NO_CONTENT)
    assert res.to_buffers() == [b"HTTP/1.0 204 No Content\r\n", b"\r\n", b""]


@pytest.mark.parametrize("status", list(StatusCode))
def test_stock_response_wire_format(status):
    data = Response.stock_response(status).to_bytes()
    assert data.startswith(f"HTTP/1.0 {int(status)} ".encode())
    assert b"Content-Length: 0\r\n" in data
    assert data.endswith(b"Content-Type: text/html\r\n\r\n")


def test_bytes_content_passes_through():
    res = Response(content=b"\x00\x01")
    assert res.to_buffers()[-1] == b"\x00\x01"