"""HTTP response model and its serialisation to wire bytes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

from webweave.request import Header


class StatusCode(IntEnum):
    """Status codes the server knows how to send."""

    OK = 200
    CREATED = 201
    ACCEPTED = 202
    NO_CONTENT = 204
    MULTIPLE_CHOICES = 300
    MOVED_PERMANENTLY = 301
    MOVED_TEMPORARILY = 302
    NOT_MODIFIED = 304
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    INTERNAL_SERVER_ERROR = 500
    NOT_IMPLEMENTED = 501
    BAD_GATEWAY = 502
    SERVICE_UNAVAILABLE = 503

    @property
    def phrase(self) -> str:
        return _REASONS[self]


_REASONS = {
    StatusCode.OK: "OK",
    StatusCode.CREATED: "Created",
    StatusCode.ACCEPTED: "Accepted",
    StatusCode.NO_CONTENT: "No Content",
    StatusCode.MULTIPLE_CHOICES: "Multiple Choices",
    StatusCode.MOVED_PERMANENTLY: "Moved Permanently",
    StatusCode.MOVED_TEMPORARILY: "Moved Temporarily",
    StatusCode.NOT_MODIFIED: "Not Modified",
    StatusCode.BAD_REQUEST: "Bad Request",
    StatusCode.UNAUTHORIZED: "Unauthorized",
    StatusCode.FORBIDDEN: "Forbidden",
    StatusCode.NOT_FOUND: "Not Found",
    StatusCode.INTERNAL_SERVER_ERROR: "Internal Server Error",
    StatusCode.NOT_IMPLEMENTED: "Not Implemented",
    StatusCode.BAD_GATEWAY: "Bad Gateway",
    StatusCode.SERVICE_UNAVAILABLE: "Service Unavailable",
}

_SEPARATOR = b": "
_CRLF = b"\r\n"


def _status_line(status: int) -> bytes:
    try:
        code = StatusCode(status)
    except ValueError:
        code = StatusCode.INTERNAL_SERVER_ERROR
    return f"HTTP/1.0 {code.value} {code.phrase}\r\n".encode("ascii")


def _encode(text: str | bytes) -> bytes:
    return text.encode("utf-8") if isinstance(text, str) else bytes(text)


@dataclass
class Response:
    """An HTTP response: status, headers and body."""

    status: StatusCode = StatusCode.OK
    headers: list[Header] = field(default_factory=list)
    content: str | bytes = ""

    def to_buffers(self) -> list[bytes]:
        """Return the response as the sequence of byte chunks written to the wire."""
        buffers = [_status_line(self.status)]
        for header in self.headers:
            buffers.extend((_encode(header.name), _SEPARATOR, _encode(header.value), _CRLF))
        buffers.append(_CRLF)
        buffers.append(_encode(self.content))
        return buffers

    def to_bytes(self) -> bytes:
        """Return the whole response as one byte string."""
        return b"".join(self.to_buffers())

    @classmethod
    def stock_response(cls, status: StatusCode) -> Response:
        """Build an empty HTML response with the given status."""
        content = ""
        return cls(
            status=status,
            content=content,
            headers=[
                Header("Content-Length", str(len(_encode(content)))),
                Header("Content-Type", "text/html"),
            ],
        )