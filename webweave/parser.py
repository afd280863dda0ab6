"""Incremental parser for HTTP request lines and headers."""

from __future__ import annotations

from enum import Enum, auto

from webweave.request import Header, Request

_DIGITS = frozenset("0123456789")
_LETTERS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ")
_VERSION_PREFIX = "HTTP/"


def _is_ctl(ch: str) -> bool:
    code = ord(ch)
    return code < 32 or code == 127


class ParseResult(Enum):
    """Outcome of feeding data to the parser."""

    GOOD = auto()
    BAD = auto()
    INDETERMINATE = auto()


class _State(Enum):
    METHOD_START = auto()
    METHOD = auto()
    URI = auto()
    VERSION_PREFIX = auto()
    VERSION_MAJOR_START = auto()
    VERSION_MAJOR = auto()
    VERSION_MINOR_START = auto()
    VERSION_MINOR = auto()
    EXPECTING_NEWLINE_1 = auto()
    HEADER_LINE_START = auto()
    HEADER_LWS = auto()
    HEADER_NAME = auto()
    SPACE_BEFORE_HEADER_VALUE = auto()
    HEADER_VALUE = auto()
    EXPECTING_NEWLINE_2 = auto()
    EXPECTING_NEWLINE_3 = auto()


class RequestParser:
    """State machine that fills a :class:`Request` from raw bytes.

    Data may arrive in pieces: each call to :meth:`parse` continues where the
    previous one stopped. The body after the blank line is not consumed.
    """

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        """Return to the initial state, ready for a new request."""
        self._state = _State.METHOD_START
        self._prefix_pos = 0

    def parse(self, request: Request, data: bytes | bytearray | memoryview | str) -> ParseResult:
        """Feed ``data`` into ``request`` and report whether it is complete."""
        text = data if isinstance(data, str) else bytes(data).decode("latin-1")
        for ch in text:
            result = self._HANDLERS[self._state](self, request, ch)
            if result is not None:
                return result
        return ParseResult.INDETERMINATE

    def _method_start(self, request: Request, ch: str) -> ParseResult | None:
        if ch not in _LETTERS:
            return ParseResult.BAD
        request.method += ch
        self._state = _State.METHOD
        return None

    def _method(self, request: Request, ch: str) -> ParseResult | None:
        if ch == " ":
            self._state = _State.URI
        elif ch not in _LETTERS:
            return ParseResult.BAD
        else:
            request.method += ch
        return None

    def _uri(self, request: Request, ch: str) -> ParseResult | None:
        if ch == " ":
            self._state = _State.VERSION_PREFIX
            self._prefix_pos = 0
        elif _is_ctl(ch):
            return ParseResult.BAD
        else:
            request.uri += ch
        return None

    def _version_prefix(self, request: Request, ch: str) -> ParseResult | None:
        if ch != _VERSION_PREFIX[self._prefix_pos]:
            return ParseResult.BAD
        self._prefix_pos += 1
        if self._prefix_pos == len(_VERSION_PREFIX):
            self._state = _State.VERSION_MAJOR_START
        return None

    def _version_major_start(self, request: Request, ch: str) -> ParseResult | None:
        if ch not in _DIGITS:
            return ParseResult.BAD
        request.http_version_major = int(ch)
        self._state = _State.VERSION_MAJOR
        return None

    def _version_major(self, request: Request, ch: str) -> ParseResult | None:
        if ch == ".":
            self._state = _State.VERSION_MINOR_START
        elif ch in _DIGITS:
            request.http_version_major = request.http_version_major * 10 + int(ch)
        else:
            return ParseResult.BAD
        return None

    def _version_minor_start(self, request: Request, ch: str) -> ParseResult | None:
        if ch not in _DIGITS:
            return ParseResult.BAD
        request.http_version_minor = int(ch)
        self._state = _State.VERSION_MINOR
        return None

    def _version_minor(self, request: Request, ch: str) -> ParseResult | None:
        if ch == "\r":
            self._state = _State.EXPECTING_NEWLINE_1
        elif ch in _DIGITS:
            request.http_version_minor = request.http_version_minor * 10 + int(ch)
        else:
            return ParseResult.BAD
        return None

    def _expecting_newline_1(self, request: Request, ch: str) -> ParseResult | None:
        if ch != "\n":
            return ParseResult.BAD
        self._state = _State.HEADER_LINE_START
        return None

    def _header_line_start(self, request: Request, ch: str) -> ParseResult | None:
        if ch == "\r":
            self._state = _State.EXPECTING_NEWLINE_3
        elif request.headers and ch in " \t":
            self._state = _State.HEADER_LWS
        elif not _is_ctl(ch) and ch not in ": ":
            request.headers.append(Header(name=ch))
            self._state = _State.HEADER_NAME
        else:
            return ParseResult.BAD
        return None

    def _header_lws(self, request: Request, ch: str) -> ParseResult | None:
        if ch == "\r":
            self._state = _State.EXPECTING_NEWLINE_2
        elif ch in " \t":
            pass
        elif not _is_ctl(ch):
            request.headers[-1].value += ch
            self._state = _State.HEADER_VALUE
        else:
            return ParseResult.BAD
        return None

    def _header_name(self, request: Request, ch: str) -> ParseResult | None:
        if ch == ":":
            self._state = _State.SPACE_BEFORE_HEADER_VALUE
        elif not _is_ctl(ch) and ch != " ":
            request.headers[-1].name += ch
        else:
            return ParseResult.BAD
        return None

    def _space_before_header_value(self, request: Request, ch: str) -> ParseResult | None:
        if ch != " ":
            return ParseResult.BAD
        self._state = _State.HEADER_VALUE
        return None

    def _header_value(self, request: Request, ch: str) -> ParseResult | None:
        if ch == "\r":
            self._state = _State.EXPECTING_NEWLINE_2
        elif _is_ctl(ch):
            return ParseResult.BAD
        else:
            request.headers[-1].value += ch
        return None

    def _expecting_newline_2(self, request: Request, ch: str) -> ParseResult | None:
        if ch != "\n":
            return ParseResult.BAD
        self._state = _State.HEADER_LINE_START
        return None

    def _expecting_newline_3(self, request: Request, ch: str) -> ParseResult | None:
        return ParseResult.GOOD if ch == "\n" else ParseResult.BAD

    _HANDLERS = {
        _State.METHOD_START: _method_start,
        _State.METHOD: _method,
        _State.URI: _uri,
        _State.VERSION_PREFIX: _version_prefix,
        _State.VERSION_MAJOR_START: _version_major_start,
        _State.VERSION_MAJOR: _version_major,
        _State.VERSION_MINOR_START: _version_minor_start,
        _State.VERSION_MINOR: _version_minor,
        _State.EXPECTING_NEWLINE_1: _expecting_newline_1,
        _State.HEADER_LINE_START: _header_line_start,
        _State.HEADER_LWS: _header_lws,
        _State.HEADER_NAME: _header_name,
        _State.SPACE_BEFORE_HEADER_VALUE: _space_before_header_value,
        _State.HEADER_VALUE: _header_value,
        _State.EXPECTING_NEWLINE_2: _expecting_newline_2,
        _State.EXPECTING_NEWLINE_3: _expecting_newline_3,
    }