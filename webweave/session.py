"""Cookie parsing and the session-id middleware."""

from __future__ import annotations

from typing import Any

from webweave.middleware import HandlerMiddleware, Next
from webweave.request import Header, Request
from webweave.request_id import generate_request_id
from webweave.response import Response

SESSION_COOKIE = "session_id"
_LEADING_SPACE = " \t\n\r\f\v"


def parse_cookies(cookie_header: str) -> dict[str, str]:
    """Split a ``Cookie`` header into a mapping.

    Pairs without ``=`` are ignored; leading whitespace is stripped from
    names, values are kept as they are. Later pairs override earlier ones.
    """
    cookies: dict[str, str] = {}
    for pair in cookie_header.split(";"):
        key, sep, value = pair.partition("=")
        if sep:
            cookies[key.lstrip(_LEADING_SPACE)] = value
    return cookies


def create_session_middleware(store: Any) -> HandlerMiddleware:
    """Build middleware that assigns each client a session id cookie.

    A known ``session_id`` cookie is reused; otherwise a new id is issued
    with ``Set-Cookie``. The id is passed on as the ``X-Session-ID``
    request header.
    """

    def handle(request: Request, response: Response, next: Next) -> None:
        cookies = parse_cookies(request.header("Cookie"))
        session_id = cookies.get(SESSION_COOKIE)
        if session_id is None:
            session_id = generate_request_id()
            response.headers.append(
                Header("Set-Cookie", f"{SESSION_COOKIE}={session_id}; HttpOnly; Secure")
            )
        request.headers.append(Header("X-Session-ID", session_id))
        next()

    handle.store = store  # type: ignore[attr-defined]
    return HandlerMiddleware(handle)