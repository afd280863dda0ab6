"""Request identifiers: generation and the middleware that attaches them."""

from __future__ import annotations

import uuid
from contextvars import ContextVar

from webweave.middleware import HandlerMiddleware, Next
from webweave.request import Header, Request
from webweave.response import Response

REQUEST_ID_HEADER = "X-Request-ID"

_current_request_id: ContextVar[str] = ContextVar("current_request_id", default="")


def generate_request_id() -> str:
    """Return a new random request identifier."""
    return str(uuid.uuid4())


def current_request_id() -> str:
    """Return the identifier of the request being handled in this context, or ``""``."""
    return _current_request_id.get()


def _assign_request_id(request: Request, response: Response, next: Next | None) -> None:
    request_id = request.header(REQUEST_ID_HEADER) or generate_request_id()
    _current_request_id.set(request_id)
    response.headers.append(Header(REQUEST_ID_HEADER, request_id))
    if next:
        next()


def create_request_id_middleware() -> HandlerMiddleware:
    """Build middleware that forwards or creates an ``X-Request-ID``.

    It runs early (priority 90), just after the error handler.
    """
    return HandlerMiddleware(_assign_request_id, priority=90)