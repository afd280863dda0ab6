"""Middleware interfaces and the two ways of chaining them."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from webweave.context import Context
from webweave.request import Request
from webweave.response import Response

Next = Callable[[], None]
HttpHandler = Callable[[Request, Response], None]
Handler = Callable[[Request, Response, Next], None]


class Middleware(ABC):
    """A context-based middleware; call ``next()`` to continue the chain."""

    @abstractmethod
    def __call__(self, ctx: Context, next: Next) -> None:
        """Process ``ctx`` and optionally hand over to the rest of the chain."""


class MiddlewareChainBuilder:
    """Collects context middleware and runs them nested, in insertion order."""

    def __init__(self) -> None:
        self._middlewares: list[Middleware] = []

    def add(self, middleware: Middleware) -> MiddlewareChainBuilder:
        """Append ``middleware`` and return the builder for chaining."""
        self._middlewares.append(middleware)
        return self

    def run(self, ctx: Context) -> None:
        """Run the chain on ``ctx``; exceptions propagate to the caller."""
        middlewares = list(self._middlewares)

        def dispatch(index: int) -> None:
            if index < len(middlewares):
                middlewares[index](ctx, lambda: dispatch(index + 1))

        dispatch(0)


@dataclass
class HandlerMiddleware:
    """A request/response middleware function with a priority."""

    handler: Handler
    priority: int = 0

    def __call__(self, request: Request, response: Response, next: Next) -> None:
        self.handler(request, response, next)


class MiddlewareChain:
    """Runs request/response middleware in order, then the final handler.

    Each call to :meth:`next` advances to the following middleware; once all
    have been used, the final handler runs.
    """

    def __init__(
        self,
        middlewares: Iterable[Callable[[Request, Response, Next], None]],
        final_handler: HttpHandler,
    ) -> None:
        self._pending = iter(list(middlewares))
        self._final_handler = final_handler

    def next(self, request: Request, response: Response) -> None:
        """Invoke the next middleware, or the final handler when none remain."""
        middleware = next(self._pending, None)
        if middleware is None:
            self._final_handler(request, response)
            return
        middleware(request, response, lambda: self.next(request, response))