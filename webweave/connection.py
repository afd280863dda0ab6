"""A client connection: read a request, answer it, keep it alive or close."""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from enum import Enum, auto
from typing import Any

from webweave.parser import ParseResult, RequestParser
from webweave.request import Request
from webweave.response import Response, StatusCode

_logger = logging.getLogger("webweave")

BUFFER_SIZE = 8192


class ConnState(Enum):
    """Lifecycle state of a connection."""

    IDLE = auto()
    READING = auto()
    WRITING = auto()
    CLOSED = auto()


def wants_keep_alive(request: Request) -> bool:
    """Whether the connection should stay open after answering ``request``."""
    connection = next((h.value for h in request.headers if h.name == "Connection"), None)
    if connection is not None:
        return "keep-alive" in connection.lower()
    return (request.http_version_major, request.http_version_minor) == (1, 1)


def is_valid_request(request: Request) -> bool:
    """Check version, method, URI and, for HTTP/1.1, the ``Host`` header."""
    version = (request.http_version_major, request.http_version_minor)
    if version not in ((1, 0), (1, 1)):
        return False
    if not request.method or not request.uri:
        return False
    if version == (1, 1) and not any(h.name == "Host" for h in request.headers):
        return False
    return True


class ConnectionManager:
    """Tracks running connections so they can be stopped together."""

    def __init__(self) -> None:
        self._connections: dict[Connection, asyncio.Future[Any]] = {}

    def start(self, connection: Connection) -> asyncio.Future[Any]:
        """Register ``connection`` and schedule it; return its task."""
        task = asyncio.ensure_future(connection.run())
        self._connections[connection] = task
        return task

    def stop(self, connection: Connection) -> None:
        """Stop ``connection`` and forget it."""
        self._connections.pop(connection, None)
        connection.stop()

    def stop_all(self) -> None:
        """Stop every registered connection."""
        connections = list(self._connections)
        self._connections.clear()
        for connection in connections:
            connection.stop()

    def __len__(self) -> int:
        return len(self._connections)

    def __contains__(self, connection: object) -> bool:
        return connection in self._connections


class Connection:
    """Serves requests on one stream pair until closed or timed out.

    Timeouts are in seconds: ``read_timeout`` while a request is arriving,
    ``idle_timeout`` while waiting for the next request on a kept-alive
    connection, ``write_timeout`` while sending a response.
    """

    def __init__(
        self,
        reader: Any,
        writer: Any,
        manager: ConnectionManager,
        *,
        keep_alive: bool = False,
        idle_timeout: float = 30.0,
        read_timeout: float = 30.0,
        write_timeout: float = 30.0,
    ) -> None:
        self._reader = reader
        self._writer = writer
        self._manager = manager
        self._parser = RequestParser()
        self._state = ConnState.IDLE
        self._task: asyncio.Task[Any] | None = None
        self.keep_alive = keep_alive
        self.idle_timeout = idle_timeout
        self.read_timeout = read_timeout
        self.write_timeout = write_timeout

    @property
    def state(self) -> ConnState:
        return self._state

    async def run(self) -> None:
        """Serve requests until the connection closes."""
        self._task = asyncio.current_task()
        self._state = ConnState.READING
        while self._state is not ConnState.CLOSED:
            response = await self._read_request()
            if response is None:
                return
            if not await self._write(response):
                return
            if self.keep_alive:
                self._state = ConnState.IDLE
            else:
                self._terminate()
                return

    def stop(self) -> None:
        """Close the connection and cancel any pending work."""
        self._state = ConnState.CLOSED
        if not self._writer.is_closing():
            self._writer.close()
        task = self._task
        if task is not None and not task.done():
            with suppress(RuntimeError):
                if task is asyncio.current_task():
                    return
            task.cancel()

    def _terminate(self) -> None:
        self.stop()
        self._manager.stop(self)

    async def _read_request(self) -> Response | None:
        request = Request()
        self._parser.reset()
        while True:
            idle = self._state is ConnState.IDLE
            timeout = self.idle_timeout if idle else self.read_timeout
            try:
                data = await asyncio.wait_for(self._reader.read(BUFFER_SIZE), timeout)
            except asyncio.TimeoutError:
                _logger.error("%s timeout, closing connection.", "Idle" if idle else "Read")
                self._terminate()
                return None
            except OSError as exc:
                await self._fail_read(str(exc))
                return None
            if not data:
                await self._fail_read("end of file")
                return None
            self._state = ConnState.READING

            result = self._parser.parse(request, data)
            self.keep_alive = wants_keep_alive(request)
            if result is ParseResult.GOOD:
                status = StatusCode.OK if is_valid_request(request) else StatusCode.BAD_REQUEST
                return Response.stock_response(status)
            if result is ParseResult.BAD:
                return Response.stock_response(StatusCode.BAD_REQUEST)

    async def _fail_read(self, reason: str) -> None:
        _logger.error("Socket read error: %s", reason)
        if not self._writer.is_closing():
            response = Response.stock_response(StatusCode.INTERNAL_SERVER_ERROR)
            with suppress(OSError, asyncio.TimeoutError):
                self._writer.write(response.to_bytes())
                await asyncio.wait_for(self._writer.drain(), self.write_timeout)
        self._terminate()

    async def _write(self, response: Response) -> bool:
        self._state = ConnState.WRITING
        try:
            self._writer.write(response.to_bytes())
            await asyncio.wait_for(self._writer.drain(), self.write_timeout)
        except asyncio.TimeoutError:
            _logger.error("Write timeout, closing connection.")
            self._terminate()
            return False
        except OSError as exc:
            _logger.error("Socket write error: %s", exc)
            self._terminate()
            return False
        return True