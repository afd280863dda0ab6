"""TCP server that accepts connections and handles shutdown signals."""

from __future__ import annotations

import argparse
import asyncio
import functools
import signal
from collections.abc import Sequence
from typing import Any

from webweave.connection import Connection, ConnectionManager


class Server:
    """Listens on ``address``:``port`` and serves each client connection.

    SIGINT, SIGTERM and SIGQUIT shut the server down; SIGHUP reloads its
    configuration. With ``port`` 0 a free port is chosen and stored in
    :attr:`port` once listening.
    """

    def __init__(self, address: str = "127.0.0.1", port: int | str = 8080) -> None:
        self.address = address
        self.port = int(port)
        self.started = asyncio.Event()
        self._manager = ConnectionManager()
        self._server: asyncio.AbstractServer | None = None
        self._stopped: asyncio.Event | None = None
        self._closing = False

    async def serve(self) -> None:
        """Listen and serve until :meth:`shutdown` is called."""
        loop = asyncio.get_running_loop()
        self._stopped = asyncio.Event()
        self._closing = False
        self._server = await asyncio.start_server(
            self._accept, self.address, self.port, reuse_address=True
        )
        self.port = self._server.sockets[0].getsockname()[1]
        installed = self._install_signal_handlers(loop)
        self.started.set()
        try:
            await self._stopped.wait()
        finally:
            for signo in installed:
                loop.remove_signal_handler(signo)
            self._server.close()
            self._manager.stop_all()
            await self._server.wait_closed()
            self.started.clear()

    def run(self) -> None:
        """Serve on a fresh event loop until shut down."""
        asyncio.run(self.serve())

    def shutdown(self) -> None:
        """Stop accepting, close every connection and end :meth:`serve`."""
        self._closing = True
        if self._server is not None:
            self._server.close()
        self._manager.stop_all()
        if self._stopped is not None:
            self._stopped.set()

    def reload_config(self) -> None:
        """Reload runtime configuration."""
        print("Reloading configuration...", flush=True)

    def _on_signal(self, signo: int) -> None:
        print(f"Graceful shutdown triggered by signal: {signo}", flush=True)
        self.shutdown()

    def _accept(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        if self._closing:
            writer.close()
            return
        self._manager.start(Connection(reader, writer, self._manager))

    def _install_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> list[int]:
        installed: list[int] = []
        for name in ("SIGINT", "SIGTERM", "SIGQUIT", "SIGHUP"):
            signo = getattr(signal, name, None)
            if signo is None:
                continue
            callback: Any = (
                self.reload_config if name == "SIGHUP"
                else functools.partial(self._on_signal, signo)
            )
            try:
                loop.add_signal_handler(signo, callback)
            except (NotImplementedError, RuntimeError, ValueError):
                continue
            installed.append(signo)
        return installed


def main(argv: Sequence[str] | None = None) -> int:
    """Run a server from the command line."""
    parser = argparse.ArgumentParser(description="Run the HTTP server.")
    parser.add_argument("--address", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8080)
    args = parser.parse_args(argv)
    Server(args.address, args.port).run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())