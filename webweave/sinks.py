"""Destinations for formatted log lines."""

from __future__ import annotations

import sys
import threading
from abc import ABC, abstractmethod
from os import PathLike
from typing import TextIO


class LogSink(ABC):
    """Receives finished log lines."""

    @abstractmethod
    def submit(self, message: str) -> None:
        """Write one log line."""


class ConsoleSink(LogSink):
    """Writes each line to a stream, standard output by default."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream
        self._lock = threading.Lock()

    def submit(self, message: str) -> None:
        stream = self._stream if self._stream is not None else sys.stdout
        with self._lock:
            stream.write(message + "\n")
            stream.flush()


class FileSink(LogSink):
    """Appends each line to a file."""

    def __init__(self, filepath: str | PathLike[str]) -> None:
        try:
            self._file = open(filepath, "a", encoding="utf-8")
        except OSError as exc:
            raise OSError(f"Failed to open log file: {filepath}") from exc
        self._lock = threading.Lock()

    def submit(self, message: str) -> None:
        with self._lock:
            self._file.write(message + "\n")
            self._file.flush()

    def close(self) -> None:
        """Close the underlying file."""
        with self._lock:
            self._file.close()

    def __enter__(self) -> FileSink:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()