"""Access-log records and the formatters that render them."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime

_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def _local_time(timestamp: datetime) -> str:
    if timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone()
    return timestamp.strftime(_TIME_FORMAT)


@dataclass
class LogRecord:
    """One served request; ``latency`` is in seconds."""

    timestamp: datetime = field(default_factory=datetime.now)
    remote_ip: str = ""
    method: str = ""
    path: str = ""
    status_code: int = 0
    latency: float = 0.0


class Formatter(ABC):
    """Turns a :class:`LogRecord` into one line of text."""

    @abstractmethod
    def format(self, record: LogRecord) -> str:
        """Render ``record``."""


class TextFormatter(Formatter):
    """Common-log style: ``[time] ip "METHOD path" status latencys``."""

    def format(self, record: LogRecord) -> str:
        return (
            f"[{_local_time(record.timestamp)}] {record.remote_ip} "
            f'"{record.method} {record.path}" {record.status_code} '
            f"{record.latency:.6f}s"
        )


class JsonFormatter(Formatter):
    """A single-line JSON object with the record's fields."""

    def format(self, record: LogRecord) -> str:
        return (
            f'{{"timestamp": "{_local_time(record.timestamp)}", '
            f'"remote_ip": "{record.remote_ip}", '
            f'"method": "{record.method}", '
            f'"path": "{record.path}", '
            f'"status": {record.status_code}, '
            f'"latency_s": {record.latency:.6f}}}'
        )