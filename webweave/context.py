"""Per-request context shared between middleware and handlers."""

from __future__ import annotations

from typing import Any

from webweave.request import Request
from webweave.response import Response


class Context:
    """Holds the request, the response and arbitrary keyed values."""

    def __init__(self, request: Request, response: Response) -> None:
        self.request = request
        self.response = response
        self._data: dict[str, Any] = {}

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``, replacing any earlier value."""
        self._data[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under ``key``, or ``default`` if there is none."""
        return self._data.get(key, default)

    def __contains__(self, key: object) -> bool:
        return key in self._data