"""HTTP request model with helpers for path, header and query access."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Header:
    """A single HTTP header as a name/value pair."""

    name: str = ""
    value: str = ""


@dataclass
class Request:
    """An HTTP request as produced by the request parser."""

    method: str = ""
    uri: str = ""
    http_version_major: int = 0
    http_version_minor: int = 0
    headers: list[Header] = field(default_factory=list)

    def path(self) -> str:
        """Return the URI without its query string."""
        path, _, _ = self.uri.partition("?")
        return path

    def header(self, name: str) -> str:
        """Return the value of the first header named exactly ``name``, or ``""``."""
        return next((h.value for h in self.headers if h.name == name), "")

    def query_params(self) -> dict[str, str]:
        """Parse the query string into a mapping.

        Each ``=`` sets the current key and each ``&`` stores the text since
        the previous separator under that key; the key carries over between
        pairs, so ``a=1&b`` stores ``b`` under ``a``.
        """
        _, sep, query = self.uri.partition("?")
        if not sep:
            return {}
        params: dict[str, str] = {}
        key = ""
        start = 0
        for pos, ch in enumerate(query):
            if ch == "=":
                key = query[start:pos]
                start = pos + 1
            elif ch == "&":
                params[key] = query[start:pos]
                start = pos + 1
        params[key] = query[start:]
        return params