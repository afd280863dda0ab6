"""HTTP/1.x toolkit: incremental request parser, responses, middleware chains,
request-id and session middleware, access-log formatting and an asyncio server
that answers with stock responses."""

__version__ = "0.1.0"