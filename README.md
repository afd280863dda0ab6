# webweave

webweave is a small toolkit for HTTP/1.0 and HTTP/1.1 servers built on
`asyncio`. It uses only the standard library.

It provides:

- `webweave.parser`: an incremental request-line and header parser,
  `RequestParser`, which can be fed data as it arrives and reports
  `ParseResult.GOOD`, `ParseResult.BAD` or `ParseResult.INDETERMINATE`;
- `webweave.request` and `webweave.response`: `Request`, `Header` and
  `Response` objects, the `StatusCode` enum, stock responses and
  serialisation to bytes;
- `webweave.context` and `webweave.middleware`: middleware in two styles.
  Context-based `Middleware` objects are run by a `MiddlewareChainBuilder`.
  Request/response handlers are run by a `MiddlewareChain`, which ends in a
  final handler;
- `webweave.request_id` and `webweave.session`: ready-made request/response
  middleware for request IDs and session cookies;
- `webweave.logformat` and `webweave.sinks`: access-log records and
  formatters (`TextFormatter`, `JsonFormatter`), and sinks (`ConsoleSink`,
  `FileSink`);
- `webweave.error_logger`: `log_error`, which records an error through the
  standard `logging` module under the `webweave` logger;
- `webweave.connection` and `webweave.server`: a per-client `Connection` with
  keep-alive, timeouts and request validation, a `ConnectionManager`, and a
  `Server` that handles shutdown and reload signals.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Running the server

The package installs a `webweave` command that starts the server:

```
webweave --address 127.0.0.1 --port 8080
```

`--address` defaults to `127.0.0.1` and `--port` to `8080`.

The server gives each request one of these stock responses, all with an
empty HTML body:

- `200 OK` for a well-formed request.
- `400 Bad Request` for a malformed request. A request is also malformed if
  its version is other than HTTP/1.0 or HTTP/1.1, or if it is an HTTP/1.1
  request without a `Host` header.
- `500 Internal Server Error` if the client closes the connection or a read
  fails while a request is expected. The server then closes the connection.

### Keep-alive and timeouts

A connection stays open if the request's `Connection` header contains
`keep-alive`. Without that header, it stays open for an HTTP/1.1 request and
closes for any other. Read, idle and write timeouts each default to 30
seconds. When a timeout expires, the connection closes.

### Signals

SIGINT, SIGTERM and SIGQUIT shut the server down. It stops accepting and
closes every open connection. SIGHUP calls `reload_config()`, which prints a
message. Signals are handled only where the event loop supports
`add_signal_handler`.

### From Python

```python
from webweave.server import Server

Server("127.0.0.1", 8080).run()
```

`Server.serve()` is the coroutine behind `run()`. `shutdown()` ends it. If
`port` is 0, a free port is chosen and stored in `server.port` once the
`server.started` event is set.

## Parsing requests

```python
from webweave.parser import ParseResult, RequestParser
from webweave.request import Request

request = Request()
parser = RequestParser()
result = parser.parse(request, b"GET /search?q=web HTTP/1.1\r\nHost: localhost\r\n\r\n")

assert result is ParseResult.GOOD
request.path()              # "/search"
request.header("Host")      # "localhost"
request.query_params()      # {"q": "web"}
```

A partial request returns `ParseResult.INDETERMINATE`; call `parse` again
with the rest of the data. `reset()` readies the parser for a new request.
Header lookup with `header()` is case-sensitive and returns `""` when the
header is absent. The parser stops at the blank line after the headers and
does not read a request body.

## Responses

```python
from webweave.response import Response, StatusCode

response = Response.stock_response(StatusCode.NOT_FOUND)
response.to_buffers()   # status line, header pieces, blank line, body
response.to_bytes()     # b"HTTP/1.0 404 Not Found\r\nContent-Length: 0\r\n..."
```

The status line always reads `HTTP/1.0`. A status outside `StatusCode` is
written as `500 Internal Server Error`.

## Middleware

Context-based middleware receives a `Context` and a `next` callable:

```python
from webweave.context import Context
from webweave.middleware import Middleware, MiddlewareChainBuilder
from webweave.request import Request
from webweave.response import Response


class Greeting(Middleware):
    def __call__(self, ctx, next):
        ctx.set("greeting", "hello")
        next()


ctx = Context(Request(), Response())
MiddlewareChainBuilder().add(Greeting()).run(ctx)
ctx.get("greeting", None)   # "hello"
```

Each middleware runs before the ones added after it. It resumes once they
have returned. A middleware that does not call `next` ends the chain there.
Exceptions raised inside the chain reach the caller.

Request/response middleware are callables taking `(request, response, next)`.
`HandlerMiddleware` wraps such a function together with a priority.
`MiddlewareChain(middlewares, final_handler).next(request, response)` runs
them in the given order and then runs `final_handler(request, response)`.

- `create_request_id_middleware()` (priority 90) forwards an incoming
  `X-Request-ID` or generates a new UUID. It adds the ID to the response
  headers and exposes it through `current_request_id()`.
- `create_session_middleware(store)` reuses the `session_id` cookie. If the
  cookie is missing, it issues a new ID with
  `Set-Cookie: session_id=...; HttpOnly; Secure`. It passes the ID on in the
  `X-Session-ID` request header. The `store` is kept with the middleware but
  not read or written.
- `parse_cookies(header)` splits a `Cookie` header into a dict.

## Logging

`TextFormatter` and `JsonFormatter` turn a `LogRecord` into one line. A
record holds a timestamp, remote address, method, path, status code and
latency in seconds. `JsonFormatter` does not escape field values.

`ConsoleSink` writes lines to standard output or to a given stream.
`FileSink` appends lines to a file, raises `OSError` if the file cannot be
opened, and can be used as a context manager. Both sinks serialise writes
with a lock.

## What it does not do

The server is not wired to any of the middleware, formatters or sinks. It
has no routing and no application handlers, and it does not read request
bodies. Every response it sends is one of the empty stock responses
described above. The middleware and logging pieces are for use in your own
request handling.