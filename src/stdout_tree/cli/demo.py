"""
Demo command implementation for stdout-tree CLI.

Emits a web request trace through a real tracer provider, with explicit
timestamps so the output does not depend on timing.
"""

import time
from collections.abc import Iterator
from contextlib import contextmanager

from opentelemetry import trace
from opentelemetry.sdk.trace import Tracer
from opentelemetry.trace import Span, SpanKind, Status, StatusCode

MS = 1_000_000


@contextmanager
def _timed_span(
    tracer: Tracer,
    name: str,
    base_ns: int,
    start_ms: float,
    end_ms: float,
    parent: Span | None = None,
    **kwargs,
) -> Iterator[Span]:
    context = trace.set_span_in_context(parent) if parent is not None else None
    span = tracer.start_span(
        name, context=context, start_time=base_ns + int(start_ms * MS), **kwargs
    )
    try:
        yield span
    finally:
        span.end(end_time=base_ns + int(end_ms * MS))


def emit_demo_trace(tracer: Tracer, base_ns: int | None = None) -> None:
    """Record the example request trace with the given tracer."""
    base = base_ns if base_ns is not None else time.time_ns()

    def timed(name, start_ms, end_ms, parent=None, **kwargs):
        return _timed_span(tracer, name, base, start_ms, end_ms, parent, **kwargs)

    with timed(
        "request",
        0,
        584,
        kind=SpanKind.SERVER,
        attributes={
            "http.method": "GET",
            "http.flavor": "1.1",
            "http.target": "/authors/6d50807b-80e6-4802-b01e-3e78137a0fc9/books/d13d226c-c600-42c9-bb9d-96395c5e9351",
            "http.host": "my-awesome-books.com:443",
            "http.server_name": "my-awesome-books.com",
            "net.host.port": 443,
            "http.scheme": "https",
            "http.route": "/authors/:authorId/books/:bookId",
            "http.status_code": 500,
            "http.client_ip": "192.0.2.4",
        },
    ) as request:
        with timed("middleware - expressInit", 1, 1, request):
            pass
        with timed("middleware - query", 2, 2, request):
            pass
        with timed("middleware - session", 3, 526, request) as session:
            with timed("pg-pool.connect", 4, 307, session, kind=SpanKind.CLIENT):
                pass
            with timed(
                "get session",
                308,
                510,
                session,
                kind=SpanKind.CLIENT,
                attributes={
                    "db.system": "postgresql",
                    "db.user": "user",
                    "net.peer.name": "localhost",
                    "net.peer.port": 5432,
                    "db.name": "sessions",
                    "db.statement": 'SELECT sess FROM "session" WHERE sid = $1 AND expire >= to_timestamp($2)',
                },
            ):
                pass
        with timed("middleware - initialize", 527, 527, request):
            pass
        with timed("middleware - authenticate", 528, 528, request) as authenticate:
            authenticate.add_event(
                "user authenticated",
                {"enduser.id": "42"},
                timestamp=base + 528 * MS,
            )
        with timed(
            "request handler - /authors/:authorId/books/:bookId", 529, 583, request
        ) as handler:
            with timed(
                "get book",
                529,
                583,
                handler,
                kind=SpanKind.CLIENT,
                attributes={
                    "http.method": "POST",
                    "http.flavor": "1.1",
                    "http.url": "http://book-service.book-service/graphql",
                    "http.status_code": 200,
                },
            ) as get_book:
                with timed(
                    "request",
                    535,
                    560,
                    get_book,
                    kind=SpanKind.SERVER,
                    attributes={
                        "http.method": "POST",
                        "http.target": "/graphql",
                        "http.server_name": "book-service.book-service",
                        "http.route": "/graphql",
                        "http.status_code": 200,
                    },
                ) as graphql:
                    with timed("query", 536, 540, graphql) as query:
                        with timed("field", 537, 539, query) as field:
                            field.set_status(Status(StatusCode.ERROR))
                            field.record_exception(
                                RuntimeError("something went wrong"),
                                timestamp=base + 538 * MS,
                            )
                    with timed("parse", 541, 541, graphql):
                        pass
                    with timed("validation", 542, 542, graphql):
                        pass


def run_demo(width: int | None = None, color: str | None = None) -> None:
    """
    Core logic for the demo command.

    Args:
        width: Output width, overrides configuration
        color: Color mode, overrides configuration
    """
    from stdout_tree.config.settings import Settings
    from stdout_tree.exporter.pipeline import TRACER_NAME, new_provider

    settings = Settings.load()
    if width is not None:
        settings.width = width
    if color is not None:
        settings.color = color.lower()

    provider = new_provider(settings, service_name="stdout-tree-demo")
    try:
        emit_demo_trace(provider.get_tracer(TRACER_NAME))
    finally:
        provider.shutdown()
