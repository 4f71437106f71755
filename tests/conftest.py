"""Pytest configuration and fixtures."""

import io

import pytest
from opentelemetry.trace import SpanKind, StatusCode
from rich.console import Console

from stdout_tree.config.settings import Settings
from stdout_tree.spans.schema import SpanEvent, SpanRecord

BASE_NS = 1_700_000_000_000_000_000
MS = 1_000_000
TRACE_ID = "0af7651916cd43dd8448eb211c80319c"


def make_span(
    span_id: str,
    start_ms: float | None = 0,
    end_ms: float | None = 0,
    parent: str | None = None,
    name: str | None = None,
    trace_id: str = TRACE_ID,
    kind: SpanKind = SpanKind.INTERNAL,
    status: StatusCode = StatusCode.UNSET,
    attributes: dict | None = None,
    events: list[SpanEvent] | None = None,
) -> SpanRecord:
    """Build a span record with millisecond offsets from a fixed base time."""
    return SpanRecord(
        trace_id=trace_id,
        span_id=span_id,
        parent_span_id=parent,
        name=name if name is not None else f"span {span_id}",
        kind=kind,
        start_time=None if start_ms is None else BASE_NS + int(start_ms * MS),
        end_time=None if end_ms is None else BASE_NS + int(end_ms * MS),
        status=status,
        attributes=attributes or {},
        events=events or [],
    )


def exception_event(exc_type: str, message: str, at_ms: float) -> SpanEvent:
    return SpanEvent(
        name="exception",
        timestamp=BASE_NS + int(at_ms * MS),
        attributes={"exception.type": exc_type, "exception.message": message},
    )


@pytest.fixture(autouse=True)
def default_settings(monkeypatch):
    """Keep the shared settings instance independent of the environment."""
    monkeypatch.setattr(Settings, "_instance", Settings())


@pytest.fixture
def scenario_spans() -> list[SpanRecord]:
    """Server request with middleware children and a nested client call."""
    return [
        make_span("c1", 4, 307, parent="m3", name="pg-pool.connect", kind=SpanKind.CLIENT),
        make_span("m2", 2, 2, parent="root", name="middleware - query"),
        make_span("m3", 3, 526, parent="root", name="middleware - session"),
        make_span("m1", 1, 1, parent="root", name="middleware - expressInit"),
        make_span(
            "root",
            0,
            584,
            name="request",
            kind=SpanKind.SERVER,
            attributes={
                "http.method": "GET",
                "http.route": "/authors/:authorId",
                "http.status_code": 500,
            },
        ),
    ]


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def plain_console(output) -> Console:
    """Console writing uncolored text to an in-memory buffer."""
    return Console(file=output, width=80, color_system=None)


@pytest.fixture
def color_console(output) -> Console:
    """Console writing ANSI colored text to an in-memory buffer."""
    return Console(file=output, width=80, force_terminal=True, color_system="standard")
