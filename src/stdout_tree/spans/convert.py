"""Conversion of OpenTelemetry spans and JSON dumps into span records."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from opentelemetry.sdk.trace import ReadableSpan

from stdout_tree.spans.schema import SpanEvent, SpanRecord

logger = logging.getLogger(__name__)


def _format_trace_id(trace_id: int) -> str:
    return f"{trace_id:032x}"


def _format_span_id(span_id: int) -> str:
    return f"{span_id:016x}"


def _sanitize_value(value: Any) -> Any:
    if isinstance(value, str | int | float | bool) or value is None:
        return value
    if isinstance(value, list | tuple):
        return tuple(_sanitize_value(v) for v in value)
    return str(value)


def _sanitize_attributes(attributes: Any) -> dict[str, Any]:
    if not attributes:
        return {}
    return {str(key): _sanitize_value(value) for key, value in attributes.items()}


def from_readable_span(span: ReadableSpan) -> SpanRecord:
    """Normalize a finished SDK span."""
    ctx = span.get_span_context()
    parent = span.parent
    return SpanRecord(
        trace_id=_format_trace_id(ctx.trace_id),
        span_id=_format_span_id(ctx.span_id),
        parent_span_id=_format_span_id(parent.span_id) if parent is not None else None,
        parent_is_remote=bool(parent is not None and parent.is_remote),
        name=span.name,
        kind=span.kind,
        start_time=span.start_time,
        end_time=span.end_time,
        status=span.status.status_code,
        status_description=span.status.description,
        attributes=_sanitize_attributes(span.attributes),
        events=[
            SpanEvent(
                name=event.name,
                timestamp=event.timestamp,
                attributes=_sanitize_attributes(event.attributes),
            )
            for event in span.events
        ],
    )


def to_span_records(spans: Iterable[ReadableSpan | SpanRecord]) -> list[SpanRecord]:
    """Accept SDK spans and already normalized records alike."""
    return [
        span if isinstance(span, SpanRecord) else from_readable_span(span)
        for span in spans
    ]


def load_span_dump(path: Path) -> list[SpanRecord]:
    """Load span records from a JSON-lines dump or a JSON array.

    Lines that are not valid JSON objects are skipped with a warning.
    """
    path = Path(path)
    content = path.read_text(encoding="utf-8")

    if content.lstrip().startswith("["):
        data = json.loads(content)
        return [SpanRecord.from_dict(item) for item in data if isinstance(item, dict)]

    records = []
    for lineno, line in enumerate(content.splitlines(), start=1):
        line = line.strip()
        if not line:
            continue
        try:
            item = json.loads(line)
        except json.JSONDecodeError as e:
            logger.warning(f"Skipping malformed line {lineno} in {path}: {e}")
            continue
        if not isinstance(item, dict):
            logger.warning(f"Skipping line {lineno} in {path}: not a span object")
            continue
        records.append(SpanRecord.from_dict(item))

    logger.debug(f"Loaded {len(records)} spans from {path}")
    return records
