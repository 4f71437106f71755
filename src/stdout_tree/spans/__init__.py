"""Span record model and conversions."""

from stdout_tree.spans.convert import (
    from_readable_span,
    load_span_dump,
    to_span_records,
)
from stdout_tree.spans.schema import SpanEvent, SpanRecord

__all__ = [
    "SpanEvent",
    "SpanRecord",
    "from_readable_span",
    "load_span_dump",
    "to_span_records",
]
