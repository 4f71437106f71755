"""Span record schema definitions."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

from opentelemetry.trace import SpanKind, StatusCode

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def _parse_timestamp(value: Any) -> int | None:
    """Parse nanoseconds since epoch from an int or an ISO-8601 string."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.isdigit():
            return int(text)
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=UTC)
        return (dt - _EPOCH) // timedelta(microseconds=1) * 1000
    return None


def _parse_kind(value: Any) -> SpanKind:
    if isinstance(value, SpanKind):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        try:
            return SpanKind(value)
        except ValueError:
            return SpanKind.INTERNAL
    if isinstance(value, str):
        name = value.rsplit(".", 1)[-1].upper().removeprefix("SPAN_KIND_")
        return SpanKind.__members__.get(name, SpanKind.INTERNAL)
    return SpanKind.INTERNAL


def _parse_status(value: Any) -> tuple[StatusCode, str | None]:
    description = None
    if isinstance(value, dict):
        description = value.get("description") or value.get("message") or None
        value = value.get("status_code", value.get("code"))
    if isinstance(value, StatusCode):
        return value, description
    if isinstance(value, int) and not isinstance(value, bool):
        try:
            return StatusCode(value), description
        except ValueError:
            return StatusCode.UNSET, description
    if isinstance(value, str):
        name = value.rsplit(".", 1)[-1].upper().removeprefix("STATUS_CODE_")
        return StatusCode.__members__.get(name, StatusCode.UNSET), description
    return StatusCode.UNSET, description


def _parse_id(value: Any) -> str | None:
    if value is None or value == "":
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        return f"{value:016x}" if value else None
    return str(value)


@dataclass
class SpanEvent:
    """Timestamped event recorded on a span."""

    name: str
    timestamp: int | None = None
    attributes: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "SpanEvent":
        return cls(
            name=str(data.get("name", "")),
            timestamp=_parse_timestamp(data.get("timestamp")),
            attributes=dict(data.get("attributes") or {}),
        )


@dataclass
class SpanRecord:
    """One finished span, normalized for rendering.

    Identifiers are lowercase hex strings. Timestamps are nanoseconds since
    the epoch and may be missing on malformed input.
    """

    trace_id: str
    span_id: str
    name: str
    parent_span_id: str | None = None
    kind: SpanKind = SpanKind.INTERNAL
    start_time: int | None = None
    end_time: int | None = None
    status: StatusCode = StatusCode.UNSET
    status_description: str | None = None
    attributes: dict[str, Any] = field(default_factory=dict)
    events: list[SpanEvent] = field(default_factory=list)
    parent_is_remote: bool = False

    @property
    def duration_ns(self) -> int:
        """Span duration, zero when a timestamp is missing or inverted."""
        if self.start_time is None or self.end_time is None:
            return 0
        return max(0, self.end_time - self.start_time)

    @property
    def is_local_root(self) -> bool:
        """True when no parent lives in this process."""
        return self.parent_span_id is None or self.parent_is_remote

    @classmethod
    def from_dict(cls, data: dict) -> "SpanRecord":
        status, description = _parse_status(data.get("status"))
        return cls(
            trace_id=_parse_id(data.get("trace_id")) or "",
            span_id=_parse_id(data.get("span_id")) or "",
            name=str(data.get("name", "")),
            parent_span_id=_parse_id(data.get("parent_span_id", data.get("parent_id"))),
            kind=_parse_kind(data.get("kind")),
            start_time=_parse_timestamp(data.get("start_time")),
            end_time=_parse_timestamp(data.get("end_time")),
            status=status,
            status_description=data.get("status_description") or description,
            attributes=dict(data.get("attributes") or {}),
            events=[
                SpanEvent.from_dict(event)
                for event in data.get("events") or []
                if isinstance(event, dict)
            ],
            parent_is_remote=bool(data.get("parent_is_remote", False)),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "trace_id": self.trace_id,
            "span_id": self.span_id,
            "parent_span_id": self.parent_span_id,
            "name": self.name,
            "kind": self.kind.name,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "status": self.status.name,
            "status_description": self.status_description,
            "attributes": self.attributes,
            "events": [
                {
                    "name": event.name,
                    "timestamp": event.timestamp,
                    "attributes": event.attributes,
                }
                for event in self.events
            ],
            "parent_is_remote": self.parent_is_remote,
        }
