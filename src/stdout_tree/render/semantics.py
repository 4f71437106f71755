"""Display labels derived from span kind, status and semantic conventions.

Both the legacy (``http.method``, ``db.statement``) and the stable
(``http.request.method``, ``db.query.text``) attribute names are understood.
The first matching key in each tuple wins.
"""

from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlsplit

from opentelemetry.trace import SpanKind, StatusCode

from stdout_tree.spans.schema import SpanEvent, SpanRecord

HTTP_METHOD = ("http.method", "http.request.method")
HTTP_URL = ("http.url", "url.full")
HTTP_SERVER_NAME = ("http.server_name",)
HTTP_HOST = ("http.host", "server.address")
HTTP_ROUTE = ("http.route",)
HTTP_TARGET = ("http.target", "url.path")
HTTP_STATUS_CODE = ("http.status_code", "http.response.status_code")

DB_SYSTEM = ("db.system", "db.system.name")
DB_NAME = ("db.name", "db.namespace")
DB_STATEMENT = ("db.statement", "db.query.text")
DB_OPERATION = ("db.operation", "db.operation.name")

EXCEPTION_EVENT = "exception"
EXCEPTION_TYPE = "exception.type"
EXCEPTION_MESSAGE = "exception.message"

KIND_TAGS = {
    SpanKind.SERVER: "SE",
    SpanKind.CLIENT: "CL",
    SpanKind.INTERNAL: "IN",
    SpanKind.PRODUCER: "PR",
    SpanKind.CONSUMER: "CO",
}

STATUS_MARKERS = {
    StatusCode.ERROR: "ERR",
    StatusCode.OK: "OK",
    StatusCode.UNSET: "",
}


@dataclass
class ExceptionNote:
    """Exception event rendered beneath its span."""

    text: str
    timestamp: int | None = None


@dataclass
class SpanSemantics:
    kind_tag: str
    name: str
    status: str
    is_error: bool
    event_count: int = 0
    exceptions: list[ExceptionNote] = field(default_factory=list)


def _as_str(value: Any) -> str:
    if isinstance(value, list | tuple):
        return ",".join(_as_str(v) for v in value)
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _lookup(attributes: dict, keys: tuple[str, ...]) -> str | None:
    for key in keys:
        value = attributes.get(key)
        if value is not None and value != "":
            return _as_str(value)
    return None


def _status_code(attributes: dict) -> int | None:
    for key in HTTP_STATUS_CODE:
        value = attributes.get(key)
        if isinstance(value, bool) or value is None:
            continue
        if isinstance(value, int):
            return value
        if isinstance(value, float):
            return int(value)
        if isinstance(value, str):
            try:
                return int(value.strip())
            except ValueError:
                continue
    return None


def _split_url(url: str | None) -> tuple[str | None, str | None]:
    if not url:
        return None, None
    try:
        parts = urlsplit(url)
        return parts.hostname, parts.path or None
    except ValueError:
        return None, None


def _http_semantics(record: SpanRecord) -> tuple[str, str, bool] | None:
    attrs = record.attributes
    method = _lookup(attrs, HTTP_METHOD)
    if method is None:
        return None

    url_host, url_path = _split_url(_lookup(attrs, HTTP_URL))
    host = url_host or _lookup(attrs, HTTP_SERVER_NAME) or _lookup(attrs, HTTP_HOST)
    path = url_path or _lookup(attrs, HTTP_ROUTE) or _lookup(attrs, HTTP_TARGET) or ""

    label = f"{method} {path}".rstrip()
    if host:
        label = f"{host}  {label}"

    code = _status_code(attrs)
    is_error = record.status == StatusCode.ERROR or (code is not None and code >= 400)
    status = str(code) if code is not None else STATUS_MARKERS.get(record.status, "")
    return label, status, is_error


def _db_semantics(record: SpanRecord) -> str | None:
    attrs = record.attributes
    db_name = _lookup(attrs, DB_NAME)
    details = _lookup(attrs, DB_STATEMENT) or _lookup(attrs, DB_OPERATION)
    if _lookup(attrs, DB_SYSTEM) is None and (db_name is None or details is None):
        return None
    return f"{db_name or record.name}  {details or ''}".rstrip()


def _default_label(record: SpanRecord, show_attributes: bool) -> str:
    if not show_attributes or not record.attributes:
        return record.name
    details = " ".join(
        f"{key}={_as_str(value)}" for key, value in sorted(record.attributes.items())
    )
    return f"{record.name}  {details}"


def exception_note(event: SpanEvent) -> ExceptionNote:
    exc_type = _lookup(event.attributes, (EXCEPTION_TYPE,)) or "unknown"
    exc_message = _lookup(event.attributes, (EXCEPTION_MESSAGE,)) or ""
    return ExceptionNote(text=f"{exc_type}: {exc_message}", timestamp=event.timestamp)


def describe(record: SpanRecord, show_attributes: bool = False) -> SpanSemantics:
    """Derive kind tag, label and error classification for one span.

    HTTP conventions take precedence over database conventions, which take
    precedence over the plain span name.
    """
    is_error = record.status == StatusCode.ERROR
    status = STATUS_MARKERS.get(record.status, "")

    http = _http_semantics(record)
    if http is not None:
        name, status, is_error = http
    else:
        name = _db_semantics(record) or _default_label(record, show_attributes)

    return SpanSemantics(
        kind_tag=KIND_TAGS.get(record.kind, "IN"),
        name=name,
        status=status,
        is_error=is_error,
        event_count=len(record.events),
        exceptions=[
            exception_note(event)
            for event in record.events
            if event.name == EXCEPTION_EVENT
        ],
    )
