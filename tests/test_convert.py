"""Tests for span record parsing and dump loading."""

import json
import logging

from opentelemetry.trace import SpanKind, StatusCode

from stdout_tree.spans.convert import load_span_dump
from stdout_tree.spans.schema import SpanRecord

DUMP_LINE = {
    "trace_id": "0af7651916cd43dd8448eb211c80319c",
    "span_id": "b7ad6b7169203331",
    "parent_span_id": None,
    "name": "request",
    "kind": "SpanKind.SERVER",
    "start_time": "2024-01-01T00:00:00.000000",
    "end_time": "2024-01-01T00:00:00.584000",
    "status": {"status_code": "ERROR", "description": "boom"},
    "attributes": {"http.method": "GET"},
    "events": [
        {
            "name": "exception",
            "timestamp": "2024-01-01T00:00:00.010000+00:00",
            "attributes": {"exception.type": "RuntimeError"},
        }
    ],
}


class TestFromDict:
    """Tests for SpanRecord.from_dict()."""

    def test_dump_line(self):
        record = SpanRecord.from_dict(DUMP_LINE)

        assert record.kind == SpanKind.SERVER
        assert record.status == StatusCode.ERROR
        assert record.status_description == "boom"
        assert record.duration_ns == 584_000_000
        assert record.is_local_root
        assert record.events[0].timestamp - record.start_time == 10_000_000

    def test_integer_timestamps_and_ids(self):
        record = SpanRecord.from_dict(
            {
                "trace_id": "ab",
                "span_id": 255,
                "parent_id": 1,
                "kind": 2,
                "start_time": 100,
                "end_time": "250",
                "status": 1,
            }
        )
        assert record.span_id == "00000000000000ff"
        assert record.parent_span_id == "0000000000000001"
        assert record.kind == SpanKind.CLIENT
        assert record.duration_ns == 150
        assert record.status == StatusCode.OK

    def test_unknown_values_fall_back(self):
        record = SpanRecord.from_dict(
            {"span_id": "a", "kind": "WEIRD", "status": "SOMETIMES", "start_time": "yesterday"}
        )
        assert record.kind == SpanKind.INTERNAL
        assert record.status == StatusCode.UNSET
        assert record.start_time is None
        assert record.duration_ns == 0

    def test_otlp_style_enum_names(self):
        record = SpanRecord.from_dict(
            {"span_id": "a", "kind": "SPAN_KIND_PRODUCER", "status": {"code": "STATUS_CODE_OK"}}
        )
        assert record.kind == SpanKind.PRODUCER
        assert record.status == StatusCode.OK

    def test_to_dict_keeps_fields(self):
        record = SpanRecord.from_dict(DUMP_LINE)
        data = record.to_dict()
        assert data["kind"] == "SERVER"
        assert data["status"] == "ERROR"
        assert SpanRecord.from_dict(data) == record


class TestLoadSpanDump:
    """Tests for load_span_dump()."""

    def test_json_lines(self, tmp_path):
        path = tmp_path / "spans.jsonl"
        child = dict(DUMP_LINE, span_id="c1", parent_span_id="b7ad6b7169203331", name="child")
        path.write_text("\n".join(json.dumps(item) for item in (DUMP_LINE, child)) + "\n")

        records = load_span_dump(path)
        assert [r.name for r in records] == ["request", "child"]
        assert records[1].parent_span_id == "b7ad6b7169203331"

    def test_json_array(self, tmp_path):
        path = tmp_path / "spans.json"
        path.write_text(json.dumps([DUMP_LINE, "not a span"]))
        assert len(load_span_dump(path)) == 1

    def test_malformed_lines_skipped(self, tmp_path, caplog):
        path = tmp_path / "spans.jsonl"
        path.write_text(json.dumps(DUMP_LINE) + "\n{broken\n\n[1, 2]\n")

        with caplog.at_level(logging.WARNING, logger="stdout_tree"):
            records = load_span_dump(path)

        assert len(records) == 1
        assert "line 2" in caplog.text
        assert "line 4" in caplog.text
