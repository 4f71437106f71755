"""
Span exporter that prints finished traces as a timeline tree.

The exporter plugs into the OpenTelemetry SDK like any other span exporter.
Rendering happens outside of any lock; only the final write of a batch's
block is serialized, so concurrent exports never interleave their lines.

With ``hold_incomplete_traces`` enabled, spans are kept per trace until the
trace's local root span arrives. This lets a SimpleSpanProcessor, which
exports one span per call, still produce whole trees.

Shutdown closes the exporter and takes the held spans in one step, so a
racing export is either printed by shutdown or reported as a failure.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Sequence

from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.sdk.trace.export import SpanExporter, SpanExportResult
from rich.console import Console

from stdout_tree.config.settings import Settings
from stdout_tree.exporter.errors import ExporterClosedError, WriteFailure
from stdout_tree.render.format import as_text
from stdout_tree.render.printer import RenderConfig, render_records
from stdout_tree.spans.convert import to_span_records
from stdout_tree.spans.schema import SpanRecord

logger = logging.getLogger(__name__)


class StdoutTreeExporter(SpanExporter):
    """Prints each exported batch as an indented tree with duration bars."""

    def __init__(
        self,
        console: Console | None = None,
        settings: Settings | None = None,
        *,
        hold_incomplete_traces: bool | None = None,
    ):
        self._settings = settings or Settings.get_instance()
        self._console = console or self._settings.make_console()
        self._hold = (
            self._settings.hold_incomplete_traces
            if hold_incomplete_traces is None
            else hold_incomplete_traces
        )

        self._write_lock = threading.Lock()
        self._held_lock = threading.Lock()
        self._held: dict[str, list[SpanRecord]] = {}
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def render_config(self) -> RenderConfig:
        return self._settings.render_config(self._console.width)

    def export(self, spans: Sequence[ReadableSpan | SpanRecord]) -> SpanExportResult:
        try:
            self.write_batch(to_span_records(spans))
        except ExporterClosedError:
            logger.warning(f"Dropped {len(spans)} spans exported after shutdown")
            return SpanExportResult.FAILURE
        except WriteFailure as e:
            logger.error(f"Failed to write trace tree: {e}")
            return SpanExportResult.FAILURE
        return SpanExportResult.SUCCESS

    def write_batch(self, records: Iterable[SpanRecord]) -> None:
        """Render and write one batch.

        Raises:
            ExporterClosedError: The exporter has been shut down.
            WriteFailure: The output stream rejected the write.
        """
        if self._closed:
            raise ExporterClosedError()

        records = list(records)
        if self._hold:
            records = self._release_complete(records)
        if records:
            self._write(records)

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        """Print every held span, complete trace or not."""
        with self._held_lock:
            held = self._take_held()
        if not held:
            return True
        try:
            self._emit(self._render(held))
        except WriteFailure as e:
            logger.warning(f"Failed to flush held spans: {e}")
            return False
        return True

    def shutdown(self) -> None:
        """Refuse new exports, print held spans, wait for an in-flight write."""
        with self._held_lock:
            if self._closed:
                return
            self._closed = True
            held = self._take_held()

        output = self._render(held) if held else ""
        try:
            self._emit(output)
        except WriteFailure as e:
            logger.warning(f"Failed to flush held spans on shutdown: {e}")

    def _release_complete(self, records: list[SpanRecord]) -> list[SpanRecord]:
        ready = []
        with self._held_lock:
            if self._closed:
                raise ExporterClosedError()
            completed = set()
            for record in records:
                self._held.setdefault(record.trace_id, []).append(record)
                if record.is_local_root:
                    completed.add(record.trace_id)
            for trace_id in sorted(completed):
                ready.extend(self._held.pop(trace_id))
        return ready

    def _take_held(self) -> list[SpanRecord]:
        # Caller holds _held_lock
        held = [record for trace_id in sorted(self._held) for record in self._held[trace_id]]
        self._held.clear()
        return held

    def _render(self, records: list[SpanRecord]) -> str:
        block = as_text(render_records(records, self.render_config()))
        # Resolve colors for this console before taking the write lock
        with self._console.capture() as capture:
            self._console.print(block, end="", soft_wrap=True, highlight=False)
        return capture.get()

    def _write(self, records: list[SpanRecord]) -> None:
        output = self._render(records)
        with self._write_lock:
            if self._closed:
                raise ExporterClosedError()
            self._write_locked(output)

    def _emit(self, output: str) -> None:
        with self._write_lock:
            self._write_locked(output)

    def _write_locked(self, output: str) -> None:
        try:
            if output:
                self._console.file.write(output)
            self._console.file.flush()
        except OSError as e:
            raise WriteFailure(str(e)) from e
