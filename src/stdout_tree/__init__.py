"""stdout-tree - print OpenTelemetry traces as timeline trees."""

__version__ = "0.1.0"

from stdout_tree.exporter import (  # noqa: E402
    ExporterClosedError,
    StdoutTreeExporter,
    WriteFailure,
    install,
    new_provider,
)
from stdout_tree.render import RenderConfig, render_plain, render_records  # noqa: E402
from stdout_tree.spans import SpanEvent, SpanRecord  # noqa: E402

__all__ = [
    "ExporterClosedError",
    "RenderConfig",
    "SpanEvent",
    "SpanRecord",
    "StdoutTreeExporter",
    "WriteFailure",
    "install",
    "new_provider",
    "render_plain",
    "render_records",
]
