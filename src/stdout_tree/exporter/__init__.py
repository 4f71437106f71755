"""Span exporter and pipeline helpers."""

from stdout_tree.exporter.errors import (
    ExporterClosedError,
    StdoutTreeError,
    WriteFailure,
)
from stdout_tree.exporter.exporter import StdoutTreeExporter
from stdout_tree.exporter.pipeline import install, new_provider

__all__ = [
    "ExporterClosedError",
    "StdoutTreeError",
    "StdoutTreeExporter",
    "WriteFailure",
    "install",
    "new_provider",
]
