"""Exporter error types."""


class StdoutTreeError(Exception):
    """Base class for exporter errors."""


class WriteFailure(StdoutTreeError):
    """The output stream rejected a write, e.g. a broken pipe."""


class ExporterClosedError(StdoutTreeError):
    """Export was called after shutdown."""

    def __init__(self, message: str = "exporter is shut down"):
        super().__init__(message)
