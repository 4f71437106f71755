"""
Render command implementation for stdout-tree CLI.

Loads spans from a dump file, such as the JSON lines written by a file
span exporter, and prints them as one tree per root span.
"""

import logging
from pathlib import Path

from rich.console import Console

console = Console(stderr=True)

logger = logging.getLogger(__name__)


def render_dump(
    path: Path,
    width: int | None = None,
    color: str | None = None,
    trace_id: str | None = None,
    show_attributes: bool = False,
    config: Path | None = None,
) -> int:
    """
    Core logic for rendering a span dump.

    Args:
        path: Dump file path
        width: Output width, overrides configuration
        color: Color mode, overrides configuration
        trace_id: Only render spans of this trace
        show_attributes: Append attributes to plain span names
        config: Configuration file path

    Returns:
        Number of rendered spans
    """
    import typer

    from stdout_tree.config.settings import Settings
    from stdout_tree.exporter.errors import WriteFailure
    from stdout_tree.exporter.exporter import StdoutTreeExporter
    from stdout_tree.spans.convert import load_span_dump
    from stdout_tree.utils.logging import setup_logging

    settings = Settings.load(config)
    if width is not None:
        settings.width = width
    if color is not None:
        settings.color = color.lower()
    if show_attributes:
        settings.show_attributes = True

    errors = settings.validate()
    if errors:
        for error in errors:
            console.print(f"[red]Error: {error}[/red]")
        raise typer.Exit(1)

    setup_logging(settings.log_level)

    path = Path(path)
    if not path.exists():
        console.print(f"[red]Error: Span dump not found: {path}[/red]")
        raise typer.Exit(1)

    records = load_span_dump(path)
    if trace_id:
        records = [r for r in records if r.trace_id == trace_id]

    if not records:
        console.print(f"[yellow]No spans found in {path}[/yellow]")
        return 0

    exporter = StdoutTreeExporter(settings=settings, hold_incomplete_traces=False)
    try:
        exporter.write_batch(records)
    except WriteFailure as e:
        logger.error(f"Failed to write trace tree: {e}")
        raise typer.Exit(1)
    finally:
        exporter.shutdown()

    return len(records)
