"""
stdout-tree CLI main entry point.

This module provides the main CLI interface using Typer,
supporting commands for rendering span dumps, running the demo
trace, and inspecting configuration.
"""

from pathlib import Path

import typer
from rich.console import Console

app = typer.Typer(
    name="stdout-tree",
    help="stdout-tree - Print OpenTelemetry traces as timeline trees",
    add_completion=False,
    pretty_exceptions_enable=True,
)
console = Console()


@app.command()
def render(
    path: Path = typer.Argument(..., help="Span dump file (JSON lines or JSON array)"),
    width: int | None = typer.Option(None, "--width", "-w", help="Output width in columns"),
    color: str | None = typer.Option(
        None, "--color", help="Color mode (auto/always/never)"
    ),
    trace_id: str | None = typer.Option(
        None, "--trace-id", "-t", help="Only render spans of this trace"
    ),
    show_attributes: bool = typer.Option(
        False, "--show-attributes", help="Append attributes to plain span names"
    ),
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Configuration file path"
    ),
):
    """Render spans from a dump file."""
    from stdout_tree.cli.render import render_dump

    render_dump(
        path=path,
        width=width,
        color=color,
        trace_id=trace_id,
        show_attributes=show_attributes,
        config=config,
    )


@app.command()
def demo(
    width: int | None = typer.Option(None, "--width", "-w", help="Output width in columns"),
    color: str | None = typer.Option(
        None, "--color", help="Color mode (auto/always/never)"
    ),
):
    """Print an example web request trace."""
    from stdout_tree.cli.demo import run_demo

    run_demo(width=width, color=color)


@app.command()
def config(
    action: str = typer.Argument("show", help="Action type (show/validate)"),
    path: Path | None = typer.Argument(None, help="Configuration file path"),
):
    """Configuration management."""
    from stdout_tree.cli.config import manage_config

    manage_config(action=action, path=path)


@app.command()
def version():
    """Show version information."""
    from stdout_tree import __version__

    console.print(f"[bold green]stdout-tree[/bold green] v{__version__}")


if __name__ == "__main__":
    app()
