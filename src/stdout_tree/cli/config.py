"""
Config command implementation for stdout-tree CLI.

This module handles configuration management including
viewing and validating configurations.
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.syntax import Syntax

console = Console()


def manage_config(
    action: str = "show",
    path: Path | None = None,
):
    """
    Core logic for configuration management.

    Args:
        action: Action type (show/validate)
        path: Configuration file path
    """
    if action == "show":
        _show_config(path)
    elif action == "validate":
        _validate_config(path)
    else:
        console.print(f"[red]Unknown action: {action}[/red]")
        console.print("Available actions: show, validate")
        raise typer.Exit(1)


def _show_config(path: Path | None = None):
    """Display current configuration."""
    from stdout_tree.config.settings import Settings

    console.print("\n[bold cyan]Current Configuration[/bold cyan]")

    if path:
        if not path.exists():
            console.print(f"[red]Config file not found: {path}[/red]")
            raise typer.Exit(1)

        with open(path) as f:
            content = f.read()

        syntax = Syntax(content, "yaml", theme="monokai", line_numbers=True)
        console.print(syntax)
        return

    settings = Settings.load()
    for key, value in settings.to_dict().items():
        shown = "auto" if value is None else value
        console.print(f"  [cyan]{key}[/cyan]: {shown}")


def _validate_config(path: Path | None = None):
    """Validate configuration file."""
    from stdout_tree.config.settings import Settings

    console.print("\n[bold cyan]Validating Configuration[/bold cyan]")

    if path is None:
        console.print("[red]Please specify config file path[/red]")
        raise typer.Exit(1)

    if not path.exists():
        console.print(f"[red]Config file not found: {path}[/red]")
        raise typer.Exit(1)

    try:
        settings = Settings.load(path)
    except Exception as e:
        console.print(f"[red]Configuration parsing failed: {e}[/red]")
        raise typer.Exit(1)

    errors = settings.validate()
    if errors:
        console.print("[red]Configuration validation failed:[/red]")
        for error in errors:
            console.print(f"  - {error}")
        raise typer.Exit(1)

    console.print("[green]Configuration validation passed![/green]")
