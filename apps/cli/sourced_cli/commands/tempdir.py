"""CLI tempdir command implementation."""

import typer
from rich.console import Console

from sourced.core.container import ContainerInitializationError, get_container

console = Console()


def tempdir_command() -> None:
    """Create the temporary filesystem and print its root directory."""
    try:
        fs = get_container().temporary_filesystem()
    except ContainerInitializationError as e:
        console.print(f"[red]❌ {e.slot} unavailable: {e}[/red]")
        raise typer.Exit(1) from e

    console.print(str(fs.root), highlight=False, soft_wrap=True)


__all__ = ["tempdir_command"]
