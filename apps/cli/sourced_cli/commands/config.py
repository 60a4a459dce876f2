"""CLI config command implementation."""

import json

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from apps.cli.sourced_cli.commands import describe_config_error
from sourced.core.container import get_container

console = Console()


def config_command(as_json: bool = False) -> None:
    """Print the configuration the container resolves, with secrets masked.

    Args:
        as_json: Emit a JSON object instead of a table.
    """
    try:
        config = get_container().config
    except ValidationError as e:
        console.print(f"[red]❌ {describe_config_error(e)}[/red]")
        raise typer.Exit(1) from e

    values = config.model_dump(mode="json")

    if as_json:
        console.print_json(json.dumps(values))
        return

    table = Table(title="Effective Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    for key in sorted(values):
        table.add_row(key, str(values[key]))
    console.print(table)


__all__ = ["config_command"]
