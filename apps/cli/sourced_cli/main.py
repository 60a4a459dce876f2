"""sourced CLI - Typer command-line interface for the shared process resources."""

from __future__ import annotations

import typer
from pydantic import ValidationError
from rich.console import Console

from apps.cli.sourced_cli.commands import describe_config_error
from sourced.common.logging import setup_logging
from sourced.core.container import get_container

app = typer.Typer(
    name="sourced",
    help="sourced - inspect and bootstrap the shared database and temporary filesystem",
    add_completion=False,
)
console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    log_level: str | None = typer.Option(
        None, "--log-level", help="Override LOG_LEVEL (DEBUG, INFO, WARNING, ERROR)"
    ),
) -> None:
    """Configure logging and release the container when the command ends."""
    try:
        setup_logging(log_level)
    except ValidationError as e:
        console.print(f"[red]❌ {describe_config_error(e)}[/red]")
        raise typer.Exit(1) from e
    ctx.call_on_close(lambda: get_container().close())


@app.command(name="config")
def show_config(
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """
    Show the effective configuration (secrets masked).

    Examples:
        sourced config
        TEMP_DIR=/var/tmp/sourced sourced config --json
    """
    from apps.cli.sourced_cli.commands.config import config_command

    config_command(as_json=as_json)


@app.command()
def check() -> None:
    """
    Open the default database and build the repository and mention stores.

    Examples:
        sourced check
    """
    from apps.cli.sourced_cli.commands.check import check_command

    check_command()


@app.command()
def tempdir() -> None:
    """
    Create this process's temporary directory and print its path.

    Examples:
        sourced tempdir
        TEMP_DIR=/tmp/sourced_test sourced tempdir
    """
    from apps.cli.sourced_cli.commands.tempdir import tempdir_command

    tempdir_command()


@app.command(name="init-schema")
def init_schema() -> None:
    """
    Create the repositories and mentions tables.

    Examples:
        sourced init-schema
    """
    from apps.cli.sourced_cli.commands.init_schema import init_schema_command

    init_schema_command()


if __name__ == "__main__":
    app()
