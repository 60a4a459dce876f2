"""CLI init-schema command implementation.

Creates the repositories and mentions tables on the default database. Safe to
run repeatedly.
"""

import psycopg2
import typer
from rich.console import Console

from sourced.common.db_schema import TABLES, create_schema
from sourced.common.logging import get_logger
from sourced.core.container import ContainerInitializationError, get_container

console = Console()
logger = get_logger(__name__)


def init_schema_command() -> None:
    """Create the store tables, exiting with code 1 on failure."""
    try:
        conn = get_container().database()
    except ContainerInitializationError as e:
        console.print(f"[red]❌ {e.slot} unavailable: {e}[/red]")
        raise typer.Exit(1) from e

    try:
        console.print("[yellow]Creating PostgreSQL schema...[/yellow]")
        create_schema(conn)
    except psycopg2.Error as e:
        console.print(f"[red]❌ Schema creation failed: {e}[/red]")
        raise typer.Exit(1) from e

    console.print(f"[green]✓ Tables ready: {', '.join(TABLES)}[/green]")


__all__ = ["init_schema_command"]
