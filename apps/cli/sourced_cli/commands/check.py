"""CLI check command implementation.

Initializes every database-backed slot of the container and reports the
result. Any failure stops the command with exit code 1.
"""

import typer
from pydantic import ValidationError
from rich.console import Console

from apps.cli.sourced_cli.commands import describe_config_error
from sourced.common.logging import get_logger
from sourced.core.container import ContainerInitializationError, get_container

console = Console()
logger = get_logger(__name__)


def check_command() -> None:
    """Open the default database and build both stores."""
    container = get_container()

    try:
        config = container.config
        console.print(
            f"[yellow]Connecting to {config.postgres_host}:{config.postgres_port}"
            f"/{config.postgres_db}...[/yellow]"
        )
        container.database()
        console.print("[green]✓ Database handle ready[/green]")

        repositories = container.repository_store().count()
        mentions = container.mention_store().count()
        console.print(f"[green]✓ Repository store ready ({repositories} repositories)[/green]")
        console.print(f"[green]✓ Mention store ready ({mentions} mentions)[/green]")
    except ValidationError as e:
        console.print(f"[red]❌ {describe_config_error(e)}[/red]")
        raise typer.Exit(1) from e
    except ContainerInitializationError as e:
        console.print(f"[red]❌ {e.slot} unavailable: {e}[/red]")
        raise typer.Exit(1) from e
    except Exception as e:
        console.print(f"[red]❌ Check failed: {e}[/red]")
        logger.exception("Check failed")
        raise typer.Exit(1) from e


__all__ = ["check_command"]
