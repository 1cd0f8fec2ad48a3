"""CLI interface for article-api."""

import logging
from enum import Enum
from pathlib import Path
from typing import Any

import typer
import uvicorn
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from sqlalchemy.exc import SQLAlchemyError

from article_api import __version__
from article_api.api.main import create_app
from article_api.config import load_settings, merge_settings
from article_api.database.engine import DatabaseNotFoundError, open_database
from article_api.migrations.errors import MigrationError
from article_api.migrations.manager import MigrationManager, MigrationState, MigrationStatus
from article_api.models.pydantic_models import Settings

app = typer.Typer(
    name="article-api",
    help="Article CRUD service and schema migration runner",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)


class MigrateCommand(str, Enum):
    """Migration subcommands."""

    UP = "up"
    DOWN = "down"
    STATUS = "status"
    RESET = "reset"


def configure_logging(level: str) -> None:
    """Route all log records through a rich handler on stderr."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


def fail(message: str) -> typer.Exit:
    """Print an error to stderr and build the exit to raise."""
    err_console.print(f"[red]{escape(message)}[/red]", highlight=False)
    return typer.Exit(1)


def resolve_settings(config_path: Path | None, overrides: dict[str, Any]) -> Settings:
    """Load settings from file and environment, then apply CLI overrides."""
    try:
        return merge_settings(load_settings(config_path), overrides)
    except FileNotFoundError as e:
        raise fail(str(e)) from e
    except ValidationError as e:
        raise fail(f"Invalid configuration: {e}") from e


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"article-api version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Article CRUD service."""
    pass


@app.command()
def api(
    port: int | None = typer.Option(
        None,
        "--port",
        "-p",
        help="Port to run the server on (default 8080).",
    ),
    db_path: Path | None = typer.Option(
        None,
        "--db",
        "-d",
        help="Path to SQLite database file (default app.db).",
    ),
    host: str | None = typer.Option(
        None,
        "--host",
        help="Interface to bind to (default 0.0.0.0).",
    ),
    config_path: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML file with settings.",
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Logging level (default INFO).",
    ),
) -> None:
    """Start the API server."""
    settings = resolve_settings(
        config_path,
        {"port": port, "db_path": db_path, "host": host, "log_level": log_level},
    )
    configure_logging(settings.log_level)

    try:
        with open_database(settings.db_path) as engine:
            console.print(
                f"[bold blue]Starting server on http://localhost:{settings.port}[/bold blue]"
            )
            uvicorn.run(
                create_app(engine),
                host=settings.host,
                port=settings.port,
                log_level=settings.log_level.lower(),
            )
    except DatabaseNotFoundError as e:
        raise fail(str(e)) from e
    except SQLAlchemyError as e:
        raise fail(f"Failed to connect to database: {e}") from e


def print_status(statuses: list[MigrationStatus]) -> None:
    """Print migration status as a table."""
    table = Table(title="Migrations")
    table.add_column("Version", justify="right", style="cyan")
    table.add_column("Description")
    table.add_column("State")
    table.add_column("Applied At", style="dim")

    for status in statuses:
        state = (
            "[green]applied[/green]"
            if status.state is MigrationState.APPLIED
            else "[yellow]pending[/yellow]"
        )
        applied_at = status.applied_at.strftime("%Y-%m-%d %H:%M:%S") if status.applied_at else "-"
        table.add_row(str(status.version), status.description, state, applied_at)

    console.print(table)


@app.command()
def migrate(
    command: MigrateCommand = typer.Argument(
        ...,
        help="Migration command: up, down, status or reset.",
    ),
    db_path: Path | None = typer.Option(
        None,
        "--db",
        "-d",
        help="Path to SQLite database file (default app.db).",
    ),
    config_path: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML file with settings.",
    ),
) -> None:
    """Run database migrations."""
    settings = resolve_settings(config_path, {"db_path": db_path})
    configure_logging(settings.log_level)

    try:
        with MigrationManager(settings.db_path) as manager:
            if command is MigrateCommand.UP:
                applied = manager.up()
                if not applied:
                    console.print("[yellow]No pending migrations.[/yellow]")
            elif command is MigrateCommand.DOWN:
                reverted = manager.down()
                console.print(f"Rolled back migration {reverted.version}: {reverted.description}")
            elif command is MigrateCommand.STATUS:
                print_status(manager.status())
            else:
                manager.reset()
    except (MigrationError, SQLAlchemyError) as e:
        raise fail(f"command {command.value} failed: {e}") from e

    console.print(f"[green]Migration command completed: {command.value}[/green]")


if __name__ == "__main__":
    app()
