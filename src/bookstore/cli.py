"""Command line entry points: run the server or prepare the database."""

import asyncio
from pathlib import Path

import typer
from dotenv import load_dotenv
from loguru import logger

from src.bookstore.api.utils.app_startup import configure_logging
from src.bookstore.core.errors import StorageUnavailable
from src.bookstore.core.services.database.db_session import DbSessionService
from src.bookstore.runtime.config.config_data import ConfigData
from src.bookstore.runtime.context import load_config, set_config
from src.bookstore.runtime.server import LifecycleController
from src.bookstore.runtime.settings import EnvironmentVariables

app = typer.Typer(
    help="Bookstore service",
    no_args_is_help=True,
    add_completion=False,
)


def _load(config_path: Path | None) -> ConfigData:
    load_dotenv()
    path = config_path or Path(EnvironmentVariables().config_path)
    if not path.exists():
        typer.echo(f"Configuration file not found: {path}", err=True)
        raise typer.Exit(code=1)

    try:
        config = load_config(path)
    except ValueError as e:
        typer.echo(f"Error loading config: {e}", err=True)
        raise typer.Exit(code=1) from e

    set_config(config)
    configure_logging(config)
    return config


@app.command(name="serve")
def serve(
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help="Configuration file path."
    ),
    bind: str | None = typer.Option(None, "--bind", "-b", help="IP address to bind"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port number to listen"),
) -> None:
    """Start the HTTP service and run until SIGINT/SIGTERM."""
    config = _load(config_path)
    if bind is not None:
        config.app.host = bind
    if port is not None:
        config.app.port = port

    controller = LifecycleController(config)
    try:
        asyncio.run(controller.run())
    except StorageUnavailable as e:
        logger.critical("Startup aborted: {}", e.detail or e.message)
        raise typer.Exit(code=1) from e


@app.command(name="init-db")
def init_db(
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help="Configuration file path."
    ),
) -> None:
    """Create the database tables and exit."""
    config = _load(config_path)
    database = DbSessionService(config)
    try:
        database.connect()
    except StorageUnavailable as e:
        logger.critical("Database initialization failed: {}", e.detail or e.message)
        raise typer.Exit(code=1) from e
    finally:
        database.close()
    typer.echo("Database initialized")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
