from __future__ import annotations

import logging
from enum import Enum
from importlib import metadata
from pathlib import Path

import click
import typer
import yaml
from dotenv import load_dotenv
from typer.core import TyperGroup

from timesince.commands.processor import Add, Command, ListEvents, Mark, Query, Remove, execute
from timesince.config.loader import CONFIG_ENV, DATA_FILE_ENV, load_settings
from timesince.config.model import APP_NAME, Settings
from timesince.errors import TimesinceError
from timesince.store.event_store import EventStore
from timesince.utils.dt import utc_now
from timesince.utils.log import configure_logging

# Pick up TIMESINCE_* overrides from a local .env if present
load_dotenv()


class EventGroup(TyperGroup):
    """Command group that treats an unknown first word as an event to query."""

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[str | None, click.Command | None, list[str]]:
        if args and args[0] not in self.commands and not args[0].startswith("-"):
            args = ["query", *args]
        return super().resolve_command(ctx, args)


class SortOrder(str, Enum):
    name = "name"
    recent = "recent"
    oldest = "oldest"


app = typer.Typer(
    cls=EventGroup,
    no_args_is_help=True,
    add_completion=False,
    help="Track how long it's been since you last did something.",
    epilog="Run 'timesince NAME' to see the time since NAME was last done.",
)

DATA_FILE_OPTION = typer.Option(
    None,
    "--data-file",
    dir_okay=False,
    help=f"Event file to use instead of the default (also ${DATA_FILE_ENV})",
)
CONFIG_OPTION = typer.Option(
    None,
    "--config",
    dir_okay=False,
    help=f"YAML settings file (also ${CONFIG_ENV})",
)
NAME_ARGUMENT = typer.Argument(..., help="The name of the event")


def _package_version() -> str:
    try:
        return metadata.version(APP_NAME)
    except metadata.PackageNotFoundError:  # pragma: no cover - source checkout
        return "0+unknown"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"{APP_NAME} {_package_version()}")
        raise typer.Exit()


def _configure_logger(settings: Settings) -> logging.Logger:
    try:
        return configure_logging(settings.log_file, level=settings.log_level)
    except OSError as exc:
        typer.secho(
            f"Warning: logging disabled, cannot open {settings.log_file}: {exc}",
            err=True,
            fg=typer.colors.YELLOW,
        )
        logger = logging.getLogger(APP_NAME)
        for handler in logger.handlers:
            handler.close()
        logger.handlers = [logging.NullHandler()]
        logger.propagate = False
        return logger


def _run(ctx: typer.Context, command: Command) -> None:
    settings: Settings = ctx.obj
    logger = _configure_logger(settings)
    store = EventStore(settings.data_file, clock=utc_now)
    logger.info("Running %r against %s", command, settings.data_file)
    try:
        output = execute(store, command)
    except TimesinceError as exc:
        logger.error("%s failed: %s", type(command).__name__, exc.message)
        typer.secho(f"Error: {exc.message}", err=True, fg=typer.colors.RED)
        raise typer.Exit(code=exc.exit_code) from exc
    typer.echo(output)


@app.callback()
def main(
    ctx: typer.Context,
    data_file: Path | None = DATA_FILE_OPTION,
    config: Path | None = CONFIG_OPTION,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """Record events like 'workout' or 'meditate' and check how long it's been since you did them."""
    try:
        ctx.obj = load_settings(config, data_file=data_file)
    except (OSError, TypeError, ValueError, yaml.YAMLError) as exc:
        raise typer.BadParameter(str(exc), param_hint="--config") from exc


@app.command()
def add(ctx: typer.Context, name: str = NAME_ARGUMENT) -> None:
    """Add a new event and set its timestamp to now."""
    _run(ctx, Add(name))


@app.command()
def did(ctx: typer.Context, name: str = NAME_ARGUMENT) -> None:
    """Mark an existing event as done now."""
    _run(ctx, Mark(name))


app.command(name="mark", help="Same as 'did'.")(did)


@app.command()
def query(ctx: typer.Context, name: str = NAME_ARGUMENT) -> None:
    """Show how long it's been since an event was last done."""
    _run(ctx, Query(name))


@app.command(name="list")
def list_events(
    ctx: typer.Context,
    sort: SortOrder | None = typer.Option(
        None, "--sort", case_sensitive=False, help="Order by name, most recent or oldest"
    ),
) -> None:
    """List all events with the time since each was last done."""
    settings: Settings = ctx.obj
    order = sort.value if sort is not None else settings.list_order
    _run(ctx, ListEvents(order))


@app.command()
def remove(ctx: typer.Context, name: str = NAME_ARGUMENT) -> None:
    """Remove an event."""
    _run(ctx, Remove(name))


if __name__ == "__main__":  # pragma: no cover - manual entry point
    app()
