"""CLI commands that provision the explorer database.

``setup`` creates the database when it is missing and applies the bundled
schema file; ``check`` only reports whether the database exists. Both exit
with status 1 on any failure, after printing the error and logging the full
traceback to stderr.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click
from rich.console import Console

from pulsechain_db.infrastructure.console import (
    ICON_CREATE,
    ICON_FAIL,
    ICON_FILE,
    ICON_OK,
    build_console,
    print_banner,
    print_status,
)
from pulsechain_db.infrastructure.observability import (
    configure_logging,
    get_logger,
    log_exception,
)
from pulsechain_db.services.dto import EventPayload, EventPublisher
from pulsechain_db.services.provisioning import ProvisioningService

from .context import build_cli_context, connection_options

BANNER_TITLE = "Postgres - Database Setup"

_logger = get_logger(__name__)


def _status_printer(console: Console) -> EventPublisher:
    def publish(event: EventPayload) -> None:
        kind = event.get("type")
        database = event.get("database")
        if kind == "database_missing":
            print_status(console, ICON_CREATE, f'Database "{database}" does not exist. Creating...')
        elif kind == "database_created":
            print_status(console, ICON_OK, f'Database "{database}" created successfully!', "green")
        elif kind == "database_exists":
            print_status(console, ICON_OK, f'Database "{database}" already exists.', "green")
        elif kind == "schema_started":
            print_status(console, ICON_FILE, f"Running sql file: {Path(str(event['path'])).name}")
        elif kind == "schema_applied":
            print_status(console, ICON_OK, "SQL completed successfully!", "green")

    return publish


def _fail(ctx: click.Context, err_console: Console, label: str, exc: Exception) -> None:
    print_status(err_console, ICON_FAIL, f"{label}: {exc}", "bold red")
    log_exception(_logger, label, exc, step=getattr(exc, "step", "unknown"))
    ctx.exit(1)


@click.command(name="setup")
@connection_options
@click.option(
    "--schema",
    "schema_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="SQL file to apply (default: the bundled create.tables.sql).",
)
@click.option("--json-output", is_flag=True, help="Print the result as JSON instead of status lines.")
@click.option("--no-color", is_flag=True, help="Disable coloured output.")
@click.option("--verbose", "-v", is_flag=True, help="Log each step at DEBUG level.")
@click.pass_context
def setup(
    ctx: click.Context,
    env_file: Path | None,
    config_path: Path | None,
    db_name: str | None,
    host: str | None,
    port: int | None,
    user: str | None,
    schema_path: Path | None,
    json_output: bool,
    no_color: bool,
    verbose: bool,
) -> None:
    """Create the database if it is missing, then apply the schema file."""

    configure_logging(logging.DEBUG if verbose else logging.WARNING)
    console = build_console(no_color=no_color)
    err_console = build_console(no_color=no_color, stderr=True)
    if not json_output:
        print_banner(console, BANNER_TITLE)

    try:
        cli_context = build_cli_context(
            env_file=env_file,
            config_path=config_path,
            db_name=db_name,
            host=host,
            port=port,
            user=user,
        )
        service = ProvisioningService(
            cli_context.settings,
            schema_path=schema_path,
            client_factory=cli_context.client_factory,
            event_publisher=None if json_output else _status_printer(console),
        )
        result = service.run()
    except Exception as exc:
        _fail(ctx, err_console, "Setup failed", exc)
        return

    if json_output:
        click.echo(json.dumps(result.model_dump(mode="json"), indent=2))


@click.command(name="check")
@connection_options
@click.option("--json-output", is_flag=True, help="Print the status as JSON.")
@click.option("--no-color", is_flag=True, help="Disable coloured output.")
@click.pass_context
def check(
    ctx: click.Context,
    env_file: Path | None,
    config_path: Path | None,
    db_name: str | None,
    host: str | None,
    port: int | None,
    user: str | None,
    json_output: bool,
    no_color: bool,
) -> None:
    """Report whether the database exists. Exits 1 when it does not."""

    configure_logging()
    console = build_console(no_color=no_color)
    err_console = build_console(no_color=no_color, stderr=True)
    try:
        cli_context = build_cli_context(
            env_file=env_file,
            config_path=config_path,
            db_name=db_name,
            host=host,
            port=port,
            user=user,
        )
        status = ProvisioningService(
            cli_context.settings, client_factory=cli_context.client_factory
        ).check()
    except Exception as exc:
        _fail(ctx, err_console, "Check failed", exc)
        return

    if json_output:
        click.echo(json.dumps(status.model_dump(mode="json"), indent=2))
    elif status.exists:
        print_status(console, ICON_OK, f'Database "{status.database_name}" exists on {status.server}.', "green")
    else:
        print_status(console, ICON_FAIL, f'Database "{status.database_name}" does not exist on {status.server}.', "yellow")
    if not status.exists:
        ctx.exit(1)
