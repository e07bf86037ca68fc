"""Shared helpers for composing CLI command contexts.

This module centralises the CLI wiring: loading ``.env`` and ``config.json``,
applying command-line overrides and choosing the database client factory.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, TypeVar

import click

from pulsechain_db.infrastructure.db import (
    DatabaseSettings,
    get_client,
    load_env_file,
    load_settings,
)
from pulsechain_db.services.provisioning import ClientFactory

F = TypeVar("F", bound=Callable[..., object])


@dataclass(frozen=True)
class CLIContext:
    """Container for the resolved settings and the client factory."""

    settings: DatabaseSettings
    client_factory: ClientFactory


def build_cli_context(
    *,
    env_file: str | Path | None = None,
    config_path: str | Path | None = None,
    db_name: str | None = None,
    host: str | None = None,
    port: int | None = None,
    user: str | None = None,
) -> CLIContext:
    """Resolve settings once for this process and pick the client factory."""

    load_env_file(env_file)
    settings = load_settings(config_path).with_overrides(
        database=db_name, host=host, port=port, user=user
    )
    return CLIContext(settings=settings, client_factory=get_client)


def connection_options(func: F) -> F:
    """Attach the options every database command accepts."""

    options = [
        click.option(
            "--env-file",
            type=click.Path(dir_okay=False, path_type=Path),
            default=None,
            help="Load variables from this .env file (default: nearest .env).",
        ),
        click.option(
            "--config",
            "config_path",
            type=click.Path(dir_okay=False, path_type=Path),
            default=None,
            help="Path to config.json with a 'db' section.",
        ),
        click.option(
            "--db-name",
            default=None,
            help="Database to provision (default: $DB_NAME or pulsechain_explorer).",
        ),
        click.option("--host", default=None, help="Database server host ($DB_HOST)."),
        click.option("--port", type=int, default=None, help="Database server port ($DB_PORT)."),
        click.option("--user", default=None, help="Database user ($DB_USER)."),
    ]
    for option in reversed(options):
        func = option(func)
    return func
