"""Entry point for running the database setup CLI.

This module defines a top-level Click group that aggregates the commands
defined in the ``pulsechain_db.interfaces.cli`` package. Executing
``python -m pulsechain_db.interfaces.cli`` invokes this group; the installed
``pulsechain-db`` console script points here too.
"""

import click

from pulsechain_db import __version__

from .provision import check, setup


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, prog_name="pulsechain-db")
def cli() -> None:
    """PulseChain Explorer database setup."""


cli.add_command(setup)
cli.add_command(check)


if __name__ == "__main__":
    cli()
